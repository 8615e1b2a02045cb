"""RMA number value object."""
import secrets
import string
from dataclasses import dataclass
from datetime import datetime

_ALPHABET = string.digits + string.ascii_lowercase


def _base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, rem = divmod(number, 36)
        digits.append(_ALPHABET[rem])
    return "".join(reversed(digits))


@dataclass(frozen=True)
class RmaNumber:
    """
    Return Merchandise Authorization code.

    Format: RMA-<base36 epoch millis>-<4 random base36 chars>, upper-cased.
    """
    value: str

    def __post_init__(self):
        if not self.value or not self.value.startswith("RMA-"):
            raise ValueError(f"Invalid RMA number: {self.value!r}")

    @classmethod
    def generate(cls, now: datetime) -> "RmaNumber":
        millis = int(now.timestamp() * 1000)
        suffix = "".join(secrets.choice(_ALPHABET) for _ in range(4))
        return cls(f"RMA-{_base36(millis)}-{suffix}".upper())

    def __str__(self) -> str:
        return self.value
