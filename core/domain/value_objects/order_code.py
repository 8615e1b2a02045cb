"""Order code value object."""
import re
from dataclasses import dataclass

_ORDER_CODE_RE = re.compile(r"^ORD-(\d{4})-(\d{4,})$")


@dataclass(frozen=True)
class OrderCode:
    """
    Human-readable sequential order identifier.

    Format: ORD-<4-digit year>-<sequence zero-padded to 4 digits>
    Examples:
    - ORD-2026-0001
    - ORD-2026-0420
    - ORD-2027-12345 (padding is a minimum, not a cap)
    """
    value: str

    def __post_init__(self):
        if not self.value:
            raise ValueError("Order code cannot be empty")
        if not _ORDER_CODE_RE.match(self.value):
            raise ValueError(
                f"Invalid order code format (expected ORD-YYYY-NNNN): {self.value}"
            )

    @classmethod
    def build(cls, year: int, sequence: int) -> "OrderCode":
        """Format a code from a calendar year and a 1-based sequence number."""
        if sequence < 1:
            raise ValueError(f"Order sequence must be positive, got {sequence}")
        return cls(f"ORD-{year:04d}-{sequence:04d}")

    @property
    def year(self) -> int:
        return int(_ORDER_CODE_RE.match(self.value).group(1))

    @property
    def sequence(self) -> int:
        return int(_ORDER_CODE_RE.match(self.value).group(2))

    def __str__(self) -> str:
        return self.value
