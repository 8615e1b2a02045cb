"""Domain value objects - pure Python immutable types."""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")


def round_money(value) -> Decimal:
    """Round a monetary amount half-up to two decimal places."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class Money:
    """
    Immutable monetary value with currency.

    CRITICAL: Always use Decimal, never float!
    """
    amount: Decimal
    currency: str = "USD"

    def __post_init__(self):
        object.__setattr__(self, 'amount', round_money(self.amount))

        if not isinstance(self.currency, str) or len(self.currency) != 3:
            raise ValueError(
                f"Currency must be 3-letter ISO code, got: {self.currency}"
            )
        object.__setattr__(self, 'currency', self.currency.upper())

    def __str__(self) -> str:
        return f"{self.amount} {self.currency}"

    def __add__(self, other: 'Money') -> 'Money':
        """Add two Money objects (must have same currency)."""
        if self.currency != other.currency:
            raise ValueError(
                f"Cannot add different currencies: {self.currency} vs {other.currency}"
            )
        return Money(amount=self.amount + other.amount, currency=self.currency)

    def to_minor_units(self) -> int:
        """Amount in the smallest currency unit (cents), as providers expect."""
        return int((self.amount * 100).to_integral_value(rounding=ROUND_HALF_UP))
