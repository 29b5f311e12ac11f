"""
Money value object.

Amounts are held as integer minor units (e.g. cents, sen) tagged with a
3-letter currency code. Every operation returns a new instance; scaling
rounds half-up to the minor unit so results are reproducible.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from .exceptions import CurrencyMismatchError, InvalidMoneyError

DEFAULT_CURRENCY = "IDR"

_HUNDRED = Decimal(100)


def round_half_up(value: Decimal) -> int:
    """Round a decimal amount of minor units to a whole minor unit, half-up."""
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class Money:
    """
    Immutable, currency-tagged amount in integer minor units.

    Attributes:
        amount: Amount in minor units, never negative
        currency: ISO-style 3-letter currency code
    """

    amount: int
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self):
        if isinstance(self.amount, bool) or not isinstance(self.amount, int):
            raise InvalidMoneyError(
                "Money amount must be an integer number of minor units", self.amount
            )
        if self.amount < 0:
            raise InvalidMoneyError("Money amount cannot be negative", self.amount)
        if not isinstance(self.currency, str) or len(self.currency) != 3:
            raise InvalidMoneyError(
                f"Currency must be a 3-letter code, got: {self.currency!r}"
            )

    @classmethod
    def zero(cls, currency: str = DEFAULT_CURRENCY) -> "Money":
        return cls(0, currency)

    @classmethod
    def of(cls, amount: int | Decimal | str, currency: str = DEFAULT_CURRENCY) -> "Money":
        """Build Money from a possibly fractional minor-unit amount, rounding half-up."""
        return cls(round_half_up(Decimal(str(amount))), currency)

    def _check_currency(self, other: "Money") -> None:
        if self.currency != other.currency:
            raise CurrencyMismatchError(self.currency, other.currency)

    def add(self, other: "Money") -> "Money":
        self._check_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def subtract(self, other: "Money") -> "Money":
        """Subtract, raising InvalidMoneyError if the result would be negative."""
        self._check_currency(other)
        return Money(self.amount - other.amount, self.currency)

    def subtract_floored(self, other: "Money") -> "Money":
        """Subtract, clamping the result at zero."""
        self._check_currency(other)
        return Money(max(0, self.amount - other.amount), self.currency)

    def multiply(self, factor: int | Decimal | str) -> "Money":
        """
        Scale by a non-negative factor, rounding half-up to the minor unit.

        Floats are rejected; pass a Decimal or a string such as "0.1".
        """
        if isinstance(factor, float):
            raise TypeError("Money cannot be scaled by a float; use Decimal")
        scaled = Decimal(self.amount) * Decimal(str(factor))
        return Money(round_half_up(scaled), self.currency)

    def percentage(self, percent: int | Decimal | str) -> "Money":
        """Return ``percent`` percent of this amount, rounded half-up."""
        if isinstance(percent, float):
            raise TypeError("Money percentage must be given as Decimal, not float")
        scaled = Decimal(self.amount) * Decimal(str(percent)) / _HUNDRED
        return Money(round_half_up(scaled), self.currency)

    def min(self, other: "Money") -> "Money":
        self._check_currency(other)
        return self if self.amount <= other.amount else other

    def equals(self, other: "Money") -> bool:
        return self.amount == other.amount and self.currency == other.currency

    def is_greater_than(self, other: "Money") -> bool:
        self._check_currency(other)
        return self.amount > other.amount

    def is_less_than(self, other: "Money") -> bool:
        self._check_currency(other)
        return self.amount < other.amount

    def is_zero(self) -> bool:
        return self.amount == 0

    def __add__(self, other: "Money") -> "Money":
        return self.add(other)

    def __sub__(self, other: "Money") -> "Money":
        return self.subtract(other)

    def __lt__(self, other: "Money") -> bool:
        return self.is_less_than(other)

    def __le__(self, other: "Money") -> bool:
        self._check_currency(other)
        return self.amount <= other.amount

    def __gt__(self, other: "Money") -> bool:
        return self.is_greater_than(other)

    def __ge__(self, other: "Money") -> bool:
        self._check_currency(other)
        return self.amount >= other.amount

    def __str__(self) -> str:
        return f"{self.amount} {self.currency}"
