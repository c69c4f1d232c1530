"""
Values -- Immutable, self-validating monetary value object.

Responsibility:
    Provides ``Money``: a Decimal amount paired with a three-letter currency
    code.  Engines that hand amounts across a currency boundary (the
    currency converter) return Money so the two are never separated.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - amount is always a Decimal (floats are converted through ``str`` so
      binary noise never leaks in)
    - currency is an upper-case three-letter code
    - arithmetic never mixes currencies

Failure modes:
    - ValueError on invalid amounts or currency codes
    - ValueError when arithmetic or comparison mixes currencies
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from ledger_kernel.domain.currency import CurrencyRegistry


def normalize_currency_code(code: str) -> str:
    """Upper-case and strip a currency code, rejecting malformed ones."""
    normalized = code.upper().strip() if isinstance(code, str) else ""
    if len(normalized) != 3 or not normalized.isalpha():
        raise ValueError(f"Invalid currency code: {code!r}")
    return normalized


def to_decimal(value: Decimal | int | float | str, field: str = "amount") -> Decimal:
    """Coerce a numeric input to Decimal without float artifacts."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Invalid {field}: {value!r}")
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise ValueError(f"Invalid {field}: {value!r}") from e


@dataclass(frozen=True, slots=True)
class Money:
    """
    Monetary amount value object.

    Contract:
        Pairs a Decimal amount with its currency code -- they are never
        separated.  Does not auto-round; callers call ``round()``.
    """

    amount: Decimal
    currency: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", to_decimal(self.amount))
        object.__setattr__(self, "currency", normalize_currency_code(self.currency))

    @classmethod
    def of(cls, amount: Decimal | str | int, currency: str) -> Money:
        return cls(amount=to_decimal(amount), currency=currency)

    @classmethod
    def zero(cls, currency: str) -> Money:
        return cls(amount=Decimal("0"), currency=currency)

    @property
    def is_zero(self) -> bool:
        return self.amount == Decimal("0")

    @property
    def is_negative(self) -> bool:
        return self.amount < Decimal("0")

    def round(self, decimal_places: int | None = None, rounding: str = ROUND_HALF_UP) -> Money:
        """Round to ``decimal_places`` (ISO minor units when omitted)."""
        if decimal_places is None:
            decimal_places = CurrencyRegistry.get_decimal_places(self.currency)
        quantum = Decimal(1).scaleb(-decimal_places)
        return Money(amount=self.amount.quantize(quantum, rounding=rounding), currency=self.currency)

    def _check_currency(self, other: Money, op: str) -> None:
        if self.currency != other.currency:
            raise ValueError(
                f"Cannot {op} Money with different currencies: "
                f"{self.currency} and {other.currency}"
            )

    def __add__(self, other: Money) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        self._check_currency(other, "add")
        return Money(amount=self.amount + other.amount, currency=self.currency)

    def __sub__(self, other: Money) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        self._check_currency(other, "subtract")
        return Money(amount=self.amount - other.amount, currency=self.currency)

    def __neg__(self) -> Money:
        return Money(amount=-self.amount, currency=self.currency)

    def __lt__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        self._check_currency(other, "compare")
        return self.amount < other.amount

    def __le__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        self._check_currency(other, "compare")
        return self.amount <= other.amount

    def __str__(self) -> str:
        return f"{self.amount} {self.currency}"

    def __repr__(self) -> str:
        return f"Money({self.amount!r}, {self.currency!r})"
