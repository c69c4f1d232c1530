"""
Module: ledger_engines.currency
Responsibility:
    Convert amounts between currencies through a rate table quoted against a
    single base currency, and format amounts for display as
    ``{symbol}{grouped amount} {code}``.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - A RateTable has exactly one base currency, whose rate is exactly 1,
      and every rate is strictly positive.  Checked on construction.
    - convert(a, X, X) == a, and conversion is never rounded; rounding is
      a formatting concern.
    - Formatting uses "," for thousands and "." for decimals, two fraction
      digits unless ISO minor units are requested, ROUND_HALF_UP, and the
      minus sign ahead of the symbol.

Failure modes:
    - RateTableError subclasses for structurally invalid tables.
    - InvalidCurrencyError for a code absent from the rate table.
    - InvalidExchangeRateError for non-positive or non-numeric rates.

Usage:
    table = RateTable([
        CurrencyRate("USD", "$", Decimal("1"), is_base=True),
        CurrencyRate("EUR", "€", Decimal("0.9236")),
    ])
    converter = CurrencyConverter(table)
    converter.convert(Decimal("100"), "USD", "EUR")   # Decimal("92.36")
    converter.format(Decimal("1234.56"), "USD")       # "$1,234.56 USD"
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Iterable

from ledger_kernel.domain.currency import CurrencyRegistry
from ledger_kernel.domain.records import CurrencyRate
from ledger_kernel.domain.values import Money, to_decimal
from ledger_kernel.exceptions import (
    DuplicateCurrencyError,
    EmptyRateTableError,
    InvalidBaseRateError,
    InvalidCurrencyError,
    InvalidExchangeRateError,
    MissingBaseCurrencyError,
    MultipleBaseCurrenciesError,
)
from ledger_kernel.logging_config import get_logger
from ledger_engines.tracer import traced_engine

logger = get_logger("engines.currency")

DISPLAY_DECIMAL_PLACES = 2


class RateTable:
    """
    Validated, read-only set of currency rates.

    Contract:
        Rates are "units of this currency per one unit of base".  Lookups
        are case-insensitive.
    """

    def __init__(self, rates: Iterable[CurrencyRate]):
        rates = tuple(rates)
        if not rates:
            raise EmptyRateTableError()

        by_code: dict[str, CurrencyRate] = {}
        for rate in rates:
            if rate.code in by_code:
                raise DuplicateCurrencyError(rate.code)
            if not rate.exchange_rate_to_base.is_finite() or rate.exchange_rate_to_base <= 0:
                raise InvalidExchangeRateError(rate.code, rate.exchange_rate_to_base)
            by_code[rate.code] = rate

        bases = tuple(r.code for r in rates if r.is_base)
        if not bases:
            raise MissingBaseCurrencyError(tuple(by_code))
        if len(bases) > 1:
            raise MultipleBaseCurrenciesError(bases)
        base = by_code[bases[0]]
        if base.exchange_rate_to_base != Decimal("1"):
            raise InvalidBaseRateError(base.code, base.exchange_rate_to_base)

        self._rates = by_code
        self._base = base

    @property
    def base(self) -> CurrencyRate:
        return self._base

    @property
    def base_code(self) -> str:
        return self._base.code

    @property
    def codes(self) -> tuple[str, ...]:
        return tuple(self._rates)

    def __contains__(self, code: object) -> bool:
        return isinstance(code, str) and code.upper().strip() in self._rates

    def __len__(self) -> int:
        return len(self._rates)

    def __iter__(self):
        return iter(self._rates.values())

    def get(self, code: str) -> CurrencyRate:
        """
        Raises:
            InvalidCurrencyError: code is not in the table.
        """
        key = code.upper().strip() if isinstance(code, str) else code
        rate = self._rates.get(key)
        if rate is None:
            raise InvalidCurrencyError(code)
        return rate

    def rate(self, code: str) -> Decimal:
        return self.get(code).exchange_rate_to_base

    def symbol(self, code: str) -> str:
        return self.get(code).symbol

    def to_rows(self) -> list[dict[str, object]]:
        return [
            {
                "code": r.code,
                "name": r.name or "",
                "symbol": r.symbol,
                "exchange_rate_to_base": r.exchange_rate_to_base,
                "is_base": r.is_base,
            }
            for r in self._rates.values()
        ]


class CurrencyConverter:
    """
    Currency conversion and display engine.

    Contract:
        ``rate_table`` given to a method overrides the one given to the
        constructor; one of the two must be present.
    """

    def __init__(
        self,
        rate_table: RateTable | None = None,
        use_iso_minor_units: bool = False,
        default_symbol: str = "$",
    ):
        self.rate_table = rate_table
        self.use_iso_minor_units = use_iso_minor_units
        self.default_symbol = default_symbol

    def _table(self, rate_table: RateTable | None) -> RateTable:
        table = rate_table if rate_table is not None else self.rate_table
        if table is None:
            raise ValueError("No rate table supplied to CurrencyConverter")
        return table

    @traced_engine(
        "currency_convert",
        "1.0",
        fingerprint_fields=("amount", "from_code", "to_code"),
    )
    def convert(
        self,
        amount: Decimal,
        from_code: str,
        to_code: str,
        rate_table: RateTable | None = None,
    ) -> Decimal:
        """
        ``amount / rate(from) * rate(to)``, unrounded.

        Raises:
            InvalidCurrencyError: either code is not in the rate table.
        """
        table = self._table(rate_table)
        amount = to_decimal(amount)
        from_rate = table.rate(from_code)
        to_rate = table.rate(to_code)
        if table.get(from_code).code == table.get(to_code).code:
            return amount
        return amount / from_rate * to_rate

    def cross_rate(
        self,
        from_code: str,
        to_code: str,
        rate_table: RateTable | None = None,
    ) -> Decimal:
        """Units of ``to_code`` per one unit of ``from_code``."""
        table = self._table(rate_table)
        return table.rate(to_code) / table.rate(from_code)

    def convert_money(
        self,
        money: Money,
        to_code: str,
        rate_table: RateTable | None = None,
    ) -> Money:
        converted = self.convert(money.amount, money.currency, to_code, rate_table)
        return Money(amount=converted, currency=to_code)

    def decimal_places(self, currency: str) -> int:
        if self.use_iso_minor_units:
            return CurrencyRegistry.get_decimal_places(currency)
        return DISPLAY_DECIMAL_PLACES

    def format(
        self,
        amount: Decimal,
        currency: str,
        rate_table: RateTable | None = None,
    ) -> str:
        """
        Display string such as ``"$1,234.56 USD"`` or ``"-$350.25 USD"``.

        Raises:
            InvalidCurrencyError: currency is not in the rate table.
        """
        rate = self._table(rate_table).get(currency)
        places = self.decimal_places(rate.code)
        quantum = Decimal(1).scaleb(-places)
        value = to_decimal(amount)
        with localcontext() as ctx:
            ctx.prec = max(ctx.prec, value.adjusted() + places + 2)
            rounded = value.quantize(quantum, rounding=ROUND_HALF_UP)

        sign = "-" if rounded < 0 else ""
        symbol = rate.symbol or self.default_symbol
        return f"{sign}{symbol}{rounded.copy_abs():,.{places}f} {rate.code}"
