"""
CurrencyService -- conversion and display over a client's rate table.

Architecture: ledger_services -- imperative shell.
    Loads the rate table through CurrencySelector (validated on load) and
    delegates to CurrencyConverter with the configured display options.
"""

from __future__ import annotations

from decimal import Decimal
from uuid import UUID

from sqlalchemy.orm import Session

from ledger_config import LedgerConfig, get_active_config
from ledger_engines.currency import CurrencyConverter, RateTable
from ledger_kernel.domain.values import Money
from ledger_kernel.logging_config import get_logger
from ledger_kernel.selectors.currency_selector import CurrencySelector

logger = get_logger("services.currency")


class CurrencyService:
    """Multi-currency conversion for one client.

    The rate table is read once, on first use, and kept for the lifetime
    of the service.
    """

    def __init__(
        self,
        session: Session,
        client_id: UUID,
        config: LedgerConfig | None = None,
    ) -> None:
        self._config = config or get_active_config()
        self._selector = CurrencySelector(session, client_id)
        self._rate_table: RateTable | None = None
        self._converter = CurrencyConverter(
            use_iso_minor_units=self._config.currency.use_iso_minor_units,
            default_symbol=self._config.currency.default_symbol,
        )

    def rate_table(self) -> RateTable:
        """
        Raises:
            RateTableError: the stored rates violate the rate table rules.
        """
        if self._rate_table is None:
            self._rate_table = RateTable(self._selector.rates())
            logger.info(
                "rate_table_loaded",
                extra={
                    "base_currency": self._rate_table.base_code,
                    "currency_count": len(self._rate_table),
                },
            )
        return self._rate_table

    def convert(self, amount: Decimal, from_code: str, to_code: str) -> Decimal:
        return self._converter.convert(amount, from_code, to_code, self.rate_table())

    def convert_money(self, money: Money, to_code: str) -> Money:
        return self._converter.convert_money(money, to_code, self.rate_table())

    def format(self, amount: Decimal, currency: str) -> str:
        return self._converter.format(amount, currency, self.rate_table())
