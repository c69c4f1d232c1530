"""Currency query selector: a client's rate table rows."""

from sqlalchemy import select

from ledger_kernel.domain.records import CurrencyRate
from ledger_kernel.models.currency import CurrencyRateModel
from ledger_kernel.selectors.base import BaseSelector


class CurrencySelector(BaseSelector[CurrencyRateModel]):
    """Selector for currency rates.  Base currency first, then by code."""

    def rates(self) -> list[CurrencyRate]:
        stmt = (
            select(CurrencyRateModel)
            .where(CurrencyRateModel.client_id == self.client_id)
            .order_by(CurrencyRateModel.is_base.desc(), CurrencyRateModel.code)
        )
        return [
            CurrencyRate(
                code=row.code,
                symbol=row.symbol,
                exchange_rate_to_base=row.exchange_rate_to_base,
                is_base=row.is_base,
                name=row.name,
            )
            for row in self.session.scalars(stmt)
        ]
