"""
Module: ledger_kernel.models.currency
Responsibility: ORM persistence for a client's currency rate table.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - One row per (client, code).
    - Single base currency and positive rates are validated when the table
      is loaded into a RateTable, not at write time.
"""

from decimal import Decimal

from sqlalchemy import Boolean, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from ledger_kernel.db.base import TenantBase


class CurrencyRateModel(TenantBase):
    """Rate of one currency against the client's base currency."""

    __tablename__ = "currency_rates"

    __table_args__ = (
        UniqueConstraint("client_id", "code", name="uq_currency_rate_client_code"),
    )

    code: Mapped[str] = mapped_column(String(3), nullable=False)
    name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    symbol: Mapped[str] = mapped_column(String(10), nullable=False)
    exchange_rate_to_base: Mapped[Decimal] = mapped_column(nullable=False)
    is_base: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    def __repr__(self) -> str:
        return f"<CurrencyRate {self.code}: {self.exchange_rate_to_base}>"
