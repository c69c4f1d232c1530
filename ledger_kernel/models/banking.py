"""
Module: ledger_kernel.models.banking
Responsibility: ORM persistence for bank accounts and the transactions shown
    on the reconciliation screen.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - bank_amount and book_amount are stored independently.
    - matched is written only by the reconciliation service on an explicit
      operator toggle.
"""

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Boolean, Date, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ledger_kernel.db.base import TenantBase, UUIDString


class BankAccountModel(TenantBase):
    """A client bank account."""

    __tablename__ = "bank_accounts"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    account_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")
    statement_balance: Mapped[Decimal | None] = mapped_column(nullable=True)

    transactions: Mapped[list["BankTransactionModel"]] = relationship(
        back_populates="bank_account",
        order_by="BankTransactionModel.position",
    )


class BankTransactionModel(TenantBase):
    """One bank/book line of a bank account."""

    __tablename__ = "bank_transactions"

    __table_args__ = (
        Index("idx_bank_txn_account_position", "bank_account_id", "position"),
    )

    bank_account_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("bank_accounts.id"),
        nullable=False,
    )
    # Display order on the reconciliation screen
    position: Mapped[int] = mapped_column(nullable=False, default=0)
    transaction_date: Mapped[date] = mapped_column(Date, nullable=False)
    description: Mapped[str] = mapped_column(String(500), nullable=False)
    reference: Mapped[str | None] = mapped_column(String(100), nullable=True)
    bank_amount: Mapped[Decimal] = mapped_column(nullable=False)
    book_amount: Mapped[Decimal] = mapped_column(nullable=False)
    matched: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    bank_account: Mapped[BankAccountModel] = relationship(back_populates="transactions")
