"""
Module: ledger_kernel.models.customers
Responsibility: ORM persistence for customers and their invoices -- the
    inputs of the credit evaluation and the receivables aging.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - customer_code is unique per client (uq_customer_client_code).
    - invoice_number is unique per client (uq_invoice_client_number).
    - Amounts are Numeric(38, 9); the open balance is total_amount minus
      amount_paid and is never stored.

Failure modes:
    - IntegrityError on duplicate codes or numbers.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from uuid import UUID

from sqlalchemy import Date, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ledger_kernel.db.base import TenantBase, UUIDString


class CustomerStatus(str, Enum):
    """Customer lifecycle status.  SUSPENDED customers need follow-up."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


class InvoiceStatus(str, Enum):
    """Invoice lifecycle status.  Only SENT, PARTIAL and OVERDUE are open."""

    DRAFT = "draft"
    SENT = "sent"
    PARTIAL = "partial"
    OVERDUE = "overdue"
    PAID = "paid"
    VOID = "void"


OPEN_INVOICE_STATUSES = (
    InvoiceStatus.SENT.value,
    InvoiceStatus.PARTIAL.value,
    InvoiceStatus.OVERDUE.value,
)


class CustomerModel(TenantBase):
    """A customer of the client, with its credit settings."""

    __tablename__ = "customers"

    __table_args__ = (
        UniqueConstraint("client_id", "customer_code", name="uq_customer_client_code"),
        Index("idx_customer_status", "client_id", "status"),
    )

    customer_code: Mapped[str] = mapped_column(String(50), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=CustomerStatus.ACTIVE.value,
    )

    credit_limit: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    current_balance: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    payment_terms_days: Mapped[int | None] = mapped_column(nullable=True)

    invoices: Mapped[list["InvoiceModel"]] = relationship(back_populates="customer")

    def __repr__(self) -> str:
        return f"<Customer {self.customer_code}: {self.name}>"


class InvoiceModel(TenantBase):
    """A sales invoice.  due_date may be missing on imported data."""

    __tablename__ = "invoices"

    __table_args__ = (
        UniqueConstraint("client_id", "invoice_number", name="uq_invoice_client_number"),
        Index("idx_invoice_customer", "customer_id"),
        Index("idx_invoice_status", "client_id", "status"),
    )

    invoice_number: Mapped[str] = mapped_column(String(50), nullable=False)
    customer_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("customers.id"),
        nullable=False,
    )
    issue_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    due_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    total_amount: Mapped[Decimal] = mapped_column(nullable=False)
    amount_paid: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=InvoiceStatus.SENT.value,
    )

    customer: Mapped[CustomerModel] = relationship(back_populates="invoices")

    @property
    def balance_due(self) -> Decimal:
        return self.total_amount - (self.amount_paid or Decimal("0"))

    def __repr__(self) -> str:
        return f"<Invoice {self.invoice_number}: {self.balance_due} {self.currency}>"
