"""
Records -- Typed value objects for the bookkeeping entities the engines read.

Responsibility:
    Explicit, immutable shapes for invoices, customer credit profiles,
    reconciliation transactions, inventory items, stock records and
    currency rates.  Selectors build these from ORM rows; tests and callers
    build them directly.

Architecture position:
    Kernel > Domain -- pure, zero I/O.  Imported by engines, selectors and
    services.

Invariants enforced:
    - Numeric fields are Decimal (ints, strings and floats are converted on
      construction).
    - Records are never mutated; engines return new records.

Non-goals:
    - Business-rule validation (negative amounts, missing due dates) is the
      engines' job so that every issue can be reported together.
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from decimal import Decimal
from typing import Any
from uuid import UUID

from ledger_kernel.domain.values import to_decimal

RecordId = str | int | UUID


def _coerce(record: Any, *names: str) -> None:
    for name in names:
        value = getattr(record, name)
        if value is not None:
            object.__setattr__(record, name, to_decimal(value, field=name))


@dataclass(frozen=True)
class InvoiceBalance:
    """Open balance of one invoice, as read by the aging calculation."""

    customer_id: RecordId
    amount: Decimal
    due_date: dt.date | None
    issue_date: dt.date | None = None
    invoice_id: RecordId | None = None
    customer_name: str | None = None
    currency: str = "USD"

    def __post_init__(self) -> None:
        _coerce(self, "amount")

    @property
    def record_id(self) -> str:
        return str(self.invoice_id if self.invoice_id is not None else self.customer_id)


@dataclass(frozen=True)
class CustomerCreditProfile:
    """Credit limit and outstanding balance of one customer."""

    customer_id: RecordId
    credit_limit: Decimal
    current_balance: Decimal
    name: str = ""
    status: str = "active"  # "active" | "inactive" | "suspended"
    payment_terms_days: int | None = None

    def __post_init__(self) -> None:
        _coerce(self, "credit_limit", "current_balance")


@dataclass(frozen=True)
class ReconciliationTransaction:
    """One line of the bank-vs-book reconciliation screen.

    ``matched`` is set only by an operator; ``bank_amount`` and
    ``book_amount`` are independent and are never forced equal.
    """

    id: RecordId
    date: dt.date
    description: str
    bank_amount: Decimal
    book_amount: Decimal
    matched: bool = False
    reference: str | None = None

    def __post_init__(self) -> None:
        _coerce(self, "bank_amount", "book_amount")


@dataclass(frozen=True)
class InventoryItem:
    """Catalogue entry with its replenishment settings."""

    item_id: RecordId
    name: str
    reorder_level: Decimal
    reorder_quantity: Decimal | None = None
    item_code: str | None = None
    cost_price: Decimal | None = None
    unit_of_measure: str = "each"

    def __post_init__(self) -> None:
        _coerce(self, "reorder_level", "reorder_quantity", "cost_price")

    @property
    def is_tracked(self) -> bool:
        """Items without a positive reorder level are not replenished."""
        return self.reorder_level > 0


@dataclass(frozen=True)
class StockRecord:
    """Quantity of one item held at one location."""

    item_id: RecordId
    location_id: RecordId
    quantity_on_hand: Decimal
    quantity_reserved: Decimal = Decimal("0")

    def __post_init__(self) -> None:
        _coerce(self, "quantity_on_hand", "quantity_reserved")

    @property
    def quantity_available(self) -> Decimal:
        # May go negative when reservations exceed stock; not enforced here.
        return self.quantity_on_hand - self.quantity_reserved


@dataclass(frozen=True)
class CurrencyRate:
    """Rate of one currency against the tenant's base currency.

    ``exchange_rate_to_base`` is how many units of this currency one unit
    of the base currency buys (USD base, EUR 0.9236).
    """

    code: str
    symbol: str
    exchange_rate_to_base: Decimal
    is_base: bool = False
    name: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "code", self.code.upper().strip())
        _coerce(self, "exchange_rate_to_base")
