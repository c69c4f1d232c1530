"""
Pytest configuration and shared fixtures.

Engine tests need no database.  Selector and service tests run against an
in-memory SQLite database created fresh for each test.
"""

import json
import logging
from datetime import date, datetime, timezone
from decimal import Decimal
from io import StringIO
from types import SimpleNamespace
from uuid import uuid4

import pytest

from ledger_config import get_active_config
from ledger_kernel.db.engine import (
    create_tables,
    drop_tables,
    get_session,
    init_engine_from_url,
    reset_engine,
)
from ledger_kernel.domain.clock import DeterministicClock
from ledger_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session", autouse=True)
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG, stream=StringIO())
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture ledger_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            AgingBucketer().bucket(invoices, date(2024, 3, 31))
            logs = captured_logs()
            assert any(r["message"] == "aging_report_generated" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("ledger_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# ---------------------------------------------------------------------------
# Time and configuration
# ---------------------------------------------------------------------------


@pytest.fixture
def clock():
    return DeterministicClock(datetime(2024, 3, 31, 9, 0, tzinfo=timezone.utc))


@pytest.fixture
def ledger_config():
    return get_active_config()


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------


@pytest.fixture
def db_session():
    """Session on a fresh in-memory SQLite database."""
    init_engine_from_url("sqlite://")
    create_tables()
    session = get_session()
    try:
        yield session
    finally:
        session.rollback()
        session.close()
        drop_tables()
        reset_engine()


@pytest.fixture
def client_id():
    return uuid4()


# ---------------------------------------------------------------------------
# Seed data
# ---------------------------------------------------------------------------


def seed_ledger(session, client_id):
    """One client's customers, invoices, stock, bank lines and rates.

    Dates are chosen against a 2024-03-31 reference date.
    """
    from ledger_kernel.models import (
        BankAccountModel,
        BankTransactionModel,
        CurrencyRateModel,
        CustomerModel,
        InventoryItemModel,
        InventoryStockModel,
        InvoiceModel,
    )

    customers = {}
    for code, name, limit, balance, status in [
        ("C001", "Acme Corp", "5000", "5300", "active"),
        ("C002", "Beta LLC", "10000", "2000", "active"),
        ("C003", "Gamma Inc", "3000", "100", "suspended"),
        ("C004", "Delta Co", "1000", "0", "inactive"),
    ]:
        customer = CustomerModel(
            id=uuid4(),
            client_id=client_id,
            customer_code=code,
            name=name,
            status=status,
            credit_limit=Decimal(limit),
            current_balance=Decimal(balance),
            payment_terms_days=30,
        )
        session.add(customer)
        customers[code] = customer.id

    invoices = {}
    for number, code, due, total, paid, status, currency in [
        ("INV-001", "C001", date(2024, 2, 15), "1000", "400", "partial", "USD"),
        ("INV-002", "C001", date(2024, 4, 10), "250", "0", "sent", "USD"),
        ("INV-003", "C002", date(2023, 12, 1), "2000", "0", "overdue", "USD"),
        ("INV-004", "C002", date(2024, 1, 5), "500", "500", "paid", "USD"),
        ("INV-005", "C003", date(2024, 3, 21), "100", "0", "sent", "EUR"),
        ("INV-006", "C002", date(2024, 3, 1), "900", "0", "draft", "USD"),
    ]:
        invoice = InvoiceModel(
            id=uuid4(),
            client_id=client_id,
            invoice_number=number,
            customer_id=customers[code],
            issue_date=date(2023, 11, 1),
            due_date=due,
            total_amount=Decimal(total),
            amount_paid=Decimal(paid),
            status=status,
            currency=currency,
        )
        session.add(invoice)
        invoices[number] = invoice.id

    items = {}
    for code, name, level, quantity, active in [
        ("SKU-001", "Widget", "10", "50", True),
        ("SKU-002", "Gadget", "5", None, True),
        ("SKU-003", "Installation", "0", None, True),
        ("SKU-004", "Legacy Part", "100", None, False),
    ]:
        item = InventoryItemModel(
            id=uuid4(),
            client_id=client_id,
            item_code=code,
            name=name,
            reorder_level=Decimal(level),
            reorder_quantity=None if quantity is None else Decimal(quantity),
            active=active,
        )
        session.add(item)
        items[code] = item.id

    warehouse_1, warehouse_2 = uuid4(), uuid4()
    for code, location, on_hand, reserved in [
        ("SKU-001", warehouse_1, "5", "0"),
        ("SKU-001", warehouse_2, "4", "1"),
        ("SKU-002", warehouse_1, "20", "0"),
    ]:
        session.add(
            InventoryStockModel(
                client_id=client_id,
                item_id=items[code],
                location_id=location,
                quantity_on_hand=Decimal(on_hand),
                quantity_reserved=Decimal(reserved),
            )
        )

    account = BankAccountModel(
        id=uuid4(),
        client_id=client_id,
        name="Operating Account",
        statement_balance=Decimal("454.75"),
    )
    session.add(account)
    transactions = []
    for position, (day, description, bank, book, matched) in enumerate([
        (1, "Customer deposit", "500.00", "500.00", False),
        (3, "Office supplies", "-120.50", "-120.50", True),
        (5, "Card settlement", "75.25", "70.00", False),
    ], start=1):
        txn = BankTransactionModel(
            id=uuid4(),
            client_id=client_id,
            bank_account_id=account.id,
            position=position,
            transaction_date=date(2024, 3, day),
            description=description,
            bank_amount=Decimal(bank),
            book_amount=Decimal(book),
            matched=matched,
        )
        session.add(txn)
        transactions.append(txn.id)

    for code, symbol, rate, is_base in [
        ("USD", "$", "1", True),
        ("EUR", "€", "0.9236", False),
        ("GBP", "£", "0.785", False),
        ("JPY", "¥", "149.5", False),
    ]:
        session.add(
            CurrencyRateModel(
                client_id=client_id,
                code=code,
                symbol=symbol,
                exchange_rate_to_base=Decimal(rate),
                is_base=is_base,
            )
        )

    session.flush()
    return SimpleNamespace(
        client_id=client_id,
        customers=customers,
        invoices=invoices,
        items=items,
        account_id=account.id,
        transactions=transactions,
    )


@pytest.fixture
def seeded(db_session, client_id):
    """Seeded ledger for ``client_id`` plus one customer of another client."""
    from ledger_kernel.models import CustomerModel

    data = seed_ledger(db_session, client_id)
    data.other_client_id = uuid4()
    db_session.add(
        CustomerModel(
            client_id=data.other_client_id,
            customer_code="C001",
            name="Other Tenant Customer",
            credit_limit=Decimal("1"),
            current_balance=Decimal("99"),
        )
    )
    db_session.flush()
    return data
