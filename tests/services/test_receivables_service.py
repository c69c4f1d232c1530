"""
Tests for ReceivablesService -- credit views and aging over seeded data.
"""

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from ledger_engines.credit import CreditStatus
from ledger_kernel.exceptions import AgingDataQualityError, NotFoundError
from ledger_services import ReceivablesService


@pytest.fixture
def service(db_session, seeded, ledger_config, clock):
    return ReceivablesService(db_session, seeded.client_id, config=ledger_config, clock=clock)


class TestCredit:
    """Tests for credit evaluation through the service."""

    def test_over_limit_customer(self, service, seeded):
        result = service.evaluate_credit(seeded.customers["C001"])
        assert result.available_credit == Decimal("-300")
        assert result.within_limit is False

    def test_prospective_charge(self, service, seeded):
        result = service.evaluate_credit(seeded.customers["C002"], Decimal("9000"))
        assert result.would_exceed is True
        assert result.exceed_amount == Decimal("1000")

    def test_unknown_customer(self, service):
        with pytest.raises(NotFoundError):
            service.evaluate_credit(uuid4())

    def test_overview_statuses(self, service):
        lines = service.credit_overview()
        assert [(ln.profile.name, ln.status) for ln in lines] == [
            ("Acme Corp", CreditStatus.OVER_LIMIT),
            ("Beta LLC", CreditStatus.GOOD),
            ("Gamma Inc", CreditStatus.GOOD),
        ]

    def test_follow_up(self, service):
        assert [c.name for c in service.follow_up_customers()] == ["Acme Corp", "Gamma Inc"]

    def test_portfolio_utilization(self, service):
        utilization = service.portfolio_utilization()
        assert utilization.quantize(Decimal("0.01")) == Decimal("41.11")


class TestAging:
    """Tests for aging_report()."""

    def test_defaults_to_clock_date(self, service):
        report = service.aging_report()
        assert report.reference_date == date(2024, 3, 31)

    def test_rows_per_customer(self, service, seeded):
        report = service.aging_report()
        acme = report.row_for(seeded.customers["C001"])
        assert acme.customer_name == "Acme Corp"
        assert acme.d60 == Decimal("600")
        assert acme.current == Decimal("250")
        beta = report.row_for(seeded.customers["C002"])
        assert beta.over90 == Decimal("2000")
        gamma = report.row_for(seeded.customers["C003"])
        assert gamma.d30 == Decimal("100")
        assert report.total_due == Decimal("2950")

    def test_paid_and_draft_invoices_ignored(self, service, seeded):
        beta = service.aging_report().row_for(seeded.customers["C002"])
        assert beta.invoice_count == 1

    def test_currency_filter(self, service):
        report = service.aging_report(currency="USD")
        assert report.total_due == Decimal("2850")
        assert len(report.rows) == 2

    def test_explicit_reference_date(self, service, seeded):
        report = service.aging_report(reference_date=date(2024, 1, 31))
        beta = report.row_for(seeded.customers["C002"])
        assert beta.d90 == Decimal("2000")

    def test_missing_due_date_rejected(self, db_session, service, seeded):
        from ledger_kernel.models import InvoiceModel

        db_session.add(
            InvoiceModel(
                client_id=seeded.client_id,
                invoice_number="INV-900",
                customer_id=seeded.customers["C002"],
                due_date=None,
                total_amount=Decimal("10"),
                status="sent",
            )
        )
        db_session.flush()
        with pytest.raises(AgingDataQualityError) as exc_info:
            service.aging_report()
        assert exc_info.value.issues[0].reason == "missing_due_date"

    def test_aging_request_logged(self, service, captured_logs):
        service.aging_report()
        records = [r for r in captured_logs() if r["message"] == "aging_report_requested"]
        assert records[0]["invoice_count"] == 4
        assert records[0]["reference_date"] == "2024-03-31"
