"""
Tests for the credit evaluator.

Covers:
- Available credit and limit check
- Prospective charges (would exceed / exceed amount)
- Credit status badges
- Follow-up selection and portfolio utilization
"""

from decimal import Decimal

import pytest

from ledger_engines.credit import CreditEvaluator, CreditStatus
from ledger_kernel.domain.records import CustomerCreditProfile


def _customer(limit, balance, status="active", customer_id="C1"):
    return CustomerCreditProfile(
        customer_id=customer_id,
        credit_limit=Decimal(str(limit)),
        current_balance=Decimal(str(balance)),
        status=status,
    )


class TestEvaluate:
    """Tests for evaluate()."""

    def setup_method(self):
        self.evaluator = CreditEvaluator()

    def test_over_limit_customer(self):
        """Limit 5000 with balance 5300 leaves -300 and is not within limit."""
        result = self.evaluator.evaluate(_customer(5000, 5300))
        assert result.available_credit == Decimal("-300")
        assert result.within_limit is False

    def test_under_limit_customer(self):
        result = self.evaluator.evaluate(_customer(5000, 1200))
        assert result.available_credit == Decimal("3800")
        assert result.within_limit is True

    def test_balance_equal_to_limit_is_within(self):
        """The limit comparison is inclusive."""
        result = self.evaluator.evaluate(_customer(5000, 5000))
        assert result.available_credit == Decimal("0")
        assert result.within_limit is True

    def test_zero_limit_zero_balance(self):
        result = self.evaluator.evaluate(_customer(0, 0))
        assert result.within_limit is True
        assert result.available_credit == Decimal("0")

    def test_negative_limit_is_accepted(self):
        """No validation: a negative limit is evaluated as given."""
        result = self.evaluator.evaluate(_customer(-100, 0))
        assert result.available_credit == Decimal("-100")
        assert result.within_limit is False

    def test_identity_holds(self):
        customer = _customer("1234.56", "987.65")
        result = self.evaluator.evaluate(customer)
        assert result.available_credit + customer.current_balance == customer.credit_limit

    def test_accepts_plain_numbers(self):
        """Records coerce ints and strings to Decimal."""
        customer = CustomerCreditProfile("C9", 1000, "250.50")
        result = self.evaluator.evaluate(customer)
        assert result.available_credit == Decimal("749.50")


class TestProspectiveCharge:
    """Tests for evaluate() with an additional amount."""

    def setup_method(self):
        self.evaluator = CreditEvaluator()

    def test_charge_that_fits(self):
        result = self.evaluator.evaluate(_customer(5000, 4000), Decimal("500"))
        assert result.within_limit is True
        assert result.would_exceed is False
        assert result.exceed_amount == Decimal("0")

    def test_charge_that_exceeds(self):
        result = self.evaluator.evaluate(_customer(5000, 4000), Decimal("1500"))
        assert result.within_limit is False
        assert result.would_exceed is True
        assert result.exceed_amount == Decimal("500")
        # Available credit reports the balance as it stands
        assert result.available_credit == Decimal("1000")

    def test_charge_reaching_limit_exactly(self):
        result = self.evaluator.evaluate(_customer(5000, 4000), Decimal("1000"))
        assert result.within_limit is True
        assert result.would_exceed is False


class TestCreditStatus:
    """Tests for the customer center badge."""

    def setup_method(self):
        self.evaluator = CreditEvaluator()

    def test_over_limit(self):
        assert self.evaluator.credit_status(_customer(5000, 5300)) == CreditStatus.OVER_LIMIT

    def test_near_limit_under_default_threshold(self):
        assert self.evaluator.credit_status(_customer(5000, 4500)) == CreditStatus.NEAR_LIMIT

    def test_good_at_threshold(self):
        """Available credit equal to the threshold is not near the limit."""
        assert self.evaluator.credit_status(_customer(5000, 4000)) == CreditStatus.GOOD

    def test_custom_threshold(self):
        status = self.evaluator.credit_status(_customer(5000, 4000), near_limit_threshold=Decimal("2000"))
        assert status == CreditStatus.NEAR_LIMIT

    def test_threshold_from_constructor(self):
        evaluator = CreditEvaluator(near_limit_threshold=Decimal("100"))
        assert evaluator.credit_status(_customer(5000, 4500)) == CreditStatus.GOOD


class TestFollowUp:
    """Tests for follow-up selection and utilization."""

    def setup_method(self):
        self.evaluator = CreditEvaluator()

    def test_over_limit_and_suspended_selected_in_order(self):
        customers = [
            _customer(1000, 1500, customer_id="A"),
            _customer(1000, 100, customer_id="B"),
            _customer(1000, 100, status="suspended", customer_id="C"),
            _customer(1000, 1000, customer_id="D"),
        ]
        flagged = self.evaluator.follow_up_customers(customers)
        assert [c.customer_id for c in flagged] == ["A", "C"]

    def test_empty_input(self):
        assert self.evaluator.follow_up_customers([]) == []

    def test_portfolio_utilization(self):
        customers = [_customer(1000, 500), _customer(3000, 500)]
        assert self.evaluator.portfolio_utilization(customers) == Decimal("25")

    def test_utilization_without_limits(self):
        assert self.evaluator.portfolio_utilization([_customer(0, 10)]) is None


class TestTracing:
    def test_evaluate_emits_engine_trace(self, captured_logs):
        CreditEvaluator().evaluate(_customer(5000, 5300))
        traces = [r for r in captured_logs() if r["message"] == "LEDGER_ENGINE_TRACE"]
        assert len(traces) == 1
        assert traces[0]["engine_name"] == "credit"
        assert len(traces[0]["input_fingerprint"]) == 16

    def test_fingerprint_is_deterministic(self, captured_logs):
        evaluator = CreditEvaluator()
        evaluator.evaluate(_customer(5000, 5300))
        evaluator.evaluate(_customer(5000, 5300))
        evaluator.evaluate(_customer(5000, 5299))
        fps = [
            r["input_fingerprint"]
            for r in captured_logs()
            if r["message"] == "LEDGER_ENGINE_TRACE"
        ]
        assert fps[0] == fps[1]
        assert fps[0] != fps[2]
