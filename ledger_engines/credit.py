"""
Module: ledger_engines.credit
Responsibility:
    Evaluate a customer's available credit against their limit, classify
    credit standing for the customer center, and pick the customers that
    need collections follow-up.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - available_credit + current_balance == credit_limit, exactly.
    - within_limit is an inclusive comparison: a balance equal to the limit
      is within it.
    - No validation of the profile: zero and negative limits are evaluated
      as given.

Failure modes:
    - None; every well-typed profile yields an evaluation.

Audit relevance:
    Credit evaluations gate new sales orders.  Each evaluation is traced
    via ``@traced_engine``.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Sequence

from ledger_kernel.domain.records import CustomerCreditProfile
from ledger_kernel.logging_config import get_logger
from ledger_engines.tracer import traced_engine

logger = get_logger("engines.credit")

DEFAULT_NEAR_LIMIT_THRESHOLD = Decimal("1000")
SUSPENDED_STATUS = "suspended"


class CreditStatus(str, Enum):
    """Credit standing shown next to a customer."""

    GOOD = "good"
    NEAR_LIMIT = "near_limit"
    OVER_LIMIT = "over_limit"


@dataclass(frozen=True)
class CreditEvaluation:
    """
    Result of evaluating one customer's credit.

    ``additional_amount`` is the prospective charge that was considered
    (zero for a plain evaluation of the current balance).
    """

    customer_id: object
    credit_limit: Decimal
    current_balance: Decimal
    available_credit: Decimal
    within_limit: bool
    additional_amount: Decimal = Decimal("0")
    would_exceed: bool = False
    exceed_amount: Decimal = Decimal("0")


class CreditEvaluator:
    """
    Credit limit engine.

    Contract:
        Pure functions of the profile.  ``evaluate`` without an additional
        amount reports on the balance as it stands.
    """

    def __init__(self, near_limit_threshold: Decimal = DEFAULT_NEAR_LIMIT_THRESHOLD):
        self.near_limit_threshold = Decimal(str(near_limit_threshold))

    @traced_engine("credit", "1.0", fingerprint_fields=("customer", "additional_amount"))
    def evaluate(
        self,
        customer: CustomerCreditProfile,
        additional_amount: Decimal = Decimal("0"),
    ) -> CreditEvaluation:
        """Available credit and limit check, optionally for a new charge."""
        additional = Decimal(str(additional_amount))
        available = customer.credit_limit - customer.current_balance
        projected = customer.current_balance + additional
        would_exceed = projected > customer.credit_limit

        return CreditEvaluation(
            customer_id=customer.customer_id,
            credit_limit=customer.credit_limit,
            current_balance=customer.current_balance,
            available_credit=available,
            within_limit=projected <= customer.credit_limit,
            additional_amount=additional,
            would_exceed=would_exceed,
            exceed_amount=(projected - customer.credit_limit) if would_exceed else Decimal("0"),
        )

    def credit_status(
        self,
        customer: CustomerCreditProfile,
        near_limit_threshold: Decimal | None = None,
    ) -> CreditStatus:
        """OVER_LIMIT, else NEAR_LIMIT when available credit is under the threshold."""
        threshold = (
            self.near_limit_threshold
            if near_limit_threshold is None
            else Decimal(str(near_limit_threshold))
        )
        evaluation = self.evaluate(customer)
        if not evaluation.within_limit:
            return CreditStatus.OVER_LIMIT
        if evaluation.available_credit < threshold:
            return CreditStatus.NEAR_LIMIT
        return CreditStatus.GOOD

    @traced_engine("credit_follow_up", "1.0")
    def follow_up_customers(
        self,
        customers: Sequence[CustomerCreditProfile],
    ) -> list[CustomerCreditProfile]:
        """Customers over their limit or suspended, in input order."""
        flagged = [
            c
            for c in customers
            if c.current_balance > c.credit_limit or c.status == SUSPENDED_STATUS
        ]
        logger.info(
            "credit_follow_up_selected",
            extra={
                "customer_count": len(customers),
                "follow_up_count": len(flagged),
            },
        )
        return flagged

    @staticmethod
    def portfolio_utilization(customers: Sequence[CustomerCreditProfile]) -> Decimal | None:
        """Total balance over total limit, as a percentage.  None with no limit."""
        total_limit = sum((c.credit_limit for c in customers), Decimal("0"))
        if total_limit == 0:
            return None
        total_balance = sum((c.current_balance for c in customers), Decimal("0"))
        return total_balance / total_limit * Decimal("100")
