"""
ReceivablesService -- credit evaluation and receivables aging for a client.

Architecture: ledger_services -- imperative shell.
    Reads customer profiles and open invoices through ReceivablesSelector,
    then delegates to CreditEvaluator and AgingBucketer.  The aging
    reference date defaults to the clock's current date.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy.orm import Session

from ledger_config import LedgerConfig, get_active_config
from ledger_engines.aging import AgeBucket, AgingBucketer, AgingReport
from ledger_engines.credit import CreditEvaluation, CreditEvaluator, CreditStatus
from ledger_kernel.domain.clock import Clock, SystemClock
from ledger_kernel.domain.records import CustomerCreditProfile
from ledger_kernel.exceptions import NotFoundError
from ledger_kernel.logging_config import get_logger
from ledger_kernel.selectors.receivables_selector import ReceivablesSelector

logger = get_logger("services.receivables")


@dataclass(frozen=True)
class CustomerCreditLine:
    """One row of the customer center credit view."""

    profile: CustomerCreditProfile
    evaluation: CreditEvaluation
    status: CreditStatus


class ReceivablesService:
    """Credit and aging views over one client's receivables.

    Non-goals:
        - Does NOT modify customers or invoices (read-only).
    """

    def __init__(
        self,
        session: Session,
        client_id: UUID,
        config: LedgerConfig | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._config = config or get_active_config()
        self._clock = clock or SystemClock()
        self._selector = ReceivablesSelector(session, client_id)
        self._client_id = client_id
        self._credit = CreditEvaluator(
            near_limit_threshold=self._config.credit.near_limit_threshold,
        )
        self._aging = AgingBucketer(
            buckets=tuple(
                AgeBucket(b.key, b.label, b.min_days, b.max_days)
                for b in self._config.aging.buckets
            ),
            on_invalid=self._config.aging.on_invalid,
        )

    def evaluate_credit(
        self,
        customer_id: UUID,
        additional_amount: Decimal = Decimal("0"),
    ) -> CreditEvaluation:
        """Credit evaluation of one customer, optionally for a new charge.

        Raises:
            NotFoundError: the customer does not belong to this client.
        """
        profile = self._selector.credit_profile(customer_id)
        if profile is None:
            raise NotFoundError(f"Customer not found: {customer_id}")
        return self._credit.evaluate(profile, additional_amount)

    def credit_overview(self) -> list[CustomerCreditLine]:
        lines = []
        for profile in self._selector.credit_profiles():
            lines.append(
                CustomerCreditLine(
                    profile=profile,
                    evaluation=self._credit.evaluate(profile),
                    status=self._credit.credit_status(profile),
                )
            )
        return lines

    def follow_up_customers(self) -> list[CustomerCreditProfile]:
        return self._credit.follow_up_customers(self._selector.credit_profiles())

    def portfolio_utilization(self) -> Decimal | None:
        return self._credit.portfolio_utilization(self._selector.credit_profiles())

    def aging_report(
        self,
        reference_date: date | None = None,
        currency: str | None = None,
    ) -> AgingReport:
        """Aging of open invoices as of ``reference_date`` (default: today)."""
        as_of = reference_date or self._clock.today()
        invoices = self._selector.open_invoices(currency=currency)
        logger.info(
            "aging_report_requested",
            extra={
                "client_id": str(self._client_id),
                "reference_date": as_of.isoformat(),
                "invoice_count": len(invoices),
            },
        )
        return self._aging.bucket(invoices, as_of)
