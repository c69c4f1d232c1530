"""
Module: ledger_engines.aging
Responsibility:
    Group open invoice balances per customer into receivables aging
    buckets (current, 1-30, 31-60, 61-90, over 90 days past due).

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import ledger_kernel domain, exceptions and logging.

Invariants enforced:
    - Purity: no clock access.  The reference date is always a parameter.
    - Decimal-only accumulation; the result does not depend on input order.
    - Every accepted invoice lands in exactly one bucket, so the buckets of a
      row sum to its total_due and to the customer's invoice amounts.
    - Rows appear in order of first appearance of each customer; the engine
      never sorts.

Failure modes:
    - AgingDataQualityError (on_invalid="raise") listing every invoice with
      no due date, a negative amount or a due date before its issue date.
      Nothing is bucketed when this is raised.
    - ValueError for a bucket set that is not contiguous from day 0 or does
      not end unbounded.

Audit relevance:
    Aging reports feed collections follow-up and the allowance for doubtful
    accounts.  Each report generation is traced via ``@traced_engine``.

Usage:
    from datetime import date
    from ledger_engines.aging import AgingBucketer

    report = AgingBucketer().bucket(invoices, reference_date=date(2024, 3, 31))
    for row in report.rows:
        print(row.customer_id, row.d30, row.total_due)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Sequence

from ledger_kernel.domain.records import InvoiceBalance
from ledger_kernel.exceptions import AgingDataQualityError, DataQualityIssue
from ledger_kernel.logging_config import get_logger
from ledger_engines.tracer import traced_engine

logger = get_logger("engines.aging")

ON_INVALID_RAISE = "raise"
ON_INVALID_EXCLUDE = "exclude"


@dataclass(frozen=True)
class AgeBucket:
    """
    Definition of an aging bucket.

    Contract:
        Frozen dataclass representing a contiguous range of days past due.
        ``key`` is the stable field name used in rows and exports.
    Guarantees:
        - min_days >= 0.
        - max_days >= min_days (when bounded).
    """

    key: str
    label: str
    min_days: int
    max_days: int | None  # None = unbounded (e.g., over 90)

    def __post_init__(self) -> None:
        if self.min_days < 0:
            raise ValueError("min_days cannot be negative")
        if self.max_days is not None and self.max_days < self.min_days:
            raise ValueError("max_days cannot be less than min_days")

    def contains(self, age_days: int) -> bool:
        """Check if age falls within this bucket."""
        if age_days < self.min_days:
            return False
        if self.max_days is None:
            return True
        return age_days <= self.max_days


STANDARD_BUCKETS: tuple[AgeBucket, ...] = (
    AgeBucket("current", "Current", 0, 0),
    AgeBucket("d30", "1-30 Days", 1, 30),
    AgeBucket("d60", "31-60 Days", 31, 60),
    AgeBucket("d90", "61-90 Days", 61, 90),
    AgeBucket("over90", "Over 90 Days", 91, None),
)


def validate_buckets(buckets: Sequence[AgeBucket]) -> tuple[AgeBucket, ...]:
    """Check that buckets start at day 0, are contiguous and end unbounded."""
    buckets = tuple(buckets)
    if not buckets:
        raise ValueError("At least one aging bucket is required")
    if buckets[0].min_days != 0:
        raise ValueError("First aging bucket must start at day 0")
    keys = [b.key for b in buckets]
    if len(set(keys)) != len(keys):
        raise ValueError(f"Aging bucket keys must be unique: {keys}")
    for prev, nxt in zip(buckets, buckets[1:]):
        if prev.max_days is None or nxt.min_days != prev.max_days + 1:
            raise ValueError(
                f"Aging buckets are not contiguous: {prev.key} -> {nxt.key}"
            )
    if buckets[-1].max_days is not None:
        raise ValueError("Last aging bucket must be unbounded")
    return buckets


@dataclass(frozen=True)
class AgingRow:
    """One customer's aged balance.  ``amounts`` is keyed by bucket key."""

    customer_id: Any
    customer_name: str | None
    amounts: dict[str, Decimal]
    invoice_count: int = 0

    def amount(self, key: str) -> Decimal:
        return self.amounts.get(key, Decimal("0"))

    @property
    def current(self) -> Decimal:
        return self.amount("current")

    @property
    def d30(self) -> Decimal:
        return self.amount("d30")

    @property
    def d60(self) -> Decimal:
        return self.amount("d60")

    @property
    def d90(self) -> Decimal:
        return self.amount("d90")

    @property
    def over90(self) -> Decimal:
        return self.amount("over90")

    @property
    def total_due(self) -> Decimal:
        return sum(self.amounts.values(), Decimal("0"))


@dataclass(frozen=True)
class AgingReport:
    """
    Receivables aging report.

    Contract:
        ``rows`` holds one row per customer in first-appearance order.
        ``excluded`` and ``issues`` are only populated when the bucketer
        runs with on_invalid="exclude".
    """

    reference_date: date
    buckets: tuple[AgeBucket, ...]
    rows: tuple[AgingRow, ...]
    excluded: tuple[InvoiceBalance, ...] = ()
    issues: tuple[DataQualityIssue, ...] = field(default=())

    @property
    def totals(self) -> dict[str, Decimal]:
        """Each bucket summed independently across customers."""
        return {
            b.key: sum((row.amount(b.key) for row in self.rows), Decimal("0"))
            for b in self.buckets
        }

    @property
    def total_due(self) -> Decimal:
        return sum((row.total_due for row in self.rows), Decimal("0"))

    @property
    def has_exclusions(self) -> bool:
        return bool(self.excluded)

    def row_for(self, customer_id: Any) -> AgingRow | None:
        for row in self.rows:
            if row.customer_id == customer_id:
                return row
        return None

    def to_rows(self) -> list[dict[str, Any]]:
        """Plain dicts with stable field names, one per customer."""
        out: list[dict[str, Any]] = []
        for row in self.rows:
            record: dict[str, Any] = {
                "customer_id": str(row.customer_id),
                "customer_name": row.customer_name or "",
            }
            for b in self.buckets:
                record[b.key] = row.amount(b.key)
            record["total_due"] = row.total_due
            out.append(record)
        return out


class AgingBucketer:
    """
    Receivables aging engine.

    Contract:
        Pure calculator: no I/O, no clock.  Ages are measured from the due
        date; ages of zero or less (not yet due) are current.
    """

    def __init__(
        self,
        buckets: Sequence[AgeBucket] = STANDARD_BUCKETS,
        on_invalid: str = ON_INVALID_RAISE,
    ):
        if on_invalid not in (ON_INVALID_RAISE, ON_INVALID_EXCLUDE):
            raise ValueError(f"on_invalid must be 'raise' or 'exclude', got {on_invalid!r}")
        self.buckets = validate_buckets(buckets)
        self.on_invalid = on_invalid

    @staticmethod
    def calculate_age(due_date: date, reference_date: date) -> int:
        """Days past due; datetimes are truncated to their calendar date."""
        if isinstance(due_date, datetime):
            due_date = due_date.date()
        if isinstance(reference_date, datetime):
            reference_date = reference_date.date()
        return (reference_date - due_date).days

    def classify(self, age_days: int) -> AgeBucket:
        """Bucket for an age; invoices not yet due are current."""
        age_days = max(age_days, 0)
        for bucket in self.buckets:
            if bucket.contains(age_days):
                return bucket
        # Unreachable with a validated bucket set
        raise ValueError(f"No aging bucket for age {age_days}")

    @staticmethod
    def validate(invoices: Sequence[InvoiceBalance]) -> tuple[DataQualityIssue, ...]:
        """Every data-quality issue in the invoices, in input order."""
        return tuple(issue for inv in invoices for issue in _invoice_issues(inv))

    @traced_engine("aging", "1.0", fingerprint_fields=("invoices", "reference_date"))
    def bucket(
        self,
        invoices: Sequence[InvoiceBalance],
        reference_date: date,
    ) -> AgingReport:
        """
        Bucket invoices per customer as of ``reference_date``.

        Raises:
            AgingDataQualityError: malformed invoices with on_invalid="raise".
        """
        if isinstance(reference_date, datetime):
            reference_date = reference_date.date()

        issues: list[DataQualityIssue] = []
        accepted: list[InvoiceBalance] = []
        excluded: list[InvoiceBalance] = []
        for inv in invoices:
            found = _invoice_issues(inv)
            issues.extend(found)
            (excluded if found else accepted).append(inv)

        if issues and self.on_invalid == ON_INVALID_RAISE:
            logger.warning(
                "aging_data_quality_rejected",
                extra={
                    "issue_count": len(issues),
                    "invoice_count": len(invoices),
                },
            )
            raise AgingDataQualityError(tuple(issues))

        zero = Decimal("0")
        amounts: dict[Any, dict[str, Decimal]] = {}
        names: dict[Any, str | None] = {}
        counts: dict[Any, int] = {}
        for inv in accepted:
            customer = inv.customer_id
            if customer not in amounts:
                amounts[customer] = {b.key: zero for b in self.buckets}
                names[customer] = inv.customer_name
                counts[customer] = 0
            elif names[customer] is None and inv.customer_name:
                names[customer] = inv.customer_name

            age = self.calculate_age(inv.due_date, reference_date)
            key = self.classify(age).key
            amounts[customer][key] += inv.amount
            counts[customer] += 1

        rows = tuple(
            AgingRow(
                customer_id=customer,
                customer_name=names[customer],
                amounts=amounts[customer],
                invoice_count=counts[customer],
            )
            for customer in amounts
        )

        if excluded:
            logger.warning(
                "aging_invoices_excluded",
                extra={
                    "excluded_count": len(excluded),
                    "issue_count": len(issues),
                },
            )
        logger.info(
            "aging_report_generated",
            extra={
                "reference_date": reference_date.isoformat(),
                "customer_count": len(rows),
                "invoice_count": len(accepted),
            },
        )

        return AgingReport(
            reference_date=reference_date,
            buckets=self.buckets,
            rows=rows,
            excluded=tuple(excluded),
            issues=tuple(issues),
        )


def _as_date(value: date) -> date:
    return value.date() if isinstance(value, datetime) else value


def _invoice_issues(inv: InvoiceBalance) -> list[DataQualityIssue]:
    issues: list[DataQualityIssue] = []
    if inv.due_date is None:
        issues.append(DataQualityIssue(inv.record_id, "due_date", "missing_due_date"))
    if inv.amount < 0:
        issues.append(
            DataQualityIssue(inv.record_id, "amount", "negative_amount", str(inv.amount))
        )
    if (
        inv.due_date is not None
        and inv.issue_date is not None
        and _as_date(inv.due_date) < _as_date(inv.issue_date)
    ):
        issues.append(
            DataQualityIssue(
                inv.record_id,
                "due_date",
                "due_before_issue",
                f"{_as_date(inv.due_date).isoformat()} < {_as_date(inv.issue_date).isoformat()}",
            )
        )
    return issues
