"""
Module: ledger_engines.reconciliation
Responsibility:
    Operator-driven bank reconciliation: toggle the matched flag of bank/book
    lines and compute the outstanding difference between the bank and the
    books over the lines still unmatched.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Immutability: every operation returns a new TransactionSet; the
      caller's set is never modified, even when the operation fails.
    - toggle_match is an involution: toggling the same id twice restores
      the original set.
    - Matching is a pure user decision.  bank_amount and book_amount are
      independent and never forced equal; there is no automatic matching.
    - difference = sum(bank_amount) - sum(book_amount) over unmatched lines.

Failure modes:
    - TransactionNotFoundError when an id is not in the set.

Audit relevance:
    The difference is the amount the operator still has to explain before
    the account can be signed off.  Each summary is traced via
    ``@traced_engine``.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Any, Iterable, Iterator, Sequence

from ledger_kernel.domain.records import ReconciliationTransaction
from ledger_kernel.exceptions import TransactionNotFoundError
from ledger_kernel.logging_config import get_logger
from ledger_engines.tracer import traced_engine

logger = get_logger("engines.reconciliation")

DEFAULT_TOLERANCE = Decimal("0.01")


def _same_id(a: Any, b: Any) -> bool:
    # Ids arrive as UUIDs from the database and as strings from callers.
    return a == b or str(a) == str(b)


@dataclass(frozen=True)
class TransactionSet:
    """Immutable, ordered collection of reconciliation lines."""

    transactions: tuple[ReconciliationTransaction, ...] = ()

    @classmethod
    def of(cls, transactions: Iterable[ReconciliationTransaction]) -> TransactionSet:
        return cls(transactions=tuple(transactions))

    def __iter__(self) -> Iterator[ReconciliationTransaction]:
        return iter(self.transactions)

    def __len__(self) -> int:
        return len(self.transactions)

    def index_of(self, transaction_id: Any) -> int:
        for i, txn in enumerate(self.transactions):
            if _same_id(txn.id, transaction_id):
                return i
        raise TransactionNotFoundError(transaction_id)

    def get(self, transaction_id: Any) -> ReconciliationTransaction:
        return self.transactions[self.index_of(transaction_id)]

    def contains(self, transaction_id: Any) -> bool:
        return any(_same_id(t.id, transaction_id) for t in self.transactions)

    @property
    def matched_ids(self) -> tuple[Any, ...]:
        return tuple(t.id for t in self.transactions if t.matched)

    def to_rows(self) -> list[dict[str, Any]]:
        return [
            {
                "id": str(t.id),
                "date": t.date,
                "description": t.description,
                "reference": t.reference or "",
                "bank_amount": t.bank_amount,
                "book_amount": t.book_amount,
                "difference": t.bank_amount - t.book_amount,
                "matched": t.matched,
            }
            for t in self.transactions
        ]


@dataclass(frozen=True)
class ReconciliationSummary:
    """Totals of a transaction set at one point of the reconciliation."""

    transaction_count: int
    matched_count: int
    unmatched_count: int
    matched_bank_total: Decimal
    matched_book_total: Decimal
    unmatched_bank_total: Decimal
    unmatched_book_total: Decimal
    difference: Decimal
    tolerance: Decimal
    statement_balance: Decimal | None = None

    @property
    def is_reconciled(self) -> bool:
        return abs(self.difference) <= self.tolerance

    @property
    def bank_total(self) -> Decimal:
        return self.matched_bank_total + self.unmatched_bank_total

    @property
    def book_total(self) -> Decimal:
        return self.matched_book_total + self.unmatched_book_total

    def to_rows(self) -> list[dict[str, Any]]:
        rows: list[dict[str, Any]] = [
            {"metric": "Transactions", "value": self.transaction_count},
            {"metric": "Matched", "value": self.matched_count},
            {"metric": "Unmatched", "value": self.unmatched_count},
            {"metric": "Bank total", "value": self.bank_total},
            {"metric": "Book total", "value": self.book_total},
            {"metric": "Unmatched bank total", "value": self.unmatched_bank_total},
            {"metric": "Unmatched book total", "value": self.unmatched_book_total},
            {"metric": "Difference", "value": self.difference},
            {"metric": "Reconciled", "value": self.is_reconciled},
        ]
        if self.statement_balance is not None:
            rows.insert(0, {"metric": "Statement balance", "value": self.statement_balance})
        return rows


class ReconciliationMatcher:
    """
    Bank reconciliation engine.

    Contract:
        Operates on TransactionSets and always returns new ones.
    """

    def __init__(self, tolerance: Decimal = DEFAULT_TOLERANCE):
        self.tolerance = Decimal(str(tolerance))

    def toggle_match(self, transaction_set: TransactionSet, transaction_id: Any) -> TransactionSet:
        """
        Flip the matched flag of one line.

        Raises:
            TransactionNotFoundError: id is not in the set.
        """
        index = transaction_set.index_of(transaction_id)
        txns = list(transaction_set.transactions)
        txn = txns[index]
        txns[index] = replace(txn, matched=not txn.matched)

        logger.debug(
            "reconciliation_match_toggled",
            extra={"transaction_id": str(txn.id), "matched": not txn.matched},
        )
        return TransactionSet(transactions=tuple(txns))

    def set_matched(
        self,
        transaction_set: TransactionSet,
        transaction_ids: Sequence[Any],
        matched: bool = True,
    ) -> TransactionSet:
        """
        Mark several lines at once.  All ids are checked before any change.

        Raises:
            TransactionNotFoundError: for the first id not in the set.
        """
        indexes = {transaction_set.index_of(tid) for tid in transaction_ids}
        return TransactionSet(
            transactions=tuple(
                replace(t, matched=matched) if i in indexes else t
                for i, t in enumerate(transaction_set.transactions)
            )
        )

    @staticmethod
    def partition(
        transaction_set: TransactionSet,
    ) -> tuple[TransactionSet, TransactionSet]:
        """(matched, unmatched), each in original order."""
        matched = tuple(t for t in transaction_set if t.matched)
        unmatched = tuple(t for t in transaction_set if not t.matched)
        return TransactionSet(matched), TransactionSet(unmatched)

    @staticmethod
    def compute_difference(transaction_set: TransactionSet) -> Decimal:
        """Unmatched bank amounts minus unmatched book amounts."""
        bank = sum((t.bank_amount for t in transaction_set if not t.matched), Decimal("0"))
        book = sum((t.book_amount for t in transaction_set if not t.matched), Decimal("0"))
        return bank - book

    @traced_engine(
        "reconciliation",
        "1.0",
        fingerprint_fields=("transaction_set", "statement_balance"),
    )
    def summarize(
        self,
        transaction_set: TransactionSet,
        statement_balance: Decimal | None = None,
    ) -> ReconciliationSummary:
        matched, unmatched = self.partition(transaction_set)
        zero = Decimal("0")
        summary = ReconciliationSummary(
            transaction_count=len(transaction_set),
            matched_count=len(matched),
            unmatched_count=len(unmatched),
            matched_bank_total=sum((t.bank_amount for t in matched), zero),
            matched_book_total=sum((t.book_amount for t in matched), zero),
            unmatched_bank_total=sum((t.bank_amount for t in unmatched), zero),
            unmatched_book_total=sum((t.book_amount for t in unmatched), zero),
            difference=self.compute_difference(transaction_set),
            tolerance=self.tolerance,
            statement_balance=(
                Decimal(str(statement_balance)) if statement_balance is not None else None
            ),
        )
        logger.info(
            "reconciliation_summarized",
            extra={
                "transaction_count": summary.transaction_count,
                "unmatched_count": summary.unmatched_count,
                "difference": summary.difference,
                "is_reconciled": summary.is_reconciled,
            },
        )
        return summary
