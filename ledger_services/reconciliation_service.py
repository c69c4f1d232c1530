"""
ReconciliationService -- operator-driven bank reconciliation for a client.

Architecture: ledger_services -- imperative shell.
    Loads a bank account's lines through BankingSelector into a
    TransactionSet, applies the operator's toggles with
    ReconciliationMatcher, and writes the resulting matched flags back to
    bank_transactions.  The caller owns the transaction (session_scope).

Invariants enforced:
    - Only the matched flag is ever written; amounts are untouched.
    - An unknown transaction id fails before anything is written.
"""

from __future__ import annotations

from typing import Any, Sequence
from uuid import UUID

from sqlalchemy.orm import Session

from ledger_config import LedgerConfig, get_active_config
from ledger_engines.reconciliation import (
    ReconciliationMatcher,
    ReconciliationSummary,
    TransactionSet,
)
from ledger_kernel.logging_config import get_logger
from ledger_kernel.models.banking import BankTransactionModel
from ledger_kernel.selectors.banking_selector import BankingSelector

logger = get_logger("services.reconciliation")


class ReconciliationService:
    """Bank reconciliation over one client's bank accounts."""

    def __init__(
        self,
        session: Session,
        client_id: UUID,
        config: LedgerConfig | None = None,
    ) -> None:
        self._session = session
        self._config = config or get_active_config()
        self._selector = BankingSelector(session, client_id)
        self._matcher = ReconciliationMatcher(
            tolerance=self._config.reconciliation.tolerance,
        )

    def transaction_set(self, bank_account_id: UUID) -> TransactionSet:
        return TransactionSet.of(self._selector.transactions(bank_account_id))

    def toggle_match(self, bank_account_id: UUID, transaction_id: Any) -> TransactionSet:
        """Flip and persist the matched flag of one line.

        Raises:
            TransactionNotFoundError: the id is not a line of this account.
        """
        current = self.transaction_set(bank_account_id)
        updated = self._matcher.toggle_match(current, transaction_id)
        self._persist(current, updated)
        return updated

    def set_matched(
        self,
        bank_account_id: UUID,
        transaction_ids: Sequence[Any],
        matched: bool = True,
    ) -> TransactionSet:
        current = self.transaction_set(bank_account_id)
        updated = self._matcher.set_matched(current, transaction_ids, matched)
        self._persist(current, updated)
        return updated

    def summary(self, bank_account_id: UUID) -> ReconciliationSummary:
        return self._matcher.summarize(
            self.transaction_set(bank_account_id),
            statement_balance=self._selector.statement_balance(bank_account_id),
        )

    def _persist(self, before: TransactionSet, after: TransactionSet) -> None:
        changed = 0
        for old, new in zip(before, after):
            if old.matched == new.matched:
                continue
            row = self._session.get(BankTransactionModel, new.id)
            row.matched = new.matched
            changed += 1
        self._session.flush()
        logger.info(
            "reconciliation_matches_saved",
            extra={"changed_count": changed},
        )
