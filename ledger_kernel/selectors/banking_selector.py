"""Banking query selector: reconciliation lines of one bank account."""

from decimal import Decimal

from sqlalchemy import select

from ledger_kernel.domain.records import ReconciliationTransaction
from ledger_kernel.models.banking import BankAccountModel, BankTransactionModel
from ledger_kernel.selectors.base import BaseSelector


class BankingSelector(BaseSelector[BankTransactionModel]):
    """Selector for bank accounts and their transactions."""

    def statement_balance(self, bank_account_id) -> Decimal | None:
        """Closing balance of the latest statement, when one was recorded."""
        return self.session.scalars(
            select(BankAccountModel.statement_balance).where(
                BankAccountModel.client_id == self.client_id,
                BankAccountModel.id == bank_account_id,
            )
        ).one_or_none()

    def transactions(self, bank_account_id) -> list[ReconciliationTransaction]:
        """Transactions of a bank account in display order."""
        stmt = (
            select(BankTransactionModel)
            .where(
                BankTransactionModel.client_id == self.client_id,
                BankTransactionModel.bank_account_id == bank_account_id,
            )
            .order_by(BankTransactionModel.position, BankTransactionModel.transaction_date)
        )
        return [
            ReconciliationTransaction(
                id=row.id,
                date=row.transaction_date,
                description=row.description,
                bank_amount=row.bank_amount,
                book_amount=row.book_amount,
                matched=row.matched,
                reference=row.reference,
            )
            for row in self.session.scalars(stmt)
        ]
