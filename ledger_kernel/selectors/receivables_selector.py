"""
Receivables query selector.

Reads customer credit profiles and open invoice balances for one client.
An invoice is open when its status is sent, partial or overdue; its balance
is total_amount minus amount_paid.  Invoices are returned in invoice-number
order so aging rows come out in a stable order.
"""

from sqlalchemy import select

from ledger_kernel.domain.records import CustomerCreditProfile, InvoiceBalance
from ledger_kernel.models.customers import (
    OPEN_INVOICE_STATUSES,
    CustomerModel,
    CustomerStatus,
    InvoiceModel,
)
from ledger_kernel.selectors.base import BaseSelector


class ReceivablesSelector(BaseSelector[CustomerModel]):
    """Selector for customer credit and receivables queries."""

    def credit_profiles(self, include_inactive: bool = False) -> list[CustomerCreditProfile]:
        """Credit profile of every customer, ordered by customer code."""
        stmt = (
            select(CustomerModel)
            .where(CustomerModel.client_id == self.client_id)
            .order_by(CustomerModel.customer_code)
        )
        if not include_inactive:
            stmt = stmt.where(CustomerModel.status != CustomerStatus.INACTIVE.value)
        return [self._to_profile(c) for c in self.session.scalars(stmt)]

    def credit_profile(self, customer_id) -> CustomerCreditProfile | None:
        customer = self.session.scalars(
            select(CustomerModel).where(
                CustomerModel.client_id == self.client_id,
                CustomerModel.id == customer_id,
            )
        ).one_or_none()
        return self._to_profile(customer) if customer is not None else None

    def open_invoices(self, currency: str | None = None) -> list[InvoiceBalance]:
        """Open invoice balances, optionally limited to one currency."""
        stmt = (
            select(InvoiceModel, CustomerModel.name)
            .join(CustomerModel, InvoiceModel.customer_id == CustomerModel.id)
            .where(
                InvoiceModel.client_id == self.client_id,
                InvoiceModel.status.in_(OPEN_INVOICE_STATUSES),
            )
            .order_by(InvoiceModel.invoice_number)
        )
        if currency is not None:
            stmt = stmt.where(InvoiceModel.currency == currency.upper())

        return [
            InvoiceBalance(
                customer_id=invoice.customer_id,
                amount=invoice.balance_due,
                due_date=invoice.due_date,
                issue_date=invoice.issue_date,
                invoice_id=invoice.id,
                customer_name=customer_name,
                currency=invoice.currency,
            )
            for invoice, customer_name in self.session.execute(stmt)
        ]

    @staticmethod
    def _to_profile(customer: CustomerModel) -> CustomerCreditProfile:
        return CustomerCreditProfile(
            customer_id=customer.id,
            credit_limit=customer.credit_limit,
            current_balance=customer.current_balance,
            name=customer.name,
            status=customer.status,
            payment_terms_days=customer.payment_terms_days,
        )
