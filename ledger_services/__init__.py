"""
Ledger Services -- imperative shell around the pure engines.

Services own the Session, the Clock and the configuration; they read
records through selectors, call the engines, and persist operator
decisions (the reconciliation matched flag) back to the database.
"""

from ledger_services.currency_service import CurrencyService
from ledger_services.inventory_service import InventoryService
from ledger_services.receivables_service import CustomerCreditLine, ReceivablesService
from ledger_services.reconciliation_service import ReconciliationService
from ledger_services.reporting_service import ReportingService

__all__ = [
    "CurrencyService",
    "CustomerCreditLine",
    "InventoryService",
    "ReceivablesService",
    "ReconciliationService",
    "ReportingService",
]
