"""Read-only selectors returning domain records, never ORM rows."""

from ledger_kernel.selectors.banking_selector import BankingSelector
from ledger_kernel.selectors.base import BaseSelector
from ledger_kernel.selectors.currency_selector import CurrencySelector
from ledger_kernel.selectors.inventory_selector import InventorySelector
from ledger_kernel.selectors.receivables_selector import ReceivablesSelector

__all__ = [
    "BaseSelector",
    "BankingSelector",
    "CurrencySelector",
    "InventorySelector",
    "ReceivablesSelector",
]
