"""ORM models.  Importing this package registers every table on Base.metadata."""

from ledger_kernel.models.banking import BankAccountModel, BankTransactionModel
from ledger_kernel.models.currency import CurrencyRateModel
from ledger_kernel.models.customers import (
    CustomerModel,
    CustomerStatus,
    InvoiceModel,
    InvoiceStatus,
)
from ledger_kernel.models.inventory import InventoryItemModel, InventoryStockModel

__all__ = [
    "BankAccountModel",
    "BankTransactionModel",
    "CurrencyRateModel",
    "CustomerModel",
    "CustomerStatus",
    "InvoiceModel",
    "InvoiceStatus",
    "InventoryItemModel",
    "InventoryStockModel",
]
