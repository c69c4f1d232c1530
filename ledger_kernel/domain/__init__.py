"""Pure domain layer: records, Money, currency registry and clock."""

from ledger_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from ledger_kernel.domain.currency import CurrencyInfo, CurrencyRegistry
from ledger_kernel.domain.records import (
    CurrencyRate,
    CustomerCreditProfile,
    InventoryItem,
    InvoiceBalance,
    ReconciliationTransaction,
    StockRecord,
)
from ledger_kernel.domain.values import Money, normalize_currency_code, to_decimal

__all__ = [
    "Clock",
    "SystemClock",
    "DeterministicClock",
    "CurrencyInfo",
    "CurrencyRegistry",
    "CurrencyRate",
    "CustomerCreditProfile",
    "InventoryItem",
    "InvoiceBalance",
    "ReconciliationTransaction",
    "StockRecord",
    "Money",
    "normalize_currency_code",
    "to_decimal",
]
