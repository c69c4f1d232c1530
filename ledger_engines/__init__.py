"""
Module: ledger_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    calculation engines.  This is the canonical import surface for
    ledger_services.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import ledger_kernel domain, exceptions and logging.
    MUST NOT import ledger_services or ledger_config.

Invariants enforced:
    - Purity: engines never call ``datetime.now()`` or ``date.today()``.
      Reference dates are explicit parameters supplied by services.
    - Decimal-only arithmetic for money and quantities.
    - Determinism: identical inputs always produce identical outputs.

Audit relevance:
    Engine entry points are traced via ``@traced_engine``, emitting
    LEDGER_ENGINE_TRACE log records with engine name, version, input
    fingerprint and duration.
"""

from ledger_engines.aging import (
    STANDARD_BUCKETS,
    AgeBucket,
    AgingBucketer,
    AgingReport,
    AgingRow,
)
from ledger_engines.credit import CreditEvaluation, CreditEvaluator, CreditStatus
from ledger_engines.currency import CurrencyConverter, RateTable
from ledger_engines.depreciation import (
    FixedAsset,
    FixedAssetRegister,
    StraightLineDepreciation,
)
from ledger_engines.ratios import (
    STANDARD_RATIOS,
    FinancialFigures,
    FinancialRatioCalculator,
    RatioCategory,
    RatioReport,
    RatioStatus,
)
from ledger_engines.reconciliation import (
    ReconciliationMatcher,
    ReconciliationSummary,
    TransactionSet,
)
from ledger_engines.stock import ReorderSuggestion, StockReorderAdvisor, StockStatus
from ledger_engines.tracer import traced_engine

__all__ = [
    # Aging
    "AgeBucket",
    "AgingBucketer",
    "AgingReport",
    "AgingRow",
    "STANDARD_BUCKETS",
    # Credit
    "CreditEvaluation",
    "CreditEvaluator",
    "CreditStatus",
    # Currency
    "CurrencyConverter",
    "RateTable",
    # Depreciation
    "FixedAsset",
    "FixedAssetRegister",
    "StraightLineDepreciation",
    # Ratios
    "FinancialFigures",
    "FinancialRatioCalculator",
    "RatioCategory",
    "RatioReport",
    "RatioStatus",
    "STANDARD_RATIOS",
    # Reconciliation
    "ReconciliationMatcher",
    "ReconciliationSummary",
    "TransactionSet",
    # Stock
    "ReorderSuggestion",
    "StockReorderAdvisor",
    "StockStatus",
    # Tracing
    "traced_engine",
]
