"""
Module: ledger_engines.ratios
Responsibility:
    Compute the financial ratio report (liquidity, profitability, solvency,
    efficiency) from statement figures and rate each ratio against its
    threshold bands.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Decimal-only arithmetic.
    - A ratio whose denominator is zero has no value and is rated "n/a"
      instead of raising.
    - Ratings are inclusive at band edges (a current ratio of exactly 2 is
      excellent).

Failure modes:
    - ValueError for threshold overrides naming an unknown ratio.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal
from enum import Enum
from typing import Any, Mapping, Sequence

from ledger_kernel.domain.values import to_decimal
from ledger_kernel.logging_config import get_logger
from ledger_engines.tracer import traced_engine

logger = get_logger("engines.ratios")


class RatioCategory(str, Enum):
    LIQUIDITY = "liquidity"
    PROFITABILITY = "profitability"
    SOLVENCY = "solvency"
    EFFICIENCY = "efficiency"


class RatioStatus(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"
    NOT_AVAILABLE = "n/a"


@dataclass(frozen=True)
class FinancialFigures:
    """Balance sheet and income statement figures for one period."""

    cash: Decimal
    current_assets: Decimal
    inventory: Decimal
    accounts_receivable: Decimal
    total_assets: Decimal
    current_liabilities: Decimal
    accounts_payable: Decimal
    total_liabilities: Decimal
    total_equity: Decimal
    revenue: Decimal
    cost_of_goods_sold: Decimal
    operating_income: Decimal
    net_income: Decimal
    interest_expense: Decimal
    gross_profit: Decimal | None = None

    def __post_init__(self) -> None:
        for name in self.__dataclass_fields__:
            value = getattr(self, name)
            if value is not None:
                object.__setattr__(self, name, to_decimal(value, field=name))
        if self.gross_profit is None:
            object.__setattr__(self, "gross_profit", self.revenue - self.cost_of_goods_sold)

    @property
    def quick_assets(self) -> Decimal:
        return self.current_assets - self.inventory


@dataclass(frozen=True)
class RatioDefinition:
    """
    How one ratio is computed and rated.

    ``value = numerator / denominator * multiplier``.  With
    ``higher_is_better`` a value at or above a threshold earns that band;
    otherwise a value at or below it does.  ``excellent`` may be None for
    ratios with no excellent band.
    """

    key: str
    name: str
    category: RatioCategory
    numerator: str
    denominator: str
    formula: str
    good: Decimal
    fair: Decimal
    excellent: Decimal | None = None
    higher_is_better: bool = True
    multiplier: Decimal = Decimal("1")

    def _meets(self, value: Decimal, threshold: Decimal) -> bool:
        return value >= threshold if self.higher_is_better else value <= threshold

    def rate(self, value: Decimal | None) -> RatioStatus:
        if value is None:
            return RatioStatus.NOT_AVAILABLE
        if self.excellent is not None and self._meets(value, self.excellent):
            return RatioStatus.EXCELLENT
        if self._meets(value, self.good):
            return RatioStatus.GOOD
        if self._meets(value, self.fair):
            return RatioStatus.FAIR
        return RatioStatus.POOR


def _d(value: str) -> Decimal:
    return Decimal(value)


_PCT = Decimal("100")

STANDARD_RATIOS: tuple[RatioDefinition, ...] = (
    # Liquidity
    RatioDefinition("current_ratio", "Current Ratio", RatioCategory.LIQUIDITY,
                    "current_assets", "current_liabilities",
                    "Current Assets / Current Liabilities",
                    excellent=_d("2"), good=_d("1.5"), fair=_d("1")),
    RatioDefinition("quick_ratio", "Quick Ratio", RatioCategory.LIQUIDITY,
                    "quick_assets", "current_liabilities",
                    "(Current Assets - Inventory) / Current Liabilities",
                    excellent=_d("1.5"), good=_d("1"), fair=_d("0.8")),
    RatioDefinition("cash_ratio", "Cash Ratio", RatioCategory.LIQUIDITY,
                    "cash", "current_liabilities",
                    "Cash / Current Liabilities",
                    excellent=_d("0.5"), good=_d("0.2"), fair=_d("0.1")),
    # Profitability
    RatioDefinition("gross_margin", "Gross Profit Margin", RatioCategory.PROFITABILITY,
                    "gross_profit", "revenue",
                    "(Gross Profit / Revenue) x 100",
                    excellent=_d("40"), good=_d("25"), fair=_d("15"), multiplier=_PCT),
    RatioDefinition("net_margin", "Net Profit Margin", RatioCategory.PROFITABILITY,
                    "net_income", "revenue",
                    "(Net Income / Revenue) x 100",
                    excellent=_d("20"), good=_d("10"), fair=_d("5"), multiplier=_PCT),
    RatioDefinition("return_on_assets", "Return on Assets", RatioCategory.PROFITABILITY,
                    "net_income", "total_assets",
                    "(Net Income / Total Assets) x 100",
                    excellent=_d("15"), good=_d("8"), fair=_d("3"), multiplier=_PCT),
    RatioDefinition("return_on_equity", "Return on Equity", RatioCategory.PROFITABILITY,
                    "net_income", "total_equity",
                    "(Net Income / Total Equity) x 100",
                    excellent=_d("20"), good=_d("12"), fair=_d("6"), multiplier=_PCT),
    RatioDefinition("operating_margin", "Operating Margin", RatioCategory.PROFITABILITY,
                    "operating_income", "revenue",
                    "(Operating Income / Revenue) x 100",
                    excellent=_d("25"), good=_d("15"), fair=_d("8"), multiplier=_PCT),
    # Solvency
    RatioDefinition("debt_to_equity", "Debt-to-Equity Ratio", RatioCategory.SOLVENCY,
                    "total_liabilities", "total_equity",
                    "Total Liabilities / Total Equity",
                    excellent=_d("0.3"), good=_d("0.6"), fair=_d("1"), higher_is_better=False),
    RatioDefinition("debt_ratio", "Debt Ratio", RatioCategory.SOLVENCY,
                    "total_liabilities", "total_assets",
                    "(Total Liabilities / Total Assets) x 100",
                    excellent=_d("30"), good=_d("50"), fair=_d("70"),
                    higher_is_better=False, multiplier=_PCT),
    RatioDefinition("interest_coverage", "Interest Coverage Ratio", RatioCategory.SOLVENCY,
                    "operating_income", "interest_expense",
                    "Operating Income / Interest Expense",
                    excellent=_d("8"), good=_d("4"), fair=_d("2")),
    RatioDefinition("equity_ratio", "Equity Ratio", RatioCategory.SOLVENCY,
                    "total_equity", "total_assets",
                    "(Total Equity / Total Assets) x 100",
                    excellent=_d("70"), good=_d("50"), fair=_d("30"), multiplier=_PCT),
    # Efficiency
    RatioDefinition("inventory_turnover", "Inventory Turnover", RatioCategory.EFFICIENCY,
                    "cost_of_goods_sold", "inventory",
                    "Cost of Goods Sold / Average Inventory",
                    excellent=_d("6"), good=_d("4"), fair=_d("2")),
    RatioDefinition("receivables_turnover", "Accounts Receivable Turnover", RatioCategory.EFFICIENCY,
                    "revenue", "accounts_receivable",
                    "Revenue / Average Accounts Receivable",
                    excellent=_d("10"), good=_d("6"), fair=_d("4")),
    RatioDefinition("payables_turnover", "Accounts Payable Turnover", RatioCategory.EFFICIENCY,
                    "cost_of_goods_sold", "accounts_payable",
                    "Cost of Goods Sold / Average Accounts Payable",
                    good=_d("8"), fair=_d("4")),
    RatioDefinition("asset_turnover", "Asset Turnover", RatioCategory.EFFICIENCY,
                    "revenue", "total_assets",
                    "Revenue / Total Assets",
                    excellent=_d("2"), good=_d("1"), fair=_d("0.5")),
    RatioDefinition("days_sales_outstanding", "Days Sales Outstanding", RatioCategory.EFFICIENCY,
                    "accounts_receivable", "revenue",
                    "(Accounts Receivable / Revenue) x 365",
                    excellent=_d("30"), good=_d("45"), fair=_d("60"),
                    higher_is_better=False, multiplier=_d("365")),
)


@dataclass(frozen=True)
class RatioResult:
    key: str
    name: str
    category: RatioCategory
    value: Decimal | None
    formula: str
    status: RatioStatus

    def to_row(self) -> dict[str, Any]:
        return {
            "category": self.category.value,
            "name": self.name,
            "value": self.value,
            "status": self.status.value,
            "formula": self.formula,
        }


@dataclass(frozen=True)
class RatioReport:
    results: tuple[RatioResult, ...]

    def by_category(self, category: RatioCategory) -> tuple[RatioResult, ...]:
        return tuple(r for r in self.results if r.category == category)

    def get(self, key: str) -> RatioResult:
        for result in self.results:
            if result.key == key:
                return result
        raise KeyError(key)

    def to_rows(self) -> list[dict[str, Any]]:
        return [r.to_row() for r in self.results]


def apply_threshold_overrides(
    definitions: Sequence[RatioDefinition],
    overrides: Mapping[str, Mapping[str, Decimal | None]],
) -> tuple[RatioDefinition, ...]:
    """Replace excellent/good/fair thresholds by ratio key."""
    known = {d.key for d in definitions}
    unknown = set(overrides) - known
    if unknown:
        raise ValueError(f"Unknown ratio keys in threshold overrides: {sorted(unknown)}")
    return tuple(
        replace(d, **dict(overrides[d.key])) if d.key in overrides else d
        for d in definitions
    )


class FinancialRatioCalculator:
    """Computes and rates every configured ratio."""

    def __init__(self, definitions: Sequence[RatioDefinition] = STANDARD_RATIOS):
        self.definitions = tuple(definitions)

    @staticmethod
    def compute(definition: RatioDefinition, figures: FinancialFigures) -> Decimal | None:
        denominator = getattr(figures, definition.denominator)
        if denominator == 0:
            return None
        numerator = getattr(figures, definition.numerator)
        return numerator / denominator * definition.multiplier

    @traced_engine("ratios", "1.0", fingerprint_fields=("figures",))
    def calculate(self, figures: FinancialFigures) -> RatioReport:
        results = []
        for definition in self.definitions:
            value = self.compute(definition, figures)
            results.append(
                RatioResult(
                    key=definition.key,
                    name=definition.name,
                    category=definition.category,
                    value=value,
                    formula=definition.formula,
                    status=definition.rate(value),
                )
            )
        unavailable = sum(1 for r in results if r.value is None)
        if unavailable:
            logger.warning(
                "ratios_unavailable",
                extra={"unavailable_count": unavailable},
            )
        return RatioReport(results=tuple(results))
