"""
Module: ledger_engines.depreciation
Responsibility:
    Straight-line depreciation for the fixed asset register: annual charge,
    accumulated depreciation as of a date, net book value and register
    totals.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - annual_depreciation = (cost - salvage_value) / useful_life_years.
    - Accumulated depreciation accrues per whole elapsed month and never
      exceeds the depreciable amount.
    - net_book_value = cost - accumulated_depreciation.

Failure modes:
    - ValueError for a non-positive useful life or a negative cost.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Sequence

from ledger_kernel.domain.values import to_decimal
from ledger_kernel.logging_config import get_logger
from ledger_engines.tracer import traced_engine

logger = get_logger("engines.depreciation")

_MONTHS_PER_YEAR = Decimal("12")


@dataclass(frozen=True)
class FixedAsset:
    """A depreciable asset as recorded in the register."""

    asset_id: str
    description: str
    acquisition_date: date
    cost: Decimal
    useful_life_years: int
    accumulated_depreciation: Decimal = Decimal("0")
    salvage_value: Decimal = Decimal("0")
    category: str = ""
    location: str = ""

    def __post_init__(self) -> None:
        for name in ("cost", "accumulated_depreciation", "salvage_value"):
            object.__setattr__(self, name, to_decimal(getattr(self, name), field=name))
        if self.useful_life_years <= 0:
            raise ValueError(f"useful_life_years must be positive, got {self.useful_life_years}")
        if self.cost < 0:
            raise ValueError(f"cost cannot be negative, got {self.cost}")

    @property
    def depreciable_amount(self) -> Decimal:
        return self.cost - self.salvage_value


@dataclass(frozen=True)
class RegisterLine:
    asset: FixedAsset
    annual_depreciation: Decimal
    accumulated_depreciation: Decimal
    net_book_value: Decimal
    depreciation_rate: Decimal | None  # percent of cost already depreciated

    def to_row(self) -> dict[str, Any]:
        return {
            "asset_id": self.asset.asset_id,
            "description": self.asset.description,
            "category": self.asset.category,
            "acquisition_date": self.asset.acquisition_date,
            "cost": self.asset.cost,
            "useful_life_years": self.asset.useful_life_years,
            "annual_depreciation": self.annual_depreciation,
            "accumulated_depreciation": self.accumulated_depreciation,
            "net_book_value": self.net_book_value,
        }


@dataclass(frozen=True)
class FixedAssetRegister:
    lines: tuple[RegisterLine, ...]
    as_of: date | None = None

    @property
    def total_cost(self) -> Decimal:
        return sum((ln.asset.cost for ln in self.lines), Decimal("0"))

    @property
    def total_accumulated_depreciation(self) -> Decimal:
        return sum((ln.accumulated_depreciation for ln in self.lines), Decimal("0"))

    @property
    def total_net_book_value(self) -> Decimal:
        return sum((ln.net_book_value for ln in self.lines), Decimal("0"))

    @property
    def total_annual_depreciation(self) -> Decimal:
        return sum((ln.annual_depreciation for ln in self.lines), Decimal("0"))

    def to_rows(self) -> list[dict[str, Any]]:
        return [ln.to_row() for ln in self.lines]


def elapsed_months(start: date, end: date) -> int:
    """Whole calendar months from start to end; 0 when end precedes start."""
    months = (end.year - start.year) * 12 + (end.month - start.month)
    if end.day < start.day:
        months -= 1
    return max(months, 0)


class StraightLineDepreciation:
    """Straight-line depreciation engine."""

    @staticmethod
    def annual_depreciation(asset: FixedAsset) -> Decimal:
        return asset.depreciable_amount / Decimal(asset.useful_life_years)

    def accumulated_as_of(self, asset: FixedAsset, as_of: date) -> Decimal:
        months = elapsed_months(asset.acquisition_date, as_of)
        accrued = self.annual_depreciation(asset) / _MONTHS_PER_YEAR * months
        return min(accrued, asset.depreciable_amount)

    @staticmethod
    def depreciation_rate(asset: FixedAsset, accumulated: Decimal) -> Decimal | None:
        if asset.cost == 0:
            return None
        return accumulated / asset.cost * Decimal("100")

    def line(self, asset: FixedAsset, as_of: date | None = None) -> RegisterLine:
        """Register line using the recorded accumulated depreciation, or the
        one accrued up to ``as_of`` when given."""
        accumulated = (
            asset.accumulated_depreciation
            if as_of is None
            else self.accumulated_as_of(asset, as_of)
        )
        return RegisterLine(
            asset=asset,
            annual_depreciation=self.annual_depreciation(asset),
            accumulated_depreciation=accumulated,
            net_book_value=asset.cost - accumulated,
            depreciation_rate=self.depreciation_rate(asset, accumulated),
        )

    @traced_engine("depreciation", "1.0", fingerprint_fields=("assets", "as_of"))
    def register(
        self,
        assets: Sequence[FixedAsset],
        as_of: date | None = None,
    ) -> FixedAssetRegister:
        register = FixedAssetRegister(
            lines=tuple(self.line(a, as_of) for a in assets),
            as_of=as_of,
        )
        logger.info(
            "fixed_asset_register_built",
            extra={
                "asset_count": len(register.lines),
                "total_net_book_value": register.total_net_book_value,
            },
        )
        return register
