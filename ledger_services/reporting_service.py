"""
ReportingService -- financial ratios and the fixed asset register.

Architecture: ledger_services -- imperative shell.
    Statement figures and asset lists come from the caller; this service
    applies the configured ratio thresholds and the clock-derived
    register date, then delegates to the engines.
"""

from __future__ import annotations

from datetime import date
from typing import Sequence

from ledger_config import LedgerConfig, get_active_config
from ledger_engines.depreciation import (
    FixedAsset,
    FixedAssetRegister,
    StraightLineDepreciation,
)
from ledger_engines.ratios import (
    STANDARD_RATIOS,
    FinancialFigures,
    FinancialRatioCalculator,
    RatioReport,
    apply_threshold_overrides,
)
from ledger_kernel.domain.clock import Clock, SystemClock
from ledger_kernel.logging_config import get_logger

logger = get_logger("services.reporting")


class ReportingService:
    def __init__(
        self,
        config: LedgerConfig | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._config = config or get_active_config()
        self._clock = clock or SystemClock()
        overrides = {
            key: thresholds.as_overrides()
            for key, thresholds in self._config.ratio_thresholds.items()
        }
        self._ratios = FinancialRatioCalculator(
            apply_threshold_overrides(STANDARD_RATIOS, overrides)
        )
        self._depreciation = StraightLineDepreciation()
        if overrides:
            logger.info(
                "ratio_thresholds_overridden",
                extra={"ratio_keys": sorted(overrides)},
            )

    def ratio_report(self, figures: FinancialFigures) -> RatioReport:
        return self._ratios.calculate(figures)

    def asset_register(
        self,
        assets: Sequence[FixedAsset],
        as_of: date | None = None,
        accrue: bool = True,
    ) -> FixedAssetRegister:
        """Register as of ``as_of`` (default: today).

        With ``accrue=False`` the accumulated depreciation recorded on each
        asset is used as-is.
        """
        if not accrue:
            return self._depreciation.register(assets)
        return self._depreciation.register(assets, as_of or self._clock.today())
