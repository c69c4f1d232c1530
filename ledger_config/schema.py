"""
Ledger configuration schema.

Frozen dataclasses the YAML configuration is parsed into.  Engines never
see these types; services translate them into engine constructor
arguments.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal


@dataclass(frozen=True)
class AgingBucketDef:
    key: str
    label: str
    min_days: int
    max_days: int | None = None


@dataclass(frozen=True)
class AgingConfig:
    buckets: tuple[AgingBucketDef, ...]
    on_invalid: str = "raise"  # raise | exclude


@dataclass(frozen=True)
class CreditConfig:
    near_limit_threshold: Decimal = Decimal("1000")


@dataclass(frozen=True)
class ReconciliationConfig:
    tolerance: Decimal = Decimal("0.01")


@dataclass(frozen=True)
class InventoryConfig:
    default_reorder_quantity: Decimal = Decimal("100")


@dataclass(frozen=True)
class CurrencyFormatConfig:
    use_iso_minor_units: bool = False
    default_symbol: str = "$"


@dataclass(frozen=True)
class RatioThresholds:
    """Band thresholds for one ratio.  ``excellent`` None drops that band."""

    good: Decimal
    fair: Decimal
    excellent: Decimal | None = None

    def as_overrides(self) -> dict[str, Decimal | None]:
        return {"excellent": self.excellent, "good": self.good, "fair": self.fair}


@dataclass(frozen=True)
class LedgerConfig:
    """The parsed, validated configuration.  ``checksum`` identifies the source."""

    config_id: str
    version: int
    aging: AgingConfig
    credit: CreditConfig
    reconciliation: ReconciliationConfig
    inventory: InventoryConfig
    currency: CurrencyFormatConfig
    ratio_thresholds: dict[str, RatioThresholds] = field(default_factory=dict)
    checksum: str = ""
