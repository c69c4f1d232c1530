"""
Configuration Loader (``ledger_config.loader``).

Responsibility
--------------
Loads the YAML configuration file and parses it into the frozen
``ledger_config.schema`` dataclasses.  The single public entry point for
runtime config is ``ledger_config.get_active_config()``.

Invariants enforced
-------------------
* Every parsed object is a frozen dataclass from ``schema.py``.
* Money and quantity thresholds are parsed to Decimal through ``str`` so
  YAML floats never leak binary noise.
* Aging buckets must start at day 0, be contiguous and end unbounded.
* ``compute_checksum`` produces a deterministic SHA-256 hash of the parsed
  YAML for configuration identity.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing keys or invalid values  -> ``ConfigError`` naming the key.
"""

from __future__ import annotations

import hashlib
import json
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from ledger_engines.aging import AgeBucket, validate_buckets
from ledger_engines.ratios import STANDARD_RATIOS
from ledger_kernel.exceptions import ConfigError
from ledger_config.schema import (
    AgingBucketDef,
    AgingConfig,
    CreditConfig,
    CurrencyFormatConfig,
    InventoryConfig,
    LedgerConfig,
    RatioThresholds,
    ReconciliationConfig,
)

_ON_INVALID_CHOICES = ("raise", "exclude")


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a single YAML file and return its contents as a dict."""
    with open(path) as f:
        return yaml.safe_load(f) or {}


def parse_decimal(value: Any, key: str) -> Decimal:
    if isinstance(value, bool) or value is None:
        raise ConfigError(f"{key} must be a number, got {value!r}", key=key)
    try:
        result = Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise ConfigError(f"{key} must be a number, got {value!r}", key=key) from e
    if not result.is_finite():
        raise ConfigError(f"{key} must be finite, got {value!r}", key=key)
    return result


def parse_int(value: Any, key: str) -> int:
    if isinstance(value, bool) or value is None:
        raise ConfigError(f"{key} must be an integer, got {value!r}", key=key)
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{key} must be an integer, got {value!r}", key=key) from e


def parse_bool(value: Any, key: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(f"{key} must be true or false, got {value!r}", key=key)
    return value


def _require(data: dict[str, Any], key: str, section: str) -> Any:
    if key not in data:
        raise ConfigError(f"Missing required key: {section}.{key}", key=f"{section}.{key}")
    return data[key]


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    value = data.get(name) or {}
    if not isinstance(value, dict):
        raise ConfigError(f"Section {name} must be a mapping", key=name)
    return value


def parse_aging(data: dict[str, Any]) -> AgingConfig:
    raw_buckets = _require(data, "buckets", "aging")
    if not isinstance(raw_buckets, list):
        raise ConfigError("aging.buckets must be a list", key="aging.buckets")

    buckets = []
    for i, raw in enumerate(raw_buckets):
        section = f"aging.buckets[{i}]"
        buckets.append(
            AgingBucketDef(
                key=str(_require(raw, "key", section)),
                label=str(raw.get("label", raw["key"])),
                min_days=parse_int(_require(raw, "min_days", section), f"{section}.min_days"),
                max_days=(
                    None
                    if raw.get("max_days") is None
                    else parse_int(raw["max_days"], f"{section}.max_days")
                ),
            )
        )
    try:
        validate_buckets(
            [AgeBucket(b.key, b.label, b.min_days, b.max_days) for b in buckets]
        )
    except ValueError as e:
        raise ConfigError(str(e), key="aging.buckets") from e

    on_invalid = data.get("on_invalid", "raise")
    if on_invalid not in _ON_INVALID_CHOICES:
        raise ConfigError(
            f"aging.on_invalid must be one of {_ON_INVALID_CHOICES}, got {on_invalid!r}",
            key="aging.on_invalid",
        )
    return AgingConfig(buckets=tuple(buckets), on_invalid=on_invalid)


def parse_ratio_thresholds(data: dict[str, Any]) -> dict[str, RatioThresholds]:
    known = {d.key for d in STANDARD_RATIOS}
    result: dict[str, RatioThresholds] = {}
    for key, raw in data.items():
        if key not in known:
            raise ConfigError(f"Unknown ratio: {key}", key=f"ratios.{key}")
        section = f"ratios.{key}"
        excellent = raw.get("excellent")
        result[key] = RatioThresholds(
            good=parse_decimal(_require(raw, "good", section), f"{section}.good"),
            fair=parse_decimal(_require(raw, "fair", section), f"{section}.fair"),
            excellent=(
                None if excellent is None else parse_decimal(excellent, f"{section}.excellent")
            ),
        )
    return result


def parse_config(data: dict[str, Any], checksum: str = "") -> LedgerConfig:
    """Parse the top-level configuration mapping."""
    credit = _section(data, "credit")
    reconciliation = _section(data, "reconciliation")
    inventory = _section(data, "inventory")
    currency = _section(data, "currency")

    default_reorder = parse_decimal(
        inventory.get("default_reorder_quantity", "100"),
        "inventory.default_reorder_quantity",
    )
    if default_reorder <= 0:
        raise ConfigError(
            "inventory.default_reorder_quantity must be positive",
            key="inventory.default_reorder_quantity",
        )
    tolerance = parse_decimal(
        reconciliation.get("tolerance", "0.01"), "reconciliation.tolerance"
    )
    if tolerance < 0:
        raise ConfigError(
            "reconciliation.tolerance cannot be negative", key="reconciliation.tolerance"
        )

    return LedgerConfig(
        config_id=str(_require(data, "config_id", "root")),
        version=parse_int(data.get("version", 1), "version"),
        aging=parse_aging(_section(data, "aging")),
        credit=CreditConfig(
            near_limit_threshold=parse_decimal(
                credit.get("near_limit_threshold", "1000"), "credit.near_limit_threshold"
            ),
        ),
        reconciliation=ReconciliationConfig(tolerance=tolerance),
        inventory=InventoryConfig(default_reorder_quantity=default_reorder),
        currency=CurrencyFormatConfig(
            use_iso_minor_units=parse_bool(
                currency.get("use_iso_minor_units", False), "currency.use_iso_minor_units"
            ),
            default_symbol=str(currency.get("default_symbol", "$")),
        ),
        ratio_thresholds=parse_ratio_thresholds(_section(data, "ratios")),
        checksum=checksum,
    )


def compute_checksum(data: dict[str, Any]) -> str:
    """SHA-256 checksum of the canonical JSON serialization."""
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()


def load_config(path: Path) -> LedgerConfig:
    data = load_yaml_file(path)
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration root must be a mapping: {path}")
    return parse_config(data, checksum=compute_checksum(data))
