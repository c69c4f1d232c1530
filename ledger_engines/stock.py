"""
Module: ledger_engines.stock
Responsibility:
    Find inventory items at or below their reorder level across all
    locations and suggest how much to reorder.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Available quantity of an item is the sum over its locations of
      (on hand - reserved).  An item with no stock records has 0 available.
    - Low stock is inclusive: available == reorder_level is low.
    - Items with reorder_level <= 0 are not tracked and are never low.
    - Output follows the order of the items passed in.
    - The suggested quantity is the item's reorder quantity, unchanged;
      the configured default applies only when the item has none.

Failure modes:
    - StockDataQualityError when any stock record has a negative on-hand or
      reserved quantity.  Raised before any evaluation.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Sequence

from ledger_kernel.domain.records import InventoryItem, StockRecord
from ledger_kernel.exceptions import DataQualityIssue, StockDataQualityError
from ledger_kernel.logging_config import get_logger
from ledger_engines.tracer import traced_engine

logger = get_logger("engines.stock")

DEFAULT_REORDER_QUANTITY = Decimal("100")


class StockStatus(str, Enum):
    IN_STOCK = "in_stock"
    LOW_STOCK = "low_stock"
    OUT_OF_STOCK = "out_of_stock"


@dataclass(frozen=True)
class ReorderSuggestion:
    """A low-stock item with the quantity to order."""

    item: InventoryItem
    current_stock: Decimal
    suggested_quantity: Decimal

    @property
    def shortfall(self) -> Decimal:
        """How far below the reorder level the item is (0 when exactly at it)."""
        return max(self.item.reorder_level - self.current_stock, Decimal("0"))

    def to_row(self) -> dict[str, Any]:
        return {
            "item_id": str(self.item.item_id),
            "item_code": self.item.item_code or "",
            "name": self.item.name,
            "current_stock": self.current_stock,
            "reorder_level": self.item.reorder_level,
            "suggested_quantity": self.suggested_quantity,
        }


def _item_key(item_id: Any) -> str:
    return str(item_id)


class StockReorderAdvisor:
    """
    Stock replenishment engine.

    Contract:
        Pure functions of items and stock records.
    """

    def __init__(self, default_reorder_quantity: Decimal = DEFAULT_REORDER_QUANTITY):
        self.default_reorder_quantity = Decimal(str(default_reorder_quantity))

    @staticmethod
    def validate(stock: Sequence[StockRecord]) -> tuple[DataQualityIssue, ...]:
        issues: list[DataQualityIssue] = []
        for rec in stock:
            record_id = f"{rec.item_id}@{rec.location_id}"
            if rec.quantity_on_hand < 0:
                issues.append(
                    DataQualityIssue(
                        record_id, "quantity_on_hand", "negative_quantity", str(rec.quantity_on_hand)
                    )
                )
            if rec.quantity_reserved < 0:
                issues.append(
                    DataQualityIssue(
                        record_id, "quantity_reserved", "negative_quantity", str(rec.quantity_reserved)
                    )
                )
        return tuple(issues)

    def available_by_item(self, stock: Sequence[StockRecord]) -> dict[str, Decimal]:
        """
        Available quantity per item id (as str) summed across locations.

        Raises:
            StockDataQualityError: negative on-hand or reserved quantities.
        """
        issues = self.validate(stock)
        if issues:
            logger.warning(
                "stock_data_quality_rejected",
                extra={"issue_count": len(issues), "record_count": len(stock)},
            )
            raise StockDataQualityError(issues)

        totals: dict[str, Decimal] = {}
        for rec in stock:
            key = _item_key(rec.item_id)
            totals[key] = totals.get(key, Decimal("0")) + rec.quantity_available
        return totals

    @traced_engine("stock_low", "1.0", fingerprint_fields=("items", "stock_by_location"))
    def low_stock(
        self,
        items: Sequence[InventoryItem],
        stock_by_location: Sequence[StockRecord],
    ) -> list[InventoryItem]:
        """Tracked items whose total available stock is at or below reorder level."""
        available = self.available_by_item(stock_by_location)
        low = [
            item
            for item in items
            if item.is_tracked
            and available.get(_item_key(item.item_id), Decimal("0")) <= item.reorder_level
        ]
        logger.info(
            "stock_low_evaluated",
            extra={"item_count": len(items), "low_stock_count": len(low)},
        )
        return low

    def suggest_reorder(self, item: InventoryItem, current_stock: Decimal) -> Decimal:
        """Quantity to order: the item's reorder quantity, or the default."""
        if item.reorder_quantity:
            return item.reorder_quantity
        return self.default_reorder_quantity

    @staticmethod
    def stock_status(item: InventoryItem, quantity: Decimal) -> StockStatus:
        if quantity <= 0:
            return StockStatus.OUT_OF_STOCK
        if item.is_tracked and quantity <= item.reorder_level:
            return StockStatus.LOW_STOCK
        return StockStatus.IN_STOCK

    def reorder_suggestions(
        self,
        items: Sequence[InventoryItem],
        stock_by_location: Sequence[StockRecord],
    ) -> list[ReorderSuggestion]:
        """One suggestion per low-stock item, in item order."""
        available = self.available_by_item(stock_by_location)
        suggestions = []
        for item in self.low_stock(items, stock_by_location):
            current = available.get(_item_key(item.item_id), Decimal("0"))
            suggestions.append(
                ReorderSuggestion(
                    item=item,
                    current_stock=current,
                    suggested_quantity=self.suggest_reorder(item, current),
                )
            )
        return suggestions
