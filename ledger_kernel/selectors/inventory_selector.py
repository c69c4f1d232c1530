"""Inventory query selector: active items and per-location stock."""

from sqlalchemy import select

from ledger_kernel.domain.records import InventoryItem, StockRecord
from ledger_kernel.models.inventory import InventoryItemModel, InventoryStockModel
from ledger_kernel.selectors.base import BaseSelector


class InventorySelector(BaseSelector[InventoryItemModel]):
    """Selector for inventory items and stock levels."""

    def items(self, include_inactive: bool = False) -> list[InventoryItem]:
        stmt = (
            select(InventoryItemModel)
            .where(InventoryItemModel.client_id == self.client_id)
            .order_by(InventoryItemModel.item_code)
        )
        if not include_inactive:
            stmt = stmt.where(InventoryItemModel.active.is_(True))
        return [
            InventoryItem(
                item_id=item.id,
                name=item.name,
                reorder_level=item.reorder_level,
                reorder_quantity=item.reorder_quantity,
                item_code=item.item_code,
                cost_price=item.cost_price,
                unit_of_measure=item.unit_of_measure,
            )
            for item in self.session.scalars(stmt)
        ]

    def stock(self) -> list[StockRecord]:
        stmt = (
            select(InventoryStockModel)
            .where(InventoryStockModel.client_id == self.client_id)
            .order_by(InventoryStockModel.item_id, InventoryStockModel.location_id)
        )
        return [
            StockRecord(
                item_id=row.item_id,
                location_id=row.location_id,
                quantity_on_hand=row.quantity_on_hand,
                quantity_reserved=row.quantity_reserved,
            )
            for row in self.session.scalars(stmt)
        ]
