"""
InventoryService -- low-stock detection and reorder suggestions for a client.

Architecture: ledger_services -- imperative shell.
    Reads items and per-location stock through InventorySelector and
    delegates to StockReorderAdvisor.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID

from sqlalchemy.orm import Session

from ledger_config import LedgerConfig, get_active_config
from ledger_engines.stock import ReorderSuggestion, StockReorderAdvisor, StockStatus
from ledger_kernel.domain.records import InventoryItem
from ledger_kernel.logging_config import get_logger
from ledger_kernel.selectors.inventory_selector import InventorySelector

logger = get_logger("services.inventory")


@dataclass(frozen=True)
class StockLevel:
    item: InventoryItem
    available: Decimal
    status: StockStatus


class InventoryService:
    """Replenishment views over one client's inventory."""

    def __init__(
        self,
        session: Session,
        client_id: UUID,
        config: LedgerConfig | None = None,
    ) -> None:
        self._config = config or get_active_config()
        self._selector = InventorySelector(session, client_id)
        self._advisor = StockReorderAdvisor(
            default_reorder_quantity=self._config.inventory.default_reorder_quantity,
        )

    def low_stock(self) -> list[InventoryItem]:
        return self._advisor.low_stock(self._selector.items(), self._selector.stock())

    def reorder_suggestions(self) -> list[ReorderSuggestion]:
        suggestions = self._advisor.reorder_suggestions(
            self._selector.items(), self._selector.stock()
        )
        logger.info(
            "reorder_suggestions_built",
            extra={"suggestion_count": len(suggestions)},
        )
        return suggestions

    def stock_levels(self) -> list[StockLevel]:
        items = self._selector.items()
        available = self._advisor.available_by_item(self._selector.stock())
        levels = []
        for item in items:
            quantity = available.get(str(item.item_id), Decimal("0"))
            levels.append(
                StockLevel(
                    item=item,
                    available=quantity,
                    status=self._advisor.stock_status(item, quantity),
                )
            )
        return levels
