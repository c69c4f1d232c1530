"""Tests for InventoryService over seeded items and stock."""

from decimal import Decimal

import pytest

from ledger_config.schema import InventoryConfig
from ledger_engines.stock import StockStatus
from ledger_services import InventoryService


@pytest.fixture
def service(db_session, seeded, ledger_config):
    return InventoryService(db_session, seeded.client_id, config=ledger_config)


class TestInventoryService:
    def test_low_stock(self, service):
        assert [i.item_code for i in service.low_stock()] == ["SKU-001"]

    def test_reorder_suggestion_uses_item_quantity(self, service):
        suggestions = service.reorder_suggestions()
        assert len(suggestions) == 1
        assert suggestions[0].current_stock == Decimal("8")
        assert suggestions[0].suggested_quantity == Decimal("50")

    def test_stock_levels(self, service):
        levels = {lvl.item.item_code: lvl for lvl in service.stock_levels()}
        assert levels["SKU-001"].status == StockStatus.LOW_STOCK
        assert levels["SKU-002"].status == StockStatus.IN_STOCK
        assert levels["SKU-002"].available == Decimal("20")
        assert levels["SKU-003"].status == StockStatus.OUT_OF_STOCK

    def test_configured_default_quantity(self, db_session, seeded, ledger_config):
        from dataclasses import replace

        from ledger_kernel.models import InventoryStockModel

        db_session.query(InventoryStockModel).filter(
            InventoryStockModel.item_id == seeded.items["SKU-002"]
        ).update({"quantity_on_hand": Decimal("3")})
        db_session.flush()

        config = replace(
            ledger_config,
            inventory=InventoryConfig(default_reorder_quantity=Decimal("12")),
        )
        suggestions = InventoryService(db_session, seeded.client_id, config=config).reorder_suggestions()
        by_code = {s.item.item_code: s.suggested_quantity for s in suggestions}
        assert by_code == {"SKU-001": Decimal("50"), "SKU-002": Decimal("12")}
