"""
Module: ledger_kernel.models.inventory
Responsibility: ORM persistence for inventory items and per-location stock.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - item_code is unique per client.
    - One stock row per (item, location).
    - quantity_available is derived (on hand minus reserved), never stored.
"""

from decimal import Decimal
from uuid import UUID

from sqlalchemy import Boolean, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ledger_kernel.db.base import TenantBase, UUIDString


class InventoryItemModel(TenantBase):
    """Catalogue item with its replenishment settings."""

    __tablename__ = "inventory_items"

    __table_args__ = (
        UniqueConstraint("client_id", "item_code", name="uq_inventory_item_client_code"),
    )

    item_code: Mapped[str] = mapped_column(String(50), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[str | None] = mapped_column(String(100), nullable=True)
    unit_of_measure: Mapped[str] = mapped_column(String(20), nullable=False, default="each")
    cost_price: Mapped[Decimal | None] = mapped_column(nullable=True)
    selling_price: Mapped[Decimal | None] = mapped_column(nullable=True)
    reorder_level: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    reorder_quantity: Mapped[Decimal | None] = mapped_column(nullable=True)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    stock: Mapped[list["InventoryStockModel"]] = relationship(back_populates="item")

    def __repr__(self) -> str:
        return f"<InventoryItem {self.item_code}: {self.name}>"


class InventoryStockModel(TenantBase):
    """Quantity of one item at one location."""

    __tablename__ = "inventory_stock"

    __table_args__ = (
        UniqueConstraint("item_id", "location_id", name="uq_inventory_stock_item_location"),
    )

    item_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("inventory_items.id"),
        nullable=False,
        index=True,
    )
    location_id: Mapped[UUID] = mapped_column(UUIDString(), nullable=False)
    quantity_on_hand: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    quantity_reserved: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))

    item: Mapped[InventoryItemModel] = relationship(back_populates="stock")

    @property
    def quantity_available(self) -> Decimal:
        return self.quantity_on_hand - self.quantity_reserved
