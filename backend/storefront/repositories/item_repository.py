from decimal import Decimal

from sqlalchemy.orm import Session

from storefront.models.invoice_item import InvoiceItem
from storefront.models.item import Item
from storefront.schemas.item import ItemCreate, ItemUpdate


class ItemRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_all(self, merchant_id: int | None = None, sort: str | None = None) -> list[Item]:
        """Get items, ordered by id or, with ``sort="price"``, by unit price."""
        query = self.db.query(Item)
        if merchant_id is not None:
            query = query.filter(Item.merchant_id == merchant_id)
        if sort == "price":
            return query.order_by(Item.unit_price.asc(), Item.id.asc()).all()
        return query.order_by(Item.id.asc()).all()

    def find_all(
        self,
        name: str | None = None,
        min_price: Decimal | None = None,
        max_price: Decimal | None = None,
    ) -> list[Item]:
        """Items whose name contains the fragment (case-insensitive) within a price range."""
        query = self.db.query(Item)
        if name is not None:
            query = query.filter(Item.name.ilike(f"%{name}%"))
        if min_price is not None:
            query = query.filter(Item.unit_price >= min_price)
        if max_price is not None:
            query = query.filter(Item.unit_price <= max_price)
        return query.order_by(Item.id.asc()).all()

    def get_by_id(self, item_id: int) -> Item | None:
        return self.db.query(Item).filter(Item.id == item_id).first()

    def get_by_ids(self, item_ids: list[int]) -> dict[int, Item]:
        items = self.db.query(Item).filter(Item.id.in_(item_ids)).all()
        return {item.id: item for item in items}  # type: ignore[misc]

    def create(self, data: ItemCreate) -> Item:
        item = Item(**data.model_dump())
        self.db.add(item)
        self.db.commit()
        self.db.refresh(item)
        return item

    def update(self, item_id: int, data: ItemUpdate) -> Item | None:
        item = self.get_by_id(item_id)
        if not item:
            return None
        for key, value in data.model_dump(exclude_unset=True).items():
            setattr(item, key, value)
        self.db.commit()
        self.db.refresh(item)
        return item

    def delete(self, item_id: int) -> bool:
        """Delete an item together with the invoice items that reference it."""
        item = self.get_by_id(item_id)
        if not item:
            return False
        self.db.query(InvoiceItem).filter(InvoiceItem.item_id == item_id).delete(
            synchronize_session=False
        )
        self.db.delete(item)
        self.db.commit()
        return True
