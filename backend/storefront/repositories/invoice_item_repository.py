from decimal import Decimal

from sqlalchemy.orm import Session

from storefront.models.invoice_item import InvoiceItem
from storefront.models.item import Item


class InvoiceItemRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_invoice_id(self, invoice_id: int) -> list[InvoiceItem]:
        return (
            self.db.query(InvoiceItem)
            .filter(InvoiceItem.invoice_id == invoice_id)
            .order_by(InvoiceItem.id.asc())
            .all()
        )

    def get_priced_lines(self, invoice_id: int) -> list[tuple[int, Decimal | None, int | None]]:
        """Get (owning merchant id, unit price, quantity) for each line of an invoice.

        The merchant is the one that owns the underlying Item, not the
        snapshot stored on the line item.
        """
        rows = (
            self.db.query(Item.merchant_id, InvoiceItem.unit_price, InvoiceItem.quantity)
            .join(Item, Item.id == InvoiceItem.item_id)
            .filter(InvoiceItem.invoice_id == invoice_id)
            .order_by(InvoiceItem.id.asc())
            .all()
        )
        return [(merchant_id, unit_price, quantity) for merchant_id, unit_price, quantity in rows]
