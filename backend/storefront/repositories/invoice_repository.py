from decimal import Decimal

from sqlalchemy import func
from sqlalchemy.orm import Session

from storefront.models.invoice import Invoice
from storefront.models.invoice_item import InvoiceItem
from storefront.schemas.invoice import InvoiceCreate


class InvoiceRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_all(
        self,
        merchant_id: int | None = None,
        customer_id: int | None = None,
        status: str | None = None,
    ) -> list[Invoice]:
        query = self.db.query(Invoice)

        if merchant_id is not None:
            query = query.filter(Invoice.merchant_id == merchant_id)
        if customer_id is not None:
            query = query.filter(Invoice.customer_id == customer_id)
        if status:
            query = query.filter(Invoice.status == status)

        return query.order_by(Invoice.id.asc()).all()

    def get_by_id(self, invoice_id: int) -> Invoice | None:
        return self.db.query(Invoice).filter(Invoice.id == invoice_id).first()

    def create(
        self, merchant_id: int, data: InvoiceCreate, line_items: list[InvoiceItem]
    ) -> Invoice:
        """Create an invoice and its line items in a single transaction."""
        invoice = Invoice(
            merchant_id=merchant_id,
            customer_id=data.customer_id,
            coupon_id=data.coupon_id,
            status=data.status,
        )
        self.db.add(invoice)
        self.db.flush()

        for line_item in line_items:
            line_item.invoice_id = invoice.id
            self.db.add(line_item)

        self.db.commit()
        self.db.refresh(invoice)
        return invoice

    def set_total(self, invoice: Invoice, total: Decimal) -> Invoice:
        invoice.total = total  # type: ignore[assignment]
        self.db.commit()
        self.db.refresh(invoice)
        return invoice

    def count_by_coupon_id(self, coupon_id: int) -> int:
        """Count invoices referencing the coupon, whatever their status."""
        return self.db.query(Invoice).filter(Invoice.coupon_id == coupon_id).count()

    def count_by_coupon_ids(self, coupon_ids: list[int]) -> dict[int, int]:
        if not coupon_ids:
            return {}
        rows = (
            self.db.query(Invoice.coupon_id, func.count(Invoice.id))
            .filter(Invoice.coupon_id.in_(coupon_ids))
            .group_by(Invoice.coupon_id)
            .all()
        )
        return {coupon_id: count for coupon_id, count in rows}

    def exists_for_coupon(self, coupon_id: int, status: str | None = None) -> bool:
        """Check whether any invoice (optionally with the given status) references the coupon."""
        query = self.db.query(Invoice.id).filter(Invoice.coupon_id == coupon_id)
        if status is not None:
            query = query.filter(Invoice.status == status)
        return query.first() is not None

    def detach_coupon(self, coupon_id: int) -> None:
        """Clear the coupon reference on every invoice using it. Not committed."""
        self.db.query(Invoice).filter(Invoice.coupon_id == coupon_id).update(
            {Invoice.coupon_id: None}, synchronize_session=False
        )
