"""Merchant repository for data access."""

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from storefront.models.coupon import Coupon
from storefront.models.invoice import Invoice, InvoiceStatus
from storefront.models.invoice_item import InvoiceItem
from storefront.models.item import Item
from storefront.models.merchant import Merchant
from storefront.schemas.merchant import MerchantCreate, MerchantUpdate


class MerchantRepository:
    """Repository for Merchant model."""

    def __init__(self, db: Session):
        self.db = db

    def get_all(self, sort: str | None = None, status: str | None = None) -> list[Merchant]:
        """Get merchants.

        ``sort="age"`` returns the newest merchants first. ``status="returned"``
        keeps only merchants with at least one returned invoice.
        """
        query = self.db.query(Merchant)

        if status == InvoiceStatus.RETURNED.value:
            query = query.filter(
                Merchant.id.in_(
                    select(Invoice.merchant_id).where(
                        Invoice.status == InvoiceStatus.RETURNED.value
                    )
                )
            )

        if sort == "age":
            return query.order_by(Merchant.id.desc()).all()
        return query.order_by(Merchant.id.asc()).all()

    def get_by_id(self, merchant_id: int) -> Merchant | None:
        return self.db.query(Merchant).filter(Merchant.id == merchant_id).first()

    def lock(self, merchant_id: int) -> Merchant | None:
        """Load a merchant with a row lock held until the transaction ends.

        Serializes writers that depend on the merchant's coupon set.
        """
        return (
            self.db.query(Merchant)
            .filter(Merchant.id == merchant_id)
            .with_for_update()
            .first()
        )

    def find_by_name(self, fragment: str) -> Merchant | None:
        """First merchant whose name contains the fragment, case-insensitively."""
        return (
            self.db.query(Merchant)
            .filter(Merchant.name.ilike(f"%{fragment}%"))
            .order_by(Merchant.name.asc(), Merchant.id.asc())
            .first()
        )

    def create(self, data: MerchantCreate) -> Merchant:
        merchant = Merchant(name=data.name)
        self.db.add(merchant)
        self.db.commit()
        self.db.refresh(merchant)
        return merchant

    def update(self, merchant_id: int, data: MerchantUpdate) -> Merchant | None:
        merchant = self.get_by_id(merchant_id)
        if not merchant:
            return None
        for key, value in data.model_dump(exclude_unset=True).items():
            setattr(merchant, key, value)
        self.db.commit()
        self.db.refresh(merchant)
        return merchant

    def delete(self, merchant_id: int) -> bool:
        """Delete a merchant with its invoices, items, coupons and their line items."""
        merchant = self.get_by_id(merchant_id)
        if not merchant:
            return False

        invoice_ids = select(Invoice.id).where(Invoice.merchant_id == merchant_id)
        item_ids = select(Item.id).where(Item.merchant_id == merchant_id)
        coupon_ids = select(Coupon.id).where(Coupon.merchant_id == merchant_id)

        self.db.query(InvoiceItem).filter(
            or_(InvoiceItem.invoice_id.in_(invoice_ids), InvoiceItem.item_id.in_(item_ids))
        ).delete(synchronize_session=False)
        self.db.query(Invoice).filter(Invoice.merchant_id == merchant_id).delete(
            synchronize_session=False
        )
        # Invoices of other merchants keep existing without the coupon reference
        self.db.query(Invoice).filter(Invoice.coupon_id.in_(coupon_ids)).update(
            {Invoice.coupon_id: None}, synchronize_session=False
        )
        self.db.query(Item).filter(Item.merchant_id == merchant_id).delete(
            synchronize_session=False
        )
        self.db.query(Coupon).filter(Coupon.merchant_id == merchant_id).delete(
            synchronize_session=False
        )
        self.db.delete(merchant)
        self.db.commit()
        return True

    def coupons_counts(self, merchant_ids: list[int]) -> dict[int, int]:
        rows = (
            self.db.query(Coupon.merchant_id, func.count(Coupon.id))
            .filter(Coupon.merchant_id.in_(merchant_ids))
            .group_by(Coupon.merchant_id)
            .all()
        )
        return {merchant_id: count for merchant_id, count in rows}

    def invoice_coupon_counts(self, merchant_ids: list[int]) -> dict[int, int]:
        """Count each merchant's invoices that carry a coupon."""
        rows = (
            self.db.query(Invoice.merchant_id, func.count(Invoice.id))
            .filter(Invoice.merchant_id.in_(merchant_ids), Invoice.coupon_id.isnot(None))
            .group_by(Invoice.merchant_id)
            .all()
        )
        return {merchant_id: count for merchant_id, count in rows}

    def item_counts(self, merchant_ids: list[int]) -> dict[int, int]:
        rows = (
            self.db.query(Item.merchant_id, func.count(Item.id))
            .filter(Item.merchant_id.in_(merchant_ids))
            .group_by(Item.merchant_id)
            .all()
        )
        return {merchant_id: count for merchant_id, count in rows}
