"""Coupon repository for data access."""

from sqlalchemy.orm import Session

from storefront.models.coupon import Coupon
from storefront.schemas.coupon import CouponCreate


class CouponRepository:
    """Repository for Coupon model."""

    def __init__(self, db: Session):
        self.db = db

    def get_all(self, merchant_id: int, status: bool | None = None) -> list[Coupon]:
        """Get a merchant's coupons, optionally only active or only inactive ones."""
        query = self.db.query(Coupon).filter(Coupon.merchant_id == merchant_id)

        if status is not None:
            query = query.filter(Coupon.status.is_(status))

        return query.order_by(Coupon.id.asc()).all()

    def get_by_id(self, coupon_id: int) -> Coupon | None:
        return self.db.query(Coupon).filter(Coupon.id == coupon_id).first()

    def get_for_merchant(self, merchant_id: int, coupon_id: int) -> Coupon | None:
        """Get a coupon only if it belongs to the merchant."""
        return (
            self.db.query(Coupon)
            .filter(Coupon.id == coupon_id, Coupon.merchant_id == merchant_id)
            .first()
        )

    def code_exists(self, code: str) -> bool:
        """Check whether any merchant already uses the code (exact match)."""
        return self.db.query(Coupon.id).filter(Coupon.code == code).first() is not None

    def count_active(self, merchant_id: int) -> int:
        return (
            self.db.query(Coupon)
            .filter(Coupon.merchant_id == merchant_id, Coupon.status.is_(True))
            .count()
        )

    def create(self, merchant_id: int, data: CouponCreate) -> Coupon:
        coupon = Coupon(
            merchant_id=merchant_id,
            name=data.name,
            code=data.code,
            discount_type=data.discount_type,
            discount_value=data.discount_value,
            status=data.status,
        )
        self.db.add(coupon)
        self.db.commit()
        self.db.refresh(coupon)
        return coupon

    def set_status(self, coupon: Coupon, status: bool) -> Coupon:
        coupon.status = status  # type: ignore[assignment]
        self.db.commit()
        self.db.refresh(coupon)
        return coupon

    def delete(self, coupon: Coupon) -> None:
        self.db.delete(coupon)
        self.db.commit()
