"""Coupon usage reporting for serialized coupon views."""

from sqlalchemy.orm import Session

from storefront.models.coupon import Coupon
from storefront.repositories.invoice_repository import InvoiceRepository
from storefront.schemas.coupon import CouponResource


def usage_count(db: Session, coupon_id: int) -> int:
    """Number of invoices referencing the coupon, any invoice status."""
    return InvoiceRepository(db).count_by_coupon_id(coupon_id)


def usage_counts(db: Session, coupon_ids: list[int]) -> dict[int, int]:
    """Usage counts for many coupons in one query; unused coupons map to 0."""
    counts = InvoiceRepository(db).count_by_coupon_ids(coupon_ids)
    return {coupon_id: counts.get(coupon_id, 0) for coupon_id in coupon_ids}


def coupon_resource(db: Session, coupon: Coupon) -> CouponResource:
    return CouponResource.from_model(coupon, usage_count(db, coupon.id))  # type: ignore[arg-type]


def coupon_resources(db: Session, coupons: list[Coupon]) -> list[CouponResource]:
    counts = usage_counts(db, [coupon.id for coupon in coupons])  # type: ignore[misc]
    return [CouponResource.from_model(coupon, counts[coupon.id]) for coupon in coupons]  # type: ignore[index]
