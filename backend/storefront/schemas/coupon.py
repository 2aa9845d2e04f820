"""Coupon schemas."""

from decimal import Decimal

from pydantic import BaseModel, Field

from storefront.models.coupon import Coupon


class CouponCreate(BaseModel):
    """Candidate coupon fields.

    Every field is optional here so that the coupon policy can report all
    violations together instead of failing on the first missing key.
    """

    name: str | None = Field(default=None, max_length=255)
    code: str | None = Field(default=None, max_length=255)
    discount_type: str | None = None
    discount_value: Decimal | None = None
    status: bool = True


class CouponAttributes(BaseModel):
    name: str
    code: str
    discount_type: str
    discount_value: Decimal
    status: bool
    merchant_id: str
    usage_count: int


class CouponResource(BaseModel):
    id: str
    type: str = "coupon"
    attributes: CouponAttributes

    @classmethod
    def from_model(cls, coupon: Coupon, usage_count: int) -> "CouponResource":
        return cls(
            id=str(coupon.id),
            attributes=CouponAttributes(
                name=str(coupon.name),
                code=str(coupon.code),
                discount_type=str(coupon.discount_type),
                discount_value=coupon.discount_value,
                status=bool(coupon.status),
                merchant_id=str(coupon.merchant_id),
                usage_count=usage_count,
            ),
        )


class CouponDocument(BaseModel):
    data: CouponResource


class CouponListDocument(BaseModel):
    data: list[CouponResource]


class CouponStatusEntry(BaseModel):
    """Flattened coupon row with its status rendered as a label."""

    id: str
    name: str
    code: str
    discount_type: str
    discount_value: Decimal
    status: str

    @classmethod
    def from_model(cls, coupon: Coupon) -> "CouponStatusEntry":
        return cls(
            id=str(coupon.id),
            name=str(coupon.name),
            code=str(coupon.code),
            discount_type=str(coupon.discount_type),
            discount_value=coupon.discount_value,
            status="active" if coupon.status else "inactive",
        )
