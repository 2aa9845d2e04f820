"""Coupon model for merchant discounts."""

from enum import Enum

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, Numeric, String, func

from storefront.core.database import Base


class DiscountType(str, Enum):
    PERCENT = "percent"
    DOLLAR = "dollar"


class Coupon(Base):
    """Coupon owned by a merchant and optionally referenced by invoices."""

    __tablename__ = "coupons"

    id = Column(Integer, primary_key=True, index=True)
    merchant_id = Column(
        Integer, ForeignKey("merchants.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name = Column(String(255), nullable=False)
    code = Column(String(255), unique=True, index=True, nullable=False)

    discount_type = Column(String(20), nullable=False)
    discount_value = Column(Numeric(12, 2), nullable=False)

    # True means active
    status = Column(Boolean, nullable=False, default=True, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
