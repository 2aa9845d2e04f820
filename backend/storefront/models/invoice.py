from enum import Enum

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String, func

from storefront.core.database import Base


class InvoiceStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    RETURNED = "returned"


class Invoice(Base):
    __tablename__ = "invoices"

    id = Column(Integer, primary_key=True, index=True)
    merchant_id = Column(
        Integer, ForeignKey("merchants.id", ondelete="CASCADE"), nullable=False, index=True
    )
    customer_id = Column(
        Integer, ForeignKey("customers.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    coupon_id = Column(
        Integer, ForeignKey("coupons.id", ondelete="RESTRICT"), nullable=True, index=True
    )
    status = Column(String(20), nullable=False, default=InvoiceStatus.PENDING.value)

    # Only written when a caller explicitly stores a computed total
    total = Column(Numeric(12, 2), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def has_coupon(self) -> bool:
        return self.coupon_id is not None
