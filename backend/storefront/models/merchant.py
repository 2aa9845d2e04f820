from sqlalchemy import Column, DateTime, Integer, String, func

from storefront.core.database import Base


class Merchant(Base):
    """Merchant model. Root owner of items, invoices and coupons."""

    __tablename__ = "merchants"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
