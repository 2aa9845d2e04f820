"""InvoiceItem model: a priced, quantified snapshot of an Item within one Invoice."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String, Text, func

from storefront.core.database import Base


class InvoiceItem(Base):
    __tablename__ = "invoice_items"

    id = Column(Integer, primary_key=True, index=True)
    invoice_id = Column(
        Integer, ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False, index=True
    )
    item_id = Column(
        Integer, ForeignKey("items.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Snapshot of the item at creation time
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    merchant_id = Column(Integer, nullable=False)
    unit_price = Column(Numeric(12, 2), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
