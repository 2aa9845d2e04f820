"""Invoice and InvoiceItem schemas."""

from decimal import Decimal

from pydantic import BaseModel, Field

from storefront.models.invoice import Invoice, InvoiceStatus
from storefront.models.invoice_item import InvoiceItem


class InvoiceLineItemCreate(BaseModel):
    item_id: int
    quantity: int = Field(default=1, ge=1)
    # Defaults to the item's current unit price
    unit_price: Decimal | None = Field(default=None, ge=0)


class InvoiceCreate(BaseModel):
    customer_id: int
    coupon_id: int | None = None
    status: str = Field(default=InvoiceStatus.PENDING.value, min_length=1, max_length=20)
    line_items: list[InvoiceLineItemCreate] = Field(default_factory=list)


class InvoiceItemAttributes(BaseModel):
    item_id: str
    name: str
    description: str
    merchant_id: str
    unit_price: Decimal
    quantity: int


class InvoiceItemResource(BaseModel):
    id: str
    type: str = "invoice_item"
    attributes: InvoiceItemAttributes

    @classmethod
    def from_model(cls, invoice_item: InvoiceItem) -> "InvoiceItemResource":
        return cls(
            id=str(invoice_item.id),
            attributes=InvoiceItemAttributes(
                item_id=str(invoice_item.item_id),
                name=str(invoice_item.name),
                description=str(invoice_item.description),
                merchant_id=str(invoice_item.merchant_id),
                unit_price=invoice_item.unit_price,
                quantity=int(invoice_item.quantity),
            ),
        )


class InvoiceAttributes(BaseModel):
    status: str
    merchant_id: str
    customer_id: str
    coupon_id: str | None = None
    total: Decimal | None = None
    line_items: list[InvoiceItemResource] = Field(default_factory=list)


class InvoiceResource(BaseModel):
    id: str
    type: str = "invoice"
    attributes: InvoiceAttributes

    @classmethod
    def from_model(
        cls,
        invoice: Invoice,
        total: Decimal | None = None,
        line_items: list[InvoiceItem] | None = None,
    ) -> "InvoiceResource":
        return cls(
            id=str(invoice.id),
            attributes=InvoiceAttributes(
                status=str(invoice.status),
                merchant_id=str(invoice.merchant_id),
                customer_id=str(invoice.customer_id),
                coupon_id=str(invoice.coupon_id) if invoice.coupon_id is not None else None,
                total=total if total is not None else invoice.total,
                line_items=[InvoiceItemResource.from_model(li) for li in line_items or []],
            ),
        )


class InvoiceDocument(BaseModel):
    data: InvoiceResource


class InvoiceListDocument(BaseModel):
    data: list[InvoiceResource]
