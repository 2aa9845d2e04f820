from storefront.models.coupon import Coupon, DiscountType
from storefront.models.customer import Customer
from storefront.models.invoice import Invoice, InvoiceStatus
from storefront.models.invoice_item import InvoiceItem
from storefront.models.item import Item
from storefront.models.merchant import Merchant

__all__ = [
    "Coupon",
    "Customer",
    "DiscountType",
    "Invoice",
    "InvoiceItem",
    "InvoiceStatus",
    "Item",
    "Merchant",
]
