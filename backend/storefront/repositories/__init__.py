from storefront.repositories.coupon_repository import CouponRepository
from storefront.repositories.customer_repository import CustomerRepository
from storefront.repositories.invoice_item_repository import InvoiceItemRepository
from storefront.repositories.invoice_repository import InvoiceRepository
from storefront.repositories.item_repository import ItemRepository
from storefront.repositories.merchant_repository import MerchantRepository

__all__ = [
    "CouponRepository",
    "CustomerRepository",
    "InvoiceItemRepository",
    "InvoiceRepository",
    "ItemRepository",
    "MerchantRepository",
]
