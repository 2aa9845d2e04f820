from storefront.schemas.coupon import (
    CouponAttributes,
    CouponCreate,
    CouponDocument,
    CouponListDocument,
    CouponResource,
    CouponStatusEntry,
)
from storefront.schemas.customer import (
    CustomerAttributes,
    CustomerCreate,
    CustomerDocument,
    CustomerListDocument,
    CustomerResource,
)
from storefront.schemas.invoice import (
    InvoiceAttributes,
    InvoiceCreate,
    InvoiceDocument,
    InvoiceItemAttributes,
    InvoiceItemResource,
    InvoiceLineItemCreate,
    InvoiceListDocument,
    InvoiceResource,
)
from storefront.schemas.item import (
    ItemAttributes,
    ItemCreate,
    ItemDocument,
    ItemListDocument,
    ItemResource,
    ItemUpdate,
)
from storefront.schemas.merchant import (
    MerchantAttributes,
    MerchantCreate,
    MerchantDocument,
    MerchantListDocument,
    MerchantResource,
    MerchantUpdate,
)

__all__ = [
    "CouponAttributes",
    "CouponCreate",
    "CouponDocument",
    "CouponListDocument",
    "CouponResource",
    "CouponStatusEntry",
    "CustomerAttributes",
    "CustomerCreate",
    "CustomerDocument",
    "CustomerListDocument",
    "CustomerResource",
    "InvoiceAttributes",
    "InvoiceCreate",
    "InvoiceDocument",
    "InvoiceItemAttributes",
    "InvoiceItemResource",
    "InvoiceLineItemCreate",
    "InvoiceListDocument",
    "InvoiceResource",
    "ItemAttributes",
    "ItemCreate",
    "ItemDocument",
    "ItemListDocument",
    "ItemResource",
    "ItemUpdate",
    "MerchantAttributes",
    "MerchantCreate",
    "MerchantDocument",
    "MerchantListDocument",
    "MerchantResource",
    "MerchantUpdate",
]
