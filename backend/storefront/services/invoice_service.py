"""Invoice creation and lookup."""

import logging

from sqlalchemy.orm import Session

from storefront.core.errors import ConflictError, NotFoundError
from storefront.models.invoice import Invoice
from storefront.models.invoice_item import InvoiceItem
from storefront.repositories.coupon_repository import CouponRepository
from storefront.repositories.customer_repository import CustomerRepository
from storefront.repositories.invoice_repository import InvoiceRepository
from storefront.repositories.item_repository import ItemRepository
from storefront.repositories.merchant_repository import MerchantRepository
from storefront.schemas.invoice import InvoiceCreate

logger = logging.getLogger(__name__)


class InvoiceService:
    def __init__(self, db: Session):
        self.db = db
        self.invoice_repo = InvoiceRepository(db)
        self.merchant_repo = MerchantRepository(db)
        self.customer_repo = CustomerRepository(db)
        self.coupon_repo = CouponRepository(db)
        self.item_repo = ItemRepository(db)

    def get(self, invoice_id: int) -> Invoice:
        invoice = self.invoice_repo.get_by_id(invoice_id)
        if invoice is None:
            raise NotFoundError("Invoice not found")
        return invoice

    def list_for_merchant(self, merchant_id: int, status: str | None = None) -> list[Invoice]:
        if self.merchant_repo.get_by_id(merchant_id) is None:
            raise NotFoundError("Merchant not found")
        return self.invoice_repo.get_all(merchant_id=merchant_id, status=status)

    def list_for_customer(self, customer_id: int) -> list[Invoice]:
        if self.customer_repo.get_by_id(customer_id) is None:
            raise NotFoundError("Customer not found")
        return self.invoice_repo.get_all(customer_id=customer_id)

    def create(self, merchant_id: int, data: InvoiceCreate) -> Invoice:
        """Create an invoice with line items snapshotted from their items.

        With a coupon, its merchant row stays locked until the invoice commits,
        so the coupon cannot be deactivated in between.

        Raises:
            NotFoundError: If the merchant, customer, coupon or an item is missing.
            ConflictError: If the coupon is not active.
        """
        if self.merchant_repo.get_by_id(merchant_id) is None:
            raise NotFoundError("Merchant not found")
        if self.customer_repo.get_by_id(data.customer_id) is None:
            raise NotFoundError("Customer not found")

        if data.coupon_id is not None:
            coupon = self.coupon_repo.get_by_id(data.coupon_id)
            if coupon is None:
                raise NotFoundError("Coupon not found")
            self.merchant_repo.lock(coupon.merchant_id)  # type: ignore[arg-type]
            self.db.refresh(coupon)
            if not coupon.status:
                self.db.rollback()
                raise ConflictError("Coupon is not active")

        items = self.item_repo.get_by_ids([line.item_id for line in data.line_items])
        line_items: list[InvoiceItem] = []
        for line in data.line_items:
            item = items.get(line.item_id)
            if item is None:
                self.db.rollback()
                raise NotFoundError("Item not found")
            line_items.append(
                InvoiceItem(
                    item_id=item.id,
                    name=item.name,
                    description=item.description,
                    merchant_id=item.merchant_id,
                    unit_price=line.unit_price if line.unit_price is not None else item.unit_price,
                    quantity=line.quantity,
                )
            )

        invoice = self.invoice_repo.create(merchant_id, data, line_items)
        logger.info(
            "Created invoice %s for merchant %s with %d line items",
            invoice.id,
            merchant_id,
            len(line_items),
        )
        return invoice
