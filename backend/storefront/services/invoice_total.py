"""Invoice total calculation.

Totals are grouped by the merchant that owns each line item's Item. A coupon
only discounts the group of its own merchant, and a discounted group never
goes below zero. All arithmetic is done in Decimal; rounding to cents only
happens in round_money, at presentation or storage time.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy.orm import Session

from storefront.models.coupon import Coupon, DiscountType
from storefront.models.invoice import Invoice
from storefront.repositories.coupon_repository import CouponRepository
from storefront.repositories.invoice_item_repository import InvoiceItemRepository
from storefront.repositories.invoice_repository import InvoiceRepository

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
HUNDRED = Decimal("100")
CENT = Decimal("0.01")


@dataclass(frozen=True)
class LineItem:
    merchant_id: int
    unit_price: Decimal | None
    quantity: int | None


@dataclass(frozen=True)
class CouponTerms:
    merchant_id: int
    discount_type: str
    discount_value: Decimal

    @classmethod
    def from_coupon(cls, coupon: Coupon) -> "CouponTerms":
        return cls(
            merchant_id=coupon.merchant_id,  # type: ignore[arg-type]
            discount_type=str(coupon.discount_type),
            discount_value=Decimal(str(coupon.discount_value)),
        )


def _to_decimal(value: object) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def merchant_subtotals(line_items: Iterable[LineItem]) -> dict[int, Decimal]:
    """Sum unit_price * quantity per owning merchant; missing values count as 0."""
    subtotals: dict[int, Decimal] = {}
    for line_item in line_items:
        amount = _to_decimal(line_item.unit_price) * _to_decimal(line_item.quantity)
        subtotals[line_item.merchant_id] = subtotals.get(line_item.merchant_id, ZERO) + amount
    return subtotals


def apply_discount(subtotal: Decimal, coupon: CouponTerms) -> Decimal:
    """Apply a coupon to one merchant group's subtotal, floored at 0."""
    if coupon.discount_type == DiscountType.DOLLAR.value:
        discounted = subtotal - coupon.discount_value
    elif coupon.discount_type == DiscountType.PERCENT.value:
        discounted = subtotal * (1 - coupon.discount_value / HUNDRED)
    else:
        raise ValueError(f"Unknown discount type '{coupon.discount_type}'")
    return max(discounted, ZERO)


def calculate_total(line_items: Iterable[LineItem], coupon: CouponTerms | None = None) -> Decimal:
    """Compute an invoice total from its line items and optional coupon."""
    total = ZERO
    for merchant_id, subtotal in merchant_subtotals(line_items).items():
        if coupon is not None and coupon.merchant_id == merchant_id:
            subtotal = apply_discount(subtotal, coupon)
        total += subtotal
    return total


def round_money(value: Decimal) -> Decimal:
    return _to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


class InvoiceTotalService:
    """Loads an invoice's pricing data from the store and totals it."""

    def __init__(self, db: Session):
        self.db = db
        self.invoice_repo = InvoiceRepository(db)
        self.invoice_item_repo = InvoiceItemRepository(db)
        self.coupon_repo = CouponRepository(db)

    def calculate_total(self, invoice: Invoice) -> Decimal:
        """Compute the current total of an invoice without persisting it."""
        line_items = [
            LineItem(merchant_id=merchant_id, unit_price=unit_price, quantity=quantity)
            for merchant_id, unit_price, quantity in self.invoice_item_repo.get_priced_lines(
                invoice.id  # type: ignore[arg-type]
            )
        ]

        coupon_terms = None
        if invoice.has_coupon():
            coupon = self.coupon_repo.get_by_id(invoice.coupon_id)  # type: ignore[arg-type]
            if coupon is not None:
                coupon_terms = CouponTerms.from_coupon(coupon)

        return calculate_total(line_items, coupon_terms)

    def store_total(self, invoice: Invoice) -> Invoice:
        """Compute the invoice total and persist it on the invoice."""
        total = round_money(self.calculate_total(invoice))
        invoice = self.invoice_repo.set_total(invoice, total)
        logger.info("Stored total %s for invoice %s", total, invoice.id)
        return invoice
