"""Coupon validity rules and status filter contracts.

Everything here is a pure function of its arguments. Facts that need the
store (whether a code is taken, how many active coupons a merchant holds) are
looked up by the caller inside its transaction and passed in.
"""

from dataclasses import dataclass, field
from decimal import Decimal

from storefront.core.config import settings
from storefront.core.errors import FieldError, ValidationError
from storefront.models.coupon import DiscountType
from storefront.models.merchant import Merchant
from storefront.schemas.coupon import CouponCreate

BLANK = "can't be blank"
TAKEN = "has already been taken"
NOT_POSITIVE = "must be greater than 0"
NOT_INCLUDED = "is not included in the list"
INVALID_STATUS_FILTER = "Invalid status filter"


@dataclass
class ValidationResult:
    """Outcome of validating a coupon draft."""

    errors: list[FieldError] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def add(self, field_name: str, message: str) -> None:
        self.errors.append(FieldError(field_name, message))


def cap_message(max_active: int) -> str:
    return f"Merchant cannot have more than {max_active} active coupons."


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


def validate(
    draft: CouponCreate,
    merchant: Merchant | None,
    *,
    code_taken: bool,
    active_count: int,
    creating: bool = True,
    max_active: int | None = None,
) -> ValidationResult:
    """Check a coupon draft against every rule and collect all failures.

    Args:
        draft: The candidate coupon fields.
        merchant: The owning merchant, or None if it could not be found.
        code_taken: Whether any coupon of any merchant already uses draft.code.
        active_count: Number of active coupons the merchant currently holds.
        creating: The active-coupon cap is only enforced on creation.
        max_active: Cap on active coupons; defaults to the configured value.

    Returns:
        A ValidationResult; it is valid when no rule failed.
    """
    if max_active is None:
        max_active = settings.MAX_ACTIVE_COUPONS_PER_MERCHANT

    result = ValidationResult()

    if merchant is None:
        result.add("merchant", "must exist")

    if _blank(draft.name):
        result.add("name", BLANK)

    if _blank(draft.code):
        result.add("code", BLANK)
    elif code_taken:
        result.add("code", TAKEN)

    if draft.discount_value is None:
        result.add("discount_value", BLANK)
    elif Decimal(draft.discount_value) <= 0:
        result.add("discount_value", NOT_POSITIVE)

    if _blank(draft.discount_type):
        result.add("discount_type", BLANK)
    if draft.discount_type not in {t.value for t in DiscountType}:
        result.add("discount_type", NOT_INCLUDED)

    # Applies whatever status the draft itself requests
    if creating and merchant is not None and active_count >= max_active:
        result.add("base", cap_message(max_active))

    return result


def filter_by_boolean_string(status: str | None) -> bool | None:
    """Map a "true"/"false" query value to a status filter.

    Absent or empty means no filter. Any other value is rejected.
    """
    if status is None or status == "":
        return None
    if status == "true":
        return True
    if status == "false":
        return False
    raise ValidationError([FieldError("base", INVALID_STATUS_FILTER)])


def filter_by_active_label(status: str | None) -> bool | None:
    """Map an "active"/"inactive" label to a status filter; anything else means all."""
    if status == "active":
        return True
    if status == "inactive":
        return False
    return None
