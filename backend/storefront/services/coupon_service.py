"""Coupon lifecycle service: creation, activation, deactivation and deletion."""

import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.core.config import settings
from storefront.core.errors import (
    ConflictError,
    FieldError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from storefront.models.coupon import Coupon
from storefront.models.invoice import InvoiceStatus
from storefront.repositories.coupon_repository import CouponRepository
from storefront.repositories.invoice_repository import InvoiceRepository
from storefront.repositories.merchant_repository import MerchantRepository
from storefront.schemas.coupon import CouponCreate
from storefront.services import coupon_policy, coupon_usage

logger = logging.getLogger(__name__)


class CouponService:
    """Service composing the coupon policy with the store."""

    def __init__(self, db: Session):
        self.db = db
        self.coupon_repo = CouponRepository(db)
        self.merchant_repo = MerchantRepository(db)
        self.invoice_repo = InvoiceRepository(db)

    def get_for_merchant(self, merchant_id: int, coupon_id: int) -> Coupon:
        """Get a merchant's coupon.

        Raises:
            NotFoundError: "Merchant not found" or "Coupon not found", depending
                on which lookup failed. A coupon owned by another merchant is
                reported as not found.
        """
        if self.merchant_repo.get_by_id(merchant_id) is None:
            raise NotFoundError("Merchant not found")
        coupon = self.coupon_repo.get_for_merchant(merchant_id, coupon_id)
        if coupon is None:
            raise NotFoundError("Coupon not found")
        return coupon

    def list_for_merchant(self, merchant_id: int, status: str | None = None) -> list[Coupon]:
        """List coupons filtered by a "true"/"false" status string."""
        if self.merchant_repo.get_by_id(merchant_id) is None:
            raise NotFoundError("Merchant not found")
        return self.coupon_repo.get_all(
            merchant_id, status=coupon_policy.filter_by_boolean_string(status)
        )

    def list_by_label(self, merchant_id: int, status: str | None = None) -> list[Coupon]:
        """List coupons filtered by an "active"/"inactive" label."""
        if self.merchant_repo.get_by_id(merchant_id) is None:
            raise NotFoundError("Merchant not found")
        return self.coupon_repo.get_all(
            merchant_id, status=coupon_policy.filter_by_active_label(status)
        )

    def create(self, merchant_id: int, data: CouponCreate) -> Coupon:
        """Validate and insert a coupon.

        The merchant row stays locked from the active-coupon count until the
        insert commits, so concurrent creations cannot both pass the cap.

        Raises:
            ValidationError: If any rule fails. Nothing is persisted.
            PersistenceError: If the store rejects the insert.
        """
        merchant = self.merchant_repo.lock(merchant_id)
        code_taken = bool(data.code and data.code.strip()) and self.coupon_repo.code_exists(
            data.code  # type: ignore[arg-type]
        )
        active_count = self.coupon_repo.count_active(merchant_id) if merchant else 0

        result = coupon_policy.validate(
            data,
            merchant,
            code_taken=code_taken,
            active_count=active_count,
            creating=True,
        )
        if not result.is_valid:
            self.db.rollback()
            raise ValidationError(result.errors)

        try:
            coupon = self.coupon_repo.create(merchant_id, data)
        except IntegrityError:
            self.db.rollback()
            # Lost a race against another insert of the same code
            if data.code and self.coupon_repo.code_exists(data.code):
                raise ValidationError([FieldError("code", coupon_policy.TAKEN)]) from None
            logger.exception("Failed to create coupon %s for merchant %s", data.code, merchant_id)
            raise PersistenceError("Coupon could not be created") from None
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to create coupon %s for merchant %s", data.code, merchant_id)
            raise PersistenceError("Coupon could not be created") from None

        logger.info("Created coupon %s for merchant %s", coupon.code, merchant_id)
        return coupon

    def activate(self, coupon: Coupon) -> Coupon:
        """Mark a coupon active. Already-active coupons are returned unchanged.

        The active-coupon cap is only re-checked here when
        ENFORCE_CAP_ON_ACTIVATE is set.

        Raises:
            ConflictError: If the cap is enforced and already reached.
            PersistenceError: If the store rejects the update.
        """
        if coupon.status:
            return coupon

        if settings.ENFORCE_CAP_ON_ACTIVATE:
            max_active = settings.MAX_ACTIVE_COUPONS_PER_MERCHANT
            self.merchant_repo.lock(coupon.merchant_id)  # type: ignore[arg-type]
            if self.coupon_repo.count_active(coupon.merchant_id) >= max_active:  # type: ignore[arg-type]
                self.db.rollback()
                raise ConflictError(coupon_policy.cap_message(max_active))

        try:
            coupon = self.coupon_repo.set_status(coupon, True)
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to activate coupon %s", coupon.id)
            raise PersistenceError("Coupon could not be activated") from None

        logger.info("Activated coupon %s", coupon.code)
        return coupon

    def deactivate(self, coupon: Coupon) -> Coupon:
        """Mark a coupon inactive unless a pending invoice still references it.

        Raises:
            ConflictError: If a pending invoice references the coupon, or the
                store rejects the update.
        """
        self.merchant_repo.lock(coupon.merchant_id)  # type: ignore[arg-type]
        if self.invoice_repo.exists_for_coupon(
            coupon.id,  # type: ignore[arg-type]
            status=InvoiceStatus.PENDING.value,
        ):
            self.db.rollback()
            raise ConflictError("Cannot deactivate coupon with pending invoices")

        try:
            coupon = self.coupon_repo.set_status(coupon, False)
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to deactivate coupon %s", coupon.id)
            raise ConflictError("Coupon could not be deactivated") from None

        logger.info("Deactivated coupon %s", coupon.code)
        return coupon

    def delete(self, coupon: Coupon) -> None:
        """Delete a coupon.

        With GUARD_COUPON_DELETE set, a coupon referenced by any invoice is
        kept. Without it, referencing invoices lose their coupon first.

        Raises:
            ConflictError: If the guard blocks the deletion.
            PersistenceError: If the store rejects the deletion.
        """
        coupon_id = coupon.id
        if self.invoice_repo.exists_for_coupon(coupon_id):  # type: ignore[arg-type]
            if settings.GUARD_COUPON_DELETE:
                raise ConflictError("Cannot delete coupon referenced by invoices")
            self.invoice_repo.detach_coupon(coupon_id)  # type: ignore[arg-type]

        try:
            self.coupon_repo.delete(coupon)
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to delete coupon %s", coupon_id)
            raise PersistenceError("Coupon could not be deleted") from None

        logger.info("Deleted coupon %s", coupon_id)

    def usage_count(self, coupon: Coupon) -> int:
        return coupon_usage.usage_count(self.db, coupon.id)  # type: ignore[arg-type]
