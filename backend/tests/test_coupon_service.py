"""Tests for CouponService business logic."""

from decimal import Decimal

import pytest
from sqlalchemy.exc import IntegrityError

from storefront.core.config import settings
from storefront.core.errors import ConflictError, NotFoundError, PersistenceError, ValidationError
from storefront.models.coupon import Coupon
from storefront.models.invoice import InvoiceStatus
from storefront.repositories.coupon_repository import CouponRepository
from storefront.repositories.invoice_repository import InvoiceRepository
from storefront.schemas.coupon import CouponCreate
from storefront.schemas.invoice import InvoiceCreate
from storefront.services import coupon_usage
from storefront.services.coupon_service import CouponService


def _draft(code, **overrides):
    fields = {
        "name": f"Coupon {code}",
        "code": code,
        "discount_type": "dollar",
        "discount_value": Decimal("10"),
    }
    fields.update(overrides)
    return CouponCreate(**fields)


@pytest.fixture
def coupon_service(db_session):
    """Create a CouponService instance."""
    return CouponService(db_session)


@pytest.fixture
def coupon(coupon_service, merchant):
    return coupon_service.create(merchant.id, _draft("TENOFF"))


def _invoice(db_session, merchant, customer, coupon, status=InvoiceStatus.PENDING.value):
    return InvoiceRepository(db_session).create(
        merchant.id,
        InvoiceCreate(customer_id=customer.id, coupon_id=coupon.id, status=status),
        [],
    )


class TestCreate:
    def test_create_coupon(self, coupon_service, merchant):
        coupon = coupon_service.create(merchant.id, _draft("SAVE10"))
        assert coupon.id is not None
        assert coupon.merchant_id == merchant.id
        assert coupon.code == "SAVE10"
        assert coupon.discount_type == "dollar"
        assert coupon.discount_value == Decimal("10")
        assert coupon.status is True

    def test_create_inactive_coupon(self, coupon_service, merchant):
        coupon = coupon_service.create(merchant.id, _draft("LATER", status=False))
        assert coupon.status is False

    def test_invalid_draft_persists_nothing(self, coupon_service, db_session, merchant):
        with pytest.raises(ValidationError) as exc_info:
            coupon_service.create(merchant.id, _draft("BAD", discount_value=Decimal("0")))
        assert exc_info.value.messages_for("discount_value") == ["must be greater than 0"]
        assert db_session.query(Coupon).count() == 0

    def test_missing_merchant(self, coupon_service):
        with pytest.raises(ValidationError) as exc_info:
            coupon_service.create(999, _draft("ORPHAN"))
        assert exc_info.value.messages_for("merchant") == ["must exist"]

    def test_code_unique_across_merchants(self, coupon_service, merchant, other_merchant):
        coupon_service.create(merchant.id, _draft("SHARED"))
        with pytest.raises(ValidationError, match="Code has already been taken"):
            coupon_service.create(other_merchant.id, _draft("SHARED"))

    def test_code_match_is_exact(self, coupon_service, merchant):
        coupon_service.create(merchant.id, _draft("SHARED"))
        coupon = coupon_service.create(merchant.id, _draft("shared"))
        assert coupon.code == "shared"

    def test_sixth_active_coupon_rejected(self, coupon_service, db_session, merchant):
        for i in range(5):
            coupon_service.create(merchant.id, _draft(f"CODE{i}"))
        with pytest.raises(ValidationError, match="cannot have more than 5 active coupons"):
            coupon_service.create(merchant.id, _draft("CODE5"))
        assert CouponRepository(db_session).count_active(merchant.id) == 5

    def test_cap_counts_only_active_coupons(self, coupon_service, merchant):
        for i in range(4):
            coupon_service.create(merchant.id, _draft(f"CODE{i}"))
        coupon_service.create(merchant.id, _draft("OFF1", status=False))
        coupon_service.create(merchant.id, _draft("OFF2", status=False))
        coupon = coupon_service.create(merchant.id, _draft("CODE4"))
        assert coupon.status is True

    def test_cap_is_per_merchant(self, coupon_service, merchant, other_merchant):
        for i in range(5):
            coupon_service.create(merchant.id, _draft(f"CODE{i}"))
        coupon = coupon_service.create(other_merchant.id, _draft("OTHER"))
        assert coupon.merchant_id == other_merchant.id

    def test_cap_follows_settings(self, coupon_service, merchant, monkeypatch):
        monkeypatch.setattr(settings, "MAX_ACTIVE_COUPONS_PER_MERCHANT", 1)
        coupon_service.create(merchant.id, _draft("ONLY"))
        with pytest.raises(ValidationError, match="more than 1 active coupons"):
            coupon_service.create(merchant.id, _draft("SECOND"))

    def test_lost_code_race_reports_taken(self, coupon_service, merchant, monkeypatch):
        coupon_service.create(merchant.id, _draft("RACE"))

        # Simulate the code being claimed between the check and the insert
        monkeypatch.setattr(CouponRepository, "code_exists", _code_exists_after_first_call())
        with pytest.raises(ValidationError, match="Code has already been taken"):
            coupon_service.create(merchant.id, _draft("RACE"))

    def test_integrity_error_without_duplicate(self, coupon_service, merchant, monkeypatch):
        def fail_create(self, merchant_id, data):
            raise IntegrityError("INSERT", {}, Exception("constraint failed"))

        monkeypatch.setattr(CouponRepository, "create", fail_create)
        with pytest.raises(PersistenceError, match="Coupon could not be created"):
            coupon_service.create(merchant.id, _draft("BROKEN"))


def _code_exists_after_first_call():
    calls = []

    def code_exists(self, code):
        calls.append(code)
        if len(calls) == 1:
            return False
        return self.db.query(Coupon.id).filter(Coupon.code == code).first() is not None

    return code_exists


class TestGetAndList:
    def test_get_for_merchant(self, coupon_service, merchant, coupon):
        assert coupon_service.get_for_merchant(merchant.id, coupon.id).id == coupon.id

    def test_get_for_missing_merchant(self, coupon_service, coupon):
        with pytest.raises(NotFoundError, match="Merchant not found"):
            coupon_service.get_for_merchant(999, coupon.id)

    def test_get_coupon_of_other_merchant(self, coupon_service, other_merchant, coupon):
        with pytest.raises(NotFoundError, match="Coupon not found"):
            coupon_service.get_for_merchant(other_merchant.id, coupon.id)

    def test_list_by_boolean_string(self, coupon_service, merchant):
        active = coupon_service.create(merchant.id, _draft("ON"))
        inactive = coupon_service.create(merchant.id, _draft("OFF", status=False))

        assert [c.id for c in coupon_service.list_for_merchant(merchant.id)] == [
            active.id,
            inactive.id,
        ]
        assert [c.id for c in coupon_service.list_for_merchant(merchant.id, "true")] == [
            active.id
        ]
        assert [c.id for c in coupon_service.list_for_merchant(merchant.id, "false")] == [
            inactive.id
        ]

    def test_list_rejects_invalid_filter(self, coupon_service, merchant):
        with pytest.raises(ValidationError, match="Invalid status filter"):
            coupon_service.list_for_merchant(merchant.id, "maybe")

    def test_list_by_label(self, coupon_service, merchant):
        active = coupon_service.create(merchant.id, _draft("ON"))
        inactive = coupon_service.create(merchant.id, _draft("OFF", status=False))

        assert [c.id for c in coupon_service.list_by_label(merchant.id, "active")] == [active.id]
        assert [c.id for c in coupon_service.list_by_label(merchant.id, "inactive")] == [
            inactive.id
        ]
        assert len(coupon_service.list_by_label(merchant.id, "whatever")) == 2

    def test_list_missing_merchant(self, coupon_service):
        with pytest.raises(NotFoundError):
            coupon_service.list_for_merchant(999)


class TestActivateDeactivate:
    def test_deactivate(self, coupon_service, coupon):
        assert coupon_service.deactivate(coupon).status is False

    def test_deactivate_with_pending_invoice(
        self, coupon_service, db_session, merchant, customer, coupon
    ):
        _invoice(db_session, merchant, customer, coupon)
        with pytest.raises(ConflictError, match="Cannot deactivate coupon with pending invoices"):
            coupon_service.deactivate(coupon)
        db_session.refresh(coupon)
        assert coupon.status is True

    def test_deactivate_with_completed_invoice(
        self, coupon_service, db_session, merchant, customer, coupon
    ):
        _invoice(db_session, merchant, customer, coupon, status=InvoiceStatus.COMPLETED.value)
        assert coupon_service.deactivate(coupon).status is False

    def test_deactivate_inactive_coupon(self, coupon_service, coupon):
        coupon_service.deactivate(coupon)
        assert coupon_service.deactivate(coupon).status is False

    def test_activate(self, coupon_service, coupon):
        coupon_service.deactivate(coupon)
        assert coupon_service.activate(coupon).status is True

    def test_activate_is_idempotent(self, coupon_service, coupon):
        assert coupon_service.activate(coupon).status is True
        assert coupon_service.activate(coupon).status is True

    def test_activate_ignores_cap_by_default(self, coupon_service, db_session, merchant):
        extra = coupon_service.create(merchant.id, _draft("EXTRA", status=False))
        for i in range(5):
            coupon_service.create(merchant.id, _draft(f"CODE{i}"))
        coupon_service.activate(extra)
        assert CouponRepository(db_session).count_active(merchant.id) == 6

    def test_activate_enforces_cap_when_configured(
        self, coupon_service, db_session, merchant, monkeypatch
    ):
        monkeypatch.setattr(settings, "ENFORCE_CAP_ON_ACTIVATE", True)
        extra = coupon_service.create(merchant.id, _draft("EXTRA", status=False))
        for i in range(5):
            coupon_service.create(merchant.id, _draft(f"CODE{i}"))
        with pytest.raises(ConflictError, match="cannot have more than 5 active coupons"):
            coupon_service.activate(extra)
        db_session.refresh(extra)
        assert extra.status is False


class TestDelete:
    def test_delete_unused_coupon(self, coupon_service, db_session, coupon):
        coupon_id = coupon.id
        coupon_service.delete(coupon)
        assert CouponRepository(db_session).get_by_id(coupon_id) is None

    def test_delete_referenced_coupon_is_guarded(
        self, coupon_service, db_session, merchant, customer, coupon
    ):
        _invoice(db_session, merchant, customer, coupon, status=InvoiceStatus.COMPLETED.value)
        with pytest.raises(ConflictError, match="Cannot delete coupon referenced by invoices"):
            coupon_service.delete(coupon)
        assert CouponRepository(db_session).get_by_id(coupon.id) is not None

    def test_delete_without_guard_detaches_invoices(
        self, coupon_service, db_session, merchant, customer, coupon, monkeypatch
    ):
        monkeypatch.setattr(settings, "GUARD_COUPON_DELETE", False)
        invoice = _invoice(db_session, merchant, customer, coupon)
        coupon_id = coupon.id
        coupon_service.delete(coupon)

        assert CouponRepository(db_session).get_by_id(coupon_id) is None
        db_session.refresh(invoice)
        assert invoice.coupon_id is None


class TestUsageCount:
    def test_counts_invoices_of_any_status(
        self, coupon_service, db_session, merchant, customer, coupon
    ):
        _invoice(db_session, merchant, customer, coupon)
        _invoice(db_session, merchant, customer, coupon, status=InvoiceStatus.COMPLETED.value)
        _invoice(db_session, merchant, customer, coupon, status=InvoiceStatus.RETURNED.value)
        assert coupon_service.usage_count(coupon) == 3

    def test_unused_coupon(self, coupon_service, coupon):
        assert coupon_service.usage_count(coupon) == 0

    def test_usage_counts_for_many(self, coupon_service, db_session, merchant, customer, coupon):
        unused = coupon_service.create(merchant.id, _draft("UNUSED"))
        _invoice(db_session, merchant, customer, coupon)
        assert coupon_usage.usage_counts(db_session, [coupon.id, unused.id]) == {
            coupon.id: 1,
            unused.id: 0,
        }
        assert coupon_usage.usage_counts(db_session, []) == {}
