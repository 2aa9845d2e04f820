"""Tests for the coupon validity rules and status filter contracts."""

from decimal import Decimal

import pytest

from storefront.core.errors import ValidationError
from storefront.models.merchant import Merchant
from storefront.schemas.coupon import CouponCreate
from storefront.services import coupon_policy


def _draft(**overrides):
    fields = {
        "name": "Buy One Get One 50",
        "code": "BOGO50",
        "discount_type": "percent",
        "discount_value": Decimal("50"),
    }
    fields.update(overrides)
    return CouponCreate(**fields)


@pytest.fixture
def owner():
    return Merchant(id=1, name="Schroeder-Jerde")


class TestValidate:
    def test_valid_draft(self, owner):
        result = coupon_policy.validate(_draft(), owner, code_taken=False, active_count=0)
        assert result.is_valid
        assert result.errors == []

    def test_dollar_type_is_valid(self, owner):
        result = coupon_policy.validate(
            _draft(discount_type="dollar", discount_value=Decimal("10")),
            owner,
            code_taken=False,
            active_count=0,
        )
        assert result.is_valid

    def test_missing_merchant(self):
        result = coupon_policy.validate(_draft(), None, code_taken=False, active_count=0)
        assert not result.is_valid
        assert [(e.field, e.message) for e in result.errors] == [("merchant", "must exist")]

    def test_blank_name(self, owner):
        result = coupon_policy.validate(_draft(name="  "), owner, code_taken=False, active_count=0)
        assert [(e.field, e.message) for e in result.errors] == [("name", "can't be blank")]

    def test_missing_code(self, owner):
        result = coupon_policy.validate(_draft(code=None), owner, code_taken=False, active_count=0)
        assert [(e.field, e.message) for e in result.errors] == [("code", "can't be blank")]

    def test_code_taken(self, owner):
        result = coupon_policy.validate(_draft(), owner, code_taken=True, active_count=0)
        assert [(e.field, e.message) for e in result.errors] == [
            ("code", "has already been taken")
        ]

    def test_missing_discount_value(self, owner):
        result = coupon_policy.validate(
            _draft(discount_value=None), owner, code_taken=False, active_count=0
        )
        assert [(e.field, e.message) for e in result.errors] == [
            ("discount_value", "can't be blank")
        ]

    @pytest.mark.parametrize("value", [Decimal("0"), Decimal("-5")])
    def test_non_positive_discount_value(self, owner, value):
        result = coupon_policy.validate(
            _draft(discount_value=value), owner, code_taken=False, active_count=0
        )
        assert [(e.field, e.message) for e in result.errors] == [
            ("discount_value", "must be greater than 0")
        ]

    def test_unknown_discount_type(self, owner):
        result = coupon_policy.validate(
            _draft(discount_type="bogus"), owner, code_taken=False, active_count=0
        )
        assert [(e.field, e.message) for e in result.errors] == [
            ("discount_type", "is not included in the list")
        ]

    def test_missing_discount_type(self, owner):
        result = coupon_policy.validate(
            _draft(discount_type=None), owner, code_taken=False, active_count=0
        )
        assert [e.message for e in result.errors if e.field == "discount_type"] == [
            "can't be blank",
            "is not included in the list",
        ]

    def test_collects_every_failure(self, owner):
        result = coupon_policy.validate(
            CouponCreate(), owner, code_taken=False, active_count=0
        )
        fields = [e.field for e in result.errors]
        assert "name" in fields
        assert "code" in fields
        assert "discount_value" in fields
        assert "discount_type" in fields

    def test_cap_reached_on_create(self, owner):
        result = coupon_policy.validate(_draft(), owner, code_taken=False, active_count=5)
        assert [(e.field, e.message) for e in result.errors] == [
            ("base", "Merchant cannot have more than 5 active coupons.")
        ]

    def test_cap_applies_to_inactive_drafts(self, owner):
        result = coupon_policy.validate(
            _draft(status=False), owner, code_taken=False, active_count=5
        )
        assert not result.is_valid

    def test_below_cap(self, owner):
        result = coupon_policy.validate(_draft(), owner, code_taken=False, active_count=4)
        assert result.is_valid

    def test_cap_ignored_when_not_creating(self, owner):
        result = coupon_policy.validate(
            _draft(), owner, code_taken=False, active_count=5, creating=False
        )
        assert result.is_valid

    def test_custom_cap(self, owner):
        result = coupon_policy.validate(
            _draft(), owner, code_taken=False, active_count=2, max_active=2
        )
        assert [e.message for e in result.errors] == [
            "Merchant cannot have more than 2 active coupons."
        ]


class TestStatusFilters:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [(None, None), ("", None), ("true", True), ("false", False)],
    )
    def test_boolean_string(self, value, expected):
        assert coupon_policy.filter_by_boolean_string(value) is expected

    @pytest.mark.parametrize("value", ["bogus", "TRUE", "active", "1"])
    def test_boolean_string_rejects_other_values(self, value):
        with pytest.raises(ValidationError, match="Invalid status filter"):
            coupon_policy.filter_by_boolean_string(value)

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("active", True), ("inactive", False), (None, None), ("bogus", None), ("", None)],
    )
    def test_active_label(self, value, expected):
        assert coupon_policy.filter_by_active_label(value) is expected
