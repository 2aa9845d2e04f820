"""Merchant schemas."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from storefront.models.merchant import Merchant


class MerchantCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=255)


class MerchantUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str | None = Field(default=None, min_length=1, max_length=255)

    @field_validator("name")
    @classmethod
    def reject_null(cls, v: str | None) -> str:
        # Omit a field to leave it unchanged
        if v is None:
            raise ValueError("may not be null")
        return v


class MerchantAttributes(BaseModel):
    name: str
    coupons_count: int | None = None
    invoice_coupon_count: int | None = None
    item_count: int | None = None


class MerchantResource(BaseModel):
    id: str
    type: str = "merchant"
    attributes: MerchantAttributes

    @classmethod
    def from_model(cls, merchant: Merchant, **counts: int) -> "MerchantResource":
        return cls(
            id=str(merchant.id),
            attributes=MerchantAttributes(name=str(merchant.name), **counts),
        )


class MerchantDocument(BaseModel):
    data: MerchantResource


class MerchantListDocument(BaseModel):
    data: list[MerchantResource]
