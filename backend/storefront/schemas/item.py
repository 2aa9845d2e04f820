from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from storefront.models.item import Item


class ItemCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    unit_price: Decimal = Field(..., ge=0)
    merchant_id: int


class ItemUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, min_length=1)
    unit_price: Decimal | None = Field(default=None, ge=0)
    merchant_id: int | None = None

    @field_validator("name", "description", "unit_price", "merchant_id")
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        # Omit a field to leave it unchanged
        if v is None:
            raise ValueError("may not be null")
        return v


class ItemAttributes(BaseModel):
    name: str
    description: str
    unit_price: Decimal
    merchant_id: str


class ItemResource(BaseModel):
    id: str
    type: str = "item"
    attributes: ItemAttributes

    @classmethod
    def from_model(cls, item: Item) -> "ItemResource":
        return cls(
            id=str(item.id),
            attributes=ItemAttributes(
                name=str(item.name),
                description=str(item.description),
                unit_price=item.unit_price,
                merchant_id=str(item.merchant_id),
            ),
        )


class ItemDocument(BaseModel):
    data: ItemResource


class ItemListDocument(BaseModel):
    data: list[ItemResource]
