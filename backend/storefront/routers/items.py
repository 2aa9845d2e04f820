from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from storefront.core.database import get_db
from storefront.repositories.item_repository import ItemRepository
from storefront.repositories.merchant_repository import MerchantRepository
from storefront.schemas.item import (
    ItemCreate,
    ItemDocument,
    ItemListDocument,
    ItemResource,
    ItemUpdate,
)

router = APIRouter()


@router.get(
    "/items",
    response_model=ItemListDocument,
    summary="List items",
)
async def list_items(
    sort: str | None = Query(
        default=None, alias="sorted", description='"price" lists cheapest first'
    ),
    db: Session = Depends(get_db),
) -> ItemListDocument:
    items = ItemRepository(db).get_all(sort=sort)
    return ItemListDocument(data=[ItemResource.from_model(item) for item in items])


@router.get(
    "/items/find_all",
    response_model=ItemListDocument,
    summary="Search items",
    responses={400: {"description": "Missing or conflicting search parameters"}},
)
async def find_all_items(
    name: str | None = Query(default=None),
    min_price: Decimal | None = Query(default=None, ge=0),
    max_price: Decimal | None = Query(default=None, ge=0),
    db: Session = Depends(get_db),
) -> ItemListDocument:
    """Find items by name fragment or by price range, never both."""
    by_price = min_price is not None or max_price is not None
    if name and by_price:
        raise HTTPException(status_code=400, detail="Cannot search by name and price together")
    if not name and not by_price:
        raise HTTPException(status_code=400, detail="you need to specify a name or a price")
    items = ItemRepository(db).find_all(name=name, min_price=min_price, max_price=max_price)
    return ItemListDocument(data=[ItemResource.from_model(item) for item in items])


@router.get(
    "/items/{item_id}",
    response_model=ItemDocument,
    summary="Get item",
    responses={404: {"description": "Item not found"}},
)
async def get_item(
    item_id: int,
    db: Session = Depends(get_db),
) -> ItemDocument:
    item = ItemRepository(db).get_by_id(item_id)
    if not item:
        raise HTTPException(status_code=404, detail="Item not found")
    return ItemDocument(data=ItemResource.from_model(item))


@router.post(
    "/items",
    response_model=ItemDocument,
    status_code=201,
    summary="Create item",
    responses={
        404: {"description": "Merchant not found"},
        422: {"description": "Validation error"},
    },
)
async def create_item(
    data: ItemCreate,
    db: Session = Depends(get_db),
) -> ItemDocument:
    if MerchantRepository(db).get_by_id(data.merchant_id) is None:
        raise HTTPException(status_code=404, detail="Merchant not found")
    item = ItemRepository(db).create(data)
    return ItemDocument(data=ItemResource.from_model(item))


@router.patch(
    "/items/{item_id}",
    response_model=ItemDocument,
    summary="Update item",
    responses={
        404: {"description": "Item or merchant not found"},
        422: {"description": "Validation error"},
    },
)
async def update_item(
    item_id: int,
    data: ItemUpdate,
    db: Session = Depends(get_db),
) -> ItemDocument:
    if data.merchant_id is not None and MerchantRepository(db).get_by_id(data.merchant_id) is None:
        raise HTTPException(status_code=404, detail="Merchant not found")
    item = ItemRepository(db).update(item_id, data)
    if not item:
        raise HTTPException(status_code=404, detail="Item not found")
    return ItemDocument(data=ItemResource.from_model(item))


@router.delete(
    "/items/{item_id}",
    status_code=204,
    summary="Delete item",
    description="Delete an item together with the invoice items that reference it.",
    responses={404: {"description": "Item not found"}},
)
async def delete_item(
    item_id: int,
    db: Session = Depends(get_db),
) -> Response:
    if not ItemRepository(db).delete(item_id):
        raise HTTPException(status_code=404, detail="Item not found")
    return Response(status_code=204)


@router.get(
    "/merchants/{merchant_id}/items",
    response_model=ItemListDocument,
    summary="List merchant items",
    responses={404: {"description": "Merchant not found"}},
)
async def list_merchant_items(
    merchant_id: int,
    db: Session = Depends(get_db),
) -> ItemListDocument:
    if MerchantRepository(db).get_by_id(merchant_id) is None:
        raise HTTPException(status_code=404, detail="Merchant not found")
    items = ItemRepository(db).get_all(merchant_id=merchant_id)
    return ItemListDocument(data=[ItemResource.from_model(item) for item in items])
