"""Merchant API endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from storefront.core.database import get_db
from storefront.core.errors import NotFoundError
from storefront.repositories.item_repository import ItemRepository
from storefront.repositories.merchant_repository import MerchantRepository
from storefront.schemas.coupon import CouponStatusEntry
from storefront.schemas.merchant import (
    MerchantCreate,
    MerchantDocument,
    MerchantListDocument,
    MerchantResource,
    MerchantUpdate,
)
from storefront.services.coupon_service import CouponService

router = APIRouter()


@router.get(
    "/merchants",
    response_model=MerchantListDocument,
    response_model_exclude_none=True,
    summary="List merchants",
)
async def list_merchants(
    sort: str | None = Query(default=None, alias="sorted", description='"age" lists newest first'),
    status: str | None = Query(default=None, description='"returned" keeps merchants with returns'),
    count: str | None = Query(default=None, description='"true" adds item_count'),
    db: Session = Depends(get_db),
) -> MerchantListDocument:
    """List merchants with their coupon counts."""
    repo = MerchantRepository(db)
    merchants = repo.get_all(sort=sort, status=status)
    ids = [merchant.id for merchant in merchants]

    coupons_counts = repo.coupons_counts(ids)  # type: ignore[arg-type]
    invoice_coupon_counts = repo.invoice_coupon_counts(ids)  # type: ignore[arg-type]
    item_counts = repo.item_counts(ids) if count == "true" else None  # type: ignore[arg-type]

    data = []
    for merchant in merchants:
        counts = {
            "coupons_count": coupons_counts.get(merchant.id, 0),
            "invoice_coupon_count": invoice_coupon_counts.get(merchant.id, 0),
        }
        if item_counts is not None:
            counts["item_count"] = item_counts.get(merchant.id, 0)
        data.append(MerchantResource.from_model(merchant, **counts))
    return MerchantListDocument(data=data)


@router.get(
    "/merchants/find",
    response_model=MerchantDocument,
    response_model_exclude_none=True,
    summary="Find merchant by name",
    responses={
        400: {"description": "Name parameter missing"},
        404: {"description": "No merchant found"},
    },
)
async def find_merchant(
    name: str | None = Query(default=None),
    db: Session = Depends(get_db),
) -> MerchantDocument:
    """Find the first merchant whose name contains the fragment."""
    if not name:
        raise HTTPException(status_code=400, detail="you need to specify a name")
    merchant = MerchantRepository(db).find_by_name(name)
    if not merchant:
        raise HTTPException(status_code=404, detail="No merchant found")
    return MerchantDocument(data=MerchantResource.from_model(merchant))


@router.post(
    "/merchants",
    response_model=MerchantDocument,
    response_model_exclude_none=True,
    status_code=201,
    summary="Create merchant",
    responses={422: {"description": "Validation error"}},
)
async def create_merchant(
    data: MerchantCreate,
    db: Session = Depends(get_db),
) -> MerchantDocument:
    merchant = MerchantRepository(db).create(data)
    return MerchantDocument(data=MerchantResource.from_model(merchant))


@router.get(
    "/merchants/{merchant_id}",
    response_model=MerchantDocument,
    response_model_exclude_none=True,
    summary="Get merchant",
    responses={404: {"description": "Merchant not found"}},
)
async def get_merchant(
    merchant_id: int,
    db: Session = Depends(get_db),
) -> MerchantDocument:
    merchant = MerchantRepository(db).get_by_id(merchant_id)
    if not merchant:
        raise HTTPException(status_code=404, detail="Merchant not found")
    return MerchantDocument(data=MerchantResource.from_model(merchant))


@router.patch(
    "/merchants/{merchant_id}",
    response_model=MerchantDocument,
    response_model_exclude_none=True,
    summary="Update merchant",
    responses={
        404: {"description": "Merchant not found"},
        422: {"description": "Validation error"},
    },
)
async def update_merchant(
    merchant_id: int,
    data: MerchantUpdate,
    db: Session = Depends(get_db),
) -> MerchantDocument:
    merchant = MerchantRepository(db).update(merchant_id, data)
    if not merchant:
        raise HTTPException(status_code=404, detail="Merchant not found")
    return MerchantDocument(data=MerchantResource.from_model(merchant))


@router.delete(
    "/merchants/{merchant_id}",
    status_code=204,
    summary="Delete merchant",
    description="Delete a merchant together with its items, invoices and coupons.",
    responses={404: {"description": "Merchant not found"}},
)
async def delete_merchant(
    merchant_id: int,
    db: Session = Depends(get_db),
) -> Response:
    if not MerchantRepository(db).delete(merchant_id):
        raise HTTPException(status_code=404, detail="Merchant not found")
    return Response(status_code=204)


@router.get(
    "/items/{item_id}/merchant",
    response_model=MerchantDocument,
    response_model_exclude_none=True,
    summary="Get item merchant",
    responses={404: {"description": "Item or merchant not found"}},
)
async def get_item_merchant(
    item_id: int,
    db: Session = Depends(get_db),
) -> MerchantDocument:
    item = ItemRepository(db).get_by_id(item_id)
    if not item:
        raise HTTPException(status_code=404, detail="Item not found")
    merchant = MerchantRepository(db).get_by_id(item.merchant_id)  # type: ignore[arg-type]
    if not merchant:
        raise HTTPException(status_code=404, detail="Merchant not found")
    return MerchantDocument(data=MerchantResource.from_model(merchant))


@router.get(
    "/merchants/{merchant_id}/coupon_statuses",
    response_model=list[CouponStatusEntry],
    summary="List merchant coupons by status label",
    responses={404: {"description": "Merchant not found"}},
)
async def list_coupon_statuses(
    merchant_id: int,
    status: str | None = Query(default=None, description='"active" or "inactive"'),
    db: Session = Depends(get_db),
) -> list[CouponStatusEntry]:
    """List coupons with their status as a label; unknown labels return all coupons."""
    try:
        coupons = CouponService(db).list_by_label(merchant_id, status)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from None
    return [CouponStatusEntry.from_model(coupon) for coupon in coupons]
