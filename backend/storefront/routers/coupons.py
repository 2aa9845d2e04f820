"""Merchant coupon API endpoints."""

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from storefront.core.database import get_db
from storefront.core.errors import ConflictError, NotFoundError, PersistenceError, ValidationError
from storefront.repositories.merchant_repository import MerchantRepository
from storefront.schemas.coupon import CouponCreate, CouponDocument, CouponListDocument
from storefront.services import coupon_usage
from storefront.services.coupon_service import CouponService

router = APIRouter()


@router.get(
    "/merchants/{merchant_id}/coupons",
    response_model=CouponListDocument,
    summary="List merchant coupons",
    responses={
        404: {"description": "Merchant not found"},
        422: {"description": "Invalid status filter"},
    },
)
async def list_coupons(
    merchant_id: int,
    status: str | None = Query(default=None, description='"true" or "false"'),
    db: Session = Depends(get_db),
) -> CouponListDocument:
    """List a merchant's coupons, optionally only active or inactive ones."""
    service = CouponService(db)
    try:
        coupons = service.list_for_merchant(merchant_id, status)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from None
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e)) from None
    return CouponListDocument(data=coupon_usage.coupon_resources(db, coupons))


@router.get(
    "/merchants/{merchant_id}/coupons/{coupon_id}",
    response_model=CouponDocument,
    summary="Get merchant coupon",
    responses={404: {"description": "Merchant or coupon not found"}},
)
async def get_coupon(
    merchant_id: int,
    coupon_id: int,
    db: Session = Depends(get_db),
) -> CouponDocument:
    """Get a coupon with its usage count."""
    service = CouponService(db)
    try:
        coupon = service.get_for_merchant(merchant_id, coupon_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from None
    return CouponDocument(data=coupon_usage.coupon_resource(db, coupon))


@router.post(
    "/merchants/{merchant_id}/coupons",
    response_model=CouponDocument,
    status_code=201,
    summary="Create merchant coupon",
    responses={
        404: {"description": "Merchant not found"},
        422: {"description": "Validation error"},
    },
)
async def create_coupon(
    merchant_id: int,
    coupon: CouponCreate = Body(..., embed=True),
    db: Session = Depends(get_db),
) -> CouponDocument:
    """Create a coupon for a merchant."""
    if MerchantRepository(db).get_by_id(merchant_id) is None:
        raise HTTPException(status_code=404, detail="Merchant not found")

    service = CouponService(db)
    try:
        created = service.create(merchant_id, coupon)
    except (ValidationError, PersistenceError) as e:
        raise HTTPException(status_code=422, detail=str(e)) from None
    return CouponDocument(data=coupon_usage.coupon_resource(db, created))


@router.patch(
    "/merchants/{merchant_id}/coupons/{coupon_id}",
    response_model=CouponDocument,
    summary="Deactivate merchant coupon",
    responses={
        404: {"description": "Merchant or coupon not found"},
        422: {"description": "Coupon has pending invoices or could not be deactivated"},
    },
)
async def deactivate_coupon(
    merchant_id: int,
    coupon_id: int,
    db: Session = Depends(get_db),
) -> CouponDocument:
    """Deactivate a coupon that no pending invoice references."""
    service = CouponService(db)
    try:
        coupon = service.deactivate(service.get_for_merchant(merchant_id, coupon_id))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from None
    except ConflictError as e:
        raise HTTPException(status_code=422, detail=str(e)) from None
    return CouponDocument(data=coupon_usage.coupon_resource(db, coupon))


@router.patch(
    "/merchants/{merchant_id}/coupons/{coupon_id}/activate",
    response_model=CouponDocument,
    summary="Activate merchant coupon",
    responses={
        404: {"description": "Merchant or coupon not found"},
        422: {"description": "Coupon could not be activated"},
    },
)
async def activate_coupon(
    merchant_id: int,
    coupon_id: int,
    db: Session = Depends(get_db),
) -> CouponDocument:
    """Activate a coupon."""
    service = CouponService(db)
    try:
        coupon = service.activate(service.get_for_merchant(merchant_id, coupon_id))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from None
    except (ConflictError, PersistenceError) as e:
        raise HTTPException(status_code=422, detail=str(e)) from None
    return CouponDocument(data=coupon_usage.coupon_resource(db, coupon))


@router.delete(
    "/merchants/{merchant_id}/coupons/{coupon_id}",
    status_code=204,
    summary="Delete merchant coupon",
    responses={
        404: {"description": "Merchant or coupon not found"},
        422: {"description": "Coupon is referenced by invoices"},
    },
)
async def delete_coupon(
    merchant_id: int,
    coupon_id: int,
    db: Session = Depends(get_db),
) -> Response:
    """Delete a coupon."""
    service = CouponService(db)
    try:
        service.delete(service.get_for_merchant(merchant_id, coupon_id))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from None
    except (ConflictError, PersistenceError) as e:
        raise HTTPException(status_code=422, detail=str(e)) from None
    return Response(status_code=204)
