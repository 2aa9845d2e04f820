from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.core.database import get_db
from storefront.repositories.customer_repository import CustomerRepository
from storefront.repositories.merchant_repository import MerchantRepository
from storefront.schemas.customer import (
    CustomerCreate,
    CustomerDocument,
    CustomerListDocument,
    CustomerResource,
)

router = APIRouter()


@router.post(
    "/customers",
    response_model=CustomerDocument,
    status_code=201,
    summary="Create customer",
    responses={422: {"description": "Validation error"}},
)
async def create_customer(
    data: CustomerCreate,
    db: Session = Depends(get_db),
) -> CustomerDocument:
    customer = CustomerRepository(db).create(data)
    return CustomerDocument(data=CustomerResource.from_model(customer))


@router.get(
    "/customers/{customer_id}",
    response_model=CustomerDocument,
    summary="Get customer",
    responses={404: {"description": "Customer not found"}},
)
async def get_customer(
    customer_id: int,
    db: Session = Depends(get_db),
) -> CustomerDocument:
    customer = CustomerRepository(db).get_by_id(customer_id)
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")
    return CustomerDocument(data=CustomerResource.from_model(customer))


@router.get(
    "/merchants/{merchant_id}/customers",
    response_model=CustomerListDocument,
    summary="List merchant customers",
    description="List customers with at least one invoice at the merchant.",
    responses={404: {"description": "Merchant not found"}},
)
async def list_merchant_customers(
    merchant_id: int,
    db: Session = Depends(get_db),
) -> CustomerListDocument:
    if MerchantRepository(db).get_by_id(merchant_id) is None:
        raise HTTPException(status_code=404, detail="Merchant not found")
    customers = CustomerRepository(db).get_by_merchant_id(merchant_id)
    return CustomerListDocument(data=[CustomerResource.from_model(c) for c in customers])
