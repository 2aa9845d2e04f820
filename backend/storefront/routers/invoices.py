"""Invoice API endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from storefront.core.database import get_db
from storefront.core.errors import ConflictError, NotFoundError
from storefront.models.invoice import Invoice
from storefront.repositories.invoice_item_repository import InvoiceItemRepository
from storefront.schemas.invoice import (
    InvoiceCreate,
    InvoiceDocument,
    InvoiceListDocument,
    InvoiceResource,
)
from storefront.services.invoice_service import InvoiceService
from storefront.services.invoice_total import InvoiceTotalService, round_money

router = APIRouter()


def _invoice_document(db: Session, invoice: Invoice) -> InvoiceDocument:
    """Render an invoice with its line items and its current total."""
    total = round_money(InvoiceTotalService(db).calculate_total(invoice))
    line_items = InvoiceItemRepository(db).get_by_invoice_id(invoice.id)  # type: ignore[arg-type]
    return InvoiceDocument(
        data=InvoiceResource.from_model(invoice, total=total, line_items=line_items)
    )


@router.get(
    "/merchants/{merchant_id}/invoices",
    response_model=InvoiceListDocument,
    summary="List merchant invoices",
    description="List a merchant's invoices with their stored totals.",
    responses={404: {"description": "Merchant not found"}},
)
async def list_merchant_invoices(
    merchant_id: int,
    status: str | None = Query(default=None),
    db: Session = Depends(get_db),
) -> InvoiceListDocument:
    try:
        invoices = InvoiceService(db).list_for_merchant(merchant_id, status)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from None
    return InvoiceListDocument(data=[InvoiceResource.from_model(i) for i in invoices])


@router.get(
    "/customers/{customer_id}/invoices",
    response_model=InvoiceListDocument,
    summary="List customer invoices",
    responses={404: {"description": "Customer not found"}},
)
async def list_customer_invoices(
    customer_id: int,
    db: Session = Depends(get_db),
) -> InvoiceListDocument:
    try:
        invoices = InvoiceService(db).list_for_customer(customer_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from None
    return InvoiceListDocument(data=[InvoiceResource.from_model(i) for i in invoices])


@router.post(
    "/merchants/{merchant_id}/invoices",
    response_model=InvoiceDocument,
    status_code=201,
    summary="Create invoice",
    responses={
        404: {"description": "Merchant, customer, coupon or item not found"},
        422: {"description": "Coupon is not active"},
    },
)
async def create_invoice(
    merchant_id: int,
    data: InvoiceCreate,
    db: Session = Depends(get_db),
) -> InvoiceDocument:
    try:
        invoice = InvoiceService(db).create(merchant_id, data)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from None
    except ConflictError as e:
        raise HTTPException(status_code=422, detail=str(e)) from None
    return _invoice_document(db, invoice)


@router.get(
    "/invoices/{invoice_id}",
    response_model=InvoiceDocument,
    summary="Get invoice",
    description="Get an invoice with its line items and a freshly computed total.",
    responses={404: {"description": "Invoice not found"}},
)
async def get_invoice(
    invoice_id: int,
    db: Session = Depends(get_db),
) -> InvoiceDocument:
    try:
        invoice = InvoiceService(db).get(invoice_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from None
    return _invoice_document(db, invoice)


@router.post(
    "/invoices/{invoice_id}/total",
    response_model=InvoiceDocument,
    summary="Store invoice total",
    description="Compute the invoice total and persist it on the invoice.",
    responses={404: {"description": "Invoice not found"}},
)
async def store_invoice_total(
    invoice_id: int,
    db: Session = Depends(get_db),
) -> InvoiceDocument:
    try:
        invoice = InvoiceService(db).get(invoice_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from None
    invoice = InvoiceTotalService(db).store_total(invoice)
    return _invoice_document(db, invoice)
