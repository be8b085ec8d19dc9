# HONEYBEE/backend/honeybee/routes/invoices.py

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from honeybee.auth import get_current_employee
from honeybee.database import get_db
from honeybee.errors import HoneyBeeError
from honeybee.schemas import schemas
from honeybee.services.billing_service import BillingService
from honeybee.store.record_store import RecordStore

router = APIRouter(prefix="/invoices", tags=["invoices"])


def get_billing_service(
    db: Session = Depends(get_db),
    current_employee: schemas.EmployeeSnapshot = Depends(get_current_employee)
) -> BillingService:
    return BillingService(RecordStore(db), current_employee.company_id)


@router.get("/", response_model=List[schemas.InvoiceRecord])
def list_invoices(
    status: Optional[str] = Query(None, description="Only invoices with this status"),
    service: BillingService = Depends(get_billing_service)
):
    """Invoices of the company, newest first"""
    try:
        return service.list_invoices(status)
    except HoneyBeeError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("/", response_model=schemas.InvoiceRecord)
def create_invoice(
    invoice: schemas.InvoiceCreate,
    service: BillingService = Depends(get_billing_service)
):
    """Creates an invoice and its items; totals are computed server-side"""
    try:
        return service.create_invoice(invoice)
    except HoneyBeeError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/{invoice_id}", response_model=schemas.InvoiceRecord)
def get_invoice(invoice_id: str, service: BillingService = Depends(get_billing_service)):
    try:
        return service.get_invoice(invoice_id)
    except HoneyBeeError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.patch("/{invoice_id}/status", response_model=schemas.InvoiceRecord)
def update_invoice_status(
    invoice_id: str,
    update: schemas.InvoiceStatusUpdate,
    service: BillingService = Depends(get_billing_service)
):
    try:
        return service.update_invoice_status(invoice_id, update.status)
    except HoneyBeeError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
