# HONEYBEE/backend/honeybee/routes/payments.py

from datetime import date
from fastapi import APIRouter, Depends, HTTPException
from typing import List

from honeybee.errors import HoneyBeeError
from honeybee.routes.invoices import get_billing_service
from honeybee.schemas import schemas
from honeybee.services.billing_service import BillingService

router = APIRouter(prefix="/payments", tags=["payments"])


@router.get("/", response_model=List[schemas.PaymentRecord])
def list_payments(service: BillingService = Depends(get_billing_service)):
    try:
        return service.list_payments()
    except HoneyBeeError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("/", response_model=schemas.PaymentRecord)
def create_payment(
    payment: schemas.PaymentCreate,
    service: BillingService = Depends(get_billing_service)
):
    """Records a payment; the payment date defaults to today"""
    try:
        return service.create_payment(payment, today=date.today())
    except HoneyBeeError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
