# HONEYBEE/backend/honeybee/routes/customers.py

from fastapi import APIRouter, Depends, HTTPException
from typing import List

from honeybee.errors import HoneyBeeError
from honeybee.routes.invoices import get_billing_service
from honeybee.schemas import schemas
from honeybee.services.billing_service import BillingService

router = APIRouter(prefix="/customers", tags=["customers"])


@router.get("/", response_model=List[schemas.CustomerSummary])
def list_customers(service: BillingService = Depends(get_billing_service)):
    """Customers derived from invoices, biggest spenders first"""
    try:
        return service.list_customers()
    except HoneyBeeError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
