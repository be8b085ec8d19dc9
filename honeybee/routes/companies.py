# HONEYBEE/backend/honeybee/routes/companies.py

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from honeybee.auth import get_current_employee
from honeybee.database import get_db
from honeybee.errors import HoneyBeeError
from honeybee.permissions import require_employee_manager
from honeybee.schemas import schemas
from honeybee.services.billing_service import BillingService
from honeybee.store.record_store import RecordStore

router = APIRouter(prefix="/companies", tags=["companies"])


@router.get("/me", response_model=schemas.CompanyRecord)
def get_my_company(
    db: Session = Depends(get_db),
    current_employee: schemas.EmployeeSnapshot = Depends(get_current_employee)
):
    """Company of the signed-in employee"""
    try:
        return BillingService(RecordStore(db), current_employee.company_id).get_company()
    except HoneyBeeError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.patch("/me", response_model=schemas.CompanyRecord)
def update_my_company(
    patch: schemas.CompanyUpdate,
    db: Session = Depends(get_db),
    current_employee: schemas.EmployeeSnapshot = Depends(require_employee_manager)
):
    """Company settings; admins and managers only"""
    try:
        return BillingService(RecordStore(db), current_employee.company_id).update_company(patch)
    except HoneyBeeError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
