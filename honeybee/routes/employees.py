# HONEYBEE/backend/honeybee/routes/employees.py

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List

from honeybee.database import get_db
from honeybee.errors import HoneyBeeError
from honeybee.permissions import require_employee_manager
from honeybee.schemas import schemas
from honeybee.services.employee_service import EmployeeService
from honeybee.store.record_store import RecordStore

router = APIRouter(prefix="/employees", tags=["employees"])


def get_employee_service(
    db: Session = Depends(get_db),
    current_employee: schemas.EmployeeSnapshot = Depends(require_employee_manager)
) -> EmployeeService:
    return EmployeeService(RecordStore(db), current_employee.company_id)


@router.get("/", response_model=List[schemas.EmployeeSnapshot])
def list_employees(service: EmployeeService = Depends(get_employee_service)):
    """Employees of the caller's company, by name"""
    try:
        return service.list_employees()
    except HoneyBeeError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("/", response_model=schemas.EmployeeSnapshot)
def add_employee(
    employee: schemas.EmployeeCreate,
    service: EmployeeService = Depends(get_employee_service)
):
    try:
        return service.add_employee(employee)
    except HoneyBeeError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.patch("/{employee_id}", response_model=schemas.EmployeeSnapshot)
def update_employee(
    employee_id: str,
    patch: schemas.EmployeeUpdate,
    service: EmployeeService = Depends(get_employee_service)
):
    """Changes role, active flag or email"""
    try:
        return service.update_employee(employee_id, patch)
    except HoneyBeeError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("/{employee_id}/toggle-active", response_model=schemas.EmployeeSnapshot)
def toggle_active(employee_id: str, service: EmployeeService = Depends(get_employee_service)):
    try:
        return service.toggle_active(employee_id)
    except HoneyBeeError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete("/{employee_id}")
def delete_employee(employee_id: str, service: EmployeeService = Depends(get_employee_service)):
    try:
        service.delete_employee(employee_id)
    except HoneyBeeError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return {"message": "Employee removed successfully"}
