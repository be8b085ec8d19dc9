# HONEYBEE/backend/honeybee/permissions.py

from typing import Optional

from fastapi import Depends, HTTPException, status

from honeybee.auth import get_current_employee
from honeybee.constants import EMPLOYEE_MANAGER_ROLES
from honeybee.schemas.schemas import EmployeeSnapshot


def can_manage_employees(identity: Optional[EmployeeSnapshot]) -> bool:
    """Admins and managers only; unknown roles and anonymous callers get nothing"""
    if identity is None:
        return False
    return identity.role in EMPLOYEE_MANAGER_ROLES


def require_employee_manager(
    current_employee: EmployeeSnapshot = Depends(get_current_employee)
) -> EmployeeSnapshot:
    if not can_manage_employees(current_employee):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only admins and managers can manage employees"
        )
    return current_employee
