# HONEYBEE/backend/honeybee/services/employee_service.py : employee management

import logging
import re
from typing import List

from honeybee import config
from honeybee.auth import hash_password
from honeybee.constants import ROLE_EMPLOYEE
from honeybee.errors import NotFound, ValidationError
from honeybee.schemas import schemas
from honeybee.store.record_store import RecordStore

logger = logging.getLogger(__name__)

# Fields an admin or manager may change on an existing employee
UPDATABLE_FIELDS = ("role", "is_active", "email")

# bcrypt only looks at the first 72 bytes
MAX_PASSWORD_BYTES = 72


def validate_password(password: str, policy: dict = None) -> None:
    """Raises ValidationError when the password breaks the company policy"""
    policy = policy or config.get_password_policy()

    if len(password) < policy["min_length"]:
        raise ValidationError(f"Password must be at least {policy['min_length']} characters long")
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError("Password is too long")
    if policy["require_uppercase"] and not re.search(r"[A-Z]", password):
        raise ValidationError("Password must contain at least one uppercase letter")
    if policy["require_lowercase"] and not re.search(r"[a-z]", password):
        raise ValidationError("Password must contain at least one lowercase letter")
    if policy["require_numbers"] and not re.search(r"\d", password):
        raise ValidationError("Password must contain at least one digit")
    if policy["require_special_chars"] and not re.search(r"[^A-Za-z0-9]", password):
        raise ValidationError("Password must contain at least one special character")


class EmployeeService:
    """Employees of one company; rows of other companies are invisible"""

    def __init__(self, store: RecordStore, company_id: str):
        self.store = store
        self.company_id = company_id

    def list_employees(self) -> List[schemas.EmployeeSnapshot]:
        rows = self.store.find(
            "employees",
            {"company_id": self.company_id},
            order_by="name",
            join=["companies"],
        )
        return [row.snapshot() for row in rows]

    def get_employee(self, employee_id: str) -> schemas.EmployeeRecord:
        row = self.store.find_one("employees", {"id": employee_id, "company_id": self.company_id})
        if row is None:
            raise NotFound("Employee not found")
        return row

    def add_employee(self, payload: schemas.EmployeeCreate) -> schemas.EmployeeSnapshot:
        if not payload.name or not payload.name.strip() or not payload.password:
            raise ValidationError("Please fill in the name and password fields.")
        validate_password(payload.password)

        row = self.store.insert(
            "employees",
            {
                "name": payload.name,
                "email": payload.email or None,
                "password_hash": hash_password(payload.password),
                "role": payload.role or ROLE_EMPLOYEE,
                "company_id": self.company_id,
                "is_active": True,
            },
            join=["companies"],
        )
        logger.info(f"Employee {row.id} added to company {self.company_id}")
        return row.snapshot()

    def update_employee(self, employee_id: str, patch: schemas.EmployeeUpdate) -> schemas.EmployeeSnapshot:
        self.get_employee(employee_id)
        changes = {
            field: value
            for field, value in patch.model_dump(exclude_unset=True).items()
            if field in UPDATABLE_FIELDS and (value is not None or field == "email")
        }
        if "role" in changes and not changes["role"].strip():
            raise ValidationError("Role cannot be empty")
        if changes:
            self.store.update("employees", employee_id, changes)
            logger.info(f"Employee {employee_id} updated: {sorted(changes)}")
        return self.get_employee(employee_id).snapshot()

    def toggle_active(self, employee_id: str) -> schemas.EmployeeSnapshot:
        employee = self.get_employee(employee_id)
        return self.update_employee(employee_id, schemas.EmployeeUpdate(is_active=not employee.is_active))

    def delete_employee(self, employee_id: str) -> None:
        self.get_employee(employee_id)
        self.store.delete("employees", employee_id)
        logger.info(f"Employee {employee_id} removed from company {self.company_id}")
