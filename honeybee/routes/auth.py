# HONEYBEE/backend/honeybee/routes/auth.py

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from honeybee.auth import Authenticator, generate_token, get_authenticator, get_current_employee
from honeybee.database import get_db
from honeybee.permissions import can_manage_employees
from honeybee.schemas.schemas import CurrentEmployee, EmployeeSnapshot, LoginRequest, Token
from honeybee.session_store import session_store_for
from honeybee.store.record_store import RecordStore

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=Token)
def login(credentials: LoginRequest, db: Session = Depends(get_db)):
    """Employee sign-in with name and password; returns a bearer token"""
    token = generate_token()
    authenticator = Authenticator(RecordStore(db), session_store_for(token))
    result = authenticator.sign_in(credentials.name, credentials.password)
    if not result.success:
        raise HTTPException(status_code=result.error.status_code, detail=result.error.message)
    return {"access_token": token, "token_type": "bearer", "employee": result.employee}


@router.post("/logout")
def logout(authenticator: Authenticator = Depends(get_authenticator)):
    """Drops the session; signing out twice is harmless"""
    authenticator.sign_out()
    return {"message": "Signed out"}


@router.get("/me", response_model=CurrentEmployee)
def me(current_employee: EmployeeSnapshot = Depends(get_current_employee)):
    return {
        "employee": current_employee,
        "can_manage_employees": can_manage_employees(current_employee),
    }
