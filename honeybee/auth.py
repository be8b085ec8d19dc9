# HONEYBEE/backend/honeybee/auth.py : employee sign-in, sessions and the current employee

"""
Employee authentication.

The Authenticator is a small state machine:

    unknown -> checking -> authenticated | anonymous
    authenticated -> anonymous   (sign-out or failed re-validation)

It never raises across its public operations. Record store failures during
initialize() or sign_in() count as an invalid session / invalid credentials, so a
caller is either fully authenticated or anonymous, never in between.
"""

import logging
import secrets
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import bcrypt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from honeybee import config
from honeybee.database import get_db
from honeybee.errors import (
    BackendUnavailable,
    HoneyBeeError,
    InvalidCredentials,
    SessionInvalid,
    ValidationError,
)
from honeybee.schemas.schemas import EmployeeSnapshot
from honeybee.session_store import SessionStore, session_store_for
from honeybee.store.record_store import RecordStore

logger = logging.getLogger(__name__)


# ============================================
# PASSWORDS
# ============================================

def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=config.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: Optional[str]) -> bool:
    """Exact comparison; bcrypt.checkpw is timing-safe"""
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed hash or password longer than bcrypt accepts
        return False


def generate_token() -> str:
    return secrets.token_urlsafe(32)


# ============================================
# AUTHENTICATOR
# ============================================

class AuthState(str, Enum):
    UNKNOWN = "unknown"
    CHECKING = "checking"
    AUTHENTICATED = "authenticated"
    ANONYMOUS = "anonymous"


@dataclass
class AuthResult:
    success: bool
    employee: Optional[EmployeeSnapshot] = None
    error: Optional[HoneyBeeError] = None


class Authenticator:
    def __init__(self, record_store: RecordStore, session_store: SessionStore):
        self.record_store = record_store
        self.session_store = session_store
        self.state = AuthState.UNKNOWN
        self.employee: Optional[EmployeeSnapshot] = None

    @property
    def is_authenticated(self) -> bool:
        return self.state == AuthState.AUTHENTICATED

    def initialize(self) -> AuthResult:
        """Re-validates the stored session against the employees table"""
        self.state = AuthState.CHECKING
        stored = self.session_store.load()
        if stored is None:
            self._become_anonymous()
            return AuthResult(success=False)

        try:
            row = self.record_store.find_one(
                "employees",
                {"id": stored.id, "is_active": True},
                join=["companies"],
            )
        except BackendUnavailable:
            row = None

        if row is None:
            logger.info(f"Session for employee {stored.id} is no longer valid")
            self.session_store.clear()
            self._become_anonymous()
            return AuthResult(success=False, error=SessionInvalid())

        # The fresh row replaces the stored copy
        return self._become_authenticated(row.snapshot())

    def sign_in(self, name: str, password: str) -> AuthResult:
        if not name or not password:
            # Rejected before any lookup; an existing session is left alone
            if not self.is_authenticated:
                self._become_anonymous()
            return AuthResult(success=False, error=ValidationError("Please enter your name and password"))

        self.state = AuthState.CHECKING
        try:
            candidates = self.record_store.find(
                "employees",
                {"name": name, "is_active": True},
                join=["companies"],
            )
        except BackendUnavailable:
            candidates = []

        match = next(
            (row for row in candidates if row.name == name and verify_password(password, row.password_hash)),
            None,
        )
        if match is None:
            logger.info(f"Failed sign-in for {name!r}")
            self.session_store.clear()
            self._become_anonymous()
            return AuthResult(success=False, error=InvalidCredentials())

        logger.info(f"Employee {match.id} signed in")
        return self._become_authenticated(match.snapshot())

    def sign_out(self) -> None:
        self.session_store.clear()
        self._become_anonymous()

    def _become_authenticated(self, snapshot: EmployeeSnapshot) -> AuthResult:
        self.session_store.save(snapshot)
        self.employee = snapshot
        self.state = AuthState.AUTHENTICATED
        return AuthResult(success=True, employee=snapshot)

    def _become_anonymous(self) -> None:
        self.employee = None
        self.state = AuthState.ANONYMOUS


# ============================================
# FASTAPI DEPENDENCIES
# ============================================

bearer_scheme = HTTPBearer(auto_error=False)


def get_token(credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)) -> str:
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return credentials.credentials


def get_authenticator(token: str = Depends(get_token), db: Session = Depends(get_db)) -> Authenticator:
    return Authenticator(RecordStore(db), session_store_for(token))


def get_current_employee(authenticator: Authenticator = Depends(get_authenticator)) -> EmployeeSnapshot:
    result = authenticator.initialize()
    if not result.success:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=SessionInvalid().message,
            headers={"WWW-Authenticate": "Bearer"},
        )
    return result.employee
