# HONEYBEE/backend/tests/conftest.py : test configuration

import sys
import os
from pathlib import Path

# Adds the project root to the PYTHONPATH
BASE_DIR = Path(__file__).parent.parent
sys.path.insert(0, str(BASE_DIR))

# Must be set before honeybee.config is imported
os.environ["DATABASE_URL"] = "sqlite:///./test.db"
os.environ["SESSION_BACKEND"] = "memory"
os.environ["BCRYPT_ROUNDS"] = "4"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from honeybee.main import app
from honeybee.auth import hash_password
from honeybee.database import Base, get_db, get_session_factory
from honeybee.models import models
from honeybee import session_store

PASSWORD = "secret1"


@pytest.fixture(scope="function")
def db_engine(tmp_path):
    """One SQLite file per test; the dashboard loader opens its own sessions on it"""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'test.db'}",
        connect_args={"check_same_thread": False}
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture(scope="function")
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture(autouse=True)
def clear_sessions():
    session_store._MEMORY_STORAGE.clear()
    session_store._MEMORY_EXPIRY.clear()
    yield
    session_store._MEMORY_STORAGE.clear()
    session_store._MEMORY_EXPIRY.clear()


@pytest.fixture
def client(session_factory):
    """Test client bound to the test database"""
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def company(db_session):
    company = models.Company(name="Hive Ltd", email="hello@hive.example")
    db_session.add(company)
    db_session.commit()
    db_session.refresh(company)
    return company


@pytest.fixture
def other_company(db_session):
    company = models.Company(name="Other Co")
    db_session.add(company)
    db_session.commit()
    db_session.refresh(company)
    return company


def add_employee(db_session, company, name, role="employee", is_active=True, password=PASSWORD):
    employee = models.Employee(
        name=name,
        email=f"{name}@hive.example",
        password_hash=hash_password(password),
        role=role,
        is_active=is_active,
        company_id=company.id
    )
    db_session.add(employee)
    db_session.commit()
    db_session.refresh(employee)
    return employee


@pytest.fixture
def employees(db_session, company):
    """admin, manager, employee and a deactivated account"""
    return {
        "admin": add_employee(db_session, company, "alice", role="admin"),
        "manager": add_employee(db_session, company, "mark", role="manager"),
        "employee": add_employee(db_session, company, "emma", role="employee"),
        "inactive": add_employee(db_session, company, "ghost", is_active=False),
    }


def login(client, name, password=PASSWORD):
    response = client.post("/auth/login", json={"name": name, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def admin_headers(client, employees):
    return login(client, "alice")


@pytest.fixture
def employee_headers(client, employees):
    return login(client, "emma")
