# HONEYBEE/backend/honeybee/main.py

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from honeybee import config
from honeybee.routes import (
    analytics,
    auth,
    companies,
    customers,
    dashboard,
    employees,
    invoices,
    payments,
    products,
    reports,
)
from honeybee.database import check_connection, create_tables
import logging
import datetime
import sys
import fastapi
import sqlalchemy

logging.basicConfig(level=config.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("🚀 Starting the HoneyBee API...")

    if check_connection():
        logger.info("✅ Database connection established")
        # Tables are created on startup; use migrations in production
        create_tables()
    else:
        logger.error("❌ Could not connect to the database")

    yield

    logger.info("👋 HoneyBee API stopped")


app = FastAPI(
    title="HoneyBee API",
    description="Invoicing, payments and analytics for small companies and their employees",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "auth",
            "description": "Employee sign-in, sign-out and current session"
        },
        {
            "name": "employees",
            "description": "Employee management (admins and managers)"
        },
        {
            "name": "companies",
            "description": "Company profile"
        },
        {
            "name": "invoices",
            "description": "Invoices and their line items"
        },
        {
            "name": "payments",
            "description": "Received payments"
        },
        {
            "name": "products",
            "description": "Product catalogue and stock"
        },
        {
            "name": "customers",
            "description": "Customers derived from invoices"
        },
        {
            "name": "dashboard",
            "description": "Home screen summary"
        },
        {
            "name": "analytics",
            "description": "Revenue series, customer segments, product performance and KPIs 📊"
        },
        {
            "name": "reports",
            "description": "Reports and CSV / Excel export"
        }
    ]
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(employees.router)
app.include_router(companies.router)
app.include_router(invoices.router)
app.include_router(payments.router)
app.include_router(products.router)
app.include_router(customers.router)
app.include_router(dashboard.router)
app.include_router(analytics.router)
app.include_router(reports.router)


@app.get("/")
def root():
    """
    API root - general information
    """
    return {
        "success": True,
        "message": "HoneyBee backend up and running 🚀",
        "version": app.version,
        "environment": config.ENVIRONMENT,
        "documentation": {
            "swagger": "/docs",
            "redoc": "/redoc"
        },
        "endpoints": {
            "auth": "/auth",
            "employees": "/employees",
            "companies": "/companies",
            "invoices": "/invoices",
            "payments": "/payments",
            "products": "/products",
            "customers": "/customers",
            "dashboard": "/dashboard",
            "analytics": "/analytics",
            "reports": "/reports",
            "docs": "/docs"
        },
        "health_check": "/health"
    }


@app.get("/health")
def health_check():
    """
    Health endpoint for monitoring
    """
    db_status = check_connection()

    return {
        "status": "healthy" if db_status else "unhealthy",
        "database": "connected" if db_status else "disconnected",
        "version": app.version,
        "timestamp": datetime.datetime.now().isoformat()
    }


@app.get("/info")
def info():
    return {
        "name": app.title,
        "description": app.description,
        "version": app.version,
        "python_version": sys.version,
        "fastapi_version": fastapi.__version__,
        "sqlalchemy_version": sqlalchemy.__version__,
        "environment": config.ENVIRONMENT,
        "session_backend": config.SESSION_BACKEND
    }
