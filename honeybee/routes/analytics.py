# HONEYBEE/backend/honeybee/routes/analytics.py

from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import sessionmaker
from typing import List, Optional

from honeybee import config
from honeybee.auth import get_current_employee
from honeybee.constants import TIME_RANGES
from honeybee.database import get_session_factory
from honeybee.schemas import schemas
from honeybee.services.data_loader import DashboardLoader, SingleFlight

router = APIRouter(prefix="/analytics", tags=["analytics"])

# Shared across requests so concurrent dashboard loads reuse one fetch per collection
single_flight = SingleFlight()


def get_time_range(
    time_range: str = Query(config.DEFAULT_TIME_RANGE, description="1month, 3months, 6months or 1year")
) -> str:
    if time_range not in TIME_RANGES:
        raise HTTPException(
            status_code=422,
            detail=f"time_range must be one of: {', '.join(TIME_RANGES)}"
        )
    return time_range


def get_reference_date(
    reference_date: Optional[date] = Query(None, description="Month the series ends at (defaults to today)")
) -> date:
    return reference_date or date.today()


def get_dashboard_loader(session_factory: sessionmaker = Depends(get_session_factory)) -> DashboardLoader:
    return DashboardLoader.from_session_factory(session_factory, single_flight)


async def load_snapshot(
    time_range: str = Depends(get_time_range),
    reference_date: date = Depends(get_reference_date),
    loader: DashboardLoader = Depends(get_dashboard_loader),
    current_employee: schemas.EmployeeSnapshot = Depends(get_current_employee)
) -> schemas.AnalyticsSnapshot:
    return await loader.load(current_employee.company_id, time_range, reference_date)


@router.get("/", response_model=schemas.AnalyticsSnapshot)
async def get_analytics(snapshot: schemas.AnalyticsSnapshot = Depends(load_snapshot)):
    """Every analytics figure for the company in one payload"""
    return snapshot


@router.get("/monthly-revenue", response_model=List[schemas.RevenuePoint])
async def get_monthly_revenue(snapshot: schemas.AnalyticsSnapshot = Depends(load_snapshot)):
    """Revenue and invoiced target per month of the selected range"""
    return snapshot.monthly_revenue


@router.get("/customer-segments", response_model=List[schemas.CustomerSegment])
async def get_customer_segments(snapshot: schemas.AnalyticsSnapshot = Depends(load_snapshot)):
    return snapshot.customer_segments


@router.get("/product-performance", response_model=List[schemas.ProductPerformance])
async def get_product_performance(snapshot: schemas.AnalyticsSnapshot = Depends(load_snapshot)):
    return snapshot.product_performance


@router.get("/invoice-status", response_model=List[schemas.InvoiceStatusCount])
async def get_invoice_status(snapshot: schemas.AnalyticsSnapshot = Depends(load_snapshot)):
    return snapshot.invoice_status


@router.get("/kpis", response_model=schemas.Kpis)
async def get_kpis(snapshot: schemas.AnalyticsSnapshot = Depends(load_snapshot)):
    """Revenue, conversion rate, average order value and customer lifetime value"""
    return snapshot.kpis


@router.get("/growth", response_model=List[schemas.GrowthIndicator])
async def get_growth(snapshot: schemas.AnalyticsSnapshot = Depends(load_snapshot)):
    return snapshot.growth
