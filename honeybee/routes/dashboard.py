# HONEYBEE/backend/honeybee/routes/dashboard.py

from datetime import date
from fastapi import APIRouter, Depends, HTTPException

from honeybee.constants import PENDING_INVOICE_STATUSES
from honeybee.errors import HoneyBeeError
from honeybee.routes.analytics import get_reference_date
from honeybee.routes.invoices import get_billing_service
from honeybee.services.analytics_service import calendar_year_revenue, invoice_status_breakdown
from honeybee.services.billing_service import BillingService

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/")
def dashboard_summary(
    reference_date: date = Depends(get_reference_date),
    service: BillingService = Depends(get_billing_service)
):
    """Headline figures of the company for the home screen"""
    try:
        invoices = service.list_invoices()
        payments = service.list_payments()
        products = service.list_products()
        customers = service.list_customers()
    except HoneyBeeError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

    pending = [i for i in invoices if i.status in PENDING_INVOICE_STATUSES]

    return {
        "summary": {
            "total_revenue": round(sum(p.amount for p in payments), 2),
            "total_customers": len(customers),
            "total_products": len(products),
            "pending_invoices": len(pending)
        },
        "monthly_revenue": calendar_year_revenue(payments, reference_date.year),
        "invoice_status": [s.model_dump() for s in invoice_status_breakdown(invoices)],
        "recent_invoices": [
            {
                "id": i.id,
                "invoice_number": i.invoice_number,
                "customer_name": i.customer_name,
                "total_amount": i.total_amount,
                "status": i.status
            }
            for i in invoices[:5]
        ]
    }
