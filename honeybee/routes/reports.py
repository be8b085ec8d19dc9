# HONEYBEE/backend/honeybee/routes/reports.py

from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response

from honeybee.errors import HoneyBeeError
from honeybee.routes.invoices import get_billing_service
from honeybee.services.analytics_service import (
    compute_kpis,
    invoice_status_breakdown,
    monthly_payment_totals,
)
from honeybee.services.billing_service import BillingService
from honeybee.services.report_export import EXPORT_FORMATS, export_report, report_frames

router = APIRouter(prefix="/reports", tags=["reports"])


def _report_parts(service: BillingService):
    try:
        invoices = service.list_invoices()
        payments = service.list_payments()
    except HoneyBeeError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return (
        compute_kpis(invoices, payments),
        monthly_payment_totals(payments),
        invoice_status_breakdown(invoices),
    )


@router.get("/")
def get_report(service: BillingService = Depends(get_billing_service)):
    """Summary figures, monthly completed revenue and invoice status distribution"""
    kpis, monthly, statuses = _report_parts(service)
    return {
        "summary": {
            "total_revenue": kpis.total_revenue,
            "total_invoices": kpis.invoice_count,
            "paid_invoices": kpis.paid_invoice_count,
            "total_customers": kpis.customer_count
        },
        "monthly_revenue": [m.model_dump() for m in monthly],
        "invoice_status": [s.model_dump() for s in statuses]
    }


@router.get("/export")
def export(
    format: str = Query("csv", description="csv or xlsx"),
    service: BillingService = Depends(get_billing_service)
):
    """Downloads the report as CSV or as an Excel workbook"""
    if format not in EXPORT_FORMATS:
        raise HTTPException(
            status_code=422,
            detail=f"format must be one of: {', '.join(EXPORT_FORMATS)}"
        )
    content = export_report(report_frames(*_report_parts(service)), format)
    filename = f"report-{date.today().isoformat()}.{format}"
    return Response(
        content=content,
        media_type=EXPORT_FORMATS[format],
        headers={"Content-Disposition": f'attachment; filename="{filename}"'}
    )
