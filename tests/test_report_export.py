# HONEYBEE/backend/tests/test_report_export.py : report export tests

import io

import pandas as pd
import pytest
from datetime import date

from honeybee.services.analytics_service import compute_kpis, invoice_status_breakdown, monthly_payment_totals
from honeybee.services.report_export import export_report, report_frames

INVOICES = [
    {"customer_name": "Acme", "total_amount": 100, "status": "paid"},
    {"customer_name": "Globex", "total_amount": 40, "status": "sent"},
]
PAYMENTS = [
    {"amount": 100, "status": "completed", "payment_date": date(2024, 5, 2)},
    {"amount": 60, "status": "completed", "payment_date": date(2024, 6, 2)},
]


@pytest.fixture
def frames():
    return report_frames(
        compute_kpis(INVOICES, PAYMENTS),
        monthly_payment_totals(PAYMENTS),
        invoice_status_breakdown(INVOICES),
    )


def test_frames(frames):
    assert list(frames) == ["Summary", "Monthly revenue", "Invoice status"]
    assert frames["Summary"].iloc[0]["Total revenue"] == 160
    assert list(frames["Monthly revenue"]["Period"]) == ["2024-05", "2024-06"]
    assert list(frames["Invoice status"]["Status"]) == ["Paid", "Sent"]


def test_csv_sections(frames):
    text = export_report(frames, "csv").decode("utf-8")
    assert text.startswith("# Summary\n")
    assert "# Monthly revenue\nPeriod,Month,Revenue\n2024-05,May 2024,100.0\n" in text
    assert "# Invoice status\n" in text


def test_xlsx_has_one_sheet_per_section(frames):
    content = export_report(frames, "xlsx")
    sheets = pd.read_excel(io.BytesIO(content), sheet_name=None, engine="openpyxl")
    assert list(sheets) == ["Summary", "Monthly revenue", "Invoice status"]
    assert list(sheets["Monthly revenue"]["Revenue"]) == [100, 60]


def test_empty_report_still_has_headers():
    frames = report_frames(compute_kpis([], []), [], [])
    text = export_report(frames, "csv").decode("utf-8")
    assert "Period,Month,Revenue" in text
    assert "Status,Count,Amount" in text


def test_unknown_format(frames):
    with pytest.raises(ValueError):
        export_report(frames, "pdf")


class TestReportsApi:
    def test_report(self, client, admin_headers):
        client.post("/payments/", headers=admin_headers, json={
            "customer_name": "Acme", "amount": 25, "payment_date": "2024-04-10"
        })
        data = client.get("/reports/", headers=admin_headers).json()
        assert data["summary"]["total_revenue"] == 25
        assert data["monthly_revenue"] == [{"period": "2024-04", "month": "Apr 2024", "amount": 25}]

    def test_export_csv(self, client, admin_headers):
        response = client.get("/reports/export", params={"format": "csv"}, headers=admin_headers)
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert "attachment" in response.headers["content-disposition"]
        assert response.text.startswith("# Summary")

    def test_export_xlsx(self, client, admin_headers):
        response = client.get("/reports/export", params={"format": "xlsx"}, headers=admin_headers)
        assert response.status_code == 200
        assert response.content[:2] == b"PK"

    def test_export_unknown_format(self, client, admin_headers):
        response = client.get("/reports/export", params={"format": "pdf"}, headers=admin_headers)
        assert response.status_code == 422
