# HONEYBEE/backend/honeybee/services/report_export.py : CSV / Excel export of the reports page

import io
from typing import List

import pandas as pd

from honeybee.schemas import schemas

EXPORT_FORMATS = {
    "csv": "text/csv",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
}


def report_frames(
    kpis: schemas.Kpis,
    monthly: List[schemas.MonthlyTotal],
    statuses: List[schemas.InvoiceStatusCount],
) -> dict:
    """One DataFrame per report section, keyed by sheet name"""
    summary = pd.DataFrame([{
        "Total revenue": kpis.total_revenue,
        "Total invoices": kpis.invoice_count,
        "Paid invoices": kpis.paid_invoice_count,
        "Customers": kpis.customer_count,
    }])
    monthly_df = pd.DataFrame(
        [{"Period": m.period, "Month": m.month, "Revenue": m.amount} for m in monthly],
        columns=["Period", "Month", "Revenue"],
    )
    status_df = pd.DataFrame(
        [{"Status": s.name, "Count": s.count, "Amount": s.amount} for s in statuses],
        columns=["Status", "Count", "Amount"],
    )
    return {"Summary": summary, "Monthly revenue": monthly_df, "Invoice status": status_df}


def export_report(frames: dict, fmt: str = "csv") -> bytes:
    if fmt not in EXPORT_FORMATS:
        raise ValueError(f"Unsupported export format: {fmt}")

    if fmt == "xlsx":
        output = io.BytesIO()
        with pd.ExcelWriter(output, engine="openpyxl") as writer:
            for sheet_name, frame in frames.items():
                frame.to_excel(writer, sheet_name=sheet_name, index=False)
        return output.getvalue()

    # CSV: sections one after another, each under a "# <name>" line
    output = io.StringIO()
    for index, (name, frame) in enumerate(frames.items()):
        if index:
            output.write("\n")
        output.write(f"# {name}\n")
        frame.to_csv(output, index=False)
    return output.getvalue().encode("utf-8")
