# HONEYBEE/backend/honeybee/services/analytics_service.py : the analytics aggregator

"""
Turns invoice, payment and product rows into the figures shown on the dashboards.

Everything here is a pure function of its inputs. The "current month" is the
injected reference date, never the system clock, so identical inputs always give
identical output. Malformed or missing values count as zero/empty instead of
raising, and a collection that is None (not fetched yet) counts as empty.
"""

import logging
import math
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from honeybee import config
from honeybee.constants import (
    ENTERPRISE_PERCENT,
    MONTHS_SHORT,
    PENDING_INVOICE_STATUSES,
    PRODUCT_MARGIN_RATE,
    SEGMENT_ENTERPRISE,
    SEGMENT_INDIVIDUAL,
    SEGMENT_SMB,
    SMB_PERCENT,
    TIME_RANGES,
)
from honeybee.schemas import schemas

logger = logging.getLogger(__name__)

MonthKey = Tuple[int, int]


# ========== Field helpers ==========

def _get(row, field, default=None):
    if isinstance(row, dict):
        return row.get(field, default)
    return getattr(row, field, default)


def _amount(value) -> float:
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return 0.0
    # NaN never equals itself
    return amount if amount == amount else 0.0


def _month_key(value) -> Optional[MonthKey]:
    """(year, month) of a date, datetime or ISO string; None when unreadable"""
    if isinstance(value, (date, datetime)):
        return value.year, value.month
    if isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
        return parsed.year, parsed.month
    return None


def _round_half_up(value: float) -> int:
    """Halves go up: 2.5 -> 3, -2.5 -> -2"""
    return int(math.floor(value + 0.5))


def _growth(current: float, previous: float) -> int:
    # Floor of 1 on the denominator: an approximation that avoids dividing by zero
    return _round_half_up(100 * (current - previous) / max(previous, 1))


def resolve_time_range(time_range: Optional[str]) -> str:
    if time_range in TIME_RANGES:
        return time_range
    if config.DEFAULT_TIME_RANGE in TIME_RANGES:
        return config.DEFAULT_TIME_RANGE
    return "6months"


# ========== Time buckets ==========

def month_window(reference_date: date, months: int) -> List[MonthKey]:
    """`months` consecutive calendar months ending at the reference month, oldest first"""
    year, month = reference_date.year, reference_date.month
    window = []
    for _ in range(months):
        window.append((year, month))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    window.reverse()
    return window


def monthly_revenue_series(
    payments: Optional[Sequence],
    invoices: Optional[Sequence],
    reference_date: date,
    time_range: Optional[str] = None,
) -> List[schemas.RevenuePoint]:
    """Completed payments (revenue) and invoiced totals (target) per month of the window"""
    window = month_window(reference_date, TIME_RANGES[resolve_time_range(time_range)])
    revenue: Dict[MonthKey, float] = {key: 0.0 for key in window}
    target: Dict[MonthKey, float] = {key: 0.0 for key in window}

    for payment in payments or []:
        if _get(payment, "status") != "completed":
            continue
        key = _month_key(_get(payment, "payment_date"))
        if key in revenue:
            revenue[key] += _amount(_get(payment, "amount"))

    for invoice in invoices or []:
        key = _month_key(_get(invoice, "created_at"))
        if key in target:
            target[key] += _amount(_get(invoice, "total_amount"))

    series = []
    previous = None
    for year, month in window:
        current = revenue[(year, month)]
        series.append(schemas.RevenuePoint(
            month=MONTHS_SHORT[month - 1],
            year=year,
            month_num=month,
            revenue=round(current, 2),
            target=round(target[(year, month)], 2),
            growth=0 if previous is None else _growth(current, previous),
        ))
        previous = current
    return series


def monthly_payment_totals(payments: Optional[Sequence]) -> List[schemas.MonthlyTotal]:
    """All-time completed payments per calendar month, oldest first (reports)"""
    totals: Dict[MonthKey, float] = {}
    for payment in payments or []:
        if _get(payment, "status") != "completed":
            continue
        key = _month_key(_get(payment, "payment_date"))
        if key is None:
            continue
        totals[key] = totals.get(key, 0.0) + _amount(_get(payment, "amount"))

    return [
        schemas.MonthlyTotal(
            period=f"{year}-{month:02d}",
            month=f"{MONTHS_SHORT[month - 1]} {year}",
            amount=round(amount, 2),
        )
        for (year, month), amount in sorted(totals.items())
    ]


def calendar_year_revenue(payments: Optional[Sequence], year: int) -> List[Dict]:
    """Jan..Dec payment totals of one year, whatever the payment status (dashboard)"""
    totals = [0.0] * 12
    for payment in payments or []:
        key = _month_key(_get(payment, "payment_date"))
        if key is None or key[0] != year:
            continue
        totals[key[1] - 1] += _amount(_get(payment, "amount"))
    return [
        {"name": MONTHS_SHORT[index], "revenue": round(amount, 2)}
        for index, amount in enumerate(totals)
    ]


# ========== Breakdowns ==========

def _ceil_percent(count: int, percent: int) -> int:
    """ceil(count * percent / 100) in integer arithmetic"""
    return (count * percent + 99) // 100


def customer_segments(invoices: Optional[Sequence]) -> List[schemas.CustomerSegment]:
    """
    Ranks customers by lifetime invoiced total and splits the ranking into
    Enterprise (top 20%), SMB (next 40%) and Individual (the rest), boundaries
    rounded up. Each value is that slice's share of the grand total, in percent.
    """
    totals: Dict[str, float] = {}
    for invoice in invoices or []:
        name = _get(invoice, "customer_name")
        if not name:
            continue
        totals[name] = totals.get(name, 0.0) + _amount(_get(invoice, "total_amount"))

    grand_total = sum(totals.values())
    if grand_total <= 0:
        return []

    ranked = sorted(totals.items(), key=lambda item: (-item[1], item[0]))
    count = len(ranked)
    enterprise_end = _ceil_percent(count, ENTERPRISE_PERCENT)
    smb_end = _ceil_percent(count, ENTERPRISE_PERCENT + SMB_PERCENT)
    slices = [
        (SEGMENT_ENTERPRISE, ranked[:enterprise_end]),
        (SEGMENT_SMB, ranked[enterprise_end:smb_end]),
        (SEGMENT_INDIVIDUAL, ranked[smb_end:]),
    ]

    segments = []
    for name, members in slices:
        if not members:
            continue
        total = sum(amount for _, amount in members)
        segments.append(schemas.CustomerSegment(
            name=name,
            value=_round_half_up(100 * total / grand_total),
            customers=len(members),
            total=round(total, 2),
        ))
    return segments


def product_performance(products: Optional[Sequence]) -> List[schemas.ProductPerformance]:
    """Stock stands in for sales and 30% of price for margin; illustrative only"""
    return [
        schemas.ProductPerformance(
            name=_get(product, "name") or "",
            sales=int(_amount(_get(product, "stock"))),
            margin=_round_half_up(_amount(_get(product, "price")) * PRODUCT_MARGIN_RATE),
        )
        for product in products or []
    ]


def invoice_status_breakdown(invoices: Optional[Sequence]) -> List[schemas.InvoiceStatusCount]:
    """Invoice count and amount per status, in order of first appearance"""
    breakdown: Dict[str, Dict] = {}
    for invoice in invoices or []:
        invoice_status = _get(invoice, "status") or "unknown"
        entry = breakdown.setdefault(invoice_status, {"count": 0, "amount": 0.0})
        entry["count"] += 1
        entry["amount"] += _amount(_get(invoice, "total_amount"))

    return [
        schemas.InvoiceStatusCount(
            status=invoice_status,
            name=invoice_status.capitalize(),
            count=entry["count"],
            amount=round(entry["amount"], 2),
        )
        for invoice_status, entry in breakdown.items()
    ]


# ========== KPIs ==========

def _distinct_customers(invoices: Iterable) -> set:
    return {_get(invoice, "customer_name") for invoice in invoices if _get(invoice, "customer_name")}


def compute_kpis(invoices: Optional[Sequence], payments: Optional[Sequence]) -> schemas.Kpis:
    invoices = invoices or []
    payments = payments or []

    total_revenue = sum(
        _amount(_get(p, "amount")) for p in payments if _get(p, "status") == "completed"
    )
    invoice_count = len(invoices)
    paid_count = len([i for i in invoices if _get(i, "status") == "paid"])
    pending_count = len([i for i in invoices if _get(i, "status") in PENDING_INVOICE_STATUSES])
    customer_count = len(_distinct_customers(invoices))

    return schemas.Kpis(
        total_revenue=round(total_revenue, 2),
        invoice_count=invoice_count,
        paid_invoice_count=paid_count,
        pending_invoice_count=pending_count,
        payment_count=len(payments),
        customer_count=customer_count,
        conversion_rate=round(paid_count / invoice_count * 100, 2) if invoice_count else 0,
        average_order_value=round(total_revenue / paid_count, 2) if paid_count else 0,
        customer_lifetime_value=round(total_revenue / customer_count, 2) if customer_count else 0,
    )


def growth_indicators(
    invoices: Optional[Sequence],
    payments: Optional[Sequence],
    products: Optional[Sequence],
    reference_date: date,
) -> List[schemas.GrowthIndicator]:
    """Revenue and customer growth of the reference month over the previous one, plus the active product share"""
    invoices = invoices or []
    products = products or []
    previous_month, current_month = month_window(reference_date, 2)

    series = monthly_revenue_series(payments, invoices, reference_date, "3months")
    revenue_growth = series[-1].growth

    current_customers = {
        _get(i, "customer_name") for i in invoices
        if _get(i, "customer_name") and _month_key(_get(i, "created_at")) == current_month
    }
    previous_customers = {
        _get(i, "customer_name") for i in invoices
        if _get(i, "customer_name") and _month_key(_get(i, "created_at")) == previous_month
    }
    customer_growth = _growth(len(current_customers), len(previous_customers))

    active = len([p for p in products if _get(p, "status") == "active"])
    product_share = _round_half_up(100 * active / len(products)) if products else 0

    return [
        schemas.GrowthIndicator(name="Revenue Growth", value=revenue_growth),
        schemas.GrowthIndicator(name="Customer Growth", value=customer_growth),
        schemas.GrowthIndicator(name="Product Growth", value=product_share),
    ]


# ========== Snapshot ==========

class AnalyticsAggregator:
    """Bundles the aggregations around one reference date"""

    def __init__(self, reference_date: date):
        self.reference_date = reference_date

    def snapshot(
        self,
        invoices: Optional[Sequence] = None,
        payments: Optional[Sequence] = None,
        products: Optional[Sequence] = None,
        time_range: Optional[str] = None,
    ) -> schemas.AnalyticsSnapshot:
        time_range = resolve_time_range(time_range)
        return schemas.AnalyticsSnapshot(
            time_range=time_range,
            reference_date=self.reference_date,
            monthly_revenue=monthly_revenue_series(payments, invoices, self.reference_date, time_range),
            customer_segments=customer_segments(invoices),
            product_performance=product_performance(products),
            invoice_status=invoice_status_breakdown(invoices),
            kpis=compute_kpis(invoices, payments),
            growth=growth_indicators(invoices, payments, products, self.reference_date),
        )


def build_snapshot(invoices, payments, products, time_range, reference_date: date) -> schemas.AnalyticsSnapshot:
    return AnalyticsAggregator(reference_date).snapshot(invoices, payments, products, time_range)
