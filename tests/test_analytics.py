# HONEYBEE/backend/tests/test_analytics.py : analytics aggregation tests

import pytest
from datetime import date, datetime

from honeybee.services.analytics_service import (
    AnalyticsAggregator,
    build_snapshot,
    calendar_year_revenue,
    compute_kpis,
    customer_segments,
    growth_indicators,
    invoice_status_breakdown,
    month_window,
    monthly_payment_totals,
    monthly_revenue_series,
    product_performance,
)
from honeybee.models import models

REFERENCE = date(2024, 6, 15)


def invoice(customer, total, status="paid", created_at=datetime(2024, 6, 2)):
    return {"customer_name": customer, "total_amount": total, "status": status, "created_at": created_at}


def payment(amount, payment_date=date(2024, 6, 3), status="completed"):
    return {"amount": amount, "payment_date": payment_date, "status": status}


class TestRevenueSeries:
    def test_single_month_payment(self):
        series = monthly_revenue_series([payment(100)], [], REFERENCE, "1month")
        assert len(series) == 1
        assert series[0].revenue == 100
        assert series[0].month == "Jun"
        assert series[0].growth == 0

    @pytest.mark.parametrize("time_range,length", [
        ("1month", 1), ("3months", 3), ("6months", 6), ("1year", 12)
    ])
    def test_series_length(self, time_range, length):
        series = monthly_revenue_series([], [], REFERENCE, time_range)
        assert len(series) == length
        assert series[-1].month_num == 6
        assert series[-1].year == 2024

    def test_unknown_range_falls_back_to_six_months(self):
        assert len(monthly_revenue_series([], [], REFERENCE, "forever")) == 6

    def test_window_crosses_year_boundary(self):
        assert month_window(date(2024, 2, 1), 3) == [(2023, 12), (2024, 1), (2024, 2)]

    def test_only_completed_payments_count(self):
        payments = [payment(100), payment(50, status="pending"), payment(25, status="failed")]
        series = monthly_revenue_series(payments, [], REFERENCE, "1month")
        assert series[0].revenue == 100

    def test_target_comes_from_invoices(self):
        invoices = [invoice("A", 300), invoice("B", 200, created_at="2024-06-20T10:00:00Z")]
        series = monthly_revenue_series([], invoices, REFERENCE, "1month")
        assert series[0].target == 500

    def test_growth_halves_round_up(self):
        payments = [payment(100, date(2024, 5, 10)), payment(102.5, date(2024, 6, 10))]
        series = monthly_revenue_series(payments, [], REFERENCE, "3months")
        assert series[2].growth == 3

    def test_negative_growth_halves_round_toward_positive(self):
        payments = [payment(100, date(2024, 5, 10)), payment(97.5, date(2024, 6, 10))]
        series = monthly_revenue_series(payments, [], REFERENCE, "3months")
        assert series[2].growth == -2

    def test_growth_against_previous_month(self):
        payments = [payment(100, date(2024, 5, 10)), payment(150, date(2024, 6, 10))]
        series = monthly_revenue_series(payments, [], REFERENCE, "3months")
        assert [p.revenue for p in series] == [0, 100, 150]
        assert series[0].growth == 0
        # previous month empty: denominator floors at 1
        assert series[1].growth == 10000
        assert series[2].growth == 50

    def test_out_of_window_and_malformed_rows_ignored(self):
        payments = [
            payment(100, date(2023, 1, 1)),
            payment("abc"),
            payment(None),
            {"amount": 40, "status": "completed", "payment_date": "not-a-date"},
            payment(float("nan")),
        ]
        series = monthly_revenue_series(payments, None, REFERENCE, "1month")
        assert series[0].revenue == 0

    def test_orm_rows_are_accepted(self):
        rows = [models.Payment(amount=80, status="completed", payment_date=date(2024, 6, 1))]
        assert monthly_revenue_series(rows, [], REFERENCE, "1month")[0].revenue == 80


class TestCustomerSegments:
    def test_two_customers(self):
        segments = customer_segments([invoice("A", 6000), invoice("B", 500)])
        assert [(s.name, s.customers, s.value) for s in segments] == [
            ("Enterprise", 1, 92),
            ("SMB", 1, 8),
        ]

    def test_single_customer_is_enterprise(self):
        segments = customer_segments([invoice("A", 10), invoice("A", 30)])
        assert len(segments) == 1
        assert segments[0].name == "Enterprise"
        assert segments[0].value == 100
        assert segments[0].total == 40

    def test_five_customers_split(self):
        invoices = [invoice(name, total) for name, total in
                    [("A", 500), ("B", 400), ("C", 300), ("D", 200), ("E", 100)]]
        segments = customer_segments(invoices)
        assert [(s.name, s.customers) for s in segments] == [
            ("Enterprise", 1), ("SMB", 2), ("Individual", 2)
        ]
        assert [s.total for s in segments] == [500, 700, 300]

    def test_ten_customers_split(self):
        invoices = [invoice(f"C{i:02d}", 100 - i) for i in range(10)]
        assert [s.customers for s in customer_segments(invoices)] == [2, 4, 4]

    def test_empty_when_nothing_invoiced(self):
        assert customer_segments([]) == []
        assert customer_segments(None) == []
        assert customer_segments([invoice("A", 0)]) == []

    def test_ties_ranked_by_name(self):
        segments = customer_segments([invoice("B", 100), invoice("A", 100)])
        assert segments[0].total == 100
        assert segments[0].customers == 1

    def test_halves_round_up(self):
        segments = customer_segments([invoice("A", 7), invoice("B", 1)])
        assert [(s.name, s.value) for s in segments] == [("Enterprise", 88), ("SMB", 13)]

    @pytest.mark.parametrize("count", [3, 7, 11])
    def test_percentages_sum_to_about_100(self, count):
        invoices = [invoice(f"C{i:02d}", 37.3 * (i + 1) + i % 3) for i in range(count)]
        segments = customer_segments(invoices)
        assert sum(s.customers for s in segments) == count
        assert 98 <= sum(s.value for s in segments) <= 102


class TestBreakdowns:
    def test_product_performance(self):
        products = [{"name": "Hosting", "stock": 12, "price": 50}, {"name": "Broken", "stock": None, "price": "x"}]
        perf = product_performance(products)
        assert (perf[0].name, perf[0].sales, perf[0].margin) == ("Hosting", 12, 15)
        assert (perf[1].sales, perf[1].margin) == (0, 0)

    @pytest.mark.parametrize("price,margin", [(15, 5), (5, 2), (25, 8), (1, 0)])
    def test_margin_halves_round_up(self, price, margin):
        assert product_performance([{"name": "x", "price": price, "stock": 1}])[0].margin == margin

    def test_invoice_status_breakdown(self):
        invoices = [invoice("A", 100, "paid"), invoice("B", 50, "sent"), invoice("C", 25, "paid")]
        breakdown = invoice_status_breakdown(invoices)
        assert [(s.status, s.name, s.count, s.amount) for s in breakdown] == [
            ("paid", "Paid", 2, 125),
            ("sent", "Sent", 1, 50),
        ]

    def test_monthly_payment_totals(self):
        payments = [payment(10, date(2024, 1, 5)), payment(20, date(2023, 12, 5)),
                    payment(5, date(2024, 1, 9)), payment(99, date(2024, 1, 9), status="pending")]
        totals = monthly_payment_totals(payments)
        assert [(t.period, t.month, t.amount) for t in totals] == [
            ("2023-12", "Dec 2023", 20),
            ("2024-01", "Jan 2024", 15),
        ]

    def test_calendar_year_revenue(self):
        months = calendar_year_revenue([payment(10, date(2024, 3, 1)), payment(7, date(2023, 3, 1))], 2024)
        assert len(months) == 12
        assert months[2] == {"name": "Mar", "revenue": 10}
        assert sum(m["revenue"] for m in months) == 10


class TestKpis:
    def test_kpis(self):
        invoices = [invoice("A", 100, "paid"), invoice("B", 50, "sent"), invoice("A", 30, "overdue"),
                    invoice("C", 10, "draft")]
        payments = [payment(100), payment(40, status="pending")]
        kpis = compute_kpis(invoices, payments)
        assert kpis.total_revenue == 100
        assert kpis.invoice_count == 4
        assert kpis.paid_invoice_count == 1
        assert kpis.pending_invoice_count == 2
        assert kpis.customer_count == 3
        assert kpis.conversion_rate == 25
        assert kpis.average_order_value == 100
        assert kpis.customer_lifetime_value == 33.33

    def test_kpis_with_nothing(self):
        kpis = compute_kpis(None, None)
        assert kpis.total_revenue == 0
        assert kpis.conversion_rate == 0
        assert kpis.average_order_value == 0

    def test_growth_indicators(self):
        invoices = [invoice("A", 10, created_at=datetime(2024, 5, 3)),
                    invoice("A", 10), invoice("B", 10)]
        products = [{"status": "active"}, {"status": "low-stock"}]
        growth = {g.name: g.value for g in growth_indicators(invoices, [], products, REFERENCE)}
        assert growth == {"Revenue Growth": 0, "Customer Growth": 100, "Product Growth": 50}


class TestSnapshot:
    def test_same_inputs_give_identical_output(self):
        invoices = [invoice("A", 6000), invoice("B", 500, "sent")]
        payments = [payment(100)]
        products = [{"name": "Hosting", "stock": 3, "price": 10, "status": "low-stock"}]
        first = build_snapshot(invoices, payments, products, "6months", REFERENCE)
        second = build_snapshot(invoices, payments, products, "6months", REFERENCE)
        assert first.model_dump_json() == second.model_dump_json()

    def test_missing_collections_count_as_empty(self):
        snapshot = AnalyticsAggregator(REFERENCE).snapshot(None, None, None, "3months")
        assert snapshot.time_range == "3months"
        assert len(snapshot.monthly_revenue) == 3
        assert snapshot.customer_segments == []
        assert snapshot.product_performance == []
        assert snapshot.kpis.invoice_count == 0


class TestAnalyticsApi:
    def test_requires_authentication(self, client):
        assert client.get("/analytics/").status_code == 401

    def test_snapshot_for_company(self, client, admin_headers):
        client.post("/payments/", headers=admin_headers, json={
            "customer_name": "Acme", "amount": 100, "payment_date": "2024-06-03"
        })
        response = client.get(
            "/analytics/",
            params={"time_range": "1month", "reference_date": "2024-06-15"},
            headers=admin_headers
        )
        assert response.status_code == 200
        data = response.json()
        assert data["reference_date"] == "2024-06-15"
        assert len(data["monthly_revenue"]) == 1
        assert data["monthly_revenue"][0]["revenue"] == 100

    def test_invalid_time_range(self, client, admin_headers):
        response = client.get("/analytics/kpis", params={"time_range": "2weeks"}, headers=admin_headers)
        assert response.status_code == 422

    def test_monthly_revenue_endpoint(self, client, employee_headers):
        response = client.get(
            "/analytics/monthly-revenue",
            params={"time_range": "1year", "reference_date": "2024-06-15"},
            headers=employee_headers
        )
        assert response.status_code == 200
        assert len(response.json()) == 12
