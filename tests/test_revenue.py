"""
Tests for revenue figures and the admin dashboard
"""
from datetime import date

import pytest

from app.dashboard import compute_dashboard, fetch_dashboard
from app.revenue import (
    AccountsSummary,
    daily_revenue,
    fetch_accounts,
    month_bounds,
    monthly_revenue_series,
    status_breakdown,
    summarize_accounts,
)
from app.validators import ValidationError
from conftest import FakeSupabase
from db.store import DataStore


@pytest.mark.unit
class TestMonthBounds:
    """Tests for month ranges"""

    def test_regular_month(self):
        """Test end bound is the next month's first day"""
        assert month_bounds("2024-02") == ("2024-02-01", "2024-03-01")

    def test_december(self):
        """Test December rolls into the next year"""
        assert month_bounds("2024-12") == ("2024-12-01", "2025-01-01")

    @pytest.mark.parametrize("month", ["2024", "2024-13", "abc", ""])
    def test_invalid(self, month):
        """Test malformed months are rejected"""
        with pytest.raises(ValidationError):
            month_bounds(month)


@pytest.mark.unit
class TestRevenue:
    """Tests for revenue helpers"""

    def test_daily_revenue(self, sample_bookings):
        """Test revenue is bucketed by creation day"""
        assert daily_revenue(sample_bookings, date(2024, 3, 1)) == 2500
        assert daily_revenue(sample_bookings, date(2024, 3, 2)) == 0

    def test_monthly_series(self, sample_bookings):
        """Test monthly totals in month order"""
        series = monthly_revenue_series(sample_bookings)
        assert series["month"].tolist() == ["2024-02", "2024-03"]
        assert series["revenue"].tolist() == [800.0, 4000.0]
        assert series["bookings"].tolist() == [1, 2]

    def test_monthly_series_empty(self):
        """Test no bookings gives an empty frame"""
        assert monthly_revenue_series([]).empty

    def test_status_breakdown(self, sample_bookings):
        """Test missing status counts as Pending"""
        counts = status_breakdown(sample_bookings + [{"id": "b4", "total_amount": 1}])
        assert dict(zip(counts["status"], counts["count"])) == {"Completed": 1, "Pending": 2, "Confirmed": 1}

    def test_summarize_accounts(self):
        """Test booking and customer record totals"""
        summary = summarize_accounts(
            "2024-03",
            [{"total_amount": 100}, {"total_amount": "50"}],
            [{"amount": 1000, "amount_paid": 600}],
            [{"total_value": 300}],
        )
        assert summary.total_revenue == 150
        assert summary.total_bookings == 2
        assert summary.outstanding == 400
        assert summary.combined_revenue == 750
        assert summary.stock_value == 300

    def test_outstanding_never_negative(self):
        """Test overpayment shows zero outstanding"""
        assert AccountsSummary("2024-03", customer_records_revenue=10, customer_records_paid=20).outstanding == 0

    def test_fetch_accounts_filters_month(self, sample_bookings):
        """Test only bookings created in the month are counted"""
        store = DataStore(FakeSupabase({"bookings": sample_bookings}))
        summary = fetch_accounts(store, "2024-03")
        assert summary.total_bookings == 2
        assert summary.total_revenue == 4000


@pytest.mark.unit
class TestDashboard:
    """Tests for dashboard figures"""

    TODAY = date(2024, 3, 25)

    def test_counts(self, sample_bookings):
        """Test headline figures"""
        employees = [
            {"name": "Asha", "status": "Active", "employment_type": "full-time", "created_at": "2024-03-02"},
            {"name": "Ravi", "status": "Active", "employment_type": "part-time", "created_at": "2024-01-02"},
        ]
        records = [
            {"name": "Office Ltd", "email": "office@x.com", "task_type": "Corporate", "source": "Referral",
             "amount_paid": 1000, "created_at": "2024-03-05"},
            {"name": "Jane Doe", "email": "jane@example.com", "task_type": "Domestic", "source": None,
             "amount_paid": 200, "created_at": "2024-02-05"},
        ]
        data = compute_dashboard(sample_bookings, employees, records, today=self.TODAY)

        assert data.total_employees == 2
        assert (data.full_time_employees, data.part_time_employees) == (1, 1)
        assert data.active_bookings == 1
        assert data.monthly_revenue == 2500 + 1000
        assert data.total_customers == 3
        assert data.repeat_customers == 1
        assert (data.domestic_customers, data.corporate_customers) == (1, 1)
        assert {s.source for s in data.customer_sources} == {"Referral", "Not Specified"}

    def test_recent_activity(self, sample_bookings):
        """Test activities are newest first"""
        employees = [{"name": "Asha", "status": "Active", "created_at": "2024-03-21"}]
        data = compute_dashboard(sample_bookings, employees, [], today=self.TODAY)
        assert [a.kind for a in data.recent_activities] == ["employee", "booking", "booking", "booking"]
        assert data.recent_activities[1].description == "Kitchen Cleaning for Jane Doe"

    def test_empty(self):
        """Test an empty business has zero figures"""
        data = compute_dashboard([], [], [], today=self.TODAY)
        assert data.total_customers == 0
        assert data.customer_sources == []
        assert data.recent_activities == []

    def test_fetch_dashboard(self, sample_bookings):
        """Test the dashboard reads bookings, employees and records"""
        client = FakeSupabase({"bookings": sample_bookings})
        data = fetch_dashboard(DataStore(client), today=self.TODAY)
        assert data.total_customers == 2
        assert [q.table for q in client.calls] == ["bookings", "employees", "customer_records"]
