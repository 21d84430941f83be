from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Mapping, Optional

from db import models
from db.store import DataStore
from app.bookings import ACTIVE_STATUSES, COMPLETED, status_of
from app.employees import headcount
from app.validators import to_amount


@dataclass
class SourceShare:
    source: str
    count: int
    percentage: float


@dataclass
class Activity:
    kind: str
    title: str
    description: str
    date: str


@dataclass
class DashboardData:
    total_employees: int = 0
    full_time_employees: int = 0
    part_time_employees: int = 0
    active_bookings: int = 0
    monthly_revenue: float = 0.0
    total_customers: int = 0
    repeat_customers: int = 0
    domestic_customers: int = 0
    corporate_customers: int = 0
    customer_sources: List[SourceShare] = field(default_factory=list)
    recent_activities: List[Activity] = field(default_factory=list)


def _simple_key(email: Any, name: Any) -> Optional[str]:
    # bookings without email or name are not counted as customers here
    return (str(email).strip() if email else "") or (str(name).strip() if name else "") or None


def _created(row: Mapping[str, Any]) -> str:
    return str(row.get("created_at") or "")


def compute_dashboard(
    bookings: Iterable[Mapping[str, Any]],
    employees: Iterable[Mapping[str, Any]],
    customer_records: Iterable[Mapping[str, Any]],
    today: Optional[date] = None,
) -> DashboardData:
    today = today or date.today()
    bookings = list(bookings)
    employees = list(employees)
    records = list(customer_records)
    month_prefix = today.strftime("%Y-%m")
    year_ago = (today - timedelta(days=365)).isoformat()

    counts = headcount(employees)

    monthly_bookings = sum(
        to_amount(b.get("total_amount"))
        for b in bookings
        if _created(b).startswith(month_prefix) and status_of(b) == COMPLETED
    )
    monthly_records = sum(
        to_amount(r.get("amount_paid")) for r in records if _created(r).startswith(month_prefix)
    )

    customers = set()
    for b in bookings:
        key = _simple_key(b.get("customer_email"), b.get("customer_name"))
        if key:
            customers.add(key)
    for r in records:
        key = _simple_key(r.get("email"), r.get("name"))
        if key:
            customers.add(key)

    yearly: Dict[str, int] = {}
    for b in bookings:
        if _created(b) < year_ago:
            continue
        key = _simple_key(b.get("customer_email"), b.get("customer_name"))
        if key:
            yearly[key] = yearly.get(key, 0) + 1

    sources: Dict[str, int] = {}
    for r in records:
        src = r.get("source") or "Not Specified"
        sources[src] = sources.get(src, 0) + 1
    total_customers = len(customers)
    shares = sorted(
        (
            SourceShare(src, n, (n / total_customers) * 100 if total_customers else 0.0)
            for src, n in sources.items()
        ),
        key=lambda s: s.count,
        reverse=True,
    )

    activities = [
        Activity("employee", "New employee onboarded", f"{e.get('name')} joined the team", _created(e))
        for e in sorted(employees, key=_created, reverse=True)[:3]
    ] + [
        Activity(
            "booking",
            "New booking received",
            f"{b.get('service_name')} for {b.get('customer_name')}",
            _created(b),
        )
        for b in sorted(bookings, key=_created, reverse=True)[:3]
    ]
    activities.sort(key=lambda a: a.date, reverse=True)

    return DashboardData(
        total_employees=counts.active,
        full_time_employees=counts.full_time,
        part_time_employees=counts.part_time,
        active_bookings=sum(1 for b in bookings if status_of(b) in ACTIVE_STATUSES),
        monthly_revenue=monthly_bookings + monthly_records,
        total_customers=total_customers,
        repeat_customers=sum(1 for n in yearly.values() if n >= 2),
        domestic_customers=sum(1 for r in records if r.get("task_type") == "Domestic"),
        corporate_customers=sum(1 for r in records if r.get("task_type") == "Corporate"),
        customer_sources=shares,
        recent_activities=activities,
    )


def fetch_dashboard(store: DataStore, today: Optional[date] = None) -> DashboardData:
    bookings = store.select(models.BOOKINGS, order="created_at", desc=True)
    employees = store.select(models.EMPLOYEES)
    records = store.select(models.CUSTOMER_RECORDS)
    return compute_dashboard(bookings, employees, records, today=today)
