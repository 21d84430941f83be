"""
Revenue and accounts figures.

Bookings and customer records are bucketed by ``created_at``; a booking
counts toward the month it was placed in, not the month it is served.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable, Mapping, Tuple

import pandas as pd

from db import models
from db.store import DataStore
from app.bookings import PENDING
from app.inventory import total_stock_value
from app.validators import ValidationError, to_amount


@dataclass
class AccountsSummary:
    month: str
    total_revenue: float = 0.0
    total_bookings: int = 0
    customer_records_revenue: float = 0.0
    customer_records_paid: float = 0.0
    stock_value: float = 0.0

    @property
    def outstanding(self) -> float:
        return max(self.customer_records_revenue - self.customer_records_paid, 0.0)

    @property
    def combined_revenue(self) -> float:
        return self.total_revenue + self.customer_records_paid


def month_bounds(month: str) -> Tuple[str, str]:
    """'2024-02' -> ('2024-02-01', '2024-03-01'), end exclusive."""
    try:
        year, mon = (int(p) for p in month.split("-"))
        start = date(year, mon, 1)
    except ValueError as e:
        raise ValidationError(f"Invalid month '{month}'. Use YYYY-MM.", field="month") from e
    end = date(year + 1, 1, 1) if mon == 12 else date(year, mon + 1, 1)
    return start.isoformat(), end.isoformat()


def _created_on(row: Mapping[str, Any], prefix: str) -> bool:
    return str(row.get("created_at") or "").startswith(prefix)


def daily_revenue(bookings: Iterable[Mapping[str, Any]], day: date) -> float:
    prefix = day.isoformat()
    return sum(to_amount(b.get("total_amount")) for b in bookings if _created_on(b, prefix))


# ----------------- FRAMES (charts) ------------------------

def bookings_frame(bookings: Iterable[Mapping[str, Any]]) -> pd.DataFrame:
    df = pd.DataFrame(list(bookings))
    if df.empty:
        return pd.DataFrame(columns=["id", "status", "total_amount", "created_at"])
    for col in ("status", "total_amount", "created_at"):
        if col not in df.columns:
            df[col] = None
    df["status"] = df["status"].fillna(PENDING)
    df["total_amount"] = pd.to_numeric(df["total_amount"], errors="coerce").fillna(0.0)
    df["created_at"] = pd.to_datetime(df["created_at"], errors="coerce", utc=True, format="ISO8601")
    return df


def monthly_revenue_series(bookings: Iterable[Mapping[str, Any]]) -> pd.DataFrame:
    df = bookings_frame(bookings)
    df = df.dropna(subset=["created_at"])
    if df.empty:
        return pd.DataFrame(columns=["month", "revenue", "bookings"])
    df["month"] = df["created_at"].dt.strftime("%Y-%m")
    out = (
        df.groupby("month")
        .agg(revenue=("total_amount", "sum"), bookings=("total_amount", "size"))
        .reset_index()
        .sort_values("month")
    )
    return out.reset_index(drop=True)


def status_breakdown(bookings: Iterable[Mapping[str, Any]]) -> pd.DataFrame:
    df = bookings_frame(bookings)
    if df.empty:
        return pd.DataFrame(columns=["status", "count"])
    counts = df["status"].value_counts()
    return pd.DataFrame({"status": counts.index.tolist(), "count": counts.values.tolist()})


# ----------------- ACCOUNTS ------------------------

def summarize_accounts(
    month: str,
    bookings: Iterable[Mapping[str, Any]],
    customer_records: Iterable[Mapping[str, Any]],
    stocks: Iterable[Mapping[str, Any]],
) -> AccountsSummary:
    bookings = list(bookings)
    records = list(customer_records)
    return AccountsSummary(
        month=month,
        total_revenue=sum(to_amount(b.get("total_amount")) for b in bookings),
        total_bookings=len(bookings),
        customer_records_revenue=sum(to_amount(r.get("amount")) for r in records),
        customer_records_paid=sum(to_amount(r.get("amount_paid")) for r in records),
        stock_value=total_stock_value(stocks),
    )


def fetch_accounts(store: DataStore, month: str) -> AccountsSummary:
    start, end = month_bounds(month)
    bookings = store.select(
        models.BOOKINGS, columns="total_amount, status", gte={"created_at": start}, lt={"created_at": end}
    )
    records = store.select(
        models.CUSTOMER_RECORDS,
        columns="amount, amount_paid, payment_status",
        gte={"created_at": start},
        lt={"created_at": end},
    )
    stocks = store.select(models.STOCKS, columns="total_value")
    return summarize_accounts(month, bookings, records, stocks)
