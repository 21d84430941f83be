"""
Offline customer records.

Jobs taken over the phone or on site are kept in ``customer_records``
rather than as bookings. Each record carries its own amount, payment
state and the employees who did the work; the dashboard and accounts
read them alongside bookings.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional

from db import models
from db.store import DataStore
from app.validators import (
    ValidationError,
    parse_date_str,
    require_fields,
    to_amount,
    validate_email,
)

logger = logging.getLogger(__name__)

DOMESTIC = "Domestic"
CORPORATE = "Corporate"
TASK_TYPES = [DOMESTIC, CORPORATE]

SOURCES = ["Google", "Direct Referral", "Company Vehicle", "Others"]

PAID_IN_CASH = "Paid in Cash"
PARTIAL = "Partial"
UNPAID = "Unpaid"
PAYMENT_STATUSES = [UNPAID, PARTIAL, PAID_IN_CASH]

CUSTOMER_RATINGS = ["Good", "Normal", "Bad", "Poor"]
DEFAULT_RATING = "Normal"

RECORD_LABELS = {"name": "Name", "phone": "Phone", "address": "Address", "booking_date": "Booking date"}


def fetch_customer_records(store: DataStore) -> List[Dict[str, Any]]:
    return store.select(models.CUSTOMER_RECORDS, order="created_at", desc=True)


def _clean(val: Any) -> str:
    return str(val).strip() if val is not None else ""


def build_record_row(data: Mapping[str, Any]) -> Dict[str, Any]:
    require_fields(data, ["name", "phone", "address", "booking_date"], RECORD_LABELS)

    email = _clean(data.get("email"))
    if email and not validate_email(email):
        raise ValidationError("Invalid email. Please try format: name@example.com", field="email")

    booking_date = parse_date_str(data.get("booking_date"))
    if booking_date is None:
        raise ValidationError("Invalid date format. Please use YYYY-MM-DD.", field="booking_date")

    task_type = data.get("task_type") or DOMESTIC
    if task_type not in TASK_TYPES:
        raise ValidationError(f"Unknown task type: {task_type}", field="task_type")
    payment_status = data.get("payment_status") or UNPAID
    if payment_status not in PAYMENT_STATUSES:
        raise ValidationError(f"Unknown payment status: {payment_status}", field="payment_status")
    rating = data.get("customer_rating") or DEFAULT_RATING
    if rating not in CUSTOMER_RATINGS:
        raise ValidationError(f"Unknown customer rating: {rating}", field="customer_rating")

    amount = to_amount(data.get("amount"))
    amount_paid = to_amount(data.get("amount_paid"))
    discount_points = int(to_amount(data.get("discount_points")))
    if amount < 0 or amount_paid < 0 or discount_points < 0:
        raise ValidationError("Amounts cannot be negative.")

    return {
        "name": _clean(data["name"]),
        "phone": _clean(data["phone"]),
        "email": email or None,
        "address": _clean(data["address"]),
        "booking_date": booking_date.isoformat(),
        "task_type": task_type,
        "source": _clean(data.get("source")),
        "amount": amount,
        "discount_points": discount_points,
        "amount_paid": amount_paid,
        "payment_status": payment_status,
        "task_done_by": [n for n in (data.get("task_done_by") or []) if _clean(n)],
        "customer_notes": _clean(data.get("customer_notes")) or None,
        "customer_rating": rating,
        "task_completed": False,
    }


def add_customer_record(store: DataStore, data: Mapping[str, Any]) -> List[Dict[str, Any]]:
    row = build_record_row(data)
    inserted = store.insert(models.CUSTOMER_RECORDS, row)
    logger.info("Customer record added for %s", row["name"])
    return inserted


def update_payment(
    store: DataStore,
    record_id: str,
    payment_status: str,
    amount_paid: Optional[float] = None,
    now: Optional[datetime] = None,
) -> List[Dict[str, Any]]:
    """
    Changes the payment state of one record.

    The paid amount is only written when the record is settled in cash;
    other statuses leave whatever was recorded before.
    """
    if payment_status not in PAYMENT_STATUSES:
        raise ValidationError(f"Unknown payment status: {payment_status}", field="payment_status")
    if not record_id:
        raise ValidationError("Customer record id is required.", field="id")

    values: Dict[str, Any] = {
        "payment_status": payment_status,
        "updated_at": (now or datetime.utcnow()).isoformat(),
    }
    if payment_status == PAID_IN_CASH and amount_paid is not None:
        if to_amount(amount_paid) < 0:
            raise ValidationError("Amounts cannot be negative.", field="amount_paid")
        values["amount_paid"] = to_amount(amount_paid)
    return store.update(models.CUSTOMER_RECORDS, values, {"id": record_id})


def balance_due(record: Mapping[str, Any]) -> float:
    return max(to_amount(record.get("amount")) - to_amount(record.get("amount_paid")), 0.0)


def search_records(records: Iterable[Mapping[str, Any]], term: str) -> List[Mapping[str, Any]]:
    term = (term or "").strip().lower()
    if not term:
        return list(records)
    fields = ("name", "phone", "email", "task_type", "source")
    return [r for r in records if any(term in _clean(r.get(f)).lower() for f in fields)]
