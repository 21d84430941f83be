from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Mapping, Optional, Sequence

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

PENDING = "Pending"
CONFIRMED = "Confirmed"
IN_PROGRESS = "In Progress"
COMPLETED = "Completed"
CANCELLED = "Cancelled"

BOOKING_STATUSES = (PENDING, CONFIRMED, IN_PROGRESS, COMPLETED, CANCELLED)
ACTIVE_STATUSES = (PENDING, IN_PROGRESS)
TERMINAL_STATUSES = (COMPLETED, CANCELLED)

ASSIGNED = "Assigned"

# Task board: the one forward step each status allows
_FORWARD = {
    PENDING: CONFIRMED,
    CONFIRMED: IN_PROGRESS,
    IN_PROGRESS: COMPLETED,
}

TIME_SLOTS = [f"{h:02d}:00" for h in range(9, 19)]
DEFAULT_TIME_SLOT = TIME_SLOTS[0]
GENERAL_SERVICE = "General Service"

BOOKING_FIELDS = [
    "service_id",
    "booking_date",
    "booking_time",
    "customer_name",
    "customer_email",
    "address",
]

FIELD_LABELS = {
    "service_id": "Service",
    "booking_date": "Date",
    "booking_time": "Time",
    "customer_name": "Name",
    "customer_email": "Email",
    "address": "Address",
}


@dataclass
class BookingForm:
    service_id: Optional[str] = None
    booking_date: Optional[date] = None
    booking_time: Optional[str] = None
    customer_name: str = ""
    customer_email: str = ""
    customer_phone: str = ""
    address: str = ""
    notes: str = ""
    errors: Dict[str, str] = field(default_factory=dict)

    def as_dict(self) -> Dict[str, Any]:
        return {f: getattr(self, f) for f in BOOKING_FIELDS + ["customer_phone", "notes"]}


def status_of(booking: Mapping[str, Any]) -> str:
    return booking.get("status") or PENDING


def next_statuses(status: Optional[str]) -> List[str]:
    status = status or PENDING
    actions = []
    if status in _FORWARD:
        actions.append(_FORWARD[status])
    if status not in TERMINAL_STATUSES:
        actions.append(CANCELLED)
    return actions


# ----------------- READS ------------------------

def fetch_bookings(store: DataStore) -> List[Dict[str, Any]]:
    return store.select(models.BOOKINGS, order="created_at", desc=True)


def fetch_user_bookings(store: DataStore, user_id: Optional[str]) -> List[Dict[str, Any]]:
    if not user_id:
        return []
    return store.select(models.BOOKINGS, eq={"user_id": user_id}, order="created_at", desc=True)


def filter_by_status(bookings: Sequence[Mapping[str, Any]], statuses: Sequence[str]) -> List[Mapping[str, Any]]:
    if not statuses:
        return list(bookings)
    return [b for b in bookings if status_of(b) in statuses]


# ----------------- WRITES ------------------------

def build_booking_row(
    form: BookingForm,
    services: Sequence[Mapping[str, Any]],
    user_id: Optional[str] = None,
    today: Optional[date] = None,
) -> Dict[str, Any]:
    require_fields(form.as_dict(), BOOKING_FIELDS, FIELD_LABELS)

    email = form.customer_email.strip()
    if not validate_email(email):
        raise ValidationError("Invalid email. Please try format: name@example.com", field="customer_email")

    booking_date = parse_date_str(form.booking_date)
    if booking_date is None:
        raise ValidationError("Invalid date format. Please use YYYY-MM-DD.", field="booking_date")
    if booking_date < (today or date.today()):
        raise ValidationError("Please choose an upcoming date.", field="booking_date")

    if form.booking_time not in TIME_SLOTS:
        raise ValidationError("Please pick one of the available time slots.", field="booking_time")

    service = next((s for s in services if s.get("id") == form.service_id), None)

    return {
        "booking_date": booking_date.isoformat(),
        "booking_time": form.booking_time,
        "service_id": form.service_id,
        "service_name": service.get("name") if service else "Unknown Service",
        "customer_name": form.customer_name.strip(),
        "customer_email": email,
        "customer_phone": form.customer_phone.strip(),
        "address": form.address.strip(),
        "notes": form.notes.strip(),
        "total_amount": to_amount(service.get("price")) if service else 0,
        "user_id": user_id or None,
        "status": PENDING,
    }


def create_booking(
    store: DataStore,
    form: BookingForm,
    services: Sequence[Mapping[str, Any]],
    user_id: Optional[str] = None,
    today: Optional[date] = None,
) -> Dict[str, Any]:
    row = build_booking_row(form, services, user_id=user_id, today=today)
    inserted = store.insert(models.BOOKINGS, row)
    logger.info("Booking created for %s (%s)", row["customer_email"], row["service_name"])
    return inserted[0] if inserted else row


def update_booking_status(store: DataStore, booking_id: str, status: str) -> List[Dict[str, Any]]:
    if status not in BOOKING_STATUSES:
        raise ValidationError(f"Unknown booking status: {status}", field="status")
    if not booking_id:
        raise ValidationError("Booking id is required.", field="id")
    return store.update(models.BOOKINGS, {"status": status}, {"id": booking_id})


def assign_employee(store: DataStore, booking_id: str, employee_id: Optional[str], notes: str = "") -> List[Dict[str, Any]]:
    if not employee_id:
        raise ValidationError("Please select an employee", field="employee_id")
    if not booking_id:
        raise ValidationError("Booking id is required.", field="id")
    row = {
        "booking_id": booking_id,
        "employee_id": employee_id,
        "status": ASSIGNED,
        "notes": (notes or "").strip() or None,
    }
    inserted = store.insert(models.TASK_ASSIGNMENTS, row)
    logger.info("Employee %s assigned to booking %s", employee_id, booking_id)
    return inserted


def apply_status(bookings: List[Dict[str, Any]], booking_id: str, status: str) -> List[Dict[str, Any]]:
    """Local copy of the list with one booking's status replaced."""
    return [dict(b, status=status) if b.get("id") == booking_id else b for b in bookings]
