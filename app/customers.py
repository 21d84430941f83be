"""
Customer summaries.

There is no customers table: a customer is whoever appears on bookings.
``aggregate_customers`` folds the booking rows into one ``CustomerSummary``
per customer key, enriched with the registered profile (if any) and the
loyalty points balance.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, asdict
from datetime import date
from typing import Any, Dict, Iterable, List, Mapping, Optional

from db import models
from db.store import DataStore
from app.bookings import GENERAL_SERVICE, DEFAULT_TIME_SLOT
from app.profiles import fetch_profiles, full_name
from app.validators import ValidationError, parse_date_str, to_amount, require_fields, validate_email

logger = logging.getLogger(__name__)

REGISTERED = "Registered"
GUEST = "Guest"
UNKNOWN_CUSTOMER = "Unknown Customer"


@dataclass
class CustomerSummary:
    key: str
    id: str
    customer_name: str
    customer_email: str
    customer_phone: str
    address: str
    total_bookings: int
    total_spent: float
    last_booking_date: Optional[str]
    status: str
    first_name: str = ""
    last_name: str = ""
    total_points: int = 0
    user_id: Optional[str] = None
    created_at: Optional[str] = None

    @property
    def is_registered(self) -> bool:
        return self.status == REGISTERED

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _clean(val: Any) -> str:
    return str(val).strip() if val is not None else ""


def customer_key(booking: Mapping[str, Any], fallback: str = "") -> str:
    """
    Identity of the customer behind a booking.

    1. customer_email, if not blank
    2. customer_name, if not blank
    3. the booking's own id (the booking is its own customer)
    4. ``fallback``, for rows with none of the above

    Email and name are used as given (no case folding), so "A@x.com" and
    "a@x.com" stay separate customers, matching what the booking form stored.
    """
    email = _clean(booking.get("customer_email"))
    if email:
        return email
    name = _clean(booking.get("customer_name"))
    if name:
        return name
    return _clean(booking.get("id")) or fallback


def match_profile(booking: Mapping[str, Any], profiles: Iterable[Mapping[str, Any]]) -> Optional[Mapping[str, Any]]:
    user_id = booking.get("user_id")
    booking_name = _clean(booking.get("customer_name")).lower()
    for p in profiles:
        if user_id and p.get("id") == user_id:
            return p
        if booking_name and p.get("first_name") and p.get("last_name"):
            if full_name(p).lower() == booking_name:
                return p
    return None


def _points_for(user_id: Optional[str], points: Iterable[Mapping[str, Any]]) -> int:
    if not user_id:
        return 0
    for p in points:
        if p.get("user_id") == user_id:
            return int(to_amount(p.get("total_points")))
    return 0


def _is_later(candidate: Any, current: Any) -> bool:
    new = parse_date_str(candidate)
    if new is None:
        return False
    old = parse_date_str(current)
    return old is None or new > old


def aggregate_customers(
    bookings: Iterable[Mapping[str, Any]],
    profiles: Optional[Iterable[Mapping[str, Any]]] = None,
    points: Optional[Iterable[Mapping[str, Any]]] = None,
) -> List[CustomerSummary]:
    profiles = list(profiles or [])
    points = list(points or [])
    by_key: Dict[str, CustomerSummary] = {}

    for i, booking in enumerate(bookings):
        # Anonymous rows each stand alone.
        key = customer_key(booking, fallback=f"booking#{i}")
        amount = to_amount(booking.get("total_amount"))
        existing = by_key.get(key)

        if existing is not None:
            existing.total_bookings += 1
            existing.total_spent += amount
            if _is_later(booking.get("booking_date"), existing.last_booking_date):
                existing.last_booking_date = booking.get("booking_date")
            continue

        profile = match_profile(booking, profiles)
        user_id = booking.get("user_id") or None
        by_key[key] = CustomerSummary(
            key=key,
            id=user_id or _clean(booking.get("id")),
            user_id=user_id,
            customer_name=_clean(booking.get("customer_name")) or UNKNOWN_CUSTOMER,
            customer_email=_clean(booking.get("customer_email")),
            customer_phone=(
                _clean(booking.get("customer_phone"))
                or (_clean(profile.get("phone_number")) if profile else "")
            ),
            address=_clean(booking.get("address")),
            total_bookings=1,
            total_spent=amount,
            last_booking_date=booking.get("booking_date"),
            status=REGISTERED if profile else GUEST,
            first_name=_clean(profile.get("first_name")) if profile else "",
            last_name=_clean(profile.get("last_name")) if profile else "",
            total_points=_points_for(user_id, points),
            created_at=booking.get("created_at"),
        )

    return list(by_key.values())


def fetch_customer_summaries(store: DataStore) -> List[CustomerSummary]:
    # Any failing read aborts the whole fetch; the caller keeps its old list.
    bookings = store.select(models.BOOKINGS, order="created_at", desc=True)
    profiles = fetch_profiles(store)
    points = store.select(models.CUSTOMER_POINTS, columns="user_id, total_points")
    summaries = aggregate_customers(bookings, profiles, points)
    logger.info("Aggregated %d bookings into %d customers", len(bookings), len(summaries))
    return summaries


def sort_for_display(summaries: Iterable[CustomerSummary]) -> List[CustomerSummary]:
    """Most recent booking first; customers without a date go last."""
    def _key(c: CustomerSummary):
        d = parse_date_str(c.last_booking_date)
        return (d is not None, d or date.min, c.customer_name.lower())

    return sorted(summaries, key=_key, reverse=True)


def search_customers(summaries: Iterable[CustomerSummary], term: str) -> List[CustomerSummary]:
    term = (term or "").strip().lower()
    if not term:
        return list(summaries)
    return [
        c for c in summaries
        if term in c.customer_name.lower()
        or term in c.customer_email.lower()
        or term in c.customer_phone.lower()
    ]


# ----------------- LOYALTY ------------------------

def fetch_user_points(store: DataStore, user_id: Optional[str]) -> int:
    if not user_id:
        return 0
    rows = store.select(models.CUSTOMER_POINTS, eq={"user_id": user_id}, limit=1)
    return int(to_amount(rows[0].get("total_points"))) if rows else 0


POINTS_PER_LEVEL = 100


def points_to_next_level(points: int) -> int:
    """Points still needed for the next level; a full level starts a new one at 100."""
    points = max(int(points), 0)
    return POINTS_PER_LEVEL - points % POINTS_PER_LEVEL


def level_progress(points: int) -> float:
    """Fraction of the current level filled, 0.0 up to 0.99."""
    points = max(int(points), 0)
    return (points % POINTS_PER_LEVEL) / POINTS_PER_LEVEL


# ----------------- WRITES ------------------------

def add_customer(store: DataStore, data: Mapping[str, Any], today: Optional[date] = None) -> List[Dict[str, Any]]:
    """Walk-in customer: stored as a zero-amount placeholder booking."""
    require_fields(data, ["customer_name", "email"], {"customer_name": "Customer name", "email": "Email"})
    email = data["email"].strip()
    if not validate_email(email):
        raise ValidationError("Invalid email. Please try format: name@example.com", field="email")

    today = today or date.today()
    row = {
        "customer_name": data["customer_name"].strip(),
        "customer_email": email,
        "customer_phone": _clean(data.get("phone_number")),
        "service_name": GENERAL_SERVICE,
        "booking_date": today.isoformat(),
        "booking_time": DEFAULT_TIME_SLOT,
        "address": _clean(data.get("address")),
        "total_amount": 0,
        "status": "Pending",
    }
    return store.insert(models.BOOKINGS, row)


def update_customer(store: DataStore, email: str, updates: Mapping[str, Any]) -> List[Dict[str, Any]]:
    """Rewrites contact details on every booking carrying ``email``."""
    if not _clean(email):
        raise ValidationError("Only customers with an email address can be edited.", field="email")

    values: Dict[str, Any] = {}
    if _clean(updates.get("customer_name")):
        values["customer_name"] = _clean(updates["customer_name"])
    if _clean(updates.get("email")):
        new_email = _clean(updates["email"])
        if not validate_email(new_email):
            raise ValidationError("Invalid email. Please try format: name@example.com", field="email")
        values["customer_email"] = new_email
    if "phone_number" in updates:
        values["customer_phone"] = _clean(updates.get("phone_number"))

    if not values:
        return []
    return store.update(models.BOOKINGS, values, {"customer_email": email})
