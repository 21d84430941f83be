from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional

from db import models
from db.store import DataStore
from app.bookings import COMPLETED, status_of
from app.validators import ValidationError, to_amount


def completed_bookings(bookings: Iterable[Mapping[str, Any]]) -> List[Mapping[str, Any]]:
    return [b for b in bookings if status_of(b) == COMPLETED]


def submit_feedback(
    store: DataStore,
    booking: Optional[Mapping[str, Any]],
    rating: int,
    comment: str = "",
    customer_name: Optional[str] = None,
    customer_email: Optional[str] = None,
) -> List[Dict[str, Any]]:
    if not booking or not rating:
        raise ValidationError("Please select a booking and provide a rating.")
    if status_of(booking) != COMPLETED:
        raise ValidationError("Only completed bookings can be rated.", field="booking_id")
    try:
        rating = int(rating)
    except (TypeError, ValueError):
        raise ValidationError("Rating must be between 1 and 5.", field="rating")
    if not 1 <= rating <= 5:
        raise ValidationError("Rating must be between 1 and 5.", field="rating")

    row = {
        "booking_id": booking.get("id"),
        "customer_name": customer_name or booking.get("customer_name") or "Anonymous Customer",
        "customer_email": booking.get("customer_email") or customer_email or "",
        "service_name": booking.get("service_name"),
        "rating": rating,
        "comment": (comment or "").strip() or None,
        "created_at": datetime.utcnow().isoformat(),
    }
    return store.insert(models.FEEDBACK, row)


def fetch_feedback(store: DataStore) -> List[Dict[str, Any]]:
    return store.select(models.FEEDBACK, order="created_at", desc=True)


def average_feedback_rating(feedback: Iterable[Mapping[str, Any]]) -> float:
    ratings = [to_amount(f.get("rating")) for f in feedback if f.get("rating")]
    if not ratings:
        return 0.0
    return round(sum(ratings) / len(ratings), 1)
