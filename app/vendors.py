from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping

from db import models
from db.store import DataStore
from app.validators import ValidationError, require_fields, to_amount, validate_email

ACTIVE = "Active"
INACTIVE = "Inactive"


def fetch_vendors(store: DataStore) -> List[Dict[str, Any]]:
    return store.select(models.VENDORS, order="name")


def _split_services(val: Any) -> List[str]:
    if not val:
        return []
    if isinstance(val, str):
        val = val.split(",")
    return [s.strip() for s in val if s and s.strip()]


def _vendor_row(data: Mapping[str, Any]) -> Dict[str, Any]:
    require_fields(data, ["name"])
    email = (data.get("email") or "").strip()
    if email and not validate_email(email):
        raise ValidationError("Invalid email. Please try format: name@example.com", field="email")
    rating = to_amount(data.get("rating"))
    if not 0 <= rating <= 5:
        raise ValidationError("Rating must be between 0 and 5.", field="rating")
    return {
        "name": str(data["name"]).strip(),
        "contact_person": (data.get("contact_person") or "").strip() or None,
        "email": email or None,
        "phone_number": (data.get("phone_number") or "").strip() or None,
        "address": (data.get("address") or "").strip() or None,
        "services_provided": _split_services(data.get("services_provided")),
        "rating": rating,
        "status": data.get("status") or ACTIVE,
    }


def add_vendor(store: DataStore, data: Mapping[str, Any]) -> List[Dict[str, Any]]:
    return store.insert(models.VENDORS, _vendor_row(data))


def update_vendor(store: DataStore, vendor_id: str, data: Mapping[str, Any]) -> List[Dict[str, Any]]:
    return store.update(models.VENDORS, _vendor_row(data), {"id": vendor_id})


def delete_vendor(store: DataStore, vendor_id: str) -> None:
    store.delete(models.VENDORS, {"id": vendor_id})


def active_vendors(vendors: Iterable[Mapping[str, Any]]) -> List[Mapping[str, Any]]:
    return [v for v in vendors if v.get("status") == ACTIVE]


def average_rating(vendors: Iterable[Mapping[str, Any]]) -> float:
    vendors = list(vendors)
    if not vendors:
        return 0.0
    return round(sum(to_amount(v.get("rating")) for v in vendors) / len(vendors), 1)
