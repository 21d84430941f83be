from __future__ import annotations

from typing import Any, Dict, List, Mapping

from db import models
from db.store import DataStore
from app.validators import ValidationError, require_fields, to_amount

ACTIVE = "Active"
INACTIVE = "Inactive"


def fetch_services(store: DataStore, active_only: bool = False) -> List[Dict[str, Any]]:
    if active_only:
        return store.select(models.SERVICES, eq={"status": ACTIVE}, order="name")
    return store.select(models.SERVICES, order="name")


def _service_row(data: Mapping[str, Any]) -> Dict[str, Any]:
    require_fields(data, ["name", "price"])
    price = to_amount(data.get("price"))
    if price < 0:
        raise ValidationError("Price cannot be negative.", field="price")
    duration = data.get("duration_hours")
    return {
        "name": str(data["name"]).strip(),
        "description": (data.get("description") or "").strip() or None,
        "price": price,
        "duration_hours": to_amount(duration) if duration not in (None, "") else None,
        "status": data.get("status") or ACTIVE,
    }


def add_service(store: DataStore, data: Mapping[str, Any]) -> List[Dict[str, Any]]:
    return store.insert(models.SERVICES, _service_row(data))


def update_service(store: DataStore, service_id: str, data: Mapping[str, Any]) -> List[Dict[str, Any]]:
    return store.update(models.SERVICES, _service_row(data), {"id": service_id})


def delete_service(store: DataStore, service_id: str) -> None:
    store.delete(models.SERVICES, {"id": service_id})


def service_label(service: Mapping[str, Any], currency: str = "₹") -> str:
    return f"{service.get('name')} - {currency}{to_amount(service.get('price')):,.0f}"
