from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, asdict, field, fields
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from db import models
from db.inspection_store import InspectionStore
from db.store import DataStore
from app.validators import ValidationError, require_fields

logger = logging.getLogger(__name__)

PENDING = "Pending"
SCHEDULED = "Scheduled"
IN_PROGRESS = "In Progress"
COMPLETED = "Completed"
CANCELLED = "Cancelled"

INSPECTION_STATUSES = (PENDING, SCHEDULED, IN_PROGRESS, COMPLETED, CANCELLED)


def _now_iso() -> str:
    return datetime.utcnow().isoformat()


@dataclass
class InspectionRecord:
    customer_name: str
    address: str
    phone_number: str
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    booking_id: Optional[str] = None
    service_name: str = ""
    inspected_by: str = ""
    date: str = ""
    scheduled_date: str = ""
    time_taken: str = ""
    notes: str = ""
    status: str = PENDING
    created_from_booking: bool = False
    created_at: str = field(default_factory=_now_iso)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "InspectionRecord":
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known and v is not None}
        values.setdefault("customer_name", "")
        values.setdefault("address", "")
        values.setdefault("phone_number", "")
        values["id"] = str(values.get("id") or uuid.uuid4().hex)
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def load_inspections(store: InspectionStore) -> List[InspectionRecord]:
    return [InspectionRecord.from_dict(r) for r in store.load()]


def _save(store: InspectionStore, records: List[InspectionRecord]) -> None:
    store.save([r.to_dict() for r in records])


def add_inspection(store: InspectionStore, data: Mapping[str, Any]) -> InspectionRecord:
    require_fields(
        data,
        ["customer_name", "address", "phone_number"],
        {"customer_name": "Customer name", "phone_number": "Phone number"},
    )
    status = data.get("status") or PENDING
    if status not in INSPECTION_STATUSES:
        raise ValidationError(f"Unknown inspection status: {status}", field="status")

    record = InspectionRecord.from_dict({**data, "id": None, "status": status, "created_at": _now_iso()})
    records = load_inspections(store)
    records.insert(0, record)
    _save(store, records)
    logger.info("Inspection %s added for %s", record.id, record.customer_name)
    return record


def update_inspection_status(store: InspectionStore, inspection_id: str, status: str) -> List[InspectionRecord]:
    if status not in INSPECTION_STATUSES:
        raise ValidationError(f"Unknown inspection status: {status}", field="status")
    records = load_inspections(store)
    if not any(r.id == inspection_id for r in records):
        raise ValidationError(f"No inspection with id {inspection_id}", field="id")
    for r in records:
        if r.id == inspection_id:
            r.status = status
    _save(store, records)
    return records


def remove_inspection(store: InspectionStore, inspection_id: str) -> List[InspectionRecord]:
    records = [r for r in load_inspections(store) if r.id != inspection_id]
    _save(store, records)
    return records


def schedule_inspection_from_booking(
    data_store: DataStore,
    inspection_store: InspectionStore,
    booking: Mapping[str, Any],
) -> InspectionRecord:
    """
    Books an inspection visit on the booking's own date.
    A customer record is written first; if that insert fails nothing is
    stored locally either.
    """
    service_name = booking.get("service_name") or ""
    data_store.insert(
        models.CUSTOMER_RECORDS,
        {
            "name": booking.get("customer_name") or "",
            "phone": booking.get("customer_phone") or "",
            "address": booking.get("address") or "",
            "booking_date": booking.get("booking_date"),
            "email": booking.get("customer_email") or "",
            "task_type": "Inspection",
            "source": "Booking Inspection",
            "amount": 0,
            "discount_points": 0,
            "amount_paid": 0,
            "payment_status": "N/A",
            "task_done_by": [],
            "customer_notes": f"Inspection scheduled for {service_name} - Booking ID: {booking.get('id')}",
            "customer_rating": "Normal",
        },
    )

    record = InspectionRecord(
        booking_id=booking.get("id"),
        customer_name=booking.get("customer_name") or "",
        address=booking.get("address") or "",
        phone_number=booking.get("customer_phone") or "",
        service_name=service_name,
        scheduled_date=booking.get("booking_date") or "",
        status=SCHEDULED,
        created_from_booking=True,
    )
    records = load_inspections(inspection_store)
    records.append(record)
    _save(inspection_store, records)
    logger.info("Inspection %s scheduled from booking %s", record.id, record.booking_id)
    return record
