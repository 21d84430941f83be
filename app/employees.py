from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping

from db import models
from db.store import DataStore
from app.validators import (
    ValidationError,
    parse_date_str,
    require_fields,
    to_amount,
    validate_email,
    validate_phone,
)

ACTIVE = "Active"
INACTIVE = "Inactive"
FULL_TIME = "full-time"
PART_TIME = "part-time"

DEPARTMENTS = ["Cleaning", "Customer Service", "Operations", "Accounts", "Management"]


@dataclass
class Headcount:
    active: int = 0
    inactive: int = 0
    full_time: int = 0
    part_time: int = 0


def fetch_employees(store: DataStore) -> List[Dict[str, Any]]:
    return store.select(models.EMPLOYEES, order="created_at", desc=True)


def fetch_active_employees(store: DataStore) -> List[Dict[str, Any]]:
    """Employees who can be put on a job."""
    return store.select(models.EMPLOYEES, columns="id, name, department, status", eq={"status": ACTIVE}, order="name")


def _employee_row(data: Mapping[str, Any]) -> Dict[str, Any]:
    require_fields(data, ["name", "department", "position"])
    email = (data.get("email") or "").strip()
    if email and not validate_email(email):
        raise ValidationError("Invalid email. Please try format: name@example.com", field="email")
    phone = (data.get("phone_number") or "").strip()
    if phone and not validate_phone(phone):
        raise ValidationError("Invalid phone number. Please enter a valid mobile number.", field="phone_number")
    employment_type = data.get("employment_type") or FULL_TIME
    if employment_type not in (FULL_TIME, PART_TIME):
        raise ValidationError(f"Unknown employment type: {employment_type}", field="employment_type")
    hire_date = parse_date_str(data.get("hire_date"))
    return {
        "name": str(data["name"]).strip(),
        "department": data["department"],
        "position": str(data["position"]).strip(),
        "email": email or None,
        "phone_number": phone or None,
        "salary": to_amount(data.get("salary")),
        "hire_date": hire_date.isoformat() if hire_date else None,
        "employment_type": employment_type,
        "status": data.get("status") or ACTIVE,
    }


def add_employee(store: DataStore, data: Mapping[str, Any]) -> List[Dict[str, Any]]:
    return store.insert(models.EMPLOYEES, _employee_row(data))


def update_employee(store: DataStore, employee_id: str, data: Mapping[str, Any]) -> List[Dict[str, Any]]:
    return store.update(models.EMPLOYEES, _employee_row(data), {"id": employee_id})


def delete_employee(store: DataStore, employee_id: str) -> None:
    store.delete(models.EMPLOYEES, {"id": employee_id})


def headcount(employees: Iterable[Mapping[str, Any]]) -> Headcount:
    counts = Headcount()
    for e in employees:
        if e.get("status") == INACTIVE:
            counts.inactive += 1
            continue
        if e.get("status") == ACTIVE:
            counts.active += 1
            if e.get("employment_type") == FULL_TIME:
                counts.full_time += 1
            elif e.get("employment_type") == PART_TIME:
                counts.part_time += 1
    return counts


def search_employees(employees: Iterable[Mapping[str, Any]], term: str) -> List[Mapping[str, Any]]:
    term = (term or "").strip().lower()
    if not term:
        return list(employees)
    return [
        e for e in employees
        if term in (e.get("name") or "").lower()
        or term in (e.get("department") or "").lower()
        or term in (e.get("position") or "").lower()
    ]
