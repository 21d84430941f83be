from __future__ import annotations

from datetime import datetime, date
from typing import Any, Iterable, Mapping, Optional
import re

from email_validator import validate_email as _validate_email, EmailNotValidError


class ValidationError(ValueError):
    """Form input rejected before any call to the data store."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


# ----------------- VALIDATORS ------------------------

def validate_email(email: str) -> bool:
    try:
        _validate_email(email, check_deliverability=False)
        return True
    except EmailNotValidError:
        return False


def validate_phone(phone: str) -> bool:
    digits = re.sub(r"\D", "", phone or "")
    return 10 <= len(digits) <= 15


def parse_date_str(val: Any) -> Optional[date]:
    if isinstance(val, datetime):
        return val.date()
    if isinstance(val, date):
        return val
    if not val:
        return None
    text = str(val).strip()
    try:
        return datetime.strptime(text[:10], "%Y-%m-%d").date()
    except ValueError:
        return None


def to_amount(val: Any) -> float:
    """Numeric amount from a row value; missing or garbage counts as 0."""
    if val is None or isinstance(val, bool):
        return 0.0
    try:
        amount = float(val)
    except (TypeError, ValueError):
        return 0.0
    if amount != amount:  # NaN
        return 0.0
    return amount


def require_fields(data: Mapping[str, Any], fields: Iterable[str], labels: Optional[Mapping[str, str]] = None) -> None:
    labels = labels or {}
    for f in fields:
        value = data.get(f)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationError(f"{labels.get(f, f.replace('_', ' ').title())} is required.", field=f)
