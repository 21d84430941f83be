from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from db import models
from db.store import DataStore
from app.validators import ValidationError, validate_phone

logger = logging.getLogger(__name__)

PROFILE_COLUMNS = "id, first_name, last_name, phone_number, email_verified, role, created_at, updated_at"
EDITABLE_FIELDS = ("first_name", "last_name", "phone_number")

ADMIN_ROLE = "admin"
CUSTOMER_ROLE = "customer"


def fetch_user_profile(store: DataStore, user_id: Optional[str]) -> Optional[Dict[str, Any]]:
    """Profile of one user, or None when signed out or no profile row exists."""
    if not user_id:
        return None
    rows = store.select(models.USER_PROFILES, columns=PROFILE_COLUMNS, eq={"id": user_id}, limit=1)
    if not rows:
        logger.info("No profile for user %s", user_id)
        return None
    return rows[0]


def fetch_profiles(store: DataStore) -> List[Dict[str, Any]]:
    return store.select(models.USER_PROFILES)


def full_name(profile: Optional[Mapping[str, Any]]) -> str:
    if not profile:
        return ""
    parts = [(profile.get("first_name") or "").strip(), (profile.get("last_name") or "").strip()]
    return " ".join(p for p in parts if p)


def is_admin(profile: Optional[Mapping[str, Any]]) -> bool:
    return bool(profile) and (profile.get("role") or "").strip().lower() == ADMIN_ROLE


def update_profile(
    store: DataStore, user_id: str, updates: Mapping[str, Any], now: Optional[datetime] = None
) -> List[Dict[str, Any]]:
    """
    Saves the user's own contact details.

    Only names and phone number are writable here; role and verification
    stay with the admin. First and last name are required, and a phone
    number, when given, needs at least 10 digits.
    """
    allowed = {k: (v or "").strip() for k, v in updates.items() if k in EDITABLE_FIELDS}
    if not allowed:
        return []
    for field in ("first_name", "last_name"):
        if field in allowed and not allowed[field]:
            raise ValidationError("First name and last name are required.", field=field)
    if allowed.get("phone_number") and not validate_phone(allowed["phone_number"]):
        raise ValidationError("Phone number must be at least 10 digits.", field="phone_number")

    allowed["updated_at"] = (now or datetime.utcnow()).isoformat()
    logger.info("Updating profile %s", user_id)
    return store.update(models.USER_PROFILES, allowed, {"id": user_id})
