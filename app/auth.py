"""
Sign-in through Supabase Auth.

The signed-in user lives in ``st.session_state["auth_user"]`` as a
``SessionUser``; everything else (profile, role) is looked up from
``user_profiles`` when needed.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, MutableMapping, Optional

from db.store import DataStoreError
from app.validators import ValidationError, validate_email

logger = logging.getLogger(__name__)

SESSION_KEY = "auth_user"


@dataclass
class SessionUser:
    id: str
    email: str


def _user_from_response(response: Any) -> Optional[SessionUser]:
    user = getattr(response, "user", None)
    if user is None:
        return None
    return SessionUser(id=str(user.id), email=getattr(user, "email", "") or "")


def sign_in(client, state: MutableMapping[str, Any], email: str, password: str) -> SessionUser:
    if not validate_email(email or ""):
        raise ValidationError("Invalid email. Please try format: name@example.com", field="email")
    if not password:
        raise ValidationError("Password is required.", field="password")
    try:
        response = client.auth.sign_in_with_password({"email": email.strip(), "password": password})
    except Exception as e:
        logger.warning("Sign-in failed for %s: %s", email, e)
        raise DataStoreError("auth", "sign_in", str(e)) from e

    user = _user_from_response(response)
    if user is None:
        raise DataStoreError("auth", "sign_in", "no user returned")
    state[SESSION_KEY] = user
    logger.info("User %s signed in", user.id)
    return user


def sign_up(client, email: str, password: str, first_name: str = "", last_name: str = "") -> Optional[SessionUser]:
    if not validate_email(email or ""):
        raise ValidationError("Invalid email. Please try format: name@example.com", field="email")
    if len(password or "") < 6:
        raise ValidationError("Password must be at least 6 characters.", field="password")
    try:
        response = client.auth.sign_up(
            {
                "email": email.strip(),
                "password": password,
                "options": {"data": {"first_name": first_name.strip(), "last_name": last_name.strip()}},
            }
        )
    except Exception as e:
        logger.warning("Sign-up failed for %s: %s", email, e)
        raise DataStoreError("auth", "sign_up", str(e)) from e
    return _user_from_response(response)


def sign_out(client, state: MutableMapping[str, Any]) -> None:
    try:
        client.auth.sign_out()
    except Exception as e:
        # local session is dropped regardless
        logger.warning("Remote sign-out failed: %s", e)
    state.pop(SESSION_KEY, None)
    for key in [k for k in state.keys() if str(k).startswith("view:")]:
        state.pop(key, None)


def current_user(state: MutableMapping[str, Any]) -> Optional[SessionUser]:
    return state.get(SESSION_KEY)
