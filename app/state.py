"""
Session view models.

Each page keeps the rows it fetched in ``st.session_state`` under its own
key. A refresh either replaces the value wholesale or, when the store
call fails, leaves the old value where it was and tells the user.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, MutableMapping, Optional, TypeVar

import streamlit as st

from db.store import DataStoreError

logger = logging.getLogger(__name__)

T = TypeVar("T")

Notifier = Callable[[str], Any]


def _toast_error(message: str) -> None:
    st.toast(message, icon="⚠️")


def _toast_success(message: str) -> None:
    st.toast(message, icon="✅")


def refresh_view(
    state: MutableMapping[str, Any],
    key: str,
    fetch: Callable[[], T],
    error_message: str,
    notify: Optional[Notifier] = None,
) -> bool:
    notify = notify or _toast_error
    try:
        value = fetch()
    except DataStoreError as e:
        logger.error("%s: %s", error_message, e)
        notify(error_message)
        return False

    state[key] = value
    return True


def ensure_view(
    state: MutableMapping[str, Any],
    key: str,
    fetch: Callable[[], T],
    error_message: str,
    default: Any = None,
    notify: Optional[Notifier] = None,
) -> Any:
    """First render of a page: fetch once, afterwards only on refresh."""
    if key not in state:
        if not refresh_view(state, key, fetch, error_message, notify=notify):
            return default
    return state[key]


def run_action(
    action: Callable[[], Any],
    success_message: Optional[str],
    error_message: str,
    notify_success: Optional[Notifier] = None,
    notify_error: Optional[Notifier] = None,
) -> bool:
    notify_success = notify_success or _toast_success
    notify_error = notify_error or _toast_error
    try:
        action()
    except DataStoreError as e:
        logger.error("%s: %s", error_message, e)
        notify_error(error_message)
        return False

    if success_message:
        notify_success(success_message)
    return True
