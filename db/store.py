# db/store.py

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

logger = logging.getLogger(__name__)

Row = Dict[str, Any]


class DataStoreError(Exception):
    """A call to the hosted data store failed.

    Network failures, rejected writes and policy errors all end up here;
    callers do not distinguish between them.
    """

    def __init__(self, table: str, operation: str, message: str):
        super().__init__(f"{operation} on '{table}' failed: {message}")
        self.table = table
        self.operation = operation
        self.message = message


def _error_message(e: Exception) -> str:
    # postgrest errors carry .message / .details, everything else just str()
    if getattr(e, "message", None):
        return str(e.message)
    if getattr(e, "details", None):
        return str(e.details)
    return str(e)


class DataStore:
    """Thin table-style facade over the Supabase client.

    Every method runs exactly one request, with no pagination, retry or
    timeout of its own.
    """

    def __init__(self, client):
        self.client = client

    # ---------------- READ ----------------

    def select(
        self,
        table: str,
        columns: str = "*",
        eq: Optional[Mapping[str, Any]] = None,
        in_: Optional[Mapping[str, Iterable[Any]]] = None,
        gte: Optional[Mapping[str, Any]] = None,
        lt: Optional[Mapping[str, Any]] = None,
        order: Optional[str] = None,
        desc: bool = False,
        limit: Optional[int] = None,
    ) -> List[Row]:
        try:
            query = self.client.table(table).select(columns)
            for col, val in (eq or {}).items():
                query = query.eq(col, val)
            for col, vals in (in_ or {}).items():
                query = query.in_(col, list(vals))
            for col, val in (gte or {}).items():
                query = query.gte(col, val)
            for col, val in (lt or {}).items():
                query = query.lt(col, val)
            if order:
                query = query.order(order, desc=desc)
            if limit is not None:
                query = query.limit(limit)
            response = query.execute()
        except Exception as e:
            logger.exception("select on %s failed", table)
            raise DataStoreError(table, "select", _error_message(e)) from e
        return list(response.data or [])

    # ---------------- WRITE ----------------

    def insert(self, table: str, row: Mapping[str, Any]) -> List[Row]:
        try:
            response = self.client.table(table).insert(dict(row)).execute()
        except Exception as e:
            logger.exception("insert into %s failed", table)
            raise DataStoreError(table, "insert", _error_message(e)) from e
        logger.info("Inserted row into %s", table)
        return list(response.data or [])

    def update(self, table: str, values: Mapping[str, Any], match: Mapping[str, Any]) -> List[Row]:
        if not match:
            raise ValueError("update requires at least one match column")
        try:
            query = self.client.table(table).update(dict(values))
            for col, val in match.items():
                query = query.eq(col, val)
            response = query.execute()
        except Exception as e:
            logger.exception("update on %s failed", table)
            raise DataStoreError(table, "update", _error_message(e)) from e
        logger.info("Updated %s where %s", table, dict(match))
        return list(response.data or [])

    def delete(self, table: str, match: Mapping[str, Any]) -> None:
        if not match:
            raise ValueError("delete requires at least one match column")
        try:
            query = self.client.table(table).delete()
            for col, val in match.items():
                query = query.eq(col, val)
            query.execute()
        except Exception as e:
            logger.exception("delete on %s failed", table)
            raise DataStoreError(table, "delete", _error_message(e)) from e
        logger.info("Deleted from %s where %s", table, dict(match))
