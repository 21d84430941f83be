# db/inspection_store.py
"""
Local persistence for inspection records.

Inspections are not a Supabase table. They are stored as one JSON
document with an explicit schema version:

    {"version": 1, "inspections": [ {...}, {...} ]}

Version 0 is the legacy layout (a bare JSON list of records) and is
migrated transparently on read. The next save writes version 1.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Protocol

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1


class InspectionStoreError(Exception):
    pass


class InspectionStore(Protocol):
    def load(self) -> List[Dict[str, Any]]:
        ...

    def save(self, records: List[Dict[str, Any]]) -> None:
        ...


def _migrate(document: Any) -> List[Dict[str, Any]]:
    if isinstance(document, list):
        # version 0: whole-collection blob
        return [dict(r) for r in document]

    if not isinstance(document, dict):
        raise InspectionStoreError("Inspection data is neither a list nor a document.")

    version = document.get("version")
    if not isinstance(version, int):
        raise InspectionStoreError("Inspection document has no version.")
    if version > SCHEMA_VERSION:
        raise InspectionStoreError(
            f"Inspection document version {version} is newer than supported ({SCHEMA_VERSION})."
        )

    records = document.get("inspections", [])
    if not isinstance(records, list):
        raise InspectionStoreError("'inspections' must be a list.")
    return [dict(r) for r in records]


class JsonFileInspectionStore:
    def __init__(self, path: str | os.PathLike):
        self.path = Path(path)

    def load(self) -> List[Dict[str, Any]]:
        if not self.path.exists():
            return []
        try:
            document = json.loads(self.path.read_text(encoding="utf-8") or "[]")
        except (OSError, ValueError) as e:
            logger.exception("Could not read %s", self.path)
            raise InspectionStoreError(f"Could not read {self.path}: {e}") from e
        return _migrate(document)

    def save(self, records: List[Dict[str, Any]]) -> None:
        document = {"version": SCHEMA_VERSION, "inspections": list(records)}
        self.path.parent.mkdir(parents=True, exist_ok=True)

        # write to a sibling temp file then swap, so readers never see half a file
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".inspections-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(document, fh, indent=2, default=str)
            os.replace(tmp_name, self.path)
        except OSError as e:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            logger.exception("Could not write %s", self.path)
            raise InspectionStoreError(f"Could not write {self.path}: {e}") from e


class MemoryInspectionStore:
    def __init__(self, records: List[Dict[str, Any]] | None = None):
        self._records = [dict(r) for r in (records or [])]

    def load(self) -> List[Dict[str, Any]]:
        return [dict(r) for r in self._records]

    def save(self, records: List[Dict[str, Any]]) -> None:
        self._records = [dict(r) for r in records]
