"""Append-only document store keyed by owner.

Documents live at `users/{owner}/generations/{id}` under the storage root, one JSON
file each. Appends never read or modify existing documents.
"""

import json
import logging
import os
import uuid
from datetime import date, datetime
from typing import Protocol


logger = logging.getLogger(__name__)


class RecordStore(Protocol):
    """Minimal interface required by `RecordKeeper`."""

    def append(self, owner_id: str, document: dict) -> str:
        """Persist `document` under a new id and return that id."""
        ...


def _json_default(value):
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


class JsonRecordStore:
    """Filesystem-backed `RecordStore` with one JSON file per document."""

    def __init__(self, root: str):
        self.root = os.path.realpath(root)
        os.makedirs(self.root, exist_ok=True)

    def _record_path(self, owner_id: str, record_id: str) -> str:
        return os.path.join(self.root, "users", owner_id, "generations", f"{record_id}.json")

    def append(self, owner_id: str, document: dict) -> str:
        record_id = uuid.uuid4().hex
        path = self._record_path(owner_id, record_id)
        os.makedirs(os.path.dirname(path), exist_ok=True)

        payload = json.dumps(document, indent=2, ensure_ascii=False, default=_json_default)
        # Exclusive create: an existing document is never overwritten.
        with open(path, "x", encoding="utf-8") as f:
            f.write(payload)

        logger.debug("Appended record %s for owner %s", record_id, owner_id)
        return record_id

    def get(self, owner_id: str, record_id: str) -> dict | None:
        path = self._record_path(owner_id, record_id)
        if not os.path.exists(path):
            return None
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
