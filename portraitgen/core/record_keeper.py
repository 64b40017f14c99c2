"""Audit record creation for completed generation runs."""

import logging
from datetime import datetime

from portraitgen.core.types import GenerationRecord
from portraitgen.storage.record_store import RecordStore


logger = logging.getLogger(__name__)


class RecordKeeper:
    """Writes exactly one `completed` record per successful run (single append)."""

    def __init__(self, store: RecordStore):
        self.store = store

    def append(
        self,
        owner_id: str,
        upload_id: str,
        original_path: str,
        generated_paths: list[str],
        prompt: str,
        created_at: datetime,
    ) -> str:
        """Append the generation record and return its id.

        `count` is derived from `generated_paths`, so it always equals the number of
        persisted artifacts rather than the requested count.
        """
        if not generated_paths:
            raise ValueError("generated_paths must not be empty")

        record = GenerationRecord(
            owner_id=owner_id,
            upload_id=upload_id,
            original_path=original_path,
            generated_paths=list(generated_paths),
            prompt=prompt,
            created_at=created_at,
        )
        record_id = self.store.append(owner_id, record.to_document())
        logger.debug("Recorded generation %s (%d artifacts)", record_id, record.count)
        return record_id
