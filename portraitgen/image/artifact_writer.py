"""Persistence of extracted image payloads as generated artifacts.

Role in pipeline:
    - Consumes the capped payload iterator returned by `GenerationClient.generate`.
    - Assigns 1-based indices in extraction order and decodes each payload.
    - Saves artifacts concurrently; the returned path list is ordered by index, not
      by save completion.

Error handling strategy:
    - Zero payloads -> `INTERNAL_NO_ARTIFACTS`; nothing is saved.
    - Decode or storage failures propagate unclassified to the orchestrator.
"""

import asyncio
import base64
import logging
from collections.abc import Iterable

from portraitgen.core.types import GeneratedArtifact, ImagePayload, generated_path
from portraitgen.errors import ErrorKind, GenerationError
from portraitgen.image.provider_config import ARTIFACT_MIME_TYPE
from portraitgen.storage.asset_store import AssetStore


logger = logging.getLogger(__name__)


class ArtifactWriter:
    def __init__(self, store: AssetStore):
        self.store = store

    def build_artifacts(
        self,
        owner_id: str,
        upload_id: str,
        payloads: Iterable[ImagePayload],
    ) -> list[GeneratedArtifact]:
        """Decode payloads into indexed artifacts, preserving extraction order."""
        return [
            GeneratedArtifact(
                path=generated_path(owner_id, upload_id, index),
                data=base64.b64decode(payload.data),
                mime_type=ARTIFACT_MIME_TYPE,
                index=index,
            )
            for index, payload in enumerate(payloads, start=1)
        ]

    async def save_all(
        self,
        owner_id: str,
        upload_id: str,
        original_path: str,
        payloads: Iterable[ImagePayload],
    ) -> list[str]:
        """Persist every payload and return the artifact paths in index order.

        Args:
            owner_id: Owner uid, recorded as `ownerUid` metadata.
            upload_id: Upload identifier used in artifact paths.
            original_path: Source asset path, recorded as `original` metadata.
            payloads: Extracted payloads; consumed exactly once.

        Raises:
            GenerationError: `INTERNAL_NO_ARTIFACTS` when `payloads` is empty.
        """
        artifacts = self.build_artifacts(owner_id, upload_id, payloads)
        if not artifacts:
            raise GenerationError(ErrorKind.INTERNAL_NO_ARTIFACTS)

        metadata = {
            "ownerUid": owner_id,
            "type": "generated",
            "original": original_path,
        }

        await asyncio.gather(*(
            asyncio.to_thread(
                self.store.save,
                artifact.path,
                artifact.data,
                artifact.mime_type,
                metadata,
            )
            for artifact in artifacts
        ))

        logger.info("Saved %d generated artifacts for upload %s", len(artifacts), upload_id)
        return [artifact.path for artifact in artifacts]
