"""Generation workflow orchestration.

Architectural role:
    Sequences one invocation end to end and applies the error taxonomy at a single
    failure boundary. Used by the HTTP adapter and the CLI.

Control-flow model:
    1. VALIDATING: `request_gate.validate_request`, then the credential check.
    2. FETCHING_ASSET: existence check and download of the original upload.
    3. GENERATING: one call to the external model.
    4. PERSISTING_ARTIFACTS: decode and save the capped payload sequence.
    5. RECORDING_METADATA: append the audit record.
    6. COMPLETED. Any failure moves the run to FAILED(kind).

Error handling strategy:
    `GenerationError` raised by a component propagates unchanged. Anything else is
    logged with its traceback and replaced by `errors.translate_error(exc)`. Callers
    receive either the full success payload or exactly one error.

Concurrency:
    Invocations share no in-process state. Blocking adapter calls run via
    `asyncio.to_thread`. No locking exists across invocations: concurrent runs for
    the same upload write the same artifact paths, last writer wins.
"""

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime, timezone

from portraitgen.config import Settings
from portraitgen.core.record_keeper import RecordKeeper
from portraitgen.core.request_gate import validate_request
from portraitgen.core.types import GenerationResult, OriginalAsset, WorkflowState
from portraitgen.errors import ErrorKind, GenerationError, translate_error
from portraitgen.image.artifact_writer import ArtifactWriter
from portraitgen.image.client import GenerationClient
from portraitgen.image.provider_config import SOURCE_MIME_TYPE, build_endpoint
from portraitgen.storage.asset_store import AssetStore, LocalAssetStore
from portraitgen.storage.record_store import JsonRecordStore, RecordStore


logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Orchestrator:
    """Runs the generation workflow against injected, long-lived collaborators."""

    def __init__(
        self,
        asset_store: AssetStore,
        record_store: RecordStore,
        client: GenerationClient,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.asset_store = asset_store
        self.client = client
        self.writer = ArtifactWriter(asset_store)
        self.keeper = RecordKeeper(record_store)
        self.clock = clock

    async def _fetch_original(self, path: str) -> OriginalAsset:
        exists = await asyncio.to_thread(self.asset_store.exists, path)
        if not exists:
            raise GenerationError(ErrorKind.NOT_FOUND)
        data = await asyncio.to_thread(self.asset_store.fetch, path)
        return OriginalAsset(path=path, data=data, mime_type=SOURCE_MIME_TYPE)

    async def generate_images(self, data, principal: str | None) -> GenerationResult:
        """Run one invocation.

        Args:
            data: Raw request payload `{uid, uploadId, forTesting}`.
            principal: Authenticated uid or `None`.

        Returns:
            `GenerationResult` for the persisted artifacts.

        Raises:
            GenerationError: Exactly one classified failure.
        """
        state = WorkflowState.VALIDATING
        try:
            request = validate_request(data, principal)
            if not self.client.configured:
                logger.error("Generation API key not set")
                raise GenerationError(ErrorKind.FAILED_PRECONDITION)

            state = WorkflowState.FETCHING_ASSET
            logger.info("state=%s uid=%s uploadId=%s", state.value, request.owner_id, request.upload_id)
            original = await self._fetch_original(request.original_path)
            original_url = self.asset_store.public_url(original.path)

            state = WorkflowState.GENERATING
            logger.info("state=%s uploadId=%s count=%d", state.value, request.upload_id, request.count)
            payloads = await asyncio.to_thread(
                self.client.generate,
                request.prompt,
                request.count,
                original.data,
                original.mime_type,
            )

            state = WorkflowState.PERSISTING_ARTIFACTS
            logger.info("state=%s uploadId=%s", state.value, request.upload_id)
            generated_paths = await self.writer.save_all(
                request.owner_id,
                request.upload_id,
                original.path,
                payloads,
            )

            state = WorkflowState.RECORDING_METADATA
            logger.info("state=%s uploadId=%s", state.value, request.upload_id)
            generation_id = await asyncio.to_thread(
                self.keeper.append,
                request.owner_id,
                request.upload_id,
                original.path,
                generated_paths,
                request.prompt,
                self.clock(),
            )
        except GenerationError as exc:
            logger.warning(
                "state=%s -> %s kind=%s message=%s",
                state.value,
                WorkflowState.FAILED.value,
                exc.kind.value,
                exc.message,
            )
            raise
        except Exception as exc:
            logger.exception("generateImages failed in state=%s", state.value)
            raise translate_error(exc) from exc

        state = WorkflowState.COMPLETED
        logger.info(
            "state=%s Generated %d images for uid: %s, uploadId: %s, generationId: %s",
            state.value,
            len(generated_paths),
            request.owner_id,
            request.upload_id,
            generation_id,
        )
        return GenerationResult(
            generation_id=generation_id,
            upload_id=request.upload_id,
            original_image_url=original_url,
            images=generated_paths,
        )


def build_orchestrator(settings: Settings) -> Orchestrator:
    """Construct the process-lifetime orchestrator and its collaborators."""
    client = GenerationClient(
        api_key=settings.gemini_api_key,
        endpoint=build_endpoint(settings.gemini_model, settings.gemini_api_version),
        timeout=settings.request_timeout_seconds,
    )
    return Orchestrator(
        asset_store=LocalAssetStore(settings.storage_root, settings.public_base_url),
        record_store=JsonRecordStore(settings.storage_root),
        client=client,
    )
