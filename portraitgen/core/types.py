"""Data contracts shared by the generation workflow.

Architectural role:
    Defines the records passed between the request gate, storage adapters, the
    generation client, the artifact writer and the orchestrator.

Path conventions:
    - Original asset: `users/{owner}/original/{upload}.jpg`
    - Generated artifact: `users/{owner}/generated/{upload}_{index}.png` (1-based)

Determinism:
    The data classes are purely structural and state-free.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


def original_path(owner_id: str, upload_id: str) -> str:
    return f"users/{owner_id}/original/{upload_id}.jpg"


def generated_path(owner_id: str, upload_id: str, index: int) -> str:
    return f"users/{owner_id}/generated/{upload_id}_{index}.png"


class WorkflowState(str, Enum):
    """Per-invocation states; `COMPLETED` and `FAILED` are terminal."""

    VALIDATING = "validating"
    FETCHING_ASSET = "fetching_asset"
    GENERATING = "generating"
    PERSISTING_ARTIFACTS = "persisting_artifacts"
    RECORDING_METADATA = "recording_metadata"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class GenerationRequest:
    """Validated workflow parameters produced by the request gate.

    Attributes:
        owner_id: Owner uid; equal to the authenticated principal.
        upload_id: Non-empty upload identifier.
        for_testing: Whether a single variation was requested.
        count: Requested number of variations (1 when testing, else 4).
        prompt: Fixed style prompt recorded on the generation record.
    """

    owner_id: str
    upload_id: str
    for_testing: bool
    count: int
    prompt: str

    @property
    def original_path(self) -> str:
        return original_path(self.owner_id, self.upload_id)


@dataclass(frozen=True)
class OriginalAsset:
    path: str
    data: bytes
    mime_type: str


@dataclass(frozen=True)
class ImagePayload:
    """One inline image extracted from the model response (still base64 encoded)."""

    data: str
    mime_type: str | None = None


@dataclass(frozen=True)
class GeneratedArtifact:
    path: str
    data: bytes
    mime_type: str
    index: int


@dataclass
class GenerationRecord:
    """Audit document written once per successful run."""

    owner_id: str
    upload_id: str
    original_path: str
    generated_paths: list[str]
    prompt: str
    created_at: datetime
    status: str = "completed"

    @property
    def count(self) -> int:
        return len(self.generated_paths)

    def to_document(self) -> dict:
        """Return the stored document shape (owner and id are part of the key)."""
        return {
            "uploadId": self.upload_id,
            "originalFilePath": self.original_path,
            "generatedPaths": list(self.generated_paths),
            "prompt": self.prompt,
            "count": self.count,
            "createdAt": self.created_at,
            "status": self.status,
        }


@dataclass
class GenerationResult:
    """Success payload returned to the caller."""

    generation_id: str
    upload_id: str
    original_image_url: str
    images: list[str] = field(default_factory=list)

    def to_response(self) -> dict:
        return {
            "generationId": self.generation_id,
            "uploadId": self.upload_id,
            "originalImageUrl": self.original_image_url,
            "images": list(self.images),
        }
