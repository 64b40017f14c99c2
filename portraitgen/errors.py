"""Caller-safe error taxonomy for the generation workflow.

Architectural role:
    Defines the single tagged failure type raised by every workflow component
    (request gate, asset store, generation client, artifact writer, record keeper)
    and the translator applied at the orchestrator boundary.

Error handling strategy:
    - Components raise `GenerationError(kind, message)` for every failure they can
      classify. The orchestrator re-raises these unchanged.
    - Anything else reaching the orchestrator boundary is passed through
      `translate_error`, which yields `INTERNAL_UNKNOWN` (or `RESOURCE_EXHAUSTED`
      for a recognized quota signal).

Security considerations:
    Messages defined here are the only text returned to callers. Provider bodies
    and tracebacks stay in server-side logs.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Enumerated failure kinds exposed to callers."""

    UNAUTHENTICATED = "unauthenticated"
    INVALID_ARGUMENT = "invalid-argument"
    PERMISSION_DENIED = "permission-denied"
    FAILED_PRECONDITION = "failed-precondition"
    NOT_FOUND = "not-found"
    SERVICE_UNAVAILABLE = "unavailable"
    RESOURCE_EXHAUSTED = "resource-exhausted"
    INTERNAL_GENERATION_FAILURE = "internal-generation-failure"
    INTERNAL_NO_ARTIFACTS = "internal-no-artifacts"
    INTERNAL_UNKNOWN = "internal-unknown"


# Default user-facing message per kind.
MESSAGES = {
    ErrorKind.UNAUTHENTICATED: "User must be authenticated.",
    ErrorKind.INVALID_ARGUMENT: "uid and uploadId are required.",
    ErrorKind.PERMISSION_DENIED: "Cannot generate for another user.",
    ErrorKind.FAILED_PRECONDITION: "AI service not configured.",
    ErrorKind.NOT_FOUND: "Original image not found for given uploadId.",
    ErrorKind.SERVICE_UNAVAILABLE: "AI model is overloaded. Please try again in a moment.",
    ErrorKind.RESOURCE_EXHAUSTED: "AI quota exceeded. Please try again later.",
    ErrorKind.INTERNAL_GENERATION_FAILURE: "AI generation failed. Please try again.",
    ErrorKind.INTERNAL_NO_ARTIFACTS: "No images generated. Try a different prompt.",
    ErrorKind.INTERNAL_UNKNOWN: "Generation failed. Please try again.",
}

QUOTA_SIGNAL = "quota_exceeded"
QUOTA_MESSAGE = "Daily AI quota reached. Try again tomorrow."

HTTP_STATUS = {
    ErrorKind.UNAUTHENTICATED: 401,
    ErrorKind.INVALID_ARGUMENT: 400,
    ErrorKind.PERMISSION_DENIED: 403,
    ErrorKind.FAILED_PRECONDITION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.SERVICE_UNAVAILABLE: 503,
    ErrorKind.RESOURCE_EXHAUSTED: 429,
    ErrorKind.INTERNAL_GENERATION_FAILURE: 500,
    ErrorKind.INTERNAL_NO_ARTIFACTS: 500,
    ErrorKind.INTERNAL_UNKNOWN: 500,
}


class GenerationError(Exception):
    """Classified workflow failure carrying one `ErrorKind` and a safe message."""

    def __init__(self, kind: ErrorKind, message: str | None = None):
        self.kind = kind
        self.message = message or MESSAGES[kind]
        super().__init__(self.message)

    @property
    def http_status(self) -> int:
        return HTTP_STATUS[self.kind]

    def to_dict(self) -> dict:
        """Serialize to the transport error body."""
        return {"error": {"kind": self.kind.value, "message": self.message}}

    def __repr__(self):
        return f"GenerationError(kind={self.kind.value!r}, message={self.message!r})"


def translate_error(exc: BaseException) -> GenerationError:
    """Coerce an unclassified failure into the caller-safe taxonomy.

    Args:
        exc: Exception that escaped the workflow without being classified.

    Returns:
        `exc` itself when already classified; otherwise a new `GenerationError`.

    Quota handling:
        An exception exposing `code == "quota_exceeded"` maps to
        `RESOURCE_EXHAUSTED` with the daily-quota message. This overlaps with the
        HTTP 429 mapping done by the generation client; both paths are kept.
    """
    if isinstance(exc, GenerationError):
        return exc
    if getattr(exc, "code", None) == QUOTA_SIGNAL:
        return GenerationError(ErrorKind.RESOURCE_EXHAUSTED, QUOTA_MESSAGE)
    return GenerationError(ErrorKind.INTERNAL_UNKNOWN)
