"""Request validation and authorization gate.

Validation model:
    - Rule-based only, no I/O and no side effects.
    - Checks run in fixed order: principal present, required fields, ownership.
    - `uid` and `uploadId` become single path segments under `users/{uid}/`, so
      separators and dot-only names are rejected as invalid arguments.

Output:
    A `GenerationRequest` carrying the derived variation count and the fixed prompt.
    Nothing in the raw request influences the prompt.

Failure handling:
    Raises `GenerationError` with `UNAUTHENTICATED`, `INVALID_ARGUMENT` or
    `PERMISSION_DENIED`.
"""

from collections.abc import Mapping

from portraitgen.core.types import GenerationRequest
from portraitgen.errors import ErrorKind, GenerationError
from portraitgen.prompting.prompt_builder import STYLE_PROMPT

TESTING_COUNT = 1
DEFAULT_COUNT = 4
UNSAFE_SEGMENT_CHARS = ("/", "\\", "\x00")


def _required_str(data: Mapping, key: str) -> str | None:
    value = data.get(key)
    if isinstance(value, str) and value.strip():
        return value
    return None


def _is_path_segment(value: str) -> bool:
    if value.strip(".") == "":
        return False
    return not any(ch in value for ch in UNSAFE_SEGMENT_CHARS)


def validate_request(data, principal: str | None) -> GenerationRequest:
    """Validate a raw invocation payload against the authenticated principal.

    Args:
        data: Raw request payload `{uid, uploadId, forTesting}`; non-mappings are
            treated as empty.
        principal: Authenticated uid, or `None` when the caller is anonymous.

    Returns:
        Validated `GenerationRequest`.

    Edge cases:
        - Empty or whitespace-only `uid`/`uploadId` count as missing.
        - `uid`/`uploadId` containing `/`, `\\` or NUL, or made only of dots,
          are invalid.
        - `forTesting` is interpreted by truthiness; absent means `False`.
    """
    if not principal:
        raise GenerationError(ErrorKind.UNAUTHENTICATED)

    if not isinstance(data, Mapping):
        data = {}

    owner_id = _required_str(data, "uid")
    upload_id = _required_str(data, "uploadId")
    if owner_id is None or upload_id is None:
        raise GenerationError(ErrorKind.INVALID_ARGUMENT)
    if not (_is_path_segment(owner_id) and _is_path_segment(upload_id)):
        raise GenerationError(ErrorKind.INVALID_ARGUMENT)

    if owner_id != principal:
        raise GenerationError(ErrorKind.PERMISSION_DENIED)

    for_testing = bool(data.get("forTesting", False))
    return GenerationRequest(
        owner_id=owner_id,
        upload_id=upload_id,
        for_testing=for_testing,
        count=TESTING_COUNT if for_testing else DEFAULT_COUNT,
        prompt=STYLE_PROMPT,
    )
