"""Multimodal image-generation client.

Processing flow:
    1. Build one `generateContent` payload: instruction text + inline base64 image.
    2. Submit a single synchronous POST (no streaming, no retry).
    3. Classify non-2xx responses into the caller-safe taxonomy.
    4. Return a lazy, count-capped iterator over inline image payloads.

Response traversal:
    Candidates are visited in response order, then parts within each candidate.
    Every level of the tree (candidates, content, parts, inlineData) may be absent;
    missing levels contribute nothing. Parts without inline data are skipped and
    traversal stops once `count` payloads have been produced.

Base64:
    - The source image is encoded here.
    - Extracted payloads are returned still encoded; decoding happens in
      `portraitgen.image.artifact_writer`.

Error handling strategy:
    - HTTP 503 -> `SERVICE_UNAVAILABLE`
    - HTTP 429 -> `RESOURCE_EXHAUSTED`
    - any other non-2xx -> `INTERNAL_GENERATION_FAILURE`
    Provider error bodies are logged, never returned. Transport exceptions from
    `requests` propagate unclassified.

Security considerations:
    The API key travels in the `x-goog-api-key` header, never in the URL.
"""

import base64
import logging
from collections.abc import Iterator, Mapping
from itertools import islice

import requests

from portraitgen.core.types import ImagePayload
from portraitgen.errors import ErrorKind, GenerationError
from portraitgen.image.provider_config import (
    GEMINI_TIMEOUT_SECONDS,
    SOURCE_MIME_TYPE,
    build_endpoint,
)
from portraitgen.prompting.prompt_builder import build_generation_text


logger = logging.getLogger(__name__)

STATUS_KINDS = {
    503: ErrorKind.SERVICE_UNAVAILABLE,
    429: ErrorKind.RESOURCE_EXHAUSTED,
}


def build_payload(text: str, image_bytes: bytes, mime_type: str = SOURCE_MIME_TYPE) -> dict:
    """Build the `generateContent` request body."""
    return {
        "contents": [
            {
                "parts": [
                    {"text": text},
                    {
                        "inlineData": {
                            "mimeType": mime_type,
                            "data": base64.b64encode(image_bytes).decode("ascii"),
                        }
                    },
                ]
            }
        ]
    }


def _child(node, key):
    """Return `node[key]` when `node` is a mapping, else `None`."""
    if isinstance(node, Mapping):
        return node.get(key)
    return None


def _sequence(node) -> list:
    if isinstance(node, (list, tuple)):
        return list(node)
    return []


def iter_parts(response) -> Iterator:
    """Yield every part of every candidate in response order."""
    for candidate in _sequence(_child(response, "candidates")):
        yield from _sequence(_child(_child(candidate, "content"), "parts"))


def inline_image(part) -> ImagePayload | None:
    """Extract the inline image carried by `part`, if any."""
    inline = _child(part, "inlineData") or _child(part, "inline_data")
    data = _child(inline, "data")
    if not isinstance(data, str) or not data:
        return None
    return ImagePayload(data=data, mime_type=_child(inline, "mimeType") or _child(inline, "mime_type"))


def extract_payloads(response, count: int) -> Iterator[ImagePayload]:
    """Return a lazy iterator over at most `count` inline images in extraction order."""
    payloads = filter(None, map(inline_image, iter_parts(response)))
    return islice(payloads, max(count, 0))


class GenerationClient:
    """Single-call client for the external generation endpoint.

    Args:
        api_key: Endpoint credential; `None` means the service is not configured.
        endpoint: Full `generateContent` URL.
        timeout: Socket timeout for the single POST.
        session: `requests`-compatible session exposing `post`.
    """

    def __init__(
        self,
        api_key: str | None,
        endpoint: str | None = None,
        timeout: float = GEMINI_TIMEOUT_SECONDS,
        session=None,
    ):
        self.api_key = api_key
        self.endpoint = endpoint or build_endpoint()
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def generate(
        self,
        prompt: str,
        count: int,
        image_bytes: bytes,
        mime_type: str = SOURCE_MIME_TYPE,
    ) -> Iterator[ImagePayload]:
        """Invoke the model once and return the capped payload iterator.

        Args:
            prompt: Style prompt appended to the count-parameterized instruction.
            count: Maximum number of payloads to yield.
            image_bytes: Raw source image.
            mime_type: Source image content type.

        Returns:
            Non-restartable iterator yielding `ImagePayload` in extraction order.

        Raises:
            GenerationError: Missing credential or non-2xx provider status.
        """
        if not self.configured:
            raise GenerationError(ErrorKind.FAILED_PRECONDITION)

        payload = build_payload(build_generation_text(count, prompt), image_bytes, mime_type)
        headers = {
            "x-goog-api-key": self.api_key,
            "Content-Type": "application/json",
        }

        response = self.session.post(
            self.endpoint,
            headers=headers,
            json=payload,
            timeout=self.timeout,
        )

        status = response.status_code
        if not 200 <= status < 300:
            logger.error(
                "Generation API error status=%s body=%s",
                status,
                response.text,
            )
            kind = STATUS_KINDS.get(status, ErrorKind.INTERNAL_GENERATION_FAILURE)
            raise GenerationError(kind)

        logger.info("Generation response received (status=%s).", status)
        return extract_payloads(response.json(), count)
