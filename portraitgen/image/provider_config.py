"""Provider configuration for the image-generation endpoint.

Architectural role:
    Centralizes endpoint, model selection and credential lookup for
    `portraitgen.image.client`.

Determinism:
    Deterministic for a fixed process environment and key files. Values are resolved
    at import time (plus runtime key-file reads in `load_key`).

Failure behavior:
    Missing key material is represented as `None`; the orchestrator turns it into a
    `FAILED_PRECONDITION` error per invocation.
"""

import os
from dotenv import load_dotenv

load_dotenv()

GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash-image")
GEMINI_API_VERSION = os.getenv("GEMINI_API_VERSION", "v1beta")
GEMINI_KEY_FILE = "config/gemini.key"

GEMINI_URL_TEMPLATE = (
    "https://generativelanguage.googleapis.com/{version}/models/"
    "{model}:generateContent"
)

# Mirrors the bound on the whole invocation; the call itself is never retried.
GEMINI_TIMEOUT_SECONDS = float(os.getenv("GEMINI_TIMEOUT_SECONDS", "540"))

SOURCE_MIME_TYPE = "image/jpeg"
ARTIFACT_MIME_TYPE = "image/png"


def build_endpoint(model: str = GEMINI_MODEL, version: str = GEMINI_API_VERSION) -> str:
    """Return the `generateContent` URL for `model`."""
    return GEMINI_URL_TEMPLATE.format(version=version, model=model)


def load_key(path: str | None) -> str | None:
    """Return the Gemini credential, or `None` when the service is unconfigured.

    `GEMINI_API_KEY` (named after the key file stem) wins over the contents of
    `path`. Blank values count as absent.
    """
    if not path:
        return None
    stem = os.path.splitext(os.path.basename(path))[0]
    from_env = (os.getenv(f"{stem.upper()}_API_KEY") or "").strip()
    if from_env:
        return from_env
    if not os.path.isfile(path):
        return None
    with open(path, "r", encoding="utf-8") as f:
        return f.read().strip() or None
