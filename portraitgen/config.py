"""Runtime settings for the generation service.

Environment-backed fields (after `.env` loading) are read each time a `Settings`
object is constructed. Model, API version and timeout are resolved once by
`provider_config`.

Relevant environment variables:
    - `GEMINI_API_KEY` (or key file `config/gemini.key`)
    - `GEMINI_MODEL`, `GEMINI_API_VERSION`, `GEMINI_TIMEOUT_SECONDS`
    - `STORAGE_ROOT`
    - `PUBLIC_BASE_URL`
    - `API_TOKENS` (`token:uid` pairs, comma separated)
    - `LOG_LEVEL`, `HOST`, `PORT`
"""

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from portraitgen.image.provider_config import (
    GEMINI_API_VERSION,
    GEMINI_KEY_FILE,
    GEMINI_MODEL,
    GEMINI_TIMEOUT_SECONDS,
    load_key,
)

load_dotenv()


def parse_api_tokens(raw: str | None) -> dict[str, str]:
    """Parse `token:uid,token2:uid2` into a token -> uid map.

    Malformed entries (no colon, empty token or uid) are skipped.
    """
    tokens = {}
    for entry in (raw or "").split(","):
        token, sep, uid = entry.strip().partition(":")
        if sep and token.strip() and uid.strip():
            tokens[token.strip()] = uid.strip()
    return tokens


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration consumed by `build_orchestrator` and the entrypoints."""

    gemini_api_key: str | None = field(default_factory=lambda: load_key(GEMINI_KEY_FILE))
    gemini_model: str = GEMINI_MODEL
    gemini_api_version: str = GEMINI_API_VERSION
    request_timeout_seconds: float = GEMINI_TIMEOUT_SECONDS
    storage_root: str = field(default_factory=lambda: os.getenv("STORAGE_ROOT", "storage"))
    public_base_url: str = field(default_factory=lambda: os.getenv("PUBLIC_BASE_URL", "").strip())
    api_tokens: dict[str, str] = field(
        default_factory=lambda: parse_api_tokens(os.getenv("API_TOKENS"))
    )
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    host: str = field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8000")))
