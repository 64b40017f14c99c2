"""Path-keyed binary object store.

Architectural role:
    Defines the `AssetStore` contract consumed by the orchestrator and the artifact
    writer, plus `LocalAssetStore`, a filesystem implementation rooted at
    `STORAGE_ROOT`.

Responsibilities:
    - `exists` / `fetch` for original uploads.
    - `save` for generated artifacts, with content type and ownership metadata kept
      in a `<path>.meta.json` sidecar.
    - `public_url` for the original image URL returned to callers.

Side effects:
    Writes are atomic per file (temporary file + `os.replace`). Concurrent saves to
    the same path are last-writer-wins.
"""

import json
import logging
import os
import uuid
from pathlib import Path
from typing import Protocol

from portraitgen.errors import ErrorKind, GenerationError


logger = logging.getLogger(__name__)

META_SUFFIX = ".meta.json"


class AssetStore(Protocol):
    """Minimal interface required by the generation workflow."""

    def exists(self, path: str) -> bool:
        ...

    def fetch(self, path: str) -> bytes:
        """Return stored bytes or raise `GenerationError(NOT_FOUND)`."""
        ...

    def save(self, path: str, data: bytes, content_type: str, metadata: dict | None = None) -> None:
        ...

    def public_url(self, path: str) -> str:
        ...


def _atomic_write(path: str, data: bytes) -> None:
    tmp = f"{path}.{uuid.uuid4().hex}.tmp"
    with open(tmp, "wb") as f:
        f.write(data)
    os.replace(tmp, path)


class LocalAssetStore:
    """Filesystem-backed `AssetStore`.

    Args:
        root: Directory under which object paths are laid out.
        public_base_url: Prefix for public URLs; `file://` URIs are used when empty.
    """

    def __init__(self, root: str, public_base_url: str = ""):
        self.root = os.path.realpath(root)
        self.public_base_url = public_base_url.rstrip("/")
        os.makedirs(self.root, exist_ok=True)

    def _resolve(self, path: str) -> str:
        full = os.path.realpath(os.path.join(self.root, path))
        if os.path.commonpath([self.root, full]) != self.root or full == self.root:
            logger.warning("Rejected object path outside storage root: %r", path)
            raise GenerationError(ErrorKind.INVALID_ARGUMENT)
        return full

    def exists(self, path: str) -> bool:
        return os.path.isfile(self._resolve(path))

    def fetch(self, path: str) -> bytes:
        full = self._resolve(path)
        if not os.path.isfile(full):
            raise GenerationError(ErrorKind.NOT_FOUND)
        with open(full, "rb") as f:
            return f.read()

    def save(self, path: str, data: bytes, content_type: str, metadata: dict | None = None) -> None:
        full = self._resolve(path)
        os.makedirs(os.path.dirname(full), exist_ok=True)
        _atomic_write(full, data)
        sidecar = {"contentType": content_type, "metadata": dict(metadata or {})}
        _atomic_write(full + META_SUFFIX, json.dumps(sidecar, indent=2).encode("utf-8"))
        logger.debug("Saved object %s (%d bytes, %s)", path, len(data), content_type)

    def metadata(self, path: str) -> dict | None:
        """Return the sidecar written by `save`, or `None` when absent."""
        full = self._resolve(path) + META_SUFFIX
        if not os.path.isfile(full):
            return None
        with open(full, "r", encoding="utf-8") as f:
            return json.load(f)

    def public_url(self, path: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url}/{path}"
        return Path(self._resolve(path)).as_uri()
