import base64
from datetime import datetime, timezone

import pytest

from portraitgen.core.orchestrator import Orchestrator
from portraitgen.image.client import GenerationClient
from portraitgen.storage.asset_store import LocalAssetStore
from portraitgen.storage.record_store import JsonRecordStore

FIXED_NOW = datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
ORIGINAL_BYTES = b"\xff\xd8\xff\xe0original-jpeg"


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON body")
        return self._payload


class FakeSession:
    """Stands in for `requests.Session`; records every POST."""

    def __init__(self, response=None, error=None):
        self.response = response or FakeResponse(payload={})
        self.error = error
        self.calls = []

    def post(self, url, headers=None, json=None, timeout=None):
        self.calls.append({"url": url, "headers": headers, "json": json, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response


def image_part(content: bytes, mime_type="image/png") -> dict:
    return {"inlineData": {"mimeType": mime_type, "data": base64.b64encode(content).decode("ascii")}}


def candidate(*parts) -> dict:
    return {"content": {"parts": list(parts)}}


def model_response(*candidates) -> dict:
    return {"candidates": list(candidates)}


@pytest.fixture()
def asset_store(tmp_path):
    return LocalAssetStore(str(tmp_path / "storage"), public_base_url="https://cdn.example.test")


@pytest.fixture()
def record_store(tmp_path):
    return JsonRecordStore(str(tmp_path / "storage"))


@pytest.fixture()
def seed_original(asset_store):
    def _seed(uid="u1", upload_id="abc"):
        path = f"users/{uid}/original/{upload_id}.jpg"
        asset_store.save(path, ORIGINAL_BYTES, "image/jpeg", {"ownerUid": uid})
        return path

    return _seed


@pytest.fixture()
def make_orchestrator(asset_store, record_store):
    def _make(response=None, error=None, api_key="test-key"):
        session = FakeSession(response=response, error=error)
        client = GenerationClient(
            api_key=api_key,
            endpoint="https://model.example.test/v1beta/models/m:generateContent",
            timeout=5,
            session=session,
        )
        orchestrator = Orchestrator(
            asset_store=asset_store,
            record_store=record_store,
            client=client,
            clock=lambda: FIXED_NOW,
        )
        return orchestrator, session

    return _make


def stored_records(storage_root, uid="u1"):
    generations = storage_root / "users" / uid / "generations"
    if not generations.exists():
        return []
    return sorted(p for p in generations.iterdir() if p.suffix == ".json")
