import pytest
from fastapi.testclient import TestClient

from conftest import FakeResponse, candidate, image_part, model_response, stored_records
from portraitgen.api.auth import Authenticator
from portraitgen.api.http_api import create_app

TOKENS = {"token-u1": "u1", "token-u2": "u2"}


@pytest.fixture()
def api(make_orchestrator):
    def _api(response=None, api_key="test-key"):
        orchestrator, session = make_orchestrator(response, api_key=api_key)
        client = TestClient(create_app(orchestrator, Authenticator(TOKENS)))
        return client, session

    return _api


def _auth(token="token-u1"):
    return {"Authorization": f"Bearer {token}"}


def test_health(api):
    client, _ = api()

    assert client.get("/health").json() == {"status": "ok"}


def test_generate_images_success(tmp_path, api, seed_original):
    seed_original()
    client, _ = api(FakeResponse(payload=model_response(candidate(image_part(b"png")))))

    response = client.post(
        "/v1/generate-images",
        json={"uid": "u1", "uploadId": "abc", "forTesting": True},
        headers=_auth(),
    )

    assert response.status_code == 200
    body = response.json()
    assert set(body) == {"generationId", "uploadId", "originalImageUrl", "images"}
    assert body["uploadId"] == "abc"
    assert body["images"] == ["users/u1/generated/abc_1.png"]
    assert body["originalImageUrl"].endswith("users/u1/original/abc.jpg")
    assert stored_records(tmp_path / "storage")[0].stem == body["generationId"]


@pytest.mark.parametrize("headers", [{}, {"Authorization": "Bearer nope"}, {"Authorization": "Basic token-u1"}])
def test_missing_or_unknown_token_is_401(api, headers):
    client, session = api()

    response = client.post("/v1/generate-images", json={"uid": "u1", "uploadId": "abc"}, headers=headers)

    assert response.status_code == 401
    assert response.json() == {"error": {"kind": "unauthenticated", "message": "User must be authenticated."}}
    assert session.calls == []


def test_other_owner_is_403(api):
    client, session = api()

    response = client.post("/v1/generate-images", json={"uid": "u1", "uploadId": "abc"}, headers=_auth("token-u2"))

    assert response.status_code == 403
    assert response.json()["error"]["kind"] == "permission-denied"
    assert session.calls == []


def test_missing_fields_and_bad_body_are_400(api):
    client, _ = api()

    missing = client.post("/v1/generate-images", json={"uid": "u1"}, headers=_auth())
    garbage = client.post("/v1/generate-images", content=b"not json", headers=_auth())

    assert missing.status_code == 400
    assert garbage.status_code == 400
    assert garbage.json()["error"]["kind"] == "invalid-argument"


def test_missing_original_is_404(api):
    client, session = api()

    response = client.post("/v1/generate-images", json={"uid": "u1", "uploadId": "nope"}, headers=_auth())

    assert response.status_code == 404
    assert response.json()["error"]["kind"] == "not-found"
    assert session.calls == []


def test_unconfigured_service_is_400_failed_precondition(api):
    client, _ = api(api_key=None)

    response = client.post("/v1/generate-images", json={"uid": "u1", "uploadId": "abc"}, headers=_auth())

    assert response.status_code == 400
    assert response.json()["error"] == {"kind": "failed-precondition", "message": "AI service not configured."}


@pytest.mark.parametrize(
    "status, http_status, kind",
    [
        (503, 503, "unavailable"),
        (429, 429, "resource-exhausted"),
        (502, 500, "internal-generation-failure"),
    ],
)
def test_provider_errors_map_to_http(api, seed_original, status, http_status, kind):
    seed_original()
    client, _ = api(FakeResponse(status_code=status, text="secret provider trace"))

    response = client.post("/v1/generate-images", json={"uid": "u1", "uploadId": "abc"}, headers=_auth())

    assert response.status_code == http_status
    assert response.json()["error"]["kind"] == kind
    assert "secret provider trace" not in response.text
