"""
HTTP API adapter for the portrait generation workflow.

Architectural role:
- Expose the generation workflow as one authenticated endpoint.
- Resolve the caller principal from the `Authorization` header.
- Delegate validation, authorization and execution to `Orchestrator`.
- Normalize workflow errors to the `{error: {kind, message}}` transport contract.

Endpoint responsibilities:
- `POST /v1/generate-images`: run one generation for the authenticated owner.
- `GET /health`: liveness probe.

API request lifecycle (`POST /v1/generate-images`):
1. Parse request JSON; non-JSON bodies are treated as an empty payload.
2. Resolve the bearer token to a principal (or `None`).
3. Await `Orchestrator.generate_images(body, principal)`.
4. Return `GenerateImagesResponse` or the classified error.

Error handling strategy:
- `GenerationError` is mapped to its HTTP status by an exception handler.
- The orchestrator already coerces unclassified failures, so no traceback or
  provider detail reaches the response body.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from portraitgen.api.auth import Authenticator
from portraitgen.core.orchestrator import Orchestrator
from portraitgen.errors import GenerationError


# ============================================================
# Request / Response Schema
# ============================================================

class GenerateImagesResponse(BaseModel):
    generationId: str
    uploadId: str
    originalImageUrl: str
    images: list[str]


# ============================================================
# Application Factory
# ============================================================

def create_app(orchestrator: Orchestrator, authenticator: Authenticator) -> FastAPI:
    """
    Build the FastAPI application around already-constructed collaborators.

    Both handles are created once at process startup and stored on `app.state`.
    """
    app = FastAPI(title="Portrait Generation Service")
    app.state.orchestrator = orchestrator
    app.state.authenticator = authenticator

    @app.exception_handler(GenerationError)
    async def generation_error_handler(request: Request, exc: GenerationError):
        return JSONResponse(status_code=exc.http_status, content=exc.to_dict())

    @app.get("/health")
    def health_check():
        """A simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/v1/generate-images", response_model=GenerateImagesResponse)
    async def generate_images(request: Request):
        """
        Generate portrait variations for the authenticated owner.

        Input validation behavior:
        - No/unknown bearer token -> 401 `unauthenticated`.
        - Missing `uid` or `uploadId` -> 400 `invalid-argument`.
        - `uid` differing from the principal -> 403 `permission-denied`.
        """
        try:
            body = await request.json()
        except ValueError:
            body = {}

        principal = request.app.state.authenticator.resolve(
            request.headers.get("authorization")
        )
        result = await request.app.state.orchestrator.generate_images(body, principal)
        return GenerateImagesResponse(**result.to_response())

    return app
