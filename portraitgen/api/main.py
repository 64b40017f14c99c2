"""
Server entrypoint for the portrait generation service.

Startup sequence:
1. Load settings from the environment (`.env` included).
2. Configure logging once.
3. Construct the orchestrator, its stores and the generation client.
4. Build the FastAPI app around those handles.

Run with `python -m portraitgen.api.main` or
`uvicorn portraitgen.api.main:app`.
"""

import uvicorn

from portraitgen.api.auth import Authenticator
from portraitgen.api.http_api import create_app
from portraitgen.config import Settings
from portraitgen.core.orchestrator import build_orchestrator
from portraitgen.logging_config import setup_logging

settings = Settings()
setup_logging(settings.log_level)

app = create_app(build_orchestrator(settings), Authenticator(settings.api_tokens))


def main():
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
