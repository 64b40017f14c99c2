"""
One-shot operator CLI for the generation workflow.

Architectural role:
- Runs the same `Orchestrator` as the HTTP adapter, acting as principal `--uid`.
- Intended for operators and local smoke runs against the configured stores.

Response formatting:
- Success prints the JSON response payload to stdout (exit status 0).
- Failure prints `<kind>: <message>` to stderr (exit status 1).
"""

import argparse
import asyncio
import json
import sys

from portraitgen.config import Settings
from portraitgen.core.orchestrator import build_orchestrator
from portraitgen.errors import GenerationError
from portraitgen.logging_config import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="portraitgen",
        description="Generate portrait variations for an uploaded original image.",
    )
    parser.add_argument("--uid", required=True, help="Owner uid (also used as principal).")
    parser.add_argument("--upload-id", required=True, help="Upload identifier of the original image.")
    parser.add_argument(
        "--for-testing",
        action="store_true",
        help="Request a single variation instead of four.",
    )
    return parser


def main(argv=None, orchestrator=None) -> int:
    args = build_parser().parse_args(argv)

    if orchestrator is None:
        settings = Settings()
        setup_logging(settings.log_level)
        orchestrator = build_orchestrator(settings)

    payload = {"uid": args.uid, "uploadId": args.upload_id, "forTesting": args.for_testing}
    try:
        result = asyncio.run(orchestrator.generate_images(payload, principal=args.uid))
    except GenerationError as exc:
        print(f"{exc.kind.value}: {exc.message}", file=sys.stderr)
        return 1

    print(json.dumps(result.to_response(), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
