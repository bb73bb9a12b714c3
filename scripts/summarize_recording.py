#!/usr/bin/env python3
"""
Meeting Recap command-line summarizer

Runs the same pipeline as ``POST /api/v1/summarize`` for a single
recording URL and prints the plain-text summary.

Usage:
    python scripts/summarize_recording.py https://cdn.example.com/rec.mp4
    python scripts/summarize_recording.py URL --call-id call-1 --store memory
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Ensure project root is on sys.path for ``src`` imports
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.core.config import get_settings  # noqa: E402
from src.core.exceptions import RecapError  # noqa: E402
from src.core.models import RecordingReference  # noqa: E402
from src.services.storage import close_db, init_db  # noqa: E402
from src.services.summarization import SummarizationService  # noqa: E402

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Summarize a recorded call.")
    parser.add_argument("recording_url", help="URL of the audio/video recording")
    parser.add_argument("--call-id", default=None, help="Call ID used as the summary key")
    parser.add_argument("--recording-id", default=None, help="Recording ID echoed back")
    parser.add_argument(
        "--store",
        choices=["sqlite", "stream", "memory", "none"],
        default=None,
        help="Summary store backend (defaults to SUMMARY_STORE)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log at INFO level")
    return parser.parse_args(argv)


async def _run(args: argparse.Namespace) -> int:
    settings = get_settings()
    backend = args.store or settings.summary_store
    if backend == "sqlite":
        await init_db()

    service = SummarizationService.from_settings(settings, store_backend=backend)
    try:
        result = await service.summarize(
            RecordingReference(
                location=args.recording_url,
                recording_id=args.recording_id,
                call_id=args.call_id,
            )
        )
    except RecapError as exc:
        print(f"ERROR [{exc.code}]: {exc.detail}", file=sys.stderr)
        return 1
    finally:
        if backend == "sqlite":
            await close_db()

    print(f"# source: {result.source}", file=sys.stderr)
    print(result.summary)
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)
    return asyncio.run(_run(args))


if __name__ == "__main__":
    sys.exit(main())
