"""Tavern Logger — launcher. Starts the mock OpenAI server under uvicorn."""

import argparse
import logging
import os
from pathlib import Path

import uvicorn
from dotenv import load_dotenv

from tavern_logger.config import Settings, load_settings

ROOT = Path(__file__).parent
load_dotenv(ROOT / ".env")


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Tavern Logger mock OpenAI server")
    parser.add_argument("--host", default=settings.host,
                        help=f"Bind address (default: {settings.host})")
    parser.add_argument("--port", type=int, default=settings.port,
                        help=f"Listen port (default: {settings.port})")
    parser.add_argument("--logs-dir", type=Path, default=None,
                        help=f"Transcript directory (default: {settings.logs_dir})")
    parser.add_argument("--log-level", default=settings.log_level, type=str.upper,
                        help=f"Python logging level (default: {settings.log_level})")
    parser.add_argument("--reload", action="store_true",
                        help="Restart on code changes (development)")
    return parser


def main(argv: list[str] | None = None):
    settings = load_settings()
    args = build_parser(settings).parse_args(argv)

    # The app builds its own Settings from the environment at import time
    if args.logs_dir:
        os.environ["LOGS_DIR"] = str(args.logs_dir.resolve())

    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    print(f"Mock OpenAI server running on http://localhost:{args.port}")
    uvicorn.run(
        "tavern_logger.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=args.log_level.lower(),
    )


if __name__ == "__main__":
    main()
