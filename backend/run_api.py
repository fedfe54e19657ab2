#!/usr/bin/env python
"""
Serve the council HTTP API with uvicorn.

Usage:
    python run_api.py
    python run_api.py --reload                # Development mode
    python run_api.py --port 9000 --log-level debug

Host, port, reload and log level default to COUNCIL_HOST, COUNCIL_PORT,
COUNCIL_RELOAD and COUNCIL_LOG_LEVEL.
"""

import argparse

import uvicorn

from shared.config import get_settings


def main() -> None:
    settings = get_settings()

    parser = argparse.ArgumentParser(description="Serve the council debate API")
    parser.add_argument("--reload", action="store_true", help="Restart on code changes")
    parser.add_argument("--host", default=settings.host, help=f"Bind address (default {settings.host})")
    parser.add_argument("--port", type=int, default=settings.port, help=f"Port (default {settings.port})")
    parser.add_argument("--log-level", default=settings.log_level, help="uvicorn log level")
    args = parser.parse_args()

    uvicorn.run(
        "api:app",
        host=args.host,
        port=args.port,
        reload=args.reload or settings.reload,
        log_level=args.log_level.lower(),
    )


if __name__ == "__main__":
    main()
