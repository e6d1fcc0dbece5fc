#!/usr/bin/env python3
"""Run the hookdash API server.

Usage:
  hookdash-server
  hookdash-server --port 8080 --log-dir /path/to/logs
"""
from __future__ import annotations

import argparse
from pathlib import Path

import uvicorn

from hookdash import config


def main() -> int:
    parser = argparse.ArgumentParser()
    parser.add_argument("--host", default=config.HOST)
    parser.add_argument("--port", type=int, default=config.PORT)
    parser.add_argument("--log-dir", default="", help=f"Log directory (default: {config.LOG_DIR})")
    args = parser.parse_args()

    if args.log_dir:
        config.LOG_DIR = Path(args.log_dir).expanduser()

    uvicorn.run("hookdash.main:app", host=args.host, port=args.port)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
