#!/usr/bin/env python3
"""Rotate the active hook-events log if its first entry is from an earlier day.

Usage:
  hookdash-rotate-logs
  hookdash-rotate-logs --log-dir /path/to/logs --today 2026-02-16
"""
from __future__ import annotations

import argparse
import logging
from pathlib import Path

from hookdash import config
from hookdash.rotation import rotate_log


def main() -> int:
    parser = argparse.ArgumentParser()
    parser.add_argument("--log-dir", default="", help=f"Log directory (default: {config.LOG_DIR})")
    parser.add_argument("--today", default="", help="Override today's UTC date (YYYY-MM-DD)")
    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO)

    log_dir = Path(args.log_dir).expanduser() if args.log_dir else config.LOG_DIR
    archive = rotate_log(log_dir, today=args.today or None)
    if archive is None:
        print("No rotation needed.")
    else:
        print(f"Rotated to {archive}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
