#!/usr/bin/env python3
"""Append one agent hook payload (read from stdin) to the hook-events log.

Register this as the command for every hook event:
  hookdash-log-event
  hookdash-log-event --log-dir ~/.claude/logs
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from hookdash import config
from hookdash.ingest import ingest_payload

logger = logging.getLogger("hookdash.ingest")


def main() -> int:
    parser = argparse.ArgumentParser()
    parser.add_argument("--log-dir", default="", help=f"Log directory (default: {config.LOG_DIR})")
    parser.add_argument("--no-rotate", action="store_true", help="Skip day rotation on SessionStart")
    args = parser.parse_args()
    logging.basicConfig(level=logging.WARNING, stream=sys.stderr)

    log_dir = Path(args.log_dir).expanduser() if args.log_dir else config.LOG_DIR
    try:
        ingest_payload(sys.stdin.read(), log_dir, rotate_on_start=not args.no_rotate)
    except ValueError as exc:
        # Hooks always exit 0.
        logger.warning("Ignoring unparseable hook payload: %s", exc)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
