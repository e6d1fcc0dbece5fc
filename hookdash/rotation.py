"""Calendar-day rotation of the active hook-events log."""
from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Optional

from hookdash import config
from hookdash.date_utils import date_part, utc_now
from hookdash.parsers.events import parse_event_line

logger = logging.getLogger("hookdash.rotation")


def _first_entry_date(path: Path) -> str:
    with path.open("r", encoding="utf-8", errors="replace") as handle:
        first_line = handle.readline()
    event = parse_event_line(first_line)
    return date_part(event.ts) if event else ""


def rotate_log(log_dir: Path, today: Optional[str] = None) -> Path | None:
    """Archive the active log if its first entry is from an earlier UTC day.

    The archive is named after that first entry's date. If an archive for the
    date already exists the active log is appended to it. Returns the archive
    path, or None when nothing was rotated.
    """
    current = Path(log_dir) / config.CURRENT_LOG_FILE
    if not current.is_file() or current.stat().st_size == 0:
        return None

    first_date = _first_entry_date(current)
    today_token = today or utc_now().strftime("%Y-%m-%d")
    if not first_date or first_date == today_token:
        return None

    archive = current.with_name(f"{config.LOG_PREFIX}.{first_date}.jsonl")
    if archive.exists():
        with current.open("rb") as source, archive.open("ab") as target:
            shutil.copyfileobj(source, target)
        current.write_bytes(b"")
    else:
        current.rename(archive)
    logger.info("Rotated %s to %s", current.name, archive.name)
    return archive
