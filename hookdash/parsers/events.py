"""Read hook-events JSONL logs into LogEvent records.

A writer may be appending to the active log while it is read, so any line that
does not decode into an event is dropped rather than failing the whole read.
The next read picks the line up once the append has completed.
"""
from __future__ import annotations

import json
import logging
import re
from pathlib import Path

from pydantic import ValidationError

from hookdash import config
from hookdash.errors import InvalidLogFilename
from hookdash.models import LogEvent
from hookdash.observability import record_log_read

logger = logging.getLogger("hookdash.reader")

_LOG_FILE_PATTERN = re.compile(r"hook-events.*\.jsonl")
_VALID_FILENAME_PATTERN = re.compile(r"hook-events[\w.-]*\.jsonl", re.ASCII)


def parse_event_line(line: str) -> LogEvent | None:
    """Decode one log line, or return None if it is blank or malformed."""
    trimmed = (line or "").strip()
    if not trimmed:
        return None
    try:
        payload = json.loads(trimmed)
    except json.JSONDecodeError:
        return None
    if not isinstance(payload, dict):
        return None
    try:
        return LogEvent.model_validate(payload)
    except ValidationError:
        return None


def parse_log_text(content: str) -> tuple[list[LogEvent], int]:
    """Parse NDJSON text. Returns (events, dropped_line_count)."""
    events: list[LogEvent] = []
    dropped = 0
    for line in content.split("\n"):
        if not line.strip():
            continue
        parsed = parse_event_line(line)
        if parsed is None:
            dropped += 1
            continue
        events.append(parsed)
    return events, dropped


def is_valid_filename(filename: str | None) -> bool:
    if not filename or ".." in filename or "/" in filename or "\\" in filename:
        return False
    return _VALID_FILENAME_PATTERN.fullmatch(filename) is not None


def resolve_log_path(log_dir: Path, filename: str) -> Path:
    """Join a caller-supplied filename onto the log dir after validating it."""
    if not is_valid_filename(filename):
        raise InvalidLogFilename(filename)
    return Path(log_dir) / filename


def list_log_files(log_dir: Path) -> list[str]:
    """Return hook-events log names, newest name first."""
    directory = Path(log_dir)
    if not directory.is_dir():
        return []
    names = [p.name for p in directory.iterdir() if p.is_file() and _LOG_FILE_PATTERN.fullmatch(p.name)]
    return sorted(names, reverse=True)


def read_log_file(log_dir: Path, filename: str) -> list[LogEvent]:
    path = Path(log_dir) / filename
    if not path.is_file():
        return []
    content = path.read_text(encoding="utf-8", errors="replace")
    events, dropped = parse_log_text(content)
    if dropped:
        logger.debug("Dropped %d malformed line(s) from %s", dropped, path)
    record_log_read(filename, len(events), dropped)
    return events


def load_current_events(log_dir: Path) -> list[LogEvent]:
    """Load the active log, falling back to the newest rotated one."""
    files = list_log_files(log_dir)
    if config.CURRENT_LOG_FILE in files:
        return read_log_file(log_dir, config.CURRENT_LOG_FILE)
    if not files:
        return []
    return read_log_file(log_dir, files[0])
