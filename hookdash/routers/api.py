"""API routers for raw log files, events, and the dashboard summary."""
from __future__ import annotations

from pathlib import Path
from typing import Any

from fastapi import APIRouter, HTTPException, Query

from hookdash import config
from hookdash.errors import InvalidLogFilename
from hookdash.models import Summary
from hookdash.parsers.events import list_log_files, read_log_file, resolve_log_path
from hookdash.summary import build_summary

logs_router = APIRouter(prefix="/api", tags=["logs"])


def _log_dir() -> Path:
    return config.LOG_DIR


def _validated_filename(file: str) -> str:
    try:
        resolve_log_path(_log_dir(), file)
    except InvalidLogFilename:
        raise HTTPException(status_code=400, detail="Invalid filename")
    return file


@logs_router.get("/files")
def get_files() -> dict[str, list[str]]:
    """List hook-events log files, newest first."""
    return {"files": list_log_files(_log_dir())}


@logs_router.get("/events")
def get_events(
    file: str = Query(config.CURRENT_LOG_FILE, description="Log filename within the log directory"),
) -> dict[str, Any]:
    events = read_log_file(_log_dir(), _validated_filename(file))
    return {
        "events": [ev.model_dump(exclude_none=True) for ev in events],
        "count": len(events),
    }


@logs_router.get("/summary", response_model=Summary)
def get_summary(
    file: str = Query(config.CURRENT_LOG_FILE, description="Log filename within the log directory"),
) -> Summary:
    return build_summary(read_log_file(_log_dir(), _validated_filename(file)))
