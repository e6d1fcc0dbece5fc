"""Turn agent hook payloads into hook-events log records and append them.

The agent runtime invokes a hook command with a JSON payload on stdin. Only a
small, event-specific subset of the payload is kept so that log lines stay
short; long free-text fields are truncated.
"""
from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from hookdash import config
from hookdash.date_utils import format_ts, utc_now
from hookdash.rotation import rotate_log

logger = logging.getLogger("hookdash.ingest")

# Tool input key that best summarizes each tool's invocation.
_SUMMARY_KEY_BY_TOOL: dict[str, str] = {
    "Bash": "command",
    "Read": "file_path",
    "Write": "file_path",
    "Edit": "file_path",
    "Glob": "pattern",
    "Grep": "pattern",
    "Task": "description",
    "WebFetch": "url",
    "WebSearch": "query",
    "Skill": "skill",
}


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _clip(value: Any, limit: int) -> str:
    return _text(value)[: max(0, limit)]


def summarize_tool_input(tool_name: str, tool_input: Any) -> str:
    key = _SUMMARY_KEY_BY_TOOL.get(tool_name)
    if key is not None:
        value = tool_input.get(key) if isinstance(tool_input, dict) else None
        if tool_name == "Bash":
            return _clip(value, config.SUMMARY_MAX_CHARS)
        return _text(value)
    if tool_input is None:
        return ""
    if isinstance(tool_input, str):
        return _clip(tool_input, config.SUMMARY_MAX_CHARS)
    return _clip(json.dumps(tool_input, ensure_ascii=False, separators=(",", ":")), config.SUMMARY_MAX_CHARS)


def _tool_identity(payload: dict[str, Any]) -> dict[str, Any]:
    return {
        "tool_name": payload.get("tool_name") or "unknown",
        "tool_use_id": payload.get("tool_use_id") or None,
    }


def extract_event_data(event: str, payload: dict[str, Any]) -> dict[str, Any]:
    """Pick the event-specific fields worth logging from a hook payload."""
    if event == "SessionStart":
        return {"source": payload.get("source"), "model": payload.get("model")}
    if event == "SessionEnd":
        return {"reason": payload.get("reason")}
    if event == "UserPromptSubmit":
        prompt = _text(payload.get("prompt"))
        return {"prompt": prompt[: config.PROMPT_MAX_CHARS], "prompt_length": len(prompt)}
    if event == "PreToolUse":
        identity = _tool_identity(payload)
        return {
            **identity,
            "tool_input_summary": summarize_tool_input(identity["tool_name"], payload.get("tool_input")),
        }
    if event == "PostToolUse":
        return {**_tool_identity(payload), "success": True}
    if event == "PostToolUseFailure":
        return {
            **_tool_identity(payload),
            "error": _clip(payload.get("error"), config.ERROR_MAX_CHARS),
            "is_interrupt": bool(payload.get("is_interrupt", False)),
        }
    if event == "Notification":
        return {
            "notification_type": _text(payload.get("notification_type")),
            "message": _clip(payload.get("message"), config.ERROR_MAX_CHARS),
        }
    if event == "Stop":
        return {"stop_hook_active": bool(payload.get("stop_hook_active", False))}
    if event in ("SubagentStart", "SubagentStop"):
        return {
            "agent_id": _text(payload.get("agent_id")),
            "agent_type": _text(payload.get("agent_type")),
        }
    return {}


def build_log_record(payload: dict[str, Any], now: datetime | None = None) -> dict[str, Any]:
    event = _text(payload.get("hook_event_name")) or "unknown"
    record: dict[str, Any] = {
        "ts": format_ts(now or utc_now()),
        "event": event,
        "session_id": _text(payload.get("session_id")) or "unknown",
    }
    cwd = _text(payload.get("cwd"))
    if cwd:
        record["cwd"] = cwd
    permission_mode = _text(payload.get("permission_mode"))
    if permission_mode:
        record["permission_mode"] = permission_mode
    record["data"] = {key: value for key, value in extract_event_data(event, payload).items() if value is not None}
    return record


def append_record(log_dir: Path, record: dict[str, Any]) -> Path:
    """Append one record as a single JSON line to the active log."""
    directory = Path(log_dir)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / config.CURRENT_LOG_FILE
    line = json.dumps(record, ensure_ascii=False, separators=(",", ":")) + "\n"
    with path.open("a", encoding="utf-8") as handle:
        handle.write(line)
    return path


def ingest_payload(
    raw: str,
    log_dir: Path,
    now: datetime | None = None,
    rotate_on_start: bool = True,
) -> dict[str, Any] | None:
    """Parse a raw hook payload and append it. Empty input is ignored.

    A SessionStart rotates yesterday's log out of the way first, so the new
    session's first line opens the new day's file.
    """
    if not raw or not raw.strip():
        return None
    payload = json.loads(raw)
    if not isinstance(payload, dict):
        raise ValueError("Hook payload must be a JSON object")
    record = build_log_record(payload, now)
    if rotate_on_start and record["event"] == "SessionStart":
        rotate_log(log_dir, today=record["ts"][:10])
    append_record(log_dir, record)
    logger.debug("Logged %s for session %s", record["event"], record["session_id"])
    return record
