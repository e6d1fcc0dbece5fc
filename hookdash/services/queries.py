"""Read-only query operations over the current hook event log.

Every operation re-reads the log and re-aggregates; nothing is cached between
calls. Results are plain JSON-serializable dicts so the same handlers back the
HTTP routes and the tool-call registry.
"""
from __future__ import annotations

import functools
import time
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Literal, Optional, Sequence, TypeVar

from hookdash.date_utils import format_ts, minutes_ago, utc_now
from hookdash.models import LogEvent, SessionInfo, Summary
from hookdash.observability import record_query, start_span
from hookdash.parsers.events import load_current_events
from hookdash.session_detail import build_session_detail, get_session_events, truncate_detail
from hookdash.summary import build_summary


SessionStatus = Literal["live", "stale", "ended", "all"]
UsageType = Literal["tools", "skills", "both"]

DEFAULT_TOP_N = 20
DEFAULT_SESSION_LIMIT = 50
DEFAULT_MAX_EVENTS = 100
DEFAULT_RECENT_MINUTES = 30
DEFAULT_SEARCH_LIMIT = 50
RECENT_TOP_N = 10

F = TypeVar("F", bound=Callable[..., Any])


def _instrumented(operation: str) -> Callable[[F], F]:
    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            started = time.perf_counter()
            with start_span(f"hookdash.query.{operation}"):
                try:
                    return func(*args, **kwargs)
                finally:
                    record_query(operation, (time.perf_counter() - started) * 1000.0)
        return wrapper  # type: ignore[return-value]
    return decorator


def filter_events_by_time(
    events: Sequence[LogEvent],
    since: str | None = None,
    until: str | None = None,
) -> list[LogEvent]:
    """Keep events with ``since <= ts <= until``; either bound may be open."""
    return [
        ev for ev in events
        if not (since and ev.ts < since) and not (until and ev.ts > until)
    ]


def _session_matches_status(session: SessionInfo, status: str) -> bool:
    if status == "live":
        return session.isLive
    if status == "stale":
        return session.isStale
    if status == "ended":
        return not session.isLive and not session.isStale
    return True


def _top(entries: list, top_n: int) -> list[dict[str, Any]]:
    return [entry.model_dump() for entry in entries[: max(0, int(top_n))]]


def _totals(summary: Summary) -> dict[str, Any]:
    return {
        "totalEvents": summary.totalEvents,
        "sessionCount": summary.sessionCount,
        "liveSessionCount": summary.liveSessionCount,
        "staleSessionCount": summary.staleSessionCount,
        "toolCount": summary.toolCount,
        "interruptCount": summary.interruptCount,
        "orphanCount": summary.orphanCount,
    }


@_instrumented("dashboard_summary")
def get_dashboard_summary(
    log_dir: Path,
    top_n: int = DEFAULT_TOP_N,
    *,
    now: datetime | None = None,
) -> dict[str, Any]:
    summary = build_summary(load_current_events(log_dir), now=now)
    return {
        **_totals(summary),
        "topTools": _top(summary.toolUsage, top_n),
        "topSkills": _top(summary.skillUsage, top_n),
        "orphanIds": list(summary.orphanIds),
    }


@_instrumented("list_sessions")
def list_sessions(
    log_dir: Path,
    status: SessionStatus = "all",
    since: Optional[str] = None,
    limit: int = DEFAULT_SESSION_LIMIT,
    *,
    now: datetime | None = None,
) -> list[dict[str, Any]]:
    sessions = build_summary(load_current_events(log_dir), now=now).sessions
    if status and status != "all":
        sessions = [s for s in sessions if _session_matches_status(s, status)]
    if since:
        sessions = [s for s in sessions if s.lastTs >= since]
    return [
        {
            "id": s.id,
            "status": s.status,
            "eventCount": s.eventCount,
            "cwd": s.cwd,
            "firstTs": s.firstTs,
            "lastTs": s.lastTs,
            "hasInterrupt": s.hasInterrupt,
            "orphanCount": s.orphanCount,
        }
        for s in sessions[: max(0, int(limit))]
    ]


@_instrumented("session_detail")
def get_session_detail(
    log_dir: Path,
    session_id: str,
    max_events: int = DEFAULT_MAX_EVENTS,
) -> dict[str, Any]:
    detail = build_session_detail(load_current_events(log_dir), session_id)
    return truncate_detail(detail, max_events)


@_instrumented("recent_activity")
def get_recent_activity(
    log_dir: Path,
    minutes: float = DEFAULT_RECENT_MINUTES,
    since: Optional[str] = None,
    *,
    now: datetime | None = None,
) -> dict[str, Any]:
    reference = now or utc_now()
    since_ts = since or minutes_ago(minutes, reference)
    filtered = filter_events_by_time(load_current_events(log_dir), since_ts)
    summary = build_summary(filtered, now=reference)
    return {
        "timeRange": {"since": since_ts, "until": format_ts(reference)},
        "totalEvents": summary.totalEvents,
        "sessionCount": summary.sessionCount,
        "liveSessionCount": summary.liveSessionCount,
        "topTools": _top(summary.toolUsage, RECENT_TOP_N),
        "topSkills": _top(summary.skillUsage, RECENT_TOP_N),
        "sessions": [
            {"id": s.id, "status": s.status, "eventCount": s.eventCount, "cwd": s.cwd}
            for s in summary.sessions
        ],
    }


@_instrumented("tool_skill_usage")
def get_tool_skill_usage(
    log_dir: Path,
    type: UsageType = "both",
    top_n: int = DEFAULT_TOP_N,
    minutes: Optional[float] = None,
    session_id: Optional[str] = None,
    *,
    now: datetime | None = None,
) -> dict[str, Any]:
    events = load_current_events(log_dir)
    if session_id:
        events = get_session_events(events, session_id)
    if minutes:
        events = filter_events_by_time(events, minutes_ago(minutes, now))

    summary = build_summary(events, now=now)
    usage_type = type or "both"
    result: dict[str, Any] = {"eventCount": summary.totalEvents}
    if usage_type in ("tools", "both"):
        result["tools"] = _top(summary.toolUsage, top_n)
    if usage_type in ("skills", "both"):
        result["skills"] = _top(summary.skillUsage, top_n)
    return result


@_instrumented("search_events")
def search_events(
    log_dir: Path,
    event_type: Optional[str] = None,
    tool_name: Optional[str] = None,
    text_search: Optional[str] = None,
    session_id: Optional[str] = None,
    limit: int = DEFAULT_SEARCH_LIMIT,
) -> dict[str, Any]:
    events = load_current_events(log_dir)
    if session_id:
        events = get_session_events(events, session_id)
    if event_type:
        events = [ev for ev in events if ev.event == event_type]
    if tool_name:
        events = [ev for ev in events if ev.tool_name == tool_name]
    if text_search:
        needle = text_search.lower()
        events = [
            ev for ev in events
            if needle in ev.tool_input_summary.lower() or needle in ev.prompt.lower()
        ]

    cap = max(0, int(limit))
    results = [
        {
            "event": ev.event,
            "session_id": ev.session_id,
            "ts": ev.ts,
            "tool": ev.tool_name or None,
            "detail": ev.tool_input_summary or ev.prompt or None,
        }
        for ev in events[:cap]
    ]
    return {"totalMatches": len(events), "results": results, "truncated": len(events) > cap}
