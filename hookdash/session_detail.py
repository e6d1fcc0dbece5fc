"""Per-session projection of the hook event log."""
from __future__ import annotations

from typing import Any, Sequence

from hookdash.models import LogEvent, SessionDetail, SessionEventItem
from hookdash.summary import aggregate_usage


def get_session_events(events: Sequence[LogEvent], session_id: str) -> list[LogEvent]:
    """Events whose session id equals ``session_id`` or starts with it."""
    return [ev for ev in events if (ev.session_id or "").startswith(session_id)]


def _event_item(event: LogEvent) -> SessionEventItem:
    return SessionEventItem(
        event=event.event,
        ts=event.ts,
        tool=event.tool_name or None,
        detail=event.tool_input_summary or event.prompt or None,
    )


def build_session_detail(events: Sequence[LogEvent], session_id: str) -> SessionDetail:
    session_events = get_session_events(events, session_id)
    if not session_events:
        return SessionDetail(sessionId=session_id)

    first_ts = session_events[0].ts
    last_ts = session_events[0].ts
    cwd = ""
    for event in session_events:
        if event.ts < first_ts:
            first_ts = event.ts
        if event.ts > last_ts:
            last_ts = event.ts
        if event.cwd and not cwd:
            cwd = event.cwd

    tools, skills = aggregate_usage(session_events)
    ordered = sorted(session_events, key=lambda ev: ev.ts)

    return SessionDetail(
        sessionId=session_id,
        eventCount=len(session_events),
        firstTs=first_ts,
        lastTs=last_ts,
        cwd=cwd,
        tools=tools,
        skills=skills,
        events=[_event_item(ev) for ev in ordered],
    )


def truncate_detail(detail: SessionDetail, max_events: int) -> dict[str, Any]:
    """Dump a detail with its event list capped, keeping the true total."""
    limit = max(0, int(max_events))
    payload = detail.model_dump()
    payload["events"] = payload["events"][:limit]
    payload["totalEventsInSession"] = len(detail.events)
    payload["truncated"] = len(detail.events) > limit
    return payload
