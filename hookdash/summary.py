"""Single-pass aggregation of hook events into session and usage analytics."""
from __future__ import annotations

from collections import Counter
from datetime import datetime
from typing import Iterable, Sequence

from hookdash import config
from hookdash.date_utils import seconds_since
from hookdash.models import LogEvent, SessionInfo, Summary, UsageEntry

# Slash commands handled by the agent runtime itself; anything else that
# starts with "/" is a user-invoked skill.
BUILTIN_COMMANDS = frozenset({
    "/clear", "/compact", "/config", "/context", "/copy", "/cost",
    "/debug", "/desktop", "/doctor", "/exit", "/export", "/help",
    "/init", "/mcp", "/memory", "/model", "/permissions", "/plan",
    "/rename", "/resume", "/rewind", "/stats", "/status", "/statusline",
    "/tasks", "/teleport", "/theme", "/todos", "/usage",
    "/add-dir", "/agents", "/bug", "/hooks", "/ide",
    "/install-github-app", "/login", "/logout", "/output-style",
    "/plugin", "/pr-comments", "/privacy-settings", "/release-notes",
    "/remote-env", "/review", "/sandbox", "/security-review",
    "/terminal-setup", "/vim", "/fast", "/slow", "/listen",
})

_COMPLETION_EVENTS = {"PostToolUse", "PostToolUseFailure"}


def _command_token(prompt: str) -> str:
    parts = prompt.split(maxsplit=1)
    return parts[0] if parts else ""


def is_builtin_command(prompt: str) -> bool:
    return _command_token(prompt).lower() in BUILTIN_COMMANDS


def slash_skill_name(prompt: str | None) -> str | None:
    """Skill name for a slash-prefixed prompt, or None for plain text and built-ins."""
    text = (prompt or "").strip()
    if not text.startswith("/") or is_builtin_command(text):
        return None
    return _command_token(text)[1:]


def count_usage(event: LogEvent, tools: Counter[str], skills: Counter[str]) -> None:
    """Apply the tool and skill counting rules for one event.

    Every event naming a tool counts toward it, so a PreToolUse and its
    completion both add to the same tool.
    """
    tool_name = event.tool_name
    if tool_name:
        tools[tool_name] += 1

    if event.event == "PreToolUse" and tool_name == "Skill":
        skills[event.tool_input_summary or "unknown"] += 1

    if event.event == "UserPromptSubmit":
        skill_name = slash_skill_name(event.prompt)
        if skill_name is not None:
            skills[skill_name] += 1


def usage_entries(counter: Counter[str]) -> list[UsageEntry]:
    # sorted() is stable, so equal counts keep first-seen order.
    ordered = sorted(counter.items(), key=lambda item: -item[1])
    return [UsageEntry(name=name, count=count) for name, count in ordered]


def aggregate_usage(events: Iterable[LogEvent]) -> tuple[list[UsageEntry], list[UsageEntry]]:
    """Return (tool_usage, skill_usage) for a sequence of events."""
    tools: Counter[str] = Counter()
    skills: Counter[str] = Counter()
    for event in events:
        count_usage(event, tools, skills)
    return usage_entries(tools), usage_entries(skills)


def _classify_liveness(session: SessionInfo, now: datetime | None, threshold_seconds: float) -> None:
    if not (session.hasSessionStart and not session.hasSessionEnd):
        session.isLive = False
        session.isStale = False
        return
    elapsed = seconds_since(session.lastTs, now)
    live = elapsed is not None and elapsed <= threshold_seconds
    session.isLive = live
    session.isStale = not live


def build_summary(
    events: Sequence[LogEvent],
    *,
    now: datetime | None = None,
    live_threshold_seconds: float | None = None,
) -> Summary:
    """Aggregate events into a dashboard summary.

    ``now`` defaults to the current UTC time and only affects the live/stale
    classification of sessions that started but never ended.
    """
    threshold = config.LIVE_THRESHOLD_SECONDS if live_threshold_seconds is None else live_threshold_seconds
    sessions: dict[str, SessionInfo] = {}
    tools: Counter[str] = Counter()
    skills: Counter[str] = Counter()
    opened_ids: dict[str, None] = {}
    closed_ids: set[str] = set()
    interrupts: list[LogEvent] = []

    for event in events:
        sid = event.session_key
        session = sessions.get(sid)
        if session is None:
            session = SessionInfo(id=sid, firstTs=event.ts, lastTs=event.ts)
            sessions[sid] = session
        session.eventCount += 1
        if event.ts < session.firstTs:
            session.firstTs = event.ts
        if event.ts > session.lastTs:
            session.lastTs = event.ts
        if event.cwd and not session.cwd:
            session.cwd = event.cwd

        count_usage(event, tools, skills)

        tool_use_id = event.tool_use_id
        if tool_use_id:
            if event.event == "PreToolUse":
                opened_ids[tool_use_id] = None
            elif event.event in _COMPLETION_EVENTS:
                closed_ids.add(tool_use_id)

        if event.event == "SessionStart":
            session.hasSessionStart = True
        elif event.event == "SessionEnd":
            session.hasSessionEnd = True
        elif event.event == "Stop" and event.data is not None and event.data.stop_hook_active:
            session.hasInterrupt = True
            interrupts.append(event)

    for session in sessions.values():
        _classify_liveness(session, now, threshold)

    orphan_ids = [tool_use_id for tool_use_id in opened_ids if tool_use_id not in closed_ids]
    # Each orphan id counts once, toward the session of its first PreToolUse.
    unattributed = set(orphan_ids)
    for event in events:
        if not unattributed:
            break
        if event.event == "PreToolUse" and event.tool_use_id in unattributed:
            sessions[event.session_key].orphanCount += 1
            unattributed.discard(event.tool_use_id)

    tool_usage = usage_entries(tools)
    skill_usage = usage_entries(skills)
    ordered_sessions = sorted(sessions.values(), key=lambda s: s.lastTs, reverse=True)

    return Summary(
        totalEvents=len(events),
        sessionCount=len(sessions),
        liveSessionCount=sum(1 for s in ordered_sessions if s.isLive),
        staleSessionCount=sum(1 for s in ordered_sessions if s.isStale),
        toolCount=len(tool_usage),
        interruptCount=len(interrupts),
        orphanCount=len(orphan_ids),
        sessions=ordered_sessions,
        toolUsage=tool_usage,
        skillUsage=skill_usage,
        orphanIds=orphan_ids,
    )
