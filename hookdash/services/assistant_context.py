"""Plain-text summary digests handed to a conversational assistant as context."""
from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any, Literal

from hookdash.models import Summary, UsageEntry
from hookdash.parsers.events import load_current_events
from hookdash.services.tools import TOOLS
from hookdash.summary import build_summary

ContextMode = Literal["full", "minimal"]

_CONTEXT_TOP_N = 10
_SESSION_ID_DISPLAY_CHARS = 8


def _usage_lines(entries: list[UsageEntry]) -> str:
    lines = [f"  {entry.name}: {entry.count}" for entry in entries[:_CONTEXT_TOP_N]]
    return "\n".join(lines) or "  (none)"


def _session_lines(summary: Summary) -> str:
    lines = []
    for session in summary.sessions[:_CONTEXT_TOP_N]:
        label = "ended" if session.status == "ended" else session.status.upper()
        lines.append(
            f"  {session.id[:_SESSION_ID_DISPLAY_CHARS]} ({label}) - "
            f"{session.eventCount} events - {session.cwd}"
        )
    return "\n".join(lines) or "  (none)"


def _quick_stats(summary: Summary) -> str:
    return (
        f"{summary.totalEvents} events, {summary.sessionCount} sessions "
        f"({summary.liveSessionCount} live, {summary.staleSessionCount} stale), "
        f"{summary.toolCount} tools, {summary.interruptCount} interrupts"
    )


def build_chat_context(summary: Summary) -> str:
    """Full digest of a summary: totals, top usage, recent sessions, orphans."""
    orphan_ids = ", ".join(summary.orphanIds) if summary.orphanIds else "(none)"
    return (
        "You are an assistant that analyzes agent hook event data from a dashboard.\n"
        "Here is the current dashboard summary:\n"
        "\n"
        "Stats:\n"
        f"- Total events: {summary.totalEvents}\n"
        f"- Sessions: {summary.sessionCount} ({summary.liveSessionCount} live, "
        f"{summary.staleSessionCount} stale)\n"
        f"- Unique tools: {summary.toolCount}\n"
        f"- Interrupts: {summary.interruptCount}\n"
        f"- Orphaned tool calls: {summary.orphanCount}\n"
        "\n"
        "Top Tools:\n"
        f"{_usage_lines(summary.toolUsage)}\n"
        "\n"
        "Top Skills:\n"
        f"{_usage_lines(summary.skillUsage)}\n"
        "\n"
        "Sessions:\n"
        f"{_session_lines(summary)}\n"
        "\n"
        f"Orphan IDs: {orphan_ids}\n"
        "\n"
        "Answer the user's questions based on this data. Be concise and helpful."
    )


def build_minimal_context(summary: Summary) -> str:
    """Quick stats plus the query tools available for detailed answers."""
    tool_lines = "\n".join(
        f"- {tool.name}: {tool.description.split('.')[0].lower()}" for tool in TOOLS.values()
    )
    return (
        "You are an assistant that analyzes agent hook event data.\n"
        "You have query tools to inspect the data. Use them for detailed answers.\n"
        "\n"
        f"Quick stats: {_quick_stats(summary)}\n"
        "\n"
        "Use tools before answering:\n"
        f"{tool_lines}"
    )


def get_assistant_context(
    log_dir: Path,
    mode: ContextMode = "minimal",
    *,
    now: datetime | None = None,
) -> dict[str, Any]:
    """Digest of the current log for seeding an assistant conversation.

    ``full`` embeds the whole summary; ``minimal`` gives quick stats and
    points the assistant at the query tools instead.
    """
    summary = build_summary(load_current_events(log_dir), now=now)
    text = build_chat_context(summary) if mode == "full" else build_minimal_context(summary)
    return {"mode": mode, "context": text}
