"""Named query operations exposed to tool-calling clients.

Each tool maps 1:1 onto a query handler and declares its arguments as a
pydantic model, so a client can be handed the JSON schema and its calls can be
validated before they reach the log.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional

from pydantic import BaseModel, Field

from hookdash.errors import UnknownToolError
from hookdash.services import queries
from hookdash.services.queries import SessionStatus, UsageType


class DashboardSummaryArgs(BaseModel):
    top_n: Optional[int] = Field(None, ge=0, description="Number of top tools/skills to include (default: 20)")


class ListSessionsArgs(BaseModel):
    status: Optional[SessionStatus] = Field(None, description="Filter by session status (default: all)")
    since: Optional[str] = Field(None, description="ISO timestamp - only sessions with activity after this time")
    limit: Optional[int] = Field(None, ge=0, description="Maximum number of sessions to return (default: 50)")


class SessionDetailArgs(BaseModel):
    session_id: str = Field(..., description="Session ID or prefix to match")
    max_events: Optional[int] = Field(None, ge=0, description="Maximum number of events to include in detail (default: 100)")


class RecentActivityArgs(BaseModel):
    minutes: Optional[float] = Field(None, gt=0, description="Number of minutes to look back (default: 30)")
    since: Optional[str] = Field(None, description="ISO timestamp to use as the start time instead of minutes")


class ToolSkillUsageArgs(BaseModel):
    type: Optional[UsageType] = Field(None, description="Type of usage to return (default: both)")
    top_n: Optional[int] = Field(None, ge=0, description="Number of top entries to return (default: 20)")
    minutes: Optional[float] = Field(None, gt=0, description="Only count usage in the last N minutes")
    session_id: Optional[str] = Field(None, description="Only count usage for a specific session")


class SearchEventsArgs(BaseModel):
    event_type: Optional[str] = Field(None, description="Filter by event type (e.g. PreToolUse, SessionStart, Stop)")
    tool_name: Optional[str] = Field(None, description="Filter by tool name")
    text_search: Optional[str] = Field(None, description="Search in tool_input_summary and prompt fields")
    session_id: Optional[str] = Field(None, description="Filter by session ID prefix")
    limit: Optional[int] = Field(None, ge=0, description="Maximum results to return (default: 50)")


@dataclass(frozen=True)
class QueryTool:
    name: str
    description: str
    args_model: type[BaseModel]
    handler: Callable[..., Any]

    def describe(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.args_model.model_json_schema(),
            "readOnly": True,
        }


TOOLS: dict[str, QueryTool] = {
    tool.name: tool
    for tool in (
        QueryTool(
            "get_dashboard_summary",
            "Get overall dashboard summary including total events, sessions, top tools/skills, "
            "and orphan counts. Use this for a high-level overview.",
            DashboardSummaryArgs,
            queries.get_dashboard_summary,
        ),
        QueryTool(
            "list_sessions",
            "List sessions with optional filtering by status (live/stale/ended) and time range. "
            "Returns session ID, status, event count, working directory, and timestamps.",
            ListSessionsArgs,
            queries.list_sessions,
        ),
        QueryTool(
            "get_session_detail",
            "Get detailed information about a specific session including all events, tool usage, "
            "and skill usage. Use session ID prefix matching (e.g. first 8 chars).",
            SessionDetailArgs,
            queries.get_session_detail,
        ),
        QueryTool(
            "get_recent_activity",
            "Get activity summary for the last N minutes. Shows events, active sessions, "
            "and tool usage within the time window.",
            RecentActivityArgs,
            queries.get_recent_activity,
        ),
        QueryTool(
            "get_tool_skill_usage",
            "Get tool and/or skill usage statistics with optional filtering by time range or session.",
            ToolSkillUsageArgs,
            queries.get_tool_skill_usage,
        ),
        QueryTool(
            "search_events",
            "Search events by type, tool name, or text content. Returns matching events with details.",
            SearchEventsArgs,
            queries.search_events,
        ),
    )
}


def list_tools() -> list[dict[str, Any]]:
    return [tool.describe() for tool in TOOLS.values()]


def call_tool(name: str, arguments: dict[str, Any] | None, log_dir: Path) -> Any:
    """Validate ``arguments`` for tool ``name`` and run it against ``log_dir``.

    Raises UnknownToolError for an unregistered name and pydantic's
    ValidationError for bad arguments. Omitted arguments fall back to the
    handler's own defaults.
    """
    tool = TOOLS.get(name)
    if tool is None:
        raise UnknownToolError(name)
    parsed = tool.args_model.model_validate(arguments or {})
    return tool.handler(log_dir, **parsed.model_dump(exclude_none=True))
