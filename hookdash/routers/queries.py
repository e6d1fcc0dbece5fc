"""Query and tool-call routers over the current hook event log."""
from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Body, HTTPException, Query
from pydantic import ValidationError

from hookdash import config
from hookdash.errors import UnknownToolError
from hookdash.services import queries
from hookdash.services.assistant_context import ContextMode, get_assistant_context
from hookdash.services.queries import SessionStatus, UsageType
from hookdash.services.tools import call_tool, list_tools

query_router = APIRouter(prefix="/api/query", tags=["query"])
tools_router = APIRouter(prefix="/api/tools", tags=["tools"])


@query_router.get("/summary")
def dashboard_summary(
    top_n: int = Query(queries.DEFAULT_TOP_N, ge=0, description="Number of top tools/skills to include"),
) -> dict[str, Any]:
    return queries.get_dashboard_summary(config.LOG_DIR, top_n)


@query_router.get("/sessions")
def sessions(
    status: SessionStatus = Query("all", description="Filter by session status"),
    since: Optional[str] = Query(None, description="ISO timestamp - only sessions active at or after this time"),
    limit: int = Query(queries.DEFAULT_SESSION_LIMIT, ge=0, description="Maximum number of sessions"),
) -> list[dict[str, Any]]:
    return queries.list_sessions(config.LOG_DIR, status, since, limit)


@query_router.get("/sessions/{session_id}")
def session_detail(
    session_id: str,
    max_events: int = Query(queries.DEFAULT_MAX_EVENTS, ge=0, description="Maximum events in the detail"),
) -> dict[str, Any]:
    return queries.get_session_detail(config.LOG_DIR, session_id, max_events)


@query_router.get("/recent")
def recent_activity(
    minutes: float = Query(queries.DEFAULT_RECENT_MINUTES, gt=0, description="Minutes to look back"),
    since: Optional[str] = Query(None, description="ISO timestamp to use instead of minutes"),
) -> dict[str, Any]:
    return queries.get_recent_activity(config.LOG_DIR, minutes, since)


@query_router.get("/usage")
def tool_skill_usage(
    type: UsageType = Query("both", description="tools, skills, or both"),
    top_n: int = Query(queries.DEFAULT_TOP_N, ge=0, description="Number of top entries"),
    minutes: Optional[float] = Query(None, gt=0, description="Only count the last N minutes"),
    session_id: Optional[str] = Query(None, description="Only count one session (prefix match)"),
) -> dict[str, Any]:
    return queries.get_tool_skill_usage(config.LOG_DIR, type, top_n, minutes, session_id)


@query_router.get("/search")
def search(
    event_type: Optional[str] = Query(None, description="Exact event type"),
    tool_name: Optional[str] = Query(None, description="Exact tool name"),
    text_search: Optional[str] = Query(None, description="Case-insensitive text in summary or prompt"),
    session_id: Optional[str] = Query(None, description="Session ID prefix"),
    limit: int = Query(queries.DEFAULT_SEARCH_LIMIT, ge=0, description="Maximum results"),
) -> dict[str, Any]:
    return queries.search_events(config.LOG_DIR, event_type, tool_name, text_search, session_id, limit)


@query_router.get("/context")
def assistant_context(
    mode: ContextMode = Query("minimal", description="full summary digest, or minimal stats plus tool list"),
) -> dict[str, Any]:
    return get_assistant_context(config.LOG_DIR, mode)


@tools_router.get("")
def get_tools() -> list[dict[str, Any]]:
    return list_tools()


@tools_router.post("/{name}")
def invoke_tool(name: str, arguments: Optional[dict[str, Any]] = Body(None)) -> Any:
    try:
        return call_tool(name, arguments, config.LOG_DIR)
    except UnknownToolError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.errors(include_url=False, include_context=False))
