"""Pydantic models for hook events and the analytics derived from them."""
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# ── Event records ──────────────────────────────────────────────────

KNOWN_EVENT_TYPES = (
    "SessionStart",
    "SessionEnd",
    "UserPromptSubmit",
    "PreToolUse",
    "PostToolUse",
    "PostToolUseFailure",
    "Notification",
    "Stop",
    "SubagentStart",
    "SubagentStop",
)


def _as_text(value: Any) -> Optional[str]:
    """Scalars become strings; null and containers become None."""
    if value is None or isinstance(value, (dict, list)):
        return None
    return value if isinstance(value, str) else str(value)


class EventData(BaseModel):
    """Event-specific payload. Unknown keys are kept as extras.

    Writers are not trusted to be type-correct, so text fields accept any
    scalar instead of rejecting the whole record.
    """

    model_config = ConfigDict(extra="allow")

    tool_name: Optional[str] = None
    tool_use_id: Optional[str] = None
    tool_input_summary: Optional[str] = None
    prompt: Optional[str] = None
    stop_hook_active: Any = None

    @field_validator("tool_name", "tool_use_id", "tool_input_summary", "prompt", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Optional[str]:
        return _as_text(value)


class LogEvent(BaseModel):
    """One line of the hook event log."""

    model_config = ConfigDict(extra="allow")

    event: str = ""
    session_id: Optional[str] = None
    ts: str = ""
    cwd: Optional[str] = None
    permission_mode: Optional[str] = None
    data: Optional[EventData] = None

    @field_validator("session_id", "cwd", "permission_mode", mode="before")
    @classmethod
    def _coerce_optional_text(cls, value: Any) -> Optional[str]:
        return _as_text(value)

    @field_validator("event", "ts", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return _as_text(value) or ""

    @field_validator("data", mode="before")
    @classmethod
    def _object_data(cls, value: Any) -> Any:
        # A non-object payload carries no usable fields.
        return value if isinstance(value, (dict, EventData)) else None

    @property
    def session_key(self) -> str:
        return self.session_id or "unknown"

    @property
    def tool_name(self) -> str:
        return (self.data.tool_name if self.data else None) or ""

    @property
    def tool_use_id(self) -> str:
        return (self.data.tool_use_id if self.data else None) or ""

    @property
    def tool_input_summary(self) -> str:
        return (self.data.tool_input_summary if self.data else None) or ""

    @property
    def prompt(self) -> str:
        return (self.data.prompt if self.data else None) or ""


# ── Derived analytics ──────────────────────────────────────────────

class UsageEntry(BaseModel):
    name: str
    count: int = 0


class SessionInfo(BaseModel):
    id: str
    cwd: str = ""
    eventCount: int = 0
    firstTs: str = ""
    lastTs: str = ""
    hasInterrupt: bool = False
    orphanCount: int = 0
    hasSessionStart: bool = False
    hasSessionEnd: bool = False
    isLive: bool = False
    isStale: bool = False

    @property
    def status(self) -> str:
        if self.isLive:
            return "live"
        if self.isStale:
            return "stale"
        return "ended"


class Summary(BaseModel):
    totalEvents: int = 0
    sessionCount: int = 0
    liveSessionCount: int = 0
    staleSessionCount: int = 0
    toolCount: int = 0
    interruptCount: int = 0
    orphanCount: int = 0
    sessions: list[SessionInfo] = Field(default_factory=list)
    toolUsage: list[UsageEntry] = Field(default_factory=list)
    skillUsage: list[UsageEntry] = Field(default_factory=list)
    orphanIds: list[str] = Field(default_factory=list)


class SessionEventItem(BaseModel):
    event: str
    ts: str = ""
    tool: Optional[str] = None
    detail: Optional[str] = None


class SessionDetail(BaseModel):
    sessionId: str
    eventCount: int = 0
    firstTs: Optional[str] = None
    lastTs: Optional[str] = None
    cwd: str = ""
    tools: list[UsageEntry] = Field(default_factory=list)
    skills: list[UsageEntry] = Field(default_factory=list)
    events: list[SessionEventItem] = Field(default_factory=list)
