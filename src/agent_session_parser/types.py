"""Shared domain models used by every transcript format."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Literal

AgentName = Literal["claude-code", "gemini"]


class AgentType(str, Enum):
    """Display names of the supported agents, also used as format hints."""

    CLAUDE_CODE = "Claude Code"
    GEMINI_CLI = "Gemini CLI"


class EventType(str, Enum):
    """Normalized lifecycle events reported by agent hooks."""

    SESSION_START = "SessionStart"
    TURN_START = "TurnStart"
    TURN_END = "TurnEnd"
    COMPACTION = "Compaction"
    SESSION_END = "SessionEnd"
    SUBAGENT_START = "SubagentStart"
    SUBAGENT_END = "SubagentEnd"


@dataclass(slots=True)
class Event:
    """A lifecycle event normalized from an agent's hook payload."""

    type: EventType
    session_id: str
    session_ref: str
    timestamp: datetime
    previous_session_id: str | None = None
    prompt: str | None = None
    tool_use_id: str | None = None
    subagent_id: str | None = None
    tool_input: Any = None
    response_message: str | None = None
    metadata: dict[str, str] = field(default_factory=dict)


class EntryType(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"
    SYSTEM = "system"


@dataclass(slots=True)
class TokenUsage:
    """Aggregated token usage for a session or checkpoint.

    `api_call_count` counts distinct API calls after streaming duplicates are
    collapsed, never raw transcript rows.
    """

    input_tokens: int = 0
    cache_creation_tokens: int = 0
    cache_read_tokens: int = 0
    output_tokens: int = 0
    api_call_count: int = 0
    subagent_tokens: TokenUsage | None = None

    def add(self, other: TokenUsage) -> None:
        """Accumulate the counters of `other`; nested subagent usage is not merged."""
        self.input_tokens += other.input_tokens
        self.cache_creation_tokens += other.cache_creation_tokens
        self.cache_read_tokens += other.cache_read_tokens
        self.output_tokens += other.output_tokens
        self.api_call_count += other.api_call_count


@dataclass(slots=True)
class PromptResponsePair:
    """A user prompt with the assistant text and files of its turn."""

    prompt: str
    responses: list[str] = field(default_factory=list)
    files: list[str] = field(default_factory=list)


@dataclass(slots=True)
class TranscriptPosition:
    """Where a transcript ends, so an incremental reader can resume."""

    last_id: str
    count: int


@dataclass(slots=True)
class SessionEntry:
    """A single normalized entry of an agent session."""

    uuid: str
    type: EntryType
    content: str
    timestamp: datetime | None = None
    tool_name: str | None = None
    tool_input: Any = None
    tool_output: Any = None
    files_affected: list[str] | None = None


@dataclass(slots=True)
class AgentSession:
    """A coding session assembled from normalized entries."""

    session_id: str
    agent_name: AgentName
    session_ref: str
    modified_files: list[str] = field(default_factory=list)
    repo_path: str | None = None
    start_time: datetime | None = None
    # Raw transcript bytes as the agent stored them.
    native_data: bytes | None = None
    new_files: list[str] = field(default_factory=list)
    deleted_files: list[str] = field(default_factory=list)
    entries: list[SessionEntry] = field(default_factory=list)
