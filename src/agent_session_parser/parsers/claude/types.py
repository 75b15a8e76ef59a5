"""Claude Code transcript models.

Claude Code writes one JSON object per line. Each line carries a `type`
discriminator, a `uuid` and an opaque `message` payload whose `content` is
either a plain string or a list of typed content blocks.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

USER = "user"
ASSISTANT = "assistant"

TEXT = "text"
TOOL_USE = "tool_use"
TOOL_RESULT = "tool_result"

FILE_MODIFICATION_TOOLS = frozenset(
    {"Write", "Edit", "NotebookEdit", "mcp__acp__Write", "mcp__acp__Edit"}
)
# Checked in order; the first non-empty string wins.
FILE_PATH_FIELDS = ("file_path", "notebook_path")


@dataclass(slots=True, frozen=True)
class TextSegment:
    text: str


@dataclass(slots=True, frozen=True)
class ToolUseSegment:
    id: str
    name: str
    input: dict[str, Any]


@dataclass(slots=True, frozen=True)
class ToolResultSegment:
    tool_use_id: str
    content: Any


@dataclass(slots=True, frozen=True)
class UnknownSegment:
    """A content block of a type this parser does not model."""

    type: str
    raw: Any


ContentSegment = TextSegment | ToolUseSegment | ToolResultSegment | UnknownSegment


def _as_str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def parse_segment(block: Any) -> ContentSegment:
    """Convert one raw content block into its typed segment."""

    if not isinstance(block, dict):
        return UnknownSegment(type="", raw=block)

    block_type = _as_str(block.get("type"))
    if block_type == TEXT:
        return TextSegment(text=_as_str(block.get("text")))
    if block_type == TOOL_USE:
        tool_input = block.get("input")
        return ToolUseSegment(
            id=_as_str(block.get("id")),
            name=_as_str(block.get("name")),
            input=tool_input if isinstance(tool_input, dict) else {},
        )
    if block_type == TOOL_RESULT:
        return ToolResultSegment(
            tool_use_id=_as_str(block.get("tool_use_id")),
            content=block.get("content"),
        )
    return UnknownSegment(type=block_type, raw=block)


def content_segments(message: Any) -> list[ContentSegment]:
    """Typed content blocks of a message; string content has no blocks."""

    if not isinstance(message, dict):
        return []
    content = message.get("content")
    if not isinstance(content, list):
        return []
    return [parse_segment(block) for block in content]


@dataclass(slots=True, frozen=True)
class TranscriptLine:
    """One parsed line of a Claude Code transcript.

    `raw` keeps the full decoded object so lines can be serialized back
    without dropping fields this model does not name.
    """

    type: str
    uuid: str
    message: Any
    raw: dict[str, Any]

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> TranscriptLine:
        return cls(
            type=_as_str(payload.get("type")),
            uuid=_as_str(payload.get("uuid")),
            message=payload.get("message"),
            raw=payload,
        )

    def segments(self) -> list[ContentSegment]:
        return content_segments(self.message)


@dataclass(slots=True, frozen=True)
class MessageUsage:
    """Token usage reported by the API for one assistant message."""

    input_tokens: int = 0
    cache_creation_input_tokens: int = 0
    cache_read_input_tokens: int = 0
    output_tokens: int = 0

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> MessageUsage:
        def _count(key: str) -> int:
            value = payload.get(key)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                return 0
            return int(value)

        return cls(
            input_tokens=_count("input_tokens"),
            cache_creation_input_tokens=_count("cache_creation_input_tokens"),
            cache_read_input_tokens=_count("cache_read_input_tokens"),
            output_tokens=_count("output_tokens"),
        )


def message_usage(line: TranscriptLine) -> tuple[str, MessageUsage] | None:
    """Return `(message_id, usage)` for an assistant line carrying usage."""

    message = line.message
    if not isinstance(message, dict):
        return None
    message_id = message.get("id")
    usage = message.get("usage")
    if not isinstance(message_id, str) or not message_id or not isinstance(usage, dict):
        return None
    return message_id, MessageUsage.from_payload(usage)


class _HookInput(BaseModel):
    model_config = ConfigDict(extra="allow")

    session_id: str
    transcript_path: str


class SessionInfoHookInput(_HookInput):
    """Payload of the SessionStart, SessionEnd and Stop hooks."""


class UserPromptSubmitHookInput(_HookInput):
    prompt: str


class TaskHookInput(_HookInput):
    """Payload of the PreToolUse hook for the Task tool."""

    tool_use_id: str
    tool_input: Any = None


class ToolResponse(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    agent_id: str | None = Field(default=None, alias="agentId")


class PostToolHookInput(_HookInput):
    tool_use_id: str
    tool_input: Any = None
    tool_response: ToolResponse = Field(default_factory=ToolResponse)
