"""Gemini CLI transcript models.

Gemini CLI stores a whole session as one JSON document with a `messages`
array. User content may be a list of `{"text": ...}` parts while agent content
is usually a plain string; parsing normalizes both to a single string.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict

USER = "user"
GEMINI = "gemini"

FILE_MODIFICATION_TOOLS = frozenset({"write_file", "edit_file", "save_file", "replace"})
# Checked in order; the first non-empty string wins.
FILE_PATH_FIELDS = ("file_path", "path", "filename")


def _count(payload: dict[str, Any], key: str) -> int:
    value = payload.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return int(value)


@dataclass(slots=True, frozen=True)
class GeminiToolCall:
    id: str
    name: str
    args: dict[str, Any]
    status: str | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> GeminiToolCall:
        args = payload.get("args")
        status = payload.get("status")
        return cls(
            id=payload.get("id") if isinstance(payload.get("id"), str) else "",
            name=payload.get("name") if isinstance(payload.get("name"), str) else "",
            args=args if isinstance(args, dict) else {},
            status=status if isinstance(status, str) else None,
        )


@dataclass(slots=True, frozen=True)
class GeminiMessageTokens:
    """Token counts reported for one agent turn."""

    input: int = 0
    output: int = 0
    cached: int = 0
    thoughts: int = 0
    tool: int = 0
    total: int = 0

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> GeminiMessageTokens:
        return cls(
            input=_count(payload, "input"),
            output=_count(payload, "output"),
            cached=_count(payload, "cached"),
            thoughts=_count(payload, "thoughts"),
            tool=_count(payload, "tool"),
            total=_count(payload, "total"),
        )


@dataclass(slots=True, frozen=True)
class GeminiMessage:
    type: str
    content: str
    id: str | None = None
    tool_calls: list[GeminiToolCall] = field(default_factory=list)
    tokens: GeminiMessageTokens | None = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"type": self.type, "content": self.content}
        if self.id is not None:
            payload["id"] = self.id
        if self.tool_calls:
            payload["toolCalls"] = [
                {
                    "id": call.id,
                    "name": call.name,
                    "args": call.args,
                    **({"status": call.status} if call.status is not None else {}),
                }
                for call in self.tool_calls
            ]
        if self.tokens is not None:
            payload["tokens"] = {
                "input": self.tokens.input,
                "output": self.tokens.output,
                "cached": self.tokens.cached,
                "thoughts": self.tokens.thoughts,
                "tool": self.tokens.tool,
                "total": self.tokens.total,
            }
        return payload


@dataclass(slots=True, frozen=True)
class GeminiTranscript:
    """Messages in document order."""

    messages: list[GeminiMessage] = field(default_factory=list)


class _HookInput(BaseModel):
    model_config = ConfigDict(extra="allow")

    session_id: str
    transcript_path: str
    cwd: str
    hook_event_name: str
    timestamp: str


class SessionInfoHookInput(_HookInput):
    """Payload of the SessionStart and SessionEnd hooks."""

    source: str | None = None
    reason: str | None = None


class AgentHookInput(_HookInput):
    """Payload of the BeforeAgent and AfterAgent hooks."""

    prompt: str | None = None


class ToolHookInput(_HookInput):
    """Payload of the BeforeTool and AfterTool hooks."""

    tool_name: str
    tool_input: Any = None
    tool_response: Any = None
