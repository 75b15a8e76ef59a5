"""Conversion of ACP session-update events into an `AgentSession`.

ACP streams one `session/update` notification per message chunk, tool call or
plan. Each event maps to at most one `SessionEntry`; a `tool_call_update`
instead completes the entry created by its `tool_call`.
"""

from __future__ import annotations

import json
import uuid
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from agent_session_parser.types import AgentName, AgentSession, EntryType, SessionEntry
from agent_session_parser.utils import deduplicate_strings

FILE_TOOLS = frozenset(
    {
        "Write",
        "Edit",
        "NotebookEdit",
        "write_file",
        "edit_file",
        "mcp__acp__Write",
        "mcp__acp__Edit",
    }
)


class ACPSessionEvent(BaseModel):
    """Subset of an ACP session update needed for conversion."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    session_update: str = Field(alias="sessionUpdate")
    # A single block for message events, a list of blocks for tool_call_update.
    content: Any = None
    tool_call_id: str | None = Field(default=None, alias="toolCallId")
    title: str | None = None
    raw_input: Any = Field(default=None, alias="rawInput")
    status: str | None = None
    plan: Any = None


def _new_entry_id() -> str:
    return f"acp_{uuid.uuid4().hex[:16]}"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _text_content(content: Any) -> str | None:
    if isinstance(content, dict) and content.get("type") == "text":
        text = content.get("text")
        if isinstance(text, str):
            return text
    return None


def _content_blocks_text(blocks: list[Any]) -> str:
    parts: list[str] = []
    for block in blocks:
        if not isinstance(block, dict):
            continue
        if block.get("type") == "text" and isinstance(block.get("text"), str):
            parts.append(block["text"])
        elif block.get("type") == "diff" and isinstance(block.get("diff"), str):
            parts.append(block["diff"])
    return "\n".join(parts)


def _files_from_tool_input(tool_name: str, raw_input: Any) -> list[str] | None:
    if tool_name not in FILE_TOOLS or not isinstance(raw_input, dict):
        return None
    path = raw_input.get("file_path")
    if path is None:
        path = raw_input.get("notebook_path")
    return [path] if isinstance(path, str) else None


def convert_acp_event_to_entry(
    event: ACPSessionEvent | dict[str, Any],
    tool_call_entries: dict[str, SessionEntry] | None = None,
) -> SessionEntry | None:
    """Convert one ACP event, or return None when it yields no new entry.

    `tool_call_entries` maps tool call ids to their entries so a later
    `tool_call_update` can attach its output to the right entry.
    """

    if isinstance(event, dict):
        event = ACPSessionEvent.model_validate(event)
    if tool_call_entries is None:
        tool_call_entries = {}

    update = event.session_update

    if update in ("agent_message_chunk", "agent_thought_chunk", "user_message_chunk"):
        text = _text_content(event.content)
        if not text:
            return None
        return SessionEntry(
            uuid=_new_entry_id(),
            type=EntryType.USER if update == "user_message_chunk" else EntryType.ASSISTANT,
            timestamp=_now(),
            content=text,
        )

    if update == "tool_call":
        tool_call_id = event.tool_call_id or f"tc_{uuid.uuid4().hex[:12]}"
        tool_name = event.title or "unknown"
        entry = SessionEntry(
            uuid=tool_call_id,
            type=EntryType.TOOL,
            timestamp=_now(),
            content=f"Tool call: {tool_name}",
            tool_name=tool_name,
            tool_input=event.raw_input,
            files_affected=_files_from_tool_input(tool_name, event.raw_input),
        )
        tool_call_entries[tool_call_id] = entry
        return entry

    if update == "tool_call_update":
        existing = tool_call_entries.get(event.tool_call_id or "")
        if existing is None:
            return None
        if isinstance(event.content, list):
            existing.tool_output = _content_blocks_text(event.content)
        if event.status == "failed" and existing.tool_output is None:
            existing.tool_output = "Tool call failed"
        return None

    if update == "plan":
        return SessionEntry(
            uuid=_new_entry_id(),
            type=EntryType.ASSISTANT,
            timestamp=_now(),
            content=f"[Plan] {json.dumps(event.plan, ensure_ascii=False, separators=(',', ':'))}",
        )

    return None


def convert_acp_events_to_session(
    events: Iterable[ACPSessionEvent | dict[str, Any]],
    session_id: str,
    agent_name: AgentName = "claude-code",
    repo_path: str | None = None,
) -> AgentSession:
    """Convert an ordered ACP event stream into a session."""

    entries: list[SessionEntry] = []
    tool_call_entries: dict[str, SessionEntry] = {}
    files: list[str] = []

    for event in events:
        entry = convert_acp_event_to_entry(event, tool_call_entries)
        if entry is None:
            continue
        entries.append(entry)
        if entry.files_affected:
            files.extend(entry.files_affected)

    return AgentSession(
        session_id=session_id,
        agent_name=agent_name,
        session_ref=session_id,
        repo_path=repo_path,
        start_time=entries[0].timestamp if entries else _now(),
        modified_files=deduplicate_strings(files),
        entries=entries,
    )
