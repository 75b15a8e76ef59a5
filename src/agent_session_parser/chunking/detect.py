"""Transcript format detection."""

from __future__ import annotations

import json
from typing import Any

from agent_session_parser.types import AgentType


def detect_agent_type_from_content(content: str) -> AgentType | None:
    """Classify raw transcript content by shape.

    Content that does not start with `{` is never parsed. A JSON object with a
    non-empty `messages` list is a Gemini CLI transcript. Everything else,
    including an empty `messages` list, is unrecognized and returns None;
    callers then treat the content as JSONL.
    """

    trimmed = content.lstrip()
    if not trimmed.startswith("{"):
        return None

    try:
        parsed: Any = json.loads(trimmed)
    except json.JSONDecodeError:
        return None

    if isinstance(parsed, dict):
        messages = parsed.get("messages")
        if isinstance(messages, list) and messages:
            return AgentType.GEMINI_CLI
    return None
