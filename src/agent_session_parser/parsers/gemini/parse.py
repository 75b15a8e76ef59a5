"""Gemini CLI JSON transcript parser.

Unlike JSONL, the whole transcript is a single JSON value, so a document with
a syntax error has no smaller unit to fall back to and the error propagates.
"""

from __future__ import annotations

import json
from typing import Any

from agent_session_parser.errors import TranscriptParseError
from agent_session_parser.parsers.gemini.types import (
    GeminiMessage,
    GeminiMessageTokens,
    GeminiToolCall,
    GeminiTranscript,
)
from agent_session_parser.types import TranscriptPosition


def load_document(data: str) -> dict[str, Any]:
    """Decode a transcript document; anything but an object reads as empty."""

    try:
        payload: Any = json.loads(data)
    except json.JSONDecodeError as exc:
        raise TranscriptParseError(
            f"Invalid transcript JSON at line {exc.lineno} column {exc.colno}: {exc.msg}",
            line=exc.lineno,
            column=exc.colno,
        ) from exc
    return payload if isinstance(payload, dict) else {}


def raw_messages(document: dict[str, Any]) -> list[Any]:
    messages = document.get("messages")
    return messages if isinstance(messages, list) else []


def dump_document(document: dict[str, Any]) -> str:
    return json.dumps(document, ensure_ascii=False, separators=(",", ":"))


def normalize_content(content: Any) -> str:
    """Flatten message content into one string.

    A string is used verbatim. A list contributes the non-empty `text` of each
    part, joined by a newline. Anything else yields an empty string.
    """

    if isinstance(content, str):
        return content
    if isinstance(content, list):
        texts = [
            part["text"]
            for part in content
            if isinstance(part, dict) and isinstance(part.get("text"), str) and part["text"]
        ]
        return "\n".join(texts)
    return ""


def parse_message(payload: Any) -> GeminiMessage:
    if not isinstance(payload, dict):
        return GeminiMessage(type="", content="")

    message_id = payload.get("id")
    message_type = payload.get("type")
    tool_calls = payload.get("toolCalls")
    tokens = payload.get("tokens")
    return GeminiMessage(
        id=message_id if isinstance(message_id, str) else None,
        type=message_type if isinstance(message_type, str) else "",
        content=normalize_content(payload.get("content")),
        tool_calls=[
            GeminiToolCall.from_payload(call)
            for call in tool_calls
            if isinstance(call, dict)
        ]
        if isinstance(tool_calls, list)
        else [],
        tokens=GeminiMessageTokens.from_payload(tokens) if isinstance(tokens, dict) else None,
    )


def parse_transcript(data: str) -> GeminiTranscript:
    """Parse a transcript document into normalized messages.

    Raises:
        TranscriptParseError: if `data` is not valid JSON.
    """

    document = load_document(data)
    return GeminiTranscript(messages=[parse_message(item) for item in raw_messages(document)])


def parse_transcript_from_bytes(data: bytes) -> GeminiTranscript:
    return parse_transcript(data.decode("utf-8", errors="replace"))


def serialize_transcript(transcript: GeminiTranscript) -> str:
    return dump_document({"messages": [message.to_payload() for message in transcript.messages]})


def slice_from_message(data: str, start_message_index: int) -> str:
    """Return a document holding only the messages from `start_message_index` on.

    Messages are copied as they appear in the source document, and other
    top-level fields are kept. An index past the end gives an empty message
    list.
    """

    if not data or start_message_index <= 0:
        return data

    document = load_document(data)
    return dump_document({**document, "messages": raw_messages(document)[start_message_index:]})


def get_transcript_position(data: str) -> TranscriptPosition:
    """Return the last message id and the message count."""

    if not data.strip():
        return TranscriptPosition(last_id="", count=0)
    transcript = parse_transcript(data)
    last_id = transcript.messages[-1].id if transcript.messages else None
    return TranscriptPosition(last_id=last_id or "", count=len(transcript.messages))
