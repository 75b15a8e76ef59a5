"""Claude Code JSONL transcript parser.

Every line is decoded independently. A line that is not a JSON object is
dropped without an error because transcripts are often read while the agent
is still appending to them, so the last line may be cut mid-write.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from agent_session_parser.parsers.claude.types import TextSegment, TranscriptLine, content_segments
from agent_session_parser.types import TranscriptPosition
from agent_session_parser.utils import strip_ide_context_tags

logger = logging.getLogger(__name__)


def parse_line(raw_line: str) -> TranscriptLine | None:
    """Decode a single transcript line, or return None when it is unusable."""

    trimmed = raw_line.strip()
    if not trimmed:
        return None
    try:
        payload: Any = json.loads(trimmed)
    except json.JSONDecodeError:
        return None
    if not isinstance(payload, dict):
        return None
    return TranscriptLine.from_payload(payload)


def parse_from_string(content: str) -> list[TranscriptLine]:
    lines: list[TranscriptLine] = []
    for index, raw_line in enumerate(content.split("\n")):
        line = parse_line(raw_line)
        if line is not None:
            lines.append(line)
        elif raw_line.strip():
            logger.debug("Skipping malformed transcript line %d", index + 1)
    return lines


def parse_from_bytes(data: bytes) -> list[TranscriptLine]:
    return parse_from_string(data.decode("utf-8", errors="replace"))


def _split_lines(content: str) -> list[str]:
    """Split into lines, without a phantom empty line after a final newline."""

    parts = content.split("\n")
    if content.endswith("\n"):
        parts.pop()
    return parts


def parse_from_string_at_line(content: str, start_line: int) -> tuple[list[TranscriptLine], int]:
    """Parse lines from `start_line` (0-indexed) onward.

    Returns the parsed lines and the number of lines scanned. Every line is
    counted, including blank and malformed ones, so the count can be passed
    back as `start_line` once more content has been appended.
    """

    if not content.strip():
        return [], 0

    raw_lines = _split_lines(content)
    lines: list[TranscriptLine] = []
    for index in range(max(start_line, 0), len(raw_lines)):
        line = parse_line(raw_lines[index])
        if line is not None:
            lines.append(line)
        elif raw_lines[index].strip():
            logger.debug("Skipping malformed transcript line %d", index + 1)
    return lines, len(raw_lines)


def slice_from_line(content: str, start_line: int) -> str:
    """Return the raw content starting at line `start_line` (0-indexed)."""

    if not content or start_line <= 0:
        return content

    raw_lines = content.split("\n")
    if start_line >= len(raw_lines):
        return ""
    return "\n".join(raw_lines[start_line:])


def extract_user_content(message: Any) -> str:
    """Return the prompt text of a user message with injected tags removed.

    String content is used as-is. For block content, text blocks are joined by
    a blank line and every other block (tool results in particular) is
    ignored.
    """

    if not isinstance(message, dict):
        return ""

    content = message.get("content")
    if isinstance(content, str):
        return strip_ide_context_tags(content)

    texts = [
        segment.text
        for segment in content_segments(message)
        if isinstance(segment, TextSegment) and segment.text
    ]
    if texts:
        return strip_ide_context_tags("\n\n".join(texts))
    return ""


def serialize_transcript(lines: list[TranscriptLine]) -> str:
    return "".join(
        json.dumps(line.raw, ensure_ascii=False, separators=(",", ":")) + "\n"
        for line in lines
    )


def get_transcript_position(content: str) -> TranscriptPosition:
    """Return the last uuid and the line count used to resume parsing."""

    if not content.strip():
        return TranscriptPosition(last_id="", count=0)

    raw_lines = _split_lines(content)
    last_uuid = ""
    for raw_line in raw_lines:
        line = parse_line(raw_line)
        if line is not None and line.uuid:
            last_uuid = line.uuid
    return TranscriptPosition(last_id=last_uuid, count=len(raw_lines))
