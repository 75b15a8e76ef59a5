"""Extraction of files, prompts, checkpoints and token usage from Claude Code transcripts."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from typing import Any

from agent_session_parser.parsers.claude.parse import extract_user_content, parse_from_string
from agent_session_parser.parsers.claude.types import (
    ASSISTANT,
    FILE_MODIFICATION_TOOLS,
    FILE_PATH_FIELDS,
    TEXT,
    USER,
    MessageUsage,
    TextSegment,
    ToolResultSegment,
    ToolUseSegment,
    TranscriptLine,
    message_usage,
)
from agent_session_parser.types import PromptResponsePair, TokenUsage
from agent_session_parser.utils import deduplicate_strings

logger = logging.getLogger(__name__)

SubagentLoader = Callable[[str], str | None]

_AGENT_ID_MARKER = "agentId: "
_AGENT_ID = re.compile(r"[A-Za-z0-9]+")


def _file_path(tool_input: dict[str, Any]) -> str:
    for field_name in FILE_PATH_FIELDS:
        value = tool_input.get(field_name)
        if isinstance(value, str) and value:
            return value
    return ""


def extract_modified_files(lines: list[TranscriptLine]) -> list[str]:
    """Files written by file-modifying tool calls, in first-seen order."""

    seen: set[str] = set()
    files: list[str] = []
    for line in lines:
        if line.type != ASSISTANT:
            continue
        for segment in line.segments():
            if not isinstance(segment, ToolUseSegment):
                continue
            if segment.name not in FILE_MODIFICATION_TOOLS:
                continue
            path = _file_path(segment.input)
            if path and path not in seen:
                seen.add(path)
                files.append(path)
    return files


def extract_last_user_prompt(lines: list[TranscriptLine]) -> str:
    for line in reversed(lines):
        if line.type != USER:
            continue
        content = extract_user_content(line.message)
        if content:
            return content
    return ""


def extract_all_user_prompts(lines: list[TranscriptLine]) -> list[str]:
    """User prompts in order; tool-result-only user lines are not prompts."""

    prompts: list[str] = []
    for line in lines:
        if line.type != USER:
            continue
        content = extract_user_content(line.message)
        if content:
            prompts.append(content)
    return prompts


def extract_assistant_responses(lines: list[TranscriptLine]) -> list[str]:
    texts: list[str] = []
    for line in lines:
        if line.type != ASSISTANT:
            continue
        for segment in line.segments():
            if isinstance(segment, TextSegment) and segment.text:
                texts.append(segment.text)
    return texts


def extract_all_prompt_responses(lines: list[TranscriptLine]) -> list[PromptResponsePair]:
    """Split the transcript into turns, one per user prompt.

    A turn runs from a prompt up to, but excluding, the next prompt; the last
    turn runs to the end of the transcript.
    """

    prompts: list[tuple[int, str]] = []
    for index, line in enumerate(lines):
        if line.type != USER:
            continue
        content = extract_user_content(line.message)
        if content:
            prompts.append((index, content))

    pairs: list[PromptResponsePair] = []
    for position, (start, prompt) in enumerate(prompts):
        end = prompts[position + 1][0] if position + 1 < len(prompts) else len(lines)
        turn = lines[start:end]
        pairs.append(
            PromptResponsePair(
                prompt=prompt,
                responses=extract_assistant_responses(turn),
                files=extract_modified_files(turn),
            )
        )
    return pairs


def truncate_at_uuid(lines: list[TranscriptLine], uuid: str) -> list[TranscriptLine]:
    """Lines up to and including `uuid`; all lines when it is empty or absent."""

    if not uuid:
        return lines
    for index, line in enumerate(lines):
        if line.uuid == uuid:
            return lines[: index + 1]
    return lines


def filter_after_uuid(lines: list[TranscriptLine], uuid: str) -> list[TranscriptLine]:
    """Lines strictly after `uuid`; all lines when it is empty or absent."""

    if not uuid:
        return lines
    for index, line in enumerate(lines):
        if line.uuid == uuid:
            return lines[index + 1 :]
    return lines


def find_checkpoint_uuid(lines: list[TranscriptLine], tool_use_id: str) -> str | None:
    """Uuid of the line holding the tool result for `tool_use_id`."""

    for line in lines:
        if line.type != USER:
            continue
        for segment in line.segments():
            if isinstance(segment, ToolResultSegment) and segment.tool_use_id == tool_use_id:
                return line.uuid
    return None


def calculate_token_usage(lines: list[TranscriptLine]) -> TokenUsage:
    """Sum API usage over distinct assistant messages.

    Streaming writes several rows for the same `message.id` with growing
    `output_tokens`. Only the row with the highest output count is kept per
    id; on a tie the first row stays.
    """

    usage_by_message: dict[str, MessageUsage] = {}
    for line in lines:
        if line.type != ASSISTANT:
            continue
        found = message_usage(line)
        if found is None:
            continue
        message_id, usage = found
        existing = usage_by_message.get(message_id)
        if existing is None or usage.output_tokens > existing.output_tokens:
            usage_by_message[message_id] = usage

    total = TokenUsage(api_call_count=len(usage_by_message))
    for usage in usage_by_message.values():
        total.input_tokens += usage.input_tokens
        total.cache_creation_tokens += usage.cache_creation_input_tokens
        total.cache_read_tokens += usage.cache_read_input_tokens
        total.output_tokens += usage.output_tokens
    return total


def _tool_result_text(content: Any) -> str:
    if isinstance(content, str):
        return content
    if not isinstance(content, list):
        return ""
    parts: list[str] = []
    for block in content:
        if isinstance(block, dict) and block.get("type") == TEXT:
            text = block.get("text")
            if isinstance(text, str) and text:
                parts.append(text + "\n")
    return "".join(parts)


def _agent_id_from_text(text: str) -> str | None:
    index = text.find(_AGENT_ID_MARKER)
    if index == -1:
        return None
    match = _AGENT_ID.match(text, index + len(_AGENT_ID_MARKER))
    return match.group(0) if match else None


def extract_spawned_agent_ids(lines: list[TranscriptLine]) -> dict[str, str]:
    """Map each spawned subagent id to the Task tool call that spawned it.

    A finished Task tool returns text containing `agentId: <id>`. The marker
    is searched anywhere in the result and the id ends at the first
    non-alphanumeric character.
    """

    agent_ids: dict[str, str] = {}
    for line in lines:
        if line.type != USER:
            continue
        for segment in line.segments():
            if not isinstance(segment, ToolResultSegment):
                continue
            agent_id = _agent_id_from_text(_tool_result_text(segment.content))
            if agent_id and segment.tool_use_id:
                agent_ids[agent_id] = segment.tool_use_id
    return agent_ids


def _load_subagent_lines(
    agent_id: str, load_subagent_transcript: SubagentLoader
) -> list[TranscriptLine] | None:
    content = load_subagent_transcript(agent_id)
    if not content:
        logger.debug("Subagent transcript unavailable: %s", agent_id)
        return None
    return parse_from_string(content)


def calculate_total_token_usage(
    lines: list[TranscriptLine],
    load_subagent_transcript: SubagentLoader,
) -> TokenUsage:
    """Token usage of the transcript plus its spawned subagents.

    Args:
        lines: Parsed lines of the main transcript.
        load_subagent_transcript: Returns the raw transcript of a subagent id,
            or None when it is unavailable.

    Returns:
        Main usage, with `subagent_tokens` set only if at least one subagent
        transcript could be loaded.
    """

    usage = calculate_token_usage(lines)
    subagent_usage = TokenUsage()
    loaded = False

    for agent_id in extract_spawned_agent_ids(lines):
        sub_lines = _load_subagent_lines(agent_id, load_subagent_transcript)
        if sub_lines is None:
            continue
        subagent_usage.add(calculate_token_usage(sub_lines))
        loaded = True

    if loaded:
        usage.subagent_tokens = subagent_usage
    return usage


def extract_all_modified_files(
    lines: list[TranscriptLine],
    load_subagent_transcript: SubagentLoader,
) -> list[str]:
    """Modified files of the transcript followed by those of its subagents."""

    files = extract_modified_files(lines)
    for agent_id in extract_spawned_agent_ids(lines):
        sub_lines = _load_subagent_lines(agent_id, load_subagent_transcript)
        if sub_lines is not None:
            files.extend(extract_modified_files(sub_lines))
    return deduplicate_strings(files)
