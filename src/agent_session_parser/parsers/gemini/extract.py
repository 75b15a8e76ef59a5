"""Extraction of files, prompts, checkpoints and token usage from Gemini CLI transcripts."""

from __future__ import annotations

from agent_session_parser.parsers.gemini.types import (
    FILE_MODIFICATION_TOOLS,
    FILE_PATH_FIELDS,
    GEMINI,
    USER,
    GeminiMessage,
    GeminiToolCall,
    GeminiTranscript,
)
from agent_session_parser.types import PromptResponsePair, TokenUsage


def _file_path(tool_call: GeminiToolCall) -> str:
    for field_name in FILE_PATH_FIELDS:
        value = tool_call.args.get(field_name)
        if isinstance(value, str) and value:
            return value
    return ""


def _modified_files(messages: list[GeminiMessage]) -> list[str]:
    seen: set[str] = set()
    files: list[str] = []
    for message in messages:
        if message.type != GEMINI:
            continue
        for tool_call in message.tool_calls:
            if tool_call.name not in FILE_MODIFICATION_TOOLS:
                continue
            path = _file_path(tool_call)
            if path and path not in seen:
                seen.add(path)
                files.append(path)
    return files


def extract_modified_files(transcript: GeminiTranscript) -> list[str]:
    """Files written by file-modifying tool calls, in first-seen order."""
    return _modified_files(transcript.messages)


def extract_last_user_prompt(transcript: GeminiTranscript) -> str:
    for message in reversed(transcript.messages):
        if message.type == USER and message.content:
            return message.content
    return ""


def extract_all_user_prompts(transcript: GeminiTranscript) -> list[str]:
    return [
        message.content
        for message in transcript.messages
        if message.type == USER and message.content
    ]


def _assistant_responses(messages: list[GeminiMessage]) -> list[str]:
    return [message.content for message in messages if message.type == GEMINI and message.content]


def extract_assistant_responses(transcript: GeminiTranscript) -> list[str]:
    return _assistant_responses(transcript.messages)


def extract_last_assistant_message(transcript: GeminiTranscript) -> str:
    for message in reversed(transcript.messages):
        if message.type == GEMINI and message.content:
            return message.content
    return ""


def extract_all_prompt_responses(transcript: GeminiTranscript) -> list[PromptResponsePair]:
    """Pair each user prompt with the agent output up to the next prompt."""

    messages = transcript.messages
    starts = [
        index
        for index, message in enumerate(messages)
        if message.type == USER and message.content
    ]

    pairs: list[PromptResponsePair] = []
    for position, start in enumerate(starts):
        end = starts[position + 1] if position + 1 < len(starts) else len(messages)
        turn = messages[start:end]
        pairs.append(
            PromptResponsePair(
                prompt=messages[start].content,
                responses=_assistant_responses(turn),
                files=_modified_files(turn),
            )
        )
    return pairs


def truncate_at_message_id(transcript: GeminiTranscript, message_id: str) -> GeminiTranscript:
    """Messages up to and including `message_id`; unchanged when empty or absent."""

    if not message_id:
        return transcript
    for index, message in enumerate(transcript.messages):
        if message.id == message_id:
            return GeminiTranscript(messages=transcript.messages[: index + 1])
    return transcript


def filter_after_message_id(transcript: GeminiTranscript, message_id: str) -> GeminiTranscript:
    """Messages strictly after `message_id`; unchanged when empty or absent."""

    if not message_id:
        return transcript
    for index, message in enumerate(transcript.messages):
        if message.id == message_id:
            return GeminiTranscript(messages=transcript.messages[index + 1 :])
    return transcript


def find_checkpoint_message_id(transcript: GeminiTranscript, tool_call_id: str) -> str | None:
    """Id of the first message whose tool calls include `tool_call_id`.

    Gemini records a tool call and its outcome on the same message, so that
    message is the checkpoint. Messages without an id cannot be checkpoints.
    """

    for message in transcript.messages:
        if message.id and any(call.id == tool_call_id for call in message.tool_calls):
            return message.id
    return None


def get_last_message_id(transcript: GeminiTranscript) -> str:
    if not transcript.messages:
        return ""
    return transcript.messages[-1].id or ""


def calculate_token_usage(transcript: GeminiTranscript, start_message_index: int = 0) -> TokenUsage:
    """Sum token usage of agent messages from `start_message_index` onward.

    Every agent message is its own API call; Gemini does not write streaming
    duplicates, so nothing is deduplicated.
    """

    usage = TokenUsage()
    for message in transcript.messages[max(start_message_index, 0) :]:
        if message.type != GEMINI or message.tokens is None:
            continue
        usage.api_call_count += 1
        usage.input_tokens += message.tokens.input
        usage.output_tokens += message.tokens.output
        usage.cache_read_tokens += message.tokens.cached
    return usage
