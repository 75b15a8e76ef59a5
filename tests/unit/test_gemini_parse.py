import json

import pytest

from agent_session_parser.errors import TranscriptParseError
from agent_session_parser.parsers.gemini.parse import (
    get_transcript_position,
    parse_transcript,
    parse_transcript_from_bytes,
    serialize_transcript,
    slice_from_message,
)
from agent_session_parser.parsers.gemini.types import GeminiMessageTokens, GeminiToolCall


def _document(*messages: dict[str, object], **extra: object) -> str:
    return json.dumps({**extra, "messages": list(messages)})


def test_parse_string_and_part_list_content() -> None:
    data = _document(
        {"id": "m1", "type": "user", "content": [{"text": "Hello"}, {"text": "World"}]},
        {"id": "m2", "type": "gemini", "content": "Hi there"},
    )

    transcript = parse_transcript(data)

    assert [message.content for message in transcript.messages] == ["Hello\nWorld", "Hi there"]
    assert [message.id for message in transcript.messages] == ["m1", "m2"]


def test_parse_skips_parts_without_text() -> None:
    data = _document(
        {"type": "user", "content": [{"text": "a"}, {"inlineData": "..."}, {"text": ""}, "raw", {"text": "b"}]},
        {"type": "gemini"},
    )

    transcript = parse_transcript(data)

    assert transcript.messages[0].content == "a\nb"
    assert transcript.messages[0].id is None
    assert transcript.messages[1].content == ""


def test_parse_tool_calls_and_tokens() -> None:
    data = _document(
        {
            "id": "m1",
            "type": "gemini",
            "content": "",
            "toolCalls": [
                {"id": "tc1", "name": "write_file", "args": {"file_path": "/a.py"}, "status": "success"}
            ],
            "tokens": {"input": 10, "output": 5, "cached": 2, "thoughts": 1, "tool": 0, "total": 18},
        }
    )

    message = parse_transcript(data).messages[0]

    assert message.tool_calls == [
        GeminiToolCall(id="tc1", name="write_file", args={"file_path": "/a.py"}, status="success")
    ]
    assert message.tokens == GeminiMessageTokens(input=10, output=5, cached=2, thoughts=1, tool=0, total=18)


def test_parse_invalid_json_raises() -> None:
    with pytest.raises(TranscriptParseError) as excinfo:
        parse_transcript('{"messages": [')

    assert excinfo.value.line == 1
    assert isinstance(excinfo.value, ValueError)


def test_parse_document_without_messages_is_empty() -> None:
    assert parse_transcript("{}").messages == []
    assert parse_transcript('{"messages": "nope"}').messages == []
    assert parse_transcript("[1, 2]").messages == []


def test_parse_non_object_message_keeps_position() -> None:
    transcript = parse_transcript(_document({"type": "user", "content": "a"}, "junk", {"type": "user", "content": "b"}))

    assert [message.content for message in transcript.messages] == ["a", "", "b"]


def test_parse_from_bytes() -> None:
    data = _document({"type": "user", "content": "héllo"}).encode("utf-8")

    assert parse_transcript_from_bytes(data).messages[0].content == "héllo"


def test_serialize_transcript_round_trips_normalized_messages() -> None:
    transcript = parse_transcript(
        _document(
            {"id": "m1", "type": "user", "content": [{"text": "hi"}]},
            {"id": "m2", "type": "gemini", "content": "yo", "tokens": {"input": 1, "output": 2}},
        )
    )

    assert parse_transcript(serialize_transcript(transcript)) == transcript


def test_slice_from_message() -> None:
    data = _document(
        {"id": "m1", "type": "user", "content": "one"},
        {"id": "m2", "type": "gemini", "content": "two"},
        {"id": "m3", "type": "user", "content": "three"},
        sessionId="s-1",
    )

    sliced = json.loads(slice_from_message(data, 1))

    assert [message["id"] for message in sliced["messages"]] == ["m2", "m3"]
    assert sliced["sessionId"] == "s-1"


def test_slice_from_message_edges() -> None:
    data = _document({"id": "m1", "type": "user", "content": "one"})

    assert slice_from_message(data, 0) == data
    assert slice_from_message("", 3) == ""
    assert json.loads(slice_from_message(data, 1))["messages"] == []
    assert json.loads(slice_from_message(data, 5))["messages"] == []


def test_get_transcript_position() -> None:
    data = _document({"id": "m1", "type": "user", "content": "a"}, {"id": "m2", "type": "gemini", "content": "b"})

    position = get_transcript_position(data)

    assert position.last_id == "m2"
    assert position.count == 2
    assert get_transcript_position("").count == 0
