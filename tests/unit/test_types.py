from datetime import datetime, timezone

from agent_session_parser import AgentSession, Event, EventType, TokenUsage


def test_event_type_values() -> None:
    assert [event_type.value for event_type in EventType] == [
        "SessionStart",
        "TurnStart",
        "TurnEnd",
        "Compaction",
        "SessionEnd",
        "SubagentStart",
        "SubagentEnd",
    ]
    assert EventType("TurnEnd") is EventType.TURN_END


def test_event_defaults() -> None:
    when = datetime(2025, 1, 1, tzinfo=timezone.utc)

    event = Event(type=EventType.TURN_START, session_id="s1", session_ref="/tmp/s1.jsonl", timestamp=when, prompt="hi")

    assert event.prompt == "hi"
    assert event.previous_session_id is None
    assert event.tool_use_id is None
    assert event.subagent_id is None
    assert event.tool_input is None
    assert event.response_message is None
    assert event.metadata == {}


def test_subagent_event() -> None:
    event = Event(
        type=EventType.SUBAGENT_END,
        session_id="s1",
        session_ref="/tmp/s1.jsonl",
        timestamp=datetime.now(timezone.utc),
        tool_use_id="toolu_1",
        subagent_id="abc123",
        tool_input={"prompt": "explore"},
        metadata={"source": "hook"},
    )

    assert event.subagent_id == "abc123"
    assert event.metadata["source"] == "hook"


def test_agent_session_file_lists_default_empty() -> None:
    session = AgentSession(session_id="s1", agent_name="gemini", session_ref="/tmp/g1.json", native_data=b"{}")

    assert session.native_data == b"{}"
    assert session.modified_files == []
    assert session.new_files == []
    assert session.deleted_files == []
    assert session.entries == []


def test_token_usage_add_ignores_nested_subagent_usage() -> None:
    total = TokenUsage(input_tokens=1, output_tokens=2, api_call_count=1)

    total.add(TokenUsage(input_tokens=3, output_tokens=4, api_call_count=2, subagent_tokens=TokenUsage(input_tokens=99)))

    assert (total.input_tokens, total.output_tokens, total.api_call_count) == (4, 6, 3)
    assert total.subagent_tokens is None
