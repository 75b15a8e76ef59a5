from agent_session_parser.chunking.naming import (
    UNRECOGNIZED_CHUNK_INDEX,
    chunk_file_name,
    parse_chunk_index,
    sort_chunk_files,
)


def test_chunk_file_name() -> None:
    assert chunk_file_name("full.jsonl", 0) == "full.jsonl"
    assert chunk_file_name("full.jsonl", 1) == "full.jsonl.001"
    assert chunk_file_name("full.jsonl", 12) == "full.jsonl.012"
    assert chunk_file_name("full.jsonl", 1234) == "full.jsonl.1234"


def test_parse_chunk_index() -> None:
    assert parse_chunk_index("full.jsonl", "full.jsonl") == 0
    assert parse_chunk_index("full.jsonl.001", "full.jsonl") == 1
    assert parse_chunk_index("full.jsonl.042", "full.jsonl") == 42


def test_parse_chunk_index_reads_leading_digits() -> None:
    assert parse_chunk_index("full.jsonl.007.bak", "full.jsonl") == 7


def test_parse_chunk_index_unrecognized() -> None:
    assert parse_chunk_index("other.jsonl.001", "full.jsonl") == UNRECOGNIZED_CHUNK_INDEX
    assert parse_chunk_index("full.jsonl.abc", "full.jsonl") == -1
    assert parse_chunk_index("full.jsonl.", "full.jsonl") == -1
    assert parse_chunk_index("full.jsonlx", "full.jsonl") == -1


def test_sort_chunk_files() -> None:
    files = ["full.jsonl.010", "full.jsonl.002", "full.jsonl", "full.jsonl.001"]

    assert sort_chunk_files(files, "full.jsonl") == [
        "full.jsonl",
        "full.jsonl.001",
        "full.jsonl.002",
        "full.jsonl.010",
    ]


def test_sort_chunk_files_keeps_input_untouched() -> None:
    files = ["full.jsonl.002", "full.jsonl"]

    sort_chunk_files(files, "full.jsonl")

    assert files == ["full.jsonl.002", "full.jsonl"]


def test_parse_chunk_index_ignores_non_ascii_digits() -> None:
    assert parse_chunk_index("t.jsonl.١٢", "t.jsonl") == -1
    assert parse_chunk_index("t.jsonl.0٢", "t.jsonl") == 0
