"""File names for transcript chunks stored side by side on disk."""

from __future__ import annotations

import re

UNRECOGNIZED_CHUNK_INDEX = -1

_LEADING_INT = re.compile(r"\s*[+-]?[0-9]+")


def chunk_file_name(base_name: str, index: int) -> str:
    """Chunk 0 keeps `base_name`; chunk n appends `.NNN` (e.g. `t.jsonl.012`)."""

    if index == 0:
        return base_name
    return f"{base_name}.{index:03d}"


def parse_chunk_index(filename: str, base_name: str) -> int:
    """Return the chunk index encoded in `filename`, or -1 if it is not a chunk of `base_name`."""

    if filename == base_name:
        return 0
    prefix = base_name + "."
    if not filename.startswith(prefix):
        return UNRECOGNIZED_CHUNK_INDEX

    match = _LEADING_INT.match(filename, len(prefix))
    if match is None:
        return UNRECOGNIZED_CHUNK_INDEX
    return int(match.group(0))


def sort_chunk_files(files: list[str], base_name: str) -> list[str]:
    return sorted(files, key=lambda name: parse_chunk_index(name, base_name))
