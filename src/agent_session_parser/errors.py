"""Errors surfaced when a transcript cannot be parsed or split."""

from __future__ import annotations


class TranscriptParseError(ValueError):
    """A message-array transcript is not a valid JSON document."""

    def __init__(self, message: str, *, line: int | None = None, column: int | None = None) -> None:
        super().__init__(message)
        self.line = line
        self.column = column


class ChunkSizeError(ValueError):
    """Content holds a unit that cannot fit into a single chunk."""

    def __init__(
        self,
        message: str,
        *,
        size: int,
        max_size: int,
        line_number: int | None = None,
    ) -> None:
        super().__init__(message)
        self.size = size
        self.max_size = max_size
        self.line_number = line_number
