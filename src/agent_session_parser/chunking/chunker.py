"""Format-aware transcript chunking and reassembly."""

from __future__ import annotations

import json
import logging
from typing import Any

from agent_session_parser.chunking.detect import detect_agent_type_from_content
from agent_session_parser.config import MAX_CHUNK_SIZE, ChunkingConfig
from agent_session_parser.errors import ChunkSizeError
from agent_session_parser.parsers.gemini.parse import dump_document, load_document, raw_messages
from agent_session_parser.types import AgentType

logger = logging.getLogger(__name__)


def _byte_size(text: str) -> int:
    return len(text.encode("utf-8"))


class TranscriptChunker:
    """Splits oversized transcripts into parts that can be stored or sent separately.

    Design notes:
    1. Record boundaries only.
       A JSONL transcript is cut between lines and a Gemini transcript between
       messages. A JSON record is never split, so every chunk stays parseable
       on its own.

    2. Greedy packing.
       Units are appended to the current chunk until the next one would push
       it past `max_chunk_size` bytes (UTF-8). The chunk is then sealed and a
       new one started. A chunk always holds at least one unit.

    3. Reassembly.
       JSONL chunks are rejoined with newlines and reproduce the input byte
       for byte. Gemini chunks are merged by concatenating their message
       lists in chunk order; the document is re-serialized compactly, so
       whitespace may differ but message order and content do not.

    A JSONL line that cannot fit into an empty chunk raises `ChunkSizeError`.
    A single oversized Gemini message becomes a chunk of its own.
    """

    def __init__(self, config: ChunkingConfig | None = None) -> None:
        self.config = config or ChunkingConfig()

    @property
    def max_size(self) -> int:
        return self.config.max_chunk_size

    def chunk(self, content: str, agent_type: AgentType | None = None) -> list[str]:
        """Split `content`, detecting its format unless `agent_type` is given.

        Content within the size limit is returned as one chunk without being
        parsed. Unrecognized content is chunked as JSONL.
        """

        if _byte_size(content) <= self.max_size:
            return [content]

        detected = agent_type or detect_agent_type_from_content(content)
        if detected == AgentType.GEMINI_CLI:
            chunks = self.chunk_gemini_json(content)
        else:
            chunks = self.chunk_jsonl(content)
        logger.debug("Split transcript into %d chunks (limit %d bytes)", len(chunks), self.max_size)
        return chunks

    def reassemble(self, chunks: list[str], agent_type: AgentType | None = None) -> str:
        """Rebuild a transcript, detecting the format from the first chunk."""

        if not chunks:
            return ""
        if len(chunks) == 1:
            return chunks[0]

        detected = agent_type or detect_agent_type_from_content(chunks[0])
        if detected == AgentType.GEMINI_CLI:
            return self.reassemble_gemini_json(chunks)
        return self.reassemble_jsonl(chunks)

    def chunk_jsonl(self, content: str) -> list[str]:
        """Split JSONL content at line boundaries.

        Raises:
            ChunkSizeError: if one line plus its newline exceeds the limit.
        """

        if not content:
            return []

        chunks: list[str] = []
        current: list[str] = []
        current_size = 0

        for line_number, line in enumerate(content.split("\n"), start=1):
            line_size = _byte_size(line) + 1
            if line_size > self.max_size:
                raise ChunkSizeError(
                    f"JSONL line {line_number} exceeds maximum chunk size "
                    f"({line_size} bytes > {self.max_size} bytes); "
                    "cannot split a single JSON object",
                    size=line_size,
                    max_size=self.max_size,
                    line_number=line_number,
                )

            if current and current_size + line_size > self.max_size:
                chunks.append("\n".join(current))
                current = []
                current_size = 0

            current.append(line)
            current_size += line_size

        if current:
            chunks.append("\n".join(current))
        return chunks

    @staticmethod
    def reassemble_jsonl(chunks: list[str]) -> str:
        return "\n".join(chunks)

    def chunk_gemini_json(self, content: str) -> list[str]:
        """Split a Gemini JSON transcript at message boundaries.

        Each chunk is a complete document holding a run of consecutive
        messages. Top-level fields other than `messages` are copied into
        every chunk.

        Raises:
            TranscriptParseError: if the content is not valid JSON.
            ChunkSizeError: if an oversized document has no messages to split.
        """

        total_size = _byte_size(content)
        if total_size <= self.max_size:
            return [content]

        document = load_document(content)
        messages = raw_messages(document)
        if not messages:
            raise ChunkSizeError(
                f"Gemini transcript exceeds maximum chunk size ({total_size} bytes > "
                f"{self.max_size} bytes) and has no messages to split",
                size=total_size,
                max_size=self.max_size,
            )

        empty_size = _byte_size(dump_document({**document, "messages": []}))
        chunks: list[str] = []
        current: list[Any] = []
        current_size = empty_size

        for index, message in enumerate(messages):
            message_size = _byte_size(json.dumps(message, ensure_ascii=False, separators=(",", ":")))
            separator = 1 if current else 0

            if current and current_size + separator + message_size > self.max_size:
                chunks.append(dump_document({**document, "messages": current}))
                current = []
                current_size = empty_size
                separator = 0

            if empty_size + message_size > self.max_size:
                logger.warning(
                    "Gemini message %d alone exceeds the chunk limit (%d bytes > %d bytes)",
                    index,
                    empty_size + message_size,
                    self.max_size,
                )

            current.append(message)
            current_size += separator + message_size

        if current:
            chunks.append(dump_document({**document, "messages": current}))
        return chunks

    @staticmethod
    def reassemble_gemini_json(chunks: list[str]) -> str:
        """Merge chunk message lists into one document.

        Top-level fields other than `messages` are taken from the first chunk.
        """

        if not chunks:
            return dump_document({"messages": []})
        if len(chunks) == 1:
            return chunks[0]

        documents = [load_document(chunk) for chunk in chunks]
        messages = [message for document in documents for message in raw_messages(document)]
        return dump_document({**documents[0], "messages": messages})


def _chunker(max_size: int) -> TranscriptChunker:
    return TranscriptChunker(ChunkingConfig(max_chunk_size=max_size))


def chunk_jsonl(content: str, max_size: int = MAX_CHUNK_SIZE) -> list[str]:
    return _chunker(max_size).chunk_jsonl(content)


def reassemble_jsonl(chunks: list[str]) -> str:
    return TranscriptChunker.reassemble_jsonl(chunks)


def chunk_gemini_json(content: str, max_size: int = MAX_CHUNK_SIZE) -> list[str]:
    return _chunker(max_size).chunk_gemini_json(content)


def reassemble_gemini_json(chunks: list[str]) -> str:
    return TranscriptChunker.reassemble_gemini_json(chunks)


def chunk_transcript(
    content: str,
    agent_type: AgentType | None = None,
    max_size: int = MAX_CHUNK_SIZE,
) -> list[str]:
    return _chunker(max_size).chunk(content, agent_type)


def reassemble_transcript(chunks: list[str], agent_type: AgentType | None = None) -> str:
    return TranscriptChunker().reassemble(chunks, agent_type)
