"""Agent session transcript parsing package."""

import logging

from .chunking.chunker import (
    TranscriptChunker,
    chunk_gemini_json,
    chunk_jsonl,
    chunk_transcript,
    reassemble_gemini_json,
    reassemble_jsonl,
    reassemble_transcript,
)
from .chunking.detect import detect_agent_type_from_content
from .chunking.naming import chunk_file_name, parse_chunk_index, sort_chunk_files
from .config import MAX_CHUNK_SIZE, ChunkingConfig
from .errors import ChunkSizeError, TranscriptParseError
from .parsers.claude import extract as claude_extract
from .parsers.claude import parse as claude_parse
from .parsers.gemini import extract as gemini_extract
from .parsers.gemini import parse as gemini_parse
from .types import (
    AgentSession,
    AgentType,
    EntryType,
    Event,
    EventType,
    PromptResponsePair,
    SessionEntry,
    TokenUsage,
    TranscriptPosition,
)
from .utils import deduplicate_strings, strip_ide_context_tags

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "AgentSession",
    "AgentType",
    "ChunkSizeError",
    "ChunkingConfig",
    "EntryType",
    "Event",
    "EventType",
    "MAX_CHUNK_SIZE",
    "PromptResponsePair",
    "SessionEntry",
    "TokenUsage",
    "TranscriptChunker",
    "TranscriptParseError",
    "TranscriptPosition",
    "chunk_file_name",
    "chunk_gemini_json",
    "chunk_jsonl",
    "chunk_transcript",
    "claude_extract",
    "claude_parse",
    "deduplicate_strings",
    "detect_agent_type_from_content",
    "gemini_extract",
    "gemini_parse",
    "parse_chunk_index",
    "reassemble_gemini_json",
    "reassemble_jsonl",
    "reassemble_transcript",
    "sort_chunk_files",
    "strip_ide_context_tags",
]
