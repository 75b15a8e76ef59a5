"""Configuration models for transcript chunking."""

from __future__ import annotations

from pydantic import BaseModel, Field

MAX_CHUNK_SIZE = 50 * 1024 * 1024


class ChunkingConfig(BaseModel):
    """Configures the size limit shared by both transcript chunkers."""

    max_chunk_size: int = Field(default=MAX_CHUNK_SIZE, ge=1)
