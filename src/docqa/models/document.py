"""
Document and chunk models.

These represent data at each stage:
  Document (uploaded) → Chunk (split + stored) → ScoredChunk (retrieved + scored)

Records are frozen. A status change produces a new snapshot that the
store persists, so a reader never sees a half-updated document.
"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


def new_id() -> str:
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DocumentStatus(str, Enum):
    """Processing status of an uploaded document."""

    PROCESSING = "processing"
    PROCESSED = "processed"
    ERROR = "error"


class Document(BaseModel):
    """
    An uploaded file and its ingestion state.

    status / processing_progress / error_message / chunks are the only
    progress channel: the ingestion pipeline writes them, everyone else
    polls them.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    name: str = Field(description="Original file name as uploaded")
    file_type: str = Field(description="Lowercase extension tag, e.g. 'pdf' or 'txt'")
    size: int = Field(ge=0, description="File size in bytes")
    file_path: str = Field(description="Handle of the stored bytes in the file store")
    status: DocumentStatus = Field(default=DocumentStatus.PROCESSING)
    processing_progress: int = Field(default=0, ge=0, le=100)
    error_message: Optional[str] = Field(default=None)
    chunks: int = Field(default=0, ge=0, description="Number of chunks produced")
    content: Optional[str] = Field(default=None, description="Full extracted text")
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def _next(self, **changes) -> "Document":
        changes["updated_at"] = utcnow()
        return self.model_copy(update=changes)

    def advance(self, progress: int, **changes) -> "Document":
        """Snapshot still processing, at a new progress checkpoint."""
        return self._next(
            status=DocumentStatus.PROCESSING,
            processing_progress=progress,
            **changes,
        )

    def mark_processed(self, chunk_count: int) -> "Document":
        return self._next(
            status=DocumentStatus.PROCESSED,
            processing_progress=100,
            chunks=chunk_count,
            error_message=None,
        )

    def mark_failed(self, message: str) -> "Document":
        """Terminal error snapshot. Progress stays where the failure happened."""
        return self._next(
            status=DocumentStatus.ERROR,
            error_message=message or "Document processing failed",
        )


class ChunkMetadata(BaseModel):
    """Where in the source document a chunk came from."""

    model_config = ConfigDict(frozen=True)

    page: Optional[int] = Field(default=None, description="1-based page number if paginated")
    section: Optional[str] = Field(default=None, description="Section label if known")


class Chunk(BaseModel):
    """
    A single chunk of text after splitting.

    This is the unit that gets stored, scored and cited.
    chunk_index is unique and contiguous within its document.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    document_id: str
    content: str = Field(description="The actual text content")
    chunk_index: int = Field(ge=0, description="Position of this chunk in the source document")
    metadata: ChunkMetadata = Field(default_factory=ChunkMetadata)
    created_at: datetime = Field(default_factory=utcnow)


class ScoredChunk(BaseModel):
    """
    A chunk with a relevance score attached.

    This is what the retrieval stage returns. document_name is carried so
    citations can be built without another store lookup.
    """

    chunk: Chunk
    document_name: str = Field(default="")
    score: float = Field(default=0.0, ge=0.0, le=1.0, description="Relevance score in [0, 1]")
    rank: int = Field(default=0, description="Position in the result list")
