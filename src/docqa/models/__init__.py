"""
Pydantic models shared across docqa.

Import from here rather than reaching into submodules:
    from docqa.models import Document, Chunk, QueryResponse
"""

from .document import (
    Chunk,
    ChunkMetadata,
    Document,
    DocumentStatus,
    ScoredChunk,
)
from .chat import ChatMessage, ChatSession, MessageRole, SourceCitation
from .result import GenerationResult, QueryResponse, RetrievalResult

__all__ = [
    # Document
    "Document",
    "DocumentStatus",
    "Chunk",
    "ChunkMetadata",
    "ScoredChunk",
    # Chat
    "ChatSession",
    "ChatMessage",
    "MessageRole",
    "SourceCitation",
    # Result
    "RetrievalResult",
    "GenerationResult",
    "QueryResponse",
]
