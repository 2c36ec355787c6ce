"""
Abstract base classes — the contracts every component implements.

    BaseExtractor   bytes + type tag → text pages
    BaseChunker     pages → Chunk records
    BaseScorer      question + chunks → ranked RetrievalResult
    BaseComposer    question + RetrievalResult → answer
    BaseStore       document/chunk/session/message records
    BaseFileStore   uploaded bytes
"""

from .indexer import BaseChunker, BaseExtractor
from .retriever import BaseComposer, BaseScorer
from .store import BaseFileStore, BaseStore

__all__ = [
    "BaseExtractor",
    "BaseChunker",
    "BaseScorer",
    "BaseComposer",
    "BaseStore",
    "BaseFileStore",
]
