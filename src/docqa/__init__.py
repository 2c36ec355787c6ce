"""
docqa — upload documents, ask questions about them.

Quick start:
    from docqa import DocQA

    with DocQA() as app:
        doc = app.documents.upload("notes.txt", data)
        app.documents.wait(doc.id)
        response = app.ask("What is in my notes?", [doc.id])
        print(response.answer)

Pipelines:
    - IngestionPipeline: extract → chunk → store, in a bounded worker pool
    - QueryPipeline:     score chunks → compose answer → cite sources
"""

from docqa.app import DocQA
from docqa.config import (
    ChunkingConfig,
    DocQAConfig,
    GenerationConfig,
    IngestionConfig,
    LLMConfig,
    LoggingConfig,
    RetrieverConfig,
    StorageConfig,
)
from docqa.pipelines import IngestionPipeline, QueryPipeline

__all__ = [
    # Entry point
    "DocQA",
    # Pipelines
    "IngestionPipeline",
    "QueryPipeline",
    # Config
    "DocQAConfig",
    "ChunkingConfig",
    "RetrieverConfig",
    "GenerationConfig",
    "LLMConfig",
    "IngestionConfig",
    "StorageConfig",
    "LoggingConfig",
]

__version__ = "0.1.0"
