"""
Configuration for docqa.

Split into one config per concern so each component only receives
what it needs. DocQAConfig bundles them all for convenience.

Usage:
    # Full config: pass to DocQA
    config = DocQAConfig()

    # Override specific parts
    config = DocQAConfig(
        chunking=ChunkingConfig(chunk_size=500),
        storage=StorageConfig(backend="sql", database_url="sqlite:///docqa.db"),
    )

    # Standalone: use just one piece
    retriever_config = RetrieverConfig(k=5, min_score=0.3)
"""

import os
from enum import Enum
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, model_validator

# Load .env from the project root (walks up from this file to find it).
# Runs once at import time, so env-backed defaults below see the values.
_env_path = Path(__file__).resolve().parent.parent.parent / ".env"
load_dotenv(_env_path)


# ---------------------------------------------------------------------------
# Enums: for things with a genuinely fixed set of choices
# ---------------------------------------------------------------------------

class LLMProvider(str, Enum):
    """
    Supported LLM providers for the LLM answer composer.

    Each provider needs a different LangChain chat model class, so the
    set we can instantiate is closed.
    """

    OPENAI = "openai"
    ANTHROPIC = "anthropic"


class StorageBackend(str, Enum):
    """Supported record store backends."""

    MEMORY = "memory"
    SQL = "sql"


# ---------------------------------------------------------------------------
# Per-concern configs
# ---------------------------------------------------------------------------

class ChunkingConfig(BaseModel):
    """
    Document chunking configuration.

    Used by: indexing/chunking.py

    The sentence chunker accumulates whole sentences until the next one
    would push the chunk past chunk_size. chunk_overlap is validated and
    carried for callers that plug in their own chunker, but the sentence
    strategy does not repeat text between neighbouring chunks.
    """

    strategy: str = Field(
        default="sentence",
        description="Chunking strategy. Only 'sentence' is built in",
    )
    chunk_size: int = Field(
        default=1000,
        gt=0,
        description="Target chunk size in characters",
    )
    chunk_overlap: int = Field(
        default=200,
        ge=0,
        description="Overlap between consecutive chunks",
    )

    @model_validator(mode="after")
    def validate_overlap(self) -> "ChunkingConfig":
        """Overlap must be smaller than chunk size, otherwise chunks would never advance."""
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError(
                f"chunk_overlap ({self.chunk_overlap}) must be less than "
                f"chunk_size ({self.chunk_size})"
            )
        return self


class RetrieverConfig(BaseModel):
    """
    Retrieval configuration.

    Used by: retrieval/scoring.py, pipelines/query.py

    Every query token found in a chunk adds token_weight to that chunk's
    score (capped at 1.0). Only chunks scoring strictly above min_score
    survive, and at most k of them are returned.
    """

    k: int = Field(
        default=3,
        gt=0,
        description="Maximum number of chunks to return",
    )
    min_score: float = Field(
        default=0.2,
        ge=0.0,
        le=1.0,
        description="Chunks must score strictly above this to be returned",
    )
    token_weight: float = Field(
        default=0.1,
        gt=0.0,
        le=1.0,
        description="Score added per query token found in the chunk",
    )
    excerpt_length: int = Field(
        default=200,
        gt=0,
        description="Maximum characters of chunk text quoted in a citation",
    )


class LLMConfig(BaseModel):
    """
    LLM configuration.

    Used by: generation/compose.py (LLMComposer only)

    The provider + model_name pair determines which LangChain chat model
    class gets instantiated.
    """

    provider: LLMProvider = Field(
        default=LLMProvider.OPENAI,
        description="Which LLM provider to use",
    )
    model_name: str = Field(
        default="gpt-4",
        description="Model identifier (e.g. 'gpt-4', 'claude-sonnet-4-5-20250929')",
    )
    temperature: float = Field(
        default=0.0,
        ge=0.0,
        le=2.0,
        description="Sampling temperature. 0 = deterministic, higher = more creative",
    )
    max_tokens: int = Field(
        default=2000,
        gt=0,
        description="Maximum tokens in the LLM response",
    )


class GenerationConfig(BaseModel):
    """
    Answer composition configuration.

    Used by: generation/compose.py

    "template" fills a fixed paragraph from the ranked chunks and needs no
    API key. "llm" sends the chunks to a chat model configured by llm.
    """

    strategy: str = Field(
        default="template",
        description="Answer composer: 'template' or 'llm'",
    )
    llm: LLMConfig = Field(default_factory=LLMConfig)


class IngestionConfig(BaseModel):
    """
    Ingestion configuration.

    Used by: pipelines/ingestion.py, services/documents.py

    max_workers bounds how many documents are extracted and chunked at
    the same time. Further uploads queue behind them.
    """

    max_workers: int = Field(
        default=4,
        gt=0,
        description="Size of the background ingestion worker pool",
    )
    max_upload_bytes: int = Field(
        default=50 * 1024 * 1024,
        gt=0,
        description="Largest accepted upload in bytes",
    )


class StorageConfig(BaseModel):
    """
    Storage configuration.

    Used by: storage/, app.py

    database_url only matters for the "sql" backend. upload_dir is where
    the local file store keeps uploaded bytes.
    """

    backend: StorageBackend = Field(
        default=StorageBackend.MEMORY,
        description="Record store backend",
    )
    database_url: str = Field(
        default_factory=lambda: os.getenv("DOCQA_DATABASE_URL", "sqlite:///docqa.db"),
        description="SQLAlchemy database URL (sql backend only)",
    )
    upload_dir: str = Field(
        default_factory=lambda: os.getenv("DOCQA_UPLOAD_DIR", "uploads"),
        description="Directory holding uploaded files",
    )
    echo: bool = Field(default=False, description="Log SQL statements")


class LoggingConfig(BaseModel):
    """
    Logging configuration.

    Used by: utils/logging.py
    """

    level: str = Field(
        default_factory=lambda: os.getenv("DOCQA_LOG_LEVEL", "INFO"),
        description="Standard library log level name",
    )
    json_output: bool = Field(
        default=False,
        description="Render events as JSON lines instead of console text",
    )


# ---------------------------------------------------------------------------
# Top-level config: bundles everything
# ---------------------------------------------------------------------------

class DocQAConfig(BaseModel):
    """
    Complete docqa configuration.

    DocQA receives this and passes slices to each component:
        chunker = get_chunker(config.chunking)
        scorer = KeywordScorer(config.retriever)
        composer = get_composer(config.generation)

    All sub-configs have sensible defaults, so DocQAConfig() with
    no arguments gives you a working in-memory setup.
    """

    chunking: ChunkingConfig = Field(default_factory=ChunkingConfig)
    retriever: RetrieverConfig = Field(default_factory=RetrieverConfig)
    generation: GenerationConfig = Field(default_factory=GenerationConfig)
    ingestion: IngestionConfig = Field(default_factory=IngestionConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    logging: Optional[LoggingConfig] = Field(
        default=None,
        description="If set, DocQA configures logging on startup",
    )
