"""
Shared test fixtures for the docqa test suite.

Provides reusable fixtures: configs, stores, sample documents and chunks,
and a fully wired DocQA app backed by a temporary upload directory.
"""

from io import BytesIO

import docx
import pytest

from docqa.app import DocQA
from docqa.config import ChunkingConfig, DocQAConfig, IngestionConfig, RetrieverConfig, StorageConfig
from docqa.models.document import Chunk, ChunkMetadata, Document, ScoredChunk
from docqa.storage.files import LocalFileStore
from docqa.storage.memory import InMemoryStore

SKY_TEXT = "The sky is blue. Grass is green. Water is wet."


@pytest.fixture
def sky_text():
    return SKY_TEXT


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def chunking_config():
    """Small chunks so every sentence of SKY_TEXT lands in its own chunk."""
    return ChunkingConfig(chunk_size=20, chunk_overlap=5)


@pytest.fixture
def retriever_config():
    return RetrieverConfig(k=3, min_score=0.2, token_weight=0.1)


# ---------------------------------------------------------------------------
# Storage fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def file_store(tmp_path):
    return LocalFileStore(str(tmp_path / "uploads"))


@pytest.fixture
def add_document(store, file_store):
    """Store a file and its Document record, as an upload handler would."""

    def _add(name="sky.txt", data=SKY_TEXT.encode(), file_type=None):
        handle = file_store.save(name, data)
        document = Document(
            name=name,
            file_type=file_type or name.rsplit(".", 1)[-1],
            size=len(data),
            file_path=handle,
        )
        return store.add_document(document)

    return _add


# ---------------------------------------------------------------------------
# Sample data fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def sky_chunks():
    """SKY_TEXT chunked at size 20, owned by document "doc-sky"."""
    return [
        Chunk(document_id="doc-sky", content="The sky is blue.", chunk_index=0),
        Chunk(document_id="doc-sky", content="Grass is green.", chunk_index=1),
        Chunk(document_id="doc-sky", content="Water is wet.", chunk_index=2),
    ]


@pytest.fixture
def sky_candidates(sky_chunks):
    return [ScoredChunk(chunk=c, document_name="sky.txt") for c in sky_chunks]


@pytest.fixture
def sample_scored_chunks():
    return [
        ScoredChunk(
            chunk=Chunk(
                document_id="doc-1",
                content="RAG combines retrieval with generation.",
                chunk_index=0,
                metadata=ChunkMetadata(page=1),
            ),
            document_name="rag.pdf",
            score=0.5,
            rank=0,
        ),
        ScoredChunk(
            chunk=Chunk(document_id="doc-2", content="Chunks are cited.", chunk_index=0),
            document_name="notes.txt",
            score=0.3,
            rank=1,
        ),
    ]


@pytest.fixture
def docx_bytes():
    """A small DOCX with an intro paragraph and one headed section."""
    document = docx.Document()
    document.add_paragraph("Before any heading.")
    document.add_heading("Colours", level=1)
    document.add_paragraph("The sky is blue.")
    buffer = BytesIO()
    document.save(buffer)
    return buffer.getvalue()


# ---------------------------------------------------------------------------
# App fixture
# ---------------------------------------------------------------------------

@pytest.fixture
def app(tmp_path):
    config = DocQAConfig(
        chunking=ChunkingConfig(chunk_size=20, chunk_overlap=5),
        ingestion=IngestionConfig(max_workers=2, max_upload_bytes=1024),
        storage=StorageConfig(upload_dir=str(tmp_path / "uploads")),
    )
    with DocQA(config) as docqa:
        yield docqa
