"""Tests for document models — pure Pydantic, no storage."""

import pytest
from pydantic import ValidationError

from docqa.models.document import Chunk, ChunkMetadata, Document, DocumentStatus, ScoredChunk


def _document(**overrides):
    fields = dict(name="a.txt", file_type="txt", size=3, file_path="document-1-2.txt")
    fields.update(overrides)
    return Document(**fields)


def test_document_defaults():
    doc = _document()
    assert doc.status == DocumentStatus.PROCESSING
    assert doc.processing_progress == 0
    assert doc.chunks == 0
    assert doc.error_message is None
    assert doc.content is None
    assert doc.id


def test_document_is_frozen():
    doc = _document()
    with pytest.raises(ValidationError):
        doc.status = DocumentStatus.PROCESSED


def test_advance_returns_new_snapshot():
    doc = _document()
    later = doc.advance(50, content="hello")
    assert later is not doc
    assert later.processing_progress == 50
    assert later.content == "hello"
    assert doc.processing_progress == 0
    assert later.id == doc.id


def test_mark_processed():
    doc = _document().advance(80).mark_processed(4)
    assert doc.status == DocumentStatus.PROCESSED
    assert doc.processing_progress == 100
    assert doc.chunks == 4


def test_mark_failed_keeps_progress_and_message():
    doc = _document().advance(50).mark_failed("bad file")
    assert doc.status == DocumentStatus.ERROR
    assert doc.error_message == "bad file"
    assert doc.processing_progress == 50


def test_mark_failed_never_leaves_message_empty():
    assert _document().mark_failed("").error_message


def test_progress_bounds():
    with pytest.raises(ValidationError):
        _document(processing_progress=101)


def test_chunk_metadata_defaults():
    chunk = Chunk(document_id="d", content="x", chunk_index=0)
    assert chunk.metadata == ChunkMetadata()
    assert chunk.metadata.page is None
    assert chunk.metadata.section is None


def test_chunk_index_non_negative():
    with pytest.raises(ValidationError):
        Chunk(document_id="d", content="x", chunk_index=-1)


def test_scored_chunk_score_bounds():
    chunk = Chunk(document_id="d", content="x", chunk_index=0)
    with pytest.raises(ValidationError):
        ScoredChunk(chunk=chunk, score=1.2)
