"""Tests for the document service — upload through deletion."""

from unittest.mock import MagicMock

import pytest

from docqa.exceptions import InvalidRequest, NotFound, StorageUnavailable, UnsupportedFormat
from docqa.models.document import DocumentStatus
from docqa.pipelines.ingestion import IngestionPipeline
from docqa.services.documents import DocumentService
from docqa.storage.memory import InMemoryStore


@pytest.fixture
def service(app):
    return app.documents


def test_upload_returns_processing_document(service, sky_text):
    document = service.upload("sky.txt", sky_text.encode())

    assert document.name == "sky.txt"
    assert document.file_type == "txt"
    assert document.size == len(sky_text)
    assert document.status == DocumentStatus.PROCESSING
    assert document.processing_progress == 0


def test_upload_is_ingested(service, sky_text):
    document = service.upload("sky.txt", sky_text.encode())
    final = service.wait(document.id, timeout=10)

    assert final.status == DocumentStatus.PROCESSED
    assert final.chunks == 3
    assert service.get_content(document.id) == sky_text
    assert [c.chunk_index for c in service.get_chunks(document.id)] == [0, 1, 2]


def test_wait_without_pending_work_returns_stored(service, sky_text):
    document = service.upload("sky.txt", sky_text.encode())
    service.wait(document.id, timeout=10)
    assert service.wait(document.id).status == DocumentStatus.PROCESSED


def test_extension_is_case_insensitive(service):
    document = service.upload("NOTES.TXT", b"Hello there.")
    assert document.file_type == "txt"


@pytest.mark.parametrize("name, data", [
    ("", b"data"),
    ("   ", b"data"),
    ("empty.txt", b""),
])
def test_upload_rejects_bad_input(service, name, data):
    with pytest.raises(InvalidRequest):
        service.upload(name, data)


def test_upload_rejects_oversize(service):
    with pytest.raises(InvalidRequest, match="limit"):
        service.upload("big.txt", b"x" * 1025)


@pytest.mark.parametrize("name", ["legacy.doc", "notes.rtf", "no_extension"])
def test_upload_rejects_unsupported_types(service, name):
    with pytest.raises(UnsupportedFormat):
        service.upload(name, b"data")
    assert service.list_documents() == []


def test_corrupt_file_ends_in_error(service):
    document = service.upload("broken.pdf", b"not really a pdf")
    final = service.wait(document.id, timeout=10)

    assert final.status == DocumentStatus.ERROR
    assert final.error_message


def test_list_documents(service):
    first = service.upload("a.txt", b"A.")
    second = service.upload("b.txt", b"B.")
    assert {d.id for d in service.list_documents()} == {first.id, second.id}


def test_content_before_extraction_is_empty(store, file_store):
    ingestion = MagicMock(spec=IngestionPipeline)
    service = DocumentService(store, file_store, ingestion)

    document = service.upload("sky.txt", b"The sky is blue.")

    ingestion.submit.assert_called_once_with(document.id)
    assert service.get_content(document.id) == ""
    assert service.get_chunks(document.id) == []


def test_store_failure_removes_saved_file(file_store):
    store = MagicMock()
    store.add_document.side_effect = StorageUnavailable("database is locked")
    ingestion = MagicMock(spec=IngestionPipeline)
    service = DocumentService(store, file_store, ingestion)

    with pytest.raises(StorageUnavailable):
        service.upload("sky.txt", b"The sky is blue.")

    assert list(file_store.root.iterdir()) == []
    ingestion.submit.assert_not_called()


def test_delete_removes_everything(service, app, sky_text):
    document = service.upload("sky.txt", sky_text.encode())
    service.wait(document.id, timeout=10)

    service.delete(document.id)

    with pytest.raises(NotFound):
        service.get_document(document.id)
    assert app.store.find_chunks([document.id]) == []
    assert not app.files.exists(document.file_path)


def test_delete_missing(service):
    with pytest.raises(NotFound):
        service.delete("missing")


def test_get_chunks_of_missing_document(service):
    with pytest.raises(NotFound):
        service.get_chunks("missing")


class IngestOnDeleteStore(InMemoryStore):
    """Lets a queued ingestion finish just as the record is being deleted."""

    pipeline = None

    def delete_document(self, document_id):
        self.pipeline.ingest(document_id)
        super().delete_document(document_id)


def test_ingestion_finishing_during_delete_leaves_no_chunks(file_store):
    store = IngestOnDeleteStore()
    service = DocumentService(store, file_store, MagicMock(spec=IngestionPipeline))
    document = service.upload("sky.txt", b"The sky is blue. Grass is green. Water is wet.")

    with IngestionPipeline(store, file_store) as pipeline:
        store.pipeline = pipeline
        service.delete(document.id)

    assert store.find_chunks([document.id]) == []
    with pytest.raises(NotFound):
        store.get_document(document.id)


def test_ingestion_after_delete_leaves_no_chunks(store, file_store):
    service = DocumentService(store, file_store, MagicMock(spec=IngestionPipeline))
    document = service.upload("sky.txt", b"The sky is blue. Grass is green. Water is wet.")
    pipeline = IngestionPipeline(store, file_store)

    stale = document.advance(80)
    original_get = store.get_document
    store.get_document = lambda document_id: stale if document_id == document.id else original_get(document_id)
    service.delete(document.id)
    with pipeline:
        final = pipeline.ingest(document.id)

    assert final.status == DocumentStatus.ERROR
    assert store.find_chunks([document.id]) == []


def test_delete_cancels_queued_ingestion(store, file_store):
    ingestion = MagicMock(spec=IngestionPipeline)
    service = DocumentService(store, file_store, ingestion)
    document = service.upload("sky.txt", b"The sky is blue.")

    service.delete(document.id)

    ingestion.submit.return_value.cancel.assert_called_once()
