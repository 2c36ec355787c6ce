"""
Document service — upload, inspect and delete documents.

What a web layer calls for the documents pages. Upload stores the bytes,
records the document and hands it to the ingestion pipeline without
waiting for it.
"""

import os
import threading
from concurrent.futures import Future
from typing import Optional

import structlog

from docqa.base.indexer import BaseExtractor
from docqa.base.store import BaseFileStore, BaseStore
from docqa.config import IngestionConfig
from docqa.exceptions import InvalidRequest, UnsupportedFormat
from docqa.indexing.extraction import TextExtractor, normalize_file_type
from docqa.models.document import Chunk, Document
from docqa.pipelines.ingestion import IngestionPipeline

logger = structlog.get_logger(__name__)


class DocumentService:

    def __init__(
        self,
        store: BaseStore,
        files: BaseFileStore,
        ingestion: IngestionPipeline,
        extractor: BaseExtractor = None,
        config: IngestionConfig = None,
    ):
        self._store = store
        self._files = files
        self._ingestion = ingestion
        self._extractor = extractor or TextExtractor()
        self._config = config or IngestionConfig()
        self._pending: dict[str, Future] = {}
        self._pending_lock = threading.Lock()

    def upload(self, filename: str, data: bytes) -> Document:
        """
        Store a new file and start ingesting it in the background.

        Returns:
            The document as recorded before ingestion (status processing,
            progress 0). Poll get_document() or call wait() for the outcome.

        Raises:
            InvalidRequest: No file name, empty file, or file too large.
            UnsupportedFormat: The extension has no extractor.
        """
        if not filename or not filename.strip():
            raise InvalidRequest("A file name is required")
        if not data:
            raise InvalidRequest("No file uploaded")
        if len(data) > self._config.max_upload_bytes:
            raise InvalidRequest(
                f"File is {len(data)} bytes; the limit is {self._config.max_upload_bytes}"
            )

        file_type = normalize_file_type(os.path.splitext(filename)[1])
        if not self._extractor.supports(file_type):
            raise UnsupportedFormat(file_type or filename)

        handle = self._files.save(filename, data)
        document = Document(
            name=filename.strip(),
            file_type=file_type,
            size=len(data),
            file_path=handle,
        )
        try:
            self._store.add_document(document)
        except Exception:
            self._files.delete(handle)
            raise
        logger.info("document_uploaded", document_id=document.id, name=document.name, size=document.size)

        future = self._ingestion.submit(document.id)
        with self._pending_lock:
            self._pending[document.id] = future
        future.add_done_callback(lambda _: self._forget(document.id))

        return document

    def _forget(self, document_id: str) -> None:
        with self._pending_lock:
            self._pending.pop(document_id, None)

    def wait(self, document_id: str, timeout: Optional[float] = None) -> Document:
        """
        Block until a pending ingestion finishes and return the final snapshot.

        If nothing is pending for the document, returns what is stored.
        """
        with self._pending_lock:
            future = self._pending.get(document_id)
        if future is not None:
            return future.result(timeout=timeout)
        return self._store.get_document(document_id)

    def list_documents(self) -> list[Document]:
        return self._store.list_documents()

    def get_document(self, document_id: str) -> Document:
        return self._store.get_document(document_id)

    def get_content(self, document_id: str) -> str:
        """Extracted text of a document ("" until extraction has run)."""
        return self._store.get_document(document_id).content or ""

    def get_chunks(self, document_id: str) -> list[Chunk]:
        self._store.get_document(document_id)
        return self._store.find_chunks([document_id])

    def delete(self, document_id: str) -> None:
        """
        Delete a document with its chunks and its stored file.

        Raises:
            NotFound: The document does not exist.
        """
        document = self._store.get_document(document_id)

        with self._pending_lock:
            future = self._pending.get(document_id)
        if future is not None:
            future.cancel()

        # Record first: an ingestion still running fails its next save and
        # removes its own chunks, anything it inserted before is swept here
        self._store.delete_document(document_id)
        removed = self._store.delete_chunks(document_id)
        if not self._files.delete(document.file_path):
            logger.warning("document_file_missing", document_id=document_id, handle=document.file_path)

        logger.info("document_deleted", document_id=document_id, chunks=removed)
