"""
Ingestion: uploaded file → extracted text → stored chunks.

Each document walks one path:

    processing(10)   picked up, file being read
    processing(50)   text extracted, content stored on the document
    processing(80)   text chunked
    processed(100)   chunks inserted, chunk count recorded

or drops out at any step to error(message), which is terminal. Nothing
retries automatically.

Every step writes a new Document snapshot. Chunks are inserted before the
final processed snapshot, so a crash part-way through leaves the document
visibly unfinished, never "processed" without its chunks. A failure after
the insert removes the inserted chunks again.

Work is submitted to a bounded thread pool. submit() returns a Future that
resolves to the final snapshot; callers can wait on it or just poll the
document's status in the store.

Usage:
    pipeline = IngestionPipeline(store, files)
    future = pipeline.submit(document.id)
    final = future.result()
    assert final.status == DocumentStatus.PROCESSED
"""

from concurrent.futures import Future, ThreadPoolExecutor

import structlog

from docqa.base.indexer import BaseChunker, BaseExtractor
from docqa.base.store import BaseFileStore, BaseStore
from docqa.config import ChunkingConfig, IngestionConfig
from docqa.exceptions import DocQAError, NotFound
from docqa.indexing.chunking import get_chunker
from docqa.indexing.extraction import TextExtractor
from docqa.models.document import Document, DocumentStatus

logger = structlog.get_logger(__name__)

PROGRESS_STARTED = 10
PROGRESS_EXTRACTED = 50
PROGRESS_CHUNKED = 80


class IngestionPipeline:
    """
    Runs extraction and chunking for stored documents.

    All dependencies are passed in; one instance serves the whole process.
    """

    def __init__(
        self,
        store: BaseStore,
        files: BaseFileStore,
        extractor: BaseExtractor = None,
        chunker: BaseChunker = None,
        config: IngestionConfig = None,
    ):
        self._store = store
        self._files = files
        self._extractor = extractor or TextExtractor()
        self._chunker = chunker or get_chunker(ChunkingConfig())
        self._config = config or IngestionConfig()
        self._executor = ThreadPoolExecutor(
            max_workers=self._config.max_workers,
            thread_name_prefix="docqa-ingest",
        )

    def submit(self, document_id: str) -> "Future[Document]":
        """
        Queue a document for ingestion and return immediately.

        The Future resolves to the final Document snapshot (processed or
        error). It only raises if the document itself can't be found or
        its error state can't be written.
        """
        logger.info("ingestion_submitted", document_id=document_id)
        return self._executor.submit(self.ingest, document_id)

    def ingest(self, document_id: str) -> Document:
        """
        Ingest one document synchronously.

        processed and error are terminal: a document already in either state
        is returned as stored and its chunks are left alone.

        Returns:
            The final snapshot: status processed or error.

        Raises:
            NotFound: The document does not exist.
        """
        document = self._store.get_document(document_id)
        if document.status != DocumentStatus.PROCESSING:
            logger.info("ingestion_skipped", document_id=document.id, status=document.status.value)
            return document

        inserted = False

        try:
            document = self._store.save_document(document.advance(PROGRESS_STARTED))

            data = self._files.read_bytes(document.file_path)
            pages = self._extractor.extract_pages(data, document.file_type)
            content = "\n\n".join(p.page_content for p in pages if p.page_content)
            document = self._store.save_document(
                document.advance(PROGRESS_EXTRACTED, content=content)
            )

            chunks = self._chunker.chunk(pages, document.id)
            document = self._store.save_document(document.advance(PROGRESS_CHUNKED))

            # Leftovers of an interrupted earlier run would break the 0..N-1 indices
            self._store.delete_chunks(document.id)
            inserted = True
            self._store.insert_chunks(chunks)

            document = self._store.save_document(document.mark_processed(len(chunks)))

        except Exception as e:
            return self._fail(document, e, remove_chunks=inserted)

        logger.info(
            "document_processed",
            document_id=document.id,
            name=document.name,
            chunks=document.chunks,
        )
        return document

    def _fail(self, document: Document, error: Exception, remove_chunks: bool) -> Document:
        message = str(error) or type(error).__name__
        if isinstance(error, DocQAError):
            logger.warning("document_failed", document_id=document.id, error=message)
        else:
            logger.exception("document_failed", document_id=document.id, error=message)

        if remove_chunks:
            try:
                self._store.delete_chunks(document.id)
            except DocQAError:
                logger.exception("chunk_cleanup_failed", document_id=document.id)

        failed = document.mark_failed(message)
        try:
            return self._store.save_document(failed)
        except NotFound:
            # Deleted while we were working on it; nothing left to mark
            logger.info("document_deleted_during_ingestion", document_id=document.id)
            return failed

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.shutdown(wait=True)
