"""
DocQA: one object wiring every component for a process.

    from docqa import DocQA

    with DocQA() as app:
        doc = app.documents.upload("notes.txt", b"The sky is blue. Grass is green.")
        app.documents.wait(doc.id)

        session = app.chat.create_session("Colours", [doc.id])
        user, assistant = app.chat.send_message(session.id, "What color is the sky?")
        print(assistant.content)

Build it once at startup and pass it (or its services) to whatever handles
requests. Every component can be replaced by passing an instance:

    app = DocQA(config, store=my_store, composer=my_composer)
"""

from docqa.base.indexer import BaseChunker, BaseExtractor
from docqa.base.retriever import BaseComposer, BaseScorer
from docqa.base.store import BaseFileStore, BaseStore
from docqa.config import DocQAConfig
from docqa.generation.compose import get_composer
from docqa.indexing.chunking import get_chunker
from docqa.indexing.extraction import TextExtractor
from docqa.pipelines.ingestion import IngestionPipeline
from docqa.pipelines.query import QueryPipeline
from docqa.retrieval.scoring import KeywordScorer
from docqa.services.chat import ChatService
from docqa.services.documents import DocumentService
from docqa.storage import LocalFileStore, create_store
from docqa.utils.logging import configure_logging, route_to_stdlib


class DocQA:
    """
    Document question answering: ingestion, retrieval and chat services.

    All configuration is optional; DocQA() gives an in-memory store,
    files under ./uploads, sentence chunking, keyword scoring and
    template answers.
    """

    def __init__(
        self,
        config: DocQAConfig = None,
        store: BaseStore = None,
        files: BaseFileStore = None,
        extractor: BaseExtractor = None,
        chunker: BaseChunker = None,
        scorer: BaseScorer = None,
        composer: BaseComposer = None,
    ):
        self.config = config or DocQAConfig()

        if self.config.logging is not None:
            configure_logging(self.config.logging)
        else:
            route_to_stdlib()

        self.store = store or create_store(self.config.storage)
        self.files = files or LocalFileStore(self.config.storage.upload_dir)
        extractor = extractor or TextExtractor()

        self.ingestion = IngestionPipeline(
            store=self.store,
            files=self.files,
            extractor=extractor,
            chunker=chunker or get_chunker(self.config.chunking),
            config=self.config.ingestion,
        )
        self.query = QueryPipeline(
            store=self.store,
            scorer=scorer or KeywordScorer(self.config.retriever),
            composer=composer or get_composer(self.config.generation),
            config=self.config.retriever,
        )

        self.documents = DocumentService(
            store=self.store,
            files=self.files,
            ingestion=self.ingestion,
            extractor=extractor,
            config=self.config.ingestion,
        )
        self.chat = ChatService(store=self.store, query=self.query)

    def ask(self, question: str, document_ids: list[str]):
        """Answer a question outside any chat session."""
        return self.query.answer(question, document_ids)

    def close(self) -> None:
        """Finish queued ingestion, then release the store."""
        self.ingestion.shutdown(wait=True)
        self.store.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
