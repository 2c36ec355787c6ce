"""
Query: question + document scope → answer with citations.

    1. Load the chunks of exactly the documents in scope
    2. Score and rank them (BaseScorer)
    3. Compose the answer (BaseComposer)
    4. Turn the ranked chunks into citations with short excerpts

The document scope is the only access boundary: chunks from other
documents are never loaded, and any that a store returns anyway are
dropped before scoring.

Errors propagate. The caller gets a complete QueryResponse or an
exception, never a partial answer.
"""

import time

import structlog

from docqa.base.retriever import BaseComposer, BaseScorer
from docqa.base.store import BaseStore
from docqa.config import RetrieverConfig
from docqa.generation.compose import TemplateComposer
from docqa.models.chat import SourceCitation
from docqa.models.document import ScoredChunk
from docqa.models.result import QueryResponse, RetrievalResult
from docqa.retrieval.scoring import KeywordScorer
from docqa.utils.helpers import truncate_excerpt

logger = structlog.get_logger(__name__)


class QueryPipeline:

    def __init__(
        self,
        store: BaseStore,
        scorer: BaseScorer = None,
        composer: BaseComposer = None,
        config: RetrieverConfig = None,
    ):
        self._store = store
        self._config = config or RetrieverConfig()
        self._scorer = scorer or KeywordScorer(self._config)
        self._composer = composer or TemplateComposer()

    def retrieve(self, question: str, document_ids: list[str]) -> RetrievalResult:
        """Rank the in-scope chunks for a question without composing an answer."""
        scope = list(dict.fromkeys(document_ids))
        names = {doc.id: doc.name for doc in self._store.get_documents(scope)}

        missing = [i for i in scope if i not in names]
        if missing:
            logger.warning("documents_missing_from_scope", document_ids=missing)

        candidates = [
            ScoredChunk(chunk=chunk, document_name=names[chunk.document_id])
            for chunk in self._store.find_chunks(list(names))
            if chunk.document_id in names
        ]
        if not candidates:
            logger.info("no_chunks_in_scope", documents=len(scope))

        return self._scorer.rank(question, candidates)

    def answer(self, question: str, document_ids: list[str]) -> QueryResponse:
        """
        Answer a question from the given documents.

        Args:
            question: The user's question.
            document_ids: Documents the answer may draw on.

        Returns:
            QueryResponse with the answer, citations and end-to-end time in ms.
        """
        started = time.perf_counter()

        retrieval = self.retrieve(question, document_ids)
        generation = self._composer.compose(question, retrieval)
        sources = [self._cite(scored) for scored in retrieval.chunks]

        response_time = (time.perf_counter() - started) * 1000
        logger.info(
            "question_answered",
            candidates=retrieval.total_candidates,
            sources=len(sources),
            model=generation.model,
            response_time_ms=round(response_time, 1),
        )

        return QueryResponse(
            answer=generation.answer,
            sources=sources,
            response_time=response_time,
        )

    def _cite(self, scored: ScoredChunk) -> SourceCitation:
        return SourceCitation(
            document=scored.document_name,
            page=scored.chunk.metadata.page,
            chunk=truncate_excerpt(scored.chunk.content, self._config.excerpt_length),
            relevance=scored.score,
        )
