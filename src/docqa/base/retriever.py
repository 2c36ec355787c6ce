"""
Abstract base classes for scoring and answer composition.

The query side has two swappable pieces:
    - a scorer ranks candidate chunks for a question
    - a composer turns the ranked chunks into an answer

A keyword scorer and a template composer ship by default. An embedding
scorer or an LLM composer slot in behind the same interfaces without the
query pipeline noticing.
"""

from abc import ABC, abstractmethod

from docqa.models.document import ScoredChunk
from docqa.models.result import GenerationResult, RetrievalResult


class BaseScorer(ABC):
    """
    Contract for relevance scorers.

    Candidates arrive as ScoredChunks with score 0 (the chunk plus its
    document name). The scorer fills in scores, filters and ranks.
    """

    @abstractmethod
    def rank(self, query: str, candidates: list[ScoredChunk]) -> RetrievalResult:
        """
        Score, filter and order candidates for a query.

        Args:
            query: The user's question.
            candidates: Chunks to consider, in their stored order.

        Returns:
            RetrievalResult with the best chunks, highest score first.
        """
        ...


class BaseComposer(ABC):
    """
    Contract for answer composers.

    Every composer receives a RetrievalResult and returns a GenerationResult.
    It must handle an empty retrieval without raising.
    """

    @abstractmethod
    def compose(self, query: str, retrieval: RetrievalResult) -> GenerationResult:
        """
        Produce an answer from ranked chunks.

        Args:
            query: The original user question.
            retrieval: Ranked chunks from a scorer.

        Returns:
            GenerationResult with the answer text and elapsed time.
        """
        ...
