"""
Lexical relevance scoring.

The query-side "retriever": scores every candidate chunk against the
question, drops the weak ones and keeps the best k.

Scoring rule:
    tokens = whitespace-split, lowercased query, punctuation trimmed
    score  = min(token_weight * (tokens found in the chunk text), 1.0)

"Found" is a case-insensitive substring test, so "rain" matches
"raining". Repeated query tokens count once per repetition.

The score is a plain keyword-overlap heuristic, not semantic similarity.
It is deterministic: the same question over the same chunks always gives
the same scores and the same order. An embedding scorer can replace it
behind BaseScorer.

Usage:
    from docqa.retrieval.scoring import KeywordScorer
    from docqa.config import RetrieverConfig

    scorer = KeywordScorer(RetrieverConfig(k=3, min_score=0.2))
    result = scorer.rank("What color is the sky?", candidates)
"""

import string

from docqa.base.retriever import BaseScorer
from docqa.config import RetrieverConfig
from docqa.models.document import ScoredChunk
from docqa.models.result import RetrievalResult

# Characters trimmed from both ends of a query token ("sky?" → "sky")
_TOKEN_STRIP = string.punctuation + "“”‘’«»"


def tokenize(query: str) -> list[str]:
    tokens = (word.strip(_TOKEN_STRIP) for word in query.lower().split())
    return [t for t in tokens if t]


class KeywordScorer(BaseScorer):
    """
    Keyword-overlap scorer with a threshold and a result cap.

    Chunks must score strictly above config.min_score. Sorting is stable,
    so equal scores keep the order the candidates came in (document order,
    then chunk_index).
    """

    def __init__(self, config: RetrieverConfig = None):
        self._config = config or RetrieverConfig()

    def score(self, query: str, text: str) -> float:
        return self._score_tokens(tokenize(query), text)

    def _score_tokens(self, tokens: list[str], text: str) -> float:
        haystack = text.lower()
        hits = sum(1 for token in tokens if token in haystack)
        # Multiply rather than accumulate so 2 hits is exactly 2 * weight
        return min(hits * self._config.token_weight, 1.0)

    def rank(self, query: str, candidates: list[ScoredChunk], k: int = None) -> RetrievalResult:
        if k is None:
            k = self._config.k
        tokens = tokenize(query)

        scored = []
        for candidate in candidates:
            value = self._score_tokens(tokens, candidate.chunk.content)
            if value > self._config.min_score:
                scored.append(candidate.model_copy(update={"score": value}))

        scored.sort(key=lambda c: c.score, reverse=True)

        ranked = [
            c.model_copy(update={"rank": rank})
            for rank, c in enumerate(scored[:k])
        ]

        return RetrievalResult(
            chunks=ranked,
            query_used=query,
            strategy="keyword",
            total_candidates=len(candidates),
        )
