"""
Retrieval components — score and rank chunks for a question.

    from docqa.retrieval import KeywordScorer
"""

from .scoring import KeywordScorer, tokenize

__all__ = [
    "KeywordScorer",
    "tokenize",
]
