"""
Result models for retrieval and generation outputs.

These are what the query pipeline hands back to callers.
"""

from pydantic import BaseModel, Field

from .chat import SourceCitation
from .document import ScoredChunk


class RetrievalResult(BaseModel):
    """
    Output of the scoring stage.

    Bundles the ranked chunks with how many candidates were considered,
    so the caller can tell "nothing matched" from "nothing to search".
    """

    chunks: list[ScoredChunk] = Field(default_factory=list)
    query_used: str = Field(description="The query the chunks were scored against")
    strategy: str = Field(default="keyword", description="Scoring strategy used")
    total_candidates: int = Field(
        default=0,
        description="How many chunks were scored before filtering",
    )


class GenerationResult(BaseModel):
    """Output of the answer composer."""

    answer: str = Field(description="The composed answer")
    model: str = Field(default="", description="What produced this answer")
    elapsed_ms: float = Field(default=0.0, ge=0.0, description="Time spent composing")


class QueryResponse(BaseModel):
    """
    The complete response to a question.

    Either the whole thing is returned or the query raised. There is no
    partially filled response.
    """

    answer: str
    sources: list[SourceCitation] = Field(default_factory=list)
    response_time: float = Field(ge=0.0, description="End-to-end milliseconds")
