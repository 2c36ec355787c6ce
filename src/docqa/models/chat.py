"""
Chat session and message models.

A session is scoped to a fixed set of documents. Messages are written in
user/assistant pairs, one pair per question.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .document import new_id, utcnow


class MessageRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class SourceCitation(BaseModel):
    """One retrieved chunk quoted as support for an answer."""

    model_config = ConfigDict(frozen=True)

    document: str = Field(description="Name of the source document")
    page: Optional[int] = Field(default=None)
    chunk: str = Field(description="Excerpt of the chunk text")
    relevance: float = Field(ge=0.0, le=1.0)


class ChatSession(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    name: str
    documents: list[str] = Field(min_length=1, description="Ids of the documents in scope")
    last_message: str = Field(default="")
    last_message_at: datetime = Field(default_factory=utcnow)
    message_count: int = Field(default=0, ge=0)
    created_at: datetime = Field(default_factory=utcnow)

    def record_exchange(self, question: str) -> "ChatSession":
        """Snapshot after one question/answer pair was stored."""
        return self.model_copy(update={
            "last_message": question,
            "last_message_at": utcnow(),
            "message_count": self.message_count + 2,
        })


class ChatMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    session_id: str
    role: MessageRole
    content: str
    sources: list[SourceCitation] = Field(default_factory=list)
    response_time: Optional[float] = Field(
        default=None,
        description="Milliseconds spent producing the answer (assistant only)",
    )
    created_at: datetime = Field(default_factory=utcnow)
