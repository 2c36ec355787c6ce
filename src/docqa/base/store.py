"""
Abstract storage boundaries.

BaseStore holds records (documents, chunks, sessions, messages).
BaseFileStore holds uploaded bytes. The pipelines only see these
interfaces, never a database query language, so the in-memory store used
in tests and the SQL store used in deployment are interchangeable.

Every implementation reports failures of the underlying medium as
StorageUnavailable and missing records as NotFound.
"""

from abc import ABC, abstractmethod
from typing import Iterable

from docqa.models.chat import ChatMessage, ChatSession
from docqa.models.document import Chunk, Document


class BaseStore(ABC):
    """Contract for record stores."""

    # -- documents ----------------------------------------------------------

    @abstractmethod
    def add_document(self, document: Document) -> Document:
        ...

    @abstractmethod
    def get_document(self, document_id: str) -> Document:
        """Raises NotFound if the document does not exist."""
        ...

    @abstractmethod
    def get_documents(self, document_ids: Iterable[str]) -> list[Document]:
        """Existing documents among document_ids. Unknown ids are skipped."""
        ...

    @abstractmethod
    def list_documents(self) -> list[Document]:
        """All documents, newest first."""
        ...

    @abstractmethod
    def save_document(self, document: Document) -> Document:
        """Persist a snapshot of an existing document. Raises NotFound otherwise."""
        ...

    @abstractmethod
    def delete_document(self, document_id: str) -> None:
        ...

    def update_document(self, document_id: str, **fields) -> Document:
        """Apply field updates to the stored document and persist the result."""
        current = self.get_document(document_id)
        return self.save_document(current.model_copy(update=fields))

    # -- chunks -------------------------------------------------------------

    @abstractmethod
    def insert_chunks(self, chunks: list[Chunk]) -> int:
        """Insert a batch in one write. Returns how many were inserted."""
        ...

    @abstractmethod
    def find_chunks(self, document_ids: Iterable[str]) -> list[Chunk]:
        """
        Chunks belonging to any of document_ids.

        Ordered by the position of the document in document_ids, then by
        chunk_index. Chunks of other documents are never returned.
        """
        ...

    @abstractmethod
    def delete_chunks(self, document_id: str) -> int:
        ...

    # -- chat ---------------------------------------------------------------

    @abstractmethod
    def add_session(self, session: ChatSession) -> ChatSession:
        ...

    @abstractmethod
    def get_session(self, session_id: str) -> ChatSession:
        """Raises NotFound if the session does not exist."""
        ...

    @abstractmethod
    def list_sessions(self) -> list[ChatSession]:
        """All sessions, most recent activity first."""
        ...

    @abstractmethod
    def save_session(self, session: ChatSession) -> ChatSession:
        ...

    @abstractmethod
    def delete_session(self, session_id: str) -> None:
        """Delete a session and all its messages."""
        ...

    @abstractmethod
    def add_messages(self, messages: list[ChatMessage]) -> None:
        ...

    @abstractmethod
    def list_messages(self, session_id: str) -> list[ChatMessage]:
        """Messages of a session, oldest first."""
        ...

    def close(self) -> None:
        """Release connections. No-op by default."""


class BaseFileStore(ABC):
    """
    Contract for uploaded file storage.

    A handle is whatever save() returned. Callers record it on the
    Document and pass it back unchanged.
    """

    @abstractmethod
    def save(self, filename: str, data: bytes) -> str:
        """Store bytes and return the handle."""
        ...

    @abstractmethod
    def read_bytes(self, handle: str) -> bytes:
        """Raises NotFound if nothing is stored under handle."""
        ...

    @abstractmethod
    def exists(self, handle: str) -> bool:
        ...

    @abstractmethod
    def delete(self, handle: str) -> bool:
        """Remove the stored bytes. Returns False if there was nothing to remove."""
        ...
