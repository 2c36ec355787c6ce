"""
In-memory record store.

Keeps everything in dicts behind one lock. Records are frozen pydantic
models, so handing out the stored objects is safe: nobody can change them
in place.

Good for tests and single-process demos. Nothing survives a restart.
"""

import threading
from typing import Iterable

from docqa.base.store import BaseStore
from docqa.exceptions import NotFound
from docqa.models.chat import ChatMessage, ChatSession
from docqa.models.document import Chunk, Document


class InMemoryStore(BaseStore):

    def __init__(self):
        self._lock = threading.RLock()
        self._documents: dict[str, Document] = {}
        self._chunks: dict[str, list[Chunk]] = {}
        self._sessions: dict[str, ChatSession] = {}
        self._messages: dict[str, list[ChatMessage]] = {}

    # -- documents ----------------------------------------------------------

    def add_document(self, document: Document) -> Document:
        with self._lock:
            self._documents[document.id] = document
        return document

    def get_document(self, document_id: str) -> Document:
        with self._lock:
            try:
                return self._documents[document_id]
            except KeyError:
                raise NotFound("Document", document_id) from None

    def get_documents(self, document_ids: Iterable[str]) -> list[Document]:
        with self._lock:
            return [self._documents[i] for i in document_ids if i in self._documents]

    def list_documents(self) -> list[Document]:
        with self._lock:
            documents = list(self._documents.values())
        return sorted(documents, key=lambda d: d.created_at, reverse=True)

    def save_document(self, document: Document) -> Document:
        with self._lock:
            if document.id not in self._documents:
                raise NotFound("Document", document.id)
            self._documents[document.id] = document
        return document

    def delete_document(self, document_id: str) -> None:
        with self._lock:
            if self._documents.pop(document_id, None) is None:
                raise NotFound("Document", document_id)

    # -- chunks -------------------------------------------------------------

    def insert_chunks(self, chunks: list[Chunk]) -> int:
        grouped: dict[str, list[Chunk]] = {}
        for chunk in chunks:
            grouped.setdefault(chunk.document_id, []).append(chunk)

        # One lock for the whole batch: readers see all of it or none of it
        with self._lock:
            for document_id, batch in grouped.items():
                stored = self._chunks.setdefault(document_id, [])
                stored.extend(batch)
                stored.sort(key=lambda c: c.chunk_index)
        return len(chunks)

    def find_chunks(self, document_ids: Iterable[str]) -> list[Chunk]:
        found: list[Chunk] = []
        seen = set()
        with self._lock:
            for document_id in document_ids:
                if document_id in seen:
                    continue
                seen.add(document_id)
                found.extend(self._chunks.get(document_id, []))
        return found

    def delete_chunks(self, document_id: str) -> int:
        with self._lock:
            return len(self._chunks.pop(document_id, []))

    # -- chat ---------------------------------------------------------------

    def add_session(self, session: ChatSession) -> ChatSession:
        with self._lock:
            self._sessions[session.id] = session
        return session

    def get_session(self, session_id: str) -> ChatSession:
        with self._lock:
            try:
                return self._sessions[session_id]
            except KeyError:
                raise NotFound("Chat session", session_id) from None

    def list_sessions(self) -> list[ChatSession]:
        with self._lock:
            sessions = list(self._sessions.values())
        return sorted(sessions, key=lambda s: s.last_message_at, reverse=True)

    def save_session(self, session: ChatSession) -> ChatSession:
        with self._lock:
            if session.id not in self._sessions:
                raise NotFound("Chat session", session.id)
            self._sessions[session.id] = session
        return session

    def delete_session(self, session_id: str) -> None:
        with self._lock:
            if self._sessions.pop(session_id, None) is None:
                raise NotFound("Chat session", session_id)
            self._messages.pop(session_id, None)

    def add_messages(self, messages: list[ChatMessage]) -> None:
        with self._lock:
            for message in messages:
                self._messages.setdefault(message.session_id, []).append(message)

    def list_messages(self, session_id: str) -> list[ChatMessage]:
        with self._lock:
            return list(self._messages.get(session_id, []))
