"""
Chat service — document-scoped sessions and their message history.

A session names the documents it may draw on when it is created. Each
question runs the query pipeline over that set and stores a
user/assistant message pair.
"""

import structlog

from docqa.base.store import BaseStore
from docqa.exceptions import InvalidRequest, NotFound
from docqa.models.chat import ChatMessage, ChatSession, MessageRole
from docqa.pipelines.query import QueryPipeline

logger = structlog.get_logger(__name__)


class ChatService:

    def __init__(self, store: BaseStore, query: QueryPipeline):
        self._store = store
        self._query = query

    def create_session(self, name: str, document_ids: list[str]) -> ChatSession:
        """
        Raises:
            InvalidRequest: Missing name or no documents.
            NotFound: One of the documents does not exist.
        """
        if not name or not name.strip():
            raise InvalidRequest("Session name is required")
        ids = list(dict.fromkeys(document_ids or []))
        if not ids:
            raise InvalidRequest("At least one document ID is required")

        found = {doc.id for doc in self._store.get_documents(ids)}
        missing = [i for i in ids if i not in found]
        if missing:
            raise NotFound("Document", ", ".join(missing))

        session = self._store.add_session(ChatSession(name=name.strip(), documents=ids))
        logger.info("chat_session_created", session_id=session.id, documents=len(ids))
        return session

    def list_sessions(self) -> list[ChatSession]:
        return self._store.list_sessions()

    def get_session(self, session_id: str) -> ChatSession:
        return self._store.get_session(session_id)

    def get_messages(self, session_id: str) -> list[ChatMessage]:
        self._store.get_session(session_id)
        return self._store.list_messages(session_id)

    def send_message(self, session_id: str, question: str) -> tuple[ChatMessage, ChatMessage]:
        """
        Ask a question within a session.

        The answer is produced before anything is written, so a failed
        query leaves the history untouched.

        Returns:
            The stored (user message, assistant message) pair.
        """
        question = (question or "").strip()
        if not question:
            raise InvalidRequest("Question is required")

        session = self._store.get_session(session_id)
        user_message = ChatMessage(session_id=session.id, role=MessageRole.USER, content=question)

        response = self._query.answer(question, session.documents)

        assistant_message = ChatMessage(
            session_id=session.id,
            role=MessageRole.ASSISTANT,
            content=response.answer,
            sources=response.sources,
            response_time=response.response_time,
        )
        self._store.add_messages([user_message, assistant_message])
        self._store.save_session(session.record_exchange(question))

        logger.info(
            "chat_message_answered",
            session_id=session.id,
            sources=len(response.sources),
            response_time_ms=round(response.response_time, 1),
        )
        return user_message, assistant_message

    def delete_session(self, session_id: str) -> None:
        self._store.delete_session(session_id)
        logger.info("chat_session_deleted", session_id=session_id)
