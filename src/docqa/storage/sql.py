"""
SQLAlchemy record store.

Persists documents, chunks, chat sessions and messages in any database
SQLAlchemy can reach (SQLite by default). Every public method runs in its
own short session and commits before returning, so a batch of chunks is
visible all at once or not at all.

Database errors surface as StorageUnavailable; callers never see
SQLAlchemy exception types.
"""

from contextlib import contextmanager
from datetime import timezone
from typing import Iterable

import structlog
from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    TypeDecorator,
    create_engine,
    delete,
    select,
)
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from docqa.base.store import BaseStore
from docqa.exceptions import NotFound, StorageUnavailable
from docqa.models.chat import ChatMessage, ChatSession
from docqa.models.document import Chunk, ChunkMetadata, Document

logger = structlog.get_logger(__name__)

Base = declarative_base()


class UTCDateTime(TypeDecorator):
    """Timezone-aware datetimes, even on backends (SQLite) that drop the zone."""

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_result_value(self, value, dialect):
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class DocumentRow(Base):
    __tablename__ = "documents"

    id = Column(String(32), primary_key=True)
    name = Column(String(255), nullable=False)
    file_type = Column(String(16), nullable=False)
    size = Column(Integer, nullable=False)
    file_path = Column(String(500), nullable=False)
    status = Column(String(20), nullable=False, index=True)
    processing_progress = Column(Integer, nullable=False, default=0)
    error_message = Column(Text)
    chunks = Column(Integer, nullable=False, default=0)
    content = Column(Text)
    created_at = Column(UTCDateTime, nullable=False, index=True)
    updated_at = Column(UTCDateTime, nullable=False)


class ChunkRow(Base):
    __tablename__ = "document_chunks"

    id = Column(String(32), primary_key=True)
    document_id = Column(String(32), ForeignKey("documents.id"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    chunk_index = Column(Integer, nullable=False)
    page = Column(Integer)
    section = Column(String(255))
    created_at = Column(UTCDateTime, nullable=False)

    __table_args__ = (
        Index("ix_document_chunks_doc_idx", "document_id", "chunk_index", unique=True),
    )


class SessionRow(Base):
    __tablename__ = "chat_sessions"

    id = Column(String(32), primary_key=True)
    name = Column(String(255), nullable=False)
    documents = Column(JSON, nullable=False)
    last_message = Column(Text, nullable=False, default="")
    last_message_at = Column(UTCDateTime, nullable=False, index=True)
    message_count = Column(Integer, nullable=False, default=0)
    created_at = Column(UTCDateTime, nullable=False)


class MessageRow(Base):
    __tablename__ = "chat_messages"

    id = Column(String(32), primary_key=True)
    session_id = Column(String(32), ForeignKey("chat_sessions.id"), nullable=False, index=True)
    role = Column(String(16), nullable=False)
    content = Column(Text, nullable=False)
    sources = Column(JSON, nullable=False, default=list)
    response_time = Column(Float)
    created_at = Column(UTCDateTime, nullable=False, index=True)


def create_db_engine(database_url: str, echo: bool = False):
    """Engine with the SQLite threading settings the worker pool needs."""
    engine_kwargs = {"echo": echo}

    if database_url.startswith("sqlite"):
        engine_kwargs["connect_args"] = {"check_same_thread": False}
        if database_url in {"sqlite://", "sqlite:///:memory:"}:
            # One shared connection, otherwise every session gets an empty database
            engine_kwargs["poolclass"] = StaticPool
    else:
        engine_kwargs["pool_pre_ping"] = True

    return create_engine(database_url, **engine_kwargs)


# ---------------------------------------------------------------------------
# Row ↔ model conversion
# ---------------------------------------------------------------------------

def _document_values(document: Document) -> dict:
    values = document.model_dump()
    values["status"] = document.status.value
    return values


def _chunk_from_row(row: ChunkRow) -> Chunk:
    return Chunk(
        id=row.id,
        document_id=row.document_id,
        content=row.content,
        chunk_index=row.chunk_index,
        metadata=ChunkMetadata(page=row.page, section=row.section),
        created_at=row.created_at,
    )


def _chunk_row(chunk: Chunk) -> ChunkRow:
    return ChunkRow(
        id=chunk.id,
        document_id=chunk.document_id,
        content=chunk.content,
        chunk_index=chunk.chunk_index,
        page=chunk.metadata.page,
        section=chunk.metadata.section,
        created_at=chunk.created_at,
    )


def _message_row(message: ChatMessage) -> MessageRow:
    values = message.model_dump(mode="json", include={"sources"})
    return MessageRow(
        id=message.id,
        session_id=message.session_id,
        role=message.role.value,
        content=message.content,
        sources=values["sources"],
        response_time=message.response_time,
        created_at=message.created_at,
    )


class SQLStore(BaseStore):
    """
    BaseStore backed by SQLAlchemy.

    Args:
        database_url: Any SQLAlchemy URL, e.g. "sqlite:///docqa.db".
        echo: Log every SQL statement.
        create_tables: Create missing tables on startup.
    """

    def __init__(self, database_url: str = "sqlite:///docqa.db", echo: bool = False, create_tables: bool = True):
        self._engine = create_db_engine(database_url, echo=echo)
        self._session_factory = sessionmaker(bind=self._engine, autoflush=False, expire_on_commit=False)
        if create_tables:
            try:
                Base.metadata.create_all(self._engine)
            except SQLAlchemyError as e:
                raise StorageUnavailable(f"Could not initialise database: {e}") from e

    @contextmanager
    def _session(self):
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error("database_error", error=str(e))
            raise StorageUnavailable(str(e)) from e
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def close(self) -> None:
        self._engine.dispose()

    # -- documents ----------------------------------------------------------

    def add_document(self, document: Document) -> Document:
        with self._session() as session:
            session.add(DocumentRow(**_document_values(document)))
        return document

    def get_document(self, document_id: str) -> Document:
        with self._session() as session:
            row = session.get(DocumentRow, document_id)
            if row is None:
                raise NotFound("Document", document_id)
            return Document.model_validate(row, from_attributes=True)

    def get_documents(self, document_ids: Iterable[str]) -> list[Document]:
        ids = list(dict.fromkeys(document_ids))
        if not ids:
            return []
        with self._session() as session:
            rows = session.scalars(select(DocumentRow).where(DocumentRow.id.in_(ids))).all()
            by_id = {row.id: Document.model_validate(row, from_attributes=True) for row in rows}
        return [by_id[i] for i in ids if i in by_id]

    def list_documents(self) -> list[Document]:
        with self._session() as session:
            rows = session.scalars(select(DocumentRow).order_by(DocumentRow.created_at.desc())).all()
            return [Document.model_validate(row, from_attributes=True) for row in rows]

    def save_document(self, document: Document) -> Document:
        with self._session() as session:
            row = session.get(DocumentRow, document.id)
            if row is None:
                raise NotFound("Document", document.id)
            for field, value in _document_values(document).items():
                setattr(row, field, value)
        return document

    def delete_document(self, document_id: str) -> None:
        with self._session() as session:
            row = session.get(DocumentRow, document_id)
            if row is None:
                raise NotFound("Document", document_id)
            session.delete(row)

    # -- chunks -------------------------------------------------------------

    def insert_chunks(self, chunks: list[Chunk]) -> int:
        if not chunks:
            return 0
        with self._session() as session:
            session.add_all([_chunk_row(chunk) for chunk in chunks])
        return len(chunks)

    def find_chunks(self, document_ids: Iterable[str]) -> list[Chunk]:
        ids = list(dict.fromkeys(document_ids))
        if not ids:
            return []
        with self._session() as session:
            rows = session.scalars(
                select(ChunkRow)
                .where(ChunkRow.document_id.in_(ids))
                .order_by(ChunkRow.chunk_index)
            ).all()
            grouped: dict[str, list[Chunk]] = {i: [] for i in ids}
            for row in rows:
                grouped[row.document_id].append(_chunk_from_row(row))
        return [chunk for i in ids for chunk in grouped[i]]

    def delete_chunks(self, document_id: str) -> int:
        with self._session() as session:
            result = session.execute(delete(ChunkRow).where(ChunkRow.document_id == document_id))
            return result.rowcount or 0

    # -- chat ---------------------------------------------------------------

    def add_session(self, session_record: ChatSession) -> ChatSession:
        with self._session() as session:
            session.add(SessionRow(**session_record.model_dump()))
        return session_record

    def get_session(self, session_id: str) -> ChatSession:
        with self._session() as session:
            row = session.get(SessionRow, session_id)
            if row is None:
                raise NotFound("Chat session", session_id)
            return ChatSession.model_validate(row, from_attributes=True)

    def list_sessions(self) -> list[ChatSession]:
        with self._session() as session:
            rows = session.scalars(select(SessionRow).order_by(SessionRow.last_message_at.desc())).all()
            return [ChatSession.model_validate(row, from_attributes=True) for row in rows]

    def save_session(self, session_record: ChatSession) -> ChatSession:
        with self._session() as session:
            row = session.get(SessionRow, session_record.id)
            if row is None:
                raise NotFound("Chat session", session_record.id)
            for field, value in session_record.model_dump().items():
                setattr(row, field, value)
        return session_record

    def delete_session(self, session_id: str) -> None:
        with self._session() as session:
            row = session.get(SessionRow, session_id)
            if row is None:
                raise NotFound("Chat session", session_id)
            session.execute(delete(MessageRow).where(MessageRow.session_id == session_id))
            session.delete(row)

    def add_messages(self, messages: list[ChatMessage]) -> None:
        with self._session() as session:
            session.add_all([_message_row(message) for message in messages])

    def list_messages(self, session_id: str) -> list[ChatMessage]:
        with self._session() as session:
            rows = session.scalars(
                select(MessageRow)
                .where(MessageRow.session_id == session_id)
                .order_by(MessageRow.created_at)
            ).all()
            return [ChatMessage.model_validate(row, from_attributes=True) for row in rows]
