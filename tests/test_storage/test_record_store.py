"""Behaviour every record store must share — run against memory and SQLite."""

from datetime import timedelta

import pytest

from docqa.exceptions import NotFound
from docqa.models.chat import ChatMessage, ChatSession, MessageRole, SourceCitation
from docqa.models.document import Chunk, ChunkMetadata, Document, DocumentStatus, utcnow
from docqa.storage.memory import InMemoryStore
from docqa.storage.sql import SQLStore


@pytest.fixture(params=["memory", "sql"])
def record_store(request):
    if request.param == "memory":
        yield InMemoryStore()
    else:
        store = SQLStore("sqlite://")
        yield store
        store.close()


def _document(name="a.txt", **overrides):
    fields = dict(name=name, file_type="txt", size=3, file_path=f"document-1-{name}")
    fields.update(overrides)
    return Document(**fields)


def _chunks(document_id, *contents):
    return [
        Chunk(document_id=document_id, content=text, chunk_index=i)
        for i, text in enumerate(contents)
    ]


class TestDocuments:

    def test_add_and_get(self, record_store):
        document = record_store.add_document(_document())
        assert record_store.get_document(document.id) == document

    def test_get_missing(self, record_store):
        with pytest.raises(NotFound) as excinfo:
            record_store.get_document("missing")
        assert excinfo.value.kind == "Document"

    def test_get_documents_skips_unknown_and_keeps_order(self, record_store):
        a = record_store.add_document(_document("a.txt"))
        b = record_store.add_document(_document("b.txt"))
        found = record_store.get_documents([b.id, "missing", a.id])
        assert [d.id for d in found] == [b.id, a.id]

    def test_list_newest_first(self, record_store):
        now = utcnow()
        old = record_store.add_document(_document("old.txt", created_at=now - timedelta(minutes=5)))
        new = record_store.add_document(_document("new.txt", created_at=now))
        assert [d.id for d in record_store.list_documents()] == [new.id, old.id]

    def test_save_snapshot(self, record_store):
        document = record_store.add_document(_document())
        record_store.save_document(document.advance(50, content="abc"))
        record_store.save_document(document.advance(80, content="abc").mark_processed(2))

        stored = record_store.get_document(document.id)
        assert stored.status == DocumentStatus.PROCESSED
        assert stored.chunks == 2
        assert stored.content == "abc"

    def test_save_unknown(self, record_store):
        with pytest.raises(NotFound):
            record_store.save_document(_document())

    def test_update_document(self, record_store):
        document = record_store.add_document(_document())
        updated = record_store.update_document(document.id, error_message="oops")
        assert record_store.get_document(document.id).error_message == "oops"
        assert updated.error_message == "oops"

    def test_delete(self, record_store):
        document = record_store.add_document(_document())
        record_store.delete_document(document.id)
        with pytest.raises(NotFound):
            record_store.get_document(document.id)
        with pytest.raises(NotFound):
            record_store.delete_document(document.id)


class TestChunks:

    def test_find_in_scope_only(self, record_store):
        a = record_store.add_document(_document("a.txt"))
        b = record_store.add_document(_document("b.txt"))
        record_store.insert_chunks(_chunks(a.id, "a0", "a1"))
        record_store.insert_chunks(_chunks(b.id, "b0"))

        assert [c.content for c in record_store.find_chunks([a.id])] == ["a0", "a1"]
        assert [c.content for c in record_store.find_chunks([b.id, a.id])] == ["b0", "a0", "a1"]
        assert record_store.find_chunks([]) == []
        assert record_store.find_chunks(["missing"]) == []

    def test_ordered_by_index(self, record_store):
        a = record_store.add_document(_document())
        chunks = _chunks(a.id, "zero", "one", "two")
        record_store.insert_chunks([chunks[2], chunks[0], chunks[1]])
        assert [c.chunk_index for c in record_store.find_chunks([a.id])] == [0, 1, 2]

    def test_metadata_round_trips(self, record_store):
        a = record_store.add_document(_document())
        chunk = Chunk(
            document_id=a.id, content="x", chunk_index=0,
            metadata=ChunkMetadata(page=3, section="Intro"),
        )
        record_store.insert_chunks([chunk])
        assert record_store.find_chunks([a.id]) == [chunk]

    def test_insert_returns_count(self, record_store):
        a = record_store.add_document(_document())
        assert record_store.insert_chunks(_chunks(a.id, "x", "y")) == 2
        assert record_store.insert_chunks([]) == 0

    def test_delete_chunks(self, record_store):
        a = record_store.add_document(_document())
        record_store.insert_chunks(_chunks(a.id, "x", "y"))
        assert record_store.delete_chunks(a.id) == 2
        assert record_store.find_chunks([a.id]) == []
        assert record_store.delete_chunks(a.id) == 0


class TestSessions:

    def test_add_get_list(self, record_store):
        session = record_store.add_session(ChatSession(name="s", documents=["d1", "d2"]))
        assert record_store.get_session(session.id) == session
        assert [s.id for s in record_store.list_sessions()] == [session.id]

    def test_get_missing(self, record_store):
        with pytest.raises(NotFound) as excinfo:
            record_store.get_session("missing")
        assert excinfo.value.kind == "Chat session"

    def test_list_by_recent_activity(self, record_store):
        first = record_store.add_session(ChatSession(name="first", documents=["d"]))
        second = record_store.add_session(ChatSession(name="second", documents=["d"]))
        record_store.save_session(
            first.model_copy(update={"last_message_at": utcnow() + timedelta(minutes=1)})
        )
        assert [s.id for s in record_store.list_sessions()] == [first.id, second.id]

    def test_messages_in_order(self, record_store):
        session = record_store.add_session(ChatSession(name="s", documents=["d"]))
        question = ChatMessage(session_id=session.id, role="user", content="Q?")
        answer = ChatMessage(
            session_id=session.id,
            role=MessageRole.ASSISTANT,
            content="A.",
            sources=[SourceCitation(document="a.txt", page=2, chunk="x", relevance=0.3)],
            response_time=12.5,
            created_at=question.created_at + timedelta(milliseconds=5),
        )
        record_store.add_messages([question, answer])

        assert record_store.list_messages(session.id) == [question, answer]
        assert record_store.list_messages("other") == []

    def test_delete_session_removes_messages(self, record_store):
        session = record_store.add_session(ChatSession(name="s", documents=["d"]))
        record_store.add_messages([ChatMessage(session_id=session.id, role="user", content="Q?")])

        record_store.delete_session(session.id)

        assert record_store.list_messages(session.id) == []
        with pytest.raises(NotFound):
            record_store.get_session(session.id)
        with pytest.raises(NotFound):
            record_store.delete_session(session.id)
