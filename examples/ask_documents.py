"""
Document Q&A example — upload files, chat about them.

This script:
    1. Uploads every file given on the command line
    2. Waits for ingestion and reports each document's status
    3. Opens a chat session over the processed documents and asks questions

Run:
    python examples/ask_documents.py notes.txt guide.pdf
"""

import sys
from pathlib import Path

from docqa import DocQA
from docqa.config import DocQAConfig, LoggingConfig, RetrieverConfig, StorageConfig
from docqa.models.document import DocumentStatus


def main(paths):
    config = DocQAConfig(
        retriever=RetrieverConfig(k=5),
        storage=StorageConfig(backend="sql", database_url="sqlite:///docqa-example.db"),
        logging=LoggingConfig(level="WARNING"),
    )

    with DocQA(config) as app:
        ready = []
        for path in paths:
            document = app.documents.upload(Path(path).name, Path(path).read_bytes())
            document = app.documents.wait(document.id)
            print(f"{document.name}: {document.status.value} ({document.chunks} chunks)")
            if document.status == DocumentStatus.PROCESSED:
                ready.append(document.id)
            else:
                print(f"   Error: {document.error_message}")

        if not ready:
            return

        session = app.chat.create_session("Example", ready)
        questions = [
            "What is this document about?",
            "What are the key requirements?",
        ]

        for q in questions:
            print(f"\nQ: {q}")
            _, answer = app.chat.send_message(session.id, q)
            print(f"A: {answer.content}")
            for source in answer.sources:
                print(f"   [{source.relevance:.0%}] {source.document} p.{source.page}: {source.chunk}")


if __name__ == "__main__":
    main(sys.argv[1:] or ["README.md"])
