"""
Document chunking.

Takes extracted pages and splits them into chunks for storage and scoring.
Each chunker implements BaseChunker and is driven by ChunkingConfig.

The built-in "sentence" strategy works on whole sentences:

    1. Split the text on runs of sentence-terminal punctuation (. ! ?).
    2. Join sentences with ". " while the result fits in chunk_size.
    3. When the next sentence would overflow, close the chunk with a "."
       and start the next one from that sentence.
    4. Whatever is left at the end becomes the last chunk, however short.

A single sentence longer than chunk_size becomes a chunk of its own; it is
never cut mid-sentence. Text with no terminal punctuation at all comes back
as one chunk holding the trimmed text, unchanged.

Usage:
    from docqa.indexing.chunking import get_chunker
    from docqa.config import ChunkingConfig

    chunker = get_chunker(ChunkingConfig(chunk_size=500))
    chunks = chunker.chunk(pages, document_id=doc.id)
"""

import re

import structlog

from docqa.base.indexer import BaseChunker
from docqa.config import ChunkingConfig

logger = structlog.get_logger(__name__)

SENTENCE_BOUNDARY = re.compile(r"[.!?]+")
SENTENCE_JOINER = ". "
CHUNK_TERMINATOR = "."


class SentenceChunker(BaseChunker):
    """
    Accumulates whole sentences up to chunk_size characters.

    chunk_overlap is accepted (the config validates it) but no text is
    repeated between neighbouring chunks: every sentence lands in exactly
    one chunk, in its original order.
    """

    def split_text(self, text: str) -> list[str]:
        if not text or not text.strip():
            return []

        pieces = SENTENCE_BOUNDARY.split(text)
        # The last piece is only an unterminated trailing fragment if the
        # text doesn't end on punctuation. That fragment keeps its original form.
        unterminated_tail = bool(pieces[-1].strip())
        sentences = [p.strip() for p in pieces if p.strip()]

        size = self.config.chunk_size
        contents: list[str] = []
        current = ""

        for sentence in sentences:
            candidate = current + SENTENCE_JOINER + sentence if current else sentence
            if len(candidate) <= size:
                current = candidate
            else:
                if current:
                    contents.append(current + CHUNK_TERMINATOR)
                current = sentence

        if current:
            contents.append(current if unterminated_tail else current + CHUNK_TERMINATOR)

        return contents

    def chunk(self, pages, document_id):
        chunks = super().chunk(pages, document_id)
        logger.debug(
            "document_chunked",
            document_id=document_id,
            chunks=len(chunks),
            chunk_size=self.config.chunk_size,
        )
        return chunks


# ---------------------------------------------------------------------------
# Factory: pick the right chunker from config
# ---------------------------------------------------------------------------

def get_chunker(config: ChunkingConfig) -> BaseChunker:
    """
    Factory that returns the right chunker based on config.strategy.

    Args:
        config: ChunkingConfig with strategy set.

    Returns:
        A BaseChunker implementation.

    Raises:
        ValueError: If the strategy is not recognized.
    """
    strategy = config.strategy.lower()

    if strategy == "sentence":
        return SentenceChunker(config)

    else:
        raise ValueError(
            f"Unknown chunking strategy: '{config.strategy}'. "
            f"Built-in strategies: 'sentence'. "
            f"For custom chunkers, subclass BaseChunker directly."
        )
