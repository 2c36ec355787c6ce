"""
Indexing components — text extraction and chunking.

    from docqa.indexing import TextExtractor, get_chunker

    pages = TextExtractor().extract_pages(data, "pdf")
    chunks = get_chunker(config.chunking).chunk(pages, document_id)
"""

from .chunking import SentenceChunker, get_chunker
from .extraction import TextExtractor, normalize_file_type

__all__ = [
    "TextExtractor",
    "normalize_file_type",
    "SentenceChunker",
    "get_chunker",
]
