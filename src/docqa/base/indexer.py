"""
Abstract base classes for text extraction and chunking.

Why separate BaseExtractor and BaseChunker?
    Extraction knows about file formats, chunking knows about text. Keeping
    them apart means a new format never touches the chunker, and a new
    chunking strategy never touches the format decoders:
        pages = extractor.extract_pages(data, "pdf")
        chunks = chunker.chunk(pages, document_id)
"""

from abc import ABC, abstractmethod

from langchain_core.documents import Document as PageDocument

from docqa.config import ChunkingConfig
from docqa.models.document import Chunk, ChunkMetadata


class BaseExtractor(ABC):
    """
    Contract for text extractors.

    An extractor takes raw file bytes plus a declared type tag and returns
    LangChain Documents, one per page or logical section. It does NOT
    chunk and it never touches stored records.
    """

    @abstractmethod
    def extract_pages(self, data: bytes, file_type: str) -> list[PageDocument]:
        """
        Decode a file into text pages.

        Args:
            data: The raw file content.
            file_type: Lowercase type tag ("pdf", "txt", ...).

        Returns:
            Documents with page_content set and optional "page"/"section" metadata.

        Raises:
            UnsupportedFormat: No decoder for file_type.
            ExtractionFailed: The decoder could not read the content.
        """
        ...

    def supports(self, file_type: str) -> bool:
        """Whether uploads of this type should be accepted. Accepts everything by default."""
        return True

    def extract(self, data: bytes, file_type: str) -> str:
        """Full text of the file, pages separated by blank lines."""
        pages = self.extract_pages(data, file_type)
        return "\n\n".join(page.page_content for page in pages if page.page_content)


class BaseChunker(ABC):
    """
    Contract for chunkers.

    A chunker turns extracted pages into Chunk records for one document.
    Indices start at 0 and run without gaps across the whole document,
    whatever the page count.
    """

    def __init__(self, config: ChunkingConfig):
        self.config = config

    @abstractmethod
    def split_text(self, text: str) -> list[str]:
        """Split one body of text into chunk contents, in order."""
        ...

    def chunk(self, pages: list[PageDocument], document_id: str) -> list[Chunk]:
        """
        Split every page and number the results.

        Args:
            pages: Output of an extractor.
            document_id: Owner of the produced chunks.

        Returns:
            Chunks with chunk_index 0..N-1 and page/section metadata copied
            from the page they came from.
        """
        chunks: list[Chunk] = []
        for page in pages:
            metadata = ChunkMetadata(
                page=page.metadata.get("page"),
                section=page.metadata.get("section"),
            )
            for content in self.split_text(page.page_content):
                chunks.append(Chunk(
                    document_id=document_id,
                    content=content,
                    chunk_index=len(chunks),
                    metadata=metadata,
                ))
        return chunks
