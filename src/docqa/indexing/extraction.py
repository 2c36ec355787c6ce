"""
Text extraction from uploaded files.

Turns raw bytes plus a declared type tag into LangChain Documents, one per
page (PDF) or section (DOCX headings), so page numbers and section labels
can travel with the chunks into citations.

Supported formats:

    "txt"           UTF-8 pass-through (a BOM is tolerated)
    "pdf"           pypdf, one Document per page, 1-based "page" metadata
    "docx"          python-docx, split at Heading paragraphs into sections
    "md"            markdown → HTML → BeautifulSoup plain text
    "html", "htm"   BeautifulSoup plain text, scripts and styles dropped

Anything else raises UnsupportedFormat. A supported tag whose content can't
be decoded raises ExtractionFailed.

Usage:
    from docqa.indexing.extraction import TextExtractor

    extractor = TextExtractor()
    text = extractor.extract(data, "docx")
"""

from io import BytesIO
from typing import Callable, Optional

import docx
import markdown as md
import structlog
from bs4 import BeautifulSoup
from langchain_core.documents import Document as PageDocument
from pypdf import PdfReader

from docqa.base.indexer import BaseExtractor
from docqa.exceptions import ExtractionFailed, UnsupportedFormat
from docqa.utils.helpers import replace_t_with_space

logger = structlog.get_logger(__name__)


def extract_txt(data: bytes) -> list[PageDocument]:
    try:
        text = data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ExtractionFailed(f"Text file is not valid UTF-8: {e}") from e
    return [PageDocument(page_content=text)]


def extract_pdf(data: bytes) -> list[PageDocument]:
    try:
        reader = PdfReader(BytesIO(data))
        pages = [
            PageDocument(page_content=page.extract_text() or "", metadata={"page": number})
            for number, page in enumerate(reader.pages, 1)
        ]
    except Exception as e:
        raise ExtractionFailed(f"Could not read PDF: {e}") from e
    return pages


def extract_docx(data: bytes) -> list[PageDocument]:
    """
    Paragraph text grouped into sections.

    Every paragraph styled "Heading ..." opens a new section labelled with
    the heading text. Paragraphs before the first heading form an
    unlabelled section.
    """
    try:
        document = docx.Document(BytesIO(data))
    except Exception as e:
        raise ExtractionFailed(f"Could not read DOCX: {e}") from e

    sections: list[tuple[Optional[str], list[str]]] = [(None, [])]
    for paragraph in document.paragraphs:
        style_name = paragraph.style.name if paragraph.style is not None else ""
        if style_name.startswith("Heading") and paragraph.text.strip():
            sections.append((paragraph.text.strip(), [paragraph.text]))
        else:
            sections[-1][1].append(paragraph.text)

    pages = []
    for label, lines in sections:
        text = "\n".join(lines)
        if not text.strip():
            continue
        metadata = {"section": label} if label else {}
        pages.append(PageDocument(page_content=text, metadata=metadata))
    return pages or [PageDocument(page_content="")]


def extract_html(data: bytes) -> list[PageDocument]:
    soup = BeautifulSoup(data.decode("utf-8", errors="replace"), "html.parser")
    for tag in soup(["script", "style"]):
        tag.decompose()
    return [PageDocument(page_content=soup.get_text(separator="\n"))]


def extract_md(data: bytes) -> list[PageDocument]:
    html = md.markdown(data.decode("utf-8", errors="replace"))
    soup = BeautifulSoup(html, "html.parser")
    return [PageDocument(page_content=soup.get_text(separator="\n"))]


class TextExtractor(BaseExtractor):
    """
    Dispatches on the type tag to a format decoder.

    Extra decoders can be registered per instance:
        extractor = TextExtractor({"csv": my_csv_decoder})
    """

    DEFAULT_DECODERS: dict[str, Callable[[bytes], list[PageDocument]]] = {
        "txt": extract_txt,
        "pdf": extract_pdf,
        "docx": extract_docx,
        "md": extract_md,
        "html": extract_html,
        "htm": extract_html,
    }

    def __init__(self, decoders: dict[str, Callable[[bytes], list[PageDocument]]] = None):
        self._decoders = dict(self.DEFAULT_DECODERS)
        if decoders:
            self._decoders.update(decoders)

    @property
    def supported_formats(self) -> list[str]:
        return sorted(self._decoders)

    def supports(self, file_type: str) -> bool:
        return normalize_file_type(file_type) in self._decoders

    def extract_pages(self, data: bytes, file_type: str) -> list[PageDocument]:
        tag = normalize_file_type(file_type)
        decoder = self._decoders.get(tag)
        if decoder is None:
            raise UnsupportedFormat(file_type)

        try:
            pages = decoder(data)
        except ExtractionFailed:
            logger.warning("extraction_failed", file_type=tag, size=len(data))
            raise

        pages = replace_t_with_space(pages)
        logger.debug(
            "text_extracted",
            file_type=tag,
            pages=len(pages),
            characters=sum(len(p.page_content) for p in pages),
        )
        return pages


def normalize_file_type(file_type: str) -> str:
    """'.PDF' → 'pdf'."""
    return (file_type or "").strip().lower().lstrip(".")
