"""
Multi-format Text Extractor - Turn stored documents into plain text.

Supports:
- PDF (.pdf): text from every page
- Word Documents (.docx): paragraphs plus table cells
- Plain Text (.txt, .md): decoded as UTF-8

Requisitions and resumes both go through here before any prompt is built.
"""
import logging
from pathlib import PurePath
from typing import BinaryIO

from docx import Document
from pypdf import PdfReader

from core.exceptions import DocumentParseError, UnsupportedFormatError

logger = logging.getLogger(__name__)


def format_from_path(path: str) -> str:
    """Return the lowercase extension of ``path`` without the dot ('' if none)."""
    if not path:
        return ""
    return PurePath(path).suffix.lower().lstrip('.')


class TextExtractor:
    """Extract plain text from a binary document stream.

    The format hint is a file extension with or without the leading dot,
    matched case-insensitively.
    """

    SUPPORTED_FORMATS = {'pdf', 'docx', 'txt', 'md'}

    def extract(self, stream: BinaryIO, format_hint: str) -> str:
        """Extract text from ``stream``.

        Raises:
            UnsupportedFormatError: if ``format_hint`` is not supported
            DocumentParseError: if the document cannot be read
        """
        fmt = (format_hint or "").lower().lstrip('.')

        if fmt not in self.SUPPORTED_FORMATS:
            supported = ', '.join(sorted(self.SUPPORTED_FORMATS))
            raise UnsupportedFormatError(
                f"Unsupported file type for parsing: '{format_hint}'. "
                f"Supported formats: {supported}"
            )

        if fmt == 'pdf':
            return self._extract_pdf(stream)
        elif fmt == 'docx':
            return self._extract_docx(stream)
        return self._extract_text(stream)

    def _extract_text(self, stream: BinaryIO) -> str:
        try:
            return stream.read().decode('utf-8')
        except UnicodeDecodeError as e:
            raise DocumentParseError(
                f"File encoding issue: {e}. Ensure file is UTF-8 encoded."
            ) from e

    def _extract_docx(self, stream: BinaryIO) -> str:
        """Extract text from a Word document.

        Paragraphs come first, then table rows (common in resumes), each
        row's non-empty cells joined by a space.
        """
        try:
            doc = Document(stream)
        except Exception as e:
            raise DocumentParseError(f"Failed to parse DOCX document: {e}") from e

        paragraphs = []
        for para in doc.paragraphs:
            if para.text.strip():
                paragraphs.append(para.text.strip())

        for table in doc.tables:
            for row in table.rows:
                row_texts = []
                for cell in row.cells:
                    cell_text = cell.text.strip()
                    if cell_text:
                        row_texts.append(cell_text)
                if row_texts:
                    paragraphs.append(' '.join(row_texts))

        text = '\n\n'.join(paragraphs)
        if not text.strip():
            logger.warning("Empty or minimal content in DOCX document")
        return text

    def _extract_pdf(self, stream: BinaryIO) -> str:
        try:
            reader = PdfReader(stream)
            page_count = len(reader.pages)
        except Exception as e:
            raise DocumentParseError(f"Failed to parse PDF document: {e}") from e

        if page_count == 0:
            raise DocumentParseError("PDF file has no pages")

        pages_text = []
        for i, page in enumerate(reader.pages):
            try:
                page_text = page.extract_text()
                if page_text and page_text.strip():
                    pages_text.append(page_text.strip())
            except Exception as e:
                logger.warning(f"Failed to extract text from page {i + 1}: {e}")

        text = '\n\n'.join(pages_text)
        if not text.strip():
            logger.warning(
                "No text extracted from PDF. "
                "The PDF may be scanned images or have text extraction disabled."
            )

        logger.debug(f"Parsed PDF ({page_count} pages, {len(text)} chars extracted)")
        return text


def read_document_text(store, extractor: TextExtractor, path: str) -> str:
    """Load ``path`` from ``store`` and extract its text, closing the stream.

    Raises:
        DocumentError: the document is missing, unsupported or unreadable
    """
    stream = store.load(path)
    try:
        return extractor.extract(stream, format_from_path(path))
    finally:
        stream.close()
