"""Document storage and text extraction."""
from core.documents.parser import TextExtractor, format_from_path, read_document_text
from core.documents.storage import FileSystemDocumentStore

__all__ = ['TextExtractor', 'format_from_path', 'read_document_text', 'FileSystemDocumentStore']
