"""
PDF text extraction and chunking
"""
import io
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List

from langchain_text_splitters import RecursiveCharacterTextSplitter
from pypdf import PdfReader

from core.errors import ExtractionError

# Paragraph, line, sentence, word, then hard split
CHUNK_SEPARATORS = ["\n\n", "\n", ". ", " ", ""]


@dataclass
class ExtractedPDF:
    text: str
    pages: int
    info: Dict[str, Any] = field(default_factory=dict)


class PDFProcessor:
    """Handles PDF text extraction and chunking."""

    def __init__(self, chunk_size: int = 1000, chunk_overlap: int = 200):
        if chunk_overlap >= chunk_size:
            raise ValueError("overlap must be smaller than chunk_size")
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self._splitter = RecursiveCharacterTextSplitter(
            chunk_size=chunk_size,
            chunk_overlap=chunk_overlap,
            separators=CHUNK_SEPARATORS,
        )

    def extract_text(self, pdf_bytes: bytes) -> ExtractedPDF:
        """Extract text, page count and document info from PDF bytes."""
        try:
            reader = PdfReader(io.BytesIO(pdf_bytes))
            text_pages = []
            for page in reader.pages:
                extracted = page.extract_text()
                if extracted:
                    text_pages.append(self._clean_text(extracted))
            info = {
                key.lstrip("/"): str(value)
                for key, value in (reader.metadata or {}).items()
            }
            pages = len(reader.pages)
        except Exception as e:
            raise ExtractionError(f"Failed to parse PDF: {e}") from e

        full_text = "\n\n".join(page for page in text_pages if page)
        if not full_text:
            raise ExtractionError("No extractable text found in PDF")

        return ExtractedPDF(text=full_text, pages=pages, info=info)

    @staticmethod
    def _clean_text(text: str) -> str:
        """Normalize whitespace while keeping line structure."""
        text = re.sub(r"-[ \t]*\n(?=\w)", "", text)
        text = re.sub(r"[ \t]+", " ", text)
        text = re.sub(r"\n{3,}", "\n\n", text)
        return text.strip()

    def create_chunks(self, text: str) -> List[str]:
        if not text:
            return []
        return self._splitter.split_text(text)
