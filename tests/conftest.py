"""Shared fixtures: fake collaborators and a minimal PDF builder."""
import pytest
from fastapi.testclient import TestClient

from core.config import Settings
from rag_services.pdf_processor import ExtractedPDF, PDFProcessor
from services.rag import RAGService

ALPHA_TEXT = ("Alpha beta gamma delta epsilon zeta eta theta. " * 64)[:3000]


def make_pdf(pages_text):
    """Build a small but well-formed PDF with one Helvetica text line per page."""
    page_count = len(pages_text)
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        None,
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]
    kids = []
    for i, text in enumerate(pages_text):
        page_num = 4 + 2 * i
        content_num = page_num + 1
        kids.append(f"{page_num} 0 R")
        stream = f"BT /F1 12 Tf 72 720 Td ({text}) Tj ET".encode("latin-1")
        objects.append(
            (
                "<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
                f"/Resources << /Font << /F1 3 0 R >> >> /Contents {content_num} 0 R >>"
            ).encode("latin-1")
        )
        objects.append(
            b"<< /Length " + str(len(stream)).encode() + b" >>\nstream\n" + stream + b"\nendstream"
        )
    objects[1] = f"<< /Type /Pages /Kids [{' '.join(kids)}] /Count {page_count} >>".encode("latin-1")

    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += f"{number} 0 obj\n".encode() + body + b"\nendobj\n"

    xref_offset = len(out)
    out += f"xref\n0 {len(objects) + 1}\n".encode()
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += f"{offset:010d} 00000 n \n".encode()
    out += (
        f"trailer\n<< /Size {len(objects) + 1} /Root 1 0 R >>\nstartxref\n{xref_offset}\n%%EOF\n"
    ).encode()
    return bytes(out)


class FakePDFProcessor(PDFProcessor):
    """Real chunker, canned extraction."""

    def __init__(self, text=ALPHA_TEXT, pages=2):
        super().__init__(chunk_size=1000, chunk_overlap=200)
        self.text = text
        self.pages = pages
        self.extract_calls = 0

    def extract_text(self, pdf_bytes):
        self.extract_calls += 1
        return ExtractedPDF(text=self.text, pages=self.pages)


class FakeEmbeddingService:
    """Letter-frequency vectors: similar wording gives similar vectors."""

    def __init__(self):
        self.calls = 0
        self.fail_with = None

    @staticmethod
    def _vector(text):
        vector = [0.0] * 27
        for ch in text.lower():
            if "a" <= ch <= "z":
                vector[ord(ch) - ord("a")] += 1.0
        vector[26] = 1.0
        return vector

    async def embed_documents(self, texts):
        self.calls += 1
        if self.fail_with is not None:
            raise self.fail_with
        return [self._vector(text) for text in texts]

    async def embed_query(self, text):
        return (await self.embed_documents([text]))[0]


class FakeLLMService:
    def __init__(self, answer="Alpha is the first word of the document."):
        self.answer = answer
        self.calls = []
        self.fail_with = None

    async def generate_answer(self, query, context, model, temperature, max_tokens):
        self.calls.append({
            "query": query,
            "context": context,
            "model": model,
            "temperature": temperature,
            "max_tokens": max_tokens,
        })
        if self.fail_with is not None:
            raise self.fail_with
        return self.answer


@pytest.fixture
def test_settings():
    return Settings(STATIC_DIR=None, MAX_FILE_SIZE_MB=10)


@pytest.fixture
def pdf_processor():
    return FakePDFProcessor()


@pytest.fixture
def embedding_service():
    return FakeEmbeddingService()


@pytest.fixture
def llm_service():
    return FakeLLMService()


@pytest.fixture
def rag_service(pdf_processor, embedding_service, llm_service, test_settings):
    return RAGService(pdf_processor, embedding_service, llm_service, config=test_settings)


@pytest.fixture
def client(rag_service):
    from main import create_app

    return TestClient(create_app(rag_service))


@pytest.fixture
def upload(client):
    """POST a file to /api/train and return the response."""

    def _upload(name="doc.pdf", content=b"%PDF-1.4 fake", content_type="application/pdf", settings=None):
        data = {"settings": settings} if settings is not None else None
        return client.post(
            "/api/train",
            files={"pdf": (name, content, content_type)},
            data=data,
        )

    return _upload

