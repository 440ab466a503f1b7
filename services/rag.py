"""
Document training and question answering over the shared in-memory state.

``RAGService`` owns the document store, the settings store and the vector
index handle. One asyncio lock covers all three, so a reader never sees a
document record without its vectors or the other way round. Remote calls
and PDF parsing run outside the lock.
"""
import asyncio
import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from core.config import Settings, settings as app_settings
from core.errors import (
    EmbeddingError,
    InferenceError,
    PayloadTooLargeError,
    PreconditionError,
    UnsupportedMediaError,
    ValidationError,
)
from core.logger import get_logger
from models.rag_model import DocumentRecord, ModelKey, ResponseStyle, RuntimeSettings
from rag_services.embeddings import EmbeddingService
from rag_services.llm import LLMService, resolve_model, resolve_style
from rag_services.pdf_processor import PDFProcessor
from rag_services.retrieval import VectorIndex
from rag_services.state import DocumentStore, SettingsStore

logger = get_logger(__name__)


@dataclass
class TrainResult:
    document_id: str
    chunks: int
    pages: int


@dataclass
class ChatResult:
    answer: str
    model: str
    style: str


class RAGService:
    def __init__(
        self,
        pdf_processor: PDFProcessor,
        embedding_service: EmbeddingService,
        llm_service: LLMService,
        config: Settings = app_settings,
    ):
        self.pdf_processor = pdf_processor
        self.embedding_service = embedding_service
        self.llm_service = llm_service
        self.config = config

        self.documents = DocumentStore()
        self.settings = SettingsStore(RuntimeSettings(
            model=ModelKey(config.DEFAULT_MODEL),
            response_style=ResponseStyle(config.DEFAULT_RESPONSE_STYLE),
            temperature=config.TEMPERATURE,
            max_tokens=config.MAX_TOKENS,
        ))
        self.vector_index: Optional[VectorIndex] = None
        self._lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, config: Settings = app_settings) -> "RAGService":
        return cls(
            pdf_processor=PDFProcessor(config.CHUNK_SIZE, config.CHUNK_OVERLAP),
            embedding_service=EmbeddingService(
                config.EMBEDDING_MODEL,
                base_url=config.EMBEDDING_BASE_URL,
                batch_size=config.EMBEDDING_BATCH_SIZE,
            ),
            llm_service=LLMService(base_url=config.INFERENCE_BASE_URL),
            config=config,
        )

    # ------------------------------------------------------------------
    # Ingestion
    # ------------------------------------------------------------------

    def validate_upload(self, filename: Optional[str], content_type: Optional[str], size: int) -> None:
        """Reject missing, non-PDF or oversized uploads before any processing."""
        if not filename:
            raise ValidationError("No file uploaded")
        if content_type not in self.config.ALLOWED_CONTENT_TYPES:
            raise UnsupportedMediaError("Only PDF files are allowed")
        if size > self.config.max_file_size_bytes:
            raise PayloadTooLargeError(
                f"File exceeds the {self.config.MAX_FILE_SIZE_MB}MB upload limit"
            )

    async def train(
        self,
        filename: Optional[str],
        content: Optional[bytes],
        content_type: Optional[str],
        settings_json: Optional[str] = None,
    ) -> TrainResult:
        if content is None:
            raise ValidationError("No file uploaded")
        self.validate_upload(filename, content_type, len(content))

        if settings_json:
            try:
                overrides = json.loads(settings_json)
            except json.JSONDecodeError as e:
                raise ValidationError(f"Invalid settings JSON: {e}") from e
            await self.update_settings(overrides)

        logger.info("Processing PDF: %s", filename)

        loop = asyncio.get_event_loop()
        pdf_data = await loop.run_in_executor(None, self.pdf_processor.extract_text, content)
        logger.info("Extracted %d characters from %d pages", len(pdf_data.text), pdf_data.pages)
        logger.debug("PDF info: %s", pdf_data.info)

        chunks = self.pdf_processor.create_chunks(pdf_data.text)
        logger.info("Created %d chunks", len(chunks))

        # Embeddings are staged here; nothing shared changes until they all exist.
        embeddings = await self.embedding_service.embed_documents(chunks)

        async with self._lock:
            document_id = self.documents.new_id()
            if self.vector_index is None:
                self.vector_index = VectorIndex.from_embeddings(document_id, chunks, embeddings)
            else:
                self.vector_index.add(document_id, chunks, embeddings)
            self.documents.add(
                document_id,
                name=filename,
                chunks=len(chunks),
                pages=pdf_data.pages,
                size=len(content),
            )

        logger.info("Training completed successfully for document %s", document_id)
        return TrainResult(document_id=document_id, chunks=len(chunks), pages=pdf_data.pages)

    # ------------------------------------------------------------------
    # Query
    # ------------------------------------------------------------------

    async def chat(self, question: Optional[str]) -> ChatResult:
        if not question or not question.strip():
            raise ValidationError("Question is required")

        async with self._lock:
            if self.vector_index is None:
                raise PreconditionError(
                    "No documents trained yet. Please upload and train documents first."
                )
            current = self.settings.get()

        logger.info("Processing question: %s", question)

        model_name = resolve_model(current.model)
        style_prompt = resolve_style(current.response_style)
        full_prompt = f"{style_prompt}\n\nQuestion: {question}"

        try:
            query_embedding = await self.embedding_service.embed_query(question)
        except EmbeddingError as e:
            raise InferenceError(e.message, kind=e.kind) from e

        async with self._lock:
            if self.vector_index is None:
                raise PreconditionError(
                    "No documents trained yet. Please upload and train documents first."
                )
            try:
                retrieved = self.vector_index.search(query_embedding, self.config.TOP_K_RESULTS)
            except ValueError as e:
                raise InferenceError(f"Index lookup failed: {e}", kind="malformed_response") from e

        answer = await self.llm_service.generate_answer(
            full_prompt,
            [chunk.text for chunk in retrieved],
            model=model_name,
            temperature=current.temperature,
            max_tokens=current.max_tokens,
        )

        logger.info("Generated response with %s", model_name)
        return ChatResult(
            answer=answer,
            model=current.model.value,
            style=current.response_style.value,
        )

    # ------------------------------------------------------------------
    # Documents
    # ------------------------------------------------------------------

    async def list_documents(self) -> List[DocumentRecord]:
        async with self._lock:
            return self.documents.list()

    async def delete_document(self, document_id: str) -> None:
        async with self._lock:
            self.documents.remove(document_id)
            if self.documents.is_empty():
                self.vector_index = None
            elif self.vector_index is not None:
                removed = self.vector_index.remove_document(document_id)
                logger.info("Removed %d chunks for document %s", removed, document_id)
        logger.info("Deleted document %s", document_id)

    async def stats(self) -> Dict[str, Any]:
        async with self._lock:
            return {
                "totalDocuments": len(self.documents),
                "totalChunks": self.documents.total_chunks(),
                "lastUpdated": self.documents.last_updated(),
            }

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    async def get_settings(self) -> RuntimeSettings:
        async with self._lock:
            return self.settings.get()

    async def update_settings(self, partial: Dict[str, Any]) -> RuntimeSettings:
        async with self._lock:
            updated = self.settings.update(partial)
        logger.info("Settings updated: %s", updated.to_api())
        return updated
