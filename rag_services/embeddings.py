"""
Embedding generation service using a hosted OpenAI-compatible endpoint
"""
from typing import List, Optional
import asyncio
from concurrent.futures import ThreadPoolExecutor

from core.config import settings
from core.errors import EmbeddingError
from core.logger import get_logger
from rag_services.client import build_client, classify_error

logger = get_logger(__name__)


class EmbeddingService:
    """Handles embedding generation for chunks and queries."""

    def __init__(
        self,
        model: str = "sentence-transformers/all-MiniLM-L6-v2",
        base_url: Optional[str] = None,
        batch_size: int = 100,
    ):
        # Delay client construction until first use so importing modules
        # does not fail when no API key is configured.
        self._client = None
        self.model = model
        self.base_url = base_url or settings.EMBEDDING_BASE_URL
        self.batch_size = batch_size

    def _ensure_client(self):
        if self._client is None:
            self._client = build_client(self.base_url)

    def _process_batch(self, batch: List[str]) -> List[List[float]]:
        """Process a single batch of embeddings."""
        response = self._client.embeddings.create(
            model=self.model,
            input=batch
        )
        embeddings = [d.embedding for d in response.data]
        if len(embeddings) != len(batch):
            raise EmbeddingError(
                f"Embedding endpoint returned {len(embeddings)} vectors for {len(batch)} inputs",
                kind="malformed_response",
            )
        return embeddings

    async def embed_documents(self, texts: List[str]) -> List[List[float]]:
        """Generate embeddings asynchronously with concurrent batch processing."""
        if not texts:
            return []
        self._ensure_client()

        batches = [texts[i:i + self.batch_size] for i in range(0, len(texts), self.batch_size)]

        loop = asyncio.get_event_loop()
        try:
            with ThreadPoolExecutor(max_workers=5) as executor:
                tasks = [
                    loop.run_in_executor(executor, self._process_batch, batch)
                    for batch in batches
                ]
                results = await asyncio.gather(*tasks)
        except EmbeddingError:
            raise
        except Exception as e:
            error = classify_error(e, EmbeddingError, "Embedding request")
            logger.error("Embedding failed (%s): %s", error.kind, e)
            raise error from e

        all_embeddings = []
        for batch_embeddings in results:
            all_embeddings.extend(batch_embeddings)

        return all_embeddings

    async def embed_query(self, text: str) -> List[float]:
        embeddings = await self.embed_documents([text])
        return embeddings[0]
