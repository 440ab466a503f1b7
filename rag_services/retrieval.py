"""
In-memory cosine-similarity vector index using FAISS
"""
from dataclasses import dataclass
from typing import List, Sequence

import faiss
import numpy as np


@dataclass
class RetrievedChunk:
    text: str
    score: float
    document_id: str


class VectorIndex:
    """Stores embedded chunks tagged with their owning document id.

    Vectors are L2-normalised so inner-product search ranks by cosine
    similarity.
    """

    def __init__(self, dim: int):
        self.dim = dim
        self.dense_index = faiss.IndexFlatIP(dim)
        self._vectors = np.empty((0, dim), dtype="float32")
        self._texts: List[str] = []
        self._document_ids: List[str] = []

    @classmethod
    def from_embeddings(
        cls,
        document_id: str,
        texts: Sequence[str],
        embeddings: Sequence[Sequence[float]],
    ) -> "VectorIndex":
        vectors = cls._prepare(embeddings)
        index = cls(vectors.shape[1])
        index._append(document_id, texts, vectors)
        return index

    @property
    def size(self) -> int:
        return self.dense_index.ntotal

    def add(self, document_id: str, texts: Sequence[str], embeddings: Sequence[Sequence[float]]) -> None:
        vectors = self._prepare(embeddings)
        if vectors.shape[1] != self.dim:
            raise ValueError(
                f"Embedding dimension {vectors.shape[1]} does not match index dimension {self.dim}"
            )
        self._append(document_id, texts, vectors)

    def search(self, query_embedding: Sequence[float], top_k: int = 3) -> List[RetrievedChunk]:
        """Return the ``top_k`` most similar chunks, best first."""
        k = min(top_k, self.size)
        if k == 0:
            return []
        query = self._prepare([query_embedding])
        if query.shape[1] != self.dim:
            raise ValueError(
                f"Query dimension {query.shape[1]} does not match index dimension {self.dim}"
            )
        scores, indices = self.dense_index.search(query, k)
        return [
            RetrievedChunk(
                text=self._texts[int(i)],
                score=float(s),
                document_id=self._document_ids[int(i)],
            )
            for s, i in zip(scores[0], indices[0])
            if i != -1
        ]

    def remove_document(self, document_id: str) -> int:
        """Drop every chunk owned by ``document_id``; returns how many were removed."""
        keep = [i for i, owner in enumerate(self._document_ids) if owner != document_id]
        removed = len(self._document_ids) - len(keep)
        if removed == 0:
            return 0

        self._vectors = self._vectors[keep]
        self._texts = [self._texts[i] for i in keep]
        self._document_ids = [self._document_ids[i] for i in keep]

        self.dense_index.reset()
        if len(keep):
            self.dense_index.add(self._vectors)
        return removed

    def _append(self, document_id: str, texts: Sequence[str], vectors: np.ndarray) -> None:
        if len(texts) != vectors.shape[0]:
            raise ValueError("texts and embeddings must have the same length")
        self.dense_index.add(vectors)
        self._vectors = np.vstack([self._vectors, vectors])
        self._texts.extend(texts)
        self._document_ids.extend([document_id] * len(texts))

    @staticmethod
    def _prepare(embeddings: Sequence[Sequence[float]]) -> np.ndarray:
        vectors = np.array(embeddings, dtype="float32")
        if vectors.ndim != 2 or vectors.shape[0] == 0:
            raise ValueError("embeddings must be a non-empty 2-D array")
        vectors = np.ascontiguousarray(vectors)
        faiss.normalize_L2(vectors)
        return vectors
