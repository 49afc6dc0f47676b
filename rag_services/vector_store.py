"""
Vector index backends: hosted Pinecone, or an in-process FAISS + BM25 hybrid
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import faiss
import numpy as np
from pinecone import Pinecone
from pinecone.exceptions import NotFoundException
from rank_bm25 import BM25Okapi

from rag_services.pdf_processor import Chunk

logger = logging.getLogger(__name__)


@dataclass
class Match:
    id: str
    score: float
    text: str
    metadata: Dict[str, Any] = field(default_factory=dict)


def chunk_metadata(chunk: Chunk, source: str) -> Dict[str, Any]:
    return {
        "text": chunk.text,
        "page": chunk.page,
        "chunk_index": chunk.index,
        "source": source,
    }


class VectorStore:
    """Interface shared by the vector index backends."""

    name = "base"

    def upsert(self, chunks: List[Chunk], embeddings: List[List[float]], source: str) -> int:
        raise NotImplementedError

    def search(self, query_vector: List[float], query_text: str = "", top_k: int = 10) -> List[Match]:
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError

    @staticmethod
    def _check_lengths(chunks: List[Chunk], embeddings: List[List[float]]) -> None:
        if len(chunks) != len(embeddings):
            raise ValueError(
                f"Got {len(embeddings)} embeddings for {len(chunks)} chunks"
            )


class PineconeVectorStore(VectorStore):
    """Stores resume chunks in a hosted Pinecone index."""

    name = "pinecone"

    def __init__(
        self,
        index_name: str = "",
        api_key: str = "",
        namespace: str = "",
        batch_size: int = 100,
        index: Optional[Any] = None,
    ):
        self.index_name = index_name
        self.api_key = api_key
        self.namespace = namespace
        self.batch_size = batch_size
        self._index = index

    def _ensure_index(self):
        if self._index is not None:
            return self._index
        if not self.api_key or not self.index_name:
            raise RuntimeError(
                "Pinecone index could not be initialized. "
                "Set PINECONE_API_KEY and PINECONE_INDEX_NAME."
            )
        client = Pinecone(api_key=self.api_key)
        self._index = client.Index(self.index_name)
        return self._index

    def upsert(self, chunks: List[Chunk], embeddings: List[List[float]], source: str) -> int:
        self._check_lengths(chunks, embeddings)
        index = self._ensure_index()

        vectors = [
            {
                "id": f"{source}#{chunk.index}",
                "values": list(values),
                "metadata": chunk_metadata(chunk, source),
            }
            for chunk, values in zip(chunks, embeddings)
        ]

        for i in range(0, len(vectors), self.batch_size):
            index.upsert(vectors=vectors[i:i + self.batch_size], namespace=self.namespace)

        return len(vectors)

    def search(self, query_vector: List[float], query_text: str = "", top_k: int = 10) -> List[Match]:
        index = self._ensure_index()
        results = index.query(
            vector=list(query_vector),
            top_k=top_k,
            include_metadata=True,
            namespace=self.namespace,
        )

        matches = []
        for m in getattr(results, "matches", None) or []:
            metadata = dict(getattr(m, "metadata", None) or {})
            matches.append(Match(
                id=str(m.id),
                score=float(getattr(m, "score", 0.0) or 0.0),
                text=str(metadata.get("text", "")),
                metadata=metadata,
            ))
        return matches

    def clear(self) -> None:
        index = self._ensure_index()
        try:
            index.delete(delete_all=True, namespace=self.namespace)
        except NotFoundException:
            # Nothing has been written to this namespace yet.
            logger.info("Pinecone namespace %r is already empty", self.namespace)


class LocalVectorStore(VectorStore):
    """In-process hybrid search using FAISS and BM25."""

    name = "local"

    def __init__(self):
        self.entries: List[Dict[str, Any]] = []
        self.vectors: List[List[float]] = []
        self.dense_index = None
        self.bm25_index = None

    def upsert(self, chunks: List[Chunk], embeddings: List[List[float]], source: str) -> int:
        self._check_lengths(chunks, embeddings)
        for chunk, values in zip(chunks, embeddings):
            self.entries.append({
                "id": f"{source}#{chunk.index}",
                "metadata": chunk_metadata(chunk, source),
            })
            self.vectors.append(list(values))
        self._build_indices()
        return len(chunks)

    def _build_indices(self):
        """Build both dense (FAISS) and sparse (BM25) indices."""
        if not self.vectors:
            self.dense_index = None
            self.bm25_index = None
            return

        emb_np = np.array(self.vectors).astype('float32')
        self.dense_index = faiss.IndexFlatL2(emb_np.shape[1])
        self.dense_index.add(emb_np)

        tokenized = [e["metadata"]["text"].lower().split() for e in self.entries]
        self.bm25_index = BM25Okapi(tokenized)

    def search(self, query_vector: List[float], query_text: str = "", top_k: int = 10) -> List[Match]:
        if self.dense_index is None or top_k <= 0:
            return []

        dense = self._dense_search(query_vector, top_k)
        sparse = self._sparse_search(query_text, top_k) if query_text else {}

        combined = [
            (i, dense.get(i, 0.0) + sparse.get(i, 0.0))
            for i in set(dense) | set(sparse)
        ]
        combined.sort(key=lambda x: x[1], reverse=True)

        return [
            Match(
                id=self.entries[i]["id"],
                score=score,
                text=self.entries[i]["metadata"]["text"],
                metadata=dict(self.entries[i]["metadata"]),
            )
            for i, score in combined[:top_k]
        ]

    def _dense_search(self, query_vector: List[float], top_k: int) -> Dict[int, float]:
        q_emb = np.array([query_vector], dtype='float32')
        k = min(top_k, self.dense_index.ntotal)
        scores, indices = self.dense_index.search(q_emb, k)

        return {
            int(idx): 1.0 / (1.0 + float(score))
            for idx, score in zip(indices[0], scores[0])
            if idx != -1
        }

    def _sparse_search(self, query_text: str, top_k: int) -> Dict[int, float]:
        scores = self.bm25_index.get_scores(query_text.lower().split())
        top_indices = np.argsort(scores)[-top_k:][::-1]

        return {
            int(i): float(scores[i])
            for i in top_indices
            if scores[i] > 0
        }

    def clear(self) -> None:
        if self.dense_index is not None:
            self.dense_index.reset()
        self.entries = []
        self.vectors = []
        self.dense_index = None
        self.bm25_index = None


def build_vector_store(settings) -> VectorStore:
    backend = settings.VECTOR_BACKEND.strip().lower()
    if backend == "pinecone":
        return PineconeVectorStore(
            index_name=settings.PINECONE_INDEX_NAME,
            api_key=settings.PINECONE_API_KEY,
            namespace=settings.PINECONE_NAMESPACE,
            batch_size=settings.PINECONE_UPSERT_BATCH_SIZE,
        )
    if backend == "local":
        return LocalVectorStore()
    raise ValueError(f"Unknown vector backend: {settings.VECTOR_BACKEND!r}")
