"""
Embedding generation service using the hosted embedding model
"""
from typing import List, Optional
import asyncio
from concurrent.futures import ThreadPoolExecutor
from openai import OpenAI


class EmbeddingService:
    """Handles embedding generation through an OpenAI-compatible endpoint."""

    def __init__(
        self,
        model: str = "text-embedding-004",
        api_key: str = "",
        base_url: Optional[str] = None,
        batch_size: int = 100,
        concurrency: int = 5,
    ):
        # Delay client construction until first use so importing modules
        # does not fail when GEMINI_API_KEY is not set.
        self._client = None
        self.model = model
        self.api_key = api_key
        self.base_url = base_url
        self.batch_size = batch_size
        self.concurrency = concurrency

    def _ensure_client(self):
        if self._client is not None:
            return
        if not self.api_key:
            raise RuntimeError(
                "Embedding client could not be initialized. "
                "Set the GEMINI_API_KEY environment variable."
            )
        try:
            self._client = OpenAI(api_key=self.api_key, base_url=self.base_url)
        except Exception as e:
            raise RuntimeError(f"Embedding client could not be initialized: {e}") from e

    def _process_batch(self, batch: List[str]) -> List[List[float]]:
        """Process a single batch of embeddings."""
        response = self._client.embeddings.create(
            model=self.model,
            input=batch
        )
        return [d.embedding for d in response.data]

    async def embed_documents(self, texts: List[str]) -> List[List[float]]:
        """Generate embeddings concurrently, preserving input order."""
        if not texts:
            return []
        self._ensure_client()

        batches = [texts[i:i + self.batch_size] for i in range(0, len(texts), self.batch_size)]

        loop = asyncio.get_running_loop()
        with ThreadPoolExecutor(max_workers=self.concurrency) as executor:
            tasks = [
                loop.run_in_executor(executor, self._process_batch, batch)
                for batch in batches
            ]
            results = await asyncio.gather(*tasks)

        all_embeddings = []
        for batch_embeddings in results:
            all_embeddings.extend(batch_embeddings)

        return all_embeddings

    def embed_query(self, text: str) -> List[float]:
        """Generate the embedding of a single question."""
        self._ensure_client()
        vectors = self._process_batch([text])
        return vectors[0] if vectors else []
