from functools import lru_cache

from core.config import settings
from rag_services.embeddings import EmbeddingService
from rag_services.llm import LLMService
from rag_services.pdf_processor import PDFProcessor
from rag_services.state import ResumeState, resume_state
from rag_services.vector_store import VectorStore, build_vector_store


@lru_cache
def get_pdf_processor() -> PDFProcessor:
    return PDFProcessor()


@lru_cache
def get_embedding_service() -> EmbeddingService:
    return EmbeddingService(
        model=settings.EMBEDDING_MODEL,
        api_key=settings.GEMINI_API_KEY,
        base_url=settings.LLM_BASE_URL,
        batch_size=settings.EMBEDDING_BATCH_SIZE,
        concurrency=settings.EMBEDDING_CONCURRENCY,
    )


@lru_cache
def get_vector_store() -> VectorStore:
    return build_vector_store(settings)


@lru_cache
def get_llm_service() -> LLMService:
    return LLMService(
        model=settings.CHAT_MODEL,
        api_key=settings.GEMINI_API_KEY,
        base_url=settings.LLM_BASE_URL,
        temperature=settings.TEMPERATURE,
        max_tokens=settings.MAX_TOKENS,
    )


def get_state() -> ResumeState:
    return resume_state
