from pydantic_settings import BaseSettings
from pydantic import Field
from typing import List, Optional


GEMINI_OPENAI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"


class Settings(BaseSettings):
    app_name: str = "Resume Analyzer API"
    environment: str = Field(default="development")

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=5000)
    log_level: str = Field(default="INFO")

    # CORS
    cors_allow_origins: List[str] = Field(default_factory=lambda: ["*"])

    # Hosted model endpoint (Gemini through its OpenAI-compatible API)
    GEMINI_API_KEY: str = ""
    LLM_BASE_URL: str = GEMINI_OPENAI_BASE_URL

    EMBEDDING_MODEL: str = "text-embedding-004"
    EMBEDDING_BATCH_SIZE: int = 100
    EMBEDDING_CONCURRENCY: int = 5

    CHAT_MODEL: str = "gemini-2.0-flash"
    TEMPERATURE: float = 0.3
    MAX_TOKENS: Optional[int] = None

    # Vector index
    VECTOR_BACKEND: str = "pinecone"  # "pinecone" or "local"
    PINECONE_API_KEY: str = ""
    PINECONE_INDEX_NAME: str = ""
    PINECONE_NAMESPACE: str = ""
    PINECONE_UPSERT_BATCH_SIZE: int = 100
    CLEAR_INDEX_ON_UPLOAD: bool = True

    # File Upload Settings
    MAX_FILE_SIZE_MB: int = 5
    ALLOWED_EXTENSIONS: List[str] = [".pdf"]
    MIN_TEXT_LENGTH: int = 50

    # RAG Settings
    CHUNK_SIZE: int = 1000
    CHUNK_OVERLAP: int = 200
    TOP_K_RESULTS: int = 10

    model_config = {
        "env_file": ".env",
        "case_sensitive": False,
        "extra": "ignore",
    }


settings = Settings()
