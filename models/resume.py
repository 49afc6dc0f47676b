"""
Pydantic models for API requests and responses
"""
from datetime import datetime
from pydantic import BaseModel
from typing import Any, Dict, List, Optional


class QueryRequest(BaseModel):
    # Validated by the route so the error messages match what the client expects
    question: Any = None


class QueryResponse(BaseModel):
    answer: str


class UploadResponse(BaseModel):
    message: str
    filename: str
    file_size: int  # PDF size in bytes
    chunks_count: int
    is_update: bool = False
    previous_chunks: Optional[int] = None


class HistoryResponse(BaseModel):
    history: List[Dict[str, str]]


class MessageResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    status: str
    has_document: bool
    chunks_count: int
    filename: Optional[str] = None
    file_size: Optional[int] = None
    uploaded_at: Optional[datetime] = None
    history_turns: int = 0
    vector_backend: str
