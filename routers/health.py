from fastapi import APIRouter, Depends

from dependencies.services import get_state, get_vector_store
from models.resume import HealthResponse
from rag_services.state import ResumeState
from rag_services.vector_store import VectorStore

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(
    state: ResumeState = Depends(get_state),
    vector_store: VectorStore = Depends(get_vector_store),
):
    return HealthResponse(
        status="ok",
        has_document=state.has_document,
        chunks_count=state.chunks_count,
        filename=state.filename,
        file_size=state.file_size,
        uploaded_at=state.uploaded_at,
        history_turns=len(state.history),
        vector_backend=vector_store.name,
    )
