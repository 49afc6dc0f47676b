import logging
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Body, Depends, File, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool

from core.config import settings
from dependencies.services import (
    get_embedding_service,
    get_llm_service,
    get_pdf_processor,
    get_state,
    get_vector_store,
)
from models.resume import (
    HistoryResponse,
    MessageResponse,
    QueryRequest,
    QueryResponse,
    UploadResponse,
)
from rag_services.embeddings import EmbeddingService
from rag_services.llm import NO_ANSWER, LLMService
from rag_services.pdf_processor import PDFProcessor
from rag_services.state import ResumeState
from rag_services.vector_store import VectorStore

logger = logging.getLogger(__name__)

router = APIRouter()

CONTEXT_SEPARATOR = "\n\n---\n\n"
MISSING_QUESTION = (
    "Missing 'question' in request body. Example: "
    "{ \"question\": \"What is the candidate's experience?\" }"
)


@router.post("/upload", response_model=UploadResponse)
async def upload_resume(
    resume: Optional[UploadFile] = File(None),
    pdf_processor: PDFProcessor = Depends(get_pdf_processor),
    embedding_service: EmbeddingService = Depends(get_embedding_service),
    vector_store: VectorStore = Depends(get_vector_store),
    state: ResumeState = Depends(get_state),
):
    """
    Upload a resume PDF (multipart field `resume`).

    The PDF is parsed in memory, split into overlapping chunks, embedded and
    written to the vector index. It replaces any previously uploaded resume
    and starts a fresh chat history.
    """
    filename = Path(resume.filename or "").name if resume is not None else ""
    if not filename.lower().endswith(tuple(settings.ALLOWED_EXTENSIONS)):
        raise HTTPException(status_code=400, detail="Invalid file type. Only PDF files are allowed")

    pdf_bytes = await resume.read()
    pdf_size = len(pdf_bytes)

    if pdf_size == 0:
        raise HTTPException(status_code=400, detail="Uploaded file is empty")
    if pdf_size > settings.MAX_FILE_SIZE_MB * 1024 * 1024:
        raise HTTPException(status_code=400, detail="File size limit exceeded")

    try:
        pages = await run_in_threadpool(pdf_processor.extract_pages, pdf_bytes)
        text = pdf_processor.pages_to_text(pages)
        if len(text) < settings.MIN_TEXT_LENGTH:
            raise HTTPException(status_code=400, detail="Insufficient text content")

        chunks = pdf_processor.split_pages(pages, settings.CHUNK_SIZE, settings.CHUNK_OVERLAP)
        embeddings = await embedding_service.embed_documents([c.text for c in chunks])

        async with state.lock:
            previous_chunks = state.chunks_count if state.has_document else 0

            if settings.CLEAR_INDEX_ON_UPLOAD:
                await run_in_threadpool(vector_store.clear)
            try:
                await run_in_threadpool(vector_store.upsert, chunks, embeddings, filename)
            except Exception:
                if settings.CLEAR_INDEX_ON_UPLOAD:
                    # The previous resume's vectors are already gone.
                    state.reset()
                raise

            state.set_document(filename, pdf_size, len(chunks))

        logger.info("Processed resume %s into %d chunks", filename, len(chunks))

        return UploadResponse(
            message="Resume uploaded and processed successfully",
            filename=filename,
            file_size=pdf_size,
            chunks_count=len(chunks),
            is_update=previous_chunks > 0,
            previous_chunks=previous_chunks or None,
        )

    except HTTPException:
        raise
    except Exception:
        logger.exception("Upload error")
        raise HTTPException(status_code=500, detail="Upload or processing failed")
    finally:
        await resume.close()


@router.post("/query", response_model=QueryResponse)
async def query_resume(
    payload: Optional[QueryRequest] = Body(None),
    embedding_service: EmbeddingService = Depends(get_embedding_service),
    vector_store: VectorStore = Depends(get_vector_store),
    llm_service: LLMService = Depends(get_llm_service),
    state: ResumeState = Depends(get_state),
):
    """
    Answer a question about the uploaded resume.

    Request body:
    ```json
    {
        "question": "What is the candidate's experience?"
    }
    ```
    """
    question = payload.question if payload is not None else None

    if not state.has_document:
        logger.error("Query rejected: no resume uploaded")
        raise HTTPException(status_code=400, detail="Please upload a resume first")

    # null, "", 0 and false count as missing; empty lists and objects do not
    if question is None or question in ("", 0):
        logger.error("Missing 'question' in request body")
        raise HTTPException(status_code=400, detail=MISSING_QUESTION)

    if not isinstance(question, str) or not question.strip():
        logger.error("Invalid 'question' value: %r", question)
        raise HTTPException(status_code=400, detail="'question' must be a non-empty string")

    try:
        query_vector = await run_in_threadpool(embedding_service.embed_query, question)
        if not query_vector:
            logger.error("Embedding failed or returned empty vector")
            raise HTTPException(status_code=500, detail="Embedding failed")

        matches = await run_in_threadpool(
            vector_store.search, query_vector, question, settings.TOP_K_RESULTS
        )
        if not matches:
            logger.warning("No matches found in the vector index")

        context = CONTEXT_SEPARATOR.join(m.text for m in matches if m.text)
        if not context.strip():
            return QueryResponse(answer=NO_ANSWER)

        version = state.version
        history = state.snapshot_history()

        answer = await run_in_threadpool(llm_service.generate_answer, question, context, history)
        if not answer:
            logger.error("Chat model did not return a response")
            raise HTTPException(status_code=500, detail="Gemini API failed")

        async with state.lock:
            if state.version == version:
                state.append_turn(question, answer)

        return QueryResponse(answer=answer)

    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Query error")
        raise HTTPException(status_code=500, detail=str(e) or "Query failed")


@router.get("/history", response_model=HistoryResponse)
async def get_history(state: ResumeState = Depends(get_state)):
    """Chat history for the current resume, oldest turn first."""
    return HistoryResponse(history=state.snapshot_history())


@router.delete("/history", response_model=MessageResponse)
async def clear_history(state: ResumeState = Depends(get_state)):
    async with state.lock:
        state.clear_history()
    logger.info("Chat history cleared")
    return MessageResponse(message="Chat history cleared")


@router.delete("/clear", response_model=MessageResponse)
async def clear_document(
    vector_store: VectorStore = Depends(get_vector_store),
    state: ResumeState = Depends(get_state),
):
    if not state.has_document:
        raise HTTPException(status_code=404, detail="No document to clear")

    try:
        async with state.lock:
            await run_in_threadpool(vector_store.clear)
            state.reset()
    except Exception as e:
        logger.exception("Failed to clear document")
        raise HTTPException(status_code=500, detail=str(e))

    logger.info("Resume and vectors cleared")
    return MessageResponse(message="Document and vectors cleared successfully")
