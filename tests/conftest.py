import io
from typing import List

import pytest
from fastapi.testclient import TestClient
from reportlab.lib.pagesizes import LETTER
from reportlab.pdfgen import canvas

from dependencies.services import (
    get_embedding_service,
    get_llm_service,
    get_state,
    get_vector_store,
)
from main import app
from rag_services.state import ResumeState
from rag_services.vector_store import Match


def make_pdf(page_texts: List[str]) -> bytes:
    """Build a small text-only PDF, one line per page."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=LETTER)
    for text in page_texts:
        c.setFont("Helvetica", 10)
        c.drawString(40, 720, text)
        c.showPage()
    c.save()
    return buf.getvalue()


RESUME_PAGES = [
    "Jane Doe - Senior Backend Engineer. Eight years of Python experience building APIs.",
    "Education: BSc Computer Science, University of Leeds. Skills: FastAPI, PostgreSQL, Docker.",
]


class FakeEmbeddingService:
    def __init__(self):
        self.documents = []
        self.queries = []
        self.query_vector = [0.1, 0.2, 0.3]
        self.error = None

    async def embed_documents(self, texts):
        if self.error:
            raise self.error
        self.documents.append(list(texts))
        return [[float(len(t)), 1.0, 0.0] for t in texts]

    def embed_query(self, text):
        self.queries.append(text)
        return self.query_vector


class FakeVectorStore:
    name = "fake"

    def __init__(self):
        self.upserts = []
        self.clears = 0
        self.searches = []
        self.upsert_error = None
        self.matches = [
            Match(id="resume.pdf#0", score=0.9, text="Eight years of Python experience"),
            Match(id="resume.pdf#1", score=0.8, text="Skills: FastAPI, PostgreSQL"),
        ]

    def upsert(self, chunks, embeddings, source):
        if self.upsert_error:
            raise self.upsert_error
        self.upserts.append((list(chunks), list(embeddings), source))
        return len(chunks)

    def search(self, query_vector, query_text="", top_k=10):
        self.searches.append((query_vector, query_text, top_k))
        return self.matches

    def clear(self):
        self.clears += 1


class FakeLLMService:
    def __init__(self):
        self.calls = []
        self.answer = "The candidate has eight years of Python experience."
        self.error = None
        self.before_return = None

    def generate_answer(self, question, context, history):
        self.calls.append({"question": question, "context": context, "history": list(history)})
        if self.error:
            raise self.error
        if self.before_return:
            self.before_return()
        return self.answer


@pytest.fixture
def state():
    return ResumeState()


@pytest.fixture
def fake_embeddings():
    return FakeEmbeddingService()


@pytest.fixture
def fake_store():
    return FakeVectorStore()


@pytest.fixture
def fake_llm():
    return FakeLLMService()


@pytest.fixture
def client(state, fake_embeddings, fake_store, fake_llm):
    app.dependency_overrides[get_state] = lambda: state
    app.dependency_overrides[get_embedding_service] = lambda: fake_embeddings
    app.dependency_overrides[get_vector_store] = lambda: fake_store
    app.dependency_overrides[get_llm_service] = lambda: fake_llm
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def resume_pdf():
    return make_pdf(RESUME_PAGES)


@pytest.fixture
def pdf_factory():
    return make_pdf
