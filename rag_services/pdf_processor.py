"""
PDF text extraction and chunking
"""
import io
import re
import logging
from dataclasses import dataclass
from typing import List
from pypdf import PdfReader
from fastapi import HTTPException
from langchain_text_splitters import RecursiveCharacterTextSplitter

logger = logging.getLogger(__name__)


@dataclass
class Chunk:
    """A window of resume text ready for embedding."""
    text: str
    page: int  # 1-based page number
    index: int  # position in the whole document


class PDFProcessor:
    """Handles PDF text extraction and chunking."""

    @staticmethod
    def extract_pages(pdf_bytes: bytes) -> List[str]:
        """Extract the raw text of every page, one string per page."""
        try:
            reader = PdfReader(io.BytesIO(pdf_bytes))
            pages = reader.pages
        except Exception as e:
            raise HTTPException(
                status_code=400,
                detail=f"Failed to extract text from PDF: {str(e)}"
            )

        text_pages = []
        for i, page in enumerate(pages):
            try:
                text_pages.append(page.extract_text() or "")
            except Exception as e:
                logger.warning("Could not extract text from page %d: %s", i + 1, e)
                text_pages.append("")

        return text_pages

    @classmethod
    def extract_text(cls, pdf_bytes: bytes) -> str:
        """Extract and clean text from PDF bytes."""
        return cls.pages_to_text(cls.extract_pages(pdf_bytes))

    @classmethod
    def pages_to_text(cls, pages: List[str]) -> str:
        return cls._clean_text(" ".join(pages))

    @staticmethod
    def _clean_text(text: str) -> str:
        """Clean and normalize text."""
        text = re.sub(r"-\s*\n", "", text)
        text = text.replace("\n", " ")
        text = re.sub(r"\s+", " ", text).strip()
        return text

    @classmethod
    def split_pages(cls, pages: List[str], chunk_size: int, overlap: int) -> List[Chunk]:
        if overlap >= chunk_size:
            raise ValueError("overlap must be smaller than chunk_size")

        splitter = RecursiveCharacterTextSplitter(
            chunk_size=chunk_size,
            chunk_overlap=overlap,
        )

        chunks: List[Chunk] = []
        for page_number, page_text in enumerate(pages, start=1):
            if not page_text or not page_text.strip():
                continue
            for piece in splitter.split_text(page_text):
                cleaned = cls._clean_text(piece)
                if cleaned:
                    chunks.append(Chunk(text=cleaned, page=page_number, index=len(chunks)))

        return chunks
