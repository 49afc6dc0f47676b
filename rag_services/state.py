"""
Shared in-memory state for the resume analyzer.

Holds the most recently uploaded resume and the chat history so the upload
and query endpoints see the same data.
"""
import asyncio
from datetime import datetime, timezone
from typing import Dict, List, Optional


class ResumeState:
    def __init__(self):
        self.lock = asyncio.Lock()
        self.filename: Optional[str] = None
        self.file_size: Optional[int] = None
        self.chunks_count: int = 0
        self.uploaded_at: Optional[datetime] = None
        self.history: List[Dict[str, str]] = []
        # Bumped whenever the document changes, so answers computed against
        # a replaced resume are not recorded in the new conversation.
        self.version: int = 0

    @property
    def has_document(self) -> bool:
        return self.filename is not None

    def set_document(self, filename: str, file_size: int, chunks_count: int) -> None:
        """Replace the current resume; a new resume starts a new conversation."""
        self.filename = filename
        self.file_size = file_size
        self.chunks_count = chunks_count
        self.uploaded_at = datetime.now(timezone.utc)
        self.history = []
        self.version += 1

    def append_turn(self, question: str, answer: str) -> None:
        self.history.append({"user": question, "assistant": answer})

    def snapshot_history(self) -> List[Dict[str, str]]:
        return [dict(turn) for turn in self.history]

    def clear_history(self) -> None:
        self.history = []

    def reset(self) -> None:
        self.filename = None
        self.file_size = None
        self.chunks_count = 0
        self.uploaded_at = None
        self.history = []
        self.version += 1


resume_state = ResumeState()
