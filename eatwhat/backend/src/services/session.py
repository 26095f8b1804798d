from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field, replace
from typing import Dict, List, Literal, Optional

from models import CHOICES, Answer

QuizStatus = Literal["questioning", "loading", "results", "error"]


@dataclass(frozen=True)
class QuizState:
    status: QuizStatus = "questioning"
    current_index: int = 0
    answers: tuple[Answer, ...] = ()
    error: Optional[str] = None


@dataclass
class LastPick:
    place_id: str
    name: str
    score: float
    timestamp: float = field(default_factory=time.time)


def answer(state: QuizState, new_answer: Answer, total_questions: int) -> QuizState:
    if state.status != "questioning":
        return state
    answers = state.answers + (new_answer,)
    if state.current_index >= total_questions - 1:
        return replace(state, answers=answers, status="loading")
    return replace(state, answers=answers, current_index=state.current_index + 1)


def back(state: QuizState) -> QuizState:
    if state.status != "questioning" or state.current_index == 0:
        return state
    return replace(state, answers=state.answers[:-1], current_index=state.current_index - 1)


def loaded(state: QuizState) -> QuizState:
    if state.status != "loading":
        return state
    return replace(state, status="results")


def fail(state: QuizState, message: str) -> QuizState:
    return replace(state, status="error", error=message)


def retry(state: QuizState) -> QuizState:
    if state.status != "error":
        return state
    return replace(state, status="loading", error=None)


class SessionManager:
    """In-memory quiz sessions keyed by session id."""

    def __init__(self, total_questions: int = 4, ttl_sec: int = 3600, max_answers: int = 20) -> None:
        self._sessions: Dict[str, QuizState] = {}
        self._last_access: Dict[str, float] = {}
        self._last_pick: Dict[str, LastPick] = {}
        self._lock = threading.Lock()
        self.total_questions = total_questions
        self.ttl_sec = ttl_sec
        self.max_answers = max_answers

    def configure(
        self,
        *,
        total_questions: Optional[int] = None,
        ttl_sec: Optional[int] = None,
        max_answers: Optional[int] = None,
    ) -> None:
        if total_questions is not None:
            self.total_questions = total_questions
        if ttl_sec is not None:
            self.ttl_sec = ttl_sec
        if max_answers is not None:
            self.max_answers = max_answers

    def get_state(self, session_id: str) -> QuizState:
        with self._lock:
            self._cleanup()
            if not session_id:
                return QuizState()
            self._last_access[session_id] = time.time()
            return self._sessions.get(session_id, QuizState())

    def get_answers(self, session_id: str) -> List[Answer]:
        return list(self.get_state(session_id).answers)

    def answer(self, session_id: str, question_id: int, choice: str, total_questions: Optional[int] = None) -> QuizState:
        if choice not in CHOICES:
            raise ValueError(f"unknown choice: {choice}")
        total = total_questions or self.total_questions
        if total > self.max_answers:
            raise ValueError(f"quiz length {total} exceeds the limit of {self.max_answers}")
        return self._apply(session_id, lambda s: answer(s, Answer(question_id=question_id, choice=choice), total))  # type: ignore[arg-type]

    def back(self, session_id: str) -> QuizState:
        return self._apply(session_id, back)

    def mark_loaded(self, session_id: str) -> QuizState:
        return self._apply(session_id, loaded)

    def mark_failed(self, session_id: str, message: str) -> QuizState:
        return self._apply(session_id, lambda s: fail(s, message))

    def retry(self, session_id: str) -> QuizState:
        return self._apply(session_id, retry)

    def reset(self, session_id: str) -> None:
        """Drop the session's quiz state and remembered pick."""
        if not session_id:
            return
        with self._lock:
            self._sessions.pop(session_id, None)
            self._last_access.pop(session_id, None)
            self._last_pick.pop(session_id, None)

    def record_pick(self, session_id: str, pick: LastPick) -> None:
        if not session_id:
            return
        with self._lock:
            self._last_pick[session_id] = pick
            self._last_access[session_id] = time.time()

    def last_pick(self, session_id: str) -> Optional[LastPick]:
        with self._lock:
            self._cleanup()
            return self._last_pick.get(session_id)

    def _apply(self, session_id: str, transition) -> QuizState:
        if not session_id:
            return QuizState()
        with self._lock:
            self._cleanup()
            state = self._sessions.get(session_id, QuizState())
            state = transition(state)
            self._sessions[session_id] = state
            self._last_access[session_id] = time.time()
            return state

    def _cleanup(self) -> None:
        """Remove expired sessions."""
        now = time.time()
        expired = [
            sid for sid, last in self._last_access.items()
            if now - last > self.ttl_sec
        ]
        for sid in expired:
            self._sessions.pop(sid, None)
            self._last_pick.pop(sid, None)
            del self._last_access[sid]


# Global singleton
session_manager = SessionManager()
