from __future__ import annotations

import time

import pytest

from services.session import LastPick, SessionManager


def test_answers_advance_until_loading() -> None:
    mgr = SessionManager(total_questions=3, ttl_sec=1000)
    mgr.answer("sess-1", 1, "left")
    state = mgr.answer("sess-1", 2, "skip")
    assert state.status == "questioning"
    assert state.current_index == 2

    state = mgr.answer("sess-1", 3, "right")
    assert state.status == "loading"
    assert [a.question_id for a in state.answers] == [1, 2, 3]

    # no more answers once the quiz is done
    state = mgr.answer("sess-1", 4, "left")
    assert len(state.answers) == 3


def test_back_drops_last_answer() -> None:
    mgr = SessionManager(total_questions=4, ttl_sec=1000)
    assert mgr.back("sess-b").current_index == 0

    mgr.answer("sess-b", 1, "left")
    mgr.answer("sess-b", 2, "right")
    state = mgr.back("sess-b")
    assert state.current_index == 1
    assert [a.question_id for a in state.answers] == [1]


def test_loaded_error_retry_cycle() -> None:
    mgr = SessionManager(total_questions=1, ttl_sec=1000)
    assert mgr.mark_loaded("sess-c").status == "questioning"

    mgr.answer("sess-c", 1, "left")
    state = mgr.mark_failed("sess-c", "places unavailable")
    assert state.status == "error"
    assert state.error == "places unavailable"

    state = mgr.retry("sess-c")
    assert state.status == "loading"
    assert state.error is None

    assert mgr.mark_loaded("sess-c").status == "results"
    assert mgr.back("sess-c").status == "results"


def test_invalid_choice_rejected() -> None:
    mgr = SessionManager()
    with pytest.raises(ValueError):
        mgr.answer("sess-d", 1, "up")


def test_quiz_length_capped() -> None:
    mgr = SessionManager(max_answers=5)
    with pytest.raises(ValueError):
        mgr.answer("sess-e", 1, "left", total_questions=6)


def test_reset_clears_state() -> None:
    mgr = SessionManager(total_questions=2, ttl_sec=1000)
    mgr.answer("sess-2", 1, "left")
    mgr.record_pick("sess-2", LastPick(place_id="p1", name="Noodles", score=2))
    assert mgr.get_answers("sess-2")
    assert mgr.last_pick("sess-2") is not None

    mgr.reset("sess-2")
    assert mgr.get_answers("sess-2") == []
    assert mgr.last_pick("sess-2") is None


def test_cleanup_by_ttl() -> None:
    mgr = SessionManager(total_questions=2, ttl_sec=1)
    mgr.answer("sess-ttl", 1, "left")
    assert "sess-ttl" in mgr._sessions  # type: ignore[attr-defined]

    # force timestamp to be stale
    mgr._last_access["sess-ttl"] = time.time() - 10  # type: ignore[attr-defined]
    assert mgr.get_answers("sess-ttl") == []
    assert "sess-ttl" not in mgr._sessions  # type: ignore[attr-defined]


def test_empty_session_id_is_ignored() -> None:
    mgr = SessionManager()
    assert mgr.answer("", 1, "left").answers == ()
    assert mgr._sessions == {}  # type: ignore[attr-defined]
