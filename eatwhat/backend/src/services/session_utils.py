from __future__ import annotations

from typing import List, Optional, Sequence

from models import Answer, RankedRestaurant
from services.session import LastPick, QuizState, session_manager


def fetch_answers(session_id: Optional[str]) -> List[Answer]:
    """Return the answers collected so far or an empty list if session_id is falsy."""
    if not session_id:
        return []
    return session_manager.get_answers(session_id)


def record_top_pick(session_id: Optional[str], ranked: Sequence[RankedRestaurant]) -> Optional[LastPick]:
    """Remember the best-ranked place for a session and close the quiz."""
    if not session_id or not ranked:
        return None
    top = ranked[0]
    pick = LastPick(place_id=top.place.id, name=top.place.name, score=top.score)
    session_manager.record_pick(session_id, pick)
    session_manager.mark_loaded(session_id)
    return pick


def fail_session(session_id: Optional[str], message: str) -> Optional[QuizState]:
    if not session_id:
        return None
    return session_manager.mark_failed(session_id, message)


def reset_session(session_id: Optional[str]) -> None:
    """Clear memory for a session id."""
    if not session_id:
        return
    session_manager.reset(session_id)
