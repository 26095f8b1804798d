from __future__ import annotations

import sys
from dataclasses import asdict
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from loguru import logger
from pydantic import BaseModel, Field

from config import Configuration
from models import Answer, Place, Question, RankedRestaurant, StructuredTags, UserLocation
from services.preferences import (
    apply_answers_to_preference,
    default_preference,
    merge_preferences,
    parse_preference,
)
from services.questions import QUESTIONS, build_dynamic_questions, build_starter_questions
from services.ranking import rank_restaurants, score_places
from services.report import build_report
from services.session import QuizState, session_manager
from services.session_utils import fail_session, fetch_answers, record_top_pick, reset_session
from services.taxonomy import price_level_to_bucket


load_dotenv()
_startup_cfg = Configuration.from_env()
logger.remove()
logger.add(sys.stderr, level=_startup_cfg.log_level.upper())
session_manager.configure(
    total_questions=len(QUESTIONS),
    ttl_sec=_startup_cfg.session_ttl_sec,
    max_answers=_startup_cfg.session_max_answers,
)

app = FastAPI(title="EatWhat Recommender")
app.add_middleware(
    CORSMiddleware,
    allow_origins=_startup_cfg.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/favicon.ico")
def favicon() -> Response:
    return Response(status_code=204)


class QuestionPayload(BaseModel):
    id: int
    text: str
    left_choice: str
    right_choice: str
    skip_choice: str = "Skip"
    left_tags: List[str] = []
    right_tags: List[str] = []


class AnswerPayload(BaseModel):
    question_id: int
    choice: Literal["left", "right", "skip"]
    left_tags: List[str] = []
    right_tags: List[str] = []
    text: Optional[str] = None
    left_choice: Optional[str] = None
    right_choice: Optional[str] = None


class LocationPayload(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class StructuredTagsPayload(BaseModel):
    cuisine: List[str] = []
    taste: List[str] = []
    ambience: List[str] = []
    meal_type: List[str] = []
    diet: List[str] = []


class PlacePayload(BaseModel):
    id: str
    name: str
    latitude: float
    longitude: float
    tags: List[str] = []
    distance: float = Field(0.0, ge=0)
    rating: Optional[float] = Field(None, ge=0, le=5)
    price_level: Optional[Union[Annotated[int, Field(ge=0, le=4)], str]] = Field(
        None, description="0-4 or a Places API enum such as PRICE_LEVEL_MODERATE"
    )
    price_bucket: Optional[Literal["budget", "mid", "high"]] = None
    open_now: Optional[bool] = None
    address: Optional[str] = None
    location_url: Optional[str] = None
    structured_tags: Optional[StructuredTagsPayload] = None
    reason: Optional[str] = None


class RankedPayload(BaseModel):
    place: PlacePayload
    score: float
    reasons: List[str] = []
    distance: float


class RankRequest(BaseModel):
    answers: List[AnswerPayload] = []
    restaurants: List[PlacePayload] = []
    questions: Optional[List[QuestionPayload]] = Field(None, description="Defaults to the built-in catalog")
    user_location: Optional[LocationPayload] = None
    session_id: Optional[str] = Field(None, description="Use the answers collected in this quiz session")


class ScoreRequest(BaseModel):
    location: Optional[LocationPayload] = None
    answers: List[AnswerPayload] = []
    places: List[PlacePayload] = []
    preference: Optional[Dict[str, Any]] = Field(None, description="Stored or inferred preference profile")
    preference_override: Optional[Dict[str, Any]] = Field(None, description="Runtime override, highest precedence")


class RankResponse(BaseModel):
    recommendations_markdown: str
    results: List[RankedPayload]


class ScoreResponse(BaseModel):
    recommendations_markdown: str
    results: List[RankedPayload]
    preference: Dict[str, Any]


class DynamicQuestionsRequest(BaseModel):
    preference: Optional[Dict[str, Any]] = None
    question_length: Optional[Literal["short", "standard", "long"]] = None


class QuizAnswerRequest(BaseModel):
    question_id: int
    choice: Literal["left", "right", "skip"]
    total_questions: Optional[int] = Field(None, ge=1)


class QuizStatePayload(BaseModel):
    status: str
    current_index: int
    answers: List[AnswerPayload]
    error: Optional[str] = None
    last_pick: Optional[Dict[str, Any]] = None


def _to_question(q: QuestionPayload) -> Question:
    return Question(**q.model_dump())


def _question_payload(q: Question) -> QuestionPayload:
    return QuestionPayload(**asdict(q))


def _to_answer(a: AnswerPayload) -> Answer:
    return Answer(**a.model_dump())


def _to_location(loc: Optional[LocationPayload]) -> Optional[UserLocation]:
    if loc is None:
        return None
    return UserLocation(latitude=loc.latitude, longitude=loc.longitude)


def _to_place(p: PlacePayload) -> Place:
    data = p.model_dump(exclude={"structured_tags"})
    if data["price_bucket"] is None:
        data["price_bucket"] = price_level_to_bucket(p.price_level)
    structured = StructuredTags(**p.structured_tags.model_dump()) if p.structured_tags else None
    return Place(structured_tags=structured, **data)


def _ranked_payload(r: RankedRestaurant) -> RankedPayload:
    return RankedPayload(
        place=PlacePayload(**asdict(r.place)),
        score=r.score,
        reasons=list(r.reasons),
        distance=r.distance,
    )


def _quiz_payload(session_id: str, state: QuizState) -> QuizStatePayload:
    pick = session_manager.last_pick(session_id)
    return QuizStatePayload(
        status=state.status,
        current_index=state.current_index,
        answers=[AnswerPayload(**asdict(a)) for a in state.answers],
        error=state.error,
        last_pick=asdict(pick) if pick else None,
    )


def _load_config() -> Configuration:
    try:
        return Configuration.from_env()
    except ValueError as exc:
        logger.exception("invalid configuration: {}", exc)
        raise HTTPException(status_code=500, detail="internal error")


@app.get("/healthz")
def healthz() -> dict:
    cfg = _load_config()
    logger.info("cfg: {}", cfg.log_summary())
    return {"status": "ok"}


@app.get("/questions", response_model=List[QuestionPayload])
def list_questions() -> List[QuestionPayload]:
    return [_question_payload(q) for q in QUESTIONS]


@app.get("/questions/starter", response_model=List[QuestionPayload])
def starter_questions() -> List[QuestionPayload]:
    return [_question_payload(q) for q in build_starter_questions()]


@app.post("/questions/dynamic", response_model=List[QuestionPayload])
def dynamic_questions(req: DynamicQuestionsRequest) -> List[QuestionPayload]:
    cfg = _load_config()
    preference = parse_preference(req.preference, fallback=default_preference(cfg.default_confidence))
    length = req.question_length or cfg.question_length
    questions = build_dynamic_questions(preference.confidence, length)
    logger.info("dynamic questions confidence={:.2f} length={} count={}", preference.confidence, length, len(questions))
    return [_question_payload(q) for q in questions]


@app.post("/restaurants/rank", response_model=RankResponse)
def rank(req: RankRequest) -> RankResponse:
    cfg = _load_config()
    try:
        answers = [_to_answer(a) for a in req.answers]
        if not answers and req.session_id:
            answers = fetch_answers(req.session_id)
        questions = [_to_question(q) for q in req.questions] if req.questions is not None else list(QUESTIONS)
        restaurants = [_to_place(p) for p in req.restaurants]
        location = _to_location(req.user_location)

        ranked = rank_restaurants(answers, restaurants, questions, location)
        md = build_report(ranked, user_location=location, top_n=cfg.report_top_n)

        if req.session_id:
            record_top_pick(req.session_id, ranked)

        logger.info(
            "flat ranking answers={} restaurants={} top_score={}",
            len(answers),
            len(ranked),
            ranked[0].score if ranked else 0,
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except Exception as exc:
        logger.exception("ranking failed: {}", exc)
        fail_session(req.session_id, "ranking failed")
        raise HTTPException(status_code=500, detail="internal error")

    return RankResponse(recommendations_markdown=md, results=[_ranked_payload(r) for r in ranked])


@app.post("/recommendations/score", response_model=ScoreResponse)
def score(req: ScoreRequest) -> ScoreResponse:
    cfg = _load_config()
    try:
        stored = parse_preference(req.preference, fallback=default_preference(cfg.default_confidence))
        answers = [_to_answer(a) for a in req.answers]
        folded = apply_answers_to_preference(stored, answers)
        preference = merge_preferences(folded, req.preference_override)

        places = [_to_place(p) for p in req.places]
        location = _to_location(req.location)
        ranked = score_places(places, preference, location)
        md = build_report(ranked, preference=preference, user_location=location, top_n=cfg.report_top_n)

        logger.info(
            "structured ranking answers={} places={} confidence={:.2f}",
            len(answers),
            len(ranked),
            preference.confidence,
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except Exception as exc:
        logger.exception("scoring failed: {}", exc)
        raise HTTPException(status_code=500, detail="internal error")

    return ScoreResponse(
        recommendations_markdown=md,
        results=[_ranked_payload(r) for r in ranked],
        preference=asdict(preference),
    )


@app.get("/quiz/sessions/{session_id}", response_model=QuizStatePayload)
def quiz_state(session_id: str) -> QuizStatePayload:
    return _quiz_payload(session_id, session_manager.get_state(session_id))


@app.post("/quiz/sessions/{session_id}/answer", response_model=QuizStatePayload)
def quiz_answer(session_id: str, req: QuizAnswerRequest) -> QuizStatePayload:
    try:
        state = session_manager.answer(session_id, req.question_id, req.choice, req.total_questions)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return _quiz_payload(session_id, state)


@app.post("/quiz/sessions/{session_id}/back", response_model=QuizStatePayload)
def quiz_back(session_id: str) -> QuizStatePayload:
    return _quiz_payload(session_id, session_manager.back(session_id))


@app.post("/quiz/sessions/{session_id}/retry", response_model=QuizStatePayload)
def quiz_retry(session_id: str) -> QuizStatePayload:
    return _quiz_payload(session_id, session_manager.retry(session_id))


@app.post("/quiz/sessions/{session_id}/reset", response_model=QuizStatePayload)
def quiz_reset(session_id: str) -> QuizStatePayload:
    reset_session(session_id)
    return _quiz_payload(session_id, session_manager.get_state(session_id))


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8010, reload=True)
