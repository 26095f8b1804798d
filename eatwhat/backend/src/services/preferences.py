from __future__ import annotations

import copy
from dataclasses import asdict, fields
from typing import Any, Dict, Iterable, List, Literal, Mapping, Optional, Sequence, Union

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from models import Answer, PreferenceProfile, Question
from services.taxonomy import COMPOSITE_TAGS, tag_category
from utils import append_unique


DEFAULT_CONFIDENCE = 0.4

PROFILE_FIELDS = tuple(f.name for f in fields(PreferenceProfile))


class PreferenceSchema(BaseModel):
    """Wire shape of a preference profile as produced by inference or storage."""

    model_config = ConfigDict(populate_by_name=True)

    cuisine: List[str] = Field(default_factory=list)
    taste: List[str] = Field(default_factory=list)
    price: List[Literal["budget", "mid", "high"]] = Field(default_factory=list)
    ambience: List[str] = Field(default_factory=list)
    meal_type: List[str] = Field(default_factory=list, alias="mealType")
    diet: List[str] = Field(default_factory=list)
    distance_preference: Literal["near", "far", "no_preference"] = Field(
        default="no_preference", alias="distancePreference"
    )
    confidence: float = Field(default=DEFAULT_CONFIDENCE, ge=0.0, le=1.0)
    rationale: List[str] = Field(default_factory=list)

    def to_profile(self) -> PreferenceProfile:
        return PreferenceProfile(
            cuisine=list(self.cuisine),
            taste=list(self.taste),
            price=list(self.price),
            ambience=list(self.ambience),
            meal_type=list(self.meal_type),
            diet=list(self.diet),
            distance_preference=self.distance_preference,
            confidence=self.confidence,
            rationale=list(self.rationale),
        )


def build_tag_reasons(answers: Iterable[Answer], questions: Sequence[Question]) -> Dict[str, str]:
    """Fold answers into a tag -> reason lookup.

    A later answer overwrites the reason of an earlier one for a shared tag.
    Answers pointing at unknown questions are ignored.
    """
    by_id = {q.id: q for q in questions}
    tag_reasons: Dict[str, str] = {}

    for ans in answers:
        if ans.choice == "skip":
            continue
        question = by_id.get(ans.question_id)
        if question is None:
            continue
        if ans.choice == "left":
            for tag in question.left_tags:
                tag_reasons[tag] = f'Matches your choice: "{question.left_choice}"'
        elif ans.choice == "right":
            for tag in question.right_tags:
                tag_reasons[tag] = f'Matches your choice: "{question.right_choice}"'

    return tag_reasons


def default_preference(confidence: float = DEFAULT_CONFIDENCE) -> PreferenceProfile:
    """Neutral profile used when nothing is stored or inference failed."""
    return PreferenceProfile(distance_preference="no_preference", confidence=confidence)


def parse_preference(
    payload: Optional[Union[Mapping[str, Any], PreferenceProfile]],
    *,
    fallback: Optional[PreferenceProfile] = None,
) -> PreferenceProfile:
    """Validate a stored or inferred profile, substituting the fallback on failure."""
    if isinstance(payload, PreferenceProfile):
        return copy.deepcopy(payload)
    if fallback is None:
        fallback = default_preference()
    if payload is None:
        return copy.deepcopy(fallback)
    try:
        return PreferenceSchema.model_validate(dict(payload)).to_profile()
    except (ValidationError, TypeError, ValueError) as exc:
        logger.warning("preference payload rejected, using default: {}", exc)
        return copy.deepcopy(fallback)


def _add_unique(profile: PreferenceProfile, category: str, values: Iterable[str]) -> None:
    bucket: List[str] = getattr(profile, category)
    for value in values:
        append_unique(bucket, value)


def apply_answers_to_preference(
    preference: PreferenceProfile,
    answers: Iterable[Answer],
) -> PreferenceProfile:
    """Route the tags of each chosen side into the matching profile category.

    Uses the tags denormalized on each answer. Returns a new profile; the
    input is left untouched.
    """
    updated = copy.deepcopy(preference)

    for ans in answers:
        for tag in ans.chosen_tags():
            category = tag_category(tag)
            if category == "distance":
                updated.distance_preference = tag  # type: ignore[assignment]
            elif category == "composite":
                for target, values in COMPOSITE_TAGS[tag].items():
                    _add_unique(updated, target, values)
            else:
                _add_unique(updated, category, [tag])

    return updated


def merge_preferences(
    *parts: Optional[Union[PreferenceProfile, Mapping[str, Any]]],
) -> PreferenceProfile:
    """Merge profile layers left to right on top of the defaults.

    Typical call: ``merge_preferences(stored, runtime_override)``, giving the
    precedence defaults -> stored -> runtime. Partial mappings may use either
    snake_case or the camelCase wire names. Raises ``ValueError`` if the
    merged result is not a valid profile.
    """
    merged: Dict[str, Any] = asdict(default_preference())
    aliases = {"mealType": "meal_type", "distancePreference": "distance_preference"}

    for part in parts:
        if part is None:
            continue
        if isinstance(part, PreferenceProfile):
            layer = asdict(part)
        else:
            layer = {aliases.get(k, k): v for k, v in part.items()}
        for key, value in layer.items():
            if key in PROFILE_FIELDS and value is not None:
                merged[key] = copy.deepcopy(value)

    return PreferenceSchema.model_validate(merged).to_profile()


def preference_summary(pref: Optional[PreferenceProfile]) -> str:
    if pref is None:
        return "No preference data yet"
    lines = [
        f"Cuisine: {', '.join(pref.cuisine)}" if pref.cuisine else None,
        f"Taste: {', '.join(pref.taste)}" if pref.taste else None,
        f"Price: {', '.join(pref.price)}" if pref.price else None,
        f"Ambience: {', '.join(pref.ambience)}" if pref.ambience else None,
        f"Meal type: {', '.join(pref.meal_type)}" if pref.meal_type else None,
        f"Dietary needs: {', '.join(pref.diet)}" if pref.diet else None,
        f"Distance: {pref.distance_preference}",
    ]
    return "\n".join(line for line in lines if line)
