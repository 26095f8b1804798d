from __future__ import annotations

import copy
from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from loguru import logger

from models import Answer, Place, PreferenceProfile, Question, RankedRestaurant, UserLocation
from services.preferences import build_tag_reasons
from services.taxonomy import SCENARIO_TAGS
from utils import append_unique, haversine_km


SCENARIO_WEIGHT = 2
ATTRIBUTE_WEIGHT = 1

# structured tag category -> weight per matched label
CATEGORY_WEIGHTS: Tuple[Tuple[str, float], ...] = (
    ("cuisine", 2.0),
    ("taste", 1.5),
    ("ambience", 1.0),
    ("meal_type", 1.0),
    ("diet", 1.5),
)

PRICE_MATCH_BONUS = 1.0
NEAR_THRESHOLD_KM = 1.5
NEAR_BONUS = 2.0
FAR_THRESHOLD_KM = 2.0
FAR_BONUS = 1.0
OPEN_NOW_BONUS = 0.5


def resolve_distance(place: Place, user_location: Optional[UserLocation]) -> float:
    """Distance in km to the user, rounded to 0.1, or the place's own value."""
    if user_location is None:
        return place.distance
    dist_km = haversine_km(user_location.latitude, user_location.longitude, place.latitude, place.longitude)
    return round(dist_km, 1)


def _sort_ranked(ranked: List[RankedRestaurant]) -> List[RankedRestaurant]:
    # sorted() is stable, so equal keys keep input order
    return sorted(ranked, key=lambda r: (-r.score, r.distance))


def score_by_tags(
    tag_reasons: Dict[str, str],
    restaurants: Iterable[Place],
    user_location: Optional[UserLocation] = None,
) -> List[RankedRestaurant]:
    scored: list[RankedRestaurant] = []

    for restaurant in restaurants:
        score = 0
        reasons: list[str] = []

        # repeated tags count once
        for tag in dict.fromkeys(restaurant.tags):
            reason = tag_reasons.get(tag)
            if reason is None:
                continue
            score += SCENARIO_WEIGHT if tag in SCENARIO_TAGS else ATTRIBUTE_WEIGHT
            append_unique(reasons, reason)

        if restaurant.reason:
            append_unique(reasons, restaurant.reason)
            if score == 0:
                score = 1

        distance = resolve_distance(restaurant, user_location)
        scored.append(
            RankedRestaurant(
                place=replace(copy.deepcopy(restaurant), distance=distance),
                score=score,
                reasons=reasons,
                distance=distance,
            )
        )

    return _sort_ranked(scored)


def rank_restaurants(
    answers: Iterable[Answer],
    restaurants: Iterable[Place],
    questions: Sequence[Question],
    user_location: Optional[UserLocation] = None,
) -> List[RankedRestaurant]:
    """Rank restaurants against the tags picked in the quiz."""
    tag_reasons = build_tag_reasons(answers, questions)
    ranked = score_by_tags(tag_reasons, restaurants, user_location)
    logger.debug("flat ranking tags={} results={}", len(tag_reasons), len(ranked))
    return ranked


def score_places(
    places: Iterable[Place],
    preference: PreferenceProfile,
    user_location: Optional[UserLocation] = None,
) -> List[RankedRestaurant]:
    """Weighted ranking against a structured preference profile."""
    scored: list[RankedRestaurant] = []

    for place in places:
        reasons: list[str] = []
        score = 0.0

        structured = place.structured_tags
        if structured is not None:
            for category, weight in CATEGORY_WEIGHTS:
                labels: list[str] = getattr(preference, category)
                if not labels:
                    continue
                offered = getattr(structured, category)
                matches = [label for label in labels if label in offered]
                if matches:
                    score += len(matches) * weight
                    append_unique(reasons, f"Matches your preference: {', '.join(matches)}")

        if preference.price and place.price_bucket:
            if place.price_bucket in preference.price:
                score += PRICE_MATCH_BONUS
                append_unique(reasons, f"Price fits: {place.price_bucket}")

        distance = resolve_distance(place, user_location)

        if preference.distance_preference == "near" and distance <= NEAR_THRESHOLD_KM:
            score += NEAR_BONUS
            append_unique(reasons, "Distance preference: near")
        if preference.distance_preference == "far" and distance >= FAR_THRESHOLD_KM:
            score += FAR_BONUS
            append_unique(reasons, "Distance preference: far")

        if place.rating:
            score += place.rating / 5
            append_unique(reasons, f"Well rated: {place.rating}")

        if place.open_now:
            score += OPEN_NOW_BONUS
            append_unique(reasons, "Open now")

        scored.append(
            RankedRestaurant(
                place=replace(copy.deepcopy(place), distance=distance),
                score=score,
                reasons=reasons,
                distance=distance,
            )
        )

    ranked = _sort_ranked(scored)
    logger.debug(
        "structured ranking distance_pref={} confidence={:.2f} results={}",
        preference.distance_preference,
        preference.confidence,
        len(ranked),
    )
    return ranked
