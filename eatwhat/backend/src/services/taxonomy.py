"""Static tag tables.

Maps provider place types onto internal tags and routes quiz tags to the
preference category they describe. Everything here is read-only and built
once at import time.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Tuple, Union

from models import PriceBucket, StructuredTags


# provider type -> {category: tags}
TYPE_TO_TAGS: Mapping[str, Mapping[str, Tuple[str, ...]]] = MappingProxyType(
    {
        "cafe": MappingProxyType({"ambience": ("casual",), "meal_type": ("snack",)}),
        "bakery": MappingProxyType({"meal_type": ("snack",), "taste": ("sweet",)}),
        "snack_bar": MappingProxyType({"meal_type": ("snack",)}),
        "bar": MappingProxyType({"ambience": ("casual",), "meal_type": ("snack",)}),
        "meal_takeaway": MappingProxyType({"ambience": ("casual",), "meal_type": ("meal",)}),
        "meal_delivery": MappingProxyType({"ambience": ("casual",), "meal_type": ("meal",)}),
        "restaurant": MappingProxyType({"meal_type": ("meal",)}),
        "japanese_restaurant": MappingProxyType({"cuisine": ("japanese",), "taste": ("light",)}),
        "sushi_restaurant": MappingProxyType({"cuisine": ("japanese",), "taste": ("light",)}),
        "korean_restaurant": MappingProxyType({"cuisine": ("korean",)}),
        "chinese_restaurant": MappingProxyType({"cuisine": ("chinese",), "taste": ("light",)}),
        "ramen_restaurant": MappingProxyType(
            {"cuisine": ("japanese",), "taste": ("heavy",), "meal_type": ("meal",)}
        ),
        "steak_house": MappingProxyType({"taste": ("heavy",), "meal_type": ("meal",)}),
        "hamburger_restaurant": MappingProxyType({"taste": ("heavy",), "meal_type": ("meal",)}),
        "barbecue_restaurant": MappingProxyType({"taste": ("heavy",), "meal_type": ("meal",)}),
        "vegetarian_restaurant": MappingProxyType({"diet": ("vegetarian",)}),
        "vegan_restaurant": MappingProxyType({"diet": ("vegan",)}),
        "halal_restaurant": MappingProxyType({"diet": ("halal",)}),
    }
)

# Flat mapping used by the LLM-backed restaurant search. Every place is a meal.
LEGACY_BASE_TAGS: Tuple[str, ...] = ("meal",)
LEGACY_TYPE_TO_TAGS: Mapping[str, Tuple[str, ...]] = MappingProxyType(
    {
        "cafe": ("snack",),
        "bakery": ("snack",),
        "dessert_shop": ("snack",),
        "japanese_restaurant": ("light",),
        "sushi_restaurant": ("light",),
        "vegetarian_restaurant": ("light",),
        "steak_house": ("heavy",),
        "hamburger_restaurant": ("heavy",),
        "barbecue_restaurant": ("heavy",),
        "brazilian_steakhouse": ("heavy",),
        "chinese_restaurant": ("noodle",),
        "ramen_restaurant": ("noodle",),
        "noodle_shop": ("noodle",),
        "fast_food_restaurant": ("snack",),
        "sandwich_shop": ("snack",),
    }
)

# Places API (New) reports price levels as enum strings
PRICE_LEVEL_NAMES: Mapping[str, int] = MappingProxyType(
    {
        "PRICE_LEVEL_FREE": 0,
        "PRICE_LEVEL_INEXPENSIVE": 1,
        "PRICE_LEVEL_MODERATE": 2,
        "PRICE_LEVEL_EXPENSIVE": 3,
        "PRICE_LEVEL_VERY_EXPENSIVE": 4,
    }
)

# Usage-context tags weigh more than food attributes in flat-tag ranking.
SCENARIO_TAGS = frozenset({"budget", "luxury", "gathering", "solo", "quiet", "lively"})

PRICE_TAGS = frozenset({"budget", "mid", "high"})
DISTANCE_TAGS = frozenset({"near", "far"})
AMBIENCE_TAGS = frozenset({"casual", "date", "family"})
MEAL_TYPE_TAGS = frozenset({"meal", "snack"})
TASTE_TAGS = frozenset({"light", "heavy", "sweet", "spicy"})
DIET_TAGS = frozenset({"vegetarian", "vegan", "halal"})

# tags that expand into several categories at once
COMPOSITE_TAGS: Mapping[str, Mapping[str, Tuple[str, ...]]] = MappingProxyType(
    {"cafe": MappingProxyType({"meal_type": ("snack",), "ambience": ("casual",)})}
)


def price_level_to_bucket(price_level: Optional[Union[int, str]]) -> Optional[PriceBucket]:
    if price_level is None:
        return None
    if isinstance(price_level, str) and not price_level.strip().isdigit():
        level = PRICE_LEVEL_NAMES.get(price_level.strip().upper())
        if level is None:
            return None
    else:
        level = int(price_level)
    if level <= 1:
        return "budget"
    if level == 2:
        return "mid"
    return "high"


def map_types_to_structured_tags(types: Optional[Iterable[str]] = None) -> StructuredTags:
    tags = StructuredTags()
    for place_type in types or []:
        mapped = TYPE_TO_TAGS.get(place_type)
        if not mapped:
            continue
        for category, values in mapped.items():
            bucket = getattr(tags, category)
            for value in values:
                if value not in bucket:
                    bucket.append(value)
    return tags


def map_types_to_flat_tags(types: Optional[Iterable[str]] = None) -> list[str]:
    return map_types_to_structured_tags(types).flat()


def map_types_to_legacy_tags(types: Optional[Iterable[str]] = None) -> list[str]:
    tags: list[str] = list(LEGACY_BASE_TAGS)
    for place_type in types or []:
        for tag in LEGACY_TYPE_TO_TAGS.get(place_type, ()):
            if tag not in tags:
                tags.append(tag)
    return tags


def tag_category(tag: str) -> str:
    """Preference category a quiz tag feeds. Unknown tags are cuisines."""
    if tag in PRICE_TAGS:
        return "price"
    if tag in DISTANCE_TAGS:
        return "distance"
    if tag in AMBIENCE_TAGS:
        return "ambience"
    if tag in MEAL_TYPE_TAGS:
        return "meal_type"
    if tag in COMPOSITE_TAGS:
        return "composite"
    if tag in TASTE_TAGS:
        return "taste"
    if tag in DIET_TAGS:
        return "diet"
    return "cuisine"
