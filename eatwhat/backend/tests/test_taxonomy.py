import pytest

from services.taxonomy import (
    SCENARIO_TAGS,
    TYPE_TO_TAGS,
    map_types_to_flat_tags,
    map_types_to_legacy_tags,
    map_types_to_structured_tags,
    price_level_to_bucket,
    tag_category,
)


@pytest.mark.parametrize(
    "level,bucket",
    [(None, None), (0, "budget"), (1, "budget"), (2, "mid"), (3, "high"), (4, "high"),
     ("PRICE_LEVEL_MODERATE", "mid"), ("PRICE_LEVEL_VERY_EXPENSIVE", "high"), ("PRICE_LEVEL_UNSPECIFIED", None), ("2", "mid")],
)
def test_price_level_to_bucket(level, bucket):
    assert price_level_to_bucket(level) == bucket


def test_structured_tags_merge_without_duplicates():
    tags = map_types_to_structured_tags(["ramen_restaurant", "japanese_restaurant", "restaurant", "point_of_interest"])
    assert tags.cuisine == ["japanese"]
    assert tags.taste == ["heavy", "light"]
    assert tags.meal_type == ["meal"]
    assert tags.ambience == []
    assert tags.diet == []


def test_structured_tags_empty_input():
    tags = map_types_to_structured_tags(None)
    assert tags.flat() == []


def test_flat_tags_union():
    assert map_types_to_flat_tags(["cafe", "vegan_restaurant"]) == ["casual", "snack", "vegan"]


def test_legacy_tags_always_meal():
    assert map_types_to_legacy_tags([]) == ["meal"]
    assert map_types_to_legacy_tags(["ramen_restaurant", "noodle_shop", "cafe", "steak_house"]) == [
        "meal",
        "noodle",
        "snack",
        "heavy",
    ]


def test_tables_are_read_only():
    with pytest.raises(TypeError):
        TYPE_TO_TAGS["new_type"] = {}  # type: ignore[index]
    assert "quiet" in SCENARIO_TAGS


@pytest.mark.parametrize(
    "tag,category",
    [("mid", "price"), ("near", "distance"), ("date", "ambience"), ("snack", "meal_type"),
     ("cafe", "composite"), ("sweet", "taste"), ("halal", "diet"), ("thai", "cuisine")],
)
def test_tag_category(tag, category):
    assert tag_category(tag) == category
