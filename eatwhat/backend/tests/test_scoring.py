import pytest

from models import Place, PreferenceProfile, StructuredTags, UserLocation
from services.ranking import score_places


def _preference(**overrides) -> PreferenceProfile:
    base = dict(
        cuisine=["japanese"],
        taste=["light"],
        price=["mid"],
        ambience=["casual"],
        meal_type=["meal"],
        distance_preference="near",
        diet=[],
        confidence=0.9,
    )
    base.update(overrides)
    return PreferenceProfile(**base)


def _place(**overrides) -> Place:
    base = dict(
        id="p1",
        name="Sushi",
        latitude=25.03,
        longitude=121.52,
        tags=["japanese", "light"],
        rating=4.5,
        address="addr",
        price_level=2,
        price_bucket="mid",
        structured_tags=StructuredTags(
            cuisine=["japanese"], taste=["light"], ambience=["casual"], meal_type=["meal"], diet=[]
        ),
    )
    base.update(overrides)
    return Place(**base)


USER = UserLocation(latitude=25.03, longitude=121.52)


def test_scores_matches_higher_and_ranks_by_score():
    place_a = _place(id="a", rating=4.6)
    place_b = _place(
        id="b",
        name="Burger",
        structured_tags=StructuredTags(taste=["heavy"], ambience=["casual"], meal_type=["meal"]),
        tags=["heavy"],
        price_bucket="high",
        rating=3.0,
        latitude=25.05,
        longitude=121.55,
    )

    ranked = score_places([place_b, place_a], _preference(), USER)

    assert ranked[0].id == "a"
    assert ranked[0].score > ranked[1].score
    assert ranked[0].reasons


def test_near_preference_bonus():
    near = _place(id="near")
    far = _place(id="far", latitude=25.10, longitude=121.60)

    ranked = score_places([far, near], _preference(), USER)

    assert ranked[0].id == "near"
    assert ranked[0].distance < ranked[1].distance
    assert "Distance preference: near" in ranked[0].reasons
    assert "Distance preference: near" not in ranked[1].reasons
    assert ranked[0].score - ranked[1].score == pytest.approx(2.0)


def test_far_preference_bonus_is_smaller():
    pref = PreferenceProfile(distance_preference="far")
    far = Place(id="far", name="Far", latitude=0, longitude=0, distance=2.0)
    close = Place(id="close", name="Close", latitude=0, longitude=0, distance=1.9)

    ranked = score_places([close, far], pref)

    assert ranked[0].id == "far"
    assert ranked[0].score == 1.0
    assert ranked[0].reasons == ["Distance preference: far"]
    assert ranked[1].score == 0.0


def test_near_threshold_inclusive():
    pref = PreferenceProfile(distance_preference="near")
    edge = Place(id="edge", name="Edge", latitude=0, longitude=0, distance=1.5)
    beyond = Place(id="beyond", name="Beyond", latitude=0, longitude=0, distance=1.6)

    ranked = score_places([beyond, edge], pref)

    assert [r.score for r in ranked] == [2.0, 0.0]


def test_cuisine_weight():
    pref = PreferenceProfile(cuisine=["japanese"])
    place = Place(
        id="j",
        name="J",
        latitude=0,
        longitude=0,
        structured_tags=StructuredTags(cuisine=["japanese"]),
    )

    ranked = score_places([place], pref)

    assert ranked[0].score == 2.0
    assert ranked[0].reasons == ["Matches your preference: japanese"]


def test_category_weights_multiply_match_count():
    pref = PreferenceProfile(taste=["light", "sweet"], diet=["vegan"], ambience=["casual"], meal_type=["snack"])
    place = Place(
        id="x",
        name="X",
        latitude=0,
        longitude=0,
        structured_tags=StructuredTags(taste=["sweet", "light"], diet=["vegan"], ambience=["casual"], meal_type=["snack"]),
    )

    ranked = score_places([place], pref)

    assert ranked[0].score == 2 * 1.5 + 1.5 + 1.0 + 1.0
    assert ranked[0].reasons[0] == "Matches your preference: light, sweet"
    assert len(ranked[0].reasons) == 4


def test_price_needs_both_sides():
    place = Place(id="p", name="P", latitude=0, longitude=0, price_bucket="budget")
    assert score_places([place], PreferenceProfile(price=["budget"]))[0].score == 1.0
    assert score_places([place], PreferenceProfile(price=["high"]))[0].score == 0.0
    no_bucket = Place(id="q", name="Q", latitude=0, longitude=0)
    assert score_places([no_bucket], PreferenceProfile(price=["budget"]))[0].score == 0.0


def test_rating_always_gives_reason():
    place = Place(id="r", name="R", latitude=0, longitude=0, rating=4.0)

    ranked = score_places([place], PreferenceProfile())

    assert ranked[0].score == 0.8
    assert ranked[0].reasons == ["Well rated: 4.0"]


def test_open_now_bonus():
    place = Place(id="o", name="O", latitude=0, longitude=0, open_now=True)
    closed = Place(id="c", name="C", latitude=0, longitude=0, open_now=False)

    ranked = score_places([closed, place], PreferenceProfile())

    assert ranked[0].id == "o"
    assert ranked[0].score == 0.5
    assert ranked[0].reasons == ["Open now"]
    assert ranked[1].score == 0.0


def test_missing_optional_fields_are_neutral():
    place = Place(id="bare", name="Bare", latitude=0, longitude=0)
    ranked = score_places([place], _preference(distance_preference="no_preference"))
    assert ranked[0].score == 0.0
    assert ranked[0].reasons == []


def test_empty_places():
    assert score_places([], _preference(), USER) == []


def test_ties_broken_by_distance_then_input_order():
    pref = PreferenceProfile()
    places = [
        Place(id="a", name="A", latitude=0, longitude=0, distance=3.0),
        Place(id="b", name="B", latitude=0, longitude=0, distance=1.0),
        Place(id="c", name="C", latitude=0, longitude=0, distance=3.0),
    ]
    ranked = score_places(places, pref)
    assert [r.id for r in ranked] == ["b", "a", "c"]


def test_ranked_place_carries_recomputed_distance():
    place = _place(distance=42.0)

    ranked = score_places([place], _preference(), USER)

    assert ranked[0].distance == 0.0
    assert ranked[0].place.distance == ranked[0].distance
    assert place.distance == 42.0
