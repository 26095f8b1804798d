"""Data models for the EatWhat scoring backend."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal, Optional, Union


Choice = Literal["left", "right", "skip"]
PriceBucket = Literal["budget", "mid", "high"]
DistancePreference = Literal["near", "far", "no_preference"]

CHOICES = ("left", "right", "skip")


@dataclass
class Question:
    id: int
    text: str
    left_choice: str
    right_choice: str
    skip_choice: str = "Skip"
    left_tags: list[str] = field(default_factory=list)
    right_tags: list[str] = field(default_factory=list)


@dataclass
class Answer:
    question_id: int
    choice: Choice
    # denormalized copies so a client can score without the catalog
    left_tags: list[str] = field(default_factory=list)
    right_tags: list[str] = field(default_factory=list)
    text: Optional[str] = None
    left_choice: Optional[str] = None
    right_choice: Optional[str] = None

    def chosen_tags(self) -> list[str]:
        if self.choice == "left":
            return list(self.left_tags)
        if self.choice == "right":
            return list(self.right_tags)
        return []


@dataclass
class UserLocation:
    latitude: float
    longitude: float


@dataclass
class StructuredTags:
    cuisine: list[str] = field(default_factory=list)
    taste: list[str] = field(default_factory=list)
    ambience: list[str] = field(default_factory=list)
    meal_type: list[str] = field(default_factory=list)
    diet: list[str] = field(default_factory=list)

    def flat(self) -> list[str]:
        tags: list[str] = []
        for values in (self.cuisine, self.taste, self.ambience, self.meal_type, self.diet):
            for value in values:
                if value not in tags:
                    tags.append(value)
        return tags


@dataclass
class Place:
    id: str
    name: str
    latitude: float
    longitude: float
    tags: list[str] = field(default_factory=list)
    distance: float = 0.0  # km
    rating: Optional[float] = None
    price_level: Optional[Union[int, str]] = None
    price_bucket: Optional[PriceBucket] = None
    open_now: Optional[bool] = None
    address: Optional[str] = None
    location_url: Optional[str] = None
    structured_tags: Optional[StructuredTags] = None
    reason: Optional[str] = None  # externally supplied, e.g. by an LLM recommender


@dataclass
class PreferenceProfile:
    cuisine: list[str] = field(default_factory=list)
    taste: list[str] = field(default_factory=list)
    price: list[PriceBucket] = field(default_factory=list)
    ambience: list[str] = field(default_factory=list)
    meal_type: list[str] = field(default_factory=list)
    diet: list[str] = field(default_factory=list)
    distance_preference: DistancePreference = "no_preference"
    confidence: float = 0.4
    rationale: list[str] = field(default_factory=list)


@dataclass
class RankedRestaurant:
    place: Place
    score: float
    reasons: List[str] = field(default_factory=list)
    distance: float = 0.0

    @property
    def id(self) -> str:
        return self.place.id

    @property
    def name(self) -> str:
        return self.place.name
