"""
Datamodels for audiences and generated concepts.

The demographics bag arrives as loosely typed JSON (whatever the audience
form stored). ``Demographics.from_dict`` is the single place where it is
coerced into typed, optional fields: unknown keys are ignored, empty lists
and blank strings become None and values of the wrong type are dropped.
Everything downstream can rely on "present means non-empty".
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from conceptlab.core.constants import (
    LOCATION_TYPES,
    DEFAULT_CAMPAIGN_TYPE,
    DEFAULT_TONE,
    DEFAULT_ADDITIONAL_CONTEXT,
    DEFAULT_REMIX_INSTRUCTIONS,
)

# Plain string-list fields of the demographics bag, in display order.
LIST_FIELDS = [
    "gender",
    "education",
    "income_level",
    "interests",
    "hobbies",
    "brands_they_love",
    "shopping_behavior",
    "media_consumption",
    "tech_usage",
    "pain_points",
    "aspirations",
]


def _coerce_str_list(value: Any) -> Optional[List[str]]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        return None
    items = [item.strip() for item in value if isinstance(item, str) and item.strip()]
    return items or None


def _coerce_str(value: Any) -> Optional[str]:
    if not isinstance(value, str) or not value.strip():
        return None
    return value.strip()


def _coerce_age(value: Any) -> Optional[int]:
    # bool is an int subclass; a checkbox value is not an age
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        # isdigit() accepts characters like "²" that int() rejects
        if not value.strip().isdecimal():
            return None
        try:
            value = int(value.strip())
        except ValueError:
            return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if not isinstance(value, int) or value < 0:
        return None
    return value


@dataclass(frozen=True)
class AgeRange:
    min: Optional[int] = None
    max: Optional[int] = None

    @classmethod
    def from_dict(cls, raw: Any) -> Optional["AgeRange"]:
        if not isinstance(raw, dict):
            return None
        age_range = cls(min=_coerce_age(raw.get("min")), max=_coerce_age(raw.get("max")))
        if age_range.min is None and age_range.max is None:
            return None
        return age_range

    def to_dict(self) -> Dict[str, int]:
        data = {}
        if self.min is not None:
            data["min"] = self.min
        if self.max is not None:
            data["max"] = self.max
        return data


@dataclass(frozen=True)
class Location:
    type: Optional[str] = None
    regions: Optional[List[str]] = None
    countries: Optional[List[str]] = None

    @classmethod
    def from_dict(cls, raw: Any) -> Optional["Location"]:
        if not isinstance(raw, dict):
            return None
        location_type = _coerce_str(raw.get("type"))
        if location_type is not None:
            location_type = location_type.lower()
            if location_type not in LOCATION_TYPES:
                location_type = None
        location = cls(
            type=location_type,
            regions=_coerce_str_list(raw.get("regions")),
            countries=_coerce_str_list(raw.get("countries")),
        )
        if location.type is None and location.regions is None and location.countries is None:
            return None
        return location

    def to_dict(self) -> Dict[str, Any]:
        data = {}
        if self.type is not None:
            data["type"] = self.type
        if self.regions:
            data["regions"] = list(self.regions)
        if self.countries:
            data["countries"] = list(self.countries)
        return data


@dataclass(frozen=True)
class Demographics:
    """Typed view of an audience's demographic and psychographic profile."""

    age_range: Optional[AgeRange] = None
    gender: Optional[List[str]] = None
    location: Optional[Location] = None
    education: Optional[List[str]] = None
    income_level: Optional[List[str]] = None

    # Lifestyle & interests
    interests: Optional[List[str]] = None
    hobbies: Optional[List[str]] = None
    brands_they_love: Optional[List[str]] = None

    # Behavior
    shopping_behavior: Optional[List[str]] = None
    media_consumption: Optional[List[str]] = None
    tech_usage: Optional[List[str]] = None

    # Psychology
    pain_points: Optional[List[str]] = None
    aspirations: Optional[List[str]] = None
    additional_notes: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: Any) -> "Demographics":
        if not isinstance(raw, dict):
            return cls()
        values = {name: _coerce_str_list(raw.get(name)) for name in LIST_FIELDS}
        return cls(
            age_range=AgeRange.from_dict(raw.get("age_range")),
            location=Location.from_dict(raw.get("location")),
            additional_notes=_coerce_str(raw.get("additional_notes")),
            **values,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {}
        if self.age_range is not None:
            data["age_range"] = self.age_range.to_dict()
        if self.location is not None:
            data["location"] = self.location.to_dict()
        for name in LIST_FIELDS:
            value = getattr(self, name)
            if value:
                data[name] = list(value)
        if self.additional_notes:
            data["additional_notes"] = self.additional_notes
        return data


@dataclass(frozen=True)
class Audience:
    id: str
    name: str
    demographics: Demographics = field(default_factory=Demographics)
    user_id: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Audience":
        return cls(
            id=str(raw["id"]),
            name=str(raw["name"]),
            demographics=Demographics.from_dict(raw.get("demographics")),
            user_id=raw.get("user_id"),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "name": self.name,
            "demographics": self.demographics.to_dict(),
        }
        if self.user_id is not None:
            data["user_id"] = self.user_id
        return data


@dataclass(frozen=True)
class CampaignParameters:
    campaign_type: str = DEFAULT_CAMPAIGN_TYPE
    tone: str = DEFAULT_TONE
    additional_context: str = DEFAULT_ADDITIONAL_CONTEXT


@dataclass(frozen=True)
class RemixParameters:
    original_concept: "GeneratedConcept"
    remix_instructions: str = DEFAULT_REMIX_INSTRUCTIONS


@dataclass(frozen=True)
class GeneratedConcept:
    """
    A concept produced by the pipeline.

    ``degraded`` marks a deterministic fallback. It is an internal
    diagnostic only and is left out of ``to_dict``.
    """

    title: str
    description: str
    degraded: bool = False

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "GeneratedConcept":
        return cls(title=str(raw.get("title", "")), description=str(raw.get("description", "")))

    def to_dict(self) -> Dict[str, str]:
        return {"title": self.title, "description": self.description}
