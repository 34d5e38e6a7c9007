"""
Human-readable audience summaries for prompt construction.
"""

from typing import List, Optional

from conceptlab.audience2concept.models import Audience, AgeRange
from conceptlab.core.constants import ALL_GENDERS

SEGMENT_SEPARATOR = " | "

# (label, demographics attribute) for the plain list segments, in output order
_LIST_SEGMENTS = [
    ("Education", "education"),
    ("Income", "income_level"),
    ("Interests", "interests"),
    ("Hobbies", "hobbies"),
    ("Favorite Brands", "brands_they_love"),
    ("Shopping Behavior", "shopping_behavior"),
    ("Media Consumption", "media_consumption"),
    ("Technology Usage", "tech_usage"),
    ("Pain Points", "pain_points"),
    ("Goals/Aspirations", "aspirations"),
]


def format_age_range(age_range: Optional[AgeRange]) -> Optional[str]:
    """
    Format an age range, e.g. "18-25 years old", "18+ years old" or "under 25 years old".

    Returns None when neither bound is set.
    """
    if age_range is None:
        return None
    if age_range.min is not None and age_range.max is not None:
        return f"{age_range.min}-{age_range.max} years old"
    if age_range.min is not None:
        return f"{age_range.min}+ years old"
    if age_range.max is not None:
        return f"under {age_range.max} years old"
    return None


def build_audience_description(audience: Audience) -> str:
    """
    Summarize an audience as " | "-joined "Label: value" segments.

    Segments appear in a fixed order (name, age, gender, location, regions,
    education, income, interests, hobbies, brands, shopping, media, tech,
    pain points, aspirations, notes). Absent fields are skipped, so an
    audience with only a name yields "Name: <name>". Gender is omitted when
    it includes "All genders".

    Args:
        audience (Audience): Audience to describe

    Returns:
        str: The description, always starting with the name segment
    """
    demo = audience.demographics
    parts: List[str] = [f"Name: {audience.name}"]

    age = format_age_range(demo.age_range)
    if age:
        parts.append(f"Age: {age}")

    if demo.gender and ALL_GENDERS not in demo.gender:
        parts.append(f"Gender: {', '.join(demo.gender)}")

    if demo.location is not None:
        if demo.location.type:
            parts.append(f"Location: {demo.location.type} areas")
        if demo.location.regions:
            parts.append(f"Regions: {', '.join(demo.location.regions)}")

    for label, attribute in _LIST_SEGMENTS:
        values = getattr(demo, attribute)
        if values:
            parts.append(f"{label}: {', '.join(values)}")

    if demo.additional_notes:
        parts.append(f"Additional Notes: {demo.additional_notes}")

    return SEGMENT_SEPARATOR.join(parts)
