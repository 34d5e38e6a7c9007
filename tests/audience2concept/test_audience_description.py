"""
Tests for the audience description builder.
"""

from conceptlab.audience2concept.audience_description import (
    build_audience_description,
    format_age_range,
)
from conceptlab.audience2concept.models import AgeRange, Audience


def _audience(demographics=None, name="Jane"):
    return Audience.from_dict({"id": "a", "name": name, "demographics": demographics})


class TestAudienceDescription:
    """
    Tests for build_audience_description.
    """

    def test_name_only(self):
        assert build_audience_description(_audience()) == "Name: Jane"

    def test_full_audience_segment_order(self, full_audience):
        expected = (
            "Name: Weekend Gamers"
            " | Age: 18-34 years old"
            " | Gender: Male, Female"
            " | Location: urban areas"
            " | Regions: Pacific Northwest, Bay Area"
            " | Education: College Student"
            " | Income: Middle class"
            " | Interests: co-op games, streaming"
            " | Hobbies: board games"
            " | Favorite Brands: Nintendo, Discord"
            " | Shopping Behavior: Online shopper"
            " | Media Consumption: YouTube viewer"
            " | Technology Usage: Smartphone power user"
            " | Pain Points: limited free time"
            " | Goals/Aspirations: play with friends more"
            " | Additional Notes: Mostly play on weekends"
        )

        assert build_audience_description(full_audience) == expected

    def test_all_genders_is_omitted(self):
        description = build_audience_description(
            _audience({"gender": ["Female", "All genders"], "interests": ["tea"]})
        )

        assert "Gender" not in description
        assert description == "Name: Jane | Interests: tea"

    def test_location_without_type(self):
        description = build_audience_description(_audience({"location": {"regions": ["Midwest"]}}))

        assert description == "Name: Jane | Regions: Midwest"

    def test_empty_fields_are_skipped(self):
        description = build_audience_description(_audience({
            "interests": [],
            "hobbies": [""],
            "additional_notes": "",
            "age_range": {}
        }))

        assert description == "Name: Jane"

    def test_is_repeatable(self, full_audience):
        first = build_audience_description(full_audience)
        second = build_audience_description(full_audience)

        assert first == second


class TestFormatAgeRange:
    """
    Tests for age range formatting.
    """

    def test_bounds(self):
        assert format_age_range(AgeRange(min=18)) == "18+ years old"
        assert format_age_range(AgeRange(max=25)) == "under 25 years old"
        assert format_age_range(AgeRange(min=18, max=25)) == "18-25 years old"

    def test_zero_is_a_bound(self):
        assert format_age_range(AgeRange(min=0, max=12)) == "0-12 years old"

    def test_absent(self):
        assert format_age_range(None) is None
        assert format_age_range(AgeRange()) is None

    def test_age_segment_in_description(self):
        assert build_audience_description(_audience({"age_range": {"min": 18}})) == (
            "Name: Jane | Age: 18+ years old"
        )
        assert build_audience_description(_audience({"age_range": {"max": 25}})) == (
            "Name: Jane | Age: under 25 years old"
        )
