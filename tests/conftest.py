import pytest

from conceptlab.audience2concept.models import Audience

FULL_AUDIENCE_RECORD = {
    "id": "aud-1",
    "user_id": "user-a",
    "name": "Weekend Gamers",
    "demographics": {
        "age_range": {"min": 18, "max": 34},
        "gender": ["Male", "Female"],
        "location": {"type": "urban", "regions": ["Pacific Northwest", "Bay Area"]},
        "education": ["College Student"],
        "income_level": ["Middle class"],
        "interests": ["co-op games", "streaming"],
        "hobbies": ["board games"],
        "brands_they_love": ["Nintendo", "Discord"],
        "shopping_behavior": ["Online shopper"],
        "media_consumption": ["YouTube viewer"],
        "tech_usage": ["Smartphone power user"],
        "pain_points": ["limited free time"],
        "aspirations": ["play with friends more"],
        "additional_notes": "Mostly play on weekends"
    }
}


@pytest.fixture
def full_audience_record():
    return {**FULL_AUDIENCE_RECORD, "demographics": dict(FULL_AUDIENCE_RECORD["demographics"])}


@pytest.fixture
def full_audience():
    return Audience.from_dict(FULL_AUDIENCE_RECORD)


@pytest.fixture
def gamers():
    return Audience(id="aud-2", name="Gamers", user_id="user-a")
