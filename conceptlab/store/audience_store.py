"""
Read-only audience store backed by a JSON file.

The file holds a list of audience records, each with the owning user's id:

    [{"id": "aud-1", "user_id": "user-1", "name": "Gamers", "demographics": {...}}]

Demographics are coerced into typed fields on load, so audiences handed to
the concept pipeline never carry untyped data.
"""

import os
import json
import jsonschema
from typing import Dict, List, Optional

from conceptlab.audience2concept.models import Audience
from conceptlab.core.error_handler import ValidationError
from conceptlab.core.logging_config import get_logger
from conceptlab.schemas import load_schema

# Initialize logger
logger = get_logger(__name__)


class JsonAudienceStore:
    """
    Audience lookup with row-level ownership.
    """

    def __init__(self, path: str):
        """
        Load audiences from a JSON file.

        Args:
            path (str): Path to the audience records file

        Raises:
            FileNotFoundError: If the file does not exist
            ValidationError: If the file is not valid JSON or does not match the records schema
        """
        self.path = path
        self._audiences: Dict[str, Audience] = {}
        self._load()

    def _load(self) -> None:
        logger.info(f"Loading audiences from {self.path}")

        if not os.path.isfile(self.path):
            error_msg = f"Audience file not found: {self.path}"
            logger.error(error_msg)
            raise FileNotFoundError(error_msg)

        try:
            with open(self.path, 'r') as f:
                records = json.load(f)
        except json.JSONDecodeError as e:
            error_msg = f"Invalid JSON in audience file: {e.msg}"
            logger.error(error_msg)
            raise ValidationError(error_msg, field="audiences")

        try:
            jsonschema.validate(instance=records, schema=load_schema("audience_records"))
        except jsonschema.exceptions.ValidationError as e:
            field = ".".join(str(part) for part in e.absolute_path) or "audiences"
            error_msg = f"Audience file validation failed: {e.message}"
            logger.error(error_msg)
            raise ValidationError(error_msg, field=field)

        for record in records:
            audience = Audience.from_dict(record)
            self._audiences[audience.id] = audience

        logger.info(f"Loaded {len(self._audiences)} audience(s)")

    def is_owned_by(self, audience_id: str, user_id: str) -> bool:
        audience = self._audiences.get(audience_id)
        return audience is not None and audience.user_id == user_id

    def get_audience(self, audience_id: str, user_id: str) -> Optional[Audience]:
        """
        Return the audience if it exists and belongs to the user, else None.
        """
        if not self.is_owned_by(audience_id, user_id):
            return None
        return self._audiences[audience_id]

    def list_audiences(self, user_id: str) -> List[Audience]:
        return sorted(
            (audience for audience in self._audiences.values() if audience.user_id == user_id),
            key=lambda audience: audience.name.lower()
        )
