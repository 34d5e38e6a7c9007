"""
Concept persistence backed by a directory of JSON files.

Each saved concept carries an immutable snapshot of the audience(s) it was
generated for, so later edits to an audience never change what a stored
concept says it targeted.
"""

import os
import json
import uuid
import datetime
from typing import Dict, Any, List, Optional

from conceptlab.audience2concept.models import Audience, GeneratedConcept
from conceptlab.core.logging_config import get_logger

# Initialize logger
logger = get_logger(__name__)


def build_concept_record(
    concept: GeneratedConcept,
    audiences: List[Audience],
    user_id: str,
    source_concept_id: Optional[str] = None
) -> Dict[str, Any]:
    """
    Build the stored form of a concept.

    Args:
        concept (GeneratedConcept): Generated or remixed concept
        audiences (List[Audience]): Audiences used at generation time
        user_id (str): Owner of the concept
        source_concept_id (str, optional): Id of the concept this one remixes

    Returns:
        Dict[str, Any]: Concept record
    """
    timestamp = datetime.datetime.now(datetime.timezone.utc).isoformat()
    return {
        "id": str(uuid.uuid4()),
        "user_id": user_id,
        # First audience kept for callers that only know single-audience concepts
        "audience_id": audiences[0].id if audiences else None,
        "title": concept.title,
        "description": concept.description,
        "source_concept_id": source_concept_id,
        "audience_snapshots": [audience.to_dict() for audience in audiences],
        "created_at": timestamp,
        "updated_at": timestamp,
    }


class JsonConceptStore:
    """
    Stores one ``<id>.json`` file per concept.
    """

    def __init__(self, directory: str):
        self.directory = os.path.abspath(directory)
        os.makedirs(self.directory, exist_ok=True)

    def _path(self, concept_id: str) -> str:
        return os.path.join(self.directory, f"{concept_id}.json")

    def save_concept(
        self,
        concept: GeneratedConcept,
        audiences: List[Audience],
        user_id: str,
        source_concept_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Persist a concept with its audience snapshots.

        Returns:
            Dict[str, Any]: The stored record, including its new id

        Raises:
            IOError: If the file cannot be written
        """
        record = build_concept_record(concept, audiences, user_id, source_concept_id)
        path = self._path(record["id"])
        logger.info(f"Saving concept {record['id']} to {path}")

        try:
            with open(path, 'w') as f:
                json.dump(record, f, indent=2)
        except IOError as e:
            error_msg = f"Error saving concept: {str(e)}"
            logger.error(error_msg)
            raise IOError(error_msg)

        return record

    def load_concept(self, concept_id: str, user_id: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """
        Load a stored concept.

        Args:
            concept_id (str): Concept id
            user_id (str, optional): When given, concepts owned by someone else are not returned

        Returns:
            Optional[Dict[str, Any]]: The record, or None if missing or not owned
        """
        if not concept_id or os.path.basename(concept_id) != concept_id:
            return None
        path = self._path(concept_id)
        if not os.path.isfile(path):
            return None

        with open(path, 'r') as f:
            record = json.load(f)

        if user_id is not None and record.get("user_id") != user_id:
            return None
        return record
