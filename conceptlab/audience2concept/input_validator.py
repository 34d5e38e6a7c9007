"""
Input validation for concept requests.

This module validates generate and remix request bodies against their JSON
schemas. Every violation is reported with the path of the offending field,
so a client can highlight all bad inputs at once, and schema defaults are
filled in for the optional campaign fields.
"""

import re
import copy
import jsonschema
from typing import Dict, Any, List

from conceptlab.core.error_handler import RequestValidationError
from conceptlab.core.logging_config import get_logger
from conceptlab.schemas import load_schema

# Initialize logger
logger = get_logger(__name__)

GENERATE_REQUEST = "generate_request"
REMIX_REQUEST = "remix_request"

_REQUIRED_MESSAGE = re.compile(r"^'(?P<name>.+)' is a required property$")


def _field_path(error: jsonschema.exceptions.ValidationError) -> str:
    path = [str(part) for part in error.absolute_path]
    if error.validator == "required":
        match = _REQUIRED_MESSAGE.match(error.message)
        if match:
            path.append(match.group("name"))
    return ".".join(path) or "body"


class InputValidator:
    """
    Validates concept request bodies.
    """

    def __init__(self):
        """
        Initialize the validator with schemas.
        """
        audience_schema = load_schema("audience")
        self.validators = {}
        for name in (GENERATE_REQUEST, REMIX_REQUEST):
            schema = load_schema(name)
            schema.setdefault("definitions", {})["audience"] = audience_schema
            self.validators[name] = jsonschema.Draft7Validator(schema)
        logger.debug("Loaded concept request schemas")

    def collect_errors(self, request_type: str, body: Any) -> List[Dict[str, str]]:
        """
        List every schema violation in a request body.

        Args:
            request_type (str): "generate_request" or "remix_request"
            body (Any): Decoded JSON body

        Returns:
            List[Dict[str, str]]: ``{"field", "message"}`` per violation, ordered by field
        """
        validator = self.validators[request_type]
        details = [
            {"field": _field_path(error), "message": error.message}
            for error in validator.iter_errors(body)
        ]
        return sorted(details, key=lambda detail: detail["field"])

    def validate_request(self, request_type: str, body: Any) -> Dict[str, Any]:
        """
        Validate a request body and apply schema defaults.

        Args:
            request_type (str): "generate_request" or "remix_request"
            body (Any): Decoded JSON body

        Returns:
            Dict[str, Any]: A copy of the body with defaults filled in

        Raises:
            RequestValidationError: If the body does not conform to the schema
        """
        details = self.collect_errors(request_type, body)
        if details:
            logger.warning(
                f"Invalid {request_type}: " + "; ".join(f"{d['field']}: {d['message']}" for d in details)
            )
            raise RequestValidationError("Invalid request data", details=details)

        validated = copy.deepcopy(body)
        properties = self.validators[request_type].schema.get("properties", {})
        for name, definition in properties.items():
            if name not in validated and "default" in definition:
                validated[name] = definition["default"]

        return validated
