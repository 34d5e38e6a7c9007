"""
Request boundary for concept generation and remixing.

ConceptRequestHandler takes a decoded request body plus the caller's bearer
token and walks each request through the same terminal states:

- 401 when there is no valid session (checked before anything else)
- 400 when the body violates the request schema, with per-field details
- 403 when the audience is not owned by the caller, or ownership cannot be verified
- 200 with ``{"title", "description"}`` otherwise, including fallback concepts
- 500 with a generic message for anything unexpected

It is framework independent; conceptlab.server and conceptlab.cli adapt it
to HTTP and to the command line.
"""

import datetime
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from conceptlab.audience2concept.input_validator import InputValidator, GENERATE_REQUEST, REMIX_REQUEST
from conceptlab.audience2concept.models import Audience, GeneratedConcept
from conceptlab.core.error_handler import (
    AuthenticationRequired,
    OwnershipViolation,
    RequestValidationError,
)
from conceptlab.core.logging_config import get_logger

# Initialize logger
logger = get_logger(__name__)

OPERATION_GENERATE = "concept_generation"
OPERATION_REMIX = "concept_remix"

_MESSAGES = {
    OPERATION_GENERATE: {
        "unauthorized": "Unauthorized - Please log in to generate concepts",
        "forbidden": "Forbidden - You can only generate concepts for your own audiences",
        "failure": "Failed to generate marketing concept. Please try again.",
    },
    OPERATION_REMIX: {
        "unauthorized": "Unauthorized - Please log in to remix concepts",
        "forbidden": "Forbidden - You can only remix concepts for your own audiences",
        "failure": "Failed to remix marketing concept. Please try again.",
    },
}


@dataclass
class HandlerResponse:
    status_code: int
    body: Dict[str, Any] = field(default_factory=dict)


class LoggingUsageObserver:
    """
    Usage observer that writes one info line per successful request.
    """

    def record(self, event: Dict[str, Any]) -> None:
        logger.info(
            f"API Usage: User {event.get('user_id')} performed {event.get('operation')} "
            f"at {event.get('timestamp')}"
        )


class ConceptRequestHandler:
    """
    Authenticates, validates and authorizes concept requests, then runs them.
    """

    def __init__(
        self,
        service: Any,
        identity_provider: Any,
        ownership_checker: Any,
        usage_observer: Optional[Any] = None,
        validator: Optional[InputValidator] = None
    ):
        """
        Initialize the handler.

        Args:
            service: ConceptGenerationService (or anything with generate/remix)
            identity_provider: Object with ``get_user_id(token) -> Optional[str]``
            ownership_checker: Object with ``is_owned_by(audience_id, user_id) -> bool``
            usage_observer (optional): Object with ``record(event)``; defaults to LoggingUsageObserver
            validator (InputValidator, optional): Request schema validator
        """
        self.service = service
        self.identity_provider = identity_provider
        self.ownership_checker = ownership_checker
        self.usage_observer = usage_observer if usage_observer is not None else LoggingUsageObserver()
        self.validator = validator or InputValidator()

    def handle_generate(self, body: Any, token: Optional[str]) -> HandlerResponse:
        """
        Handle a generate request ``{audience, campaignType?, tone?, additionalContext?}``.
        """
        def run(request: Dict[str, Any], audience: Audience) -> GeneratedConcept:
            return self.service.generate(
                audience,
                campaign_type=request["campaignType"],
                tone=request["tone"],
                additional_context=request["additionalContext"]
            )

        return self._handle(OPERATION_GENERATE, GENERATE_REQUEST, body, token, run)

    def handle_remix(self, body: Any, token: Optional[str]) -> HandlerResponse:
        """
        Handle a remix request ``{originalConcept, audience, remixInstructions?}``.
        """
        def run(request: Dict[str, Any], audience: Audience) -> GeneratedConcept:
            return self.service.remix(
                GeneratedConcept.from_dict(request["originalConcept"]),
                audience,
                remix_instructions=request["remixInstructions"]
            )

        return self._handle(OPERATION_REMIX, REMIX_REQUEST, body, token, run)

    def _handle(
        self,
        operation: str,
        request_type: str,
        body: Any,
        token: Optional[str],
        run: Callable[[Dict[str, Any], Audience], GeneratedConcept]
    ) -> HandlerResponse:
        messages = _MESSAGES[operation]
        try:
            user_id = self.authenticate(token)
            request = self.validator.validate_request(request_type, body)
            audience = Audience.from_dict(request["audience"])
            self.authorize(audience.id, user_id)

            concept = run(request, audience)
            if concept.degraded:
                logger.info(f"{operation} for user {user_id} returned a fallback concept")

            self._record_usage(user_id, operation)
            return HandlerResponse(200, concept.to_dict())

        except AuthenticationRequired:
            return HandlerResponse(401, {"error": messages["unauthorized"]})
        except RequestValidationError as e:
            return HandlerResponse(400, {"error": e.message, "details": e.details})
        except OwnershipViolation:
            return HandlerResponse(403, {"error": messages["forbidden"]})
        except Exception:
            logger.exception(f"Unexpected error during {operation}")
            return HandlerResponse(500, {"error": messages["failure"]})

    def authenticate(self, token: Optional[str]) -> str:
        """
        Resolve the caller's user id.

        Raises:
            AuthenticationRequired: If the token is missing, unknown or cannot be checked
        """
        try:
            user_id = self.identity_provider.get_user_id(token)
        except Exception as e:
            logger.warning(f"Session lookup failed: {e}")
            raise AuthenticationRequired()
        if not user_id:
            raise AuthenticationRequired()
        return user_id

    def authorize(self, audience_id: str, user_id: str) -> None:
        """
        Check that the caller owns the audience.

        Raises:
            OwnershipViolation: If it does not, or if the check itself fails
        """
        try:
            owned = self.ownership_checker.is_owned_by(audience_id, user_id)
        except Exception as e:
            logger.warning(f"Ownership check for audience {audience_id} failed: {e}")
            raise OwnershipViolation()
        if not owned:
            logger.warning(f"User {user_id} attempted to use audience {audience_id} they do not own")
            raise OwnershipViolation()

    def _record_usage(self, user_id: str, operation: str) -> None:
        event = {
            "user_id": user_id,
            "operation": operation,
            "timestamp": datetime.datetime.now(datetime.timezone.utc).isoformat(),
        }
        try:
            self.usage_observer.record(event)
        except Exception as e:
            logger.warning(f"Failed to record API usage: {e}")
