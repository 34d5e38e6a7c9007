"""
Error handling module.

This module defines the error taxonomy of the concept pipeline and the
wrapper that turns outbound HTTP failures into APIError.

Only AuthenticationRequired, RequestValidationError and OwnershipViolation
ever reach a caller of the request boundary. APIError is absorbed by the
concept generation service and converted into a fallback concept.
"""

import logging
import traceback
from typing import Dict, Any, Optional, Callable, List
import requests
import json

from conceptlab.core.logging_config import redact_sensitive_data

logger = logging.getLogger(__name__)

class APIError(Exception):
    """
    Exception raised for API errors.

    Attributes:
        message: Error message.
        status_code: HTTP status code.
        response: API response.
        endpoint: API endpoint.
        request_data: Request data.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response: Optional[Any] = None,
        endpoint: Optional[str] = None,
        request_data: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.response = response
        self.endpoint = endpoint
        self.request_data = request_data

        detailed_message = f"API Error: {message}"
        if status_code:
            detailed_message += f" (Status Code: {status_code})"
        if endpoint:
            detailed_message += f" (Endpoint: {endpoint})"

        super().__init__(detailed_message)


class ValidationError(Exception):
    """
    Exception raised for validation errors.

    Attributes:
        message: Error message.
        field: Field that failed validation.
        value: Value that failed validation.
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None
    ):
        self.message = message
        self.field = field
        self.value = value

        detailed_message = f"Validation Error: {message}"
        if field:
            detailed_message += f" (Field: {field})"

        super().__init__(detailed_message)


class RequestValidationError(ValidationError):
    """
    Exception raised when a request body violates its schema.

    Attributes:
        details: One ``{"field": ..., "message": ...}`` entry per violation,
            so a client can highlight every offending input at once.
    """

    def __init__(self, message: str, details: Optional[List[Dict[str, str]]] = None):
        self.details = details or []
        field = self.details[0]["field"] if self.details else None
        super().__init__(message, field=field)


class ConfigurationError(Exception):
    """
    Exception raised for configuration errors.

    Attributes:
        message: Error message.
        component: Component that has a configuration error.
        missing_keys: Keys that are missing from the configuration.
    """

    def __init__(
        self,
        message: str,
        component: Optional[str] = None,
        missing_keys: Optional[list] = None
    ):
        self.message = message
        self.component = component
        self.missing_keys = missing_keys or []

        detailed_message = f"Configuration Error: {message}"
        if component:
            detailed_message += f" (Component: {component})"
        if missing_keys:
            detailed_message += f" (Missing Keys: {', '.join(missing_keys)})"

        super().__init__(detailed_message)


class AuthenticationRequired(Exception):
    """Exception raised when a request carries no valid session."""

    def __init__(self, message: str = "Unauthorized - Please log in"):
        self.message = message
        super().__init__(message)


class OwnershipViolation(Exception):
    """
    Exception raised when a request targets an audience the caller does not own.

    The message is deliberately the same whether or not the audience exists.
    """

    def __init__(self, message: str = "Forbidden - You can only use your own audiences"):
        self.message = message
        super().__init__(message)


def handle_api_request(
    request_func: Callable,
    endpoint: str,
    payload: Dict[str, Any],
    headers: Dict[str, str],
    error_message: str = "API request failed",
    timeout: Optional[float] = None
) -> Dict[str, Any]:
    """
    Handle an API request with error handling.

    Args:
        request_func: Function to make the API request (e.g. requests.post).
        endpoint: API endpoint.
        payload: Request payload.
        headers: Request headers.
        error_message: Error message to use if the request fails.
        timeout: Maximum seconds to wait for the response.

    Returns:
        Decoded JSON response.

    Raises:
        APIError: If the API request fails for any reason.
    """
    response = None
    try:
        response = request_func(
            endpoint,
            json=payload,
            headers=headers,
            timeout=timeout
        )

        response.raise_for_status()

        return response.json()

    except requests.exceptions.HTTPError as e:
        if getattr(e, 'response', None) is not None:
            status_code = e.response.status_code
            response_text = e.response.text
        else:
            status_code = getattr(response, 'status_code', None)
            response_text = getattr(response, 'text', str(e))

        logger.error(f"HTTP error: {e}")
        logger.debug(f"Response: {response_text}")

        raise APIError(
            message=f"{error_message}: {e}",
            status_code=status_code,
            response=response_text,
            endpoint=endpoint,
            request_data=payload
        )

    except requests.exceptions.ConnectionError as e:
        logger.error(f"Connection error: {e}")

        raise APIError(
            message=f"{error_message}: Connection error",
            endpoint=endpoint,
            request_data=payload
        )

    except requests.exceptions.Timeout as e:
        logger.error(f"Timeout error: {e}")

        raise APIError(
            message=f"{error_message}: Request timed out",
            endpoint=endpoint,
            request_data=payload
        )

    # requests' own JSONDecodeError is also a RequestException, so this comes first
    except (json.JSONDecodeError, ValueError) as e:
        logger.error(f"Failed to parse API response: {e}")

        raise APIError(
            message=f"Failed to parse API response: {e}",
            status_code=getattr(response, 'status_code', None),
            response=getattr(response, 'text', None),
            endpoint=endpoint,
            request_data=payload
        )

    except requests.exceptions.RequestException as e:
        logger.error(f"Request error: {e}")

        raise APIError(
            message=f"{error_message}: {e}",
            endpoint=endpoint,
            request_data=payload
        )

    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        logger.debug(traceback.format_exc())

        raise APIError(
            message=f"{error_message}: {e}",
            endpoint=endpoint,
            request_data=payload
        )


def log_api_error(error: APIError) -> None:
    """
    Log an API error with detailed information.

    Prompt text inside the request data is only logged at debug level.

    Args:
        error: API error to log.
    """
    logger.error(f"API Error: {error.message}")

    if error.status_code:
        logger.error(f"Status Code: {error.status_code}")

    if error.endpoint:
        logger.error(f"Endpoint: {error.endpoint}")

    if error.response:
        logger.error(f"Response: {error.response}")

    if error.request_data:
        logger.debug(f"Request Data: {redact_sensitive_data(error.request_data)}")
