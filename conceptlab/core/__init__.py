"""
Core utilities and configuration for the conceptlab package.
"""

from conceptlab.core.config import get_config, get_config_value
from conceptlab.core.credentials import get_api_key
from conceptlab.core.logging_config import get_logger, configure_logging
from conceptlab.core.error_handler import (
    APIError,
    ValidationError,
    RequestValidationError,
    ConfigurationError,
    AuthenticationRequired,
    OwnershipViolation
)
