"""
Credential management for API keys.

Credentials are read from environment variables. A .env file in the
working directory is loaded on import so local development does not need
exported variables.
"""

import os
from typing import Optional
from dotenv import load_dotenv
from conceptlab.core.logging_config import get_logger

# Initialize logger
logger = get_logger(__name__)

# Load environment variables from .env file if it exists
load_dotenv()

# Map API names to environment variable names
API_KEY_ENV_VARS = {
    "openai": "OPENAI_API_KEY",
    "openrouter": "OPENROUTER_API_KEY",
}

def get_credential(key: str, required: bool = True) -> Optional[str]:
    """
    Get a credential from environment variables.

    Args:
        key (str): Environment variable name
        required (bool): Whether the credential is required

    Returns:
        Optional[str]: The credential value or None if not required and not found

    Raises:
        ValueError: If credential is required but not set
    """
    value = os.environ.get(key)

    if not value and required:
        logger.error(f"Required credential {key} is not set")
        raise ValueError(
            f"{key} environment variable is required but not set. "
            f"Export it in your shell or add {key}=... to a .env file."
        )

    return value or None

def get_api_key(api_name: str) -> str:
    """
    Get API key for a specific API.

    Args:
        api_name (str): API name (e.g., 'openai', 'openrouter')

    Returns:
        str: API key

    Raises:
        ValueError: If the API is unknown or its key is not set
    """
    # Check if we're running in a test environment
    if 'PYTEST_CURRENT_TEST' in os.environ:
        logger.debug(f"Using dummy API key for {api_name} in test environment")
        return f"test_{api_name}_api_key"

    env_var = API_KEY_ENV_VARS.get(api_name.lower())
    if not env_var:
        raise ValueError(f"Unknown API: {api_name}")

    return get_credential(env_var)
