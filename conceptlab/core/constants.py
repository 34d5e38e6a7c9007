"""
Constants for the conceptlab package.

This module provides constants used throughout the conceptlab package.
These constants can be easily changed in one place.
"""

# LLM Models
DEFAULT_LLM_MODEL = "gpt-3.5-turbo"

# API Endpoints
OPENAI_API_ENDPOINT = "https://api.openai.com/v1"

# Sampling
DEFAULT_GENERATE_TEMPERATURE = 0.8
DEFAULT_REMIX_TEMPERATURE = 0.9  # Remix favors more variation
DEFAULT_MAX_TOKENS = 800
DEFAULT_LLM_TIMEOUT = 30  # seconds

# Prompt variants
VARIANT_GENERATE = "generate"
VARIANT_REMIX = "remix"

# Campaign defaults
DEFAULT_CAMPAIGN_TYPE = "general marketing campaign"
DEFAULT_TONE = "engaging and persuasive"
DEFAULT_ADDITIONAL_CONTEXT = ""
DEFAULT_REMIX_INSTRUCTIONS = "Create a variation with a fresh perspective"

# Concept limits and placeholders
MAX_TITLE_LENGTH = 60
HEURISTIC_TITLE_PLACEHOLDER = "Generated Marketing Concept"
UNTITLED_CONCEPT = "Untitled Concept"
NO_DESCRIPTION = "No description provided."

# Audience demographics
ALL_GENDERS = "All genders"
LOCATION_TYPES = ["urban", "suburban", "rural", "mixed"]

# Server
DEFAULT_SERVER_HOST = "127.0.0.1"
DEFAULT_SERVER_PORT = 8000

# Logging
DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_LOG_MAX_BYTES = 10 * 1024 * 1024
DEFAULT_LOG_BACKUP_COUNT = 5
REDACTED = "***REDACTED***"
