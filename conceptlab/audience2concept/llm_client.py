"""
LLM client for OpenAI-compatible chat completion APIs.

This module provides a client that sends one system prompt and one user
prompt to a chat completions endpoint and returns the raw text of the
first choice. Parsing is left to conceptlab.audience2concept.response_parser.
"""

import os
import json
import datetime
import requests
from typing import Dict, Any, Optional

from conceptlab.core.logging_config import get_logger, redact_sensitive_data
from conceptlab.core.credentials import get_api_key
from conceptlab.core.config import get_config_value
from conceptlab.core.error_handler import APIError, handle_api_request
from conceptlab.core.constants import (
    DEFAULT_LLM_MODEL,
    OPENAI_API_ENDPOINT,
    DEFAULT_MAX_TOKENS,
    DEFAULT_GENERATE_TEMPERATURE,
    DEFAULT_LLM_TIMEOUT
)

# Initialize logger
logger = get_logger(__name__)

class ChatCompletionClient:
    """
    Client for making chat completion calls.

    Each call is a single attempt with a bounded timeout. Any failure is
    raised as APIError; the caller decides what to do about it.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        api_base: Optional[str] = None,
        timeout: Optional[float] = None,
        log_file: Optional[str] = None
    ):
        """
        Initialize the chat completion client.

        Args:
            api_key (str, optional): API key. If not provided, read from the environment
                for the configured provider.
            model (str, optional): Model to use. If not provided, will use the default from config.
            api_base (str, optional): Base URL of the API. Defaults to the configured endpoint.
            timeout (float, optional): Seconds to wait for a response.
            log_file (str, optional): File to append request/response traces to.
        """
        provider = get_config_value("llm.provider", "openai")
        try:
            self.api_key = api_key or get_api_key(provider)
            if not self.api_key:
                raise ValueError(f"{provider} API key is required but not provided")
            logger.info(f"{provider} API key is available")
        except ValueError as e:
            logger.error(f"Failed to get {provider} API key: {str(e)}")
            raise

        self.model = model or get_config_value("llm.model", DEFAULT_LLM_MODEL)
        self.api_base = (api_base or get_config_value("llm.api_base", OPENAI_API_ENDPOINT)).rstrip("/")
        self.timeout = timeout or get_config_value("llm.timeout", DEFAULT_LLM_TIMEOUT)
        self.endpoint = f"{self.api_base}/chat/completions"

        self.log_file = log_file
        if self.log_file:
            logger.info(f"LLM requests and responses will be logged to {self.log_file}")
            os.makedirs(os.path.dirname(os.path.abspath(self.log_file)), exist_ok=True)

        logger.info(f"Initialized {self.__class__.__name__} with model {self.model}")

    def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = DEFAULT_GENERATE_TEMPERATURE,
        max_tokens: int = DEFAULT_MAX_TOKENS
    ) -> str:
        """
        Run one chat completion and return the text of the first choice.

        Args:
            system_prompt (str): System prompt for the LLM
            user_prompt (str): User prompt for the LLM
            temperature (float): Sampling temperature
            max_tokens (int): Upper bound on completion tokens

        Returns:
            str: Raw completion text

        Raises:
            APIError: On network errors, timeouts, non-2xx responses or an empty completion
        """
        logger.info(f"Requesting completion from {self.model}")
        logger.debug(f"User prompt: {user_prompt[:100]}...")

        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt}
            ],
            "temperature": temperature,
            "max_tokens": max_tokens
        }

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json"
        }

        if self.log_file:
            self._log_to_file({
                "timestamp": datetime.datetime.now().isoformat(),
                "type": "request",
                "model": self.model,
                "headers": redact_sensitive_data(headers),
                "payload": payload
            })

        result = handle_api_request(
            requests.post,
            self.endpoint,
            payload,
            headers,
            error_message="Chat completion request failed",
            timeout=self.timeout
        )

        if self.log_file:
            self._log_to_file({
                "timestamp": datetime.datetime.now().isoformat(),
                "type": "response",
                "response": result
            })

        content = self._extract_content(result)
        if not content or not content.strip():
            logger.error("No content in chat completion response")
            raise APIError(
                message="No content in chat completion response",
                endpoint=self.endpoint,
                response=result
            )

        logger.debug(f"Content: {content[:100]}...")
        return content

    @staticmethod
    def _extract_content(result: Any) -> str:
        """
        Extract the text of the first choice.

        Handles both plain string content and the list-of-parts format.
        """
        if not isinstance(result, dict):
            return ""
        choices = result.get("choices") or []
        if not choices or not isinstance(choices[0], dict):
            return ""
        message = choices[0].get("message") or {}
        content = message.get("content")

        if isinstance(content, list):
            text = ""
            for item in content:
                if isinstance(item, dict) and item.get("type") == "text":
                    text += item.get("text", "")
            return text
        if isinstance(content, str):
            return content
        return ""

    def _log_to_file(self, data: Dict[str, Any]) -> None:
        """
        Append a trace entry to the log file.

        Args:
            data (Dict[str, Any]): Data to log
        """
        if not self.log_file:
            return

        try:
            with open(self.log_file, 'a') as f:
                f.write(json.dumps(data, indent=2))
                f.write("\n\n")
        except OSError as e:
            logger.error(f"Error writing to log file {self.log_file}: {str(e)}")
