"""
Session identity for the request boundary.

Maps bearer tokens to user ids. Tokens come from the ``auth.tokens``
configuration section and from the CONCEPTLAB_TOKENS environment variable
(comma-separated ``token:user_id`` pairs).
"""

import os
from typing import Dict, Optional

from conceptlab.core.config import get_config_value
from conceptlab.core.logging_config import get_logger

logger = get_logger(__name__)

TOKENS_ENV_VAR = "CONCEPTLAB_TOKENS"


def parse_token_pairs(raw: str) -> Dict[str, str]:
    """
    Parse ``token:user_id`` pairs separated by commas.

    Malformed pairs are skipped with a warning.
    """
    tokens = {}
    for pair in raw.split(","):
        pair = pair.strip()
        if not pair:
            continue
        token, sep, user_id = pair.partition(":")
        if not sep or not token.strip() or not user_id.strip():
            logger.warning(f"Ignoring malformed token pair in {TOKENS_ENV_VAR}")
            continue
        tokens[token.strip()] = user_id.strip()
    return tokens


class TokenIdentityProvider:
    """
    Resolves a bearer token to the authenticated user id.
    """

    def __init__(self, tokens: Optional[Dict[str, str]] = None):
        self.tokens = dict(tokens or {})

    @classmethod
    def from_config(cls) -> "TokenIdentityProvider":
        tokens = dict(get_config_value("auth.tokens", {}) or {})
        tokens.update(parse_token_pairs(os.environ.get(TOKENS_ENV_VAR, "")))
        logger.info(f"Loaded {len(tokens)} session token(s)")
        return cls(tokens)

    def get_user_id(self, token: Optional[str]) -> Optional[str]:
        """
        Return the user id for a token, or None when the session is invalid.
        """
        if not token:
            return None
        return self.tokens.get(token)
