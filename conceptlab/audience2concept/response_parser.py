"""
Parsing of free-text LLM responses into concept title and description.

Models do not always honour the JSON-only instruction: they wrap the object
in prose or code fences, emit slightly broken JSON, or ignore the format
entirely. parse_llm_response runs a cascade of strategies, first success
wins, and always returns something usable:

1. direct    - the trimmed response is a JSON object
2. substring - the span from the first "{" to the last "}" is a JSON object
3. fields    - regex extraction of quoted "title" and "description" values
4. heuristic - first line becomes the title, the remaining lines the description

finalize_concept then fills any remaining gaps with fixed placeholders.
"""

import json
import re
from typing import Any, Callable, Dict, List, Optional, Tuple

from conceptlab.audience2concept.models import GeneratedConcept
from conceptlab.core.constants import (
    MAX_TITLE_LENGTH,
    HEURISTIC_TITLE_PLACEHOLDER,
    UNTITLED_CONCEPT,
    NO_DESCRIPTION,
)
from conceptlab.core.logging_config import get_logger

# Initialize logger
logger = get_logger(__name__)

STRATEGY_DIRECT = "direct"
STRATEGY_SUBSTRING = "substring"
STRATEGY_FIELDS = "fields"
STRATEGY_HEURISTIC = "heuristic"

TITLE_PATTERN = re.compile(r"""title["']*\s*:\s*["'](.*?)["']""", re.IGNORECASE)
DESCRIPTION_PATTERN = re.compile(
    r"""description["']*\s*:\s*["'](.*?)["']\s*[,}]""", re.IGNORECASE | re.DOTALL
)
JSON_SPAN_PATTERN = re.compile(r"\{.*\}", re.DOTALL)

_TITLE_STRIP_CHARS = re.compile(r"""[{}"':,]""")
_DESCRIPTION_STRIP_CHARS = re.compile(r"""[{}'"]""")


def _concept_fields(parsed: Any) -> Optional[Dict[str, str]]:
    """
    Pull string title/description out of a decoded JSON value.

    Returns None unless the value is an object with at least one of the
    two fields as a string; a missing field is left for finalize_concept.
    """
    if not isinstance(parsed, dict):
        return None
    fields = {}
    for key in ("title", "description"):
        value = parsed.get(key)
        if isinstance(value, str):
            fields[key] = value
    return fields or None


def _parse_direct(raw: str) -> Optional[Dict[str, str]]:
    try:
        return _concept_fields(json.loads(raw.strip()))
    except (ValueError, RecursionError):
        return None


def _parse_substring(raw: str) -> Optional[Dict[str, str]]:
    match = JSON_SPAN_PATTERN.search(raw)
    if not match:
        return None
    try:
        return _concept_fields(json.loads(match.group(0)))
    except (ValueError, RecursionError):
        return None


def _extract_fields(raw: str) -> Optional[Dict[str, str]]:
    title_match = TITLE_PATTERN.search(raw)
    description_match = DESCRIPTION_PATTERN.search(raw)
    if title_match and description_match:
        return {
            "title": title_match.group(1).strip(),
            "description": description_match.group(1).strip(),
        }
    return None


def _parse_heuristic(raw: str) -> Dict[str, str]:
    lines = [line.strip() for line in raw.split("\n") if line.strip()]

    title = ""
    if lines:
        title = _TITLE_STRIP_CHARS.sub("", lines[0]).strip()[:MAX_TITLE_LENGTH]

    description = _DESCRIPTION_STRIP_CHARS.sub("", " ".join(lines[1:])).strip()

    return {
        "title": title or HEURISTIC_TITLE_PLACEHOLDER,
        "description": description or raw.strip(),
    }


_STRATEGIES: List[Tuple[str, Callable[[str], Optional[Dict[str, str]]]]] = [
    (STRATEGY_DIRECT, _parse_direct),
    (STRATEGY_SUBSTRING, _parse_substring),
    (STRATEGY_FIELDS, _extract_fields),
]


def parse_llm_response_with_strategy(llm_response: Optional[str]) -> Tuple[Dict[str, str], str]:
    """
    Parse an LLM response and report which strategy produced the result.

    Args:
        llm_response (str): Raw text returned by the model

    Returns:
        Tuple[Dict[str, str], str]: The candidate fields and the strategy name
    """
    raw = llm_response if isinstance(llm_response, str) else str(llm_response or "")

    for name, strategy in _STRATEGIES:
        result = strategy(raw)
        if result is not None:
            return result, name
        logger.debug(f"Response parsing strategy '{name}' did not match")

    logger.warning("LLM response is not structured, falling back to line heuristics")
    logger.debug(f"Unstructured LLM response: {raw[:200]}")
    return _parse_heuristic(raw), STRATEGY_HEURISTIC


def parse_llm_response(llm_response: Optional[str]) -> Dict[str, str]:
    """
    Parse an LLM response into a candidate ``{"title", "description"}`` dict.

    Never raises. A field can still be missing or empty when the model
    returned a JSON object without it; pass the result to finalize_concept.

    Args:
        llm_response (str): Raw text returned by the model

    Returns:
        Dict[str, str]: Candidate concept fields
    """
    result, strategy = parse_llm_response_with_strategy(llm_response)
    logger.info(f"Parsed LLM response using '{strategy}' strategy")
    return result


def finalize_concept(candidate: Optional[Dict[str, Any]]) -> GeneratedConcept:
    """
    Substitute placeholders for a missing or empty title or description.

    Args:
        candidate (Dict[str, Any]): Output of parse_llm_response

    Returns:
        GeneratedConcept: A concept whose fields are both non-empty
    """
    candidate = candidate or {}
    title = candidate.get("title")
    description = candidate.get("description")

    if not isinstance(title, str) or not title.strip():
        title = UNTITLED_CONCEPT
    if not isinstance(description, str) or not description.strip():
        description = NO_DESCRIPTION

    return GeneratedConcept(title=title, description=description)
