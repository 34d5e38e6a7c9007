"""
LLM prompt templates for concept generation and remixing.

Both prompt variants share one system prompt and one output contract, so a
response from either can go through the same parser
(conceptlab.audience2concept.response_parser).
"""
from typing import Dict, Optional

from conceptlab.audience2concept.models import GeneratedConcept
from conceptlab.core.constants import (
    VARIANT_GENERATE,
    VARIANT_REMIX,
    MAX_TITLE_LENGTH,
    DEFAULT_CAMPAIGN_TYPE,
    DEFAULT_TONE,
    DEFAULT_REMIX_INSTRUCTIONS,
)
from conceptlab.core.logging_config import get_logger

# Initialize logger
logger = get_logger(__name__)

CONCEPT_SYSTEM_PROMPT = (
    "You are an expert marketing strategist. You must respond ONLY with a valid JSON object "
    "containing 'title' and 'description' fields. No other text, explanations, or formatting "
    "allowed. Always start with { and end with }."
)

OUTPUT_CONTRACT = """IMPORTANT: You must respond with ONLY valid JSON in this exact format:
{{
  "title": "{title_placeholder}",
  "description": "{description_placeholder}"
}}

The object must contain exactly these two fields. Do not include any other text, explanations, or markdown formatting (no ``` code fences). Only return the JSON object."""

GENERATION_PROMPT_TEMPLATE = """Generate a marketing concept for {campaign_type} with a {tone} tone.

Target Audience: {audience_description}
{additional_context_section}
Please provide:
1. A catchy, memorable title for the marketing concept (max {max_title_length} characters)
2. A detailed description of the marketing concept including:
   - Key messaging strategy
   - Recommended channels/platforms
   - Creative direction suggestions
   - Call-to-action recommendations
   - Why this concept resonates with the target audience

{output_contract}"""

REMIX_PROMPT_TEMPLATE = """Remix and improve this existing marketing concept:

Original Title: {original_title}
Original Description: {original_description}

Target Audience: {audience_description}
Remix Instructions: {remix_instructions}

Create a new variation that:
- Maintains the core appeal but offers a fresh angle
- Better resonates with the target audience
- Incorporates new creative elements or approaches

Keep the new title to a maximum of {max_title_length} characters.

{output_contract}"""


def _output_contract(variant: str) -> str:
    if variant == VARIANT_REMIX:
        return OUTPUT_CONTRACT.format(
            title_placeholder="Your new title here",
            description_placeholder="Your new detailed description here",
        )
    return OUTPUT_CONTRACT.format(
        title_placeholder="Your title here",
        description_placeholder="Your detailed description here",
    )


def build_generation_prompt(
    audience_description: str,
    campaign_type: str = DEFAULT_CAMPAIGN_TYPE,
    tone: str = DEFAULT_TONE,
    additional_context: str = ""
) -> str:
    """
    Build the user prompt for generating a new concept.

    Args:
        audience_description (str): Output of build_audience_description
        campaign_type (str): Kind of campaign, e.g. "product launch"
        tone (str): Desired tone of voice
        additional_context (str): Extra brief; the section is left out when empty

    Returns:
        str: The user prompt
    """
    additional_context_section = ""
    if additional_context:
        additional_context_section = f"\nAdditional Context: {additional_context}\n"

    return GENERATION_PROMPT_TEMPLATE.format(
        campaign_type=campaign_type,
        tone=tone,
        audience_description=audience_description,
        additional_context_section=additional_context_section,
        max_title_length=MAX_TITLE_LENGTH,
        output_contract=_output_contract(VARIANT_GENERATE),
    )


def build_remix_prompt(
    original_concept: GeneratedConcept,
    audience_description: str,
    remix_instructions: str = DEFAULT_REMIX_INSTRUCTIONS
) -> str:
    """
    Build the user prompt for remixing an existing concept.

    Args:
        original_concept (GeneratedConcept): Concept being remixed
        audience_description (str): Output of build_audience_description
        remix_instructions (str): What the variation should change

    Returns:
        str: The user prompt
    """
    return REMIX_PROMPT_TEMPLATE.format(
        original_title=original_concept.title,
        original_description=original_concept.description,
        audience_description=audience_description,
        remix_instructions=remix_instructions,
        max_title_length=MAX_TITLE_LENGTH,
        output_contract=_output_contract(VARIANT_REMIX),
    )


def generate_concept_prompt(
    variant: str,
    audience_description: str,
    campaign_type: str = DEFAULT_CAMPAIGN_TYPE,
    tone: str = DEFAULT_TONE,
    additional_context: str = "",
    original_concept: Optional[GeneratedConcept] = None,
    remix_instructions: str = DEFAULT_REMIX_INSTRUCTIONS
) -> Dict[str, str]:
    """
    Generate the system and user prompts for a prompt variant.

    Args:
        variant (str): "generate" or "remix"
        audience_description (str): Output of build_audience_description
        campaign_type (str): Used by the generate variant
        tone (str): Used by the generate variant
        additional_context (str): Used by the generate variant
        original_concept (GeneratedConcept, optional): Required by the remix variant
        remix_instructions (str): Used by the remix variant

    Returns:
        Dict[str, str]: Dictionary containing system and user prompts

    Raises:
        ValueError: If the variant is unknown or a remix has no original concept
    """
    if variant == VARIANT_GENERATE:
        user_prompt = build_generation_prompt(
            audience_description, campaign_type, tone, additional_context
        )
    elif variant == VARIANT_REMIX:
        if original_concept is None:
            raise ValueError("A remix prompt requires the original concept")
        user_prompt = build_remix_prompt(original_concept, audience_description, remix_instructions)
    else:
        raise ValueError(f"Unknown prompt variant: {variant}")

    logger.debug(f"Built {variant} prompt ({len(user_prompt)} characters)")

    return {
        "system_prompt": CONCEPT_SYSTEM_PROMPT,
        "user_prompt": user_prompt
    }
