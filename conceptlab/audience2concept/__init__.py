"""
Audience to concept pipeline components.

This module turns an audience profile plus campaign parameters into a
marketing concept (title and description) with an LLM, and remixes
existing concepts into variations.
"""

from conceptlab.audience2concept.models import Audience, Demographics, GeneratedConcept
from conceptlab.audience2concept.audience_description import build_audience_description
from conceptlab.audience2concept.llm_templates import (
    build_generation_prompt,
    build_remix_prompt,
    generate_concept_prompt
)
from conceptlab.audience2concept.response_parser import parse_llm_response, finalize_concept
from conceptlab.audience2concept.concept_service import ConceptGenerationService, GenerationConfig
from conceptlab.audience2concept.request_handler import ConceptRequestHandler
