"""
conceptlab - AI marketing concepts for audience profiles

Generates marketing concepts (a title and a description) targeted at a
structured audience profile with an LLM, and remixes existing concepts
into fresh variations.
"""

__version__ = "0.1.0"

# Import main components for easier access
from conceptlab.audience2concept.models import Audience, GeneratedConcept
from conceptlab.audience2concept.concept_service import ConceptGenerationService, GenerationConfig
from conceptlab.audience2concept.request_handler import ConceptRequestHandler
