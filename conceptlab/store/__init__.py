"""
File-backed collaborators of the concept pipeline: audience lookup with
ownership checks and concept persistence with audience snapshots.
"""

from conceptlab.store.audience_store import JsonAudienceStore
from conceptlab.store.concept_store import JsonConceptStore, build_concept_record
