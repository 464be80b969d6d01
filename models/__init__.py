"""Data models for the BDI Annotation Workbench."""

from .conversation import BDIItem, AttackMapping, Turn, Conversation
from .rating import RatingKey, RATING_OPTIONS, DEFAULT_RATING
from .draft_store import DraftRatingStore
from .annotation import AnnotationRecord, TurnAnnotation, BDIRating, AttackMappingRating
from .application_state import ApplicationState

__all__ = [
    "BDIItem",
    "AttackMapping",
    "Turn",
    "Conversation",
    "RatingKey",
    "RATING_OPTIONS",
    "DEFAULT_RATING",
    "DraftRatingStore",
    "AnnotationRecord",
    "TurnAnnotation",
    "BDIRating",
    "AttackMappingRating",
    "ApplicationState",
]
