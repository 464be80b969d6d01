"""
Validation utilities for reviewer input.

Each check returns (is_valid, error_message) so UI handlers can turn a
failure into a status message without raising.
"""

import re
from typing import Optional, Tuple

from models.rating import RATING_OPTIONS

STORAGE_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_\-]+_v\d+$")


def validate_rating(rating: Optional[str]) -> Tuple[bool, str]:
    """
    Validate that a rating is one of the Likert options.

    Args:
        rating: Selected rating (None when nothing is selected)

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not rating:
        return False, "Select a rating first"

    if rating not in RATING_OPTIONS:
        return False, f"Unknown rating: {rating}"

    return True, ""


def validate_rating_target(encoded_key: Optional[str]) -> Tuple[bool, str]:
    """Validate that a rating target has been picked."""
    if not encoded_key:
        return False, "Select an item to rate first"

    return True, ""


def validate_export_preconditions(record_count: int) -> Tuple[bool, str]:
    """
    Validate preconditions for export.

    Args:
        record_count: Number of records in the annotation log
    """
    if record_count == 0:
        return False, "No annotations yet. Submit at least one conversation first."

    return True, ""


def validate_storage_key(storage_key: str) -> Tuple[bool, str]:
    """
    Validate that a storage key carries a schema version suffix (e.g. "bdi_annotations_v2").
    """
    if not storage_key or not STORAGE_KEY_PATTERN.match(storage_key):
        return False, f"Storage key must look like <name>_v<version>, got {storage_key!r}"

    return True, ""
