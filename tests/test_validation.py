"""
Unit tests for validation utilities.
"""

import pytest
from utils.validation import (
    validate_rating,
    validate_rating_target,
    validate_export_preconditions,
    validate_storage_key
)


def test_validate_rating_valid():
    is_valid, error_msg = validate_rating("Strongly Agree")
    assert is_valid == True
    assert error_msg == ""


def test_validate_rating_missing():
    is_valid, error_msg = validate_rating(None)
    assert is_valid == False
    assert "Select a rating" in error_msg


def test_validate_rating_unknown():
    is_valid, error_msg = validate_rating("Kind of")
    assert is_valid == False
    assert "Unknown rating" in error_msg


def test_validate_rating_target():
    assert validate_rating_target('["stratum"]') == (True, "")
    is_valid, error_msg = validate_rating_target("")
    assert is_valid == False
    assert "Select an item" in error_msg


def test_validate_export_preconditions():
    assert validate_export_preconditions(2) == (True, "")
    is_valid, error_msg = validate_export_preconditions(0)
    assert is_valid == False
    assert "No annotations yet" in error_msg


@pytest.mark.parametrize("key,expected", [
    ("bdi_annotations_v2", True),
    ("bdi-annotations_v10", True),
    ("bdi_annotations", False),
    ("bdi annotations_v2", False),
    ("", False),
])
def test_validate_storage_key(key, expected):
    is_valid, _ = validate_storage_key(key)
    assert is_valid == expected
