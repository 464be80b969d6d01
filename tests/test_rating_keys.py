"""
Unit tests for rating keys and the Likert scale.
"""

import pytest
from models import RatingKey, RATING_OPTIONS


class TestRatingScale:
    """Test Likert ordering."""

    def test_options_are_ordered(self):
        assert RATING_OPTIONS == ["Strongly Disagree", "Disagree", "Neutral", "Agree", "Strongly Agree"]


class TestRatingKey:
    """Test key construction, equality and encoding."""

    def test_parts(self):
        assert RatingKey.stratum().parts() == ("stratum",)
        assert RatingKey.bdi(3, "I am safe").parts() == (3, "bdi", "I am safe")
        assert RatingKey.attack(4, 0, "strategy").parts() == (4, "attack", 0, "strategy")

    def test_value_equality_and_hashing(self):
        assert RatingKey.bdi(1, "x") == RatingKey.bdi(1, "x")
        assert len({RatingKey.bdi(1, "x"), RatingKey.bdi(1, "x")}) == 1

    def test_invalid_attack_field_raises(self):
        with pytest.raises(ValueError, match="Invalid attack field"):
            RatingKey.attack(1, 0, "explanation")

    def test_separator_in_text_does_not_collide(self):
        # "|||" joined strings would make these two identical
        first = RatingKey.bdi(1, "a|||attack|||0")
        second = RatingKey.bdi(1, "a")
        assert first != second
        assert first.encode() != second.encode()
        assert RatingKey.bdi(1, "0|||target_type").encode() != RatingKey.attack(1, 0, "target_type").encode()

    def test_encode_decode_round_trip(self):
        keys = [
            RatingKey.stratum(),
            RatingKey.bdi(2, 'quote " and \\ backslash'),
            RatingKey.attack(5, 1, "target_type"),
        ]
        for key in keys:
            assert RatingKey.decode(key.encode()) == key

    @pytest.mark.parametrize("encoded", ["", "not json", "[1, \"bdi\"]", "[1, \"other\", 2]", "{}"])
    def test_decode_rejects_garbage(self, encoded):
        with pytest.raises(ValueError, match="Invalid rating key"):
            RatingKey.decode(encoded)
