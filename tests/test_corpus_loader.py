"""
Unit tests for corpus loading.

Tests JSONL parsing, both BDI representations and fatal errors.
"""

import json
import os
import tempfile

import pytest
from models import AttackMapping, BDIItem
from services import CorpusLoader, CorpusLoadError, load_corpus, parse_corpus_lines


def create_test_corpus(lines) -> str:
    """Helper to write corpus lines to a temporary JSONL file."""
    with tempfile.NamedTemporaryFile(mode='w', suffix='.jsonl', delete=False, encoding='utf-8') as f:
        for line in lines:
            f.write(line if isinstance(line, str) else json.dumps(line))
            f.write("\n")
        return f.name


def conversation_dict(conversation_id="c1", **overrides):
    data = {
        "conversation_id": conversation_id,
        "stratum": "Low",
        "turns": [
            {"turn_id": 1, "role": "Human", "text": "hi", "bdi": [{"type": "belief", "text": "I am safe"}]},
        ],
    }
    data.update(overrides)
    return data


class TestParseCorpusLines:
    """Test parsing of in-memory corpus lines."""

    def test_parses_each_line(self):
        lines = [json.dumps(conversation_dict("a")), json.dumps(conversation_dict("b"))]
        conversations = parse_corpus_lines(lines)
        assert [c.conversation_id for c in conversations] == ["a", "b"]

    def test_skips_blank_lines(self):
        lines = ["", json.dumps(conversation_dict("a")), "   ", json.dumps(conversation_dict("b")), ""]
        assert len(parse_corpus_lines(lines)) == 2

    def test_missing_stratum_defaults_to_unknown(self):
        data = conversation_dict()
        del data["stratum"]
        conversation = parse_corpus_lines([json.dumps(data)])[0]
        assert conversation.stratum == "Unknown"

    def test_null_stratum_defaults_to_unknown(self):
        conversation = parse_corpus_lines([json.dumps(conversation_dict(stratum=None))])[0]
        assert conversation.stratum == "Unknown"

    def test_object_form_bdi_is_normalized(self):
        data = conversation_dict(turns=[
            {"turn_id": 2, "role": "assistant", "text": "x", "bdi": {"belief": "b", "intention": "i"}},
        ])
        turn = parse_corpus_lines([json.dumps(data)])[0].turns[0]
        assert turn.bdi == (BDIItem("belief", "b"), BDIItem("intention", "i"))
        assert turn.is_assistant

    def test_attack_mappings_with_and_without_target_id(self):
        data = conversation_dict(turns=[
            {"turn_id": 3, "role": "Human", "text": "x", "attack_mappings": [
                {"target_bdi_id": "A2_belief", "target_bdi_type": "belief",
                 "attack_strategy": "s1", "explanation": "e1"},
                {"target_bdi_type": "desire", "attack_strategy": "s2", "explanation": "e2"},
            ]},
        ])
        turn = parse_corpus_lines([json.dumps(data)])[0].turns[0]
        assert turn.attack_mappings == (
            AttackMapping("belief", "s1", "e1", target_bdi_id="A2_belief"),
            AttackMapping("desire", "s2", "e2"),
        )
        assert turn.bdi == ()

    def test_invalid_json_is_fatal_with_line_number(self):
        lines = [json.dumps(conversation_dict("a")), "{not json", json.dumps(conversation_dict("c"))]
        with pytest.raises(CorpusLoadError) as exc_info:
            parse_corpus_lines(lines)
        assert exc_info.value.line_number == 2
        assert "invalid JSON" in str(exc_info.value)

    def test_non_object_line_is_fatal(self):
        with pytest.raises(CorpusLoadError, match="Line 1"):
            parse_corpus_lines(["[1, 2, 3]"])

    def test_missing_turns_is_fatal(self):
        data = conversation_dict()
        del data["turns"]
        with pytest.raises(CorpusLoadError, match="turns"):
            parse_corpus_lines([json.dumps(data)])

    def test_non_integer_turn_id_is_fatal(self):
        data = conversation_dict(turns=[{"turn_id": "two", "role": "Human", "text": "x"}])
        with pytest.raises(CorpusLoadError, match="turn_id"):
            parse_corpus_lines([json.dumps(data)])

    def test_numeric_string_turn_id_is_accepted(self):
        data = conversation_dict(turns=[{"turn_id": "7", "role": "Human", "text": "x"}])
        assert parse_corpus_lines([json.dumps(data)])[0].turns[0].turn_id == 7

    def test_unsupported_bdi_shape_is_fatal(self):
        data = conversation_dict(turns=[{"turn_id": 1, "role": "Human", "text": "x", "bdi": "belief"}])
        with pytest.raises(CorpusLoadError, match="Unsupported BDI representation"):
            parse_corpus_lines([json.dumps(data)])

    @pytest.mark.parametrize("bdi", [
        [{"type": "belief"}],
        [{"type": "belief", "text": None}],
        {"belief": 5},
    ])
    def test_non_string_bdi_text_is_fatal(self, bdi):
        data = conversation_dict(turns=[{"turn_id": 1, "role": "Human", "text": "x", "bdi": bdi}])
        with pytest.raises(CorpusLoadError, match="text must be a string") as exc_info:
            parse_corpus_lines([json.dumps(conversation_dict("a")), json.dumps(data)])
        assert exc_info.value.line_number == 2

    def test_explicit_null_target_id_is_carried(self):
        data = conversation_dict(turns=[
            {"turn_id": 3, "role": "Human", "text": "x", "attack_mappings": [
                {"target_bdi_id": None, "target_bdi_type": "belief", "attack_strategy": "s", "explanation": "e"},
                {"target_bdi_type": "belief", "attack_strategy": "s", "explanation": "e"},
            ]},
        ])
        explicit_null, absent = parse_corpus_lines([json.dumps(data)])[0].turns[0].attack_mappings
        assert explicit_null.target_bdi_id is None
        assert explicit_null.carries_target_bdi_id
        assert not absent.carries_target_bdi_id
        assert explicit_null != absent

    def test_corpus_load_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            parse_corpus_lines(["nope"])


class TestLoadCorpus:
    """Test loading from files."""

    def test_load_from_file(self):
        path = create_test_corpus([conversation_dict("a"), conversation_dict("b"), conversation_dict("c")])
        try:
            conversations = load_corpus(path)
            assert len(conversations) == 3
            assert conversations[0].turns[0].bdi == (BDIItem("belief", "I am safe"),)
        finally:
            os.remove(path)

    def test_missing_file(self):
        with pytest.raises(FileNotFoundError):
            load_corpus('/nonexistent/corpus.jsonl')

    def test_bundled_sample_corpus_loads(self):
        root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
        conversations = load_corpus(os.path.join(root, "data", "review_conversations.jsonl"))
        assert len(conversations) == 2


class TestCorpusLoader:
    """Test the CorpusLoader accessor class."""

    def test_accessors(self):
        path = create_test_corpus([conversation_dict("a"), conversation_dict("b")])
        try:
            loader = CorpusLoader(path)
            assert loader.total == 2
            assert loader.get_conversation(1).conversation_id == "b"
            assert loader.get_conversation(2) is None
            assert loader.get_conversation(-1) is None
            assert loader.find("a").conversation_id == "a"
            assert loader.find("zzz") is None
        finally:
            os.remove(path)
