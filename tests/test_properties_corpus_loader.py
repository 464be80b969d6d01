"""
Property-based tests for corpus loading.
"""

import json

import pytest
from hypothesis import given, strategies as st

from services import CorpusLoadError, parse_corpus_lines


def conversation_line(index: int) -> str:
    return json.dumps({
        "conversation_id": f"conv-{index}",
        "stratum": "Low",
        "turns": [{"turn_id": 1, "role": "Human", "text": "hi", "bdi": {"belief": "b"}}],
    })


# Property: a valid corpus loads one conversation per line, in order
@given(st.integers(min_value=0, max_value=30))
def test_valid_corpus_loads_every_line(count):
    conversations = parse_corpus_lines([conversation_line(i) for i in range(count)])
    assert [c.conversation_id for c in conversations] == [f"conv-{i}" for i in range(count)]


# Property: a single bad line anywhere fails the load at that line
@given(st.integers(min_value=1, max_value=20), st.data())
def test_bad_line_fails_at_first_bad_line(count, data):
    bad_index = data.draw(st.integers(min_value=0, max_value=count - 1))
    lines = [conversation_line(i) for i in range(count)]
    lines[bad_index] = lines[bad_index][:-1]

    with pytest.raises(CorpusLoadError) as exc_info:
        parse_corpus_lines(lines)
    assert exc_info.value.line_number == bad_index + 1
