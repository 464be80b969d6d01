"""
Property-based tests for BDI normalization.
"""

from hypothesis import given, strategies as st

from services import normalize_bdi

bdi_pairs = st.dictionaries(
    keys=st.sampled_from(["belief", "desire", "intention"]),
    values=st.text(min_size=1, max_size=50),
)


# Property: array and object forms with the same pairs normalize to the same items
@given(bdi_pairs, st.randoms())
def test_array_and_object_forms_are_equivalent(pairs, rnd):
    array_form = [{"type": bdi_type, "text": text} for bdi_type, text in pairs.items()]
    rnd.shuffle(array_form)

    from_array = normalize_bdi(array_form)
    from_object = normalize_bdi(pairs)

    assert set(from_array) == set(from_object)
    assert len(from_array) == len(from_object) == len(pairs)


# Property: array form is passed through in order
@given(st.lists(
    st.fixed_dictionaries({"type": st.text(max_size=10), "text": st.text(max_size=30)}),
    max_size=10,
))
def test_array_form_preserves_order_and_length(raw):
    items = normalize_bdi(raw)

    assert [(item.type, item.text) for item in items] == [(e["type"], e["text"]) for e in raw]
