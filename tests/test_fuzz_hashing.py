"""Property-based checks for the hash tree."""

from __future__ import annotations

import copy

from hypothesis import given, settings, strategies as st

from json_hash import ApplyConfig, Hash, hip, hsh
from json_hash.canonical_json import canonical_dumps

keys = st.text(min_size=1, max_size=8).filter(lambda k: k != "_hash")

# quarter steps are exact binary fractions, so they always meet the 0.001 precision
numbers = st.one_of(
    st.integers(min_value=-10**12, max_value=10**12),
    st.integers(min_value=-4000, max_value=4000).map(lambda i: i / 4),
)

leaves = st.one_of(st.none(), st.booleans(), numbers, st.text(max_size=20))

json_values = st.recursive(
    leaves,
    lambda children: st.one_of(
        st.lists(children, max_size=4),
        st.dictionaries(keys, children, max_size=4),
    ),
    max_leaves=15,
)

json_objects = st.dictionaries(keys, json_values, max_size=5)


def reorder(value):
    """Return ``value`` with the key order of every object reversed."""
    if isinstance(value, dict):
        return {k: reorder(value[k]) for k in reversed(list(value))}
    if isinstance(value, list):
        return [reorder(v) for v in value]
    return value


@given(json_objects)
@settings(deadline=5000, max_examples=200)
def test_key_order_independent(obj: dict) -> None:
    assert hsh(obj)["_hash"] == hsh(reorder(obj))["_hash"]


@given(json_objects)
@settings(deadline=5000, max_examples=200)
def test_idempotent(obj: dict) -> None:
    once = hsh(obj)
    twice = Hash().apply(once, ApplyConfig(update_existing_hashes=True))
    assert twice == once


@given(json_objects)
@settings(deadline=5000, max_examples=200)
def test_copy_isolation(obj: dict) -> None:
    before = copy.deepcopy(obj)
    hsh(obj)
    assert obj == before

    hashed = hip(obj)
    assert hashed is obj
    assert "_hash" in obj


@given(json_objects)
@settings(deadline=5000, max_examples=200)
def test_round_trip_validation(obj: dict) -> None:
    hashed = hsh(obj)
    assert Hash().validate(hashed) is hashed


@given(keys, st.integers(min_value=-10**9, max_value=10**9))
@settings(deadline=5000, max_examples=200)
def test_integral_floats_hash_like_ints(key: str, n: int) -> None:
    assert hsh({key: n})["_hash"] == hsh({key: float(n)})["_hash"]
    assert canonical_dumps({key: float(n)}) == canonical_dumps({key: n})
