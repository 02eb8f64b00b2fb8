import pytest

from opertools.utils import (
    NamespacedName,
    contains,
    hash32,
    merge_labels,
    object_key_from_meta,
    ordered_string_map,
)


def test_merge_labels_later_wins():
    first = {"a": "1", "keep": "x"}
    second = {"a": "2", "b": "3"}
    assert merge_labels(first, second) == {"a": "2", "keep": "x", "b": "3"}


def test_merge_labels_does_not_mutate_inputs():
    first = {"a": "1"}
    second = {"b": "2"}
    merged = merge_labels(first, second)
    merged["c"] = "3"
    assert first == {"a": "1"}
    assert second == {"b": "2"}


def test_merge_labels_empty_and_none():
    assert merge_labels() == {}
    assert merge_labels(None, {"x": "y"}, None) == {"x": "y"}


@pytest.mark.parametrize(
    "items,item,expected",
    [
        (["a", "b"], "b", True),
        (["a", "b"], "c", False),
        ([], "a", False),
        (None, "a", False),
    ],
)
def test_contains(items, item, expected):
    assert contains(items, item) is expected


def test_hash32_empty_is_offset_basis():
    assert hash32("") == "811c9dc5"


def test_hash32_not_zero_padded():
    assert hash32("a") == "50c5d7e"


def test_hash32_deterministic_and_hex():
    value = hash32("some configmap data")
    assert value == hash32("some configmap data")
    assert value != hash32("some configmap data!")
    assert 1 <= len(value) <= 8
    assert int(value, 16) < 2**32
    assert value == value.lower()


def test_ordered_string_map_sorts_keys():
    original = {"zeta": "1", "alpha": "2", "mid": "3"}
    result = ordered_string_map(original)
    assert list(result) == sorted(original)
    assert result == original


def test_ordered_string_map_empty():
    assert ordered_string_map(None) == {}


def test_object_key_from_object_mapping():
    obj = {"kind": "Pod", "metadata": {"name": "web", "namespace": "prod"}}
    assert object_key_from_meta(obj) == NamespacedName(namespace="prod", name="web")


def test_object_key_from_metadata_mapping():
    assert object_key_from_meta({"name": "cluster-thing"}) == NamespacedName(
        namespace="", name="cluster-thing"
    )