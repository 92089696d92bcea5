"""Tests for the filter operator registry."""

from __future__ import annotations

import pytest

from plexgraph.operators import OPERATORS, get_operator, split_operator


def test_registry_is_closed() -> None:
    assert set(OPERATORS) == {
        "exact",
        "iexact",
        "contains",
        "icontains",
        "ne",
        "in",
        "gt",
        "gte",
        "lt",
        "lte",
        "startswith",
        "istartswith",
        "endswith",
        "iendswith",
    }


@pytest.mark.parametrize(
    ("key", "expected"),
    [
        ("year__gte", ("year", "gte")),
        ("title", ("title", "exact")),
        ("title__iexact", ("title", "iexact")),
        ("grandparent__title__icontains", ("grandparent__title", "icontains")),
        ("title__bogus", ("title__bogus", "exact")),
        ("__gte", ("__gte", "exact")),
    ],
)
def test_split_operator(key: str, expected: tuple[str, str]) -> None:
    assert split_operator(key) == expected


def test_contains_treats_query_as_haystack() -> None:
    """``contains`` holds when the candidate appears inside the query value."""

    contains = get_operator("contains")
    assert contains("Buck", "Big Buck Bunny") is True
    assert contains("Big Buck Bunny", "Buck") is False
    assert get_operator("icontains")("buck", "BIG BUCK BUNNY") is True


def test_case_insensitive_prefix_and_suffix() -> None:
    assert get_operator("istartswith")("Big Buck Bunny", "big") is True
    assert get_operator("iendswith")("Big Buck Bunny", "BUNNY") is True
    assert get_operator("startswith")("Big Buck Bunny", "big") is False
    assert get_operator("endswith")("Big Buck Bunny", "Bunny") is True


def test_in_checks_membership_and_keys() -> None:
    in_ = get_operator("in")
    assert in_("movie", ["movie", "show"]) is True
    assert in_("clip", ["movie", "show"]) is False
    assert in_("movie", {"movie": 1}) is True


def test_ordering_operators() -> None:
    assert get_operator("gt")(2010, 2000) is True
    assert get_operator("gte")(2000, 2000) is True
    assert get_operator("lt")(1999, 2000) is True
    assert get_operator("lte")(2001, 2000) is False


@pytest.mark.parametrize(
    ("name", "value", "query"),
    [
        ("gt", None, 2000),
        ("gte", "2001", 2000),
        ("iexact", 42, "42"),
        ("icontains", None, "buck"),
        ("startswith", 10, "1"),
        ("in", "movie", 5),
    ],
)
def test_mismatched_types_evaluate_false(name: str, value: object, query: object) -> None:
    """Operators never raise on values of the wrong type."""

    assert get_operator(name)(value, query) is False


def test_get_operator_rejects_unknown_names() -> None:
    with pytest.raises(KeyError, match="Unknown filter operator"):
        get_operator("regex")
