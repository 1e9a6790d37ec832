import pytest

from litestar_inertia.partial import parse_header_list, partial_request_from_headers, resolve_partial_props
from litestar_inertia.types import PartialReloadRequest

PROPS = {"a": 1, "b": 2, "c": 3}


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, None),
        ("", frozenset()),
        ("a", frozenset({"a"})),
        ("a,b", frozenset({"a", "b"})),
        (" a , ,b ,", frozenset({"a", "b"})),
    ],
)
def test_parse_header_list(value: "str | None", expected: "frozenset[str] | None") -> None:
    assert parse_header_list(value) == expected


def test_partial_request_from_headers() -> None:
    partial = partial_request_from_headers(
        {
            "x-inertia-partial-component": "Users/Index",
            "x-inertia-partial-data": "users, filters",
            "x-inertia-partial-except": "stats",
        }
    )
    assert partial.component == "Users/Index"
    assert partial.only == frozenset({"users", "filters"})
    assert partial.exclude == frozenset({"stats"})
    assert partial.is_partial


def test_partial_request_from_headers_without_headers() -> None:
    partial = partial_request_from_headers({})
    assert partial == PartialReloadRequest()
    assert not partial.is_partial


def test_partial_request_requires_key_list() -> None:
    partial = partial_request_from_headers({"x-inertia-partial-component": "Home"})
    assert not partial.is_partial


def test_partial_request_uri_encoded_component() -> None:
    partial = partial_request_from_headers(
        {
            "x-inertia-partial-component": "Users%2FShow",
            "x-inertia-partial-component-uri-autoencoded": "true",
            "x-inertia-partial-data": "user",
        }
    )
    assert partial.component == "Users/Show"


def test_resolve_only() -> None:
    partial = PartialReloadRequest(component="Home", only=frozenset({"a", "c"}))
    assert resolve_partial_props(PROPS, partial, "Home") == {"a": 1, "c": 3}


def test_resolve_except() -> None:
    partial = PartialReloadRequest(component="Home", exclude=frozenset({"b"}))
    assert resolve_partial_props(PROPS, partial, "Home") == {"a": 1, "c": 3}


def test_resolve_only_takes_precedence_over_except() -> None:
    partial = PartialReloadRequest(component="Home", only=frozenset({"a", "b"}), exclude=frozenset({"a"}))
    assert resolve_partial_props(PROPS, partial, "Home") == {"a": 1, "b": 2}


def test_resolve_empty_only_returns_no_props() -> None:
    partial = PartialReloadRequest(component="Home", only=frozenset())
    assert resolve_partial_props(PROPS, partial, "Home") == {}


def test_resolve_unknown_keys_are_ignored() -> None:
    partial = PartialReloadRequest(component="Home", only=frozenset({"a", "missing"}))
    assert resolve_partial_props(PROPS, partial, "Home") == {"a": 1}


def test_resolve_other_component_returns_all_props() -> None:
    partial = PartialReloadRequest(component="Dashboard", only=frozenset({"a"}))
    assert resolve_partial_props(PROPS, partial, "Home") == PROPS


def test_resolve_not_partial_returns_all_props() -> None:
    assert resolve_partial_props(PROPS, PartialReloadRequest(), "Home") == PROPS


def test_resolve_returns_new_mapping() -> None:
    props = dict(PROPS)
    result = resolve_partial_props(props, PartialReloadRequest(), "Home")
    result["d"] = 4
    assert props == PROPS
