"""
Hypothesis property-based tests for request init normalization.
"""
from __future__ import annotations

import string
import typing

from hypothesis import assume, given, settings, strategies as st
from urllib3 import HTTPHeaderDict

from gfetch import URLSearchParams, encode, normalize_init
from gfetch._types import BODY_METHODS, METHODS
from gfetch.exceptions import InvalidMethodError

# Strategy for recognized methods in any casing
http_methods = st.sampled_from(sorted(METHODS)).flatmap(
    lambda method: st.tuples(*(st.sampled_from([c.lower(), c.upper()]) for c in method)).map(
        "".join
    )
)

# Strategy for valid header names (RFC 7230)
header_names = st.text(
    alphabet=string.ascii_letters + string.digits + "!#$%&'*+-.^_`|~",
    min_size=1,
    max_size=30,
)

# Strategy for header values (printable ASCII, no control characters)
header_values = st.text(
    alphabet=st.characters(min_codepoint=0x20, max_codepoint=0x7E),
    max_size=50,
)

# Header pairs with case-insensitively unique names, so every shape agrees
header_lists = st.lists(
    st.tuples(header_names, header_values),
    max_size=20,
    unique_by=lambda pair: pair[0].lower(),
)

# JSON-compatible scalar values for form fields
field_values = st.one_of(
    st.none(),
    st.booleans(),
    st.integers(),
    st.text(max_size=20),
    st.dictionaries(st.text(max_size=5), st.integers(), max_size=3),
)


@settings(max_examples=200, deadline=None)
@given(method=http_methods)
def test_method_is_uppercased(method: str) -> None:
    assert normalize_init({"method": method})["method"] == method.upper()


@settings(max_examples=500, deadline=None)
@given(method=st.text(max_size=10))
def test_unknown_method_rejected(method: str) -> None:
    assume(method.upper() not in METHODS)
    try:
        normalize_init({"method": method})
    except InvalidMethodError:
        pass
    else:
        raise AssertionError(f"{method!r} was accepted")


@settings(max_examples=500, deadline=None)
@given(pairs=header_lists)
def test_header_shapes_agree(pairs: list[tuple[str, str]]) -> None:
    from_pairs = normalize_init({"headers": pairs})["headers"]
    from_mapping = normalize_init({"headers": dict(pairs)})["headers"]
    from_collection = normalize_init({"headers": HTTPHeaderDict(pairs)})["headers"]

    assert from_pairs == from_mapping == from_collection
    for name, value in pairs:
        assert from_pairs[name.upper()] == value
        assert from_mapping[name.lower()] == value
        assert from_collection[name] == value


@settings(max_examples=300, deadline=None)
@given(
    method=http_methods,
    form_data=st.none() | st.dictionaries(st.text(max_size=10), field_values, max_size=5),
    json=st.none() | st.dictionaries(st.text(max_size=10), st.integers(), max_size=5),
    body=st.none() | st.binary(max_size=20),
)
def test_idempotent(
    method: str,
    form_data: dict[str, typing.Any] | None,
    json: dict[str, int] | None,
    body: bytes | None,
) -> None:
    once = normalize_init(
        {"method": method, "form_data": form_data, "json": json, "body": body}
    )
    assert normalize_init(once) == once


@settings(max_examples=300, deadline=None)
@given(
    method=http_methods,
    form_data=st.dictionaries(st.text(max_size=10), field_values, max_size=5),
    json=st.dictionaries(st.text(max_size=10), st.integers(), max_size=5),
)
def test_form_data_wins(
    method: str, form_data: dict[str, typing.Any], json: dict[str, int]
) -> None:
    init = normalize_init({"method": method, "form_data": form_data, "json": json})

    assert init["headers"]["content-type"] == "application/x-www-form-urlencoded"
    if method.upper() in BODY_METHODS:
        assert init["body"] == encode(form_data)
    else:
        assert "body" not in init


@settings(max_examples=300, deadline=None)
@given(method=http_methods, body=st.binary(max_size=20))
def test_body_only_on_body_methods(method: str, body: bytes) -> None:
    init = normalize_init({"method": method, "body": body})
    assert ("body" in init) == (method.upper() in BODY_METHODS)


@settings(max_examples=500, deadline=None)
@given(fields=st.dictionaries(st.text(max_size=10), field_values, max_size=10))
def test_encode_round_trip(fields: dict[str, typing.Any]) -> None:
    decoded = URLSearchParams.parse(str(encode(fields)))
    assert decoded.keys() == list(fields)
