from __future__ import annotations

import typing

import pytest

from gfetch import URLSearchParams, encode, to_url_search_params
from gfetch.exceptions import SerializationError
from gfetch.filepost import dumps, format_field_value


class TestFormatFieldValue:
    @pytest.mark.parametrize(
        "value, expected",
        [
            (None, ""),
            ("x", "x"),
            ("", ""),
            (1, "1"),
            (3.9, "3.9"),
            (1.0, "1"),
            (-0.0, "0"),
            (1e21, "1e+21"),
            (float("nan"), "NaN"),
            (float("inf"), "Infinity"),
            (float("-inf"), "-Infinity"),
            ([1.0, 2.5], "[1,2.5]"),
            (True, "true"),
            (False, "false"),
            ({"d": True}, '{"d":true}'),
            ([1, "a", None], '[1,"a",null]'),
            ((1, 2), "[1,2]"),
            ({}, "{}"),
        ],
    )
    def test_stringify(self, value: typing.Any, expected: str) -> None:
        assert format_field_value(value) == expected


class TestEncode:
    def test_encode(self) -> None:
        params = encode({"a": 1, "b": "x", "c": {"d": True}})

        assert isinstance(params, URLSearchParams)
        assert params.items() == [("a", "1"), ("b", "x"), ("c", '{"d":true}')]
        assert str(params) == "a=1&b=x&c=%7B%22d%22%3Atrue%7D"

    def test_decodes_back(self) -> None:
        params = URLSearchParams.parse(str(encode({"a": 1, "b": "x", "c": {"d": True}})))

        assert params.get("a") == "1"
        assert params.get("b") == "x"
        assert params.get("c") == '{"d":true}'

    def test_keeps_mapping_order(self) -> None:
        fields = {"z": 1, "a": 2, "m": 3}
        assert encode(fields).keys() == ["z", "a", "m"]

    def test_none_is_empty(self) -> None:
        assert str(encode({"a": None})) == "a="

    def test_keys_are_stringified(self) -> None:
        assert encode({1: "x"}).items() == [("1", "x")]  # type: ignore[dict-item]

    def test_empty(self) -> None:
        assert len(encode({})) == 0

    def test_does_not_touch_input(self) -> None:
        fields = {"a": {"b": [1]}}
        encode(fields)
        assert fields == {"a": {"b": [1]}}

    def test_circular_value(self) -> None:
        circular: dict[str, typing.Any] = {}
        circular["self"] = circular

        with pytest.raises(SerializationError) as e:
            encode({"a": circular})
        assert isinstance(e.value.__cause__, ValueError)

    def test_unserializable_value(self) -> None:
        with pytest.raises(SerializationError) as e:
            encode({"a": [object()]})
        assert isinstance(e.value.__cause__, TypeError)

    def test_alias(self) -> None:
        assert to_url_search_params is encode


class TestDumps:
    def test_compact(self) -> None:
        assert dumps({"n": 1, "l": [1, 2]}) == '{"n":1,"l":[1,2]}'

    def test_serialization_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            dumps({1, 2})

    def test_integral_floats(self) -> None:
        assert dumps({"n": 1.0, "l": [2.0, 0.5]}) == '{"n":1,"l":[2,0.5]}'

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_floats_are_null(self, value: float) -> None:
        assert dumps([value]) == "[null]"
        assert dumps(value) == "null"

    def test_shared_value_is_not_circular(self) -> None:
        shared = [1]
        assert dumps({"a": shared, "b": shared}) == '{"a":[1],"b":[1]}'

    def test_circular_value(self) -> None:
        circular: list[typing.Any] = []
        circular.append(circular)

        with pytest.raises(SerializationError, match="Circular reference"):
            dumps(circular)


class TestEncodeNumbers:
    def test_float_field(self) -> None:
        assert str(encode({"a": 1.0, "b": 0.5, "c": {"d": 2.0}})) == "a=1&b=0.5&c=%7B%22d%22%3A2%7D"
