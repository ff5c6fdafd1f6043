from __future__ import annotations

import json
import math
import typing

from ._collections import URLSearchParams
from .exceptions import SerializationError

_TYPE_FIELDS = typing.Mapping[str, typing.Any]

#: Floats from this magnitude on print in exponent form, never as integers.
_EXPONENT_THRESHOLD = 1e21


def _integral(value: float) -> bool:
    return value.is_integer() and abs(value) < _EXPONENT_THRESHOLD


def _as_json_value(value: typing.Any, seen: set[int]) -> typing.Any:
    # Integral floats become ints and non-finite floats become None, the way
    # JSON.stringify prints them.
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        return int(value) if _integral(value) else value
    if isinstance(value, (dict, list, tuple)):
        if id(value) in seen:
            raise ValueError("Circular reference detected")
        seen.add(id(value))
        try:
            if isinstance(value, dict):
                return {k: _as_json_value(v, seen) for k, v in value.items()}
            return [_as_json_value(v, seen) for v in value]
        finally:
            seen.discard(id(value))
    return value


def dumps(value: typing.Any) -> str:
    """Compact JSON text, matching what a browser's ``JSON.stringify`` emits.

    Floats follow JavaScript number printing: ``1.0`` is written as ``1``
    and ``NaN`` or infinities as ``null``. Other floats keep Python's
    shortest repr, so ``1e-07`` is not rewritten as ``1e-7``.

    Raises :class:`~gfetch.exceptions.SerializationError` when ``value``
    cannot be serialized.
    """
    try:
        return json.dumps(_as_json_value(value, set()), separators=(",", ":"))
    except (TypeError, ValueError) as e:
        raise SerializationError(f"Unable to serialize {type(value).__name__} as JSON: {e}") from e


def _format_number(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if _integral(value):
        return str(int(value))
    return repr(value)


def format_field_value(value: typing.Any) -> str:
    """
    Stringify a single form field value.

    ``None`` becomes an empty string, dicts, lists and tuples become their
    JSON text and booleans are lowercased. Floats print as JavaScript
    numbers do (``1.0`` as ``1``, ``inf`` as ``Infinity``). Everything else
    goes through :func:`str`.
    """
    if value is None:
        return ""
    if isinstance(value, (dict, list, tuple)):
        return dumps(value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return _format_number(value)
    return str(value)


def encode(fields: _TYPE_FIELDS) -> URLSearchParams:
    """
    Encode a flat mapping of ``fields`` into a :class:`~gfetch.URLSearchParams`.

    Only the top-level structure is handled: nested values are sent as JSON
    text and every other value is stringified by :func:`format_field_value`.
    Keys keep the mapping's iteration order.

    .. code-block:: python

        str(encode({"a": 1, "b": "x", "c": {"d": True}}))
        # 'a=1&b=x&c=%7B%22d%22%3Atrue%7D'

    :param fields:
        Mapping of field names to values.
    """
    params = URLSearchParams()

    for name in fields:
        params.set(str(name), format_field_value(fields[name]))

    return params


to_url_search_params = encode
