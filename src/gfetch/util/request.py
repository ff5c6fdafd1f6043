from __future__ import annotations

import typing
from collections.abc import Mapping

from urllib3 import HTTPHeaderDict

from .._collections import URLSearchParams
from .._types import BODY_METHODS, METHODS, HTTPMethod, NormalizedOptions
from ..exceptions import InvalidHeaderShapeError, InvalidMethodError
from ..filepost import dumps, encode

CONTENT_TYPE_FORM = "application/x-www-form-urlencoded"
CONTENT_TYPE_JSON = "application/json"

_TYPE_HEADER_SHAPE = typing.Literal["collection", "mapping", "pairs"]


def resolve_method(method: str | None) -> str:
    """
    Uppercase and validate a request method. ``None`` means ``GET``.

    :raises InvalidMethodError: for anything outside the nine HTTP verbs.
    """
    if method is None:
        return HTTPMethod.GET.value
    if not isinstance(method, str):
        raise InvalidMethodError(method)

    upper = method.upper()
    if upper not in METHODS:
        raise InvalidMethodError(method)
    return upper


def _is_pair(item: object) -> bool:
    return isinstance(item, (list, tuple)) and len(item) == 2


def header_shape(headers: object) -> _TYPE_HEADER_SHAPE:
    """
    Tells which of the accepted header input shapes ``headers`` is.

    - ``"collection"``: an :class:`urllib3.HTTPHeaderDict`.
    - ``"mapping"``: any other :class:`~collections.abc.Mapping` of names
      to values.
    - ``"pairs"``: a list or tuple whose items are all ``(name, value)``
      lists or tuples. An empty list or tuple counts.

    :raises InvalidHeaderShapeError: for anything else.
    """
    if isinstance(headers, HTTPHeaderDict):
        return "collection"
    if isinstance(headers, Mapping):
        return "mapping"
    if isinstance(headers, (list, tuple)) and all(_is_pair(i) for i in headers):
        return "pairs"
    raise InvalidHeaderShapeError(headers)


def coerce_headers(headers: object) -> HTTPHeaderDict:
    """
    Build a fresh :class:`urllib3.HTTPHeaderDict` from any accepted header
    shape. Duplicate names are last-write-wins. ``None`` gives an empty
    collection.
    """
    if headers is None:
        headers = []

    shape = header_shape(headers)
    if shape == "collection":
        return typing.cast(HTTPHeaderDict, headers).copy()

    result = HTTPHeaderDict()
    if shape == "mapping":
        mapping = typing.cast(typing.Mapping[str, str], headers)
        for name in mapping:
            result[str(name)] = str(mapping[name])
    else:
        for name, value in typing.cast(typing.Sequence[typing.Sequence[str]], headers):
            result[str(name)] = str(value)
    return result


def normalize_init(
    options: typing.Mapping[str, typing.Any] | None = None,
) -> NormalizedOptions:
    """
    Turn a loosely typed options bag into a consistent set of request options.

    Steps run in this order, later ones overriding earlier ones:

    1. ``method`` defaults to ``GET``, is uppercased and validated.
    2. ``reject_unauthorized`` defaults to ``True``.
    3. ``headers`` becomes an :class:`urllib3.HTTPHeaderDict`.
    4. ``form_data`` (preferred) or ``json`` is encoded into ``body`` and the
       matching ``content-type`` header is set.
    5. ``body`` is dropped for any method but PUT, POST, PATCH and DELETE,
       even when it was given explicitly.

    The caller's mapping, headers and form data are left untouched. Keys
    not listed above are passed through as they are.

    .. code-block:: python

        init = normalize_init({"method": "post", "json": {"n": 1}})
        # init["method"] == "POST"
        # init["headers"]["content-type"] == "application/json"
        # init["body"] == '{"n":1}'

    :raises InvalidMethodError:
    :raises InvalidHeaderShapeError:
    :raises SerializationError: when ``form_data`` or ``json`` can't be
        stringified.
    """
    init: dict[str, typing.Any] = dict(options or {})

    init["method"] = resolve_method(init.get("method"))

    if init.get("reject_unauthorized") is None:
        init["reject_unauthorized"] = True
    else:
        init["reject_unauthorized"] = bool(init["reject_unauthorized"])

    headers = coerce_headers(init.get("headers"))
    init["headers"] = headers

    if init.get("form_data") is not None:
        headers["content-type"] = CONTENT_TYPE_FORM

        form_data = init["form_data"]
        if not isinstance(form_data, URLSearchParams):
            form_data = encode(form_data)

        init["form_data"] = form_data
        init["body"] = form_data
    elif init.get("json") is not None:
        headers["content-type"] = CONTENT_TYPE_JSON

        payload = init["json"]
        if not isinstance(payload, str):
            payload = dumps(payload)

        init["json"] = payload
        init["body"] = payload

    if init["method"] not in BODY_METHODS:
        init.pop("body", None)

    return typing.cast(NormalizedOptions, init)
