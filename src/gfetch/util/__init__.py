from __future__ import annotations

from .request import coerce_headers, header_shape, normalize_init, resolve_method
from .timeout import AbortController, AbortSignal, abort_after

__all__ = (
    "AbortController",
    "AbortSignal",
    "abort_after",
    "coerce_headers",
    "header_shape",
    "normalize_init",
    "resolve_method",
)
