"""Query string encoding for Bing Maps requests.

Parameters are plain mappings built fresh for every call. Values may be
strings, numbers, enums or flat sequences of those; ``None`` marks an absent
optional field and is dropped from the output.
"""

from __future__ import annotations

import math
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Mapping, Sequence
from urllib.parse import urlencode

from .errors import BingMapsError

LIST_SEPARATOR = ","


def format_number(value: float) -> str:
    """Render a number in plain decimal notation.

    Uses the shortest representation that round-trips, never exponent
    notation and never locale-specific separators (``1e-05`` -> ``0.00001``).
    """
    if isinstance(value, bool):
        raise TypeError("booleans are not numbers in query parameters")
    if isinstance(value, int):
        return str(value)
    if not math.isfinite(value):
        raise ValueError(f"cannot encode non-finite number {value!r}")
    return format(Decimal(repr(float(value))), "f")


def _encode_scalar(value: Any) -> str:
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (int, float)):
        return format_number(value)
    raise TypeError(f"cannot encode {type(value).__name__} as a query value")


def encode_value(value: Any) -> str:
    """Encode one structured value into its query-string text.

    Sequences are flattened to comma-joined text after encoding each element.

    Raises:
        BingMapsError: ``CONVERSION`` when the value has no flat textual form
            (mappings, nested sequences, arbitrary objects, NaN/infinity).
    """
    try:
        if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
            return LIST_SEPARATOR.join(_encode_scalar(item) for item in value)
        return _encode_scalar(value)
    except (TypeError, ValueError) as exc:
        raise BingMapsError.conversion(exc) from exc


def prepare_params(params: Mapping[str, Any]) -> Dict[str, str]:
    """Drop absent fields and encode the remaining values, keeping key order."""
    return {key: encode_value(value) for key, value in params.items() if value is not None}


def encode_params(params: Mapping[str, Any]) -> str:
    """Serialize parameters into an ``application/x-www-form-urlencoded`` query."""
    return urlencode(prepare_params(params))


__all__ = [
    "LIST_SEPARATOR",
    "format_number",
    "encode_value",
    "prepare_params",
    "encode_params",
]
