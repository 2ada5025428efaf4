"""
JSON encoding for the meta and body fields of path documents.

Both fields are stored as JSON text so documents written by other clients
(which use the standard compact JSON encoders) and by this layer stay
interchangeable.
"""

import json
from typing import Any


def encode_field(value: Any) -> str:
    """
    Encode a structured value as compact JSON text.

    Args:
        value: JSON-compatible value (dict, list, str, number, bool, None)

    Returns:
        JSON text without insignificant whitespace

    Raises:
        TypeError: If the value contains non-JSON types (sets, datetimes, ...)
        ValueError: If the value contains NaN/Infinity or circular references

    Example:
        >>> encode_field({"title": "Home"})
        '{"title":"Home"}'
    """
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, allow_nan=False)


def decode_body(raw: Any) -> Any:
    """
    Decode a stored body field.

    A missing or empty body is not an error and decodes to an empty dict.
    A non-empty body must be valid JSON.

    Raises:
        ValueError: If the stored text is not valid JSON
        TypeError: If the stored value is not text
    """
    if not raw:
        return {}
    return json.loads(raw)
