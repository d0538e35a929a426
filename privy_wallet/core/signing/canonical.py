"""
JSON Canonicalization

Deterministic JSON serialization (RFC 8785 / JCS) of request payloads.
Two logically equal values always produce byte-identical output, which is
what makes the request signatures reproducible on the server side.

Rules:
    - object members sorted by key (UTF-16 code units), no whitespace
    - strings with minimal escaping, UTF-8 encoded
    - integers as exact decimal digits
    - floats formatted like ECMAScript Number.prototype.toString()
"""

import json
import math
from typing import Any, List, Mapping

from privy_wallet.errors import EncodingError


def canonicalize(value: Any) -> bytes:
    """
    Serialize a JSON-representable value to canonical UTF-8 bytes.

    Args:
        value: None, bool, int, float, str, list/tuple or a mapping with str keys

    Returns:
        Canonical JSON bytes

    Raises:
        EncodingError: If the value contains something JSON cannot represent

    Example:
        >>> canonicalize({"b": 1, "a": [True, None, 1.0]})
        b'{"a":[true,null,1],"b":1}'
    """
    parts: List[str] = []
    _serialize(value, parts)
    try:
        return "".join(parts).encode("utf-8")
    except UnicodeEncodeError as e:
        raise EncodingError(f"String is not valid Unicode: {e}") from e


def canonicalize_str(value: Any) -> str:
    """Canonical JSON as text."""
    return canonicalize(value).decode("utf-8")


def _serialize(value: Any, parts: List[str]) -> None:
    # bool before int: bool is an int subclass
    if value is None:
        parts.append("null")
    elif value is True:
        parts.append("true")
    elif value is False:
        parts.append("false")
    elif isinstance(value, int):
        parts.append(str(int(value)))
    elif isinstance(value, float):
        parts.append(format_number(value))
    elif isinstance(value, str):
        parts.append(json.dumps(value, ensure_ascii=False))
    elif isinstance(value, Mapping):
        _serialize_object(value, parts)
    elif isinstance(value, (list, tuple)):
        parts.append("[")
        for i, item in enumerate(value):
            if i:
                parts.append(",")
            _serialize(item, parts)
        parts.append("]")
    else:
        raise EncodingError(
            f"Cannot canonicalize value of type {type(value).__name__}"
        )


def _serialize_object(obj: Mapping, parts: List[str]) -> None:
    for key in obj:
        if not isinstance(key, str):
            raise EncodingError(
                f"Object keys must be strings, got {type(key).__name__}: {key!r}"
            )

    parts.append("{")
    for i, key in enumerate(sorted(obj, key=_utf16_sort_key)):
        if i:
            parts.append(",")
        parts.append(json.dumps(key, ensure_ascii=False))
        parts.append(":")
        _serialize(obj[key], parts)
    parts.append("}")


def _utf16_sort_key(key: str) -> bytes:
    return key.encode("utf-16-be", "surrogatepass")


def format_number(value: float) -> str:
    """
    Format a float the way ECMAScript does.

    Integral values drop the fractional part (1.0 -> "1"), exponent
    notation is used below 1e-6 and from 1e21 upwards.

    Raises:
        EncodingError: For NaN and infinities
    """
    if math.isnan(value) or math.isinf(value):
        raise EncodingError(f"Cannot canonicalize non-finite number: {value!r}")
    if value == 0:
        return "0"

    sign = "-" if value < 0 else ""
    digits, point = _shortest_digits(abs(value))
    k = len(digits)

    if k <= point <= 21:
        return sign + digits + "0" * (point - k)
    if 0 < point <= 21:
        return sign + digits[:point] + "." + digits[point:]
    if -6 < point <= 0:
        return sign + "0." + "0" * (-point) + digits

    exponent = point - 1
    mantissa = digits[0] + ("." + digits[1:] if k > 1 else "")
    return f"{sign}{mantissa}e{'+' if exponent > 0 else '-'}{abs(exponent)}"


def _shortest_digits(value: float):
    """
    Return (digits, point) such that value == 0.<digits> * 10**point.

    repr() already yields the shortest round-tripping decimal.
    """
    text = repr(value)
    exponent = 0
    if "e" in text:
        text, exp_text = text.split("e")
        exponent = int(exp_text)

    if "." in text:
        int_part, frac_part = text.split(".")
    else:
        int_part, frac_part = text, ""

    digits = int_part + frac_part
    point = len(int_part) + exponent

    stripped = digits.lstrip("0")
    point -= len(digits) - len(stripped)
    digits = stripped.rstrip("0")
    return digits, point
