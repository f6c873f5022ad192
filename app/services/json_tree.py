"""Optional-field navigation over decoded JSON.

Upstream responses arrive in shapes we do not control, so every lookup here
returns ``MISSING`` instead of raising when a key, index or type does not
line up. Callers branch on absence as an ordinary value.
"""
from __future__ import annotations

import json
import math
from decimal import Decimal
from typing import Any


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


# NaN, Infinity and -Infinity are not JSON literals.
_DECODER = json.JSONDecoder(parse_constant=_reject_constant)


class _Missing:
    """Marker for a path that does not exist in the tree."""

    _instance: "_Missing | None" = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


def lookup(node: Any, *path: str | int) -> Any:
    """Follow ``path`` through nested dicts/lists, returning ``MISSING`` on any mismatch.

    String steps index objects, integer steps index arrays. A JSON ``null``
    found at the end of the path is returned as ``None`` so callers can tell
    "present but null" from "absent".

    Example:
        >>> lookup({"choices": [{"text": "hi"}]}, "choices", 0, "text")
        'hi'
        >>> lookup({"choices": []}, "choices", 0, "text")
        MISSING
    """
    current = node
    for step in path:
        if isinstance(step, int):
            if not isinstance(current, list) or not 0 <= step < len(current):
                return MISSING
            current = current[step]
        else:
            if not isinstance(current, dict) or step not in current:
                return MISSING
            current = current[step]
    return current


def is_present(value: Any) -> bool:
    """True when ``value`` is neither ``MISSING`` nor JSON ``null``."""
    return value is not MISSING and value is not None


def text_at(node: Any, *path: str | int) -> str | None:
    """Return the string at ``path``, or ``None`` when absent or not a string."""
    value = lookup(node, *path)
    return value if isinstance(value, str) else None


def as_list(value: Any) -> list[Any]:
    """Return ``value`` if it is a JSON array, otherwise an empty list."""
    return value if isinstance(value, list) else []


def text_value(value: Any) -> str:
    """Render a scalar node the way a JSON tree reports its text value.

    Strings pass through, booleans become ``true``/``false``, numbers keep
    their JSON notation and ``null`` becomes ``"null"``. Containers and
    missing nodes have no text value and render as an empty string.
    """
    if value is MISSING:
        return ""
    if value is None:
        return "null"
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return format_double(value)
    return ""


def format_double(value: float) -> str:
    """Format a float with the shortest round-trip digits in plain/E notation.

    Magnitudes in ``[1e-3, 1e7)`` (and zero) use plain decimals, anything
    else uses ``<d>.<digits>E<exp>``, e.g. ``1.0E-5`` and ``1.5E20``.
    Exponents that overflow decode to infinity and render as ``Infinity``.

    Example:
        >>> format_double(12.5)
        '12.5'
        >>> format_double(1e8)
        '1.0E8'
    """
    if not math.isfinite(value):
        return json.dumps(value)
    magnitude = abs(value)
    if magnitude == 0.0 or 1e-3 <= magnitude < 1e7:
        return repr(value)

    digits, exponent = Decimal(repr(magnitude)).as_tuple()[1:]
    scientific_exponent = len(digits) - 1 + exponent
    significant = "".join(str(d) for d in digits).rstrip("0") or "0"
    mantissa = f"{significant[0]}.{significant[1:] or '0'}"
    sign = "-" if value < 0 else ""
    return f"{sign}{mantissa}E{scientific_exponent}"


def decode_first_value(text: str) -> Any:
    """Decode the first JSON value in ``text``, ignoring anything after it.

    Leading whitespace is skipped. Returns ``MISSING`` when no value can be
    decoded.
    """
    stripped = text.lstrip()
    if not stripped:
        return MISSING
    try:
        value, _end = _DECODER.raw_decode(stripped)
    except (ValueError, RecursionError):
        return MISSING
    return value
