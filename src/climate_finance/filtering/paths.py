"""Field resolution and value normalization for records.

Records are plain mappings coming straight from the JSON API, so every
helper here tolerates missing keys, None values and heterogeneous types.
"""

import math
from collections.abc import Mapping
from typing import Any

from climate_finance.filtering.models import Record


class _Missing:
    """Sentinel for a field that could not be resolved."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


def is_sequence(value: Any) -> bool:
    """Check if a value is a list-like collection (strings excluded)."""
    return isinstance(value, (list, tuple, set, frozenset))


def resolve_path(record: Record, path: str) -> Any:
    """
    Resolve a dotted path on a record.

    "a.b" resolves to record["a"]["b"]. Digit segments index into lists.
    Any None or absent segment makes the whole value MISSING, as does a
    final value of None.
    """
    current: Any = record
    for segment in path.split("."):
        if current is None or current is MISSING:
            return MISSING
        if isinstance(current, Mapping):
            current = current.get(segment, MISSING)
        elif isinstance(current, (list, tuple)) and segment.isdecimal() and segment.isascii():
            index = int(segment)
            current = current[index] if index < len(current) else MISSING
        else:
            return MISSING
    if current is None:
        return MISSING
    return current


def find_nested_value(record: Record, key: str) -> Any:
    """
    Look for key inside the record's nested arrays and objects.

    Properties are scanned in order; the first hit wins:
    - a non-empty list where some element is a mapping containing key
      yields the non-None values of key across its elements
    - a mapping containing key yields that value

    Returns MISSING when nothing carries the key.
    """
    for value in record.values():
        if isinstance(value, list) and value:
            if any(isinstance(el, Mapping) and key in el for el in value):
                return [
                    el[key]
                    for el in value
                    if isinstance(el, Mapping) and el.get(key) is not None
                ]
        elif isinstance(value, Mapping) and key in value:
            found = value[key]
            return MISSING if found is None else found
    return MISSING


def resolve_filter_value(record: Record, key: str) -> Any:
    """Resolve a filter key directly, falling back to the nested scan."""
    value = resolve_path(record, key)
    if value is MISSING:
        value = find_nested_value(record, key)
    return value


def to_text(value: Any) -> str:
    """
    Convert a value to its display string.

    Raises:
        TypeError: If the value is a mapping (no meaningful text form)
    """
    if value is None or value is MISSING:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, Mapping):
        raise TypeError("Cannot convert a mapping to text")
    if is_sequence(value):
        return ",".join(to_text(v) for v in value)
    return str(value)


def to_search_text(value: Any) -> str | None:
    """
    Get the lower-cased text used for substring scoring.

    Returns None for falsy values (None, "", 0, False, empty lists) and for
    values that cannot be converted to text.
    """
    if value is MISSING or not value:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    try:
        return to_text(value).lower()
    except (TypeError, ValueError):
        return None


def is_blank(value: Any) -> bool:
    """Check if a scalar counts as absent (None, MISSING or empty string)."""
    return value is None or value is MISSING or value == ""


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def looks_numeric(text: str) -> bool:
    """Check if a string coerces to a number (blank strings coerce to 0)."""
    stripped = text.strip()
    if not stripped:
        return True
    try:
        number = float(stripped)
    except ValueError:
        return False
    return not math.isnan(number)
