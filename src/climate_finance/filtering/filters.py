"""Predicate filtering of records against named criteria.

A record passes when it satisfies every criterion. Sentinels:
- "All" (or an empty selection) imposes no constraint
- "N/A" matches records where the attribute is absent or empty

Fields a record does not carry at all are treated as not applicable and
pass, so a filter never excludes records of a different shape.
"""

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from climate_finance.filtering.models import (
    ALL,
    NOT_APPLICABLE,
    RELATIONAL_KEYS,
    FilterValue,
    Record,
)
from climate_finance.filtering.paths import (
    MISSING,
    is_blank,
    is_number,
    is_sequence,
    looks_numeric,
    resolve_filter_value,
    to_text,
)

logger = logging.getLogger(__name__)


def is_neutral(value: FilterValue) -> bool:
    """Check if a criterion value matches everything."""
    if value is None:
        return True
    if is_sequence(value):
        return len(value) == 0 or ALL in value
    return not value or value == ALL


def split_sentinel(values: Iterable[Any]) -> tuple[bool, list[Any]]:
    """Split requested values into (N/A requested, real values)."""
    wants_na = False
    real: list[Any] = []
    for v in values:
        if v == NOT_APPLICABLE:
            wants_na = True
        else:
            real.append(v)
    return wants_na, real


def _text_or_none(value: Any) -> str | None:
    try:
        return to_text(value)
    except TypeError:
        return None


def values_equal(item: Any, wanted: Any) -> bool:
    """
    Compare a scalar field value with a requested filter value.

    - two strings compare case-insensitively
    - a number matches a numeric-looking string by its text form
    - anything else needs strict equality (True is not 1)
    """
    if isinstance(item, str) and isinstance(wanted, str):
        return item.lower() == wanted.lower()
    if is_number(item) and isinstance(wanted, str) and looks_numeric(wanted):
        return to_text(item) == wanted
    if isinstance(item, bool) or isinstance(wanted, bool):
        return type(item) is type(wanted) and item == wanted
    if isinstance(item, str) != isinstance(wanted, str):
        return False
    return item == wanted


def _text_matches(element: Any, wanted: Any) -> bool:
    """Case-insensitive text comparison used for array elements."""
    if element is None:
        return False
    element_text = _text_or_none(element)
    wanted_text = _text_or_none(wanted)
    if element_text is None or wanted_text is None:
        return False
    return element_text.lower() == wanted_text.lower()


def _has_entity_id(entities: Any, wanted: Iterable[Any]) -> bool:
    """Check if an array of objects holds an element whose id is requested."""
    wanted_text = {_text_or_none(w) for w in wanted}
    for el in entities:
        if isinstance(el, Mapping) and el.get("id") is not None:
            if _text_or_none(el["id"]) in wanted_text:
                return True
    return False


def _match_relational(record: Record, array_field: str | None, value: FilterValue) -> bool:
    """Match a criterion whose ids live in an array of objects."""
    entities = record.get(array_field) if array_field else None
    is_empty = not isinstance(entities, list) or len(entities) == 0

    if is_sequence(value):
        wants_na, real = split_sentinel(value)
        if wants_na and is_empty:
            return True
        if real and not is_empty:
            return _has_entity_id(entities, real)
        return False

    if value == NOT_APPLICABLE:
        return is_empty
    if is_empty:
        return False
    return _has_entity_id(entities, [value])


def _match_array(items: Sequence[Any], value: FilterValue) -> bool:
    """Match a criterion against an array-valued field."""
    if is_sequence(value):
        wants_na, real = split_sentinel(value)
        if wants_na and len(items) == 0:
            return True
        return any(_text_matches(el, w) for el in items for w in real)

    if value == NOT_APPLICABLE:
        return len(items) == 0
    if value == ALL:
        return True
    return any(_text_matches(el, value) for el in items)


def _match_scalar(item: Any, value: FilterValue) -> bool:
    """Match a criterion against a scalar field."""
    if is_sequence(value):
        wants_na, real = split_sentinel(value)
        if wants_na and is_blank(item):
            return True
        return any(values_equal(item, w) for w in real)

    if value == NOT_APPLICABLE:
        return is_blank(item)
    return values_equal(item, value)


def matches_criterion(
    record: Record,
    key: str,
    value: FilterValue,
    relational_keys: Mapping[str, str] = RELATIONAL_KEYS,
) -> bool:
    """
    Evaluate one criterion against a record.

    Args:
        record: The record to test
        key: Field key (dotted paths allowed)
        value: Criterion value (None, "All", a literal or a list of literals)
        relational_keys: Mapping of filter key to the array field holding ids

    Returns:
        True if the record satisfies the criterion
    """
    if is_neutral(value):
        return True

    if key in relational_keys:
        return _match_relational(record, relational_keys.get(key), value)

    item = resolve_filter_value(record, key)
    if item is MISSING:
        # Field absent everywhere: not applicable to this record
        return True

    if isinstance(item, (list, tuple)):
        return _match_array(item, value)
    return _match_scalar(item, value)


def apply_filters(
    records: Sequence[Record],
    criteria: Mapping[str, FilterValue],
    relational_keys: Mapping[str, str] = RELATIONAL_KEYS,
) -> list[Record]:
    """Keep the records that satisfy every criterion, in input order.

    Args:
        records: Records to filter (never mutated)
        criteria: Filter key to criterion value; empty passes everything
        relational_keys: Mapping of filter key to the array field holding ids

    Returns:
        New list with the passing records
    """
    active = {k: v for k, v in criteria.items() if not is_neutral(v)}
    if not active:
        return list(records)

    result = [
        record
        for record in records
        if all(
            matches_criterion(record, key, value, relational_keys)
            for key, value in active.items()
        )
    ]
    logger.debug(
        "Filters %s kept %d of %d records", sorted(active), len(result), len(records)
    )
    return result
