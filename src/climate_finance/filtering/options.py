"""Building filter option lists from record collections."""

from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any

from climate_finance.filtering.models import (
    ALL,
    NOT_APPLICABLE,
    FilterDefinition,
    FilterOption,
    Record,
    YearRange,
)
from climate_finance.filtering.paths import is_sequence
from climate_finance.filtering.pipeline import record_year


def unique_values(records: Iterable[Record], key: str) -> list[Any]:
    """Distinct truthy values of a field, list fields flattened, sorted."""
    seen: set[Any] = set()
    for record in records:
        raw = record.get(key)
        values = raw if is_sequence(raw) else [raw]
        for v in values:
            if v and not isinstance(v, (dict, list)):
                seen.add(v)
    return sorted(seen, key=lambda v: (not isinstance(v, str), str(v)))


def has_missing(records: Iterable[Record], key: str) -> bool:
    """Check if some record lacks a value for the field (None, "" or [])."""
    return any(not record.get(key) for record in records)


def build_filter(
    key: str,
    label: str,
    values: Iterable[Any],
    all_label: str,
    include_na: bool = False,
    label_fn: Callable[[Any], str] | None = None,
) -> FilterDefinition:
    """
    Build a filter definition.

    The "All" option comes first, then one option per value, then "N/A"
    when requested.
    """
    options = [FilterOption(value=ALL, label=all_label)]
    for value in values:
        text = label_fn(value) if label_fn else str(value)
        options.append(FilterOption(value=value, label=text))
    if include_na:
        options.append(FilterOption(value=NOT_APPLICABLE, label=NOT_APPLICABLE))
    return FilterDefinition(key=key, label=label, options=tuple(options))


def entity_filter(
    key: str,
    label: str,
    entities: Iterable[Mapping[str, Any]],
    all_label: str,
    id_field: str = "id",
    include_na: bool = False,
) -> FilterDefinition:
    """Build a filter whose options are related entities (value=id, label=name)."""
    options = [FilterOption(value=ALL, label=all_label)]
    for entity in entities:
        if entity.get(id_field) is None:
            continue
        options.append(
            FilterOption(value=entity[id_field], label=str(entity.get("name") or entity[id_field]))
        )
    if include_na:
        options.append(FilterOption(value=NOT_APPLICABLE, label=NOT_APPLICABLE))
    return FilterDefinition(key=key, label=label, options=tuple(options))


def year_bounds(records: Iterable[Record], field: str = "beginning") -> YearRange:
    """Earliest and latest start year across records."""
    years = [y for y in (record_year(r, field) for r in records) if y]
    if not years:
        return YearRange()
    return YearRange(min_year=min(years), max_year=max(years))


def districts_for_divisions(
    districts_by_division: Mapping[str, Sequence[str]],
    selected: Sequence[Any] | None,
    fallback: Sequence[str] = (),
) -> list[str]:
    """
    District options narrowed to the selected divisions.

    Without division data the fallback (districts seen on records) is used.
    With no division selected every known district is offered.
    """
    if not districts_by_division:
        return sorted(set(fallback))

    selected = list(selected or [])
    if selected and ALL not in selected:
        narrowed: set[str] = set()
        for division in selected:
            narrowed.update(districts_by_division.get(division) or [])
        if narrowed:
            return sorted(narrowed)
        return sorted(set(fallback))

    return sorted({d for districts in districts_by_division.values() for d in districts})


def capitalize_first(value: Any) -> str:
    text = str(value)
    return text[:1].upper() + text[1:]
