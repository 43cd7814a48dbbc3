"""Pure pipeline composing filters, search, year range and pagination.

Every run recomputes from the full record collection; the hosting layer
calls run_pipeline() whenever records, query or criteria change.
"""

import logging
import re
from collections.abc import Mapping, Sequence

from climate_finance.filtering.filters import apply_filters, is_neutral
from climate_finance.filtering.models import (
    FilterValue,
    PipelineResult,
    Record,
    SearchConfig,
    SearchState,
)
from climate_finance.filtering.pagination import paginate
from climate_finance.filtering.search import search

logger = logging.getLogger(__name__)

# Open bounds used when only one side of the year range is set
MIN_YEAR_FALLBACK = 0
MAX_YEAR_FALLBACK = 9999

# Leading integer within the first four characters, e.g. "2019-07-01" or "999-01"
YEAR_PATTERN = re.compile(r"^\s*([+-]?[0-9]+)")


def record_year(record: Record, field: str = "beginning") -> int | None:
    """Get the year from the first four characters of a date field."""
    raw = record.get(field)
    if not isinstance(raw, str):
        return None
    match = YEAR_PATTERN.match(raw[:4])
    return int(match.group(1)) if match else None


def filter_by_year_range(
    records: Sequence[Record],
    min_year: int | None,
    max_year: int | None,
    field: str = "beginning",
) -> list[Record]:
    """
    Keep records whose start year lies within [min_year, max_year].

    Records without a parseable date are kept.
    """
    if not min_year and not max_year:
        return list(records)

    low = min_year or MIN_YEAR_FALLBACK
    high = max_year or MAX_YEAR_FALLBACK
    result = []
    for record in records:
        year = record_year(record, field)
        if year is None or low <= year <= high:
            result.append(record)
    return result


def has_active_filters(query: str, criteria: Mapping[str, FilterValue]) -> bool:
    """Check if a query or any constraining criterion is set."""
    if query.strip():
        return True
    return any(not is_neutral(v) for v in criteria.values())


def clear_criteria(criteria: Mapping[str, FilterValue]) -> dict[str, list]:
    """Reset every criterion to an empty selection."""
    return {key: [] for key in criteria}


def _same_records(a: Sequence[Record], b: Sequence[Record]) -> bool:
    return len(a) == len(b) and all(x is y for x, y in zip(a, b))


def run_pipeline(
    records: Sequence[Record],
    state: SearchState,
    config: SearchConfig,
    previous: Sequence[Record] | None = None,
) -> PipelineResult:
    """Run filters, search and the year range, then paginate.

    Args:
        records: Full record collection (never mutated)
        state: Query, criteria, year range and page cursor
        config: Search configuration for the entity type
        previous: Result of the previous run; when the new result differs
            the page cursor goes back to 1

    Returns:
        PipelineResult with the full result and the requested page
    """
    result = list(records)
    if state.criteria:
        result = apply_filters(result, state.criteria, config.relational_keys)
    if state.query:
        result = search(result, state.query, config)
    result = filter_by_year_range(
        result, state.year_range.min_year, state.year_range.max_year
    )

    page_number = state.page
    page_reset = False
    if previous is not None and not _same_records(previous, result) and page_number != 1:
        page_number = 1
        page_reset = True

    page = paginate(result, page_number, state.per_page)
    logger.debug(
        "Pipeline: %d of %d records, page %d/%d",
        len(result),
        len(records),
        page.page,
        page.total_pages,
    )
    return PipelineResult(records=result, page=page, page_reset=page_reset)
