"""Weighted free-text search over in-memory records."""

import logging
from collections.abc import Sequence

from climate_finance.filtering.models import Record, ScoredRecord, SearchConfig
from climate_finance.filtering.paths import resolve_path, to_search_text

logger = logging.getLogger(__name__)

# Multiplier applied when a field contains the whole query
WHOLE_QUERY_MULTIPLIER = 2


def split_terms(query: str) -> list[str]:
    """Lower-case a query and split it into non-empty terms (duplicates kept)."""
    return query.lower().split()


def score_record(record: Record, query: str, config: SearchConfig) -> ScoredRecord:
    """
    Score a single record against a query.

    For every configured field whose value is present:
    - the whole lower-cased query as a substring adds weight * 2
    - each query term found as a substring adds weight

    Both rules apply to the same field, so scores are cumulative.
    """
    whole_query = query.lower()
    terms = split_terms(query)
    scored = ScoredRecord(record=record)

    for search_field in config.search_fields:
        text = to_search_text(resolve_path(record, search_field.key))
        if text is None:
            continue

        if whole_query in text:
            scored.score += search_field.weight * WHOLE_QUERY_MULTIPLIER
            scored.match_count += 1

        for term in terms:
            if term in text:
                scored.score += search_field.weight
                scored.match_count += 1

    return scored


def score_records(
    records: Sequence[Record],
    query: str,
    config: SearchConfig,
) -> list[ScoredRecord]:
    """
    Score, filter and rank records.

    Returns only records with a positive score, best first. Equal scores
    keep their input order.
    """
    scored = [score_record(record, query, config) for record in records]
    matches = [s for s in scored if s.score > 0]
    # sorted() is stable, which keeps ties in input order
    return sorted(matches, key=lambda s: s.score, reverse=True)


def search(
    records: Sequence[Record],
    query: str,
    config: SearchConfig,
) -> list[Record]:
    """Search records with weighted scoring.

    Args:
        records: Records to search (never mutated)
        query: Free-text query; blank queries return the records unchanged
        config: Search configuration with the weighted fields

    Returns:
        Matching records ranked by score, without any score fields attached
    """
    if not query.strip():
        return list(records)

    ranked = score_records(records, query, config)
    logger.debug("Search %r matched %d of %d records", query, len(ranked), len(records))
    return [s.record for s in ranked]


def search_tips(config: SearchConfig, shown: int = 3) -> str:
    """Describe which fields a query is matched against."""
    labels = [f.label or f.key for f in config.search_fields]
    text = "Searching in: " + ", ".join(labels[:shown])
    if len(labels) > shown:
        text += f" and {len(labels) - shown} more fields"
    return text
