"""
Filtering module for climate-finance-search.

This module holds the search and filter engines: weighted free-text scoring
and predicate filtering over in-memory records. Both are pure functions;
records are never mutated and every call returns a new list.
"""

from climate_finance.filtering.configs import build_project_config, get_config
from climate_finance.filtering.filters import apply_filters, matches_criterion
from climate_finance.filtering.models import (
    ALL,
    NOT_APPLICABLE,
    RELATIONAL_KEYS,
    FilterDefinition,
    FilterOption,
    Page,
    PipelineResult,
    ScoredRecord,
    SearchConfig,
    SearchField,
    SearchState,
    YearRange,
)
from climate_finance.filtering.pagination import paginate
from climate_finance.filtering.pipeline import run_pipeline
from climate_finance.filtering.search import score_records, search
from climate_finance.filtering.selection import toggle_option, visible_options

__all__ = [
    "ALL",
    "NOT_APPLICABLE",
    "RELATIONAL_KEYS",
    "FilterDefinition",
    "FilterOption",
    "Page",
    "PipelineResult",
    "ScoredRecord",
    "SearchConfig",
    "SearchField",
    "SearchState",
    "YearRange",
    "apply_filters",
    "build_project_config",
    "get_config",
    "matches_criterion",
    "paginate",
    "run_pipeline",
    "score_records",
    "search",
    "toggle_option",
    "visible_options",
]
