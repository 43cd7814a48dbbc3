"""Data models for the search and filter engines."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

# Value shapes a record field can hold
ScalarValue = str | int | float | bool | None
FieldValue = ScalarValue | Sequence[ScalarValue] | Sequence[Mapping[str, Any]]
Record = Mapping[str, Any]

# A criterion value: None, "All", a single literal, or a list of literals
FilterValue = ScalarValue | Sequence[str | int | float]

ALL = "All"
NOT_APPLICABLE = "N/A"

# Filter keys whose ids live inside an array of objects on the record
RELATIONAL_KEYS: Mapping[str, str] = MappingProxyType(
    {
        "implementing_entity_id": "implementing_entities",
        "executing_agency_id": "executing_agencies",
        "delivery_partner_id": "delivery_partners",
    }
)


@dataclass(frozen=True)
class SearchField:
    """A field eligible for free-text scoring."""

    key: str  # Dotted path, e.g. "funding.name"
    weight: float = 1.0
    label: str = ""


@dataclass(frozen=True)
class FilterOption:
    """One selectable value of a filter."""

    value: str | int | float
    label: str


@dataclass(frozen=True)
class FilterDefinition:
    """A named filter with its enumerated options."""

    key: str
    label: str
    options: tuple[FilterOption, ...] = ()


@dataclass(frozen=True)
class YearRange:
    """Inclusive year bounds; None means unbounded on that side."""

    min_year: int | None = None
    max_year: int | None = None

    @property
    def is_set(self) -> bool:
        return bool(self.min_year) or bool(self.max_year)


@dataclass(frozen=True)
class SearchConfig:
    """Search configuration for one entity type.

    Immutable for the duration of a search session.
    """

    search_fields: tuple[SearchField, ...] = ()
    filters: tuple[FilterDefinition, ...] = ()
    year_range: YearRange | None = None
    relational_keys: Mapping[str, str] = field(
        default_factory=lambda: RELATIONAL_KEYS, hash=False
    )

    @property
    def filter_keys(self) -> list[str]:
        return [f.key for f in self.filters]

    def get_filter(self, key: str) -> FilterDefinition | None:
        """Get a filter definition by key."""
        for definition in self.filters:
            if definition.key == key:
                return definition
        return None


@dataclass
class ScoredRecord:
    """A record with its transient ranking information."""

    record: Record
    score: float = 0.0
    match_count: int = 0


@dataclass
class Page:
    """One page of a result sequence."""

    items: list[Record]
    page: int
    per_page: int
    total_items: int
    total_pages: int
    start_item: int
    end_item: int


@dataclass(frozen=True)
class SearchState:
    """Caller-owned state driving one pipeline run."""

    query: str = ""
    criteria: Mapping[str, FilterValue] = field(default_factory=dict)
    year_range: YearRange = field(default_factory=YearRange)
    page: int = 1
    per_page: int = 9


@dataclass
class PipelineResult:
    """Output of a pipeline run."""

    records: list[Record]
    page: Page
    page_reset: bool = False
