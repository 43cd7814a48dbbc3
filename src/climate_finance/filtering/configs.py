"""Search configurations per entity type."""

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from climate_finance.filtering.models import (
    FilterDefinition,
    FilterValue,
    Record,
    SearchConfig,
    SearchField,
)
from climate_finance.filtering.options import (
    build_filter,
    capitalize_first,
    districts_for_divisions,
    entity_filter,
    has_missing,
    unique_values,
    year_bounds,
)

PROJECT_SEARCH_FIELDS = (
    SearchField("title", 3, "Project Title"),
    SearchField("project_id", 3, "Project ID"),
    SearchField("objectives", 2, "Objectives"),
    SearchField("beneficiaries", 1, "Beneficiaries"),
    SearchField("hotspot_vulnerability_type", 1, "Vulnerability Type"),
    SearchField("beneficiary_description", 1, "Beneficiary Description"),
    SearchField("assessment", 1, "Assessment"),
)

# Used while the project list is still empty
BASE_PROJECT_SEARCH_FIELDS = PROJECT_SEARCH_FIELDS[:4]

FUNDING_SOURCE_SEARCH_FIELDS = (
    SearchField("name", 3, "Funding Source"),
    SearchField("funding_source_id", 3, "Funding Source ID"),
    SearchField("dev_partner", 2, "Development Partner"),
    SearchField("type", 1, "Type"),
)

DOCUMENT_SEARCH_FIELDS = (
    SearchField("heading", 3, "Heading"),
    SearchField("sub_heading", 2, "Sub Heading"),
    SearchField("agency_name", 1, "Agency"),
    SearchField("categories", 1, "Categories"),
)

# Used when a caller only supplies a list of filters
LEGACY_SEARCH_FIELDS = (
    SearchField("name", 1, "Name"),
    SearchField("title", 1, "Title"),
)

SEARCH_CONFIGS: dict[str, SearchConfig] = {
    "projects": SearchConfig(search_fields=PROJECT_SEARCH_FIELDS),
    "funding_sources": SearchConfig(search_fields=FUNDING_SOURCE_SEARCH_FIELDS),
    "documents": SearchConfig(search_fields=DOCUMENT_SEARCH_FIELDS),
    # Lookup entities carry only id and name
    "implementing_entities": SearchConfig(search_fields=LEGACY_SEARCH_FIELDS),
    "executing_agencies": SearchConfig(search_fields=LEGACY_SEARCH_FIELDS),
    "delivery_partners": SearchConfig(search_fields=LEGACY_SEARCH_FIELDS),
}


def get_config(entity_type: str) -> SearchConfig:
    """Get the static configuration for an entity type (projects by default)."""
    return SEARCH_CONFIGS.get(entity_type, SEARCH_CONFIGS["projects"])


def legacy_config(filters: Iterable[FilterDefinition]) -> SearchConfig:
    """Configuration for callers passing only filter definitions."""
    return SearchConfig(search_fields=LEGACY_SEARCH_FIELDS, filters=tuple(filters))


def build_project_config(
    projects: Sequence[Record],
    implementing_entities: Sequence[Mapping[str, Any]] = (),
    executing_agencies: Sequence[Mapping[str, Any]] = (),
    delivery_partners: Sequence[Mapping[str, Any]] = (),
    funding_sources: Sequence[Mapping[str, Any]] = (),
    districts_by_division: Mapping[str, Sequence[str]] | None = None,
    criteria: Mapping[str, FilterValue] | None = None,
) -> SearchConfig:
    """
    Build the project configuration from the loaded collections.

    Option lists are derived from the values present on the projects, so
    only filters with something to choose from are offered. "N/A" options
    appear for delivery partners and hotspot types when some project lacks
    them.

    Args:
        projects: Loaded project records
        implementing_entities: Implementing entity records (id, name)
        executing_agencies: Executing agency records (id, name)
        delivery_partners: Delivery partner records (id, name)
        funding_sources: Funding source records (funding_source_id, name)
        districts_by_division: Division name to its district names
        criteria: Current criteria; selected divisions narrow the districts

    Returns:
        SearchConfig with search fields, filters and year bounds
    """
    if not projects:
        return SearchConfig(search_fields=BASE_PROJECT_SEARCH_FIELDS)

    criteria = criteria or {}
    filters: list[FilterDefinition] = []

    filters.append(build_filter("status", "Status", unique_values(projects, "status"), "All Status"))

    sectors = unique_values(projects, "sector")
    if sectors:
        filters.append(build_filter("sector", "Sector", sectors, "All Sectors"))

    types = unique_values(projects, "type")
    if types:
        filters.append(build_filter("type", "Project Type", types, "All Types"))

    divisions = unique_values(projects, "geographic_division")
    if divisions:
        filters.append(
            build_filter("geographic_division", "Geographic Division", divisions, "All Divisions")
        )

    selected_divisions = criteria.get("geographic_division")
    if isinstance(selected_divisions, str):
        selected_divisions = [selected_divisions]
    districts = districts_for_divisions(
        districts_by_division or {},
        selected_divisions,
        fallback=unique_values(projects, "districts"),
    )
    if districts:
        filters.append(build_filter("districts", "Districts", districts, "All Districts"))

    filters.append(
        entity_filter(
            "implementing_entity_id",
            "Implementing Entity",
            implementing_entities,
            "All Implementing Entities",
        )
    )
    filters.append(
        entity_filter(
            "executing_agency_id",
            "Executing Agency",
            executing_agencies,
            "All Executing Agencies",
        )
    )

    without_partners = has_missing(projects, "delivery_partners")
    if delivery_partners or without_partners:
        filters.append(
            entity_filter(
                "delivery_partner_id",
                "Delivery Partner",
                delivery_partners,
                "All Delivery Partners",
                include_na=without_partners,
            )
        )

    filters.append(
        entity_filter(
            "funding_source_id",
            "Funding Source",
            funding_sources,
            "All Funding Sources",
            id_field="funding_source_id",
        )
    )

    vulnerability_types = unique_values(projects, "hotspot_vulnerability_type")
    if vulnerability_types:
        filters.append(
            build_filter(
                "hotspot_vulnerability_type",
                "Vulnerability Type",
                vulnerability_types,
                "All Vulnerability Types",
            )
        )

    hotspot_types = unique_values(projects, "hotspot_types")
    without_hotspots = has_missing(projects, "hotspot_types")
    if hotspot_types or without_hotspots:
        filters.append(
            build_filter(
                "hotspot_types",
                "Hotspot Types",
                hotspot_types,
                "All Hotspot Types",
                include_na=without_hotspots,
            )
        )

    equity_markers = unique_values(projects, "equity_marker")
    if equity_markers:
        filters.append(
            build_filter(
                "equity_marker",
                "Equity Marker",
                equity_markers,
                "All Equity Markers",
                label_fn=capitalize_first,
            )
        )

    return SearchConfig(
        search_fields=PROJECT_SEARCH_FIELDS,
        filters=tuple(filters),
        year_range=year_bounds(projects),
    )


def build_funding_source_config(sources: Sequence[Record]) -> SearchConfig:
    """Build the funding source configuration (type and partner filters)."""
    filters = []
    types = unique_values(sources, "type")
    if types:
        filters.append(build_filter("type", "Type", types, "All Types"))
    partners = unique_values(sources, "dev_partner")
    if partners:
        filters.append(
            build_filter("dev_partner", "Development Partner", partners, "All Partners")
        )
    return SearchConfig(search_fields=FUNDING_SOURCE_SEARCH_FIELDS, filters=tuple(filters))


def build_document_config(documents: Sequence[Record]) -> SearchConfig:
    """Build the document repository configuration (category filter)."""
    filters = []
    categories = unique_values(documents, "categories")
    if categories:
        filters.append(build_filter("categories", "Category", categories, "All Categories"))
    return SearchConfig(search_fields=DOCUMENT_SEARCH_FIELDS, filters=tuple(filters))
