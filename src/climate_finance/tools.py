"""MCP tools for the climate-finance search server.

This module defines the tools exposed by the MCP server:
- search_records: Filter, search and paginate projects, funding sources or documents
- list_filters: Filter options and search fields available for an entity type
- export_records: Export a filtered result set as CSV or JSON
- get_record: Read a single record by id
"""

import logging
from typing import Any

from fastmcp import FastMCP

from climate_finance.catalog import RecordCatalog
from climate_finance.config import Config
from climate_finance.export import (
    build_project_export,
    export_filename,
    export_json,
    export_tables_csv,
)
from climate_finance.filtering import SearchState, YearRange, run_pipeline
from climate_finance.filtering.models import FilterValue
from climate_finance.filtering.search import search_tips

logger = logging.getLogger(__name__)

EXPORT_FORMATS = ("csv", "json")


def register_tools(mcp: FastMCP, catalog: RecordCatalog, config: Config) -> None:
    """Register all search tools with the FastMCP server.

    Args:
        mcp: FastMCP server instance
        catalog: Record source shared by all tools
        config: Configuration instance (page size defaults)
    """

    def _run(
        entity: str,
        query: str,
        filters: dict[str, FilterValue] | None,
        year_min: int | None = None,
        year_max: int | None = None,
        page: int = 1,
        per_page: int | None = None,
    ):
        criteria = dict(filters or {})
        records = catalog.get_records(entity)
        search_config = catalog.search_config(entity, criteria)
        state = SearchState(
            query=query,
            criteria=criteria,
            year_range=YearRange(min_year=year_min, max_year=year_max),
            page=page,
            per_page=per_page or config.items_per_page,
        )
        return run_pipeline(records, state, search_config)

    @mcp.tool()
    def search_records(
        entity: str = "projects",
        query: str = "",
        filters: dict[str, Any] | None = None,
        year_min: int | None = None,
        year_max: int | None = None,
        page: int = 1,
        per_page: int | None = None,
    ) -> dict:
        """Search and filter climate-finance records.

        Filters are ANDed. Each filter value is "All", a single value or a
        list of values; "N/A" matches records where the field is empty.
        The query is matched against weighted fields and results are ranked
        by relevance.

        Args:
            entity: projects, funding_sources, documents, implementing_entities,
                executing_agencies or delivery_partners
            query: Free-text query (blank returns records in their original order)
            filters: Filter key to value(s), e.g. {"status": ["Active"]}
            year_min: Earliest start year (projects)
            year_max: Latest start year (projects)
            page: Page number, starting at 1
            per_page: Items per page (defaults to the configured page size)

        Returns:
            Page of results with:
            - items: Records on this page
            - page / per_page / total_pages: Pagination cursor
            - total_items: Number of matching records
            - error: Error message if the request was invalid
        """
        try:
            result = _run(entity, query, filters, year_min, year_max, page, per_page)
        except ValueError as e:
            return {"items": [], "total_items": 0, "error": str(e)}

        return {
            "items": result.page.items,
            "page": result.page.page,
            "per_page": result.page.per_page,
            "total_pages": result.page.total_pages,
            "total_items": result.page.total_items,
            "start_item": result.page.start_item,
            "end_item": result.page.end_item,
            "error": None,
        }

    @mcp.tool()
    def list_filters(entity: str = "projects", filters: dict[str, Any] | None = None) -> dict:
        """List the filters and search fields available for an entity type.

        Args:
            entity: Entity type (see search_records)
            filters: Current filters; selected divisions narrow the district options

        Returns:
            - filters: List of {key, label, options: [{value, label}]}
            - search_fields: List of {key, label, weight}
            - search_tips: Which fields the query is matched against
            - year_range: {min_year, max_year} when records carry start dates
        """
        try:
            search_config = catalog.search_config(entity, dict(filters or {}))
        except ValueError as e:
            return {"filters": [], "search_fields": [], "error": str(e)}

        year_range = None
        if search_config.year_range is not None and search_config.year_range.is_set:
            year_range = {
                "min_year": search_config.year_range.min_year,
                "max_year": search_config.year_range.max_year,
            }

        return {
            "filters": [
                {
                    "key": definition.key,
                    "label": definition.label,
                    "options": [
                        {"value": option.value, "label": option.label}
                        for option in definition.options
                    ],
                }
                for definition in search_config.filters
            ],
            "search_fields": [
                {"key": f.key, "label": f.label, "weight": f.weight}
                for f in search_config.search_fields
            ],
            "search_tips": search_tips(search_config),
            "year_range": year_range,
            "error": None,
        }

    @mcp.tool()
    def export_records(
        entity: str = "projects",
        query: str = "",
        filters: dict[str, Any] | None = None,
        format: str = "csv",
    ) -> dict:
        """Export the full filtered result set (not just one page).

        Args:
            entity: Entity type (see search_records)
            query: Free-text query
            filters: Filter key to value(s)
            format: "csv" (one file per table) or "json"

        Returns:
            - format: Export format
            - files: Mapping of file name to file content
            - count: Number of exported records
            - error: Error message if nothing could be exported
        """
        if format not in EXPORT_FORMATS:
            return {"format": format, "files": {}, "count": 0, "error": f"Unsupported format: {format}"}

        try:
            result = _run(entity, query, filters)
        except ValueError as e:
            return {"format": format, "files": {}, "count": 0, "error": str(e)}

        records = result.records
        if not records:
            return {"format": format, "files": {}, "count": 0, "error": "No data available to export"}

        if entity == "projects":
            payload = build_project_export(records, query, filters)
        else:
            payload = {entity: records}

        if format == "json":
            files = {export_filename(entity, ext="json"): export_json(payload, title=entity)}
        else:
            files = {
                export_filename(entity, key): content
                for key, content in export_tables_csv(payload).items()
            }

        logger.info("Exported %d %s as %s", len(records), entity, format)
        return {"format": format, "files": files, "count": len(records), "error": None}

    @mcp.tool()
    def get_record(entity: str, record_id: str) -> dict:
        """Read a single record by its id.

        Args:
            entity: Entity type (see search_records)
            record_id: Record id (e.g. a project_id such as "CF-001")

        Returns:
            - record: The record, or None
            - exists: Whether the record was found
            - error: Error message if not found
        """
        try:
            record = catalog.get_record(entity, record_id)
        except ValueError as e:
            return {"record": None, "exists": False, "error": str(e)}

        if record is None:
            return {"record": None, "exists": False, "error": "Record not found"}
        return {"record": record, "exists": True, "error": None}
