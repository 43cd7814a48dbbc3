"""CSV and JSON export of filtered results."""

import csv
import io
import json
from collections.abc import Mapping, Sequence
from datetime import date, datetime, timezone
from typing import Any

from climate_finance.filtering.models import FilterValue, Record

# Identifier fields tried, in order, when an object has no name or title
FALLBACK_ID_FIELDS = ("agency_id", "funding_source_id", "sdg_number", "id")


def _display_name(value: Mapping[str, Any]) -> str:
    """Pick a human-readable name for a nested object."""
    if value.get("name"):
        return str(value["name"])
    if value.get("title"):
        return str(value["title"])
    for id_field in FALLBACK_ID_FIELDS:
        if value.get(id_field) is not None:
            return str(value[id_field])
    return json.dumps(value, default=str)


def format_cell(value: Any) -> str:
    """
    Flatten a field value into a single CSV cell.

    - None becomes an empty cell
    - lists of scalars join with "; "
    - objects (alone or in lists) render their name, title or id
    """
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        if not value:
            return ""
        if all(not isinstance(v, (Mapping, list, tuple)) for v in value):
            return "; ".join(format_cell(v) for v in value)
        parts = []
        for v in value:
            if not v:
                continue
            if isinstance(v, str):
                parts.append(v)
            elif isinstance(v, Mapping):
                parts.append(_display_name(v))
            else:
                parts.append(json.dumps(v, default=str))
        return "; ".join(parts)
    if isinstance(value, Mapping):
        return _display_name(value)
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def records_to_csv(records: Sequence[Record]) -> str:
    """
    Render records as CSV.

    Columns come from the first record's keys. Every cell is quoted and
    embedded quotes are doubled.
    """
    if not records:
        return ""
    headers = list(records[0].keys())
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(headers)
    for record in records:
        writer.writerow([format_cell(record.get(h)) for h in headers])
    return buffer.getvalue()


def export_tables_csv(tables: Mapping[str, Any]) -> dict[str, str]:
    """
    Render every table of an export payload as CSV.

    A single object (e.g. a summary) becomes a one-row table. Empty tables
    are skipped.

    Returns:
        Mapping of table name to CSV text
    """
    result: dict[str, str] = {}
    for key, table in tables.items():
        rows = table if isinstance(table, list) else [table]
        rows = [r for r in rows if isinstance(r, Mapping)]
        if not rows:
            continue
        result[key] = records_to_csv(rows)
    return result


def export_json(
    data: Mapping[str, Any],
    title: str,
    subtitle: str = "",
    now: datetime | None = None,
) -> str:
    """Render an export payload as indented JSON with export metadata."""
    now = now or datetime.now(timezone.utc)
    payload = {
        **data,
        "exportDate": now.isoformat(),
        "title": title,
        "subtitle": subtitle,
    }
    return json.dumps(payload, indent=2, ensure_ascii=False, default=str)


def build_project_export(
    projects: Sequence[Record],
    query: str = "",
    criteria: Mapping[str, FilterValue] | None = None,
) -> dict[str, Any] | None:
    """Build the export payload for a filtered project list (None if empty)."""
    if not projects:
        return None

    total_budget = 0.0
    for project in projects:
        try:
            total_budget += float(project.get("total_cost_usd") or 0)
        except (TypeError, ValueError):
            continue

    return {
        "projects": list(projects),
        "filters": {
            "searchTerm": query,
            "activeFilters": dict(criteria or {}),
        },
        "summary": {
            "totalProjects": len(projects),
            "totalBudget": total_budget,
        },
    }


def export_filename(base: str, key: str | None = None, ext: str = "csv", today: date | None = None) -> str:
    """File name like "projects_summary_2024-02-10.csv"."""
    today = today or date.today()
    parts = [base]
    if key:
        parts.append(key)
    parts.append(today.isoformat())
    return "_".join(parts) + f".{ext}"
