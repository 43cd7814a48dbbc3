"""Example MCP server serving the bundled mock records.

This example shows how to embed the search tools in your own server.
Run with: uv run python examples/example_server.py
"""

from fastmcp import FastMCP

from climate_finance.catalog import RecordCatalog
from climate_finance.config import Config
from climate_finance.tools import register_tools

# Create MCP server
mcp = FastMCP("climate-finance-example")

# Mock data only, no API calls
config = Config.from_env(use_mock_override=True)
catalog = RecordCatalog(None, use_mock=True)
register_tools(mcp, catalog, config)


# Example: Add a simple tool built on the catalog
@mcp.tool()
def count_projects_by_status() -> dict:
    """Count the loaded projects per status.

    Returns:
        Mapping of status to number of projects
    """
    counts: dict[str, int] = {}
    for project in catalog.get_records("projects"):
        status = project.get("status") or "N/A"
        counts[status] = counts.get(status, 0) + 1
    return counts


if __name__ == "__main__":
    print("Starting climate-finance example server...")
    print("\nAvailable tools:")
    print("  - search_records")
    print("  - list_filters")
    print("  - export_records")
    print("  - get_record")
    print("  - count_projects_by_status")
    print("\nPress Ctrl+C to stop")

    mcp.run()
