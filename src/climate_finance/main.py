"""Main entry point for the climate-finance search MCP server."""

import argparse
import logging
import sys

from fastmcp import FastMCP

from climate_finance.api import ApiClient
from climate_finance.catalog import RecordCatalog
from climate_finance.config import Config
from climate_finance.tools import register_tools

logger = logging.getLogger(__name__)


def create_server(config: Config, catalog: RecordCatalog | None = None) -> FastMCP:
    """Create and configure the MCP server with all components.

    Args:
        config: Configuration instance with all settings.
        catalog: Optional record catalog (built from config when omitted).
    """
    mcp = FastMCP(
        name="climateFinance",
        instructions=(
            "climateFinance gives access to climate-finance projects, funding "
            "sources and research documents. Use list_filters to discover the "
            "available filters, search_records to filter and rank records, and "
            "export_records to download a filtered result set."
        ),
    )

    if catalog is None:
        client = None
        if not config.use_mock_data:
            logger.info("Using API at %s", config.api_base_url)
            client = ApiClient(config.api_base_url, timeout=config.request_timeout)
        else:
            logger.info("Mock data mode, API calls disabled")
        catalog = RecordCatalog(client, use_mock=config.use_mock_data)

    logger.info("Registering search tools...")
    register_tools(mcp, catalog, config)

    logger.info("Server configured successfully")
    return mcp


def main() -> None:
    """Main function - starts the MCP server."""
    # Configure logging here to avoid side effects on import
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(
        description="climateFinance - MCP server for climate-finance project search"
    )
    parser.add_argument(
        "--mock",
        action="store_true",
        help="Serve bundled mock data instead of calling the API",
    )
    args = parser.parse_args()

    # Create config once - CLI flag overrides env var
    config = Config.from_env(use_mock_override=True if args.mock else None)

    # Print startup banner
    logger.info("=" * 50)
    logger.info("climateFinance starting...")
    logger.info("  API:       %s", config.api_base_url)
    logger.info("  PORT:      %s", config.port)
    logger.info("  TIMEOUT:   %ss", config.request_timeout)
    logger.info("  MOCK_DATA: %s", config.use_mock_data)
    logger.info("  PER_PAGE:  %s", config.items_per_page)
    logger.info("=" * 50)

    try:
        mcp = create_server(config)
        logger.info("Starting MCP server on port %s...", config.port)
        mcp.run(transport="sse", host="0.0.0.0", port=config.port)
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
        sys.exit(0)
    except Exception:
        logger.exception("Server error")
        sys.exit(1)


if __name__ == "__main__":
    main()
