"""Configuration module for climate-finance-search.

Loads configuration from environment variables with sensible defaults.
"""

import os
from dataclasses import dataclass

from climate_finance.filtering.pagination import DEFAULT_ITEMS_PER_PAGE, ITEMS_PER_PAGE_OPTIONS

DEFAULT_API_BASE_URL = "https://climate-finance-new.onrender.com"


@dataclass
class Config:
    """Application configuration."""

    api_base_url: str
    port: int
    request_timeout: float
    use_mock_data: bool
    items_per_page: int

    @classmethod
    def from_env(cls, use_mock_override: bool | None = None) -> "Config":
        """Load configuration from environment variables.

        Args:
            use_mock_override: If provided, overrides the CF_USE_MOCK_DATA env var.
        """
        api_base_url = os.getenv("CF_API_BASE_URL", DEFAULT_API_BASE_URL).rstrip("/")

        port_str = os.getenv("CF_PORT", "8080")
        try:
            port = int(port_str)
            if not 1 <= port <= 65535:
                raise ValueError(f"Port must be between 1 and 65535, got {port}")
        except ValueError as e:
            raise ValueError(f"Invalid CF_PORT value '{port_str}': {e}") from e

        timeout_str = os.getenv("CF_REQUEST_TIMEOUT", "10")
        try:
            request_timeout = float(timeout_str)
            if request_timeout <= 0:
                raise ValueError(f"Timeout must be positive, got {request_timeout}")
        except ValueError as e:
            raise ValueError(f"Invalid CF_REQUEST_TIMEOUT value '{timeout_str}': {e}") from e

        # Mock mode - CLI flag takes precedence over env var
        if use_mock_override is not None:
            use_mock_data = use_mock_override
        else:
            use_mock_data = os.getenv("CF_USE_MOCK_DATA", "").lower() in ("1", "true", "yes")

        per_page_str = os.getenv("CF_ITEMS_PER_PAGE", str(DEFAULT_ITEMS_PER_PAGE))
        try:
            items_per_page = int(per_page_str)
            if items_per_page not in ITEMS_PER_PAGE_OPTIONS:
                raise ValueError(
                    f"Items per page must be one of {list(ITEMS_PER_PAGE_OPTIONS)}, "
                    f"got {items_per_page}"
                )
        except ValueError as e:
            raise ValueError(f"Invalid CF_ITEMS_PER_PAGE value '{per_page_str}': {e}") from e

        return cls(
            api_base_url=api_base_url,
            port=port,
            request_timeout=request_timeout,
            use_mock_data=use_mock_data,
            items_per_page=items_per_page,
        )


# Global config instance (lazy loaded)
_config: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config


def reset_config() -> None:
    """Reset the global configuration (useful for testing)."""
    global _config
    _config = None
