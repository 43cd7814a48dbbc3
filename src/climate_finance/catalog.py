"""Record catalog: API data with a bundled mock-data fallback."""

import logging
import threading
from importlib import resources
from typing import Any

import yaml

from climate_finance.api import ENDPOINTS, ApiClient, ApiError
from climate_finance.filtering.configs import (
    build_document_config,
    build_funding_source_config,
    build_project_config,
    get_config,
)
from climate_finance.filtering.models import FilterValue, SearchConfig

logger = logging.getLogger(__name__)

MOCK_DATA_FILE = "mock_data.yaml"
DISTRICTS_FILE = "districts.yaml"


def _load_yaml_mapping(filename: str) -> dict[str, list]:
    text = resources.files("climate_finance.data").joinpath(filename).read_text(encoding="utf-8")
    raw = yaml.safe_load(text) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"{filename} must contain a mapping of lists")
    return {str(key): list(value or []) for key, value in raw.items()}


def load_mock_data() -> dict[str, list[dict]]:
    """Load the bundled mock records, keyed by entity type."""
    return _load_yaml_mapping(MOCK_DATA_FILE)


def load_districts() -> dict[str, list[str]]:
    """Load the district names of each division."""
    return _load_yaml_mapping(DISTRICTS_FILE)


class RecordCatalog:
    """
    Source of records for the search tools.

    Records come from the API. When the API fails or still returns empty
    seed data, the bundled mock records are served instead. Results are
    cached per entity type until refresh().

    Thread Safety:
        The cache is guarded by a lock; loaded lists are never mutated.
    """

    def __init__(self, client: ApiClient | None, use_mock: bool = False):
        """
        Initialize the catalog.

        Args:
            client: API client; may be None when use_mock is True
            use_mock: Serve mock data only, never calling the API
        """
        if client is None and not use_mock:
            raise ValueError("An API client is required unless use_mock is set")
        self._client = client
        self._use_mock = use_mock
        self._cache: dict[str, list[dict]] = {}
        self._mock: dict[str, list[dict]] | None = None
        self._districts: dict[str, list[str]] | None = None
        self._lock = threading.Lock()

    @property
    def entity_types(self) -> list[str]:
        return sorted(ENDPOINTS)

    @property
    def districts(self) -> dict[str, list[str]]:
        if self._districts is None:
            self._districts = load_districts()
        return self._districts

    def _mock_records(self, entity: str) -> list[dict]:
        if self._mock is None:
            self._mock = load_mock_data()
        return self._mock.get(entity, [])

    def _load(self, entity: str) -> list[dict]:
        if self._use_mock or self._client is None:
            return self._mock_records(entity)

        try:
            records = self._client.get_all(entity)
        except ApiError as e:
            logger.warning("API unavailable for %s, using mock data: %s", entity, e)
            return self._mock_records(entity)

        if not records:
            logger.warning("API returned no %s, using mock data", entity)
            return self._mock_records(entity)
        return records

    def get_records(self, entity: str) -> list[dict]:
        """Get all records of an entity type.

        Raises:
            ValueError: If the entity type is unknown
        """
        if entity not in ENDPOINTS:
            raise ValueError(f"Unknown entity type: {entity}")
        with self._lock:
            if entity not in self._cache:
                self._cache[entity] = self._load(entity)
                logger.info("Loaded %d %s", len(self._cache[entity]), entity)
            return self._cache[entity]

    def get_record(self, entity: str, record_id: str) -> dict[str, Any] | None:
        """Find a record by its id among the loaded records."""
        id_fields = ("id", "project_id", "funding_source_id")
        for record in self.get_records(entity):
            for id_field in id_fields:
                if id_field in record and str(record[id_field]) == str(record_id):
                    return record
        return None

    def refresh(self) -> None:
        """Drop cached records so the next call reloads them."""
        with self._lock:
            self._cache.clear()

    def search_config(
        self,
        entity: str,
        criteria: dict[str, FilterValue] | None = None,
    ) -> SearchConfig:
        """Build the search configuration for an entity from loaded data.

        Raises:
            ValueError: If the entity type is unknown
        """
        if entity not in ENDPOINTS:
            raise ValueError(f"Unknown entity type: {entity}")
        if entity == "projects":
            return self.project_config(criteria)
        if entity == "funding_sources":
            return build_funding_source_config(self.get_records(entity))
        if entity == "documents":
            return build_document_config(self.get_records(entity))
        return get_config(entity)

    def project_config(self, criteria: dict[str, FilterValue] | None = None) -> SearchConfig:
        """Build the dynamic project configuration from every loaded collection."""
        return build_project_config(
            self.get_records("projects"),
            implementing_entities=self.get_records("implementing_entities"),
            executing_agencies=self.get_records("executing_agencies"),
            delivery_partners=self.get_records("delivery_partners"),
            funding_sources=self.get_records("funding_sources"),
            districts_by_division=self.districts,
            criteria=criteria,
        )
