"""HTTP client for the climate-finance REST API.

Every endpoint answers with an envelope:
{
    "status": true,
    "message": "Success",
    "data": [...]
}

HTTP error statuses and {"status": false} are both raised as ApiError so
callers decide how to surface them.
"""

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)

# Timeout for API requests
REQUEST_TIMEOUT = 10.0  # seconds

# Entity type -> (list endpoint, detail endpoint template)
ENDPOINTS: dict[str, tuple[str, str]] = {
    "projects": ("/project/all-project", "/project/get/{id}"),
    "funding_sources": ("/funding-source/all", "/funding-source/get/{id}"),
    "implementing_entities": ("/implementing-entity/all", "/implementing-entity/get/{id}"),
    "executing_agencies": ("/executing-agency/all", "/executing-agency/get/{id}"),
    "delivery_partners": ("/delivery-partner/all", "/delivery-partner/get/{id}"),
    "documents": ("/document-repository", "/document-repository/{id}"),
}


class ApiError(Exception):
    """Raised when an API request fails or reports status false."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ApiClient:
    """Read client for the REST API."""

    def __init__(
        self,
        base_url: str,
        timeout: float = REQUEST_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            base_url: Server root, e.g. "https://example.org" (no /api suffix)
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    def _url(self, endpoint: str) -> str:
        return f"{self.base_url}/api{endpoint}"

    def request(self, endpoint: str, method: str = "GET", **kwargs: Any) -> Any:
        """
        Perform a request and unwrap the response envelope.

        Returns:
            The envelope's data field

        Raises:
            ApiError: On HTTP errors, transport errors, invalid JSON or status false
        """
        url = self._url(endpoint)
        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                response = client.request(
                    method,
                    url,
                    headers={"Content-Type": "application/json"},
                    **kwargs,
                )
        except httpx.TimeoutException as e:
            logger.warning("API request timed out: %s %s", method, url)
            raise ApiError(f"Request timed out: {url}") from e
        except httpx.RequestError as e:
            logger.warning("API request error for %s: %s", url, e)
            raise ApiError(str(e)) from e

        if response.is_error:
            message = f"HTTP error! status: {response.status_code}"
            try:
                body = response.json()
                if isinstance(body, dict) and body.get("message"):
                    message = body["message"]
            except ValueError:
                message = response.reason_phrase or message
            raise ApiError(message, status_code=response.status_code)

        try:
            body = response.json()
        except ValueError as e:
            raise ApiError(f"Invalid JSON response from {url}") from e

        if not isinstance(body, dict) or not body.get("status"):
            message = body.get("message") if isinstance(body, dict) else None
            raise ApiError(message or f"Request to {endpoint} failed")

        return body.get("data")

    def get_all(self, entity: str) -> list[dict]:
        """Fetch every record of an entity type.

        Raises:
            ValueError: If the entity type is unknown
            ApiError: If the request fails
        """
        if entity not in ENDPOINTS:
            raise ValueError(f"Unknown entity type: {entity}")
        data = self.request(ENDPOINTS[entity][0])
        if not isinstance(data, list):
            raise ApiError(f"Expected a list of {entity}, got {type(data).__name__}")
        return data

    def get_by_id(self, entity: str, record_id: str | int) -> dict:
        """Fetch a single record by id.

        Raises:
            ValueError: If the entity type is unknown or the id is empty
            ApiError: If the request fails
        """
        if entity not in ENDPOINTS:
            raise ValueError(f"Unknown entity type: {entity}")
        if record_id is None or record_id == "":
            raise ValueError(f"{entity} ID is required")
        data = self.request(ENDPOINTS[entity][1].format(id=record_id))
        if not isinstance(data, dict):
            raise ApiError(f"Expected a {entity} record, got {type(data).__name__}")
        return data
