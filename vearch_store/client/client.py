"""Synchronous HTTP client for the Vearch router API."""

from typing import Any

import httpx
from pydantic import ValidationError as PydanticValidationError

from vearch_store.client.models import (
    BulkRequest,
    CreateDatabaseRequest,
    CreateSpaceRequest,
    ListDatabaseResponse,
    ListSpaceResponse,
    ResponseWrapper,
    SearchQuery,
    SearchResponse,
)
from vearch_store.exceptions import ErrorCode, VectorStoreError
from vearch_store.logging_config import get_logger

logger = get_logger(__name__)

# Older routers answer 200 in the envelope, newer ones 0
SUCCESS_CODES = frozenset({0, 200})


class VearchClient:
    """Thin wrapper over the Vearch router endpoints.

    Every call is a single blocking request. Failures are raised as
    VectorStoreError and never retried.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 60.0,
        client: httpx.Client | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Router base URL.
            timeout: Request timeout in seconds.
            client: HTTP client. Creates new one if not provided.
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.Client:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.Client(timeout=self._timeout)
        return self._client

    def close(self) -> None:
        """Close the HTTP client if we own it."""
        if self._owns_client and self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> "VearchClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def timeout(self) -> float:
        return self._timeout

    def list_databases(self) -> list[ListDatabaseResponse]:
        """List all databases."""
        data = self._unwrap(self._request("GET", "/list/db"))
        return [ListDatabaseResponse.model_validate(item) for item in data or []]

    def create_database(self, request: CreateDatabaseRequest) -> None:
        """Create a database."""
        self._unwrap(self._request("PUT", "/db/_create", json=request.model_dump()))

    def list_spaces(self, database_name: str) -> list[ListSpaceResponse]:
        """List the spaces of a database."""
        response = self._request("GET", "/list/space", params={"db": database_name})
        data = self._unwrap(response)
        return [ListSpaceResponse.model_validate(item) for item in data or []]

    def create_space(self, database_name: str, request: CreateSpaceRequest) -> None:
        """Create a space in a database."""
        self._unwrap(
            self._request(
                "PUT",
                f"/space/{database_name}/_create",
                json=request.to_request(),
            )
        )

    def bulk(self, database_name: str, space_name: str, request: BulkRequest) -> None:
        """Upsert documents in one call.

        Raises:
            VectorStoreError: If the call fails or any document is rejected.
        """
        response = self._request(
            "POST",
            f"/{database_name}/{space_name}/_bulk",
            content=request.to_ndjson().encode("utf-8"),
            headers={"Content-Type": "application/json"},
        )
        body = self._json(response)
        if isinstance(body, dict):
            body = self._check_envelope(body, response)
            if isinstance(body, dict):
                body = body.get("document_ids")
        if body is not None and not isinstance(body, list):
            raise VectorStoreError(
                "Invalid bulk response: expected a list of item results",
                code=ErrorCode.INVALID_RESPONSE,
                details={"url": str(response.request.url)},
            )

        failed = [item for item in body or [] if _bulk_item_failed(item)]
        if failed:
            raise VectorStoreError(
                f"Bulk write rejected {len(failed)} of {len(request.documents)} documents",
                code=ErrorCode.SERVICE_ERROR,
                details={"failed": failed},
            )

    def search(
        self,
        database_name: str,
        space_name: str,
        query: SearchQuery,
    ) -> SearchResponse:
        """Run a vector search."""
        response = self._request(
            "POST",
            f"/{database_name}/{space_name}/_search",
            json=query.to_request(),
        )
        try:
            return SearchResponse.model_validate(self._json(response))
        except PydanticValidationError as e:
            raise VectorStoreError(
                f"Invalid search response: {e}",
                code=ErrorCode.INVALID_RESPONSE,
                details={"url": str(response.request.url)},
            ) from e

    def delete_space(self, database_name: str, space_name: str) -> None:
        """Delete a space and all of its documents."""
        self._unwrap(self._request("DELETE", f"/space/{database_name}/{space_name}"))

    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Send a request and raise on transport or HTTP errors."""
        client = self._get_client()
        url = f"{self._base_url}{path}"

        try:
            response = client.request(method, url, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                f"Vearch request failed: {e.response.status_code}",
                extra={"url": url, "status_code": e.response.status_code},
            )
            raise VectorStoreError(
                f"Vearch returned {e.response.status_code} for {method} {path}",
                code=ErrorCode.TRANSPORT_ERROR,
                details={
                    "url": url,
                    "status_code": e.response.status_code,
                    "body": e.response.text,
                },
            ) from e
        except httpx.RequestError as e:
            logger.error(f"Vearch request error: {e}", extra={"url": url})
            raise VectorStoreError(
                f"Failed to connect to Vearch: {e}",
                code=ErrorCode.TRANSPORT_ERROR,
                details={"url": url},
            ) from e

        return response

    def _json(self, response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise VectorStoreError(
                f"Invalid JSON from Vearch: {e}",
                code=ErrorCode.INVALID_RESPONSE,
                details={"url": str(response.request.url)},
            ) from e

    def _unwrap(self, response: httpx.Response) -> Any:
        """Check the management envelope and return its payload."""
        return self._check_envelope(self._json(response), response)

    def _check_envelope(self, body: Any, response: httpx.Response) -> Any:
        try:
            wrapper = ResponseWrapper.model_validate(body)
        except PydanticValidationError as e:
            raise VectorStoreError(
                f"Invalid response envelope: {e}",
                code=ErrorCode.INVALID_RESPONSE,
                details={"url": str(response.request.url)},
            ) from e

        if wrapper.code not in SUCCESS_CODES:
            raise VectorStoreError(
                f"Vearch error {wrapper.code}: {wrapper.msg}",
                code=ErrorCode.SERVICE_ERROR,
                details={"url": str(response.request.url), "service_code": wrapper.code},
            )
        return wrapper.data


def _bulk_item_failed(item: Any) -> bool:
    if not isinstance(item, dict):
        return False
    result = item.get("index", item)
    if not isinstance(result, dict):
        return False
    status = result.get("status")
    if isinstance(status, int):
        return status >= 300
    return bool(result.get("error"))
