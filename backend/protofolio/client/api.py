"""
Protofolio — Records API Client
=================================

What:  Async HTTP client for the /records REST surface.
Why:   Gives the catalog controller typed results and a single error type,
       with the server's error message preserved verbatim.
How:   Wraps an httpx.AsyncClient. Responses are parsed into the same
       RecordResponse model the server serializes.

Timeouts:
    None by default. A slow request simply delays the corresponding UI update;
    nothing is cancelled or retried.
"""

import logging
from typing import Any, Dict, List, Optional, Union
from uuid import UUID

import httpx

from protofolio.schemas.record import RecordResponse

logger = logging.getLogger(__name__)

RecordId = Union[str, UUID]


class ApiError(Exception):
    """
    A store call failed.

    Attributes:
        message:      Text to show the user (the server's `message` when present)
        status_code:  HTTP status, or None if the server was never reached
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class RecordsClient:
    """
    Usage:
        async with RecordsClient("http://localhost:8000") as api:
            records = await api.list_records(search="kit", sort_by="alphabetical")

    Pass `client=` to reuse an existing httpx.AsyncClient (tests hand in one
    bound to the ASGI app); the caller then owns its lifecycle.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=None)

    async def __aenter__(self) -> "RecordsClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _request(self, method: str, path: str, fallback: str, **kwargs) -> Any:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error("%s %s failed: %s", method, path, str(e))
            raise ApiError(f"{fallback}: the server could not be reached.") from e

        if response.is_error:
            message = fallback
            try:
                body = response.json()
                message = body.get("message") or body.get("error") or fallback
            except (ValueError, AttributeError):
                pass
            logger.error("%s %s → %d: %s", method, path, response.status_code, message)
            raise ApiError(message, status_code=response.status_code)

        return response.json()

    async def list_records(
        self,
        search: Optional[str] = None,
        category: Optional[str] = None,
        sort_by: Optional[str] = None,
    ) -> List[RecordResponse]:
        params = {
            key: value
            for key, value in (("search", search), ("category", category), ("sortBy", sort_by))
            if value
        }
        data = await self._request("GET", "/records", "Failed to load prototypes", params=params)
        return [RecordResponse.model_validate(item) for item in data]

    async def get_record(self, record_id: RecordId) -> RecordResponse:
        data = await self._request("GET", f"/records/{record_id}", "Failed to load prototype")
        return RecordResponse.model_validate(data)

    async def create_record(self, payload: Dict[str, Any]) -> RecordResponse:
        data = await self._request("POST", "/records", "Failed to save prototype", json=payload)
        return RecordResponse.model_validate(data)

    async def update_record(self, record_id: RecordId, payload: Dict[str, Any]) -> RecordResponse:
        data = await self._request(
            "PUT", f"/records/{record_id}", "Failed to update prototype", json=payload
        )
        return RecordResponse.model_validate(data)

    async def delete_record(self, record_id: RecordId) -> str:
        data = await self._request("DELETE", f"/records/{record_id}", "Failed to delete prototype")
        return data.get("message", "")
