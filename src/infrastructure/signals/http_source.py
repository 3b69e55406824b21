"""HTTP-backed signal sources for the clinic REST API."""

from collections.abc import Callable, Mapping
from typing import Any

import httpx

from core.config import Settings

QueryParams = Mapping[str, str | int]


class SignalPayloadError(ValueError):
    """The response body did not contain a usable count."""


class HttpCountSource:
    """Reads one integer from an authenticated GET endpoint.

    ``count_path`` is a dotted path into the JSON body, e.g.
    ``"data.pagination.total"``. List values are counted by length.
    ``params`` may be a callable so that date filters are computed per call.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        path: str,
        count_path: str,
        params: QueryParams | Callable[[], QueryParams] | None = None,
    ) -> None:
        self._client = client
        self._path = path
        self._count_path = count_path
        self._params = params

    async def get_count(self) -> int:
        params = self._params() if callable(self._params) else self._params
        response = await self._client.get(self._path, params=dict(params or {}))
        response.raise_for_status()
        return extract_count(response.json(), self._count_path)

    def __repr__(self) -> str:
        return f"HttpCountSource(path={self._path!r}, count_path={self._count_path!r})"


def extract_count(body: Any, count_path: str) -> int:
    """Walk ``count_path`` through a decoded JSON body and return an int."""
    value = body
    for key in count_path.split("."):
        if isinstance(value, Mapping) and key in value:
            value = value[key]
        else:
            raise SignalPayloadError(f"Missing '{count_path}' in response")

    if isinstance(value, list):
        return len(value)
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise SignalPayloadError(f"'{count_path}' is not a count: {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise SignalPayloadError(f"'{count_path}' is not a count: {value!r}") from e


def create_clinic_client(settings: Settings) -> httpx.AsyncClient:
    """Async client for the clinic REST API with bearer authentication."""
    headers = {"Accept": "application/json"}
    if settings.clinic_api_token:
        headers["Authorization"] = f"Bearer {settings.clinic_api_token}"
    return httpx.AsyncClient(
        base_url=settings.clinic_api_base_url,
        headers=headers,
        timeout=settings.signal_timeout_seconds,
    )
