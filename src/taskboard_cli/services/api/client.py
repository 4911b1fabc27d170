"""API client for the Taskboard backend."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

import httpx

from taskboard_cli.models.exceptions import (
    AuthError,
    AuthorizationError,
    NetworkError,
    NotFoundError,
    TaskboardError,
    ValidationError,
)

if TYPE_CHECKING:
    from taskboard_cli.services.config_service import ConfigService

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:5000/api"


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("message", "detail", "error"):
            if body.get(key):
                return str(body[key])
    return response.reason_phrase or f"HTTP {response.status_code}"


def map_status_error(response: httpx.Response) -> TaskboardError:
    """Translate an HTTP error response into the exception taxonomy."""
    status = response.status_code
    message = _error_message(response)
    if status == 401:
        return AuthError(message)
    if status == 403:
        return AuthorizationError(message)
    if status == 404:
        return NotFoundError(message)
    if status in (400, 409, 422):
        return ValidationError(message)
    if status >= 500:
        return NetworkError(f"Server error ({status}): {message}")
    return TaskboardError(f"Unexpected response ({status}): {message}")


def response_json(response: httpx.Response) -> Any:
    """Decode a successful response body; a non-JSON body is a server fault."""
    try:
        return response.json()
    except ValueError as e:
        content_type = response.headers.get("content-type", "unknown")
        raise NetworkError(
            f"Invalid response from server ({response.status_code}, {content_type})"
        ) from e


class APIClient:
    """HTTP client for the Taskboard API."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        config_service: ConfigService | None = None,
        token_provider: Callable[[], str | None] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        backoff: float = 1.0,
    ):
        if config_service is None and (base_url is None or token_provider is None):
            from taskboard_cli.services.config_service import get_config_service

            config_service = get_config_service()
        self.config_manager = config_service

        if base_url is None:
            context = self.config_manager.get_current_context()
            base_url = context.source if context.type == "remote" else DEFAULT_API_URL
        self.base_url = base_url.rstrip("/")

        if token_provider is None:
            token_provider = self.config_manager.load_token
        self.token_provider = token_provider

        api_config = self.config_manager.config.api if self.config_manager else None
        self.timeout = api_config.timeout if api_config else 30
        self.retry = api_config.retry if api_config else 3
        self.backoff = backoff
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> APIClient:
        """Enter the async context manager."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit the async context manager and ensure the client is closed."""
        await self.close()

    def _get_headers(self, skip_auth: bool = False) -> dict[str, str]:
        """Get HTTP headers with authentication."""
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if not skip_auth:
            token = self.token_provider()
            if token:
                headers["Authorization"] = f"Bearer {token}"
        return headers

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        retry: int | None = None,
        skip_auth: bool = False,
    ) -> httpx.Response:
        """Make an HTTP request to the API.

        Server errors and transport failures are retried with exponential
        backoff; client errors are raised immediately.

        Raises:
            AuthError, AuthorizationError, NotFoundError, ValidationError:
                For the matching 4xx status
            NetworkError: When every attempt failed on transport or 5xx
        """
        if retry is None:
            retry = self.retry

        client = await self._get_client()
        url = path if path.startswith("/") else f"/{path}"
        headers = self._get_headers(skip_auth=skip_auth)

        last_error: TaskboardError | None = None
        for attempt in range(retry + 1):
            try:
                response = await client.request(
                    method=method,
                    url=url,
                    json=json,
                    params=params,
                    headers=headers,
                )
            except httpx.RequestError as e:
                last_error = NetworkError(f"Could not reach {self.base_url}: {e}")
                logger.warning("%s %s failed (attempt %d): %s", method, url, attempt + 1, e)
            else:
                if response.is_success:
                    return response
                error = map_status_error(response)
                # Don't retry client errors (4xx)
                if response.status_code < 500:
                    raise error
                last_error = error
                logger.warning(
                    "%s %s returned %d (attempt %d)",
                    method,
                    url,
                    response.status_code,
                    attempt + 1,
                )

            if attempt < retry:
                await asyncio.sleep(self.backoff * 2**attempt)

        if last_error is None:
            raise NetworkError(f"{method} {url} was not attempted (retry={retry})")
        raise last_error

    @asynccontextmanager
    async def stream(
        self, method: str, path: str, *, timeout: float | None = None
    ) -> AsyncIterator[httpx.Response]:
        """Open a streaming response; non-2xx statuses raise like :meth:`request`."""
        client = await self._get_client()
        headers = self._get_headers()
        headers["Accept"] = "text/event-stream"
        try:
            async with client.stream(
                method,
                path,
                headers=headers,
                timeout=httpx.Timeout(self.timeout, read=timeout),
            ) as response:
                if not response.is_success:
                    await response.aread()
                    raise map_status_error(response)
                yield response
        except httpx.RequestError as e:
            raise NetworkError(f"Could not reach {self.base_url}: {e}") from e

    async def get(
        self, path: str, *, params: dict[str, Any] | None = None
    ) -> httpx.Response:
        """Make a GET request."""
        return await self.request("GET", path, params=params)

    async def post(
        self, path: str, *, json: dict[str, Any] | None = None, skip_auth: bool = False
    ) -> httpx.Response:
        """Make a POST request."""
        return await self.request("POST", path, json=json, skip_auth=skip_auth)

    async def put(
        self, path: str, *, json: dict[str, Any] | None = None
    ) -> httpx.Response:
        """Make a PUT request."""
        return await self.request("PUT", path, json=json)

    async def delete(self, path: str) -> httpx.Response:
        """Make a DELETE request."""
        return await self.request("DELETE", path)


def get_client() -> APIClient:
    """Get an API client instance."""
    return APIClient()
