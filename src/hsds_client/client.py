"""HSDS transport.

Responsibility:
- Build the URL and query for a (method, path) pair and let the configured
  credential strategy fill the headers.
- Send the request through a shared `httpx.AsyncClient`.
- Classify the response: decode JSON (or pass raw bytes) on 2xx, raise the
  matching `HsdsError` otherwise.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping

import httpx

from hsds_client.adapters.apis import (
    AttributeApi,
    DatasetApi,
    DatatypeApi,
    DomainApi,
    GroupApi,
    LinkApi,
)
from hsds_client.adapters.auth import NoAuth, auth_from_settings
from hsds_client.adapters.http_client import build_async_client, parse_base_url
from hsds_client.core.config import HsdsSettings
from hsds_client.core.domain.models import ErrorResponse, ModelT, parse_model
from hsds_client.core.errors import (
    ApiError,
    AuthenticationError,
    DomainNotFoundError,
    InvalidParameterError,
    ObjectNotFoundError,
    PermissionDeniedError,
    SerializationError,
    StatusError,
    TransportError,
)
from hsds_client.core.interfaces.auth import Authentication

log = logging.getLogger(__name__)

# Paths addressing the domain itself rather than an object inside it.
_DOMAIN_PATHS = ("/", "/acls")


def error_message(response: httpx.Response) -> str:
    """Message from the server's JSON error body, or `HTTP <status>`."""

    fallback = f"HTTP {response.status_code}"
    try:
        body = ErrorResponse.model_validate(response.json())
    except ValueError:
        return fallback
    return body.message or body.error or fallback


def error_for_response(response: httpx.Response, path: str) -> StatusError:
    status = response.status_code
    message = error_message(response)
    if status == 401:
        return AuthenticationError(message)
    if status == 403:
        return PermissionDeniedError(message)
    if status == 404:
        if path in _DOMAIN_PATHS or path.startswith("/acls/"):
            return DomainNotFoundError(message)
        return ObjectNotFoundError(message)
    if status == 400:
        return InvalidParameterError(message, status=400)
    return ApiError(status, message)


class HsdsClient:
    """Main HSDS client.

    One instance holds the connection pool and the credential object; it is
    safe to share between concurrent tasks. Resource façades hang off it:
    `domains`, `groups`, `links`, `datasets`, `datatypes`, `attributes`.
    """

    def __init__(
        self,
        base_url: str | None = None,
        auth: Authentication | None = None,
        *,
        settings: HsdsSettings | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings or HsdsSettings()
        self._base_url = parse_base_url(base_url or self._settings.endpoint)
        self._auth: Authentication = auth or NoAuth()
        self._owns_http = http_client is None
        self._http = http_client or build_async_client(self._settings, base_url=self._base_url)

        self.domains = DomainApi(self)
        self.groups = GroupApi(self)
        self.links = LinkApi(self)
        self.datasets = DatasetApi(self)
        self.datatypes = DatatypeApi(self)
        self.attributes = AttributeApi(self)

    @classmethod
    def from_settings(
        cls,
        settings: HsdsSettings | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> HsdsClient:
        settings = settings or HsdsSettings()
        return cls(
            settings.endpoint,
            auth_from_settings(settings),
            settings=settings,
            http_client=http_client,
        )

    @property
    def base_url(self) -> httpx.URL:
        return self._base_url

    @property
    def auth(self) -> Authentication:
        return self._auth

    async def aclose(self) -> None:
        """Release the connection pool (only if this client created it)."""

        if self._owns_http:
            await self._http.aclose()

    async def __aenter__(self) -> HsdsClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # ---- query helpers ----

    @staticmethod
    def pagination_params(limit: int | None = None, marker: str | None = None) -> dict[str, Any]:
        params: dict[str, Any] = {}
        if limit is not None:
            params["Limit"] = str(limit)
        if marker is not None:
            params["Marker"] = marker
        return params

    @staticmethod
    def selection_params(select: str | None = None) -> dict[str, Any]:
        return {"select": select} if select is not None else {}

    @staticmethod
    def query_params(query: str | None = None, limit: int | None = None) -> dict[str, Any]:
        if query is None:
            return {}
        params: dict[str, Any] = {"query": query}
        if limit is not None:
            params["Limit"] = str(limit)
        return params

    # ---- request execution ----

    def _url(self, path: str) -> str:
        if not path.startswith("/"):
            path = "/" + path
        return str(self._base_url).rstrip("/") + path

    async def send(
        self,
        method: str,
        path: str,
        *,
        domain: str | None = None,
        params: Mapping[str, Any] | None = None,
        body: Any = None,
        headers: Mapping[str, str] | None = None,
    ) -> httpx.Response:
        """Send one authenticated request and return the 2xx response.

        Raises the `StatusError` subclass matching a non-2xx status and
        `TransportError` when the request cannot be completed.
        """

        request_headers: dict[str, str] = dict(headers or {})
        await self._auth.apply_auth(request_headers)

        query: dict[str, Any] = {}
        if domain is not None:
            query["domain"] = domain
        if params:
            query.update({k: v for k, v in params.items() if v is not None})

        content: bytes | None = None
        if body is not None:
            try:
                content = json.dumps(body).encode("utf-8")
            except (TypeError, ValueError) as exc:
                raise SerializationError(f"JSON serialization failed: {exc}") from exc
            request_headers.setdefault("Content-Type", "application/json")

        log.debug("HTTP %s %s params=%s", method, path, query)
        try:
            response = await self._http.request(
                method,
                self._url(path),
                params=query or None,
                content=content,
                headers=request_headers,
            )
        except httpx.HTTPError as exc:
            raise TransportError(f"HTTP request failed: {exc}") from exc

        if not response.is_success:
            error = error_for_response(response, path)
            log.debug("HTTP %s %s -> %s", method, path, error)
            raise error
        return response

    async def request(self, method: str, path: str, **kwargs: Any) -> Any:
        """Send a request and return the decoded JSON body (`{}` when empty)."""

        response = await self.send(method, path, **kwargs)
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as exc:
            raise SerializationError(f"JSON deserialization failed: {exc}") from exc

    async def request_model(self, model: type[ModelT], method: str, path: str, **kwargs: Any) -> ModelT:
        payload = await self.request(method, path, **kwargs)
        return parse_model(model, payload)

    async def request_bytes(self, method: str, path: str, **kwargs: Any) -> bytes:
        """Send a request and return the raw response body."""

        response = await self.send(method, path, **kwargs)
        return response.content

    async def about(self) -> dict[str, Any]:
        """Server information (`GET /about`)."""

        return await self.request("GET", "/about")
