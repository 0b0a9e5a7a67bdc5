"""
HTTP transport for the cart endpoints.

The endpoints take classic form posts with bracketed keys, the same shape a
browser form produces:

    {"updates": {"42": 0}}              -> updates[42]=0
    {"properties": {"Engraving": "Hi"}} -> properties[Engraving]=Hi
    {"attributes[gift]": "yes"}         -> attributes[gift]=yes

and answer with JSON. Status 422 means the cart refused the change (usually
stock) and is raised as ``ResourceRejected``.
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Mapping
from typing import Any

import aiohttp

from cartfox.core.exceptions import HttpError, ResourceRejected, TransportFailure
from logging_config import logger

DEFAULT_HEADERS = {
    "Accept": "application/json, text/javascript, */*; q=0.01",
    "X-Requested-With": "XMLHttpRequest",
}


def _scalar(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _flatten(prefix: str, value: Any, pairs: list[tuple[str, str]]) -> None:
    if isinstance(value, Mapping):
        for key, nested in value.items():
            _flatten(f"{prefix}[{key}]", nested, pairs)
    elif isinstance(value, (list, tuple)):
        for index, nested in enumerate(value):
            if isinstance(nested, (Mapping, list, tuple)):
                _flatten(f"{prefix}[{index}]", nested, pairs)
            else:
                pairs.append((f"{prefix}[]", _scalar(nested)))
    else:
        pairs.append((prefix, _scalar(value)))


def encode_form(payload: Mapping[str, Any] | None) -> list[tuple[str, str]]:
    """Flatten a nested payload into ordered form fields with bracket keys."""
    pairs: list[tuple[str, str]] = []
    for key, value in (payload or {}).items():
        _flatten(str(key), value, pairs)
    return pairs


async def _read_body(response: aiohttp.ClientResponse) -> Any:
    text = await response.text()
    if not text.strip():
        return None
    try:
        return json.loads(text)
    except ValueError:
        return text


class AiohttpCartTransport:
    """
    Performs cart calls against a storefront over aiohttp.

    Example:
    ```python
    transport = AiohttpCartTransport("https://shop.example.com")
    cart = await transport.perform_request("GET", "/cart.js", {})
    await transport.close()
    ```
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float | None = None,
        session: aiohttp.ClientSession | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._headers = {**DEFAULT_HEADERS, **dict(headers or {})}
        self._session = session
        self._owns_session = session is None
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._closed:
            raise TransportFailure("transport closed")
        if self._session is None or self._session.closed:
            # total=None disables aiohttp's default five minute limit.
            timeout = aiohttp.ClientTimeout(total=self._timeout)
            self._session = aiohttp.ClientSession(headers=self._headers, timeout=timeout)
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        # A closed transport never reopens a session.
        self._closed = True
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> AiohttpCartTransport:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    async def perform_request(self, method: str, path: str, payload: Mapping[str, Any]) -> Any:
        session = await self._get_session()
        url = self.url_for(path)
        fields = encode_form(payload)
        method = method.upper()

        request_kwargs: dict[str, Any] = {}
        if method == "GET":
            if fields:
                request_kwargs["params"] = fields
        else:
            request_kwargs["data"] = fields

        try:
            async with session.request(method, url, **request_kwargs) as response:
                body = await _read_body(response)
                if response.status == ResourceRejected.STATUS:
                    raise ResourceRejected(payload=body, path=path)
                if response.status >= 400:
                    raise HttpError(response.status, payload=body, path=path)
                logger.debug(f"{method} {path} -> {response.status}")
                return body
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TransportFailure(f"{method} {path} failed: {e!r}") from e


__all__ = ["AiohttpCartTransport", "DEFAULT_HEADERS", "encode_form"]
