"""
REST HTTP client for the Janus gateway.

A single ``httpx.AsyncClient`` is shared by foreground calls and every
long-poll task; httpx allows concurrent requests on one client.
"""

import json
from typing import Any, Optional

import httpx

from janus_http.errors import DecodeError, TransportError

DEFAULT_BASE_URL = "http://localhost:8088/janus"
DEFAULT_TIMEOUT = 30.0
DEFAULT_LONG_POLL_TIMEOUT = 60.0


class HttpClient:
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=f"{self._base_url}/",
            headers={"User-Agent": "janus-http/0.1.0", "Accept": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    @staticmethod
    def _decode(resp: httpx.Response) -> Any:
        """Decode a JSON body; an empty body decodes to None."""
        if not resp.is_success:
            raise TransportError(f"HTTP {resp.status_code}: {resp.text[:200]}", status_code=resp.status_code)
        if not resp.content.strip():
            return None
        try:
            return json.loads(resp.content)
        except ValueError as e:
            raise DecodeError(f"Invalid JSON from {resp.request.url}: {e}", details={"body": resp.text[:200]})

    async def get(
        self,
        path: str,
        params: Optional[dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> Any:
        kwargs: dict[str, Any] = {"params": params}
        if timeout is not None:
            kwargs["timeout"] = timeout
        try:
            resp = await self._client.get(path, **kwargs)
        except httpx.HTTPError as e:
            raise TransportError(f"GET {path or '/'} failed: {e!r}")
        return self._decode(resp)

    async def post(self, path: str, body: dict[str, Any]) -> Any:
        try:
            resp = await self._client.post(path, json=body)
        except httpx.HTTPError as e:
            raise TransportError(f"POST {path or '/'} failed: {e!r}")
        return self._decode(resp)

    async def close(self) -> None:
        await self._client.aclose()
