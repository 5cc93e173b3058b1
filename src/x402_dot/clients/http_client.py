"""
HTTP Resource Client

httpx-backed implementation of ResourceClient. It is a plain
httpx.AsyncClient underneath, so it supports every httpx option (timeouts,
transports, base_url) and can be used as an async context manager.
"""

import json
import logging
from typing import Dict, Optional

import httpx

from .bases import ResourceClient
from ..schemas.https import ResourceResponse
from ..engine.exceptions import TransportError

logger = logging.getLogger(__name__)


class HttpResourceClient(httpx.AsyncClient, ResourceClient):
    """
    Extended httpx.AsyncClient returning transport-neutral responses.

    Usage:
        ```python
        async with HttpResourceClient(base_url="http://127.0.0.1:3000") as client:
            response = await client.call("GET", "/api/paid")
        ```
    """

    def __init__(self, base_url: str = "", **kwargs):
        """
        Args:
            base_url: Server URL prepended to relative paths
            **kwargs: All standard httpx.AsyncClient arguments (timeout, transport, etc.)
        """
        super().__init__(base_url=base_url, **kwargs)

    async def call(
        self,
        method: str,
        path: str,
        headers: Optional[Dict[str, str]] = None,
    ) -> ResourceResponse:
        request_headers = {"Content-Type": "application/json"}
        if headers:
            request_headers.update(headers)

        logger.info("Calling %s %s", method, path)
        try:
            response = await self.request(method, path, headers=request_headers)
        except httpx.RequestError as exc:
            logger.error("Request failed: %s", exc)
            raise TransportError(
                f"Request failed: {exc.__class__.__name__}: {exc}",
                method=method,
                url=str(exc.request.url) if _has_request(exc) else path,
            ) from exc

        body = self._decode_body(response)
        if response.is_success:
            logger.info("Response %d: OK", response.status_code)
        else:
            logger.warning("Response %d: %s", response.status_code, _summary(body))

        return ResourceResponse(
            status=response.status_code,
            body=body,
            headers=dict(response.headers),
        )

    @staticmethod
    def _decode_body(response: httpx.Response):
        """JSON value if the body parses as JSON, else text (None when empty)."""
        if not response.content:
            return None
        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            return response.text


def _has_request(exc: httpx.RequestError) -> bool:
    try:
        exc.request
    except RuntimeError:
        return False
    return True


def _summary(body) -> str:
    if isinstance(body, dict):
        return str(body.get("message") or body.get("error") or "")
    return "" if body is None else str(body)[:200]
