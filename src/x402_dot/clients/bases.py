"""
Abstract Base Class for Resource Clients

A ResourceClient performs one request against the protected server and
reports the status and body. Non-2xx answers are normal results; only a
failure to obtain any answer is an exception.
"""

from abc import ABC, abstractmethod
from typing import Dict, Optional

from ..schemas.https import ResourceResponse


class ResourceClient(ABC):
    """Performs single requests against the protected-resource server."""

    @abstractmethod
    async def call(
        self,
        method: str,
        path: str,
        headers: Optional[Dict[str, str]] = None,
    ) -> ResourceResponse:
        """
        Perform one request.

        Args:
            method: HTTP method (GET, POST, etc.)
            path: Resource path or absolute URL
            headers: Extra headers, e.g. the ``x-payment`` proof

        Returns:
            ResourceResponse with status and decoded body, for any status code.

        Raises:
            TransportError: On DNS failure, refused connection or timeout.
        """
        pass
