"""
Endpoint health checks.

A health check proves reachability only: it completes a WebSocket opening
handshake and closes the connection immediately. A node that accepts the
handshake but serves broken RPC responses is reported healthy.
"""

import asyncio
import logging
from abc import ABC, abstractmethod

from websockets.asyncio.client import connect
from websockets.exceptions import WebSocketException

from .profiles import Endpoint

logger = logging.getLogger(__name__)

DEFAULT_HEALTH_TIMEOUT_MS = 5000


class EndpointHealthChecker(ABC):
    """
    Abstract probe of a single endpoint.

    Implementations must never raise: any failure is reported as ``False``.
    """

    @abstractmethod
    async def check(self, endpoint: Endpoint, timeout_ms: int = DEFAULT_HEALTH_TIMEOUT_MS) -> bool:
        """
        Probe ``endpoint`` and report whether it answered within ``timeout_ms``.

        Args:
            endpoint: Node to probe
            timeout_ms: Hard upper bound for the probe, in milliseconds

        Returns:
            bool: True if reachable before the timeout, False otherwise.
        """
        pass


class WebSocketHealthChecker(EndpointHealthChecker):
    """
    Opens a WebSocket connection to the node address and closes it again.

    The connection is always torn down before ``check`` returns, including on
    timeout, so repeated probes do not leak sockets.
    """

    def __init__(self, close_timeout: float = 1.0):
        self._close_timeout = close_timeout

    async def check(self, endpoint: Endpoint, timeout_ms: int = DEFAULT_HEALTH_TIMEOUT_MS) -> bool:
        try:
            return await asyncio.wait_for(self._handshake(endpoint.address), timeout=timeout_ms / 1000)
        except asyncio.TimeoutError:
            logger.warning("Health probe to %s timed out after %d ms", endpoint.address, timeout_ms)
            return False
        except (OSError, WebSocketException, ValueError) as exc:
            logger.warning("Health probe to %s failed: %s", endpoint.address, exc)
            return False

    async def _handshake(self, address: str) -> bool:
        # Leaving the context manager closes the socket; cancellation by
        # wait_for also unwinds through it.
        async with connect(address, open_timeout=None, close_timeout=self._close_timeout):
            return True
