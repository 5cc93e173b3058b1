"""
Live node connection state.

``NodeConnection`` owns the ConnectionState lifecycle:
Disconnected -> Resolving -> Connected | Failed. A connection never
re-resolves on its own; call ``connect()`` again to pick a node afresh.
"""

import asyncio
import logging
from typing import Literal, Optional, Union

from typing_extensions import Annotated
from pydantic import Field

from .profiles import Endpoint, NetworkProfile
from .resolver import EndpointResolver
from ..schemas.bases import CanonicalModel
from ..engine.exceptions import NotConnected

logger = logging.getLogger(__name__)


class Disconnected(CanonicalModel):
    state: Literal["disconnected"] = "disconnected"


class Resolving(CanonicalModel):
    state: Literal["resolving"] = "resolving"
    network_id: str


class Connected(CanonicalModel):
    state: Literal["connected"] = "connected"
    network_id: str
    endpoint: Endpoint


class ConnectionFailed(CanonicalModel):
    state: Literal["failed"] = "failed"
    network_id: str
    reason: str


ConnectionState = Annotated[
    Union[Disconnected, Resolving, Connected, ConnectionFailed],
    Field(discriminator="state")
]


class NodeConnection:
    """
    Holder of the session's live endpoint.

    Usage:
        ```python
        connection = NodeConnection()
        endpoint = await connection.connect("paseo")
        connection.profile.account_url(recipient)
        ```
    """

    def __init__(self, resolver: Optional[EndpointResolver] = None):
        self.resolver = resolver or EndpointResolver()
        self._state: ConnectionState = Disconnected()
        self._profile: Optional[NetworkProfile] = None

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def is_connected(self) -> bool:
        return isinstance(self._state, Connected)

    @property
    def endpoint(self) -> Endpoint:
        """
        The live endpoint.

        Raises:
            NotConnected: Unless the state is Connected.
        """
        if not isinstance(self._state, Connected):
            raise NotConnected(f"No live endpoint (state: {self._state.state})")
        return self._state.endpoint

    @property
    def profile(self) -> NetworkProfile:
        if self._profile is None or not self.is_connected:
            raise NotConnected(f"No live endpoint (state: {self._state.state})")
        return self._profile

    async def connect(self, network_id: str, *, parallel: bool = False) -> Endpoint:
        """
        Resolve a live endpoint for ``network_id``.

        On any failure the state becomes Failed and the error is re-raised;
        cancellation returns to Disconnected.

        Raises:
            UnknownNetwork: If the network is not registered.
            NoHealthyEndpoint: If no node answered.
        """
        self._state = Resolving(network_id=network_id)
        self._profile = None
        try:
            endpoint = await self.resolver.resolve(network_id, parallel=parallel)
        except asyncio.CancelledError:
            self._state = Disconnected()
            raise
        except Exception as exc:
            self._state = ConnectionFailed(network_id=network_id, reason=str(exc) or exc.__class__.__name__)
            raise

        self._profile = self.resolver.registry.get(network_id)
        self._state = Connected(network_id=network_id, endpoint=endpoint)
        logger.info("Connected to %s via %s", self._profile.display_name, endpoint.display_name)
        return endpoint

    def disconnect(self) -> None:
        self._state = Disconnected()
        self._profile = None
