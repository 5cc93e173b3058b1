"""
Endpoint failover.

Selects the first reachable node of a network by probing candidates in
priority order. Nothing is cached: every ``resolve`` starts again from the top
of the list, so a recovered high-priority node is picked up on the next call.
"""

import asyncio
import logging
from typing import List, Optional

from .health import DEFAULT_HEALTH_TIMEOUT_MS, EndpointHealthChecker, WebSocketHealthChecker
from .profiles import Endpoint, NetworkProfile, NetworkRegistry
from ..engine.events import EventBus, EndpointProbedEvent, EndpointSelectedEvent
from ..engine.exceptions import NoHealthyEndpoint

logger = logging.getLogger(__name__)


class EndpointResolver:
    """
    Picks the live endpoint of a network.

    Usage:
        ```python
        resolver = EndpointResolver()
        endpoint = await resolver.resolve("paseo")
        ```
    """

    def __init__(
        self,
        registry: Optional[NetworkRegistry] = None,
        health_checker: Optional[EndpointHealthChecker] = None,
        timeout_ms: int = DEFAULT_HEALTH_TIMEOUT_MS,
        event_bus: Optional[EventBus] = None,
    ):
        """
        Args:
            registry: Network profiles to resolve against (default: built-in networks)
            health_checker: Probe implementation (default: WebSocket handshake)
            timeout_ms: Per-probe timeout in milliseconds
            event_bus: Optional bus receiving probe progress events
        """
        if timeout_ms <= 0:
            raise ValueError("timeout_ms must be positive")
        self.registry = registry or NetworkRegistry()
        self.health_checker = health_checker or WebSocketHealthChecker()
        self.timeout_ms = timeout_ms
        self.event_bus = event_bus

    async def resolve(self, network_id: str, *, parallel: bool = False) -> Endpoint:
        """
        Return the highest-priority healthy endpoint of ``network_id``.

        Sequential mode probes one endpoint at a time and stops at the first
        healthy one. Parallel mode probes all endpoints at once but still
        returns the lowest-index healthy endpoint, whichever answered first.

        Raises:
            UnknownNetwork: If the network is not registered.
            NoHealthyEndpoint: If every endpoint failed its probe.
        """
        profile = self.registry.get(network_id)
        logger.info("Finding healthy node for %s...", profile.display_name)

        if parallel:
            endpoint = await self._resolve_parallel(profile)
        else:
            endpoint = await self._resolve_sequential(profile)

        if endpoint is None:
            logger.error("No healthy nodes found for %s", profile.display_name)
            raise NoHealthyEndpoint(
                profile.network_id,
                profile.display_name,
                [e.identifier for e in profile.endpoints],
            )

        logger.info("Using %s (%s)", endpoint.display_name, endpoint.address)
        await self._publish(EndpointSelectedEvent(network_id=profile.network_id, endpoint=endpoint))
        return endpoint

    async def _resolve_sequential(self, profile: NetworkProfile) -> Optional[Endpoint]:
        for position, endpoint in enumerate(profile.endpoints):
            logger.info("Checking %s...", endpoint.display_name)
            if await self._probe(profile, position, endpoint):
                return endpoint
        return None

    async def _resolve_parallel(self, profile: NetworkProfile) -> Optional[Endpoint]:
        results: List[bool] = await asyncio.gather(*(
            self._probe(profile, position, endpoint)
            for position, endpoint in enumerate(profile.endpoints)
        ))
        for endpoint, healthy in zip(profile.endpoints, results):
            if healthy:
                return endpoint
        return None

    async def _probe(self, profile: NetworkProfile, position: int, endpoint: Endpoint) -> bool:
        healthy = await self.health_checker.check(endpoint, self.timeout_ms)
        if not healthy:
            logger.warning("%s is down", endpoint.display_name)
        await self._publish(EndpointProbedEvent(
            network_id=profile.network_id,
            endpoint=endpoint,
            position=position,
            healthy=healthy,
        ))
        return healthy

    async def _publish(self, event) -> None:
        if self.event_bus is not None:
            await self.event_bus.publish(event)
