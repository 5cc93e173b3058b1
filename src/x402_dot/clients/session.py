"""
Payment session facade.

Wires the pieces together for the common case: resolve a live node once per
session, build the signer against it, and negotiate payments for protected
resources over one HTTP client.
"""

import logging
from typing import Callable, Dict, Optional, Union

import httpx

from .bases import ResourceClient
from .http_client import HttpResourceClient
from ..config import ClientSettings, load_settings
from ..engine.events import EventBus
from ..engine.negotiator import PaymentNegotiator
from ..networks.connection import NodeConnection
from ..networks.profiles import Endpoint
from ..networks.resolver import EndpointResolver
from ..schemas.https import PaymentRequirement
from ..schemas.outcomes import PaymentOutcome
from ..signers.bases import Signer

logger = logging.getLogger(__name__)

SignerFactory = Callable[[Endpoint], Signer]


class PaymentSession:
    """
    One connection, one HTTP client, one negotiator per protected path.

    Usage:
        ```python
        async with PaymentSession(signer_factory=make_keyring_signer) as session:
            await session.connect()
            outcome = await session.fetch()
        ```
    """

    def __init__(
        self,
        settings: Optional[ClientSettings] = None,
        *,
        signer: Optional[Signer] = None,
        signer_factory: Optional[SignerFactory] = None,
        connection: Optional[NodeConnection] = None,
        client: Optional[ResourceClient] = None,
        event_bus: Optional[EventBus] = None,
    ):
        """
        Args:
            settings: Client settings (default: loaded from the environment)
            signer: Ready signer; ignored once ``signer_factory`` produced one
            signer_factory: Builds the signer from the connected endpoint on connect()
            connection: Node connection (default: resolver built from settings)
            client: Resource client (default: HttpResourceClient on settings.server_url)
            event_bus: Bus shared by the resolver and every negotiator
        """
        self.settings = settings or load_settings()
        self.event_bus = event_bus
        self.connection = connection or NodeConnection(
            EndpointResolver(timeout_ms=self.settings.health_timeout_ms, event_bus=event_bus)
        )
        self._owns_client = client is None
        self.client = client or HttpResourceClient(
            base_url=self.settings.server_url,
            timeout=httpx.Timeout(self.settings.request_timeout),
        )
        self._signer = signer
        self._signer_factory = signer_factory
        self._negotiators: Dict[str, PaymentNegotiator] = {}

    async def __aenter__(self) -> "PaymentSession":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client and isinstance(self.client, httpx.AsyncClient):
            await self.client.aclose()

    @property
    def signer(self) -> Optional[Signer]:
        return self._signer

    async def connect(self, network_id: Optional[str] = None, *, parallel: bool = False) -> Endpoint:
        """
        Resolve the live node and, with a signer factory, build the signer on it.

        Raises:
            UnknownNetwork: If the network is not registered.
            NoHealthyEndpoint: If no node answered.
        """
        endpoint = await self.connection.connect(network_id or self.settings.network, parallel=parallel)
        if self._signer_factory is not None:
            self._signer = self._signer_factory(endpoint)
            for negotiator in self._negotiators.values():
                negotiator.attach_signer(self._signer)
        return endpoint

    def negotiator(self, path: Optional[str] = None, method: str = "GET") -> PaymentNegotiator:
        """Negotiator for ``path``; the same instance is returned on every call."""
        path = path or self.settings.paid_path
        key = f"{method.upper()} {path}"
        if key not in self._negotiators:
            self._negotiators[key] = PaymentNegotiator(
                self.client,
                path,
                signer=self._signer,
                method=method,
                event_bus=self.event_bus,
            )
        return self._negotiators[key]

    async def fetch(
        self,
        path: Optional[str] = None,
        *,
        method: str = "GET",
        auto_pay: bool = True,
    ) -> Union[PaymentRequirement, PaymentOutcome]:
        """
        Start a fresh negotiation cycle for ``path``.

        With ``auto_pay=False`` a challenge is returned as PaymentRequirement;
        confirm it with ``session.negotiator(path).pay()``.
        """
        return await self.negotiator(path, method).negotiate(auto_pay=auto_pay)
