"""
Network Profile Configuration

Static registry of the logical networks the client can connect to. Each
profile lists its RPC nodes in failover priority order together with the
explorer used to link accounts and extrinsics.
"""

from decimal import Decimal, InvalidOperation
from typing import Dict, Iterator, List, Optional, Tuple

from pydantic import Field, field_validator

from ..schemas.bases import CanonicalModel
from ..engine.exceptions import UnknownNetwork


class Endpoint(CanonicalModel):
    """A single RPC node address."""
    identifier: str = Field(..., description="Stable identifier, unique within a profile")
    address: str = Field(..., description="WebSocket URL of the node")
    display_name: str = Field(..., description="Human-readable node operator name")


class NetworkProfile(CanonicalModel):
    """Logical network configuration.

    Endpoint order defines failover priority: the resolver always tries
    ``endpoints[0]`` first.
    """
    network_id: str
    display_name: str
    endpoints: Tuple[Endpoint, ...] = Field(..., min_length=1)
    explorer_base_url: str
    currency: str = Field(..., description="Native currency symbol")
    decimals: int = Field(..., ge=0, description="Native currency decimals")

    @field_validator("endpoints")
    @classmethod
    def _unique_identifiers(cls, endpoints: Tuple[Endpoint, ...]) -> Tuple[Endpoint, ...]:
        identifiers = [endpoint.identifier for endpoint in endpoints]
        if len(set(identifiers)) != len(identifiers):
            raise ValueError("endpoint identifiers must be unique within a profile")
        return endpoints

    def account_url(self, address: str) -> str:
        """Explorer page of an account, e.g. the payment recipient."""
        return f"{self.explorer_base_url.rstrip('/')}/account/{address}"

    def extrinsic_url(self, transaction_hash: str) -> str:
        """Explorer page of a settled transaction."""
        return f"{self.explorer_base_url.rstrip('/')}/extrinsic/{transaction_hash}"


# Raw network configuration data, nodes listed in failover priority order.
_NETWORKS_DATA: Dict = {
    "paseo": {
        "display_name": "Paseo Testnet",
        "currency": "PAS",
        "decimals": 10,
        "explorer_base_url": "https://paseo.subscan.io",
        "endpoints": [
            {"identifier": "amforc", "address": "wss://paseo.rpc.amforc.com", "display_name": "Amforc"},
            {"identifier": "dwellir", "address": "wss://paseo-rpc.dwellir.com", "display_name": "Dwellir"},
            {"identifier": "ibp", "address": "wss://rpc.ibp.network/paseo", "display_name": "IBP Network"},
            {"identifier": "dotters", "address": "wss://paseo.dotters.network", "display_name": "Dotters"},
        ],
    },
    "westend": {
        "display_name": "Westend Testnet",
        "currency": "WND",
        "decimals": 12,
        "explorer_base_url": "https://westend.subscan.io",
        "endpoints": [
            {"identifier": "parity", "address": "wss://westend-rpc.polkadot.io", "display_name": "Parity"},
            {"identifier": "amforc", "address": "wss://westend.rpc.amforc.com", "display_name": "Amforc"},
        ],
    },
    "polkadot": {
        "display_name": "Polkadot Mainnet",
        "currency": "DOT",
        "decimals": 10,
        "explorer_base_url": "https://polkadot.subscan.io",
        "endpoints": [
            {"identifier": "parity", "address": "wss://rpc.polkadot.io", "display_name": "Parity"},
            {"identifier": "amforc", "address": "wss://polkadot.rpc.amforc.com", "display_name": "Amforc"},
            {"identifier": "dwellir", "address": "wss://polkadot-rpc.dwellir.com", "display_name": "Dwellir"},
        ],
    },
}


class NetworkRegistry:
    """
    Lookup table from network identifier to NetworkProfile.

    The default registry is built from the static network data; tests and
    integrators can build their own from profiles.
    """

    def __init__(self, profiles: Optional[List[NetworkProfile]] = None):
        if profiles is None:
            profiles = [
                NetworkProfile(network_id=network_id, **data)
                for network_id, data in _NETWORKS_DATA.items()
            ]
        self._profiles: Dict[str, NetworkProfile] = {}
        for profile in profiles:
            self.register(profile)

    def register(self, profile: NetworkProfile) -> None:
        """Add or replace a profile."""
        self._profiles[profile.network_id] = profile

    def get(self, network_id: str) -> NetworkProfile:
        """
        Return the profile for ``network_id``.

        Raises:
            UnknownNetwork: If the identifier is not registered.
        """
        try:
            return self._profiles[network_id]
        except KeyError:
            raise UnknownNetwork(network_id) from None

    def __contains__(self, network_id: object) -> bool:
        return network_id in self._profiles

    def __iter__(self) -> Iterator[NetworkProfile]:
        return iter(self._profiles.values())

    def network_ids(self) -> List[str]:
        return list(self._profiles)


def get_network_profile(network_id: str) -> NetworkProfile:
    """Look up a profile in the default registry."""
    return NetworkRegistry().get(network_id)


def format_amount(*, value: int, decimals: int) -> str:
    """Render a smallest-unit integer in its human-readable denomination.

    Presentation helper only: the negotiator never calls it, amounts on the
    wire stay exact integers.

    Args:
        value: Smallest-unit integer (e.g. 50000000000 plancks).
        decimals: Currency decimals (e.g. 10 for PAS).

    Returns:
        str: Exact decimal string, e.g. "5" or "0.25".

    Raises:
        ValueError: If inputs are invalid.
    """
    if not isinstance(decimals, int) or decimals < 0:
        raise ValueError("decimals must be a non-negative int")
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Invalid value: {value!r}")
    if value < 0:
        raise ValueError("value must be non-negative")

    try:
        amount = Decimal(value).scaleb(-decimals)
    except InvalidOperation as e:
        raise ValueError(f"Invalid value: {value!r}") from e

    text = format(amount, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text
