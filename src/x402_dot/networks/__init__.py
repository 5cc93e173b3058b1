from .profiles import Endpoint, NetworkProfile, NetworkRegistry, get_network_profile, format_amount
from .health import DEFAULT_HEALTH_TIMEOUT_MS, EndpointHealthChecker, WebSocketHealthChecker
from .resolver import EndpointResolver
from .connection import (
    ConnectionState,
    Disconnected,
    Resolving,
    Connected,
    ConnectionFailed,
    NodeConnection,
)

__all__ = [
    "Endpoint",
    "NetworkProfile",
    "NetworkRegistry",
    "get_network_profile",
    "format_amount",
    "DEFAULT_HEALTH_TIMEOUT_MS",
    "EndpointHealthChecker",
    "WebSocketHealthChecker",
    "EndpointResolver",
    "ConnectionState",
    "Disconnected",
    "Resolving",
    "Connected",
    "ConnectionFailed",
    "NodeConnection",
]
