"""
Public facade for the x402-dot package.

Re-exports the pieces integrators need so they can ``from x402_dot import ...``
without navigating the package.
"""

from .schemas import (
    PAYMENT_HEADER_NAME,
    PaymentRequirement,
    ResourceResponse,
    SignRequest,
    PaymentSuccess,
    PaymentFailed,
    PaymentError,
    PaymentOutcome,
)
from .engine.exceptions import (
    X402Error,
    ConfigurationError,
    UnknownNetwork,
    NoHealthyEndpoint,
    NotConnected,
    MalformedChallenge,
    SignerUnavailable,
    SigningFailed,
    NegotiationInProgress,
    SubmissionInFlight,
    InvalidTransition,
    PaymentRejected,
    TransportError,
)
from .networks import (
    Endpoint,
    NetworkProfile,
    NetworkRegistry,
    EndpointHealthChecker,
    WebSocketHealthChecker,
    EndpointResolver,
    NodeConnection,
    ConnectionState,
)
from .signers import Signer, CallableSigner
from .clients import ResourceClient, HttpResourceClient, PaymentSession
from .engine.negotiator import NegotiationState, PaymentNegotiator
from .engine.events import EventBus
from .config import ClientSettings, load_settings, setup_logging

__all__ = (
    "PAYMENT_HEADER_NAME",
    "PaymentRequirement",
    "ResourceResponse",
    "SignRequest",
    "PaymentSuccess",
    "PaymentFailed",
    "PaymentError",
    "PaymentOutcome",
    "X402Error",
    "ConfigurationError",
    "UnknownNetwork",
    "NoHealthyEndpoint",
    "NotConnected",
    "MalformedChallenge",
    "SignerUnavailable",
    "SigningFailed",
    "NegotiationInProgress",
    "SubmissionInFlight",
    "InvalidTransition",
    "PaymentRejected",
    "TransportError",
    "Endpoint",
    "NetworkProfile",
    "NetworkRegistry",
    "EndpointHealthChecker",
    "WebSocketHealthChecker",
    "EndpointResolver",
    "NodeConnection",
    "ConnectionState",
    "Signer",
    "CallableSigner",
    "ResourceClient",
    "HttpResourceClient",
    "PaymentSession",
    "NegotiationState",
    "PaymentNegotiator",
    "EventBus",
    "ClientSettings",
    "load_settings",
    "setup_logging",
)
