"""
Exception and Error Definitions Module

Defines the exception hierarchy for node selection and payment negotiation.
Every failure the core can produce is one of these types, so callers can
react to each case (re-prompt for payment, pick another network) without
inspecting messages.

Exception Hierarchy:
    X402Error (root)
    ├── ConfigurationError
    │   └── UnknownNetwork
    ├── EndpointError
    │   ├── NoHealthyEndpoint
    │   └── NotConnected
    ├── NegotiationError
    │   ├── MalformedChallenge
    │   ├── SignerUnavailable
    │   ├── SigningFailed
    │   ├── NegotiationInProgress
    │   └── SubmissionInFlight
    ├── InvalidTransition
    ├── PaymentRejected
    └── TransportError
"""

from typing import Optional


class X402Error(Exception):
    """
    Root exception class for all project-specific exceptions.
    """
    pass


class ConfigurationError(X402Error):
    """
    Raised when configuration is missing or invalid.

    This includes scenarios such as:
    - Invalid environment variable values
    - A network identifier with no registered profile
    """
    pass


class UnknownNetwork(ConfigurationError):
    """
    Raised when a network identifier has no registered NetworkProfile.

    Attributes:
        network_id: The identifier that was looked up
    """

    def __init__(self, network_id: str):
        self.network_id = network_id
        super().__init__(f"Unknown network: {network_id}")


class EndpointError(X402Error):
    """
    Base exception for node selection and connection errors.
    """
    pass


class NoHealthyEndpoint(EndpointError):
    """
    Raised when every candidate endpoint of a network fails its health check.

    Attributes:
        network_id: Network whose endpoints were probed
        attempted: Identifiers of the probed endpoints, in probe order
    """

    def __init__(self, network_id: str, display_name: str, attempted: list[str]):
        self.network_id = network_id
        self.attempted = list(attempted)
        super().__init__(f"No healthy nodes found for {display_name}")


class NotConnected(EndpointError):
    """
    Raised when the live endpoint is requested before a successful connect().
    """
    pass


class NegotiationError(X402Error):
    """
    Base exception for payment negotiation failures.

    Parent class for all errors raised by the PaymentNegotiator.
    """
    pass


class MalformedChallenge(NegotiationError):
    """
    Raised when a 402 response does not carry a usable PaymentRequirement.

    This includes scenarios such as:
    - Body is not JSON or not an object
    - ``paymentRequirements`` is missing
    - ``amount`` is not an exact non-negative integer

    Attributes:
        body: The challenge body as received
    """

    def __init__(self, message: str, body: object = None):
        self.body = body
        super().__init__(message)


class SignerUnavailable(NegotiationError):
    """
    Raised when a payment is confirmed but no connected signer exists.

    The negotiator stays in the PaymentRequired state, so the payment can be
    confirmed again once a signer is attached.
    """
    pass


class SigningFailed(NegotiationError):
    """
    Raised when the signer cannot produce a signed payload.

    This includes scenarios such as:
    - Key material not loaded
    - Account nonce could not be fetched
    - Signing backend raised

    The pending PaymentRequirement is preserved.
    """
    pass


class NegotiationInProgress(NegotiationError):
    """
    Raised when a second operation is started while one is still in flight,
    or a new challenge is requested while a payment is pending.
    """
    pass


class SubmissionInFlight(NegotiationError):
    """
    Raised when a negotiation is abandoned while the signed payment is being
    submitted. The payment may already have been accepted by the server, so
    its status is unknown.
    """
    pass


class InvalidTransition(X402Error):
    """
    Raised when an operation is not valid for the negotiator's current state.

    The most common case is a second pay() on a requirement that was already
    settled: a fresh challenge cycle is required instead.

    Attributes:
        current_state: State the negotiator was in
        operation: Operation that was attempted
    """

    def __init__(self, current_state: object, operation: str):
        self.current_state = current_state
        self.operation = operation
        super().__init__(f"Cannot {operation} while in state {current_state}")


class PaymentRejected(X402Error):
    """
    Raised by a server-side settler when a submitted payment is refused.

    This includes scenarios such as:
    - Transfer amount or recipient does not match the requirement
    - Extrinsic failed on-chain

    Attributes:
        reason: Machine-readable rejection code returned to the client
    """

    def __init__(self, message: str, reason: str = "PaymentVerificationFailed"):
        self.reason = reason
        super().__init__(message)


class TransportError(X402Error):
    """
    Raised when a request never produced an HTTP response.

    This includes scenarios such as:
    - DNS resolution failure
    - Connection refused
    - Request timeout

    Attributes:
        method: HTTP method of the failed call
        url: Target of the failed call
    """

    def __init__(self, message: str, method: Optional[str] = None, url: Optional[str] = None):
        self.method = method
        self.url = url
        super().__init__(message)
