"""
Client module for x402 payments.

Provides the resource client contract, its httpx implementation, and a
session facade that negotiates payments over a resolved node connection.
"""

from .bases import ResourceClient
from .http_client import HttpResourceClient
from .session import PaymentSession, SignerFactory

__all__ = ["ResourceClient", "HttpResourceClient", "PaymentSession", "SignerFactory"]
