"""
Signer contract consumed by the payment negotiator.
"""

from .bases import Signer, CallableSigner, SignedPayload

__all__ = ["Signer", "CallableSigner", "SignedPayload"]
