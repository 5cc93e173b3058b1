"""
Reference protected-resource server.
"""

from .apps import Http402Server, PaymentSettler

__all__ = ["Http402Server", "PaymentSettler"]
