"""
Abstract Base Class for Transaction Signers

The negotiator never builds or inspects ledger transactions. It hands a
SignRequest to a Signer and transports whatever opaque payload comes back.
Concrete signers (keyring, hardware wallet, remote signing service) live
outside this package and only need to implement ``sign``.
"""

import inspect
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Optional, Union

from ..schemas.outcomes import SignRequest
from ..engine.exceptions import SigningFailed


SignedPayload = Union[str, bytes]


class Signer(ABC):
    """
    Abstract signer of payment transfers.

    Key Responsibilities:
    1. sign: Produce a signed transfer of ``request.amount`` to
       ``request.recipient_address``, encoded as hex string or raw bytes
    2. is_available: Report whether key material and chain context are loaded

    Example Implementation:
        class KeyringSigner(Signer):
            async def sign(self, request):
                nonce = await self.api.account_next_index(self.address)
                return self.keypair.sign_transfer(request.recipient_address, request.amount, nonce)
    """

    @property
    def is_available(self) -> bool:
        """True when the signer can sign right now."""
        return True

    @abstractmethod
    async def sign(self, request: SignRequest) -> SignedPayload:
        """
        Sign a transfer.

        Args:
            request: Recipient and exact smallest-unit amount

        Returns:
            SignedPayload: Hex string or raw bytes of the signed transaction.

        Raises:
            SigningFailed: If key material or context is unavailable.
        """
        pass


class CallableSigner(Signer):
    """
    Adapts a plain function (sync or async) into a Signer.

    Exceptions raised by the function are wrapped in SigningFailed.
    """

    def __init__(
        self,
        sign_func: Callable[[SignRequest], Union[SignedPayload, Awaitable[SignedPayload]]],
        availability: Optional[Callable[[], bool]] = None,
    ):
        self._sign_func = sign_func
        self._availability = availability

    @property
    def is_available(self) -> bool:
        if self._availability is None:
            return True
        return bool(self._availability())

    async def sign(self, request: SignRequest) -> SignedPayload:
        try:
            result = self._sign_func(request)
            if inspect.isawaitable(result):
                result = await result
        except SigningFailed:
            raise
        except Exception as exc:
            raise SigningFailed(f"Transaction signing failed: {exc}") from exc

        if not isinstance(result, (str, bytes, bytearray)) or not result:
            raise SigningFailed("Signer returned an empty or non-binary payload")
        return result
