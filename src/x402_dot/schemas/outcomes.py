"""
Signing requests and terminal payment outcomes.

``PaymentOutcome`` is a discriminated union: pydantic selects the concrete
model from the ``outcome`` field, and callers branch with ``isinstance``.
"""

from typing import Any, Literal, Optional, Union

from typing_extensions import Annotated
from pydantic import Field

from .bases import CanonicalModel
from .https import PaymentRequirement


class SignRequest(CanonicalModel):
    """Transfer the signer is asked to authorize.

    Attributes:
        recipient_address: Destination of the transfer.
        amount: Exact amount in the smallest currency unit.
    """
    recipient_address: str = Field(..., min_length=1)
    amount: int = Field(..., ge=0)

    @classmethod
    def from_requirement(cls, requirement: PaymentRequirement) -> "SignRequest":
        return cls(recipient_address=requirement.recipient, amount=requirement.amount)


class PaymentSuccess(CanonicalModel):
    """Resource granted access.

    ``transaction_hash`` is None when no payment was needed, or when the
    server did not report one.
    """
    outcome: Literal["success"] = "success"
    http_status: int = 200
    transaction_hash: Optional[str] = None
    block_hash: Optional[str] = None
    body: Any = None
    paid: bool = False


class PaymentFailed(CanonicalModel):
    """Resource answered with a definitive rejection; body is verbatim."""
    outcome: Literal["failed"] = "failed"
    http_status: int
    body: Any = None


class PaymentError(CanonicalModel):
    """No response was obtained.

    ``payment_status_unknown`` is True when the failure happened after the
    signed payload was handed to the transport: the payment may or may not
    have been accepted.
    """
    outcome: Literal["error"] = "error"
    cause: str
    payment_status_unknown: bool = False


PaymentOutcome = Annotated[
    Union[PaymentSuccess, PaymentFailed, PaymentError],
    Field(discriminator="outcome")
]
