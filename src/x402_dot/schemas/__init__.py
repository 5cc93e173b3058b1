from .bases import CanonicalModel
from .https import (
    PAYMENT_HEADER_NAME,
    PAYMENT_REQUIRED_STATUS,
    PaymentRequirement,
    Server402ResponsePayload,
    ClientPaymentHeader,
    ServerPaidResponse,
    ServerErrorResponse,
    ResourceResponse,
)
from .outcomes import SignRequest, PaymentSuccess, PaymentFailed, PaymentError, PaymentOutcome

__all__ = [
    "CanonicalModel",
    "PAYMENT_HEADER_NAME",
    "PAYMENT_REQUIRED_STATUS",
    "PaymentRequirement",
    "Server402ResponsePayload",
    "ClientPaymentHeader",
    "ServerPaidResponse",
    "ServerErrorResponse",
    "ResourceResponse",
    "SignRequest",
    "PaymentSuccess",
    "PaymentFailed",
    "PaymentError",
    "PaymentOutcome",
]
