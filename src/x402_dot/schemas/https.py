"""
HTTP Request/Response Schema Models for the x402 Payment Protocol

This module defines the Pydantic models exchanged between the client and a
protected resource. The flow consists of:
1. Client calls the protected resource without payment (402 response)
2. Client signs a transfer matching the payment requirements
3. Client retries the call with the signed payload in the ``x-payment`` header
4. Server settles the payment and returns the resource with the transaction hash

Amounts are always integers in the smallest currency unit (plancks).
"""

from typing import Optional, Dict, Any, Union

from pydantic import BaseModel, Field, ConfigDict, field_validator

from .bases import CanonicalModel


PAYMENT_HEADER_NAME = "x-payment"
PAYMENT_REQUIRED_STATUS = 402


# ============================================================================
# Step 1: Server's 402 Payment Required Response
# ============================================================================

class PaymentRequirement(CanonicalModel):
    """Machine-readable payment terms carried by a 402 challenge.

    Attributes:
        recipient: Address that must receive the transfer.
        amount: Exact amount in the smallest currency unit.
        currency: Currency symbol (e.g. "PAS", "DOT").
        network: Network identifier matching a NetworkProfile.
        memo: Optional reference the server wants echoed.
    """
    recipient: str = Field(..., min_length=1, description="Payment recipient address")
    amount: int = Field(..., ge=0, description="Amount in smallest unit")
    currency: str = Field(..., min_length=1, description="Currency symbol")
    network: str = Field(..., min_length=1, description="Network identifier")
    memo: Optional[str] = Field(None, description="Optional memo or reference")

    @field_validator("amount", mode="before")
    @classmethod
    def _exact_integer_amount(cls, value: Any) -> Any:
        # Floats and decimal strings would force rounding, so only exact
        # integers (or their digit-string form) are accepted.
        if isinstance(value, bool):
            raise ValueError("amount must be an integer")
        if isinstance(value, int):
            return value
        if isinstance(value, str) and value.strip().isdigit():
            return int(value.strip())
        raise ValueError("amount must be an integer or a string of digits")


class Server402ResponsePayload(BaseModel):
    """Server response payload for 402 Payment Required status.

    Attributes:
        payment_requirements: Terms the client must satisfy.
        error: Short machine-readable error code.
        message: Human-readable explanation.
    """
    model_config = ConfigDict(populate_by_name=True)

    payment_requirements: PaymentRequirement = Field(
        ...,
        alias="paymentRequirements",
        description="Payment terms for the protected resource"
    )
    error: Optional[str] = Field("PaymentRequired", description="Error code")
    message: Optional[str] = Field(
        "Payment is required to access this resource",
        description="Human-readable explanation"
    )


# ============================================================================
# Step 2: Client's paid retry
# ============================================================================

class ClientPaymentHeader(BaseModel):
    """HTTP headers attached to the paid retry.

    Attributes:
        payment: Encoded signed payload, sent as ``x-payment``.
    """
    model_config = ConfigDict(populate_by_name=True)
    payment: str = Field(..., min_length=1, alias=PAYMENT_HEADER_NAME)

    @classmethod
    def from_signed_payload(cls, signed_payload: Union[str, bytes]) -> "ClientPaymentHeader":
        """Encode raw signature bytes as 0x-prefixed hex; strings pass through."""
        if isinstance(signed_payload, (bytes, bytearray)):
            return cls(payment="0x" + bytes(signed_payload).hex())
        return cls(payment=signed_payload)

    def as_headers(self) -> Dict[str, str]:
        return self.model_dump(by_alias=True)


# ============================================================================
# Step 3: Server's success response
# ============================================================================

class ServerPaidResponse(BaseModel):
    """Success body returned once the payment has settled.

    Only the transaction identifiers are interpreted; any other field is kept
    as-is in ``model_extra`` so it reaches the caller untouched.

    Attributes:
        transaction_hash: Identifier of the settled transaction.
        block_hash: Block the transaction was included in, when reported.
    """
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    transaction_hash: Optional[str] = Field(None, alias="transactionHash")
    block_hash: Optional[str] = Field(None, alias="blockHash")


class ServerErrorResponse(BaseModel):
    """Rejection body returned when a submitted payment is refused."""
    error: str
    message: str


# ============================================================================
# Transport-neutral response returned by ResourceClient.call
# ============================================================================

class ResourceResponse(BaseModel):
    """Status code and decoded body of a protected-resource call.

    ``body`` is the decoded JSON value when the server sent JSON, otherwise the
    raw text.
    """
    status: int
    body: Any = None
    headers: Dict[str, str] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def is_payment_challenge(self) -> bool:
        return self.status == PAYMENT_REQUIRED_STATUS
