"""
X402 Protected Resource Server - FastAPI reference implementation.

Serves the server side of the payment protocol: a free endpoint, a health
endpoint, and a paid endpoint that answers 402 until a signed payment is
attached in the ``x-payment`` header. Settlement is delegated to an injected
async settler (typically a facilitator client).
"""

import logging
from typing import Awaitable, Callable, Optional

from fastapi import FastAPI, Header
from fastapi.responses import JSONResponse

from ..schemas.https import (
    PAYMENT_REQUIRED_STATUS,
    PaymentRequirement,
    Server402ResponsePayload,
    ServerErrorResponse,
)
from ..engine.exceptions import PaymentRejected

logger = logging.getLogger(__name__)

PaymentSettler = Callable[[str, PaymentRequirement], Awaitable[str]]


class Http402Server(FastAPI):
    """FastAPI server with a payment-protected endpoint."""

    def __init__(
        self,
        requirement: PaymentRequirement,
        settler: PaymentSettler,
        *,
        paid_path: str = "/api/paid",
        protected_data: str = "This is protected content that requires payment",
        **fastapi_kwargs
    ):
        """Initialize the protected resource server.

        Args:
            requirement: Terms announced in every 402 challenge
            settler: Async function(signed_payload, requirement) -> transaction hash.
                Raises PaymentRejected when the payment is refused.
            paid_path: Path of the protected endpoint
            protected_data: Payload served once paid
            **fastapi_kwargs: FastAPI arguments (title, version, etc.)
        """
        super().__init__(**fastapi_kwargs)
        self.requirement = requirement
        self.settler = settler
        self.paid_path = paid_path
        self.protected_data = protected_data
        self._setup_routes()

    def _setup_routes(self) -> None:
        @self.get("/api/health")
        async def health():
            logger.info("Health check requested")
            return {"status": "ok", "network": self.requirement.network}

        @self.get("/api/free")
        async def free():
            logger.info("Free endpoint accessed")
            return {
                "message": "This is a free endpoint",
                "data": "No payment required to access this data",
            }

        @self.get(self.paid_path)
        async def paid(x_payment: Optional[str] = Header(None)):
            logger.info("Paid endpoint accessed")
            if not x_payment:
                logger.info("No payment header found, returning 402 Payment Required")
                return self._payment_required()
            return await self._settle(x_payment)

    def _payment_required(self) -> JSONResponse:
        payload = Server402ResponsePayload(payment_requirements=self.requirement)
        return JSONResponse(
            status_code=PAYMENT_REQUIRED_STATUS,
            content=payload.model_dump(mode="json", by_alias=True),
        )

    async def _settle(self, signed_payload: str) -> JSONResponse:
        logger.info("Payment header found, verifying payment")
        try:
            tx_hash = await self.settler(signed_payload, self.requirement)
        except PaymentRejected as exc:
            logger.warning("Payment verification/settlement failed: %s", exc)
            return JSONResponse(
                status_code=400,
                content=ServerErrorResponse(error=exc.reason, message=str(exc)).model_dump(),
            )

        logger.info("Payment successful - Transaction Hash: %s", tx_hash)
        return JSONResponse(
            status_code=200,
            content={
                "message": "Payment successful",
                "data": self.protected_data,
                "transaction_hash": tx_hash,
            },
        )
