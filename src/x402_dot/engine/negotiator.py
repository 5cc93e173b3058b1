"""
HTTP 402 payment negotiation.

Drives one protected resource through the challenge-response cycle:

    IDLE -> AWAITING_CHALLENGE -> PAYMENT_REQUIRED -> SIGNING -> SUBMITTING -> SETTLED

A requirement is signed at most once and submitted at most once. Nothing is
retried automatically: after SETTLED, a new cycle starts with ``request()``.
"""

import asyncio
import logging
from contextlib import contextmanager
from enum import Enum
from typing import Any, Iterator, Optional, Union

from pydantic import ValidationError

from .events import EventBus, StateChangedEvent
from .exceptions import (
    InvalidTransition,
    MalformedChallenge,
    NegotiationInProgress,
    SignerUnavailable,
    SigningFailed,
    SubmissionInFlight,
    TransportError,
)
from ..clients.bases import ResourceClient
from ..schemas.https import (
    ClientPaymentHeader,
    PaymentRequirement,
    Server402ResponsePayload,
    ServerPaidResponse,
)
from ..schemas.outcomes import (
    PaymentError,
    PaymentFailed,
    PaymentOutcome,
    PaymentSuccess,
    SignRequest,
)
from ..signers.bases import Signer

logger = logging.getLogger(__name__)


class NegotiationState(str, Enum):
    """
    Negotiation lifecycle states.

    Attributes:
        IDLE: No negotiation started, or the last one was abandoned
        AWAITING_CHALLENGE: Unpaid request in flight
        PAYMENT_REQUIRED: Challenge received, requirement pending confirmation
        SIGNING: Signer is producing the payment payload
        SUBMITTING: Paid retry in flight
        SETTLED: Terminal, see ``PaymentNegotiator.outcome``
    """
    IDLE = "idle"
    AWAITING_CHALLENGE = "awaiting_challenge"
    PAYMENT_REQUIRED = "payment_required"
    SIGNING = "signing"
    SUBMITTING = "submitting"
    SETTLED = "settled"


class PaymentNegotiator:
    """
    Challenge-response payment state machine for a single protected resource.

    Usage:
        ```python
        negotiator = PaymentNegotiator(client, "/api/paid", signer=signer)
        outcome = await negotiator.negotiate()
        if isinstance(outcome, PaymentSuccess):
            print(outcome.transaction_hash)
        ```

    Two-step usage, confirming the payment explicitly:
        ```python
        requirement = await negotiator.request()
        if isinstance(requirement, PaymentRequirement):
            outcome = await negotiator.pay()
        ```
    """

    def __init__(
        self,
        client: ResourceClient,
        path: str,
        *,
        signer: Optional[Signer] = None,
        method: str = "GET",
        event_bus: Optional[EventBus] = None,
    ):
        """
        Args:
            client: Performs the unpaid and paid calls
            path: Protected resource path
            signer: Payment signer; may be attached later with ``attach_signer``
            method: HTTP method of the protected resource
            event_bus: Optional bus receiving StateChangedEvent
        """
        self.client = client
        self.path = path
        self.method = method.upper()
        self.event_bus = event_bus
        self._signer = signer
        self._state = NegotiationState.IDLE
        self._requirement: Optional[PaymentRequirement] = None
        self._outcome: Optional[PaymentOutcome] = None
        self._busy = False

    # =========================================================================
    # Introspection
    # =========================================================================

    @property
    def state(self) -> NegotiationState:
        return self._state

    @property
    def requirement(self) -> Optional[PaymentRequirement]:
        """Pending requirement; None once it has been submitted."""
        return self._requirement

    @property
    def outcome(self) -> Optional[PaymentOutcome]:
        """Terminal outcome of the last cycle, if it settled."""
        return self._outcome

    @property
    def signer(self) -> Optional[Signer]:
        return self._signer

    def attach_signer(self, signer: Optional[Signer]) -> None:
        self._signer = signer

    # =========================================================================
    # Protocol steps
    # =========================================================================

    async def negotiate(self, *, auto_pay: bool = True) -> Union[PaymentRequirement, PaymentOutcome]:
        """
        Run a full cycle: request the resource and, on a challenge, pay.

        With ``auto_pay=False`` the pending PaymentRequirement is returned so
        the caller can confirm it with ``pay()``.
        """
        result = await self.request()
        if auto_pay and isinstance(result, PaymentRequirement):
            return await self.pay()
        return result

    async def request(self) -> Union[PaymentRequirement, PaymentOutcome]:
        """
        Call the protected resource without payment.

        Returns:
            PaymentRequirement when the resource answered with a challenge,
            otherwise the terminal PaymentOutcome.

        Raises:
            NegotiationInProgress: If an operation is in flight or a payment is pending.
            MalformedChallenge: If the 402 body carries no usable requirement.
                The negotiator is back in IDLE.
        """
        with self._exclusive():
            if self._state == NegotiationState.PAYMENT_REQUIRED:
                raise NegotiationInProgress(
                    "A payment requirement is pending; pay() or reset() first"
                )
            if self._state not in (NegotiationState.IDLE, NegotiationState.SETTLED):
                raise InvalidTransition(self._state.value, "request")

            self._requirement = None
            self._outcome = None
            await self._transition(NegotiationState.AWAITING_CHALLENGE)

            try:
                response = await self.client.call(self.method, self.path)
            except TransportError as exc:
                return await self._settle(PaymentError(cause=str(exc)))
            except asyncio.CancelledError:
                self._state = NegotiationState.IDLE
                raise
            except Exception as exc:
                logger.exception("Request failed")
                return await self._settle(PaymentError(cause=f"{exc.__class__.__name__}: {exc}"))

            if not response.is_payment_challenge:
                if response.ok:
                    return await self._settle(PaymentSuccess(
                        http_status=response.status,
                        body=response.body,
                    ))
                return await self._settle(PaymentFailed(
                    http_status=response.status,
                    body=response.body,
                ))

            try:
                requirement = self._parse_challenge(response.body)
            except MalformedChallenge:
                await self._transition(NegotiationState.IDLE)
                raise

            logger.warning(
                "Payment required: %s %s to %s on %s",
                requirement.amount, requirement.currency, requirement.recipient, requirement.network,
            )
            logger.debug("Requirement: %s", requirement.to_canonical_json())
            self._requirement = requirement
            await self._transition(NegotiationState.PAYMENT_REQUIRED)
            return requirement

    async def pay(self) -> PaymentOutcome:
        """
        Sign the pending requirement and submit the paid retry, exactly once.

        Returns:
            PaymentSuccess, PaymentFailed, or PaymentError. A PaymentError with
            ``payment_status_unknown=True`` means the payload may have reached
            the server.

        Raises:
            InvalidTransition: If no requirement is pending (for instance a
                second pay() after the requirement was submitted).
            SignerUnavailable: If no connected signer exists. State is unchanged.
            SigningFailed: If signing failed. The requirement is preserved and
                pay() may be called again.
        """
        with self._exclusive():
            requirement = self._requirement
            if self._state != NegotiationState.PAYMENT_REQUIRED or requirement is None:
                raise InvalidTransition(self._state.value, "pay")

            signer = self._signer
            if signer is None or not signer.is_available:
                logger.error("Wallet not connected")
                raise SignerUnavailable("No connected signer to authorize the payment")

            header = await self._sign(signer, requirement)

            # The requirement is single-use from here on.
            self._requirement = None
            try:
                await self._transition(NegotiationState.SUBMITTING, requirement)
                logger.info("Submitting payment")
                response = await self.client.call(self.method, self.path, headers=header.as_headers())
            except TransportError as exc:
                logger.error("Payment submission failed, status unknown: %s", exc)
                return await self._settle(PaymentError(cause=str(exc), payment_status_unknown=True))
            except asyncio.CancelledError:
                self._outcome = PaymentError(
                    cause="Cancelled while the payment was being submitted",
                    payment_status_unknown=True,
                )
                self._state = NegotiationState.SETTLED
                raise
            except Exception as exc:
                logger.exception("Payment submission failed, status unknown")
                return await self._settle(PaymentError(
                    cause=f"{exc.__class__.__name__}: {exc}",
                    payment_status_unknown=True,
                ))

            if response.ok:
                paid = self._parse_paid_body(response.body)
                logger.info("Payment successful")
                logger.info("Tx: %s", paid.transaction_hash)
                return await self._settle(PaymentSuccess(
                    http_status=response.status,
                    transaction_hash=paid.transaction_hash,
                    block_hash=paid.block_hash,
                    body=response.body,
                    paid=True,
                ))

            if response.is_payment_challenge:
                logger.warning("Paid retry was challenged again; not renegotiating")
            else:
                logger.error("Payment failed")
            return await self._settle(PaymentFailed(http_status=response.status, body=response.body))

    def reset(self) -> None:
        """
        Abandon the current negotiation and return to IDLE.

        Raises:
            SubmissionInFlight: While the paid retry is in flight.
            NegotiationInProgress: While another step is in flight; cancel its task instead.
        """
        if self._state == NegotiationState.SUBMITTING:
            raise SubmissionInFlight(
                "Payment is being submitted; its status is unknown until the call returns"
            )
        if self._busy:
            raise NegotiationInProgress("A negotiation step is in flight")
        self._requirement = None
        self._outcome = None
        self._state = NegotiationState.IDLE

    # =========================================================================
    # Internals
    # =========================================================================

    async def _sign(self, signer: Signer, requirement: PaymentRequirement) -> ClientPaymentHeader:
        await self._transition(NegotiationState.SIGNING, requirement)
        logger.info("Signing transaction")
        try:
            payload = await signer.sign(SignRequest.from_requirement(requirement))
            header = ClientPaymentHeader.from_signed_payload(payload)
        except asyncio.CancelledError:
            self._state = NegotiationState.PAYMENT_REQUIRED
            raise
        except SigningFailed as exc:
            logger.error("Transaction signing failed: %s", exc)
            await self._transition(NegotiationState.PAYMENT_REQUIRED, requirement)
            raise
        except Exception as exc:
            logger.error("Transaction signing failed: %s", exc)
            await self._transition(NegotiationState.PAYMENT_REQUIRED, requirement)
            raise SigningFailed(f"Transaction signing failed: {exc}") from exc

        logger.info("Transaction signed: %s", _truncate(header.payment))
        return header

    @staticmethod
    def _parse_challenge(body: Any) -> PaymentRequirement:
        if not isinstance(body, dict):
            raise MalformedChallenge("Challenge body is not a JSON object", body)
        if "paymentRequirements" not in body:
            raise MalformedChallenge("Challenge body has no paymentRequirements", body)
        try:
            return Server402ResponsePayload.model_validate(body).payment_requirements
        except ValidationError as exc:
            raise MalformedChallenge(f"Invalid paymentRequirements: {exc}", body) from exc

    @staticmethod
    def _parse_paid_body(body: Any) -> ServerPaidResponse:
        if isinstance(body, dict):
            try:
                return ServerPaidResponse.model_validate(body)
            except ValidationError:
                logger.warning("Success body has unexpected transaction fields: %s", body)
        return ServerPaidResponse()

    async def _settle(self, outcome: PaymentOutcome) -> PaymentOutcome:
        self._outcome = outcome
        self._requirement = None
        await self._transition(NegotiationState.SETTLED)
        return outcome

    async def _transition(
        self,
        state: NegotiationState,
        requirement: Optional[PaymentRequirement] = None,
    ) -> None:
        previous = self._state
        self._state = state
        logger.debug("Negotiation %s -> %s", previous.value, state.value)
        if self.event_bus is not None:
            await self.event_bus.publish(StateChangedEvent(
                previous=previous.value,
                current=state.value,
                requirement=requirement or self._requirement,
            ))

    @contextmanager
    def _exclusive(self) -> Iterator[None]:
        if self._busy:
            raise NegotiationInProgress("Another negotiation step is in flight")
        self._busy = True
        try:
            yield
        finally:
            self._busy = False


def _truncate(payload: str, keep: int = 20) -> str:
    if len(payload) <= keep * 2:
        return payload
    return f"{payload[:keep]}...{payload[-keep:]}"
