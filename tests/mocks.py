"""
Deterministic fakes for the x402-dot test suite.

The fakes replace the network-facing collaborators (health probes, resource
calls, signing) with deterministic, inspectable stand-ins.
"""

from typing import Dict, List, Optional, Tuple

import httpx

from x402_dot.clients.bases import ResourceClient
from x402_dot.engine.exceptions import TransportError
from x402_dot.networks.health import EndpointHealthChecker
from x402_dot.networks.profiles import Endpoint
from x402_dot.schemas.https import ResourceResponse
from x402_dot.schemas.outcomes import SignRequest
from x402_dot.signers.bases import Signer


MOCK_RECIPIENT = "R1"
MOCK_AMOUNT = 50000000000
MOCK_SIGNED_TX = "0x" + "ab" * 64
MOCK_TX_HASH = "0xabc"

CHALLENGE_BODY = {
    "error": "PaymentRequired",
    "message": "Payment is required to access this resource",
    "paymentRequirements": {
        "recipient": MOCK_RECIPIENT,
        "amount": MOCK_AMOUNT,
        "currency": "PAS",
        "network": "paseo",
    },
}

PAID_BODY = {
    "status": 200,
    "message": "Payment successful",
    "data": "This is protected content that requires payment",
    "transaction_hash": MOCK_TX_HASH,
}


class FakeHealthChecker(EndpointHealthChecker):
    """Reports health from a fixed table and records probe order."""

    def __init__(self, healthy: Optional[Dict[str, bool]] = None, default: bool = False):
        self.healthy = healthy or {}
        self.default = default
        self.probed: List[str] = []

    async def check(self, endpoint: Endpoint, timeout_ms: int = 5000) -> bool:
        self.probed.append(endpoint.address)
        return self.healthy.get(endpoint.address, self.default)


class FakeResourceClient(ResourceClient):
    """Replays scripted responses; an exception instance in the script is raised."""

    def __init__(self, *script):
        self.script = list(script)
        self.calls: List[Tuple[str, str, Optional[Dict[str, str]]]] = []

    async def call(self, method, path, headers=None):
        self.calls.append((method, path, headers))
        if not self.script:
            raise AssertionError(f"Unexpected call: {method} {path}")
        item = self.script.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item


class RecordingSigner(Signer):
    """Returns a fixed payload, or raises the configured error."""

    def __init__(self, payload=MOCK_SIGNED_TX, error: Optional[Exception] = None, available: bool = True):
        self.payload = payload
        self.error = error
        self.available = available
        self.requests: List[SignRequest] = []

    @property
    def is_available(self) -> bool:
        return self.available

    async def sign(self, request: SignRequest):
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.payload


def challenge(body=None) -> ResourceResponse:
    return ResourceResponse(status=402, body=CHALLENGE_BODY if body is None else body)


def paid(body=None, status: int = 200) -> ResourceResponse:
    return ResourceResponse(status=status, body=PAID_BODY if body is None else body)


def transport_error() -> TransportError:
    return TransportError("Request failed: ConnectError: connection refused", method="GET", url="/api/paid")




class CorruptGzipStream(httpx.AsyncByteStream):
    """Body that claims gzip encoding but is not; httpx fails while reading it."""

    async def __aiter__(self):
        yield b"not gzip at all"


def corrupt_gzip_response(status: int = 200) -> httpx.Response:
    return httpx.Response(status, headers={"Content-Encoding": "gzip"}, stream=CorruptGzipStream())
