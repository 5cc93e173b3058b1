import pytest
from pydantic import TypeAdapter, ValidationError

from x402_dot.schemas.https import ClientPaymentHeader, PaymentRequirement, ResourceResponse
from x402_dot.schemas.outcomes import PaymentError, PaymentOutcome, PaymentSuccess


def test_requirement_accepts_digit_strings():
    requirement = PaymentRequirement(recipient="R1", amount="123456789012345678901234567890", currency="PAS", network="paseo")

    assert requirement.amount == 123456789012345678901234567890


@pytest.mark.parametrize("amount", [1.5, 5.0, "1e10", "0.5", -1, True, None])
def test_requirement_rejects_inexact_amounts(amount):
    with pytest.raises(ValidationError):
        PaymentRequirement(recipient="R1", amount=amount, currency="PAS", network="paseo")


def test_requirement_is_frozen():
    requirement = PaymentRequirement(recipient="R1", amount=1, currency="PAS", network="paseo")

    with pytest.raises(ValidationError):
        requirement.amount = 2


def test_canonical_json_is_sorted_and_compact():
    requirement = PaymentRequirement(recipient="R1", amount=5, currency="PAS", network="paseo", memo="order-7")

    assert requirement.to_canonical_json() == (
        '{"amount":5,"currency":"PAS","memo":"order-7","network":"paseo","recipient":"R1"}'
    )


def test_payment_header_encoding():
    assert ClientPaymentHeader.from_signed_payload(b"\xde\xad").as_headers() == {"x-payment": "0xdead"}
    assert ClientPaymentHeader.from_signed_payload("0xbeef").as_headers() == {"x-payment": "0xbeef"}


def test_outcome_union_discriminates():
    adapter = TypeAdapter(PaymentOutcome)

    assert isinstance(adapter.validate_python({"outcome": "success"}), PaymentSuccess)
    error = adapter.validate_python({"outcome": "error", "cause": "timeout", "payment_status_unknown": True})
    assert isinstance(error, PaymentError)
    assert error.payment_status_unknown is True


@pytest.mark.parametrize("status,ok,challenge", [(200, True, False), (204, True, False), (402, False, True), (500, False, False)])
def test_resource_response_classification(status, ok, challenge):
    response = ResourceResponse(status=status)

    assert response.ok is ok
    assert response.is_payment_challenge is challenge
