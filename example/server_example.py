from x402_dot import PaymentRejected, PaymentRequirement
from x402_dot.servers import Http402Server


requirement = PaymentRequirement(
    recipient="5GrwvaEF5zXb26Fz9rcQpDWS57CtERHpNehXCPcNoHGKutQY",  # Replace with your address
    amount=50000000000,  # 5 PAS
    currency="PAS",
    network="paseo",
)


async def settle(signed_payload, requirement):
    """Submit the signed extrinsic and return its hash."""
    if not signed_payload.startswith("0x"):
        raise PaymentRejected("Payload is not a hex-encoded extrinsic")
    # Replace with a real submission to the network's RPC node
    return "0x" + signed_payload[-64:]


app = Http402Server(
    requirement,
    settle,
    title="X402 Payment API",
)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="127.0.0.1", port=3000, log_level="debug")
