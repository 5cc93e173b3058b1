from x402_dot import (
    CallableSigner,
    PaymentRequirement,
    PaymentSession,
    load_settings,
    setup_logging,
)
from x402_dot.networks import format_amount


settings = load_settings()
setup_logging(settings.log_level)


def make_signer(endpoint):
    # Replace with a real keyring signer bound to ``endpoint.address``
    async def sign(request):
        return "0x" + "ab" * 64

    return CallableSigner(sign)


async def main():
    async with PaymentSession(settings, signer_factory=make_signer) as session:
        endpoint = await session.connect()
        print(f"Connected to {session.connection.profile.display_name} via {endpoint.display_name}")

        requirement = await session.fetch(auto_pay=False)
        if isinstance(requirement, PaymentRequirement):
            profile = session.connection.profile
            print(
                f"Paying {format_amount(value=requirement.amount, decimals=profile.decimals)} "
                f"{requirement.currency} to {profile.account_url(requirement.recipient)}"
            )
            return await session.negotiator().pay()
        return requirement


if __name__ == "__main__":
    import asyncio
    outcome = asyncio.run(main())
    print("Outcome:", outcome)
