import pytest

from x402_dot.networks.profiles import Endpoint, NetworkProfile, NetworkRegistry

from mocks import RecordingSigner


@pytest.fixture
def registry() -> NetworkRegistry:
    return NetworkRegistry()


@pytest.fixture
def small_registry() -> NetworkRegistry:
    return NetworkRegistry([
        NetworkProfile(
            network_id="local",
            display_name="Local Testnet",
            currency="UNIT",
            decimals=12,
            explorer_base_url="https://local.example",
            endpoints=(
                Endpoint(identifier="a", address="ws://a.local", display_name="A"),
                Endpoint(identifier="b", address="ws://b.local", display_name="B"),
                Endpoint(identifier="c", address="ws://c.local", display_name="C"),
            ),
        )
    ])


@pytest.fixture
def signer() -> RecordingSigner:
    return RecordingSigner()
