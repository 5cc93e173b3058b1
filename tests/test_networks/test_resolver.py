"""
EndpointResolver Test Suite

Tests priority-ordered failover, exhaustion, unknown networks, the parallel
mode tie-break, and probe progress events.
"""

import asyncio

import pytest

from x402_dot.engine.events import EventBus, EndpointProbedEvent, EndpointSelectedEvent
from x402_dot.engine.exceptions import NoHealthyEndpoint, UnknownNetwork
from x402_dot.networks.health import EndpointHealthChecker
from x402_dot.networks.resolver import EndpointResolver

from mocks import FakeHealthChecker


@pytest.mark.asyncio
async def test_first_healthy_endpoint_wins(small_registry):
    checker = FakeHealthChecker({"ws://a.local": True, "ws://b.local": True})
    resolver = EndpointResolver(small_registry, checker)

    endpoint = await resolver.resolve("local")

    assert endpoint.identifier == "a"
    assert checker.probed == ["ws://a.local"]


@pytest.mark.asyncio
async def test_failover_probes_in_priority_order(small_registry):
    checker = FakeHealthChecker({"ws://c.local": True})
    resolver = EndpointResolver(small_registry, checker)

    endpoint = await resolver.resolve("local")

    assert endpoint.identifier == "c"
    assert checker.probed == ["ws://a.local", "ws://b.local", "ws://c.local"]
    assert endpoint in small_registry.get("local").endpoints


@pytest.mark.asyncio
async def test_all_paseo_endpoints_down(registry):
    checker = FakeHealthChecker(default=False)
    resolver = EndpointResolver(registry, checker)

    with pytest.raises(NoHealthyEndpoint) as exc_info:
        await resolver.resolve("paseo")

    assert len(checker.probed) == 4
    assert exc_info.value.network_id == "paseo"
    assert exc_info.value.attempted == ["amforc", "dwellir", "ibp", "dotters"]
    assert "Paseo Testnet" in str(exc_info.value)


@pytest.mark.asyncio
@pytest.mark.parametrize("network_id", ["paseo", "westend", "polkadot"])
async def test_resolved_endpoint_belongs_to_profile(registry, network_id):
    profile = registry.get(network_id)
    last = profile.endpoints[-1]
    resolver = EndpointResolver(registry, FakeHealthChecker({last.address: True}))

    endpoint = await resolver.resolve(network_id)

    assert endpoint == last
    assert endpoint in profile.endpoints


@pytest.mark.asyncio
async def test_unknown_network(registry):
    checker = FakeHealthChecker(default=True)
    resolver = EndpointResolver(registry, checker)

    with pytest.raises(UnknownNetwork):
        await resolver.resolve("kusama-dev")
    assert checker.probed == []


@pytest.mark.asyncio
async def test_no_caching_between_calls(small_registry):
    checker = FakeHealthChecker({"ws://b.local": True})
    resolver = EndpointResolver(small_registry, checker)

    assert (await resolver.resolve("local")).identifier == "b"

    # Highest-priority node recovered
    checker.healthy["ws://a.local"] = True
    assert (await resolver.resolve("local")).identifier == "a"
    assert checker.probed == ["ws://a.local", "ws://b.local", "ws://a.local"]


@pytest.mark.asyncio
async def test_timeout_is_forwarded(small_registry):
    seen = []

    class TimeoutRecorder(EndpointHealthChecker):
        async def check(self, endpoint, timeout_ms=5000):
            seen.append(timeout_ms)
            return True

    resolver = EndpointResolver(small_registry, TimeoutRecorder(), timeout_ms=250)
    await resolver.resolve("local")

    assert seen == [250]


def test_timeout_must_be_positive(small_registry):
    with pytest.raises(ValueError):
        EndpointResolver(small_registry, FakeHealthChecker(), timeout_ms=0)


@pytest.mark.asyncio
async def test_parallel_mode_prefers_lowest_index(small_registry):
    class SlowFirst(EndpointHealthChecker):
        """Endpoint a answers last, but it is healthy."""

        async def check(self, endpoint, timeout_ms=5000):
            if endpoint.identifier == "a":
                await asyncio.sleep(0.05)
            return endpoint.identifier in ("a", "b")

    resolver = EndpointResolver(small_registry, SlowFirst())

    endpoint = await resolver.resolve("local", parallel=True)

    assert endpoint.identifier == "a"


@pytest.mark.asyncio
async def test_parallel_mode_exhaustion(small_registry):
    resolver = EndpointResolver(small_registry, FakeHealthChecker(default=False))

    with pytest.raises(NoHealthyEndpoint):
        await resolver.resolve("local", parallel=True)


@pytest.mark.asyncio
async def test_probe_events_do_not_affect_selection(small_registry):
    bus = EventBus()
    probes = []
    selected = []

    async def on_probe(event: EndpointProbedEvent):
        probes.append((event.position, event.endpoint.identifier, event.healthy))

    async def on_selected(event: EndpointSelectedEvent):
        selected.append(event.endpoint.identifier)

    bus.hook(EndpointProbedEvent, on_probe)
    bus.hook(EndpointSelectedEvent, on_selected)
    resolver = EndpointResolver(small_registry, FakeHealthChecker({"ws://b.local": True}), event_bus=bus)

    endpoint = await resolver.resolve("local")

    assert endpoint.identifier == "b"
    assert probes == [(0, "a", False), (1, "b", True)]
    assert selected == ["b"]


@pytest.mark.asyncio
@pytest.mark.parametrize("parallel", [False, True])
async def test_failing_observer_does_not_affect_selection(small_registry, parallel):
    bus = EventBus()

    async def failing_subscriber(event: EndpointProbedEvent):
        raise RuntimeError("observer failed")

    bus.subscribe(EndpointProbedEvent, failing_subscriber)
    bus.subscribe(EndpointSelectedEvent, failing_subscriber)
    resolver = EndpointResolver(small_registry, FakeHealthChecker(default=True), event_bus=bus)

    endpoint = await resolver.resolve("local", parallel=parallel)

    assert endpoint.identifier == "a"
