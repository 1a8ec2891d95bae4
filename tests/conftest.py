"""Shared test fixtures — isolated settings, deterministic signals, engines."""

from __future__ import annotations

import pytest
import pytest_asyncio

from synergos.cognition.orchestrator import CognitiveOrchestrator
from synergos.config import SynergosSettings
from synergos.events.bus import Event, EventBus
from synergos.kernel.engine import SynergosEngine
from synergos.synergy.architecture import SynergyArchitecture
from synergos.synergy.signals import ScriptedSignalSource


class EventRecorder:
    """Collects every event published on a bus."""

    def __init__(self, bus: EventBus) -> None:
        self.events: list[Event] = []
        bus.subscribe("*", self._record)

    async def _record(self, event: Event) -> None:
        self.events.append(event)

    def topics(self) -> list[str]:
        return [e.topic for e in self.events]

    def of(self, topic: str) -> list[Event]:
        return [e for e in self.events if e.topic == topic]


@pytest.fixture
def test_settings():
    return SynergosSettings(
        health_interval_seconds=0.01,
        evolution_interval_seconds=0.01,
        tuning_interval_seconds=0.01,
        emergence_interval_seconds=0.01,
        agent_interval_seconds=0.01,
        random_seed=7,
    )


@pytest.fixture
def still_signals():
    """Every draw lands mid-range: zero drift and an emergent signal of 0.5."""
    return ScriptedSignalSource([0.5])


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def recorder(bus):
    return EventRecorder(bus)


@pytest.fixture
def orchestrator(bus, test_settings):
    return CognitiveOrchestrator(event_bus=bus, settings=test_settings)


@pytest.fixture
def architecture(bus, test_settings, still_signals):
    return SynergyArchitecture(event_bus=bus, settings=test_settings, signals=still_signals)


@pytest_asyncio.fixture
async def engine(test_settings, still_signals):
    engine = SynergosEngine(settings=test_settings, signals=still_signals)
    yield engine
    if engine.is_running:
        await engine.shutdown()
