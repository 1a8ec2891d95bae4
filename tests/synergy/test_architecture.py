"""Tests for the Synergy Architecture facade."""

import pytest

from synergos.synergy.architecture import SynergyArchitecture
from synergos.synergy.signals import RandomSignalSource, ScriptedSignalSource


def _stable_stats(architecture: SynergyArchitecture) -> dict:
    stats = architecture.get_architectural_statistics()
    stats.pop("lastEvolution")
    return stats


def test_seeded_statistics(architecture):
    stats = architecture.get_architectural_statistics()

    assert stats["totalComponents"] == 4
    assert stats["activeComponents"] == 4
    assert stats["totalPatterns"] == 4
    assert stats["emergentBehaviors"] == 0
    assert stats["autonomousAgents"] == 3
    assert stats["synergyLevel"] == 0.5
    assert stats["coherence"] == 0.75
    assert stats["resilience"] == 0.6
    assert stats["autonomyLevel"] == 0.8
    assert stats["evolutionCount"] == 0


def test_architectural_state_snapshot(architecture):
    snapshot = architecture.get_architectural_state()

    assert snapshot["totalComponents"] == 4
    assert len(snapshot["components"]) == 4
    assert len(snapshot["patterns"]) == 4
    assert snapshot["emergentBehaviors"] == []
    assert len(snapshot["autonomousAgents"]) == 3
    assert snapshot["components"][0]["state"]["adaptationRate"] == 0.1


@pytest.mark.asyncio
async def test_health_cycle(architecture, recorder):
    assert await architecture.run_health_cycle() is True

    events = recorder.of("component_health")
    assert len(events) == 4
    assert all(e.source == "synergy" for e in events)
    assert architecture.state.coherence == pytest.approx(0.8625)


@pytest.mark.asyncio
async def test_cycle_skips_when_state_is_busy(architecture, recorder):
    async with architecture._lock:
        assert await architecture.run_health_cycle() is False
        assert await architecture.run_agent_cycle() is False
    assert recorder.events == []


@pytest.mark.asyncio
async def test_evolution_cycle(architecture, recorder):
    assert await architecture.run_evolution_cycle() is True

    assert architecture.state.evolution_count == 1
    assert len(recorder.of("architecture_evolution")) == 1


@pytest.mark.asyncio
async def test_autogenesis_gates_evolution_and_tuning(architecture, recorder):
    await architecture.set_autogenesis_enabled(False)
    connection = architecture.registry.get("cognitive_processor").connections[0]
    latency = connection.latency

    assert await architecture.run_evolution_cycle() is False
    assert await architecture.run_tuning_cycle() is False
    assert architecture.state.evolution_count == 0
    assert connection.latency == latency
    assert recorder.of("autogenesis_change")[0].data == {"enabled": False}

    await architecture.set_autogenesis_enabled(True)
    assert await architecture.run_tuning_cycle() is True
    assert connection.latency == latency - 0.5


@pytest.mark.asyncio
async def test_synergy_threshold_clamped(architecture):
    architecture.set_synergy_threshold(-3)
    assert architecture.synergy_threshold == 0.0
    architecture.set_synergy_threshold(9)
    assert architecture.synergy_threshold == 1.0


@pytest.mark.asyncio
async def test_emergence_cycle_detects_and_promotes(bus, recorder, test_settings):
    architecture = SynergyArchitecture(
        event_bus=bus, settings=test_settings, signals=ScriptedSignalSource([1.0]),
    )
    await architecture.run_emergence_cycle()

    stats = architecture.get_architectural_statistics()
    assert stats["emergentBehaviors"] == 2
    assert stats["totalPatterns"] == 6
    assert len(recorder.of("emergent_behavior_detected")) == 2
    assert len(recorder.of("pattern_promoted")) == 2


@pytest.mark.asyncio
async def test_agent_cycle(architecture, recorder):
    await architecture.run_agent_cycle()
    await architecture.run_agent_cycle()
    assert len(recorder.of("agent_goal_completed")) == 1


@pytest.mark.asyncio
async def test_add_and_remove_component(architecture, recorder):
    await architecture.add_component({
        "id": "dialog_router",
        "name": "Dialog Router",
        "type": "behavioral",
        "connections": [{"targetId": "cognitive_processor", "connectionType": "data_flow"}],
    })
    assert architecture.get_architectural_statistics()["totalComponents"] == 5
    assert architecture.state.total_components == 5

    assert await architecture.remove_component("dialog_router") is True
    assert await architecture.remove_component("dialog_router") is False
    assert recorder.topics().count("component_added") == 1
    assert recorder.of("component_removed")[0].data == {"componentId": "dialog_router"}
    assert len(recorder.of("component_removed")) == 1


@pytest.mark.asyncio
async def test_reset_is_idempotent(bus, test_settings):
    architecture = SynergyArchitecture(
        event_bus=bus, settings=test_settings, signals=ScriptedSignalSource([1.0]),
    )
    cold = _stable_stats(architecture)
    for _ in range(3):
        await architecture.run_health_cycle()
        await architecture.run_evolution_cycle()
        await architecture.run_emergence_cycle()
        await architecture.run_agent_cycle()
    await architecture.remove_component("cognitive_processor")

    await architecture.reset()
    first = _stable_stats(architecture)
    first_agents = [a.model_dump() for a in architecture.scheduler.agents.values()]
    await architecture.reset()

    assert first == _stable_stats(architecture) == cold
    assert first_agents == [a.model_dump() for a in architecture.scheduler.agents.values()]


@pytest.mark.asyncio
async def test_reset_keeps_switches(architecture):
    await architecture.set_autogenesis_enabled(False)
    architecture.set_synergy_threshold(0.2)
    await architecture.reset()

    assert architecture.autogenesis_enabled is False
    assert architecture.synergy_threshold == 0.2


@pytest.mark.asyncio
async def test_scores_stay_bounded_under_random_drift(bus, test_settings):
    architecture = SynergyArchitecture(
        event_bus=bus, settings=test_settings, signals=RandomSignalSource(seed=3),
    )
    for _ in range(60):
        await architecture.run_health_cycle()
        await architecture.run_evolution_cycle()
        await architecture.run_tuning_cycle()
        await architecture.run_emergence_cycle()
        await architecture.run_agent_cycle()

    state = architecture.state
    for value in (state.synergy_level, state.coherence, state.resilience, state.autonomy_level):
        assert 0.0 <= value <= 1.0
    for component in architecture.registry:
        assert 0.0 <= component.state.load <= 1.0
        assert 0.5 <= component.state.efficiency <= 1.0
        assert 0.05 <= component.state.adaptation_rate <= 0.3
        for connection in component.connections:
            assert 0.0 <= connection.strength <= 1.0
            assert 0.0 <= connection.reliability <= 1.0
            assert connection.bandwidth > 0
            assert connection.latency >= 0
    for behavior in architecture.emergence.behaviors.values():
        for value in (behavior.strength, behavior.stability, behavior.novelty, behavior.utility):
            assert 0.0 <= value <= 1.0
    for agent in architecture.scheduler.agents.values():
        assert 0.0 <= agent.state.progress <= 1.0
        assert 0.0 <= agent.state.experience <= 1.0


@pytest.mark.asyncio
async def test_add_component_drops_malformed_fields(architecture, recorder):
    component = await architecture.add_component({
        "id": "dialog_router",
        "type": "telepathic",
        "capabilities": "routing",
        "state": {"load": "heavy"},
    })

    assert component.kind.value == "cognitive"
    assert component.capabilities == []
    assert component.state.load == 0.3
    assert "dialog_router" in architecture.registry
    assert len(recorder.of("component_added")) == 1


@pytest.mark.asyncio
async def test_add_component_without_id_is_skipped(architecture, recorder):
    assert await architecture.add_component({"name": "Anonymous"}) is None
    assert await architecture.add_component("not a component") is None

    assert len(architecture.registry) == 4
    assert recorder.of("component_added") == []
