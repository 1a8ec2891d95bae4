"""Tests for the SynergosEngine lifecycle."""

import asyncio

import pytest

from synergos.exceptions import EngineStateError
from synergos.kernel.engine import SynergosEngine


@pytest.mark.asyncio
async def test_start_and_shutdown(engine):
    await engine.start()
    assert engine.is_running
    await engine.shutdown()
    assert not engine.is_running


@pytest.mark.asyncio
async def test_cannot_restart_after_shutdown(engine):
    await engine.start()
    await engine.shutdown()
    with pytest.raises(EngineStateError):
        await engine.start()


@pytest.mark.asyncio
async def test_background_cycles_publish_events(engine):
    await engine.start()
    await asyncio.sleep(0.1)
    await engine.shutdown()

    assert engine.event_bus.history("component_health")
    cycles = engine.statistics()["cycles"]
    assert set(cycles) == {"health", "evolution", "tuning", "emergence", "agents"}
    assert cycles["health"]["ticks"] >= 1


@pytest.mark.asyncio
async def test_agents_rest_outside_autonomous_mode(engine):
    await engine.cognition.set_autonomous_mode(False)
    assert await engine.run_agent_cycle() is False

    await engine.cognition.set_autonomous_mode(True)
    assert await engine.run_agent_cycle() is True


@pytest.mark.asyncio
async def test_subsystems_share_one_lock(engine):
    async with engine._lock:
        assert await engine.architecture.run_health_cycle() is False


@pytest.mark.asyncio
async def test_processing_while_running(engine):
    await engine.start()
    response = await engine.cognition.process_input({"type": "message", "text": "hello"})
    await engine.shutdown()

    assert "Hello" in response.content
    assert len(engine.event_bus.history("cognition")) == 1


@pytest.mark.asyncio
async def test_reset_restores_both_subsystems(engine):
    cold = engine.statistics()
    await engine.cognition.process_input({"type": "message", "text": "help"})
    await engine.architecture.run_evolution_cycle()
    await engine.architecture.remove_component("adaptive_learner")

    await engine.reset()
    warm = engine.statistics()

    assert warm["cognitive"] == cold["cognitive"]
    cold["architecture"].pop("lastEvolution")
    warm["architecture"].pop("lastEvolution")
    assert warm["architecture"] == cold["architecture"]


@pytest.mark.asyncio
async def test_engines_are_independent(test_settings, still_signals):
    first = SynergosEngine(settings=test_settings, signals=still_signals)
    second = SynergosEngine(settings=test_settings)

    await first.architecture.remove_component("cognitive_processor")

    assert first.architecture.get_architectural_statistics()["totalComponents"] == 3
    assert second.architecture.get_architectural_statistics()["totalComponents"] == 4
    assert first.event_bus is not second.event_bus


@pytest.mark.asyncio
async def test_context_manager(test_settings, still_signals):
    async with SynergosEngine(settings=test_settings, signals=still_signals) as engine:
        assert engine.is_running
    assert not engine.is_running
