"""Tests for the Cognitive Orchestrator facade."""

import asyncio

import pytest

from synergos.cognition.orchestrator import CognitiveOrchestrator
from synergos.cognition.patterns import DIALOG_PATTERN, INTENT_PATTERN


def _stable(snapshot: dict) -> dict:
    snapshot = dict(snapshot)
    snapshot["adaptationHistory"] = [
        {k: v for k, v in r.items() if k != "timestamp"} for r in snapshot["adaptationHistory"]
    ]
    return snapshot


@pytest.mark.asyncio
async def test_seeded_statistics(orchestrator):
    stats = orchestrator.get_cognitive_statistics()

    assert stats["totalPatterns"] == 3
    assert stats["totalNodes"] == 7
    assert stats["activeNodes"] == 0
    assert stats["activePatterns"] == 0
    assert stats["synergyLevel"] == 0.5
    assert stats["learningRate"] == 0.1
    assert stats["averageEffectiveness"] == 0.5


@pytest.mark.asyncio
async def test_greeting_end_to_end(orchestrator):
    response = await orchestrator.process_input(
        {"type": "message", "text": "Hi there!", "requiresResponse": True}
    )
    assert "Hello" in response.content
    assert response.confidence > 0.5


@pytest.mark.asyncio
async def test_help_end_to_end(orchestrator):
    response = await orchestrator.process_input(
        {"type": "message", "text": "I need help", "requiresResponse": True}
    )
    assert "assist" in response.content
    assert response.confidence > 0.5


@pytest.mark.asyncio
async def test_dialog_end_to_end(orchestrator):
    response = await orchestrator.process_input(
        {"type": "message", "dialog": True, "dialogState": "active", "turnCount": 3}
    )
    assert DIALOG_PATTERN in response.metadata.active_patterns


@pytest.mark.asyncio
async def test_exactly_one_cognition_event_per_call(orchestrator, recorder):
    for text in ("hello", "help", None):
        await orchestrator.process_input({"type": "message", "text": text})

    events = recorder.of("cognition")
    assert len(events) == 3
    last = events[-1].data
    assert set(last) == {"input", "response", "cognitive_state", "processing_time"}
    assert last["response"]["type"] == "cognitive_response"


@pytest.mark.asyncio
async def test_cognition_event_carries_the_returned_response(orchestrator, recorder):
    response = await orchestrator.process_input({"type": "message", "text": "bye"})
    assert recorder.of("cognition")[0].data["response"] == response.to_dict()


@pytest.mark.asyncio
async def test_learning_disabled_skips_history_but_still_emits(orchestrator, recorder):
    await orchestrator.set_learning_enabled(False)
    await orchestrator.process_input({"type": "message", "text": "hello"})

    assert orchestrator.state.adaptation_history == []
    assert len(recorder.of("cognition")) == 1
    assert recorder.of("learning_change")[0].data == {"learning": False}


@pytest.mark.asyncio
async def test_learning_feeds_back_into_nodes(orchestrator):
    before = orchestrator.atomspace.get("user_input").truth_value.model_copy()
    await orchestrator.process_input({"type": "message", "text": "hi", "requiresResponse": True})
    after = orchestrator.atomspace.get("user_input").truth_value

    assert len(orchestrator.state.adaptation_history) == 1
    assert (after.strength, after.confidence) != (before.strength, before.confidence)


@pytest.mark.asyncio
async def test_concurrent_calls_each_record_once(orchestrator, recorder):
    await asyncio.gather(*[
        orchestrator.process_input({"type": "message", "text": f"hello {i}"})
        for i in range(25)
    ])
    assert len(orchestrator.state.adaptation_history) == 25
    assert len(recorder.of("cognition")) == 25


@pytest.mark.asyncio
async def test_history_bound_through_process_input(orchestrator):
    for i in range(105):
        await orchestrator.process_input({"type": "message", "text": f"msg {i}"})

    history = orchestrator.state.adaptation_history
    assert len(history) == 100
    stamps = [r.timestamp for r in history]
    assert stamps == sorted(stamps)


@pytest.mark.asyncio
async def test_values_stay_bounded(orchestrator):
    inputs = [
        {"type": "message", "text": "hello", "dialog": True, "requiresResponse": True},
        {"type": "adaptive_response", "text": "help"},
        {"type": "dialog_optimization"},
        {"text": "???"},
    ]
    for _ in range(40):
        for raw in inputs:
            await orchestrator.process_input(raw)

    state = orchestrator.state
    assert 0.0 <= state.synergy_level <= 1.0
    assert 0.05 <= state.learning_rate <= 0.2
    for node in orchestrator.atomspace.nodes():
        tv, av = node.truth_value, node.attention_value
        for value in (tv.strength, tv.confidence, av.short_term, av.long_term, av.very_long_term):
            assert 0.0 <= value <= 1.0


@pytest.mark.asyncio
async def test_switch_events(orchestrator, recorder):
    await orchestrator.set_autonomous_mode(False)
    orchestrator.set_adaptation_threshold(4.2)

    assert recorder.of("autonomy_change")[0].data == {"autonomous": False}
    assert orchestrator.get_cognitive_statistics()["adaptationThreshold"] == 1.0


@pytest.mark.asyncio
async def test_add_and_remove_pattern(orchestrator, recorder):
    await orchestrator.add_pattern({
        "id": "escalation",
        "name": "Escalation",
        "activationThreshold": 0.5,
        "synergyScore": 0.6,
        "nodes": [{"id": "escalation_trigger", "type": "concept"}],
    })
    assert "escalation" in orchestrator.patterns
    assert "escalation_trigger" in orchestrator.atomspace

    assert await orchestrator.remove_pattern("escalation") is True
    assert await orchestrator.remove_pattern("escalation") is False
    assert recorder.topics().count("pattern_added") == 1
    assert recorder.topics().count("pattern_removed") == 1


@pytest.mark.asyncio
async def test_add_pattern_keeps_learned_node_values(orchestrator):
    node = orchestrator.atomspace.get("user_input")
    node.truth_value.strength = 0.3
    await orchestrator.add_pattern({
        "id": "reuse", "name": "Reuse", "nodes": [{"id": "user_input"}],
    })
    assert orchestrator.atomspace.get("user_input").truth_value.strength == 0.3


@pytest.mark.asyncio
async def test_reset_restores_seed_and_is_idempotent(orchestrator, recorder):
    cold = _stable(orchestrator.get_cognitive_state())
    await orchestrator.process_input({"type": "message", "text": "hello", "dialog": True})
    await orchestrator.remove_pattern(INTENT_PATTERN)

    await orchestrator.reset()
    first = _stable(orchestrator.get_cognitive_state())
    first_stats = orchestrator.get_cognitive_statistics()
    await orchestrator.reset()
    second = _stable(orchestrator.get_cognitive_state())

    assert first == second == cold
    assert first_stats == orchestrator.get_cognitive_statistics()
    assert first_stats["totalPatterns"] == 3
    assert recorder.topics().count("cognitive_reset") == 2


@pytest.mark.asyncio
async def test_reset_keeps_switches(orchestrator):
    await orchestrator.set_learning_enabled(False)
    await orchestrator.reset()
    assert orchestrator.learning_enabled is False


@pytest.mark.asyncio
async def test_instances_do_not_share_state(test_settings):
    a = CognitiveOrchestrator(settings=test_settings)
    b = CognitiveOrchestrator(settings=test_settings)
    await a.process_input({"type": "message", "text": "hello"})

    assert len(a.state.adaptation_history) == 1
    assert b.state.adaptation_history == []


class _Opaque:
    pass


@pytest.mark.asyncio
async def test_unencodable_extra_fields_do_not_break_processing(orchestrator, recorder):
    for extra in (b"\xff\xfe", _Opaque()):
        response = await orchestrator.process_input(
            {"type": "message", "text": "hi", "requiresResponse": True, "meta": extra}
        )
        assert "Hello" in response.content

    assert len(orchestrator.state.adaptation_history) == 2
    events = recorder.of("cognition")
    assert len(events) == 2
    assert events[0].data["input"]["meta"] == b"\xff\xfe"


@pytest.mark.asyncio
async def test_unencodable_fields_without_a_bus(test_settings):
    orchestrator = CognitiveOrchestrator(settings=test_settings)
    response = await orchestrator.process_input({"type": "message", "text": "hi", "meta": _Opaque()})

    assert response.intent == "greeting"
    assert len(orchestrator.state.adaptation_history) == 1


@pytest.mark.asyncio
async def test_add_pattern_drops_malformed_fields(orchestrator, recorder):
    pattern = await orchestrator.add_pattern({
        "id": "loose",
        "activationThreshold": "high",
        "synergyScore": 0.9,
    })

    assert pattern.id == "loose"
    assert pattern.name == ""
    assert pattern.threshold == 0.5
    assert pattern.synergy_score == 0.9
    assert "loose" in orchestrator.patterns
    assert recorder.of("pattern_added")[0].data == {"pattern": "loose"}


@pytest.mark.asyncio
async def test_add_pattern_without_id_is_skipped(orchestrator, recorder):
    for raw in ({"name": "Nameless"}, {"id": 7, "name": "Numbered"}, None):
        assert await orchestrator.add_pattern(raw) is None

    assert len(orchestrator.patterns) == 3
    assert recorder.of("pattern_added") == []
