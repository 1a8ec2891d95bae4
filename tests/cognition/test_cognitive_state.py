"""Tests for CognitiveState bounds and the adaptation history."""

from synergos.cognition.state import AdaptationRecord, CognitiveState


def _record(i: int) -> AdaptationRecord:
    return AdaptationRecord(trigger=f"t{i}", adaptation=f"a{i}", effectiveness=0.5)


def test_synergy_and_learning_rate_clamp():
    state = CognitiveState()
    state.synergy_level = 1.5
    state.learning_rate = 0.9
    assert state.synergy_level == 1.0
    assert state.learning_rate == 0.2

    state.synergy_level = -0.2
    state.learning_rate = 0.0
    assert state.synergy_level == 0.0
    assert state.learning_rate == 0.05


def test_history_keeps_exactly_the_last_100_in_order():
    state = CognitiveState()
    for i in range(150):
        state.record(_record(i))

    history = state.adaptation_history
    assert len(history) == 100
    assert [r.trigger for r in history] == [f"t{i}" for i in range(50, 150)]


def test_history_at_101_drops_only_the_first():
    state = CognitiveState()
    for i in range(101):
        state.record(_record(i))

    assert len(state.adaptation_history) == 100
    assert state.adaptation_history[0].trigger == "t1"


def test_history_limit_is_configurable():
    state = CognitiveState(history_limit=3)
    for i in range(5):
        state.record(_record(i))
    assert [r.trigger for r in state.adaptation_history] == ["t2", "t3", "t4"]


def test_average_effectiveness_window():
    state = CognitiveState()
    assert state.average_effectiveness() == 0.5

    for _ in range(30):
        state.record(AdaptationRecord(trigger="t", adaptation="a", effectiveness=0.0))
    for _ in range(20):
        state.record(AdaptationRecord(trigger="t", adaptation="a", effectiveness=1.0))
    assert state.average_effectiveness() == 1.0


def test_record_effectiveness_clamps():
    assert AdaptationRecord(trigger="t", adaptation="a", effectiveness=3).effectiveness == 1.0


def test_snapshot_is_camel_case():
    state = CognitiveState(active_nodes={"b", "a"})
    snapshot = state.snapshot()

    assert snapshot["activeNodes"] == ["a", "b"]
    assert set(snapshot) == {
        "activeNodes", "attentionalFocus", "synergyLevel", "learningRate", "adaptationHistory",
    }
