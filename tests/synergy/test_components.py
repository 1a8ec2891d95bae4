"""Tests for the component registry and component models."""

import pytest

from synergos.synergy.components import (
    ComponentKind,
    ComponentRegistry,
    ComponentState,
    ConnectionKind,
    SynergyComponent,
    SynergyConnection,
    component_health,
    recompute_metrics,
    seed_components,
)


def _registry() -> ComponentRegistry:
    registry = ComponentRegistry()
    for component in seed_components():
        registry.add(component)
    return registry


def test_seed_components():
    registry = _registry()

    assert registry.ids() == [
        "cognitive_processor", "behavioral_adapter", "adaptive_learner", "emergent_intelligence",
    ]
    assert len(list(registry.connections())) == 9
    emergent = registry.get("emergent_intelligence")
    assert emergent.kind == ComponentKind.EMERGENT
    assert emergent.metrics.emergent_properties == 0.95


def test_state_bounds_clamp():
    state = ComponentState(load=1.4, efficiency=0.2, error_count=-3)
    assert state.load == 1.0
    assert state.efficiency == 0.5
    assert state.error_count == 0

    state.efficiency = 1.3
    state.load = -0.1
    assert state.efficiency == 1.0
    assert state.load == 0.0


def test_connection_bounds_clamp():
    conn = SynergyConnection(target_id="x", strength=1.5, reliability=-1, bandwidth=0, latency=-5)
    assert conn.strength == 1.0
    assert conn.reliability == 0.0
    assert conn.bandwidth > 0
    assert conn.latency == 0.0


def test_connection_accepts_camel_case():
    conn = SynergyConnection.model_validate({"targetId": "x", "connectionType": "feedback"})
    assert conn.target_id == "x"
    assert conn.kind == ConnectionKind.FEEDBACK


def test_component_health():
    component = SynergyComponent(id="c", state=ComponentState(load=0.3, efficiency=0.9))
    assert component_health(component) == pytest.approx((0.9 + 1.0 + 1.0) / 3)

    component.state.load = 0.9
    component.state.error_count = 3
    assert component_health(component) == pytest.approx((0.9 + 0.8 + 0.7) / 3)

    component.state.error_count = 50
    assert component_health(component) == pytest.approx((0.9 + 0.8 + 0.0) / 3)


def test_recompute_metrics():
    component = SynergyComponent(id="c", state=ComponentState(load=0.3, efficiency=0.85))
    recompute_metrics(component, 0.5)
    m = component.metrics

    assert m.throughput == pytest.approx(0.85 * 0.85 * 150)
    assert m.response_time == pytest.approx(80.0)
    assert m.accuracy == pytest.approx(0.8075)
    assert m.resource_usage == pytest.approx(0.24)
    assert m.synergy_contribution == pytest.approx(0.765)
    assert m.emergent_properties == pytest.approx(0.78)


def test_accuracy_floor():
    component = SynergyComponent(id="c", state=ComponentState(efficiency=0.5))
    recompute_metrics(component, 0.0)
    assert component.metrics.accuracy == 0.7


def test_registry_add_replace_remove():
    registry = _registry()
    registry.add(SynergyComponent(id="cognitive_processor", name="Replacement"))

    assert len(registry) == 4
    assert registry.get("cognitive_processor").name == "Replacement"
    assert registry.remove("cognitive_processor") is True
    assert registry.remove("cognitive_processor") is False
    assert registry.get("cognitive_processor") is None
    assert "cognitive_processor" not in registry


def test_mean_load():
    assert _registry().mean_load() == pytest.approx((0.3 + 0.25 + 0.4 + 0.2) / 4)
    assert ComponentRegistry().mean_load() == 0.0
