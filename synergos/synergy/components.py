"""Component Registry — the processing units the control loop evolves.

Each component has outbound weighted connections, a mutable state
(load, efficiency, adaptation rate, errors) and metrics derived from
that state. Metrics are never set directly; the health cycle recomputes
them with ``recompute_metrics``.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Iterator

from pydantic import BaseModel, Field, field_validator

from synergos.types import ComponentId, clamp, mean

EFFICIENCY_MIN = 0.5
ADAPTATION_RATE_MIN = 0.05
ADAPTATION_RATE_MAX = 0.3
BANDWIDTH_MIN = 1.0


class ComponentKind(str, Enum):
    COGNITIVE = "cognitive"
    BEHAVIORAL = "behavioral"
    ADAPTIVE = "adaptive"
    EMERGENT = "emergent"


class ConnectionKind(str, Enum):
    DATA_FLOW = "data_flow"
    CONTROL_FLOW = "control_flow"
    FEEDBACK = "feedback"
    REINFORCEMENT = "reinforcement"


class SynergyConnection(BaseModel):
    """A directed link to another component."""

    target_id: ComponentId = Field(alias="targetId")
    kind: ConnectionKind = Field(ConnectionKind.DATA_FLOW, alias="connectionType")
    strength: float = 0.5
    bandwidth: float = 1000.0
    latency: float = 10.0
    reliability: float = 0.9

    model_config = {"populate_by_name": True, "validate_assignment": True}

    @field_validator("strength", "reliability")
    @classmethod
    def _bounded(cls, value: float) -> float:
        return clamp(value)

    @field_validator("bandwidth")
    @classmethod
    def _positive(cls, value: float) -> float:
        return max(BANDWIDTH_MIN, value)

    @field_validator("latency")
    @classmethod
    def _non_negative(cls, value: float) -> float:
        return max(0.0, value)


class ComponentState(BaseModel):
    active: bool = True
    load: float = 0.3
    efficiency: float = 0.85
    adaptation_rate: float = Field(0.1, alias="adaptationRate")
    last_update: datetime = Field(default_factory=datetime.now, alias="lastUpdate")
    error_count: int = Field(0, alias="errorCount")

    model_config = {"populate_by_name": True, "validate_assignment": True}

    @field_validator("load")
    @classmethod
    def _load_bounded(cls, value: float) -> float:
        return clamp(value)

    @field_validator("efficiency")
    @classmethod
    def _efficiency_bounded(cls, value: float) -> float:
        return clamp(value, EFFICIENCY_MIN, 1.0)

    @field_validator("error_count")
    @classmethod
    def _errors_non_negative(cls, value: int) -> int:
        return max(0, value)


class ComponentMetrics(BaseModel):
    throughput: float = 100.0
    response_time: float = Field(50.0, alias="responseTime")
    accuracy: float = 0.9
    resource_usage: float = Field(0.4, alias="resourceUsage")
    synergy_contribution: float = Field(0.8, alias="synergyContribution")
    emergent_properties: float = Field(0.6, alias="emergentProperties")

    model_config = {"populate_by_name": True}


class SynergyComponent(BaseModel):
    """An abstract processing unit."""

    id: ComponentId
    name: str = ""
    kind: ComponentKind = Field(ComponentKind.COGNITIVE, alias="type")
    capabilities: list[str] = Field(default_factory=list)
    connections: list[SynergyConnection] = Field(default_factory=list)
    state: ComponentState = Field(default_factory=ComponentState)
    metrics: ComponentMetrics = Field(default_factory=ComponentMetrics)

    model_config = {"populate_by_name": True}


def component_health(component: SynergyComponent) -> float:
    """mean(efficiency, load headroom above 0.7, error penalty)."""
    state = component.state
    load_factor = 1.0 - max(0.0, state.load - 0.7)
    error_factor = max(0.0, 1.0 - state.error_count * 0.1)
    return (state.efficiency + load_factor + error_factor) / 3


def recompute_metrics(component: SynergyComponent, emergent_signal: float) -> None:
    """Derive every metric from the component's current state.

    ``emergent_signal`` is a [0, 1) draw that supplies the non-deterministic
    fifth of the emergent-properties score.
    """
    efficiency = component.state.efficiency
    load = component.state.load
    metrics = component.metrics
    metrics.throughput = efficiency * (1 - load * 0.5) * 150
    metrics.response_time = 50 + load * 100
    metrics.accuracy = max(0.7, efficiency * 0.95)
    metrics.resource_usage = load * 0.8
    metrics.synergy_contribution = efficiency * 0.9
    metrics.emergent_properties = clamp(efficiency * 0.8 + emergent_signal * 0.2)


class ComponentRegistry:
    """Keyed component store."""

    def __init__(self) -> None:
        self._components: dict[ComponentId, SynergyComponent] = {}

    def add(self, component: SynergyComponent) -> SynergyComponent:
        """Insert or replace a component by id."""
        self._components[component.id] = component
        return component

    def remove(self, component_id: ComponentId) -> bool:
        return self._components.pop(component_id, None) is not None

    def get(self, component_id: ComponentId) -> SynergyComponent | None:
        return self._components.get(component_id)

    def list_components(self) -> list[SynergyComponent]:
        return list(self._components.values())

    def ids(self) -> list[ComponentId]:
        return list(self._components.keys())

    def connections(self) -> Iterator[tuple[SynergyComponent, SynergyConnection]]:
        for component in self._components.values():
            for connection in component.connections:
                yield component, connection

    def mean_load(self) -> float:
        return mean(c.state.load for c in self._components.values())

    def clear(self) -> None:
        self._components.clear()

    def __iter__(self) -> Iterator[SynergyComponent]:
        return iter(list(self._components.values()))

    def __contains__(self, component_id: object) -> bool:
        return component_id in self._components

    def __len__(self) -> int:
        return len(self._components)


# ── Seed components ──────────────────────────────────────────────────────────


def _connection(
    target: str,
    kind: ConnectionKind,
    strength: float,
    bandwidth: float,
    latency: float,
    reliability: float,
) -> SynergyConnection:
    return SynergyConnection(
        target_id=target,
        kind=kind,
        strength=strength,
        bandwidth=bandwidth,
        latency=latency,
        reliability=reliability,
    )


def seed_components() -> list[SynergyComponent]:
    """The four core components and their nine connections."""
    return [
        SynergyComponent(
            id="cognitive_processor",
            name="Cognitive Processing Engine",
            kind=ComponentKind.COGNITIVE,
            capabilities=["reasoning", "inference", "pattern_matching", "decision_making"],
            connections=[
                _connection("behavioral_adapter", ConnectionKind.DATA_FLOW, 0.8, 1000, 10, 0.95),
                _connection("adaptive_learner", ConnectionKind.CONTROL_FLOW, 0.7, 800, 15, 0.9),
                _connection("emergent_intelligence", ConnectionKind.FEEDBACK, 0.9, 600, 20, 0.98),
            ],
            state=ComponentState(load=0.3, efficiency=0.85, adaptation_rate=0.1),
            metrics=ComponentMetrics(
                throughput=100, response_time=50, accuracy=0.9, resource_usage=0.4,
                synergy_contribution=0.8, emergent_properties=0.6,
            ),
        ),
        SynergyComponent(
            id="behavioral_adapter",
            name="Behavioral Adaptation Engine",
            kind=ComponentKind.BEHAVIORAL,
            capabilities=["behavior_modeling", "adaptation", "learning", "optimization"],
            connections=[
                _connection("cognitive_processor", ConnectionKind.FEEDBACK, 0.75, 900, 12, 0.92),
                _connection("adaptive_learner", ConnectionKind.REINFORCEMENT, 0.85, 1200, 8, 0.94),
            ],
            state=ComponentState(load=0.25, efficiency=0.88, adaptation_rate=0.15),
            metrics=ComponentMetrics(
                throughput=80, response_time=75, accuracy=0.85, resource_usage=0.35,
                synergy_contribution=0.75, emergent_properties=0.7,
            ),
        ),
        SynergyComponent(
            id="adaptive_learner",
            name="Adaptive Learning System",
            kind=ComponentKind.ADAPTIVE,
            capabilities=["machine_learning", "pattern_discovery", "knowledge_extraction", "generalization"],
            connections=[
                _connection("cognitive_processor", ConnectionKind.DATA_FLOW, 0.9, 1500, 5, 0.96),
                _connection("emergent_intelligence", ConnectionKind.DATA_FLOW, 0.8, 700, 18, 0.93),
            ],
            state=ComponentState(load=0.4, efficiency=0.82, adaptation_rate=0.2),
            metrics=ComponentMetrics(
                throughput=120, response_time=60, accuracy=0.88, resource_usage=0.45,
                synergy_contribution=0.85, emergent_properties=0.8,
            ),
        ),
        SynergyComponent(
            id="emergent_intelligence",
            name="Emergent Intelligence Controller",
            kind=ComponentKind.EMERGENT,
            capabilities=["emergence_detection", "complexity_management", "self_organization", "innovation"],
            connections=[
                _connection("cognitive_processor", ConnectionKind.CONTROL_FLOW, 0.95, 500, 25, 0.99),
                _connection("behavioral_adapter", ConnectionKind.CONTROL_FLOW, 0.85, 600, 22, 0.97),
            ],
            state=ComponentState(load=0.2, efficiency=0.9, adaptation_rate=0.25),
            metrics=ComponentMetrics(
                throughput=60, response_time=100, accuracy=0.92, resource_usage=0.3,
                synergy_contribution=0.95, emergent_properties=0.95,
            ),
        ),
    ]
