"""Health cycle — drift, metric recomputation, aggregate state, anomalies.

One ``check`` is one monitoring tick. It must run inside the shared
mutation lock: metrics are derived from the component state as it
stands after the drift step, and the aggregate state is then derived
from those metrics. The returned events are published by the caller
once the lock is released.
"""

from __future__ import annotations

import time
from datetime import datetime

from synergos.events.bus import PendingEvent
from synergos.synergy.components import (
    ComponentRegistry,
    SynergyComponent,
    component_health,
    recompute_metrics,
)
from synergos.synergy.signals import SignalSource
from synergos.synergy.state import ArchitecturalState
from synergos.types import mean, variance

LOAD_DRIFT = 0.05
EFFICIENCY_DRIFT = 0.025

HIGH_LOAD = 0.9
LOW_EFFICIENCY = 0.6
HIGH_ERROR_COUNT = 5


class HealthMonitor:
    """Keeps ArchitecturalState in step with the component registry."""

    def __init__(
        self,
        registry: ComponentRegistry,
        state: ArchitecturalState,
        signals: SignalSource,
    ) -> None:
        self._registry = registry
        self._state = state
        self._signals = signals

    def check(self, emergent_count: int) -> list[PendingEvent]:
        events: list[PendingEvent] = []
        for component in self._registry:
            self.drift(component)
            recompute_metrics(component, self._signals.uniform(0.0, 1.0))
            events.append(("component_health", {
                "componentId": component.id,
                "health": component_health(component),
                "state": component.state.model_dump(by_alias=True, mode="json"),
                "metrics": component.metrics.model_dump(by_alias=True, mode="json"),
            }))

        self.refresh_state(emergent_count)

        anomalies = self.anomalies()
        if anomalies:
            events.append(("performance_anomaly", {
                "anomalies": anomalies,
                "timestamp": int(time.time() * 1000),
            }))
        return events

    def drift(self, component: SynergyComponent) -> None:
        """Perturb load and efficiency by a bounded signal. The state model clamps."""
        state = component.state
        state.load = state.load + self._signals.uniform(-LOAD_DRIFT, LOAD_DRIFT)
        state.efficiency = state.efficiency + self._signals.uniform(-EFFICIENCY_DRIFT, EFFICIENCY_DRIFT)
        state.last_update = datetime.now()

    def refresh_counts(self, emergent_count: int) -> None:
        components = self._registry.list_components()
        self._state.total_components = len(components)
        self._state.active_components = sum(1 for c in components if c.state.active)
        self._state.emergent_behaviors = emergent_count

    def refresh_state(self, emergent_count: int) -> None:
        self.refresh_counts(emergent_count)
        components = self._registry.list_components()
        if not components:
            return
        self._state.synergy_level = mean(c.metrics.synergy_contribution for c in components)
        self._state.coherence = mean(c.state.efficiency for c in components)
        self._state.resilience = max(0.0, 1.0 - variance(component_health(c) for c in components))

    def anomalies(self) -> list[str]:
        found: list[str] = []
        for component in self._registry:
            state = component.state
            if state.load > HIGH_LOAD:
                found.append(f"High load detected in {component.id}: {state.load * 100:.1f}%")
            if state.efficiency < LOW_EFFICIENCY:
                found.append(
                    f"Low efficiency detected in {component.id}: {state.efficiency * 100:.1f}%"
                )
            if state.error_count > HIGH_ERROR_COUNT:
                found.append(
                    f"High error count detected in {component.id}: {state.error_count} errors"
                )
        return found

    def mean_health(self) -> float:
        return mean(component_health(c) for c in self._registry)
