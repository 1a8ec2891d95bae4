"""Evolution cycle — autogenesis of connection strength and component tuning.

``evolve`` is the slow pass: it plans from the aggregate state and, when
a plan triggers, applies it and stamps the evolution. ``tune`` is the
faster pass that nudges connection bandwidth/latency by reliability and
component adaptation rates by health.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from synergos.events.bus import PendingEvent
from synergos.synergy.components import (
    ADAPTATION_RATE_MAX,
    ADAPTATION_RATE_MIN,
    ComponentRegistry,
    component_health,
)
from synergos.synergy.state import ArchitecturalState

COHERENCE_THRESHOLD = 0.7
BANDWIDTH_CAP = 2000.0
BANDWIDTH_FLOOR = 100.0
LATENCY_FLOOR = 1.0
REBALANCE_FACTOR = 1.2
REBALANCE_STEP = 0.1
REBALANCE_FLOOR = 0.1


class EvolutionPlan(BaseModel):
    should_evolve: bool = Field(False, alias="shouldEvolve")
    type: str = "optimization"
    changes: list[str] = Field(default_factory=list)
    expected_improvement: float = Field(0.0, alias="expectedImprovement")
    branches: list[str] = Field(default_factory=list)

    model_config = {"populate_by_name": True}


class EvolutionPlanner:
    def __init__(self, registry: ComponentRegistry, state: ArchitecturalState) -> None:
        self._registry = registry
        self._state = state

    # ── Slow pass ────────────────────────────────────────────────

    def plan(self, synergy_threshold: float) -> EvolutionPlan:
        plan = EvolutionPlan()
        if self._state.synergy_level < synergy_threshold:
            plan.should_evolve = True
            plan.type = "synergy_improvement"
            plan.branches.append("synergy_improvement")
            plan.changes += ["Strengthen component connections", "Optimize information flow"]
            plan.expected_improvement = 0.1
        if self._state.coherence < COHERENCE_THRESHOLD:
            plan.should_evolve = True
            plan.type = "coherence_improvement"
            plan.branches.append("coherence_improvement")
            plan.changes += ["Realign component goals", "Improve coordination mechanisms"]
            plan.expected_improvement += 0.15
        return plan

    def apply(self, plan: EvolutionPlan) -> bool:
        """Apply every triggered branch, or rebalance load when none did.

        Returns whether anything was applied. A rebalance that moves no
        load does not count as an evolution.
        """
        if "synergy_improvement" in plan.branches:
            self.improve_synergy()
        if "coherence_improvement" in plan.branches:
            self.improve_coherence()
        if plan.should_evolve:
            return True

        if self.rebalance_load():
            plan.should_evolve = True
            plan.branches.append("optimization")
            plan.changes.append("Rebalance component load")
            return True
        return False

    def evolve(self, synergy_threshold: float) -> list[PendingEvent]:
        plan = self.plan(synergy_threshold)
        if not self.apply(plan):
            return []
        self._state.evolution_count += 1
        self._state.last_evolution = datetime.now()
        return [("architecture_evolution", {
            "evolution": plan.model_dump(by_alias=True),
            "newState": self._state.snapshot(),
        })]

    def improve_synergy(self) -> None:
        for _, connection in self._registry.connections():
            if connection.reliability > 0.9:
                connection.strength = connection.strength + 0.05
                connection.bandwidth = min(BANDWIDTH_CAP, connection.bandwidth * 1.1)

    def improve_coherence(self) -> None:
        for component in self._registry:
            component.state.efficiency = component.state.efficiency + 0.02
            component.state.adaptation_rate = max(
                ADAPTATION_RATE_MIN, component.state.adaptation_rate - 0.01
            )

    def rebalance_load(self) -> bool:
        if not len(self._registry):
            return False
        ceiling = self._registry.mean_load() * REBALANCE_FACTOR
        changed = False
        for component in self._registry:
            if component.state.load > ceiling:
                reduced = max(REBALANCE_FLOOR, component.state.load - REBALANCE_STEP)
                if reduced != component.state.load:
                    component.state.load = reduced
                    changed = True
        return changed

    # ── Fast pass ────────────────────────────────────────────────

    def tune(self) -> dict[str, Any]:
        return {
            "connections": self.tune_connections(),
            "components": self.adapt_component_behaviour(),
        }

    def tune_connections(self) -> int:
        tuned = 0
        for _, connection in self._registry.connections():
            if connection.reliability > 0.95:
                connection.bandwidth = min(BANDWIDTH_CAP, connection.bandwidth * 1.02)
            elif connection.reliability < 0.8:
                connection.bandwidth = max(BANDWIDTH_FLOOR, connection.bandwidth * 0.98)
            connection.latency = max(LATENCY_FLOOR, connection.latency - 0.5)
            tuned += 1
        return tuned

    def adapt_component_behaviour(self) -> int:
        """Nudge adaptation rates by health. Returns how many components moved."""
        moved = 0
        for component in self._registry:
            health = component_health(component)
            rate = component.state.adaptation_rate
            if health > 0.8:
                component.state.adaptation_rate = min(ADAPTATION_RATE_MAX, rate + 0.01)
            elif health < 0.6:
                component.state.adaptation_rate = max(ADAPTATION_RATE_MIN, rate - 0.01)
            if component.state.adaptation_rate != rate:
                moved += 1
        return moved
