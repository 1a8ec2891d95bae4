"""Synergy Architecture — the control loop's public face.

Owns the component registry, the aggregate ArchitecturalState, the
architectural pattern registry, the emergent behaviors and the agents.
Each ``run_*_cycle`` method is one tick of one background cycle. A tick
that finds the shared mutation lock held is skipped rather than queued;
these are approximate control loops, and the reasoning entry point must
never wait behind them.

Usage:
    architecture = SynergyArchitecture(event_bus=bus, signals=RandomSignalSource(7))
    await architecture.run_health_cycle()
    architecture.get_architectural_statistics()["synergyLevel"]
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable

from synergos.config import SynergosSettings, settings as default_settings
from synergos.events.bus import EventBus, PendingEvent
from synergos.synergy.agents import AgentScheduler, seed_agents
from synergos.synergy.components import ComponentRegistry, SynergyComponent, seed_components
from synergos.synergy.emergence import EmergenceDetector
from synergos.synergy.evolution import EvolutionPlanner
from synergos.synergy.health import HealthMonitor
from synergos.synergy.signals import RandomSignalSource, SignalSource
from synergos.synergy.state import (
    ArchitecturalPattern,
    ArchitecturalState,
    seed_architectural_patterns,
)
from synergos.types import ComponentId, PatternId, clamp
from synergos.validation import validate_leniently

_logger = logging.getLogger(__name__)


class SynergyArchitecture:
    """Components, patterns, emergent behaviors and agents under one lock."""

    def __init__(
        self,
        event_bus: EventBus | None = None,
        settings: SynergosSettings | None = None,
        lock: asyncio.Lock | None = None,
        signals: SignalSource | None = None,
    ) -> None:
        self._settings = settings or default_settings
        self._event_bus = event_bus
        self._lock = lock or asyncio.Lock()
        self._signals = signals or RandomSignalSource(self._settings.random_seed)

        self.autogenesis_enabled = self._settings.autogenesis_enabled
        self.synergy_threshold = clamp(self._settings.synergy_threshold)

        self._initialize()

    def _initialize(self) -> None:
        self.registry = ComponentRegistry()
        for component in seed_components():
            self.registry.add(component)

        self.state = ArchitecturalState()
        self.patterns: dict[PatternId, ArchitecturalPattern] = {
            p.id: p for p in seed_architectural_patterns(self.registry.ids())
        }

        self.health = HealthMonitor(self.registry, self.state, self._signals)
        self.evolution = EvolutionPlanner(self.registry, self.state)
        self.emergence = EmergenceDetector(
            self.registry,
            self.state,
            self.patterns,
            self._signals,
            max_behaviors=self._settings.max_emergent_behaviors,
        )
        self.scheduler = AgentScheduler(
            self.registry, self.state, self.patterns, self.health, self.emergence
        )
        for agent in seed_agents():
            self.scheduler.add(agent)

        self.health.refresh_counts(len(self.emergence))

    # ── Cycles ───────────────────────────────────────────────────

    async def run_health_cycle(self) -> bool:
        """Drift, recompute metrics and aggregate state, report anomalies."""
        return await self._tick("health", lambda: self.health.check(len(self.emergence)))

    async def run_evolution_cycle(self) -> bool:
        if not self.autogenesis_enabled:
            return False
        return await self._tick("evolution", lambda: self.evolution.evolve(self.synergy_threshold))

    async def run_tuning_cycle(self) -> bool:
        if not self.autogenesis_enabled:
            return False

        def tune() -> list[PendingEvent]:
            self.evolution.tune()
            return []

        return await self._tick("tuning", tune)

    async def run_emergence_cycle(self) -> bool:
        return await self._tick("emergence", self.emergence.run)

    async def run_agent_cycle(self) -> bool:
        return await self._tick("agents", self.scheduler.run)

    async def _tick(self, cycle: str, body: Callable[[], list[PendingEvent]]) -> bool:
        """Run ``body`` under the lock unless the lock is taken. Returns whether it ran."""
        if self._lock.locked():
            _logger.debug("Skipping %s tick: state is busy", cycle)
            return False
        async with self._lock:
            events = body()
        await self._emit_all(events)
        return True

    # ── Introspection ────────────────────────────────────────────

    def get_architectural_state(self) -> dict[str, Any]:
        snapshot = self.state.snapshot()
        snapshot.update({
            "components": [
                c.model_dump(by_alias=True, mode="json") for c in self.registry.list_components()
            ],
            "patterns": [p.model_dump(mode="json") for p in self.patterns.values()],
            "emergentBehaviors": [
                b.model_dump(by_alias=True, mode="json") for b in self.emergence.behaviors.values()
            ],
            "autonomousAgents": [
                a.model_dump(by_alias=True, mode="json") for a in self.scheduler.agents.values()
            ],
        })
        return snapshot

    def get_architectural_statistics(self) -> dict[str, Any]:
        return {
            "totalComponents": len(self.registry),
            "activeComponents": self.state.active_components,
            "totalPatterns": len(self.patterns),
            "emergentBehaviors": len(self.emergence),
            "autonomousAgents": len(self.scheduler.agents),
            "synergyLevel": self.state.synergy_level,
            "coherence": self.state.coherence,
            "resilience": self.state.resilience,
            "autonomyLevel": self.state.autonomy_level,
            "evolutionCount": self.state.evolution_count,
            "lastEvolution": self.state.last_evolution.isoformat(),
        }

    # ── Configuration ────────────────────────────────────────────

    async def set_autogenesis_enabled(self, enabled: bool) -> None:
        self.autogenesis_enabled = bool(enabled)
        await self._emit("autogenesis_change", {"enabled": self.autogenesis_enabled})

    def set_synergy_threshold(self, threshold: float) -> None:
        self.synergy_threshold = clamp(threshold)

    # ── Component management ─────────────────────────────────────

    async def add_component(
        self, component: SynergyComponent | dict[str, Any]
    ) -> SynergyComponent | None:
        """Insert or replace a component by id.

        Malformed fields fall back to their defaults. A component without a
        usable id is skipped and None returned.
        """
        if not isinstance(component, SynergyComponent):
            parsed = None
            if isinstance(component, dict):
                parsed = validate_leniently(SynergyComponent, component)
            if parsed is None:
                _logger.warning("Skipping component without a usable id")
                return None
            component = parsed
        async with self._lock:
            self.registry.add(component)
            self.health.refresh_counts(len(self.emergence))
        _logger.info("Component added: %s", component.id)
        await self._emit("component_added", {
            "component": component.model_dump(by_alias=True, mode="json"),
        })
        return component

    async def remove_component(self, component_id: ComponentId) -> bool:
        """Remove a component. Unknown ids are a no-op."""
        async with self._lock:
            removed = self.registry.remove(component_id)
            self.health.refresh_counts(len(self.emergence))
        if removed:
            _logger.info("Component removed: %s", component_id)
            await self._emit("component_removed", {"componentId": component_id})
        return removed

    async def reset(self) -> None:
        """Back to the seeded startup state. Switches and thresholds are kept."""
        async with self._lock:
            self._initialize()
        _logger.info("Synergy architecture reset")

    async def _emit(self, topic: str, data: dict[str, Any]) -> None:
        if self._event_bus:
            await self._event_bus.emit(topic, data, source="synergy")

    async def _emit_all(self, events: list[PendingEvent]) -> None:
        if self._event_bus and events:
            await self._event_bus.emit_all(events, source="synergy")
