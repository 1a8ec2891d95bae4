"""Emergence Detector — finds, scores and promotes component interactions.

Every unordered component pair is an interaction. An interaction that is
complex, stable, strong and novel enough becomes an EmergentBehavior.
Behaviors are re-scored each pass and dropped when their utility falls
below 0.3; the most useful and stable ones are promoted to architectural
patterns, alongside (not instead of) the behavior itself.

Novelty comes from the signal source. With the default source it is
deliberately stochastic: nothing in the registry records interaction
history, so there is no deterministic basis to derive it from.
"""

from __future__ import annotations

import itertools
import logging
import time
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from synergos.events.bus import PendingEvent
from synergos.synergy.components import ComponentRegistry, SynergyComponent
from synergos.synergy.signals import SignalSource
from synergos.synergy.state import ArchitecturalPattern, ArchitecturalState, Topology
from synergos.types import ComponentId, PatternId, clamp, new_id

_logger = logging.getLogger(__name__)

COMPLEXITY_THRESHOLD = 0.8
STABILITY_THRESHOLD = 0.7
STRENGTH_THRESHOLD = 0.7
NOVELTY_THRESHOLD = 0.6
NOVELTY_RANGE = (0.2, 1.0)
UTILITY_FLOOR = 0.3
PROMOTION_UTILITY = 0.7
PROMOTION_STABILITY = 0.8

INTERACTION_TRIGGERS = ("component_activation", "data_exchange", "feedback_loop")


class ComponentInteraction(BaseModel):
    """How two components are currently getting on."""

    kind: str
    components: list[ComponentId]
    complexity: float
    stability: float
    novelty: float
    utility: float
    manifestation: str
    triggers: list[str] = Field(default_factory=lambda: list(INTERACTION_TRIGGERS))


class EmergentBehavior(BaseModel):
    id: str
    name: str = ""
    description: str = ""
    manifestation: str = ""
    strength: float = 0.0
    stability: float = 0.0
    novelty: float = 0.0
    utility: float = 0.0
    components: list[ComponentId] = Field(default_factory=list)
    triggers: list[str] = Field(default_factory=list)
    detected_at: datetime = Field(default_factory=datetime.now, alias="detectedAt")

    model_config = {"populate_by_name": True, "validate_assignment": True}

    @field_validator("strength", "stability", "novelty", "utility")
    @classmethod
    def _bounded(cls, value: float) -> float:
        return clamp(value)


def interaction_between(
    first: SynergyComponent, second: SynergyComponent, novelty: float
) -> ComponentInteraction:
    return ComponentInteraction(
        kind=f"{first.kind.value}-{second.kind.value}",
        components=[first.id, second.id],
        complexity=(first.metrics.emergent_properties + second.metrics.emergent_properties) / 2,
        stability=min(first.state.efficiency, second.state.efficiency),
        novelty=novelty,
        utility=(first.metrics.synergy_contribution + second.metrics.synergy_contribution) / 2,
        manifestation=f"Synergistic interaction between {first.name} and {second.name}",
    )


class EmergenceDetector:
    """Holds the emergent behaviors and the promotion target registry."""

    def __init__(
        self,
        registry: ComponentRegistry,
        state: ArchitecturalState,
        patterns: dict[PatternId, ArchitecturalPattern],
        signals: SignalSource,
        max_behaviors: int = 200,
    ) -> None:
        self._registry = registry
        self._state = state
        self._patterns = patterns
        self._signals = signals
        self._max_behaviors = max_behaviors
        self.behaviors: dict[str, EmergentBehavior] = {}

    def run(self) -> list[PendingEvent]:
        """One emergence tick: detect, re-score, then promote."""
        events = self.detect()
        events += self.evaluate_utility()
        events += self.stabilize()
        return events

    # ── Detection ────────────────────────────────────────────────

    def interactions(self) -> list[ComponentInteraction]:
        pairs = itertools.combinations(self._registry.list_components(), 2)
        return [
            interaction_between(first, second, self._signals.uniform(*NOVELTY_RANGE))
            for first, second in pairs
        ]

    def detect(self) -> list[PendingEvent]:
        events: list[PendingEvent] = []
        for interaction in self.interactions():
            if interaction.complexity <= COMPLEXITY_THRESHOLD:
                continue
            if interaction.stability <= STABILITY_THRESHOLD:
                continue
            behavior = EmergentBehavior(
                id=f"emergence_{int(time.time() * 1000)}_{new_id()[:9]}",
                name=f"Emergent Behavior: {interaction.kind}",
                description=(
                    "Emergent behavior arising from interaction between "
                    + ", ".join(interaction.components)
                ),
                manifestation=interaction.manifestation,
                strength=interaction.complexity,
                stability=interaction.stability,
                novelty=interaction.novelty,
                utility=interaction.utility,
                components=interaction.components,
                triggers=interaction.triggers,
            )
            if behavior.strength > STRENGTH_THRESHOLD and behavior.novelty > NOVELTY_THRESHOLD:
                events += self.register(behavior)
        return events

    def register(self, behavior: EmergentBehavior) -> list[PendingEvent]:
        """Store a behavior, evicting the oldest ones beyond capacity."""
        self.behaviors[behavior.id] = behavior
        events: list[PendingEvent] = [("emergent_behavior_detected", {
            "behavior": behavior.model_dump(by_alias=True, mode="json"),
            "timestamp": int(time.time() * 1000),
        })]
        while len(self.behaviors) > self._max_behaviors:
            oldest = next(iter(self.behaviors))
            del self.behaviors[oldest]
            events.append(("emergent_behavior_removed", {"behaviorId": oldest, "reason": "capacity"}))
        return events

    # ── Utility ──────────────────────────────────────────────────

    def utility_of(self, behavior: EmergentBehavior) -> float:
        return clamp(
            behavior.strength * 0.3
            + behavior.stability * 0.3
            + behavior.novelty * 0.2
            + self._state.synergy_level * 0.2
        )

    def evaluate_utility(self) -> list[PendingEvent]:
        events: list[PendingEvent] = []
        for behavior in list(self.behaviors.values()):
            behavior.utility = self.utility_of(behavior)
            if behavior.utility < UTILITY_FLOOR:
                del self.behaviors[behavior.id]
                events.append(("emergent_behavior_removed", {
                    "behaviorId": behavior.id,
                    "reason": "utility",
                }))
        return events

    # ── Promotion ────────────────────────────────────────────────

    def stabilize(self) -> list[PendingEvent]:
        events: list[PendingEvent] = []
        for behavior in self.behaviors.values():
            if behavior.utility > PROMOTION_UTILITY and behavior.stability > PROMOTION_STABILITY:
                pattern = self.promote(behavior)
                if pattern is not None:
                    events.append(("pattern_promoted", {
                        "pattern": pattern.model_dump(mode="json"),
                        "originalBehavior": behavior.model_dump(by_alias=True, mode="json"),
                    }))
        return events

    def promote(self, behavior: EmergentBehavior) -> ArchitecturalPattern | None:
        """Add a pattern derived from the behavior; None if it was promoted before."""
        pattern_id = f"pattern_{behavior.id}"
        if pattern_id in self._patterns:
            return None
        pattern = ArchitecturalPattern(
            id=pattern_id,
            name=f"Pattern: {behavior.name}",
            description=f"Promoted from emergent behavior: {behavior.description}",
            topology=Topology.EMERGENT,
            components=[cid for cid in behavior.components if cid in self._registry],
            scalability=behavior.utility,
            resilience=behavior.stability,
            adaptability=behavior.novelty,
        )
        self._patterns[pattern_id] = pattern
        _logger.info("Promoted %s to architectural pattern %s", behavior.id, pattern_id)
        return pattern

    def __len__(self) -> int:
        return len(self.behaviors)
