"""Architectural state and patterns — the control loop's aggregate view."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator

from synergos.types import ComponentId, PatternId, clamp


class Topology(str, Enum):
    HIERARCHICAL = "hierarchical"
    NETWORKED = "networked"
    DISTRIBUTED = "distributed"
    EMERGENT = "emergent"


class ArchitecturalPattern(BaseModel):
    """A structural template, seeded at startup or promoted from an emergent behavior."""

    id: PatternId
    name: str
    description: str = ""
    topology: Topology = Topology.NETWORKED
    components: list[ComponentId] = Field(default_factory=list)
    scalability: float = 0.5
    resilience: float = 0.5
    adaptability: float = 0.5

    model_config = {"validate_assignment": True}

    @field_validator("scalability", "resilience", "adaptability")
    @classmethod
    def _bounded(cls, value: float) -> float:
        return clamp(value)


class ArchitecturalState(BaseModel):
    """Aggregate counters and scores, recomputed every health cycle.

    ``evolution_count`` only ever grows; ``last_evolution`` moves only when
    an evolution is actually applied.
    """

    total_components: int = Field(0, alias="totalComponents")
    active_components: int = Field(0, alias="activeComponents")
    emergent_behaviors: int = Field(0, alias="emergentBehaviors")
    synergy_level: float = Field(0.5, alias="synergyLevel")
    adaptation_rate: float = Field(0.1, alias="adaptationRate")
    autonomy_level: float = Field(0.8, alias="autonomyLevel")
    coherence: float = 0.75
    resilience: float = 0.6
    last_evolution: datetime = Field(default_factory=datetime.now, alias="lastEvolution")
    evolution_count: int = Field(0, alias="evolutionCount")

    model_config = {"populate_by_name": True, "validate_assignment": True}

    @field_validator("synergy_level", "autonomy_level", "coherence", "resilience")
    @classmethod
    def _bounded(cls, value: float) -> float:
        return clamp(value)

    def snapshot(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


def seed_architectural_patterns(components: list[ComponentId]) -> list[ArchitecturalPattern]:
    """The four reference topologies, each spanning every seeded component."""
    return [
        ArchitecturalPattern(
            id="hierarchical_cognitive",
            name="Hierarchical Cognitive Architecture",
            description="Multi-level cognitive processing with hierarchical control",
            topology=Topology.HIERARCHICAL,
            components=list(components),
            scalability=0.8, resilience=0.7, adaptability=0.75,
        ),
        ArchitecturalPattern(
            id="networked_synergy",
            name="Networked Synergy Architecture",
            description="Highly interconnected components for maximum synergy",
            topology=Topology.NETWORKED,
            components=list(components),
            scalability=0.9, resilience=0.85, adaptability=0.9,
        ),
        ArchitecturalPattern(
            id="distributed_intelligence",
            name="Distributed Intelligence Architecture",
            description="Distributed processing for scalability and resilience",
            topology=Topology.DISTRIBUTED,
            components=list(components),
            scalability=0.95, resilience=0.9, adaptability=0.8,
        ),
        ArchitecturalPattern(
            id="emergent_behavior",
            name="Emergent Behavior Architecture",
            description="Self-organizing architecture that lets new behavior emerge",
            topology=Topology.EMERGENT,
            components=list(components),
            scalability=0.85, resilience=0.95, adaptability=0.95,
        ),
    ]
