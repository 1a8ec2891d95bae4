"""Cognitive state — the single mutable record of what the engine is attending to."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

from synergos.types import NodeId, clamp, mean

LEARNING_RATE_MIN = 0.05
LEARNING_RATE_MAX = 0.2
FOCUS_SIZE = 5
EFFECTIVENESS_WINDOW = 20


class AdaptationRecord(BaseModel):
    """One learning step: what triggered it, what changed, how well it went."""

    timestamp: datetime = Field(default_factory=datetime.now)
    trigger: str
    adaptation: str
    effectiveness: float

    @field_validator("effectiveness")
    @classmethod
    def _bounded(cls, value: float) -> float:
        return clamp(value)


class CognitiveState(BaseModel):
    """Active nodes, attentional focus, synergy, learning rate and history.

    ``synergy_level`` and ``learning_rate`` are clamped on every assignment.
    The adaptation history is capacity-bounded; the oldest records go first.
    """

    active_nodes: set[NodeId] = Field(default_factory=set)
    attentional_focus: list[NodeId] = Field(default_factory=list)
    synergy_level: float = 0.5
    learning_rate: float = 0.1
    adaptation_history: list[AdaptationRecord] = Field(default_factory=list)
    history_limit: int = 100

    model_config = {"validate_assignment": True}

    @field_validator("synergy_level")
    @classmethod
    def _synergy_bounded(cls, value: float) -> float:
        return clamp(value)

    @field_validator("learning_rate")
    @classmethod
    def _rate_bounded(cls, value: float) -> float:
        return clamp(value, LEARNING_RATE_MIN, LEARNING_RATE_MAX)

    def record(self, record: AdaptationRecord) -> None:
        """Append a record and trim to capacity in one step."""
        history = self.adaptation_history
        history.append(record)
        if len(history) > self.history_limit:
            del history[:len(history) - self.history_limit]

    def average_effectiveness(self, window: int = EFFECTIVENESS_WINDOW) -> float:
        """Mean effectiveness of the last ``window`` records; 0.5 with no history."""
        recent = self.adaptation_history[-window:]
        return mean((r.effectiveness for r in recent), default=0.5)

    def snapshot(self) -> dict[str, Any]:
        return {
            "activeNodes": sorted(self.active_nodes),
            "attentionalFocus": list(self.attentional_focus),
            "synergyLevel": self.synergy_level,
            "learningRate": self.learning_rate,
            "adaptationHistory": [
                r.model_dump(mode="json") for r in self.adaptation_history
            ],
        }
