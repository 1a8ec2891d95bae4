"""Pattern Library — named templates over the AtomSpace.

A pattern is a small subgraph plus an activation threshold and a synergy
score. Patterns are never "on" or "off" as stored state; activation is
computed from whichever member nodes are currently active.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from synergos.cognition.atomspace import (
    AtomSpace,
    AttentionValue,
    CognitiveLink,
    CognitiveNode,
    LinkKind,
    NodeKind,
    TruthValue,
)
from synergos.types import NodeId, PatternId, clamp, mean

INTENT_PATTERN = "intent_recognition"
DIALOG_PATTERN = "dialog_management"
RESPONSE_PATTERN = "response_generation"

INTENT_NODES = ("user_input", "intent_classifier", "context_analyzer")
DIALOG_NODES = ("dialog_state", "flow_controller")
RESPONSE_NODES = ("response_generator", "contextual_adapter")


class CognitivePattern(BaseModel):
    """Immutable template matched against the active node set."""

    id: PatternId
    name: str = ""
    description: str = ""
    threshold: float = Field(0.5, alias="activationThreshold")
    synergy_score: float = Field(0.5, alias="synergyScore")
    nodes: list[CognitiveNode] = Field(default_factory=list)
    links: list[CognitiveLink] = Field(default_factory=list)

    model_config = {"populate_by_name": True, "frozen": True}

    @field_validator("threshold", "synergy_score")
    @classmethod
    def _bounded(cls, value: float) -> float:
        return clamp(value)

    @property
    def node_ids(self) -> list[NodeId]:
        return [node.id for node in self.nodes]


class PatternLibrary:
    """Keyed pattern store with activation scoring."""

    def __init__(self) -> None:
        self._patterns: dict[PatternId, CognitivePattern] = {}

    def add(self, pattern: CognitivePattern) -> CognitivePattern:
        """Insert or replace a pattern by id."""
        self._patterns[pattern.id] = pattern
        return pattern

    def remove(self, pattern_id: PatternId) -> bool:
        return self._patterns.pop(pattern_id, None) is not None

    def get(self, pattern_id: PatternId) -> CognitivePattern | None:
        return self._patterns.get(pattern_id)

    def list_patterns(self) -> list[CognitivePattern]:
        return list(self._patterns.values())

    def clear(self) -> None:
        self._patterns.clear()

    def __len__(self) -> int:
        return len(self._patterns)

    def __contains__(self, pattern_id: object) -> bool:
        return pattern_id in self._patterns

    @staticmethod
    def activation(
        pattern: CognitivePattern,
        atomspace: AtomSpace,
        active_nodes: set[NodeId],
    ) -> float:
        """Mean strength x confidence over member nodes that are active.

        Live values come from the AtomSpace; the pattern's own copy of a
        node is the fallback when the store does not hold it.
        """
        scores = []
        for member in pattern.nodes:
            if member.id not in active_nodes:
                continue
            node = atomspace.get(member.id) or member
            scores.append(node.truth_value.score)
        return mean(scores)

    def active(
        self,
        atomspace: AtomSpace,
        active_nodes: set[NodeId],
    ) -> list[tuple[CognitivePattern, float]]:
        """Patterns whose activation exceeds their threshold, with that activation."""
        result = []
        for pattern in self._patterns.values():
            level = self.activation(pattern, atomspace, active_nodes)
            if level > pattern.threshold:
                result.append((pattern, level))
        return result


# ── Seed patterns ────────────────────────────────────────────────────────────


def _node(
    node_id: str,
    kind: NodeKind,
    truth: tuple[float, float],
    attention: tuple[float, float, float],
) -> CognitiveNode:
    return CognitiveNode(
        id=node_id,
        kind=kind,
        truth_value=TruthValue(strength=truth[0], confidence=truth[1]),
        attention_value=AttentionValue(
            short_term=attention[0],
            long_term=attention[1],
            very_long_term=attention[2],
        ),
    )


def _link(
    source: str,
    target: str,
    kind: LinkKind,
    truth: tuple[float, float],
    weight: float,
) -> CognitiveLink:
    return CognitiveLink(
        source=source,
        target=target,
        kind=kind,
        truth_value=TruthValue(strength=truth[0], confidence=truth[1]),
        weight=weight,
    )


def seed_patterns() -> list[CognitivePattern]:
    """The three conversation patterns every engine starts with."""
    return [
        CognitivePattern(
            id=INTENT_PATTERN,
            name="Intent Recognition Synergy",
            description="Recognizes and classifies what the user is asking for",
            threshold=0.6,
            synergy_score=0.8,
            nodes=[
                _node("user_input", NodeKind.CONCEPT, (1.0, 0.9), (0.8, 0.6, 0.4)),
                _node("intent_classifier", NodeKind.PROCEDURE, (0.9, 0.85), (0.9, 0.8, 0.7)),
                _node("context_analyzer", NodeKind.PROCEDURE, (0.85, 0.8), (0.7, 0.9, 0.8)),
            ],
            links=[
                _link("user_input", "intent_classifier", LinkKind.EXECUTION, (0.9, 0.85), 0.8),
                _link("user_input", "context_analyzer", LinkKind.EVALUATION, (0.85, 0.8), 0.75),
            ],
        ),
        CognitivePattern(
            id=DIALOG_PATTERN,
            name="Dialog Flow Synergy",
            description="Tracks dialog state and steers the conversation flow",
            threshold=0.7,
            synergy_score=0.75,
            nodes=[
                _node("dialog_state", NodeKind.CONCEPT, (1.0, 0.95), (0.95, 0.85, 0.7)),
                _node("flow_controller", NodeKind.PROCEDURE, (0.9, 0.9), (0.85, 0.9, 0.8)),
            ],
            links=[
                _link("dialog_state", "flow_controller", LinkKind.EXECUTION, (0.95, 0.9), 0.9),
            ],
        ),
        CognitivePattern(
            id=RESPONSE_PATTERN,
            name="Response Generation Synergy",
            description="Produces responses adapted to the conversational context",
            threshold=0.65,
            synergy_score=0.85,
            nodes=[
                _node("response_generator", NodeKind.PROCEDURE, (0.9, 0.85), (0.8, 0.7, 0.6)),
                _node("contextual_adapter", NodeKind.PROCEDURE, (0.85, 0.8), (0.75, 0.85, 0.9)),
            ],
            links=[
                _link("response_generator", "contextual_adapter", LinkKind.EXECUTION, (0.88, 0.83), 0.85),
            ],
        ),
    ]
