"""Reasoning Pipeline — from an input to a scored, annotated response.

One pass does, in order:
  1. activate the nodes the input shape makes relevant
  2. recompute the attentional focus
  3. recompute the global synergy level from active patterns
  4-6. infer intent, context and action, each with its own confidence
  7. synthesize response text, annotated by synergy band
  8. suggest adaptations when confidence or synergy run low
  9. assemble the response with a state snapshot

Everything degrades to defaults: an empty input activates nothing and is
classified as a "general" intent.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from synergos.cognition.atomspace import AtomSpace
from synergos.cognition.inputs import CognitiveInput
from synergos.cognition.patterns import (
    DIALOG_NODES,
    DIALOG_PATTERN,
    INTENT_NODES,
    INTENT_PATTERN,
    CognitivePattern,
    PatternLibrary,
    RESPONSE_NODES,
    RESPONSE_PATTERN,
)
from synergos.cognition.state import FOCUS_SIZE, CognitiveState
from synergos.types import NodeId, clamp, mean

ATTENTION_BUMP = 0.1
NEUTRAL_SYNERGY = 0.5
MISSING_PATTERN_CONFIDENCE = 0.5
UNKNOWN = "unknown"

# (intent, keywords, confidence bonus); first match wins
INTENT_RULES: tuple[tuple[str, tuple[str, ...], float], ...] = (
    ("help_request", ("help", "assist"), 0.2),
    ("farewell", ("bye", "goodbye"), 0.15),
    ("greeting", ("hello", "hi"), 0.15),
)

PROCESSING_PATH = [
    "Input processing",
    "Cognitive state update",
    "Pattern activation",
    "Reasoning application",
    "Synergy calculation",
    "Response generation",
    "Adaptation planning",
]

GREETINGS = [
    "Hello! I'm here to help you with cognitive assistance.",
    "Hi there! Ready to explore some intelligent solutions together?",
    "Greetings! Let's engage in some productive cognitive synergy.",
]
HELP_TEXT = (
    "I can assist you with cognitive reasoning, pattern recognition, and adaptive responses. "
    "My cognitive architecture allows me to learn and adapt to provide better assistance over time. "
    "What would you like help with?"
)
FAREWELL_TEXT = (
    "Goodbye! Our cognitive interaction has been valuable for my learning and adaptation. "
    "Feel free to return anytime for more intelligent assistance."
)
HIGH_SYNERGY_NOTE = (
    " [Cognitive enhancement: High synergy detected - responses optimized for maximum effectiveness]"
)
ADAPTING_NOTE = " [Cognitive adaptation: Adjusting response patterns to improve synergy]"

HIGH_SYNERGY = 0.8
LOW_SYNERGY = 0.4
LOW_CONFIDENCE_HINT = 0.6
LOW_SYNERGY_HINT = 0.5


class IntentInference(BaseModel):
    intent: str = "general"
    confidence: float = 0.0


class ContextInference(BaseModel):
    context: str = "conversational"
    dialog_state: str = Field("active", alias="dialogState")
    turn_count: int = Field(1, alias="turnCount")
    confidence: float = 0.0

    model_config = {"populate_by_name": True}


class ActionInference(BaseModel):
    action: str = "respond"
    response_type: str = Field("contextual", alias="responseType")
    adaptation_level: float = Field(0.5, alias="adaptationLevel")
    confidence: float = 0.0

    model_config = {"populate_by_name": True}


class Reasoning(BaseModel):
    """The intent/context/action triple and their mean confidence."""

    intent: IntentInference
    context: ContextInference
    action: ActionInference

    @property
    def confidence(self) -> float:
        return mean([
            self.intent.confidence,
            self.context.confidence,
            self.action.confidence,
        ])


class ResponseMetadata(BaseModel):
    cognitive_state: dict[str, Any] = Field(default_factory=dict, alias="cognitiveState")
    active_patterns: list[str] = Field(default_factory=list, alias="activePatterns")
    processing_path: list[str] = Field(default_factory=list, alias="processingPath")

    model_config = {"populate_by_name": True}


class CognitiveResponse(BaseModel):
    """What ``process_input`` hands back to the caller."""

    type: str = "cognitive_response"
    content: str
    confidence: float
    synergy_level: float = Field(alias="synergyLevel")
    adaptations: list[str] = Field(default_factory=list)
    intent: str = "general"
    metadata: ResponseMetadata = Field(default_factory=ResponseMetadata)

    model_config = {"populate_by_name": True}

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


def relevant_nodes(inp: CognitiveInput) -> list[NodeId]:
    """Node ids the shape of an input makes relevant."""
    nodes: list[NodeId] = []
    if inp.carries_message:
        nodes.extend(INTENT_NODES)
    if inp.dialog:
        nodes.extend(DIALOG_NODES)
    if inp.requires_response:
        nodes.extend(RESPONSE_NODES)
    return nodes


class ReasoningPipeline:
    """Stateless logic over the orchestrator's AtomSpace, patterns and state."""

    def __init__(
        self,
        atomspace: AtomSpace,
        patterns: PatternLibrary,
        state: CognitiveState,
    ) -> None:
        self._atomspace = atomspace
        self._patterns = patterns
        self._state = state

    def run(self, inp: CognitiveInput) -> CognitiveResponse:
        self.activate(inp)
        reasoning = self.reason(inp)
        return self.synthesize(reasoning)

    # ── State update ─────────────────────────────────────────────

    def activate(self, inp: CognitiveInput) -> list[NodeId]:
        """Mark relevant nodes active, bump their attention, refresh focus and synergy."""
        nodes = relevant_nodes(inp)
        for node_id in nodes:
            self._state.active_nodes.add(node_id)
            node = self._atomspace.get(node_id)
            if node:
                node.attention_value.short_term = clamp(
                    node.attention_value.short_term + ATTENTION_BUMP
                )
        self.update_focus()
        self.update_synergy()
        return nodes

    def update_focus(self) -> None:
        def importance(node_id: NodeId) -> float:
            node = self._atomspace.get(node_id)
            return node.attention_value.short_term if node else 0.0

        ranked = sorted(self._state.active_nodes, key=lambda n: (-importance(n), n))
        self._state.attentional_focus = ranked[:FOCUS_SIZE]

    def update_synergy(self) -> None:
        active = self.active_patterns()
        if not active:
            self._state.synergy_level = NEUTRAL_SYNERGY
            return
        self._state.synergy_level = mean(
            pattern.synergy_score * level for pattern, level in active
        )

    def active_patterns(self) -> list[tuple[CognitivePattern, float]]:
        return self._patterns.active(self._atomspace, self._state.active_nodes)

    def pattern_activation(self, pattern_id: str) -> float | None:
        pattern = self._patterns.get(pattern_id)
        if pattern is None:
            return None
        return self._patterns.activation(pattern, self._atomspace, self._state.active_nodes)

    # ── Inference ────────────────────────────────────────────────

    def reason(self, inp: CognitiveInput) -> Reasoning:
        return Reasoning(
            intent=self.infer_intent(inp),
            context=self.infer_context(inp),
            action=self.infer_action(),
        )

    def infer_intent(self, inp: CognitiveInput) -> IntentInference:
        activation = self.pattern_activation(INTENT_PATTERN)
        if activation is None:
            return IntentInference(intent=UNKNOWN, confidence=MISSING_PATTERN_CONFIDENCE)

        text = (inp.text or "").lower()
        for intent, keywords, bonus in INTENT_RULES:
            if any(keyword in text for keyword in keywords):
                return IntentInference(intent=intent, confidence=clamp(activation + bonus))
        return IntentInference(intent="general", confidence=activation)

    def infer_context(self, inp: CognitiveInput) -> ContextInference:
        activation = self.pattern_activation(DIALOG_PATTERN)
        if activation is None:
            return ContextInference(context=UNKNOWN, confidence=MISSING_PATTERN_CONFIDENCE)
        return ContextInference(
            dialog_state=inp.dialog_state or "active",
            turn_count=inp.turn_count or 1,
            confidence=activation,
        )

    def infer_action(self) -> ActionInference:
        activation = self.pattern_activation(RESPONSE_PATTERN)
        return ActionInference(
            adaptation_level=self._state.synergy_level,
            confidence=MISSING_PATTERN_CONFIDENCE if activation is None else activation,
        )

    # ── Synthesis ────────────────────────────────────────────────

    def synthesize(self, reasoning: Reasoning) -> CognitiveResponse:
        return CognitiveResponse(
            content=self.compose_content(reasoning),
            confidence=clamp(reasoning.confidence),
            synergy_level=self._state.synergy_level,
            adaptations=self.suggest_adaptations(reasoning),
            intent=reasoning.intent.intent,
            metadata=ResponseMetadata(
                cognitive_state=self._state.snapshot(),
                active_patterns=[p.id for p, _ in self.active_patterns()],
                processing_path=list(PROCESSING_PATH),
            ),
        )

    def compose_content(self, reasoning: Reasoning) -> str:
        intent = reasoning.intent.intent
        if intent == "greeting":
            content = GREETINGS[(reasoning.context.turn_count - 1) % len(GREETINGS)]
        elif intent == "help_request":
            content = HELP_TEXT
        elif intent == "farewell":
            content = FAREWELL_TEXT
        else:
            content = (
                "I understand you're looking for assistance. Based on my cognitive analysis "
                f"(confidence: {reasoning.confidence * 100:.1f}%), I'm ready to help. "
                f"My current synergy level is {self._state.synergy_level * 100:.1f}%, "
                "which means I'm operating with good cognitive coherence."
            )

        synergy = self._state.synergy_level
        if synergy > HIGH_SYNERGY:
            content += HIGH_SYNERGY_NOTE
        elif synergy < LOW_SYNERGY:
            content += ADAPTING_NOTE
        return content

    def suggest_adaptations(self, reasoning: Reasoning) -> list[str]:
        adaptations: list[str] = []
        if reasoning.confidence < LOW_CONFIDENCE_HINT:
            adaptations.append("Increase pattern matching sensitivity")
            adaptations.append("Enhance context analysis depth")
        if self._state.synergy_level < LOW_SYNERGY_HINT:
            adaptations.append("Strengthen cognitive node connections")
            adaptations.append("Optimize attention allocation")
        return adaptations
