"""Adaptation Tracker — scores each interaction and feeds the result back.

Learning here is deliberately small: an effectiveness score nudges the
learning rate by one step and shifts the truth values of whichever nodes
are active. There is no model to train.
"""

from __future__ import annotations

from synergos.cognition.atomspace import AtomSpace
from synergos.cognition.inputs import CognitiveInput
from synergos.cognition.reasoning import CognitiveResponse
from synergos.cognition.state import AdaptationRecord, CognitiveState
from synergos.types import clamp

TIME_BASELINE_MS = 5000.0
LEARNING_RATE_STEP = 0.01
RAISE_RATE_ABOVE = 0.8
LOWER_RATE_BELOW = 0.4
LONG_TERM_BOOST_ABOVE = 0.7
LONG_TERM_BOOST = 0.05


def effectiveness(confidence: float, processing_ms: float, synergy_level: float) -> float:
    """((confidence + time efficiency) / 2 + synergy) / 2, clamped to [0, 1]."""
    time_efficiency = max(0.0, 1.0 - processing_ms / TIME_BASELINE_MS)
    score = (confidence + time_efficiency) / 2
    score = (score + synergy_level) / 2
    return clamp(score)


class AdaptationTracker:
    """Records interaction outcomes and adjusts the AtomSpace from them."""

    def __init__(self, atomspace: AtomSpace, state: CognitiveState) -> None:
        self._atomspace = atomspace
        self._state = state

    def learn(
        self,
        inp: CognitiveInput,
        response: CognitiveResponse,
        processing_ms: float,
    ) -> AdaptationRecord:
        score = effectiveness(response.confidence, processing_ms, self._state.synergy_level)
        record = AdaptationRecord(
            trigger=f"Input type: {inp.type}",
            adaptation=f"Response generated with {response.confidence * 100:.1f}% confidence",
            effectiveness=score,
        )
        self._state.record(record)
        self.adjust_learning_rate(score)
        self.update_nodes(score)
        return record

    def adjust_learning_rate(self, score: float) -> None:
        # CognitiveState clamps the rate to its [0.05, 0.2] band on assignment
        if score > RAISE_RATE_ABOVE:
            self._state.learning_rate = self._state.learning_rate + LEARNING_RATE_STEP
        elif score < LOWER_RATE_BELOW:
            self._state.learning_rate = self._state.learning_rate - LEARNING_RATE_STEP

    def update_nodes(self, score: float) -> None:
        """Shift truth values of active nodes toward or away from belief."""
        delta = (score - 0.5) * self._state.learning_rate
        for node_id in self._state.active_nodes:
            node = self._atomspace.get(node_id)
            if node is None:
                continue
            tv = node.truth_value
            tv.strength = tv.strength + delta
            tv.confidence = tv.confidence + delta * 0.5
            if score > LONG_TERM_BOOST_ABOVE:
                av = node.attention_value
                av.long_term = av.long_term + LONG_TERM_BOOST
