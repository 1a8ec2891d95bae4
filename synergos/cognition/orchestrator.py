"""Cognitive Orchestrator — the reasoning engine's public face.

``process_input`` is the only request/response entry point. One call
runs the whole pipeline and the learning step under the shared mutation
lock, so concurrent calls and background cycles never see each other's
half-finished updates. Events are published after the lock is released.

Usage:
    orchestrator = CognitiveOrchestrator(event_bus=bus)
    response = await orchestrator.process_input(
        {"type": "message", "text": "Hi there!", "requiresResponse": True}
    )
    response.content  # "Hello! ..."
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any

from synergos.cognition.adaptation import AdaptationTracker
from synergos.cognition.atomspace import AtomSpace
from synergos.cognition.inputs import parse_input
from synergos.cognition.patterns import CognitivePattern, PatternLibrary, seed_patterns
from synergos.cognition.reasoning import CognitiveResponse, ReasoningPipeline
from synergos.cognition.state import CognitiveState
from synergos.config import SynergosSettings, settings as default_settings
from synergos.events.bus import EventBus
from synergos.types import PatternId, clamp
from synergos.validation import validate_leniently

_logger = logging.getLogger(__name__)


class CognitiveOrchestrator:
    """Owns the AtomSpace, the Pattern Library and the CognitiveState."""

    def __init__(
        self,
        event_bus: EventBus | None = None,
        settings: SynergosSettings | None = None,
        lock: asyncio.Lock | None = None,
    ) -> None:
        self._settings = settings or default_settings
        self._event_bus = event_bus
        self._lock = lock or asyncio.Lock()

        self.autonomous_mode = self._settings.autonomous_mode
        self.learning_enabled = self._settings.learning_enabled
        self.adaptation_threshold = clamp(self._settings.adaptation_threshold)

        self._initialize()

    def _initialize(self) -> None:
        self.atomspace = AtomSpace()
        self.patterns = PatternLibrary()
        self.state = CognitiveState(history_limit=self._settings.adaptation_history_limit)
        for pattern in seed_patterns():
            self._install(pattern)
        self._pipeline = ReasoningPipeline(self.atomspace, self.patterns, self.state)
        self._tracker = AdaptationTracker(self.atomspace, self.state)

    def _install(self, pattern: CognitivePattern) -> None:
        """Register a pattern and give its members a live home in the AtomSpace.

        Nodes already in the store keep their learned values.
        """
        self.patterns.add(pattern)
        for node in pattern.nodes:
            if node.id not in self.atomspace:
                self.atomspace.upsert(node.model_copy(deep=True))
        for link in pattern.links:
            self.atomspace.add_link(link.model_copy(deep=True))

    # ── Entry point ──────────────────────────────────────────────

    async def process_input(self, raw: Any) -> CognitiveResponse:
        """Reason over one input and return a scored response."""
        started = time.perf_counter()
        inp = parse_input(raw)
        # python mode: extra fields may hold values JSON cannot encode
        payload = inp.model_dump(by_alias=True)

        async with self._lock:
            response = self._pipeline.run(inp)
            if self.learning_enabled:
                elapsed_ms = (time.perf_counter() - started) * 1000
                self._tracker.learn(inp, response, elapsed_ms)
            snapshot = self.state.snapshot()

        processing_ms = (time.perf_counter() - started) * 1000
        await self._emit("cognition", {
            "input": payload,
            "response": response.to_dict(),
            "cognitive_state": snapshot,
            "processing_time": processing_ms,
        })
        return response

    # ── Introspection ────────────────────────────────────────────

    def get_cognitive_state(self) -> dict[str, Any]:
        return self.state.snapshot()

    def get_cognitive_statistics(self) -> dict[str, Any]:
        return {
            "totalNodes": len(self.atomspace),
            "activeNodes": len(self.state.active_nodes),
            "totalPatterns": len(self.patterns),
            "activePatterns": len(self._pipeline.active_patterns()),
            "synergyLevel": self.state.synergy_level,
            "learningRate": self.state.learning_rate,
            "adaptationCount": len(self.state.adaptation_history),
            "averageEffectiveness": self.state.average_effectiveness(),
            "adaptationThreshold": self.adaptation_threshold,
            "autonomousMode": self.autonomous_mode,
            "learningEnabled": self.learning_enabled,
        }

    # ── Configuration ────────────────────────────────────────────

    async def set_autonomous_mode(self, enabled: bool) -> None:
        self.autonomous_mode = bool(enabled)
        await self._emit("autonomy_change", {"autonomous": self.autonomous_mode})

    async def set_learning_enabled(self, enabled: bool) -> None:
        self.learning_enabled = bool(enabled)
        await self._emit("learning_change", {"learning": self.learning_enabled})

    def set_adaptation_threshold(self, threshold: float) -> None:
        self.adaptation_threshold = clamp(threshold)

    # ── Pattern management ───────────────────────────────────────

    async def add_pattern(
        self, pattern: CognitivePattern | dict[str, Any]
    ) -> CognitivePattern | None:
        """Insert or replace a pattern by id.

        Malformed fields fall back to their defaults. A pattern without a
        usable id is skipped and None returned.
        """
        if not isinstance(pattern, CognitivePattern):
            parsed = None
            if isinstance(pattern, dict):
                parsed = validate_leniently(CognitivePattern, pattern)
            if parsed is None:
                _logger.warning("Skipping cognitive pattern without a usable id")
                return None
            pattern = parsed
        async with self._lock:
            self._install(pattern)
        _logger.info("Cognitive pattern added: %s", pattern.id)
        await self._emit("pattern_added", {"pattern": pattern.id})
        return pattern

    async def remove_pattern(self, pattern_id: PatternId) -> bool:
        """Remove a pattern. Unknown ids are a no-op."""
        async with self._lock:
            removed = self.patterns.remove(pattern_id)
        if removed:
            _logger.info("Cognitive pattern removed: %s", pattern_id)
            await self._emit("pattern_removed", {"pattern": pattern_id})
        return removed

    async def reset(self) -> None:
        """Back to the seeded startup state. Switches and thresholds are kept."""
        async with self._lock:
            self._initialize()
        _logger.info("Cognitive system reset")
        await self._emit("cognitive_reset", {})

    async def _emit(self, topic: str, data: dict[str, Any]) -> None:
        if self._event_bus:
            await self._event_bus.emit(topic, data, source="cognition")
