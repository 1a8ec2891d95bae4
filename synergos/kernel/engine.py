"""Synergos Engine — one self-contained instance of the whole system.

The engine wires the reasoning engine and the synergy control loop to a
single event bus and a single mutation lock, and owns the background
tickers. Engines share nothing, so several can live side by side (tests
build one per case).

Usage:
    async with SynergosEngine() as engine:
        response = await engine.cognition.process_input({"text": "hello"})
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from synergos.cognition.orchestrator import CognitiveOrchestrator
from synergos.config import SynergosSettings, settings as default_settings
from synergos.events.bus import EventBus
from synergos.exceptions import EngineStateError
from synergos.kernel.loop import ControlLoop
from synergos.synergy.architecture import SynergyArchitecture
from synergos.synergy.signals import SignalSource

_logger = logging.getLogger(__name__)


class SynergosEngine:
    """Construct, start, shut down. Reset at any time in between."""

    def __init__(
        self,
        settings: SynergosSettings | None = None,
        signals: SignalSource | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        self.settings = settings or default_settings
        self.event_bus = event_bus or EventBus(history_limit=self.settings.event_history_limit)
        self._lock = asyncio.Lock()

        self.cognition = CognitiveOrchestrator(
            event_bus=self.event_bus, settings=self.settings, lock=self._lock
        )
        self.architecture = SynergyArchitecture(
            event_bus=self.event_bus, settings=self.settings, lock=self._lock, signals=signals
        )

        self.loop = ControlLoop(self.event_bus)
        self.loop.add("health", self.settings.health_interval_seconds,
                      self.architecture.run_health_cycle)
        self.loop.add("evolution", self.settings.evolution_interval_seconds,
                      self.architecture.run_evolution_cycle)
        self.loop.add("tuning", self.settings.tuning_interval_seconds,
                      self.architecture.run_tuning_cycle)
        self.loop.add("emergence", self.settings.emergence_interval_seconds,
                      self.architecture.run_emergence_cycle)
        self.loop.add("agents", self.settings.agent_interval_seconds, self.run_agent_cycle)

        self._shut_down = False

    async def start(self) -> None:
        if self._shut_down:
            raise EngineStateError("Engine has been shut down; build a new one")
        await self.loop.start()
        _logger.info("Synergos engine started")

    async def shutdown(self) -> None:
        await self.loop.stop()
        self._shut_down = True
        _logger.info("Synergos engine shut down")

    @property
    def is_running(self) -> bool:
        return self.loop.is_running

    async def run_agent_cycle(self) -> bool:
        """Agents only act while the system is in autonomous mode."""
        if not self.cognition.autonomous_mode:
            return False
        return await self.architecture.run_agent_cycle()

    async def reset(self) -> None:
        """Reseed both subsystems. Background cycles keep running."""
        await self.cognition.reset()
        await self.architecture.reset()

    def statistics(self) -> dict[str, Any]:
        return {
            "cognitive": self.cognition.get_cognitive_statistics(),
            "architecture": self.architecture.get_architectural_statistics(),
            "cycles": self.loop.stats(),
        }

    async def __aenter__(self) -> SynergosEngine:
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.shutdown()
