"""Control Loop — independent tickers for the background cycles.

Each ticker is its own asyncio task: sleep for its interval, then tick.
A tick that raises is logged and reported as ``control_loop_error``; the
ticker keeps going. Stopping cancels every task.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable

import structlog
from pydantic import BaseModel

from synergos.events.bus import EventBus

logger = structlog.get_logger()

TickFn = Callable[[], Awaitable[Any]]


class TickerStats(BaseModel):
    ticks: int = 0
    skipped: int = 0
    failures: int = 0


class Ticker:
    """One named cycle on a fixed cadence."""

    def __init__(self, name: str, interval: float, tick: TickFn) -> None:
        self.name = name
        self.interval = interval
        self.tick = tick
        self.stats = TickerStats()


class ControlLoop:
    """Runs a set of tickers as background tasks."""

    def __init__(self, event_bus: EventBus | None = None) -> None:
        self._event_bus = event_bus
        self._tickers: dict[str, Ticker] = {}
        self._tasks: dict[str, asyncio.Task] = {}
        self._running = False

    def add(self, name: str, interval: float, tick: TickFn) -> Ticker:
        """Register a cycle. Only takes effect on the next ``start``."""
        ticker = Ticker(name, interval, tick)
        self._tickers[name] = ticker
        return ticker

    async def start(self) -> None:
        if self._running:
            return
        self._running = True
        for name, ticker in self._tickers.items():
            self._tasks[name] = asyncio.create_task(self._run(ticker))
        logger.info("control_loop_started", cycles=list(self._tickers))

    async def stop(self) -> None:
        self._running = False
        tasks = list(self._tasks.values())
        for task in tasks:
            if not task.done():
                task.cancel()
        for task in tasks:
            try:
                await task
            except asyncio.CancelledError:
                pass
        self._tasks.clear()
        logger.info("control_loop_stopped")

    @property
    def is_running(self) -> bool:
        return self._running

    def stats(self) -> dict[str, dict[str, int]]:
        return {name: t.stats.model_dump() for name, t in self._tickers.items()}

    async def _run(self, ticker: Ticker) -> None:
        while self._running:
            try:
                await asyncio.sleep(ticker.interval)
            except asyncio.CancelledError:
                break
            try:
                ran = await ticker.tick()
            except asyncio.CancelledError:
                break
            except Exception as e:
                ticker.stats.failures += 1
                logger.error("control_loop_tick_failed", cycle=ticker.name, error=str(e))
                await self._emit("control_loop_error", {"cycle": ticker.name, "error": str(e)})
                continue
            if ran is False:
                ticker.stats.skipped += 1
            else:
                ticker.stats.ticks += 1

    async def _emit(self, topic: str, data: dict[str, Any]) -> None:
        if self._event_bus:
            await self._event_bus.emit(topic, data, source="control_loop")
