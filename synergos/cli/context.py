"""CLI runtime context — bridges sync CLI to async engine."""

from __future__ import annotations

import asyncio
import concurrent.futures
import logging
from typing import Any, Coroutine

from synergos.config import settings
from synergos.kernel.engine import SynergosEngine
from synergos.synergy.signals import RandomSignalSource


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_engine(**overrides: Any) -> SynergosEngine:
    """A fresh engine from the global settings, with optional field overrides."""
    engine_settings = settings.model_copy(update=overrides) if overrides else settings
    return SynergosEngine(
        settings=engine_settings,
        signals=RandomSignalSource(engine_settings.random_seed),
    )


def run_async(coro: Coroutine) -> Any:
    """Run an async coroutine from sync CLI code."""
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        loop = None

    if loop and loop.is_running():
        with concurrent.futures.ThreadPoolExecutor() as pool:
            return pool.submit(asyncio.run, coro).result()
    return asyncio.run(coro)
