"""Core types and numeric helpers shared across all synergos subsystems."""

from __future__ import annotations

import uuid
from typing import Iterable, TypeAlias

# ── ID Types ──────────────────────────────────────────────────────────────────

NodeId: TypeAlias = str
PatternId: TypeAlias = str
ComponentId: TypeAlias = str
AgentId: TypeAlias = str


def new_id() -> str:
    return uuid.uuid4().hex[:12]


# ── Bounded arithmetic ───────────────────────────────────────────────────────


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    """Pin a value into [low, high]."""
    return max(low, min(high, value))


def mean(values: Iterable[float], default: float = 0.0) -> float:
    """Arithmetic mean; ``default`` for an empty sequence."""
    items = list(values)
    if not items:
        return default
    return sum(items) / len(items)


def variance(values: Iterable[float]) -> float:
    """Population variance; 0.0 for an empty sequence."""
    items = list(values)
    if not items:
        return 0.0
    avg = sum(items) / len(items)
    return sum((v - avg) ** 2 for v in items) / len(items)
