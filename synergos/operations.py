"""Operations — transport-agnostic request handlers over a running engine.

Each handler takes the engine (and a plain request body where it needs
one) and returns a JSON-ready envelope ``{"success": ..., "timestamp": ...}``.
Handlers never raise: a missing required field becomes a failure
envelope with the reason, and anything unexpected becomes a generic
failure envelope carrying the exception text.
"""

from __future__ import annotations

import functools
import logging
import time
from typing import Any, Awaitable, Callable

from synergos import __version__
from synergos.cognition.reasoning import CognitiveResponse
from synergos.exceptions import InputError
from synergos.kernel.engine import SynergosEngine

_logger = logging.getLogger(__name__)

CAPABILITIES = {
    "COGNITIVE_ORCHESTRATION": "Autonomous cognitive reasoning and decision making",
    "SYNERGY_ARCHITECTURE": "Dynamic cognitive synergy component management",
    "AUTOGENESIS": "Self-evolving architectural patterns",
    "ADAPTIVE_LEARNING": "Continuous learning and adaptation",
    "EMERGENT_BEHAVIOR": "Detection and utilization of emergent intelligence",
    "AUTONOMOUS_AGENTS": "Self-managing cognitive agents",
    "PATTERN_RECOGNITION": "Cognitive pattern matching over the AtomSpace",
    "TRUTH_VALUE_REASONING": "Probabilistic truth value calculations",
    "ATTENTION_ALLOCATION": "Dynamic attention value management",
    "COGNITIVE_MONITORING": "Real-time cognitive system monitoring",
}

Envelope = dict[str, Any]
Handler = Callable[..., Awaitable[Envelope]]


def _now_ms() -> int:
    return int(time.time() * 1000)


def _envelope(**fields: Any) -> Envelope:
    return {"success": True, **fields, "timestamp": _now_ms()}


def operation(failure: str) -> Callable[[Handler], Handler]:
    """Turn a handler's exceptions into failure envelopes."""

    def decorator(fn: Handler) -> Handler:
        @functools.wraps(fn)
        async def wrapper(*args: Any, **kwargs: Any) -> Envelope:
            try:
                return await fn(*args, **kwargs)
            except InputError as e:
                return {"success": False, "error": str(e), "timestamp": _now_ms()}
            except Exception as e:
                _logger.exception("%s", failure)
                return {
                    "success": False,
                    "error": failure,
                    "message": str(e),
                    "timestamp": _now_ms(),
                }

        return wrapper

    return decorator


def _compact(**fields: Any) -> dict[str, Any]:
    return {k: v for k, v in fields.items() if v is not None}


# ── Reasoning ────────────────────────────────────────────────────────────────


@operation("Cognitive processing failed")
async def process(engine: SynergosEngine, body: dict[str, Any]) -> Envelope:
    raw = body.get("input")
    if not raw:
        raise InputError("Input is required")
    started = time.perf_counter()
    result = await engine.cognition.process_input(raw)
    processing_ms = (time.perf_counter() - started) * 1000
    _logger.info(
        "Cognitive processing completed: confidence=%.3f synergy=%.3f",
        result.confidence, result.synergy_level,
    )
    return _envelope(result=result.to_dict(), processingTime=processing_ms)


@operation("Failed to generate orchestration recommendations")
async def orchestration_recommendations(engine: SynergosEngine, body: dict[str, Any]) -> Envelope:
    response = await engine.cognition.process_input(_compact(
        type="orchestration_analysis",
        projectId=body.get("projectId"),
        botSchema=body.get("botSchema"),
        currentDialog=body.get("currentDialog"),
        requiresResponse=True,
    ))
    return _envelope(recommendations={
        "cognitiveInsights": response.content,
        "suggestedPatterns": pattern_suggestions(response),
        "optimizationOpportunities": response.adaptations,
        "synergyScore": response.synergy_level,
        "confidence": response.confidence,
        "processingPath": response.metadata.processing_path,
    })


@operation("Failed to optimize dialog flow")
async def optimize_dialog_flow(engine: SynergosEngine, body: dict[str, Any]) -> Envelope:
    flow = body.get("dialogFlow")
    response = await engine.cognition.process_input(_compact(
        type="dialog_optimization",
        dialogFlow=flow,
        userIntent=body.get("userIntent"),
        context=body.get("context"),
        requiresResponse=True,
        dialog=True,
    ))
    return _envelope(optimization={
        "recommendedFlow": optimized_flow(flow, response),
        "cognitiveReasoning": response.content,
        "improvementAreas": response.adaptations,
        "synergyLevel": response.synergy_level,
        "confidence": response.confidence,
        "activePatterns": response.metadata.active_patterns,
    })


@operation("Failed to generate adaptive response")
async def adaptive_response(engine: SynergosEngine, body: dict[str, Any]) -> Envelope:
    response = await engine.cognition.process_input(_compact(
        type="adaptive_response",
        text=body.get("userMessage"),
        conversationHistory=body.get("conversationHistory"),
        botPersonality=body.get("botPersonality"),
        context=body.get("context"),
        requiresResponse=True,
    ))
    return _envelope(response={
        "generatedText": response.content,
        "cognitiveAnalysis": cognitive_analysis(response),
        "adaptationLevel": response.synergy_level,
        "confidence": response.confidence,
        "learningInsights": response.adaptations,
    })


def pattern_suggestions(response: CognitiveResponse) -> list[str]:
    suggestions = []
    if response.synergy_level > 0.8:
        suggestions.append("High synergy detected - consider implementing advanced cognitive patterns")
    if response.confidence > 0.9:
        suggestions.append("High confidence reasoning - suitable for autonomous decision making")
    if response.adaptations:
        suggestions.append("Adaptation opportunities identified - implement continuous learning")
    return suggestions


def optimized_flow(flow: Any, response: CognitiveResponse) -> dict[str, Any]:
    optimized = dict(flow) if isinstance(flow, dict) else {}
    if response.synergy_level > 0.7:
        optimized["cognitiveEnhancement"] = {
            "synergyBoost": True,
            "adaptiveResponses": True,
            "contextAwareness": "enhanced",
        }
    if response.confidence > 0.8:
        optimized["autonomousDecisions"] = {
            "enabled": True,
            "confidenceThreshold": response.confidence,
            "fallbackStrategy": "human_review",
        }
    return optimized


def cognitive_analysis(response: CognitiveResponse) -> dict[str, Any]:
    return {
        "reasoningPath": response.metadata.processing_path,
        "activePatterns": response.metadata.active_patterns,
        "cognitiveState": {
            "synergyLevel": response.synergy_level,
            "confidence": response.confidence,
            "adaptationPotential": len(response.adaptations),
        },
        "insights": {
            "processingEfficiency": "high" if response.synergy_level > 0.7 else "moderate",
            "learningOpportunity": "available" if response.adaptations else "limited",
            "autonomyReadiness": "ready" if response.confidence > 0.8 else "needs_supervision",
        },
    }


# ── State ────────────────────────────────────────────────────────────────────


@operation("Failed to get cognitive state")
async def cognitive_state(engine: SynergosEngine) -> Envelope:
    return _envelope(
        cognitiveState=engine.cognition.get_cognitive_state(),
        statistics=engine.cognition.get_cognitive_statistics(),
    )


@operation("Failed to get architectural state")
async def architectural_state(engine: SynergosEngine) -> Envelope:
    return _envelope(
        architecturalState=engine.architecture.get_architectural_state(),
        statistics=engine.architecture.get_architectural_statistics(),
    )


@operation("Failed to get cognitive monitoring data")
async def monitoring(engine: SynergosEngine) -> Envelope:
    cognitive = engine.cognition.get_cognitive_statistics()
    architecture = engine.architecture.get_architectural_statistics()
    return _envelope(monitoring={
        "cognitive": {
            key: cognitive[key]
            for key in ("totalNodes", "activeNodes", "synergyLevel", "learningRate", "averageEffectiveness")
        },
        "architecture": {
            key: architecture[key]
            for key in (
                "totalComponents", "activeComponents", "emergentBehaviors",
                "coherence", "resilience", "autonomyLevel", "evolutionCount",
            )
        },
        "performance": {
            "processingEfficiency": (cognitive["synergyLevel"] + architecture["coherence"]) / 2,
            "adaptationCapability": cognitive["learningRate"] * architecture["autonomyLevel"],
            "systemResilience": architecture["resilience"],
            "emergenceLevel": architecture["emergentBehaviors"] / 10,
        },
    })


@operation("Health check failed")
async def health_check(engine: SynergosEngine) -> Envelope:
    status = "ACTIVE" if engine.is_running else "INACTIVE"
    return _envelope(
        version=__version__,
        status=status,
        capabilities=CAPABILITIES,
        components={
            "cognitiveOrchestrator": status,
            "synergyArchitecture": status,
            "autonomousAgents": status if engine.cognition.autonomous_mode else "INACTIVE",
            "emergentBehaviors": status,
        },
    )


# ── Configuration ────────────────────────────────────────────────────────────


@operation("Failed to configure cognition")
async def configure(engine: SynergosEngine, body: dict[str, Any]) -> Envelope:
    if body.get("autonomousMode") is not None:
        await engine.cognition.set_autonomous_mode(body["autonomousMode"])
    if body.get("learningEnabled") is not None:
        await engine.cognition.set_learning_enabled(body["learningEnabled"])
    if body.get("adaptationThreshold") is not None:
        engine.cognition.set_adaptation_threshold(float(body["adaptationThreshold"]))
    if body.get("synergyThreshold") is not None:
        engine.architecture.set_synergy_threshold(float(body["synergyThreshold"]))
    if body.get("autogenesisEnabled") is not None:
        await engine.architecture.set_autogenesis_enabled(body["autogenesisEnabled"])

    configuration = {
        "autonomousMode": engine.cognition.autonomous_mode,
        "learningEnabled": engine.cognition.learning_enabled,
        "adaptationThreshold": engine.cognition.adaptation_threshold,
        "synergyThreshold": engine.architecture.synergy_threshold,
        "autogenesisEnabled": engine.architecture.autogenesis_enabled,
    }
    _logger.info("Cognitive configuration updated: %s", configuration)
    return _envelope(message="Cognitive configuration updated", configuration=configuration)


@operation("Failed to configure autogenesis")
async def enable_autogenesis(engine: SynergosEngine, body: dict[str, Any]) -> Envelope:
    enabled = bool(body.get("enabled"))
    await engine.architecture.set_autogenesis_enabled(enabled)
    return _envelope(
        message=f"Autogenesis {'enabled' if enabled else 'disabled'}",
        autogenesisEnabled=enabled,
    )


@operation("Failed to add cognitive pattern")
async def add_pattern(engine: SynergosEngine, body: dict[str, Any]) -> Envelope:
    pattern = body.get("pattern")
    if not isinstance(pattern, dict) or not pattern.get("id") or not pattern.get("name"):
        raise InputError("Pattern with id and name is required")
    added = await engine.cognition.add_pattern(pattern)
    if added is None:
        raise InputError("Pattern with id and name is required")
    return _envelope(message="Cognitive pattern added successfully", patternId=added.id)


@operation("Failed to remove cognitive pattern")
async def remove_pattern(engine: SynergosEngine, pattern_id: str) -> Envelope:
    if not pattern_id:
        raise InputError("Pattern ID is required")
    removed = await engine.cognition.remove_pattern(pattern_id)
    return _envelope(
        message="Cognitive pattern removed successfully",
        patternId=pattern_id,
        removed=removed,
    )


@operation("Failed to reset cognitive system")
async def reset(engine: SynergosEngine) -> Envelope:
    await engine.reset()
    return _envelope(message="Cognitive system reset successfully")
