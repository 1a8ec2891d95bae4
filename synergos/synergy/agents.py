"""Agent Scheduler — autonomous agents cycling through fixed goals.

Each active agent runs the routine for its current goal, which advances
its progress and usually records an observation of the system into the
agent's knowledge map. A goal at full progress rolls over to the next
one in the agent's list. After every agent has run, knowledge is pooled
(an agent's own value for a key always wins) and each agent receives a
fresh ``system_state`` reading.
"""

from __future__ import annotations

import copy
from enum import Enum
from typing import Any, Callable, NamedTuple

from pydantic import BaseModel, Field, field_validator

from synergos.events.bus import PendingEvent
from synergos.synergy.components import ComponentRegistry
from synergos.synergy.emergence import EmergenceDetector
from synergos.synergy.health import HealthMonitor
from synergos.synergy.state import ArchitecturalPattern, ArchitecturalState, Topology
from synergos.types import AgentId, PatternId, clamp, mean

EXPERIENCE_STEP = 0.001
PREDICTION_LOAD = 0.75
OPTIMIZATION_EFFICIENCY = 0.8


class AgentRole(str, Enum):
    ORCHESTRATOR = "orchestrator"
    ANALYZER = "analyzer"
    OPTIMIZER = "optimizer"
    LEARNER = "learner"
    ADAPTER = "adapter"


class AgentState(BaseModel):
    active: bool = True
    current_goal: str = Field("", alias="currentGoal")
    progress: float = 0.0
    resources: dict[str, float] = Field(default_factory=dict)
    knowledge: dict[str, Any] = Field(default_factory=dict)
    experience: float = 0.0

    model_config = {"populate_by_name": True, "validate_assignment": True}

    @field_validator("progress", "experience")
    @classmethod
    def _bounded(cls, value: float) -> float:
        return clamp(value)


class AgentPerformance(BaseModel):
    task_completion: float = Field(0.0, alias="taskCompletion")
    goal_achievement: float = Field(0.0, alias="goalAchievement")
    resource_efficiency: float = Field(0.0, alias="resourceEfficiency")
    learning_rate: float = Field(0.0, alias="learningRate")
    adaptation_speed: float = Field(0.0, alias="adaptationSpeed")
    collaboration_score: float = Field(0.0, alias="collaborationScore")

    model_config = {"populate_by_name": True}


class AutonomousAgent(BaseModel):
    id: AgentId
    name: str = ""
    role: AgentRole
    capabilities: list[str] = Field(default_factory=list)
    goals: list[str] = Field(default_factory=list)
    state: AgentState = Field(default_factory=AgentState)
    performance: AgentPerformance = Field(default_factory=AgentPerformance)

    model_config = {"populate_by_name": True}


class GoalRoutine(NamedTuple):
    step: float
    knowledge_key: str
    observe: Callable[[], Any]


class AgentScheduler:
    """Runs the agents against a live view of the architecture."""

    def __init__(
        self,
        registry: ComponentRegistry,
        state: ArchitecturalState,
        patterns: dict[PatternId, ArchitecturalPattern],
        health: HealthMonitor,
        emergence: EmergenceDetector,
    ) -> None:
        self._registry = registry
        self._state = state
        self._patterns = patterns
        self._health = health
        self._emergence = emergence
        self.agents: dict[AgentId, AutonomousAgent] = {}

        self._routines: dict[tuple[AgentRole, str], GoalRoutine] = {
            (AgentRole.ORCHESTRATOR, "optimize_performance"):
                GoalRoutine(0.10, "performance_score", health.mean_health),
            (AgentRole.ORCHESTRATOR, "maintain_coherence"):
                GoalRoutine(0.08, "coherence", lambda: self._state.coherence),
            (AgentRole.ORCHESTRATOR, "ensure_resilience"):
                GoalRoutine(0.12, "resilience", lambda: self._state.resilience),
            (AgentRole.ANALYZER, "identify_issues"):
                GoalRoutine(0.15, "identified_issues", health.anomalies),
            (AgentRole.ANALYZER, "predict_problems"):
                GoalRoutine(0.10, "predictions", self._overloaded),
            (AgentRole.ANALYZER, "optimize_metrics"):
                GoalRoutine(0.12, "optimization_opportunities", self._inefficient),
            (AgentRole.LEARNER, "improve_accuracy"):
                GoalRoutine(0.08, "accuracy_metrics", self._mean_accuracy),
            (AgentRole.LEARNER, "discover_patterns"):
                GoalRoutine(0.12, "discovered_patterns", self._emergent_patterns),
            (AgentRole.LEARNER, "update_models"):
                GoalRoutine(0.10, "model_updates", lambda: len(self._emergence)),
        }

    def add(self, agent: AutonomousAgent) -> None:
        self.agents[agent.id] = agent

    def run(self) -> list[PendingEvent]:
        """One scheduler tick over every active agent, then coordination."""
        events: list[PendingEvent] = []
        for agent in self.agents.values():
            if not agent.state.active:
                continue
            self.execute(agent)
            events += self.advance(agent)
            self.evaluate(agent)
        self.coordinate()
        self.refresh_knowledge()
        return events

    def execute(self, agent: AutonomousAgent) -> None:
        routine = self._routines.get((agent.role, agent.state.current_goal))
        if routine is None:
            return
        agent.state.knowledge[routine.knowledge_key] = routine.observe()
        agent.state.progress = min(1.0, round(agent.state.progress + routine.step, 6))

    def advance(self, agent: AutonomousAgent) -> list[PendingEvent]:
        """Roll a completed goal over to the next one in the cycle."""
        if agent.state.progress < 1.0 or not agent.goals:
            return []
        completed = agent.state.current_goal
        index = agent.goals.index(completed) if completed in agent.goals else -1
        agent.state.current_goal = agent.goals[(index + 1) % len(agent.goals)]
        agent.state.progress = 0.0
        return [("agent_goal_completed", {
            "agentId": agent.id,
            "completedGoal": completed,
            "newGoal": agent.state.current_goal,
        })]

    def evaluate(self, agent: AutonomousAgent) -> None:
        agent.performance.task_completion = min(1.0, agent.state.progress)
        agent.performance.resource_efficiency = 1 - agent.state.resources.get("cpu", 0.0)
        agent.performance.learning_rate = agent.state.experience * 0.3
        agent.state.experience = min(1.0, agent.state.experience + EXPERIENCE_STEP)

    def coordinate(self) -> None:
        """Back-fill every agent with keys it lacks from the shared pool."""
        pool: dict[str, Any] = {}
        for agent in self.agents.values():
            pool.update(agent.state.knowledge)
        for agent in self.agents.values():
            for key, value in pool.items():
                if key not in agent.state.knowledge:
                    agent.state.knowledge[key] = copy.deepcopy(value)

    def refresh_knowledge(self) -> None:
        reading = {
            "synergyLevel": self._state.synergy_level,
            "coherence": self._state.coherence,
            "resilience": self._state.resilience,
            "emergentBehaviors": len(self._emergence),
        }
        for agent in self.agents.values():
            agent.state.knowledge["system_state"] = dict(reading)

    # ── Observations ─────────────────────────────────────────────

    def _overloaded(self) -> list[str]:
        return [c.id for c in self._registry if c.state.load > PREDICTION_LOAD]

    def _inefficient(self) -> list[str]:
        return [c.id for c in self._registry if c.state.efficiency < OPTIMIZATION_EFFICIENCY]

    def _mean_accuracy(self) -> float:
        return mean(c.metrics.accuracy for c in self._registry)

    def _emergent_patterns(self) -> list[PatternId]:
        return [p.id for p in self._patterns.values() if p.topology == Topology.EMERGENT]


# ── Seed agents ──────────────────────────────────────────────────────────────


def seed_agents() -> list[AutonomousAgent]:
    return [
        AutonomousAgent(
            id="orchestrator_agent",
            name="Architecture Orchestrator",
            role=AgentRole.ORCHESTRATOR,
            capabilities=["coordination", "resource_allocation", "task_scheduling", "conflict_resolution"],
            goals=["optimize_performance", "maintain_coherence", "ensure_resilience"],
            state=AgentState(
                current_goal="optimize_performance",
                progress=0.6,
                resources={"cpu": 0.3, "memory": 0.25, "bandwidth": 0.4},
                knowledge={
                    "component_status": "good",
                    "synergy_level": 0.75,
                    "adaptation_needs": "minimal",
                },
                experience=0.7,
            ),
            performance=AgentPerformance(
                task_completion=0.85, goal_achievement=0.8, resource_efficiency=0.9,
                learning_rate=0.15, adaptation_speed=0.8, collaboration_score=0.85,
            ),
        ),
        AutonomousAgent(
            id="analyzer_agent",
            name="Performance Analyzer",
            role=AgentRole.ANALYZER,
            capabilities=["performance_monitoring", "bottleneck_detection", "trend_analysis", "prediction"],
            goals=["identify_issues", "predict_problems", "optimize_metrics"],
            state=AgentState(
                current_goal="identify_issues",
                progress=0.8,
                resources={"cpu": 0.2, "memory": 0.3, "storage": 0.15},
                knowledge={
                    "performance_history": [],
                    "anomaly_patterns": [],
                    "optimization_opportunities": [],
                },
                experience=0.65,
            ),
            performance=AgentPerformance(
                task_completion=0.9, goal_achievement=0.85, resource_efficiency=0.85,
                learning_rate=0.2, adaptation_speed=0.7, collaboration_score=0.8,
            ),
        ),
        AutonomousAgent(
            id="learner_agent",
            name="Continuous Learner",
            role=AgentRole.LEARNER,
            capabilities=["pattern_learning", "knowledge_extraction", "model_updating", "generalization"],
            goals=["improve_accuracy", "discover_patterns", "update_models"],
            state=AgentState(
                current_goal="improve_accuracy",
                progress=0.7,
                resources={"cpu": 0.4, "memory": 0.5, "storage": 0.3},
                knowledge={
                    "learned_patterns": [],
                    "model_updates": [],
                    "accuracy_metrics": [],
                },
                experience=0.8,
            ),
            performance=AgentPerformance(
                task_completion=0.88, goal_achievement=0.82, resource_efficiency=0.75,
                learning_rate=0.25, adaptation_speed=0.85, collaboration_score=0.9,
            ),
        ),
    ]
