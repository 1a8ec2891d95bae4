"""Synergy control loop — components, their health, and how they evolve.

- signals: pluggable randomness/telemetry source for drift and novelty
- components: the component registry, connections, state and metrics
- health: periodic metric recomputation and anomaly detection
- evolution: topology/parameter adjustment toward higher synergy
- emergence: pairwise interaction analysis, utility, promotion to patterns
- agents: goal-cycling autonomous agents sharing a knowledge map
- architecture: the facade that owns all of the above
"""
