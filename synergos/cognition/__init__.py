"""Reasoning engine — the knowledge graph and what thinks with it.

- AtomSpace: nodes with truth/attention values and typed links
- PatternLibrary: templates matched against the active node set
- ReasoningPipeline: intent/context/action inference and response synthesis
- AdaptationTracker: outcome scoring that feeds back into node truth values
- CognitiveOrchestrator: the request/response entry point tying them together
"""
