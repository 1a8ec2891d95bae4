"""AtomSpace — the keyed node store the reasoning engine thinks with.

Nodes carry a truth value (how strongly we believe them) and an attention
value (how much processing they deserve at three time horizons). Links
connect nodes by id. A link may name an id the store has never seen;
lookups on it simply come back empty.

All bounded values clamp on construction AND on assignment, so no
sequence of updates can push them out of [0, 1].
"""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator

from synergos.types import NodeId, clamp


class NodeKind(str, Enum):
    CONCEPT = "concept"
    PREDICATE = "predicate"
    SCHEMA = "schema"
    PROCEDURE = "procedure"


class LinkKind(str, Enum):
    INHERITANCE = "inheritance"
    SIMILARITY = "similarity"
    IMPLICATION = "implication"
    EVALUATION = "evaluation"
    EXECUTION = "execution"


class TruthValue(BaseModel):
    """Probabilistic belief: how strong, and how sure we are of that."""

    strength: float = 1.0
    confidence: float = 1.0

    model_config = {"validate_assignment": True}

    @field_validator("strength", "confidence")
    @classmethod
    def _bounded(cls, value: float) -> float:
        return clamp(value)

    @property
    def score(self) -> float:
        return self.strength * self.confidence


class AttentionValue(BaseModel):
    """Resource-allocation priority at three time horizons."""

    short_term: float = Field(0.5, alias="shortTerm")
    long_term: float = Field(0.5, alias="longTerm")
    very_long_term: float = Field(0.5, alias="veryLongTerm")

    model_config = {"populate_by_name": True, "validate_assignment": True}

    @field_validator("short_term", "long_term", "very_long_term")
    @classmethod
    def _bounded(cls, value: float) -> float:
        return clamp(value)


class CognitiveNode(BaseModel):
    """A unit of the knowledge graph."""

    id: NodeId
    kind: NodeKind = Field(NodeKind.CONCEPT, alias="type")
    truth_value: TruthValue = Field(default_factory=TruthValue, alias="truthValue")
    attention_value: AttentionValue = Field(
        default_factory=AttentionValue, alias="attentionValue",
    )
    created_at: datetime = Field(default_factory=datetime.now, alias="createdAt")

    model_config = {"populate_by_name": True}


class CognitiveLink(BaseModel):
    """A typed, weighted edge between two node ids."""

    source: NodeId
    target: NodeId
    kind: LinkKind = Field(LinkKind.EXECUTION, alias="type")
    truth_value: TruthValue = Field(default_factory=TruthValue, alias="truthValue")
    weight: float = 1.0

    model_config = {"populate_by_name": True, "validate_assignment": True}

    @field_validator("weight")
    @classmethod
    def _non_negative(cls, value: float) -> float:
        return max(0.0, value)


class AtomSpace:
    """In-memory node and link store.

    Usage:
        space = AtomSpace()
        space.upsert(CognitiveNode(id="user_input"))
        space.add_link(CognitiveLink(source="user_input", target="intent_classifier"))
        space.links_from("user_input")
    """

    def __init__(self) -> None:
        self._nodes: dict[NodeId, CognitiveNode] = {}
        self._links: dict[NodeId, list[CognitiveLink]] = defaultdict(list)

    def upsert(self, node: CognitiveNode) -> CognitiveNode:
        """Insert a node, replacing any node with the same id."""
        self._nodes[node.id] = node
        return node

    def get(self, node_id: NodeId) -> CognitiveNode | None:
        return self._nodes.get(node_id)

    def add_link(self, link: CognitiveLink) -> CognitiveLink:
        """Add a link. Replaces an existing link with the same source, target and kind."""
        outgoing = self._links[link.source]
        outgoing[:] = [
            existing for existing in outgoing
            if not (existing.target == link.target and existing.kind == link.kind)
        ]
        outgoing.append(link)
        return link

    def links_from(self, node_id: NodeId) -> list[CognitiveLink]:
        """Outgoing links of a node; empty for unknown ids."""
        return list(self._links.get(node_id, []))

    def nodes(self) -> list[CognitiveNode]:
        return list(self._nodes.values())

    def clear(self) -> None:
        self._nodes.clear()
        self._links.clear()

    @property
    def link_count(self) -> int:
        return sum(len(links) for links in self._links.values())

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)
