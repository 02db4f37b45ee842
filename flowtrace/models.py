# models.py
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from flowtrace.errors import MalformedInputError

# (source, target) of a declared edge
EdgeKey = Tuple[str, str]


class DeclaredEdge(BaseModel):
    model_config = ConfigDict(frozen=True)

    source: str = Field(..., min_length=1)
    target: str = Field(..., min_length=1)
    capacity: int = Field(..., ge=0)

    @property
    def key(self) -> EdgeKey:
        return (self.source, self.target)


def as_declared_edges(edges: Iterable) -> list:
    """Accept DeclaredEdge objects, dicts or (source, target, capacity) tuples."""
    declared = []
    for i, e in enumerate(edges):
        try:
            if isinstance(e, DeclaredEdge):
                declared.append(e)
            elif isinstance(e, Mapping):
                declared.append(DeclaredEdge(**e))
            else:
                u, v, cap = e
                declared.append(DeclaredEdge(source=u, target=v, capacity=cap))
        except (ValidationError, TypeError, ValueError) as exc:
            raise MalformedInputError(f"edge #{i} {e!r} is invalid: {exc}") from exc
    return declared


def merge_edges(edges: Iterable[DeclaredEdge]) -> list:
    # duplicates between the same ordered pair add up, first occurrence keeps its position
    merged: Dict[EdgeKey, int] = {}
    for e in edges:
        merged[e.key] = merged.get(e.key, 0) + e.capacity
    return [DeclaredEdge(source=u, target=v, capacity=c) for (u, v), c in merged.items()]


@dataclass(frozen=True)
class NodeState:
    height: int
    excess: int


@dataclass(frozen=True)
class StepRecord:
    """One replayable step of a max-flow run.

    Attributes:
        kind: ``init``, ``augment``, ``phase``, ``push``, ``relabel`` or ``final``.
        description: one-line human readable summary.
        edge_flows: cumulative flow per declared edge after this step.
        path: augmenting path (Edmonds-Karp).
        paths: every path of a blocking flow (Dinic).
        path_flow: amount augmented or pushed in this step.
        phase: Dinic phase number.
        sink_level: BFS level of the sink in the phase's level graph.
        active_node: node being discharged (Push-Relabel).
        push_edge: residual edge a push went along (Push-Relabel).
        node_states: height/excess of every node (Push-Relabel).
    """

    kind: str
    description: str
    edge_flows: Mapping[EdgeKey, int]
    path: Tuple[str, ...] = ()
    paths: Tuple[Tuple[str, ...], ...] = ()
    path_flow: int = 0
    phase: Optional[int] = None
    sink_level: Optional[int] = None
    active_node: Optional[str] = None
    push_edge: Optional[EdgeKey] = None
    node_states: Mapping[str, NodeState] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self):
        # snapshots must not alias the engine's working maps
        object.__setattr__(self, "edge_flows", MappingProxyType(dict(self.edge_flows)))
        object.__setattr__(self, "node_states", MappingProxyType(dict(self.node_states)))
        object.__setattr__(self, "path", tuple(self.path))
        object.__setattr__(self, "paths", tuple(tuple(p) for p in self.paths))

    def highlighted_edges(self) -> set:
        """Residual edges a viewer should emphasise for this step."""
        if self.push_edge is not None:
            return {self.push_edge}
        walked = [self.path] if self.path else list(self.paths)
        return {(u, v) for p in walked for u, v in zip(p, p[1:])}

    def to_dict(self) -> dict:
        return {
            "kind": self.kind,
            "description": self.description,
            "edge_flows": [
                {"source": u, "target": v, "flow": f} for (u, v), f in self.edge_flows.items()
            ],
            "path": list(self.path),
            "paths": [list(p) for p in self.paths],
            "path_flow": self.path_flow,
            "phase": self.phase,
            "sink_level": self.sink_level,
            "active_node": self.active_node,
            "push_edge": list(self.push_edge) if self.push_edge else None,
            "node_states": {
                n: {"height": s.height, "excess": s.excess} for n, s in self.node_states.items()
            },
        }
