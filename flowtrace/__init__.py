from flowtrace.dinic import run_dinic
from flowtrace.edmonds_karp import run_edmonds_karp
from flowtrace.errors import FlowTraceError, InvariantViolation, MalformedInputError
from flowtrace.models import DeclaredEdge, NodeState, StepRecord
from flowtrace.push_relabel import run_push_relabel

ENGINES = {
    "edmonds_karp": run_edmonds_karp,
    "dinic": run_dinic,
    "push_relabel": run_push_relabel,
}


def run(algorithm, nodes, edges, source, sink):
    try:
        engine = ENGINES[algorithm]
    except KeyError:
        raise ValueError(f"unknown algorithm {algorithm!r}, pick one of {', '.join(ENGINES)}")
    return engine(nodes, edges, source, sink)


__all__ = [
    "ENGINES",
    "DeclaredEdge",
    "FlowTraceError",
    "InvariantViolation",
    "MalformedInputError",
    "NodeState",
    "StepRecord",
    "run",
    "run_dinic",
    "run_edmonds_karp",
    "run_push_relabel",
]
