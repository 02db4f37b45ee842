# edgelist.py
import pandas as pd

from flowtrace.errors import MalformedInputError
from flowtrace.models import DeclaredEdge, as_declared_edges


def parse_edge_list(text):
    """Parse ``source,target,capacity`` lines into declared edges.

    Blank lines and lines starting with ``#`` are skipped.
    """
    edges = []
    for lineno, raw in enumerate(text.splitlines(), 1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        parts = [p.strip() for p in line.split(",")]
        if len(parts) != 3 or not parts[0] or not parts[1]:
            raise MalformedInputError(f'line {lineno}: invalid edge format "{line}"')
        try:
            capacity = int(parts[2])
        except ValueError:
            raise MalformedInputError(f'line {lineno}: capacity "{parts[2]}" is not an integer')
        if capacity < 0:
            raise MalformedInputError(f"line {lineno}: capacity {capacity} is negative")
        edges.append(DeclaredEdge(source=parts[0], target=parts[1], capacity=capacity))

    if not edges:
        raise MalformedInputError("edge list is empty")
    return edges


def load_edges_csv(path):
    df = pd.read_csv(path, dtype={"source": str, "target": str})
    missing = {"source", "target", "capacity"} - set(df.columns)
    if missing:
        raise MalformedInputError(f"{path}: missing column(s) {', '.join(sorted(missing))}")
    if df.empty:
        raise MalformedInputError(f"{path}: edge list is empty")
    if df["capacity"].isna().any() or not pd.api.types.is_integer_dtype(df["capacity"]):
        raise MalformedInputError(f"{path}: capacity column must hold integers")

    rows = [
        (row.source, row.target, int(row.capacity))
        for row in df[["source", "target", "capacity"]].itertuples(index=False)
    ]
    edges = as_declared_edges(rows)
    if not edges:
        raise MalformedInputError(f"{path}: edge list is empty")
    return edges


def derive_nodes(edges):
    nodes = []
    seen = set()
    for e in edges:
        for n in (e.source, e.target):
            if n not in seen:
                seen.add(n)
                nodes.append(n)
    return nodes


def validate_network(nodes, edges, source, sink):
    if not edges:
        raise MalformedInputError("edge list is empty")
    known = set(nodes)
    if source not in known:
        raise MalformedInputError(f'source "{source}" is not a node of the graph')
    if sink not in known:
        raise MalformedInputError(f'sink "{sink}" is not a node of the graph')
    if source == sink:
        raise MalformedInputError("source and sink must differ")
    for e in edges:
        if e.source not in known or e.target not in known:
            raise MalformedInputError(f"edge {e.source}->{e.target} references an unknown node")


def prepare_network(nodes, edges, source, sink):
    """Coerce, derive and validate engine input. Returns (nodes, edges)."""
    edges = as_declared_edges(edges)
    nodes = derive_nodes(edges) if nodes is None else list(dict.fromkeys(nodes))
    validate_network(nodes, edges, source, sink)
    return nodes, edges
