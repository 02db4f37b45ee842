# analysis.py
import time
from collections import Counter

import pandas as pd

from flowtrace import ENGINES
from flowtrace.edgelist import prepare_network
from flowtrace.models import as_declared_edges, merge_edges


def max_flow_value(record, source):
    """Net flow leaving the source in a record's snapshot."""
    out_flow = sum(f for (u, _), f in record.edge_flows.items() if u == source)
    in_flow = sum(f for (_, v), f in record.edge_flows.items() if v == source)
    return out_flow - in_flow


# Min-cut

def min_cut(edges, edge_flows, source):
    """Source side of the residual graph induced by ``edge_flows`` and the cut edges.

    Returns ``(reachable, cut)`` where ``cut`` lists ``(u, v, capacity)`` for
    every declared edge leaving the reachable set. On a final snapshot the
    capacities in ``cut`` sum to the max flow.
    """
    edges = merge_edges(as_declared_edges(edges))
    residual = {}
    for e in edges:
        f = edge_flows.get(e.key, 0)
        residual.setdefault(e.source, {})
        residual.setdefault(e.target, {})
        residual[e.source][e.target] = residual[e.source].get(e.target, 0) + e.capacity - f
        residual[e.target][e.source] = residual[e.target].get(e.source, 0) + f

    visited = set()
    stack = [source]
    while stack:
        u = stack.pop()
        if u not in visited:
            visited.add(u)
            for v, r in residual.get(u, {}).items():
                if r > 0:
                    stack.append(v)

    cut = [
        (e.source, e.target, e.capacity)
        for e in edges
        if e.source in visited and e.target not in visited and e.capacity > 0
    ]
    return visited, cut


def trace_stats(records):
    kinds = Counter(r.kind for r in records)
    return {
        "steps": len(records),
        "augmenting_paths": kinds["augment"] + sum(len(r.paths) for r in records),
        "phases": kinds["phase"],
        "pushes": kinds["push"],
        "relabels": kinds["relabel"],
    }


def graph_properties(nodes, edges):
    edges = merge_edges(as_declared_edges(edges))
    n = len(nodes)
    possible = n * (n - 1)
    return {
        "nodes": n,
        "edges": len(edges),
        "density": len(edges) / possible if possible else 0.0,
        "unit_capacity": all(e.capacity == 1 for e in edges),
    }


def trace_frame(records, edges):
    """Long-format table, one row per (step, declared edge)."""
    edges = merge_edges(as_declared_edges(edges))
    rows = []
    for i, r in enumerate(records):
        lit = r.highlighted_edges()
        for e in edges:
            rows.append([
                i, r.kind, e.source, e.target, r.edge_flows.get(e.key, 0), e.capacity,
                e.key in lit or (e.target, e.source) in lit,
            ])
    return pd.DataFrame(
        rows, columns=["step", "kind", "source", "target", "flow", "capacity", "highlighted"]
    )


# Side-by-side comparison

def compare(nodes, edges, source, sink):
    """Run every engine on the same declared network and time each run.

    Each engine builds its own residual graph. Returns
    ``{name: {"steps": [...], "stats": {...}}}`` in registry order; the stats
    hold wall-clock ``time_ms``, ``max_flow``, ``operation_count`` (records
    before the terminal one) and the ``trace_stats`` counters.
    """
    nodes, edges = prepare_network(nodes, edges, source, sink)
    results = {}
    for name, engine in ENGINES.items():
        start = time.perf_counter()
        steps = engine(nodes, edges, source, sink)
        elapsed = time.perf_counter() - start

        stats = trace_stats(steps)
        stats.update(
            time_ms=elapsed * 1000.0,
            max_flow=max_flow_value(steps[-1], source),
            operation_count=len(steps) - 1,
        )
        results[name] = {"steps": steps, "stats": stats}
    return results


def compare_frame(results):
    """One row per engine, indexed by engine name."""
    columns = [
        "max_flow", "time_ms", "operation_count",
        "augmenting_paths", "phases", "pushes", "relabels",
    ]
    return pd.DataFrame(
        [[r["stats"][c] for c in columns] for r in results.values()],
        index=pd.Index(list(results), name="algorithm"),
        columns=columns,
    )
