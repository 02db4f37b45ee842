# edmonds_karp.py
import logging
from collections import deque

from flowtrace.edgelist import prepare_network
from flowtrace.models import StepRecord
from flowtrace.residual import CumulativeFlow, ResidualGraph

logger = logging.getLogger(__name__)


def bfs(R, s, t, parent):
    """Fill parent pointers along positive residual edges; True once t is found."""
    visited = {s}
    q = deque([s])
    while q:
        u = q.popleft()
        for v in R.neighbors(u):
            if v not in visited:
                visited.add(v)
                parent[v] = u
                if v == t:
                    return True
                q.append(v)
    return False


def run_edmonds_karp(nodes, edges, source, sink):
    nodes, edges = prepare_network(nodes, edges, source, sink)
    R = ResidualGraph(nodes, edges)
    flows = CumulativeFlow(edges)

    steps = []
    max_flow = 0
    parent = {}

    while bfs(R, source, sink, parent):
        path = [sink]
        while path[-1] != source:
            path.append(parent[path[-1]])
        path.reverse()

        path_flow = min(R.residual(u, v) for u, v in zip(path, path[1:]))
        for u, v in zip(path, path[1:]):
            R.augment(u, v, path_flow)
        flows.route_path(path, path_flow)
        max_flow += path_flow

        logger.debug("augmenting path %s, bottleneck %d", path, path_flow)
        steps.append(StepRecord(
            kind="augment",
            description=f"Found augmenting path {' → '.join(path)}. Bottleneck is {path_flow}.",
            edge_flows=flows.snapshot(),
            path=path,
            path_flow=path_flow,
        ))
        parent = {}

    steps.append(StepRecord(
        kind="final",
        description="No more augmenting paths found. The algorithm terminates.",
        edge_flows=flows.snapshot(),
    ))
    logger.info("edmonds-karp: max flow %d after %d augmenting path(s)", max_flow, len(steps) - 1)
    return steps
