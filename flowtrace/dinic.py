# dinic.py
import logging
from collections import deque

from flowtrace.edgelist import prepare_network
from flowtrace.errors import InvariantViolation
from flowtrace.models import StepRecord
from flowtrace.residual import CumulativeFlow, ResidualGraph

logger = logging.getLogger(__name__)


def bfs_level(R, s):
    level = {n: -1 for n in R.nodes}
    q = deque([s])
    level[s] = 0
    while q:
        u = q.popleft()
        for v in R.neighbors(u):
            if level[v] < 0:
                level[v] = level[u] + 1
                q.append(v)
    return level


def find_admissible_path(R, s, t, level, it):
    """Next s-t path over edges with level[v] == level[u] + 1 and residual > 0.

    Depth-first with an explicit stack. ``it`` holds each node's arc cursor for
    the current phase: arcs behind the cursor are saturated or lead to dead
    ends, so they are never scanned again. Returns (path, bottleneck) or None.
    """
    path = [s]
    while path:
        u = path[-1]
        if u == t:
            bottleneck = min(R.residual(a, b) for a, b in zip(path, path[1:]))
            return path, bottleneck

        arcs = it[u]
        while arcs:
            v = arcs[0]
            if level[v] == level[u] + 1 and R.residual(u, v) > 0:
                path.append(v)
                break
            arcs.popleft()
        else:
            # dead end, retreat and drop the arc that led here
            path.pop()
            if path:
                it[path[-1]].popleft()
    return None


def run_dinic(nodes, edges, source, sink):
    nodes, edges = prepare_network(nodes, edges, source, sink)
    R = ResidualGraph(nodes, edges)
    flows = CumulativeFlow(edges)

    steps = []
    max_flow = 0
    phase = 1
    last_sink_level = 0

    while True:
        level = bfs_level(R, source)
        if level[sink] < 0:
            break
        if level[sink] <= last_sink_level:
            raise InvariantViolation(
                f"sink level did not grow: {last_sink_level} -> {level[sink]}"
            )
        last_sink_level = level[sink]

        it = {n: deque(R.successors(n)) for n in R.nodes}
        phase_total = 0
        paths_in_phase = []

        while True:
            found = find_admissible_path(R, source, sink, level, it)
            if found is None:
                break
            path, path_flow = found
            for u, v in zip(path, path[1:]):
                R.augment(u, v, path_flow)
            flows.route_path(path, path_flow)
            phase_total += path_flow
            paths_in_phase.append(path)

        logger.debug(
            "phase %d: sink level %d, blocking flow %d over %d path(s)",
            phase, level[sink], phase_total, len(paths_in_phase),
        )
        if phase_total > 0:
            steps.append(StepRecord(
                kind="phase",
                description=(
                    f"Phase {phase}: Found a blocking flow of {phase_total} "
                    f"via {len(paths_in_phase)} path(s)."
                ),
                edge_flows=flows.snapshot(),
                paths=paths_in_phase,
                path_flow=phase_total,
                phase=phase,
                sink_level=level[sink],
            ))
        max_flow += phase_total
        phase += 1

    steps.append(StepRecord(
        kind="final",
        description="No more augmenting paths found. Algorithm terminates.",
        edge_flows=flows.snapshot(),
    ))
    logger.info("dinic: max flow %d in %d phase(s)", max_flow, phase - 1)
    return steps
