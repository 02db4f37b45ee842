# push_relabel.py
import logging

from flowtrace.edgelist import prepare_network
from flowtrace.errors import InvariantViolation
from flowtrace.models import NodeState, StepRecord, merge_edges
from flowtrace.residual import CumulativeFlow, ResidualGraph

logger = logging.getLogger(__name__)


def run_push_relabel(nodes, edges, source, sink):
    """Highest-label preflow-push.

    Emits an ``init`` record, one ``push`` record per saturating push out of
    the source, then one record per push or relabel of the discharge loop and
    a closing ``final`` record. Each record carries every node's height and
    excess. The max flow is the sink's excess in the last record.

    An active node is discharged along all its admissible edges before the
    highest active node is picked again; it is relabelled only when it could
    not push at all.
    """
    nodes, edges = prepare_network(nodes, edges, source, sink)
    R = ResidualGraph(nodes, edges)
    flows = CumulativeFlow(edges)

    n = len(nodes)
    height = {u: 0 for u in nodes}
    excess = {u: 0 for u in nodes}
    height[source] = n
    steps = []

    def record(kind, description, active=None, push_edge=None, amount=0):
        steps.append(StepRecord(
            kind=kind,
            description=description,
            edge_flows=flows.snapshot(),
            path_flow=amount,
            active_node=active,
            push_edge=push_edge,
            node_states={u: NodeState(height[u], excess[u]) for u in nodes},
        ))

    def push(u, v, amount):
        R.augment(u, v, amount)
        flows.route(u, v, amount)
        excess[u] -= amount
        # flow returned to the source leaves the preflow
        if v != source:
            excess[v] += amount
        if u != source and excess[u] < 0:
            raise InvariantViolation(f"excess at {u} went negative ({excess[u]})")

    def relabel(u):
        reachable = [height[v] for v in R.neighbors(u)]
        if not reachable:
            raise InvariantViolation(f"{u} holds excess {excess[u]} but has no residual edge")
        old_h = height[u]
        height[u] = min(reachable) + 1
        if height[u] <= old_h:
            raise InvariantViolation(f"relabel of {u} would lower height {old_h} -> {height[u]}")
        return old_h

    # Saturate outgoing edges from source
    record("init", f"Initializing. Setting height of source '{source}' to {n}.", active=source)
    for e in merge_edges(edges):
        v = e.target
        if e.source != source or v == source or e.capacity == 0:
            continue
        cap = R.residual(source, v)
        push(source, v, cap)
        logger.debug("preflow: %s -> %s saturated with %d", source, v, cap)
        record(
            "push",
            f"Creating preflow: Pushing {cap} from '{source}' to '{v}'.",
            active=source, push_edge=(source, v), amount=cap,
        )
    excess[source] = 0

    pushes = relabels = 0
    while True:
        active = [u for u in nodes if u not in (source, sink) and excess[u] > 0]
        if not active:
            break
        u = max(active, key=lambda a: height[a])

        pushed_something = False
        for v in R.successors(u):
            if excess[u] == 0:
                break
            r = R.residual(u, v)
            if r > 0 and height[u] == height[v] + 1:
                amount = min(excess[u], r)
                push(u, v, amount)
                pushes += 1
                pushed_something = True
                logger.debug("push %d: %s -> %s", amount, u, v)
                record(
                    "push",
                    f"Pushing {amount} from '{u}' (h:{height[u]}) to '{v}' (h:{height[v]}).",
                    active=u, push_edge=(u, v), amount=amount,
                )

        if not pushed_something:
            old_h = relabel(u)
            relabels += 1
            logger.debug("relabel %s: %d -> %d", u, old_h, height[u])
            record("relabel", f"Relabeling '{u}' from height {old_h} to {height[u]}.", active=u)

    record("final", "No more active nodes. Algorithm terminates.")
    logger.info(
        "push-relabel: max flow %d after %d push(es), %d relabel(s)",
        excess[sink], pushes, relabels,
    )
    return steps
