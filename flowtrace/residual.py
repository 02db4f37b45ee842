# residual.py
import networkx as nx

from flowtrace.errors import InvariantViolation
from flowtrace.models import merge_edges


class ResidualGraph:
    """Remaining pushable capacity between every declared pair, both directions.

    Each run owns a fresh instance: the engines mutate it destructively.
    """

    def __init__(self, nodes, edges):
        self.nodes = list(nodes)
        order = {n: i for i, n in enumerate(self.nodes)}

        pairs = set()
        for e in edges:
            # a self loop can never carry flow, keep it out of the adjacency
            if e.source == e.target:
                continue
            pairs.add((e.source, e.target))
            pairs.add((e.target, e.source))

        self.G = nx.DiGraph()
        self.G.add_nodes_from(self.nodes)
        # insert in node order so G[u] enumerates neighbors deterministically
        for u, v in sorted(pairs, key=lambda p: (order[p[0]], order[p[1]])):
            self.G.add_edge(u, v, residual=0)
        for e in merge_edges(edges):
            if e.source != e.target:
                self.G[e.source][e.target]["residual"] = e.capacity

    def residual(self, u, v):
        if not self.G.has_edge(u, v):
            return 0
        return self.G[u][v]["residual"]

    def successors(self, u):
        return list(self.G[u])

    def neighbors(self, u):
        """Nodes reachable from u over an edge with positive residual."""
        return [v for v, data in self.G[u].items() if data["residual"] > 0]

    def augment(self, u, v, amount):
        remaining = self.G[u][v]["residual"] - amount
        if remaining < 0:
            raise InvariantViolation(
                f"residual {u}->{v} would become {remaining} after pushing {amount}"
            )
        self.G[u][v]["residual"] = remaining
        self.G[v][u]["residual"] += amount


class CumulativeFlow:
    """Flow per declared edge as reported to consumers.

    Moving flow u->v first cancels flow already sitting on a declared v->u
    edge, so a reverse residual step shows up as reduced forward flow.
    """

    def __init__(self, edges):
        self.capacity = {e.key: e.capacity for e in merge_edges(edges)}
        self.flow = {key: 0 for key in self.capacity}

    def route(self, u, v, amount):
        back = (v, u)
        if self.flow.get(back, 0) > 0:
            returned = min(self.flow[back], amount)
            self.flow[back] -= returned
            amount -= returned

        if amount == 0:
            return
        if (u, v) not in self.flow:
            raise InvariantViolation(f"{amount} units routed along undeclared edge {u}->{v}")
        self.flow[(u, v)] += amount
        if self.flow[(u, v)] > self.capacity[(u, v)]:
            raise InvariantViolation(
                f"flow {self.flow[(u, v)]} on {u}->{v} exceeds capacity {self.capacity[(u, v)]}"
            )

    def route_path(self, path, amount):
        for u, v in zip(path, path[1:]):
            self.route(u, v, amount)

    def snapshot(self):
        return dict(self.flow)
