import random

import networkx as nx
import pytest

from flowtrace import ENGINES, run
from flowtrace.analysis import max_flow_value, min_cut
from flowtrace.edgelist import derive_nodes, parse_edge_list
from flowtrace.models import as_declared_edges, merge_edges
from flowtrace.settings import PRESET_GRAPHS


def random_network(seed):
    rng = random.Random(seed)
    names = ["s", "t"] + [f"v{i}" for i in range(rng.randint(2, 7))]
    edges = []
    for _ in range(rng.randint(3, 18)):
        u, v = rng.sample(names, 2)
        edges.append((u, v, rng.randint(0, 12)))
    # make sure both ends show up even when no edge touches them
    return ["s", "t"] + [n for n in names if n not in ("s", "t")], edges


def networks():
    for name, text in PRESET_GRAPHS.items():
        yield pytest.param(None, parse_edge_list(text), id=name)
    for seed in range(25):
        nodes, edges = random_network(seed)
        yield pytest.param(nodes, edges, id=f"random-{seed}")


def oracle(edges):
    G = nx.DiGraph()
    G.add_nodes_from(["s", "t"])
    for e in merge_edges(as_declared_edges(edges)):
        G.add_edge(e.source, e.target, capacity=e.capacity)
    return nx.maximum_flow_value(G, "s", "t")


def net_inflow(edge_flows, node):
    return (sum(f for (_, v), f in edge_flows.items() if v == node)
            - sum(f for (u, _), f in edge_flows.items() if u == node))


NETWORKS = list(networks())


def test_network_cases_are_collected():
    assert len(NETWORKS) == len(PRESET_GRAPHS) + 25


@pytest.mark.parametrize("nodes, edges", NETWORKS)
class TestAcrossEngines:
    def test_all_engines_agree_with_networkx(self, nodes, edges):
        expected = oracle(edges)
        for name in ENGINES:
            steps = run(name, nodes, edges, "s", "t")
            assert max_flow_value(steps[-1], "s") == expected, name

    def test_capacity_respected_at_every_step(self, nodes, edges):
        capacity = {e.key: e.capacity for e in merge_edges(as_declared_edges(edges))}
        for name in ENGINES:
            for step in run(name, nodes, edges, "s", "t"):
                assert set(step.edge_flows) == set(capacity)
                for key, f in step.edge_flows.items():
                    assert 0 <= f <= capacity[key], (name, step.description, key)

    def test_conservation_for_path_based_engines(self, nodes, edges):
        names = nodes or derive_nodes(as_declared_edges(edges))
        for name in ("edmonds_karp", "dinic"):
            for step in run(name, nodes, edges, "s", "t"):
                for n in names:
                    if n not in ("s", "t"):
                        assert net_inflow(step.edge_flows, n) == 0, (name, n)

    def test_preflow_excess_matches_reported_flows(self, nodes, edges):
        steps = run("push_relabel", nodes, edges, "s", "t")
        for step in steps:
            for n, state in step.node_states.items():
                if n != "s":
                    assert state.excess >= 0
                    assert net_inflow(step.edge_flows, n) == state.excess
        for n, state in steps[-1].node_states.items():
            if n not in ("s", "t"):
                assert state.excess == 0

    def test_push_relabel_heights_never_decrease(self, nodes, edges):
        steps = run("push_relabel", nodes, edges, "s", "t")
        for before, after in zip(steps, steps[1:]):
            for n, state in after.node_states.items():
                assert state.height >= before.node_states[n].height

    def test_dinic_sink_level_grows(self, nodes, edges):
        levels = [s.sink_level for s in run("dinic", nodes, edges, "s", "t") if s.kind == "phase"]
        assert levels == sorted(set(levels))
        assert len(levels) <= len(nodes or derive_nodes(as_declared_edges(edges))) - 1

    def test_max_flow_equals_min_cut(self, nodes, edges):
        for name in ENGINES:
            final = run(name, nodes, edges, "s", "t")[-1]
            reachable, cut = min_cut(edges, final.edge_flows, "s")
            assert "t" not in reachable
            assert sum(c for _, _, c in cut) == max_flow_value(final, "s")

    def test_runs_are_deterministic(self, nodes, edges):
        for name in ENGINES:
            first = run(name, nodes, edges, "s", "t")
            second = run(name, nodes, edges, "s", "t")
            assert first == second
            assert [s.to_dict() for s in first] == [s.to_dict() for s in second]


@pytest.mark.parametrize("name", list(ENGINES))
def test_scenario_single_edge(name, single):
    steps = run(name, None, single, "s", "t")
    moves = [s for s in steps if s.kind in ("augment", "phase", "push")]
    assert len(moves) == 1
    assert moves[0].path_flow == 5
    assert steps[-1].kind == "final"


@pytest.mark.parametrize("name", list(ENGINES))
def test_scenario_unit_chain(name, unit_chain):
    assert max_flow_value(run(name, None, unit_chain, "s", "t")[-1], "s") == 1
