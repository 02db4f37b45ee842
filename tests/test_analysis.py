from flowtrace import ENGINES, run_dinic, run_edmonds_karp, run_push_relabel
from flowtrace.analysis import (
    compare,
    compare_frame,
    graph_properties,
    max_flow_value,
    min_cut,
    trace_frame,
    trace_stats,
)
from flowtrace.edgelist import derive_nodes
from flowtrace.models import as_declared_edges


def test_min_cut_on_classic_graph(classic):
    final = run_edmonds_karp(None, classic, "s", "t")[-1]
    reachable, cut = min_cut(classic, final.edge_flows, "s")
    assert "s" in reachable and "t" not in reachable
    assert sum(c for _, _, c in cut) == 19


def test_min_cut_with_no_flow(classic):
    reachable, cut = min_cut(classic, {}, "s")
    assert reachable == {"s", "a", "b", "c", "d", "t"}
    assert cut == []


def test_trace_stats(classic, single):
    assert trace_stats(run_edmonds_karp(None, classic, "s", "t"))["phases"] == 0
    dinic = trace_stats(run_dinic(None, classic, "s", "t"))
    assert dinic["phases"] == 2
    assert dinic["augmenting_paths"] == 4
    pr = trace_stats(run_push_relabel(None, single, "s", "t"))
    assert pr == {"steps": 3, "augmenting_paths": 0, "phases": 0, "pushes": 1, "relabels": 0}


def test_graph_properties(unit_chain, classic):
    props = graph_properties(derive_nodes(classic), classic)
    assert props["nodes"] == 6
    assert props["edges"] == 8
    assert abs(props["density"] - 8 / 30) < 1e-12
    assert not props["unit_capacity"]
    assert graph_properties(["s", "n1", "n2", "n3", "n4", "t"],
                            as_declared_edges(unit_chain))["unit_capacity"]


def test_trace_frame(classic):
    steps = run_edmonds_karp(None, classic, "s", "t")
    frame = trace_frame(steps, classic)
    assert len(frame) == len(steps) * len(classic)
    first = frame[frame["step"] == 0].set_index(["source", "target"])
    assert first.loc[("a", "c"), "flow"] == 4
    assert first.loc[("a", "c"), "highlighted"]
    assert not first.loc[("b", "d"), "highlighted"]
    last = frame[frame["step"] == len(steps) - 1]
    assert last[last["source"] == "s"]["flow"].sum() == max_flow_value(steps[-1], "s")


def test_compare_runs_every_engine(classic):
    results = compare(None, classic, "s", "t")
    assert list(results) == list(ENGINES)
    for name, r in results.items():
        stats = r["stats"]
        assert stats["max_flow"] == 19, name
        assert stats["operation_count"] == len(r["steps"]) - 1
        assert stats["time_ms"] >= 0
        assert r["steps"][-1].kind == "final"
    assert results["dinic"]["stats"]["phases"] == 2
    pr = results["push_relabel"]
    expected = trace_stats(pr["steps"])
    assert pr["stats"]["pushes"] == expected["pushes"]
    assert pr["stats"]["relabels"] == expected["relabels"]
    assert results["edmonds_karp"]["stats"]["pushes"] == 0


def test_compare_frame(classic):
    frame = compare_frame(compare(None, classic, "s", "t"))
    assert frame.shape == (3, 7)
    assert frame.index.name == "algorithm"
    assert list(frame.index) == list(ENGINES)
    assert (frame["max_flow"] == 19).all()
