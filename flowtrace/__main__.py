# __main__.py
# Reads an edge list (file or stdin), prints the trace of one or all engines.
import argparse
import json
import logging
import sys

from flowtrace import ENGINES, run
from flowtrace.analysis import (
    compare,
    compare_frame,
    graph_properties,
    max_flow_value,
    min_cut,
    trace_stats,
)
from flowtrace.edgelist import derive_nodes, load_edges_csv, parse_edge_list
from flowtrace.errors import MalformedInputError
from flowtrace.settings import DEFAULT_SINK, DEFAULT_SOURCE, LOG_LEVEL, PRESET_GRAPHS


def build_parser():
    p = argparse.ArgumentParser(prog="flowtrace", description="Step-by-step max flow traces.")
    p.add_argument("input", nargs="?", default="-",
                   help="edge list file (source,target,capacity per line), .csv, or - for stdin")
    p.add_argument("--preset", choices=sorted(PRESET_GRAPHS), help="use a built-in graph")
    p.add_argument("-a", "--algorithm", default="edmonds_karp", choices=[*ENGINES, "all"])
    p.add_argument("--source", default=DEFAULT_SOURCE)
    p.add_argument("--sink", default=DEFAULT_SINK)
    p.add_argument("--json", action="store_true", help="dump the full records as JSON")
    p.add_argument("-v", "--verbose", action="count", default=0)
    return p


def read_edges(args, stdin):
    if args.preset:
        return parse_edge_list(PRESET_GRAPHS[args.preset])
    if args.input == "-":
        return parse_edge_list(stdin.read())
    if args.input.endswith(".csv"):
        return load_edges_csv(args.input)
    with open(args.input) as f:
        return parse_edge_list(f.read())


def main(argv=None, stdin=None, stdout=None):
    args = build_parser().parse_args(argv)
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout

    level = {0: LOG_LEVEL, 1: "INFO"}.get(args.verbose, "DEBUG")
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    try:
        edges = read_edges(args, stdin)
        nodes = derive_nodes(edges)
        if args.algorithm == "all":
            # each engine builds its own residual graph from the same declared edges
            results = compare(nodes, edges, args.source, args.sink)
        else:
            steps = run(args.algorithm, nodes, edges, args.source, args.sink)
            stats = trace_stats(steps)
            stats["max_flow"] = max_flow_value(steps[-1], args.source)
            results = {args.algorithm: {"steps": steps, "stats": stats}}
    except (MalformedInputError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    if args.json:
        json.dump({
            name: {
                "max_flow": r["stats"]["max_flow"],
                "stats": r["stats"],
                "steps": [s.to_dict() for s in r["steps"]],
            }
            for name, r in results.items()
        }, stdout, indent=2)
        stdout.write("\n")
        return 0

    for name, r in results.items():
        steps = r["steps"]
        print(f"== {name} ==", file=stdout)
        for i, step in enumerate(steps):
            print(f"{i:4d} [{step.kind}] {step.description}", file=stdout)
        _, cut = min_cut(edges, steps[-1].edge_flows, args.source)
        print(f"max flow: {r['stats']['max_flow']}", file=stdout)
        print("min cut: " + ", ".join(f"{u}->{v} ({c})" for u, v, c in cut), file=stdout)

    if len(results) > 1:
        props = graph_properties(nodes, edges)
        print("== comparison ==", file=stdout)
        print(
            f"nodes: {props['nodes']}  edges: {props['edges']}  "
            f"density: {props['density'] * 100:.1f}%  "
            f"unit capacity: {'yes' if props['unit_capacity'] else 'no'}",
            file=stdout,
        )
        print(compare_frame(results).to_string(float_format="{:.3f}".format), file=stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())
