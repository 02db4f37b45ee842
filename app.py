# app.py
import streamlit as st
import pandas as pd
import networkx as nx
import matplotlib.pyplot as plt

from flowtrace import ENGINES, MalformedInputError, run
from flowtrace.analysis import (
    compare,
    compare_frame,
    graph_properties,
    max_flow_value,
    min_cut,
    trace_frame,
    trace_stats,
)
from flowtrace.edgelist import derive_nodes, parse_edge_list
from flowtrace.settings import ALGORITHM_NAMES, DEFAULT_SINK, DEFAULT_SOURCE, PRESET_GRAPHS

st.set_page_config(page_title="Max Flow Trace", layout="wide")

st.title("Max Flow – Step-by-Step Trace")


def draw_step(G, pos, nodes, step, figsize=(10, 6)):
    lit = step.highlighted_edges() if step else set()
    fig, ax = plt.subplots(figsize=figsize)

    widths = []
    colors = []
    labels = {}
    for u, v, data in G.edges(data=True):
        flow = step.edge_flows.get((u, v), 0) if step else 0
        cap = data["capacity"]
        labels[(u, v)] = f"{flow} / {cap}"
        widths.append(1 + 5 * (flow / cap if cap > 0 else 0))
        if (u, v) in lit or (v, u) in lit:
            colors.append("#FF0072")
        elif cap > 0 and flow == cap:
            colors.append("#cccccc")
        else:
            colors.append("steelblue")

    node_labels = {n: n for n in nodes}
    node_colors = ["lightblue"] * len(nodes)
    if step and step.node_states:
        for i, n in enumerate(nodes):
            ns = step.node_states[n]
            node_labels[n] = f"{n}\nh:{ns.height} e:{max(ns.excess, 0)}"
            if n == step.active_node:
                node_colors[i] = "#fff0f0"

    nx.draw(
        G,
        pos,
        labels=node_labels,
        node_size=1400,
        node_color=node_colors,
        width=widths,
        edge_color=colors,
        arrows=True,
        connectionstyle="arc3,rad=0.08",
        ax=ax,
    )
    nx.draw_networkx_edge_labels(
        G, pos, edge_labels=labels, connectionstyle="arc3,rad=0.08", ax=ax
    )
    ax.axis("off")
    return fig


# Sidebar
st.sidebar.header("Graph")

preset = st.sidebar.selectbox("Preset", [*PRESET_GRAPHS, "custom"])
default_text = PRESET_GRAPHS.get(preset, PRESET_GRAPHS["classic"])
text = st.sidebar.text_area(
    "Edge list (source,target,capacity)",
    value=default_text,
    height=220,
    disabled=preset != "custom",
)
S = st.sidebar.text_input("Source", DEFAULT_SOURCE)
T = st.sidebar.text_input("Sink", DEFAULT_SINK)

mode = st.sidebar.radio("Mode", ["Visualize", "Compare"])
if mode == "Visualize":
    algo_choice = st.sidebar.selectbox(
        "Select Algorithm", list(ENGINES), format_func=ALGORITHM_NAMES.get
    )

debug_mode = st.sidebar.checkbox("Debug output", value=False)

try:
    edges = parse_edge_list(text)
    nodes = derive_nodes(edges)
    if mode == "Compare":
        # independent residual graphs, one per engine
        results = compare(nodes, edges, S, T)
    else:
        steps = run(algo_choice, nodes, edges, S, T)
except MalformedInputError as e:
    st.error(str(e))
    st.stop()

G = nx.DiGraph()
G.add_nodes_from(nodes)
for e in edges:
    G.add_edge(e.source, e.target, capacity=e.capacity)
pos = nx.kamada_kawai_layout(G) if len(G) > 1 else nx.spring_layout(G)
props = graph_properties(nodes, edges)

if mode == "Compare":
    longest = max(len(r["steps"]) for r in results.values())
    # shared cursor, shorter traces stay on their final record
    cursor = st.sidebar.slider("Step", -1, longest - 1, -1)

    st.subheader("Graph Properties")
    st.write(
        f"Nodes: **{props['nodes']}**, Edges: **{props['edges']}**, "
        f"Density: **{props['density'] * 100:.2f}%**, "
        f"Unit capacity: **{'yes' if props['unit_capacity'] else 'no'}**"
    )

    columns = st.columns(len(results))
    for col, (name, r) in zip(columns, results.items()):
        steps = r["steps"]
        step = steps[min(cursor, len(steps) - 1)] if cursor >= 0 else None
        with col:
            st.markdown(f"#### {ALGORITHM_NAMES[name]}")
            st.metric("Maximum Flow So Far", max_flow_value(step, S) if step else 0)
            idx = min(cursor, len(steps) - 1)
            st.caption(f"Step {idx + 1} / {len(steps)}")
            st.write(step.description if step else "Initial graph, no flow assigned yet.")
            st.pyplot(draw_step(G, pos, nodes, step, figsize=(6, 4)))

    st.subheader("Comparison")
    st.dataframe(compare_frame(results), use_container_width=True)
    st.stop()

# -1 shows the untouched input graph
cursor = st.sidebar.slider("Step", -1, len(steps) - 1, -1)
step = steps[cursor] if cursor >= 0 else None

st.subheader(ALGORITHM_NAMES[algo_choice])

col_info, col_flow = st.columns([3, 1])
with col_info:
    st.markdown(f"**Step {cursor + 1} / {len(steps)}**")
    st.write(step.description if step else "Initial graph, no flow assigned yet.")
with col_flow:
    st.metric("Maximum Flow So Far", max_flow_value(step, S) if step else 0)

# Flow Visualization
st.pyplot(draw_step(G, pos, nodes, step))

# Statistics
st.subheader("Live Statistics")
stats = trace_stats(steps[: cursor + 1])
c1, c2 = st.columns(2)
with c1:
    if algo_choice == "edmonds_karp":
        st.write("Augmenting paths:", stats["augmenting_paths"])
    elif algo_choice == "dinic":
        st.write("Phases:", stats["phases"])
        st.write("Total paths found:", stats["augmenting_paths"])
    else:
        st.write("Pushes:", stats["pushes"])
        st.write("Relabels:", stats["relabels"])
with c2:
    st.write("Nodes:", props["nodes"], " Edges:", props["edges"])
    st.write("Density:", f"{props['density'] * 100:.1f}%")
    st.write("Unit capacity:", "yes" if props["unit_capacity"] else "no")

# Per-edge table
st.subheader("Edge Flows")
frame = trace_frame(steps, edges)
if step:
    current = frame[frame["step"] == cursor]
else:
    current = frame[frame["step"] == 0].assign(flow=0, highlighted=False)
st.dataframe(
    current[["source", "target", "flow", "capacity", "highlighted"]].reset_index(drop=True),
    use_container_width=True,
)

if step and step.node_states:
    st.subheader("Heights and Excess")
    st.dataframe(
        pd.DataFrame(
            [(n, s.height, s.excess) for n, s in step.node_states.items()],
            columns=["node", "height", "excess"],
        ),
        use_container_width=True,
    )

# Min-Cut Report
if cursor == len(steps) - 1:
    st.subheader("Min-Cut Report")
    reachable, cut_edges = min_cut(edges, step.edge_flows, S)
    st.write("Source side:", ", ".join(n for n in nodes if n in reachable))
    if cut_edges:
        st.dataframe(
            pd.DataFrame(cut_edges, columns=["From", "To", "Capacity"]),
            use_container_width=True,
        )
    else:
        st.success("No flow reaches the sink.")

if debug_mode:
    st.markdown("### Debug info")
    st.write("Records:", len(steps))
    st.dataframe(
        pd.DataFrame([(i, s.kind, s.path_flow, s.description) for i, s in enumerate(steps)],
                     columns=["step", "kind", "amount", "description"]),
        use_container_width=True,
    )
