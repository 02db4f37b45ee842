# settings.py
import os

DEFAULT_SOURCE = "s"
DEFAULT_SINK = "t"

LOG_LEVEL = os.environ.get("FLOWTRACE_LOG_LEVEL", "WARNING").upper()

ALGORITHM_NAMES = {
    "edmonds_karp": "Ford-Fulkerson (BFS / Edmonds-Karp)",
    "dinic": "Dinic's Algorithm",
    "push_relabel": "Push-Relabel (highest label)",
}

PRESET_GRAPHS = {
    "classic": """s,a,10
s,b,10
a,c,4
a,d,8
b,d,9
c,t,10
d,c,6
d,t,10""",
    "clrs": """s,a,16
s,b,13
a,b,10
a,c,12
b,a,4
b,d,14
c,b,9
c,t,20
d,c,7
d,t,4""",
    "ff-worst-case": """s,a,1000000
s,b,1000000
a,b,1
a,t,1000000
b,t,1000000""",
    "dense-graph": """s,a,10
s,b,10
s,c,10
a,d,5
a,e,5
b,d,5
b,e,5
c,d,5
c,e,5
d,t,15
e,t,15""",
    "long-chain": """s,a,10
a,b,10
b,c,10
c,d,10
d,t,10""",
}
