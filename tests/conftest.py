import pytest

from flowtrace.edgelist import parse_edge_list
from flowtrace.settings import PRESET_GRAPHS


@pytest.fixture
def classic():
    """s-a(10), s-b(10), a-c(4), a-d(8), b-d(9), c-t(10), d-c(6), d-t(10); max flow 19."""
    return parse_edge_list(PRESET_GRAPHS["classic"])


@pytest.fixture
def single():
    return [("s", "t", 5)]


@pytest.fixture
def unreachable():
    return [("s", "a", 3), ("b", "t", 4)]


@pytest.fixture
def unit_chain():
    names = ["s", "n1", "n2", "n3", "n4", "t"]
    return [(u, v, 1) for u, v in zip(names, names[1:])]


@pytest.fixture
def cross_edge():
    """The only shortest path s-a-b-t blocks both longer routes until a-b is undone."""
    return [
        ("s", "a", 1), ("a", "b", 1), ("b", "t", 1),
        ("a", "x", 1), ("x", "y", 1), ("y", "t", 1),
        ("s", "p", 1), ("p", "q", 1), ("q", "b", 1),
    ]
