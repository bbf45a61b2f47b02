import networkx as nx
import pytest

from contact_network import ContactNetwork


@pytest.fixture
def path_network():
    """1 - 2 - 3 - 4 - 5"""
    return ContactNetwork.from_edges([(1, 2), (2, 3), (3, 4), (4, 5)])


@pytest.fixture
def star_network():
    """Center 1 with leaves 2..5"""
    return ContactNetwork.from_edges([(1, 2), (1, 3), (1, 4), (1, 5)])


@pytest.fixture
def random_network():
    """Seeded random graph with several components, relabelled to 1..n."""
    G = nx.gnp_random_graph(30, 0.08, seed=7)
    network = ContactNetwork(30)
    for u, v in G.edges():
        network.connect(u + 1, v + 1)
    return network
