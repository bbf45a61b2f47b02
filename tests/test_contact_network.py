"""
Contact Network Tests
=====================

Adjacency storage, traversal, shortest paths and collective influence.
"""

import networkx as nx
import pytest

from contact_network import (
    ContactNetwork,
    EdgeListError,
    NodeOutOfRangeError,
    UNREACHABLE,
)


class TestAdjacency:

    def test_connect_is_symmetric(self):
        network = ContactNetwork(4)
        network.connect(1, 3)
        assert network.is_connected(1, 3) is True
        assert network.is_connected(3, 1) is True

        network.disconnect(3, 1)
        assert network.is_connected(1, 3) is False
        assert network.is_connected(3, 1) is False

    def test_connect_and_disconnect_are_idempotent(self):
        network = ContactNetwork(3)
        network.connect(1, 2)
        network.connect(2, 1)
        assert network.degree(1) == 1

        network.disconnect(1, 2)
        network.disconnect(1, 2)
        assert network.degree(1) == 0

    def test_out_of_range_nodes_fail_fast(self):
        network = ContactNetwork(3)
        for bad in (0, 4, -1):
            with pytest.raises(NodeOutOfRangeError):
                network.connect(1, bad)
        with pytest.raises(NodeOutOfRangeError):
            network.degree(0)
        with pytest.raises(NodeOutOfRangeError):
            network.get_shortest_paths(10)

    def test_self_loop_rejected(self):
        network = ContactNetwork(2)
        with pytest.raises(ValueError):
            network.connect(2, 2)

    def test_from_edges_sizes_network_by_largest_id(self):
        network = ContactNetwork.from_edges([(1, 2), (7, 3)])
        assert network.n_nodes == 7
        assert network.nodes == [1, 2, 3, 4, 5, 6, 7]
        assert network.edges == [(1, 2), (3, 7)]
        assert network.degree(5) == 0

    def test_isolate_node_removes_all_edges(self, star_network):
        star_network.isolate_node(1)
        assert star_network.degree(1) == 0
        assert star_network.edges == []
        assert star_network.last_isolated_node == 1


class TestEdgeListFile:

    def test_pairs_ignore_line_structure(self, tmp_path):
        path = tmp_path / "edges.txt"
        path.write_text("1 2\n2\n3 3 4\n")
        network = ContactNetwork.from_file(path)
        assert network.n_nodes == 4
        assert network.edges == [(1, 2), (2, 3), (3, 4)]

    def test_odd_number_of_ids(self, tmp_path):
        path = tmp_path / "edges.txt"
        path.write_text("1 2 3")
        with pytest.raises(EdgeListError):
            ContactNetwork.from_file(path)

    def test_non_integer_token(self, tmp_path):
        path = tmp_path / "edges.txt"
        path.write_text("1 two")
        with pytest.raises(EdgeListError):
            ContactNetwork.from_file(path)

    def test_zero_node_id(self, tmp_path):
        path = tmp_path / "edges.txt"
        path.write_text("0 1")
        with pytest.raises(EdgeListError):
            ContactNetwork.from_file(path)

    def test_self_loop_pair(self, tmp_path):
        path = tmp_path / "edges.txt"
        path.write_text("1 2\n2 2\n2 3\n")
        with pytest.raises(EdgeListError, match="paired with itself"):
            ContactNetwork.from_file(path)


class TestVisitedMarkers:

    def test_first_unvisited_node(self):
        network = ContactNetwork(3)
        assert network.get_first_unvisited_node() == 1
        network.mark_visited(1)
        network.mark_visited(2)
        assert network.is_visited(2) is True
        assert network.get_first_unvisited_node() == 3
        network.mark_visited(3)
        assert network.get_first_unvisited_node() == 0

        network.mark_unvisited(2)
        assert network.get_first_unvisited_node() == 2
        network.mark_all_unvisited()
        assert network.get_first_unvisited_node() == 1


class TestTraversal:

    def test_preorder_discovery(self):
        network = ContactNetwork.from_edges([(1, 3), (1, 2), (2, 4), (3, 4)])
        assert network.get_connected_nodes(1) == [1, 2, 4, 3]

    def test_markers_cleared_after_traversal(self, path_network):
        path_network.mark_visited(4)
        nodes = path_network.get_connected_nodes(1)
        assert nodes == [1, 2, 3, 4, 5]
        assert path_network.visited == set()

    def test_isolated_node_is_its_own_group(self):
        network = ContactNetwork(3)
        network.connect(1, 2)
        assert network.get_connected_nodes(3) == [3]

    def test_components_partition_nodes(self):
        network = ContactNetwork(6)
        network.connect(1, 2)
        network.connect(2, 3)
        network.connect(4, 5)
        assert network.get_connected_components() == [[1, 2, 3], [4, 5], [6]]

    def test_components_match_networkx(self, random_network):
        components = random_network.get_connected_components()
        flat = [n for c in components for n in c]
        assert sorted(flat) == random_network.nodes

        expected = {frozenset(c) for c in nx.connected_components(random_network.graph)}
        assert {frozenset(c) for c in components} == expected


class TestShortestPaths:

    def test_distance_to_self_is_zero(self, random_network):
        for node in random_network.nodes:
            assert random_network.get_shortest_paths(node)[node] == 0

    def test_path_graph(self, path_network):
        assert path_network.get_shortest_paths(3) == {1: 2, 2: 1, 3: 0, 4: 1, 5: 2}

    def test_unreachable_nodes_use_sentinel(self):
        network = ContactNetwork(4)
        network.connect(1, 2)
        distances = network.get_shortest_paths(1)
        assert distances[3] == UNREACHABLE
        assert distances[4] == UNREACHABLE

    def test_matches_breadth_first_search(self, random_network):
        for source in (1, 5, 17):
            expected = nx.single_source_shortest_path_length(random_network.graph, source)
            distances = random_network.get_shortest_paths(source)
            for node in random_network.nodes:
                assert distances[node] == expected.get(node, UNREACHABLE)


class TestCollectiveInfluence:

    def test_path_graph(self, path_network):
        # Neighbors of node 3 are nodes 2 and 4, both of degree 2
        assert path_network.collective_influence(3, 1) == (2 - 1) * ((2 - 1) + (2 - 1))
        # Nodes 1 and 5 are two hops away, both of degree 1
        assert path_network.collective_influence(3, 2) == 0
        assert path_network.collective_influence(2, 2) == 1

    def test_star_graph(self, star_network):
        assert star_network.degree(1) == 4
        assert star_network.collective_influence(1, 1) == 0
        assert star_network.collective_influence(2, 1) == 0
        # Leaves see each other at distance two, but their own degree is 1
        assert star_network.collective_influence(2, 2) == 0

    def test_counts_exact_radius_only(self):
        # 1 - 2 - 3 - 4 with a branch 3 - 5 - 6
        network = ContactNetwork.from_edges([(1, 2), (2, 3), (3, 4), (3, 5), (5, 6)])
        # Distance 2 from node 2: nodes 4 (degree 1) and 5 (degree 2)
        assert network.collective_influence(2, 2) == (2 - 1) * ((1 - 1) + (2 - 1))

    def test_negative_radius_rejected(self, path_network):
        with pytest.raises(ValueError):
            path_network.collective_influence(1, -1)

    def test_cached_lookup_requires_compute(self, path_network):
        with pytest.raises(RuntimeError):
            path_network.get_collective_influence(1)

        path_network.compute_collective_influences(2)
        assert path_network.influence_radius == 2
        assert path_network.get_collective_influence(2) == 1
        assert path_network.collective_influences == {1: 0, 2: 1, 3: 0, 4: 1, 5: 0}

    def test_topology_changes_clear_influence_cache(self, path_network):
        path_network.compute_collective_influences(2)
        path_network.isolate_node(3)
        assert path_network.collective_influences is None
        assert path_network.influence_radius is None

        path_network.compute_collective_influences(2)
        path_network.connect(1, 5)
        assert path_network.collective_influences is None

        path_network.compute_collective_influences(2)
        path_network.disconnect(1, 5)
        assert path_network.collective_influences is None

    def test_repeated_connect_keeps_influence_cache(self, path_network):
        path_network.compute_collective_influences(2)
        path_network.connect(1, 2)
        path_network.disconnect(1, 3)
        assert path_network.influence_radius == 2


class TestNetworkStats:

    def test_stats(self):
        network = ContactNetwork(6)
        network.connect(1, 2)
        network.connect(2, 3)
        network.connect(4, 5)
        stats = network.get_network_stats()
        assert stats['nodes'] == 6
        assert stats['edges'] == 3
        assert stats['avg_degree'] == pytest.approx(1.0)
        assert stats['max_degree'] == 2
        assert stats['min_degree'] == 0
        assert stats['components'] == 3
        assert stats['largest_component'] == 3
        assert stats['connecting_nodes'] == 5
