"""
Contact Network for Targeted Immunization
Stores an undirected, unweighted contact graph over nodes 1..n and provides
the traversal, shortest-path and influence measures used to decide which
individuals to isolate.
"""

import logging
import sys

import numpy as np
import networkx as nx

logger = logging.getLogger(__name__)

# Distance reported for nodes that cannot be reached from the source.
UNREACHABLE = sys.maxsize


class NodeOutOfRangeError(ValueError):
    """Raised when a node id lies outside 1..n."""


class EdgeListError(ValueError):
    """Raised when edge list input cannot be turned into a network."""


class ContactNetwork:
    """
    Undirected, unweighted contact network with nodes identified 1..n.

    Adjacency lives in a networkx Graph whose node set is exactly 1..n.
    Traversal bookkeeping (visited markers) is kept in a separate set so
    that topology and scratch state never mix.
    """

    def __init__(self, n_nodes):
        """
        Initialize an edgeless network.

        Args:
            n_nodes: Number of individuals; nodes are numbered 1..n_nodes
        """
        if n_nodes < 0:
            raise ValueError(f"Number of nodes must be non-negative, got {n_nodes}")

        self.n_nodes = n_nodes
        self.graph = nx.Graph()
        self.graph.add_nodes_from(range(1, n_nodes + 1))

        self.visited = set()
        self.last_isolated_node = 0  # 0 = nothing isolated yet

        # Filled by compute_collective_influences()
        self.collective_influences = None
        self.influence_radius = None

    @classmethod
    def from_edges(cls, edges):
        """
        Build a network from (a, b) node pairs.

        The network size is the largest node id seen across all pairs.
        """
        edges = [(int(a), int(b)) for a, b in edges]
        for a, b in edges:
            if a == b:
                raise EdgeListError(f"node {a} is paired with itself")
        n = max((max(a, b) for a, b in edges), default=0)

        network = cls(n)
        for a, b in edges:
            network.connect(a, b)

        logger.debug("Built network with %d nodes and %d edges",
                     network.n_nodes, network.graph.number_of_edges())
        return network

    @classmethod
    def from_file(cls, path):
        """
        Read a network from a text file of whitespace-separated node ids.

        Consecutive integers form the edge pairs; line breaks carry no meaning.
        """
        with open(path, encoding="utf-8") as f:
            tokens = f.read().split()

        try:
            ids = np.array(tokens, dtype=np.int64)
        except ValueError as e:
            raise EdgeListError(f"{path}: edge list must contain only integers") from e

        if ids.size % 2 != 0:
            raise EdgeListError(
                f"{path}: expected an even number of node ids, found {ids.size}")
        if ids.size and ids.min() < 1:
            raise EdgeListError(f"{path}: node ids are numbered from 1")

        return cls.from_edges(ids.reshape(-1, 2).tolist())

    @property
    def nodes(self):
        """Node ids in ascending order."""
        return list(range(1, self.n_nodes + 1))

    @property
    def edges(self):
        """Edges as (smaller, larger) pairs in ascending order."""
        return sorted((min(u, v), max(u, v)) for u, v in self.graph.edges())

    def _check_node(self, node):
        if isinstance(node, bool) or not isinstance(node, (int, np.integer)):
            raise NodeOutOfRangeError(f"Node id must be an integer, got {node!r}")
        if not 1 <= node <= self.n_nodes:
            raise NodeOutOfRangeError(
                f"Node {node} is outside the valid range 1..{self.n_nodes}")

    # ------------------------------------------------------------------
    # Adjacency
    # ------------------------------------------------------------------

    def connect(self, a, b):
        """Add undirected edge between nodes a and b."""
        self._check_node(a)
        self._check_node(b)
        if a == b:
            raise ValueError(f"Cannot connect node {a} to itself")
        if not self.graph.has_edge(a, b):
            self.graph.add_edge(a, b)
            self.clear_collective_influences()

    def disconnect(self, a, b):
        """Remove the edge between nodes a and b, if present."""
        self._check_node(a)
        self._check_node(b)
        if self.graph.has_edge(a, b):
            self.graph.remove_edge(a, b)
            self.clear_collective_influences()

    def is_connected(self, a, b):
        self._check_node(a)
        self._check_node(b)
        return self.graph.has_edge(a, b)

    def get_neighbors(self, node):
        """Neighbors of a node in ascending order."""
        self._check_node(node)
        return sorted(self.graph.neighbors(node))

    def degree(self, node):
        """Number of current neighbors of a node."""
        self._check_node(node)
        return self.graph.degree(node)

    def isolate_node(self, node, keep_influences=False):
        """
        Disconnect a node from every other node and remember it.

        Args:
            node: Node to isolate
            keep_influences: Leave the collective influence cache in place;
                the caller is then responsible for refreshing it
        """
        for neighbor in self.get_neighbors(node):
            self.graph.remove_edge(node, neighbor)
        self.last_isolated_node = node
        if not keep_influences:
            self.clear_collective_influences()

    # ------------------------------------------------------------------
    # Visited markers
    # ------------------------------------------------------------------

    def is_visited(self, node):
        self._check_node(node)
        return node in self.visited

    def mark_visited(self, node):
        self._check_node(node)
        self.visited.add(node)

    def mark_unvisited(self, node):
        self._check_node(node)
        self.visited.discard(node)

    def mark_all_unvisited(self):
        self.visited.clear()

    def get_first_unvisited_node(self):
        """Smallest unvisited node id, or 0 when every node is visited."""
        for node in range(1, self.n_nodes + 1):
            if node not in self.visited:
                return node
        return 0

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def _collect_connected(self, source):
        """
        Depth-first preorder discovery from source, honouring current markers.

        An explicit stack replaces recursion; neighbors are pushed in
        descending order so they are discovered in ascending order.
        """
        found = []
        stack = [source]
        while stack:
            node = stack.pop()
            if node in self.visited:
                continue
            self.visited.add(node)
            found.append(node)
            for neighbor in reversed(self.get_neighbors(node)):
                if neighbor not in self.visited:
                    stack.append(neighbor)
        return found

    def get_connected_nodes(self, source):
        """
        Nodes reachable from source regardless of depth, source first.

        Visited markers are cleared before and after the traversal.

        Time Complexity: O(n + m log m)
        """
        self._check_node(source)
        self.mark_all_unvisited()
        try:
            return self._collect_connected(source)
        finally:
            self.mark_all_unvisited()

    def get_connected_components(self):
        """Partition the nodes into connected components, seeded by lowest id."""
        self.mark_all_unvisited()
        components = []
        try:
            seed = self.get_first_unvisited_node()
            while seed != 0:
                components.append(self._collect_connected(seed))
                seed = self.get_first_unvisited_node()
        finally:
            self.mark_all_unvisited()
        return components

    # ------------------------------------------------------------------
    # Shortest paths
    # ------------------------------------------------------------------

    def get_shortest_paths(self, source):
        """
        Hop-count distance from source to every node (Dijkstra, unit weights).

        Each round settles the unsettled node with the smallest tentative
        distance; ties go to the lowest node id. Nodes that cannot be reached
        keep the UNREACHABLE distance.

        Time Complexity: O(n^2)
        Space Complexity: O(n)
        """
        self._check_node(source)

        distances = {node: UNREACHABLE for node in self.nodes}
        distances[source] = 0
        settled = set()

        for _ in range(self.n_nodes - 1):
            current = 0
            min_distance = UNREACHABLE
            for node in range(1, self.n_nodes + 1):
                if node not in settled and distances[node] < min_distance:
                    min_distance = distances[node]
                    current = node

            # Everything left is unreachable
            if current == 0:
                break

            settled.add(current)
            for neighbor in self.graph.neighbors(current):
                if neighbor not in settled and min_distance + 1 < distances[neighbor]:
                    distances[neighbor] = min_distance + 1

        return distances

    # ------------------------------------------------------------------
    # Influence
    # ------------------------------------------------------------------

    def collective_influence(self, node, radius):
        """
        Collective influence of a node within the given radius.

        CI(node) = (k_node - 1) * sum(k_i - 1) over every node i whose
        shortest-path distance from node is exactly radius.

        Time Complexity: O(n^2)
        """
        if isinstance(radius, bool) or not isinstance(radius, (int, np.integer)) or radius < 0:
            raise ValueError(f"Radius must be a non-negative integer, got {radius!r}")

        k = self.degree(node) - 1
        distances = self.get_shortest_paths(node)
        boundary = sum(self.graph.degree(i) - 1
                       for i, d in distances.items() if d == radius)
        return k * boundary

    def compute_collective_influences(self, radius):
        """
        Compute and cache the collective influence of every node.

        Time Complexity: O(n^3)
        """
        self.collective_influences = {
            node: self.collective_influence(node, radius) for node in self.nodes
        }
        self.influence_radius = radius
        logger.debug("Computed collective influences for %d nodes (radius %d)",
                     self.n_nodes, radius)
        return self.collective_influences

    def clear_collective_influences(self):
        """Drop the cached influences; they no longer match the topology."""
        self.collective_influences = None
        self.influence_radius = None

    def get_collective_influence(self, node):
        """Cached collective influence of a node."""
        if self.collective_influences is None:
            raise RuntimeError(
                "Collective influences have not been computed; "
                "call compute_collective_influences() first")
        self._check_node(node)
        return self.collective_influences[node]

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------

    def connecting_nodes(self):
        """Nodes connected to at least one other node."""
        return [node for node in self.nodes if self.graph.degree(node) > 0]

    def get_network_stats(self):
        """Calculate network statistics."""
        degrees = [self.graph.degree(node) for node in self.nodes]
        components = self.get_connected_components()
        return {
            'nodes': self.n_nodes,
            'edges': self.graph.number_of_edges(),
            'avg_degree': float(np.mean(degrees)) if degrees else 0.0,
            'max_degree': max(degrees, default=0),
            'min_degree': min(degrees, default=0),
            'components': len(components),
            'largest_component': max((len(c) for c in components), default=0),
            'connecting_nodes': sum(1 for d in degrees if d > 0),
        }
