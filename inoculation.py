"""
Targeted inoculation of a contact network.

Repeatedly isolates the most influential individual, measured either by
degree or by collective influence, and reports what changed so that a
visualization can recolor the affected groups.
"""

import logging
import sys
from dataclasses import dataclass, field
from typing import List

import pandas as pd

logger = logging.getLogger(__name__)

DEGREE_UNIT = "degree"
COLLECTIVE_INFLUENCE_UNIT = "collective influence"


@dataclass
class IsolationInfo:
    """Outcome of a single isolation."""

    node: int
    influence: int
    unit: str
    # Nodes reachable from `node` just before it was isolated, `node` first
    connected_nodes: List[int] = field(default_factory=list)


class Inoculator:
    """
    Isolates the highest scoring node of a network, one node per call.
    """

    def __init__(self, network, use_degree=False, radius=2, trace=False, out=None):
        """
        Args:
            network: ContactNetwork to inoculate (mutated in place)
            use_degree: Rank nodes by degree instead of collective influence
            radius: Radius used for collective influence
            trace: Also write the nodes still connected after each isolation
            out: Text stream receiving the result lines (default: stdout)
        """
        if radius < 0:
            raise ValueError(f"Radius must be non-negative, got {radius}")

        self.network = network
        self.use_degree = use_degree
        self.radius = radius
        self.trace = trace
        self.out = out if out is not None else sys.stdout
        self.history = []

    @property
    def unit(self):
        return DEGREE_UNIT if self.use_degree else COLLECTIVE_INFLUENCE_UNIT

    def _score(self, node):
        if self.use_degree:
            return self.network.degree(node)
        return self.network.get_collective_influence(node)

    def select_node(self):
        """
        Pick the node to isolate next.

        Nodes are scanned in ascending id order and a candidate is replaced
        only by a strictly greater score, so ties go to the lowest id. Only
        nodes with at least one contact are eligible, and the score must be
        positive.

        The collective influence cache is computed here when the network has
        none for this radius. Any topology change made outside this
        inoculator clears it, so a stale cache is never reused.

        Returns:
            (node, score), or None when no node is eligible
        """
        if not self.use_degree and (self.network.collective_influences is None
                                    or self.network.influence_radius != self.radius):
            self.network.compute_collective_influences(self.radius)

        best_node, best_score = None, 0
        for node in self.network.nodes:
            if self.network.degree(node) == 0:
                continue
            score = self._score(node)
            if score > best_score:
                best_node, best_score = node, score

        if best_node is None:
            return None
        return best_node, best_score

    def isolate(self):
        """
        Isolate the highest scoring node.

        Returns:
            IsolationInfo for the isolated node, or None when no node is
            eligible (the network is left untouched)
        """
        selected = self.select_node()
        if selected is None:
            logger.debug("No eligible node left to isolate")
            return None
        node, score = selected

        # Snapshot the group before the edges disappear; the visualization
        # recolors exactly these nodes.
        connected_nodes = self.network.get_connected_nodes(node)

        distances = None
        if not self.use_degree:
            distances = self.network.get_shortest_paths(node)

        self.network.isolate_node(node, keep_influences=distances is not None)

        if distances is not None:
            self._refresh_influences(distances)

        print(f"{node} {score}", file=self.out)
        if self.trace:
            connecting = " ".join(str(n) for n in self.network.connecting_nodes())
            print(f"Connected components: {connecting}".rstrip(), file=self.out)

        self._record_history(node, score)
        return IsolationInfo(node, score, self.unit, connected_nodes)

    def _refresh_influences(self, distances):
        """
        Recompute cached collective influences that the isolation affected.

        A score can only change for nodes within radius + 1 hops of the
        isolated node: the extra hop reaches nodes whose radius boundary holds
        one of its former neighbors.
        """
        affected = [n for n, d in distances.items() if d <= self.radius + 1]
        for n in affected:
            self.network.collective_influences[n] = \
                self.network.collective_influence(n, self.radius)
        logger.debug("Refreshed collective influence of %d nodes", len(affected))

    def inoculate(self, num_nodes):
        """
        Isolate up to num_nodes nodes one after another.

        Stops early when no eligible node is left.
        """
        if num_nodes < 0:
            raise ValueError(f"Number of nodes to isolate must be non-negative, got {num_nodes}")

        isolated = []
        for step in range(num_nodes):
            info = self.isolate()
            if info is None:
                logger.warning("Stopped after %d of %d isolations: no eligible node left",
                               step, num_nodes)
                break
            isolated.append(info)
        return isolated

    def _record_history(self, node, score):
        components = self.network.get_connected_components()
        self.history.append({
            'step': len(self.history) + 1,
            'node': node,
            'influence': score,
            'unit': self.unit,
            'edges': self.network.graph.number_of_edges(),
            'connecting_nodes': len(self.network.connecting_nodes()),
            'largest_component': max((len(c) for c in components), default=0),
        })

    def history_frame(self):
        """Isolation history as a DataFrame, one row per isolation."""
        columns = ['step', 'node', 'influence', 'unit', 'edges',
                   'connecting_nodes', 'largest_component']
        return pd.DataFrame(self.history, columns=columns)
