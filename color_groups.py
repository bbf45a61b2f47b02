"""
Color groups for drawing a contact network.

Each group is keyed by a source node and shares one fill color with every
node reachable from that source, so connected groups stand out and the
groups split visibly as nodes are isolated.
"""

import random


def random_fill_color(rng):
    """Random pastel-ish fill color as a '#rrggbb' string."""
    r, g, b = (rng.randrange(96, 224) for _ in range(3))
    return f"#{r:02x}{g:02x}{b:02x}"


class ColorGroups:
    """Maps group source nodes to fill colors."""

    def __init__(self, network, rng=None):
        self.network = network
        self.rng = rng if rng is not None else random.Random()
        self.groups = {}  # source node -> color
        self._node_colors = {}

    def compute(self):
        """Assign one color per connected component."""
        self.groups = {}
        for component in self.network.get_connected_components():
            self.groups[component[0]] = random_fill_color(self.rng)
        self._refresh_node_colors()
        return self.groups

    def recompute(self, info):
        """
        Rebuild the groups touched by an isolation.

        Args:
            info: IsolationInfo returned by Inoculator.isolate()
        """
        remaining = list(info.connected_nodes)

        # The old group of the isolated node covered all of these nodes
        for source in list(self.groups):
            if source in remaining:
                del self.groups[source]
                break

        self.groups[info.node] = random_fill_color(self.rng)
        remaining.remove(info.node)

        while remaining:
            source = remaining[0]
            self.groups[source] = random_fill_color(self.rng)
            reached = set(self.network.get_connected_nodes(source))
            remaining = [n for n in remaining if n not in reached]

        self._refresh_node_colors()
        return self.groups

    def _refresh_node_colors(self):
        self._node_colors = {}
        for source, color in self.groups.items():
            for node in self.network.get_connected_nodes(source):
                self._node_colors[node] = color

    def color_of(self, node):
        """Fill color of the group containing node."""
        return self._node_colors[node]

    def members(self):
        """Source node -> set of nodes colored with it."""
        return {source: set(self.network.get_connected_nodes(source))
                for source in self.groups}
