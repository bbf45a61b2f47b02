"""
Force-directed placement of a contact network.

Fruchterman-Reingold style spring embedder: every pair of nodes repels,
every edge attracts, and a logarithmic cooling schedule bounds how far a
node may move per iteration.
"""

import logging
import math

import numpy as np

logger = logging.getLogger(__name__)

DEFAULT_ITERATIONS = 1000


class ForceDirectedLayout:
    """
    Implements Spring Embedder algorithm for graph visualization.

    A layout instance runs once: initialize, iterate a fixed number of
    times, done. Rerunning requires a fresh instance. The edge set is
    captured at construction, so later isolations do not affect a run.
    """

    def __init__(self, network, width=800, height=600,
                 iterations=DEFAULT_ITERATIONS, seed=None):
        """
        Args:
            network: ContactNetwork to lay out
            width: Width of the drawing frame
            height: Height of the drawing frame
            iterations: Number of iterations performed by simulate()
            seed: Seed for the random initial placement
        """
        if network.n_nodes == 0:
            raise ValueError("Cannot lay out a network without nodes")

        self.network = network
        self.width = width
        self.height = height
        self.max_iterations = iterations
        self.iteration = 0

        # Optimal distance between vertices
        self.k = math.sqrt((width * height) / network.n_nodes)

        # Row i holds node i + 1
        rng = np.random.default_rng(seed)
        self.position = rng.uniform(
            low=(-width / 2, -height / 2), high=(width / 2, height / 2),
            size=(network.n_nodes, 2))
        self.displacement = np.zeros_like(self.position)

        edges = network.edges
        self._edges = np.array(edges, dtype=np.intp).reshape(-1, 2) - 1

        # Temperature used by each completed iteration
        self.temperatures = []
        self.x = 100
        self.temperature = 0.0
        self.cool()

    def calculate_repulsive_force(self, dist):
        """Repulsive force between all node pairs (Coulomb's law)."""
        force = np.zeros_like(dist)
        np.divide(self.k * self.k, dist, out=force, where=dist > 0)
        return force

    def calculate_attractive_force(self, dist):
        """Attractive force between connected nodes (Hooke's law)."""
        return (dist * dist) / self.k

    def cool(self):
        """
        Lower the temperature to log10(x), decrementing x once per call.

        The temperature holds once x drops below 2.
        """
        self.x -= 1
        if self.x >= 2:
            self.temperature = math.log10(self.x)

    def _step(self):
        pos = self.position

        # Repulsion between every ordered pair; each component is pushed
        # along its own sign with the magnitude of the full distance.
        diff = pos[:, np.newaxis, :] - pos[np.newaxis, :, :]
        dist = np.hypot(diff[..., 0], diff[..., 1])
        force = self.calculate_repulsive_force(dist)
        self.displacement = (np.sign(diff) * force[..., np.newaxis]).sum(axis=1)

        # Attraction along edges
        if len(self._edges):
            u, v = self._edges[:, 0], self._edges[:, 1]
            edge_diff = pos[u] - pos[v]
            edge_dist = np.hypot(edge_diff[:, 0], edge_diff[:, 1])
            pull = np.sign(edge_diff) * \
                self.calculate_attractive_force(edge_dist)[:, np.newaxis]
            np.subtract.at(self.displacement, u, pull)
            np.add.at(self.displacement, v, pull)

        # Limit the displacement to the temperature and keep inside the frame
        self.temperatures.append(self.temperature)
        step = np.sign(self.displacement) * \
            np.minimum(np.abs(self.displacement), self.temperature)
        pos += step
        np.clip(pos[:, 0], -self.width / 2, self.width / 2, out=pos[:, 0])
        np.clip(pos[:, 1], -self.height / 2, self.height / 2, out=pos[:, 1])

        self.cool()
        self.iteration += 1

    def iterate(self, iterations=1):
        """
        Perform force-directed layout iterations.

        Time Complexity: O(n^2 + m) per iteration
        Space Complexity: O(n^2)

        Returns:
            False once the iteration budget is exhausted, True otherwise
        """
        for _ in range(iterations):
            if self.iteration >= self.max_iterations:
                return False
            self._step()
        return True

    def simulate(self):
        """Run every remaining iteration and return the final positions."""
        if self.iteration >= self.max_iterations:
            raise RuntimeError("Layout already simulated; create a new ForceDirectedLayout")

        self.iterate(self.max_iterations - self.iteration)
        logger.debug("Layout finished after %d iterations (temperature %.3f)",
                     self.iteration, self.temperature)
        return self.positions()

    def positions(self):
        """Node -> (x, y) in frame coordinates centred on the origin."""
        return {node: (float(x), float(y))
                for node, (x, y) in enumerate(self.position, start=1)}
