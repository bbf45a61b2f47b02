#!/usr/bin/env python3
"""
stop_contagion.py

Command-line entry point:
 - Reads a contact network from an edge list file (pairs of node ids).
 - Isolates NUM_NODES nodes by degree (-d) or collective influence (default).
 - Prints "<node> <score>" per isolation, plus connected nodes with -t.
 - Opens the step-by-step window unless --no-gui is given.
 - Optionally exports the isolation history (CSV) and a layout snapshot (PNG).

Usage: stop_contagion.py [--no-gui] [-d] [-r RADIUS] [-t] NUM_NODES FILE
"""

import argparse
import logging
import sys

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

from color_groups import ColorGroups
from contact_network import ContactNetwork, EdgeListError
from force_directed import ForceDirectedLayout, DEFAULT_ITERATIONS
from inoculation import Inoculator

logger = logging.getLogger("stop_contagion")

SNAPSHOT_WIDTH = 1080
SNAPSHOT_HEIGHT = 800


def parse_args(argv=None):
    p = argparse.ArgumentParser(
        prog="stop-contagion",
        description="Immunize a contact network by isolating its most influential nodes.")
    p.add_argument("num_nodes", metavar="NUM_NODES", type=int,
                   help="Number of nodes to isolate (0 = view only)")
    p.add_argument("file", metavar="FILE",
                   help="Edge list: whitespace-separated pairs of node ids, numbered from 1")
    p.add_argument("-d", dest="use_degree", action="store_true",
                   help="Rank nodes by degree instead of collective influence")
    p.add_argument("-r", dest="radius", type=int, default=2,
                   help="Radius for collective influence (default: 2)")
    p.add_argument("-t", dest="trace", action="store_true",
                   help="Print the nodes still connected after each isolation")
    p.add_argument("--no-gui", action="store_true",
                   help="Run the whole inoculation in the console")
    p.add_argument("--iterations", type=int, default=DEFAULT_ITERATIONS,
                   help="Force-directed layout iterations (default: %(default)s)")
    p.add_argument("--seed", type=int, default=None,
                   help="Random seed for the layout and group colors")
    p.add_argument("--export-csv", metavar="PATH",
                   help="Write the isolation history to a CSV file (console mode)")
    p.add_argument("--save-layout", metavar="PATH",
                   help="Save a PNG snapshot of the network after inoculation (console mode)")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    args = p.parse_args(argv)
    if args.num_nodes < 0:
        p.error("NUM_NODES must be non-negative")
    if args.radius < 0:
        p.error("radius must be non-negative")
    if args.iterations < 1:
        p.error("--iterations must be at least 1")
    return args


def save_layout_snapshot(network, path, iterations=DEFAULT_ITERATIONS, seed=None):
    """
    Lay out the network and save it as a PNG, one color per connected group.

    The most recently isolated node is drawn white.
    """
    layout = ForceDirectedLayout(network, width=SNAPSHOT_WIDTH, height=SNAPSHOT_HEIGHT,
                                 iterations=iterations, seed=seed)
    positions = layout.simulate()

    groups = ColorGroups(network)
    if seed is not None:
        groups.rng.seed(seed)
    groups.compute()

    fig, ax = plt.subplots(figsize=(SNAPSHOT_WIDTH / 100, SNAPSHOT_HEIGHT / 100))
    try:
        for u, v in network.edges:
            (x1, y1), (x2, y2) = positions[u], positions[v]
            ax.plot([x1, x2], [y1, y2], color="black", linewidth=0.6, zorder=1)

        nodes = network.nodes
        colors = ["#ffffff" if n == network.last_isolated_node else groups.color_of(n)
                  for n in nodes]
        ax.scatter([positions[n][0] for n in nodes], [positions[n][1] for n in nodes],
                   c=colors, edgecolors="black", s=120, zorder=2)
        for n in nodes:
            ax.annotate(str(n), positions[n], ha="center", va="center", fontsize=7, zorder=3)

        ax.set_xlim(-SNAPSHOT_WIDTH / 2, SNAPSHOT_WIDTH / 2)
        # Screen coordinates grow downwards
        ax.set_ylim(SNAPSHOT_HEIGHT / 2, -SNAPSHOT_HEIGHT / 2)
        ax.axis("off")
        fig.tight_layout()
        fig.savefig(path, dpi=100)
    finally:
        plt.close(fig)
    logger.info("Layout snapshot saved: %s", path)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[%(levelname)s] %(name)s: %(message)s")

    try:
        network = ContactNetwork.from_file(args.file)
    except OSError as e:
        logger.error("Error reading input file, please check the file name: %s", e)
        return 1
    except EdgeListError as e:
        logger.error("Invalid edge list: %s", e)
        return 1

    logger.debug("Loaded %d nodes and %d edges from %s",
                 network.n_nodes, len(network.edges), args.file)

    if not args.use_degree:
        network.compute_collective_influences(args.radius)

    inoculator = Inoculator(network, use_degree=args.use_degree,
                            radius=args.radius, trace=args.trace)

    if args.no_gui:
        inoculator.inoculate(args.num_nodes)

        if args.export_csv:
            inoculator.history_frame().to_csv(args.export_csv, index=False)
            logger.info("Isolation history exported: %s", args.export_csv)
        if args.save_layout and network.n_nodes > 0:
            save_layout_snapshot(network, args.save_layout,
                                 iterations=args.iterations, seed=args.seed)
        return 0

    if network.n_nodes == 0:
        logger.error("Nothing to display: the network has no nodes")
        return 1

    # tkinter is only needed for the window
    from contagion_gui import run_gui
    run_gui(network, inoculator, args.num_nodes,
            iterations=args.iterations, seed=args.seed)
    return 0


if __name__ == "__main__":
    sys.exit(main())
