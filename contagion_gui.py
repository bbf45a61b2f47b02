"""
StopContagion window.

Draws the contact network with a force-directed layout and lets the user
step through the inoculation one isolation at a time. Connected groups
share a fill color; the most recently isolated node is drawn white.
"""

import logging
import tkinter as tk
from tkinter import ttk, messagebox

from color_groups import ColorGroups
from force_directed import ForceDirectedLayout, DEFAULT_ITERATIONS

logger = logging.getLogger(__name__)

INITIAL_WIDTH = 1080
INITIAL_HEIGHT = 800
NODE_RADIUS = 20
MIN_ZOOM = 0.5

BACKGROUND_COLOR = '#eeeeee'
NODE_BORDER_COLOR = '#000000'
NODE_TEXT_COLOR = '#000000'
LAST_ISOLATED_NODE_COLOR = '#ffffff'
LINE_COLOR = '#000000'
MESSAGE_COLOR = '#000000'


class StopContagionGUI:
    """
    Main GUI application for stepping through an inoculation.
    """

    def __init__(self, root, network, inoculator, num_nodes,
                 iterations=DEFAULT_ITERATIONS, seed=None):
        """
        Args:
            root: Tk root window
            network: ContactNetwork being inoculated
            inoculator: Inoculator bound to the same network
            num_nodes: Number of isolations the Isolate button performs
            iterations: Force-directed layout iterations
            seed: Seed for the layout and the group colors
        """
        self.root = root
        self.root.title("StopContagion")
        self.root.geometry(f"{INITIAL_WIDTH}x{INITIAL_HEIGHT}")

        self.network = network
        self.inoculator = inoculator
        self.num_nodes = num_nodes
        self.step = 0

        # View state
        self.zoom = 1.0
        self.offset_x = 0
        self.offset_y = 0
        self.last_mouse_x = 0
        self.last_mouse_y = 0
        self.message = ("Not inoculating, view only" if num_nodes == 0
                        else "Click the Isolate button to begin the inoculation process")

        self.color_groups = ColorGroups(network)
        if seed is not None:
            self.color_groups.rng.seed(seed)
        self.color_groups.compute()

        self._create_widgets()

        # Lay out once against the current graph, using the real canvas size
        self.root.update_idletasks()
        width = max(self.canvas.winfo_width(), 1)
        height = max(self.canvas.winfo_height(), 1)
        layout = ForceDirectedLayout(network, width=width, height=height,
                                     iterations=iterations, seed=seed)
        self.positions = layout.simulate()

        self.draw()

    def _create_widgets(self):
        """Create GUI layout."""
        control_frame = ttk.Frame(self.root, padding=5)
        control_frame.pack(side=tk.TOP)

        self.isolate_button = ttk.Button(
            control_frame, text="Finish" if self.num_nodes == 0 else "Isolate",
            command=self.isolate)
        self.isolate_button.pack(side=tk.LEFT, padx=5)
        ttk.Button(control_frame, text="x1 zoom",
                   command=self.reset_zoom).pack(side=tk.LEFT, padx=5)
        ttk.Button(control_frame, text="Reset view",
                   command=self.reset_view).pack(side=tk.LEFT, padx=5)

        self.canvas = tk.Canvas(self.root, bg=BACKGROUND_COLOR, highlightthickness=0)
        self.canvas.pack(fill=tk.BOTH, expand=True)

        self.canvas.bind('<ButtonPress-1>', self.on_press)
        self.canvas.bind('<B1-Motion>', self.on_drag)
        self.canvas.bind('<MouseWheel>', self.on_wheel)
        # X11 reports the wheel as buttons 4 and 5
        self.canvas.bind('<Button-4>', lambda e: self.apply_zoom(0.1))
        self.canvas.bind('<Button-5>', lambda e: self.apply_zoom(-0.1))
        self.canvas.bind('<Configure>', lambda e: self.draw())

    # ------------------------------------------------------------------
    # Buttons
    # ------------------------------------------------------------------

    def isolate(self):
        """Isolate the next node, or close the window once finished."""
        if self.step >= self.num_nodes:
            self.root.destroy()
            return

        try:
            info = self.inoculator.isolate()
        except Exception as e:
            logger.exception("Isolation failed")
            messagebox.showerror("Error", f"Isolation failed: {str(e)}")
            return

        if info is None:
            self.message = "No more nodes to isolate"
            self.step = self.num_nodes
        else:
            self.color_groups.recompute(info)
            self.message = f"Isolated node {info.node} with {info.unit} {info.influence}"
            self.step += 1

        if self.step >= self.num_nodes:
            self.isolate_button.configure(text="Finish")
        self.draw()

    def reset_zoom(self):
        self.zoom = 1.0
        self.draw()

    def reset_view(self):
        self.offset_x = 0
        self.offset_y = 0
        self.zoom = 1.0
        self.draw()

    # ------------------------------------------------------------------
    # Mouse
    # ------------------------------------------------------------------

    def on_press(self, event):
        self.last_mouse_x = event.x
        self.last_mouse_y = event.y
        self.message = ""

    def on_drag(self, event):
        # Offsets are in layout units, so dragging feels the same at any zoom
        self.offset_x += (event.x - self.last_mouse_x) / self.zoom
        self.offset_y += (event.y - self.last_mouse_y) / self.zoom
        self.last_mouse_x = event.x
        self.last_mouse_y = event.y
        self.draw()

    def on_wheel(self, event):
        self.apply_zoom(0.1 if event.delta > 0 else -0.1)

    def apply_zoom(self, delta):
        if self.zoom + delta > MIN_ZOOM or delta > 0:
            self.zoom += delta
        self.message = ""
        self.draw()

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------

    def to_canvas(self, node):
        """Canvas coordinates of a node, taking zoom and offset into account."""
        x, y = self.positions[node]
        half_width = self.canvas.winfo_width() / 2
        half_height = self.canvas.winfo_height() / 2
        return (half_width + self.zoom * (self.offset_x + x),
                half_height + self.zoom * (self.offset_y + y))

    def draw(self):
        """Draw network on canvas."""
        if not hasattr(self, 'positions'):
            return

        self.canvas.delete('all')
        coords = {node: self.to_canvas(node) for node in self.network.nodes}

        for u, v in self.network.edges:
            x1, y1 = coords[u]
            x2, y2 = coords[v]
            self.canvas.create_line(x1, y1, x2, y2, fill=LINE_COLOR)

        r = NODE_RADIUS * self.zoom
        font_size = max(6, int(10 * self.zoom))
        for node in self.network.nodes:
            x, y = coords[node]
            if node == self.network.last_isolated_node:
                color = LAST_ISOLATED_NODE_COLOR
            else:
                color = self.color_groups.color_of(node)
            self.canvas.create_oval(x - r, y - r, x + r, y + r,
                                    fill=color, outline=NODE_BORDER_COLOR)
            self.canvas.create_text(x, y, text=str(node), fill=NODE_TEXT_COLOR,
                                    font=('Arial', font_size))

        if self.message:
            self.canvas.create_text(10, 10, text=self.message, anchor='nw',
                                    fill=MESSAGE_COLOR, font=('Arial', 11))


def run_gui(network, inoculator, num_nodes, iterations=DEFAULT_ITERATIONS, seed=None):
    root = tk.Tk()
    StopContagionGUI(root, network, inoculator, num_nodes,
                     iterations=iterations, seed=seed)
    root.mainloop()
