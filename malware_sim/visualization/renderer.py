"""Matplotlib-based 2D visualization of an outbreak."""

from __future__ import annotations

from typing import Any

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.animation import FuncAnimation

from ..core.strain import STRAIN_COLORS, Strain
from ..simulation.engine import Simulation

HEALTHY_COLOR = "#D1D5DB"
EDGE_COLOR = "#E5E7EB"


class OutbreakRenderer:
    """Renders snapshots, infection curves and animations of a simulation."""

    def __init__(self, simulation: Simulation) -> None:
        self.simulation = simulation

    def _node_arrays(self) -> tuple[np.ndarray, np.ndarray, list[str]]:
        nodes = self.simulation.nodes
        xs = np.array([n.x for n in nodes])
        ys = np.array([n.y for n in nodes])
        colors = [
            STRAIN_COLORS[n.strain] if n.infected and n.strain else HEALTHY_COLOR
            for n in nodes
        ]
        return xs, ys, colors

    def _edge_segments(self) -> list[tuple[tuple[float, float], tuple[float, float]]]:
        nodes = self.simulation.nodes
        return [
            ((nodes[e.source].x, nodes[e.source].y),
             (nodes[e.target].x, nodes[e.target].y))
            for e in self.simulation.edges
        ]

    def _setup_axes(self, ax: Any) -> None:
        canvas = self.simulation.config.canvas
        ax.set_xlim(0, canvas.width)
        ax.set_ylim(canvas.height, 0)  # screen coordinates, y grows downwards
        ax.set_aspect("equal")
        ax.set_xticks([])
        ax.set_yticks([])

    def render_network(
        self,
        *,
        title: str | None = None,
        show_edges: bool = True,
        ax: Any = None,
    ) -> Any:
        """Draw nodes colored by strain (gray when healthy)."""
        if ax is None:
            _fig, ax = plt.subplots(1, 1, figsize=(7, 5))

        if show_edges:
            for (x0, y0), (x1, y1) in self._edge_segments():
                ax.plot([x0, x1], [y0, y1], color=EDGE_COLOR,
                        linewidth=1, zorder=1)

        xs, ys, colors = self._node_arrays()
        ax.scatter(xs, ys, c=colors, s=80, edgecolors="black",
                   linewidths=0.5, zorder=2)

        # Legend
        present = {n.strain for n in self.simulation.nodes if n.infected and n.strain}
        for strain in Strain:
            if strain in present:
                ax.scatter([], [], c=STRAIN_COLORS[strain], label=strain.label, s=60)
        ax.scatter([], [], c=HEALTHY_COLOR, label="Healthy", s=60)
        ax.legend(loc="upper right", fontsize=8)

        sim = self.simulation
        ax.set_title(title or f"Step {sim.step_count} — "
                              f"{sim.infected_count}/{len(sim.nodes)} infected")
        self._setup_axes(ax)
        return ax

    def render_infection_curve(self, *, title: str = "Infection Spread Over Time",
                               ax: Any = None) -> Any:
        """Plot infected nodes against step."""
        if ax is None:
            _fig, ax = plt.subplots(1, 1, figsize=(8, 4))

        ts = self.simulation.time_series
        ax.plot(ts.steps, ts.counts, marker="o", markersize=4, linewidth=2,
                color=STRAIN_COLORS[self.simulation.strain], label="Infected")
        ax.set_xlabel("Step")
        ax.set_ylabel("Infected nodes")
        ax.set_ylim(0, max(len(self.simulation.nodes), 1) + 1)
        ax.grid(True, linestyle="--", alpha=0.5)
        ax.legend()
        ax.set_title(title)
        return ax

    def animate(self, num_ticks: int, *, interval_ms: int | None = None) -> FuncAnimation:
        """Animate the outbreak, ticking the simulation once per frame."""
        if interval_ms is None:
            interval_ms = self.simulation.config.simulation.tick_interval_ms

        fig, ax = plt.subplots(1, 1, figsize=(7, 5))
        self.simulation.start()

        def update(frame: int) -> Any:
            if self.simulation.is_running:
                self.simulation.tick()
            ax.clear()
            self.render_network(ax=ax)
            return ()

        self.render_network(ax=ax)
        anim = FuncAnimation(fig, update, frames=num_ticks,
                             interval=interval_ms, blit=False)
        return anim
