"""Node and edge model for the contact graph."""

from __future__ import annotations

from dataclasses import dataclass

from .strain import Strain


@dataclass
class Node:
    """A single host in the contact graph.

    Each node has a unique ID, a 2D position and velocity used for the
    drifting layout, and an infection flag.  Once infected a node stays
    infected; there is no recovery.
    """

    id: int
    x: float
    y: float
    vx: float = 0.0
    vy: float = 0.0
    infected: bool = False
    strain: Strain | None = None

    def moved(self, x_min: float, x_max: float, y_min: float, y_max: float) -> Node:
        """Return a copy advanced by one tick of velocity.

        A velocity component flips sign when the new coordinate leaves
        ``[min, max]``.  The position itself is not clamped.
        """
        x = self.x + self.vx
        y = self.y + self.vy
        vx = -self.vx if (x < x_min or x > x_max) else self.vx
        vy = -self.vy if (y < y_min or y > y_max) else self.vy
        return Node(self.id, x, y, vx, vy, self.infected, self.strain)


@dataclass(frozen=True)
class Edge:
    """Undirected connection between two distinct nodes."""

    source: int
    target: int

    @property
    def key(self) -> tuple[int, int]:
        """Orientation-independent identity of the pair."""
        return (min(self.source, self.target), max(self.source, self.target))
