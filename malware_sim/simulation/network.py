"""Contact graph and random graph generation.

Holds the ordered node list and undirected edge set, and builds the
initial network: nodes scattered uniformly over the canvas with a small
drift velocity, a handful of random connections per node, and a single
infected seed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

import networkx as nx
import numpy as np

from ..config import CanvasSection, NetworkSection
from ..core.node import Edge, Node
from ..core.strain import Strain


@dataclass
class Graph:
    """Ordered sequence of nodes plus a set of undirected edges.

    Node ``i`` lives at index ``i``.  Edges are not re-validated after
    generation.
    """

    nodes: list[Node] = field(default_factory=list)
    edges: list[Edge] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.nodes)

    @property
    def infected_count(self) -> int:
        return sum(1 for n in self.nodes if n.infected)

    @property
    def is_saturated(self) -> bool:
        """True once every node is infected (absorbing state)."""
        return self.infected_count == len(self.nodes)

    def infected_ids(self) -> set[int]:
        return {n.id for n in self.nodes if n.infected}

    def adjacency(self) -> dict[int, list[int]]:
        """Map each node id to its neighbor ids, in edge order."""
        adj: dict[int, list[int]] = {n.id: [] for n in self.nodes}
        for e in self.edges:
            adj[e.source].append(e.target)
            adj[e.target].append(e.source)
        return adj

    def to_networkx(self) -> nx.Graph:
        """Undirected networkx view of the contact graph."""
        g = nx.Graph()
        g.add_nodes_from(n.id for n in self.nodes)
        g.add_edges_from((e.source, e.target) for e in self.edges)
        return g

    def hop_distances(self, source: int = 0) -> dict[int, int]:
        """Hop count from *source* to every node reachable from it."""
        if not 0 <= source < len(self.nodes):
            return {}
        return dict(nx.single_source_shortest_path_length(self.to_networkx(), source))

    # ── Factory helpers ──────────────────────────────────────────────

    @classmethod
    def from_edges(
        cls,
        positions: Iterable[tuple[float, float]],
        pairs: Iterable[tuple[int, int]],
        infected: Iterable[int] = (0,),
        strain: Strain = Strain.VIRUS,
    ) -> Graph:
        """Build a motionless graph from explicit positions and edge pairs."""
        infected = set(infected)
        nodes = [
            Node(id=i, x=float(x), y=float(y),
                 infected=i in infected,
                 strain=strain if i in infected else None)
            for i, (x, y) in enumerate(positions)
        ]
        return cls(nodes=nodes, edges=[Edge(a, b) for a, b in pairs])


def generate(
    network_size: int,
    seed_strain: Strain,
    rng: np.random.Generator | None = None,
    canvas: CanvasSection | None = None,
    network: NetworkSection | None = None,
) -> Graph:
    """Create a random contact graph with *network_size* nodes.

    Node 0 is the seed, infected with *seed_strain*.  Every node makes a
    uniform ``[min_connections, max_connections]`` number of connection
    attempts to uniformly chosen other nodes; an attempt is dropped when
    the pair is already connected in either orientation.

    A non-positive size yields an empty graph.
    """
    rng = rng or np.random.default_rng()
    canvas = canvas or CanvasSection()
    network = network or NetworkSection()

    if network_size <= 0:
        return Graph()

    nodes: list[Node] = []
    for i in range(network_size):
        nodes.append(Node(
            id=i,
            x=float(rng.uniform(canvas.spawn_x_min, canvas.spawn_x_max)),
            y=float(rng.uniform(canvas.spawn_y_min, canvas.spawn_y_max)),
            vx=float(rng.uniform(-canvas.max_speed, canvas.max_speed)),
            vy=float(rng.uniform(-canvas.max_speed, canvas.max_speed)),
            infected=i == 0,
            strain=seed_strain if i == 0 else None,
        ))

    edges: list[Edge] = []
    seen: set[tuple[int, int]] = set()
    if network_size > 1:
        for i in range(network_size):
            attempts = int(rng.integers(network.min_connections, network.max_connections + 1))
            for _ in range(attempts):
                # Uniform over the other network_size - 1 ids.
                target = int(rng.integers(0, network_size - 1))
                if target >= i:
                    target += 1
                edge = Edge(i, target)
                if edge.key in seen:
                    continue
                seen.add(edge.key)
                edges.append(edge)

    return Graph(nodes=nodes, edges=edges)
