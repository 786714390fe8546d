"""One discrete tick of infection spread and node motion."""

from __future__ import annotations

from typing import Mapping

import numpy as np

from ..config import CanvasSection
from ..core.node import Node
from ..core.strain import DEFAULT_MULTIPLIERS, Strain
from .network import Graph


def infection_chance(
    strain: Strain,
    probability: float,
    multipliers: Mapping[Strain, float] | None = None,
) -> float:
    """Per-edge chance that an infected node infects its neighbor.

    Values at or above ``1.0`` mean certain infection.
    """
    multipliers = multipliers if multipliers is not None else DEFAULT_MULTIPLIERS
    if probability <= 0:
        return 0.0
    return probability * multipliers[strain]


def step(
    graph: Graph,
    strain: Strain,
    probability: float,
    rng: np.random.Generator | None = None,
    multipliers: Mapping[Strain, float] | None = None,
    canvas: CanvasSection | None = None,
) -> tuple[Graph, int]:
    """Advance *graph* by one tick. Returns ``(new_graph, infected_count)``.

    Every node infected before the tick tries to infect each uninfected
    neighbor with one independent draw.  Attempts are judged against the
    pre-tick infected set and applied together at the end, so infection
    travels at most one hop per tick.  Every node then moves by its
    velocity, bouncing off the canvas bounds.

    *graph* is left untouched.
    """
    rng = rng or np.random.default_rng()
    canvas = canvas or CanvasSection()
    chance = infection_chance(strain, probability, multipliers)

    infected_before = graph.infected_ids()
    newly_infected: set[int] = set()

    if chance > 0 and infected_before:
        adj = graph.adjacency()
        for source in sorted(infected_before):
            for target in adj[source]:
                if target in infected_before:
                    continue
                if rng.random() < chance:
                    newly_infected.add(target)

    nodes: list[Node] = []
    for node in graph.nodes:
        moved = node.moved(
            canvas.bounce_x_min, canvas.bounce_x_max,
            canvas.bounce_y_min, canvas.bounce_y_max,
        )
        if moved.id in newly_infected:
            moved.infected = True
            moved.strain = strain
        nodes.append(moved)

    new_graph = Graph(nodes=nodes, edges=graph.edges)
    return new_graph, len(infected_before) + len(newly_infected)
