"""Simulation driver — owns the graph, the history and the run state."""

from __future__ import annotations

import logging
import threading
from enum import Enum

import numpy as np

from ..config import SimulationConfig, default_config
from ..core.node import Edge, Node
from ..core.strain import Strain
from .network import Graph, generate
from .stepper import step
from .timeseries import TimeSeries

logger = logging.getLogger(__name__)


class SimulationState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"


class Simulation:
    """Single-session outbreak simulation.

    The simulation is either :attr:`SimulationState.IDLE` or
    :attr:`SimulationState.RUNNING`.  An external timer calls :meth:`tick`
    while running; each tick replaces the graph with the result of
    :func:`~.stepper.step` and appends one sample to :attr:`time_series`.
    Reaching full infection drops back to idle.
    """

    def __init__(
        self,
        config: SimulationConfig | None = None,
        *,
        network_size: int | None = None,
        strain: Strain | str | None = None,
        probability: float | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.config = config or default_config()
        self.rng = rng or np.random.default_rng(self.config.simulation.seed)
        self.network_size = (network_size if network_size is not None
                             else self.config.network.size)
        self.strain = Strain.parse(strain if strain is not None
                                   else self.config.infection.strain)
        self.probability = (probability if probability is not None
                            else self.config.infection.probability)
        self.multipliers = self.config.infection.strain_multipliers()
        # At most one tick, reset or state change at a time
        self.lock = threading.RLock()
        self.state = SimulationState.IDLE
        self.step_count = 0
        self.graph = Graph()
        self.time_series = TimeSeries()
        self.reset()

    # ── Read-only views ──────────────────────────────────────────────

    @property
    def nodes(self) -> list[Node]:
        return self.graph.nodes

    @property
    def edges(self) -> list[Edge]:
        return self.graph.edges

    @property
    def infected_count(self) -> int:
        return self.graph.infected_count

    @property
    def is_running(self) -> bool:
        return self.state is SimulationState.RUNNING

    @property
    def is_saturated(self) -> bool:
        return self.graph.is_saturated

    # ── Lifecycle ────────────────────────────────────────────────────

    def reset(self, network_size: int | None = None) -> Graph:
        """Stop and start over with a freshly generated network."""
        with self.lock:
            if network_size is not None:
                self.network_size = network_size
            self.state = SimulationState.IDLE
            self.graph = generate(
                self.network_size, self.strain, self.rng,
                canvas=self.config.canvas, network=self.config.network,
            )
            self.step_count = 0
            self.time_series = TimeSeries([(0, self.graph.infected_count)])
            logger.info(
                "Generated network: %d nodes, %d edges, seed strain %s",
                len(self.graph), len(self.graph.edges), self.strain.value,
            )
            return self.graph

    def start(self) -> bool:
        """Enter the running state. Returns ``False`` if nothing can spread."""
        with self.lock:
            if not self.graph.nodes or self.graph.is_saturated:
                logger.info("Nothing left to infect; staying idle")
                self.state = SimulationState.IDLE
                return False
            if not self.is_running:
                logger.info("Simulation started at step %d", self.step_count)
            self.state = SimulationState.RUNNING
            return True

    def pause(self) -> None:
        with self.lock:
            if self.is_running:
                logger.info("Simulation paused at step %d", self.step_count)
            self.state = SimulationState.IDLE

    def set_strain(self, strain: Strain | str) -> None:
        """Strain used for infections from the next tick on."""
        strain = Strain.parse(strain)
        with self.lock:
            self.strain = strain

    def set_probability(self, probability: float) -> None:
        with self.lock:
            self.probability = probability

    # ── Ticking ──────────────────────────────────────────────────────

    def tick(self) -> int:
        """Advance one tick, record the sample, return the infected count.

        Holds :attr:`lock` for the whole tick, so a concurrent
        :meth:`reset` waits for the tick to publish and then replaces it.
        """
        with self.lock:
            self.graph, infected = step(
                self.graph, self.strain, self.probability, self.rng,
                multipliers=self.multipliers, canvas=self.config.canvas,
            )
            self.step_count += 1
            self.time_series.append(self.step_count, infected)
            logger.debug("Step %d: %d/%d infected",
                         self.step_count, infected, len(self.graph))

            if self.is_running and self.graph.is_saturated:
                logger.info("All %d nodes infected after %d steps",
                            len(self.graph), self.step_count)
                self.state = SimulationState.IDLE
            return infected

    def run(self, max_ticks: int | None = None) -> TimeSeries:
        """Run until saturation, a pause, or *max_ticks* ticks.

        Defaults to ``config.simulation.max_ticks``.  The lock is released
        between ticks so another thread can pause or reset.  Returns the
        full history.
        """
        limit = max_ticks if max_ticks is not None else self.config.simulation.max_ticks
        self.start()
        ticks = 0
        while self.is_running and ticks < limit:
            self.tick()
            ticks += 1
        self.pause()
        return self.time_series

    def reachable_from_seed(self) -> int:
        """Number of nodes connected to the seed, the ceiling on infections."""
        with self.lock:
            return len(self.graph.hop_distances(0))
