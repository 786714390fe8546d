"""Tests for the per-tick infection and motion update."""

from __future__ import annotations

import numpy as np
import pytest

from malware_sim.core.node import Node
from malware_sim.core.strain import Strain
from malware_sim.simulation.network import Graph, generate
from malware_sim.simulation.stepper import infection_chance, step


def _path(n: int, strain: Strain = Strain.WORM) -> Graph:
    return Graph.from_edges(
        [(100.0 + 40 * i, 200.0) for i in range(n)],
        [(i, i + 1) for i in range(n - 1)],
        strain=strain,
    )


class TestInfectionChance:
    def test_strain_multipliers(self):
        assert infection_chance(Strain.WORM, 0.4) == pytest.approx(0.6)
        assert infection_chance(Strain.VIRUS, 0.5) == pytest.approx(0.4)
        assert infection_chance(Strain.TROJAN, 0.2) == pytest.approx(0.1)

    def test_worms_fastest_trojans_slowest(self):
        p = 0.3
        assert (infection_chance(Strain.WORM, p)
                > infection_chance(Strain.VIRUS, p)
                > infection_chance(Strain.TROJAN, p))

    @pytest.mark.parametrize("p", [0.0, -0.5])
    def test_non_positive_probability(self, p):
        assert infection_chance(Strain.WORM, p) == 0.0

    def test_custom_multipliers(self):
        mult = {Strain.WORM: 2.0, Strain.VIRUS: 1.0, Strain.TROJAN: 0.1}
        assert infection_chance(Strain.WORM, 0.3, mult) == pytest.approx(0.6)


class TestInfection:
    def test_two_nodes_certain_worm(self):
        """p=1 with a worm (1.5x) always infects the neighbor."""
        g = _path(2)
        new, count = step(g, Strain.WORM, 1.0, rng=np.random.default_rng(0))
        assert count == 2
        assert new.nodes[1].infected
        assert new.nodes[1].strain is Strain.WORM

    def test_input_graph_untouched(self):
        g = _path(2)
        before = [Node(n.id, n.x, n.y, n.vx, n.vy, n.infected, n.strain) for n in g.nodes]
        step(g, Strain.WORM, 1.0, rng=np.random.default_rng(0))
        assert g.nodes == before

    def test_one_hop_per_tick(self):
        """Nodes infected during a tick do not spread in the same tick."""
        g = _path(5)
        rng = np.random.default_rng(0)
        for expected in range(2, 6):
            g, count = step(g, Strain.WORM, 1.0, rng=rng)
            assert count == expected
            assert g.infected_ids() == set(range(expected))

    def test_new_infections_take_current_strain(self):
        g = _path(3, strain=Strain.VIRUS)
        g, _ = step(g, Strain.WORM, 1.0, rng=np.random.default_rng(0))
        assert g.nodes[0].strain is Strain.VIRUS
        assert g.nodes[1].strain is Strain.WORM

    def test_zero_probability_never_spreads(self):
        g = generate(20, Strain.WORM, rng=np.random.default_rng(5))
        rng = np.random.default_rng(5)
        for _ in range(100):
            g, count = step(g, Strain.WORM, 0.0, rng=rng)
            assert count == 1

    def test_zero_multiplier_never_spreads(self):
        mult = {Strain.WORM: 0.0, Strain.VIRUS: 0.8, Strain.TROJAN: 0.5}
        g = _path(3)
        for _ in range(20):
            g, count = step(g, Strain.WORM, 1.0, rng=np.random.default_rng(0),
                            multipliers=mult)
        assert count == 1

    @pytest.mark.parametrize("strain", list(Strain))
    def test_count_monotone_and_bounded(self, strain):
        g = generate(30, strain, rng=np.random.default_rng(9))
        rng = np.random.default_rng(9)
        prev = g.infected_count
        for _ in range(60):
            g, count = step(g, strain, 0.3, rng=rng)
            assert prev <= count <= 30
            assert count == g.infected_count
            prev = count

    def test_infected_nodes_stay_infected(self):
        g = generate(25, Strain.VIRUS, rng=np.random.default_rng(4))
        rng = np.random.default_rng(4)
        infected = g.infected_ids()
        for _ in range(30):
            g, _ = step(g, Strain.VIRUS, 0.5, rng=rng)
            assert infected <= g.infected_ids()
            infected = g.infected_ids()

    def test_saturates_within_eccentricity(self):
        """With certain infection every node reachable from the seed is
        infected after as many ticks as its hop distance."""
        for seed in range(10):
            g = generate(30, Strain.WORM, rng=np.random.default_rng(seed))
            dist = g.hop_distances(0)
            rng = np.random.default_rng(seed)
            for _ in range(max(dist.values())):
                g, count = step(g, Strain.WORM, 1.0, rng=rng)
            assert g.infected_ids() == set(dist)
            if len(dist) == 30:
                assert g.is_saturated

    def test_saturated_graph_is_absorbing(self):
        g = generate(15, Strain.WORM, rng=np.random.default_rng(1))
        rng = np.random.default_rng(1)
        for _ in range(200):
            g, count = step(g, Strain.WORM, 1.0, rng=rng)
        reachable = len(g.hop_distances(0))
        assert count == reachable
        for _ in range(10):
            g, again = step(g, Strain.WORM, 1.0, rng=rng)
            assert again == count

    def test_empty_graph(self):
        g, count = step(Graph(), Strain.VIRUS, 0.5, rng=np.random.default_rng(0))
        assert count == 0
        assert g.nodes == []


class _ScriptedRng:
    """Returns queued ``random()`` values and counts the draws."""

    def __init__(self, values):
        self.values = list(values)
        self.draws = 0

    def random(self):
        self.draws += 1
        return self.values.pop(0)


class TestIndependentAttempts:
    EVEN = {Strain.WORM: 1.0, Strain.VIRUS: 1.0, Strain.TROJAN: 1.0}

    def _star(self) -> Graph:
        # Two infected leaves around one healthy centre
        return Graph.from_edges(
            [(100.0, 100.0), (150.0, 100.0), (200.0, 100.0)],
            [(0, 1), (2, 1)],
            infected=[0, 2],
        )

    def test_second_neighbor_gets_own_draw(self):
        rng = _ScriptedRng([0.9, 0.1])
        new, count = step(self._star(), Strain.VIRUS, 0.5, rng, multipliers=self.EVEN)
        assert new.nodes[1].infected
        assert count == 3
        assert rng.draws == 2

    def test_both_draws_fail(self):
        rng = _ScriptedRng([0.9, 0.6])
        new, count = step(self._star(), Strain.VIRUS, 0.5, rng, multipliers=self.EVEN)
        assert not new.nodes[1].infected
        assert count == 2
        assert rng.draws == 2

    def test_combined_rate(self):
        # P(infected) = 1 - (1 - c)^2 = 0.75 for c = 0.5
        graph = self._star()
        rng = np.random.default_rng(7)
        trials = 4000
        hits = sum(
            step(graph, Strain.VIRUS, 0.5, rng, multipliers=self.EVEN)[0].nodes[1].infected
            for _ in range(trials)
        )
        assert abs(hits / trials - 0.75) < 0.03


class TestMotion:
    def test_nodes_move_by_velocity(self):
        g = Graph(nodes=[Node(0, 100.0, 200.0, 0.2, -0.1, True, Strain.VIRUS)])
        g, _ = step(g, Strain.VIRUS, 0.5, rng=np.random.default_rng(0))
        n = g.nodes[0]
        assert n.x == pytest.approx(100.2)
        assert n.y == pytest.approx(199.9)
        assert (n.vx, n.vy) == (0.2, -0.1)

    def test_reflects_without_clamping(self):
        node = Node(0, 669.9, 30.1, 0.25, -0.25)
        moved = node.moved(30.0, 670.0, 30.0, 470.0)
        assert moved.x == pytest.approx(670.15)
        assert moved.y == pytest.approx(29.85)
        assert moved.vx == -0.25
        assert moved.vy == 0.25

    def test_moves_back_inside_after_bounce(self):
        g = Graph(nodes=[Node(0, 669.9, 200.0, 0.25, 0.0, True, Strain.VIRUS)])
        rng = np.random.default_rng(0)
        g, _ = step(g, Strain.VIRUS, 0.5, rng=rng)
        g, _ = step(g, Strain.VIRUS, 0.5, rng=rng)
        assert g.nodes[0].x == pytest.approx(669.9)

    def test_single_node_keeps_moving(self):
        g = generate(1, Strain.VIRUS, rng=np.random.default_rng(2))
        start = (g.nodes[0].x, g.nodes[0].y)
        rng = np.random.default_rng(2)
        for _ in range(50):
            g, count = step(g, Strain.VIRUS, 1.0, rng=rng)
            assert count == 1
        assert (g.nodes[0].x, g.nodes[0].y) != start

    def test_saturated_graph_still_moves(self):
        g = Graph.from_edges([(100, 100), (200, 200)], [(0, 1)], infected=[0, 1])
        g.nodes[0].vx = 0.1
        new, count = step(g, Strain.WORM, 1.0, rng=np.random.default_rng(0))
        assert count == 2
        assert new.nodes[0].x == pytest.approx(100.1)
