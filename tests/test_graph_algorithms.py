"""Tests for the graph steppers: visitation order, paths, spanning trees, errors."""

import pytest

from algoreplay.errors import InvalidInputError
from algoreplay.graph import Graph
from algoreplay.inputs import GraphInput
from algoreplay.algorithms import AlgorithmKind, create_stepper, list_algorithms
from algoreplay.algorithms.graph_search import (
    AStarStepper, BFSStepper, DFSStepper, DijkstraStepper, constant_heuristic, zero_heuristic,
)
from algoreplay.algorithms.pseudocode import LISTINGS
from algoreplay.algorithms.spanning_tree import KruskalStepper, PrimStepper

GRAPH_IDS = [a.key for a in list_algorithms(AlgorithmKind.GRAPH)]


def _run(key, graph, start=0, target=None):
    if key == "astar" and target is None:
        target = len(graph) - 1
    return list(create_stepper(key, GraphInput(graph, start, target)))


# --- properties shared by every graph stepper ---

class TestAllGraphSteppers:
    @pytest.mark.parametrize("key", GRAPH_IDS)
    def test_only_last_snapshot_is_terminal(self, key, weighted_graph):
        snaps = _run(key, weighted_graph)
        assert snaps[-1].terminal
        assert not any(s.terminal for s in snaps[:-1])

    @pytest.mark.parametrize("key", GRAPH_IDS)
    def test_visited_never_shrinks(self, key, tree_graph):
        snaps = _run(key, tree_graph)
        for prev, cur in zip(snaps, snaps[1:]):
            assert len(cur.visited) >= len(prev.visited)
            assert cur.visited[:len(prev.visited)] == prev.visited

    @pytest.mark.parametrize("key", GRAPH_IDS)
    def test_visited_has_no_duplicates(self, key, weighted_graph):
        for snap in _run(key, weighted_graph):
            assert len(set(snap.visited)) == len(snap.visited)

    @pytest.mark.parametrize("key", GRAPH_IDS)
    def test_active_has_at_most_two_vertices(self, key, weighted_graph):
        for snap in _run(key, weighted_graph):
            assert len(snap.active) <= 2

    @pytest.mark.parametrize("key", GRAPH_IDS)
    def test_pseudocode_lines_point_into_listing(self, key, weighted_graph):
        listing = LISTINGS[key]
        for snap in _run(key, weighted_graph):
            assert snap.pseudocode_line == -1 or 0 <= snap.pseudocode_line < len(listing)

    @pytest.mark.parametrize("key", [k for k in GRAPH_IDS if k != "kruskal"])
    def test_single_vertex_graph(self, key):
        snaps = _run(key, Graph(1))
        assert snaps[-1].terminal
        assert snaps[-1].visited == (0,)

    def test_single_vertex_kruskal_touches_nothing(self):
        snaps = _run("kruskal", Graph(1))
        assert len(snaps) == 1
        assert snaps[0].visited == ()

    @pytest.mark.parametrize("key", GRAPH_IDS)
    def test_stop_mid_run(self, key, tree_graph):
        s = create_stepper(key, GraphInput(tree_graph, 0, 4))
        s.next()
        s.next()
        s.stop()
        result = s.next()
        assert result.finished
        assert result.snapshot.terminal


# --- BFS ---

class TestBFS:
    def test_path_graph_to_last_vertex(self, path_graph):
        snaps = list(BFSStepper(path_graph, 0, 3))
        assert snaps[-1].frontier == (0, 1, 2, 3)
        assert snaps[-1].active == (3,)

    def test_first_snapshot_is_the_start(self, path_graph):
        first = BFSStepper(path_graph, 0, 3).next().snapshot
        assert first.visited == (0,)
        assert first.active == (0,)
        assert first.pseudocode_line == 3

    def test_visits_in_discovery_order(self, tree_graph):
        snaps = list(BFSStepper(tree_graph))
        assert snaps[-1].visited == (0, 1, 2, 3, 4)
        # one frame per dequeue, plus the terminal one
        assert len(snaps) == 6

    def test_full_traversal_frontier_is_expansion_order(self, tree_graph):
        snaps = list(BFSStepper(tree_graph))
        assert snaps[-1].frontier == (0, 1, 2, 3, 4)
        assert snaps[-1].active == ()

    def test_start_equals_target(self, path_graph):
        snaps = list(BFSStepper(path_graph, 2, 2))
        assert snaps[-1].frontier == (2,)

    def test_unreachable_target_gives_empty_path(self):
        g = Graph(3, [(0, 1, 1)])
        snaps = list(BFSStepper(g, 0, 2))
        assert snaps[-1].frontier == ()
        assert snaps[-1].active == ()
        assert snaps[-1].visited == (0, 1)

    def test_stops_once_target_dequeued(self, path_graph):
        snaps = list(BFSStepper(path_graph, 0, 1))
        # start, target, terminal
        assert len(snaps) == 3
        assert snaps[-1].frontier == (0, 1)


# --- DFS ---

class TestDFS:
    def test_visits_depth_first_in_adjacency_order(self, tree_graph):
        snaps = list(DFSStepper(tree_graph))
        assert snaps[-1].visited == (0, 1, 3, 2, 4)

    def test_one_frame_per_visit(self, tree_graph):
        snaps = list(DFSStepper(tree_graph))
        assert len(snaps) == 6
        assert [s.active for s in snaps[:-1]] == [(0,), (1,), (3,), (2,), (4,)]

    def test_path_follows_parent_pointers(self, tree_graph):
        snaps = list(DFSStepper(tree_graph, 0, 4))
        assert snaps[-1].frontier == (0, 2, 4)

    def test_stale_stack_entries_are_skipped(self):
        # triangle: 2 is pushed twice (by 0 and by 1) but visited once
        g = Graph(3, [(0, 1, 1), (0, 2, 1), (1, 2, 1)])
        snaps = list(DFSStepper(g))
        assert snaps[-1].visited == (0, 1, 2)
        assert len(snaps) == 4


# --- Dijkstra & A* ---

class TestDijkstra:
    def test_finds_cheapest_path(self, weighted_graph):
        snaps = list(DijkstraStepper(weighted_graph, 0, 3))
        assert snaps[-1].frontier == (0, 2, 1, 3)
        assert snaps[-1].active == (3,)

    def test_relaxation_frames_show_the_edge(self, weighted_graph):
        s = DijkstraStepper(weighted_graph, 0, 3)
        settle = s.next().snapshot
        relax = s.next().snapshot
        assert settle.active == (0,)
        assert settle.pseudocode_line == 5
        assert relax.active == (0, 1)
        assert relax.pseudocode_line == 8

    def test_settle_order(self, weighted_graph):
        snaps = list(DijkstraStepper(weighted_graph, 0, 3))
        settled = [s.active[0] for s in snaps if s.pseudocode_line == 5]
        assert settled == [0, 2, 1, 3]

    def test_distances(self, weighted_graph):
        s = DijkstraStepper(weighted_graph)
        list(s)
        assert s.distances == {0: 0, 1: 3, 2: 1, 3: 4}

    def test_equal_priorities_break_by_insertion_order(self):
        g = Graph(3, [(0, 2, 1), (0, 1, 1)])
        snaps = list(DijkstraStepper(g))
        assert snaps[-1].visited == (0, 2, 1)


class TestAStar:
    def test_requires_target(self, weighted_graph):
        with pytest.raises(InvalidInputError):
            AStarStepper(weighted_graph, 0)

    def test_constant_heuristic_is_one(self):
        assert constant_heuristic(3, 7) == 1.0

    def test_constant_heuristic_path(self, weighted_graph):
        snaps = list(AStarStepper(weighted_graph, 0, 3))
        assert snaps[-1].frontier == (0, 2, 1, 3)

    def test_zero_heuristic_matches_dijkstra(self, weighted_graph):
        astar = list(AStarStepper(weighted_graph, 0, 3, heuristic=zero_heuristic))
        dijkstra = list(DijkstraStepper(weighted_graph, 0, 3))
        assert [s.visited for s in astar] == [s.visited for s in dijkstra]
        assert astar[-1].frontier == dijkstra[-1].frontier

    def test_custom_heuristic_is_called_with_target(self, weighted_graph):
        seen = []

        def h(vertex, target):
            seen.append(target)
            return 0.0

        list(AStarStepper(weighted_graph, 0, 3, heuristic=h))
        assert seen and set(seen) == {3}


# --- Spanning trees ---

class TestPrim:
    def test_tree_edges_in_join_order(self, weighted_graph):
        s = PrimStepper(weighted_graph)
        snaps = list(s)
        assert snaps[-1].frontier == (0, 2, 2, 1, 1, 3)
        assert s.tree_edges == [(0, 2), (2, 1), (1, 3)]

    def test_one_frame_per_joined_vertex(self, weighted_graph):
        snaps = list(PrimStepper(weighted_graph))
        assert len(snaps) == 5
        assert snaps[0].active == (0,)
        assert snaps[1].active == (0, 2)

    def test_ignores_target(self, weighted_graph):
        s = PrimStepper(weighted_graph, 0, 3)
        assert s.target is None

    def test_disconnected_graph_spans_start_component(self):
        g = Graph(4, [(0, 1, 1), (2, 3, 1)])
        snaps = list(PrimStepper(g))
        assert snaps[-1].visited == (0, 1)
        assert snaps[-1].frontier == (0, 1)


class TestKruskal:
    def test_accepts_cheapest_edges(self, weighted_graph):
        s = KruskalStepper(weighted_graph)
        snaps = list(s)
        assert snaps[-1].frontier == (0, 2, 1, 3, 2, 1)
        assert s.total_weight == 4

    def test_frame_per_accepted_edge(self, weighted_graph):
        snaps = list(KruskalStepper(weighted_graph))
        assert [s.active for s in snaps[:-1]] == [(0, 2), (1, 3), (2, 1)]
        assert snaps[-1].visited == (0, 2, 1, 3)

    def test_rejects_cycle_edges(self):
        g = Graph(3, [(0, 1, 1), (1, 2, 1), (0, 2, 1)])
        snaps = list(KruskalStepper(g))
        assert len(snaps) == 3
        assert snaps[-1].frontier == (0, 1, 1, 2)

    def test_disconnected_graph_gives_forest(self):
        g = Graph(4, [(0, 1, 2), (2, 3, 1)])
        s = KruskalStepper(g)
        snaps = list(s)
        assert snaps[-1].frontier == (2, 3, 0, 1)
        assert s.total_weight == 3

    def test_same_weight_as_prim(self):
        g = Graph.generate_random(8, 16, seed=7)
        k = KruskalStepper(g)
        list(k)
        prim_frontier = list(PrimStepper(g))[-1].frontier
        prim_weight = sum(
            g.weight_between(prim_frontier[i], prim_frontier[i + 1])
            for i in range(0, len(prim_frontier), 2)
        )
        # both only span everything when the random graph is connected
        if len(prim_frontier) == 2 * (len(g) - 1):
            assert k.total_weight == prim_weight


# --- construction errors ---

class TestGraphStepperErrors:
    @pytest.mark.parametrize("key", GRAPH_IDS)
    def test_start_out_of_range(self, key, path_graph):
        with pytest.raises(InvalidInputError):
            create_stepper(key, GraphInput(path_graph, 9, 3))

    @pytest.mark.parametrize("key", ["bfs", "dfs", "dijkstra", "astar"])
    def test_target_out_of_range(self, key, path_graph):
        with pytest.raises(InvalidInputError):
            create_stepper(key, GraphInput(path_graph, 0, 4))

    def test_non_graph_rejected(self):
        with pytest.raises(InvalidInputError):
            BFSStepper([[0, 1]])
