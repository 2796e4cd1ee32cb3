#!/usr/bin/env python
"""
Tests for the Monte Carlo Tree Search components.

This covers search nodes, configuration, the search controller's
bookkeeping and the moves it recommends in a few known positions.
"""
import gc
import math
import random
import unittest

from tictactoe_ai.core.board import BoardState
from tictactoe_ai.core.constants import Piece
from tictactoe_ai.mcts import DEFAULT_CONFIG
from tictactoe_ai.mcts.agent import MCTSAgent, MCTSAgentFactory
from tictactoe_ai.mcts.config import MCTSConfig
from tictactoe_ai.mcts.node import SearchNode
from tictactoe_ai.mcts.search import MCTSController, mcts_search, recommend_move

CORNERS_AND_CENTER = {0, 2, 4, 6, 8}


def iter_nodes(root):
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(node.children)


class TestSearchNode(unittest.TestCase):
    """Test case for SearchNode."""

    def setUp(self):
        self.root = SearchNode(BoardState())

    def test_new_node(self):
        self.assertEqual(self.root.visit_count, 0)
        self.assertEqual(self.root.win_count, 0)
        self.assertFalse(self.root.locked)
        self.assertIsNone(self.root.parent)
        self.assertIsNone(self.root.move)
        self.assertTrue(self.root.is_leaf())
        self.assertFalse(self.root.is_terminal())
        self.assertEqual(self.root.depth, 0)

    def test_expand_creates_child_per_legal_move(self):
        children = self.root.expand()
        self.assertEqual([child.move for child in children], list(range(9)))
        self.assertFalse(self.root.is_leaf())

        for child in children:
            self.assertIs(child.parent, self.root)
            self.assertEqual(child.depth, 1)
            self.assertEqual(child.state.last_move, child.move)
            self.assertEqual(child.state.piece_at(child.move), Piece.X)
            self.assertEqual(child.state.active_mover, Piece.O)

        # Children do not share boards with the parent or each other
        self.assertEqual(self.root.state.legal_moves, list(range(9)))
        self.assertEqual(children[0].state.piece_at(1), Piece.EMPTY)

    def test_parent_reference_is_not_owning(self):
        child = self.root.expand()[0]
        self.root = None
        gc.collect()
        self.assertIsNone(child.parent)

    def test_ucb1_score(self):
        node = SearchNode(BoardState())
        node.visit_count = 4
        node.win_count = 3
        expected = 3 / 4 + 2.0 * math.sqrt(math.log(100) / 4)
        self.assertAlmostEqual(node.ucb1_score(100, 2.0), expected)
        self.assertAlmostEqual(node.ucb1_score(100, 0.0), 0.75)

    def test_ucb1_score_unvisited(self):
        with self.assertRaises(ZeroDivisionError):
            self.root.ucb1_score(10, 2.0)

    def test_select_child_prefers_unvisited(self):
        children = self.root.expand()
        for child in children:
            child.visit_count = 10
            child.win_count = 9
        children[5].visit_count = 0
        children[7].visit_count = 0
        self.assertIs(self.root.select_child(90, 2.0), children[5])

    def test_select_child_by_ucb1(self):
        children = self.root.expand()
        for child in children:
            child.visit_count = 10
            child.win_count = 2
        children[3].win_count = 8
        self.assertIs(self.root.select_child(90, 2.0), children[3])

    def test_select_child_ties_go_to_first(self):
        children = self.root.expand()
        for child in children:
            child.visit_count = 5
            child.win_count = 1
        self.assertIs(self.root.select_child(45, 2.0), children[0])

    def test_select_child_skips_locked(self):
        children = self.root.expand()
        for child in children:
            child.lock()
        self.assertIsNone(self.root.select_child(0, 2.0))

        children[8].locked = False
        self.assertIs(self.root.select_child(0, 2.0), children[8])

    def test_lock_makes_terminal(self):
        self.root.lock()
        self.assertTrue(self.root.locked)
        self.assertTrue(self.root.is_terminal())

    def test_record_visit(self):
        self.root.record_visit(True)
        self.root.record_visit(False)
        self.assertEqual(self.root.visit_count, 2)
        self.assertEqual(self.root.win_count, 1)
        self.assertEqual(self.root.win_rate, 0.5)

    def test_most_visited_child(self):
        children = self.root.expand()
        self.assertIsNone(self.root.most_visited_child())
        children[2].visit_count = 3
        children[6].visit_count = 3
        children[4].visit_count = 1
        self.assertIs(self.root.most_visited_child(), children[2])


class TestMCTSConfig(unittest.TestCase):
    """Test case for MCTSConfig."""

    def test_defaults(self):
        config = MCTSConfig()
        self.assertEqual(config.iterations, 5000)
        self.assertEqual(config.exploration_weight, 2.0)
        self.assertIsNone(config.time_limit)
        self.assertIsNone(config.seed)
        self.assertEqual(DEFAULT_CONFIG.iterations, 5000)

    def test_validation(self):
        for kwargs in ({"iterations": 0},
                       {"exploration_weight": -1.0},
                       {"time_limit": 0},
                       {"tree_stats_depth": 0}):
            with self.assertRaises(ValueError):
                MCTSConfig(**kwargs)

    def test_presets(self):
        self.assertLess(MCTSConfig.fast().iterations, MCTSConfig.default().iterations)
        self.assertGreater(MCTSConfig.deep().iterations, MCTSConfig.default().iterations)

    def test_dict_round_trip(self):
        config = MCTSConfig(iterations=123, exploration_weight=1.5, seed=9)
        data = config.to_dict()
        self.assertEqual(data["iterations"], 123)
        self.assertEqual(MCTSConfig.from_dict(data), config)

        config = MCTSConfig.from_dict({"iterations": 7, "unknown_key": True})
        self.assertEqual(config.iterations, 7)
        self.assertIn("iterations=7", str(config))


class TestMCTSController(unittest.TestCase):
    """Test case for the search controller."""

    def search(self, state, iterations, seed=0, **kwargs):
        controller = MCTSController(state, MCTSConfig(iterations=iterations, seed=seed, **kwargs))
        move = controller.run()
        return controller, move

    def test_root_children_visits_sum_to_iterations(self):
        for iterations in (1, 9, 10, 200):
            controller, _ = self.search(BoardState(), iterations)
            self.assertEqual(controller.iterations, iterations)
            self.assertFalse(controller.root.locked)
            self.assertEqual(sum(child.visit_count for child in controller.root.children), iterations)
            self.assertEqual(controller.root.visit_count, iterations)

    def test_tree_counters_are_consistent(self):
        controller, _ = self.search(BoardState(), 300)
        nodes = list(iter_nodes(controller.root))

        # Every node visit on the way to the root also counted once globally
        self.assertEqual(controller.total_visits, sum(node.visit_count for node in nodes))
        for node in nodes:
            self.assertLessEqual(node.win_count, node.visit_count)
            if node.children:
                self.assertGreaterEqual(node.visit_count,
                                        sum(child.visit_count for child in node.children))

        self.assertEqual(controller.count_nodes(), len(nodes))

    def test_wins_counted_for_root_mover(self):
        # O to move, but score the search for X: X wins every playout from
        # a board where X already won
        state = BoardState.from_string("XXX OO- ---")
        controller = MCTSController(state, MCTSConfig(iterations=5), root_mover=Piece.X)
        self.assertIsNone(controller.run())

        state = BoardState.from_string("XX- OO- ---", active_mover=Piece.X)
        controller = MCTSController(state, MCTSConfig(iterations=50, seed=1), root_mover=Piece.O)
        controller.run()
        child = next(c for c in controller.root.children if c.move == 2)
        self.assertEqual(child.win_count, 0)

    def test_deterministic_with_seed(self):
        state = BoardState.from_string("X-- -O- ---")
        first, move_1 = self.search(state, 400, seed=7)
        second, move_2 = self.search(state, 400, seed=7)
        self.assertEqual(move_1, move_2)
        self.assertEqual(first.search_statistics()["move_visits"],
                         second.search_statistics()["move_visits"])

        self.assertEqual(
            recommend_move(state, budget=300, rng=random.Random(3)),
            recommend_move(state, budget=300, rng=random.Random(3))
        )

    def test_full_board_has_no_move(self):
        state = BoardState.from_string("XOX XOO OXX")
        self.assertIsNone(recommend_move(state, budget=100))

        controller, move = self.search(state, 100)
        self.assertIsNone(move)
        self.assertTrue(controller.root.locked)
        self.assertEqual(controller.iterations, 0)

    def test_won_board_has_no_move(self):
        state = BoardState.from_string("XXX OO- ---")
        self.assertIsNone(recommend_move(state, budget=100))

    def test_drawn_dead_end_is_locked(self):
        # X's only move fills the board without a line
        state = BoardState.from_string("XOX XOO OX-")
        controller, move = self.search(state, 100)

        self.assertEqual(move, 8)
        self.assertEqual(controller.iterations, 1)
        self.assertEqual(controller.restarts, 2)
        self.assertTrue(controller.root.locked)
        self.assertTrue(controller.root.children[0].locked)
        self.assertTrue(controller.search_statistics()["root_locked"])

    def test_takes_immediate_win(self):
        state = BoardState.from_string("XX- --- ---", active_mover=Piece.X)
        for budget, seed in ((50, 0), (50, 1), (500, 2)):
            move = recommend_move(state, budget=budget, rng=random.Random(seed))
            self.assertEqual(move, 2)

        state.apply_move(2)
        self.assertEqual(state.winner, Piece.X)

    def test_opening_move_is_corner_or_center(self):
        controller, move = self.search(BoardState(), 5000, seed=0)
        self.assertIn(move, CORNERS_AND_CENTER)

        visits = {child.move: child.visit_count for child in controller.root.children}
        edge_average = sum(visits[i] for i in (1, 3, 5, 7)) / 4
        self.assertLess(edge_average, visits[move])

    def test_search_does_not_modify_board(self):
        state = BoardState.from_string("X-- -O- ---")
        before = repr(state)
        recommend_move(state, budget=200)
        self.assertEqual(repr(state), before)

    def test_time_limit_stops_search(self):
        controller, move = self.search(BoardState(), 10 ** 7, time_limit=1e-6)
        self.assertTrue(controller.stopped_early)
        self.assertLess(controller.iterations, 10 ** 7)
        self.assertGreaterEqual(controller.iterations, 1)
        self.assertIn(move, range(9))

    def test_expired_time_limit_still_returns_a_move(self):
        """A limit that runs out before the first rollout still yields a legal move."""
        for board in (BoardState(), BoardState.from_string("XO- -X- --O")):
            controller, move = self.search(board, 1000, time_limit=1e-9)
            self.assertGreaterEqual(controller.iterations, 1)
            self.assertIn(move, board.legal_moves)

        agent = MCTSAgent(MCTSConfig(iterations=1000, time_limit=1e-9, seed=0))
        move = agent.select_move(BoardState())
        self.assertIn(move, range(9))
        self.assertEqual(agent.move_history[-1][0], move)

    def test_root_mover_must_be_a_player(self):
        with self.assertRaises(ValueError):
            MCTSController(BoardState(), root_mover=Piece.EMPTY)

    def test_move_statistics(self):
        controller, move = self.search(BoardState(), 100)
        statistics = controller.get_move_statistics()

        top_level = [entry for entry in statistics if entry.depth == 1]
        self.assertEqual([entry.move for entry in top_level], list(range(9)))
        self.assertTrue(all(entry.depth <= 2 for entry in statistics))
        self.assertTrue(any(entry.depth == 2 for entry in statistics))
        # Depth-first order: the first entry is the first root child
        self.assertEqual(statistics[0].move, 0)
        self.assertIsNone(statistics[0].parent_move)

        for entry in statistics:
            if entry.visit_count == 0:
                self.assertIsNone(entry.ucb1_score)
            else:
                self.assertIsNotNone(entry.ucb1_score)
            if entry.depth == 2:
                self.assertIsNotNone(entry.parent_move)
                self.assertNotEqual(entry.move, entry.parent_move)

        self.assertEqual(len(controller.get_move_statistics(max_depth=1)), 9)

    def test_principal_variation(self):
        controller, move = self.search(BoardState(), 500)
        variation = controller.get_principal_variation()
        self.assertGreater(len(variation), 0)
        self.assertEqual(variation[0][0], move)
        moves = [entry[0] for entry in variation]
        self.assertEqual(len(moves), len(set(moves)))

    def test_mcts_search_statistics(self):
        move, stats = mcts_search(BoardState(), MCTSConfig(iterations=50, seed=4))
        self.assertIn(move, range(9))
        self.assertEqual(stats["iterations"], 50)
        self.assertEqual(sum(stats["move_visits"].values()), 50)
        self.assertFalse(stats["stopped_early"])
        self.assertGreater(stats["node_count"], 9)


class TestMCTSAgent(unittest.TestCase):
    """Test case for MCTSAgent."""

    def test_select_move(self):
        agent = MCTSAgentFactory.create_custom(iterations=200, seed=0)
        state = BoardState()
        move = agent.select_move(state)

        self.assertIn(move, state.legal_moves)
        self.assertEqual(agent.last_stats["iterations"], 200)
        self.assertIsNotNone(agent.last_root)
        self.assertEqual(len(agent.move_history), 1)
        self.assertEqual(len([e for e in agent.get_move_statistics() if e.depth == 1]), 9)
        self.assertEqual(agent.get_principal_variation()[0][0], move)

    def test_forced_move(self):
        agent = MCTSAgent(MCTSConfig(iterations=100))
        state = BoardState.from_string("XOX XOO OX-")
        self.assertEqual(agent.select_move(state), 8)
        self.assertTrue(agent.last_stats["forced_move"])
        self.assertIsNone(agent.last_root)
        self.assertEqual(agent.get_move_statistics(), [])

    def test_no_move_on_finished_board(self):
        agent = MCTSAgent(MCTSConfig(iterations=100))
        self.assertIsNone(agent.select_move(BoardState.from_string("XXX OO- ---")))
        self.assertIsNone(agent.select_move(BoardState.from_string("XOX XOO OXX")))

    def test_reset_statistics(self):
        agent = MCTSAgent(MCTSConfig(iterations=20, seed=1))
        agent.select_move(BoardState())
        agent.reset_statistics()
        self.assertEqual(agent.last_stats, {})
        self.assertEqual(agent.move_history, [])
        self.assertIsNone(agent.last_root)

    def test_factory(self):
        self.assertEqual(MCTSAgentFactory.create_fast().config.iterations, 500)
        self.assertEqual(MCTSAgentFactory.create_standard().config.iterations, 5000)
        self.assertEqual(MCTSAgentFactory.create_strong().config.iterations, 20000)
        self.assertIn("MCTS", str(MCTSAgentFactory.create_standard()))


if __name__ == "__main__":
    unittest.main()
