"""
Monte Carlo Tree Search (MCTS) algorithm for tic-tac-toe.

This module implements the core MCTS algorithm with the four standard phases:
1. Selection: Descend the tree by UCB1, visiting untried children first
2. Expansion: Create one child for every legal move of a leaf
3. Simulation: Play random moves from a new child to the end of the game
4. Backpropagation: Update statistics from that child up to the root

Subtrees that can no longer produce a rollout (drawn dead ends, nodes whose
children are all locked) are locked and skipped by later selections.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple
import logging
import random
import time

from tictactoe_ai.core.board import BoardState
from tictactoe_ai.core.constants import (
    Piece, DEFAULT_MCTS_ITERATIONS, DEFAULT_EXPLORATION_CONSTANT
)
from tictactoe_ai.mcts.config import MCTSConfig
from tictactoe_ai.mcts.node import SearchNode

logger = logging.getLogger(__name__)


@dataclass
class MoveStatistics:
    """Search statistics for one node of the tree."""
    move: int
    depth: int
    visit_count: int
    win_count: int
    ucb1_score: Optional[float]  # None for unvisited nodes
    parent_move: Optional[int] = None  # None for children of the root


class MCTSController:
    """
    Runs one search from a board position and picks a move.

    A controller owns its whole tree and the search-wide visit counter, so
    separate searches never share state. Build a new controller for every
    decision.
    """

    def __init__(
        self,
        state: BoardState,
        config: Optional[MCTSConfig] = None,
        root_mover: Optional[Piece] = None,
        rng: Optional[random.Random] = None
    ):
        """
        Initialize a search.

        Args:
            state: Board to search from (copied, never modified)
            config: MCTS configuration parameters
            root_mover: Player whose wins are counted (defaults to the player to move)
            rng: Random source for rollouts (defaults to one seeded from config.seed)
        """
        self.config = config or MCTSConfig()
        self.root = SearchNode(state=state.clone())

        self.root_mover = state.active_mover if root_mover is None else Piece(root_mover)
        if self.root_mover == Piece.EMPTY:
            raise ValueError("root_mover must be X or O")

        self.rng = rng if rng is not None else random.Random(self.config.seed)
        self.budget = self.config.iterations
        self.exploration_constant = self.config.exploration_weight

        # Search-wide counters
        self.total_visits = 0
        self.iterations = 0
        self.restarts = 0
        self.total_simulation_steps = 0
        self.time_elapsed = 0.0
        self.stopped_early = False

    def run(self) -> Optional[int]:
        """
        Run the search until the budget is spent, the root locks or time runs out.

        Returns:
            Best move, or None if the root position has no move to offer
        """
        start_time = time.time()
        logger.debug("Starting search for %s: budget=%d, c=%.2f",
                     self.root_mover.symbol, self.budget, self.exploration_constant)

        while self.iterations < self.budget and not self.root.locked:
            # A live root always gets at least one rollout, so it has a move
            if (self.iterations > 0
                    and self.config.time_limit is not None
                    and time.time() - start_time > self.config.time_limit):
                self.stopped_early = True
                break
            self.run_iteration()

        self.time_elapsed = time.time() - start_time
        move = self.best_move()

        logger.debug("Search finished: %d iterations, %d restarts, %.3fs, move=%s",
                     self.iterations, self.restarts, self.time_elapsed, move)
        return move

    def run_iteration(self) -> bool:
        """
        Run one pass of selection, expansion, simulation and backpropagation.

        Returns:
            True if a rollout was completed, False if the pass ended by
            locking a node (the caller simply starts another pass)
        """
        node = self.select()
        if node is None:
            self.restarts += 1
            return False

        won = self.simulate(node)
        self.backpropagate(node, won)
        self.iterations += 1
        return True

    def select(self) -> Optional[SearchNode]:
        """
        Descend from the root to the node to simulate next.

        This implements the selection and expansion phases. Leaves are
        expanded on the way down; the first unvisited child reached is
        returned. A finished board that has a winner is returned as-is,
        since its outcome is already known.

        Returns:
            Node to simulate, or None if a node was locked during descent
        """
        node = self.root

        while True:
            if node.is_leaf():
                if node.is_terminal():
                    if node is not self.root and node.state.winner != Piece.EMPTY:
                        return node
                    self._lock(node)
                    return None
                node.expand()

            child = node.select_child(self.total_visits, self.exploration_constant)
            if child is None:
                self._lock(node)
                return None

            if child.visit_count == 0:
                return child

            node = child

    def simulate(self, node: SearchNode) -> bool:
        """
        Play random moves from a node's board until the game ends.

        This implements the simulation phase of MCTS.

        Args:
            node: Node to simulate from (its board is copied)

        Returns:
            True if the root mover won the playout
        """
        state = node.state.clone()
        steps = 0
        while not state.is_terminal():
            state.apply_move(state.random_playout_move(self.rng))
            steps += 1

        self.total_simulation_steps += steps
        return state.winner == self.root_mover

    def backpropagate(self, node: SearchNode, won: bool) -> None:
        """
        Update statistics from a node up to the root.

        This implements the backpropagation phase of MCTS.

        Args:
            node: Node the simulation was run from
            won: Whether the root mover won the simulation
        """
        current = node
        while current is not None:
            current.record_visit(won)
            self.total_visits += 1
            current = current.parent

    def best_move(self) -> Optional[int]:
        """
        Get the root move with the most visits.

        Returns:
            Best move, or None if no root child was ever visited
        """
        best_child = self.root.most_visited_child()
        if best_child is None:
            return None
        return best_child.move

    def get_move_statistics(self, max_depth: Optional[int] = None) -> List[MoveStatistics]:
        """
        Get statistics for the top levels of the tree, in depth-first order.

        Args:
            max_depth: Number of levels below the root to include
                (defaults to config.tree_stats_depth)

        Returns:
            One MoveStatistics per node
        """
        if max_depth is None:
            max_depth = self.config.tree_stats_depth

        result = []
        stack = [(child, 1) for child in reversed(self.root.children)]
        while stack:
            node, depth = stack.pop()
            parent = node.parent
            result.append(MoveStatistics(
                move=node.move,
                depth=depth,
                visit_count=node.visit_count,
                win_count=node.win_count,
                ucb1_score=(node.ucb1_score(self.total_visits, self.exploration_constant)
                            if node.visit_count > 0 else None),
                parent_move=parent.move if parent is not None else None,
            ))
            if depth < max_depth:
                stack.extend((child, depth + 1) for child in reversed(node.children))

        return result

    def get_principal_variation(self, max_depth: int = 10) -> List[Tuple[int, float]]:
        """
        Get the principal variation (most visited path) from the root.

        Args:
            max_depth: Maximum depth to explore

        Returns:
            List of (move, win rate) pairs
        """
        result = []
        current = self.root

        while len(result) < max_depth:
            best_child = current.most_visited_child()
            if best_child is None:
                break
            result.append((best_child.move, best_child.win_rate))
            current = best_child

        return result

    def count_nodes(self) -> int:
        """Count the nodes in the tree, root included."""
        count = 0
        stack = [self.root]
        while stack:
            node = stack.pop()
            count += 1
            stack.extend(node.children)
        return count

    def search_statistics(self) -> Dict[str, Any]:
        """
        Summarize the search.

        Returns:
            Dictionary of search statistics
        """
        stats = {
            "iterations": self.iterations,
            "restarts": self.restarts,
            "total_visits": self.total_visits,
            "total_simulation_steps": self.total_simulation_steps,
            "average_simulation_steps": self.total_simulation_steps / max(1, self.iterations),
            "time_elapsed": self.time_elapsed,
            "iterations_per_second": self.iterations / max(0.001, self.time_elapsed),
            "node_count": self.count_nodes(),
            "stopped_early": self.stopped_early,
            "root_locked": self.root.locked,
            "move_visits": {},
            "move_win_rates": {},
        }

        for child in self.root.children:
            stats["move_visits"][child.move] = child.visit_count
            if child.visit_count > 0:
                stats["move_win_rates"][child.move] = child.win_rate

        return stats

    def _lock(self, node: SearchNode) -> None:
        node.lock()
        logger.debug("Locked node for move %s after %d visits", node.move, node.visit_count)


def mcts_search(
    state: BoardState,
    config: Optional[MCTSConfig] = None,
    root_mover: Optional[Piece] = None,
    rng: Optional[random.Random] = None
) -> Tuple[Optional[int], Dict[str, Any]]:
    """
    Run Monte Carlo Tree Search to find the best move.

    Args:
        state: Current board
        config: MCTS configuration parameters
        root_mover: Player whose wins are counted (defaults to the player to move)
        rng: Random source for rollouts

    Returns:
        Tuple of (best move or None, search statistics)
    """
    controller = MCTSController(state, config, root_mover, rng)
    move = controller.run()
    return move, controller.search_statistics()


def recommend_move(
    board_state: BoardState,
    budget: int = DEFAULT_MCTS_ITERATIONS,
    exploration_constant: float = DEFAULT_EXPLORATION_CONSTANT,
    root_mover: Optional[Piece] = None,
    rng: Optional[random.Random] = None
) -> Optional[int]:
    """
    Recommend a move for a board.

    Args:
        board_state: Current board
        budget: Number of completed rollouts to run
        exploration_constant: UCB1 exploration constant
        root_mover: Player whose wins are counted (defaults to the player to move)
        rng: Random source for rollouts

    Returns:
        Recommended cell index, or None if the game is already decided
    """
    config = MCTSConfig(iterations=budget, exploration_weight=exploration_constant)
    move, _ = mcts_search(board_state, config, root_mover, rng)
    return move
