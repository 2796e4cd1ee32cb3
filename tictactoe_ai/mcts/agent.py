"""
Monte Carlo Tree Search Agent for tic-tac-toe.

This module provides the MCTSAgent class, which is a ready-to-use AI player
that uses Monte Carlo Tree Search to select moves. The agent can be
configured with different parameters and provides statistics about its
search process.
"""
from typing import Any, Dict, List, Optional, Tuple
import logging
import random
import time

from tictactoe_ai.core.board import BoardState
from tictactoe_ai.core.constants import Piece
from tictactoe_ai.core.game import AgentCallback, Game
from tictactoe_ai.mcts.config import MCTSConfig
from tictactoe_ai.mcts.node import SearchNode
from tictactoe_ai.mcts.search import MCTSController, MoveStatistics

logger = logging.getLogger(__name__)


class MCTSAgent:
    """
    Monte Carlo Tree Search agent for playing tic-tac-toe.

    A fresh tree is built for every decision; the last one is kept for
    inspection until the next search.
    """

    def __init__(
        self,
        config: Optional[MCTSConfig] = None,
        name: str = "MCTS Agent",
        verbose: bool = False
    ):
        """
        Initialize an MCTS agent.

        Args:
            config: MCTS configuration parameters
            name: Name of the agent
            verbose: Whether to print a summary after every search
        """
        self.config = config or MCTSConfig()
        self.name = name
        self.verbose = verbose

        # One generator for the agent's lifetime, so a seeded agent
        # plays a reproducible sequence of games
        self.rng = random.Random(self.config.seed)

        # Statistics from the most recent search
        self.last_stats: Dict[str, Any] = {}

        # History of all moves and their statistics
        self.move_history: List[Tuple[int, Dict[str, Any]]] = []

        # Controller (and tree) of the last search
        self.last_search: Optional[MCTSController] = None

    @property
    def last_root(self) -> Optional[SearchNode]:
        """Root node of the last search, or None."""
        if self.last_search is None:
            return None
        return self.last_search.root

    def select_move(self, state: BoardState) -> Optional[int]:
        """
        Select a move for the player to move using Monte Carlo Tree Search.

        Args:
            state: Current board

        Returns:
            Selected cell index, or None if the game is already over
        """
        legal_moves = [] if state.is_terminal() else state.legal_moves

        if not legal_moves:
            self.last_stats = {"iterations": 0, "no_move": True}
            self.last_search = None
            return None

        # If there's only one legal move, no need to search
        if len(legal_moves) == 1:
            move = legal_moves[0]
            logger.debug("%s: forced move %d", self.name, move)
            self.last_stats = {"iterations": 0, "forced_move": True}
            self.last_search = None
            self.move_history.append((move, self.last_stats))
            return move

        start_time = time.time()
        search = MCTSController(state, self.config, root_mover=state.active_mover, rng=self.rng)
        move = search.run()
        stats = search.search_statistics()
        stats["total_time"] = time.time() - start_time

        self.last_search = search
        self.last_stats = stats
        self.move_history.append((move, stats))

        if self.verbose:
            self._print_search_info(move, stats)

        return move

    def _print_search_info(self, move: Optional[int], stats: Dict[str, Any]) -> None:
        """
        Print information about the search.

        Args:
            move: Selected move
            stats: Search statistics
        """
        print(f"\n{self.name} selected: {move}")
        print(f"Iterations: {stats['iterations']} ({stats['restarts']} restarts)")
        print(f"Time: {stats['time_elapsed']:.3f}s ({stats['iterations_per_second']:.1f} it/s)")
        print(f"Nodes: {stats['node_count']}")

        # Print top moves by visit count
        print("\nTop moves:")
        moves_by_visits = sorted(stats["move_visits"].items(), key=lambda x: x[1], reverse=True)
        for i, (candidate, visits) in enumerate(moves_by_visits[:5]):
            win_rate = stats["move_win_rates"].get(candidate, 0.0)
            print(f"{i+1}. cell {candidate} - {visits} visits, {win_rate:.3f} win rate")

    def get_action_callback(self) -> AgentCallback:
        """
        Get a callback function for selecting moves.

        This is useful for registering the agent with a Game object.
        """
        return self.select_move

    def register_with_game(self, game: Game, piece: Piece) -> None:
        """
        Register this agent with a game.

        Args:
            game: Game object
            piece: Side to play
        """
        game.register_agent(piece, self.get_action_callback())

    def get_last_statistics(self) -> Dict[str, Any]:
        return self.last_stats

    def get_move_statistics(self, max_depth: Optional[int] = None) -> List[MoveStatistics]:
        """
        Get per-node statistics for the top levels of the last search tree.

        Returns:
            List of MoveStatistics (empty if the last decision needed no search)
        """
        if self.last_search is None:
            return []
        return self.last_search.get_move_statistics(max_depth)

    def get_principal_variation(self) -> List[Tuple[int, float]]:
        """
        Get the principal variation (most visited path) from the last search.

        Returns:
            List of (move, win rate) pairs
        """
        if self.last_search is None:
            return []
        return self.last_search.get_principal_variation()

    def reset_statistics(self) -> None:
        """Reset all statistics."""
        self.last_stats = {}
        self.move_history = []
        self.last_search = None

    def __str__(self) -> str:
        return f"{self.name} (MCTS, {self.config.iterations} iterations)"


class MCTSAgentFactory:
    """
    Factory for creating MCTS agents with different configurations.
    """

    @staticmethod
    def create_fast() -> MCTSAgent:
        return MCTSAgent(config=MCTSConfig.fast(), name="Fast MCTS")

    @staticmethod
    def create_standard() -> MCTSAgent:
        return MCTSAgent(config=MCTSConfig.default(), name="Standard MCTS")

    @staticmethod
    def create_strong() -> MCTSAgent:
        return MCTSAgent(config=MCTSConfig.deep(), name="Strong MCTS")

    @staticmethod
    def create_custom(
        iterations: int = 5000,
        exploration_weight: float = 2.0,
        time_limit: Optional[float] = None,
        seed: Optional[int] = None,
        name: str = "Custom MCTS"
    ) -> MCTSAgent:
        """
        Create a custom MCTS agent.

        Args:
            iterations: Number of MCTS iterations
            exploration_weight: UCB1 exploration constant
            time_limit: Optional time limit in seconds
            seed: Seed for the agent's rollouts
            name: Name of the agent

        Returns:
            MCTSAgent
        """
        config = MCTSConfig(
            iterations=iterations,
            exploration_weight=exploration_weight,
            time_limit=time_limit,
            seed=seed
        )
        return MCTSAgent(config=config, name=name)
