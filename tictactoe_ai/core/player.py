"""
Baseline players for tic-tac-toe.
"""
from typing import Optional
import random

from tictactoe_ai.core.board import BoardState
from tictactoe_ai.core.game import AgentCallback, Game
from tictactoe_ai.core.constants import Piece


class RandomAgent:
    """
    Agent that selects moves randomly.

    This agent serves as a baseline for comparison with the MCTS agent.
    """

    def __init__(self, name: str = "Random Agent", seed: Optional[int] = None):
        """
        Initialize the random agent.

        Args:
            name: Name of the agent
            seed: Seed for the agent's private random generator
        """
        self.name = name
        self.rng = random.Random(seed)

    def select_move(self, state: BoardState) -> Optional[int]:
        """
        Select a random legal move.

        Args:
            state: Current board state

        Returns:
            Randomly selected cell index, or None if the game is over
        """
        if state.is_terminal():
            return None
        return state.random_playout_move(self.rng)

    def get_action_callback(self) -> AgentCallback:
        return self.select_move

    def register_with_game(self, game: Game, piece: Piece) -> None:
        game.register_agent(piece, self.get_action_callback())

    def __str__(self) -> str:
        return f"{self.name} (random)"
