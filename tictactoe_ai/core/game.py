"""
Game flow management for tic-tac-toe.

This module defines the turn-taking layer on top of BoardState:
- GameResult: Outcome of a game
- Game: Manager for turns, registered agents and move history

The rules themselves live in tictactoe_ai.core.board; this module never
retries or corrects moves, it only routes them.
"""
from __future__ import annotations
from enum import Enum, auto
from typing import Callable, Dict, List, Optional, Tuple

from tictactoe_ai.core.board import BoardState
from tictactoe_ai.core.constants import Piece, BOARD_ROWS, BOARD_COLS, WIN_LENGTH


# An agent looks at the board and returns a cell index (None if it has no move)
AgentCallback = Callable[[BoardState], Optional[int]]


class GameResult(Enum):
    """Enum representing possible game results."""
    IN_PROGRESS = auto()
    WINNER = auto()  # Game has a winner
    DRAW = auto()  # Board filled without a winner


class Game:
    """
    Manager for game flow.

    This class handles turn management and provides interfaces for
    different types of players (human, AI).
    """

    def __init__(
        self,
        rows: int = BOARD_ROWS,
        cols: int = BOARD_COLS,
        win_length: int = WIN_LENGTH
    ):
        """
        Initialize a new game.

        Args:
            rows: Number of rows in the grid
            cols: Number of columns in the grid
            win_length: Number of identical pieces in a line needed to win
        """
        self.rows = rows
        self.cols = cols
        self.win_length = win_length

        self.state = BoardState(rows, cols, win_length)
        self.history: List[Tuple[Piece, int]] = []
        self.agent_callbacks: Dict[Piece, AgentCallback] = {}

    def reset(self) -> BoardState:
        """
        Reset the game to an empty board. Registered agents are kept.

        Returns:
            New board state
        """
        self.state = BoardState(self.rows, self.cols, self.win_length)
        self.history = []
        return self.state

    def register_agent(self, piece: Piece, agent_callback: AgentCallback) -> None:
        """
        Register an agent to play one side.

        Args:
            piece: Side the agent plays (X or O)
            agent_callback: Function that selects a move given the board
        """
        if piece == Piece.EMPTY:
            raise ValueError("Agents can only be registered for X or O")
        self.agent_callbacks[piece] = agent_callback

    def step(self, move: Optional[int] = None) -> Tuple[BoardState, bool]:
        """
        Advance the game by one move.

        If a move is provided it is applied. Otherwise the agent registered
        for the player to move is asked for one.

        Args:
            move: Optional cell index to play

        Returns:
            Tuple of (board state, whether the game is over)

        Raises:
            InvalidMoveError: If the move is not legal on the current board
        """
        if self.state.is_terminal():
            return self.state, True

        mover = self.state.active_mover

        if move is None and mover in self.agent_callbacks:
            move = self.agent_callbacks[mover](self.state)

        if move is None:
            raise ValueError(f"No move provided and no move available from agent for {mover.symbol}")

        self.state.apply_move(move)
        self.history.append((mover, move))

        return self.state, self.state.is_terminal()

    def run_game(self) -> BoardState:
        """
        Run the game to completion. Both sides need a registered agent.

        Returns:
            Final board state
        """
        for piece in (Piece.X, Piece.O):
            if piece not in self.agent_callbacks:
                raise ValueError(f"No agent callback registered for {piece.symbol}")

        while not self.state.is_terminal():
            self.step()

        return self.state

    def get_winner(self) -> Optional[Piece]:
        """
        Get the winning piece, if any.

        Returns:
            Winning piece, or None if the game is not won (yet)
        """
        if self.state.winner == Piece.EMPTY:
            return None
        return self.state.winner

    def get_result(self) -> GameResult:
        """Get the current result of the game."""
        if self.state.winner != Piece.EMPTY:
            return GameResult.WINNER
        if self.state.is_terminal():
            return GameResult.DRAW
        return GameResult.IN_PROGRESS

    def __str__(self) -> str:
        result = self.get_result()
        if result == GameResult.WINNER:
            status = f"{self.state.winner.symbol} won"
        elif result == GameResult.DRAW:
            status = "draw"
        else:
            status = f"{self.state.active_mover.symbol} to move"
        return f"Game after {len(self.history)} moves ({status})\n{self.state}"
