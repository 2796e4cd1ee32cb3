"""
Tic-Tac-Toe AI Core Package

This package contains the core game logic, including:
- Board state representation and win detection
- Game flow and results
- Baseline players
- Constants and enums
- Rule errors

All core components can be imported directly from this package.
"""

# Board
from tictactoe_ai.core.board import BoardState

# Game
from tictactoe_ai.core.game import Game, GameResult, AgentCallback

# Players
from tictactoe_ai.core.player import RandomAgent

# Errors
from tictactoe_ai.core.errors import GameError, InvalidMoveError, InvalidMove

# Constants
from tictactoe_ai.core.constants import (
    Piece,
    BOARD_ROWS, BOARD_COLS, WIN_LENGTH,
    DEFAULT_MCTS_ITERATIONS, DEFAULT_EXPLORATION_CONSTANT
)

__all__ = [
    # Board
    'BoardState',

    # Game
    'Game', 'GameResult', 'AgentCallback',

    # Players
    'RandomAgent',

    # Errors
    'GameError', 'InvalidMoveError', 'InvalidMove',

    # Constants
    'Piece',
    'BOARD_ROWS', 'BOARD_COLS', 'WIN_LENGTH',
    'DEFAULT_MCTS_ITERATIONS', 'DEFAULT_EXPLORATION_CONSTANT'
]
