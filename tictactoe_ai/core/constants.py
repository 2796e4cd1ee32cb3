"""
Constants for the tic-tac-toe game.

This module defines the game constants used throughout the implementation,
including board pieces, default board dimensions and search defaults.
"""
from enum import IntEnum
from typing import Dict, Final


class Piece(IntEnum):
    """Enum representing the value of a board cell."""
    EMPTY = 0
    X = 1  # Player A, moves first
    O = 2  # Player B

    @property
    def opponent(self) -> 'Piece':
        """Get the other player's piece (EMPTY has no opponent)."""
        if self == Piece.X:
            return Piece.O
        if self == Piece.O:
            return Piece.X
        return Piece.EMPTY

    @property
    def symbol(self) -> str:
        """Get the single character used to display this piece."""
        return PIECE_SYMBOLS[self]


# Characters used when printing a board
PIECE_SYMBOLS: Final[Dict[Piece, str]] = {
    Piece.EMPTY: " ",
    Piece.X: "X",
    Piece.O: "O",
}

# Characters accepted when parsing a board from text
PIECE_FROM_CHAR: Final[Dict[str, Piece]] = {
    "X": Piece.X,
    "x": Piece.X,
    "O": Piece.O,
    "o": Piece.O,
    "-": Piece.EMPTY,
    ".": Piece.EMPTY,
}

# Board dimensions
BOARD_ROWS: Final[int] = 3
BOARD_COLS: Final[int] = 3
WIN_LENGTH: Final[int] = 3  # Identical pieces in a line needed to win

# Scan directions for win detection as (row step, col step): right, down, down-right, down-left
WIN_DIRECTIONS: Final = ((0, 1), (1, 0), (1, 1), (1, -1))

# AI and simulation settings
DEFAULT_MCTS_ITERATIONS: Final[int] = 5000
DEFAULT_EXPLORATION_CONSTANT: Final[float] = 2.0
