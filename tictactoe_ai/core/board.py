"""
Board state and rules for tic-tac-toe style games.

This module defines BoardState, the rules engine searched over by MCTS:
- A rows x cols grid of pieces stored in a numpy array
- The player to move and the set of legal (empty) cells
- Win detection for a run of win_length identical pieces

Cells are addressed by a flat index, index = row * cols + col.
"""
from __future__ import annotations
from typing import Iterable, List, Optional, Tuple
import random

import numpy as np

from tictactoe_ai.core.constants import (
    Piece, PIECE_FROM_CHAR, BOARD_ROWS, BOARD_COLS, WIN_LENGTH, WIN_DIRECTIONS
)
from tictactoe_ai.core.errors import InvalidMoveError


class BoardState:
    """
    Complete representation of a board position.

    Applying a move mutates the state in place; use clone() to branch off an
    independent copy before exploring a move.
    """

    def __init__(
        self,
        rows: int = BOARD_ROWS,
        cols: int = BOARD_COLS,
        win_length: int = WIN_LENGTH
    ):
        """
        Initialize an empty board with X to move.

        Args:
            rows: Number of rows in the grid
            cols: Number of columns in the grid
            win_length: Number of identical pieces in a line needed to win
        """
        if rows < 1 or cols < 1:
            raise ValueError("Board must have at least one row and one column")
        if win_length < 1 or win_length > max(rows, cols):
            raise ValueError(
                f"win_length must be between 1 and {max(rows, cols)} for a {rows}x{cols} board"
            )

        self._rows = rows
        self._cols = cols
        self._win_length = win_length

        self._grid = np.zeros((rows, cols), dtype=np.int8)
        self._active_mover = Piece.X
        self._winner = Piece.EMPTY
        self._legal_moves: List[int] = list(range(rows * cols))
        self._last_move: Optional[int] = None

    @classmethod
    def from_cells(
        cls,
        cells: Iterable[int],
        rows: int = BOARD_ROWS,
        cols: int = BOARD_COLS,
        win_length: int = WIN_LENGTH,
        active_mover: Optional[Piece] = None
    ) -> 'BoardState':
        """
        Create a board from a flat sequence of pieces.

        Args:
            cells: Pieces in index order (Piece values or their ints)
            rows: Number of rows in the grid
            cols: Number of columns in the grid
            win_length: Number of identical pieces in a line needed to win
            active_mover: Player to move; inferred from piece counts if None

        Returns:
            BoardState with legal moves and winner computed from the cells
        """
        pieces = [Piece(cell) for cell in cells]
        if len(pieces) != rows * cols:
            raise ValueError(f"Expected {rows * cols} cells, got {len(pieces)}")

        state = cls(rows, cols, win_length)
        state._grid = np.array(pieces, dtype=np.int8).reshape(rows, cols)
        state._legal_moves = [i for i, piece in enumerate(pieces) if piece == Piece.EMPTY]

        if active_mover is None:
            x_count = pieces.count(Piece.X)
            o_count = pieces.count(Piece.O)
            active_mover = Piece.X if x_count == o_count else Piece.O
        elif active_mover == Piece.EMPTY:
            raise ValueError("active_mover must be X or O")
        state._active_mover = Piece(active_mover)

        state._winner = state._find_winner()
        return state

    @classmethod
    def from_string(
        cls,
        text: str,
        rows: int = BOARD_ROWS,
        cols: int = BOARD_COLS,
        win_length: int = WIN_LENGTH,
        active_mover: Optional[Piece] = None
    ) -> 'BoardState':
        """
        Create a board from text such as "XO- -X- --O".

        'X' and 'O' are pieces, '-' or '.' are empty cells; whitespace and
        '|' separators are ignored.
        """
        cells = []
        for char in text:
            if char.isspace() or char == "|":
                continue
            if char not in PIECE_FROM_CHAR:
                raise ValueError(f"Unexpected board character {char!r}")
            cells.append(PIECE_FROM_CHAR[char])
        return cls.from_cells(cells, rows, cols, win_length, active_mover)

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def win_length(self) -> int:
        return self._win_length

    @property
    def active_mover(self) -> Piece:
        """Get the piece of the player whose turn it is."""
        return self._active_mover

    @property
    def winner(self) -> Piece:
        """Get the winning piece, or Piece.EMPTY while undecided (or drawn)."""
        return self._winner

    @property
    def last_move(self) -> Optional[int]:
        """Get the index of the most recent move, or None if no move was applied."""
        return self._last_move

    @property
    def legal_moves(self) -> List[int]:
        """Get the empty cell indices in ascending order (a copy)."""
        return list(self._legal_moves)

    @property
    def cells(self) -> Tuple[Piece, ...]:
        """Get every cell's piece in index order."""
        return tuple(Piece(value) for value in self._grid.flat)

    def piece_at(self, index: int) -> Piece:
        """Get the piece at a flat cell index."""
        row, col = divmod(index, self._cols)
        return Piece(int(self._grid[row, col]))

    def is_legal_move(self, index: int) -> bool:
        """Check whether a move can be applied to this board."""
        return self._winner == Piece.EMPTY and index in self._legal_moves

    def is_terminal(self) -> bool:
        """
        Check if the game is over.

        Returns:
            True if a winner is decided or no empty cells remain
        """
        return not self._legal_moves or self._winner != Piece.EMPTY

    def apply_move(self, index: int) -> None:
        """
        Place the active mover's piece on a cell and pass the turn.

        Args:
            index: Flat index of the cell to occupy

        Raises:
            InvalidMoveError: If the game is already decided or the cell
                is not a legal move
        """
        if self._winner != Piece.EMPTY:
            raise InvalidMoveError(index, f"game already won by {self._winner.symbol}")
        if isinstance(index, bool) or not isinstance(index, (int, np.integer)):
            raise InvalidMoveError(index, "cell index must be an integer")
        index = int(index)
        if not 0 <= index < self._rows * self._cols:
            raise InvalidMoveError(index, f"cell index must be between 0 and {self._rows * self._cols - 1}")
        if index not in self._legal_moves:
            raise InvalidMoveError(index, "cell is already occupied")

        row, col = divmod(index, self._cols)
        self._grid[row, col] = self._active_mover
        self._legal_moves.remove(index)
        self._active_mover = self._active_mover.opponent
        self._last_move = index

        self._winner = self._find_winner()

    def random_playout_move(self, rng: random.Random) -> int:
        """
        Draw a legal move uniformly at random.

        Args:
            rng: Random source used for the draw

        Returns:
            Index of an empty cell
        """
        if not self._legal_moves:
            raise ValueError("No legal moves available")
        return rng.choice(self._legal_moves)

    def clone(self) -> 'BoardState':
        """
        Create an independent copy of this board.

        Returns:
            New BoardState sharing no mutable storage with this one
        """
        state = BoardState.__new__(BoardState)
        state._rows = self._rows
        state._cols = self._cols
        state._win_length = self._win_length
        state._grid = self._grid.copy()
        state._active_mover = self._active_mover
        state._winner = self._winner
        state._legal_moves = list(self._legal_moves)
        state._last_move = self._last_move
        return state

    def _find_winner(self) -> Piece:
        # Every direction steps downward or along the row, so a run whose
        # first and last cells are on the board lies entirely on the board.
        grid = self._grid.tolist()
        span = self._win_length - 1

        for row in range(self._rows):
            for col in range(self._cols):
                base = grid[row][col]
                if base == Piece.EMPTY:
                    continue

                for d_row, d_col in WIN_DIRECTIONS:
                    end_row = row + span * d_row
                    end_col = col + span * d_col
                    if not (0 <= end_row < self._rows and 0 <= end_col < self._cols):
                        continue

                    if all(
                        grid[row + step * d_row][col + step * d_col] == base
                        for step in range(1, self._win_length)
                    ):
                        return Piece(base)

        return Piece.EMPTY

    def __str__(self) -> str:
        """
        Render the board as rows of "X|O| " separated by dashed lines.

        Returns:
            String representation
        """
        separator = "-" * (self._cols * 2 - 1)
        lines = []
        for row in range(self._rows):
            lines.append("|".join(Piece(int(value)).symbol for value in self._grid[row]))
            if row < self._rows - 1:
                lines.append(separator)
        return "\n".join(lines)

    def __repr__(self) -> str:
        cells = "".join("-" if piece == Piece.EMPTY else piece.symbol for piece in self.cells)
        return (f"BoardState({self._rows}x{self._cols}, win_length={self._win_length}, "
                f"cells='{cells}', to_move={self._active_mover.symbol}, "
                f"winner={self._winner.name})")
