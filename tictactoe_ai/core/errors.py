"""
Exceptions raised by the game rules.

Usage:
    from tictactoe_ai.core.errors import InvalidMoveError

    try:
        state.apply_move(index)
    except InvalidMoveError as e:
        print(f"Illegal move: {e}")
"""
from typing import Any


class GameError(Exception):
    """Base class for game rule errors."""


class InvalidMoveError(GameError, ValueError):
    """
    Raised when a move cannot be applied to a board.

    Attributes:
        move: The rejected move
        reason: Short description of why it was rejected
    """

    def __init__(self, move: Any, reason: str):
        self.move = move
        self.reason = reason
        super().__init__(f"Invalid move {move!r}: {reason}")


InvalidMove = InvalidMoveError
