"""
Tic-Tac-Toe AI - A Monte Carlo Tree Search engine for tic-tac-toe style games.

This package provides the rules of an m x n board game with a fixed
run-length win condition, along with an MCTS agent that picks moves by
random playouts and UCB1 selection.
"""

__version__ = "0.1.0"
__author__ = "Tic-Tac-Toe AI Team"

# Make key components available at package level
from tictactoe_ai.core.board import BoardState
from tictactoe_ai.core.constants import Piece
from tictactoe_ai.core.errors import InvalidMoveError
from tictactoe_ai.core.game import Game, GameResult
from tictactoe_ai.mcts.search import recommend_move

# Version info as a tuple for programmatic access
VERSION_INFO = tuple(map(int, __version__.split('.')))
