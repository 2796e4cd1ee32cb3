"""
Monte Carlo Tree Search (MCTS) implementation for tic-tac-toe.

This package provides an MCTS agent that plays without any training.
The algorithm works by:

1. Selection: Starting from the root node, descend into children by UCB1,
   always trying a child that has never been visited first.
2. Expansion: Give a leaf one child per legal move.
3. Simulation: From a new child, play random moves to the end of the game.
4. Backpropagation: Add the visit (and the win, if the searching player won)
   to every node from the child up to the root.

The move played is the root child with the most visits.
"""

from tictactoe_ai.mcts.node import SearchNode
from tictactoe_ai.mcts.agent import MCTSAgent, MCTSAgentFactory
from tictactoe_ai.mcts.search import (
    MCTSController,
    MoveStatistics,
    mcts_search,
    recommend_move
)
from tictactoe_ai.mcts.config import MCTSConfig

# Default configuration
DEFAULT_CONFIG = MCTSConfig(
    iterations=5000,          # Completed rollouts per move
    exploration_weight=2.0,   # UCB1 exploration constant
    time_limit=None,          # Optional time limit in seconds (None = no limit)
)

__all__ = [
    'MCTSAgent',
    'MCTSAgentFactory',
    'SearchNode',
    'MCTSController',
    'MoveStatistics',
    'MCTSConfig',
    'mcts_search',
    'recommend_move',
    'DEFAULT_CONFIG'
]
