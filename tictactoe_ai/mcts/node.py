"""
Monte Carlo Tree Search node for tic-tac-toe.

This module defines the SearchNode class which represents a node in the MCTS tree.
Each node caches the board reached by its move, statistics (visits, wins),
and owns its child nodes. The link back to the parent is a weak reference,
so ownership only runs from parent to child.
"""
from __future__ import annotations
from typing import List, Optional
import math
import weakref

from tictactoe_ai.core.board import BoardState


class SearchNode:
    """
    A node in the Monte Carlo Tree Search.

    Each node represents a board position and tracks statistics about
    simulations that pass through it. Wins are always counted for the
    player the search is run on behalf of (the root mover).
    """

    def __init__(
        self,
        state: BoardState,
        parent: Optional['SearchNode'] = None,
        move: Optional[int] = None,
    ):
        """
        Initialize a search node.

        Args:
            state: The board this node represents (owned by the node)
            parent: The parent node (None for root)
            move: The move that led from the parent's board to this one (None for root)
        """
        self.state = state
        self.move = move
        self._parent_ref = weakref.ref(parent) if parent is not None else None

        # Node statistics
        self.visit_count = 0
        self.win_count = 0
        self.locked = False
        self.children: List[SearchNode] = []

    @property
    def parent(self) -> Optional['SearchNode']:
        """Get the parent node, or None at the root."""
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    @property
    def depth(self) -> int:
        """Distance from the root (the root has depth 0)."""
        depth = 0
        node = self.parent
        while node is not None:
            depth += 1
            node = node.parent
        return depth

    @property
    def win_rate(self) -> float:
        """Fraction of visits that ended in a win (0.0 if never visited)."""
        if self.visit_count == 0:
            return 0.0
        return self.win_count / self.visit_count

    def is_leaf(self) -> bool:
        """Check if this node has no children yet."""
        return not self.children

    def is_terminal(self) -> bool:
        """
        Check if this node can no longer be explored.

        Returns:
            True if the node is locked or its board is finished
        """
        return self.locked or self.state.is_terminal()

    def lock(self) -> None:
        """Mark this node as permanently unselectable by its parent."""
        self.locked = True

    def ucb1_score(self, total_visits: int, exploration_constant: float) -> float:
        """
        Calculate the UCB1 score of this node.

        UCB1 = win_count / visit_count + c * sqrt(ln(total_visits) / visit_count)

        Only defined for visited nodes; selection handles unvisited children
        before any score is computed.

        Args:
            total_visits: Search-wide visit counter
            exploration_constant: Weight of the exploration term

        Returns:
            UCB1 score
        """
        exploitation = self.win_count / self.visit_count
        exploration = math.sqrt(math.log(total_visits) / self.visit_count)
        return exploitation + exploration_constant * exploration

    def expand(self) -> List['SearchNode']:
        """
        Create one child for every legal move of this node's board.

        This implements the expansion phase of MCTS. Children are created
        in legal-move order, each with its own copy of the board.

        Returns:
            The new children
        """
        for move in self.state.legal_moves:
            child_state = self.state.clone()
            child_state.apply_move(move)
            self.children.append(SearchNode(state=child_state, parent=self, move=move))
        return self.children

    def select_child(self, total_visits: int, exploration_constant: float) -> Optional['SearchNode']:
        """
        Select the child to descend into.

        Unvisited children come first, in creation order. Otherwise the
        unlocked child with the highest UCB1 score wins; ties go to the
        earlier child.

        Args:
            total_visits: Search-wide visit counter
            exploration_constant: Weight of the exploration term

        Returns:
            Selected child, or None if every child is locked
        """
        best_child = None
        best_score = -math.inf

        for child in self.children:
            if child.locked:
                continue
            if child.visit_count == 0:
                return child

            score = child.ucb1_score(total_visits, exploration_constant)
            if score > best_score:
                best_score = score
                best_child = child

        return best_child

    def record_visit(self, won: bool) -> None:
        """
        Update this node's statistics with one simulation result.

        Args:
            won: Whether the simulation was won by the root mover
        """
        self.visit_count += 1
        if won:
            self.win_count += 1

    def most_visited_child(self) -> Optional['SearchNode']:
        """
        Get the child with the most visits, ignoring unvisited children.

        Ties go to the earlier child.

        Returns:
            Most visited child, or None if no child has been visited
        """
        best_child = None
        for child in self.children:
            if child.visit_count == 0:
                continue
            if best_child is None or child.visit_count > best_child.visit_count:
                best_child = child
        return best_child

    def __str__(self) -> str:
        """
        Get a string representation of the node.

        Returns:
            String representation
        """
        return (f"SearchNode(move={self.move}, "
                f"visits={self.visit_count}, "
                f"wins={self.win_count}, "
                f"children={len(self.children)}, "
                f"locked={self.locked})")
