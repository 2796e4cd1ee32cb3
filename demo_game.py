#!/usr/bin/env python
"""
Demonstration script for tic-tac-toe AI agents playing against each other.

This script plays a series of AI vs AI games and prints a summary of the
results.

Example usage:
    # MCTS (X) against a random agent (O), 20 games
    python demo_game.py --agent1 mcts --agent2 random --games 20

    # Two MCTS agents on a 4x4 board with three in a row to win
    python demo_game.py --agent1 mcts --agent2 mcts --rows 4 --cols 4 --iterations 2000

    # Watch a single game move by move
    python demo_game.py --games 1 --verbose
"""
import argparse
import logging
import sys
from collections import Counter
from typing import Dict, List, Optional, Union

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from tqdm import tqdm

from tictactoe_ai.core.constants import Piece, BOARD_ROWS, BOARD_COLS, WIN_LENGTH
from tictactoe_ai.core.game import Game, GameResult
from tictactoe_ai.core.player import RandomAgent
from tictactoe_ai.mcts.agent import MCTSAgent
from tictactoe_ai.mcts.config import MCTSConfig

Agent = Union[MCTSAgent, RandomAgent]


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(description="Demonstrate tic-tac-toe AI agents playing against each other")

    parser.add_argument("--agent1", type=str, default="mcts", choices=["mcts", "random"],
                        help="Agent playing X")
    parser.add_argument("--agent2", type=str, default="random", choices=["mcts", "random"],
                        help="Agent playing O")
    parser.add_argument("--games", type=int, default=10,
                        help="Number of games to play")

    parser.add_argument("--rows", type=int, default=BOARD_ROWS)
    parser.add_argument("--cols", type=int, default=BOARD_COLS)
    parser.add_argument("--win-length", type=int, default=WIN_LENGTH)

    parser.add_argument("--iterations", type=int, default=1000,
                        help="Number of MCTS rollouts per move")
    parser.add_argument("--exploration", type=float, default=2.0,
                        help="UCB1 exploration constant")
    parser.add_argument("--seed", type=int, default=None,
                        help="Random seed for reproducibility")

    parser.add_argument("--verbose", action="store_true",
                        help="Print every board and search summary")
    parser.add_argument("--debug", action="store_true",
                        help="Show debug logging")

    return parser.parse_args(argv)


def create_agent(agent_type: str, args: argparse.Namespace, name: str, seed: Optional[int]) -> Agent:
    """Create an agent based on command-line arguments."""
    if agent_type == "random":
        return RandomAgent(name=name, seed=seed)

    config = MCTSConfig(
        iterations=args.iterations,
        exploration_weight=args.exploration,
        seed=seed
    )
    return MCTSAgent(config=config, name=name, verbose=args.verbose)


def run_series(args: argparse.Namespace, console: Console) -> Dict[str, float]:
    """
    Play a series of games between two agents.

    Args:
        args: Parsed command-line arguments
        console: Console to print boards to (only when verbose)

    Returns:
        Summary with win, draw and game length figures
    """
    # Offset the second seed so mirrored agents don't play identical rollouts
    seed_o = None if args.seed is None else args.seed + 1
    agent_x = create_agent(args.agent1, args, f"{args.agent1.upper()} X", args.seed)
    agent_o = create_agent(args.agent2, args, f"{args.agent2.upper()} O", seed_o)

    game = Game(rows=args.rows, cols=args.cols, win_length=args.win_length)
    agent_x.register_with_game(game, Piece.X)
    agent_o.register_with_game(game, Piece.O)

    outcomes: Counter = Counter()
    total_moves = 0

    for _ in tqdm(range(args.games), desc=f"{agent_x.name} vs {agent_o.name}", disable=args.verbose):
        game.reset()
        game.run_game()

        if args.verbose:
            console.print(str(game))

        total_moves += len(game.history)
        if game.get_result() == GameResult.WINNER:
            outcomes[game.state.winner] += 1
        else:
            outcomes["draw"] += 1

    return {
        "games": args.games,
        "x_wins": outcomes[Piece.X],
        "o_wins": outcomes[Piece.O],
        "draws": outcomes["draw"],
        "average_length": total_moves / max(1, args.games),
    }


def render_summary(summary: Dict[str, float], args: argparse.Namespace) -> Table:
    """Build a results table for a finished series."""
    table = Table(title=f"{args.games} games on a {args.rows}x{args.cols} board")
    table.add_column("Result")
    table.add_column("Count", justify="right")
    table.add_column("Share", justify="right")

    games = max(1, summary["games"])
    for label, key in ((f"X wins ({args.agent1})", "x_wins"),
                       (f"O wins ({args.agent2})", "o_wins"),
                       ("Draws", "draws")):
        table.add_row(label, str(summary[key]), f"{summary[key] / games:.1%}")

    table.add_row("Average moves per game", f"{summary['average_length']:.1f}", "")
    return table


def main(argv: Optional[List[str]] = None) -> None:
    """Main function."""
    args = parse_args(argv)
    console = Console()
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console)],
    )

    try:
        summary = run_series(args, console)
    except KeyboardInterrupt:
        console.print("\nDemo interrupted by user.")
        sys.exit(0)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(2)

    console.print(render_summary(summary, args))


if __name__ == "__main__":
    main()
