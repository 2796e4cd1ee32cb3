"""
Interactive tic-tac-toe game against the MCTS agent.

This module provides a command-line interface for playing against the
computer. Cells are numbered row by row starting at 0; entering -1 quits.

Example usage:
    # Play a standard game, choosing who starts at the prompt
    tictactoe-play

    # Let the computer open on a 5x5 board with four in a row to win
    tictactoe-play --first computer --rows 5 --cols 5 --win-length 4

    # Show the top of the search tree after every computer move
    tictactoe-play --show-tree --seed 0
"""
import argparse
import logging
import sys
from typing import Callable, List, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from tictactoe_ai.core.board import BoardState
from tictactoe_ai.core.constants import (
    Piece, BOARD_ROWS, BOARD_COLS, WIN_LENGTH,
    DEFAULT_MCTS_ITERATIONS, DEFAULT_EXPLORATION_CONSTANT
)
from tictactoe_ai.core.errors import InvalidMoveError
from tictactoe_ai.core.game import Game, GameResult
from tictactoe_ai.mcts.agent import MCTSAgent
from tictactoe_ai.mcts.config import MCTSConfig
from tictactoe_ai.mcts.search import MoveStatistics

logger = logging.getLogger(__name__)

QUIT_INPUT = -1

PIECE_STYLES = {
    Piece.X: "bold red",
    Piece.O: "bold blue",
}


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments for game configuration."""
    parser = argparse.ArgumentParser(description="Play tic-tac-toe against an MCTS agent")

    # Board configuration
    parser.add_argument("--rows", type=int, default=BOARD_ROWS,
                        help="Number of board rows")
    parser.add_argument("--cols", type=int, default=BOARD_COLS,
                        help="Number of board columns")
    parser.add_argument("--win-length", type=int, default=WIN_LENGTH,
                        help="Pieces in a line needed to win")

    # MCTS configuration
    parser.add_argument("--iterations", type=int, default=DEFAULT_MCTS_ITERATIONS,
                        help="Number of MCTS rollouts per computer move")
    parser.add_argument("--exploration", type=float, default=DEFAULT_EXPLORATION_CONSTANT,
                        help="UCB1 exploration constant")
    parser.add_argument("--time-limit", type=float, default=None,
                        help="Optional time limit per computer move in seconds")
    parser.add_argument("--seed", type=int, default=None,
                        help="Random seed for the computer's rollouts")

    # Game configuration
    parser.add_argument("--first", type=str, default="ask",
                        choices=["human", "computer", "ask"],
                        help="Who moves first (and plays X)")
    parser.add_argument("--show-tree", action="store_true",
                        help="Show search statistics after every computer move")
    parser.add_argument("--debug", action="store_true",
                        help="Show debug logging")

    return parser.parse_args(argv)


def configure_logging(debug: bool = False, console: Optional[Console] = None) -> None:
    """Route log records through rich."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=debug)],
    )


def create_agent(args: argparse.Namespace) -> MCTSAgent:
    """Create the computer opponent from command-line arguments."""
    config = MCTSConfig(
        iterations=args.iterations,
        exploration_weight=args.exploration,
        time_limit=args.time_limit,
        seed=args.seed
    )
    return MCTSAgent(config=config, name="Computer")


def render_board(state: BoardState) -> Table:
    """
    Build a table showing the board; empty cells show their index.

    Args:
        state: Board to render

    Returns:
        Renderable table
    """
    table = Table(show_header=False, show_lines=True)
    for _ in range(state.cols):
        table.add_column(justify="center", min_width=3)

    cells = state.cells
    for row in range(state.rows):
        values = []
        for col in range(state.cols):
            index = row * state.cols + col
            piece = cells[index]
            if piece == Piece.EMPTY:
                values.append(f"[dim]{index}[/dim]")
            else:
                values.append(f"[{PIECE_STYLES[piece]}]{piece.symbol}[/]")
        table.add_row(*values)

    return table


def render_tree(statistics: List[MoveStatistics]) -> Table:
    """
    Build a table of search statistics, indented by tree depth.

    Args:
        statistics: Per-node statistics from the last search

    Returns:
        Renderable table
    """
    table = Table(title="Search tree")
    table.add_column("Move")
    table.add_column("Visits", justify="right")
    table.add_column("Wins", justify="right")
    table.add_column("UCB1", justify="right")

    for entry in statistics:
        ucb1 = "-" if entry.ucb1_score is None else f"{entry.ucb1_score:.3f}"
        table.add_row(
            "  " * (entry.depth - 1) + f"> {entry.move}",
            str(entry.visit_count),
            str(entry.win_count),
            ucb1,
        )

    return table


def choose_first_player(args: argparse.Namespace, console: Console, read_input: Callable[[str], str]) -> bool:
    """
    Decide whether the computer moves first.

    Returns:
        True if the computer plays X
    """
    if args.first != "ask":
        return args.first == "computer"

    while True:
        answer = read_input("Select who will start (0 - me, 1 - computer): ").strip()
        if answer in ("0", "1"):
            return answer == "1"
        console.print("Please enter 0 or 1.")


def prompt_human_move(state: BoardState, console: Console, read_input: Callable[[str], str]) -> Optional[int]:
    """
    Ask the human for a cell until a legal one (or -1) is entered.

    Returns:
        Cell index, or None if the human quits
    """
    while True:
        answer = read_input("Select next location: ").strip()
        try:
            index = int(answer)
        except ValueError:
            console.print(f"[red]Not a cell number: {answer!r}[/red]")
            continue

        if index == QUIT_INPUT:
            return None
        if not state.is_legal_move(index):
            console.print("[red]Illegal move[/red]")
            continue
        return index


def announce_result(game: Game, console: Console) -> None:
    """Print the outcome of a finished game."""
    if game.get_result() == GameResult.WINNER:
        winner = game.state.winner
        console.print(f"[{PIECE_STYLES[winner]}]{winner.symbol} won![/]")
    else:
        console.print("[bold yellow]Finished a tie[/bold yellow]")


def play_game(
    args: argparse.Namespace,
    console: Console,
    read_input: Optional[Callable[[str], str]] = None
) -> Game:
    """
    Play one game between the human and the computer.

    Args:
        args: Parsed command-line arguments
        console: Console to render to
        read_input: Function used to read a line (defaults to console.input)

    Returns:
        The game in its final (or abandoned) state
    """
    if read_input is None:
        read_input = console.input

    game = Game(rows=args.rows, cols=args.cols, win_length=args.win_length)
    agent = create_agent(args)

    computer_first = choose_first_player(args, console, read_input)
    computer_piece = Piece.X if computer_first else Piece.O
    agent.register_with_game(game, computer_piece)
    logger.debug("Computer plays %s with %s", computer_piece.symbol, agent.config)

    console.print(render_board(game.state))

    while not game.state.is_terminal():
        if game.state.active_mover == computer_piece:
            with console.status(f"{agent.name} is thinking..."):
                game.step()
            console.print(f"{agent.name} plays {game.state.last_move}")
            if args.show_tree:
                console.print(render_tree(agent.get_move_statistics()))
        else:
            move = prompt_human_move(game.state, console, read_input)
            if move is None:
                console.print("Game abandoned.")
                return game
            try:
                game.step(move)
            except InvalidMoveError as e:
                console.print(f"[red]{e}[/red]")
                continue

        console.print(render_board(game.state))

    announce_result(game, console)
    return game


def main(argv: Optional[List[str]] = None) -> None:
    """Main function."""
    args = parse_args(argv)
    console = Console()
    configure_logging(args.debug, console)

    console.print("[bold yellow]Welcome to Tic-Tac-Toe AI![/bold yellow]")
    console.print(f"Get {args.win_length} in a row on a {args.rows}x{args.cols} board. Enter -1 to quit.")

    try:
        play_game(args, console)
    except KeyboardInterrupt:
        console.print("\nGame interrupted by user.")
        sys.exit(0)
    except ValueError as e:
        # Bad board or search options
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(2)


if __name__ == "__main__":
    main()
