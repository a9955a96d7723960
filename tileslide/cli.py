"""
Tileslide CLI - Command-line interface for the engine.

Usage:
    tileslide play [--seed N] [--resume]     Play in the terminal
    tileslide simulate [--games N]           Play random games and report scores
    tileslide serve [--host H] [--port P]    Run the REST API
"""

import argparse
import logging
import random
import sys
import time

from .engine_core import BoardEngine, GameState, legal_moves
from .formatting import calculate_rating, format_score, format_time
from .session import SessionManager, direction_for_key
from .storage import ScoreStore


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Tileslide - Sliding-tile puzzle engine (2048)",
        prog="tileslide",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Play command
    play_parser = subparsers.add_parser("play", help="Play in the terminal")
    play_parser.add_argument("--seed", type=int, default=None, help="Random seed")
    play_parser.add_argument("--data-dir", default=None, help="Where to keep the best score")
    play_parser.add_argument("--resume", action="store_true", help="Continue the saved game")

    # Simulate command
    simulate_parser = subparsers.add_parser("simulate", help="Play random games")
    simulate_parser.add_argument("--games", type=int, default=10, help="Number of games")
    simulate_parser.add_argument("--seed", type=int, default=None, help="Random seed")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the REST API")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "play":
        cmd_play(args)
    elif args.command == "simulate":
        cmd_simulate(args)
    elif args.command == "serve":
        cmd_serve(args)
    else:
        parser.print_help()
        sys.exit(1)


def render_board(state: GameState) -> str:
    """Render the board as a text grid with the score line on top."""
    width = max(len(str(state.board.max_value)), 4)
    separator = "+" + "+".join(["-" * (width + 2)] * state.board.size) + "+"

    lines = [
        f"Score: {format_score(state.score)}    Best: {format_score(state.best_score)}",
        separator,
    ]
    for row in state.board.grid:
        cells = [str(v).center(width) if v else ".".center(width) for v in row]
        lines.append("| " + " | ".join(cells) + " |")
        lines.append(separator)
    return "\n".join(lines)


def cmd_play(args):
    """Interactive terminal game."""
    store = ScoreStore(data_dir=args.data_dir)
    manager = SessionManager(store=store, save_games=True)
    session = manager.create_session(seed=args.seed, resume=args.resume)
    started = time.time()

    print("Move with w/a/s/d (or h/j/k/l), r to restart, q to quit.")
    while True:
        print()
        print(render_board(session.game_state))

        if session.game_state.won:
            print("You reached 2048!")
        elif session.game_state.game_over:
            print("No moves left.")
        if session.game_state.is_finished:
            _print_summary(session.game_state, time.time() - started)
            print("Press r to play again or q to quit.")

        try:
            key = input("> ")
        except EOFError:
            break

        key = key.strip().lower()
        if key == "q":
            break
        if key == "r":
            manager.restart(session.session_id)
            started = time.time()
            continue

        direction = direction_for_key(key)
        if direction is None:
            print(f"Unknown input: {key!r}")
            continue

        result = manager.move(session.session_id, direction)
        if result is not None and not result.moved and not session.game_state.is_finished:
            print("Nothing moves that way.")

    manager.end_session(session.session_id)


def _print_summary(state: GameState, elapsed: float):
    print(f"Final score: {format_score(state.score)} ({calculate_rating(state.score)})")
    print(f"Moves: {state.move_count}    Time: {format_time(elapsed)}")


def cmd_simulate(args):
    """Play random games and print their scores."""
    if args.games < 1:
        print("Error: --games must be at least 1")
        sys.exit(1)

    picker = random.Random(args.seed)
    engine = BoardEngine.seeded(args.seed)
    best = 0
    scores = []

    for game in range(1, args.games + 1):
        state = engine.reset(best)
        while True:
            moves = legal_moves(state)
            if not moves:
                break
            state = engine.apply_move(state, picker.choice(moves)).state

        best = state.best_score
        scores.append(state.score)
        outcome = "won" if state.won else "over"
        print(
            f"Game {game}: score {format_score(state.score)}, "
            f"max tile {state.board.max_value}, {state.move_count} moves ({outcome})"
        )

    print(f"\nAverage: {format_score(sum(scores) // len(scores))}    Best: {format_score(best)}")


def cmd_serve(args):
    """Run the REST API with uvicorn."""
    try:
        import uvicorn
    except ImportError:
        print("Error: uvicorn not installed. Install with: pip install uvicorn")
        sys.exit(1)

    from .api import create_app

    uvicorn.run(create_app(), host=args.host, port=args.port)


if __name__ == "__main__":
    main()
