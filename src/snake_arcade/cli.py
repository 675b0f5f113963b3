"""Command-line tools for the leaderboard and game configuration."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    from snake_arcade.client import DEFAULT_BASE_URL

    parser = argparse.ArgumentParser(
        prog="snake-arcade",
        description="Snake Arcade leaderboard and configuration tools.",
    )
    sub = parser.add_subparsers(dest="command", help="Available commands.")

    # --- top ---
    top_p = sub.add_parser("top", help="Print the leaderboard.")
    top_p.add_argument("--url", type=str, default=DEFAULT_BASE_URL)
    top_p.add_argument("--limit", type=int, default=10)

    # --- submit ---
    submit_p = sub.add_parser("submit", help="Submit a score.")
    submit_p.add_argument("--url", type=str, default=DEFAULT_BASE_URL)
    submit_p.add_argument("--player", type=str, required=True)
    submit_p.add_argument("--score", type=int, required=True)

    # --- init-config ---
    init_p = sub.add_parser(
        "init-config", help="Write the default game config as JSON.",
    )
    init_p.add_argument("path", help="Destination JSON file.")
    init_p.add_argument("--board-size", type=int, default=None)
    init_p.add_argument("--seed", type=int, default=None)
    init_p.add_argument("--high-score-path", default=None)

    return parser


def _run_top(args: argparse.Namespace) -> int:
    from snake_arcade.client import HttpScoreBoard

    async def fetch():
        async with HttpScoreBoard(args.url) as board:
            return await board.top_scores(args.limit)

    try:
        entries = asyncio.run(fetch())
    except Exception as exc:
        logger.error("Could not fetch leaderboard from %s: %s", args.url, exc)
        return 1

    if not entries:
        print("No scores yet.")  # noqa: T201
    for rank, entry in enumerate(entries, start=1):
        print(f"{rank:>3}. {entry.player:<32} {entry.score}")  # noqa: T201
    return 0


def _run_submit(args: argparse.Namespace) -> int:
    from snake_arcade.client import HttpScoreBoard

    async def send():
        async with HttpScoreBoard(args.url) as board:
            return await board.submit(args.player, args.score)

    try:
        entry = asyncio.run(send())
    except Exception as exc:
        logger.error("Could not submit score to %s: %s", args.url, exc)
        return 1
    print(f"Submitted {entry.score} for {entry.player}.")  # noqa: T201
    return 0


def _run_init_config(args: argparse.Namespace) -> int:
    from snake_arcade.config import GameConfig

    overrides: dict = {}
    if args.board_size is not None:
        size = args.board_size
        mid = size // 2
        overrides.update(
            board_size=size,
            initial_snake=((mid, mid),),
            initial_food=(max(mid - 2, 0), max(mid - 2, 0)),
        )
    if args.seed is not None:
        overrides["seed"] = args.seed
    if args.high_score_path is not None:
        overrides["high_score_path"] = args.high_score_path

    try:
        config = GameConfig(**overrides)
    except ValueError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 1
    config.save(args.path)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``snake-arcade`` CLI."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    handlers = {
        "top": _run_top,
        "submit": _run_submit,
        "init-config": _run_init_config,
    }
    return handlers[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
