"""Command-line tools for headless simulation and speed tables."""

from __future__ import annotations

import argparse
import logging
import sys

import numpy as np

from portfolio_snake.clock import SPEED_PROFILES, Difficulty, tick_interval
from portfolio_snake.config import GameConfig
from portfolio_snake.engine import GameEngine, GameState
from portfolio_snake.errors import ConfigurationError
from portfolio_snake.snake import Direction

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="portfolio-snake",
        description="Headless tools for the portfolio Snake engine.",
    )
    sub = parser.add_subparsers(dest="command", help="Available commands.")

    # --- simulate ---
    sim_p = sub.add_parser(
        "simulate", help="Play one game with a simple autopilot.",
    )
    sim_p.add_argument(
        "--config", type=str, default=None,
        help="Path to a JSON config file (overrides other flags).",
    )
    sim_p.add_argument("--width", type=int, default=500)
    sim_p.add_argument("--height", type=int, default=300)
    sim_p.add_argument("--cell-size", type=int, default=20)
    sim_p.add_argument(
        "--difficulty", type=str, default="normal",
        choices=["easy", "normal", "medium", "hard"],
    )
    sim_p.add_argument("--seed", type=int, default=None)
    sim_p.add_argument("--max-ticks", type=int, default=5_000)
    sim_p.add_argument(
        "--high-score-file", type=str, default=None,
        help="JSON file used to load and save the high score.",
    )

    # --- speeds ---
    speeds_p = sub.add_parser(
        "speeds", help="Print tick intervals per difficulty and level.",
    )
    speeds_p.add_argument("--levels", type=int, default=10)

    return parser


def choose_direction(engine: GameEngine, rng: np.random.Generator) -> Direction:
    """Pick a safe direction, preferring ones that close in on the food."""
    snake = engine.snake
    assert snake is not None  # noqa: S101
    options: list[tuple[int, float, Direction]] = []
    for direction in Direction:
        if direction.is_reverse_of(snake.direction):
            continue
        candidate = snake.next_head(direction)
        if not engine.grid.in_bounds(candidate):
            continue
        ate = candidate == engine.food
        if snake.collides_with_self(candidate, ate_food=ate):
            continue
        if engine.food is None:
            distance = 0
        else:
            distance = (
                abs(candidate.x - engine.food.x) + abs(candidate.y - engine.food.y)
            )
        options.append((distance, float(rng.random()), direction))
    if not options:
        return snake.direction
    return min(options, key=lambda o: (o[0], o[1]))[2]


def _run_simulate(args: argparse.Namespace) -> int:
    if args.config:
        config = GameConfig.load(args.config)
    else:
        config = GameConfig(
            width=args.width,
            height=args.height,
            cell_size=args.cell_size,
            difficulty=args.difficulty,
            seed=args.seed,
            high_score_path=args.high_score_file,
        )

    try:
        engine = GameEngine.from_config(config)
    except ConfigurationError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 2

    rng = np.random.default_rng(config.seed)
    engine.start()
    while engine.state is GameState.PLAYING and engine.tick < args.max_ticks:
        engine.set_direction(choose_direction(engine, rng))
        engine.step()

    snap = engine.snapshot()
    print(  # noqa: T201
        f"state={snap.state.value} score={snap.score} level={snap.level} "
        f"ticks={snap.tick} length={len(snap.snake)} high_score={snap.high_score}"
    )
    return 0


def _run_speeds(args: argparse.Namespace) -> int:
    header = "level " + " ".join(f"{d.value:>7}" for d in SPEED_PROFILES)
    print(header)  # noqa: T201
    for level in range(1, args.levels + 1):
        row = " ".join(f"{tick_interval(d, level):>5}ms" for d in Difficulty)
        print(f"{level:>5} {row}")  # noqa: T201
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``portfolio-snake`` CLI."""
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
        "simulate": _run_simulate,
        "speeds": _run_speeds,
    }
    return handlers[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
