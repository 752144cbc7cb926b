"""
Tilematch CLI - Command-line interface for the engine.

Usage:
    tilematch serve [--host HOST] [--port PORT]     Run the web API
    tilematch play [--catalog NAME] [--seed N]      Play a round in the terminal
    tilematch catalogs                              List built-in catalogs
"""

import argparse
import random
import sys
import time

from .config import get_settings
from .errors import TileMatchError
from .observability import setup_logging


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Tilematch - Tile-Matching Memory Game",
        prog="tilematch",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the web API")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=8000, help="Bind port")

    # Play command
    play_parser = subparsers.add_parser("play", help="Play a round in the terminal")
    play_parser.add_argument("--catalog", help="Built-in catalog name")
    play_parser.add_argument("--catalog-file", help="Path to a JSON catalog")
    play_parser.add_argument("--seed", type=int, help="Seed for a reproducible board")
    play_parser.add_argument("--columns", type=int, default=4, help="Tiles per row")

    # Catalogs command
    subparsers.add_parser("catalogs", help="List built-in catalogs")

    args = parser.parse_args(argv)

    if args.command == "serve":
        cmd_serve(args)
    elif args.command == "play":
        cmd_play(args)
    elif args.command == "catalogs":
        cmd_catalogs(args)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_serve(args):
    """Run the API with uvicorn."""
    import uvicorn

    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    uvicorn.run(
        "tilematch.api.app:app",
        host=args.host,
        port=args.port,
        log_level=settings.log_level.lower(),
    )


def cmd_catalogs(args):
    """List built-in catalogs."""
    from .games import CATALOGS

    default = get_settings().default_catalog
    for name, catalog in sorted(CATALOGS.items()):
        marker = " (default)" if name == default else ""
        print(f"{name}: {len(catalog)} pairs{marker}")


def cmd_play(args):
    """Play one board in the terminal, with the real resolution delays."""
    from .engine_core import GameEngine, ManualScheduler
    from .games import get_catalog, load_catalog_file

    settings = get_settings()
    setup_logging("WARNING", "text")

    try:
        if args.catalog_file:
            catalog = load_catalog_file(args.catalog_file)
        else:
            catalog = get_catalog(args.catalog or settings.default_catalog)
        scheduler = ManualScheduler()
        engine = GameEngine(
            catalog,
            scheduler=scheduler,
            rng=random.Random(args.seed),
            match_delay_ms=settings.match_delay_ms,
            mismatch_delay_ms=settings.mismatch_delay_ms,
        )
    except TileMatchError as e:
        print(f"Error: {e.message}")
        sys.exit(1)

    columns = max(1, args.columns)
    try:
        _play_loop(engine, scheduler, columns)
    except (EOFError, KeyboardInterrupt):
        print()


def _play_loop(engine, scheduler, columns):
    while True:
        state = engine.state
        print()
        print(render_board(state, columns))
        print(f"Moves: {state.moves}   Pairs: {state.pairs_found} / {state.pairs_total}")

        if state.round_complete:
            print(f"\nCongratulations! You finished in {state.moves} moves.")
            answer = input("Play again? [y/N] ").strip().lower()
            if answer != "y":
                return
            engine.reset()
            continue

        raw = input(f"Tile 0-{state.tile_count - 1} (n = new game, q = quit): ").strip().lower()
        if raw == "q":
            return
        if raw == "n":
            engine.reset()
            continue
        try:
            position = int(raw)
        except ValueError:
            print(f"Not a tile number: {raw!r}")
            continue
        if not 0 <= position < state.tile_count:
            print(f"No tile at {position}")
            continue

        state = engine.reveal(position)
        if state.is_locked:
            print()
            print(render_board(state, columns))
            due = scheduler.next_due()
            delay = due - scheduler.now_ms
            time.sleep(delay / 1000.0)
            scheduler.advance(delay)


def render_board(state, columns=4):
    """Plain-text grid: ?? for face-down, label for face-up, *label* once matched."""
    width = max([len(tile.label or tile.pair_key) for tile in state.tiles] + [2]) + 2
    lines = []
    row = []
    for tile in state.tiles:
        if tile.position in state.matched:
            text = f"*{tile.label or tile.pair_key}*"
        elif tile.position in state.revealed:
            text = tile.label or tile.pair_key
        else:
            text = "??"
        row.append(f"{tile.position:>2} {text:<{width}}")
        if len(row) == columns:
            lines.append(" ".join(row).rstrip())
            row = []
    if row:
        lines.append(" ".join(row).rstrip())
    return "\n".join(lines)


if __name__ == "__main__":
    main()
