"""Main entry point for the Memory Match console game."""

import argparse
import asyncio
import contextlib
import logging
import sys
import threading
from datetime import datetime
from pathlib import Path
from typing import TextIO

from memory_match.config import GameLogConfig, load_config
from memory_match.game.engine import GameEngine
from memory_match.logging import GameLogger
from memory_match.models.game_state import Snapshot
from memory_match.utils.logger import GameDisplay, setup_logging

logger = logging.getLogger(__name__)

# How often the console loop runs due timers (seconds)
POLL_INTERVAL = 0.05


def generate_log_filename(log_dir: str, difficulty: str) -> str:
    """Generate log filename with timestamp and starting difficulty.

    Format: {ISO timestamp}_{difficulty}.jsonl

    Args:
        log_dir: Directory for log files.
        difficulty: Difficulty the session starts with.

    Returns:
        Full path to log file.
    """
    timestamp = datetime.now().strftime("%Y%m%dT%H%M%S")
    return str(Path(log_dir) / f"{timestamp}_{difficulty}.jsonl")


def handle_command(engine: GameEngine, display: GameDisplay, line: str) -> bool:
    """Apply one line of player input.

    Args:
        engine: Game engine
        display: Display used for messages
        line: Raw input line

    Returns:
        False if the player asked to quit
    """
    parts = line.split()
    if not parts:
        display.render(engine.snapshot())
        return True

    command = parts[0].lower()
    if command in ("q", "quit"):
        return False
    if command in ("h", "help"):
        display.print_help(engine.difficulty_keys)
    elif command in ("r", "reset"):
        engine.reset()
    elif command in ("d", "difficulty"):
        if len(parts) != 2:
            print(f"Usage: d <{'|'.join(engine.difficulty_keys)}>")
        else:
            try:
                engine.set_difficulty(parts[1].lower())
            except ValueError as e:
                print(e)
    elif command.isdecimal():
        if not engine.select_card(int(command)):
            print(f"Card {command} cannot be turned over right now")
    else:
        print(f"Unknown command: {line.strip()} (h for help)")
    return True


def start_input_reader(
    loop: asyncio.AbstractEventLoop,
    lines: "asyncio.Queue[str | None]",
    stream: TextIO | None = None,
) -> threading.Thread:
    """Read lines from ``stream`` on a daemon thread into ``lines``.

    The thread never has to be joined, so Ctrl-C and interpreter exit are not
    held up by a pending read. ``None`` is queued at end of input.

    Args:
        loop: Event loop that owns ``lines``
        lines: Queue receiving input lines
        stream: Input stream (default: sys.stdin)

    Returns:
        The started thread
    """
    source = stream or sys.stdin

    def read() -> None:
        while True:
            line = source.readline()
            try:
                loop.call_soon_threadsafe(lines.put_nowait, line.rstrip("\n") if line else None)
            except RuntimeError:
                # Event loop already closed
                return
            if not line:
                return

    thread = threading.Thread(target=read, name="stdin-reader", daemon=True)
    thread.start()
    return thread


async def run_console(
    engine: GameEngine,
    display: GameDisplay,
    lines: "asyncio.Queue[str | None] | None" = None,
) -> None:
    """Read commands until the player quits, running timers in between.

    Args:
        engine: Game engine
        display: Display used for messages
        lines: Source of input lines (default: stdin via a reader thread)
    """
    if lines is None:
        lines = asyncio.Queue()
        start_input_reader(asyncio.get_running_loop(), lines)

    async def pump() -> None:
        while True:
            engine.poll()
            await asyncio.sleep(POLL_INTERVAL)

    pump_task = asyncio.create_task(pump())
    try:
        while True:
            print("> ", end="", flush=True)
            line = await lines.get()
            if line is None:
                break
            if not handle_command(engine, display, line):
                break
    finally:
        pump_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await pump_task


def main() -> int:
    """Main entry point.

    Returns:
        Exit code (0 for success)
    """
    parser = argparse.ArgumentParser(description="Memory Match card game")
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        help="Path to config file (YAML)",
    )
    parser.add_argument(
        "-d",
        "--difficulty",
        help="Starting difficulty (overrides config)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Random seed for reproducible deals (overrides config)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose output",
    )
    parser.add_argument(
        "--game-log",
        type=Path,
        help="Directory for game log files (filename auto-generated)",
    )

    args = parser.parse_args()

    # Load config
    config = load_config(args.config)

    # Apply command-line overrides
    if args.difficulty:
        if args.difficulty not in config.game.difficulties:
            parser.error(
                f"unknown difficulty {args.difficulty!r} "
                f"(choose from {', '.join(config.game.difficulties)})"
            )
        config.game.difficulty = args.difficulty
    if args.seed is not None:
        config.game.seed = args.seed
    if args.verbose:
        config.logging.level = "DEBUG"

    # Game log directory from the command line overrides the config file
    if args.game_log is not None:
        log_path = generate_log_filename(str(args.game_log), config.game.difficulty)
        game_log_config = GameLogConfig(enabled=True, output_path=log_path)
    else:
        game_log_config = config.game_log

    setup_logging(config.logging.level)

    display = GameDisplay()

    print("Memory Match")
    if game_log_config.enabled:
        print(f"Game log: {game_log_config.output_path}")

    try:
        with GameLogger(game_log_config) as game_logger:
            engine = GameEngine(config, game_logger)

            def on_change(event: str, snapshot: Snapshot) -> None:
                # The clock is shown on the next full render
                if event != "tick":
                    display.render(snapshot)

            engine.set_callbacks(on_change=on_change)

            display.print_help(engine.difficulty_keys)
            display.render(engine.snapshot())

            asyncio.run(run_console(engine, display))
            engine.end_session()

        return 0

    except KeyboardInterrupt:
        print("\nGame interrupted by user")
        return 1
    except Exception as e:
        logger.exception(f"Game error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
