#!/usr/bin/env python3
"""Interactive log viewer for Memory Match game logs.

Usage:
    python scripts/log_viewer.py game_log.jsonl

Keys:
    n: Next step
    p: Previous step
    c: Continuous playback (1 sec interval), any key to stop
    r: Jump to round number
    s: Toggle solution (show the hidden layout)
    q: Quit
"""

import argparse
import curses
import json
import sys
from dataclasses import dataclass, field, replace
from pathlib import Path


@dataclass
class ViewState:
    """Current round state for display."""

    round: int = 0
    difficulty: str = ""
    pairs: int = 0
    grid_cols: int = 4
    layout: list[str] = field(default_factory=list)
    board: list[str] = field(default_factory=list)
    moves: int = 0
    matched_pairs: int = 0
    elapsed: int = 0
    stars: int | None = None
    last_action: str = ""


def load_events(path: Path) -> list[dict]:
    """Load all events from JSONL file."""
    events = []
    with open(path, encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if line:
                events.append(json.loads(line))
    return events


def _split(cells: str) -> list[str]:
    return cells.split(",") if cells else []


def build_states(events: list[dict]) -> list[ViewState]:
    """Build displayable states from events."""
    states: list[ViewState] = []
    current = ViewState()

    for event in events:
        event_type = event.get("type")

        if event_type == "session_start":
            current = ViewState()
            seed = event.get("seed")
            seed_str = f" (seed {seed})" if seed is not None else ""
            current.last_action = f"Session started{seed_str}"
            states.append(replace(current))

        elif event_type == "round_start":
            current.round = event.get("round", 0)
            current.difficulty = event.get("difficulty", "")
            current.pairs = event.get("pairs", 0)
            current.grid_cols = event.get("grid_cols", 4)
            current.layout = _split(event.get("layout", ""))
            current.board = ["?"] * len(current.layout)
            current.moves = 0
            current.matched_pairs = 0
            current.elapsed = 0
            current.stars = None
            current.last_action = f"Round {current.round} dealt"
            states.append(replace(current))

        elif event_type == "select":
            position = event.get("position", -1)
            if event.get("accepted", False):
                current.board = _split(event.get("board", ""))
                current.last_action = f"Turned over card {position}"
            else:
                current.last_action = f"Card {position} rejected"
            states.append(replace(current))

        elif event_type == "evaluate":
            current.moves = event.get("move", current.moves)
            first, second = event.get("positions", [-1, -1])
            outcome = "match" if event.get("match") else "no match"
            current.last_action = f"Move {current.moves}: {first} / {second} ({outcome})"
            states.append(replace(current))

        elif event_type == "resolve":
            current.board = _split(event.get("board", ""))
            current.matched_pairs = event.get("matched_pairs", current.matched_pairs)
            current.elapsed = event.get("elapsed", current.elapsed)
            positions = ", ".join(str(p) for p in event.get("positions", []))
            if event.get("match"):
                current.last_action = f"Pair {positions} matched"
            else:
                current.last_action = f"Cards {positions} hidden again"
            states.append(replace(current))

        elif event_type == "round_end":
            current.moves = event.get("moves", current.moves)
            current.elapsed = event.get("elapsed", current.elapsed)
            current.stars = event.get("stars")
            current.last_action = f"Round {current.round} won"
            states.append(replace(current))

        elif event_type == "session_end":
            played = event.get("rounds_played", 0)
            won = event.get("rounds_won", 0)
            current.last_action = f"Session ended. {won}/{played} rounds won"
            states.append(replace(current))

    return states


def format_time(seconds: int) -> str:
    """Format seconds as m:ss."""
    minutes, secs = divmod(seconds, 60)
    return f"{minutes}:{secs:02d}"


def draw_screen(
    stdscr, state: ViewState, step: int, total: int, show_layout: bool
) -> None:
    """Draw the current state to the screen."""
    stdscr.clear()
    height, width = stdscr.getmaxyx()
    width = min(width, 100)

    line = 0
    sep = "=" * 80

    stdscr.addnstr(line, 0, sep, width - 1)
    line += 1

    round_info = f"Round {state.round} [{state.difficulty}]"
    step_info = f"Step {step + 1}/{total}"
    middle_space = 80 - len(round_info) - len(step_info)
    stdscr.addnstr(line, 0, f"{round_info}{' ' * max(middle_space, 1)}{step_info}", width - 1)
    line += 1

    stdscr.addnstr(line, 0, sep, width - 1)
    line += 2

    stats = (
        f"Time {format_time(state.elapsed)}  {state.moves} moves  "
        f"{state.matched_pairs}/{state.pairs} pairs"
    )
    if state.stars is not None:
        stats += f"  {'*' * state.stars}"
    stdscr.addnstr(line, 0, stats, width - 1)
    line += 1
    stdscr.addnstr(line, 0, f"Last: {state.last_action}", width - 1)
    line += 2

    cells = state.layout if show_layout else state.board
    cols = max(state.grid_cols, 1)
    cell_width = 12
    for start in range(0, len(cells), cols):
        row = cells[start : start + cols]
        text = "".join(f"{start + i:>2}:{cell:<{cell_width - 3}}" for i, cell in enumerate(row))
        if line < height - 2:
            stdscr.addnstr(line, 0, text, width - 1)
        line += 1

    line += 1
    if line < height - 1:
        stdscr.addnstr(line, 0, sep, width - 1)
        line += 1

    help_line = "[n]ext [p]rev [c]ontinuous [r]ound [s]olution [q]uit"
    if line < height:
        stdscr.addnstr(line, 0, help_line, width - 1)

    stdscr.refresh()


def input_number(stdscr, prompt: str) -> int | None:
    """Get a number from the user."""
    height, width = stdscr.getmaxyx()
    stdscr.addnstr(height - 2, 0, prompt, width - 1)
    stdscr.clrtoeol()
    stdscr.refresh()

    curses.echo()
    curses.curs_set(1)
    try:
        inp = stdscr.getstr(height - 2, len(prompt), 10).decode("utf-8")
        return int(inp) if inp.strip() else None
    except (ValueError, curses.error):
        return None
    finally:
        curses.noecho()
        curses.curs_set(0)


def find_round_start(states: list[ViewState], round_num: int) -> int | None:
    """Find the step index for the start of a round."""
    for i, s in enumerate(states):
        if s.round == round_num:
            return i
    return None


def main_loop(stdscr, states: list[ViewState]) -> None:
    """Main event loop."""
    curses.curs_set(0)
    stdscr.nodelay(False)
    stdscr.timeout(-1)

    step = 0
    total = len(states)
    show_layout = False

    while True:
        draw_screen(stdscr, states[step], step, total, show_layout)

        try:
            key = stdscr.getch()
        except curses.error:
            continue

        if key == ord("q"):
            break
        elif key == ord("n"):
            if step < total - 1:
                step += 1
        elif key == ord("p"):
            if step > 0:
                step -= 1
        elif key == ord("s"):
            show_layout = not show_layout
        elif key == ord("c"):
            # Continuous playback
            stdscr.nodelay(True)
            stdscr.timeout(1000)
            while step < total - 1:
                step += 1
                draw_screen(stdscr, states[step], step, total, show_layout)
                try:
                    k = stdscr.getch()
                    if k != -1:
                        break
                except curses.error:
                    pass
            stdscr.nodelay(False)
            stdscr.timeout(-1)
        elif key == ord("r"):
            num = input_number(stdscr, "Jump to round: ")
            if num is not None:
                idx = find_round_start(states, num)
                if idx is not None:
                    step = idx


def main() -> int:
    """Entry point."""
    parser = argparse.ArgumentParser(
        description="Interactive viewer for Memory Match game logs"
    )
    parser.add_argument("logfile", type=Path, help="Path to game log file (JSONL)")
    args = parser.parse_args()

    if not args.logfile.exists():
        print(f"Error: File not found: {args.logfile}", file=sys.stderr)
        return 1

    print(f"Loading {args.logfile}...")
    events = load_events(args.logfile)
    print(f"Loaded {len(events)} events")

    states = build_states(events)
    print(f"Built {len(states)} displayable states")

    if not states:
        print("Error: No states to display", file=sys.stderr)
        return 1

    curses.wrapper(lambda stdscr: main_loop(stdscr, states))
    return 0


if __name__ == "__main__":
    sys.exit(main())
