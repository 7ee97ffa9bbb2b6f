"""
autospec history - View command execution history.

Shows timestamp, command, spec, exit code, and duration for past runs,
oldest first.
"""

import sys

from rich.console import Console
from rich.markup import escape

from autospec.lib.config import Config
from autospec.lib.errors import HistoryError
from autospec.lib.history import HistoryEntry, clear_history, filter_entries, load_history

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def format_entry(entry: HistoryEntry) -> str:
    """Format one entry as a single line of Rich markup."""
    timestamp = entry.timestamp.astimezone().strftime(TIMESTAMP_FORMAT)
    color = "green" if entry.exit_code == 0 else "red"
    spec = entry.spec or "-"
    return (
        f"[cyan]{timestamp}[/cyan]  {escape(f'{entry.command:<12}')}  "
        f"{escape(f'{spec:<15}')}  exit=[{color}]{entry.exit_code}[/{color}]  "
        f"{escape(entry.duration)}"
    )


def cmd_history(args, config: Config, console: Console | None = None) -> int:
    """List, filter, or clear the history log."""
    console = console or Console(highlight=False, soft_wrap=True)

    if args.limit < 0:
        print(f"ERROR: limit must be positive, got {args.limit}", file=sys.stderr)
        return 2

    if args.clear:
        try:
            clear_history(config.state_dir)
        except HistoryError as e:
            print(f"ERROR: clearing history: {e}", file=sys.stderr)
            return 1
        console.print("History cleared.")
        return 0

    try:
        log = load_history(config.state_dir)
    except HistoryError as e:
        print(f"ERROR: loading history: {e}", file=sys.stderr)
        return 1

    entries = filter_entries(log.entries, spec=args.spec, limit=args.limit)
    if not entries:
        if args.spec:
            console.print(f"No matching entries for spec '{args.spec}'.", markup=False)
        else:
            console.print("No history available.")
        return 0

    for entry in entries:
        console.print(format_entry(entry))
    return 0
