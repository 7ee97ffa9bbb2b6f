"""
Command execution history.

Keeps a bounded log of past autospec invocations in <state_dir>/history.yaml.
Each append rewrites the whole file; when the log grows past max_entries the
oldest entries are dropped first.

Logging history must never affect the command being logged, so
HistoryWriter reports failures through the logger and a HistoryOutcome
instead of raising. There is no locking: concurrent writers can lose each
other's entries.
"""

import logging
import os
import tempfile
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from pathlib import Path

import yaml

from autospec.lib.constants import HISTORY_FILE
from autospec.lib.errors import HistoryError
from autospec.lib.validate import ValidationError, validate, validate_before_write

logger = logging.getLogger(__name__)


@dataclass
class HistoryEntry:
    """A single command invocation."""
    timestamp: datetime
    command: str
    spec: str = ""  # Spec ID the command ran against, "" if none
    exit_code: int = 0
    duration: str = "0s"  # Human-readable, e.g. "2m30s"

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp.isoformat(),
            "command": self.command,
            "spec": self.spec,
            "exit_code": self.exit_code,
            "duration": self.duration,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "HistoryEntry":
        return cls(
            timestamp=datetime.fromisoformat(data["timestamp"]),
            command=data["command"],
            spec=data.get("spec", ""),
            exit_code=data["exit_code"],
            duration=data["duration"],
        )


@dataclass
class HistoryLog:
    """Ordered history entries, oldest first."""
    entries: list[HistoryEntry] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"entries": [e.to_dict() for e in self.entries]}


@dataclass(frozen=True)
class HistoryOutcome:
    """Result of a history append. A suppressed outcome was logged, not raised."""
    logged: bool
    error: str | None = None

    @classmethod
    def ok(cls) -> "HistoryOutcome":
        return cls(logged=True)

    @classmethod
    def suppressed(cls, error: str) -> "HistoryOutcome":
        return cls(logged=False, error=error)


def history_path(state_dir: Path) -> Path:
    return Path(state_dir) / HISTORY_FILE


def load_history(state_dir: Path) -> HistoryLog:
    """
    Load the history log. A missing file is an empty log.

    Raises:
        HistoryError: If the file can't be read, isn't valid YAML, or doesn't
            match the history schema
    """
    path = history_path(state_dir)
    if not path.exists():
        return HistoryLog()

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
        raise HistoryError(f"reading {path}: {e}") from e

    if data is None:
        return HistoryLog()
    if isinstance(data, dict):
        # Hand-edited files may hold unquoted timestamps, which YAML parses
        for item in data.get("entries") or []:
            if isinstance(item, dict) and isinstance(item.get("timestamp"), datetime):
                item["timestamp"] = item["timestamp"].isoformat()

    try:
        validate(data, "history")
        return HistoryLog(entries=[HistoryEntry.from_dict(e) for e in data["entries"]])
    except (ValidationError, ValueError) as e:
        raise HistoryError(f"invalid history file {path}: {e}") from e


def save_history(state_dir: Path, log: HistoryLog) -> None:
    """
    Overwrite the history file with log, creating state_dir if needed.

    Writes to a temp file and renames it into place so a crash never leaves a
    truncated file behind.

    Raises:
        HistoryError: If validation or the write fails
    """
    path = history_path(state_dir)
    data = log.to_dict()
    try:
        validate_before_write(data, "history", path)
    except ValidationError as e:
        raise HistoryError(str(e)) from e

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=".history-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                yaml.safe_dump(data, f, sort_keys=False, allow_unicode=True)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
    except OSError as e:
        raise HistoryError(f"writing {path}: {e}") from e


def clear_history(state_dir: Path) -> None:
    """Delete the history file if present."""
    path = history_path(state_dir)
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        raise HistoryError(f"removing {path}: {e}") from e


def prune_entries(entries: list[HistoryEntry], max_entries: int) -> list[HistoryEntry]:
    """Keep the newest max_entries entries (0 means unlimited)."""
    if max_entries > 0 and len(entries) > max_entries:
        return entries[len(entries) - max_entries:]
    return entries


def filter_entries(
    entries: list[HistoryEntry],
    spec: str | None = None,
    limit: int = 0,
) -> list[HistoryEntry]:
    """Filter by spec name, then keep the most recent limit entries (0 = all)."""
    result = [e for e in entries if not spec or e.spec == spec]
    if limit > 0 and len(result) > limit:
        result = result[-limit:]
    return result


def _format_fraction(value: int, unit: int) -> str:
    whole, rem = divmod(value, unit)
    if not rem:
        return str(whole)
    digits = len(str(unit)) - 1
    return f"{whole}.{str(rem).zfill(digits).rstrip('0')}"


def format_duration(duration: timedelta) -> str:
    """Format a duration compactly: "0s", "250ms", "1.5s", "2m30s", "1h0m5s"."""
    ns = (duration // timedelta(microseconds=1)) * 1000
    if ns == 0:
        return "0s"

    sign = "-" if ns < 0 else ""
    ns = abs(ns)

    if ns < 1_000:
        return f"{sign}{ns}ns"
    if ns < 1_000_000:
        return f"{sign}{_format_fraction(ns, 1_000)}µs"
    if ns < 1_000_000_000:
        return f"{sign}{_format_fraction(ns, 1_000_000)}ms"

    hours, ns = divmod(ns, 3_600 * 1_000_000_000)
    minutes, ns = divmod(ns, 60 * 1_000_000_000)
    seconds = _format_fraction(ns, 1_000_000_000) + "s"
    if hours:
        return f"{sign}{hours}h{minutes}m{seconds}"
    if minutes:
        return f"{sign}{minutes}m{seconds}"
    return f"{sign}{seconds}"


class HistoryWriter:
    """Appends entries to the history file, pruning the oldest past max_entries."""

    def __init__(self, state_dir: Path, max_entries: int):
        self.state_dir = Path(state_dir)
        self.max_entries = max_entries

    def log_entry(self, entry: HistoryEntry) -> HistoryOutcome:
        """Append entry. Never raises; failures are logged and returned."""
        try:
            log = load_history(self.state_dir)
            log.entries.append(entry)
            log.entries = prune_entries(log.entries, self.max_entries)
            save_history(self.state_dir, log)
        except (HistoryError, OSError) as e:
            logger.warning(f"Failed to log history: {e}")
            return HistoryOutcome.suppressed(str(e))
        return HistoryOutcome.ok()

    def log_command(
        self,
        command: str,
        spec: str,
        exit_code: int,
        duration: timedelta,
    ) -> HistoryOutcome:
        """Record a command execution stamped with the current time."""
        return self.log_entry(HistoryEntry(
            timestamp=datetime.now(timezone.utc),
            command=command,
            spec=spec,
            exit_code=exit_code,
            duration=format_duration(duration),
        ))
