#!/usr/bin/env python3
"""autospec CLI entrypoint."""

import argparse
import logging
import sys
import time
from datetime import timedelta
from pathlib import Path

from autospec.commands import history as cmd_history_module
from autospec.commands import new_feature as cmd_new_feature_module
from autospec.commands import prereqs as cmd_prereqs_module
from autospec.commands import status as cmd_status_module
from autospec.lib.config import Config, load_config
from autospec.lib.errors import AutospecError, ConfigError
from autospec.lib.history import HistoryWriter
from autospec.version import VERSION

logger = logging.getLogger(__name__)


def get_config(args) -> Config:
    """Load layered config, then apply command-line overrides."""
    config = load_config(project_config=args.config)
    if args.specs_dir:
        config.specs_dir = Path(args.specs_dir)
    return config


def run_recorded(func, args, config: Config) -> int:
    """Run a command and append it to the history log.

    A command that raises is recorded with exit code 1. History failures are
    logged by the writer and never change the exit code.
    """
    start = time.monotonic()
    exit_code = 1
    try:
        exit_code = func(args, config)
        return exit_code
    finally:
        elapsed = timedelta(seconds=time.monotonic() - start)
        writer = HistoryWriter(config.state_dir, config.max_history_entries)
        writer.log_command(args.command, getattr(args, "spec_id", ""), exit_code, elapsed)


def cmd_prereqs(args, config: Config) -> int:
    return cmd_prereqs_module.cmd_prereqs(args, config)


def cmd_status(args, config: Config) -> int:
    return cmd_status_module.cmd_status(args, config)


def cmd_history(args, config: Config) -> int:
    return cmd_history_module.cmd_history(args, config)


def cmd_new_feature(args, config: Config) -> int:
    return cmd_new_feature_module.cmd_new_feature(args, config)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='autospec', description='Spec-driven development workflow CLI')
    parser.add_argument('--version', action='version', version=f'autospec {VERSION}')
    parser.add_argument('--specs-dir', help='Directory containing feature specs (default: ./specs)')
    parser.add_argument('--config', type=Path, help='Project config file (default: .autospec/config.yml)')
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging to stderr')
    subparsers = parser.add_subparsers(dest='command', required=True)

    # autospec prereqs
    p_prereqs = subparsers.add_parser('prereqs', help='Check prerequisites for workflow stages')
    p_prereqs.add_argument('--json', action='store_true', help='Output in JSON format')
    p_prereqs.add_argument('--require-spec', action='store_true', help='Require spec.yaml to exist')
    p_prereqs.add_argument('--require-plan', action='store_true', help='Require plan.yaml to exist (default behavior)')
    p_prereqs.add_argument('--require-tasks', action='store_true', help='Require tasks.yaml to exist')
    p_prereqs.add_argument('--include-tasks', action='store_true', help='Include tasks.yaml in AVAILABLE_DOCS list')
    p_prereqs.add_argument('--paths-only', action='store_true', help='Only output path variables (no validation)')
    p_prereqs.set_defaults(func=cmd_prereqs, record=True)

    # autospec status
    p_status = subparsers.add_parser('status', help='Show detected feature and its artifacts')
    p_status.set_defaults(func=cmd_status, record=True)

    # autospec history
    p_history = subparsers.add_parser('history', help='View command execution history')
    p_history.add_argument('--spec', '-s', help='Filter by spec name')
    p_history.add_argument('--limit', '-n', type=int, default=0, help='Limit to last N entries (most recent)')
    p_history.add_argument('--clear', '-c', action='store_true', help='Clear all history')
    p_history.set_defaults(func=cmd_history, record=False)

    # autospec new-feature
    p_new = subparsers.add_parser('new-feature', help='Create a new feature branch and directory')
    p_new.add_argument('description', help='Feature description')
    p_new.add_argument('--short-name', help='Custom short name for the branch (2-4 words)')
    p_new.add_argument('--number', type=int, help='Feature number (overrides auto-detection)')
    p_new.add_argument('--json', action='store_true', help='Output in JSON format')
    p_new.set_defaults(func=cmd_new_feature, record=True)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        config = get_config(args)
    except ConfigError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    try:
        if args.record:
            return run_recorded(args.func, args, config)
        return args.func(args, config)
    except AutospecError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
