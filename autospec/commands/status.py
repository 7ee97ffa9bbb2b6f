"""
autospec status - Show the detected feature and its artifacts.
"""

import sys
from pathlib import Path

from autospec.lib.config import Config
from autospec.lib.constants import CHECKLISTS_DIR, PLAN_FILE, SPEC_FILE, TASKS_FILE
from autospec.lib.errors import ResolutionError
from autospec.prereqs import ResolutionSignals, build_context, list_available_docs, resolve


def cmd_status(args, config: Config, signals: ResolutionSignals | None = None) -> int:
    """Print which spec is active, how it was detected, and which artifacts exist."""
    signals = signals or ResolutionSignals.from_environment(config.specs_dir)

    try:
        identity = resolve(signals)
    except ResolutionError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    args.spec_id = identity.spec_id
    ctx = build_context(identity, signals)
    present = set(list_available_docs(ctx, include_tasks=True))

    print(identity.format_info())
    print("=" * 60)
    print()
    print(f"Directory:      {ctx.feature_dir}")
    if identity.branch:
        print(f"Branch:         {identity.branch}")
    print(f"Git repository: {'yes' if ctx.is_git_repo else 'no'}")
    print()
    print("Artifacts:")
    for name in (SPEC_FILE, PLAN_FILE, TASKS_FILE):
        marker = "✓" if name in present else "✗"
        print(f"  {marker} {name}")

    checklists = Path(ctx.feature_dir) / CHECKLISTS_DIR
    if f"{CHECKLISTS_DIR}/" in present:
        count = sum(1 for _ in checklists.iterdir())
        print(f"  ✓ {CHECKLISTS_DIR}/ ({count} item(s))")
    else:
        print(f"  ✗ {CHECKLISTS_DIR}/")

    return 0
