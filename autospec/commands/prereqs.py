"""
autospec prereqs - Check prerequisites for a workflow stage.

Validates that the artifacts a stage needs exist in the current feature
directory and prints their paths for slash-command templates.
"""

import json
import sys
from pathlib import Path

from autospec.lib.config import Config
from autospec.lib.errors import PrerequisiteError, ResolutionError
from autospec.prereqs import RequirementFlags, ResolutionSignals, compute_context


def flags_from_args(args) -> RequirementFlags:
    return RequirementFlags(
        require_spec=args.require_spec,
        require_plan=args.require_plan,
        require_tasks=args.require_tasks,
        include_tasks=args.include_tasks,
        paths_only=args.paths_only,
    )


def cmd_prereqs(args, config: Config, signals: ResolutionSignals | None = None) -> int:
    """Resolve the current feature and print its validated context."""
    signals = signals or ResolutionSignals.from_environment(config.specs_dir)

    try:
        ctx = compute_context(flags_from_args(args), signals)
    except (ResolutionError, PrerequisiteError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    if ctx.feature_dir:
        args.spec_id = Path(ctx.feature_dir).name

    output = ctx.to_dict()
    if args.json:
        print(json.dumps(output))
        return 0

    print(f"FEATURE_DIR:{output['FEATURE_DIR']}")
    print(f"FEATURE_SPEC:{output['FEATURE_SPEC']}")
    print(f"IMPL_PLAN:{output['IMPL_PLAN']}")
    print(f"TASKS:{output['TASKS']}")
    print("AVAILABLE_DOCS:")
    for doc in output["AVAILABLE_DOCS"]:
        print(f"  ✓ {doc}")
    return 0
