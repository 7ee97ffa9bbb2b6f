"""
autospec new-feature - Create a new feature branch and directory.

Creates:
- Git branch NNN-short-name (when inside a git repository)
- Feature directory specs/NNN-short-name

spec.yaml itself is written later by /autospec.specify.
"""

import json
import sys
from pathlib import Path

from autospec import git
from autospec.lib.config import Config
from autospec.lib.constants import FEATURE_ENV_VAR, SPEC_FILE
from autospec.spec import (
    format_feature_number,
    generate_branch_name,
    next_feature_number,
    slugify,
    truncate_branch_name,
)
from autospec.prereqs import ResolutionSignals, build_context


def cmd_new_feature(args, config: Config, cwd: Path | None = None) -> int:
    """Allocate the next feature number and create its branch and directory."""
    cwd = cwd or Path.cwd()
    specs_dir = config.specs_dir
    if not specs_dir.is_absolute():
        specs_dir = cwd / specs_dir

    has_git = git.is_inside_repo(cwd)

    if args.number is not None:
        if args.number < 0:
            print("ERROR: --number must be a positive integer", file=sys.stderr)
            return 2
        feature_num = format_feature_number(args.number)
    else:
        branches = git.list_branches(cwd) if has_git else []
        feature_num = next_feature_number(specs_dir, branches)

    if args.short_name:
        suffix = slugify(args.short_name)
    else:
        suffix = generate_branch_name(args.description)
    if not suffix:
        print("ERROR: Could not derive a branch name from the description", file=sys.stderr)
        return 2

    branch_name = truncate_branch_name(f"{feature_num}-{suffix}")

    if has_git:
        result = git.create_branch(cwd, branch_name)
        if not result.success:
            # Existing branch is fine, the directory may still be missing
            print(f"[specify] Warning: {result.stderr.strip()}", file=sys.stderr)
    else:
        print(
            f"[specify] Warning: Git repository not detected; skipped branch creation for {branch_name}",
            file=sys.stderr,
        )

    feature_dir = specs_dir / branch_name
    try:
        feature_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        print(f"ERROR: Failed to create feature directory: {e}", file=sys.stderr)
        return 1

    args.spec_id = branch_name
    ctx = build_context(None, ResolutionSignals(specs_dir=specs_dir, has_git=has_git))
    output = {
        "BRANCH_NAME": branch_name,
        "SPEC_FILE": str(feature_dir / SPEC_FILE),
        "FEATURE_NUM": feature_num,
        "AUTOSPEC_VERSION": ctx.version,
        "CREATED_DATE": ctx.created_date,
    }

    if args.json:
        print(json.dumps(output))
        return 0

    for key, value in output.items():
        print(f"{key}: {value}")
    print(f"Export {FEATURE_ENV_VAR}={branch_name} to pin this feature in other shells")
    return 0
