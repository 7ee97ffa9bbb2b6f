"""
Pre-computed feature context for slash-command templates.

Maps the resolved feature to its artifact paths, validates the artifacts a
command needs, and lists which optional documents are present. The result
is handed to template rendering as {{.FeatureDir}}, {{.ImplPlan}}, etc.
"""

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path

from autospec.lib.constants import (
    CHECKLISTS_DIR,
    PLAN_FILE,
    SPEC_FILE,
    TASKS_FILE,
)
from autospec.lib.errors import PrerequisiteError, ResolutionError
from autospec.prereqs.resolver import ResolutionSignals, resolve
from autospec.spec import FeatureIdentity
from autospec.version import version_string

logger = logging.getLogger(__name__)

CREATED_DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


@dataclass(frozen=True)
class RequirementFlags:
    """Which artifacts a command needs before it can run."""
    require_spec: bool = False
    require_plan: bool = False
    require_tasks: bool = False
    include_tasks: bool = False  # List tasks.yaml in available docs
    paths_only: bool = False  # Skip validation entirely

    @property
    def effective_require_plan(self) -> bool:
        """Plan is required unless the caller asked for spec or tasks instead."""
        return self.require_plan or (not self.require_spec and not self.require_tasks)


@dataclass(frozen=True)
class ResolutionContext:
    """Feature paths and metadata for template rendering."""
    feature_dir: str = ""
    feature_spec: str = ""
    impl_plan: str = ""
    tasks_file: str = ""
    version: str = ""
    created_date: str = ""
    is_git_repo: bool = False
    available_docs: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        """Template/JSON keys, matching the prereqs command output."""
        return {
            "FEATURE_DIR": self.feature_dir,
            "FEATURE_SPEC": self.feature_spec,
            "IMPL_PLAN": self.impl_plan,
            "TASKS": self.tasks_file,
            "AVAILABLE_DOCS": list(self.available_docs),
            "AUTOSPEC_VERSION": self.version,
            "CREATED_DATE": self.created_date,
            "IS_GIT_REPO": self.is_git_repo,
        }


def build_context(identity: FeatureIdentity | None, signals: ResolutionSignals) -> ResolutionContext:
    """Build a context for identity. Never raises; paths stay empty without a feature."""
    paths = {}
    if identity is not None:
        feature_dir = identity.directory
        paths = {
            "feature_dir": str(feature_dir),
            "feature_spec": str(feature_dir / SPEC_FILE),
            "impl_plan": str(feature_dir / PLAN_FILE),
            "tasks_file": str(feature_dir / TASKS_FILE),
        }

    return ResolutionContext(
        version=version_string(signals.version),
        created_date=signals.clock().strftime(CREATED_DATE_FORMAT),
        is_git_repo=signals.has_git,
        **paths,
    )


def validate_context(ctx: ResolutionContext, flags: RequirementFlags) -> None:
    """
    Check the feature directory and required artifacts exist.

    Stops at the first problem.

    Raises:
        PrerequisiteError: Naming the missing directory or artifact and the
            command that creates it
    """
    if not ctx.feature_dir:
        raise PrerequisiteError("feature directory not detected", missing="feature directory")

    feature_dir = Path(ctx.feature_dir)
    if not feature_dir.exists():
        raise PrerequisiteError(
            f"feature directory not found: {ctx.feature_dir}\n"
            "Run /autospec.specify first to create the feature structure",
            missing=ctx.feature_dir,
            remedy="/autospec.specify",
        )

    checks = [
        (flags.require_spec, ctx.feature_spec, SPEC_FILE, "/autospec.specify", "create the spec"),
        (flags.effective_require_plan, ctx.impl_plan, PLAN_FILE, "/autospec.plan", "create the plan"),
        (flags.require_tasks, ctx.tasks_file, TASKS_FILE, "/autospec.tasks", "create tasks"),
    ]
    for required, path, name, remedy, action in checks:
        if required and not Path(path).exists():
            raise PrerequisiteError(
                f"no {name} found in {ctx.feature_dir}\n"
                f"Run {remedy} first to {action}",
                missing=name,
                remedy=remedy,
            )


def list_available_docs(ctx: ResolutionContext, include_tasks: bool) -> list[str]:
    """List artifacts present in the feature directory, in fixed order."""
    if not ctx.feature_dir:
        return []

    docs = []
    if Path(ctx.feature_spec).exists():
        docs.append(SPEC_FILE)
    if Path(ctx.impl_plan).exists():
        docs.append(PLAN_FILE)
    if include_tasks and Path(ctx.tasks_file).exists():
        docs.append(TASKS_FILE)

    checklists = Path(ctx.feature_dir) / CHECKLISTS_DIR
    try:
        if checklists.is_dir() and any(checklists.iterdir()):
            docs.append(f"{CHECKLISTS_DIR}/")
    except OSError as e:
        logger.debug(f"Could not read {checklists}: {e}")

    return docs


def compute_context(flags: RequirementFlags, signals: ResolutionSignals) -> ResolutionContext:
    """
    Resolve the current feature and assemble its validated context.

    With flags.paths_only, resolution failures are tolerated and validation is
    skipped, so callers always get a best-effort context.

    Raises:
        ResolutionError: If no feature can be detected (unless paths_only)
        PrerequisiteError: If a required artifact is missing (unless paths_only)
    """
    try:
        identity = resolve(signals)
    except ResolutionError:
        if not flags.paths_only:
            raise
        logger.debug("No feature detected; returning paths-only context without paths")
        identity = None

    ctx = build_context(identity, signals)
    if flags.paths_only:
        return ctx

    validate_context(ctx, flags)
    return replace(ctx, available_docs=tuple(list_available_docs(ctx, flags.include_tasks)))
