"""
Current-feature resolution.

Resolution runs an ordered list of strategies and takes the first one that
finds a feature:

1. SPECIFY_FEATURE override (a stale or unknown value falls through)
2. Branch name / most recently modified spec directory

When both miss, the failure is refined using the current git branch so the
user sees why detection failed.

All inputs arrive through ResolutionSignals; nothing here reads the process
environment, so tests construct signals directly.
"""

import logging
import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Iterable

from autospec import git
from autospec.lib.constants import FEATURE_ENV_VAR
from autospec.lib.errors import FeatureNotFoundError, ResolutionError
from autospec.spec import (
    DetectionSource,
    FeatureIdentity,
    detect_current_feature,
    resolve_by_identifier,
)
from autospec.version import VERSION

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ResolutionSignals:
    """Everything resolution and context building read from the outside world."""
    specs_dir: Path
    env_feature: str | None = None  # Value of SPECIFY_FEATURE
    has_git: bool = False
    branch: str | None = None  # Current branch, None if detached or no repo
    version: str = VERSION
    clock: Callable[[], datetime] = field(default=_utc_now, compare=False)

    @classmethod
    def from_environment(cls, specs_dir: Path, cwd: Path | None = None) -> "ResolutionSignals":
        """Snapshot the real environment: override variable, git state, version."""
        cwd = cwd or Path.cwd()
        has_git = git.is_inside_repo(cwd)
        return cls(
            specs_dir=specs_dir,
            env_feature=os.environ.get(FEATURE_ENV_VAR) or None,
            has_git=has_git,
            branch=git.get_current_branch(cwd) if has_git else None,
        )


@dataclass(frozen=True)
class NotFound:
    """A strategy that did not produce a feature, and why."""
    strategy: str
    reason: str
    cause: Exception | None = None


Strategy = Callable[[ResolutionSignals], FeatureIdentity | NotFound]


def from_env_override(signals: ResolutionSignals) -> FeatureIdentity | NotFound:
    """Use the SPECIFY_FEATURE override when it names an existing feature."""
    if not signals.env_feature:
        return NotFound("environment", f"{FEATURE_ENV_VAR} not set")
    try:
        identity = resolve_by_identifier(signals.specs_dir, signals.env_feature)
    except FeatureNotFoundError as e:
        logger.debug(f"Ignoring {FEATURE_ENV_VAR}={signals.env_feature!r}: {e}")
        return NotFound("environment", str(e), e)
    return identity.with_detection(DetectionSource.ENV_VAR)


def from_scan(signals: ResolutionSignals) -> FeatureIdentity | NotFound:
    """Detect from the branch name, else the most recently modified spec directory."""
    try:
        return detect_current_feature(signals.specs_dir, signals.branch)
    except FeatureNotFoundError as e:
        return NotFound("scan", str(e), e)


DEFAULT_STRATEGIES: tuple[Strategy, ...] = (from_env_override, from_scan)


def first_success(
    strategies: Iterable[Strategy],
    signals: ResolutionSignals,
) -> FeatureIdentity | list[NotFound]:
    """Run strategies in order; return the first identity, or every miss."""
    misses = []
    for strategy in strategies:
        outcome = strategy(signals)
        if isinstance(outcome, FeatureIdentity):
            return outcome
        misses.append(outcome)
    return misses


def resolve(
    signals: ResolutionSignals,
    strategies: Iterable[Strategy] = DEFAULT_STRATEGIES,
) -> FeatureIdentity:
    """
    Resolve the current feature.

    Raises:
        ResolutionError: If no strategy finds a feature. When inside a git repo
            on a named branch, the message names that branch and the expected
            NNN-feature-name pattern.
    """
    outcome = first_success(strategies, signals)
    if isinstance(outcome, FeatureIdentity):
        logger.debug(f"Resolved feature {outcome.spec_id} via {outcome.detection.value}")
        return outcome

    if signals.has_git and signals.branch:
        raise ResolutionError(
            f"not on a feature branch. Current branch: {signals.branch}\n"
            "Feature branches should be named like: 001-feature-name"
        )

    # The last miss is the scan, which carries the most useful cause
    last = outcome[-1] if outcome else NotFound("none", "no strategies configured")
    raise ResolutionError(f"could not detect current feature: {last.reason}") from last.cause
