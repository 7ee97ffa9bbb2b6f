"""Feature resolution and prerequisite checks for slash commands."""

from autospec.prereqs.resolver import (
    NotFound,
    ResolutionSignals,
    first_success,
    from_env_override,
    from_scan,
    resolve,
)
from autospec.prereqs.context import (
    RequirementFlags,
    ResolutionContext,
    build_context,
    validate_context,
    list_available_docs,
    compute_context,
)

__all__ = [
    "NotFound",
    "ResolutionSignals",
    "first_success",
    "from_env_override",
    "from_scan",
    "resolve",
    "RequirementFlags",
    "ResolutionContext",
    "build_context",
    "validate_context",
    "list_available_docs",
    "compute_context",
]
