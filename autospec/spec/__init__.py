"""
Feature directory model for autospec.

Parses NNN-slug feature directories under the specs root and detects
which one the user is working on.
"""

from autospec.spec.scanner import (
    DetectionSource,
    FeatureIdentity,
    parse_feature_name,
    list_features,
    detect_current_feature,
    resolve_by_identifier,
    next_feature_number,
    format_feature_number,
    slugify,
    generate_branch_name,
    truncate_branch_name,
)

__all__ = [
    "DetectionSource",
    "FeatureIdentity",
    "parse_feature_name",
    "list_features",
    "detect_current_feature",
    "resolve_by_identifier",
    "next_feature_number",
    "format_feature_number",
    "slugify",
    "generate_branch_name",
    "truncate_branch_name",
]
