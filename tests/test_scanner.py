"""Tests for autospec.spec.scanner module."""

import os

import pytest

from autospec.lib.errors import FeatureNotFoundError
from autospec.spec import (
    DetectionSource,
    FeatureIdentity,
    detect_current_feature,
    generate_branch_name,
    list_features,
    next_feature_number,
    parse_feature_name,
    resolve_by_identifier,
    slugify,
    truncate_branch_name,
)


def make_features(specs_dir, *names):
    """Create feature directories with increasing mtimes (last is newest)."""
    for i, name in enumerate(names):
        d = specs_dir / name
        d.mkdir(parents=True)
        os.utime(d, (1_700_000_000 + i * 60, 1_700_000_000 + i * 60))


class TestParseFeatureName:
    """Tests for parse_feature_name()."""

    def test_parses_number_and_slug(self):
        assert parse_feature_name("003-user-auth") == ("003", "user-auth")

    def test_rejects_missing_prefix(self):
        assert parse_feature_name("user-auth") is None

    def test_rejects_short_number(self):
        assert parse_feature_name("03-user-auth") is None

    def test_rejects_empty_slug(self):
        assert parse_feature_name("003-") is None


class TestListFeatures:
    """Tests for list_features()."""

    def test_missing_root_is_empty(self, tmp_path):
        assert list_features(tmp_path / "specs") == []

    def test_sorted_by_number_and_ignores_noise(self, tmp_path):
        make_features(tmp_path, "010-later", "002-early", "notes")
        (tmp_path / "004-a-file.yaml").write_text("")

        features = list_features(tmp_path)

        assert [f.spec_id for f in features] == ["002-early", "010-later"]
        assert all(f.directory.is_absolute() for f in features)


class TestDetectCurrentFeature:
    """Tests for detect_current_feature()."""

    def test_missing_specs_dir_raises(self, tmp_path):
        with pytest.raises(FeatureNotFoundError, match="specs directory not found"):
            detect_current_feature(tmp_path / "specs")

    def test_empty_specs_dir_raises(self, tmp_path):
        with pytest.raises(FeatureNotFoundError, match="no spec directories"):
            detect_current_feature(tmp_path)

    def test_branch_selects_matching_directory(self, tmp_path):
        make_features(tmp_path, "001-first", "002-second")
        feature = detect_current_feature(tmp_path, "001-first")
        assert feature.spec_id == "001-first"
        assert feature.detection == DetectionSource.GIT_BRANCH
        assert feature.branch == "001-first"

    def test_branch_matches_by_number(self, tmp_path):
        make_features(tmp_path, "001-first", "002-second")
        feature = detect_current_feature(tmp_path, "001-renamed-branch")
        assert feature.spec_id == "001-first"
        assert feature.detection == DetectionSource.GIT_BRANCH

    def test_falls_back_to_most_recent(self, tmp_path):
        make_features(tmp_path, "002-second", "001-first")
        feature = detect_current_feature(tmp_path, "main")
        assert feature.spec_id == "001-first"
        assert feature.detection == DetectionSource.FALLBACK
        assert feature.branch is None

    def test_unknown_feature_branch_falls_back(self, tmp_path):
        make_features(tmp_path, "001-first")
        feature = detect_current_feature(tmp_path, "099-elsewhere")
        assert feature.spec_id == "001-first"
        assert feature.detection == DetectionSource.FALLBACK


class TestResolveByIdentifier:
    """Tests for resolve_by_identifier()."""

    @pytest.mark.parametrize("identifier", ["003-user-auth", "003", "3", "user-auth", " 003 "])
    def test_accepted_forms(self, tmp_path, identifier):
        make_features(tmp_path, "001-other", "003-user-auth")
        feature = resolve_by_identifier(tmp_path, identifier)
        assert feature.spec_id == "003-user-auth"
        assert feature.detection == DetectionSource.EXPLICIT

    def test_unknown_identifier_raises(self, tmp_path):
        make_features(tmp_path, "001-other")
        with pytest.raises(FeatureNotFoundError, match="spec not found: 042-nope"):
            resolve_by_identifier(tmp_path, "042-nope")

    @pytest.mark.parametrize("identifier", ["003-user-auth/..", "003-user-auth/drafts", "../003-user-auth"])
    def test_path_identifier_raises(self, tmp_path, identifier):
        make_features(tmp_path, "003-user-auth")
        (tmp_path / "003-user-auth" / "drafts").mkdir()
        with pytest.raises(FeatureNotFoundError, match="invalid feature identifier"):
            resolve_by_identifier(tmp_path, identifier)

    def test_empty_identifier_raises(self, tmp_path):
        with pytest.raises(FeatureNotFoundError):
            resolve_by_identifier(tmp_path, "  ")


class TestFeatureIdentity:
    """Tests for FeatureIdentity helpers."""

    def test_format_info_names_detection(self, tmp_path):
        identity = FeatureIdentity("005", "dark-mode", tmp_path, DetectionSource.ENV_VAR)
        assert identity.format_info() == "✓ Using spec: 005-dark-mode (via SPECIFY_FEATURE env)"

    def test_with_detection_returns_copy(self, tmp_path):
        identity = FeatureIdentity("005", "dark-mode", tmp_path)
        tagged = identity.with_detection(DetectionSource.FALLBACK)
        assert tagged.detection == DetectionSource.FALLBACK
        assert identity.detection == DetectionSource.EXPLICIT


class TestNextFeatureNumber:
    """Tests for next_feature_number()."""

    def test_first_feature(self, tmp_path):
        assert next_feature_number(tmp_path / "specs") == "001"

    def test_after_highest_directory(self, tmp_path):
        make_features(tmp_path, "001-a", "007-b")
        assert next_feature_number(tmp_path) == "008"

    def test_considers_branches(self, tmp_path):
        make_features(tmp_path, "001-a")
        assert next_feature_number(tmp_path, ["main", "012-remote-only"]) == "013"


class TestBranchNames:
    """Tests for branch name helpers."""

    def test_slugify(self):
        assert slugify("  Add OAuth2 / SSO!! ") == "add-oauth2-sso"

    def test_generate_drops_stop_words(self):
        assert generate_branch_name("Add user authentication to the app") == "user-authentication-app"

    def test_generate_keeps_four_when_exactly_four(self):
        assert generate_branch_name("payment retry queue monitoring") == "payment-retry-queue-monitoring"

    def test_generate_keeps_three_of_many(self):
        assert generate_branch_name("export reports as csv files nightly") == "export-reports-csv"

    def test_generate_falls_back_to_slug(self):
        assert generate_branch_name("to be or") == "to-be-or"

    def test_truncate_leaves_short_names(self):
        assert truncate_branch_name("001-short") == "001-short"

    def test_truncate_strips_trailing_dash(self):
        name = "001-" + "ab-" * 100
        truncated = truncate_branch_name(name)
        assert len(truncated.encode()) <= 244
        assert not truncated.endswith("-")
