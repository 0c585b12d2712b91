"""Tests for data models."""

import json
from datetime import datetime, timezone

import pytest

from gitqa.config import DEFAULT_KEYWORDS
from gitqa.models import (
    AggregationResult,
    AnalysisConfig,
    Commit,
    FileCount,
    MatchedCommit,
    MergeAnalysisResult,
    MergeCategory,
    MergeCommit,
)


class TestCommit:
    """Tests for Commit dataclass."""

    def test_required_fields(self):
        commit = Commit(sha="abc", message="fix")

        assert commit.author == ""
        assert commit.timestamp is None
        assert commit.changed_files == []
        assert commit.subject is None

    def test_from_mapping_alternate_keys(self):
        commit = Commit.from_mapping(
            {
                "hash": "abc",
                "message": "fix it",
                "author_name": "Dev",
                "date": "2024-01-15",
                "files": ["a.py", 3, "b.py"],
            }
        )

        assert commit.sha == "abc"
        assert commit.author == "Dev"
        assert commit.timestamp == "2024-01-15"
        assert commit.changed_files == ["a.py", "b.py"]

    def test_from_mapping_degrades(self):
        """Mistyped fields fall back to defaults instead of raising."""
        commit = Commit.from_mapping({"sha": 1, "message": None, "files": "a.py"})

        assert commit.sha == ""
        assert commit.message == ""
        assert commit.changed_files == []

    def test_merge_from_mapping(self):
        merge = MergeCommit.from_mapping(
            {"sha": "m", "message": "Merge", "parent_ids": ["p1", "p2"], "source_branch": "x"}
        )

        assert merge.parent_ids == ["p1", "p2"]
        assert merge.source_branch == "x"

    def test_merge_pull_request_from_mapping(self):
        assert MergeCommit.from_mapping({"sha": "m", "pull_request": 42}).pull_request == 42
        assert MergeCommit.from_mapping({"sha": "m", "pull_request": "42"}).pull_request is None


class TestAnalysisConfig:
    """Tests for AnalysisConfig."""

    def test_defaults(self):
        config = AnalysisConfig()

        assert config.effective_keywords() == DEFAULT_KEYWORDS
        assert config.effective_top_files_limit() == 10

    @pytest.mark.parametrize("limit", [0, -1, None, "3", True])
    def test_invalid_limit(self, limit):
        assert AnalysisConfig(top_files_limit=limit).effective_top_files_limit() == 10

    def test_keywords_string(self):
        assert AnalysisConfig(keywords="fix,revert").effective_keywords() == ["fix", "revert"]


@pytest.fixture
def result():
    return AggregationResult(
        total_commits=10,
        matched_commits=[
            MatchedCommit("s1", "hotfix login", "A", "2024-01-15", ["hotfix"]),
            MatchedCommit("s2", "fix parser", "B", "2024-01-16", ["fix"]),
            MatchedCommit("s3", "fix crash", "B", None, ["fix"]),
            MatchedCommit("s4", "hotfix patch", "A", "2024-01-16", ["hotfix", "patch"]),
        ],
        keyword_counts={"fix": 2, "hotfix": 2, "bugfix": 0, "resolve": 0, "patch": 1},
        file_touch_counts={"a.py": 3, "b.py": 1},
        top_files=[FileCount("a.py", 3), FileCount("b.py", 1)],
        trend_by_day={"2024-01-15": 1, "2024-01-16": 2, "unknown": 1},
        daily_total_counts={"2024-01-15": 2, "2024-01-16": 6, "unknown": 2},
        defect_fix_rate=0.4,
    )


class TestAggregationResult:
    """Tests for AggregationResult derived values."""

    def test_empty(self):
        empty = AggregationResult.empty(["fix", "revert"])

        assert empty.keyword_counts == {"fix": 0, "revert": 0}
        assert empty.hotfix_share == 0.0
        assert empty.hotspot_concentration == 0.0
        assert empty.commit_consistency == 0.0
        assert empty.code_stability == 1.0

    def test_matched_count(self, result):
        assert result.matched_count == 4

    def test_code_stability(self, result):
        assert result.code_stability == pytest.approx(0.6)

    def test_hotfix_share(self, result):
        assert result.hotfix_share == 0.5

    def test_hotspot_concentration(self, result):
        assert result.total_file_touches == 4
        assert result.hotspot_concentration == 0.75

    def test_total_fix_files(self, result):
        assert result.total_fix_files == 2

    def test_commit_consistency_ignores_unknown(self, result):
        """Mean of 2 and 6 is 4; peak is 6."""
        assert result.commit_consistency == pytest.approx(4 / 6)

    def test_to_dict_is_json_serialisable(self, result):
        data = result.to_dict()

        assert json.loads(json.dumps(data)) == data
        assert data["top_files"][0] == {"file": "a.py", "count": 3}
        assert data["hotfix_share"] == 0.5

    def test_to_dict_is_a_copy(self, result):
        data = result.to_dict()
        data["keyword_counts"]["fix"] = 99

        assert result.keyword_counts["fix"] == 2


class TestMergeAnalysisResult:
    """Tests for MergeAnalysisResult."""

    def test_defaults(self):
        merge_result = MergeAnalysisResult()

        assert merge_result.category_counts == {category: 0 for category in MergeCategory}
        assert merge_result.hotfix_merge_share == 0.0
        assert merge_result.top_fix_files == []

    def test_hotfix_merge_share(self):
        merge_result = MergeAnalysisResult(
            total_merges=5,
            category_counts={
                MergeCategory.HOTFIX: 1,
                MergeCategory.FIX: 3,
                MergeCategory.RELEASE: 1,
                MergeCategory.OTHER: 0,
            },
        )

        assert merge_result.hotfix_merge_share == 0.25

    def test_to_dict(self):
        merge = MergeCommit(
            sha="m",
            message="hotfix",
            source_branch="hotfix/login",
            pull_request=7,
            timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc),
        )
        merge_result = MergeAnalysisResult(branch="main", total_merges=1)
        merge_result.category_counts[MergeCategory.HOTFIX] = 1
        merge_result.merges_by_category[MergeCategory.HOTFIX].append(merge)

        data = merge_result.to_dict()

        assert data["branch"] == "main"
        assert data["category_counts"] == {"hotfix": 1, "fix": 0, "release": 0, "other": 0}
        assert data["hotfix_merge_share"] == 1.0
        assert data["hotfix_merges"] == [
            {"sha": "m", "source_branch": "hotfix/login", "pull_request": 7}
        ]
        assert json.loads(json.dumps(data)) == data
