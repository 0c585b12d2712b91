"""Tests for the analysis pipeline."""

import asyncio
import logging
from unittest.mock import MagicMock

import pytest

from gitqa.analysis.pipeline import FixAnalysisPipeline, analyze_merges, analyze_repository
from gitqa.models import (
    AnalysisConfig,
    Commit,
    FileCount,
    MatchMode,
    MergeCategory,
    MergeCommit,
    MessageField,
)


class FakeReader:
    """Reader returning canned commits and merges."""

    def __init__(self, commits=None, merges=None):
        self.commits = commits or []
        self.merges = merges or []
        self.filters = None
        self.branch = None

    def list_commits(self, **filters):
        self.filters = filters
        return self.commits

    def list_merge_commits(self, branch):
        self.branch = branch
        return self.merges


class TestRun:
    """Tests for FixAnalysisPipeline.run."""

    def test_mapping_commits(self):
        """Loose commit mappings are accepted."""
        commits = [
            {"message": "Fix: issue #123", "date": "2025-05-01", "files": ["a.js"]},
            {"message": "Hotfix: urgent patch", "date": "2025-05-02", "files": ["b.js"]},
        ]

        result = FixAnalysisPipeline().run(commits)

        assert result.keyword_counts == {
            "fix": 1,
            "hotfix": 1,
            "bugfix": 0,
            "resolve": 0,
            "patch": 1,
        }
        assert result.top_files == [FileCount("a.js", 1), FileCount("b.js", 1)]
        assert result.trend_by_day == {"2025-05-01": 1, "2025-05-02": 1}
        assert result.defect_fix_rate == 1.0

    def test_commit_objects(self, sample_commits):
        result = FixAnalysisPipeline().run(sample_commits)

        assert result.total_commits == 3
        assert result.matched_count == 2
        assert result.top_files[0] == FileCount("src/auth.py", 2)
        assert result.daily_total_counts == {"2024-01-15": 2, "2024-01-16": 1}
        assert result.trend_by_day == {"2024-01-15": 1, "2024-01-16": 1}

    def test_matched_commit_records(self, fix_commit):
        result = FixAnalysisPipeline().run([fix_commit])

        record = result.matched_commits[0]
        assert record.sha == fix_commit.sha
        assert record.author == "Test Author"
        assert record.message == "Hotfix: urgent patch"
        assert record.date == "2024-01-15T10:30:00+00:00"
        assert record.matched_keywords == ["hotfix", "patch"]

    def test_unparseable_date(self):
        """Bad dates go to the unknown bucket."""
        result = FixAnalysisPipeline().run([{"message": "fix it", "date": "not-a-date"}])

        assert result.trend_by_day == {"unknown": 1}
        assert result.daily_total_counts == {"unknown": 1}
        assert result.matched_commits[0].date == "not-a-date"

    @pytest.mark.parametrize("commits", [None, "fix", 42, {"message": "fix"}])
    def test_invalid_input_gives_empty_result(self, commits):
        result = FixAnalysisPipeline().run(commits)

        assert result.total_commits == 0
        assert result.keyword_counts == {
            "fix": 0,
            "hotfix": 0,
            "bugfix": 0,
            "resolve": 0,
            "patch": 0,
        }

    def test_unsupported_items_skipped(self):
        """Items that are neither commits nor mappings are not counted."""
        result = FixAnalysisPipeline().run([{"message": "fix"}, 7, None, "fix"])

        assert result.total_commits == 1

    def test_generator_input(self):
        commits = ({"message": f"fix {i}"} for i in range(3))

        assert FixAnalysisPipeline().run(commits).matched_count == 3

    def test_missing_message(self):
        """Commits without text count towards totals only."""
        result = FixAnalysisPipeline().run([{"sha": "x", "files": ["a.py"]}])

        assert result.total_commits == 1
        assert result.matched_count == 0
        assert result.file_touch_counts == {}

    def test_subject_preferred_in_auto_mode(self):
        commit = Commit(sha="s", message="tidy up\n\nfix later", subject="tidy up")

        assert FixAnalysisPipeline().run([commit]).matched_count == 0

    def test_message_field(self):
        commit = Commit(sha="s", message="tidy up\n\nfix later", subject="tidy up")
        config = AnalysisConfig(message_field=MessageField.MESSAGE)

        assert FixAnalysisPipeline(config).run([commit]).matched_count == 1

    def test_subject_field_without_subject(self):
        commit = Commit(sha="s", message="fix it")
        config = AnalysisConfig(message_field=MessageField.SUBJECT)

        assert FixAnalysisPipeline(config).run([commit]).matched_count == 0

    def test_match_mode(self):
        config = AnalysisConfig(keywords=["fix"], match_mode=MatchMode.SUBSTRING)

        result = FixAnalysisPipeline(config).run([{"message": "hotfix"}])

        assert result.keyword_counts == {"fix": 1}

    def test_custom_keywords_and_limit(self):
        config = AnalysisConfig(keywords="revert, fix", top_files_limit=1)
        commits = [
            {"message": "revert bad deploy", "files": ["deploy.sh"]},
            {"message": "fix deploy", "files": ["deploy.sh", "app.py"]},
        ]

        result = FixAnalysisPipeline(config).run(commits)

        assert result.keyword_counts == {"revert": 1, "fix": 1}
        assert result.top_files == [FileCount("deploy.sh", 2)]

    def test_trace_logs_decisions(self, caplog):
        config = AnalysisConfig(trace=True)

        with caplog.at_level(logging.DEBUG, logger="gitqa"):
            FixAnalysisPipeline(config).run([{"sha": "abc", "message": "fix it"}])

        assert "Fix commit abc" in caplog.text

    def test_no_trace_by_default(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="gitqa"):
            FixAnalysisPipeline().run([{"sha": "abc", "message": "fix it"}])

        assert "Fix commit" not in caplog.text


class TestRunMerges:
    """Tests for FixAnalysisPipeline.run_merges."""

    def test_category_counts(self, sample_merges):
        result = FixAnalysisPipeline().run_merges(sample_merges, branch="master")

        assert result.branch == "master"
        assert result.total_merges == 4
        assert result.category_counts == {
            MergeCategory.HOTFIX: 1,
            MergeCategory.FIX: 1,
            MergeCategory.RELEASE: 1,
            MergeCategory.OTHER: 1,
        }

    def test_views(self, sample_merges):
        result = FixAnalysisPipeline().run_merges(sample_merges)

        assert result.combined.total_commits == 4
        assert result.combined.matched_count == 2
        assert result.combined.top_files[0] == FileCount("src/auth.py", 2)

        assert [f.file for f in result.top_hotfix_files] == ["src/auth.py", "src/login.py"]
        assert [f.file for f in result.top_fix_files] == ["ci/build.yml", "src/auth.py"]

        assert result.fixes.defect_fix_rate == 0.25
        assert result.hotfixes.defect_fix_rate == 0.25

    def test_views_share_daily_totals(self, sample_merges):
        result = FixAnalysisPipeline().run_merges(sample_merges)

        expected = {"2024-02-01": 1, "2024-02-02": 2, "2024-02-03": 1}
        assert result.combined.daily_total_counts == expected
        assert result.fixes.daily_total_counts == expected
        assert result.hotfixes.daily_total_counts == expected

    def test_diff_files_for_two_parent_merges(self):
        merge = MergeCommit(
            sha="m", message="Merge branch 'hotfix/x'", parent_ids=["p1", "p2"]
        )
        diff_files = MagicMock(return_value=["x.py"])

        result = FixAnalysisPipeline().run_merges([merge], diff_files=diff_files)

        diff_files.assert_called_once_with("p1", "p2")
        assert result.top_hotfix_files == [FileCount("x.py", 1)]

    def test_mapping_merges(self):
        merges = [
            {"sha": "m1", "message": "hotfix login", "parents": "p1 p2", "files": ["a.py"]},
        ]

        result = FixAnalysisPipeline().run_merges(merges)

        assert result.category_counts[MergeCategory.HOTFIX] == 1
        assert result.top_hotfix_files == [FileCount("a.py", 1)]

    @pytest.mark.parametrize("merges", [None, "merge", 3])
    def test_invalid_input(self, merges):
        result = FixAnalysisPipeline().run_merges(merges)

        assert result.total_merges == 0
        assert result.combined.total_commits == 0
        assert result.combined is not result.fixes


class TestAsyncEntryPoints:
    """Tests for analyze_repository and analyze_merges."""

    def test_analyze_repository(self, sample_commits):
        reader = FakeReader(commits=sample_commits)

        result = asyncio.run(analyze_repository(reader, author="Test Author"))

        assert reader.filters == {"author": "Test Author"}
        assert result.matched_count == 2

    def test_analyze_repository_reader_failure(self, caplog):
        reader = MagicMock()
        reader.list_commits.side_effect = RuntimeError("disk gone")

        with caplog.at_level(logging.ERROR, logger="gitqa"):
            result = asyncio.run(analyze_repository(reader))

        assert result.total_commits == 0
        assert "disk gone" in caplog.text

    def test_analyze_merges(self, sample_merges):
        reader = FakeReader(merges=sample_merges)
        config = AnalysisConfig(top_files_limit=1)

        result = asyncio.run(analyze_merges(reader, "main", config))

        assert reader.branch == "main"
        assert result.branch == "main"
        assert len(result.combined.top_files) == 1

    def test_analyze_merges_reader_failure(self):
        reader = MagicMock()
        reader.list_merge_commits.side_effect = RuntimeError("no branch")

        result = asyncio.run(analyze_merges(reader, "gone"))

        assert result.total_merges == 0
        assert result.branch == "gone"
