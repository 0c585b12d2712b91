"""Classify-and-aggregate pipeline over commits and merges."""

import asyncio
import logging
from collections.abc import Iterable, Mapping
from datetime import date, datetime
from typing import Any, Optional

from gitqa.analysis.aggregator import FrequencyAggregator
from gitqa.analysis.classifier import CommitClassifier, DiffFiles, MergeClassifier
from gitqa.analysis.keywords import find_keywords
from gitqa.analysis.timebucket import bucket_day, parse_timestamp
from gitqa.config import DEFAULT_BRANCH
from gitqa.models import (
    AggregationResult,
    AnalysisConfig,
    ClassifiedItem,
    Commit,
    MatchedCommit,
    MergeAnalysisResult,
    MergeCategory,
    MergeCommit,
    MessageField,
)

logger = logging.getLogger(__name__)


def _is_collection(value: Any) -> bool:
    return isinstance(value, Iterable) and not isinstance(value, (str, bytes, Mapping))


def _format_date(timestamp: Any) -> Optional[str]:
    if isinstance(timestamp, str):
        return timestamp
    parsed = parse_timestamp(timestamp)
    if isinstance(parsed, (datetime, date)):
        return parsed.isoformat()
    return None


def _files_of(commit: Commit) -> list[str]:
    files = commit.changed_files
    if not isinstance(files, (list, tuple)):
        return []
    return [f for f in files if isinstance(f, str) and f]


class FixAnalysisPipeline:
    """Turn commits or merges into an aggregated defect-fix report.

    Owns the fallback rules for loosely shaped input: which message field
    is classified, how dates are bucketed, and what happens to malformed
    collections (they produce an empty result).
    """

    def __init__(self, config: Optional[AnalysisConfig] = None):
        """Initialize the pipeline.

        Args:
            config: Run options (defaults to AnalysisConfig())
        """
        self.config = config or AnalysisConfig()
        self.keywords = self.config.effective_keywords()
        self.top_files_limit = self.config.effective_top_files_limit()

    def _trace(self, msg: str, *args) -> None:
        if self.config.trace:
            logger.debug(msg, *args)

    def _message_for(self, commit: Commit) -> str:
        subject = commit.subject if isinstance(commit.subject, str) else ""
        message = commit.message if isinstance(commit.message, str) else ""

        field = self.config.message_field
        if field is MessageField.SUBJECT or field == MessageField.SUBJECT.value:
            return subject
        if field is MessageField.MESSAGE or field == MessageField.MESSAGE.value:
            return message
        return subject or message

    def _coerce(self, raw: Any, model: type[Commit]) -> Optional[Commit]:
        if isinstance(raw, Commit):
            return raw
        if isinstance(raw, Mapping):
            return model.from_mapping(raw)
        self._trace("Skipping unsupported item: %r", raw)
        return None

    def _record(self, commit: Commit, text: str, keywords: list[str]) -> MatchedCommit:
        return MatchedCommit(
            sha=commit.sha if isinstance(commit.sha, str) else "",
            message=text,
            author=commit.author if isinstance(commit.author, str) else "",
            date=_format_date(commit.timestamp),
            matched_keywords=list(keywords),
        )

    def _aggregate(self, items: list[ClassifiedItem]) -> AggregationResult:
        return FrequencyAggregator(items, self.keywords, self.top_files_limit).aggregate()

    def run(self, commits: Any) -> AggregationResult:
        """Classify commits and aggregate the fixes.

        Args:
            commits: Iterable of Commit objects or commit mappings

        Returns:
            AggregationResult; empty when the input is not a collection
        """
        if not _is_collection(commits):
            self._trace("Invalid commits input: %r", commits)
            return AggregationResult.empty(self.keywords)

        classifier = CommitClassifier(self.keywords, self.config.match_mode)
        items = []

        for raw in commits:
            commit = self._coerce(raw, Commit)
            if commit is None:
                continue

            text = self._message_for(commit)
            verdict = classifier.classify(text)
            day = bucket_day(commit.timestamp)

            if verdict.is_match:
                self._trace(
                    "Fix commit %s on %s: %s", commit.sha, day, verdict.matched_keywords
                )

            items.append(
                ClassifiedItem(
                    is_match=verdict.is_match,
                    matched_keywords=verdict.matched_keywords,
                    files=_files_of(commit),
                    day=day,
                    record=(
                        self._record(commit, text, verdict.matched_keywords)
                        if verdict.is_match
                        else None
                    ),
                )
            )

        result = self._aggregate(items)
        self._trace(
            "Analyzed %d commits, %d fixes", result.total_commits, result.matched_count
        )
        return result

    def run_merges(
        self,
        merges: Any,
        branch: str = DEFAULT_BRANCH,
        diff_files: Optional[DiffFiles] = None,
    ) -> MergeAnalysisResult:
        """Classify merges and aggregate fix and hotfix activity.

        Every merge is aggregated three times: once counting both fix
        categories as matches, and once per category. Each view therefore
        shares the same totals and daily counts.

        Args:
            merges: Iterable of MergeCommit objects or merge mappings
            branch: Branch the merges were read from
            diff_files: Callable listing files that differ between two
                revisions, used for two-parent merges

        Returns:
            MergeAnalysisResult with combined and per-category results
        """
        if not _is_collection(merges):
            self._trace("Invalid merges input: %r", merges)
            return MergeAnalysisResult(
                branch=branch,
                combined=AggregationResult.empty(self.keywords),
                fixes=AggregationResult.empty(self.keywords),
                hotfixes=AggregationResult.empty(self.keywords),
            )

        classifier = MergeClassifier()
        result = MergeAnalysisResult(branch=branch)
        classified = []

        for raw in merges:
            merge = self._coerce(raw, MergeCommit)
            if merge is None:
                continue

            text = self._message_for(merge)
            category = classifier.classify(text)
            files = classifier.attribute_files(merge, diff_files)
            keywords = find_keywords(text, self.keywords, self.config.match_mode)
            self._trace(
                "Merge %s: %s, %d files", merge.sha, category.value, len(files)
            )

            result.category_counts[category] += 1
            result.merges_by_category[category].append(merge)
            day = bucket_day(merge.timestamp)
            classified.append((merge, category, files, text, keywords, day))

        result.total_merges = len(classified)

        def view(categories: set[MergeCategory]) -> AggregationResult:
            items = []
            for merge, category, files, text, keywords, day in classified:
                is_match = category in categories
                items.append(
                    ClassifiedItem(
                        is_match=is_match,
                        matched_keywords=keywords,
                        files=files,
                        day=day,
                        record=self._record(merge, text, keywords) if is_match else None,
                    )
                )
            return self._aggregate(items)

        result.combined = view({MergeCategory.FIX, MergeCategory.HOTFIX})
        result.fixes = view({MergeCategory.FIX})
        result.hotfixes = view({MergeCategory.HOTFIX})

        self._trace(
            "Merges: %d fix, %d hotfix of %d",
            result.category_counts[MergeCategory.FIX],
            result.category_counts[MergeCategory.HOTFIX],
            result.total_merges,
        )
        return result


async def analyze_repository(
    reader, config: Optional[AnalysisConfig] = None, **filters
) -> AggregationResult:
    """Read all commits from a repository reader and analyze them.

    Args:
        reader: Object with a blocking ``list_commits(**filters)`` method
        config: Run options
        **filters: Passed through to ``list_commits``

    Returns:
        AggregationResult for the repository
    """
    try:
        commits = await asyncio.to_thread(reader.list_commits, **filters)
    except Exception as e:
        logger.error("Failed to read commits: %s", e)
        commits = []
    return FixAnalysisPipeline(config).run(commits)


async def analyze_merges(
    reader, branch: str = DEFAULT_BRANCH, config: Optional[AnalysisConfig] = None
) -> MergeAnalysisResult:
    """Read the merges on a branch and analyze fix and hotfix activity.

    Args:
        reader: Object with a blocking ``list_merge_commits(branch)`` method
            returning merges with their attributed files
        branch: Branch whose first-parent merges are analyzed
        config: Run options

    Returns:
        MergeAnalysisResult for the branch
    """
    try:
        merges = await asyncio.to_thread(reader.list_merge_commits, branch)
    except Exception as e:
        logger.error("Failed to read merges on %s: %s", branch, e)
        merges = []
    return FixAnalysisPipeline(config).run_merges(merges, branch=branch)
