"""Fix classification for commits and merges."""

import logging
from collections.abc import Mapping
from typing import Any, Callable, Iterable, Optional

from gitqa.analysis.keywords import find_keywords, normalize_keywords
from gitqa.config import FIX_FAMILY_KEYWORDS
from gitqa.models import (
    ClassificationVerdict,
    Commit,
    MatchMode,
    MergeCategory,
    MergeCommit,
)

logger = logging.getLogger(__name__)

DiffFiles = Callable[[str, str], list[str]]


class CommitClassifier:
    """Decide whether a commit message describes a defect fix.

    A message is a fix when any configured keyword matches. Every
    matching keyword is reported, once, in keyword order.
    """

    def __init__(
        self,
        keywords: Optional[Iterable[str]] = None,
        mode: MatchMode | str = MatchMode.WORD_BOUNDARY,
    ):
        """Initialize the classifier.

        Args:
            keywords: Keyword vocabulary (defaults to the five fix keywords)
            mode: Keyword matching mode
        """
        self.keywords = normalize_keywords(list(keywords) if keywords is not None else None)
        self.mode = mode

    def classify(self, commit: Commit | Mapping | str | None) -> ClassificationVerdict:
        """Classify a commit, or a bare message.

        Args:
            commit: Commit or commit mapping whose ``message`` is
                classified, or the text itself

        Returns:
            ClassificationVerdict with the matched keywords
        """
        if isinstance(commit, Mapping):
            commit = Commit.from_mapping(commit)
        text = commit.message if isinstance(commit, Commit) else commit
        matched = find_keywords(text, self.keywords, self.mode)
        return ClassificationVerdict(is_match=bool(matched), matched_keywords=matched)


class MergeClassifier:
    """Categorize merge commits by where they came from.

    Rules are checked in order and the first one that fires wins:

    1. ``from develop`` in the message: scheduled release
    2. ``hotfix``, the ``{fix}`` marker, or a merge from any other branch:
       hotfix
    3. a fix-family keyword (whole word): regular fix
    4. anything else: other
    """

    RELEASE_MARKER = "from develop"
    HOTFIX_MARKERS = ("hotfix", "{fix}")
    SOURCE_MARKER = "from"

    def __init__(self, fix_keywords: Optional[Iterable[str]] = None):
        self.fix_keywords = list(fix_keywords) if fix_keywords is not None else list(
            FIX_FAMILY_KEYWORDS
        )

    def classify(self, merge: MergeCommit | Mapping | str | None) -> MergeCategory:
        """Assign exactly one category to a merge.

        Args:
            merge: Merge commit, merge mapping, or its message

        Returns:
            The merge's MergeCategory
        """
        if isinstance(merge, Mapping):
            merge = MergeCommit.from_mapping(merge)
        message = merge.message if isinstance(merge, Commit) else merge
        if not isinstance(message, str):
            return MergeCategory.OTHER

        msg = message.lower()

        if self.RELEASE_MARKER in msg:
            return MergeCategory.RELEASE

        if any(marker in msg for marker in self.HOTFIX_MARKERS) or self.SOURCE_MARKER in msg:
            return MergeCategory.HOTFIX

        if find_keywords(msg, self.fix_keywords, MatchMode.WORD_BOUNDARY):
            return MergeCategory.FIX

        return MergeCategory.OTHER

    def categorize(
        self, merges: Iterable[MergeCommit | Mapping]
    ) -> dict[MergeCategory, list[MergeCommit]]:
        """Partition merges into their categories.

        Mappings are converted to MergeCommit objects first.

        Returns:
            One list per category; every merge appears in exactly one
        """
        buckets: dict[MergeCategory, list[MergeCommit]] = {
            category: [] for category in MergeCategory
        }
        for merge in merges:
            if isinstance(merge, Mapping):
                merge = MergeCommit.from_mapping(merge)
            buckets[self.classify(merge)].append(merge)
        return buckets

    @staticmethod
    def attribute_files(merge: Any, diff_files: Optional[DiffFiles] = None) -> list[str]:
        """Files a merge should be credited with.

        For a two-parent merge the files differing between the parents
        are used, isolating what the merged branch changed. Otherwise the
        merge's own changed files are used.

        Args:
            merge: Merge commit or merge mapping
            diff_files: Callable returning the names differing between two
                revisions

        Returns:
            De-duplicated file list; empty if the diff fails
        """
        if isinstance(merge, Mapping):
            merge = MergeCommit.from_mapping(merge)

        parents = getattr(merge, "parent_ids", None) or []

        if len(parents) == 2 and diff_files is not None:
            try:
                files = diff_files(parents[0], parents[1])
            except Exception as e:
                logger.warning(
                    "Could not diff parents of merge %s: %s", getattr(merge, "sha", "?"), e
                )
                return []
        else:
            files = getattr(merge, "changed_files", None)

        if not isinstance(files, (list, tuple)):
            return []
        return list(dict.fromkeys(f for f in files if isinstance(f, str) and f))
