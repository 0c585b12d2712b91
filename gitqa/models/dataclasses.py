"""Data models for defect-fix analysis."""

from collections.abc import Mapping
from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional, Union

from gitqa.config import DEFAULT_KEYWORDS, DEFAULT_TOP_FILES_LIMIT, UNKNOWN_BUCKET

Timestamp = Union[datetime, date, str, int, float, None]


class MatchMode(Enum):
    """How a keyword is located inside a message."""

    SUBSTRING = "substring"
    WORD_BOUNDARY = "wordBoundary"


class MergeCategory(Enum):
    """Mutually exclusive merge categories."""

    HOTFIX = "hotfix"
    FIX = "fix"
    RELEASE = "release"
    OTHER = "other"


class MessageField(Enum):
    """Which commit field holds the text to classify."""

    SUBJECT = "subject"
    MESSAGE = "message"
    AUTO = "auto"


def _first(data: Mapping, *keys: str, default: Any = None) -> Any:
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return default


def _as_str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _as_int(value: Any) -> Optional[int]:
    return value if isinstance(value, int) and not isinstance(value, bool) else None


def _as_str_list(value: Any) -> list[str]:
    if isinstance(value, (list, tuple)):
        return [item for item in value if isinstance(item, str)]
    return []


@dataclass
class Commit:
    """A commit as delivered by the repository reader."""

    sha: str
    message: str
    author: str = ""
    author_email: str = ""
    timestamp: Timestamp = None
    changed_files: list[str] = field(default_factory=list)
    subject: Optional[str] = None

    @classmethod
    def from_mapping(cls, data: Mapping) -> "Commit":
        """Build a commit from a loosely shaped mapping.

        Accepts the key spellings produced by common git log exporters
        (``hash``/``id``, ``author_name``, ``date``, ``files``). Missing or
        mistyped fields degrade to empty defaults.
        """
        return cls(
            sha=_as_str(_first(data, "sha", "hash", "id")),
            message=_as_str(data.get("message")),
            author=_as_str(_first(data, "author", "author_name")),
            author_email=_as_str(data.get("author_email")),
            timestamp=_first(data, "timestamp", "date"),
            changed_files=_as_str_list(_first(data, "changed_files", "files")),
            subject=data.get("subject") if isinstance(data.get("subject"), str) else None,
        )


@dataclass
class MergeCommit(Commit):
    """A merge commit with its parents."""

    parent_ids: list[str] = field(default_factory=list)
    source_branch: Optional[str] = None
    pull_request: Optional[int] = None

    @classmethod
    def from_mapping(cls, data: Mapping) -> "MergeCommit":
        base = Commit.from_mapping(data)
        parents = _first(data, "parent_ids", "parents", default=[])
        if isinstance(parents, str):
            parents = parents.split()
        return cls(
            sha=base.sha,
            message=base.message,
            author=base.author,
            author_email=base.author_email,
            timestamp=base.timestamp,
            changed_files=base.changed_files,
            subject=base.subject,
            parent_ids=_as_str_list(parents),
            source_branch=_as_str(data.get("source_branch")) or None,
            pull_request=_as_int(data.get("pull_request")),
        )


@dataclass
class ClassificationVerdict:
    """Outcome of classifying one commit message."""

    is_match: bool = False
    matched_keywords: list[str] = field(default_factory=list)


@dataclass
class MatchedCommit:
    """A commit that matched at least one keyword."""

    sha: str
    message: str
    author: str
    date: Optional[str]
    matched_keywords: list[str] = field(default_factory=list)


@dataclass
class FileCount:
    """Touch count for one file."""

    file: str
    count: int


@dataclass
class ClassifiedItem:
    """One commit or merge, classified and ready for aggregation."""

    is_match: bool
    matched_keywords: list[str] = field(default_factory=list)
    files: list[str] = field(default_factory=list)
    day: str = UNKNOWN_BUCKET
    record: Optional[MatchedCommit] = None


@dataclass
class AnalysisConfig:
    """Options for one pipeline run."""

    keywords: list[str] = field(default_factory=lambda: list(DEFAULT_KEYWORDS))
    top_files_limit: int = DEFAULT_TOP_FILES_LIMIT
    message_field: MessageField = MessageField.AUTO
    match_mode: MatchMode = MatchMode.WORD_BOUNDARY
    trace: bool = False

    def effective_keywords(self) -> list[str]:
        """Configured keywords, or the defaults when none survive cleanup."""
        from gitqa.analysis.keywords import normalize_keywords

        return normalize_keywords(self.keywords)

    def effective_top_files_limit(self) -> int:
        limit = self.top_files_limit
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
            return DEFAULT_TOP_FILES_LIMIT
        return limit


@dataclass
class AggregationResult:
    """Aggregated defect-fix statistics for one run."""

    total_commits: int = 0
    matched_commits: list[MatchedCommit] = field(default_factory=list)
    keyword_counts: dict[str, int] = field(default_factory=dict)
    file_touch_counts: dict[str, int] = field(default_factory=dict)
    top_files: list[FileCount] = field(default_factory=list)
    trend_by_day: dict[str, int] = field(default_factory=dict)
    daily_total_counts: dict[str, int] = field(default_factory=dict)
    defect_fix_rate: float = 0.0

    @classmethod
    def empty(cls, keywords: list[str]) -> "AggregationResult":
        """All-zero result with one counter per keyword."""
        return cls(keyword_counts={keyword: 0 for keyword in keywords})

    @property
    def matched_count(self) -> int:
        """Number of matching commits."""
        return len(self.matched_commits)

    @property
    def code_stability(self) -> float:
        """Share of commits that are not fixes."""
        return 1.0 - self.defect_fix_rate

    @property
    def hotfix_share(self) -> float:
        """Share of matching commits that mention a hotfix."""
        if self.matched_count == 0:
            return 0.0
        hotfixes = sum(
            count
            for keyword, count in self.keyword_counts.items()
            if keyword.strip().lower() == "hotfix"
        )
        return hotfixes / self.matched_count

    @property
    def total_file_touches(self) -> int:
        """Sum of all file touch counts."""
        return sum(self.file_touch_counts.values())

    @property
    def total_fix_files(self) -> int:
        """Number of distinct files touched by matching commits."""
        return len(self.file_touch_counts)

    @property
    def hotspot_concentration(self) -> float:
        """Top file's share of all file touches."""
        total = self.total_file_touches
        if total == 0 or not self.top_files:
            return 0.0
        return self.top_files[0].count / total

    @property
    def commit_consistency(self) -> float:
        """Average daily commit count relative to the busiest day."""
        dated = [
            count for day, count in self.daily_total_counts.items() if day != UNKNOWN_BUCKET
        ]
        if not dated:
            return 0.0
        return (sum(dated) / len(dated)) / max(dated)

    def to_dict(self) -> dict:
        """Deep, JSON-serialisable copy including derived ratios."""
        data = asdict(self)
        data.update(
            {
                "matched_count": self.matched_count,
                "code_stability": self.code_stability,
                "hotfix_share": self.hotfix_share,
                "hotspot_concentration": self.hotspot_concentration,
                "total_fix_files": self.total_fix_files,
                "commit_consistency": self.commit_consistency,
            }
        )
        return data


@dataclass
class MergeAnalysisResult:
    """Merge-oriented analysis: combined view plus fix/hotfix breakdown."""

    branch: str = "HEAD"
    total_merges: int = 0
    category_counts: dict[MergeCategory, int] = field(
        default_factory=lambda: {category: 0 for category in MergeCategory}
    )
    merges_by_category: dict[MergeCategory, list[MergeCommit]] = field(
        default_factory=lambda: {category: [] for category in MergeCategory}
    )
    combined: AggregationResult = field(default_factory=AggregationResult)
    fixes: AggregationResult = field(default_factory=AggregationResult)
    hotfixes: AggregationResult = field(default_factory=AggregationResult)

    @property
    def top_fix_files(self) -> list[FileCount]:
        return self.fixes.top_files

    @property
    def top_hotfix_files(self) -> list[FileCount]:
        return self.hotfixes.top_files

    @property
    def hotfix_merge_share(self) -> float:
        """Hotfix merges as a share of all fix-type merges."""
        fixes = self.category_counts[MergeCategory.FIX]
        hotfixes = self.category_counts[MergeCategory.HOTFIX]
        if fixes + hotfixes == 0:
            return 0.0
        return hotfixes / (fixes + hotfixes)

    def to_dict(self) -> dict:
        """Deep, JSON-serialisable copy."""
        return {
            "branch": self.branch,
            "total_merges": self.total_merges,
            "category_counts": {
                category.value: count for category, count in self.category_counts.items()
            },
            "hotfix_merge_share": self.hotfix_merge_share,
            "hotfix_merges": [
                {
                    "sha": merge.sha,
                    "source_branch": merge.source_branch,
                    "pull_request": merge.pull_request,
                }
                for merge in self.merges_by_category[MergeCategory.HOTFIX]
            ],
            "combined": self.combined.to_dict(),
            "fixes": self.fixes.to_dict(),
            "hotfixes": self.hotfixes.to_dict(),
        }
