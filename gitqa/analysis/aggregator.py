"""Frequency aggregation over classified commits."""

from collections import Counter, defaultdict
from typing import Iterable, Optional

from gitqa.config import DEFAULT_TOP_FILES_LIMIT
from gitqa.analysis.keywords import normalize_keywords
from gitqa.models import AggregationResult, ClassifiedItem, FileCount, MatchedCommit


def top_files(counts: dict[str, int], limit: int = DEFAULT_TOP_FILES_LIMIT) -> list[FileCount]:
    """Rank files by touch count.

    Args:
        counts: File touch counts in first-seen order
        limit: Maximum number of entries

    Returns:
        FileCount list, highest count first; equal counts keep
        first-seen order
    """
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
        limit = DEFAULT_TOP_FILES_LIMIT

    # Counter.most_common sorts stably, so insertion order breaks ties
    ranked = Counter(counts).most_common(limit)
    return [FileCount(file=file, count=count) for file, count in ranked]


class FrequencyAggregator:
    """Aggregate classified commits into counts and ratios.

    A single pass counts keywords, file touches and day buckets for
    matching items, and daily totals for every item.
    """

    def __init__(
        self,
        items: Iterable[ClassifiedItem],
        keywords: Optional[list[str]] = None,
        top_files_limit: int = DEFAULT_TOP_FILES_LIMIT,
    ):
        """Initialize the aggregator.

        Args:
            items: Classified commits or merges, in scan order
            keywords: Configured keyword set; every keyword gets a counter
            top_files_limit: Length of the hotspot ranking
        """
        self.items = list(items)
        self.keywords = normalize_keywords(keywords)
        self.top_files_limit = top_files_limit
        self._result: AggregationResult | None = None

    def aggregate(self) -> AggregationResult:
        """Calculate the aggregation result.

        Returns:
            AggregationResult for the items
        """
        if self._result is not None:
            return self._result

        if not self.items:
            self._result = AggregationResult.empty(self.keywords)
            return self._result

        keyword_counts = {keyword: 0 for keyword in self.keywords}
        file_touch_counts: dict[str, int] = {}
        trend_by_day = defaultdict(int)
        daily_total_counts = defaultdict(int)
        matched_commits = []

        for item in self.items:
            daily_total_counts[item.day] += 1

            if not item.is_match:
                continue

            matched_commits.append(
                item.record
                if item.record is not None
                else MatchedCommit(
                    sha="",
                    message="",
                    author="",
                    date=None,
                    matched_keywords=list(item.matched_keywords),
                )
            )

            trend_by_day[item.day] += 1

            for keyword in dict.fromkeys(item.matched_keywords):
                if keyword in keyword_counts:
                    keyword_counts[keyword] += 1

            # A file listed twice in one item is still one touch
            for file in dict.fromkeys(item.files):
                file_touch_counts[file] = file_touch_counts.get(file, 0) + 1

        matched_count = len(matched_commits)
        total = len(self.items)

        self._result = AggregationResult(
            total_commits=total,
            matched_commits=matched_commits,
            keyword_counts=keyword_counts,
            file_touch_counts=file_touch_counts,
            top_files=top_files(file_touch_counts, self.top_files_limit),
            trend_by_day=dict(trend_by_day),
            daily_total_counts=dict(daily_total_counts),
            defect_fix_rate=matched_count / total if total > 0 else 0.0,
        )

        return self._result

    @property
    def defect_fix_rate(self) -> float:
        """Matching items as a share of all items."""
        return self.aggregate().defect_fix_rate

    @property
    def result(self) -> AggregationResult:
        """Get the aggregation result."""
        return self.aggregate()
