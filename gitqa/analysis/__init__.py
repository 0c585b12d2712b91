"""Analysis module."""

from gitqa.analysis.aggregator import FrequencyAggregator, top_files
from gitqa.analysis.classifier import CommitClassifier, MergeClassifier
from gitqa.analysis.keywords import find_keywords, matches, normalize_keywords
from gitqa.analysis.pipeline import FixAnalysisPipeline, analyze_merges, analyze_repository
from gitqa.analysis.timebucket import bucket_day

__all__ = [
    "FrequencyAggregator",
    "top_files",
    "CommitClassifier",
    "MergeClassifier",
    "find_keywords",
    "matches",
    "normalize_keywords",
    "FixAnalysisPipeline",
    "analyze_merges",
    "analyze_repository",
    "bucket_day",
]
