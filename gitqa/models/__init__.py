"""Data models for gitqa."""

from gitqa.models.dataclasses import (
    AggregationResult,
    AnalysisConfig,
    ClassificationVerdict,
    ClassifiedItem,
    Commit,
    FileCount,
    MatchedCommit,
    MatchMode,
    MergeAnalysisResult,
    MergeCategory,
    MergeCommit,
    MessageField,
)

__all__ = [
    "AggregationResult",
    "AnalysisConfig",
    "ClassificationVerdict",
    "ClassifiedItem",
    "Commit",
    "FileCount",
    "MatchedCommit",
    "MatchMode",
    "MergeAnalysisResult",
    "MergeCategory",
    "MergeCommit",
    "MessageField",
]
