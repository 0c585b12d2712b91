"""Shared pytest fixtures for gitqa tests."""

from datetime import datetime, timezone

import pytest

from gitqa.models import Commit, MergeCommit


@pytest.fixture
def fix_commit():
    """Commit that matches both fix and hotfix keywords."""
    return Commit(
        sha="abc123def456",
        message="Hotfix: urgent patch\n\nResolves the login crash.",
        author="Test Author",
        author_email="test@example.com",
        timestamp=datetime(2024, 1, 15, 10, 30, 0, tzinfo=timezone.utc),
        changed_files=["src/auth.py", "src/session.py"],
        subject="Hotfix: urgent patch",
    )


@pytest.fixture
def feature_commit():
    """Commit with no fix keywords."""
    return Commit(
        sha="def789abc123",
        message="add dashboard widgets",
        author="Another Author",
        author_email="another@example.com",
        timestamp=datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc),
        changed_files=["src/dashboard.py"],
    )


@pytest.fixture
def bugfix_commit():
    """Plain fix commit on a later day."""
    return Commit(
        sha="ghi345jkl678",
        message="fix null check in auth",
        author="Test Author",
        author_email="test@example.com",
        timestamp="2024-01-16T09:00:00Z",
        changed_files=["src/auth.py"],
    )


@pytest.fixture
def sample_commits(fix_commit, feature_commit, bugfix_commit):
    """List of sample commits for testing."""
    return [fix_commit, feature_commit, bugfix_commit]


@pytest.fixture
def sample_merges():
    """One merge per category."""
    return [
        MergeCommit(
            sha="m1",
            message="Merge branch 'hotfix/login' into master",
            timestamp=datetime(2024, 2, 1, 9, 0, 0, tzinfo=timezone.utc),
            changed_files=["src/auth.py", "src/login.py"],
        ),
        MergeCommit(
            sha="m2",
            message="Merge from develop for release 1.2",
            timestamp=datetime(2024, 2, 2, 9, 0, 0, tzinfo=timezone.utc),
            changed_files=["src/release.py"],
        ),
        MergeCommit(
            sha="m3",
            message="fix flaky build step",
            timestamp=datetime(2024, 2, 2, 15, 0, 0, tzinfo=timezone.utc),
            changed_files=["ci/build.yml", "src/auth.py"],
        ),
        MergeCommit(
            sha="m4",
            message="merge documentation updates",
            timestamp=datetime(2024, 2, 3, 9, 0, 0, tzinfo=timezone.utc),
            changed_files=["README.md"],
        ),
    ]
