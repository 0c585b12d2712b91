"""GitPython wrapper for repository operations."""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, Optional

from git import Repo
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from gitqa.analysis.classifier import MergeClassifier
from gitqa.config import DEFAULT_BRANCH
from gitqa.git.parser import CommitMessageParser
from gitqa.models import Commit, MergeCommit

logger = logging.getLogger(__name__)


class GitRepositoryError(Exception):
    """Exception raised for git repository errors."""

    pass


class GitRepository:
    """Wrapper around GitPython for repository operations.

    Provides commits and merge commits together with the files each one
    changed. The ``list_*`` methods never raise: git failures are logged
    and produce an empty list.
    """

    def __init__(self, path: str):
        """Initialize the repository wrapper.

        Args:
            path: Path to the git repository

        Raises:
            GitRepositoryError: If path is not a valid git repository
        """
        self.path = Path(path)
        self._parser = CommitMessageParser()

        try:
            self._repo = Repo(self.path)
        except (InvalidGitRepositoryError, NoSuchPathError):
            raise GitRepositoryError(f"Not a git repository: {path}")

    @property
    def name(self) -> str:
        """Get the repository name from the directory."""
        return self.path.name

    def iter_commits(
        self,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
        author: Optional[str] = None,
        branch: Optional[str] = None,
    ) -> Iterator[Commit]:
        """Iterate over commits in the repository.

        Args:
            since: Only include commits after this date
            until: Only include commits before this date
            author: Filter by author name or email
            branch: Branch to iterate (default: current branch)

        Yields:
            Commit objects with their changed files

        Raises:
            GitRepositoryError: If git fails
        """
        # Build kwargs for git log
        kwargs = {}

        if since:
            kwargs["since"] = since.isoformat()
        if until:
            kwargs["until"] = until.isoformat()
        if author:
            kwargs["author"] = author

        # Get the revision to iterate
        rev = branch if branch else None

        try:
            for git_commit in self._repo.iter_commits(rev=rev, **kwargs):
                yield self._convert_commit(git_commit)
        except (GitCommandError, ValueError) as e:
            raise GitRepositoryError(f"Git command failed: {e}")

    def list_commits(
        self,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
        author: Optional[str] = None,
        branch: Optional[str] = None,
    ) -> list[Commit]:
        """Collect commits, returning an empty list if git fails."""
        try:
            return list(
                self.iter_commits(since=since, until=until, author=author, branch=branch)
            )
        except GitRepositoryError as e:
            logger.error("Could not list commits in %s: %s", self.path, e)
            return []

    def list_merge_commits(self, branch: str = DEFAULT_BRANCH) -> list[MergeCommit]:
        """Collect the merges on a branch's first-parent history.

        Two-parent merges are credited with the files that differ between
        their parents; other merges with their own changes.

        Args:
            branch: Branch or revision to walk

        Returns:
            MergeCommit objects, newest first; empty if git fails
        """
        try:
            return [
                self._convert_merge(git_commit)
                for git_commit in self._repo.iter_commits(
                    rev=branch or DEFAULT_BRANCH, merges=True, first_parent=True
                )
            ]
        except (GitCommandError, ValueError) as e:
            logger.error("Could not list merges on %s: %s", branch, e)
            return []

    def diff_files(self, parent_a: str, parent_b: str) -> list[str]:
        """List the files that differ between two revisions.

        Raises:
            GitCommandError: If git cannot diff the revisions
        """
        output = self._repo.git.diff(parent_a, parent_b, name_only=True)
        return [line.strip() for line in output.splitlines() if line.strip()]

    def _timestamp(self, git_commit) -> datetime:
        return datetime.fromtimestamp(git_commit.committed_date, tz=timezone.utc)

    def _changed_files(self, git_commit) -> list[str]:
        """Files touched by a commit, relative to its first parent.

        Args:
            git_commit: GitPython Commit object

        Returns:
            File paths, or an empty list on any error
        """
        try:
            return list(git_commit.stats.files.keys())
        except Exception as e:
            logger.debug("No file list for %s: %s", git_commit.hexsha, e)
            return []

    def _convert_commit(self, git_commit) -> Commit:
        """Convert a GitPython commit to our Commit model.

        Args:
            git_commit: GitPython Commit object

        Returns:
            Our Commit dataclass
        """
        message = git_commit.message

        return Commit(
            sha=git_commit.hexsha,
            message=message,
            author=git_commit.author.name,
            author_email=git_commit.author.email,
            timestamp=self._timestamp(git_commit),
            changed_files=self._changed_files(git_commit),
            subject=self._parser.subject(message),
        )

    def _convert_merge(self, git_commit) -> MergeCommit:
        """Convert a GitPython merge commit to our MergeCommit model."""
        message = git_commit.message
        parent_ids = [parent.hexsha for parent in git_commit.parents]

        merge = MergeCommit(
            sha=git_commit.hexsha,
            message=message,
            author=git_commit.author.name,
            author_email=git_commit.author.email,
            timestamp=self._timestamp(git_commit),
            subject=self._parser.subject(message),
            parent_ids=parent_ids,
            source_branch=self._parser.merge_source(message),
            pull_request=self._parser.pull_request_number(message),
        )

        # The two-parent diff replaces the merge's own file list
        if len(parent_ids) != 2:
            merge.changed_files = self._changed_files(git_commit)
        merge.changed_files = MergeClassifier.attribute_files(merge, self.diff_files)

        return merge
