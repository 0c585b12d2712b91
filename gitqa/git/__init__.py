"""Git operations module."""

from gitqa.git.repository import GitRepository, GitRepositoryError
from gitqa.git.parser import CommitMessageParser

__all__ = ["GitRepository", "GitRepositoryError", "CommitMessageParser"]
