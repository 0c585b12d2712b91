"""Commit message parsing helpers."""

import re
from typing import Optional


class CommitMessageParser:
    """Extract the subject line and merge metadata from commit messages.

    Examples:
        Merge pull request #42 from acme/hotfix/login-crash
        Merge branch 'develop' into master
        Merge remote-tracking branch 'origin/release/1.2'
    """

    # GitHub pull request merges: "Merge pull request #N from owner/branch"
    PULL_REQUEST_PATTERN = re.compile(
        r"^Merge pull request #(?P<number>\d+) from (?P<source>\S+)",
        re.IGNORECASE,
    )

    # Plain git merges: "Merge branch 'x'" / "Merge remote-tracking branch 'x'"
    BRANCH_PATTERN = re.compile(
        r"^Merge (?:remote-tracking )?branch '(?P<source>[^']+)'",
        re.IGNORECASE,
    )

    def subject(self, message: Optional[str]) -> str:
        """Return the first non-empty line of a message.

        Args:
            message: The full commit message

        Returns:
            Subject line, or an empty string
        """
        if not message:
            return ""

        for line in message.splitlines():
            if line.strip():
                return line.strip()
        return ""

    def merge_source(self, message: Optional[str]) -> Optional[str]:
        """Detect the branch a merge came from.

        For pull requests the ``owner/`` prefix is dropped, and for
        remote-tracking branches the remote name is dropped.

        Args:
            message: The full commit message

        Returns:
            Source branch name if recognised, None otherwise
        """
        first_line = self.subject(message)
        if not first_line:
            return None

        match = self.PULL_REQUEST_PATTERN.match(first_line)
        if match:
            source = match.group("source")
            return source.split("/", 1)[1] if "/" in source else source

        match = self.BRANCH_PATTERN.match(first_line)
        if match:
            source = match.group("source")
            if "remote-tracking" in first_line.lower() and "/" in source:
                return source.split("/", 1)[1]
            return source

        return None

    def pull_request_number(self, message: Optional[str]) -> Optional[int]:
        """Extract the pull request number from a merge message.

        Args:
            message: The full commit message

        Returns:
            Pull request number if found, None otherwise
        """
        match = self.PULL_REQUEST_PATTERN.match(self.subject(message))
        if match:
            return int(match.group("number"))
        return None
