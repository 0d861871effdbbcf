"""Abstract base for Git platform adapters."""

from abc import ABC, abstractmethod
from typing import List

from prreview.models import ChangedFile, Comment, Commit, Issue, PullRequest


class GitPlatformError(Exception):
    """Raised when a Git platform API call fails."""

    pass


class NotFoundError(GitPlatformError):
    """Raised when the requested resource does not exist or is not visible."""

    pass


class AuthenticationError(GitPlatformError):
    """Raised when the platform rejects the credentials."""

    pass


class GitPlatformAdapter(ABC):
    """Abstract interface for Git hosting platforms."""

    @abstractmethod
    def get_pr(self, repo: str, pr_number: int) -> PullRequest:
        """Fetch PR by number (without comments)."""
        ...

    @abstractmethod
    def get_issue(self, repo: str, issue_number: int) -> Issue:
        """Fetch issue by number (without comments)."""
        ...

    @abstractmethod
    def get_issue_comments(self, repo: str, issue_number: int) -> List[Comment]:
        """Fetch conversation comments on an issue or PR."""
        ...

    @abstractmethod
    def list_pr_commits(self, repo: str, pr_number: int) -> List[Commit]:
        """List commits of a PR in order."""
        ...

    @abstractmethod
    def list_pr_files(self, repo: str, pr_number: int) -> List[ChangedFile]:
        """List files changed by a PR (with patches, without content)."""
        ...

    @abstractmethod
    def get_file_content(self, repo: str, path: str, ref: str) -> bytes:
        """Return raw file content at the given ref."""
        ...
