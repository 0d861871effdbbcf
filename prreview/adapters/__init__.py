"""Git platform adapters."""

from prreview.adapters.base import (
    AuthenticationError,
    GitPlatformAdapter,
    GitPlatformError,
    NotFoundError,
)
from prreview.adapters.github import GitHubAdapter

__all__ = [
    "AuthenticationError",
    "GitHubAdapter",
    "GitPlatformAdapter",
    "GitPlatformError",
    "NotFoundError",
]
