"""Data models for references, issues, pull requests and their parts (Pydantic)."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Reference(BaseModel):
    """Pointer to an issue or pull request: owner/repo#number."""

    model_config = ConfigDict(frozen=True)

    owner: str
    repo: str
    number: int

    @property
    def full_repo(self) -> str:
        return f"{self.owner}/{self.repo}"

    @property
    def key(self) -> str:
        """Canonical identity used for deduplication.

        GitHub owner and repository names are case-insensitive.
        """
        return f"{self.owner.lower()}/{self.repo.lower()}#{self.number}"


class Comment(BaseModel):
    """Comment on an issue or PR."""

    model_config = ConfigDict(frozen=True)

    id: int = 0
    body: str = ""
    author: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Issue(BaseModel):
    """Resolved issue (or pull request served through the issues API)."""

    model_config = ConfigDict(frozen=True)

    owner: str
    repo: str
    number: int
    title: str = ""
    body: str = ""
    author: str = ""
    state: str = "open"
    html_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    comments: List[Comment] = Field(default_factory=list)

    @property
    def full_repo(self) -> str:
        return f"{self.owner}/{self.repo}"

    @property
    def reference(self) -> Reference:
        return Reference(owner=self.owner, repo=self.repo, number=self.number)


class Commit(BaseModel):
    """Commit included in a pull request."""

    model_config = ConfigDict(frozen=True)

    sha: str = ""
    message: str = ""
    author: str = ""


class ChangedFile(BaseModel):
    """File changed by a pull request.

    ``content`` is None when the content was not requested or was suppressed
    (binary or skipped extension).
    """

    model_config = ConfigDict(frozen=True)

    filename: str
    status: str = "modified"
    patch: Optional[str] = None
    content: Optional[str] = None


class PullRequest(BaseModel):
    """Root pull request of a review run."""

    model_config = ConfigDict(frozen=True)

    owner: str
    repo: str
    number: int
    title: str = ""
    body: str = ""
    author: str = ""
    state: str = "open"
    html_url: Optional[str] = None
    head_sha: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    comments: List[Comment] = Field(default_factory=list)

    @property
    def full_repo(self) -> str:
        return f"{self.owner}/{self.repo}"

    @property
    def reference(self) -> Reference:
        return Reference(owner=self.owner, repo=self.repo, number=self.number)


class LocalFile(BaseModel):
    """Local context file added to the prompt."""

    model_config = ConfigDict(frozen=True)

    filename: str
    content: str
