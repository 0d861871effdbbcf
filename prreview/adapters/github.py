"""GitHub API adapter."""

import base64
from datetime import datetime
from typing import Any, Dict, List
from urllib.parse import quote

import requests

from prreview.adapters.base import (
    AuthenticationError,
    GitPlatformAdapter,
    GitPlatformError,
    NotFoundError,
)
from prreview.models import ChangedFile, Comment, Commit, Issue, PullRequest

PER_PAGE = 100


def _parse_iso(s: str | None) -> datetime | None:
    if not s:
        return None
    return datetime.fromisoformat(s.replace("Z", "+00:00"))


def _split_repo(repo: str) -> tuple[str, str]:
    owner, _, name = repo.partition("/")
    return owner, name


def _issue_from_api(repo: str, data: Dict[str, Any]) -> Issue:
    owner, name = _split_repo(repo)
    user = data.get("user") or {}
    return Issue(
        owner=owner,
        repo=name,
        number=data["number"],
        title=data.get("title") or "",
        body=data.get("body") or "",
        author=user.get("login", ""),
        state=data.get("state", "open"),
        html_url=data.get("html_url"),
        created_at=_parse_iso(data.get("created_at")),
        updated_at=_parse_iso(data.get("updated_at")),
    )


def _comment_from_api(data: Dict[str, Any]) -> Comment:
    user = data.get("user") or {}
    created = _parse_iso(data.get("created_at"))
    updated = _parse_iso(data.get("updated_at")) or created
    return Comment(
        id=data.get("id", 0),
        body=data.get("body") or "",
        author=user.get("login", ""),
        created_at=created,
        updated_at=updated,
    )


def _pr_from_api(repo: str, data: Dict[str, Any]) -> PullRequest:
    owner, name = _split_repo(repo)
    user = data.get("user") or {}
    head = data.get("head") or {}
    return PullRequest(
        owner=owner,
        repo=name,
        number=data["number"],
        title=data.get("title") or "",
        body=data.get("body") or "",
        author=user.get("login", ""),
        state=data.get("state", "open"),
        html_url=data.get("html_url"),
        head_sha=head.get("sha", ""),
        created_at=_parse_iso(data.get("created_at")),
        updated_at=_parse_iso(data.get("updated_at")),
    )


def _commit_from_api(data: Dict[str, Any]) -> Commit:
    commit = data.get("commit") or {}
    author = data.get("author") or {}
    return Commit(
        sha=data.get("sha", ""),
        message=commit.get("message") or "",
        author=author.get("login") or (commit.get("author") or {}).get("name", ""),
    )


def _file_from_api(data: Dict[str, Any]) -> ChangedFile:
    return ChangedFile(
        filename=data["filename"],
        status=data.get("status", "modified"),
        patch=data.get("patch"),
    )


class GitHubAdapter(GitPlatformAdapter):
    """GitHub REST API implementation."""

    def __init__(self, token: str, api_url: str = "https://api.github.com", timeout: int = 30) -> None:
        self._api_url = api_url.rstrip("/")
        self._timeout = timeout
        self._session = requests.Session()
        self._session.headers["Authorization"] = f"token {token}"
        self._session.headers["Accept"] = "application/vnd.github.v3+json"

    def _url(self, path: str) -> str:
        return f"{self._api_url}{path}" if path.startswith("/") else f"{self._api_url}/{path}"

    def _request(
        self,
        method: str,
        url: str,
        params: Dict[str, Any] | None = None,
    ) -> requests.Response:
        try:
            resp = self._session.request(method, url, params=params, timeout=self._timeout)
        except requests.RequestException as e:
            raise GitPlatformError(f"Request to {url} failed: {e}") from e
        if resp.status_code >= 400:
            msg = resp.text or resp.reason or str(resp.status_code)
            try:
                msg = resp.json().get("message", msg)
            except (ValueError, AttributeError):
                pass
            if resp.status_code == 401:
                raise AuthenticationError(f"401: {msg}")
            if resp.status_code in (404, 410):
                raise NotFoundError(f"{resp.status_code}: {msg}")
            raise GitPlatformError(f"{resp.status_code}: {msg}")
        return resp

    def _get(self, path: str, params: Dict[str, Any] | None = None) -> Any:
        return self._request("GET", self._url(path), params=params).json()

    def _get_paginated(self, path: str) -> List[Dict[str, Any]]:
        """GET a list endpoint and follow Link rel="next" until exhausted."""
        items: List[Dict[str, Any]] = []
        url: str | None = self._url(path)
        params: Dict[str, Any] | None = {"per_page": PER_PAGE}
        while url:
            resp = self._request("GET", url, params=params)
            items.extend(resp.json() or [])
            url = (resp.links.get("next") or {}).get("url")
            # next link already carries the query string
            params = None
        return items

    def get_pr(self, repo: str, pr_number: int) -> PullRequest:
        return _pr_from_api(repo, self._get(f"/repos/{repo}/pulls/{pr_number}"))

    def get_issue(self, repo: str, issue_number: int) -> Issue:
        return _issue_from_api(repo, self._get(f"/repos/{repo}/issues/{issue_number}"))

    def get_issue_comments(self, repo: str, issue_number: int) -> List[Comment]:
        data = self._get_paginated(f"/repos/{repo}/issues/{issue_number}/comments")
        return [_comment_from_api(d) for d in data]

    def list_pr_commits(self, repo: str, pr_number: int) -> List[Commit]:
        data = self._get_paginated(f"/repos/{repo}/pulls/{pr_number}/commits")
        return [_commit_from_api(d) for d in data]

    def list_pr_files(self, repo: str, pr_number: int) -> List[ChangedFile]:
        data = self._get_paginated(f"/repos/{repo}/pulls/{pr_number}/files")
        return [_file_from_api(d) for d in data]

    def get_file_content(self, repo: str, path: str, ref: str) -> bytes:
        data = self._get(f"/repos/{repo}/contents/{quote(path)}", params={"ref": ref})
        if not isinstance(data, dict) or "content" not in data:
            raise NotFoundError(f"Not a file: {path}")
        if data.get("encoding", "base64") != "base64":
            return (data.get("content") or "").encode("utf-8")
        return base64.b64decode(data["content"])
