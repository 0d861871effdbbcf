"""
Collect everything for one review prompt and render it.

Order of work: read local context files (a bad path aborts before any
network call), fetch the pull request with its comments, commits and
changed files, resolve linked issues, then assemble the document.
"""

import logging
from pathlib import PurePosixPath
from typing import Iterable, List, Sequence

from prreview.adapters.base import GitPlatformAdapter, NotFoundError
from prreview.config import ReviewConfig
from prreview.models import ChangedFile, PullRequest, Reference
from prreview.services.context_files import read_context_files
from prreview.services.document import SkipContent, build_document, render_document
from prreview.services.linked_issues import collect_linked_issues, make_issue_resolver

logger = logging.getLogger("prreview.services.collector")

CONTENT_NOT_FOUND = "(file content not found)"


def is_binary(data: bytes) -> bool:
    """Treat content with a NUL byte as binary."""
    return b"\x00" in data


def make_skip_content(extensions: Iterable[str]) -> SkipContent:
    """Return a predicate that rejects files by (case-insensitive) extension."""
    suffixes = {e.lower() if e.startswith(".") else f".{e.lower()}" for e in extensions}

    def skip(changed: ChangedFile) -> bool:
        return PurePosixPath(changed.filename).suffix.lower() in suffixes

    return skip


def fetch_pull_request(adapter: GitPlatformAdapter, ref: Reference) -> PullRequest:
    """Fetch the root PR together with its conversation comments."""
    logger.info("Fetching PR #%s for %s", ref.number, ref.full_repo)
    pr = adapter.get_pr(ref.full_repo, ref.number)
    comments = adapter.get_issue_comments(ref.full_repo, ref.number)
    return pr.model_copy(update={"comments": comments})


def _file_content(adapter: GitPlatformAdapter, pr: PullRequest, path: str) -> str | None:
    logger.info("Fetching %s", path)
    try:
        data = adapter.get_file_content(pr.full_repo, path, pr.head_sha)
    except NotFoundError:
        return CONTENT_NOT_FOUND
    if is_binary(data):
        return None
    return data.decode("utf-8", errors="replace")


def fetch_changed_files(
    adapter: GitPlatformAdapter,
    pr: PullRequest,
    include_content: bool = False,
    skip_content: SkipContent | None = None,
) -> List[ChangedFile]:
    """List changed files; with ``include_content`` also fetch their contents at head.

    Content stays None for binary files and for files ``skip_content`` rejects.
    """
    files = adapter.list_pr_files(pr.full_repo, pr.number)
    if not include_content:
        return files
    result = []
    for changed in files:
        if skip_content is not None and skip_content(changed):
            result.append(changed)
            continue
        content = _file_content(adapter, pr, changed.filename)
        result.append(changed.model_copy(update={"content": content}))
    return result


def build_review_prompt(
    adapter: GitPlatformAdapter,
    ref: Reference,
    review: ReviewConfig,
    context_paths: Sequence[str] = (),
) -> str:
    """Run the whole pipeline for one PR and return the rendered XML."""
    local_files = read_context_files(context_paths)

    pr = fetch_pull_request(adapter, ref)
    commits = adapter.list_pr_commits(ref.full_repo, ref.number)
    skip_content = make_skip_content(review.skip_content_extensions)
    files = fetch_changed_files(adapter, pr, review.include_content, skip_content)

    linked = collect_linked_issues(pr, make_issue_resolver(adapter), review.linked_issues_limit)

    root = build_document(
        task=review.prompt,
        pull_request=pr,
        commits=commits,
        files=files,
        linked_issues=linked,
        local_files=local_files,
        include_content=review.include_content,
        skip_content=skip_content,
    )
    return render_document(root)
