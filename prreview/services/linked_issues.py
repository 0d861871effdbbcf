"""
Resolve issues referenced from a pull request, transitively.

References found in the PR description and comments are resolved breadth-first.
Every resolved issue is scanned for further references, which join the back of
the queue. A canonical key (owner/repo#number) is resolved at most once, the
root PR itself never, and traversal stops once ``limit`` issues are resolved.

Missing or inaccessible issues are skipped. Any other platform error (bad
credentials, network) propagates and aborts the run.
"""

import logging
from collections import deque
from typing import Callable, Iterable, List

from prreview.adapters.base import GitPlatformAdapter, NotFoundError
from prreview.models import Comment, Issue, PullRequest, Reference
from prreview.services.references import extract_references

Resolver = Callable[[Reference], Issue]

logger = logging.getLogger("prreview.services.linked_issues")


def entity_text(body: str, comments: Iterable[Comment]) -> str:
    """Join a description and its comment bodies for reference scanning."""
    return "\n".join([body or "", *(c.body for c in comments)])


def make_issue_resolver(adapter: GitPlatformAdapter) -> Resolver:
    """Return a resolver that fetches an issue and its comments.

    The resolver raises NotFoundError when the issue is missing.
    """

    def resolve(ref: Reference) -> Issue:
        logger.info("Fetching linked issue #%s for %s", ref.number, ref.full_repo)
        issue = adapter.get_issue(ref.full_repo, ref.number)
        comments = adapter.get_issue_comments(ref.full_repo, ref.number)
        return issue.model_copy(update={"comments": comments})

    return resolve


def collect_linked_issues(root: PullRequest, resolve: Resolver, limit: int) -> List[Issue]:
    """Breadth-first resolution of issues referenced from ``root``.

    Bare ``#N`` references anywhere in the graph resolve against the root PR's
    repository. Returns issues in resolution order, at most ``limit`` of them.
    """
    if limit <= 0:
        return []

    owner, repo = root.owner, root.repo
    queue = deque(extract_references(entity_text(root.body, root.comments), owner, repo))
    seen = {root.reference.key}
    issues: List[Issue] = []

    while queue and len(issues) < limit:
        ref = queue.popleft()
        if ref.key in seen:
            continue
        seen.add(ref.key)

        try:
            issue = resolve(ref)
        except NotFoundError:
            logger.info("Linked issue %s for %s not found, skipping", ref.number, ref.full_repo)
            continue

        issues.append(issue)

        found = extract_references(entity_text(issue.body, issue.comments), owner, repo)
        queue.extend(r for r in found if r.key not in seen)

    logger.info("Fetched %d linked issues (limit: %d)", len(issues), limit)
    return issues
