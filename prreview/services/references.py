"""Find issue and pull request references in free text.

Three surface forms are recognized, tried in this order at every scan
position:

- ``https://github.com/owner/repo/pull/123`` or ``.../issues/123``
- ``owner/repo#123``
- ``#123`` (owner and repo come from the caller's defaults)
"""

import re
from typing import List

from prreview.models import Reference

_NAME = r"[\w.-]+"

REFERENCE_RULES = (
    rf"https?://github\.com/(?P<url_owner>{_NAME})/(?P<url_repo>{_NAME})/(?:pull|issues)/(?P<url_number>\d+)",
    rf"(?:(?P<ref_owner>{_NAME})/(?P<ref_repo>{_NAME}))?\#(?P<ref_number>\d+)",
)

# \w and \d match ASCII only
REFERENCE_PATTERN = re.compile("|".join(f"(?:{rule})" for rule in REFERENCE_RULES), re.ASCII)


class InvalidReferenceError(ValueError):
    """Raised when a pull request reference cannot be parsed."""

    pass


def _reference_from_match(match: re.Match, default_owner: str, default_repo: str) -> Reference | None:
    for prefix in ("url", "ref"):
        number = match.group(f"{prefix}_number")
        if not number:
            continue
        return Reference(
            owner=match.group(f"{prefix}_owner") or default_owner,
            repo=match.group(f"{prefix}_repo") or default_repo,
            number=int(number),
        )
    return None


def extract_references(text: str | None, default_owner: str, default_repo: str) -> List[Reference]:
    """Return references found in text, in match order.

    Duplicates are kept; callers deduplicate by ``Reference.key``.
    """
    if not text:
        return []
    refs = []
    for match in REFERENCE_PATTERN.finditer(text):
        ref = _reference_from_match(match, default_owner, default_repo)
        if ref is not None:
            refs.append(ref)
    return refs


def parse_pull_request_reference(value: str) -> Reference:
    """Parse the root pull request from a URL or ``owner/repo#N``.

    Raises InvalidReferenceError when owner, repo or number is missing.
    """
    match = REFERENCE_PATTERN.search(value or "")
    if match is None:
        raise InvalidReferenceError(f"Invalid pull request reference: {value!r}")
    ref = _reference_from_match(match, "", "")
    if ref is None or not ref.owner or not ref.repo:
        raise InvalidReferenceError(f"Invalid pull request reference: {value!r}")
    return ref
