"""Assemble the review prompt document.

The document is XML with a fixed shape::

    prompt
      task
      pull_request
        number, title, description
        comment*            conversation comments, in order
        commit*             commit messages, in order
        file*               filename, content?, patch
      linked_issue*         repo, number, title, description, comment*
      local_context_files?  file* (filename, content)
      task                  same text as the first task

The task is repeated after the bulk context on purpose.
"""

import copy
import re
import xml.etree.ElementTree as ET
from typing import Callable, Iterable, Sequence

from prreview.models import ChangedFile, Comment, Commit, Issue, LocalFile, PullRequest

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'

# Anything outside the XML 1.0 Char production
_INVALID_XML_CHARS = re.compile(r"[^\t\n\r\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")

SkipContent = Callable[[ChangedFile], bool]


def clean_text(value: object) -> str:
    """Text value safe for XML: None becomes empty, invalid chars are dropped.

    CRLF and lone CR become LF, as an XML parser would do on read.
    """
    if value is None:
        return ""
    text = str(value).replace("\r\n", "\n").replace("\r", "\n")
    return _INVALID_XML_CHARS.sub("", text)


def _text(parent: ET.Element, tag: str, value: object) -> ET.Element:
    node = ET.SubElement(parent, tag)
    node.text = clean_text(value)
    return node


def _comments(parent: ET.Element, comments: Iterable[Comment]) -> None:
    for comment in comments:
        _text(parent, "comment", comment.body)


def _file(parent: ET.Element, changed: ChangedFile, include_content: bool, skip_content: SkipContent | None) -> None:
    node = ET.SubElement(parent, "file")
    _text(node, "filename", changed.filename)
    show_content = include_content and changed.content is not None
    if show_content and skip_content is not None and skip_content(changed):
        show_content = False
    if show_content:
        _text(node, "content", changed.content)
    _text(node, "patch", changed.patch if changed.patch is not None else "(no patch data)")


def _linked_issue(parent: ET.Element, issue: Issue) -> None:
    node = ET.SubElement(parent, "linked_issue")
    _text(node, "repo", issue.full_repo)
    _text(node, "number", issue.number)
    _text(node, "title", issue.title)
    _text(node, "description", issue.body)
    _comments(node, issue.comments)


def build_document(
    task: str,
    pull_request: PullRequest,
    commits: Sequence[Commit] = (),
    files: Sequence[ChangedFile] = (),
    linked_issues: Sequence[Issue] = (),
    local_files: Sequence[LocalFile] = (),
    include_content: bool = False,
    skip_content: SkipContent | None = None,
) -> ET.Element:
    """Build the prompt tree from fully resolved inputs.

    PR conversation comments are taken from ``pull_request.comments``.
    A file's content node is emitted only when ``include_content`` is set,
    the file has content and ``skip_content`` does not reject it.
    """
    root = ET.Element("prompt")
    _text(root, "task", task)

    pr_node = ET.SubElement(root, "pull_request")
    _text(pr_node, "number", pull_request.number)
    _text(pr_node, "title", pull_request.title)
    _text(pr_node, "description", pull_request.body)
    _comments(pr_node, pull_request.comments)
    for commit in commits:
        _text(pr_node, "commit", commit.message)
    for changed in files:
        _file(pr_node, changed, include_content, skip_content)

    for issue in linked_issues:
        _linked_issue(root, issue)

    if local_files:
        local_node = ET.SubElement(root, "local_context_files")
        for local in local_files:
            file_node = ET.SubElement(local_node, "file")
            _text(file_node, "filename", local.filename)
            _text(file_node, "content", local.content)

    _text(root, "task", task)
    return root


def render_document(root: ET.Element) -> str:
    """Serialize the tree as indented UTF-8 XML text."""
    tree = copy.deepcopy(root)
    ET.indent(tree, space="  ")
    return XML_DECLARATION + ET.tostring(tree, encoding="unicode") + "\n"


def parse_document(text: str) -> ET.Element:
    """Parse rendered XML back into a tree."""
    return ET.fromstring(text)
