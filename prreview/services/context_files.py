"""Read local files that are added to the prompt as extra context."""

import logging
from pathlib import Path
from typing import Iterable, List

from prreview.models import LocalFile

logger = logging.getLogger("prreview.services.context_files")


class ContextFileError(Exception):
    """Raised when a declared context file is missing or unreadable."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(message)
        self.path = path


def split_paths(value: str | None) -> List[str]:
    """Split a comma-separated path list, dropping blanks."""
    if not value:
        return []
    return [p.strip() for p in value.split(",") if p.strip()]


def read_context_files(paths: Iterable[str]) -> List[LocalFile]:
    """Read every path as text, in order.

    Paths are kept as given (relative or absolute) for the document.
    """
    files = []
    for path in paths:
        logger.info("Reading %s", path)
        p = Path(path)
        if not p.is_file():
            raise ContextFileError(path, f"Optional file {path} not found.")
        try:
            content = p.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            raise ContextFileError(path, f"Error reading file {path}: {e}") from e
        files.append(LocalFile(filename=path, content=content))
    return files
