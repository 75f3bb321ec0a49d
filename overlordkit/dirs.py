"""Filesystem path helpers."""

from __future__ import annotations

import os


class NotFileError(ValueError):
    """Raised when a path must be a file."""

    def __init__(self, message: str = "path must be a File") -> None:
        super().__init__(message)


class NotDirError(ValueError):
    """Raised when a path must be a directory."""

    def __init__(self, message: str = "path must be a Dir") -> None:
        super().__init__(message)


def is_exists(path: str | os.PathLike[str]) -> bool:
    """Report whether ``path`` exists; always true when RunMode is ``test``."""
    if os.environ.get("RunMode") == "test":
        return True
    try:
        os.stat(path)
    except FileNotFoundError:
        return False
    return True


def get_abs_dir(path: str | os.PathLike[str]) -> str:
    """Return the absolute directory that contains ``path``."""
    return os.path.dirname(os.path.abspath(path))


def mkdir_all(path: str | os.PathLike[str]) -> None:
    """Create ``path`` and any missing parents, like ``mkdir -p``."""
    os.makedirs(os.path.abspath(path), mode=0o755, exist_ok=True)