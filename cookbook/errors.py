"""Error taxonomy for the cookbook scaffolder.

Every error raised by the library derives from :class:`CookbookError` and can
be turned into a plain ``{"type": ..., "details": ...}`` dict so that callers
(the CLI, a GUI, a CI job) can report failures without parsing messages.
Validation and existence errors are always raised before any filesystem
mutation; filesystem errors abort the remaining traversal.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any


class CookbookError(Exception):
    """Base class for all cookbook errors."""

    prefix = "Cookbook error"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(f"{self.prefix}: {message}")

    def details(self) -> dict[str, Any]:
        """Return the structured payload for :meth:`to_dict`."""
        return {"message": self.message}

    def to_dict(self) -> dict[str, Any]:
        """Serialise the error as ``{"type": <class name>, "details": {...}}``."""
        return {"type": type(self).__name__, "details": self.details()}


class ValidationError(CookbookError):
    """Malformed slug or title.  Raised before any I/O."""

    prefix = "Validation error"


class ProjectExistsError(CookbookError):
    """The destination project directory already exists."""

    prefix = "Project already exists"

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        super().__init__(str(self.path))

    def details(self) -> dict[str, Any]:
        return {"message": self.message, "path": str(self.path)}


class FileSystemError(CookbookError):
    """A read/write/create failure, carrying the offending path."""

    prefix = "File system error"

    def __init__(self, message: str, path: str | Path | None = None) -> None:
        self.path = Path(path) if path is not None else None
        super().__init__(message)

    def details(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "path": str(self.path) if self.path is not None else None,
        }


class ConfigError(CookbookError):
    """Malformed version-configuration input."""

    prefix = "Invalid configuration"


class TemplateNotFoundError(CookbookError):
    """A template root (or a required template entry) is missing."""

    prefix = "Template not found"


class CommandError(CookbookError):
    """An external command (npm, git) failed to run or exited non-zero."""

    prefix = "Command execution failed"

    def __init__(self, command: str, message: str) -> None:
        self.command = command
        super().__init__(f"{command} - {message}")

    def details(self) -> dict[str, Any]:
        return {"message": self.message, "command": self.command}


class GitError(CookbookError):
    """A git operation failed."""

    prefix = "Git operation failed"
