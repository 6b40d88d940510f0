"""Exceptions raised by the scaffolder.

Every failure the CLI knows how to report derives from ``ScaffoldError``.
Input validation errors are not listed here: they surface as pydantic
``ValidationError`` from ``Answers`` and are handled by re-prompting.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from create_exbackend.installer import CommandResult


class ScaffoldError(Exception):
    """Base class for errors that abort a scaffolding run."""


class MaterializeError(ScaffoldError):
    """Raised when the project tree cannot be written to disk."""


class TargetNotEmptyError(MaterializeError):
    """Raised when the target already holds files and ``force`` is off, or is a file."""

    def __init__(self, path: Path) -> None:
        self.path = path
        if path.exists() and not path.is_dir():
            message = f"Target exists and is not a directory: {path}"
        else:
            message = f"Target directory is not empty: {path} (re-run with --force to write into it)"
        super().__init__(message)


class TemplateNotFoundError(MaterializeError):
    """Raised when a copy template directory is missing."""

    def __init__(self, name: str, path: Path) -> None:
        self.name = name
        self.path = path
        super().__init__(f"Template {name!r} not found at {path}")


class ExternalToolError(ScaffoldError):
    """Raised when an external command is missing or exits non-zero."""

    def __init__(self, message: str, result: CommandResult | None = None) -> None:
        self.result = result
        super().__init__(message)
