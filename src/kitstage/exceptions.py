"""Custom exceptions for kitstage."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from kitstage.repo.base import RepoToolResult


class KitError(Exception):
    """Base exception for all kitstage errors."""

    pass


class ConfigError(KitError):
    """Raised when configuration or kit inputs are invalid."""

    def __init__(
        self,
        message: str,
        *,
        config_path: Path | None = None,
        field: str = "",
    ) -> None:
        super().__init__(message)
        self.config_path = config_path
        self.field = field


class StagingError(KitError):
    """Raised when the kit directory cannot be staged."""

    def __init__(
        self,
        message: str,
        *,
        operation: str = "",
        path: Path | None = None,
    ) -> None:
        super().__init__(message)
        self.operation = operation
        self.path = path


class CommandError(KitError):
    """Raised when an external tool cannot be started or times out."""

    def __init__(
        self,
        message: str,
        *,
        command: list[str] | None = None,
        cwd: Path | None = None,
    ) -> None:
        super().__init__(message)
        self.command = command or []
        self.cwd = cwd


class RepoToolError(KitError):
    """Raised when a repository tool (metadata generation or query) fails.

    ``result`` is set when the tool ran and exited non-zero; it is None when
    the tool could not be started at all.
    """

    def __init__(
        self,
        message: str,
        *,
        tool_name: str = "",
        result: RepoToolResult | None = None,
    ) -> None:
        super().__init__(message)
        self.tool_name = tool_name
        self.result = result
