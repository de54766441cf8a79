"""Base repository tool protocol and result types."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

import structlog

from kitstage.config import ToolConfig
from kitstage.infra.command import CommandRunner

logger = structlog.get_logger()


@dataclass
class RepoToolResult:
    """Result of a repository tool execution.

    Attributes:
        ok: Whether the tool succeeded.
        returncode: Exit code from the tool.
        log_path: Path to the tool log file (stdout, then stderr).
        command: The full command line that was run.
        message: Short description of the result.
    """

    ok: bool
    returncode: int
    log_path: Path
    command: list[str]
    message: str = ""

    @property
    def failed(self) -> bool:
        """Check if the tool failed."""
        return not self.ok

    def read_log(self) -> str:
        """Read the tool log content."""
        if self.log_path.exists():
            return self.log_path.read_text(errors="replace")
        return ""

    def get_log_tail(self, lines: int = 20) -> str:
        """Get the last ``lines`` lines of the log."""
        content = self.read_log()
        if not content:
            return ""
        return "\n".join(content.splitlines()[-lines:])

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "returncode": self.returncode,
            "log_path": str(self.log_path),
            "command": list(self.command),
            "message": self.message,
        }


@runtime_checkable
class RepoTool(Protocol):
    """Protocol for tools run against a staged kit."""

    @property
    def name(self) -> str:
        """Name of the tool step (e.g., 'createrepo', 'query')."""
        ...

    def run(self, *, kit_dir: Path, log_path: Path) -> RepoToolResult:
        """Run the tool against a kit.

        Args:
            kit_dir: Root of the staged kit.
            log_path: Path to write the log to.

        Returns:
            RepoToolResult with pass/fail status.
        """
        ...


class BaseRepoTool:
    """Shared execution logic for repository tools.

    Subclasses provide ``name`` and ``build_command``.
    """

    def __init__(self, *, cmd: CommandRunner, tool: ToolConfig) -> None:
        self.cmd = cmd
        self.tool = tool

    @property
    def name(self) -> str:
        raise NotImplementedError

    def build_command(self, kit_dir: Path) -> list[str]:
        raise NotImplementedError

    def run(self, *, kit_dir: Path, log_path: Path) -> RepoToolResult:
        """Run the tool, folding stderr into the main log."""
        log = logger.bind(tool=self.name, kit_dir=str(kit_dir))
        command = self.build_command(kit_dir)
        log.info("Running repository tool", command=command)

        log_path.parent.mkdir(parents=True, exist_ok=True)
        stderr_path = log_path.with_suffix(".stderr.log")

        result = self.cmd.run(
            command,
            cwd=kit_dir,
            stdout_path=log_path,
            stderr_path=stderr_path,
            timeout=self.tool.timeout,
        )

        if stderr_path.exists():
            stderr_content = stderr_path.read_text(errors="replace")
            if stderr_content:
                with log_path.open("a") as f:
                    f.write("\n--- stderr ---\n")
                    f.write(stderr_content)
            stderr_path.unlink()

        ok = result.returncode == 0
        if ok:
            log.info("Repository tool succeeded")
            message = f"{self.name} succeeded"
        else:
            log.warning("Repository tool failed", returncode=result.returncode)
            message = f"{self.name} failed (exit code {result.returncode})"

        return RepoToolResult(
            ok=ok,
            returncode=result.returncode,
            log_path=log_path,
            command=command,
            message=message,
        )
