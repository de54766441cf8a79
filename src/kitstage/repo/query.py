"""Queryability check of a staged kit with dnf."""

from __future__ import annotations

from pathlib import Path

from kitstage.config import ToolConfig
from kitstage.infra.command import CommandRunner
from kitstage.repo.base import BaseRepoTool


class RepoQueryTool(BaseRepoTool):
    """Lists everything in the kit with every other repository disabled.

    Only the exit status matters; the listing itself is kept in the log.
    """

    def __init__(self, *, cmd: CommandRunner, tool: ToolConfig, repo_id: str = "kit") -> None:
        super().__init__(cmd=cmd, tool=tool)
        self.repo_id = repo_id

    @property
    def name(self) -> str:
        return "query"

    def build_command(self, kit_dir: Path) -> list[str]:
        kit_uri = kit_dir.resolve().as_uri()
        return [
            self.tool.binary,
            *self.tool.args,
            "--disablerepo=*",
            f"--repofrompath={self.repo_id},{kit_uri}",
            f"--enablerepo={self.repo_id}",
            "list",
            "--all",
        ]
