"""Repository metadata generation with createrepo_c."""

from __future__ import annotations

from pathlib import Path

from kitstage.repo.base import BaseRepoTool


class CreaterepoTool(BaseRepoTool):
    """Generates repository metadata over a staged kit.

    Example:
        >>> tool = CreaterepoTool(cmd=CommandRunner(), tool=ToolConfig(binary="createrepo_c"))
        >>> tool.build_command(Path("/out/x86_64"))
        ['createrepo_c', '/out/x86_64']
    """

    @property
    def name(self) -> str:
        return "createrepo"

    def build_command(self, kit_dir: Path) -> list[str]:
        return [self.tool.binary, *self.tool.args, str(kit_dir.resolve())]
