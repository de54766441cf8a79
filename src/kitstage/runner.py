"""Kit builder: stage, generate metadata, validate."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import structlog

from kitstage.config import DEFAULT_CONFIG_NAME, KitConfig, KitInputs
from kitstage.exceptions import CommandError, RepoToolError
from kitstage.infra.command import CommandRunner
from kitstage.paths import KitPaths
from kitstage.repo.base import RepoTool, RepoToolResult
from kitstage.repo.createrepo import CreaterepoTool
from kitstage.repo.query import RepoQueryTool
from kitstage.staging import KitStager, StagingReport

logger = structlog.get_logger()


@dataclass
class KitBuildResult:
    """Summary of a kit build.

    Attributes:
        inputs: The inputs the kit was built from.
        staging: What was staged.
        metadata: Result of metadata generation.
        validation: Result of the query check (None when skipped).
    """

    inputs: KitInputs
    staging: StagingReport
    metadata: RepoToolResult | None = None
    validation: RepoToolResult | None = None

    @property
    def success(self) -> bool:
        if self.metadata is None or self.metadata.failed:
            return False
        return self.validation is None or self.validation.ok

    def to_dict(self) -> dict[str, Any]:
        return {
            "inputs": self.inputs.model_dump(mode="json"),
            "staging": self.staging.to_dict(),
            "metadata": self.metadata.to_dict() if self.metadata else None,
            "validation": self.validation.to_dict() if self.validation else None,
            "success": self.success,
        }


class KitBuilder:
    """Runs the kit pipeline, stopping at the first failure."""

    def __init__(
        self,
        config: KitConfig,
        *,
        cmd: CommandRunner | None = None,
        strict_groups: bool | None = None,
        validate: bool = True,
    ) -> None:
        """Initialize the builder.

        Args:
            config: Kit configuration.
            cmd: Command runner for the external tools.
            strict_groups: Override for the missing-group policy.
            validate: Whether to run the query check after metadata generation.
        """
        self.config = config
        self.cmd = cmd or CommandRunner()
        self.validate = validate
        self.stager = KitStager(config, strict_groups=strict_groups)
        self.metadata_tool: RepoTool = CreaterepoTool(cmd=self.cmd, tool=config.createrepo)
        self.query_tool: RepoTool = RepoQueryTool(
            cmd=self.cmd, tool=config.query, repo_id=config.repo_id
        )

    def _run_tool(self, tool: RepoTool, paths: KitPaths) -> RepoToolResult:
        try:
            result = tool.run(kit_dir=paths.kit_dir, log_path=paths.log_path(tool.name))
        except CommandError as e:
            msg = f"{tool.name} could not run: {e}"
            raise RepoToolError(msg, tool_name=tool.name) from e

        if result.failed:
            msg = f"{result.message}: {' '.join(result.command)}"
            raise RepoToolError(msg, tool_name=tool.name, result=result)
        return result

    def build(self, inputs: KitInputs) -> KitBuildResult:
        """Build a kit.

        Args:
            inputs: Validated kit inputs.

        Returns:
            KitBuildResult for a fully successful build.

        Raises:
            StagingError: If staging fails.
            RepoToolError: If metadata generation or validation fails.
        """
        paths = KitPaths(inputs.output_dir, inputs.arch)
        log = logger.bind(kit_dir=str(paths.kit_dir), arch=inputs.arch)
        log.info("Building kit")

        staging = self.stager.stage(inputs)
        result = KitBuildResult(inputs=inputs, staging=staging)

        result.metadata = self._run_tool(self.metadata_tool, paths)

        if self.validate:
            result.validation = self._run_tool(self.query_tool, paths)
        else:
            log.info("Skipping kit validation")

        log.info("Kit built", files=len(staging.staged_names))
        return result


def load_config(config_path: Path | None = None, *, search_dir: Path | None = None) -> KitConfig:
    """Load configuration from an explicit path or the default file.

    Args:
        config_path: Explicit YAML file.
        search_dir: Directory searched for ``kitstage.yaml`` when no path is given.

    Returns:
        Loaded configuration, or defaults when no file is found.
    """
    if config_path is not None:
        return KitConfig.load(config_path)
    if search_dir is not None:
        default_config = search_dir / DEFAULT_CONFIG_NAME
        if default_config.exists():
            return KitConfig.load(default_config)
    return KitConfig.default()


def create_builder(
    *,
    config: KitConfig | None = None,
    config_path: Path | None = None,
    search_dir: Path | None = None,
    strict_groups: bool | None = None,
    validate: bool = True,
    dry_run: bool = False,
) -> KitBuilder:
    """Create a KitBuilder instance with configuration.

    Args:
        config: Optional KitConfig instance.
        config_path: Optional path to config file.
        search_dir: Directory searched for the default config file.
        strict_groups: Treat missing package groups as errors when True.
        validate: Run the query check after metadata generation.
        dry_run: If True, don't execute external tools.

    Returns:
        Configured KitBuilder instance.
    """
    cfg = config if config is not None else load_config(config_path, search_dir=search_dir)
    return KitBuilder(
        cfg,
        cmd=CommandRunner(dry_run=dry_run),
        strict_groups=strict_groups,
        validate=validate,
    )
