"""Configuration schema for kitstage."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from kitstage.exceptions import ConfigError

DEFAULT_CONFIG_NAME = "kitstage.yaml"

_RESERVED_NAMES = {".", ".."}


def _check_path_component(value: str, what: str) -> str:
    if not value or not value.strip():
        msg = f"{what} must not be empty"
        raise ValueError(msg)
    if "/" in value or "\\" in value or value in _RESERVED_NAMES:
        msg = f"{what} must be a single path component, got {value!r}"
        raise ValueError(msg)
    return value


class ToolConfig(BaseModel):
    """Configuration for an external repository tool.

    Attributes:
        binary: Path or name of the CLI binary.
        args: Additional arguments placed before the generated ones.
        timeout: Timeout in seconds (None waits forever).
    """

    binary: str
    args: list[str] = Field(default_factory=list)
    timeout: int | None = Field(default=None, ge=1)

    @field_validator("binary")
    @classmethod
    def validate_binary(cls, v: str) -> str:
        """Ensure the binary is set."""
        if not v.strip():
            msg = "Tool binary must not be empty"
            raise ValueError(msg)
        return v


class KitConfig(BaseModel):
    """Settings shared by every kit build.

    Attributes:
        version: Config schema version.
        exclude_patterns: Shell globs for entries that never enter a kit.
        file_mode: Permission bits applied to every staged file.
        missing_groups: What to do when a package group directory is absent.
        repo_id: Repository id used when querying the staged kit.
        createrepo: Metadata generator settings.
        query: Repository query tool settings.

    Example:
        >>> config = KitConfig.default()
        >>> oct(config.file_mode)
        '0o644'
    """

    version: str = "1.0"
    exclude_patterns: list[str] = Field(
        default_factory=lambda: ["*-debuginfo-*", "*-debugsource-*"]
    )
    file_mode: int = Field(default=0o644, ge=0, le=0o7777)
    missing_groups: Literal["skip", "error"] = "skip"
    repo_id: str = "kit"
    createrepo: ToolConfig = Field(
        default_factory=lambda: ToolConfig(binary="createrepo_c", timeout=1800)
    )
    query: ToolConfig = Field(
        default_factory=lambda: ToolConfig(binary="dnf", timeout=600)
    )

    @field_validator("repo_id")
    @classmethod
    def validate_repo_id(cls, v: str) -> str:
        """Repo ids end up inside a ``--repofrompath=id,url`` argument."""
        if not v or any(c.isspace() for c in v) or "," in v:
            msg = f"Invalid repo id: {v!r}"
            raise ValueError(msg)
        return v

    @classmethod
    def from_yaml(cls, yaml_content: str, *, path: Path | None = None) -> KitConfig:
        """Parse config from YAML content.

        Args:
            yaml_content: YAML string to parse.
            path: Source file, used in error messages.

        Returns:
            Parsed KitConfig instance.

        Raises:
            ConfigError: If the YAML is invalid or fails validation.
        """
        try:
            data: Any = yaml.safe_load(yaml_content)
        except yaml.YAMLError as e:
            msg = f"Invalid YAML: {e}"
            raise ConfigError(msg, config_path=path) from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            msg = "Config YAML must be a mapping"
            raise ConfigError(msg, config_path=path)

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            msg = f"Invalid config: {e}"
            raise ConfigError(msg, config_path=path) from e

    @classmethod
    def load(cls, path: Path) -> KitConfig:
        """Load config from a YAML file.

        Raises:
            ConfigError: If the file is missing or invalid.
        """
        if not path.exists():
            msg = f"Config file not found: {path}"
            raise ConfigError(msg, config_path=path)
        return cls.from_yaml(path.read_text(), path=path)

    @classmethod
    def default(cls) -> KitConfig:
        """Create a default configuration."""
        return cls()


class KitInputs(BaseModel):
    """Inputs for a single kit build.

    The package list is kept as discrete names; a name containing
    whitespace is one group, not several.

    Attributes:
        packages_dir: Root directory holding one subdirectory per group.
        packages: Package group names in copy order (duplicates allowed).
        output_dir: Root output directory.
        arch: Architecture identifier; the kit lands at ``output_dir/arch``.
    """

    packages_dir: Path
    packages: list[str] = Field(min_length=1)
    output_dir: Path
    arch: str

    @field_validator("arch")
    @classmethod
    def validate_arch(cls, v: str) -> str:
        """Ensure arch is a usable directory name."""
        _check_path_component(v, "Architecture")
        # Dot-names under the output root are reserved for tool logs.
        if v.startswith("."):
            msg = f"Architecture must not start with '.', got {v!r}"
            raise ValueError(msg)
        return v

    @field_validator("packages")
    @classmethod
    def validate_packages(cls, v: list[str]) -> list[str]:
        """Ensure each group name names a direct subdirectory."""
        for name in v:
            _check_path_component(name, "Package group name")
        return v

    @classmethod
    def create(
        cls,
        *,
        packages_dir: Path | None,
        packages: list[str] | None,
        output_dir: Path | None,
        arch: str | None,
    ) -> KitInputs:
        """Build validated inputs, turning validation failures into ConfigError.

        Raises:
            ConfigError: Naming the first offending field.
        """
        try:
            return cls.model_validate(
                {
                    "packages_dir": packages_dir,
                    "packages": packages if packages is not None else [],
                    "output_dir": output_dir,
                    "arch": arch if arch is not None else "",
                }
            )
        except ValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(p) for p in first["loc"]) if first["loc"] else ""
            msg = f"Invalid kit inputs ({field}): {first['msg']}"
            raise ConfigError(msg, field=field) from e
