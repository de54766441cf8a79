"""Unit tests for configuration schema and kit inputs."""

from __future__ import annotations

from pathlib import Path

import pytest

from kitstage.config import KitConfig, KitInputs
from kitstage.exceptions import ConfigError


def test_default_config() -> None:
    config = KitConfig.default()

    assert config.exclude_patterns == ["*-debuginfo-*", "*-debugsource-*"]
    assert config.file_mode == 0o644
    assert config.missing_groups == "skip"
    assert config.createrepo.binary == "createrepo_c"
    assert config.query.binary == "dnf"
    assert config.repo_id == "kit"


def test_config_load_custom_settings(tmp_path: Path) -> None:
    path = tmp_path / "kitstage.yaml"
    path.write_text(
        "missing_groups: error\n"
        "file_mode: 0444\n"
        "createrepo:\n"
        "  binary: createrepo_c\n"
        "  args: ['--update']\n"
    )

    loaded = KitConfig.load(path)

    assert loaded.missing_groups == "error"
    assert loaded.createrepo.args == ["--update"]
    assert loaded.file_mode == 0o444
    assert loaded.query.binary == "dnf"


def test_from_yaml_partial_uses_defaults() -> None:
    config = KitConfig.from_yaml("query:\n  binary: dnf5\n")

    assert config.query.binary == "dnf5"
    assert config.query.args == []
    assert config.createrepo.binary == "createrepo_c"


def test_from_yaml_empty_document() -> None:
    assert KitConfig.from_yaml("") == KitConfig.default()


def test_from_yaml_rejects_non_mapping() -> None:
    with pytest.raises(ConfigError, match="must be a mapping"):
        KitConfig.from_yaml("- a\n- b\n")


def test_from_yaml_rejects_invalid_yaml() -> None:
    with pytest.raises(ConfigError, match="Invalid YAML"):
        KitConfig.from_yaml("query: [unterminated\n")


@pytest.mark.parametrize(
    "content",
    [
        "missing_groups: sometimes\n",
        "file_mode: 99999\n",
        "repo_id: 'my kit'\n",
        "createrepo:\n  binary: ''\n",
    ],
)
def test_from_yaml_rejects_invalid_values(content: str) -> None:
    with pytest.raises(ConfigError, match="Invalid config"):
        KitConfig.from_yaml(content)


def test_load_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="not found") as exc_info:
        KitConfig.load(tmp_path / "nope.yaml")
    assert exc_info.value.config_path == tmp_path / "nope.yaml"


def test_inputs_keep_package_names_intact(tmp_path: Path) -> None:
    """A group name with whitespace is one group, and duplicates stay."""
    inputs = KitInputs.create(
        packages_dir=tmp_path,
        packages=["core tools", "core", "core"],
        output_dir=tmp_path / "out",
        arch="aarch64",
    )

    assert inputs.packages == ["core tools", "core", "core"]


@pytest.mark.parametrize(
    "arch", [None, "", "   ", "x86_64/../..", "..", "a/b", ".kitstage", ".hidden"]
)
def test_inputs_reject_bad_arch(tmp_path: Path, arch: str | None) -> None:
    with pytest.raises(ConfigError) as exc_info:
        KitInputs.create(
            packages_dir=tmp_path,
            packages=["core"],
            output_dir=tmp_path,
            arch=arch,
        )
    assert exc_info.value.field == "arch"


@pytest.mark.parametrize("packages", [None, [], [""], ["../etc"], [".."]])
def test_inputs_reject_bad_packages(tmp_path: Path, packages: list[str] | None) -> None:
    with pytest.raises(ConfigError) as exc_info:
        KitInputs.create(
            packages_dir=tmp_path,
            packages=packages,
            output_dir=tmp_path,
            arch="x86_64",
        )
    assert exc_info.value.field.startswith("packages")


def test_inputs_require_paths(tmp_path: Path) -> None:
    with pytest.raises(ConfigError) as exc_info:
        KitInputs.create(
            packages_dir=None,
            packages=["core"],
            output_dir=tmp_path,
            arch="x86_64",
        )
    assert exc_info.value.field == "packages_dir"
