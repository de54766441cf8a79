"""Pytest fixtures for kitstage tests."""

from __future__ import annotations

import sys
from collections.abc import Callable
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

import pytest

from kitstage.config import KitConfig, KitInputs
from kitstage.infra.command import CommandRunner


def write_file(path: Path, size: int) -> Path:
    """Write a file of exactly ``size`` bytes."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"x" * size)
    return path


@pytest.fixture
def make_file() -> Callable[[Path, int], Path]:
    """Return the helper writing a file of an exact size."""
    return write_file


@pytest.fixture
def packages_root(tmp_path: Path) -> Path:
    """Create a packages root with a ``core`` and an ``extras`` group.

    core:
    - a-1.0.rpm (100 bytes)
    - a-debuginfo-1.0.rpm (50 bytes)
    - a-debugsource-1.0.rpm (50 bytes)
    - empty.rpm (0 bytes)

    extras:
    - b-2.0.rpm (200 bytes)
    """
    root = tmp_path / "packages"
    write_file(root / "core" / "a-1.0.rpm", 100)
    write_file(root / "core" / "a-debuginfo-1.0.rpm", 50)
    write_file(root / "core" / "a-debugsource-1.0.rpm", 50)
    write_file(root / "core" / "empty.rpm", 0)
    write_file(root / "extras" / "b-2.0.rpm", 200)
    return root


@pytest.fixture
def output_root(tmp_path: Path) -> Path:
    """Output root for kits (not created)."""
    return tmp_path / "out"


@pytest.fixture
def kit_inputs(packages_root: Path, output_root: Path) -> KitInputs:
    """Inputs staging the ``core`` group for x86_64."""
    return KitInputs(
        packages_dir=packages_root,
        packages=["core"],
        output_dir=output_root,
        arch="x86_64",
    )


@pytest.fixture
def default_config() -> KitConfig:
    """Create a default KitConfig."""
    return KitConfig.default()


@pytest.fixture
def command_runner() -> CommandRunner:
    """Create a CommandRunner instance."""
    return CommandRunner(heartbeat_interval=0)


@pytest.fixture
def dry_run_command_runner() -> CommandRunner:
    """Create a dry-run CommandRunner instance."""
    return CommandRunner(dry_run=True)
