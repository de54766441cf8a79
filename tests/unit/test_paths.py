"""Tests for KitPaths."""

from pathlib import Path

from kitstage.paths import KitPaths


def test_kit_paths_properties(tmp_path: Path) -> None:
    paths = KitPaths(output_dir=tmp_path, arch="x86_64")

    assert paths.kit_dir == tmp_path / "x86_64"
    assert paths.packages_dir == tmp_path / "x86_64" / "Packages"
    assert paths.logs_dir == tmp_path / ".kitstage" / "x86_64"


def test_logs_dir_is_outside_the_kit(tmp_path: Path) -> None:
    paths = KitPaths(output_dir=tmp_path, arch="x86_64")

    assert not paths.logs_dir.is_relative_to(paths.kit_dir)
    assert paths.logs_dir != KitPaths(output_dir=tmp_path, arch="aarch64").logs_dir


def test_log_path(tmp_path: Path) -> None:
    paths = KitPaths(output_dir=tmp_path, arch="x86_64")

    assert paths.log_path("createrepo") == paths.logs_dir / "createrepo.log"
    assert paths.log_path("query", ".txt") == paths.logs_dir / "query.txt"


def test_create_directories_idempotent(tmp_path: Path) -> None:
    paths = KitPaths(output_dir=tmp_path / "deep" / "out", arch="aarch64")

    paths.create_directories()
    paths.create_directories()

    assert paths.packages_dir.is_dir()
    assert paths.logs_dir.is_dir()
    assert sorted(p.name for p in paths.kit_dir.iterdir()) == ["Packages"]
