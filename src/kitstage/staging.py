"""Kit staging: reset the kit directory and copy qualifying package files."""

from __future__ import annotations

import fnmatch
import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog

from kitstage.config import KitConfig, KitInputs
from kitstage.exceptions import StagingError
from kitstage.paths import KitPaths

logger = structlog.get_logger()

SKIP_DEBUG = "debug-artifact"
SKIP_EMPTY = "empty"
SKIP_NOT_FILE = "not-a-file"


@dataclass
class StagedEntry:
    """A package file copied into the kit."""

    group: str
    source: Path
    destination: Path
    size: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "group": self.group,
            "source": str(self.source),
            "destination": str(self.destination),
            "size": self.size,
        }


@dataclass
class StagingReport:
    """Outcome of staging a kit.

    Attributes:
        kit_dir: The kit root that was (re)created.
        staged: Files copied, in copy order.
        skipped: Rejected entries mapped to the reason they were left out.
        missing_groups: Group names whose directory did not exist.
    """

    kit_dir: Path
    staged: list[StagedEntry] = field(default_factory=list)
    skipped: dict[str, str] = field(default_factory=dict)
    missing_groups: list[str] = field(default_factory=list)

    @property
    def staged_names(self) -> list[str]:
        """Sorted, de-duplicated names present in ``Packages/``."""
        return sorted({entry.destination.name for entry in self.staged})

    def to_dict(self) -> dict[str, Any]:
        return {
            "kit_dir": str(self.kit_dir),
            "staged": [entry.to_dict() for entry in self.staged],
            "skipped": dict(self.skipped),
            "missing_groups": list(self.missing_groups),
        }


def is_debug_artifact(name: str, patterns: list[str]) -> bool:
    """Check whether a file name matches any debug-artifact pattern.

    Example:
        >>> is_debug_artifact("a-debuginfo-1.0.rpm", ["*-debuginfo-*"])
        True
    """
    return any(fnmatch.fnmatchcase(name, pattern) for pattern in patterns)


def classify_entry(entry: Path, patterns: list[str]) -> str | None:
    """Decide whether an entry belongs in a kit.

    Returns:
        None if the entry qualifies, otherwise the skip reason.
    """
    if is_debug_artifact(entry.name, patterns):
        return SKIP_DEBUG
    if not entry.is_file():
        return SKIP_NOT_FILE
    if entry.stat().st_size == 0:
        return SKIP_EMPTY
    return None


class KitStager:
    """Recreates a kit directory from package groups.

    Example:
        >>> stager = KitStager(KitConfig.default())
        >>> report = stager.stage(inputs)
        >>> report.staged_names
        ['a-1.0.rpm']
    """

    def __init__(self, config: KitConfig, *, strict_groups: bool | None = None) -> None:
        """Initialize the stager.

        Args:
            config: Kit configuration (patterns, file mode, group policy).
            strict_groups: Override for ``config.missing_groups``; True makes
                a missing group directory an error.
        """
        self.config = config
        if strict_groups is None:
            strict_groups = config.missing_groups == "error"
        self.strict_groups = strict_groups

    def reset(self, paths: KitPaths) -> None:
        """Remove the previous kit and its tool logs, then create a fresh layout.

        Raises:
            StagingError: If removal or creation fails.
        """
        for target in (paths.kit_dir, paths.logs_dir):
            try:
                if target.is_symlink() or target.is_file():
                    target.unlink()
                elif target.exists():
                    logger.debug("Removing previous output", path=str(target))
                    shutil.rmtree(target)
            except OSError as e:
                msg = f"Failed to remove previous output at {target}: {e}"
                raise StagingError(msg, operation="reset", path=target) from e

        try:
            paths.create_directories()
        except OSError as e:
            msg = f"Failed to create kit directory {paths.packages_dir}: {e}"
            raise StagingError(msg, operation="mkdir", path=paths.packages_dir) from e

    def select_entries(self, group_dir: Path, report: StagingReport) -> list[Path]:
        """List qualifying immediate children of a group directory."""
        selected: list[Path] = []
        for entry in sorted(group_dir.iterdir(), key=lambda p: p.name):
            reason = classify_entry(entry, self.config.exclude_patterns)
            if reason is None:
                selected.append(entry)
            else:
                logger.debug("Skipping entry", path=str(entry), reason=reason)
                report.skipped[str(entry)] = reason
        return selected

    def copy_entry(self, source: Path, destination_dir: Path) -> Path:
        """Copy one file, keeping timestamps and forcing the configured mode.

        An existing destination is replaced even when ``file_mode`` left it
        read-only.

        Raises:
            StagingError: If the copy or chmod fails.
        """
        destination = destination_dir / source.name
        try:
            destination.unlink(missing_ok=True)
            shutil.copy2(source, destination)
            os.chmod(destination, self.config.file_mode)
        except OSError as e:
            msg = f"Failed to copy {source} to {destination}: {e}"
            raise StagingError(msg, operation="copy", path=source) from e
        return destination

    def stage(self, inputs: KitInputs) -> StagingReport:
        """Stage a kit for the given inputs.

        Args:
            inputs: Validated kit inputs.

        Returns:
            StagingReport describing what was copied and skipped.

        Raises:
            StagingError: On any filesystem failure, or on a missing group
                when strict.
        """
        paths = KitPaths(inputs.output_dir, inputs.arch)
        log = logger.bind(kit_dir=str(paths.kit_dir))
        log.info("Staging kit", groups=inputs.packages)

        self.reset(paths)
        report = StagingReport(kit_dir=paths.kit_dir)

        for group in inputs.packages:
            group_dir = inputs.packages_dir / group
            if not group_dir.is_dir():
                if self.strict_groups:
                    msg = f"Package group directory not found: {group_dir}"
                    raise StagingError(msg, operation="list", path=group_dir)
                log.warning("Package group not found, skipping", group=group)
                report.missing_groups.append(group)
                continue

            try:
                entries = self.select_entries(group_dir, report)
            except OSError as e:
                msg = f"Failed to list package group {group_dir}: {e}"
                raise StagingError(msg, operation="list", path=group_dir) from e

            for entry in entries:
                destination = self.copy_entry(entry, paths.packages_dir)
                report.staged.append(
                    StagedEntry(
                        group=group,
                        source=entry,
                        destination=destination,
                        size=destination.stat().st_size,
                    )
                )
            log.info("Staged package group", group=group, files=len(entries))

        log.info(
            "Kit staged",
            files=len(report.staged_names),
            skipped=len(report.skipped),
            missing_groups=report.missing_groups,
        )
        return report
