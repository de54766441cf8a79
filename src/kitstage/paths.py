"""Kit directory layout management for kitstage."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class KitPaths:
    """Manages the directory structure of a single kit.

    Attributes:
        output_dir: Root output directory.
        arch: Architecture identifier namespacing the kit.

    Example:
        >>> paths = KitPaths(Path("/out"), "x86_64")
        >>> paths.packages_dir
        PosixPath('/out/x86_64/Packages')
    """

    output_dir: Path
    arch: str

    @property
    def kit_dir(self) -> Path:
        """Root directory of the kit."""
        return self.output_dir / self.arch

    @property
    def packages_dir(self) -> Path:
        """Flat directory holding the staged package files."""
        return self.kit_dir / "Packages"

    @property
    def logs_dir(self) -> Path:
        """Directory for repository tool logs, kept outside the kit."""
        return self.output_dir / ".kitstage" / self.arch

    def log_path(self, name: str, suffix: str = ".log") -> Path:
        """Get the path for a tool log file.

        Args:
            name: Base name for the log file.
            suffix: File suffix (default: .log).
        """
        return self.logs_dir / f"{name}{suffix}"

    def create_directories(self) -> None:
        """Create the kit directories.

        This is idempotent - can be called multiple times safely.
        """
        self.packages_dir.mkdir(parents=True, exist_ok=True)
        self.logs_dir.mkdir(parents=True, exist_ok=True)
