"""Subprocess runner for the repository tools."""

from __future__ import annotations

import subprocess
import threading
from dataclasses import dataclass
from pathlib import Path

import structlog

from kitstage.exceptions import CommandError

logger = structlog.get_logger()


@dataclass
class CommandResult:
    """Outcome of one tool invocation.

    Attributes:
        returncode: Exit code of the process (0 in dry-run mode).
        stdout_path: File holding the captured stdout.
        stderr_path: File holding the captured stderr.
        command: The command line that was run.
        cwd: Working directory of the process.
    """

    returncode: int
    stdout_path: Path
    stderr_path: Path
    command: list[str]
    cwd: Path | None


class CommandRunner:
    """Runs an external tool with its output captured to log files.

    Example:
        >>> runner = CommandRunner()
        >>> result = runner.run(
        ...     ["createrepo_c", "/out/x86_64"],
        ...     stdout_path=Path("/out/.kitstage/x86_64/createrepo.log"),
        ...     stderr_path=Path("/out/.kitstage/x86_64/createrepo.stderr.log"),
        ... )
        >>> result.returncode
        0
    """

    def __init__(self, dry_run: bool = False, heartbeat_interval: int = 30) -> None:
        """Initialize the command runner.

        Args:
            dry_run: If True, commands are logged but not executed.
            heartbeat_interval: Seconds between "still running" log lines (0 to disable).
        """
        self.dry_run = dry_run
        self.heartbeat_interval = heartbeat_interval

    def _heartbeat(self, log: structlog.BoundLogger, stop_event: threading.Event) -> None:
        elapsed = 0
        while not stop_event.wait(timeout=self.heartbeat_interval):
            elapsed += self.heartbeat_interval
            log.info("Command still running", elapsed_seconds=elapsed)

    def run(
        self,
        command: list[str],
        *,
        stdout_path: Path,
        stderr_path: Path,
        cwd: Path | None = None,
        timeout: int | None = None,
    ) -> CommandResult:
        """Run a command to completion.

        A non-zero exit is reported through ``returncode``; callers decide
        whether it is fatal.

        Args:
            command: Command and arguments to run.
            stdout_path: File receiving stdout (parents are created).
            stderr_path: File receiving stderr (parents are created).
            cwd: Working directory for the command.
            timeout: Timeout in seconds.

        Raises:
            CommandError: If the binary cannot be found or the timeout expires.
        """
        log = logger.bind(command=command, cwd=str(cwd) if cwd else None)
        log.info("Running command")

        stdout_path.parent.mkdir(parents=True, exist_ok=True)
        stderr_path.parent.mkdir(parents=True, exist_ok=True)

        if self.dry_run:
            log.info("Dry run - skipping execution")
            stdout_path.write_text("")
            stderr_path.write_text("")
            return CommandResult(0, stdout_path, stderr_path, command, cwd)

        stop_heartbeat = threading.Event()
        heartbeat_thread = None
        if self.heartbeat_interval > 0 and (
            timeout is None or timeout > self.heartbeat_interval
        ):
            heartbeat_thread = threading.Thread(
                target=self._heartbeat, args=(log, stop_heartbeat), daemon=True
            )
            heartbeat_thread.start()

        try:
            with stdout_path.open("wb") as out, stderr_path.open("wb") as err:
                completed = subprocess.run(
                    command, cwd=cwd, stdout=out, stderr=err, timeout=timeout, check=False
                )
        except subprocess.TimeoutExpired as e:
            log.error("Command timed out", timeout=timeout)
            msg = f"Command timed out after {timeout}s: {' '.join(command)}"
            raise CommandError(msg, command=command, cwd=cwd) from e
        except FileNotFoundError as e:
            log.error("Command not found", command=command[0])
            msg = f"Command not found: {command[0]}"
            raise CommandError(msg, command=command, cwd=cwd) from e
        finally:
            if heartbeat_thread:
                stop_heartbeat.set()
                heartbeat_thread.join(timeout=1)

        log.info("Command completed", returncode=completed.returncode)
        return CommandResult(completed.returncode, stdout_path, stderr_path, command, cwd)
