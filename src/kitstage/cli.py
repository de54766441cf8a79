"""CLI interface for kitstage."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Annotated

import structlog
import typer

from kitstage import __version__
from kitstage.config import KitInputs
from kitstage.exceptions import ConfigError, KitError, RepoToolError
from kitstage.runner import create_builder

logger = structlog.get_logger()

app = typer.Typer(
    name="kitstage",
    help="Stage an architecture-scoped package kit and index it",
    no_args_is_help=True,
    add_completion=False,
)


def configure_logging(level: int = logging.INFO) -> None:
    """Configure structlog for CLI output on stderr."""
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"kitstage version {__version__}")
        raise typer.Exit()


@app.command()
def build(
    packages_dir: Annotated[
        Path,
        typer.Option(
            "--packages-dir",
            help="Root directory with one subdirectory per package group",
        ),
    ],
    output_dir: Annotated[
        Path,
        typer.Option(
            "--output-dir",
            help="Output root; the kit lands at <output-dir>/<arch>",
        ),
    ],
    package: Annotated[
        list[str] | None,
        typer.Option(
            "--package",
            help="Package group to include (repeatable)",
        ),
    ] = None,
    arch: Annotated[
        str | None,
        typer.Option(
            "--arch",
            envvar="ARCH",
            help="Architecture identifier",
        ),
    ] = None,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to kitstage.yaml config file",
            exists=True,
            dir_okay=False,
            resolve_path=True,
        ),
    ] = None,
    strict_groups: Annotated[
        bool,
        typer.Option(
            "--strict-groups",
            help="Fail when a package group directory does not exist",
        ),
    ] = False,
    skip_validate: Annotated[
        bool,
        typer.Option(
            "--skip-validate",
            help="Stop after generating repository metadata",
        ),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            help="Don't execute repository tools, just log them",
        ),
    ] = False,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Print the build report as JSON",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-V", help="Enable debug logging"),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Only log warnings and errors"),
    ] = False,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Stage a kit from package groups, generate metadata and validate it.

    Debug-info, debug-source and empty files are left out. The kit
    directory is recreated from scratch on every run.
    """
    if verbose:
        configure_logging(logging.DEBUG)
    elif quiet:
        configure_logging(logging.WARNING)
    else:
        configure_logging()

    log = logger.bind(command="build")

    try:
        inputs = KitInputs.create(
            packages_dir=packages_dir,
            packages=list(package) if package else [],
            output_dir=output_dir,
            arch=arch,
        )
        builder = create_builder(
            config_path=config,
            search_dir=Path.cwd(),
            strict_groups=True if strict_groups else None,
            validate=not skip_validate,
            dry_run=dry_run,
        )
    except ConfigError as e:
        log.error("Invalid configuration", error=str(e))
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(2) from e

    try:
        result = builder.build(inputs)
    except KitError as e:
        log.error("Kit build failed", error=str(e))
        typer.echo(f"Error: {e}", err=True)
        if isinstance(e, RepoToolError) and e.result is not None:
            tail = e.result.get_log_tail()
            if tail:
                typer.echo(f"Last lines of {e.result.log_path}:", err=True)
                typer.echo(tail, err=True)
        raise typer.Exit(1) from e

    if json_output:
        typer.echo(json.dumps(result.to_dict(), indent=2))
        return

    typer.echo(f"Kit: {result.staging.kit_dir}")
    typer.echo(f"Packages staged: {len(result.staging.staged_names)}")
    if result.staging.missing_groups:
        typer.echo(f"Missing groups: {', '.join(result.staging.missing_groups)}")
    typer.echo(typer.style("Kit built successfully!", fg=typer.colors.GREEN))


def main() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
