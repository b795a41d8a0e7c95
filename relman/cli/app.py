from __future__ import annotations

from enum import Enum
from pathlib import Path

import typer

from relman import __version__
from relman.cli.context import build_context, exit_with
from relman.core.errors import ErrorCode
from relman.core.result import Err
from relman.output.console import Style
from relman.output.errors import print_release_error, release_error_exit_code
from relman.release.orchestrator import check_updates, preview_next_version, run_release
from relman.release.version import IncrementSeverity


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    help="Track service images and cut week-bucketed aggregate releases.",
)

_MANIFEST_OPTION = typer.Option(
    None, "--manifest", "-m", help="Manifest file (default from config: release_manifest.json)"
)
_CONFIG_OPTION = typer.Option(None, "--config", "-c", help="Config file (default: ./relman.toml)")
_REPO_OPTION = typer.Option(None, "--repo", help="Git repository root (default: current dir)")


class SeverityChoice(str, Enum):
    PATCH = "patch"
    MINOR = "minor"
    MAJOR = "major"


@app.callback(invoke_without_command=True)
def _main(  # pyright: ignore[reportUnusedFunction]
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
) -> None:
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))


@app.command()
def release(
    manifest: Path | None = _MANIFEST_OPTION,
    config: Path | None = _CONFIG_OPTION,
    repo: Path | None = _REPO_OPTION,
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Scan and compute the version without writing or committing."
    ),
) -> None:
    """Update service versions, commit the manifest and tag a new release."""
    ctx = build_context(repo=repo, manifest=manifest, config_path=config)

    result = run_release(
        manifest_path=ctx.manifest_path,
        git=ctx.repository(),
        resolver=ctx.resolver(),
        console=ctx.console,
        git_config=ctx.config.git,
        dry_run=dry_run,
    )
    if isinstance(result, Err):
        print_release_error(result.error, ctx.console)
        raise typer.Exit(code=release_error_exit_code(result.error))


@app.command()
def check(
    manifest: Path | None = _MANIFEST_OPTION,
    config: Path | None = _CONFIG_OPTION,
    repo: Path | None = _REPO_OPTION,
) -> None:
    """Report available updates without touching the manifest or git."""
    ctx = build_context(repo=repo, manifest=manifest, config_path=config)

    result = check_updates(
        manifest_path=ctx.manifest_path,
        resolver=ctx.resolver(),
        console=ctx.console,
    )
    if isinstance(result, Err):
        print_release_error(result.error, ctx.console)
        raise typer.Exit(code=release_error_exit_code(result.error))

    scan = result.value
    ctx.console.newline()
    if not scan.updated:
        ctx.console.success("no updates found")
    else:
        ctx.console.print(
            f"{len(scan.updates)} update(s) available; release bump: {scan.max_severity}",
            Style.BOLD,
        )
    if scan.skipped:
        ctx.console.warning(f"{len(scan.skipped)} service(s) could not be checked")


@app.command("next-version")
def next_version(
    severity: SeverityChoice = typer.Option(
        SeverityChoice.PATCH, "--severity", "-s", help="Severity of the pending change."
    ),
    repo: Path | None = _REPO_OPTION,
) -> None:
    """Print the release tag the next run would create."""
    ctx = build_context(repo=repo, manifest=None, config_path=None)
    git = ctx.repository()
    if not git.exists():
        exit_with(f"not a git repository: {ctx.repo_root}", code=ErrorCode.ENV_ERROR)

    result = preview_next_version(git=git, severity=IncrementSeverity[severity.name])
    if isinstance(result, Err):
        print_release_error(result.error, ctx.console)
        raise typer.Exit(code=release_error_exit_code(result.error))
    typer.echo(result.value)


def main() -> None:
    app()
