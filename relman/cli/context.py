from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import NoReturn

import typer

from relman.core.config import CONFIG_FILE_NAME, Config, load_config, load_config_or_default
from relman.core.errors import ErrorCode
from relman.core.result import Err
from relman.git.repository import Repository
from relman.output.console import ConsoleProtocol, RichConsole
from relman.registry.http import RealHttpClient
from relman.registry.tags import TagResolver


@dataclass(frozen=True, slots=True)
class CLIContext:
    repo_root: Path
    manifest_path: Path
    config: Config
    console: ConsoleProtocol

    def repository(self) -> Repository:
        return Repository(self.repo_root)

    def resolver(self) -> TagResolver:
        client = RealHttpClient(timeout=self.config.registry.timeout)
        return TagResolver(self.config.registry, client)


def exit_with(err: str, *, code: ErrorCode) -> NoReturn:
    typer.echo(f"error: {err}", err=True)
    raise typer.Exit(code=int(code))


def build_context(
    *,
    repo: Path | None,
    manifest: Path | None,
    config_path: Path | None,
    console: ConsoleProtocol | None = None,
) -> CLIContext:
    try:
        repo_root = (repo or Path.cwd()).expanduser().resolve()
    except OSError as e:
        exit_with(f"invalid --repo: {e}", code=ErrorCode.USER_ERROR)
    if not repo_root.is_dir():
        exit_with(f"repository root is not a directory: {repo_root}", code=ErrorCode.USER_ERROR)

    if config_path is not None:
        config_result = load_config(config_path.expanduser())
    else:
        config_result = load_config_or_default(repo_root / CONFIG_FILE_NAME)
    if isinstance(config_result, Err):
        exit_with(config_result.error.message, code=ErrorCode.USER_ERROR)
    config = config_result.value

    manifest_path = manifest if manifest is not None else Path(config.manifest.path)
    manifest_path = manifest_path.expanduser()
    if not manifest_path.is_absolute():
        manifest_path = repo_root / manifest_path

    return CLIContext(
        repo_root=repo_root,
        manifest_path=manifest_path,
        config=config,
        console=console or RichConsole(),
    )
