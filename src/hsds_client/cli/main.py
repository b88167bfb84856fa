"""`hsds-client` command line.

Commands:
- `load SOURCE DOMAIN`: copy a local HDF5 file into a new HSDS domain.
- `info DOMAIN`: show domain metadata and its root links.
- `setup`: store endpoint and credentials in the per-user `.env`.
- `doctor run`: configuration and connectivity checks.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler

from hsds_client.cli import doctor
from hsds_client.cli.ui_components import (
    build_domain_panel,
    build_links_table,
    build_progress,
    build_stats_table,
    print_banner,
)
from hsds_client.client import HsdsClient
from hsds_client.core.config import LOG_LEVELS, HsdsSettings, write_user_env_vars
from hsds_client.core.errors import HsdsError
from hsds_client.core.services.h5_loader import (
    CHUNK_ELEMENTS,
    MAX_CHUNK_ROWS,
    MAX_PAYLOAD_BYTES,
    LoaderHooks,
    LoadRequest,
    LoadResult,
    load_file,
    verify_upload,
)

app = typer.Typer(no_args_is_help=True, help="Client for the HDF Scalable Data Service (HSDS).")
app.add_typer(doctor.app, name="doctor")

_console = Console()


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=False, show_path=False)],
        force=True,
    )


def _check_log_level(value: str | None) -> str | None:
    if value is None:
        return None
    level = value.strip().upper()
    if level not in LOG_LEVELS:
        raise typer.BadParameter(f"must be one of {', '.join(LOG_LEVELS)}")
    return level


def _settings(endpoint: str | None, username: str | None, password: str | None) -> HsdsSettings:
    overrides = {
        "endpoint": endpoint,
        "username": username,
        "password": password,
    }
    return HsdsSettings(**{k: v for k, v in overrides.items() if v is not None})


@app.callback()
def main(
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        callback=_check_log_level,
        help="Logging level (defaults to HSDS_LOG_LEVEL or WARNING).",
    ),
) -> None:
    _configure_logging(log_level or HsdsSettings().log_level)


async def _load(settings: HsdsSettings, request: LoadRequest) -> LoadResult:
    with build_progress(_console) as progress:
        chunk_task: dict[str, int] = {}

        def on_item(kind: str, path: str) -> None:
            _console.print(f"   [dim]{kind}[/dim] {path}")

        def on_chunk(path: str, done: int, total: int) -> None:
            task_id = chunk_task.get(path)
            if task_id is None:
                task_id = progress.add_task(path, total=total)
                chunk_task[path] = task_id
            progress.update(task_id, completed=done)

        def on_warning(message: str) -> None:
            _console.print(f"[yellow]Warning:[/yellow] {message}")

        hooks = LoaderHooks(warning=on_warning, item=on_item, chunk_progress=on_chunk)
        async with HsdsClient.from_settings(settings) as client:
            result = await load_file(client, request, hooks)
            links = await verify_upload(client, request.domain)

    _console.print(f"\n[green]Root group contains {len(links.links)} items[/green]")
    for link in links.links[:3]:
        _console.print(f"   - {link.title}")
    return result


@app.command()
def load(
    source: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Local HDF5 file."),
    domain: str = typer.Argument(..., help="Target domain path, e.g. /home/user/file.h5"),
    endpoint: str | None = typer.Option(None, "--endpoint", help="HSDS endpoint URL."),
    username: str | None = typer.Option(None, "--username", "-u"),
    password: str | None = typer.Option(None, "--password", "-p"),
    max_payload_bytes: int = typer.Option(MAX_PAYLOAD_BYTES, min=1, help="Largest single write."),
    chunk_elements: int = typer.Option(CHUNK_ELEMENTS, min=1, help="Elements per 1-D chunk."),
    max_chunk_rows: int = typer.Option(MAX_CHUNK_ROWS, min=1, help="Rows per N-D chunk."),
    no_attributes: bool = typer.Option(False, "--no-attributes", help="Do not copy attributes."),
    banner: bool = typer.Option(True, "--banner/--no-banner"),
) -> None:
    """Copy a local HDF5 file into a new HSDS domain."""

    if banner:
        print_banner(_console)
    settings = _settings(endpoint, username, password)
    request = LoadRequest(
        source=source,
        domain=domain,
        max_payload_bytes=max_payload_bytes,
        chunk_elements=chunk_elements,
        max_chunk_rows=max_chunk_rows,
        copy_attributes=not no_attributes,
    )
    _console.print(f"Reading HDF5 file: {source}\nTarget domain: {domain}\n")

    try:
        result = asyncio.run(_load(settings, request))
    except HsdsError as exc:
        _console.print(f"[red]Load failed:[/red] {exc}")
        raise typer.Exit(code=1) from exc
    except OSError as exc:
        _console.print(f"[red]Cannot read {source}:[/red] {exc}")
        raise typer.Exit(code=1) from exc

    _console.print(build_stats_table(result))
    if result.warnings:
        _console.print(f"[yellow]{len(result.warnings)} warnings[/yellow]")


async def _info(settings: HsdsSettings, domain: str) -> None:
    async with HsdsClient.from_settings(settings) as client:
        info = await client.domains.get_domain(domain)
        _console.print(build_domain_panel(domain, info))
        if info.root:
            links = await client.links.list_links(domain, info.root)
            _console.print(build_links_table(links))


@app.command()
def info(
    domain: str = typer.Argument(..., help="Domain path."),
    endpoint: str | None = typer.Option(None, "--endpoint", help="HSDS endpoint URL."),
    username: str | None = typer.Option(None, "--username", "-u"),
    password: str | None = typer.Option(None, "--password", "-p"),
) -> None:
    """Show domain metadata and the root group's links."""

    try:
        asyncio.run(_info(_settings(endpoint, username, password), domain))
    except HsdsError as exc:
        _console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1) from exc


@app.command()
def setup() -> None:
    """Interactive setup (stores config in the user config .env)."""

    current = HsdsSettings()
    endpoint = typer.prompt("HSDS endpoint", default=current.endpoint, show_default=True).strip()
    username = typer.prompt("Username", default=current.username or "", show_default=True).strip()
    password = typer.prompt(
        "Password",
        default="",
        hide_input=True,
        show_default=False,
        confirmation_prompt=False,
    ).strip()

    if not endpoint:
        raise typer.BadParameter("endpoint is required")

    env_path = write_user_env_vars(
        {
            "HSDS_ENDPOINT": endpoint,
            "HSDS_USERNAME": username or None,
            "HSDS_PASSWORD": password or None,
        }
    )

    _console.print(f"[green]Saved HSDS config to:[/green] {env_path}")


def run() -> None:
    app()
