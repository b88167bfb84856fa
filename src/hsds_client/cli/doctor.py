"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio
from typing import Any

import typer
from rich.console import Console
from rich.table import Table

from hsds_client.client import HsdsClient
from hsds_client.core.config import HsdsSettings, get_user_env_file
from hsds_client.core.errors import HsdsError

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_about(settings: HsdsSettings) -> tuple[bool, str]:
    try:
        async with HsdsClient.from_settings(settings) as client:
            about: dict[str, Any] = await client.about()
    except HsdsError as exc:
        return False, str(exc)
    state = about.get("state", "?")
    version = about.get("hsds_version", "?")
    return True, f"state={state} version={version}"


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = HsdsSettings()

    table = Table(title="hsds-client Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    table.add_row("Endpoint", "OK", settings.endpoint)
    if settings.token:
        table.add_row("Credentials", "OK", "Bearer token")
    elif settings.username:
        detail = "Basic auth" if settings.password else "Basic auth (empty password)"
        table.add_row("Credentials", "OK", f"{detail} as {settings.username}")
    else:
        table.add_row("Credentials", "OPTIONAL", "None set -> anonymous requests")
    env_file = get_user_env_file()
    table.add_row("User config", "OK" if env_file.exists() else "MISSING", str(env_file))

    # Connectivity
    ok_about, detail_about = asyncio.run(_check_about(settings))
    table.add_row("HSDS /about", "OK" if ok_about else "FAIL", detail_about)

    _console.print(table)

    if not ok_about:
        _console.print("\n[yellow]Note:[/yellow] Run `hsds-client setup` to store the endpoint and credentials.")
