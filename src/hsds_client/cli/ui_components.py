"""UI components for the CLI (Rich).

Why separate components:
- Keeps command logic apart from visual details.
- Lets several commands reuse tables and panels.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.progress import BarColumn, MofNCompleteColumn, Progress, SpinnerColumn, TextColumn
from rich.table import Table
from rich.text import Text

from hsds_client.core.domain.models import Domain, Links
from hsds_client.core.services.h5_loader import LoadResult


def print_banner(console: Console) -> None:
    """Print the welcome banner.

    Why here:
    - Avoids circular imports (main <-> doctor).
    - Lets non-interactive modes skip it.
    """

    title = Text("hsds-client", style="bold cyan")
    subtitle = Text("HDF5 files • HSDS domains", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_progress(console: Console) -> Progress:
    return Progress(
        SpinnerColumn(),
        TextColumn("[bold]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        console=console,
        transient=True,
    )


def build_stats_table(result: LoadResult) -> Table:
    stats = result.stats
    table = Table(title="Loading Statistics")
    table.add_column("Item", style="cyan", no_wrap=True)
    table.add_column("Count", style="white", justify="right")
    table.add_row("Groups created", str(stats.groups_created))
    table.add_row("Datasets created", str(stats.datasets_created))
    table.add_row("Attributes copied", str(stats.attributes_created))
    table.add_row("Links created", str(stats.links_created))
    table.add_row("Datasets skipped", str(stats.datasets_skipped))
    table.add_row("Attributes failed", str(stats.attributes_failed))
    table.add_row("Failed chunks", str(stats.failed_chunks))
    return table


def build_domain_panel(name: str, domain: Domain) -> Panel:
    body = Text()
    body.append(f"Owner: {domain.owner or '-'}\n")
    body.append(f"Class: {domain.class_.value if domain.class_ else '-'}\n")
    body.append(f"Root group: {domain.root or '-'}\n")
    if domain.created is not None:
        body.append(f"Created: {domain.created:.0f}\n")
    if domain.last_modified is not None:
        body.append(f"Last modified: {domain.last_modified:.0f}", style="dim")
    return Panel(body, title=Text(name, style="bold yellow"), border_style="yellow")


def build_links_table(links: Links) -> Table:
    table = Table(title="Root links")
    table.add_column("Title", style="cyan", no_wrap=True)
    table.add_column("Class", style="white")
    table.add_column("Target", style="magenta")
    for link in links.links:
        target = link.id or link.h5path or ""
        if link.h5domain:
            target = f"{link.h5domain}:{target}"
        table.add_row(link.title, link.class_.value if link.class_ else "", target)
    return table
