"""
Sidebar commands - talk to running sidebar instances and the shared state.

``notify`` and ``alert`` go through the multiplexer's pipe so every sidebar
instance receives them. ``toggle`` and ``status`` work on the shared collapse
record directly; running instances pick changes up on their next poll.
"""

import os
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from ..config.constants import PIPE_NOTIFY, PIPE_TAB_ALERT
from ..config.settings import get_collapse_record_path, load_sidebar_settings
from ..exceptions import PipeSendError
from ..services.collapse_store import FileCollapseStore
from ..services.collapse_sync import CollapseSync
from ..services.pipe_client import send_pipe
from ..ui.layout import display_width, layout

app = typer.Typer()
console = Console()


def _send(name: str, args: dict) -> None:
    try:
        send_pipe(name, args)
    except PipeSendError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from e


@app.command()
def notify(
    tab: str = typer.Argument(..., help="Tab number (1-based) or tab name"),
    flashes: Optional[int] = typer.Option(None, "--flashes", "-f", help="Number of on/off flashes"),
):
    """
    Flash a tab in every sidebar until it is visited.

    Examples:
        zjsidebar notify 2
        zjsidebar notify main --flashes 5
    """
    args = {"tab": tab} if tab.isdigit() else {"tab_name": tab}
    if flashes is not None:
        args["flashes"] = str(flashes)
    _send(PIPE_NOTIFY, args)
    console.print(f"[green]✅ Notified tab {tab}[/green]")


@app.command()
def alert(
    exit_code: int = typer.Option(..., "--exit-code", "-e", help="Exit code of the finished command"),
    pane_id: Optional[int] = typer.Option(
        None, "--pane-id", "-p", help="Pane that ran the command (defaults to $ZELLIJ_PANE_ID)"
    ),
):
    """
    Report a finished command so its tab lights up green or red.

    Meant for a shell hook, e.g. in a precmd function:
        zjsidebar alert --exit-code $?
    """
    if pane_id is None:
        env_pane = os.environ.get("ZELLIJ_PANE_ID", "")
        if not env_pane.isdigit():
            console.print("[red]Error: no --pane-id given and ZELLIJ_PANE_ID is not set[/red]")
            raise typer.Exit(1)
        pane_id = int(env_pane)
    _send(PIPE_TAB_ALERT, {"pane_id": str(pane_id), "exit_code": str(exit_code)})


def _sync() -> CollapseSync:
    sync = CollapseSync(FileCollapseStore(get_collapse_record_path()))
    sync.poll_once()
    return sync


@app.command()
def toggle():
    """Collapse or expand the sidebar in every instance."""
    sync = _sync()
    sync.toggle()
    if sync.write_error is not None:
        console.print(f"[red]Error: {sync.write_error}[/red]")
        raise typer.Exit(1)
    state = "collapsed" if sync.desired_state() else "expanded"
    console.print(f"[green]Sidebar {state}[/green]")


@app.command()
def status():
    """Show the shared collapse state and effective settings."""
    sync = _sync()
    record = sync.belief
    settings = load_sidebar_settings()

    table = Table(title="Sidebar status")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    table.add_row("state", "collapsed" if sync.desired_state() else "expanded")
    table.add_row("record", str(get_collapse_record_path()))
    table.add_row("last toggle (ms)", str(record.timestamp) if record else "never")
    for key, value in settings.to_dict().items():
        table.add_row(key, str(value))
    console.print(table)


@app.command("layout")
def layout_cmd(
    text: str = typer.Argument(..., help="Label to lay out"),
    width: int = typer.Argument(..., help="Cell width in columns"),
):
    """Show how a label fits a sidebar cell of the given width."""
    rendered = layout(text, width)
    console.print(f"[{rendered}]", markup=False, highlight=False)
    console.print(f"input width {display_width(text)}, cell width {display_width(rendered)}")


@app.command()
def preview(
    instances: int = typer.Option(2, "--instances", "-n", help="Sidebar instances to run"),
):
    """
    Run sidebar instances against a simulated workspace.

    Keys: j/k switch tab, n new tab, s/x command ok/failed, f notify, c collapse.
    """
    from ..ui.sidebar_app import SidebarPreviewApp

    store = FileCollapseStore(get_collapse_record_path())
    SidebarPreviewApp(store, load_sidebar_settings(), instances=instances).run()
