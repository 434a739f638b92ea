"""
Engine Bridge CLI

Command-line interface for the engine bridge.

Commands:
- post-action: Dispatch a JSON document to an action endpoint
- serve: Run the HTTP service
"""

import json
from pathlib import Path
from typing import Optional

import typer
from rich import print as rprint
from rich.console import Console

from basecore import correlation
from basecore.logging import setup_logging
from basecore.settings import get_settings

app = typer.Typer(
    name="engine-bridge",
    help="Engine Bridge CLI",
)

console = Console()


@app.command()
def post_action(
    url: str = typer.Argument(..., help="Action endpoint URL"),
    document: Path = typer.Argument(..., help="JSON file with the action body", exists=True, dir_okay=False),
    correlator: Optional[str] = typer.Option(None, help="Correlator id to propagate (generated if omitted)"),
):
    """
    Send an action payload, the same way rule actions are sent.
    """
    from engine_bridge.actions import ActionDispatcher

    setup_logging()

    try:
        body = json.loads(document.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        rprint(f"[red]Invalid JSON in {document}: {e}[/red]")
        raise typer.Exit(1)

    if not isinstance(body, dict):
        rprint("[red]Action body must be a JSON object[/red]")
        raise typer.Exit(1)

    context = correlation.begin(correlator)
    rprint(f"Transaction: [cyan]{context.transaction_id}[/cyan]")
    rprint(f"Correlator:  [cyan]{context.correlator_id}[/cyan]")

    outcome = ActionDispatcher().post(url, body, context.correlator_id)

    if outcome:
        rprint(f"[green]✓ Action delivered ({outcome.status_code})[/green]")
    else:
        rprint(f"[red]✗ Action failed: {outcome.reason}[/red]")
        raise typer.Exit(1)


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, help="Bind address"),
    port: Optional[int] = typer.Option(None, help="Port"),
):
    """
    Run the engine bridge HTTP service.
    """
    import uvicorn

    from engine_bridge.web import create_app

    settings = get_settings()
    console.print(f"[bold]Starting {settings.SERVICE_NAME}[/bold]")
    uvicorn.run(create_app(settings), host=host or settings.HOST, port=port or settings.PORT)


if __name__ == "__main__":
    app()
