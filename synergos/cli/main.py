"""synergos CLI.

`synergos ask "hello"` runs one reasoning call against a fresh engine.
`synergos run` starts the background cycles and streams their events.
`synergos status` prints the statistics of a freshly seeded engine.
"""

from __future__ import annotations

import asyncio

import orjson
import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from synergos.cli.context import build_engine, configure_logging, run_async
from synergos.events.bus import Event

console = Console()

app = typer.Typer(
    name="synergos",
    help="synergos -- autonomic cognitive control engine.",
    no_args_is_help=True,
)


@app.callback()
def main() -> None:
    configure_logging()


@app.command("ask")
def ask(
    text: str = typer.Argument(help="Message to reason about"),
    dialog: bool = typer.Option(False, "--dialog", help="Mark the input as part of a dialog"),
    turn: int = typer.Option(1, "--turn", "-t", help="Dialog turn number"),
):
    """Run one reasoning call and show the response."""
    engine = build_engine()

    async def _ask():
        return await engine.cognition.process_input({
            "type": "message",
            "text": text,
            "dialog": dialog,
            "dialogState": "active" if dialog else None,
            "turnCount": turn,
            "requiresResponse": True,
        })

    response = run_async(_ask())
    patterns = ", ".join(response.metadata.active_patterns) or "none"
    body = (
        f"{escape(response.content)}\n\n"
        f"[dim]Confidence:[/dim] {response.confidence:.0%}   "
        f"[dim]Synergy:[/dim] {response.synergy_level:.0%}\n"
        f"[dim]Active patterns:[/dim] {patterns}"
    )
    if response.adaptations:
        body += "\n[dim]Adaptations:[/dim]\n" + "\n".join(f"  - {a}" for a in response.adaptations)
    console.print(Panel(body, title="Cognitive Response", border_style="cyan"))


@app.command("run")
def run(
    seconds: float = typer.Option(30.0, "--seconds", "-s", help="How long to run"),
    as_json: bool = typer.Option(False, "--json", help="Emit events as JSON lines"),
):
    """Start the control loop and stream its events."""
    engine = build_engine()

    async def _print(event: Event) -> None:
        if as_json:
            line = orjson.dumps({
                "topic": event.topic,
                "source": event.source,
                "timestamp": event.timestamp.isoformat(),
                "data": event.data,
            }, default=repr)
            console.print(line.decode(), markup=False, highlight=False)
        else:
            console.print(
                f"[dim]{event.timestamp:%H:%M:%S}[/dim] "
                f"[cyan]{event.source:<12}[/cyan] [bold]{event.topic}[/bold]"
            )

    engine.event_bus.subscribe("*", _print)

    async def _run():
        async with engine:
            await asyncio.sleep(seconds)
        return engine.statistics()

    stats = run_async(_run())
    if as_json:
        console.print(orjson.dumps(stats).decode(), markup=False, highlight=False)
        return
    _print_statistics(stats["cognitive"], stats["architecture"])

    cycles = Table(title="Cycles")
    cycles.add_column("Cycle", style="cyan")
    cycles.add_column("Ticks", justify="right")
    cycles.add_column("Skipped", justify="right")
    cycles.add_column("Failures", justify="right")
    for name, counts in stats["cycles"].items():
        cycles.add_row(name, str(counts["ticks"]), str(counts["skipped"]), str(counts["failures"]))
    console.print(cycles)


@app.command("status")
def status():
    """Show the statistics of a freshly seeded engine."""
    engine = build_engine()
    _print_statistics(
        engine.cognition.get_cognitive_statistics(),
        engine.architecture.get_architectural_statistics(),
    )


@app.command("version")
def version_cmd():
    """Show synergos version."""
    from synergos import __version__
    console.print(f"synergos v{__version__}")


def _print_statistics(cognitive: dict, architecture: dict) -> None:
    table = Table(title="Statistics")
    table.add_column("Subsystem", style="cyan")
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    for subsystem, values in (("cognition", cognitive), ("architecture", architecture)):
        for key, value in values.items():
            if isinstance(value, float):
                value = f"{value:.3f}"
            table.add_row(subsystem, key, str(value))
    console.print(table)
