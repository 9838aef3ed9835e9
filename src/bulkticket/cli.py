"""Command-line interface for bulkticket.

Usage example:
    bt parse plan.txt --assignee ios=amy --format json
    bt check plan.txt
"""

from __future__ import annotations

import json
import logging
import os
import sys
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from bulkticket.config import OUTPUT_FORMATS, load_config
from bulkticket.errors import ParseError
from bulkticket.outline import parse
from bulkticket.state import write_json
from bulkticket.ticket import Ticket, TicketNode, count_subtickets, format_outline

logger = logging.getLogger("bulkticket.cli")

error_console = Console(stderr=True)


def print_error(message: str) -> None:
    """Print a consistently styled error message to stderr."""
    error_console.print(f"[bold red]Error:[/bold red] {escape(message)}", highlight=False, soft_wrap=True)


app = typer.Typer(
    name="bt",
    help="Turn an indented outline into issue-tracker tickets.",
    add_completion=False,
)


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )


def read_document(path: str) -> str:
    """Read the outline at *path*, or stdin when *path* is ``-``."""
    if path == "-":
        return sys.stdin.read()
    source = Path(path)
    if not source.exists():
        raise FileNotFoundError(f"Outline file not found: {path}")
    return source.read_text(encoding="utf-8")


def parse_assignee_overrides(values: list[str] | None) -> dict[str, str]:
    """Turn ``LABEL=USER`` options into a mapping.

    Raises:
        ValueError: If a value has no ``=`` or an empty label.
    """
    overrides: dict[str, str] = {}
    for value in values or []:
        label, sep, assignee = value.partition("=")
        label = label.strip()
        if not sep or not label:
            raise ValueError(f"Invalid --assignee '{value}', expected LABEL=USER")
        overrides[label] = assignee.strip()
    return overrides


def load_tickets(path: str, assignee_map: dict[str, str]) -> list[Ticket]:
    """Read and parse an outline, exiting with a styled error on failure."""
    try:
        document = read_document(path)
        tickets = parse(document, assignee_map=assignee_map)
    except ParseError as e:
        print_error(f"{path}: {e.describe()}")
        raise typer.Exit(code=1) from None
    except FileNotFoundError as e:
        print_error(f"{e}")
        raise typer.Exit(code=1) from None

    logger.debug("Parsed %d ticket(s) from %s", len(tickets), path)
    return tickets


def format_summary(tickets: list[Ticket]) -> str:
    """Build a one-line summary, e.g. ``3 tickets · 5 sub-tickets · 13 points``."""
    points = sum(t.story_points for t in tickets) + sum(c.story_points for t in tickets for c in t.children)
    parts = [f"{len(tickets)} tickets", f"{count_subtickets(tickets)} sub-tickets"]
    if points:
        parts.append(f"{points} points")
    return " · ".join(parts)


def console_width() -> int:
    """Get the current terminal width, defaulting to 120 if unavailable."""
    try:
        return os.get_terminal_size().columns
    except (ValueError, OSError):
        return 120


def render_ticket_table(tickets: list[Ticket]) -> None:
    """Render tickets and their sub-tickets as a Rich table.

    Epic, Story and Team columns are only shown when at least one ticket
    carries that field.
    """
    nodes: list[TicketNode] = [node for t in tickets for node in (t, *t.children)]
    optional = [key for key in ("epic", "story", "team") if any(getattr(n, key) for n in nodes)]

    console = Console(width=max(console_width(), 120))
    table = Table(show_header=True, header_style="bold", padding=(0, 1))

    table.add_column("Title")
    table.add_column("Assignee", no_wrap=True)
    table.add_column("Components")
    table.add_column("Labels", style="cyan")
    table.add_column("Pts", justify="right", no_wrap=True)
    for key in optional:
        table.add_column(key.title(), style="dim", no_wrap=True)

    def add_row(node: TicketNode, prefix: str) -> None:
        # Text() keeps "[label] title" from being read as Rich markup
        row: list[Text] = [
            Text(f"{prefix}{node.title}"),
            Text(f"@{node.assignee}" if node.assignee else ""),
            Text(", ".join(node.components)),
            Text(", ".join(f"#{label}" for label in node.labels)),
            Text(str(node.story_points) if node.story_points else ""),
        ]
        row.extend(Text(getattr(node, key) or "") for key in optional)
        table.add_row(*row)

    for ticket in tickets:
        add_row(ticket, "")
        for child in ticket.children:
            add_row(child, "  └ ")

    console.print(table)
    console.print(format_summary(tickets), highlight=False)


@app.command("parse", help="Parse an outline and print the tickets.")
def parse_command(
    path: Annotated[str, typer.Argument(help="Outline file, or - for stdin.")],
    assignee: Annotated[
        list[str] | None,
        typer.Option("--assignee", "-a", help="Matrix assignee as LABEL=USER (repeatable)."),
    ] = None,
    output_format: Annotated[
        str | None,
        typer.Option("--format", "-f", help="Output format: table, json or outline (default: from config)."),
    ] = None,
    output: Annotated[str | None, typer.Option("--output", "-o", help="Also write the tickets as JSON here.")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log parser progress to stderr.")] = False,
) -> None:
    """Parse an outline into tickets and print them."""
    configure_logging(verbose)

    base = Path.cwd()
    try:
        cfg = load_config(base)
        assignee_map = {**cfg.assignees, **parse_assignee_overrides(assignee)}
    except ValueError as e:
        print_error(f"{e}")
        raise typer.Exit(code=1) from None

    output_format = output_format or cfg.output.format
    if output_format not in OUTPUT_FORMATS:
        print_error(f"Unknown format '{output_format}'. Choose from: {', '.join(OUTPUT_FORMATS)}")
        raise typer.Exit(code=1)

    tickets = load_tickets(path, assignee_map)
    data = [ticket.to_dict() for ticket in tickets]

    if output_format == "json":
        typer.echo(json.dumps(data, indent=cfg.output.indent or None))
    elif output_format == "outline":
        typer.echo(format_outline(tickets), nl=False)
    else:
        render_ticket_table(tickets)

    if output:
        output_path = Path(output)
        write_json(output_path, data, indent=cfg.output.indent)
        logger.info("Wrote %d ticket(s) to %s", len(tickets), output_path)


@app.command("check", help="Check that an outline parses.")
def check_command(
    path: Annotated[str, typer.Argument(help="Outline file, or - for stdin.")],
) -> None:
    """Parse an outline and report a summary, exiting 1 on the first error."""
    tickets = load_tickets(path, {})
    typer.echo(f"OK: {format_summary(tickets)}")


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

config_app = typer.Typer(name="config", help="View configuration.")
app.add_typer(config_app, name="config")


@config_app.command("show", help="Print the effective configuration.")
def config_show() -> None:
    """Print the merged config (defaults + user overrides) as JSON."""
    import dataclasses

    base = Path.cwd()
    try:
        cfg = load_config(base)
    except ValueError as e:
        print_error(f"invalid config: {e}")
        raise typer.Exit(code=1) from None

    typer.echo(json.dumps(dataclasses.asdict(cfg), indent=2))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
