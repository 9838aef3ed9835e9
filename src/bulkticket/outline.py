"""Outline parser: turns an indented bullet outline into tickets.

The outline format:

    ---
    epic: PAY-12
    ---
    - Ship checkout @alice {Payments} +3
      Free-text description for the ticket.

      Blank lines between description lines are kept.
      - Write migration #db
        Description for the sub-ticket.
    - Browser testing [chrome, firefox]

Non-indented ``-`` lines open tickets, indented ``-`` lines open sub-tickets
of the current ticket, and any other indented line is description text for
whichever ticket or sub-ticket is open. A ticket with a ``[a, b]`` matrix gets
one generated sub-ticket per entry instead of authored ones.

Scanning is driven by a :class:`ScanCursor` that holds all per-document
state; :func:`process_line` applies one line to it. :func:`parse` is the
entry point most callers want.

Usage example:
    from bulkticket.outline import parse

    tickets = parse(text, assignee_map={"chrome": "amy"})
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum

from bulkticket.annotations import extract_annotations
from bulkticket.errors import (
    MatrixSubtaskConflictError,
    MissingTitleError,
    ParseError,
    UnexpectedIndentationError,
)
from bulkticket.parsing import is_frontmatter_delimiter, parse_frontmatter_field
from bulkticket.ticket import SubTicket, Ticket

logger = logging.getLogger("bulkticket.outline")

TICKET_MARKER = "-"


class ScanState(Enum):
    NONE = "none"
    IN_TICKET = "in_ticket"
    IN_SUBTICKET = "in_subticket"


@dataclass
class DocumentContext:
    """Document-wide values threaded through a single parse.

    ``epic``, ``story`` and ``team`` are updated by front-matter blocks and
    copied onto every ticket and sub-ticket opened afterwards.
    """

    epic: str | None = None
    story: str | None = None
    team: str | None = None
    assignee_map: dict[str, str] = field(default_factory=dict)

    def update(self, key: str, value: str) -> None:
        setattr(self, key, value)

    def defaults(self) -> dict[str, str | None]:
        return {"epic": self.epic, "story": self.story, "team": self.team}


@dataclass
class ScanCursor:
    """Mutable scan state for one document."""

    context: DocumentContext = field(default_factory=DocumentContext)
    tickets: list[Ticket] = field(default_factory=list)
    ticket: Ticket | None = None
    subticket: SubTicket | None = None
    # True while the open ticket's children came from a matrix
    matrix_mode: bool = False
    blank_lines: str = ""
    in_front_matter: bool = False
    line_number: int = 0

    @property
    def state(self) -> ScanState:
        if self.subticket is not None:
            return ScanState.IN_SUBTICKET
        if self.ticket is not None:
            return ScanState.IN_TICKET
        return ScanState.NONE


def is_indented(line: str) -> bool:
    return bool(line) and line[0].isspace()


def strip_marker(text: str) -> str:
    """Remove the leading ``-`` (and the space after it) from a title line."""
    return text.strip()[len(TICKET_MARKER) :].strip()


def commit_subticket(cursor: ScanCursor) -> None:
    # Already in the parent's children since it opened
    cursor.subticket = None


def commit_ticket(cursor: ScanCursor) -> None:
    commit_subticket(cursor)
    if cursor.ticket is None:
        return
    logger.debug(
        "Parsed ticket %r with %d sub-ticket(s)",
        cursor.ticket.title,
        len(cursor.ticket.children),
    )
    cursor.tickets.append(cursor.ticket)
    cursor.ticket = None
    cursor.matrix_mode = False


def expand_matrix(ticket: Ticket, entries: list[str], context: DocumentContext) -> list[SubTicket]:
    """Generate one sub-ticket per matrix entry.

    Each child is labelled with its entry and keeps the parent's components.
    The assignee comes from ``context.assignee_map`` only; it is never
    inherited from the parent ticket.
    """
    return [
        SubTicket(
            title=f"[{entry}] {ticket.title}",
            assignee=context.assignee_map.get(entry, ""),
            components=list(ticket.components),
            labels=[entry],
            **context.defaults(),
        )
        for entry in entries
    ]


def open_ticket(cursor: ScanCursor, line: str) -> None:
    """Handle a non-indented line: close what is open and start a ticket."""
    commit_ticket(cursor)
    cursor.blank_lines = ""

    if not line.startswith(TICKET_MARKER):
        raise MissingTitleError()

    annotations = extract_annotations(strip_marker(line), allow_matrix=True)
    if not annotations.title:
        logger.debug("Skipping ticket line %d with no title", cursor.line_number)
        return

    ticket = Ticket(
        title=annotations.title,
        assignee=annotations.assignee,
        components=annotations.components,
        labels=annotations.labels,
        story_points=annotations.story_points,
        **cursor.context.defaults(),
    )
    if annotations.matrix:
        ticket.children = expand_matrix(ticket, annotations.matrix, cursor.context)
        cursor.matrix_mode = True
    cursor.ticket = ticket


def open_subticket(cursor: ScanCursor, ticket: Ticket, line: str) -> None:
    """Handle an indented ``-`` line under *ticket*, the open ticket.

    A line with nothing left after extraction (``- @bob``) still opens a
    sub-ticket so the description lines below it stay with it.
    """
    commit_subticket(cursor)
    cursor.blank_lines = ""

    if cursor.matrix_mode:
        raise MatrixSubtaskConflictError()

    annotations = extract_annotations(strip_marker(line), allow_matrix=False)
    subticket = SubTicket(
        title=annotations.title,
        assignee=annotations.assignee or ticket.assignee,
        components=annotations.components or list(ticket.components),
        labels=annotations.labels or list(ticket.labels),
        story_points=annotations.story_points,
        **cursor.context.defaults(),
    )
    ticket.children.append(subticket)
    cursor.subticket = subticket


def append_description(cursor: ScanCursor, target: Ticket | SubTicket, line: str) -> None:
    """Append a description line to *target*, the open ticket or sub-ticket."""
    target.description += cursor.blank_lines + line.strip() + "\n"
    cursor.blank_lines = ""


def handle_blank(cursor: ScanCursor) -> None:
    # Held back until the next description line so trailing blanks are dropped
    if cursor.ticket is not None:
        cursor.blank_lines += "\n"


def handle_frontmatter(cursor: ScanCursor, line: str) -> bool:
    """Consume front-matter lines. Returns True if *line* was consumed."""
    if is_frontmatter_delimiter(line):
        cursor.in_front_matter = not cursor.in_front_matter
        return True
    if not cursor.in_front_matter:
        return False

    parsed = parse_frontmatter_field(line)
    if parsed is not None:
        key, value = parsed
        logger.debug("Front matter %s=%r", key, value)
        cursor.context.update(key, value)
    return True


def process_line(cursor: ScanCursor, line: str) -> None:
    """Apply one physical line to the cursor.

    Raises:
        ParseError: With ``line_number`` set to the cursor's current line.
    """
    line = line.rstrip("\r")
    try:
        if handle_frontmatter(cursor, line):
            return

        if not line.strip():
            handle_blank(cursor)
            return

        if not is_indented(line):
            open_ticket(cursor, line)
            return

        ticket = cursor.ticket
        if ticket is None:
            raise UnexpectedIndentationError()

        if line.strip().startswith(TICKET_MARKER):
            open_subticket(cursor, ticket, line)
        else:
            append_description(cursor, cursor.subticket or ticket, line)
    except ParseError as exc:
        if exc.line_number is None:
            exc.line_number = cursor.line_number
        raise


def finish(cursor: ScanCursor) -> list[Ticket]:
    """Commit anything still open and return the parsed tickets."""
    commit_ticket(cursor)
    return cursor.tickets


def parse(document: str, assignee_map: Mapping[str, str] | None = None) -> list[Ticket]:
    """Parse an outline document into tickets.

    Args:
        document: The whole outline, ``\\n``-separated.
        assignee_map: Matrix entry -> assignee, used for generated
            sub-tickets. Entries not in the map get no assignee.

    Returns:
        Tickets in document order.

    Raises:
        ParseError: On the first malformed line; nothing is returned for a
            document that fails to parse.
    """
    cursor = ScanCursor(context=DocumentContext(assignee_map=dict(assignee_map or {})))
    for number, line in enumerate(document.split("\n"), start=1):
        cursor.line_number = number
        process_line(cursor, line)
    return finish(cursor)
