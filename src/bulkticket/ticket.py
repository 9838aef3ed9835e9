"""Ticket model produced by the outline parser.

This module provides the :class:`Ticket` and :class:`SubTicket` dataclasses,
their JSON-ready dict form (the shape handed to an issue-tracker client), and
:func:`format_outline`, which turns parsed tickets back into outline text.

Example outline:
    ---
    epic: PAY-12
    team: Checkout
    ---
    - Ship checkout @alice {Payments} #backend +3
      Move the checkout flow to the new API.
      - Write migration
      - Update docs @bob
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from bulkticket.parsing import FRONTMATTER_KEYS, serialize_frontmatter


@dataclass
class TicketNode:
    """Fields shared by tickets and sub-tickets."""

    title: str
    description: str = ""
    assignee: str = ""
    components: list[str] = field(default_factory=list)
    labels: list[str] = field(default_factory=list)
    story_points: int = 0
    # Carried from the most recent front-matter block; None if none was seen
    epic: str | None = None
    story: str | None = None
    team: str | None = None

    def frontmatter(self) -> dict[str, str | None]:
        return {"epic": self.epic, "story": self.story, "team": self.team}

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "title": self.title,
            "description": self.description,
            "assignee": self.assignee,
            "components": list(self.components),
            "labels": list(self.labels),
            "storyPoints": self.story_points,
        }
        for key, value in self.frontmatter().items():
            if value is not None:
                data[key] = value
        return data


@dataclass
class SubTicket(TicketNode):
    """A child of a :class:`Ticket`. Sub-tickets cannot nest further."""


@dataclass
class Ticket(TicketNode):
    """A top-level outline entry and its sub-tickets."""

    children: list[SubTicket] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["children"] = [child.to_dict() for child in self.children]
        return data


def count_subtickets(tickets: list[Ticket]) -> int:
    return sum(len(t.children) for t in tickets)


def format_annotations(
    assignee: str = "",
    components: list[str] | None = None,
    labels: list[str] | None = None,
    story_points: int = 0,
) -> str:
    """Render annotations in extraction order, e.g. ``@amy {Web} #ui +2``."""
    parts: list[str] = []
    if assignee:
        parts.append(f"@{assignee}")
    parts.extend("{" + component + "}" for component in components or [])
    parts.extend(f"#{label}" for label in labels or [])
    if story_points:
        parts.append(f"+{story_points}")
    return " ".join(parts)


def format_description(description: str, indent: str) -> list[str]:
    return [f"{indent}{line}" if line else "" for line in description.splitlines()]


def format_subticket_line(child: SubTicket, parent: Ticket) -> str:
    """Render a sub-ticket line, omitting annotations it would inherit anyway."""
    annotations = format_annotations(
        assignee=child.assignee if child.assignee != parent.assignee else "",
        components=child.components if child.components != parent.components else None,
        labels=child.labels if child.labels != parent.labels else None,
        story_points=child.story_points,
    )
    return f"  - {child.title} {annotations}".rstrip()


def format_outline(tickets: list[Ticket]) -> str:
    """Reconstruct outline text from parsed tickets.

    Re-parsing the result yields the same titles, annotations and front-matter
    fields. Two things cannot be expressed in outline syntax and are lost: a
    sub-ticket that has *no* assignee/components/labels while its parent does
    (re-parsing inherits the parent's), and a front-matter field going back to
    unset. Matrix children are written out as ordinary sub-tickets.
    """
    lines: list[str] = []
    active: dict[str, str | None] = dict.fromkeys(FRONTMATTER_KEYS)

    def changes_frontmatter(fields: dict[str, str | None]) -> bool:
        return fields != active and any(value is not None for value in fields.values())

    for ticket in tickets:
        fields = ticket.frontmatter()
        if changes_frontmatter(fields):
            if lines:
                lines.append("")
            lines.append(serialize_frontmatter(fields))
            active = fields

        annotations = format_annotations(
            assignee=ticket.assignee,
            components=ticket.components,
            labels=ticket.labels,
            story_points=ticket.story_points,
        )
        lines.append(f"- {ticket.title} {annotations}".rstrip())
        lines.extend(format_description(ticket.description, "  "))

        for child in ticket.children:
            # A block between sub-tickets leaves the parent open
            child_fields = child.frontmatter()
            if changes_frontmatter(child_fields):
                lines.append(serialize_frontmatter(child_fields))
                active = child_fields
            lines.append(format_subticket_line(child, ticket))
            lines.extend(format_description(child.description, "    "))

    return "\n".join(lines) + "\n" if lines else ""
