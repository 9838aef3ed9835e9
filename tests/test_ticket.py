"""Tests for bulkticket.ticket module."""

from __future__ import annotations

from bulkticket.outline import parse
from bulkticket.ticket import (
    SubTicket,
    Ticket,
    count_subtickets,
    format_annotations,
    format_outline,
)


class TestTicketDataclass:
    def test_default_values(self) -> None:
        ticket = Ticket(title="Test")
        assert ticket.description == ""
        assert ticket.assignee == ""
        assert ticket.components == []
        assert ticket.labels == []
        assert ticket.story_points == 0
        assert ticket.epic is None
        assert ticket.children == []

    def test_subticket_has_no_children(self) -> None:
        assert not hasattr(SubTicket(title="Leaf"), "children")

    def test_count_subtickets(self) -> None:
        tickets = [
            Ticket(title="A", children=[SubTicket(title="A1"), SubTicket(title="A2")]),
            Ticket(title="B"),
        ]
        assert count_subtickets(tickets) == 2


class TestToDict:
    def test_shape(self) -> None:
        ticket = Ticket(
            title="Ship",
            description="Details\n",
            assignee="amy",
            components=["Web"],
            labels=["ui"],
            story_points=3,
            epic="E-1",
            children=[SubTicket(title="Child", assignee="amy", epic="E-1")],
        )
        assert ticket.to_dict() == {
            "title": "Ship",
            "description": "Details\n",
            "assignee": "amy",
            "components": ["Web"],
            "labels": ["ui"],
            "storyPoints": 3,
            "epic": "E-1",
            "children": [
                {
                    "title": "Child",
                    "description": "",
                    "assignee": "amy",
                    "components": [],
                    "labels": [],
                    "storyPoints": 0,
                    "epic": "E-1",
                }
            ],
        }

    def test_unset_front_matter_omitted(self) -> None:
        data = Ticket(title="Bare").to_dict()
        assert "epic" not in data
        assert "story" not in data
        assert "team" not in data


class TestFormatAnnotations:
    def test_empty(self) -> None:
        assert format_annotations() == ""

    def test_extraction_order(self) -> None:
        text = format_annotations(assignee="amy", components=["Web", "API"], labels=["ui"], story_points=2)
        assert text == "@amy {Web} {API} #ui +2"


class TestFormatOutline:
    def test_empty(self) -> None:
        assert format_outline([]) == ""

    def test_simple(self) -> None:
        tickets = [
            Ticket(
                title="Ship",
                assignee="amy",
                description="First\n\nSecond\n",
                children=[SubTicket(title="Child", assignee="amy", description="Sub\n")],
            )
        ]
        assert format_outline(tickets) == "- Ship @amy\n  First\n\n  Second\n  - Child\n    Sub\n"

    def test_front_matter_written_when_it_changes(self) -> None:
        tickets = [
            Ticket(title="A", epic="E-1"),
            Ticket(title="B", epic="E-1"),
            Ticket(title="C", epic="E-1", team="QA"),
        ]
        text = format_outline(tickets)
        assert text == "---\nepic: E-1\n---\n- A\n- B\n\n---\nepic: E-1\nteam: QA\n---\n- C\n"

    def test_reparse_gives_same_tickets(self) -> None:
        text = """---
epic: PAY-1
---
- Ship checkout @alice {Payments} #backend +3
  Move to the new API.

  Second paragraph.
  - Write migration #db +2
    Backfill old orders.
  - Update docs @bob
- Browser testing {Web} [chrome, firefox]
---
team: QA
---
- Later
"""
        tickets = parse(text, assignee_map={"chrome": "amy"})
        reparsed = parse(format_outline(tickets))
        assert [t.to_dict() for t in reparsed] == [t.to_dict() for t in tickets]

    def test_front_matter_between_subtickets(self) -> None:
        text = "- Parent\n  - A\n---\nepic: E-2\n---\n  - B\n- Next\n"
        tickets = parse(text)
        assert [c.epic for c in tickets[0].children] == [None, "E-2"]

        output = format_outline(tickets)
        assert output == "- Parent\n  - A\n---\nepic: E-2\n---\n  - B\n- Next\n"
        reparsed = parse(output)
        assert [c.epic for c in reparsed[0].children] == [None, "E-2"]
        assert reparsed[1].epic == "E-2"
