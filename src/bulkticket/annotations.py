"""Inline annotation extractors for ticket titles.

A title such as ``Ship checkout @alice {Payments} #backend +3`` carries
metadata inline. Each extractor below pulls one kind of annotation out of a
title and returns ``(value, remaining_title)``; the other annotations are
left in place for the next extractor. :func:`extract_annotations` runs them
in their fixed order:

    assignee -> components -> labels -> story points -> matrix

Usage example:
    from bulkticket.annotations import extract_annotations

    result = extract_annotations("Ship checkout @alice {Payments} +3")
    result.title        # "Ship checkout"
    result.assignee     # "alice"
    result.components   # ["Payments"]
    result.story_points # 3
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from bulkticket.errors import MultipleAssigneesError, MultipleStoryPointsError
from bulkticket.parsing import split_list

ASSIGNEE_RE = re.compile(r"@(\S+)")
COMPONENT_RE = re.compile(r"\{([^}]+)\}")
LABEL_RE = re.compile(r"#(\S+)")
STORY_POINTS_RE = re.compile(r"\+(\d+)")
MATRIX_RE = re.compile(r"\[([^\]]+)\]")


@dataclass
class Annotations:
    """Everything extracted from one ticket or sub-ticket title."""

    title: str
    assignee: str = ""
    components: list[str] = field(default_factory=list)
    labels: list[str] = field(default_factory=list)
    story_points: int = 0
    matrix: list[str] = field(default_factory=list)


def collapse_whitespace(text: str) -> str:
    return " ".join(text.split())


def extract_assignee(title: str) -> tuple[str, str]:
    """Extract a single ``@user`` token.

    Raises:
        MultipleAssigneesError: If more than one ``@`` token is present.
    """
    matches = ASSIGNEE_RE.findall(title)
    if not matches:
        return "", title
    if len(matches) > 1:
        raise MultipleAssigneesError()
    return matches[0], collapse_whitespace(ASSIGNEE_RE.sub("", title))


def extract_components(title: str) -> tuple[list[str], str]:
    """Extract every ``{component}`` in order of appearance."""
    components = COMPONENT_RE.findall(title)
    if not components:
        return [], title
    return components, collapse_whitespace(COMPONENT_RE.sub("", title))


def extract_labels(title: str) -> tuple[list[str], str]:
    """Extract every ``#label`` in order of appearance."""
    labels = LABEL_RE.findall(title)
    if not labels:
        return [], title
    return labels, collapse_whitespace(LABEL_RE.sub("", title))


def extract_story_points(title: str) -> tuple[int, str]:
    """Extract a single ``+N`` story point estimate.

    Raises:
        MultipleStoryPointsError: If more than one ``+N`` token is present.
    """
    matches = STORY_POINTS_RE.findall(title)
    if not matches:
        return 0, title
    if len(matches) > 1:
        raise MultipleStoryPointsError()
    return int(matches[0]), collapse_whitespace(STORY_POINTS_RE.sub("", title))


def extract_matrix(title: str) -> tuple[list[str], str]:
    """Extract the first ``[a, b, c]`` list.

    A bracket pair with no usable entries (``[ ]``, ``[,]``) is not a matrix
    and stays in the title.
    """
    match = MATRIX_RE.search(title)
    if match is None:
        return [], title
    entries = split_list(match.group(1))
    if not entries:
        return [], title
    remaining = title[: match.start()] + title[match.end() :]
    return entries, collapse_whitespace(remaining)


def extract_annotations(title: str, allow_matrix: bool = True) -> Annotations:
    """Run every extractor over *title* in the fixed order.

    Args:
        title: Title text with the leading dash already removed.
        allow_matrix: Whether ``[...]`` lists are matrix annotations. Only
            top-level tickets can be expanded; on sub-tickets the brackets
            are ordinary title text.
    """
    assignee, title = extract_assignee(title)
    components, title = extract_components(title)
    labels, title = extract_labels(title)
    story_points, title = extract_story_points(title)
    matrix: list[str] = []
    if allow_matrix:
        matrix, title = extract_matrix(title)

    return Annotations(
        title=title.strip(),
        assignee=assignee,
        components=components,
        labels=labels,
        story_points=story_points,
        matrix=matrix,
    )
