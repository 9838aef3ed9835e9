"""Tests for bulkticket.annotations module."""

from __future__ import annotations

import pytest

from bulkticket.annotations import (
    Annotations,
    extract_annotations,
    extract_assignee,
    extract_components,
    extract_labels,
    extract_matrix,
    extract_story_points,
)
from bulkticket.errors import MultipleAssigneesError, MultipleStoryPointsError


class TestExtractAssignee:
    def test_no_assignee(self) -> None:
        assert extract_assignee("Fix the bug") == ("", "Fix the bug")

    def test_single_assignee(self) -> None:
        assert extract_assignee("Fix the bug @amy") == ("amy", "Fix the bug")

    def test_assignee_with_dots(self) -> None:
        assert extract_assignee("Fix @michael.heap now") == ("michael.heap", "Fix now")

    def test_multiple_assignees_raise_without_line_number(self) -> None:
        with pytest.raises(MultipleAssigneesError) as exc_info:
            extract_assignee("Pair on it @amy @raj")
        assert exc_info.value.line_number is None

    def test_leaves_other_annotations(self) -> None:
        assert extract_assignee("Ship {Web} @amy #ui +2") == ("amy", "Ship {Web} #ui +2")


class TestExtractComponents:
    def test_no_components(self) -> None:
        assert extract_components("Title") == ([], "Title")

    def test_components_in_order(self) -> None:
        assert extract_components("Title {A} {B}") == (["A", "B"], "Title")

    def test_component_with_spaces(self) -> None:
        assert extract_components("{Nexmo Developer} Docs") == (["Nexmo Developer"], "Docs")

    def test_leaves_other_annotations(self) -> None:
        assert extract_components("A @x {C} #l") == (["C"], "A @x #l")

    def test_empty_braces_are_not_a_component(self) -> None:
        assert extract_components("Title {}") == ([], "Title {}")


class TestExtractLabels:
    def test_labels_in_order(self) -> None:
        assert extract_labels("Title #a #b") == (["a", "b"], "Title")

    def test_bare_hash_is_not_a_label(self) -> None:
        assert extract_labels("Port to C# soon") == ([], "Port to C# soon")

    def test_label_in_middle(self) -> None:
        assert extract_labels("Tidy #chore the repo") == (["chore"], "Tidy the repo")


class TestExtractStoryPoints:
    def test_no_points(self) -> None:
        assert extract_story_points("Title") == (0, "Title")

    def test_points(self) -> None:
        assert extract_story_points("Title +5") == (5, "Title")

    def test_multi_digit_points(self) -> None:
        assert extract_story_points("+13 Big one") == (13, "Big one")

    def test_multiple_points_raise(self) -> None:
        with pytest.raises(MultipleStoryPointsError):
            extract_story_points("Title +1 +2")

    def test_plus_without_digits_is_text(self) -> None:
        assert extract_story_points("Support C++") == (0, "Support C++")


class TestExtractMatrix:
    def test_matrix_entries(self) -> None:
        assert extract_matrix("Title [x, y]") == (["x", "y"], "Title")

    def test_matrix_without_spaces(self) -> None:
        assert extract_matrix("Title [x,y,z]") == (["x", "y", "z"], "Title")

    def test_only_first_matrix_is_used(self) -> None:
        assert extract_matrix("Title [a] [b]") == (["a"], "Title [b]")

    def test_empty_brackets_are_not_a_matrix(self) -> None:
        assert extract_matrix("Title [ ]") == ([], "Title [ ]")
        assert extract_matrix("Title [,]") == ([], "Title [,]")


class TestExtractAnnotations:
    def test_plain_title(self) -> None:
        assert extract_annotations("Just a title") == Annotations(title="Just a title")

    def test_everything(self) -> None:
        result = extract_annotations("Ship @alice {Payments} #backend +3 [eu, us]")
        assert result == Annotations(
            title="Ship",
            assignee="alice",
            components=["Payments"],
            labels=["backend"],
            story_points=3,
            matrix=["eu", "us"],
        )

    def test_matrix_disabled(self) -> None:
        result = extract_annotations("Child [eu, us] #x", allow_matrix=False)
        assert result.title == "Child [eu, us]"
        assert result.labels == ["x"]
        assert result.matrix == []

    def test_whitespace_is_collapsed(self) -> None:
        assert extract_annotations("Fix   @amy   the   bug").title == "Fix the bug"

    def test_only_annotations_gives_empty_title(self) -> None:
        assert extract_annotations("@amy #ui").title == ""
