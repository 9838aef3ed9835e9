"""Parse errors raised while reading a ticket outline.

Every failure aborts the whole parse. Callers that need to branch on the
failure type can either catch a specific subclass or inspect
:attr:`ParseError.kind`; ``str(error)`` is always the stable, human-readable
message.
"""

from __future__ import annotations

from enum import Enum


class ParseErrorKind(Enum):
    MISSING_TITLE = "Missing ticket title. Did you miss a dash before your entry?"
    UNEXPECTED_INDENTATION = "Unexpected indentation discovered"
    MULTIPLE_ASSIGNEES = "Multiple assignees for a single ticket are not supported"
    MULTIPLE_STORY_POINTS = "Multiple story point assignments for a single ticket are not supported"
    MATRIX_SUBTASK_CONFLICT = "You cannot specify subtasks when using a matrix to create subtasks"

    @property
    def message(self) -> str:
        return self.value


class ParseError(ValueError):
    """Raised when an outline cannot be turned into tickets."""

    kind: ParseErrorKind

    def __init__(self, kind: ParseErrorKind, line_number: int | None = None) -> None:
        self.kind = kind
        self.line_number = line_number
        super().__init__(kind.message)

    def describe(self) -> str:
        """Return the message prefixed with its line number when known."""
        if self.line_number is None:
            return self.kind.message
        return f"line {self.line_number}: {self.kind.message}"


class MissingTitleError(ParseError):
    def __init__(self, line_number: int | None = None) -> None:
        super().__init__(ParseErrorKind.MISSING_TITLE, line_number)


class UnexpectedIndentationError(ParseError):
    def __init__(self, line_number: int | None = None) -> None:
        super().__init__(ParseErrorKind.UNEXPECTED_INDENTATION, line_number)


class MultipleAssigneesError(ParseError):
    def __init__(self, line_number: int | None = None) -> None:
        super().__init__(ParseErrorKind.MULTIPLE_ASSIGNEES, line_number)


class MultipleStoryPointsError(ParseError):
    def __init__(self, line_number: int | None = None) -> None:
        super().__init__(ParseErrorKind.MULTIPLE_STORY_POINTS, line_number)


class MatrixSubtaskConflictError(ParseError):
    def __init__(self, line_number: int | None = None) -> None:
        super().__init__(ParseErrorKind.MATRIX_SUBTASK_CONFLICT, line_number)
