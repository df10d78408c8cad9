"""
Error taxonomy for formcraft.

Authoring errors (UnknownQuestionType, MalformedQuestionShape,
QuestionIndexError) surface immediately to the author. Fill-time errors
(ValidationFailed, FormNotPublished) are returned to the respondent.
NotFound comes from the storage boundary. Nothing here is retried.
"""

from __future__ import annotations


class FormcraftError(Exception):
    """Base class for all formcraft errors."""


class UnknownQuestionType(FormcraftError):
    """Raised when a question type tag is not in the registry."""

    def __init__(self, tag: object):
        self.tag = tag
        super().__init__(f"Unknown question type: {tag!r}")


class MalformedQuestionShape(FormcraftError):
    """Raised when a question definition violates its type's shape."""

    def __init__(self, question_type: str, problems: list[str]):
        self.question_type = question_type
        self.problems = problems
        super().__init__(
            f"Malformed {question_type} question: {'; '.join(problems)}"
        )


class QuestionIndexError(FormcraftError, IndexError):
    """Raised when an authoring operation targets a missing question."""

    def __init__(self, index: int, size: int):
        self.index = index
        self.size = size
        super().__init__(f"Invalid question index {index} (form has {size} questions)")


class ValidationFailed(FormcraftError):
    """Raised when a submission has incomplete required answers.

    ``reasons`` maps question index to a human-readable reason so every
    failing question can be annotated in one pass.
    """

    def __init__(self, reasons: dict[int, str]):
        self.reasons = dict(sorted(reasons.items()))
        super().__init__(
            f"{len(self.reasons)} question(s) incomplete: "
            + ", ".join(f"Q{i + 1}" for i in self.reasons)
        )


class FormNotPublished(FormcraftError):
    """Raised when a respondent tries to fill a draft form."""

    def __init__(self, form_id: str | None):
        self.form_id = form_id
        super().__init__(
            f"Form {form_id} is not published yet and cannot be filled out"
        )


class NotFound(FormcraftError):
    """Raised by storage when a record does not exist."""

    def __init__(self, kind: str, record_id: str):
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} not found: {record_id}")
