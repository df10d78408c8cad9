"""
Core Module - form and response aggregates, validation and export.

Components:
- errors: Error taxonomy shared by every layer
- cloze: Blank-marker passage parser
- validator: Required-answer checks per question type
- formatter: Canonical answer strings and CSV cells
- export: CSV export of a form's responses
- forms: Form aggregate (authoring operations)
- responses: Response aggregate (submission)

Only the leaf modules are re-exported here; import the aggregates from
their own modules to avoid an import cycle with formcraft.questions.
"""

from formcraft.core.cloze import BLANK_MARKER, ClozePassage, ClozeSegment, parse_cloze
from formcraft.core.errors import (
    FormcraftError,
    FormNotPublished,
    MalformedQuestionShape,
    NotFound,
    QuestionIndexError,
    UnknownQuestionType,
    ValidationFailed,
)

__all__ = [
    "BLANK_MARKER",
    "ClozePassage",
    "ClozeSegment",
    "parse_cloze",
    "FormcraftError",
    "FormNotPublished",
    "MalformedQuestionShape",
    "NotFound",
    "QuestionIndexError",
    "UnknownQuestionType",
    "ValidationFailed",
]
