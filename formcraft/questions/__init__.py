"""
Question type handlers for formcraft forms.

Each question type (multiple-choice, cloze, matrix, etc.) has its own module with:
- model: pydantic shape of the type's authorable fields
- default(): minimally valid instance for "add question"
- lint(): soft authoring warnings
- check(): required-answer completeness at submit time
- render(): rich preview
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any

from loguru import logger
from pydantic import ValidationError

from formcraft.core.errors import MalformedQuestionShape, UnknownQuestionType

if TYPE_CHECKING:
    from .base import QuestionBase, QuestionHandler, QuestionShape


class QuestionType(str, Enum):
    """Supported question types."""
    MULTIPLE_CHOICE = "multiple-choice"
    CHECKBOX = "checkbox"
    TEXT = "text"
    RATING = "rating"
    DATE = "date"
    FILE_UPLOAD = "file-upload"
    RANKING = "ranking"
    MATRIX = "matrix"
    CATEGORIZE = "categorize"
    CLOZE = "cloze"
    COMPREHENSION = "comprehension"


MAPPING_ANSWER_TYPES = frozenset(
    {QuestionType.CATEGORIZE, QuestionType.CLOZE, QuestionType.COMPREHENSION}
)

# Tags written by older builders
LEGACY_TAGS: dict[str, QuestionType] = {
    "multiple_choice": QuestionType.MULTIPLE_CHOICE,
    "mcq": QuestionType.MULTIPLE_CHOICE,
    "checkboxes": QuestionType.CHECKBOX,
    "short-answer": QuestionType.TEXT,
    "short_answer": QuestionType.TEXT,
    "file_upload": QuestionType.FILE_UPLOAD,
    "fill-in-the-blank": QuestionType.CLOZE,
}


def normalize_tag(tag: Any) -> QuestionType:
    """Map a raw type tag (canonical or legacy) onto QuestionType."""
    if isinstance(tag, QuestionType):
        return tag
    if isinstance(tag, str):
        key = tag.strip().lower()
        try:
            return QuestionType(key)
        except ValueError:
            if key in LEGACY_TAGS:
                return LEGACY_TAGS[key]
    raise UnknownQuestionType(tag)


# Handler registry - populated by @register decorator
HANDLERS: dict[QuestionType, "QuestionHandler"] = {}


def register(question_type: QuestionType):
    """Decorator to register a question handler."""
    def decorator(cls):
        cls.type = question_type
        HANDLERS[question_type] = cls()
        return cls
    return decorator


def get_handler(question_type: Any) -> "QuestionHandler":
    """Get the handler for a question type. Raises UnknownQuestionType."""
    tag = normalize_tag(question_type)
    handler = HANDLERS.get(tag)
    if handler is None:
        raise UnknownQuestionType(question_type)
    return handler


def shape_of(question_type: Any) -> "QuestionShape":
    """Field contract for a question type."""
    return get_handler(question_type).shape()


def default_question(question_type: Any) -> "QuestionBase":
    """Minimally valid question of the given type."""
    return get_handler(question_type).default()


def parse_question(data: "dict[str, Any] | QuestionBase") -> "QuestionBase":
    """
    Build a typed question from wire data.

    Raises:
        UnknownQuestionType: missing or unregistered ``type``
        MalformedQuestionShape: fields violate the type's hard constraints
    """
    from .base import QuestionBase

    if isinstance(data, QuestionBase):
        data = data.model_dump(by_alias=True)
    if not isinstance(data, dict):
        raise MalformedQuestionShape("unknown", [f"expected an object, got {type(data).__name__}"])

    handler = get_handler(data.get("type"))
    payload = {**data, "type": handler.type}
    try:
        return handler.model.model_validate(payload)
    except ValidationError as e:
        problems = [
            f"{'.'.join(str(p) for p in err['loc']) or 'question'}: {err['msg']}"
            for err in e.errors()
        ]
        raise MalformedQuestionShape(handler.type.value, problems) from e


def lint_question(question: "QuestionBase") -> list[str]:
    """Soft authoring warnings for a question; logged, never raised."""
    warnings = get_handler(question.type).lint(question)
    for warning in warnings:
        logger.warning(f"{question.type.value} question '{question.prompt[:40]}': {warning}")
    return warnings


# Import handlers to trigger registration
from . import choice
from . import text
from . import rating
from . import date
from . import file_upload
from . import ranking
from . import matrix
from . import categorize
from . import cloze
from . import comprehension

__all__ = [
    "QuestionType",
    "MAPPING_ANSWER_TYPES",
    "HANDLERS",
    "get_handler",
    "normalize_tag",
    "register",
    "shape_of",
    "default_question",
    "parse_question",
    "lint_question",
]
