"""
Free-text question handler.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import Field, model_validator
from rich.text import Text

from . import QuestionType, register
from .base import BaseQuestionHandler, QuestionBase, ValidationResult, is_blank


class TextQuestion(QuestionBase):
    type: Literal[QuestionType.TEXT] = QuestionType.TEXT
    placeholder: str = Field(default="", description="Hint shown in the empty input")
    min_length: int | None = Field(default=None, ge=0, description="Minimum answer length")
    max_length: int | None = Field(default=None, ge=0, description="Maximum answer length")

    @model_validator(mode="after")
    def _check_bounds(self) -> "TextQuestion":
        if (
            self.min_length is not None
            and self.max_length is not None
            and self.min_length > self.max_length
        ):
            raise ValueError("minLength must not exceed maxLength")
        return self


@register(QuestionType.TEXT)
class TextHandler(BaseQuestionHandler):
    """Handler for short/long free-text answers."""

    label = "Text"
    title = "TEXT"
    model = TextQuestion

    def check_strict(self, question: TextQuestion, answer: Any) -> ValidationResult:
        if is_blank(answer) or not isinstance(answer, str):
            return ValidationResult.incomplete("Please enter an answer")
        length = len(answer.strip())
        if question.min_length is not None and length < question.min_length:
            return ValidationResult.incomplete(
                f"Answer must be at least {question.min_length} characters"
            )
        if question.max_length is not None and length > question.max_length:
            return ValidationResult.incomplete(
                f"Answer must be at most {question.max_length} characters"
            )
        return ValidationResult.ok()

    def body(self, question: TextQuestion) -> Text:
        return Text(f"> {question.placeholder or 'Type your answer here'}", style="dim")
