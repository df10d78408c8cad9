"""
Date question handler. Bounds and answers are ISO dates (YYYY-MM-DD).
"""

from __future__ import annotations

from datetime import date
from typing import Any, Literal

from pydantic import Field, model_validator
from rich.text import Text

from . import QuestionType, register
from .base import BaseQuestionHandler, QuestionBase, ValidationResult, is_blank


class DateQuestion(QuestionBase):
    type: Literal[QuestionType.DATE] = QuestionType.DATE
    min_date: date | None = Field(default=None, description="Earliest accepted date")
    max_date: date | None = Field(default=None, description="Latest accepted date")

    @model_validator(mode="after")
    def _check_range(self) -> "DateQuestion":
        if self.min_date and self.max_date and self.min_date > self.max_date:
            raise ValueError("minDate must not be after maxDate")
        return self


def _parse_date(value: Any) -> date | None:
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError:
        return None


@register(QuestionType.DATE)
class DateHandler(BaseQuestionHandler):
    """Handler for calendar dates."""

    label = "Date"
    title = "DATE"
    model = DateQuestion

    def check_strict(self, question: DateQuestion, answer: Any) -> ValidationResult:
        if is_blank(answer):
            return ValidationResult.incomplete("Please pick a date")
        picked = _parse_date(answer)
        if picked is None:
            return ValidationResult.incomplete("Date must be in YYYY-MM-DD format")
        if question.min_date and picked < question.min_date:
            return ValidationResult.incomplete(f"Date must be on or after {question.min_date.isoformat()}")
        if question.max_date and picked > question.max_date:
            return ValidationResult.incomplete(f"Date must be on or before {question.max_date.isoformat()}")
        return ValidationResult.ok()

    def body(self, question: DateQuestion) -> Text:
        lo = question.min_date.isoformat() if question.min_date else "any"
        hi = question.max_date.isoformat() if question.max_date else "any"
        return Text(f"YYYY-MM-DD  (from {lo} to {hi})", style="dim")
