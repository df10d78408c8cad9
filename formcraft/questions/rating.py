"""
Star rating question handler.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import Field
from rich.text import Text

from . import QuestionType, register
from .base import BaseQuestionHandler, QuestionBase, ValidationResult

MIN_STARS = 3
MAX_STARS = 10


class RatingQuestion(QuestionBase):
    type: Literal[QuestionType.RATING] = QuestionType.RATING
    max_stars: int = Field(
        default=5,
        ge=MIN_STARS,
        le=MAX_STARS,
        description="Number of stars offered",
    )


@register(QuestionType.RATING)
class RatingHandler(BaseQuestionHandler):
    """Handler for 1..N star ratings."""

    label = "Rating"
    title = "RATING"
    model = RatingQuestion

    def check_strict(self, question: RatingQuestion, answer: Any) -> ValidationResult:
        # bool is an int subclass; True is not a rating
        if isinstance(answer, bool) or answer is None:
            return ValidationResult.incomplete("Please choose a rating")
        try:
            stars = int(answer)
        except (TypeError, ValueError, OverflowError):
            return ValidationResult.incomplete("Please choose a rating")
        if stars != answer and str(stars) != str(answer).strip():
            return ValidationResult.incomplete("Rating must be a whole number")
        if not 1 <= stars <= question.max_stars:
            return ValidationResult.incomplete(f"Rating must be between 1 and {question.max_stars}")
        return ValidationResult.ok()

    def body(self, question: RatingQuestion) -> Text:
        return Text(" ".join("☆" for _ in range(question.max_stars)), style="yellow")
