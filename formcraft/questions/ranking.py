"""
Ranking question handler.

Items are authored as strings or ``{"text": ...}`` objects; both are
normalised to strings. The answer is the item texts in the chosen order.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Literal

from pydantic import AliasChoices, Field, field_validator
from rich.table import Table

from . import QuestionType, register
from .base import BaseQuestionHandler, QuestionBase, ValidationResult, is_blank


class RankingQuestion(QuestionBase):
    type: Literal[QuestionType.RANKING] = QuestionType.RANKING
    items: list[str] = Field(
        default_factory=lambda: [""],
        validation_alias=AliasChoices("items", "options"),
        description="Items the respondent puts in order",
    )

    @field_validator("items", mode="before")
    @classmethod
    def _coerce_items(cls, value: Any) -> list[str]:
        if value is None:
            return []
        return [
            str(item.get("text", "")) if isinstance(item, Mapping) else str(item)
            for item in value
        ]


@register(QuestionType.RANKING)
class RankingHandler(BaseQuestionHandler):
    """Handler for ordering questions."""

    label = "Ranking"
    title = "RANKING"
    model = RankingQuestion

    def lint(self, question: RankingQuestion) -> list[str]:
        warnings = super().lint(question)
        texts = [i for i in question.items if i.strip()]
        if len(texts) < 2:
            warnings.append("Ranking needs at least two items")
        if len(set(texts)) != len(texts):
            warnings.append("Ranking items are not unique")
        return warnings

    def check_strict(self, question: RankingQuestion, answer: Any) -> ValidationResult:
        if is_blank(answer) or not isinstance(answer, (list, tuple)):
            return ValidationResult.incomplete("Please rank all items")
        ranked = [str(a.get("text", "")) if isinstance(a, Mapping) else str(a) for a in answer]
        if sorted(ranked) != sorted(question.items):
            return ValidationResult.incomplete("Please rank all items")
        return ValidationResult.ok()

    def body(self, question: RankingQuestion) -> Table:
        table = Table(show_header=False, box=None, padding=(0, 1))
        table.add_column(style="bold cyan", justify="right")
        table.add_column()
        for i, item in enumerate(question.items, 1):
            table.add_row(f"{i}.", item or "[dim](empty)[/dim]")
        return table
