"""
Categorize question handler.

Bucket sorting where respondents assign each item to one of the declared
categories. The answer maps item text to the chosen category.
Example: sort "Cable", "Router" into "Physical" / "Network".
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import Field, field_validator, model_validator
from rich.table import Table

from formcraft.core.base_model import FormcraftModel

from . import QuestionType, register
from .base import (
    BaseQuestionHandler,
    QuestionBase,
    ValidationPolicy,
    ValidationResult,
    is_blank,
    is_filled_mapping,
)

INCOMPLETE = "Please categorize all items"


class CategorizeOption(FormcraftModel):
    text: str = ""
    category: str | None = None

    @field_validator("category", mode="before")
    @classmethod
    def _empty_is_unset(cls, value: Any) -> Any:
        return None if value == "" else value


class CategorizeQuestion(QuestionBase):
    type: Literal[QuestionType.CATEGORIZE] = QuestionType.CATEGORIZE
    categories: list[str] = Field(default_factory=list, description="Unique category names")
    options: list[CategorizeOption] = Field(
        default_factory=list,
        description="Items to sort, each with its correct category",
    )

    @model_validator(mode="after")
    def _check_categories(self) -> "CategorizeQuestion":
        seen: set[str] = set()
        for name in self.categories:
            if name in seen:
                raise ValueError(f"Duplicate category '{name}'")
            seen.add(name)
        for option in self.options:
            if option.category is not None and option.category not in seen:
                raise ValueError(
                    f"Item '{option.text}' references undeclared category '{option.category}'"
                )
        return self

    def item_texts(self) -> list[str]:
        return [o.text for o in self.options if o.text.strip()]


@register(QuestionType.CATEGORIZE)
class CategorizeHandler(BaseQuestionHandler):
    """Handler for categorize questions - bucket sorting."""

    label = "Categorize"
    title = "CATEGORIZE"
    model = CategorizeQuestion

    def lint(self, question: CategorizeQuestion) -> list[str]:
        warnings = super().lint(question)
        if len(question.categories) < 2:
            warnings.append("Categorize needs at least two categories")
        if not question.item_texts():
            warnings.append("No items to categorize")
        unassigned = [o.text for o in question.options if o.category is None and o.text.strip()]
        if unassigned:
            warnings.append(f"Items without a category: {', '.join(unassigned)}")
        return warnings

    def check(self, question: CategorizeQuestion, answer: Any, policy: ValidationPolicy) -> ValidationResult:
        if not is_filled_mapping(answer):
            return ValidationResult.incomplete(INCOMPLETE)
        if policy is ValidationPolicy.LEGACY:
            return ValidationResult.ok()
        return self.check_strict(question, answer)

    def check_strict(self, question: CategorizeQuestion, answer: Any) -> ValidationResult:
        if not is_filled_mapping(answer):
            return ValidationResult.incomplete(INCOMPLETE)
        categories = set(question.categories)
        for item in question.item_texts():
            chosen = answer.get(item)
            if is_blank(chosen) or chosen not in categories:
                return ValidationResult.incomplete(INCOMPLETE)
        return ValidationResult.ok()

    def body(self, question: CategorizeQuestion) -> Table:
        table = Table(box=None, padding=(0, 2))
        table.add_column("Categories", style="bold yellow")
        table.add_column("Items to sort")
        rows = max(len(question.categories), len(question.options))
        for i in range(rows):
            table.add_row(
                question.categories[i] if i < len(question.categories) else "",
                question.options[i].text if i < len(question.options) else "",
            )
        return table

