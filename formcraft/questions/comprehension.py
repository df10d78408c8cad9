"""
Reading comprehension question handler.

A passage followed by sub-questions, each with its own options and correct
answer. The respondent's answer maps "comp-{i}" to the chosen option text.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import Field
from rich.console import Group
from rich.text import Text

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

INCOMPLETE = "Please answer all questions"
COMP_KEY_PREFIX = "comp-"


def comprehension_key(index: int) -> str:
    """Answer key for the sub-question at ``index``."""
    return f"{COMP_KEY_PREFIX}{index}"


class ComprehensionItem(FormcraftModel):
    question: str = ""
    options: list[str] = Field(default_factory=list)
    correct_answer: str = ""


class ComprehensionQuestion(QuestionBase):
    type: Literal[QuestionType.COMPREHENSION] = QuestionType.COMPREHENSION
    passage: str = Field(default="", description="Text the sub-questions are about")
    comprehension_questions: list[ComprehensionItem] = Field(
        default_factory=list,
        description="Sub-questions with options and correct answer",
    )


@register(QuestionType.COMPREHENSION)
class ComprehensionHandler(BaseQuestionHandler):
    """Handler for passage-based question sets."""

    label = "Comprehension"
    title = "COMPREHENSION"
    model = ComprehensionQuestion

    def lint(self, question: ComprehensionQuestion) -> list[str]:
        warnings = super().lint(question)
        if not question.passage.strip():
            warnings.append("Passage is empty")
        if not question.comprehension_questions:
            warnings.append("No sub-questions defined")
        for i, item in enumerate(question.comprehension_questions, 1):
            if item.correct_answer and item.correct_answer not in item.options:
                warnings.append(f"Sub-question {i}: correct answer is not one of its options")
        return warnings

    def check(self, question: ComprehensionQuestion, answer: Any, policy: ValidationPolicy) -> ValidationResult:
        if not is_filled_mapping(answer):
            return ValidationResult.incomplete(INCOMPLETE)
        if policy is ValidationPolicy.LEGACY:
            return ValidationResult.ok()
        return self.check_strict(question, answer)

    def check_strict(self, question: ComprehensionQuestion, answer: Any) -> ValidationResult:
        if not is_filled_mapping(answer):
            return ValidationResult.incomplete(INCOMPLETE)
        total = len(question.comprehension_questions)
        answered = sum(
            1 for i in range(total) if not is_blank(answer.get(comprehension_key(i)))
        )
        if answered < total:
            return ValidationResult.incomplete(f"{INCOMPLETE} ({answered} of {total} answered)")
        return ValidationResult.ok()

    def body(self, question: ComprehensionQuestion) -> Group:
        parts: list[Text] = [Text(question.passage, style="italic")]
        for i, item in enumerate(question.comprehension_questions, 1):
            parts.append(Text(f"\n{i}. {item.question}", style="bold"))
            for option in item.options:
                parts.append(Text(f"   ( ) {option}"))
        return Group(*parts)
