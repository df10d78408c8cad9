"""
Choice question handlers: multiple-choice (one answer) and checkbox (many).

Options carry an ``isCorrect`` flag. For multiple-choice the authoring UI
keeps exactly one option correct; that is linted here, not enforced.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import Field
from rich.table import Table

from formcraft.core.base_model import FormcraftModel

from . import QuestionType, register
from .base import BaseQuestionHandler, QuestionBase, ValidationResult, is_blank


class ChoiceOption(FormcraftModel):
    text: str = ""
    is_correct: bool = False


def _default_options() -> list[ChoiceOption]:
    return [ChoiceOption()]


class MultipleChoiceQuestion(QuestionBase):
    type: Literal[QuestionType.MULTIPLE_CHOICE] = QuestionType.MULTIPLE_CHOICE
    options: list[ChoiceOption] = Field(
        default_factory=_default_options,
        description="Ordered options; exactly one should be correct",
    )

    def option_texts(self) -> list[str]:
        return [o.text for o in self.options]


class CheckboxQuestion(QuestionBase):
    type: Literal[QuestionType.CHECKBOX] = QuestionType.CHECKBOX
    options: list[ChoiceOption] = Field(
        default_factory=_default_options,
        description="Ordered options; any number may be correct",
    )

    def option_texts(self) -> list[str]:
        return [o.text for o in self.options]


class _ChoiceHandler(BaseQuestionHandler):

    def lint(self, question: Any) -> list[str]:
        warnings = super().lint(question)
        if not question.options:
            warnings.append("No options defined")
        elif any(not o.text.strip() for o in question.options):
            warnings.append("Some options have no text")
        return warnings

    def body(self, question: Any) -> Table:
        table = Table(show_header=False, box=None, padding=(0, 1))
        table.add_column(style="bold cyan", justify="right")
        table.add_column()
        marker = "( )" if question.type is QuestionType.MULTIPLE_CHOICE else "[ ]"
        for option in question.options:
            table.add_row(marker, option.text or "[dim](empty)[/dim]")
        return table


@register(QuestionType.MULTIPLE_CHOICE)
class MultipleChoiceHandler(_ChoiceHandler):
    """Handler for single-answer choice questions."""

    label = "Multiple choice"
    title = "MULTIPLE CHOICE"
    model = MultipleChoiceQuestion

    def lint(self, question: MultipleChoiceQuestion) -> list[str]:
        warnings = super().lint(question)
        correct = sum(1 for o in question.options if o.is_correct)
        if question.options and correct != 1:
            warnings.append(f"Expected exactly one correct option, found {correct}")
        return warnings

    def check_strict(self, question: MultipleChoiceQuestion, answer: Any) -> ValidationResult:
        if is_blank(answer):
            return ValidationResult.incomplete("Please select an option")
        if not isinstance(answer, str) or answer not in question.option_texts():
            return ValidationResult.incomplete("Selected option is not one of the choices")
        return ValidationResult.ok()


@register(QuestionType.CHECKBOX)
class CheckboxHandler(_ChoiceHandler):
    """Handler for select-all-that-apply questions."""

    label = "Checkboxes"
    title = "CHECKBOXES"
    model = CheckboxQuestion

    def check_strict(self, question: CheckboxQuestion, answer: Any) -> ValidationResult:
        if is_blank(answer) or not isinstance(answer, (list, tuple)):
            return ValidationResult.incomplete("Please select at least one option")
        choices = set(question.option_texts())
        unknown = [a for a in answer if a not in choices]
        if unknown:
            return ValidationResult.incomplete(f"Unknown option(s): {', '.join(map(str, unknown))}")
        return ValidationResult.ok()
