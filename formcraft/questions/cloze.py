"""
Cloze (fill-in-the-blank) question handler.

The passage contains "___" markers; each marker is one blank slot answered
under "blank-{i}". ``blanks`` holds the author's expected answers and
should have one entry per marker. A mismatch is linted, not rejected.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import Field
from rich.text import Text

from formcraft.core.base_model import FormcraftModel
from formcraft.core.cloze import blank_key, count_blanks, parse_cloze

from . import QuestionType, register
from .base import (
    BaseQuestionHandler,
    QuestionBase,
    ValidationPolicy,
    ValidationResult,
    is_blank,
    is_filled_mapping,
)

INCOMPLETE = "Please fill in all blanks"


class Blank(FormcraftModel):
    text: str = ""
    answer: str = ""


class ClozeQuestion(QuestionBase):
    type: Literal[QuestionType.CLOZE] = QuestionType.CLOZE
    passage: str = Field(default="", description="Passage text; use ___ for each blank")
    blanks: list[Blank] = Field(
        default_factory=list,
        description="Expected answer per blank, in passage order",
    )

    @property
    def slot_count(self) -> int:
        return count_blanks(self.passage)


@register(QuestionType.CLOZE)
class ClozeHandler(BaseQuestionHandler):
    """Handler for cloze passages."""

    label = "Cloze"
    title = "FILL THE BLANK"
    model = ClozeQuestion

    def lint(self, question: ClozeQuestion) -> list[str]:
        warnings = super().lint(question)
        slots = question.slot_count
        if slots == 0:
            warnings.append("Passage has no blanks (___)")
        if len(question.blanks) != slots:
            warnings.append(
                f"Passage has {slots} blank(s) but {len(question.blanks)} answer(s) are defined"
            )
        return warnings

    def check(self, question: ClozeQuestion, answer: Any, policy: ValidationPolicy) -> ValidationResult:
        if policy is ValidationPolicy.STRICT:
            return self.check_strict(question, answer)
        if not is_filled_mapping(answer):
            return ValidationResult.incomplete(INCOMPLETE)
        return ValidationResult.ok()

    def check_strict(self, question: ClozeQuestion, answer: Any) -> ValidationResult:
        slots = question.slot_count
        if slots == 0:
            return ValidationResult.incomplete("Passage has no blanks; this question can never be completed")
        if not is_filled_mapping(answer):
            return ValidationResult.incomplete(INCOMPLETE)
        filled = sum(1 for i in range(slots) if not is_blank(answer.get(blank_key(i))))
        if filled < slots:
            return ValidationResult.incomplete(f"{INCOMPLETE} ({filled} of {slots} filled)")
        return ValidationResult.ok()

    def body(self, question: ClozeQuestion) -> Text:
        result = Text()
        for segment in parse_cloze(question.passage):
            result.append(segment.literal_before)
            if segment.slot_index is not None:
                result.append(f" [____{segment.slot_index + 1}] ", style="bold yellow")
        return result
