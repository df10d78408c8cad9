"""
Form aggregate.

A form exclusively owns its ordered questions; questions have no identity
of their own and are addressed by position. Every authoring operation
refreshes ``updated_at``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from loguru import logger
from pydantic import AliasChoices, Field, SerializeAsAny, field_validator

from formcraft.core.base_model import FormcraftModel, utcnow
from formcraft.core.errors import QuestionIndexError
from formcraft.questions import (
    QuestionType,
    default_question,
    get_handler,
    lint_question,
    parse_question,
)
from formcraft.questions.base import QuestionBase

COPY_SUFFIX = " (Copy)"


class FormSettings(FormcraftModel):
    """Form-level behaviour toggles."""

    allow_multiple_attempts: bool = False
    time_limit_minutes: int | None = Field(
        default=None,
        ge=1,
        validation_alias=AliasChoices("timeLimitMinutes", "time_limit_minutes", "timeLimit"),
    )
    require_authentication: bool = False
    show_progress_bar: bool = True
    randomize_questions: bool = False
    theme: str = "default"


class Form(FormcraftModel):
    """An authored form: metadata, settings and ordered questions."""

    id: str | None = Field(default=None, validation_alias=AliasChoices("id", "_id"))
    title: str
    description: str | None = None
    header_image_ref: str | None = Field(
        default=None,
        validation_alias=AliasChoices("headerImageRef", "header_image_ref", "headerImage"),
    )
    questions: list[SerializeAsAny[QuestionBase]] = Field(default_factory=list)
    is_published: bool = False
    settings: FormSettings = Field(default_factory=FormSettings)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("title is required")
        return value

    @field_validator("questions", mode="before")
    @classmethod
    def _parse_questions(cls, value: Any) -> list[QuestionBase]:
        if value is None:
            return []
        return [q if isinstance(q, QuestionBase) else parse_question(q) for q in value]

    # ========================================
    # Internal helpers
    # ========================================

    def _touch(self) -> None:
        self.updated_at = utcnow()

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self.questions):
            raise QuestionIndexError(index, len(self.questions))

    def question(self, index: int) -> QuestionBase:
        self._check_index(index)
        return self.questions[index]

    # ========================================
    # Authoring operations
    # ========================================

    def add_question(self, question_type: QuestionType | str) -> QuestionBase:
        """Append a default question of the given type."""
        question = default_question(question_type)
        self.questions.append(question)
        self._touch()
        logger.debug(f"Form {self.id}: added {question.type.value} question #{len(self.questions)}")
        return question

    def update_question(self, index: int, patch: dict[str, Any]) -> QuestionBase:
        """
        Merge ``patch`` into the question at ``index``.

        Keys may use attribute or wire names. Changing ``type`` re-shapes the
        question; fields the new type does not know are dropped.

        Raises:
            QuestionIndexError, UnknownQuestionType, MalformedQuestionShape
        """
        current = self.question(index)
        target = get_handler(patch.get("type", current.type)).model
        data = current.model_dump(by_alias=True)
        for key, value in patch.items():
            data[target.wire_name(key)] = value
        updated = parse_question(data)
        self.questions[index] = updated
        self._touch()
        return updated

    def delete_question(self, index: int) -> QuestionBase:
        self._check_index(index)
        removed = self.questions.pop(index)
        self._touch()
        return removed

    def move_question(self, from_index: int, to_index: int) -> None:
        """Move a question, shifting the ones in between."""
        self._check_index(from_index)
        self._check_index(to_index)
        question = self.questions.pop(from_index)
        self.questions.insert(to_index, question)
        self._touch()

    def duplicate_question(self, index: int) -> QuestionBase:
        """Append a deep copy of a question with " (Copy)" after its prompt."""
        original = self.question(index)
        copy = original.model_copy(deep=True, update={"prompt": f"{original.prompt}{COPY_SUFFIX}"})
        self.questions.append(copy)
        self._touch()
        return copy

    def set_question_image(self, index: int, image_ref: str | None) -> QuestionBase:
        question = self.question(index)
        updated = question.model_copy(update={"image_ref": image_ref})
        self.questions[index] = updated
        self._touch()
        return updated

    def set_header_image(self, image_ref: str | None) -> None:
        self.header_image_ref = image_ref
        self._touch()

    def update_settings(self, **changes: Any) -> FormSettings:
        merged = self.settings.model_dump(by_alias=True)
        for key, value in changes.items():
            merged[FormSettings.wire_name(key)] = value
        self.settings = FormSettings.model_validate(merged)
        self._touch()
        return self.settings

    def publish(self) -> bool:
        """
        Open the form for responses.

        Idempotent: returns True when the form was a draft and is now
        published, False when it was already published (nothing changes).
        """
        if self.is_published:
            logger.debug(f"Form {self.id} already published")
            return False
        self.is_published = True
        self._touch()
        logger.info(f"Form {self.id} published")
        return True

    def lint(self) -> dict[int, list[str]]:
        """Authoring warnings by question index (only questions with warnings)."""
        report: dict[int, list[str]] = {}
        for index, question in enumerate(self.questions):
            warnings = lint_question(question)
            if warnings:
                report[index] = warnings
        return report
