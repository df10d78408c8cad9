"""
Response aggregate.

One respondent's answers to one form, keyed by question position. A
response is created once, at submission, and never modified afterwards.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any
from uuid import uuid4

from loguru import logger
from pydantic import AliasChoices, ConfigDict, Field, field_validator

from formcraft.core.base_model import FormcraftModel, utcnow
from formcraft.core.errors import FormNotPublished, UnknownQuestionType, ValidationFailed
from formcraft.core.forms import Form
from formcraft.core.validator import validate_submission
from formcraft.questions import QuestionType, normalize_tag
from formcraft.questions.base import ValidationPolicy

ANONYMOUS = "Anonymous"


class UserInfo(FormcraftModel):
    model_config = ConfigDict(frozen=True)

    name: str | None = None
    email: str | None = None
    ip: str | None = None


class Answer(FormcraftModel):
    """Answer to the question at position ``question_id``."""

    model_config = ConfigDict(frozen=True)

    question_id: int = Field(validation_alias=AliasChoices("questionId", "question_id"))
    question_type: QuestionType | None = None
    answer_value: Any = Field(
        default=None,
        validation_alias=AliasChoices("answerValue", "answer_value", "answer"),
    )

    @field_validator("question_type", mode="before")
    @classmethod
    def _known_type(cls, value: Any) -> QuestionType | None:
        if value is None:
            return None
        try:
            return normalize_tag(value)
        except UnknownQuestionType:
            return None


class Response(FormcraftModel):
    """A submitted response."""

    model_config = ConfigDict(frozen=True)

    id: str | None = Field(default=None, validation_alias=AliasChoices("id", "_id"))
    form_id: str = Field(validation_alias=AliasChoices("formId", "form_id"))
    answers: tuple[Answer, ...] = ()
    submitted_at: datetime = Field(default_factory=utcnow)
    user_info: UserInfo | None = None

    def answer_for(self, index: int) -> Any:
        """Stored value for a question index, or None when unanswered."""
        for answer in reversed(self.answers):
            if answer.question_id == index:
                return answer.answer_value
        return None

    def respondent_label(self) -> str:
        if self.user_info is None:
            return ANONYMOUS
        return self.user_info.name or self.user_info.email or ANONYMOUS


def _coerce_answers(answers: Iterable[Answer | dict[str, Any]] | Mapping[Any, Any]) -> list[Answer]:
    if isinstance(answers, Mapping):
        return [Answer(question_id=int(k), answer_value=v) for k, v in answers.items()]
    return [a if isinstance(a, Answer) else Answer.model_validate(a) for a in answers]


def submit_response(
    form: Form,
    answers: Iterable[Answer | dict[str, Any]] | Mapping[Any, Any],
    user_info: UserInfo | dict[str, Any] | None = None,
    policy: ValidationPolicy | str | None = None,
) -> Response:
    """
    Accept a submission for a published form.

    ``answers`` is a list of Answer records (or their wire dicts), or a
    mapping of question index to answer value. Answers for indices the form
    does not have are dropped. The stored question type always comes from
    the form.

    Raises:
        FormNotPublished: the form is still a draft
        ValidationFailed: one or more required questions are incomplete
    """
    if not form.is_published:
        raise FormNotPublished(form.id)
    if form.id is None:
        raise ValueError("Form must be saved before it can receive responses")

    accepted: dict[int, Answer] = {}
    for entry in _coerce_answers(answers):
        if not 0 <= entry.question_id < len(form.questions):
            logger.warning(f"Form {form.id}: dropping answer for missing question {entry.question_id}")
            continue
        expected = form.questions[entry.question_id].type
        if entry.question_type is not None and entry.question_type is not expected:
            logger.warning(
                f"Form {form.id}: answer {entry.question_id} tagged {entry.question_type.value}, "
                f"question is {expected.value}"
            )
        accepted[entry.question_id] = entry.model_copy(update={"question_type": expected})

    errors = validate_submission(
        form, {i: a.answer_value for i, a in accepted.items()}, policy
    )
    if errors:
        raise ValidationFailed(errors)

    if isinstance(user_info, dict):
        user_info = UserInfo.model_validate(user_info)

    response = Response(
        id=str(uuid4()),
        form_id=form.id,
        answers=tuple(accepted[i] for i in sorted(accepted)),
        user_info=user_info,
    )
    logger.info(f"Accepted response {response.id} for form {form.id} ({len(response.answers)} answers)")
    return response
