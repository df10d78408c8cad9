"""
Answer validator.

Decides whether required questions are completely answered. Two policies:

- LEGACY (default): matches the first-generation form filler. Only categorize,
  cloze and comprehension are checked, and only for a non-empty mapping.
  Every other type passes even when required.
- STRICT: every required question must be fully answered; cloze needs
  every blank, categorize every item, comprehension every sub-question.

Non-required questions always pass, whatever the policy.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from loguru import logger

from formcraft.questions import get_handler
from formcraft.questions.base import QuestionBase, ValidationPolicy, ValidationResult

if TYPE_CHECKING:
    from formcraft.core.forms import Form


def resolve_policy(policy: ValidationPolicy | str | None = None) -> ValidationPolicy:
    """Explicit policy, else the configured ``validation_policy``."""
    if policy is None:
        from config import get_settings

        policy = get_settings().validation_policy
    return ValidationPolicy(policy)


def validate(
    question: QuestionBase,
    answer: Any,
    policy: ValidationPolicy | str | None = None,
) -> ValidationResult:
    """Check one answer against one question."""
    if not question.required:
        return ValidationResult.ok()
    return get_handler(question.type).check(question, answer, resolve_policy(policy))


def validate_submission(
    form: "Form",
    answers: Mapping[int, Any],
    policy: ValidationPolicy | str | None = None,
) -> dict[int, str]:
    """
    Validate every question of a form.

    Args:
        form: The form being filled
        answers: Answer value by question index; missing indices are unanswered

    Returns:
        Reason by question index for each incomplete question. Empty means
        the submission may be accepted.
    """
    resolved = resolve_policy(policy)
    errors: dict[int, str] = {}
    for index, question in enumerate(form.questions):
        result = validate(question, answers.get(index), resolved)
        if not result.complete:
            errors[index] = result.reason or "This question is required"

    if errors:
        logger.info(
            f"Submission for form {form.id} rejected ({resolved.value} policy): "
            f"{len(errors)} incomplete question(s)"
        )
    return errors
