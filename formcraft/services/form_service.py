"""
Form Service.

High-level operations shared by the API and the CLI:
- Load, save, delete and list forms
- Authoring shortcuts (add/duplicate/move question, publish)
- Submit responses and list them
- Export responses as CSV
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from loguru import logger

from formcraft.core.export import to_csv
from formcraft.core.forms import Form
from formcraft.core.responses import Answer, Response, UserInfo, submit_response
from formcraft.db.repository import FormRepository, ResponseRepository
from formcraft.questions import QuestionType
from formcraft.questions.base import QuestionBase, ValidationPolicy


class FormService:
    """Boundary operations over a pair of repositories."""

    def __init__(
        self,
        forms: FormRepository,
        responses: ResponseRepository,
        policy: ValidationPolicy | str | None = None,
    ):
        self.forms = forms
        self.responses = responses
        self.policy = policy

    # ========================================
    # Forms
    # ========================================

    def form_by_id(self, form_id: str) -> Form:
        return self.forms.get(form_id)

    def list_forms(self) -> list[Form]:
        return self.forms.list_all()

    def save_form(self, form: Form, form_id: str | None = None) -> Form:
        """Create (no id) or fully replace (id given) a form."""
        if form_id is not None:
            form = form.model_copy(update={"id": form_id})
        form.lint()
        logger.debug(f"Saving form {form.id or '(new)'}: {form.title}")
        return self.forms.save(form)

    def delete_form(self, form_id: str) -> None:
        self.forms.delete(form_id)

    def check_storage(self) -> None:
        """Raises when the form store is unreachable."""
        self.forms.ping()

    def publish(self, form_id: str) -> Form:
        form = self.forms.get(form_id)
        if form.publish():
            form = self.forms.save(form)
        return form

    def set_header_image(self, form_id: str, image_ref: str | None) -> Form:
        form = self.forms.get(form_id)
        form.set_header_image(image_ref)
        return self.forms.save(form)

    def set_question_image(self, form_id: str, index: int, image_ref: str | None) -> Form:
        form = self.forms.get(form_id)
        form.set_question_image(index, image_ref)
        return self.forms.save(form)

    def update_settings(self, form_id: str, changes: Mapping[str, Any]) -> Form:
        """Merge settings changes; keys may use attribute or wire names."""
        form = self.forms.get(form_id)
        form.update_settings(**changes)
        return self.forms.save(form)

    def add_question(self, form_id: str, question_type: QuestionType | str,
                     patch: dict[str, Any] | None = None) -> tuple[Form, QuestionBase]:
        form = self.forms.get(form_id)
        form.add_question(question_type)
        index = len(form.questions) - 1
        if patch:
            form.update_question(index, patch)
        form = self.forms.save(form)
        return form, form.questions[index]

    def update_question(self, form_id: str, index: int, patch: dict[str, Any]) -> Form:
        form = self.forms.get(form_id)
        form.update_question(index, patch)
        return self.forms.save(form)

    def delete_question(self, form_id: str, index: int) -> Form:
        form = self.forms.get(form_id)
        form.delete_question(index)
        return self.forms.save(form)

    def duplicate_question(self, form_id: str, index: int) -> Form:
        form = self.forms.get(form_id)
        form.duplicate_question(index)
        return self.forms.save(form)

    def move_question(self, form_id: str, from_index: int, to_index: int) -> Form:
        form = self.forms.get(form_id)
        form.move_question(from_index, to_index)
        return self.forms.save(form)

    # ========================================
    # Responses
    # ========================================

    def submit_response(
        self,
        form_id: str,
        answers: Iterable[Answer | dict[str, Any]] | Mapping[Any, Any],
        user_info: UserInfo | dict[str, Any] | None = None,
    ) -> Response:
        """
        Validate and store a submission.

        Raises:
            NotFound, FormNotPublished, ValidationFailed
        """
        form = self.forms.get(form_id)
        response = submit_response(form, answers, user_info=user_info, policy=self.policy)
        return self.responses.add(response)

    def responses_for_form(self, form_id: str) -> list[Response]:
        return self.responses.list_for_form(form_id)

    def export_csv(self, form_id: str) -> tuple[Form, bytes]:
        form = self.forms.get(form_id)
        return form, to_csv(form, self.responses.list_for_form(form_id))
