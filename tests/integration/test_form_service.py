"""
Integration tests for FormService over in-memory SQL repositories.
"""

import pytest
from pydantic import ValidationError

from formcraft.core.errors import QuestionIndexError
from formcraft.core.forms import Form


@pytest.fixture
def stored_form(sql_service, sample_form_data):
    return sql_service.save_form(Form.model_validate(sample_form_data))


class TestSaveForm:

    def test_replace_after_publish_stays_published(self, sql_service, stored_form):
        sql_service.publish(stored_form.id)
        edited = Form.model_validate({"title": "Edited", "questions": []})
        saved = sql_service.save_form(edited, stored_form.id)
        assert saved.is_published is True
        assert sql_service.form_by_id(stored_form.id).title == "Edited"

    def test_replace_can_publish_a_draft(self, sql_service, stored_form):
        body = stored_form.model_copy(update={"is_published": True})
        assert sql_service.save_form(body, stored_form.id).is_published is True


class TestImagesAndSettings:

    def test_header_image(self, sql_service, stored_form):
        sql_service.set_header_image(stored_form.id, "img://h")
        assert sql_service.form_by_id(stored_form.id).header_image_ref == "img://h"

    def test_question_image(self, sql_service, stored_form):
        form = sql_service.set_question_image(stored_form.id, 1, "img://q1")
        assert form.questions[1].image_ref == "img://q1"
        with pytest.raises(QuestionIndexError):
            sql_service.set_question_image(stored_form.id, 7, "img://none")

    def test_update_settings(self, sql_service, stored_form):
        form = sql_service.update_settings(stored_form.id, {"allowMultipleAttempts": True})
        assert form.settings.allow_multiple_attempts is True
        assert sql_service.form_by_id(stored_form.id).settings.allow_multiple_attempts is True

    def test_update_settings_invalid(self, sql_service, stored_form):
        with pytest.raises(ValidationError):
            sql_service.update_settings(stored_form.id, {"timeLimit": -5})
