"""
Unit tests for the Form aggregate: authoring operations and publishing.
"""

import time

import pytest
from pydantic import ValidationError

from formcraft.core.errors import MalformedQuestionShape, QuestionIndexError, UnknownQuestionType
from formcraft.core.forms import Form, FormSettings
from formcraft.questions import QuestionType
from formcraft.questions.cloze import ClozeQuestion


def tick():
    # utcnow() resolution can be coarse on some platforms
    time.sleep(0.002)


class TestFormModel:

    def test_title_required(self):
        with pytest.raises(ValidationError):
            Form(title="   ")

    def test_defaults(self):
        form = Form(title="Survey")
        assert form.questions == []
        assert form.is_published is False
        assert form.settings == FormSettings()
        assert form.settings.show_progress_bar is True

    def test_legacy_wire_names(self):
        form = Form.model_validate(
            {
                "_id": "abc",
                "title": "Old",
                "headerImage": "img://h",
                "settings": {"timeLimit": 15, "allowMultipleAttempts": True},
                "questions": [{"type": "mcq", "question": "Pick"}],
            }
        )
        assert form.id == "abc"
        assert form.header_image_ref == "img://h"
        assert form.settings.time_limit_minutes == 15
        assert form.settings.allow_multiple_attempts is True
        assert form.questions[0].type is QuestionType.MULTIPLE_CHOICE

    def test_unknown_question_type_rejected(self):
        with pytest.raises(UnknownQuestionType):
            Form.model_validate({"title": "T", "questions": [{"type": "essay"}]})

    def test_serializes_subclass_fields(self, sample_form):
        data = sample_form.to_dict()
        assert data["questions"][1]["passage"] == "The ___ jumps over the ___ dog"
        assert data["questions"][0]["options"][0]["isCorrect"] is True
        assert "isPublished" in data and "headerImageRef" in data

    def test_round_trip(self, sample_form):
        assert Form.model_validate(sample_form.to_dict()) == sample_form


class TestAuthoringOperations:

    def test_add_question_appends_default(self, sample_form):
        before = sample_form.updated_at
        tick()
        question = sample_form.add_question("rating")
        assert sample_form.questions[-1] is question
        assert question.max_stars == 5
        assert sample_form.updated_at > before

    def test_add_unknown_type(self, sample_form):
        with pytest.raises(UnknownQuestionType):
            sample_form.add_question("essay")

    def test_update_question_merges_patch(self, sample_form):
        updated = sample_form.update_question(0, {"prompt": "Pick one", "imageRef": "img://q"})
        assert updated.prompt == "Pick one"
        assert updated.image_ref == "img://q"
        assert updated.options[0].text == "Red"

    def test_update_question_accepts_attribute_names(self, sample_form):
        updated = sample_form.update_question(3, {"max_length": 200})
        assert updated.max_length == 200

    def test_update_question_legacy_keys(self, sample_form):
        sample_form.add_question("text")
        updated = sample_form.update_question(4, {"question": "What is your name?", "image": "img://n"})
        assert updated.prompt == "What is your name?"
        assert updated.image_ref == "img://n"

    def test_update_ranking_legacy_options(self, sample_form):
        sample_form.add_question("ranking")
        updated = sample_form.update_question(4, {"options": ["Speed", "Price"]})
        assert updated.items == ["Speed", "Price"]

    def test_update_question_changes_type(self, sample_form):
        updated = sample_form.update_question(3, {"type": "cloze", "passage": "A ___"})
        assert isinstance(updated, ClozeQuestion)
        assert updated.prompt == "Comments"
        assert updated.slot_count == 1

    def test_update_question_rejects_bad_shape(self, sample_form):
        with pytest.raises(MalformedQuestionShape):
            sample_form.update_question(3, {"minLength": 9, "maxLength": 1})
        assert sample_form.questions[3].min_length is None

    @pytest.mark.parametrize("index", [-1, 4, 100])
    def test_bad_index(self, sample_form, index):
        with pytest.raises(QuestionIndexError) as exc_info:
            sample_form.question(index)
        assert isinstance(exc_info.value, IndexError)

    def test_delete_question(self, sample_form):
        removed = sample_form.delete_question(0)
        assert removed.prompt == "Pick a colour"
        assert len(sample_form.questions) == 3
        assert sample_form.questions[0].type is QuestionType.CLOZE

    def test_delete_bad_index(self, sample_form):
        with pytest.raises(QuestionIndexError):
            sample_form.delete_question(7)

    def test_move_question_forward(self, sample_form):
        sample_form.move_question(0, 2)
        assert [q.type.value for q in sample_form.questions] == [
            "cloze", "categorize", "multiple-choice", "text",
        ]

    def test_move_question_backward(self, sample_form):
        sample_form.move_question(3, 0)
        assert sample_form.questions[0].type is QuestionType.TEXT
        assert sample_form.questions[1].type is QuestionType.MULTIPLE_CHOICE

    def test_duplicate_question(self, sample_form):
        copy = sample_form.duplicate_question(1)
        original = sample_form.questions[1]
        assert sample_form.questions[-1] is copy
        assert copy.prompt == "Fill in (Copy)"
        assert copy.model_copy(update={"prompt": original.prompt}) == original

    def test_duplicate_is_deep(self, sample_form):
        copy = sample_form.duplicate_question(0)
        copy.options[0].text = "Changed"
        assert sample_form.questions[0].options[0].text == "Red"

    def test_set_question_image(self, sample_form):
        sample_form.set_question_image(2, "img://cat")
        assert sample_form.questions[2].image_ref == "img://cat"
        sample_form.set_question_image(2, None)
        assert sample_form.questions[2].image_ref is None

    def test_set_header_image(self, sample_form):
        sample_form.set_header_image("img://header")
        assert sample_form.header_image_ref == "img://header"

    def test_update_settings(self, sample_form):
        settings = sample_form.update_settings(time_limit_minutes=30, theme="dark")
        assert settings.time_limit_minutes == 30
        assert sample_form.settings.theme == "dark"
        assert sample_form.settings.show_progress_bar is True

    def test_update_settings_wire_names(self, sample_form):
        settings = sample_form.update_settings(timeLimit=10, showProgressBar=False)
        assert settings.time_limit_minutes == 10
        assert settings.show_progress_bar is False

    def test_update_settings_validates(self, sample_form):
        with pytest.raises(ValidationError):
            sample_form.update_settings(time_limit_minutes=0)


class TestPublish:

    def test_publish_draft(self, sample_form):
        before = sample_form.updated_at
        tick()
        assert sample_form.publish() is True
        assert sample_form.is_published
        assert sample_form.updated_at > before

    def test_publish_is_idempotent(self, published_form):
        stamp = published_form.updated_at
        assert published_form.publish() is False
        assert published_form.is_published
        assert published_form.updated_at == stamp


class TestLint:

    def test_report_keyed_by_index(self, sample_form):
        sample_form.add_question("cloze")
        report = sample_form.lint()
        assert list(report) == [4]
        assert "Prompt is empty" in report[4]

    def test_clean_form(self, sample_form):
        assert sample_form.lint() == {}
