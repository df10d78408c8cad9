"""
Unit tests for the question type registry.

Covers lookup (canonical and legacy tags), parsing with hard shape
constraints, field contracts, defaults and authoring lint.
"""

import pytest

from formcraft.core.errors import MalformedQuestionShape, UnknownQuestionType
from formcraft.questions import (
    HANDLERS,
    MAPPING_ANSWER_TYPES,
    QuestionType,
    default_question,
    get_handler,
    lint_question,
    normalize_tag,
    parse_question,
    shape_of,
)
from formcraft.questions.categorize import CategorizeQuestion
from formcraft.questions.choice import MultipleChoiceQuestion
from formcraft.questions.file_upload import FileUploadQuestion


class TestHandlerRegistry:
    """Test the handler registry."""

    def test_every_type_has_a_handler(self):
        assert set(HANDLERS) == set(QuestionType)
        assert len(HANDLERS) == 11

    def test_get_handler_by_string(self):
        assert get_handler("cloze").type is QuestionType.CLOZE

    def test_get_handler_by_enum(self):
        assert get_handler(QuestionType.MATRIX).type is QuestionType.MATRIX

    def test_get_handler_invalid_type(self):
        with pytest.raises(UnknownQuestionType) as exc_info:
            get_handler("essay")
        assert exc_info.value.tag == "essay"

    @pytest.mark.parametrize(
        "legacy,canonical",
        [
            ("multiple_choice", QuestionType.MULTIPLE_CHOICE),
            ("mcq", QuestionType.MULTIPLE_CHOICE),
            ("checkboxes", QuestionType.CHECKBOX),
            ("short-answer", QuestionType.TEXT),
            ("file_upload", QuestionType.FILE_UPLOAD),
            ("fill-in-the-blank", QuestionType.CLOZE),
            ("  Rating ", QuestionType.RATING),
        ],
    )
    def test_legacy_tags_normalize(self, legacy, canonical):
        assert normalize_tag(legacy) is canonical

    def test_mapping_answer_types(self):
        assert MAPPING_ANSWER_TYPES == {
            QuestionType.CLOZE, QuestionType.CATEGORIZE, QuestionType.COMPREHENSION,
        }
        assert QuestionType.MATRIX not in MAPPING_ANSWER_TYPES


class TestParseQuestion:
    """Hard shape constraints are enforced when a question is built."""

    def test_missing_type_is_unknown(self):
        with pytest.raises(UnknownQuestionType):
            parse_question({"prompt": "No type"})

    def test_legacy_tag_parses_to_canonical_type(self):
        question = parse_question({"type": "mcq", "question": "Old prompt key"})
        assert isinstance(question, MultipleChoiceQuestion)
        assert question.type is QuestionType.MULTIPLE_CHOICE
        assert question.prompt == "Old prompt key"

    def test_non_object_is_malformed(self):
        with pytest.raises(MalformedQuestionShape):
            parse_question(["not", "a", "question"])

    @pytest.mark.parametrize("stars", [2, 11])
    def test_rating_stars_out_of_range(self, stars):
        with pytest.raises(MalformedQuestionShape) as exc_info:
            parse_question({"type": "rating", "maxStars": stars})
        assert exc_info.value.question_type == "rating"
        assert exc_info.value.problems

    def test_text_min_above_max(self):
        with pytest.raises(MalformedQuestionShape):
            parse_question({"type": "text", "minLength": 10, "maxLength": 5})

    def test_date_min_after_max(self):
        with pytest.raises(MalformedQuestionShape):
            parse_question({"type": "date", "minDate": "2024-05-01", "maxDate": "2024-01-01"})

    def test_date_fields_parse_iso(self):
        question = parse_question({"type": "date", "minDate": "2024-01-01"})
        assert question.min_date.isoformat() == "2024-01-01"

    def test_file_upload_accept_normalized(self):
        question = parse_question({"type": "file-upload", "accept": ".PDF, docx,pdf"})
        assert isinstance(question, FileUploadQuestion)
        assert question.accept == ["pdf", "docx"]

    def test_file_upload_size_wire_name(self):
        question = parse_question({"type": "file-upload", "maxSizeMB": 25})
        assert question.max_size_mb == 25
        assert question.to_dict()["maxSizeMB"] == 25

    def test_file_upload_size_must_be_positive(self):
        with pytest.raises(MalformedQuestionShape):
            parse_question({"type": "file-upload", "maxSizeMB": 0})

    def test_matrix_type_restricted(self):
        with pytest.raises(MalformedQuestionShape):
            parse_question({"type": "matrix", "matrixType": "grid"})

    def test_categorize_duplicate_categories(self):
        with pytest.raises(MalformedQuestionShape):
            parse_question({"type": "categorize", "categories": ["A", "A"]})

    def test_categorize_undeclared_category(self):
        with pytest.raises(MalformedQuestionShape):
            parse_question(
                {
                    "type": "categorize",
                    "categories": ["A"],
                    "options": [{"text": "x", "category": "B"}],
                }
            )

    def test_categorize_empty_category_is_unset(self):
        question = parse_question(
            {"type": "categorize", "categories": ["A"], "options": [{"text": "x", "category": ""}]}
        )
        assert isinstance(question, CategorizeQuestion)
        assert question.options[0].category is None

    def test_ranking_accepts_option_objects(self):
        question = parse_question({"type": "ranking", "options": [{"text": "b"}, {"text": "a"}]})
        assert question.items == ["b", "a"]

    def test_negative_points_rejected(self):
        with pytest.raises(MalformedQuestionShape):
            parse_question({"type": "text", "points": -1})


class TestShapesAndDefaults:
    """Field contracts and default instances."""

    def test_shape_uses_wire_names(self):
        shape = shape_of("rating")
        names = shape.field_names()
        assert "maxStars" in names
        assert "prompt" in names
        assert "type" not in names

    def test_shape_reports_constraints(self):
        spec = next(f for f in shape_of("rating").fields if f.name == "maxStars")
        assert spec.constraints.get("minimum") == 3
        assert spec.constraints.get("maximum") == 10

    @pytest.mark.parametrize("question_type", list(QuestionType))
    def test_default_question_round_trips(self, question_type):
        question = default_question(question_type)
        assert question.type is question_type
        assert parse_question(question.to_dict()) == question

    def test_wire_format_is_camel_case(self):
        question = parse_question(
            {"type": "multiple-choice", "imageRef": "img://1", "options": [{"text": "A", "isCorrect": True}]}
        )
        data = question.to_dict()
        assert data["imageRef"] == "img://1"
        assert data["options"][0]["isCorrect"] is True
        assert data["type"] == "multiple-choice"


class TestLint:
    """Soft constraints are reported, never raised."""

    def test_clean_question_has_no_warnings(self):
        question = parse_question(
            {
                "type": "multiple-choice",
                "prompt": "Pick",
                "options": [{"text": "A", "isCorrect": True}, {"text": "B"}],
            }
        )
        assert lint_question(question) == []

    def test_multiple_choice_without_correct_option(self):
        question = parse_question(
            {"type": "multiple-choice", "prompt": "Pick", "options": [{"text": "A"}, {"text": "B"}]}
        )
        warnings = lint_question(question)
        assert any("exactly one correct" in w for w in warnings)

    def test_cloze_blank_count_mismatch(self):
        question = parse_question(
            {"type": "cloze", "prompt": "Fill", "passage": "A ___ and ___", "blanks": [{"answer": "x"}]}
        )
        warnings = lint_question(question)
        assert any("2 blank(s) but 1 answer(s)" in w for w in warnings)

    def test_cloze_without_markers(self):
        question = parse_question({"type": "cloze", "prompt": "Fill", "passage": "No blanks"})
        assert any("no blanks" in w for w in lint_question(question))

    def test_comprehension_correct_answer_not_an_option(self):
        question = parse_question(
            {
                "type": "comprehension",
                "prompt": "Read",
                "passage": "Text",
                "comprehensionQuestions": [
                    {"question": "Q", "options": ["a", "b"], "correctAnswer": "c"}
                ],
            }
        )
        assert any("correct answer is not one of its options" in w for w in lint_question(question))

    def test_empty_prompt(self):
        assert "Prompt is empty" in lint_question(default_question("text"))
