"""
Unit tests for the answer validator.

Both policies are exercised explicitly so the result never depends on
the configured default.
"""

import pytest

from formcraft.core.validator import resolve_policy, validate, validate_submission
from formcraft.questions import parse_question
from formcraft.questions.base import ValidationPolicy

LEGACY = ValidationPolicy.LEGACY
STRICT = ValidationPolicy.STRICT


def required(data):
    return parse_question({**data, "required": True})


@pytest.fixture
def cloze_question():
    return required({"type": "cloze", "passage": "The ___ jumps over the ___ dog"})


@pytest.fixture
def categorize_question():
    return required(
        {
            "type": "categorize",
            "categories": ["Physical", "Network"],
            "options": [
                {"text": "Cable", "category": "Physical"},
                {"text": "Router", "category": "Network"},
            ],
        }
    )


@pytest.fixture
def comprehension_question():
    return required(
        {
            "type": "comprehension",
            "passage": "Text",
            "comprehensionQuestions": [
                {"question": "One?", "options": ["a", "b"], "correctAnswer": "a"},
                {"question": "Two?", "options": ["c", "d"], "correctAnswer": "d"},
            ],
        }
    )


class TestPolicyResolution:

    def test_explicit_policy(self):
        assert resolve_policy("strict") is STRICT
        assert resolve_policy(LEGACY) is LEGACY

    def test_default_is_legacy(self, monkeypatch):
        from config import get_settings

        monkeypatch.delenv("FORMCRAFT_VALIDATION_POLICY", raising=False)
        get_settings.cache_clear()
        try:
            assert resolve_policy(None) is LEGACY
        finally:
            get_settings.cache_clear()

    def test_invalid_policy(self):
        with pytest.raises(ValueError):
            resolve_policy("lenient")


class TestNonRequired:

    @pytest.mark.parametrize("policy", [LEGACY, STRICT])
    def test_unanswered_optional_question_passes(self, policy):
        question = parse_question({"type": "multiple-choice", "required": False})
        assert validate(question, None, policy).complete

    @pytest.mark.parametrize("policy", [LEGACY, STRICT])
    def test_optional_cloze_passes_with_empty_answer(self, policy):
        question = parse_question({"type": "cloze", "passage": "___"})
        assert validate(question, {}, policy).complete


class TestLegacyPolicy:

    @pytest.mark.parametrize(
        "data",
        [
            {"type": "multiple-choice"},
            {"type": "checkbox"},
            {"type": "text"},
            {"type": "rating"},
            {"type": "date"},
            {"type": "file-upload"},
            {"type": "ranking"},
            {"type": "matrix"},
        ],
    )
    def test_scalar_types_always_pass(self, data):
        assert validate(required(data), None, LEGACY).complete

    def test_cloze_partial_answer_is_complete(self, cloze_question):
        assert validate(cloze_question, {"blank-0": "fox"}, LEGACY).complete

    @pytest.mark.parametrize("answer", [None, {}, "fox", ["fox"]])
    def test_cloze_needs_non_empty_mapping(self, cloze_question, answer):
        result = validate(cloze_question, answer, LEGACY)
        assert not result.complete
        assert result.reason == "Please fill in all blanks"

    def test_categorize_empty(self, categorize_question):
        result = validate(categorize_question, {}, LEGACY)
        assert not result.complete
        assert result.reason == "Please categorize all items"

    def test_categorize_partial_is_complete(self, categorize_question):
        assert validate(categorize_question, {"Cable": "Physical"}, LEGACY).complete

    def test_comprehension_empty(self, comprehension_question):
        result = validate(comprehension_question, None, LEGACY)
        assert result.reason == "Please answer all questions"

    def test_comprehension_partial_is_complete(self, comprehension_question):
        assert validate(comprehension_question, {"comp-0": "a"}, LEGACY).complete


class TestStrictPolicy:

    def test_cloze_partial_is_incomplete(self, cloze_question):
        result = validate(cloze_question, {"blank-0": "fox"}, STRICT)
        assert not result.complete
        assert "1 of 2" in result.reason

    def test_cloze_blank_text_is_incomplete(self, cloze_question):
        assert not validate(cloze_question, {"blank-0": "fox", "blank-1": "  "}, STRICT).complete

    def test_cloze_all_filled(self, cloze_question):
        assert validate(cloze_question, {"blank-0": "fox", "blank-1": "lazy"}, STRICT).complete

    def test_cloze_without_markers_never_satisfiable(self):
        question = required({"type": "cloze", "passage": "No blanks here"})
        result = validate(question, {"blank-0": "anything"}, STRICT)
        assert not result.complete
        assert "never be completed" in result.reason

    def test_categorize_requires_every_item(self, categorize_question):
        assert not validate(categorize_question, {"Cable": "Physical"}, STRICT).complete
        assert validate(
            categorize_question, {"Cable": "Physical", "Router": "Network"}, STRICT
        ).complete

    def test_categorize_rejects_undeclared_category(self, categorize_question):
        answer = {"Cable": "Physical", "Router": "Transport"}
        assert not validate(categorize_question, answer, STRICT).complete

    def test_comprehension_requires_every_sub_question(self, comprehension_question):
        result = validate(comprehension_question, {"comp-0": "a"}, STRICT)
        assert "1 of 2" in result.reason
        assert validate(comprehension_question, {"comp-0": "a", "comp-1": "c"}, STRICT).complete

    def test_multiple_choice(self):
        question = required({"type": "multiple-choice", "options": [{"text": "A"}, {"text": "B"}]})
        assert validate(question, "A", STRICT).complete
        assert not validate(question, "C", STRICT).complete
        assert not validate(question, "", STRICT).complete

    def test_checkbox(self):
        question = required({"type": "checkbox", "options": [{"text": "A"}, {"text": "B"}]})
        assert validate(question, ["A", "B"], STRICT).complete
        assert not validate(question, [], STRICT).complete
        assert not validate(question, ["Z"], STRICT).complete

    def test_text_bounds(self):
        question = required({"type": "text", "minLength": 2, "maxLength": 5})
        assert validate(question, "abc", STRICT).complete
        assert not validate(question, "a", STRICT).complete
        assert not validate(question, "abcdef", STRICT).complete
        assert not validate(question, "   ", STRICT).complete

    @pytest.mark.parametrize(
        "answer,ok",
        [
            (1, True), (5, True), ("3", True), (0, False), (6, False), (True, False), (2.5, False),
            (float("inf"), False), (float("-inf"), False), (float("nan"), False),
        ],
    )
    def test_rating(self, answer, ok):
        question = required({"type": "rating", "maxStars": 5})
        assert validate(question, answer, STRICT).complete is ok

    def test_date_bounds(self):
        question = required({"type": "date", "minDate": "2024-01-01", "maxDate": "2024-12-31"})
        assert validate(question, "2024-06-15", STRICT).complete
        assert not validate(question, "2023-12-31", STRICT).complete
        assert not validate(question, "2025-01-01", STRICT).complete
        assert not validate(question, "June 15", STRICT).complete

    def test_file_upload(self):
        question = required({"type": "file-upload", "accept": ["pdf"], "maxSizeMB": 1})
        assert validate(question, {"name": "cv.pdf", "size": 1024}, STRICT).complete
        assert validate(question, "https://files.example/cv.PDF", STRICT).complete
        assert not validate(question, {"name": "cv.exe", "size": 1024}, STRICT).complete
        assert not validate(question, {"name": "cv.pdf", "size": 2 * 1024 * 1024}, STRICT).complete

    def test_ranking_permutation(self):
        question = required({"type": "ranking", "items": ["a", "b", "c"]})
        assert validate(question, ["c", "a", "b"], STRICT).complete
        assert not validate(question, ["a", "b"], STRICT).complete

    def test_matrix_single(self):
        question = required({"type": "matrix", "rows": ["Speed", "Price"], "columns": ["Good", "Bad"]})
        assert validate(question, {"Speed": "Good", "Price": "Bad"}, STRICT).complete
        assert not validate(question, {"Speed": "Good"}, STRICT).complete
        assert not validate(question, {"Speed": "Good", "Price": "Meh"}, STRICT).complete
        assert not validate(question, {"Speed": ["Good"], "Price": "Bad"}, STRICT).complete

    def test_matrix_multiple(self):
        question = required(
            {"type": "matrix", "rows": ["Speed"], "columns": ["Good", "Bad"], "matrixType": "multiple"}
        )
        assert validate(question, {"Speed": ["Good", "Bad"]}, STRICT).complete
        assert not validate(question, {"Speed": []}, STRICT).complete


class TestValidateSubmission:

    def test_reports_every_failing_index(self, sample_form):
        errors = validate_submission(sample_form, {}, LEGACY)
        assert set(errors) == {1, 2}

    def test_empty_on_success(self, sample_form):
        answers = {1: {"blank-0": "fox"}, 2: {"Cable": "Physical"}}
        assert validate_submission(sample_form, answers, LEGACY) == {}

    def test_strict_checks_required_scalars(self, sample_form):
        answers = {1: {"blank-0": "fox", "blank-1": "lazy"}, 2: {"Cable": "Physical", "Router": "Network"}}
        errors = validate_submission(sample_form, answers, STRICT)
        assert set(errors) == {0}
