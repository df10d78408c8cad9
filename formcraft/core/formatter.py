"""
Answer formatter.

One canonical string per stored answer, used for both the detail view and
as the base value of a CSV cell.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from formcraft.core.errors import UnknownQuestionType
from formcraft.questions import MAPPING_ANSWER_TYPES, QuestionType, normalize_tag
from formcraft.questions.base import is_blank

NO_ANSWER = "No answer"

# Answers of these types are rendered as "key: value" pairs
_PAIR_TYPES = MAPPING_ANSWER_TYPES | {QuestionType.MATRIX}


def _json(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, default=str)


def _value_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return _json(value)


def _coerce_type(question_type: Any) -> QuestionType | None:
    try:
        return normalize_tag(question_type)
    except UnknownQuestionType:
        return None


def format_answer(answer: Any, question_type: QuestionType | str | None) -> str:
    """
    Render an answer as its canonical display string.

    Mapping answers (categorize, cloze, comprehension, matrix) become
    "key: value" pairs joined by ", " in insertion order; lists are joined
    by ", "; scalars render as text; other structures as compact JSON.
    """
    if is_blank(answer):
        return NO_ANSWER

    qtype = _coerce_type(question_type)
    if isinstance(answer, Mapping):
        if qtype is QuestionType.FILE_UPLOAD and (answer.get("name") or answer.get("url")):
            return str(answer.get("name") or answer.get("url"))
        if qtype in _PAIR_TYPES:
            return ", ".join(f"{key}: {_value_text(value)}" for key, value in answer.items())
        return _json(answer)
    if isinstance(answer, (list, tuple)):
        return ", ".join(_value_text(item) for item in answer)
    return _value_text(answer)


def csv_cell(answer: Any, question_type: QuestionType | str | None) -> str:
    """CSV cell text for an answer (unquoted); empty for unanswered questions."""
    if is_blank(answer):
        return ""
    return format_answer(answer, question_type)
