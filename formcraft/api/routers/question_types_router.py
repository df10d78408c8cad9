"""
Question types router.

Exposes the registry so builders can render an authoring form for any
question type without hard-coding its fields.
"""
from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List

from fastapi import APIRouter

from formcraft.questions import HANDLERS, QuestionType, default_question, shape_of

router = APIRouter()


def _describe(question_type: QuestionType) -> Dict[str, Any]:
    shape = shape_of(question_type)
    return {
        "type": question_type.value,
        "label": shape.label,
        "fields": [asdict(spec) for spec in shape.fields],
        "default": default_question(question_type).to_dict(),
    }


@router.get("", summary="List question types")
def list_question_types() -> List[Dict[str, Any]]:
    return [_describe(question_type) for question_type in HANDLERS]


@router.get("/{tag}", summary="Describe one question type")
def get_question_type(tag: str) -> Dict[str, Any]:
    """Field contract and default instance. Legacy tags are accepted."""
    shape = shape_of(tag)
    return {**_describe(shape.type), "schema": shape.schema}
