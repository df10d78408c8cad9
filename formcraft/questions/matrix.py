"""
Matrix (grid) question handler.

Answers map each row label to a column label (single) or to a list of
column labels (multiple).
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any, Literal

from pydantic import Field
from rich.table import Table

from . import QuestionType, register
from .base import BaseQuestionHandler, QuestionBase, ValidationResult, is_blank


class MatrixType(str, Enum):
    SINGLE = "single"
    MULTIPLE = "multiple"


class MatrixQuestion(QuestionBase):
    type: Literal[QuestionType.MATRIX] = QuestionType.MATRIX
    rows: list[str] = Field(default_factory=lambda: [""], description="Row labels")
    columns: list[str] = Field(default_factory=lambda: [""], description="Column labels")
    matrix_type: MatrixType = Field(
        default=MatrixType.SINGLE,
        description="single: one column per row; multiple: any number",
    )


@register(QuestionType.MATRIX)
class MatrixHandler(BaseQuestionHandler):
    """Handler for grid questions."""

    label = "Matrix"
    title = "MATRIX"
    model = MatrixQuestion

    def lint(self, question: MatrixQuestion) -> list[str]:
        warnings = super().lint(question)
        if not any(r.strip() for r in question.rows):
            warnings.append("Matrix has no rows")
        if not any(c.strip() for c in question.columns):
            warnings.append("Matrix has no columns")
        return warnings

    def check_strict(self, question: MatrixQuestion, answer: Any) -> ValidationResult:
        if not isinstance(answer, Mapping) or not answer:
            return ValidationResult.incomplete("Please answer every row")
        columns = set(question.columns)
        for row in question.rows:
            picked = answer.get(row)
            if is_blank(picked):
                return ValidationResult.incomplete(f"Please answer row '{row}'")
            if question.matrix_type is MatrixType.MULTIPLE:
                values = picked if isinstance(picked, (list, tuple)) else [picked]
            else:
                if isinstance(picked, (list, tuple)):
                    return ValidationResult.incomplete(f"Pick one column for row '{row}'")
                values = [picked]
            if any(v not in columns for v in values):
                return ValidationResult.incomplete(f"Unknown column for row '{row}'")
        return ValidationResult.ok()

    def body(self, question: MatrixQuestion) -> Table:
        table = Table(box=None, padding=(0, 1))
        table.add_column("")
        for column in question.columns:
            table.add_column(column or "-", justify="center")
        cell = "( )" if question.matrix_type is MatrixType.SINGLE else "[ ]"
        for row in question.rows:
            table.add_row(row or "-", *[cell for _ in question.columns])
        return table
