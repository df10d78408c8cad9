"""
File upload question handler.

Uploads themselves happen outside formcraft; the stored answer is a
reference (URL/path string) or ``{"name": ..., "size": bytes}``.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import PurePosixPath
from typing import Any, Literal

from pydantic import Field, field_validator
from rich.text import Text

from . import QuestionType, register
from .base import BaseQuestionHandler, QuestionBase, ValidationResult, is_blank

BYTES_PER_MB = 1024 * 1024


class FileUploadQuestion(QuestionBase):
    type: Literal[QuestionType.FILE_UPLOAD] = QuestionType.FILE_UPLOAD
    accept: list[str] = Field(
        default_factory=list,
        description="Allowed extensions without dots; empty accepts any",
    )
    max_size_mb: int = Field(
        default=10,
        ge=1,
        alias="maxSizeMB",
        description="Largest accepted file in megabytes",
    )

    @field_validator("accept", mode="before")
    @classmethod
    def _normalize_accept(cls, value: Any) -> list[str]:
        if value is None:
            return []
        if isinstance(value, str):
            value = value.split(",")
        seen: list[str] = []
        for ext in value:
            ext = str(ext).strip().lstrip(".").lower()
            if ext and ext not in seen:
                seen.append(ext)
        return seen


def _extension(name: str) -> str:
    return PurePosixPath(name.split("?")[0]).suffix.lstrip(".").lower()


@register(QuestionType.FILE_UPLOAD)
class FileUploadHandler(BaseQuestionHandler):
    """Handler for file attachments."""

    label = "File upload"
    title = "FILE UPLOAD"
    model = FileUploadQuestion

    def check_strict(self, question: FileUploadQuestion, answer: Any) -> ValidationResult:
        if is_blank(answer):
            return ValidationResult.incomplete("Please upload a file")
        size = None
        if isinstance(answer, Mapping):
            name = str(answer.get("name") or answer.get("url") or "")
            size = answer.get("size")
        else:
            name = str(answer)
        if not name:
            return ValidationResult.incomplete("Please upload a file")
        ext = _extension(name)
        if question.accept and ext not in question.accept:
            return ValidationResult.incomplete(
                f"File type .{ext or '?'} is not allowed (accepted: {', '.join(question.accept)})"
            )
        if isinstance(size, (int, float)) and size > question.max_size_mb * BYTES_PER_MB:
            return ValidationResult.incomplete(f"File exceeds {question.max_size_mb} MB")
        return ValidationResult.ok()

    def body(self, question: FileUploadQuestion) -> Text:
        accepted = ", ".join(question.accept) or "any type"
        return Text(f"[attach file] {accepted}, up to {question.max_size_mb} MB", style="dim")
