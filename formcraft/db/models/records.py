"""
Form and response tables.

Question lists and answers are polymorphic, so each record keeps its full
wire representation in a JSON ``payload`` column. Scalar columns exist for
filtering and ordering only; the payload is authoritative.

payload (forms):
    {"id": ..., "title": ..., "questions": [{"type": "cloze", ...}], ...}

payload (responses):
    {"id": ..., "formId": ..., "answers": [{"questionId": 0, ...}], ...}
"""
from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class FormRecord(Base):
    """Stored form."""

    __tablename__ = "forms"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    is_published: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    payload: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    def __repr__(self) -> str:
        return f"<FormRecord(id={self.id}, title={self.title[:30]})>"


class ResponseRecord(Base):
    """Stored response. ``form_id`` is a reference, not a foreign key:
    responses outlive the form they answered."""

    __tablename__ = "responses"

    # Insertion order doubles as submission order
    seq: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[str] = mapped_column(String(36), unique=True, nullable=False)
    form_id: Mapped[str] = mapped_column(String(36), index=True, nullable=False)
    payload: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    submitted_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    def __repr__(self) -> str:
        return f"<ResponseRecord(id={self.id}, form_id={self.form_id})>"
