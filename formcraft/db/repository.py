"""
Storage collaborator: repositories for forms and responses.

Forms are created on first save (no id) and fully replaced on later saves.
Responses are append-only.
"""

from __future__ import annotations

from typing import Protocol
from uuid import uuid4

from loguru import logger
from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from formcraft.core.base_model import utcnow
from formcraft.core.errors import NotFound
from formcraft.core.forms import Form
from formcraft.core.responses import Response
from formcraft.db.database import check_database, get_session_factory, session_scope
from formcraft.db.models import FormRecord, ResponseRecord


class FormRepository(Protocol):
    """Load/save forms by id."""

    def get(self, form_id: str) -> Form:
        """Raises NotFound."""
        ...

    def list_all(self) -> list[Form]:
        """All forms, newest first."""
        ...

    def save(self, form: Form) -> Form:
        """Create when ``form.id`` is None, else replace. Raises NotFound."""
        ...

    def delete(self, form_id: str) -> None:
        """Raises NotFound."""
        ...

    def ping(self) -> None:
        """Raises when the backing store is unreachable."""
        ...


class ResponseRepository(Protocol):
    """Append and list responses."""

    def add(self, response: Response) -> Response:
        ...

    def list_for_form(self, form_id: str) -> list[Response]:
        """Responses for a form in submission order."""
        ...


def prepare_for_save(form: Form, existing: Form | None) -> Form:
    """
    Assign id/timestamps for a save: new id on create, keep created_at on replace.

    A replace never unpublishes: once published, a form stays published.
    """
    now = utcnow()
    if existing is None:
        return form.model_copy(update={"id": form.id or str(uuid4()), "updated_at": now})
    return form.model_copy(
        update={
            "created_at": existing.created_at,
            "updated_at": now,
            "is_published": existing.is_published or form.is_published,
        }
    )


class SqlFormRepository:
    """Forms stored in the ``forms`` table."""

    def __init__(self, session_factory: sessionmaker[Session] | None = None):
        self._factory = session_factory or get_session_factory()

    def get(self, form_id: str) -> Form:
        with session_scope(self._factory) as session:
            record = session.get(FormRecord, form_id)
            if record is None:
                raise NotFound("Form", form_id)
            return Form.model_validate(record.payload)

    def list_all(self) -> list[Form]:
        with session_scope(self._factory) as session:
            records = session.scalars(
                select(FormRecord).order_by(FormRecord.created_at.desc())
            ).all()
            return [Form.model_validate(r.payload) for r in records]

    def save(self, form: Form) -> Form:
        with session_scope(self._factory) as session:
            record = session.get(FormRecord, form.id) if form.id else None
            if form.id and record is None:
                raise NotFound("Form", form.id)
            existing = Form.model_validate(record.payload) if record else None
            saved = prepare_for_save(form, existing)
            if record is None:
                record = FormRecord(id=saved.id)
                session.add(record)
            record.title = saved.title
            record.is_published = saved.is_published
            record.payload = saved.to_dict()
            record.created_at = saved.created_at
            record.updated_at = saved.updated_at
        logger.debug(f"Saved form {saved.id} ({len(saved.questions)} questions)")
        return saved

    def delete(self, form_id: str) -> None:
        with session_scope(self._factory) as session:
            record = session.get(FormRecord, form_id)
            if record is None:
                raise NotFound("Form", form_id)
            session.delete(record)
        logger.info(f"Deleted form {form_id}")

    def ping(self) -> None:
        check_database(self._factory)


class SqlResponseRepository:
    """Responses stored in the ``responses`` table."""

    def __init__(self, session_factory: sessionmaker[Session] | None = None):
        self._factory = session_factory or get_session_factory()

    def add(self, response: Response) -> Response:
        if response.id is None:
            response = response.model_copy(update={"id": str(uuid4())})
        with session_scope(self._factory) as session:
            session.add(
                ResponseRecord(
                    id=response.id,
                    form_id=response.form_id,
                    payload=response.to_dict(),
                    submitted_at=response.submitted_at,
                )
            )
        return response

    def list_for_form(self, form_id: str) -> list[Response]:
        with session_scope(self._factory) as session:
            records = session.scalars(
                select(ResponseRecord)
                .where(ResponseRecord.form_id == form_id)
                .order_by(ResponseRecord.seq)
            ).all()
            return [Response.model_validate(r.payload) for r in records]
