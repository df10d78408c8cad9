"""
JSON file storage for forms and responses.

For offline/CLI use without a database. Layout under ``data_dir``:

    forms/{form_id}.json
    responses/{form_id}/{submitted_at_us}-{seq}-{response_id}.json

Response file names sort in submission order.
"""

from __future__ import annotations

import json
from pathlib import Path
from uuid import uuid4

from loguru import logger
from pydantic import ValidationError

from formcraft.core.errors import NotFound
from formcraft.core.forms import Form
from formcraft.core.responses import Response
from formcraft.db.repository import prepare_for_save


def _write_json(path: Path, data: dict) -> None:
    tmp = path.with_suffix(".tmp")
    with open(tmp, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
    tmp.replace(path)


class JsonFormStore:
    """Forms as one JSON file each."""

    def __init__(self, data_dir: Path):
        self.forms_dir = Path(data_dir) / "forms"
        self.forms_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, form_id: str) -> Path:
        return self.forms_dir / f"{form_id}.json"

    def get(self, form_id: str) -> Form:
        path = self._path(form_id)
        if not path.exists():
            raise NotFound("Form", form_id)
        with open(path, "r", encoding="utf-8") as f:
            return Form.model_validate(json.load(f))

    def list_all(self) -> list[Form]:
        forms = []
        for path in self.forms_dir.glob("*.json"):
            try:
                with open(path, "r", encoding="utf-8") as f:
                    forms.append(Form.model_validate(json.load(f)))
            except (json.JSONDecodeError, ValidationError) as e:
                logger.warning(f"Skipping unreadable form file {path.name}: {e}")
        forms.sort(key=lambda form: form.created_at, reverse=True)
        return forms

    def save(self, form: Form) -> Form:
        existing = self.get(form.id) if form.id else None
        saved = prepare_for_save(form, existing)
        _write_json(self._path(saved.id), saved.to_dict())
        logger.debug(f"Saved form {saved.id} to {self.forms_dir}")
        return saved

    def delete(self, form_id: str) -> None:
        path = self._path(form_id)
        if not path.exists():
            raise NotFound("Form", form_id)
        path.unlink()
        logger.info(f"Deleted form {form_id}")

    def ping(self) -> None:
        if not self.forms_dir.is_dir():
            raise FileNotFoundError(f"Forms directory missing: {self.forms_dir}")


class JsonResponseStore:
    """Responses as one JSON file each, grouped by form."""

    def __init__(self, data_dir: Path):
        self.responses_dir = Path(data_dir) / "responses"
        self.responses_dir.mkdir(parents=True, exist_ok=True)

    def add(self, response: Response) -> Response:
        if response.id is None:
            response = response.model_copy(update={"id": str(uuid4())})
        form_dir = self.responses_dir / response.form_id
        form_dir.mkdir(parents=True, exist_ok=True)
        stamp = int(response.submitted_at.timestamp() * 1_000_000)
        seq = sum(1 for _ in form_dir.glob("*.json"))
        _write_json(form_dir / f"{stamp:020d}-{seq:06d}-{response.id}.json", response.to_dict())
        return response

    def list_for_form(self, form_id: str) -> list[Response]:
        form_dir = self.responses_dir / form_id
        if not form_dir.exists():
            return []
        responses = []
        for path in sorted(form_dir.glob("*.json")):
            with open(path, "r", encoding="utf-8") as f:
                responses.append(Response.model_validate(json.load(f)))
        return responses
