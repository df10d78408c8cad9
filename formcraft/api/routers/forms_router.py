"""
Forms router.

Endpoints for:
- Form CRUD (create on POST, full replace on PUT)
- Publishing, header image and settings
- Question authoring shortcuts (add, patch, delete, duplicate, move, image)
- Authoring lint report
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends
from loguru import logger
from pydantic import AliasChoices, BaseModel, Field

from formcraft.api.dependencies import get_form_service
from formcraft.core.forms import Form
from formcraft.services import FormService

router = APIRouter()


# ========================================
# Request Models
# ========================================


class AddQuestionRequest(BaseModel):
    """Request model for appending a question."""

    type: str = Field(..., description="Question type tag, e.g. multiple-choice, cloze")
    fields: Optional[Dict[str, Any]] = Field(None, description="Initial field values")


class ImageRefRequest(BaseModel):
    """Request model for setting or clearing an image reference."""

    image_ref: Optional[str] = Field(
        None, validation_alias=AliasChoices("imageRef", "image_ref", "image")
    )


class MoveQuestionRequest(BaseModel):
    """Request model for reordering questions."""

    from_index: int = Field(..., ge=0, validation_alias=AliasChoices("from", "fromIndex"))
    to_index: int = Field(..., ge=0, validation_alias=AliasChoices("to", "toIndex"))


def _new_form(body: Dict[str, Any]) -> Form:
    data = {k: v for k, v in body.items() if k not in ("id", "_id")}
    return Form.model_validate(data)


# ========================================
# Form CRUD Endpoints
# ========================================


@router.get("", summary="List forms")
def list_forms(service: FormService = Depends(get_form_service)) -> List[Dict[str, Any]]:
    """All forms, newest first."""
    return [form.to_dict() for form in service.list_forms()]


@router.get("/{form_id}", summary="Get form")
def get_form(form_id: str, service: FormService = Depends(get_form_service)) -> Dict[str, Any]:
    return service.form_by_id(form_id).to_dict()


@router.post("", status_code=201, summary="Create form")
def create_form(
    body: Dict[str, Any] = Body(...),
    service: FormService = Depends(get_form_service),
) -> Dict[str, Any]:
    form = service.save_form(_new_form(body))
    logger.info(f"Created form {form.id}: {form.title}")
    return form.to_dict()


@router.put("/{form_id}", summary="Replace form")
def replace_form(
    form_id: str,
    body: Dict[str, Any] = Body(...),
    service: FormService = Depends(get_form_service),
) -> Dict[str, Any]:
    form = Form.model_validate(body)
    return service.save_form(form, form_id).to_dict()


@router.delete("/{form_id}", summary="Delete form")
def delete_form(form_id: str, service: FormService = Depends(get_form_service)) -> Dict[str, str]:
    service.delete_form(form_id)
    return {"message": "Form deleted successfully"}


@router.post("/{form_id}/publish", summary="Publish form")
def publish_form(form_id: str, service: FormService = Depends(get_form_service)) -> Dict[str, Any]:
    """Open a form for responses. Publishing twice is a no-op."""
    return service.publish(form_id).to_dict()


@router.put("/{form_id}/header-image", summary="Set header image")
def set_header_image(
    form_id: str,
    request: ImageRefRequest,
    service: FormService = Depends(get_form_service),
) -> Dict[str, Any]:
    """Store (or clear, with null) the header image reference."""
    return service.set_header_image(form_id, request.image_ref).to_dict()


@router.patch("/{form_id}/settings", summary="Update settings")
def update_settings(
    form_id: str,
    changes: Dict[str, Any] = Body(...),
    service: FormService = Depends(get_form_service),
) -> Dict[str, Any]:
    return service.update_settings(form_id, changes).to_dict()


@router.get("/{form_id}/lint", summary="Authoring warnings")
def lint_form(form_id: str, service: FormService = Depends(get_form_service)) -> Dict[str, Any]:
    report = service.form_by_id(form_id).lint()
    return {"warnings": {str(index): warnings for index, warnings in report.items()}}


# ========================================
# Question Endpoints
# ========================================


@router.post("/{form_id}/questions", status_code=201, summary="Add question")
def add_question(
    form_id: str,
    request: AddQuestionRequest,
    service: FormService = Depends(get_form_service),
) -> Dict[str, Any]:
    form, question = service.add_question(form_id, request.type, request.fields)
    return {"index": len(form.questions) - 1, "question": question.to_dict(), "form": form.to_dict()}


@router.patch("/{form_id}/questions/{index}", summary="Update question")
def update_question(
    form_id: str,
    index: int,
    patch: Dict[str, Any] = Body(...),
    service: FormService = Depends(get_form_service),
) -> Dict[str, Any]:
    return service.update_question(form_id, index, patch).to_dict()


@router.delete("/{form_id}/questions/{index}", summary="Delete question")
def delete_question(
    form_id: str,
    index: int,
    service: FormService = Depends(get_form_service),
) -> Dict[str, Any]:
    return service.delete_question(form_id, index).to_dict()


@router.post("/{form_id}/questions/{index}/duplicate", summary="Duplicate question")
def duplicate_question(
    form_id: str,
    index: int,
    service: FormService = Depends(get_form_service),
) -> Dict[str, Any]:
    return service.duplicate_question(form_id, index).to_dict()


@router.post("/{form_id}/questions/move", summary="Move question")
def move_question(
    form_id: str,
    request: MoveQuestionRequest,
    service: FormService = Depends(get_form_service),
) -> Dict[str, Any]:
    return service.move_question(form_id, request.from_index, request.to_index).to_dict()


@router.put("/{form_id}/questions/{index}/image", summary="Set question image")
def set_question_image(
    form_id: str,
    index: int,
    request: ImageRefRequest,
    service: FormService = Depends(get_form_service),
) -> Dict[str, Any]:
    return service.set_question_image(form_id, index, request.image_ref).to_dict()
