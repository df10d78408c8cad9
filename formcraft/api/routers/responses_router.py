"""
Responses router.

Endpoints for:
- Submitting a response to a published form
- Listing a form's responses in submission order
- CSV export
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response as HttpResponse
from pydantic import AliasChoices, BaseModel, Field

from formcraft.api.dependencies import get_form_service
from formcraft.core.export import export_filename
from formcraft.services import FormService

router = APIRouter()


class SubmitResponseRequest(BaseModel):
    """Request model for a submission."""

    form_id: str = Field(..., validation_alias=AliasChoices("formId", "form_id"))
    answers: List[Dict[str, Any]] = Field(default_factory=list)
    user_info: Optional[Dict[str, Any]] = Field(
        None, validation_alias=AliasChoices("userInfo", "user_info")
    )


@router.post("", status_code=201, summary="Submit response")
def submit_response(
    body: SubmitResponseRequest,
    request: Request,
    service: FormService = Depends(get_form_service),
) -> Dict[str, Any]:
    """
    Validate and store a submission.

    422 with per-question reasons when required answers are incomplete,
    403 when the form is a draft.
    """
    user_info = dict(body.user_info or {})
    if request.client is not None:
        user_info.setdefault("ip", request.client.host)
    response = service.submit_response(body.form_id, body.answers, user_info=user_info)
    return response.to_dict()


@router.get("/form/{form_id}", summary="List responses for a form")
def list_responses(form_id: str, service: FormService = Depends(get_form_service)) -> List[Dict[str, Any]]:
    service.form_by_id(form_id)
    return [response.to_dict() for response in service.responses_for_form(form_id)]


@router.get("/form/{form_id}/export", summary="Export responses as CSV")
def export_responses(form_id: str, service: FormService = Depends(get_form_service)) -> HttpResponse:
    form, payload = service.export_csv(form_id)
    return HttpResponse(
        content=payload,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{export_filename(form)}"'},
    )
