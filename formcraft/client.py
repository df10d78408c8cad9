"""
Formcraft HTTP client.

Async client for the formcraft REST API, used by scripts and other
services that author forms or submit responses remotely.

Usage:
    async with FormsClient() as client:
        form = await client.create_form({"title": "Survey"})
        await client.add_question(form["id"], "rating")
        await client.publish(form["id"])
"""

from __future__ import annotations

from typing import Any

import httpx
from loguru import logger

from config import get_settings
from formcraft.core.errors import (
    FormcraftError,
    FormNotPublished,
    NotFound,
    ValidationFailed,
)


class FormsApiError(FormcraftError):
    """Raised for API errors without a more specific local exception."""

    def __init__(self, status_code: int, detail: Any):
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"HTTP {status_code}: {detail}")


class FormsClient:
    """
    HTTP client for the formcraft API.

    Error responses are mapped back onto the local exception taxonomy:
    404 -> NotFound, 403 -> FormNotPublished, 422 -> ValidationFailed,
    anything else -> FormsApiError. Connection failures and timeouts
    propagate as httpx errors.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = get_settings()
        self.base_url = base_url or settings.api_base_url
        self.timeout = timeout if timeout is not None else settings.api_timeout_seconds
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "FormsClient":
        await self._ensure_client()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def _request(
        self, method: str, path: str, form_id: str | None = None, **kwargs: Any
    ) -> httpx.Response:
        client = await self._ensure_client()
        response = await client.request(method, path, **kwargs)
        if response.is_success:
            return response

        try:
            body = response.json()
        except ValueError:
            body = {"detail": response.text}
        detail = body.get("detail", body) if isinstance(body, dict) else body
        logger.debug(f"{method} {path} -> {response.status_code}: {detail}")

        if response.status_code == 404:
            raise NotFound("Resource", path)
        if response.status_code == 403:
            raise FormNotPublished(form_id)
        if response.status_code == 422 and isinstance(body, dict) and "errors" in body:
            raise ValidationFailed({int(k): v for k, v in body["errors"].items()})
        raise FormsApiError(response.status_code, detail)

    # =========================================================================
    # Forms
    # =========================================================================

    async def list_forms(self) -> list[dict[str, Any]]:
        return (await self._request("GET", "/api/forms")).json()

    async def get_form(self, form_id: str) -> dict[str, Any]:
        return (await self._request("GET", f"/api/forms/{form_id}")).json()

    async def create_form(self, form: dict[str, Any]) -> dict[str, Any]:
        return (await self._request("POST", "/api/forms", json=form)).json()

    async def replace_form(self, form_id: str, form: dict[str, Any]) -> dict[str, Any]:
        return (await self._request("PUT", f"/api/forms/{form_id}", json=form)).json()

    async def delete_form(self, form_id: str) -> None:
        await self._request("DELETE", f"/api/forms/{form_id}")

    async def publish(self, form_id: str) -> dict[str, Any]:
        return (await self._request("POST", f"/api/forms/{form_id}/publish")).json()

    async def set_header_image(self, form_id: str, image_ref: str | None) -> dict[str, Any]:
        payload = {"imageRef": image_ref}
        return (await self._request("PUT", f"/api/forms/{form_id}/header-image", json=payload)).json()

    async def update_settings(self, form_id: str, changes: dict[str, Any]) -> dict[str, Any]:
        return (await self._request("PATCH", f"/api/forms/{form_id}/settings", json=changes)).json()

    async def lint(self, form_id: str) -> dict[int, list[str]]:
        data = (await self._request("GET", f"/api/forms/{form_id}/lint")).json()
        return {int(k): v for k, v in data["warnings"].items()}

    # =========================================================================
    # Questions
    # =========================================================================

    async def add_question(
        self, form_id: str, question_type: str, fields: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        """Append a question; returns ``{"index", "question", "form"}``."""
        payload = {"type": question_type, "fields": fields}
        return (await self._request("POST", f"/api/forms/{form_id}/questions", json=payload)).json()

    async def update_question(self, form_id: str, index: int, patch: dict[str, Any]) -> dict[str, Any]:
        return (await self._request("PATCH", f"/api/forms/{form_id}/questions/{index}", json=patch)).json()

    async def delete_question(self, form_id: str, index: int) -> dict[str, Any]:
        return (await self._request("DELETE", f"/api/forms/{form_id}/questions/{index}")).json()

    async def duplicate_question(self, form_id: str, index: int) -> dict[str, Any]:
        return (await self._request("POST", f"/api/forms/{form_id}/questions/{index}/duplicate")).json()

    async def move_question(self, form_id: str, from_index: int, to_index: int) -> dict[str, Any]:
        payload = {"from": from_index, "to": to_index}
        return (await self._request("POST", f"/api/forms/{form_id}/questions/move", json=payload)).json()

    async def set_question_image(self, form_id: str, index: int, image_ref: str | None) -> dict[str, Any]:
        payload = {"imageRef": image_ref}
        return (
            await self._request("PUT", f"/api/forms/{form_id}/questions/{index}/image", json=payload)
        ).json()

    async def question_types(self) -> list[dict[str, Any]]:
        return (await self._request("GET", "/api/question-types")).json()

    # =========================================================================
    # Responses
    # =========================================================================

    async def submit_response(
        self,
        form_id: str,
        answers: list[dict[str, Any]],
        user_info: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        payload = {"formId": form_id, "answers": answers, "userInfo": user_info}
        return (await self._request("POST", "/api/responses", form_id=form_id, json=payload)).json()

    async def list_responses(self, form_id: str) -> list[dict[str, Any]]:
        return (await self._request("GET", f"/api/responses/form/{form_id}")).json()

    async def export_csv(self, form_id: str) -> bytes:
        return (await self._request("GET", f"/api/responses/form/{form_id}/export")).content
