"""
FastAPI application for formcraft.

Provides REST API for:
- Form authoring (CRUD, question shortcuts, publishing)
- Question type registry
- Response submission, listing and CSV export
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from config import get_settings
from formcraft import __version__
from formcraft.api.dependencies import get_form_service
from formcraft.core.base_model import utcnow
from formcraft.core.errors import (
    FormNotPublished,
    MalformedQuestionShape,
    NotFound,
    QuestionIndexError,
    UnknownQuestionType,
    ValidationFailed,
)
from formcraft.logging_setup import configure_logging
from formcraft.services import FormService

settings = get_settings()


def _check_storage_health(service: FormService) -> tuple[str, str | None]:
    """
    Check the configured storage backend.

    Returns:
        Tuple of (status, error_message). Status is "ok" or "error".
    """
    try:
        service.check_storage()
        return "ok", None
    except (SQLAlchemyError, OSError) as e:
        return "error", str(e)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    # Startup
    configure_logging(settings)
    logger.info("Starting formcraft service...")
    app.dependency_overrides.get(get_form_service, get_form_service)()
    logger.info(
        f"Storage: {settings.storage_backend}, validation policy: {settings.validation_policy}"
    )

    yield

    # Shutdown
    logger.info("Shutting down formcraft service...")


app = FastAPI(
    title="Formcraft",
    description="""
    Form builder service.

    ## Features

    - **Authoring**: Forms with ordered, typed questions (choice, text, rating,
      date, file upload, ranking, matrix, categorize, cloze, comprehension)
    - **Registry**: Field contract of every question type
    - **Responses**: Required-answer validation at submit time
    - **Export**: Responses as CSV
    """,
    version=__version__,
    lifespan=lifespan,
)

# CORS middleware for local development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Restrict in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ========================================
# Error mapping
# ========================================


def _error(status_code: int, message: str, **extra: Any) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": message, **extra})


@app.exception_handler(NotFound)
async def not_found_handler(request: Request, exc: NotFound) -> JSONResponse:
    return _error(404, str(exc))


@app.exception_handler(UnknownQuestionType)
async def unknown_type_handler(request: Request, exc: UnknownQuestionType) -> JSONResponse:
    return _error(400, str(exc))


@app.exception_handler(MalformedQuestionShape)
async def malformed_shape_handler(request: Request, exc: MalformedQuestionShape) -> JSONResponse:
    return _error(400, str(exc), problems=exc.problems)


@app.exception_handler(QuestionIndexError)
async def question_index_handler(request: Request, exc: QuestionIndexError) -> JSONResponse:
    return _error(400, str(exc))


@app.exception_handler(ValidationError)
async def model_validation_handler(request: Request, exc: ValidationError) -> JSONResponse:
    problems = [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()]
    return _error(400, "Invalid form definition", problems=problems)


@app.exception_handler(FormNotPublished)
async def not_published_handler(request: Request, exc: FormNotPublished) -> JSONResponse:
    return _error(403, str(exc))


@app.exception_handler(ValidationFailed)
async def validation_failed_handler(request: Request, exc: ValidationFailed) -> JSONResponse:
    errors = {str(index): reason for index, reason in exc.reasons.items()}
    return _error(422, str(exc), errors=errors)


# ========================================
# Health & Status Endpoints
# ========================================


@app.get("/", tags=["Health"])
def root() -> dict[str, str]:
    """Root endpoint returning service info."""
    return {
        "service": "formcraft",
        "version": __version__,
        "status": "ok",
    }


@app.get("/health", tags=["Health"])
def health_check(service: FormService = Depends(get_form_service)) -> dict[str, Any]:
    """Health check with a storage round-trip."""
    storage_status, storage_error = _check_storage_health(service)

    result: dict[str, Any] = {
        "status": "healthy" if storage_status == "ok" else "unhealthy",
        "timestamp": utcnow().isoformat(),
        "components": {"storage": storage_status},
        "config": {
            "storage_backend": settings.storage_backend,
            "validation_policy": settings.validation_policy,
        },
    }
    if storage_error:
        result["errors"] = {"storage": storage_error}
    return result


# ========================================
# Import and mount routers
# ========================================

from formcraft.api.routers import (  # noqa: E402
    forms_router,
    question_types_router,
    responses_router,
)

app.include_router(forms_router.router, prefix="/api/forms", tags=["Forms"])
app.include_router(question_types_router.router, prefix="/api/question-types", tags=["Question Types"])
app.include_router(responses_router.router, prefix="/api/responses", tags=["Responses"])
