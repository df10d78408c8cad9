"""
FastAPI dependencies.
"""

from __future__ import annotations

from functools import lru_cache

from config import get_settings
from formcraft.db import create_repositories
from formcraft.services import FormService


@lru_cache(maxsize=1)
def get_form_service() -> FormService:
    """Service over the configured storage backend."""
    settings = get_settings()
    forms, responses = create_repositories(settings)
    return FormService(forms, responses, policy=settings.validation_policy)
