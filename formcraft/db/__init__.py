"""
Storage backends for forms and responses.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from formcraft.db.json_store import JsonFormStore, JsonResponseStore
from formcraft.db.repository import (
    FormRepository,
    ResponseRepository,
    SqlFormRepository,
    SqlResponseRepository,
)

if TYPE_CHECKING:
    from config import Settings


def create_repositories(settings: "Settings | None" = None) -> tuple[FormRepository, ResponseRepository]:
    """Repositories for the configured ``storage_backend``."""
    if settings is None:
        from config import get_settings

        settings = get_settings()

    if settings.storage_backend == "json":
        return JsonFormStore(settings.data_dir), JsonResponseStore(settings.data_dir)

    from formcraft.db.database import create_db_engine, get_session_factory, init_db

    engine = create_db_engine(settings.database_url, echo=settings.log_level == "DEBUG")
    init_db(engine)
    factory = get_session_factory(engine)
    return SqlFormRepository(factory), SqlResponseRepository(factory)


__all__ = [
    "FormRepository",
    "ResponseRepository",
    "SqlFormRepository",
    "SqlResponseRepository",
    "JsonFormStore",
    "JsonResponseStore",
    "create_repositories",
]
