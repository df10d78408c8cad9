"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from formcraft.core.forms import Form  # noqa: E402
from formcraft.db.database import create_db_engine, get_session_factory, init_db  # noqa: E402
from formcraft.db.repository import SqlFormRepository, SqlResponseRepository  # noqa: E402
from formcraft.services import FormService  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (storage, API)")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        path = str(item.fspath)
        if "unit" in path:
            item.add_marker(pytest.mark.unit)
        elif "integration" in path:
            item.add_marker(pytest.mark.integration)
        elif "smoke" in path:
            item.add_marker(pytest.mark.smoke)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def sample_form_data():
    """Wire-format form covering the mapping-answer types."""
    return {
        "title": "Reading check",
        "description": "Week 3",
        "questions": [
            {
                "type": "multiple-choice",
                "prompt": "Pick a colour",
                "required": True,
                "options": [
                    {"text": "Red", "isCorrect": True},
                    {"text": "Blue", "isCorrect": False},
                ],
            },
            {
                "type": "cloze",
                "prompt": "Fill in",
                "required": True,
                "passage": "The ___ jumps over the ___ dog",
                "blanks": [{"text": "", "answer": "fox"}, {"text": "", "answer": "lazy"}],
            },
            {
                "type": "categorize",
                "prompt": "Sort the devices",
                "required": True,
                "categories": ["Physical", "Network"],
                "options": [
                    {"text": "Cable", "category": "Physical"},
                    {"text": "Router", "category": "Network"},
                ],
            },
            {
                "type": "text",
                "prompt": "Comments",
                "required": False,
            },
        ],
    }


@pytest.fixture
def sample_form(sample_form_data):
    """Draft form with an id, not stored anywhere."""
    return Form.model_validate({**sample_form_data, "id": "form-1"})


@pytest.fixture
def published_form(sample_form):
    sample_form.publish()
    return sample_form


@pytest.fixture
def sql_session_factory():
    """Session factory over a fresh in-memory SQLite database."""
    engine = create_db_engine("sqlite://")
    init_db(engine)
    yield get_session_factory(engine)
    engine.dispose()


@pytest.fixture
def sql_service(sql_session_factory):
    """FormService over in-memory SQL repositories (legacy policy)."""
    return FormService(
        SqlFormRepository(sql_session_factory),
        SqlResponseRepository(sql_session_factory),
        policy="legacy",
    )
