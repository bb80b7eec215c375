"""
Pytest configuration and fixtures for the mealprep service tests.
"""

import os
from unittest.mock import MagicMock

import pytest

# Set test environment before importing mealprep modules
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["COMPLETION_API_KEY"] = "test-key"
os.environ.pop("IDENTITY_USERINFO_URL", None)

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import func, select  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from mealprep.app.main import (  # noqa: E402
    app,
    get_completion_client,
    get_identity_provider,
    get_profile_store,
)
from mealprep.app.settings import Settings  # noqa: E402
from mealprep.store.database import ProfileRow, build_engine, init_db  # noqa: E402
from mealprep.store.profile_store import ProfileStore  # noqa: E402
from mealprep.tools.completion_client import CompletionClient  # noqa: E402
from mealprep.tools.identity import HttpIdentityProvider  # noqa: E402

WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


def count_profiles(engine, user_id=None) -> int:
    stmt = select(func.count()).select_from(ProfileRow)
    if user_id is not None:
        stmt = stmt.where(ProfileRow.user_id == user_id)
    with engine.connect() as conn:
        return conn.execute(stmt).scalar_one()


def completion_response(content):
    """Shape of an OpenAI chat.completions response with a single choice."""
    return MagicMock(choices=[MagicMock(message=MagicMock(content=content))])


@pytest.fixture
def db_engine():
    """In-memory SQLite shared across sessions for one test."""
    engine = build_engine("sqlite://", poolclass=StaticPool)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def store(db_engine):
    return ProfileStore(sessionmaker(bind=db_engine, expire_on_commit=False))


@pytest.fixture
def mock_openai():
    """Mock OpenAI client for unit tests."""
    mock_client = MagicMock()
    mock_client.chat.completions.create.return_value = completion_response("{}")
    return mock_client


@pytest.fixture
def completion_settings():
    return Settings(completion_api_key="test-key", model_name="test-model")


@pytest.fixture
def completion_client(mock_openai, completion_settings):
    return CompletionClient(client=mock_openai, settings=completion_settings)


@pytest.fixture
def week_plan():
    """A well-formed 7-day plan with snacks."""
    return {
        day: {
            "Breakfast": f"{day} oats - 350 calories",
            "Lunch": f"{day} lentil bowl - 550 calories",
            "Dinner": f"{day} tofu stir fry - 650 calories",
            "Snacks": f"{day} hummus and carrots - 200 calories",
        }
        for day in WEEKDAYS
    }


@pytest.fixture
def identity_provider():
    """Identity provider with no userinfo endpoint: every lookup yields no session."""
    return HttpIdentityProvider(userinfo_url="")


@pytest.fixture
def client(store, completion_client, identity_provider):
    app.dependency_overrides[get_profile_store] = lambda: store
    app.dependency_overrides[get_completion_client] = lambda: completion_client
    app.dependency_overrides[get_identity_provider] = lambda: identity_provider
    yield TestClient(app)
    app.dependency_overrides.clear()
