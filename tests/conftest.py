"""
Pytest configuration and fixtures.

Database tests run against an in-memory SQLite database shared through a
StaticPool and bound to SessionLocal via configure_database(). Inference is
replaced by tests.mocks.llm_mocks.FakeLLM.
"""

import pytest
from sqlalchemy.pool import StaticPool

from core.documents import FileSystemDocumentStore, TextExtractor
from database.database import configure_database
from database.models import Base
from tests.mocks.llm_mocks import FakeLLM


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "db: marks tests as requiring the database fixture"
    )


@pytest.fixture
def database():
    """Fresh in-memory schema per test."""
    engine = configure_database(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)


@pytest.fixture
def fake_llm():
    return FakeLLM()


@pytest.fixture
def document_store(tmp_path):
    return FileSystemDocumentStore(str(tmp_path / "uploads"))


@pytest.fixture
def text_extractor():
    return TextExtractor()
