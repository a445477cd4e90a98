"""
Global pytest configuration and fixtures.
"""
from typing import Dict

import pytest
from sqlalchemy.pool import StaticPool

from timebill.config import TimebillConfig, reload_config
from timebill.db import create_db_engine, get_session_factory, init_database


@pytest.fixture(scope="session")
def test_env_vars() -> Dict[str, str]:
    """Test environment variables for configuration."""
    return {
        "DATABASE_URL": "sqlite://",
        "SECRET_KEY": "test-secret-key",
        "BCRYPT_ROUNDS": "4",
        "FRONTEND_URL": "http://localhost:3000",
        "ENVIRONMENT": "testing",
        "DEBUG": "false",
        "LOG_LEVEL": "DEBUG",
        "INVOICE_PREFIX": "INV",
        "BUSINESS_NAME": "Test Consulting",
    }


@pytest.fixture
def mock_env(test_env_vars, monkeypatch):
    """Mock environment variables for testing."""
    for key, value in test_env_vars.items():
        monkeypatch.setenv(key, value)

    # Clear the global config to force reload with test values
    import timebill.config.settings
    timebill.config.settings._config = None

    yield test_env_vars

    timebill.config.settings._config = None


@pytest.fixture
def test_config(mock_env) -> TimebillConfig:
    """Test configuration instance."""
    return reload_config()


@pytest.fixture
def engine():
    """In-memory SQLite database shared by all sessions of one test."""
    engine = create_db_engine("sqlite://", echo=False, poolclass=StaticPool)
    init_database(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return get_session_factory(engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


# Pytest configuration for different test types
def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "slow: mark test as slow running")


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers based on location."""
    for item in items:
        path = str(item.fspath).replace("\\", "/")
        if "tests/unit/" in path:
            item.add_marker(pytest.mark.unit)
        elif "tests/integration/" in path:
            item.add_marker(pytest.mark.integration)
