"""
Shared pytest fixtures and configuration for the FileDrop test suite.

This module provides:
- Hypothesis configuration for property-based testing
- Shared fixtures for the registry, storage and transfer service
- A configured Flask application and test client
"""

import pytest

# Hypothesis configuration
from hypothesis import HealthCheck, Phase, settings

from filedrop.app_factory import create_app
from filedrop.application.transfer_service import TransferService
from filedrop.config.settings import BYTES_PER_MB, FileDropConfig
from filedrop.domain.file_transfer import InMemoryFileRegistry
from filedrop.infrastructure.local_file_storage_repository import LocalFileStorageRepository

# Register Hypothesis profiles
settings.register_profile(
    "default",
    max_examples=100,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow, HealthCheck.function_scoped_fixture],
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.target, Phase.shrink],
)
settings.register_profile(
    "ci",
    max_examples=200,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow, HealthCheck.function_scoped_fixture],
)
settings.register_profile(
    "dev",
    max_examples=10,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow, HealthCheck.function_scoped_fixture],
)
settings.load_profile("default")


TEST_API_KEY = "test-api-key-0123456789"


# =============================================================================
# Domain / Application Fixtures
# =============================================================================

@pytest.fixture
def registry():
    """Provide an empty in-memory registry."""
    return InMemoryFileRegistry()


@pytest.fixture
def storage(tmp_path):
    """Provide a local storage repository rooted in a temp directory."""
    return LocalFileStorageRepository(str(tmp_path / "uploads"))


@pytest.fixture
def transfer_service(registry, storage):
    """Provide a transfer service with a 10 MB ceiling."""
    return TransferService(
        registry,
        storage,
        max_file_size=10 * BYTES_PER_MB,
        base_url="http://files.example.com",
    )


# =============================================================================
# Flask Fixtures
# =============================================================================

@pytest.fixture
def app_config(tmp_path):
    """Provide a test configuration with authentication enabled."""
    return FileDropConfig(
        base_url="http://files.example.com",
        storage_path=str(tmp_path / "uploads"),
        max_file_size=10 * BYTES_PER_MB,
        api_key=TEST_API_KEY,
    )


@pytest.fixture
def flask_app(app_config):
    """Create Flask app for testing."""
    app = create_app(app_config)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(flask_app):
    """Create test client."""
    return flask_app.test_client()


@pytest.fixture
def auth_headers():
    """Provide valid upload credentials."""
    return {"Authorization": f"Bearer {TEST_API_KEY}"}


# =============================================================================
# Pytest Configuration Hooks
# =============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests (full Flask app, real filesystem)"
    )
    config.addinivalue_line(
        "markers", "property: Property-based tests using Hypothesis"
    )


def pytest_collection_modifyitems(config, items):
    """
    Automatically mark tests based on their location.

    - tests/unit/* -> @pytest.mark.unit
    - tests/integration/* -> @pytest.mark.integration
    - tests/property/* -> @pytest.mark.property
    """
    for item in items:
        test_path = str(item.fspath)

        if "/unit/" in test_path or "\\unit\\" in test_path:
            item.add_marker(pytest.mark.unit)
        elif "/integration/" in test_path or "\\integration\\" in test_path:
            item.add_marker(pytest.mark.integration)
        elif "/property/" in test_path or "\\property\\" in test_path:
            item.add_marker(pytest.mark.property)
