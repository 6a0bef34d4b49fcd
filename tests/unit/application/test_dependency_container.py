"""
Unit tests for DependencyContainer.
"""

import pytest

from filedrop.application.dependency_container import DependencyContainer
from filedrop.config.settings import FileDropConfig


@pytest.fixture
def container():
    """Create a fresh DependencyContainer for each test."""
    return DependencyContainer()


class TestDependencyContainer:
    def test_resolves_registered_instance(self, container):
        config = FileDropConfig(api_key="k")
        container.register_singleton(FileDropConfig, config)

        assert container.is_registered(FileDropConfig)
        assert container.resolve(FileDropConfig) is config

    def test_later_registration_replaces_earlier(self, container):
        first = FileDropConfig(port=1)
        second = FileDropConfig(port=2)
        container.register_singleton(FileDropConfig, first)
        container.register_singleton(FileDropConfig, second)

        assert container.resolve(FileDropConfig) is second

    def test_unregistered_type(self, container):
        assert not container.is_registered(FileDropConfig)
        with pytest.raises(LookupError):
            container.resolve(FileDropConfig)
