"""Pytest configuration and fixtures."""

import pytest
from fakes import StubFetchers, module_registry


@pytest.fixture
def fetchers():
    return StubFetchers()


@pytest.fixture
def component_registry():
    return module_registry("components")


@pytest.fixture
def shader_registry():
    return module_registry("shaders")
