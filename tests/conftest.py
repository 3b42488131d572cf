"""Shared pytest fixtures for keywire tests."""

import pytest

from keywire.registry import ContainerBuilder


@pytest.fixture()
def builder() -> ContainerBuilder:
    """Empty container builder."""
    return ContainerBuilder.create()
