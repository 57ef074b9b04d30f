"""Shared fixtures for promptlab tests."""

from __future__ import annotations

import pytest

from promptlab.core.models import PromptMetaInput
from promptlab.version.version_control import PromptRepository


@pytest.fixture
def data_root(tmp_path):
    """Empty data root inside the pytest temp directory."""
    return tmp_path / "promptlab"


@pytest.fixture
def repo(data_root):
    return PromptRepository(data_root)


@pytest.fixture
def meta_input():
    return PromptMetaInput(description="Greets the user", model="gpt-4o", temperature=0.3)
