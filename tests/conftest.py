from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

import pytest

from tests._fixtures.workspace_builder import WorkspaceBuilder

FIXED_NOW = datetime(2026, 1, 15, 12, 30, 0, tzinfo=UTC)


@pytest.fixture
def workspace(tmp_path: Path) -> WorkspaceBuilder:
    """Provide a reusable workspace builder rooted at the pytest tmp_path."""
    return WorkspaceBuilder(tmp_path)


@pytest.fixture
def fixed_clock():
    """Clock returning a fixed instant so generated pages are reproducible."""
    return lambda: FIXED_NOW
