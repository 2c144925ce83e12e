"""Shared pytest fixtures."""

from __future__ import annotations

import pytest

_ENV_VARS = (
    "MARKEDTEXT_OPEN_MARKER",
    "MARKEDTEXT_CLOSE_MARKER",
    "MARKEDTEXT_POINT_MARKER",
    "MARKEDTEXT_OFFSET_ENCODING",
    "MARKEDTEXT_INDICATE_CURSORS",
    "MARKEDTEXT_DEBUG_LOGGING",
    "MARKEDTEXT_LOG_DIR",
)


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def settings_path(tmp_path):
    return tmp_path / "settings.json"
