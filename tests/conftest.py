"""Shared pytest fixtures for the OpenSCAD copilot backend tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from scad_backend.app.config.settings import Settings, get_settings
from scad_backend.app.schemas.llm import ConversationTurn, SessionContext


@pytest.fixture(autouse=True)
def isolated_llm_log(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Keep the prompt/response journal out of the source tree."""
    monkeypatch.setenv("LLM_LOG_PATH", str(tmp_path / "llm_responses.log"))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(LLM_LOG_PATH=str(tmp_path / "journal.log"))


@pytest.fixture
def context() -> SessionContext:
    return SessionContext(api_key="test-key")


@pytest.fixture
def long_history() -> list[ConversationTurn]:
    """Ten alternating turns; assistant turns carry a code snapshot."""
    turns = []
    for i in range(10):
        if i % 2 == 0:
            turns.append(ConversationTurn(role="user", content=f"turn-{i:02d}"))
        else:
            turns.append(ConversationTurn(role="assistant", content=f"turn-{i:02d}", code=f"cube({i});"))
    return turns
