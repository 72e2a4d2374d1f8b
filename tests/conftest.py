"""Fixtures for zeroide_cli tests."""

from __future__ import annotations

import asyncio
import os
from collections.abc import Generator
from datetime import datetime
from pathlib import Path

import pytest

from zeroide_cli.app import SessionStateMachine
from zeroide_cli.config import ConfigManager
from zeroide_cli.logging import reset_logging
from zeroide_cli.themes import ThemeRegistry

FIXED_TIME = datetime(2024, 1, 1, 9, 5)


class GatedResponder:
    """Response generator that waits until released by the test."""

    def __init__(self) -> None:
        self.calls: list[str] = []
        self.release = asyncio.Event()
        self.reply = "done"

    async def __call__(self, text: str) -> str:
        self.calls.append(text)
        await self.release.wait()
        return self.reply


async def instant_responder(text: str) -> str:
    return f"echo: {text}"


@pytest.fixture
def temp_home(tmp_path: Path) -> Path:
    """Create a temporary home directory."""
    home = tmp_path / "home"
    home.mkdir()
    return home


@pytest.fixture
def temp_config_dir(temp_home: Path) -> Path:
    """Create a temporary config directory under fake home."""
    config_dir = temp_home / ".config" / "zeroide"
    config_dir.mkdir(parents=True)
    return config_dir


@pytest.fixture
def temp_project_dir(tmp_path: Path) -> Path:
    """Create a temporary project directory."""
    project_dir = tmp_path / "project"
    project_dir.mkdir()
    return project_dir


@pytest.fixture
def config_manager(temp_config_dir: Path, temp_project_dir: Path) -> ConfigManager:
    """Create a ConfigManager with temp directories."""
    return ConfigManager(config_dir=temp_config_dir, project_dir=temp_project_dir)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Generator[None, None, None]:
    """Clean ZEROIDE_* environment variables and keep .env files out of reach."""
    saved_vars: dict[str, str] = {}
    for key in list(os.environ.keys()):
        if key.startswith("ZEROIDE_"):
            saved_vars[key] = os.environ.pop(key)
    monkeypatch.chdir(tmp_path)

    yield

    for key in list(os.environ.keys()):
        if key.startswith("ZEROIDE_"):
            del os.environ[key]
    for key, value in saved_vars.items():
        os.environ[key] = value


@pytest.fixture(autouse=True)
def _reset_logging() -> Generator[None, None, None]:
    """Undo TUI logging configuration between tests."""
    yield
    reset_logging()


@pytest.fixture
def registry() -> ThemeRegistry:
    """Registry with the built-in catalog and Default Dark active."""
    return ThemeRegistry()


@pytest.fixture
def session(registry: ThemeRegistry) -> SessionStateMachine:
    """Session with an instant responder and a fixed clock."""
    return SessionStateMachine(
        registry=registry,
        response_generator=instant_responder,
        clock=lambda: FIXED_TIME,
    )


@pytest.fixture
def gated() -> GatedResponder:
    return GatedResponder()


@pytest.fixture
def gated_session(registry: ThemeRegistry, gated: GatedResponder) -> SessionStateMachine:
    """Session whose responses complete only when the test releases them."""
    return SessionStateMachine(
        registry=registry,
        response_generator=gated,
        clock=lambda: FIXED_TIME,
    )
