"""Shared pytest fixtures for the stackforge test suite.

Provides reusable fixtures for:
- Temporary project directories and an isolated stackforge home
- Profile stores backed by that home
- Scripted answers for interactive prompts
- Mock subprocess helpers
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from stackforge.config import AppSettings
from stackforge.profiles import ProfileStore
from stackforge.scaffolder.options import ProjectOptions
from stackforge.scaffolder.templates import TemplateRenderer


# ---------------------------------------------------------------------------
# Paths & Directories
# ---------------------------------------------------------------------------

@pytest.fixture
def tmp_project_dir(tmp_path: Path) -> Path:
    """Temporary directory for generated projects (auto-cleanup)."""
    project_dir = tmp_path / "test-project"
    project_dir.mkdir()
    yield project_dir


@pytest.fixture
def settings(tmp_path: Path) -> AppSettings:
    """Settings pointing at a throwaway stackforge home."""
    return AppSettings(home=tmp_path / "stackforge-home", git_author="Test Author")


@pytest.fixture
def store(settings: AppSettings) -> ProfileStore:
    return ProfileStore(settings)


@pytest.fixture
def renderer() -> TemplateRenderer:
    return TemplateRenderer()


@pytest.fixture
def ts_express_options() -> ProjectOptions:
    return ProjectOptions(
        name="my-api",
        language="typescript",
        framework="express",
        linters=("eslint", "prettier"),
        setup_vcs_hooks=True,
    )


# ---------------------------------------------------------------------------
# Scripted prompts
# ---------------------------------------------------------------------------

class FakeAsker:
    """Answers prompts from a dict keyed by a substring of the prompt text.

    Prompts without a matching key get their default.  Every prompt text is
    recorded in ``asked``.
    """

    def __init__(self, answers: dict[str, Any] | None = None) -> None:
        self.answers = answers or {}
        self.asked: list[str] = []

    def _lookup(self, message: str, default: Any) -> Any:
        self.asked.append(message)
        for key, value in self.answers.items():
            if key in message:
                return value
        return default

    def text(self, message: str, default: str = "", validate=None) -> str:
        return self._lookup(message, default)

    def choice(self, message: str, choices, default: str | None = None) -> str:
        answer = self._lookup(message, default)
        assert answer in choices, f"{answer!r} is not one of {list(choices)}"
        return answer

    def confirm(self, message: str, default: bool = False) -> bool:
        return self._lookup(message, default)


@pytest.fixture
def fake_asker():
    """Factory for :class:`FakeAsker` instances.

    Usage:
        def test_prompt(fake_asker):
            asker = fake_asker({"Language": "go"})
    """
    return FakeAsker


# ---------------------------------------------------------------------------
# CLI arguments
# ---------------------------------------------------------------------------

@pytest.fixture
def make_args():
    """Build an ``argparse.Namespace`` with every command flag defaulted.

    Usage:
        args = make_args(name="demo", language="go", yes=True)
    """
    defaults: dict[str, Any] = {
        "name": None,
        "language": None,
        "framework": None,
        "license": None,
        "package_manager": None,
        "readme": None,
        "git": None,
        "install": None,
        "open": None,
        "config": None,
        "path": None,
        "yes": False,
    }

    def factory(**overrides: Any) -> argparse.Namespace:
        return argparse.Namespace(**{**defaults, **overrides})

    return factory


# ---------------------------------------------------------------------------
# Mock Subprocess (generic)
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_subprocess():
    """Mock asyncio subprocess for testing command execution.

    Returns a factory that creates mock subprocess instances with configurable
    stdout, stderr, and return codes.

    Usage:
        def test_command(mock_subprocess):
            proc = mock_subprocess(stdout="output", returncode=0)
            with patch("asyncio.create_subprocess_exec", return_value=proc):
                ...
    """
    def factory(
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
    ) -> AsyncMock:
        mock_proc = AsyncMock()
        mock_proc.communicate = AsyncMock(
            return_value=(stdout.encode("utf-8"), stderr.encode("utf-8"))
        )
        mock_proc.returncode = returncode
        mock_proc.pid = 99999
        mock_proc.kill = MagicMock()
        mock_proc.wait = AsyncMock(return_value=returncode)
        return mock_proc

    return factory


@pytest.fixture
def mock_run_command():
    """Patch the command runner used by the post-generation steps.

    Every external command "succeeds" with empty output; inspect
    ``mock.call_args_list`` for the commands that were issued.
    """
    mock = AsyncMock(return_value=(0, "", ""))
    with patch("stackforge.commands.steps.run_command", mock):
        yield mock
