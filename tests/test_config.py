"""Unit tests for AppSettings (stackforge.config).

Tests cover:
- Defaults and derived paths (properties)
- from_env, including values stored in config.json
"""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from stackforge.config import DEFAULT_HOME, AppSettings


class TestAppSettings:
    @pytest.mark.unit
    def test_defaults(self):
        settings = AppSettings()
        assert settings.home == DEFAULT_HOME
        assert settings.editor_command == "code"
        assert settings.git_author == ""
        assert settings.verbose is False

    @pytest.mark.unit
    def test_derived_paths(self, tmp_path: Path):
        settings = AppSettings(home=tmp_path)
        assert settings.config_path == tmp_path / "config.json"
        assert settings.profiles_dir == tmp_path / "profiles"

    @pytest.mark.unit
    def test_from_env(self, tmp_path: Path):
        env = {
            "STACKFORGE_HOME": str(tmp_path / "home"),
            "STACKFORGE_EDITOR": "nvim",
            "STACKFORGE_GIT_AUTHOR": "Jane Doe",
        }
        with patch.dict("os.environ", env):
            settings = AppSettings.from_env()
        assert settings.home == tmp_path / "home"
        assert settings.editor_command == "nvim"
        assert settings.git_author == "Jane Doe"

    @pytest.mark.unit
    def test_from_env_defaults(self, tmp_path: Path):
        with patch.dict("os.environ", {"STACKFORGE_HOME": str(tmp_path)}, clear=True):
            settings = AppSettings.from_env()
        assert settings.editor_command == "code"
        assert settings.git_author == ""


class TestStoredSettings:
    @pytest.mark.unit
    def test_config_json_values(self, tmp_path: Path):
        (tmp_path / "config.json").write_text(
            json.dumps({"editor": "subl", "author": "ACME", "defaultProfile": "web"}), encoding="utf-8"
        )
        with patch.dict("os.environ", {"STACKFORGE_HOME": str(tmp_path)}, clear=True):
            settings = AppSettings.from_env()
        assert settings.editor_command == "subl"
        assert settings.git_author == "ACME"

    @pytest.mark.unit
    def test_environment_wins(self, tmp_path: Path):
        (tmp_path / "config.json").write_text(json.dumps({"editor": "subl"}), encoding="utf-8")
        env = {"STACKFORGE_HOME": str(tmp_path), "STACKFORGE_EDITOR": "vim"}
        with patch.dict("os.environ", env, clear=True):
            assert AppSettings.from_env().editor_command == "vim"

    @pytest.mark.unit
    def test_non_string_values_ignored(self, tmp_path: Path):
        (tmp_path / "config.json").write_text(json.dumps({"editor": 42}), encoding="utf-8")
        with patch.dict("os.environ", {"STACKFORGE_HOME": str(tmp_path)}, clear=True):
            assert AppSettings.from_env().editor_command == "code"

    @pytest.mark.unit
    def test_corrupt_config_is_ignored(self, tmp_path: Path):
        (tmp_path / "config.json").write_text("{broken", encoding="utf-8")
        with patch.dict("os.environ", {"STACKFORGE_HOME": str(tmp_path)}, clear=True):
            assert AppSettings.from_env().home == tmp_path
