"""Tests for the argparse front end and error handling in ``stackforge.cli``."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from stackforge.cli import build_parser, main
from stackforge.scaffolder import GenerationError


pytestmark = pytest.mark.unit


@pytest.fixture
def isolated_home(tmp_path: Path, monkeypatch) -> Path:
    home = tmp_path / "home"
    monkeypatch.setenv("STACKFORGE_HOME", str(home))
    monkeypatch.setenv("STACKFORGE_GIT_AUTHOR", "CLI Tester")
    return home


class TestParser:

    def test_create_defaults(self):
        args = build_parser().parse_args(["create", "demo"])
        assert args.command == "create"
        assert args.name == "demo"
        assert args.git is None
        assert args.install is None
        assert args.open is None
        assert args.yes is False

    def test_create_alias_and_flags(self):
        args = build_parser().parse_args(
            ["new", "demo", "-l", "go", "--no-git", "--install", "-o", "--readme", "minimal", "-y"]
        )
        assert args.command == "new"
        assert args.language == "go"
        assert args.git is False
        assert args.install is True
        assert args.open is True
        assert args.readme == "minimal"

    def test_invalid_language_rejected(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["create", "demo", "-l", "cobol"])

    def test_fork_flags(self):
        args = build_parser().parse_args(["fork", "user/repo", "-n", "mine", "--license", "keep", "--no-readme"])
        assert args.repo_url == "user/repo"
        assert args.name == "mine"
        assert args.license == "keep"
        assert args.no_readme is True
        assert args.clean is None

    def test_config_repeatable_set(self):
        args = build_parser().parse_args(["config", "save", "-n", "web", "-s", "language=go", "-s", "license=mit"])
        assert args.params == ["save"]
        assert args.set == ["language=go", "license=mit"]

    def test_config_key_after_name_option(self):
        args = build_parser().parse_args(["config", "get", "-n", "web", "language"])
        assert args.params == ["get", "language"]
        assert args.name == "web"

    def test_config_assignment_after_name_option(self):
        args = build_parser().parse_args(["config", "set", "-n", "web", "language=python"])
        assert args.params == ["set", "language=python"]

    def test_config_without_action(self):
        assert build_parser().parse_args(["config"]).params == []

    def test_list_alias(self):
        assert build_parser().parse_args(["ls"]).command == "ls"


class TestMain:

    def test_no_command(self):
        assert main([]) == 1

    def test_list(self):
        assert main(["list"]) == 0

    def test_create_end_to_end(self, tmp_path: Path, isolated_home: Path, mock_run_command):
        code = main(["create", "svc", "-l", "go", "--no-git", "--path", str(tmp_path), "-y"])
        assert code == 0
        assert (tmp_path / "svc" / "main.go").is_file()
        assert "CLI Tester" in (tmp_path / "svc" / "LICENSE").read_text(encoding="utf-8")

    def test_config_round_trip(self, isolated_home: Path):
        assert main(["config", "save", "-n", "web", "-s", "language=javascript", "--set-default"]) == 0
        assert json.loads((isolated_home / "config.json").read_text(encoding="utf-8")) == {"defaultProfile": "web"}
        assert main(["config", "get", "-n", "web", "language"]) == 0

    def test_config_set_on_named_profile(self, isolated_home: Path):
        assert main(["config", "save", "-n", "web", "-s", "language=javascript", "-y"]) == 0
        assert main(["config", "set", "-n", "web", "language=python"]) == 0
        profile = json.loads((isolated_home / "profiles" / "web.json").read_text(encoding="utf-8"))
        assert profile["language"] == "python"

    def test_config_export_to_stdout_imports_back(self, tmp_path: Path, isolated_home: Path, capsys):
        description = "x" * 95
        assert main(["config", "save", "-n", "web", "-s", "language=go", "-s", f"description={description}", "-y"]) == 0
        capsys.readouterr()
        assert main(["config", "export", "-n", "web"]) == 0
        exported = tmp_path / "web.json"
        exported.write_text(capsys.readouterr().out, encoding="utf-8")
        assert main(["config", "import", "-n", "web2", "--file", str(exported)]) == 0
        profile = json.loads((isolated_home / "profiles" / "web2.json").read_text(encoding="utf-8"))
        assert profile["description"] == description

    def test_corrupt_config_json_does_not_block_create(self, tmp_path: Path, isolated_home: Path, mock_run_command):
        isolated_home.mkdir(parents=True)
        (isolated_home / "config.json").write_text("{not json", encoding="utf-8")
        code = main(["create", "svc", "-l", "go", "--no-git", "--path", str(tmp_path), "-y"])
        assert code == 0
        assert (tmp_path / "svc" / "main.go").is_file()

    def test_profile_error_exits_1(self, isolated_home: Path):
        assert main(["config", "use", "-n", "ghost", "-y"]) == 1

    def test_generation_error_exits_1(self, isolated_home: Path):
        failing = AsyncMock(side_effect=GenerationError("disk full"))
        with patch("stackforge.cli.run_create", failing):
            assert main(["create", "demo", "-y"]) == 1

    def test_keyboard_interrupt(self, isolated_home: Path):
        with patch("stackforge.cli.run_list", side_effect=KeyboardInterrupt):
            assert main(["list"]) == 130
