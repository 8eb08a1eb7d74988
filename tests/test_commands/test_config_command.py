"""Tests for ``stackforge config`` actions."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any

import pytest

from stackforge.commands.config import (
    check_profile_values,
    parse_assignment,
    parse_assignments,
    run_config,
)
from stackforge.profiles import ProfileError, ProfileNotFoundError, ProfileStore


pytestmark = pytest.mark.unit


def _config_args(*params: str, **overrides: Any) -> argparse.Namespace:
    defaults = {
        "params": list(params),
        "name": None,
        "set": None,
        "file": None,
        "set_default": False,
        "set_profile": None,
        "yes": True,
    }
    return argparse.Namespace(**{**defaults, **overrides})


class TestAssignments:

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("language=go", ("language", "go")),
            ("init_vcs=false", ("init_vcs", False)),
            ('linters=["eslint"]', ("linters", ["eslint"])),
            ("editor=code --wait", ("editor", "code --wait")),
            ("empty=", ("empty", "")),
        ],
    )
    def test_parse_assignment(self, text: str, expected):
        assert parse_assignment(text) == expected

    @pytest.mark.parametrize("text", ["language", "=go"])
    def test_parse_assignment_rejects(self, text: str):
        with pytest.raises(ProfileError):
            parse_assignment(text)

    def test_parse_assignments(self):
        assert parse_assignments(None) == {}
        assert parse_assignments(["a=1", "b=x"]) == {"a": 1, "b": "x"}


class TestCheckProfileValues:

    def test_drops_name_and_normalizes(self):
        assert check_profile_values({"name": "x", "packageManager": "yarn"}) == {"package_manager": "yarn"}

    def test_unknown_key(self):
        with pytest.raises(ProfileError, match="favourite_colour"):
            check_profile_values({"favourite_colour": "blue"})


class TestProfileActions:

    def test_list_empty(self, store: ProfileStore):
        assert run_config(_config_args(), store) == 0

    def test_save_with_values(self, store: ProfileStore):
        args = _config_args("save", name="api", set=["language=python", "framework=fastapi"], set_default=True)
        assert run_config(args, store) == 0
        assert store.load("api") == {"language": "python", "framework": "fastapi"}
        assert store.get_default_profile() == "api"

    def test_save_alias(self, store: ProfileStore):
        assert run_config(_config_args("create", name="web", set=["language=javascript"]), store) == 0
        assert store.exists("web")

    def test_save_invalid_combination(self, store: ProfileStore):
        args = _config_args("save", name="bad", set=["language=go", "framework=react"])
        assert run_config(args, store) == 1
        assert not store.exists("bad")

    def test_save_interactive(self, store: ProfileStore, fake_asker):
        asker = fake_asker({"Language": "rust"})
        args = _config_args("save", name="rusty", yes=False)
        assert run_config(args, store, asker) == 0
        assert store.load("rusty")["language"] == "rust"

    def test_save_without_name(self, store: ProfileStore):
        with pytest.raises(ProfileError, match="needs a profile name"):
            run_config(_config_args("save", set=["language=go"]), store)

    def test_use_and_clear(self, store: ProfileStore):
        store.save("web", {})
        assert run_config(_config_args("use", name="web"), store) == 0
        assert store.get_default_profile() == "web"
        assert run_config(_config_args("use", name="none"), store) == 0
        assert store.get_default_profile() is None

    def test_set_profile_flag(self, store: ProfileStore):
        store.save("web", {})
        assert run_config(_config_args(set_profile="web"), store) == 0
        assert store.get_default_profile() == "web"

    def test_use_missing(self, store: ProfileStore):
        with pytest.raises(ProfileNotFoundError):
            run_config(_config_args("use", name="ghost"), store)

    def test_delete_non_interactive(self, store: ProfileStore):
        store.save("web", {})
        assert run_config(_config_args("rm", name="web"), store) == 0
        assert not store.exists("web")

    def test_delete_declined(self, store: ProfileStore, fake_asker):
        store.save("web", {})
        asker = fake_asker({"Delete profile": False})
        assert run_config(_config_args("delete", name="web", yes=False), store, asker) == 0
        assert store.exists("web")

    def test_unknown_action(self, store: ProfileStore):
        assert run_config(_config_args("frobnicate"), store) == 1

    def test_use_takes_positional_name(self, store: ProfileStore):
        store.save("web", {})
        assert run_config(_config_args("use", "web"), store) == 0
        assert store.get_default_profile() == "web"

    def test_too_many_params(self, store: ProfileStore):
        with pytest.raises(ProfileError, match="Too many arguments"):
            run_config(_config_args("get", "editor", "extra"), store)


class TestValues:

    def test_set_and_get_global(self, store: ProfileStore):
        assert run_config(_config_args("set", "editor=nvim"), store) == 0
        assert store.get_value("editor") == "nvim"
        assert run_config(_config_args("get", "editor"), store) == 0

    def test_get_unknown_key(self, store: ProfileStore):
        assert run_config(_config_args("get", "nope"), store) == 1

    def test_set_on_profile(self, store: ProfileStore):
        store.save("web", {"language": "typescript"})
        args = _config_args("set", name="web", set=["framework=react", "git=false"])
        assert run_config(args, store) == 0
        assert store.load("web") == {"language": "typescript", "framework": "react", "init_vcs": False}

    def test_set_on_profile_rejects_invalid(self, store: ProfileStore):
        store.save("web", {"language": "go"})
        assert run_config(_config_args("set", name="web", set=["framework=react"]), store) == 1
        assert store.load("web") == {"language": "go"}

    def test_set_and_get_on_profile_positional(self, store: ProfileStore, capsys):
        store.save("web", {"language": "go"})
        assert run_config(_config_args("set", "language=python", name="web"), store) == 0
        assert store.load("web") == {"language": "python"}
        capsys.readouterr()
        assert run_config(_config_args("get", "language", name="web"), store) == 0
        assert capsys.readouterr().out.strip() == '"python"'

    def test_set_nothing(self, store: ProfileStore):
        with pytest.raises(ProfileError, match="Nothing to set"):
            run_config(_config_args("set"), store)

    def test_show(self, store: ProfileStore):
        store.save("web", {"language": "go"})
        assert run_config(_config_args("show", name="web"), store) == 0
        assert run_config(_config_args("view"), store) == 0


class TestExportImport:

    def test_round_trip_through_file(self, tmp_path: Path, store: ProfileStore):
        store.save("api", {"language": "python", "framework": "django", "init_vcs": False})
        exported = tmp_path / "api.json"
        assert run_config(_config_args("export", name="api", file=str(exported)), store) == 0
        assert json.loads(exported.read_text(encoding="utf-8"))["framework"] == "django"

        assert run_config(_config_args("import", name="api-copy", file=str(exported)), store) == 0
        assert store.load("api-copy") == store.load("api")

    def test_import_invalid_json(self, tmp_path: Path, store: ProfileStore):
        path = tmp_path / "bad.json"
        path.write_text("{nope", encoding="utf-8")
        with pytest.raises(ProfileError, match="Invalid JSON format"):
            run_config(_config_args("import", name="bad", file=str(path)), store)

    def test_import_array(self, tmp_path: Path, store: ProfileStore):
        path = tmp_path / "bad.json"
        path.write_text("[]", encoding="utf-8")
        with pytest.raises(ProfileError, match="must be an object"):
            run_config(_config_args("import", name="bad", file=str(path)), store)

    def test_import_invalid_values(self, tmp_path: Path, store: ProfileStore):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"language": "cobol"}), encoding="utf-8")
        assert run_config(_config_args("import", name="bad", file=str(path)), store) == 1
        assert not store.exists("bad")

    def test_import_missing_file(self, tmp_path: Path, store: ProfileStore):
        with pytest.raises(ProfileError, match="Cannot read"):
            run_config(_config_args("import", name="x", file=str(tmp_path / "missing.json")), store)

    def test_stdout_export_keeps_long_values_on_one_line(self, tmp_path: Path, store: ProfileStore, capsys):
        description = "A service description that is long enough to overflow an eighty column console " * 2
        store.save("web", {"language": "go", "description": description})
        capsys.readouterr()
        assert run_config(_config_args("export", name="web"), store) == 0
        exported = capsys.readouterr().out
        assert json.loads(exported)["description"] == description

        path = tmp_path / "web.json"
        path.write_text(exported, encoding="utf-8")
        assert run_config(_config_args("import", name="web-copy", file=str(path)), store) == 0
        assert store.load("web-copy") == store.load("web")
