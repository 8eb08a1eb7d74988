"""Tests for ``stackforge fork``.

Covers:
- URL validation, shorthand expansion and repository name extraction
- README and package.json rewriting
- Lock-file based install detection and license replacement
- The full command with git mocked out
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, patch

import pytest

from stackforge.commands.fork import (
    FORK_COMMIT_MESSAGE,
    ForkError,
    clone_repository,
    detect_install_command,
    normalize_repo_url,
    replace_license,
    repo_name_from_url,
    rewrite_package_json,
    rewrite_readme,
    run_fork,
    validate_repo_url,
)


pytestmark = pytest.mark.unit


SAMPLE_README = """# upstream-project

A library that does upstream things.

## Install

npm install upstream-project
"""


def _fork_args(**overrides: Any) -> argparse.Namespace:
    defaults = {
        "repo_url": "octo/upstream",
        "name": None,
        "clean": None,
        "description": None,
        "license": None,
        "no_readme": False,
        "no_manifest": False,
        "install": None,
        "open": None,
        "yes": True,
    }
    return argparse.Namespace(**{**defaults, **overrides})


class TestUrls:

    @pytest.mark.parametrize(
        "url",
        [
            "https://github.com/user/repo",
            "https://github.com/user/repo.git",
            "http://gitlab.example.com/group/sub/repo",
            "git@github.com:user/repo.git",
            "user/repo",
            "some-org/my.repo",
        ],
    )
    def test_valid(self, url: str):
        assert validate_repo_url(url)

    @pytest.mark.parametrize("url", ["", "repo", "ftp://github.com/user/repo", "github.com/user/repo", "user/repo/extra"])
    def test_invalid(self, url: str):
        assert not validate_repo_url(url)

    def test_shorthand_expanded(self):
        assert normalize_repo_url("user/repo") == "https://github.com/user/repo.git"

    def test_full_urls_untouched(self):
        assert normalize_repo_url("git@github.com:user/repo.git") == "git@github.com:user/repo.git"

    @pytest.mark.parametrize(
        "url,expected",
        [
            ("https://github.com/user/repo.git", "repo"),
            ("https://github.com/user/repo/", "repo"),
            ("git@github.com:user/my-lib.git", "my-lib"),
            ("https://github.com/user/Some.Repo", "some-repo"),
        ],
    )
    def test_repo_name(self, url: str, expected: str):
        assert repo_name_from_url(url) == expected


class TestRewriteReadme:

    def test_title_notice_and_description(self):
        result = rewrite_readme(SAMPLE_README, "my-fork", "https://github.com/o/u.git", "My own take.")
        lines = result.splitlines()
        assert lines[0] == "# my-fork"
        assert lines[2] == "> Forked from [https://github.com/o/u.git](https://github.com/o/u.git) using stackforge"
        assert lines[4] == "My own take."
        assert "upstream things" not in result
        assert "## Install" in result

    def test_without_description_keeps_body(self):
        result = rewrite_readme(SAMPLE_README, "my-fork", "u")
        assert result.splitlines()[4] == "A library that does upstream things."

    def test_description_inserted_before_heading(self):
        readme = "# title\n\n## Usage\n\nrun it\n"
        result = rewrite_readme(readme, "fork", "u", "New description")
        assert result.splitlines()[4:7] == ["New description", "", "## Usage"]

    def test_readme_without_title(self):
        result = rewrite_readme("Just text.\n", "fork", "u")
        assert result.startswith("# fork\n\n> Forked from")
        assert result.endswith("Just text.\n")

    def test_content_before_title_kept(self):
        result = rewrite_readme("<!-- badge -->\n# title\nbody\n", "fork", "u")
        assert result.splitlines()[:2] == ["<!-- badge -->", "# fork"]


class TestRewritePackageJson:

    def test_fields(self):
        original = {
            "name": "upstream",
            "version": "3.2.1",
            "description": "old",
            "repository": {"type": "git", "url": "x"},
            "dependencies": {"lodash": "^4"},
        }
        updated = rewrite_package_json(original, "My_Fork", "new")
        assert updated["name"] == "my-fork"
        assert updated["version"] == "1.0.0"
        assert updated["description"] == "new"
        assert "repository" not in updated
        assert updated["dependencies"] == {"lodash": "^4"}
        assert original["name"] == "upstream"

    def test_description_kept_when_not_given(self):
        assert rewrite_package_json({"description": "old"}, "fork")["description"] == "old"

    def test_non_object_manifest_rejected(self):
        with pytest.raises(ValueError, match="must contain an object"):
            rewrite_package_json([], "fork")


class TestFilesystemHelpers:

    def test_detect_install_command(self, tmp_path: Path):
        assert detect_install_command(tmp_path) is None
        (tmp_path / "package.json").write_text("{}", encoding="utf-8")
        assert detect_install_command(tmp_path) == ("npm", "install")
        (tmp_path / "pnpm-lock.yaml").write_text("", encoding="utf-8")
        assert detect_install_command(tmp_path) == ("pnpm", "install")
        (tmp_path / "yarn.lock").write_text("", encoding="utf-8")
        assert detect_install_command(tmp_path) == ("yarn",)

    def test_replace_license(self, tmp_path: Path):
        (tmp_path / "LICENSE.md").write_text("old", encoding="utf-8")
        (tmp_path / "LICENCE").write_text("old", encoding="utf-8")
        assert replace_license(tmp_path, "mit", "Jane") == "LICENSE"
        assert sorted(p.name for p in tmp_path.iterdir()) == ["LICENSE"]
        assert "Jane" in (tmp_path / "LICENSE").read_text(encoding="utf-8")

    def test_replace_license_none(self, tmp_path: Path):
        (tmp_path / "LICENSE").write_text("old", encoding="utf-8")
        assert replace_license(tmp_path, "none") is None
        assert list(tmp_path.iterdir()) == []


class TestClone:

    async def test_clone_failure_raises_fork_error(self, tmp_path: Path, mock_run_command):
        mock_run_command.return_value = (128, "", "repository not found")
        with pytest.raises(ForkError) as exc_info:
            await clone_repository("https://github.com/a/b.git", tmp_path / "b")
        assert exc_info.value.url == "https://github.com/a/b.git"
        assert exc_info.value.stderr == "repository not found"


def _fake_git(upstream_files: dict[str, str]):
    """A run_command replacement whose ``git clone`` writes *upstream_files*."""

    async def fake(cmd, cwd=None, **kwargs):
        if cmd[:2] == ["git", "clone"]:
            target = Path(cmd[3])
            (target / ".git").mkdir(parents=True)
            for rel, content in upstream_files.items():
                (target / rel).write_text(content, encoding="utf-8")
        elif cmd[:2] == ["git", "init"]:
            (Path(cwd) / ".git").mkdir()
        return (0, "", "")

    return AsyncMock(side_effect=fake)


class TestRunFork:

    UPSTREAM = {
        "README.md": SAMPLE_README,
        "package.json": json.dumps({"name": "upstream", "version": "2.0.0", "repository": "x"}),
        "LICENSE": "upstream license",
        "yarn.lock": "",
    }

    async def test_invalid_url(self, tmp_path: Path, settings):
        assert await run_fork(_fork_args(repo_url="not a url"), settings, cwd=tmp_path) == 1

    async def test_full_fork(self, tmp_path: Path, settings):
        fake = _fake_git(self.UPSTREAM)
        args = _fork_args(name="mine", clean=True, description="Mine now", license="apache2", install=True)
        with patch("stackforge.commands.steps.run_command", fake):
            assert await run_fork(args, settings, cwd=tmp_path) == 0

        target = tmp_path / "mine"
        commands = [call.args[0] for call in fake.call_args_list]
        assert commands[0] == ["git", "clone", "https://github.com/octo/upstream.git", str(target)]
        assert ["git", "init"] in commands
        assert ["git", "commit", "-m", FORK_COMMIT_MESSAGE] in commands
        assert commands[-1] == ["yarn"]

        readme = (target / "README.md").read_text(encoding="utf-8")
        assert readme.startswith("# mine\n")
        assert "Mine now" in readme
        package = json.loads((target / "package.json").read_text(encoding="utf-8"))
        assert package["name"] == "mine"
        assert package["version"] == "1.0.0"
        assert "repository" not in package
        assert "Apache License" in (target / "LICENSE").read_text(encoding="utf-8")

    async def test_defaults_keep_history_and_files(self, tmp_path: Path, settings):
        fake = _fake_git(self.UPSTREAM)
        with patch("stackforge.commands.steps.run_command", fake):
            assert await run_fork(_fork_args(no_readme=True, no_manifest=True), settings, cwd=tmp_path) == 0

        target = tmp_path / "upstream"
        assert (target / "README.md").read_text(encoding="utf-8") == SAMPLE_README
        assert (target / "LICENSE").read_text(encoding="utf-8") == "upstream license"
        assert len(fake.call_args_list) == 1

    async def test_non_object_package_json_is_left_alone(self, tmp_path: Path, settings):
        fake = _fake_git({**self.UPSTREAM, "package.json": "[]"})
        with patch("stackforge.commands.steps.run_command", fake):
            assert await run_fork(_fork_args(no_readme=True), settings, cwd=tmp_path) == 0
        assert (tmp_path / "upstream" / "package.json").read_text(encoding="utf-8") == "[]"

    async def test_clone_failure(self, tmp_path: Path, settings, mock_run_command):
        mock_run_command.return_value = (128, "", "not found")
        assert await run_fork(_fork_args(), settings, cwd=tmp_path) == 1

    async def test_existing_target_non_interactive(self, tmp_path: Path, settings, mock_run_command):
        (tmp_path / "upstream").mkdir()
        assert await run_fork(_fork_args(), settings, cwd=tmp_path) == 1
        mock_run_command.assert_not_called()

    async def test_interactive_answers(self, tmp_path: Path, settings, fake_asker):
        fake = _fake_git(self.UPSTREAM)
        asker = fake_asker({"New project name": "renamed", "Install dependencies": False})
        with patch("stackforge.commands.steps.run_command", fake):
            assert await run_fork(_fork_args(yes=False), settings, asker, cwd=tmp_path) == 0
        assert (tmp_path / "renamed" / "README.md").read_text(encoding="utf-8").startswith("# renamed\n")
        assert len(fake.call_args_list) == 1
