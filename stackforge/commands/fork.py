"""``stackforge fork``: clone an existing repository and make it your own.

The pure helpers (URL validation, README and ``package.json`` rewriting,
install-command detection) are separate from :func:`run_fork`, which only
sequences them around the git commands.  Every customization step after the
clone is best-effort: a failure is reported as a warning and the fork
continues.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import re
import shutil
from pathlib import Path
from typing import Any

from rich.panel import Panel

from stackforge import catalog
from stackforge.config import AppSettings
from stackforge.scaffolder.licenses import render_license
from stackforge.scaffolder.options import NAME_PATTERN, sanitize_package_name
from stackforge.utils import (
    console,
    create_progress,
    print_error,
    print_success,
    print_warning,
    write_text_atomic,
)

from .create import report_step, validate_project_name
from .prompts import Asker, RichAsker
from .steps import CommandError, install_dependencies, open_in_editor, run_checked

logger = logging.getLogger(__name__)

HTTP_URL_PATTERN = re.compile(r"^https?://[\w.-]+\.[A-Za-z]{2,}(?::\d+)?(/[\w.~-]+)+/?$")
SSH_URL_PATTERN = re.compile(r"^git@[\w.-]+:[\w./-]+\.git$")
SHORTHAND_PATTERN = re.compile(r"^[\w-]+/[\w.-]+$")
TITLE_PATTERN = re.compile(r"^#\s+\S")

LICENSE_FILES = ("LICENSE", "LICENSE.md", "LICENSE.txt", "LICENCE")
DEFAULT_FORK_NAME = "forked-project"
FORK_COMMIT_MESSAGE = "Initial commit - forked and customized with stackforge"

URL_EXAMPLES = (
    "https://github.com/user/repo",
    "git@github.com:user/repo.git",
    "user/repo (GitHub shorthand)",
)


class ForkError(Exception):
    """Raised when the source repository cannot be cloned."""

    def __init__(self, message: str, url: str = "", stderr: str = ""):
        self.url = url
        self.stderr = stderr
        super().__init__(message)


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------


def validate_repo_url(url: str) -> bool:
    return bool(
        HTTP_URL_PATTERN.match(url)
        or SSH_URL_PATTERN.match(url)
        or SHORTHAND_PATTERN.match(url)
    )


def normalize_repo_url(url: str) -> str:
    """Expand ``owner/repo`` shorthand to a GitHub HTTPS clone URL."""
    if SHORTHAND_PATTERN.match(url):
        return f"https://github.com/{url}.git"
    return url


def repo_name_from_url(url: str) -> str:
    """Return the repository name (last path segment without ``.git``)."""
    match = re.search(r"[/:]([^/:]+?)(?:\.git)?/?$", url)
    if not match:
        return DEFAULT_FORK_NAME
    name = match.group(1)
    return name if NAME_PATTERN.match(name) else sanitize_package_name(name)


def _is_paragraph(line: str) -> bool:
    stripped = line.lstrip()
    return bool(stripped) and not stripped.startswith(("#", ">", "!", "[", "<", "```", "-", "*", "|"))


def rewrite_readme(content: str, name: str, source_url: str, description: str = "") -> str:
    """Retitle a README, add a fork notice under the title, and set the description.

    The first ``# `` heading becomes ``# <name>``; when *description* is given
    it replaces the first plain paragraph after the title (or is inserted if
    there is none).  A README without a title gets one prepended.
    """
    notice = f"> Forked from [{source_url}]({source_url}) using stackforge"
    lines = content.splitlines()
    title_index = next((i for i, line in enumerate(lines) if TITLE_PATTERN.match(line)), None)

    if title_index is None:
        before: list[str] = []
        rest = lines
    else:
        before = lines[:title_index]
        rest = lines[title_index + 1:]

    rest = _drop_leading_blanks(rest)
    if description and rest and _is_paragraph(rest[0]):
        end = 0
        while end < len(rest) and rest[end].strip():
            end += 1
        rest = _drop_leading_blanks(rest[end:])

    head = [f"# {name}", "", notice, ""]
    if description:
        head += [description, ""]
    return "\n".join(before + head + rest).rstrip("\n") + "\n"


def _drop_leading_blanks(lines: list[str]) -> list[str]:
    index = 0
    while index < len(lines) and not lines[index].strip():
        index += 1
    return lines[index:]


def rewrite_package_json(data: dict[str, Any], name: str, description: str = "") -> dict[str, Any]:
    """Return a copy of *data* re-identified for the fork.

    Sets ``name`` (sanitized), resets ``version`` to ``1.0.0``, replaces the
    description when one is given, and drops ``repository``.  Raises
    ``ValueError`` when the top level of the manifest is not an object.
    """
    if not isinstance(data, dict):
        raise ValueError(f"package.json must contain an object, got {type(data).__name__}")
    updated = dict(data)
    updated["name"] = sanitize_package_name(name)
    updated["version"] = "1.0.0"
    if description:
        updated["description"] = description
    updated.pop("repository", None)
    updated.setdefault("author", "")
    return updated


def detect_install_command(path: Path) -> tuple[str, ...] | None:
    """Pick npm, yarn or pnpm from the lock file; ``None`` without ``package.json``."""
    if not (path / "package.json").is_file():
        return None
    if (path / "yarn.lock").exists():
        return ("yarn",)
    if (path / "pnpm-lock.yaml").exists():
        return ("pnpm", "install")
    return ("npm", "install")


def replace_license(path: Path, license_id: str, holder: str | None = None) -> str | None:
    """Delete every existing license file and write the new one.

    Returns the new file name, or ``None`` when *license_id* is ``"none"``.
    """
    for filename in LICENSE_FILES:
        (path / filename).unlink(missing_ok=True)
    if license_id == "none":
        return None
    write_text_atomic(path / "LICENSE", render_license(license_id, holder=holder))
    return "LICENSE"


# ---------------------------------------------------------------------------
# Git operations
# ---------------------------------------------------------------------------


async def clone_repository(url: str, target: Path) -> None:
    try:
        await run_checked("git", "clone", url, str(target))
    except CommandError as exc:
        raise ForkError(f"Failed to clone {url}", url=url, stderr=exc.stderr) from exc


async def reset_history(target: Path) -> None:
    await asyncio.to_thread(shutil.rmtree, target / ".git")
    await run_checked("git", "init", cwd=target)


async def commit_all(target: Path, message: str = FORK_COMMIT_MESSAGE) -> None:
    await run_checked("git", "add", ".", cwd=target)
    await run_checked("git", "commit", "-m", message, cwd=target)


# ---------------------------------------------------------------------------
# Command entry point
# ---------------------------------------------------------------------------


def _resolve_answers(args: argparse.Namespace, default_name: str, asker: Asker | None) -> dict[str, Any]:
    answers: dict[str, Any] = {
        "name": args.name,
        "clean": args.clean,
        "description": args.description,
        "license": args.license,
        "update_readme": not args.no_readme,
        "update_manifest": not args.no_manifest,
        "install": args.install,
        "open": args.open,
    }
    if asker is None:
        answers["name"] = answers["name"] or default_name
        answers["clean"] = bool(answers["clean"])
        answers["description"] = answers["description"] or ""
        answers["license"] = answers["license"] or "keep"
        answers["install"] = bool(answers["install"])
        answers["open"] = bool(answers["open"])
        return answers

    if answers["name"] is None:
        answers["name"] = asker.text("New project name", default=default_name, validate=validate_project_name)
    if answers["clean"] is None:
        answers["clean"] = asker.confirm("Remove git history and start fresh?", default=False)
    if answers["description"] is None:
        answers["description"] = asker.text("Project description (optional)", default="")
    if answers["license"] is None:
        answers["license"] = asker.choice("Update license", ["keep", *catalog.license_ids()], default="keep")
    if answers["install"] is None:
        answers["install"] = asker.confirm("Install dependencies after forking?", default=True)
    if answers["open"] is None:
        answers["open"] = asker.confirm("Open the project in your editor?", default=False)
    return answers


async def run_fork(
    args: argparse.Namespace,
    settings: AppSettings,
    asker: Asker | None = None,
    cwd: Path | None = None,
) -> int:
    repo_url = args.repo_url
    if not validate_repo_url(repo_url):
        print_error(f"Invalid repository URL: {repo_url}")
        console.print("[dim]Examples:[/dim]")
        for example in URL_EXAMPLES:
            console.print(f"[dim]  - {example}[/dim]")
        return 1

    full_url = normalize_repo_url(repo_url)
    interactive = not args.yes
    if interactive and asker is None:
        asker = RichAsker()
    answers = _resolve_answers(args, repo_name_from_url(full_url), asker if interactive else None)

    name = answers["name"]
    if validate_project_name(name):
        print_error(validate_project_name(name))
        return 1

    target = (cwd or Path.cwd()) / name
    if target.exists():
        if not interactive:
            print_error(f"Directory {target} already exists")
            return 1
        if not asker.confirm(f"Directory {name} already exists. Overwrite?", default=False):
            print_warning("Fork cancelled")
            return 0
        await asyncio.to_thread(shutil.rmtree, target)

    try:
        with create_progress() as progress:
            progress.add_task(f"Forking repository from {full_url} (this may take a minute)...", total=None)
            await clone_repository(full_url, target)
    except ForkError as exc:
        print_error(str(exc))
        if exc.stderr:
            console.print(f"[dim]{exc.stderr}[/dim]")
        return 1
    print_success("Repository cloned successfully")

    await _customize(target, full_url, answers, settings)

    console.print(
        Panel(
            "\n".join(
                [
                    "[bold green]Repository forked successfully![/bold green]",
                    "",
                    f"[cyan]Location:[/cyan] {target}",
                    "[cyan]Get started:[/cyan]",
                    f"  cd {name}",
                    *(f"  {cmd}" for cmd in _run_hint(target)),
                ]
            ),
            border_style="green",
        )
    )
    return 0


async def _customize(target: Path, full_url: str, answers: dict[str, Any], settings: AppSettings) -> None:
    name = answers["name"]
    description = answers["description"]

    if answers["clean"]:
        try:
            await reset_history(target)
            print_success("Git history cleaned")
        except (CommandError, OSError) as exc:
            logger.debug("reset history failed: %s", exc)
            print_warning("Failed to clean git history")

    readme = target / "README.md"
    if answers["update_readme"] and readme.is_file():
        try:
            content = await asyncio.to_thread(readme.read_text, encoding="utf-8")
            await asyncio.to_thread(
                write_text_atomic, readme, rewrite_readme(content, name, full_url, description)
            )
            print_success("README updated")
        except (OSError, UnicodeDecodeError) as exc:
            logger.debug("README rewrite failed: %s", exc)
            print_warning("Failed to update README")

    package_json = target / "package.json"
    if answers["update_manifest"] and package_json.is_file():
        try:
            data = json.loads(await asyncio.to_thread(package_json.read_text, encoding="utf-8"))
            updated = rewrite_package_json(data, name, description)
            await asyncio.to_thread(write_text_atomic, package_json, json.dumps(updated, indent=2) + "\n")
            print_success("package.json updated")
        except (OSError, ValueError) as exc:
            logger.debug("package.json rewrite failed: %s", exc)
            print_warning("Failed to update package.json")

    if answers["license"] != "keep":
        try:
            await asyncio.to_thread(replace_license, target, answers["license"], settings.git_author or None)
            print_success("License updated")
        except OSError as exc:
            logger.debug("license replacement failed: %s", exc)
            print_warning("Failed to update license")

    if answers["clean"]:
        try:
            await commit_all(target)
            print_success("Initial commit created")
        except CommandError as exc:
            logger.debug("commit failed: %s", exc)
            print_warning("Failed to create initial commit")

    if answers["install"]:
        command = detect_install_command(target)
        if command is not None:
            report_step(await install_dependencies(target, command))

    if answers["open"]:
        report_step(await open_in_editor(target, settings.editor_command))


def _run_hint(target: Path) -> list[str]:
    if (target / "package.json").exists():
        return ["npm run dev"]
    if (target / "Cargo.toml").exists():
        return ["cargo run"]
    if (target / "go.mod").exists():
        return ["go run ."]
    if (target / "pyproject.toml").exists() or (target / "requirements.txt").exists():
        return ["python main.py"]
    return []
