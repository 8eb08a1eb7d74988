"""Post-generation steps: git init, dependency install, remote repo, editor.

Every step is best-effort.  Failures are caught here and reported as a
:class:`StepResult` with manual instructions; they never abort the run or
touch the generated files.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path

from stackforge import catalog
from stackforge.scaffolder.options import ProjectOptions
from stackforge.utils import format_command, run_command

logger = logging.getLogger(__name__)

INITIAL_COMMIT_MESSAGE = "Initial commit - project scaffolded with stackforge"


@dataclass
class StepResult:
    """Outcome of one post-generation step."""

    name: str
    ok: bool
    message: str = ""
    manual_instructions: str = ""


class CommandError(Exception):
    """Raised when an external command exits non-zero."""

    def __init__(self, message: str, command: str = "", stderr: str = ""):
        self.command = command
        self.stderr = stderr
        super().__init__(message)


async def run_checked(*cmd: str, cwd: str | Path | None = None, capture: bool = True) -> str:
    """Run *cmd* and return its stdout.

    With ``capture=False`` the child shares this terminal and the returned
    stdout is empty.

    Raises:
        CommandError: if the command is missing or exits non-zero.
    """
    cmd_str = format_command(list(cmd))
    logger.debug("Running %s (cwd=%s)", cmd_str, cwd)
    code, stdout, stderr = await run_command(list(cmd), cwd=cwd, capture=capture)
    if code != 0:
        raise CommandError(
            f"Command failed (exit {code}): {cmd_str}\n{stderr}".rstrip(),
            command=cmd_str,
            stderr=stderr,
        )
    return stdout


# ---------------------------------------------------------------------------
# Steps
# ---------------------------------------------------------------------------


async def init_git(path: Path, message: str = INITIAL_COMMIT_MESSAGE) -> StepResult:
    """``git init``, stage everything, and create the initial commit."""
    try:
        await run_checked("git", "init", cwd=path)
        await run_checked("git", "add", ".", cwd=path)
        await run_checked("git", "commit", "-m", message, cwd=path)
    except CommandError as exc:
        logger.debug("git step failed: %s", exc)
        return StepResult(
            name="git",
            ok=False,
            message="Could not initialize the git repository",
            manual_instructions=(
                f"cd {path}\n"
                "git init\n"
                "git add .\n"
                f'git commit -m "{message}"'
            ),
        )
    return StepResult(name="git", ok=True, message="Git repository initialized")


def install_command_for(options: ProjectOptions) -> tuple[str, ...] | None:
    """Return the install command for the project's package manager.

    Returns ``None`` for ``pip``; those projects are installed by hand into
    a virtualenv.
    """
    if not options.package_manager or options.package_manager == "pip":
        return None
    pm = catalog.get_package_manager(options.package_manager)
    if pm is None or not pm.install_command:
        return None
    return pm.install_command


async def install_dependencies(path: Path, command: tuple[str, ...] | list[str]) -> StepResult:
    cmd_str = format_command(list(command))
    try:
        await run_checked(*command, cwd=path)
    except CommandError as exc:
        logger.debug("install failed: %s", exc)
        return StepResult(
            name="install",
            ok=False,
            message=f"Failed to install dependencies with `{cmd_str}`",
            manual_instructions=f"cd {path}\n{cmd_str}",
        )
    return StepResult(name="install", ok=True, message="Dependencies installed")


def remote_repo_name(name: str) -> str:
    """Lowercase *name* and replace characters GitHub rejects with hyphens."""
    return re.sub(r"[^a-z0-9_-]", "-", name.lower())


async def create_remote_repo(path: Path, name: str) -> StepResult:
    """Create a public GitHub repository with ``gh`` and push the initial commit."""
    safe_name = remote_repo_name(name)
    try:
        await run_checked("gh", "--version")
        await run_checked("gh", "auth", "status", "-h", "github.com")
        await run_checked(
            "gh", "repo", "create", safe_name,
            "--public", f"--source={path}", "--remote=origin", "--push",
        )
    except CommandError as exc:
        logger.debug("remote repo step failed: %s", exc)
        return StepResult(
            name="remote",
            ok=False,
            message="Could not auto-create GitHub repository (gh not installed or not authenticated)",
            manual_instructions=(
                "1) Create a new repository on GitHub (no README/license)\n"
                "2) Run these commands:\n"
                f"   cd {path}\n"
                "   git remote add origin https://github.com/<your-user>/<repo>.git\n"
                "   git branch -M main\n"
                "   git push -u origin main"
            ),
        )
    return StepResult(name="remote", ok=True, message="GitHub repository created and pushed")


async def open_in_editor(path: Path, editor: str = "code") -> StepResult:
    try:
        await run_checked(editor, str(path), capture=False)
    except CommandError as exc:
        logger.debug("editor step failed: %s", exc)
        return StepResult(
            name="editor",
            ok=False,
            message=f"Could not open {editor}. Make sure it's installed and in PATH",
            manual_instructions=f"{editor} {path}",
        )
    return StepResult(name="editor", ok=True, message=f"Opened in {editor}")
