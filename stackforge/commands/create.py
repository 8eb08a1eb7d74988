"""``stackforge create``: interactive project creation.

Option values are merged with a fixed precedence: explicit command-line flag,
then the active profile, then the interactive prompt (whose default is the
option model's default).  With ``--yes`` nothing is prompted and missing
values take their defaults.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import shutil
import time
from collections.abc import Awaitable
from pathlib import Path
from typing import Any

from pydantic import ValidationError
from rich.panel import Panel

from stackforge import catalog
from stackforge.config import AppSettings
from stackforge.profiles import ProfileError, ProfileNotFoundError, ProfileStore
from stackforge.scaffolder import ProjectGenerator, ProjectOptions, synthesize_manifest
from stackforge.scaffolder.options import NAME_PATTERN
from stackforge.utils import (
    console,
    create_progress,
    format_duration,
    print_error,
    print_info,
    print_success,
    print_summary_table,
    print_warning,
)

from .prompts import Asker, RichAsker
from .steps import (
    StepResult,
    create_remote_repo,
    init_git,
    install_command_for,
    install_dependencies,
    open_in_editor,
)

logger = logging.getLogger(__name__)

DEFAULT_PROJECT_NAME = "my-awesome-project"
HOOK_LANGUAGES = ("javascript", "typescript", "python")


# ---------------------------------------------------------------------------
# Option resolution
# ---------------------------------------------------------------------------


def validate_project_name(value: str) -> str | None:
    if not NAME_PATTERN.match(value):
        return "Project name can only contain letters, numbers, hyphens, and underscores"
    return None


def validate_linters(value: str) -> str | None:
    unknown = [part.strip() for part in value.split(",") if part.strip() and part.strip() not in catalog.LINTERS]
    if unknown:
        return f"Unknown linter(s): {', '.join(unknown)}. Choose from: {', '.join(catalog.LINTERS)}"
    return None


def describe_validation_error(exc: ValidationError) -> str:
    """Flatten a pydantic error into one user-facing line per problem."""
    lines = []
    for error in exc.errors():
        message = str(error.get("msg", "")).removeprefix("Value error, ")
        field = ".".join(str(part) for part in error.get("loc", ()))
        lines.append(f"{field}: {message}" if field else message)
    return "\n".join(lines)


def load_active_profile(store: ProfileStore, name: str | None) -> tuple[dict[str, Any], str | None]:
    """Return ``(profile, profile_name)``.

    An explicitly named profile must exist (``ProfileNotFoundError``).  The
    default profile is loaded silently; if it is broken it is ignored with a
    warning log.
    """
    if name:
        return store.load(name), name
    try:
        default = store.get_default_profile()
    except ProfileError as exc:
        logger.warning("Ignoring default profile lookup: %s", exc)
        return {}, None
    if not default:
        return {}, None
    try:
        return store.load(default), default
    except ProfileError as exc:
        logger.warning("Ignoring default profile %s: %s", default, exc)
        return {}, None


def prompt_missing(values: dict[str, Any], asker: Asker) -> None:
    """Ask for every option that neither a flag nor the profile supplied."""
    if "name" not in values:
        values["name"] = asker.text("Project name", default=DEFAULT_PROJECT_NAME, validate=validate_project_name)
    if "language" not in values:
        values["language"] = asker.choice("Language", catalog.language_ids(), default="typescript")
    language = values["language"]
    if "framework" not in values:
        values["framework"] = asker.choice("Framework", catalog.framework_ids_for(language), default="none")
    if "license" not in values:
        values["license"] = asker.choice("License", catalog.license_ids(), default="mit")

    managers = [pm.id for pm in catalog.package_managers_for(language)]
    if "package_manager" not in values and len(managers) > 1:
        values["package_manager"] = asker.choice("Package manager", managers, default=managers[0])
    if "readme_style" not in values:
        values["readme_style"] = asker.choice("README template", catalog.README_STYLES, default="standard")
    if "linters" not in values and language in catalog.NODE_LANGUAGES:
        values["linters"] = asker.text(
            "Linters (comma-separated: eslint, prettier; blank for none)",
            default="",
            validate=validate_linters,
        )
    if "setup_vcs_hooks" not in values and language in HOOK_LANGUAGES:
        values["setup_vcs_hooks"] = asker.confirm("Set up git hooks (husky/pre-commit)?", default=True)
    if "init_vcs" not in values:
        values["init_vcs"] = asker.confirm("Initialize a git repository?", default=True)
    if "create_remote_repo" not in values and values["init_vcs"]:
        values["create_remote_repo"] = asker.confirm("Create a GitHub repository and push?", default=False)
    if "install_dependencies" not in values and managers:
        values["install_dependencies"] = asker.confirm("Install dependencies?", default=True)
    if "open_editor" not in values:
        values["open_editor"] = asker.confirm("Open the project in your editor?", default=False)


def resolve_options(
    flags: dict[str, Any],
    profile: dict[str, Any],
    asker: Asker | None = None,
) -> ProjectOptions:
    """Merge flags over profile values, prompt for the rest, and validate.

    Raises:
        pydantic.ValidationError: if the merged values are inconsistent.
    """
    values = {key: value for key, value in profile.items() if key in ProjectOptions.model_fields}
    values.update({key: value for key, value in flags.items() if value is not None})
    if asker is not None:
        prompt_missing(values, asker)
    values.setdefault("name", DEFAULT_PROJECT_NAME)
    return ProjectOptions(**values)


def flags_from_args(args: argparse.Namespace) -> dict[str, Any]:
    """Map parsed CLI flags to option fields (``None`` means "not given")."""
    return {
        "name": getattr(args, "name", None),
        "language": getattr(args, "language", None),
        "framework": getattr(args, "framework", None),
        "license": getattr(args, "license", None),
        "package_manager": getattr(args, "package_manager", None),
        "readme_style": getattr(args, "readme", None),
        "init_vcs": getattr(args, "git", None),
        "install_dependencies": getattr(args, "install", None),
        "open_editor": getattr(args, "open", None),
    }


# ---------------------------------------------------------------------------
# Scaffolding + post-generation steps
# ---------------------------------------------------------------------------


async def _with_spinner(description: str, step: Awaitable[StepResult]) -> StepResult:
    with create_progress() as progress:
        progress.add_task(description, total=None)
        return await step


def report_step(result: StepResult) -> None:
    if result.ok:
        print_success(result.message)
        return
    print_warning(result.message)
    if result.manual_instructions:
        console.print(f"[dim]{result.manual_instructions}[/dim]")


async def run_post_steps(options: ProjectOptions, target: Path, settings: AppSettings) -> list[StepResult]:
    results: list[StepResult] = []
    git_ok = False

    if options.init_vcs:
        result = await _with_spinner("Initializing git repository...", init_git(target))
        git_ok = result.ok
        results.append(result)

    if options.install_dependencies:
        command = install_command_for(options)
        if command is not None:
            results.append(
                await _with_spinner(
                    f"Installing dependencies with {options.package_manager}...",
                    install_dependencies(target, command),
                )
            )
        elif options.package_manager == "pip":
            print_info("Activate a virtualenv, then run: pip install -r requirements.txt")

    if options.create_remote_repo:
        if git_ok:
            results.append(
                await _with_spinner("Creating GitHub repository...", create_remote_repo(target, options.name))
            )
        else:
            results.append(
                StepResult(name="remote", ok=False, message="Skipped GitHub repository: git was not initialized")
            )

    if options.open_editor:
        results.append(await open_in_editor(target, settings.editor_command))

    for result in results:
        report_step(result)
    return results


def next_steps(options: ProjectOptions, target: Path) -> list[str]:
    steps = [f"cd {target}"]
    scripts = synthesize_manifest(options.language, options.framework, options.linters, options.name).scripts
    if options.is_node:
        pm = options.package_manager or "npm"
        runner = "npm run" if pm == "npm" else pm
        script = "dev" if "dev" in scripts else "start"
        steps.append(f"{runner} {script}")
    elif "start" in scripts:
        steps.append(scripts["start"])
    return steps


async def scaffold(options: ProjectOptions, target: Path, settings: AppSettings) -> list[StepResult]:
    """Generate *options* into *target*, then run the post-generation steps.

    ``GenerationError`` propagates to the CLI entry point.
    """
    started = time.monotonic()
    generator = ProjectGenerator(options, license_holder=settings.git_author or None)
    with create_progress() as progress:
        progress.add_task("Generating project files...", total=None)
        await generator.generate(target)
    print_success("Project files generated")

    results = await run_post_steps(options, target, settings)

    print_summary_table(
        {
            "Language": catalog.display_name(options.language),
            "Framework": catalog.framework_display_name(options.framework) if options.has_framework else "none",
            "License": options.license,
            "Package manager": options.package_manager or "-",
            "Elapsed": format_duration(time.monotonic() - started),
        },
        title=options.name,
    )
    console.print(
        Panel(
            "\n".join(
                [
                    "[bold green]Project created successfully![/bold green]",
                    "",
                    f"[cyan]Location:[/cyan] {target}",
                    "[cyan]Get started:[/cyan]",
                    *(f"  {step}" for step in next_steps(options, target)),
                ]
            ),
            border_style="green",
        )
    )
    return results


# ---------------------------------------------------------------------------
# Command entry point
# ---------------------------------------------------------------------------


async def run_create(
    args: argparse.Namespace,
    settings: AppSettings,
    store: ProfileStore,
    asker: Asker | None = None,
) -> int:
    interactive = not args.yes
    if interactive and asker is None:
        asker = RichAsker()

    try:
        profile, profile_name = load_active_profile(store, args.config)
    except ProfileNotFoundError as exc:
        print_warning(str(exc))
        console.print("[dim]Use `stackforge config list` to see available profiles.[/dim]")
        return 1
    if profile_name:
        print_info(f"Loaded profile: {profile_name}")

    try:
        options = resolve_options(flags_from_args(args), profile, asker if interactive else None)
    except ValidationError as exc:
        print_error(describe_validation_error(exc))
        return 1

    base = Path(args.path).expanduser().resolve() if args.path else Path.cwd()
    if base.exists() and not base.is_dir():
        print_error(f"{base} is not a directory")
        return 1
    target = base / options.name

    if target.exists():
        if not interactive:
            print_error(f"Directory {target} already exists")
            return 1
        if not asker.confirm(f"Directory {options.name} already exists. Overwrite?", default=False):
            print_warning("Project creation cancelled")
            return 0
        await asyncio.to_thread(shutil.rmtree, target)

    await scaffold(options, target, settings)
    return 0
