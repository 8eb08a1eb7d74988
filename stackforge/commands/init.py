"""``stackforge init``: scaffold into the current directory."""

from __future__ import annotations

import argparse
import re
from pathlib import Path

from pydantic import ValidationError

from stackforge.config import AppSettings
from stackforge.profiles import ProfileStore
from stackforge.utils import console, print_error, print_info, print_warning

from .create import describe_validation_error, flags_from_args, load_active_profile, resolve_options, scaffold
from .prompts import Asker, RichAsker


def project_name_for(directory: Path) -> str:
    """Derive a valid project name from a directory name."""
    name = re.sub(r"[^A-Za-z0-9_-]+", "-", directory.name).strip("-")
    return name or "project"


def is_effectively_empty(directory: Path) -> bool:
    """``True`` if *directory* holds nothing but an optional ``.git``."""
    return all(entry.name == ".git" for entry in directory.iterdir())


async def run_init(
    args: argparse.Namespace,
    settings: AppSettings,
    store: ProfileStore,
    asker: Asker | None = None,
    cwd: Path | None = None,
) -> int:
    target = (cwd or Path.cwd()).resolve()
    interactive = not args.yes
    if interactive and asker is None:
        asker = RichAsker()

    if not is_effectively_empty(target):
        if interactive:
            if not asker.confirm("Current directory is not empty. Continue initialization?", default=False):
                print_warning("Initialization cancelled")
                return 0
        else:
            print_warning(f"{target} is not empty; existing files with generated names are replaced")

    print_info(f"Initializing project in: {target}")

    profile, profile_name = load_active_profile(store, None)
    if profile_name:
        print_info(f"Loaded default profile: {profile_name}")

    flags = flags_from_args(args)
    flags["name"] = project_name_for(target)
    try:
        options = resolve_options(flags, profile, asker if interactive else None)
    except ValidationError as exc:
        print_error(describe_validation_error(exc))
        return 1

    if (target / ".git").exists() and options.init_vcs:
        console.print("[dim]Existing .git found; the initial commit is added on top of it.[/dim]")

    await scaffold(options, target, settings)
    return 0
