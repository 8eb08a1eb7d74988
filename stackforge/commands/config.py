"""``stackforge config``: manage saved profiles and global settings."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError
from rich.table import Table

from stackforge.profiles import ProfileError, ProfileStore, normalize_profile
from stackforge.scaffolder.options import ProjectOptions
from stackforge.utils import console, print_error, print_info, print_success, print_warning, write_text_atomic

from .create import describe_validation_error, prompt_missing
from .prompts import Asker, RichAsker

logger = logging.getLogger(__name__)

ACTION_ALIASES: dict[str, str] = {
    "list": "list",
    "ls": "list",
    "save": "save",
    "create": "save",
    "use": "use",
    "load": "use",
    "delete": "delete",
    "remove": "delete",
    "rm": "delete",
    "show": "show",
    "view": "show",
    "set": "set",
    "get": "get",
    "export": "export",
    "import": "import",
}


def parse_assignment(text: str) -> tuple[str, Any]:
    """Split ``key=value``; the value is parsed as JSON, else kept as a string."""
    key, sep, raw = text.partition("=")
    key = key.strip()
    if not sep or not key:
        raise ProfileError(f"Expected key=value, got: {text}")
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        value = raw
    return key, value


def parse_assignments(items: list[str] | None) -> dict[str, Any]:
    return dict(parse_assignment(item) for item in items or [])


def check_profile_values(values: dict[str, Any]) -> dict[str, Any]:
    """Reject unknown keys and values that could never form valid options.

    The name is not part of a profile; a placeholder is used for validation.
    """
    values = normalize_profile(values)
    unknown = sorted(set(values) - set(ProjectOptions.model_fields) - {"name"})
    if unknown:
        raise ProfileError(f"Unknown profile key(s): {', '.join(unknown)}")
    profile = {key: value for key, value in values.items() if key != "name"}
    ProjectOptions(name="profile-check", **profile)
    return profile


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------


def _require_name(args: argparse.Namespace, action: str) -> str:
    if not args.name:
        raise ProfileError(f"`config {action}` needs a profile name (-n/--name)")
    return args.name


def show_profiles(store: ProfileStore) -> int:
    names = store.list_names()
    if not names:
        print_warning("No saved profiles")
        console.print("[dim]Create one with: stackforge config save -n <name>[/dim]")
        return 0
    default = store.get_default_profile()
    table = Table(title="Saved profiles", show_header=True, header_style="bold cyan")
    table.add_column("Name", no_wrap=True)
    table.add_column("Default", justify="center")
    table.add_column("Language")
    table.add_column("Framework")
    for name in names:
        try:
            profile = store.load(name)
        except ProfileError as exc:
            logger.warning("Skipping unreadable profile %s: %s", name, exc)
            continue
        table.add_row(
            name,
            "[green]*[/green]" if name == default else "",
            str(profile.get("language", "-")),
            str(profile.get("framework", "-")),
        )
    console.print(table)
    return 0


def save_profile(args: argparse.Namespace, store: ProfileStore, asker: Asker | None) -> int:
    name = _require_name(args, "save")
    values = parse_assignments(args.set)
    if not values and asker is not None:
        values["name"] = name
        prompt_missing(values, asker)
    try:
        profile = check_profile_values(values)
    except ValidationError as exc:
        print_error(describe_validation_error(exc))
        return 1
    path = store.save(name, profile)
    print_success(f'Profile "{name}" saved to {path}')
    if args.set_default:
        store.set_default_profile(name)
        print_info(f'"{name}" is now the default profile')
    return 0


def use_profile(name: str, store: ProfileStore) -> int:
    if name == "none":
        store.clear_default_profile()
        print_success("Default profile cleared")
        return 0
    store.set_default_profile(name)
    print_success(f'Default profile set to "{name}"')
    return 0


def delete_profile(args: argparse.Namespace, store: ProfileStore, asker: Asker | None) -> int:
    name = _require_name(args, "delete")
    if asker is not None and not asker.confirm(f'Delete profile "{name}"?', default=False):
        print_warning("Delete cancelled")
        return 0
    store.delete(name)
    print_success(f'Profile "{name}" deleted')
    return 0


def show(args: argparse.Namespace, store: ProfileStore) -> int:
    """Print a profile, or the global ``config.json`` when no name is given."""
    data = store.load(args.name) if args.name else store.get_config()
    console.print_json(json.dumps(data))
    return 0


def set_values(args: argparse.Namespace, store: ProfileStore, assignment: str | None = None) -> int:
    values = parse_assignments(args.set)
    if assignment:
        key, value = parse_assignment(assignment)
        values[key] = value
    if not values:
        raise ProfileError("Nothing to set; pass key=value or -s key=value")

    if args.name:
        profile = store.load(args.name)
        profile.update(normalize_profile(values))
        try:
            store.save(args.name, check_profile_values(profile))
        except ValidationError as exc:
            print_error(describe_validation_error(exc))
            return 1
        print_success(f'Profile "{args.name}" updated')
        return 0

    for key, value in values.items():
        store.set_value(key, value)
        print_success(f"{key} = {json.dumps(value)}")
    return 0


def get_value(args: argparse.Namespace, store: ProfileStore, key: str | None = None) -> int:
    if not key:
        raise ProfileError("`config get` needs a key")
    source = store.load(args.name) if args.name else store.get_config()
    if key not in source:
        print_warning(f"Unknown config key: {key}")
        return 1
    console.print(json.dumps(source[key]))
    return 0


def export_profile(args: argparse.Namespace, store: ProfileStore) -> int:
    name = _require_name(args, "export")
    text = store.export(name)
    if args.file:
        path = write_text_atomic(Path(args.file).expanduser(), text + "\n")
        print_success(f'Profile "{name}" exported to {path}')
    else:
        console.print(text, markup=False, highlight=False, emoji=False, soft_wrap=True)
    return 0


def import_profile(args: argparse.Namespace, store: ProfileStore) -> int:
    name = _require_name(args, "import")
    if not args.file:
        raise ProfileError("`config import` needs --file PATH")
    path = Path(args.file).expanduser()
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ProfileError(f"Cannot read {path}: {exc}") from exc
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ProfileError("Invalid JSON format") from exc
    if not isinstance(data, dict):
        raise ProfileError("Profile JSON must be an object")
    try:
        profile = check_profile_values(data)
    except ValidationError as exc:
        print_error(describe_validation_error(exc))
        return 1
    store.import_(name, json.dumps(profile))
    print_success(f'Profile "{name}" imported from {path}')
    if args.set_default:
        store.set_default_profile(name)
    return 0


# ---------------------------------------------------------------------------
# Command entry point
# ---------------------------------------------------------------------------


def run_config(args: argparse.Namespace, store: ProfileStore, asker: Asker | None = None) -> int:
    """Dispatch one ``config`` action.

    ``ProfileError`` (including ``ProfileNotFoundError``) propagates to the
    CLI entry point, which prints it without a traceback.
    """
    if args.set_profile:
        return use_profile(args.set_profile, store)

    params = list(getattr(args, "params", None) or [])
    if not params:
        return show_profiles(store)
    if len(params) > 2:
        raise ProfileError(f"Too many arguments for `config {params[0]}`: {' '.join(params[2:])}")
    key = params[1] if len(params) == 2 else None

    action = ACTION_ALIASES.get(params[0])
    if action is None:
        print_error(f"Unknown config action: {params[0]}")
        console.print(f"[dim]Available actions: {', '.join(sorted(set(ACTION_ALIASES.values())))}[/dim]")
        return 1

    interactive = not getattr(args, "yes", False)
    if interactive and asker is None:
        asker = RichAsker()
    asker = asker if interactive else None

    if action == "list":
        return show_profiles(store)
    if action == "save":
        return save_profile(args, store, asker)
    if action == "use":
        return use_profile(key or _require_name(args, "use"), store)
    if action == "delete":
        return delete_profile(args, store, asker)
    if action == "show":
        return show(args, store)
    if action == "set":
        return set_values(args, store, key)
    if action == "get":
        return get_value(args, store, key)
    if action == "export":
        return export_profile(args, store)
    return import_profile(args, store)
