"""stackforge command-line entry point."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from rich.logging import RichHandler

from stackforge import __version__, catalog
from stackforge.config import AppSettings
from stackforge.profiles import ProfileError, ProfileStore
from stackforge.scaffolder import GenerationError
from stackforge.utils import console, print_error

from .commands.config import run_config
from .commands.create import run_create
from .commands.fork import run_fork
from .commands.init import run_init
from .commands.listing import run_list

logger = logging.getLogger(__name__)

COMMAND_ALIASES = {"new": "create", "ls": "list"}


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=verbose)],
        force=True,
    )


def _add_generation_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-l", "--language", choices=catalog.language_ids(), help="Programming language")
    parser.add_argument("-f", "--framework", help="Framework (see `stackforge list`)")
    parser.add_argument("--license", choices=catalog.license_ids(), help="License for the project")
    parser.add_argument("-y", "--yes", action="store_true", help="Skip prompts and use defaults")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stackforge",
        description="Scaffold new projects for many languages and frameworks",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # create
    create = subparsers.add_parser("create", aliases=["new"], help="Create a new project")
    create.add_argument("name", nargs="?", help="Project name")
    _add_generation_flags(create)
    create.add_argument("--package-manager", help="Package manager (npm, yarn, pnpm, pip, poetry, ...)")
    create.add_argument("--readme", choices=catalog.README_STYLES, help="README template")
    create.add_argument("--git", action=argparse.BooleanOptionalAction, default=None, help="Initialize a git repository")
    create.add_argument("--install", action=argparse.BooleanOptionalAction, default=None, help="Install dependencies")
    create.add_argument("-o", "--open", action="store_true", default=None, help="Open the project in your editor")
    create.add_argument("--config", metavar="PROFILE", help="Use a saved profile")
    create.add_argument("--path", metavar="DIR", help="Directory to create the project in")

    # init
    init = subparsers.add_parser("init", help="Initialize a project in the current directory")
    _add_generation_flags(init)

    # fork
    fork = subparsers.add_parser("fork", help="Fork and customize an existing repository")
    fork.add_argument("repo_url", help="Repository URL (https, git@ or owner/repo)")
    fork.add_argument("-n", "--name", help="New project name")
    fork.add_argument("--clean", action="store_true", default=None, help="Remove git history and start fresh")
    fork.add_argument("--description", help="New project description")
    fork.add_argument("--license", choices=["keep", *catalog.license_ids()], help="Replace the license")
    fork.add_argument("--no-readme", action="store_true", help="Do not update README.md")
    fork.add_argument("--no-manifest", action="store_true", help="Do not update package.json")
    fork.add_argument("--install", action=argparse.BooleanOptionalAction, default=None, help="Install dependencies")
    fork.add_argument("-o", "--open", action="store_true", default=None, help="Open the project in your editor")
    fork.add_argument("-y", "--yes", action="store_true", help="Skip prompts and use defaults")

    # config
    config = subparsers.add_parser("config", help="Manage saved profiles")
    config.add_argument(
        "params",
        nargs="*",
        help="list, save, use, delete, show, set, get, export, import; then a key for `get` or key=value for `set`",
    )
    config.add_argument("-n", "--name", help="Profile name")
    config.add_argument("-s", "--set", action="append", metavar="KEY=VALUE", help="Value to store (repeatable)")
    config.add_argument("--file", help="File for export/import")
    config.add_argument("--set-default", action="store_true", help="Make the profile the default")
    config.add_argument("--set-profile", metavar="NAME", help="Set the default profile (`none` clears it)")
    config.add_argument("-y", "--yes", action="store_true", help="Do not prompt")

    # list
    subparsers.add_parser("list", aliases=["ls"], help="List supported languages, frameworks and licenses")

    return parser


async def dispatch(args: argparse.Namespace, settings: AppSettings) -> int:
    store = ProfileStore(settings)
    command = COMMAND_ALIASES.get(args.command, args.command)
    if command == "create":
        return await run_create(args, settings, store)
    if command == "init":
        return await run_init(args, settings, store)
    if command == "fork":
        return await run_fork(args, settings)
    if command == "config":
        return run_config(args, store)
    return run_list()


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    if not args.command:
        parser.print_help()
        return 1

    settings = AppSettings.from_env()
    settings = settings.model_copy(update={"verbose": args.verbose})
    logger.debug("Using stackforge home %s", settings.home)

    try:
        return asyncio.run(dispatch(args, settings))
    except GenerationError as exc:
        print_error(f"Error creating project: {exc}")
        return 1
    except ProfileError as exc:
        console.print(f"[yellow]{exc}[/yellow]")
        return 1
    except KeyboardInterrupt:
        console.print("\n[dim]Aborted[/dim]")
        return 130


if __name__ == "__main__":
    sys.exit(main())
