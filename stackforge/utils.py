"""Shared utility functions for stackforge.

Provides async command execution, JSON and atomic file I/O, and Rich-based
console output used by every command.
"""

from __future__ import annotations

import asyncio
import json
import os
import tempfile
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.rule import Rule
from rich.table import Table

console = Console()

# ---------------------------------------------------------------------------
# Async command execution
# ---------------------------------------------------------------------------


async def run_command(
    cmd: str | list[str],
    cwd: str | Path | None = None,
    timeout: float | None = None,
    capture: bool = True,
    env: dict[str, str] | None = None,
) -> tuple[int, str, str]:
    """Run a command asynchronously.

    Args:
        cmd: Shell command string or list of arguments.  Lists are executed
            directly without a shell.
        cwd: Working directory for the child process.
        timeout: Maximum wall-clock seconds before the process is killed.
            ``None`` (the default) waits indefinitely; installs and clones
            can legitimately take minutes.
        capture: Whether to capture stdout/stderr (if ``False`` they inherit
            the parent's streams).
        env: Optional extra environment variables merged on top of ``os.environ``.

    Returns:
        A ``(returncode, stdout, stderr)`` tuple.  A missing executable is
        reported as return code ``127`` rather than raised.
    """
    merged_env: dict[str, str] | None = None
    if env:
        merged_env = {**os.environ, **env}

    stdout_pipe = asyncio.subprocess.PIPE if capture else None
    stderr_pipe = asyncio.subprocess.PIPE if capture else None

    try:
        if isinstance(cmd, list):
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=stdout_pipe,
                stderr=stderr_pipe,
                cwd=str(cwd) if cwd else None,
                env=merged_env,
            )
        else:
            process = await asyncio.create_subprocess_shell(
                cmd,
                stdout=stdout_pipe,
                stderr=stderr_pipe,
                cwd=str(cwd) if cwd else None,
                env=merged_env,
            )
    except FileNotFoundError as exc:
        return (127, "", str(exc))

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(
            process.communicate(), timeout=timeout
        )
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        return (
            -1,
            "",
            f"Command timed out after {timeout}s: {format_command(cmd)}",
        )

    stdout_str = (stdout_bytes or b"").decode("utf-8", errors="replace").strip()
    stderr_str = (stderr_bytes or b"").decode("utf-8", errors="replace").strip()
    return (process.returncode or 0, stdout_str, stderr_str)


def format_command(cmd: str | list[str]) -> str:
    return cmd if isinstance(cmd, str) else " ".join(cmd)


# ---------------------------------------------------------------------------
# File I/O
# ---------------------------------------------------------------------------


def write_text_atomic(path: str | Path, content: str) -> Path:
    """Write *content* to *path* via a temporary file and ``os.replace``.

    Parent directories are created automatically.  Readers never observe a
    partially written file.
    """
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=file_path.parent, prefix=f".{file_path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as fh:
            fh.write(content)
        os.replace(tmp_name, file_path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    return file_path


def load_json(path: str | Path) -> dict[str, Any]:
    """Load and parse a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist.
        json.JSONDecodeError: If the file is not valid JSON.
    """
    raw = Path(path).read_text(encoding="utf-8")
    data = json.loads(raw)
    if not isinstance(data, dict):
        return {"_root": data}
    return data


def save_json(data: dict[str, Any] | list[Any], path: str | Path) -> Path:
    """Save data as pretty-printed JSON (atomically)."""
    content = json.dumps(data, indent=2, ensure_ascii=False, default=str) + "\n"
    return write_text_atomic(path, content)


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_duration(seconds: float) -> str:
    """Format a duration in seconds to a human-readable string.

    Examples::

        format_duration(3.7)    -> "3.7s"
        format_duration(65.2)   -> "1m 5s"
    """
    if seconds < 0:
        return "0.0s"

    minutes = int(seconds // 60)
    secs = seconds % 60
    if minutes > 0:
        return f"{minutes}m {int(secs)}s"
    return f"{secs:.1f}s"


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_header(title: str, color: str = "bright_cyan") -> None:
    """Print a full-width rule with *title*."""
    console.print()
    console.print(Rule(f"[bold {color}] {title} [/bold {color}]", style=color))
    console.print()


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, str(value))

    console.print(table)
    console.print()


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{message}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{message}[/bold yellow]")


def print_info(message: str) -> None:
    console.print(f"[cyan]{message}[/cyan]")


def create_progress() -> Progress:
    """Create a Rich spinner for long-running steps.

    Returns:
        A ``Progress`` instance suitable for use as a context manager.
    """
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    )
