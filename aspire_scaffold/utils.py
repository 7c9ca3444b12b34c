"""Shared helpers for the Aspire scaffolder.

Provides async command execution and Rich-based operator output.  Progress
goes to stdout; diagnostics go to stderr through a second console.
"""

from __future__ import annotations

import asyncio
import os
from collections.abc import Mapping, Sequence
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

console = Console()
err_console = Console(stderr=True)

# Exit codes shells use for a missing or non-executable command.
EXIT_COMMAND_NOT_FOUND = 127
EXIT_COMMAND_NOT_EXECUTABLE = 126

# ---------------------------------------------------------------------------
# Async command execution
# ---------------------------------------------------------------------------


async def run_command(
    cmd: Sequence[str],
    cwd: str | Path | None = None,
    timeout: float | None = None,
    env: Mapping[str, str] | None = None,
) -> tuple[int, str, str]:
    """Run a command with both output streams captured.

    Args:
        cmd: Executable followed by its arguments.  No shell is involved, so
            arguments containing spaces are passed through intact.
        cwd: Working directory for the child process.
        timeout: Maximum wall-clock seconds before the process is killed.
            ``None`` waits for as long as the child runs.
        env: Optional extra environment variables merged on top of ``os.environ``.

    Returns:
        A ``(returncode, stdout, stderr)`` tuple.  A missing executable is
        reported as return code 127 rather than raised.

    Raises:
        TimeoutError: The child did not exit within *timeout* seconds.  It
            has been killed and reaped by the time this is raised.
    """
    argv = list(cmd)
    merged_env: dict[str, str] | None = None
    if env:
        merged_env = {**os.environ, **env}

    try:
        process = await asyncio.create_subprocess_exec(
            *argv,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=str(cwd) if cwd else None,
            env=merged_env,
        )
    except FileNotFoundError:
        return (EXIT_COMMAND_NOT_FOUND, "", f"command not found: {argv[0]}")
    except PermissionError:
        return (EXIT_COMMAND_NOT_EXECUTABLE, "", f"permission denied: {argv[0]}")

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(
            process.communicate(), timeout=timeout
        )
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        raise TimeoutError(
            f"Command timed out after {timeout:g}s: {' '.join(argv)}"
        ) from None

    stdout_str = (stdout_bytes or b"").decode("utf-8", errors="replace").strip()
    stderr_str = (stderr_bytes or b"").decode("utf-8", errors="replace").strip()
    return (process.returncode or 0, stdout_str, stderr_str)


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


def print_banner(name: str, root: Path) -> None:
    """Print the opening lines of a scaffolding run."""
    console.print()
    console.print(f"[bold bright_cyan]Scaffolding {escape(name)}...[/bold bright_cyan]")
    console.print(f"   Output: {escape(str(root))}")
    console.print()


def print_step(message: str) -> None:
    """Print a top-level pipeline step."""
    console.print(f"[bold]{escape(message)}[/bold]")


def print_detail(message: str) -> None:
    """Print an indented progress line under the current step."""
    console.print(f"  {escape(message)}", highlight=False, soft_wrap=True)


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table.

    Args:
        data: Mapping of label -> value.
        title: Table title.
    """
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(escape(key), escape(str(value)))

    console.print(table)
    console.print()


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{escape(message)}[/bold green]")


def print_warning(message: str) -> None:
    """Print a yellow warning message to stderr."""
    err_console.print(
        f"[bold yellow]Warning:[/bold yellow] {escape(message)}",
        highlight=False,
        soft_wrap=True,
    )


def print_error(message: str) -> None:
    """Print a red error message to stderr."""
    err_console.print(
        f"[bold red]Error:[/bold red] {escape(message)}",
        highlight=False,
        soft_wrap=True,
    )
