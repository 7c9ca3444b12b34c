"""Shared pytest fixtures for the Aspire scaffolder test suite.

Provides reusable fixtures for:
- Project configurations rooted in a temporary directory
- Canned generator results and a mocked ``GeneratorInvoker``
- Executable fake generator scripts for subprocess-level tests
"""

from __future__ import annotations

import os
import stat
import sys
import textwrap
from collections.abc import Callable
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from aspire_scaffold.config import GeneratorSettings, ProjectConfiguration
from aspire_scaffold.invoker import GeneratorInvoker, InvocationResult


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


@pytest.fixture
def project_config(tmp_path: Path) -> ProjectConfiguration:
    """The TaskManager project rooted at ``tmp_path``."""
    return ProjectConfiguration(
        name="TaskManager",
        description="A task management application for teams",
        output_root=tmp_path,
    )


@pytest.fixture
def generator_settings() -> GeneratorSettings:
    return GeneratorSettings()


# ---------------------------------------------------------------------------
# Generator doubles
# ---------------------------------------------------------------------------


def make_result(
    returncode: int = 0,
    stdout: str = "",
    stderr: str = "",
    command: str = "dotnet",
) -> InvocationResult:
    """Build an ``InvocationResult`` as the generator would report it."""
    return InvocationResult(
        command=command,
        args=("new", "aspire-starter"),
        returncode=returncode,
        stdout=stdout,
        stderr=stderr,
    )


@pytest.fixture
def mock_invoker() -> AsyncMock:
    """A ``GeneratorInvoker`` whose ``invoke`` succeeds without a subprocess."""
    invoker = AsyncMock(spec=GeneratorInvoker)
    invoker.invoke.return_value = make_result(
        stdout='The template "Aspire Starter App" was created successfully.'
    )
    return invoker


@pytest.fixture
def failing_invoker() -> AsyncMock:
    """A ``GeneratorInvoker`` that reports a missing toolchain."""
    invoker = AsyncMock(spec=GeneratorInvoker)
    invoker.invoke.return_value = make_result(returncode=2, stderr="toolchain not found")
    return invoker


# ---------------------------------------------------------------------------
# Fake generator executables
# ---------------------------------------------------------------------------

_FAKE_GENERATOR = """\
#!{python}
import pathlib
import sys
import time

args = sys.argv[1:]
time.sleep({delay})
if {exit_code}:
    sys.stderr.write({stderr!r})
    sys.exit({exit_code})

name = args[args.index("--name") + 1]
output = pathlib.Path(args[args.index("--output") + 1])
for project in ("AppHost", "ServiceDefaults", "Api", "Web"):
    (output / f"{{name}}.{{project}}").mkdir(parents=True, exist_ok=True)
(output / f"{{name}}.sln").write_text("Microsoft Visual Studio Solution File\\n")
print('The template "' + args[1] + '" was created successfully.')
"""


@pytest.fixture
def fake_generator(tmp_path: Path) -> Callable[..., Path]:
    """Factory that writes an executable stand-in for ``dotnet``.

    The script understands ``new <template> --name <n> --output <dir>``, lays
    down a minimal solution layout, and can be told to fail or stall.
    """
    if sys.platform == "win32":
        pytest.skip("fake generator relies on a POSIX shebang")

    bin_dir = tmp_path / "bin"
    bin_dir.mkdir(exist_ok=True)
    counter = iter(range(1000))

    def _make(exit_code: int = 0, stderr: str = "", delay: float = 0.0) -> Path:
        script = bin_dir / f"fake-dotnet-{next(counter)}"
        script.write_text(
            textwrap.dedent(
                _FAKE_GENERATOR.format(
                    python=sys.executable,
                    exit_code=exit_code,
                    stderr=stderr,
                    delay=delay,
                )
            ),
            encoding="utf-8",
        )
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return script

    return _make


@pytest.fixture
def clean_environ(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Remove scaffolder variables from the process environment."""
    for key in list(os.environ):
        if key.startswith("ASPIRE_SCAFFOLD_"):
            monkeypatch.delenv(key, raising=False)
    return {}
