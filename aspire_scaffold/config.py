"""Aspire scaffolder configuration.

Turns argv-style tokens into a validated, immutable ``ProjectConfiguration``
plus the ``GeneratorSettings`` that describe how the external project
generator is invoked.  Ambient process state (working directory,
environment) is always passed in explicitly so callers and tests control it.
"""

from __future__ import annotations

import argparse
import os
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, NoReturn

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigurationError

DEFAULT_GENERATOR = "dotnet"
DEFAULT_TEMPLATE_ID = "aspire-starter"

ENV_GENERATOR = "ASPIRE_SCAFFOLD_GENERATOR"
ENV_TEMPLATE = "ASPIRE_SCAFFOLD_TEMPLATE"
ENV_TIMEOUT = "ASPIRE_SCAFFOLD_TIMEOUT"

USAGE_EPILOG = """\
Example:
    aspire-scaffold \\
        --name "TaskManager" \\
        --description "A task management application for teams" \\
        --output "./projects"

Environment:
    ASPIRE_SCAFFOLD_GENERATOR   generator executable (default: dotnet)
    ASPIRE_SCAFFOLD_TEMPLATE    generator template id (default: aspire-starter)
    ASPIRE_SCAFFOLD_TIMEOUT     seconds to wait for the generator (default: no limit)
"""


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


class ProjectConfiguration(BaseModel):
    """The project being scaffolded.

    Constructed once at startup and never mutated.  ``name`` doubles as the
    project directory name, so it may not contain path separators.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Project name (PascalCase, e.g. 'TaskManager')")
    description: str = Field(..., description="Brief project description")
    output_root: Path = Field(..., description="Absolute directory the project is created in")

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("--name is required")
        if value in (".", "..") or "/" in value or "\\" in value:
            raise ValueError(f"project name must be a single directory name, got {value!r}")
        if any(ord(ch) < 32 for ch in value):
            raise ValueError("project name must not contain control characters")
        return _require_utf8(value, "--name")

    @field_validator("description")
    @classmethod
    def _check_description(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("--description is required")
        return _require_utf8(value, "--description")

    @field_validator("output_root")
    @classmethod
    def _check_output_root(cls, value: Path) -> Path:
        if not value.is_absolute():
            raise ValueError(f"output path must be absolute, got {value}")
        return value

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def namespace_slug(self) -> str:
        """``name`` with spaces and hyphens removed, safe for identifiers."""
        return self.name.replace(" ", "").replace("-", "")

    @property
    def project_root(self) -> Path:
        """Directory the generator materialises: ``<output_root>/<name>``."""
        return self.output_root / self.name


class GeneratorSettings(BaseModel):
    """How the external base-project generator is invoked."""

    model_config = ConfigDict(frozen=True)

    command: str = Field(default=DEFAULT_GENERATOR, min_length=1)
    template_id: str = Field(default=DEFAULT_TEMPLATE_ID, min_length=1)
    timeout: float | None = Field(
        default=None,
        gt=0,
        description="Seconds to wait for the generator; None waits indefinitely",
    )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "GeneratorSettings":
        """Build settings from environment variables.

        Recognised variables (all optional):
            ASPIRE_SCAFFOLD_GENERATOR, ASPIRE_SCAFFOLD_TEMPLATE,
            ASPIRE_SCAFFOLD_TIMEOUT.
        """
        env = os.environ if environ is None else environ
        kwargs: dict[str, Any] = {}
        if env.get(ENV_GENERATOR):
            kwargs["command"] = env[ENV_GENERATOR]
        if env.get(ENV_TEMPLATE):
            kwargs["template_id"] = env[ENV_TEMPLATE]
        if env.get(ENV_TIMEOUT):
            kwargs["timeout"] = _parse_timeout(env[ENV_TIMEOUT], source=ENV_TIMEOUT)
        return _validated(cls, kwargs)


class CommandLine(BaseModel):
    """Everything resolved from one invocation of the CLI."""

    model_config = ConfigDict(frozen=True)

    project: ProjectConfiguration
    generator: GeneratorSettings
    skip_generate: bool = False
    ignored: tuple[str, ...] = ()


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that reports usage errors as ``ConfigurationError``.

    argparse would print usage and exit with status 2; the scaffolder only
    knows exit codes 0 and 1.
    """

    def error(self, message: str) -> NoReturn:
        raise ConfigurationError("arguments", message)


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser for the ``aspire-scaffold`` command."""
    parser = _ArgumentParser(
        prog="aspire-scaffold",
        description=".NET Aspire Starter Project Scaffolder",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=USAGE_EPILOG,
        allow_abbrev=False,
    )
    parser.add_argument(
        "--name",
        default=None,
        help="Project name (PascalCase, e.g., 'TaskManager')",
    )
    parser.add_argument(
        "--description",
        default=None,
        help="Brief project description",
    )
    parser.add_argument(
        "--output",
        default=".",
        help="Output directory (default: current directory)",
    )
    parser.add_argument(
        "--generator",
        default=None,
        help=f"Generator executable (default: ${ENV_GENERATOR} or {DEFAULT_GENERATOR})",
    )
    parser.add_argument(
        "--template",
        default=None,
        help=f"Generator template id (default: ${ENV_TEMPLATE} or {DEFAULT_TEMPLATE_ID})",
    )
    parser.add_argument(
        "--timeout",
        default=None,
        help="Seconds to wait for the generator before giving up (default: no limit)",
    )
    parser.add_argument(
        "--skip-generate",
        action="store_true",
        help="Do not run the generator; only add the enhancement files",
    )
    return parser


def resolve_command_line(
    argv: Sequence[str],
    cwd: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> CommandLine:
    """Resolve argv into a ``CommandLine``.

    Unrecognised tokens are ignored and returned in ``ignored`` so the caller
    can warn about them.  ``--help`` prints usage and raises ``SystemExit(0)``.

    Raises:
        ConfigurationError: ``--name`` or ``--description`` missing or
            invalid, or an option was given without its value.
    """
    args, extras = build_parser().parse_known_args(list(argv))

    if args.name is None or not args.name.strip():
        raise ConfigurationError("name", "--name is required")
    if args.description is None or not args.description.strip():
        raise ConfigurationError("description", "--description is required")

    base = Path(cwd) if cwd is not None else Path.cwd()
    output_root = Path(os.path.normpath(base / Path(args.output).expanduser()))

    project = _validated(
        ProjectConfiguration,
        {"name": args.name, "description": args.description, "output_root": output_root},
    )

    settings = GeneratorSettings.from_env(environ)
    overrides: dict[str, Any] = {}
    if args.generator is not None:
        overrides["command"] = args.generator
    if args.template is not None:
        overrides["template_id"] = args.template
    if args.timeout is not None:
        overrides["timeout"] = _parse_timeout(args.timeout, source="--timeout")
    if overrides:
        settings = _validated(GeneratorSettings, {**settings.model_dump(), **overrides})

    return CommandLine(
        project=project,
        generator=settings,
        skip_generate=args.skip_generate,
        ignored=tuple(extras),
    )


def resolve_config(
    argv: Sequence[str],
    cwd: str | Path | None = None,
) -> ProjectConfiguration:
    """Resolve argv into the ``ProjectConfiguration`` alone."""
    return resolve_command_line(argv, cwd=cwd, environ={}).project


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _require_utf8(value: str, option: str) -> str:
    # Undecodable argv bytes arrive as lone surrogates.
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        raise ValueError(f"{option} is not valid UTF-8 text") from None
    return value


def _parse_timeout(raw: str, *, source: str) -> float:
    try:
        value = float(raw)
    except ValueError:
        raise ConfigurationError("timeout", f"{source} must be a number of seconds, got {raw!r}") from None
    if value <= 0:
        raise ConfigurationError("timeout", f"{source} must be greater than zero, got {raw!r}")
    return value


def _validated(model: type[BaseModel], data: dict[str, Any]) -> Any:
    """Construct *model* and map a ``ValidationError`` to ``ConfigurationError``."""
    try:
        return model(**data)
    except ValidationError as exc:
        first = exc.errors()[0]
        field = str(first["loc"][0]) if first.get("loc") else "arguments"
        ctx_error = (first.get("ctx") or {}).get("error")
        message = str(ctx_error) if ctx_error is not None else f"invalid {field}: {first['msg']}"
        raise ConfigurationError(field, message) from exc
