"""Aspire scaffolder pipeline.

Runs the scaffolding steps strictly in sequence:

Resolved   -- command line turned into a ``ProjectConfiguration``.
Generated  -- external generator materialised the base solution.
Enhancing  -- catalog files rendered and written into the project.
Done       -- summary and next steps printed.

Any ``ScaffoldError`` moves the pipeline to ``Error`` and aborts the
remaining steps.  Files written before the failure stay on disk.

Usage::

    aspire-scaffold --name TaskManager --description "Task tracking" --output ./projects
    python -m aspire_scaffold.pipeline --name TaskManager --description "Task tracking"
"""

from __future__ import annotations

import asyncio
import sys
import time
from collections.abc import Mapping, Sequence
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field
from rich.markup import escape

from .config import (
    CommandLine,
    GeneratorSettings,
    ProjectConfiguration,
    resolve_command_line,
)
from .errors import ConfigurationError, ScaffoldError
from .invoker import GeneratorInvoker, InvocationResult
from .templates import CATALOG, TemplateKind
from .utils import (
    console,
    format_duration,
    print_banner,
    print_detail,
    print_error,
    print_step,
    print_success,
    print_summary_table,
    print_warning,
)
from .writer import write_file_async


# ---------------------------------------------------------------------------
# State
# ---------------------------------------------------------------------------


class PipelineState(str, Enum):
    INIT = "init"
    RESOLVED = "resolved"
    GENERATED = "generated"
    ENHANCING = "enhancing"
    DONE = "done"
    ERROR = "error"


_TRANSITIONS: dict[PipelineState, frozenset[PipelineState]] = {
    PipelineState.INIT: frozenset({PipelineState.RESOLVED, PipelineState.ERROR}),
    PipelineState.RESOLVED: frozenset(
        {PipelineState.GENERATED, PipelineState.ENHANCING, PipelineState.ERROR}
    ),
    PipelineState.GENERATED: frozenset({PipelineState.ENHANCING, PipelineState.ERROR}),
    PipelineState.ENHANCING: frozenset({PipelineState.DONE, PipelineState.ERROR}),
    PipelineState.DONE: frozenset(),
    PipelineState.ERROR: frozenset(),
}

# Progress lines printed once the enhancement loop finishes.
_ENHANCEMENT_GROUPS: tuple[tuple[str, frozenset[TemplateKind]], ...] = (
    (
        "coding standards (.editorconfig, Directory.Build.props)",
        frozenset({TemplateKind.EDITOR_CONFIG, TemplateKind.BUILD_PROPS}),
    ),
    (
        "AI context (.github/copilot-instructions.md, docs/ARCHITECTURE.md)",
        frozenset({TemplateKind.AI_CONTEXT, TemplateKind.ARCHITECTURE_DOC}),
    ),
    (
        "VS Code configuration (.vscode/settings.json, launch.json, tasks.json)",
        frozenset(
            {
                TemplateKind.VSCODE_SETTINGS,
                TemplateKind.VSCODE_LAUNCH,
                TemplateKind.VSCODE_TASKS,
            }
        ),
    ),
)


class ScaffoldResult(BaseModel):
    """What a successful run produced."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    project_root: Path
    written: list[Path] = Field(default_factory=list)
    skipped: list[Path] = Field(default_factory=list)
    duration_seconds: float = 0.0
    generator: InvocationResult | None = Field(default=None, exclude=True)


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


class ScaffoldPipeline:
    """Drives one scaffolding run.

    Attributes:
        config: The project being scaffolded.
        settings: How to invoke the external generator.
        invoker: Runs the generator; injectable for tests.
        skip_generate: Go straight to the enhancement phase.
        state: Current ``PipelineState``.
    """

    def __init__(
        self,
        config: ProjectConfiguration,
        settings: GeneratorSettings | None = None,
        invoker: GeneratorInvoker | None = None,
        *,
        skip_generate: bool = False,
    ) -> None:
        self.config = config
        self.settings = settings or GeneratorSettings()
        self.invoker = invoker or GeneratorInvoker(timeout=self.settings.timeout)
        self.skip_generate = skip_generate
        self.state = PipelineState.INIT

    @classmethod
    def from_command_line(cls, command_line: CommandLine) -> "ScaffoldPipeline":
        return cls(
            command_line.project,
            command_line.generator,
            skip_generate=command_line.skip_generate,
        )

    def _transition(self, target: PipelineState) -> None:
        if target not in _TRANSITIONS[self.state]:
            raise RuntimeError(
                f"Illegal pipeline transition {self.state.value} -> {target.value}"
            )
        self.state = target

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    async def run(self) -> ScaffoldResult:
        """Execute generation and enhancement.

        Returns:
            A ``ScaffoldResult`` describing the files written and skipped.

        Raises:
            ScaffoldError: The generator failed or a file could not be
                written.  ``exc.state`` names the state the run was in.
        """
        started = time.monotonic()
        self._transition(PipelineState.RESOLVED)
        root = self.config.project_root
        print_banner(self.config.name, root)

        invocation: InvocationResult | None = None
        try:
            if self.skip_generate:
                print_warning("Skipping base project generation (--skip-generate).")
            else:
                print_step("Creating base Aspire project structure...")
                invocation = await self._generate()
                self._transition(PipelineState.GENERATED)

            self._transition(PipelineState.ENHANCING)
            print_step("Adding skill-specific enhancements...")
            written, skipped = await self._enhance()
        except ScaffoldError as exc:
            exc.state = self.state
            self._transition(PipelineState.ERROR)
            raise

        self._transition(PipelineState.DONE)
        result = ScaffoldResult(
            project_root=root,
            written=written,
            skipped=skipped,
            duration_seconds=time.monotonic() - started,
            generator=invocation,
        )
        self._print_final_summary(result)
        return result

    async def _generate(self) -> InvocationResult:
        """Run the external generator once; raise if it exits non-zero."""
        args = GeneratorInvoker.build_args(self.config, self.settings)
        result = await self.invoker.invoke(self.settings.command, args)
        result.raise_for_status()
        if result.stdout:
            console.print(escape(result.stdout), highlight=False)
        return result

    async def _enhance(self) -> tuple[list[Path], list[Path]]:
        """Render and write every catalog entry in order.

        ``create-if-absent`` entries that already exist are left untouched so
        local customisations survive a re-run.
        """
        written: list[Path] = []
        skipped: list[Path] = []
        kept: set[TemplateKind] = set()

        for spec in CATALOG:
            destination = spec.destination(self.config)
            if spec.preserves_existing and destination.exists():
                skipped.append(destination)
                kept.add(spec.kind)
                print_detail(f"Skipped (exists): {destination}")
                continue
            path = await write_file_async(destination, spec.render(self.config))
            written.append(path)
            print_detail(f"Created: {path}")

        for subject, kinds in _ENHANCEMENT_GROUPS:
            if kinds <= kept:
                print_detail(f"- Kept existing {subject}")
            else:
                print_detail(f"✓ Added {subject}")
        return written, skipped

    def _print_final_summary(self, result: ScaffoldResult) -> None:
        console.print()
        print_success(f"Successfully created {self.config.name}!")
        print_summary_table(
            {
                "Project": self.config.name,
                "Output": str(result.project_root),
                "Files written": str(len(result.written)),
                "Files kept": str(len(result.skipped)),
                "Duration": format_duration(result.duration_seconds),
            },
            title="Scaffold Results",
        )
        console.print("Next steps:")
        for number, step in enumerate(next_steps(self.config), start=1):
            print_detail(f"{number}. {step}")
        console.print()


def next_steps(config: ProjectConfiguration) -> list[str]:
    """Commands the developer runs after scaffolding."""
    return [
        f"cd {config.project_root}",
        "dotnet workload install aspire  # if not already installed",
        "dotnet restore",
        f"dotnet run --project {config.name}.AppHost",
    ]


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def main(
    argv: Sequence[str] | None = None,
    cwd: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> None:
    """CLI entry point for ``aspire-scaffold``.

    Exits 0 on success or ``--help`` and 1 on any configuration, generator,
    or file-writing failure.
    """
    try:
        command_line = resolve_command_line(
            sys.argv[1:] if argv is None else argv,
            cwd=cwd,
            environ=environ,
        )
    except ConfigurationError as exc:
        print_error(exc.message)
        sys.exit(1)

    for token in command_line.ignored:
        print_warning(f"Ignoring unrecognised argument: {token}")

    pipeline = ScaffoldPipeline.from_command_line(command_line)
    try:
        asyncio.run(pipeline.run())
    except ScaffoldError as exc:
        print_error(str(exc))
        sys.exit(1)


if __name__ == "__main__":
    main()
