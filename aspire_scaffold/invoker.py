"""External project generator invocation.

The base solution skeleton is produced by an external generator (``dotnet
new aspire-starter`` by default).  ``GeneratorInvoker`` runs it exactly once
with both output streams captured and turns the outcome into an
``InvocationResult``; deciding what a non-zero exit means is left to the
pipeline.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from .config import GeneratorSettings, ProjectConfiguration
from .errors import GeneratorError, GeneratorTimeoutError
from .utils import run_command


@dataclass(frozen=True)
class InvocationResult:
    """Outcome of a single generator run."""

    command: str
    args: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = field(default="", repr=False)

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def raise_for_status(self) -> None:
        """Raise ``GeneratorError`` if the generator exited non-zero."""
        if not self.ok:
            raise GeneratorError(
                self.command,
                self.returncode,
                stderr=self.stderr,
                stdout=self.stdout,
            )


class GeneratorInvoker:
    """Runs the external generator and captures what it printed.

    Args:
        timeout: Optional bound in seconds on how long to wait for the
            child.  ``None`` blocks until it exits.
    """

    def __init__(self, timeout: float | None = None) -> None:
        self.timeout = timeout

    async def invoke(self, command: str, args: Sequence[str]) -> InvocationResult:
        """Start *command* with *args*, wait for it, and return the result.

        There is no retry: a generator that failed may already have left
        partial output on disk.

        Raises:
            GeneratorTimeoutError: The timeout elapsed before the child exited.
        """
        argv = (command, *args)
        try:
            returncode, stdout, stderr = await run_command(argv, timeout=self.timeout)
        except TimeoutError:
            raise GeneratorTimeoutError(command, self.timeout or 0) from None
        return InvocationResult(
            command=command,
            args=tuple(args),
            returncode=returncode,
            stdout=stdout,
            stderr=stderr,
        )

    @staticmethod
    def build_args(
        config: ProjectConfiguration,
        settings: GeneratorSettings,
    ) -> list[str]:
        """Arguments for ``<generator> new <template> --name <name> --output <root>/<name>``."""
        return [
            "new",
            settings.template_id,
            "--name",
            config.name,
            "--output",
            str(config.project_root),
        ]
