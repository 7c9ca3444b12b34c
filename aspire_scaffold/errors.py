"""Exception taxonomy for the scaffolder.

Three families of failure are fatal and surfaced to the operator:

* ``ConfigurationError`` -- bad or missing command-line input, raised before
  any side effect.
* ``GeneratorError`` -- the external project generator exited non-zero (or
  timed out).  Carries the captured stderr.
* ``FileWriteError`` -- directory creation or a write failed during the
  enhancement phase.  Carries the path; the ``OSError`` (or encoding
  error) is chained.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any


class ScaffoldError(Exception):
    """Base class for every fatal scaffolding failure.

    ``state`` is filled in by the pipeline with the state it was in when the
    error surfaced.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        self.state: Any = None
        super().__init__(message)


class ConfigurationError(ScaffoldError):
    """Raised when command-line input cannot produce a valid configuration."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        super().__init__(message)


class GeneratorError(ScaffoldError):
    """Raised when the external generator fails."""

    def __init__(
        self,
        command: str,
        returncode: int,
        stderr: str = "",
        stdout: str = "",
    ) -> None:
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        self.stdout = stdout
        detail = stderr.strip() or stdout.strip() or "no output"
        super().__init__(
            f"{command} exited with code {returncode}: {detail}"
        )


class GeneratorTimeoutError(GeneratorError):
    """Raised when the generator does not finish within the configured timeout."""

    def __init__(self, command: str, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(
            command,
            returncode=-1,
            stderr=f"timed out after {timeout:g}s",
        )
        self.message = f"{command} timed out after {timeout:g}s"
        self.args = (self.message,)


class FileWriteError(ScaffoldError):
    """Raised when a file or one of its parent directories cannot be written."""

    def __init__(self, path: Path, cause: OSError | UnicodeError) -> None:
        self.path = Path(path)
        self.cause = cause
        reason = getattr(cause, "strerror", None) or str(cause)
        super().__init__(f"Failed to write {self.path}: {reason}")
