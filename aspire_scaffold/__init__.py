"""Aspire scaffolder -- creates .NET Aspire starter solutions.

Delegates the base solution to ``dotnet new aspire-starter`` and then layers
coding standards, VS Code settings, and AI-assistant context documents on
top of it.

Quick usage::

    from aspire_scaffold import ProjectConfiguration, ScaffoldPipeline

    config = ProjectConfiguration(
        name="TaskManager",
        description="A task management application for teams",
        output_root="/tmp/projects",
    )
    result = await ScaffoldPipeline(config).run()
"""

from aspire_scaffold.config import GeneratorSettings, ProjectConfiguration, resolve_config
from aspire_scaffold.errors import (
    ConfigurationError,
    FileWriteError,
    GeneratorError,
    GeneratorTimeoutError,
    ScaffoldError,
)
from aspire_scaffold.invoker import GeneratorInvoker, InvocationResult
from aspire_scaffold.pipeline import PipelineState, ScaffoldPipeline, ScaffoldResult
from aspire_scaffold.templates import CATALOG, OverwritePolicy, TemplateKind, TemplateSpec, render
from aspire_scaffold.writer import write_file

__all__ = [
    "CATALOG",
    "ConfigurationError",
    "FileWriteError",
    "GeneratorError",
    "GeneratorInvoker",
    "GeneratorSettings",
    "GeneratorTimeoutError",
    "InvocationResult",
    "OverwritePolicy",
    "PipelineState",
    "ProjectConfiguration",
    "ScaffoldError",
    "ScaffoldPipeline",
    "ScaffoldResult",
    "TemplateKind",
    "TemplateSpec",
    "render",
    "resolve_config",
    "write_file",
]
