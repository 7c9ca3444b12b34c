"""Template catalog for the enhancement phase.

Maps every ``TemplateKind`` to exactly one ``TemplateSpec``: where the file
goes inside the project, whether an existing copy may be replaced, and which
in-memory Jinja2 source renders it.  Rendering is pure; writing is the
pipeline's job.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from pathlib import Path, PurePosixPath
from typing import Any

from jinja2 import DictLoader, Environment, StrictUndefined

from . import template_sources
from .config import ProjectConfiguration


class TemplateKind(str, Enum):
    """Logical role of a generated file."""

    EDITOR_CONFIG = "editor-config"
    BUILD_PROPS = "build-props"
    AI_CONTEXT = "ai-context"
    ARCHITECTURE_DOC = "architecture-doc"
    VSCODE_SETTINGS = "vscode-settings"
    VSCODE_LAUNCH = "vscode-launch"
    VSCODE_TASKS = "vscode-tasks"


class OverwritePolicy(str, Enum):
    """What to do when the destination file already exists."""

    CREATE_IF_ABSENT = "create-if-absent"
    ALWAYS_OVERWRITE = "always-overwrite"


_SOURCES: dict[TemplateKind, str] = {
    TemplateKind.EDITOR_CONFIG: template_sources.EDITOR_CONFIG,
    TemplateKind.BUILD_PROPS: template_sources.DIRECTORY_BUILD_PROPS,
    TemplateKind.AI_CONTEXT: template_sources.COPILOT_INSTRUCTIONS,
    TemplateKind.ARCHITECTURE_DOC: template_sources.ARCHITECTURE_DOC,
    TemplateKind.VSCODE_SETTINGS: template_sources.VSCODE_SETTINGS,
    TemplateKind.VSCODE_LAUNCH: template_sources.VSCODE_LAUNCH,
    TemplateKind.VSCODE_TASKS: template_sources.VSCODE_TASKS,
}


# ---------------------------------------------------------------------------
# Jinja2 custom filters
# ---------------------------------------------------------------------------


def _json_string_filter(value: str) -> str:
    """Escape *value* for use inside a double-quoted JSON string."""
    return json.dumps(str(value), ensure_ascii=False)[1:-1]


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders the in-memory catalog sources with project values.

    Sources are served from a ``DictLoader`` so rendering never touches the
    filesystem.  Undefined variables raise instead of rendering as blanks.
    """

    def __init__(self, sources: dict[TemplateKind, str] | None = None) -> None:
        sources = _SOURCES if sources is None else sources
        self.env = Environment(
            loader=DictLoader({kind.value: body for kind, body in sources.items()}),
            autoescape=False,
            undefined=StrictUndefined,
            keep_trailing_newline=True,
        )
        self.env.filters["json_string"] = _json_string_filter

    def render(self, kind: TemplateKind, config: ProjectConfiguration) -> str:
        """Render the template for *kind* with values from *config*.

        The result has leading whitespace removed and ends with exactly one
        newline.
        """
        template = self.env.get_template(TemplateKind(kind).value)
        text = template.render(**build_context(config))
        return text.lstrip().rstrip("\n") + "\n"


def build_context(config: ProjectConfiguration) -> dict[str, Any]:
    """Values available to every template."""
    return {
        "name": config.name,
        "description": config.description,
        "namespace": config.namespace_slug,
        "name_lower": config.name.lower(),
    }


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TemplateSpec:
    """One file layered onto the generated project."""

    kind: TemplateKind
    relative_path: PurePosixPath
    policy: OverwritePolicy

    def destination(self, config: ProjectConfiguration) -> Path:
        """Absolute path of the file for *config*'s project."""
        return config.project_root.joinpath(*self.relative_path.parts)

    def render(self, config: ProjectConfiguration) -> str:
        return render(self.kind, config)

    @property
    def preserves_existing(self) -> bool:
        return self.policy is OverwritePolicy.CREATE_IF_ABSENT


CATALOG: tuple[TemplateSpec, ...] = (
    TemplateSpec(
        TemplateKind.EDITOR_CONFIG,
        PurePosixPath(".editorconfig"),
        OverwritePolicy.CREATE_IF_ABSENT,
    ),
    TemplateSpec(
        TemplateKind.BUILD_PROPS,
        PurePosixPath("Directory.Build.props"),
        OverwritePolicy.CREATE_IF_ABSENT,
    ),
    TemplateSpec(
        TemplateKind.AI_CONTEXT,
        PurePosixPath(".github/copilot-instructions.md"),
        OverwritePolicy.ALWAYS_OVERWRITE,
    ),
    TemplateSpec(
        TemplateKind.ARCHITECTURE_DOC,
        PurePosixPath("docs/ARCHITECTURE.md"),
        OverwritePolicy.ALWAYS_OVERWRITE,
    ),
    TemplateSpec(
        TemplateKind.VSCODE_SETTINGS,
        PurePosixPath(".vscode/settings.json"),
        OverwritePolicy.ALWAYS_OVERWRITE,
    ),
    TemplateSpec(
        TemplateKind.VSCODE_LAUNCH,
        PurePosixPath(".vscode/launch.json"),
        OverwritePolicy.ALWAYS_OVERWRITE,
    ),
    TemplateSpec(
        TemplateKind.VSCODE_TASKS,
        PurePosixPath(".vscode/tasks.json"),
        OverwritePolicy.ALWAYS_OVERWRITE,
    ),
)


def get_spec(kind: TemplateKind) -> TemplateSpec:
    """Return the catalog entry for *kind*."""
    kind = TemplateKind(kind)
    for spec in CATALOG:
        if spec.kind is kind:
            return spec
    raise KeyError(kind)


_default_renderer = TemplateRenderer()


def render(kind: TemplateKind, config: ProjectConfiguration) -> str:
    """Render *kind* with the shared default renderer."""
    return _default_renderer.render(kind, config)
