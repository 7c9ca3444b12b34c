"""Tests for the template catalog (aspire_scaffold.templates).

Covers:
- One catalog entry per TemplateKind, in a fixed order
- Destination paths and overwrite policies
- Render purity (deterministic, no filesystem access)
- Project values substituted into each template
- JSON outputs stay valid for awkward project names
"""

from __future__ import annotations

import json
from pathlib import Path, PurePosixPath
from unittest.mock import patch

import pytest
from jinja2 import UndefinedError

from aspire_scaffold.config import ProjectConfiguration
from aspire_scaffold.templates import (
    CATALOG,
    OverwritePolicy,
    TemplateKind,
    TemplateRenderer,
    TemplateSpec,
    build_context,
    get_spec,
    render,
)


pytestmark = pytest.mark.unit

JSON_KINDS = (
    TemplateKind.VSCODE_SETTINGS,
    TemplateKind.VSCODE_LAUNCH,
    TemplateKind.VSCODE_TASKS,
)


@pytest.fixture
def awkward_config(tmp_path: Path) -> ProjectConfiguration:
    """A name and description full of characters JSON must escape."""
    return ProjectConfiguration(
        name='Task "Quoted" Manager',
        description='Line one\nwith "quotes", back\\slashes and [markup]',
        output_root=tmp_path,
    )


# ---------------------------------------------------------------------------
# Catalog shape
# ---------------------------------------------------------------------------


class TestCatalog:
    def test_every_kind_has_exactly_one_spec(self):
        kinds = [spec.kind for spec in CATALOG]
        assert sorted(kinds, key=lambda k: k.value) == sorted(TemplateKind, key=lambda k: k.value)
        assert len(kinds) == len(set(kinds)) == 7

    def test_fixed_order(self):
        assert [spec.kind for spec in CATALOG] == [
            TemplateKind.EDITOR_CONFIG,
            TemplateKind.BUILD_PROPS,
            TemplateKind.AI_CONTEXT,
            TemplateKind.ARCHITECTURE_DOC,
            TemplateKind.VSCODE_SETTINGS,
            TemplateKind.VSCODE_LAUNCH,
            TemplateKind.VSCODE_TASKS,
        ]

    def test_relative_paths(self):
        paths = {spec.kind: str(spec.relative_path) for spec in CATALOG}
        assert paths == {
            TemplateKind.EDITOR_CONFIG: ".editorconfig",
            TemplateKind.BUILD_PROPS: "Directory.Build.props",
            TemplateKind.AI_CONTEXT: ".github/copilot-instructions.md",
            TemplateKind.ARCHITECTURE_DOC: "docs/ARCHITECTURE.md",
            TemplateKind.VSCODE_SETTINGS: ".vscode/settings.json",
            TemplateKind.VSCODE_LAUNCH: ".vscode/launch.json",
            TemplateKind.VSCODE_TASKS: ".vscode/tasks.json",
        }

    def test_only_top_level_files_preserve_existing(self):
        preserved = {spec.kind for spec in CATALOG if spec.preserves_existing}
        assert preserved == {TemplateKind.EDITOR_CONFIG, TemplateKind.BUILD_PROPS}
        for spec in CATALOG:
            if spec.kind in preserved:
                assert spec.policy is OverwritePolicy.CREATE_IF_ABSENT
                assert len(spec.relative_path.parts) == 1
            else:
                assert spec.policy is OverwritePolicy.ALWAYS_OVERWRITE

    def test_destination_under_project_root(self, project_config: ProjectConfiguration):
        for spec in CATALOG:
            destination = spec.destination(project_config)
            assert destination.is_absolute()
            assert project_config.project_root in destination.parents

    def test_get_spec(self):
        spec = get_spec(TemplateKind.VSCODE_LAUNCH)
        assert spec.relative_path == PurePosixPath(".vscode/launch.json")

    def test_get_spec_accepts_value(self):
        assert get_spec("editor-config").kind is TemplateKind.EDITOR_CONFIG  # type: ignore[arg-type]

    def test_spec_is_immutable(self):
        with pytest.raises(AttributeError):
            CATALOG[0].policy = OverwritePolicy.ALWAYS_OVERWRITE  # type: ignore[misc]


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


class TestRender:
    @pytest.mark.parametrize("kind", list(TemplateKind))
    def test_deterministic(self, kind: TemplateKind, project_config: ProjectConfiguration):
        twin = ProjectConfiguration(**project_config.model_dump())
        assert render(kind, project_config) == render(kind, twin)

    @pytest.mark.parametrize("kind", list(TemplateKind))
    def test_no_leading_whitespace_single_trailing_newline(
        self, kind: TemplateKind, project_config: ProjectConfiguration
    ):
        text = render(kind, project_config)
        assert text == text.lstrip()
        assert text.endswith("\n")
        assert not text.endswith("\n\n")

    def test_no_filesystem_access(self, project_config: ProjectConfiguration, tmp_path: Path):
        renderer = TemplateRenderer()
        with patch("builtins.open", side_effect=AssertionError("open() called")), patch.object(
            Path, "write_text", side_effect=AssertionError("write_text() called")
        ), patch.object(Path, "mkdir", side_effect=AssertionError("mkdir() called")):
            for kind in TemplateKind:
                renderer.render(kind, project_config)
        assert list(tmp_path.iterdir()) == []

    def test_spec_render_matches_module_render(self, project_config: ProjectConfiguration):
        for spec in CATALOG:
            assert spec.render(project_config) == render(spec.kind, project_config)

    def test_editor_config_is_static(self, project_config: ProjectConfiguration, tmp_path: Path):
        other = ProjectConfiguration(name="Other", description="x", output_root=tmp_path)
        text = render(TemplateKind.EDITOR_CONFIG, project_config)
        assert text.startswith("# EditorConfig")
        assert "root = true" in text
        assert text == render(TemplateKind.EDITOR_CONFIG, other)

    def test_build_props(self, project_config: ProjectConfiguration):
        text = render(TemplateKind.BUILD_PROPS, project_config)
        assert text.startswith("<Project>")
        assert "<TargetFramework>net10.0</TargetFramework>" in text
        assert "<TreatWarningsAsErrors>true</TreatWarningsAsErrors>" in text

    def test_ai_context(self, project_config: ProjectConfiguration):
        text = render(TemplateKind.AI_CONTEXT, project_config)
        assert text.startswith("# GitHub Copilot Instructions for TaskManager")
        assert "A task management application for teams" in text
        assert "**TaskManager.AppHost**" in text
        assert '"taskmanager.requests"' in text
        assert "`namespace TaskManager.Api.Services;`" in text

    def test_ai_context_namespace_is_identifier_safe(self, tmp_path: Path):
        config = ProjectConfiguration(
            name="Task-Manager Pro", description="demo", output_root=tmp_path
        )
        text = render(TemplateKind.AI_CONTEXT, config)
        assert "# GitHub Copilot Instructions for Task-Manager Pro" in text
        assert "rooted at `TaskManagerPro`" in text
        assert "`namespace TaskManagerPro.Api.Services;`" in text

    def test_architecture_doc(self, project_config: ProjectConfiguration):
        text = render(TemplateKind.ARCHITECTURE_DOC, project_config)
        assert text.startswith("# TaskManager Architecture")
        assert "A task management application for teams" in text
        assert "├── TaskManager.Api/" in text
        assert "--project TaskManager.Api" in text

    def test_vscode_settings(self, project_config: ProjectConfiguration):
        data = json.loads(render(TemplateKind.VSCODE_SETTINGS, project_config))
        assert data["dotnet.defaultSolution"] == "${workspaceFolder}/TaskManager.sln"
        assert data["files.eol"] == "\n"
        assert data["editor.tabSize"] == 4

    def test_vscode_launch(self, project_config: ProjectConfiguration):
        data = json.loads(render(TemplateKind.VSCODE_LAUNCH, project_config))
        launch = data["configurations"][0]
        assert launch["preLaunchTask"] == "build"
        assert launch["program"] == (
            "${workspaceFolder}/TaskManager.AppHost/bin/Debug/net10.0/TaskManager.AppHost.dll"
        )
        assert launch["cwd"] == "${workspaceFolder}/TaskManager.AppHost"

    def test_vscode_tasks(self, project_config: ProjectConfiguration):
        data = json.loads(render(TemplateKind.VSCODE_TASKS, project_config))
        labels = [task["label"] for task in data["tasks"]]
        assert labels == ["build", "watch"]
        assert "${workspaceFolder}/TaskManager.sln" in data["tasks"][0]["args"]
        assert data["tasks"][0]["problemMatcher"] == "$msCompile"

    @pytest.mark.parametrize("kind", JSON_KINDS)
    def test_json_valid_with_awkward_name(
        self, kind: TemplateKind, awkward_config: ProjectConfiguration
    ):
        data = json.loads(render(kind, awkward_config))
        assert any('Task "Quoted" Manager' in value for value in _string_values(data))

    def test_settings_round_trips_awkward_name(self, awkward_config: ProjectConfiguration):
        data = json.loads(render(TemplateKind.VSCODE_SETTINGS, awkward_config))
        assert data["dotnet.defaultSolution"] == '${workspaceFolder}/Task "Quoted" Manager.sln'

    def test_markdown_inserts_text_verbatim(self, awkward_config: ProjectConfiguration):
        text = render(TemplateKind.ARCHITECTURE_DOC, awkward_config)
        assert 'with "quotes", back\\slashes and [markup]' in text


class TestTemplateRenderer:
    def test_context(self, tmp_path: Path):
        config = ProjectConfiguration(name="Task-Manager", description="d", output_root=tmp_path)
        assert build_context(config) == {
            "name": "Task-Manager",
            "description": "d",
            "namespace": "TaskManager",
            "name_lower": "task-manager",
        }

    def test_custom_sources(self, project_config: ProjectConfiguration):
        renderer = TemplateRenderer({TemplateKind.EDITOR_CONFIG: "\n\n{{ namespace }}!"})
        assert renderer.render(TemplateKind.EDITOR_CONFIG, project_config) == "TaskManager!\n"

    def test_json_string_filter_registered(self, project_config: ProjectConfiguration):
        renderer = TemplateRenderer(
            {TemplateKind.VSCODE_SETTINGS: '"{{ description | json_string }}"'}
        )
        quoted = project_config.model_copy(update={"description": 'say "hi"\\now'})
        text = renderer.render(TemplateKind.VSCODE_SETTINGS, quoted)
        assert json.loads(text) == 'say "hi"\\now'

    def test_undefined_variable_raises(self, project_config: ProjectConfiguration):
        renderer = TemplateRenderer({TemplateKind.EDITOR_CONFIG: "{{ missing }}"})
        with pytest.raises(UndefinedError):
            renderer.render(TemplateKind.EDITOR_CONFIG, project_config)

    def test_spec_destination_uses_os_path(self, project_config: ProjectConfiguration):
        spec = TemplateSpec(
            TemplateKind.VSCODE_TASKS,
            PurePosixPath(".vscode/tasks.json"),
            OverwritePolicy.ALWAYS_OVERWRITE,
        )
        assert spec.destination(project_config) == (
            project_config.project_root / ".vscode" / "tasks.json"
        )


def _string_values(obj: object) -> list[str]:
    """Every string nested anywhere inside parsed JSON."""
    if isinstance(obj, str):
        return [obj]
    if isinstance(obj, dict):
        return [s for value in obj.values() for s in _string_values(value)]
    if isinstance(obj, list):
        return [s for value in obj for s in _string_values(value)]
    return []
