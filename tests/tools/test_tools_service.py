from pathlib import Path

import pytest

from skillshelf.errors import NotFoundError, ValidationError
from skillshelf.preferences import MemoryPreferenceStore
from skillshelf.tools.builtin import BUILTIN_TOOLS
from skillshelf.tools.models import ToolDefinition, ToolKind
from skillshelf.tools.service import ToolsService


@pytest.fixture
def service(tmp_path: Path) -> ToolsService:
    return ToolsService(MemoryPreferenceStore(), home=tmp_path)


def test_builtins_listed_and_detection_drives_default(service: ToolsService, tmp_path: Path) -> None:
    (tmp_path / ".cursor").mkdir()

    tools = {tool.id: tool for tool in service.list_tools()}

    assert len(tools) == len(BUILTIN_TOOLS)
    assert tools["cursor"].detected is True
    assert tools["cursor"].enabled is True
    assert tools["cursor"].skills_path == tmp_path / ".cursor" / "skills"
    assert tools["codex"].detected is False
    assert tools["codex"].enabled is False
    assert [root.id for root in service.roots()] == ["cursor"]


def test_toggle_overrides_detection(service: ToolsService, tmp_path: Path) -> None:
    (tmp_path / ".cursor").mkdir()

    service.disable("cursor")
    service.enable("codex")

    assert [root.id for root in service.roots()] == ["codex"]
    with pytest.raises(NotFoundError):
        service.enable("nope")


def test_default_order_is_by_name(service: ToolsService) -> None:
    names = [tool.name for tool in service.list_tools()]

    assert names == sorted(names)


def test_reorder_puts_listed_tools_first(service: ToolsService) -> None:
    service.reorder(["windsurf", "amp"])

    tools = service.list_tools()

    assert [tool.id for tool in tools[:2]] == ["windsurf", "amp"]
    rest = [tool.name for tool in tools[2:]]
    assert rest == sorted(rest)
    with pytest.raises(NotFoundError):
        service.reorder(["ghost"])


def test_custom_tool_lifecycle(service: ToolsService, tmp_path: Path) -> None:
    skills = tmp_path / "my-agent" / "skills"
    skills.mkdir(parents=True)
    (skills / "keep").mkdir()

    saved = service.upsert_custom_tool(
        ToolDefinition(id="My Agent", name="My Agent", config_path="", skills_path=str(skills))
    )

    assert saved.id == "my-agent"
    tool = service.find_tool("my-agent")
    assert tool.kind == ToolKind.CUSTOM
    assert tool.enabled is True

    service.upsert_custom_tool(
        ToolDefinition(id="my-agent", name="Renamed", config_path="", skills_path=str(skills))
    )
    assert service.find_tool("my-agent").name == "Renamed"
    assert len([t for t in service.list_tools() if t.kind == ToolKind.CUSTOM]) == 1

    service.disable("my-agent")
    service.delete_custom_tool("my-agent")

    with pytest.raises(NotFoundError):
        service.find_tool("my-agent")
    assert "my-agent" not in service.load_toggles()
    assert (skills / "keep").is_dir()


def test_custom_tool_cannot_shadow_builtin(service: ToolsService) -> None:
    with pytest.raises(ValidationError):
        service.upsert_custom_tool(
            ToolDefinition(id="Cursor", name="Fake", config_path="", skills_path="~/x")
        )


def test_home_relative_custom_paths_expand(service: ToolsService, tmp_path: Path) -> None:
    service.upsert_custom_tool(
        ToolDefinition(id="x", name="X", config_path="~/.x", skills_path="~/.x/skills")
    )

    assert service.find_tool("x").skills_path == tmp_path / ".x" / "skills"


def test_token_is_trimmed_and_cleared(service: ToolsService) -> None:
    assert service.has_token() is False
    service.set_token("  ghp_abc  ")
    assert service.has_token() is True
    assert service.preferences.get("github_token") == "ghp_abc"
    service.set_token("   ")
    assert service.has_token() is False
