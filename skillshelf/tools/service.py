from __future__ import annotations

from pathlib import Path
from typing import Any

from skillshelf.errors import NotFoundError, ValidationError
from skillshelf.preferences import (
    CUSTOM_TOOLS_KEY,
    GITHUB_TOKEN_KEY,
    TOOL_ORDER_KEY,
    TOOL_TOGGLES_KEY,
    IPreferenceStore,
)
from skillshelf.skills.models import Root
from skillshelf.tools.builtin import BUILTIN_TOOL_IDS, BUILTIN_TOOLS
from skillshelf.tools.models import ToolDefinition, ToolInfo, ToolKind
from skillshelf.utils import slugify


class ToolsService:
    def __init__(self, preferences: IPreferenceStore, home: Path | None = None) -> None:
        self.preferences = preferences
        self._home = home

    @property
    def home(self) -> Path:
        return self._home or Path.home()

    def expand(self, path: str) -> Path:
        text = path.strip()
        if text == "~":
            return self.home
        if text.startswith("~/"):
            return self.home / text[2:]
        return Path(text).expanduser()

    def custom_tools(self) -> list[ToolDefinition]:
        payload = self.preferences.get(CUSTOM_TOOLS_KEY, [])
        return [ToolDefinition.from_dict(item) for item in payload or []]

    def load_toggles(self) -> dict[str, bool]:
        payload = self.preferences.get(TOOL_TOGGLES_KEY, {})
        return {
            key: value for key, value in (payload or {}).items() if isinstance(value, bool)
        }

    def list_tools(self) -> list[ToolInfo]:
        """Built-in and custom tools, in the persisted order then by name."""
        toggles = self.load_toggles()
        tools = [
            self._to_info(definition, ToolKind.BUILTIN, toggles)
            for definition in BUILTIN_TOOLS
        ]
        tools.extend(
            self._to_info(definition, ToolKind.CUSTOM, toggles)
            for definition in self.custom_tools()
        )

        order = self.preferences.get(TOOL_ORDER_KEY, []) or []
        positions = {tool_id: index for index, tool_id in enumerate(order)}

        def sort_key(tool: ToolInfo) -> tuple[int, int, str]:
            if tool.id in positions:
                return (0, positions[tool.id], "")
            return (1, 0, tool.name)

        tools.sort(key=sort_key)
        return tools

    def enabled_tools(self) -> list[ToolInfo]:
        return [tool for tool in self.list_tools() if tool.enabled]

    def roots(self, include_disabled: bool = False) -> list[Root]:
        tools = self.list_tools() if include_disabled else self.enabled_tools()
        return [tool.as_root() for tool in tools]

    def find_tool(self, tool_id: str) -> ToolInfo:
        for tool in self.list_tools():
            if tool.id == tool_id:
                return tool
        raise NotFoundError(f"Tool not found: {tool_id}")

    def set_enabled(self, tool_id: str, enabled: bool) -> None:
        self.find_tool(tool_id)
        toggles = self.load_toggles()
        toggles[tool_id] = enabled
        self.preferences.set(TOOL_TOGGLES_KEY, toggles)

    def enable(self, tool_id: str) -> None:
        self.set_enabled(tool_id=tool_id, enabled=True)

    def disable(self, tool_id: str) -> None:
        self.set_enabled(tool_id=tool_id, enabled=False)

    def upsert_custom_tool(self, definition: ToolDefinition) -> ToolDefinition:
        tool_id = slugify(definition.id or definition.name)
        if tool_id in BUILTIN_TOOL_IDS:
            raise ValidationError(
                f"Custom tool id conflicts with a built-in integration: {tool_id}"
            )
        if not definition.name.strip():
            raise ValidationError("Custom tool name must not be empty")
        if not definition.skills_path.strip():
            raise ValidationError("Custom tool skills path must not be empty")

        clean = ToolDefinition(
            id=tool_id,
            name=definition.name.strip(),
            config_path=definition.config_path.strip() or definition.skills_path.strip(),
            skills_path=definition.skills_path.strip(),
            cli=definition.cli,
        )
        payload: list[dict[str, Any]] = []
        replaced = False
        for existing in self.custom_tools():
            if existing.id == clean.id:
                payload.append(clean.as_dict())
                replaced = True
            else:
                payload.append(existing.as_dict())
        if not replaced:
            payload.append(clean.as_dict())
        self.preferences.set(CUSTOM_TOOLS_KEY, payload)
        return clean

    def delete_custom_tool(self, tool_id: str) -> None:
        """Forget a custom tool. Skills under its path stay on disk."""
        if tool_id in BUILTIN_TOOL_IDS:
            raise ValidationError(f"Built-in tools cannot be removed: {tool_id}")
        remaining = [tool for tool in self.custom_tools() if tool.id != tool_id]
        self.preferences.set(CUSTOM_TOOLS_KEY, [tool.as_dict() for tool in remaining])
        toggles = self.load_toggles()
        if tool_id in toggles:
            del toggles[tool_id]
            self.preferences.set(TOOL_TOGGLES_KEY, toggles)

    def reorder(self, tool_ids: list[str]) -> None:
        known = {tool.id for tool in self.list_tools()}
        unknown = [tool_id for tool_id in tool_ids if tool_id not in known]
        if unknown:
            raise NotFoundError(f"Tool not found: {', '.join(unknown)}")
        self.preferences.set(TOOL_ORDER_KEY, list(dict.fromkeys(tool_ids)))

    def set_token(self, token: str) -> None:
        cleaned = token.strip()
        if cleaned:
            self.preferences.set(GITHUB_TOKEN_KEY, cleaned)
        else:
            self.preferences.delete(GITHUB_TOKEN_KEY)

    def has_token(self) -> bool:
        token = self.preferences.get(GITHUB_TOKEN_KEY)
        return isinstance(token, str) and bool(token.strip())

    def _to_info(
        self, definition: ToolDefinition, kind: ToolKind, toggles: dict[str, bool]
    ) -> ToolInfo:
        config = self.expand(definition.config_path)
        skills = self.expand(definition.skills_path)
        detected = config.exists() or skills.exists()
        return ToolInfo(
            id=definition.id,
            name=definition.name,
            kind=kind,
            config_path=config,
            skills_path=skills,
            detected=detected,
            enabled=toggles.get(definition.id, detected),
            cli=definition.cli,
        )
