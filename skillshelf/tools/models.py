from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from skillshelf.skills.models import Root


class ToolKind(str, Enum):
    BUILTIN = "builtin"
    CUSTOM = "custom"


@dataclass(frozen=True)
class ToolDefinition:
    id: str
    name: str
    config_path: str
    skills_path: str
    cli: bool = False

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "config_path": self.config_path,
            "skills_path": self.skills_path,
            "cli": self.cli,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "ToolDefinition":
        return cls(
            id=str(payload["id"]),
            name=str(payload["name"]),
            config_path=str(payload.get("config_path") or payload["skills_path"]),
            skills_path=str(payload["skills_path"]),
            cli=bool(payload.get("cli", False)),
        )


@dataclass(frozen=True)
class ToolInfo:
    id: str
    name: str
    kind: ToolKind
    config_path: Path
    skills_path: Path
    detected: bool
    enabled: bool
    cli: bool = False

    def as_root(self) -> Root:
        return Root(id=self.id, path=self.skills_path, name=self.name)

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "kind": self.kind.value,
            "config_path": str(self.config_path),
            "skills_path": str(self.skills_path),
            "detected": self.detected,
            "enabled": self.enabled,
            "cli": self.cli,
        }


@dataclass(frozen=True)
class SourceInfo:
    id: str
    name: str
    repo_url: str
    description: str
    tags: tuple[str, ...] = ()
