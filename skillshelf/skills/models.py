"""Skill data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class Root:
    id: str
    path: Path
    name: str = ""

    @property
    def label(self) -> str:
        return self.name or self.id


@dataclass(frozen=True)
class SkillMetadata:
    name: str = ""
    description: str = ""
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class SkillRecord:
    name: str
    description: str
    path: Path
    root_id: str
    updated_at: float

    @property
    def id(self) -> str:
        return f"{self.root_id}:{self.path.name}"

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "path": str(self.path),
            "root": self.root_id,
            "updated_at": self.updated_at,
        }


@dataclass(frozen=True)
class SkillGroup:
    key: str
    primary: SkillRecord
    members: tuple[SkillRecord, ...]
    root_ids: tuple[str, ...]
    has_description_diff: bool

    @property
    def name(self) -> str:
        return self.primary.name

    def as_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.primary.description,
            "path": str(self.primary.path),
            "roots": list(self.root_ids),
            "has_description_diff": self.has_description_diff,
            "variants": [member.as_dict() for member in self.members],
        }


@dataclass(frozen=True)
class DiscoveryResult:
    groups: list[SkillGroup]
    warnings: list[str]


@dataclass(frozen=True)
class DiscoveredSkillsRoot:
    path: Path
    skill_count: int
