"""Discover skills under tool roots and merge same-named skills into groups."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, Sequence

from skillshelf.constants import ROOT_SCAN_MAX_DEPTH, SCAN_IGNORED_DIRS, SKILL_FILENAME
from skillshelf.errors import InvalidPathError, ValidationError
from skillshelf.paths import DEFAULT_GUARD, PathGuard
from skillshelf.skills.models import (
    DiscoveredSkillsRoot,
    DiscoveryResult,
    Root,
    SkillGroup,
    SkillRecord,
)
from skillshelf.skills.parser import parse_skill_dir

logger = logging.getLogger(__name__)


def group_key(name: str) -> str:
    return name.strip().lower()


class SkillRegistry:
    def __init__(self, guard: PathGuard | None = None) -> None:
        self._guard = guard or DEFAULT_GUARD

    def discover(self, roots: Sequence[Root]) -> DiscoveryResult:
        seen_ids: set[str] = set()
        for root in roots:
            if root.id in seen_ids:
                raise ValidationError(f"Duplicate root id: {root.id}")
            seen_ids.add(root.id)

        warnings: list[str] = []
        records: list[SkillRecord] = []
        for root in roots:
            records.extend(self.collect(root, warnings))
        return DiscoveryResult(groups=merge_records(records), warnings=warnings)

    def collect(self, root: Root, warnings: list[str]) -> list[SkillRecord]:
        """Return the skill records directly under one root.

        Enumeration problems are appended to ``warnings`` and never raised.
        """
        try:
            if not root.path.exists():
                return []
            canonical_root = self._guard.canonical_root(root.path)
            with os.scandir(canonical_root) as it:
                children = [entry for entry in it]
        except (OSError, InvalidPathError) as exc:
            self._warn(warnings, f"Skipped root '{root.id}' ({root.path}): {exc}")
            return []

        records: list[SkillRecord] = []
        for entry in children:
            if entry.name.startswith("."):
                continue
            try:
                if not entry.is_dir():
                    continue
                skill_dir = self._guard.resolve(canonical_root, entry.name)
                if not (skill_dir / SKILL_FILENAME).is_file():
                    continue
                records.append(parse_skill_dir(skill_dir, root.id))
            except InvalidPathError as exc:
                self._warn(warnings, f"Skipped skill in root '{root.id}': {exc}")
            except OSError as exc:
                self._warn(
                    warnings,
                    f"Skipped unreadable skill '{entry.name}' in root '{root.id}': {exc}",
                )
        return records

    @staticmethod
    def _warn(warnings: list[str], message: str) -> None:
        logger.warning(message)
        warnings.append(message)


def merge_records(records: Iterable[SkillRecord]) -> list[SkillGroup]:
    buckets: dict[str, list[SkillRecord]] = {}
    for record in records:
        buckets.setdefault(group_key(record.name), []).append(record)

    groups: list[SkillGroup] = []
    for key, members in buckets.items():
        ordered = tuple(sorted(members, key=lambda item: (item.root_id, str(item.path))))
        root_ids: list[str] = []
        for member in ordered:
            if member.root_id not in root_ids:
                root_ids.append(member.root_id)
        descriptions = {member.description.strip() for member in ordered}
        groups.append(
            SkillGroup(
                key=key,
                primary=ordered[0],
                members=ordered,
                root_ids=tuple(root_ids),
                has_description_diff=len(descriptions) > 1,
            )
        )
    return groups


def discover_skill_roots(
    scan_root: Path, max_depth: int = ROOT_SCAN_MAX_DEPTH
) -> list[DiscoveredSkillsRoot]:
    """Find directories under ``scan_root`` that look like a tool's skills path."""
    if not scan_root.is_dir():
        return []

    discovered: dict[Path, int] = {}
    stack: list[tuple[Path, int]] = [(scan_root, 0)]
    while stack:
        directory, depth = stack.pop()
        try:
            with os.scandir(directory) as it:
                children = [entry for entry in it if entry.is_dir(follow_symlinks=False)]
        except OSError:
            continue

        child_skills = 0
        for entry in children:
            if entry.name.startswith("."):
                continue
            child = Path(entry.path)
            if (child / SKILL_FILENAME).is_file():
                child_skills += 1
            if depth < max_depth and entry.name.lower() not in SCAN_IGNORED_DIRS:
                stack.append((child, depth + 1))

        if child_skills or (directory / SKILL_FILENAME).is_file():
            count = child_skills or 1
            discovered[directory] = max(discovered.get(directory, 0), count)

    result = [
        DiscoveredSkillsRoot(path=path, skill_count=count)
        for path, count in discovered.items()
    ]
    result.sort(key=lambda item: (-item.skill_count, len(str(item.path)), str(item.path)))
    return result
