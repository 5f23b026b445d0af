"""Find the skill directory inside a fetched snapshot."""

from __future__ import annotations

import os
from collections import deque
from pathlib import Path

from skillshelf.constants import SCAN_IGNORED_DIRS, SKILL_FILENAME, SNAPSHOT_SCAN_MAX_DEPTH
from skillshelf.errors import NotFoundError
from skillshelf.paths import DEFAULT_GUARD, PathGuard


def has_manifest(directory: Path) -> bool:
    return (directory / SKILL_FILENAME).is_file()


def find_skill_dirs(
    snapshot_root: Path, max_depth: int = SNAPSHOT_SCAN_MAX_DEPTH
) -> list[Path]:
    """Breadth-first list of directories holding a manifest, shallowest first."""
    found: list[Path] = []
    queue: deque[tuple[Path, int]] = deque([(snapshot_root, 0)])
    while queue:
        directory, depth = queue.popleft()
        if has_manifest(directory):
            found.append(directory)
        if depth >= max_depth:
            continue
        try:
            with os.scandir(directory) as it:
                names = sorted(
                    entry.name
                    for entry in it
                    if entry.is_dir(follow_symlinks=False)
                    and not entry.name.startswith(".")
                    and entry.name.lower() not in SCAN_IGNORED_DIRS
                )
        except OSError:
            continue
        for name in names:
            queue.append((directory / name, depth + 1))
    return found


def locate_skill_dir(
    snapshot_root: Path,
    sub_path: str | None = None,
    guard: PathGuard | None = None,
) -> Path:
    guard = guard or DEFAULT_GUARD
    if sub_path is not None and sub_path.strip():
        candidate = guard.resolve(snapshot_root, sub_path, allow_root=True)
        if not candidate.is_dir() or not has_manifest(candidate):
            raise NotFoundError(f"No {SKILL_FILENAME} found at '{sub_path}'")
        return candidate

    candidates = find_skill_dirs(snapshot_root)
    if not candidates:
        raise NotFoundError(f"No {SKILL_FILENAME} found in repository")
    return candidates[0]


def locate_skill_dir_by_name(snapshot_root: Path, name: str) -> Path | None:
    wanted = name.strip().lower()
    for candidate in find_skill_dirs(snapshot_root):
        if candidate.name.lower() == wanted:
            return candidate
    return None
