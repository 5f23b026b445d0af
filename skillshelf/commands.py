"""Command-style entry points used by the CLI and any embedding UI.

Callers pass skill paths they associate with one of the known roots. Every
call re-checks that association with PathGuard before touching the disk.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from skillshelf.cancel import CancelToken
from skillshelf.constants import SKILL_FILENAME
from skillshelf.errors import ConflictError, InvalidPathError, NotFoundError, SkillIOError
from skillshelf.files.locks import DEFAULT_LOCKS, PathLockRegistry
from skillshelf.files.models import ConflictPolicy, FileEntry, PathRemap, RecoverableHandle
from skillshelf.files.store import FileTreeStore
from skillshelf.files.trash import ITrash
from skillshelf.imports.models import ImportRequest
from skillshelf.imports.service import ImportPipeline, SkillChooser
from skillshelf.imports.snapshot import ISnapshotFetcher
from skillshelf.paths import DEFAULT_GUARD, PathGuard
from skillshelf.skills.models import DiscoveryResult, Root, SkillRecord
from skillshelf.skills.parser import parse_manifest, parse_skill_dir
from skillshelf.skills.registry import SkillRegistry
from skillshelf.utils import slugify, unique_child

logger = logging.getLogger(__name__)


class SkillCommands:
    def __init__(
        self,
        roots: Sequence[Root],
        trash: ITrash,
        fetcher: ISnapshotFetcher | None = None,
        guard: PathGuard | None = None,
        locks: PathLockRegistry | None = None,
    ) -> None:
        self.roots = list(roots)
        self.trash = trash
        self.guard = guard or DEFAULT_GUARD
        self.locks = locks or DEFAULT_LOCKS
        self.registry = SkillRegistry(guard=self.guard)
        self.pipeline = ImportPipeline(
            trash=trash, fetcher=fetcher, guard=self.guard, locks=self.locks
        )

    def root(self, root_id: str) -> Root:
        for root in self.roots:
            if root.id == root_id:
                return root
        raise NotFoundError(f"Unknown root: {root_id}")

    def owning_root(self, skill_path: str | Path) -> Root:
        """The known root that strictly contains ``skill_path``."""
        for root in self.roots:
            if self.guard.contains(root.path, skill_path):
                return root
        raise InvalidPathError(skill_path, "not inside any known root")

    def store(self, skill_path: str | Path) -> FileTreeStore:
        return FileTreeStore.open(
            self.owning_root(skill_path),
            skill_path,
            self.trash,
            guard=self.guard,
            locks=self.locks,
        )

    def list_skills(self) -> DiscoveryResult:
        return self.registry.discover(self.roots)

    def list_entries(self, skill_path: str | Path) -> list[FileEntry]:
        return self.store(skill_path).list()

    def read_entry(self, skill_path: str | Path, relative_path: str) -> str:
        return self.store(skill_path).read(relative_path)

    def write_entry(self, skill_path: str | Path, relative_path: str, text: str) -> None:
        self.store(skill_path).write(relative_path, text)

    def create_directory(self, skill_path: str | Path, relative_path: str) -> None:
        self.store(skill_path).create_directory(relative_path)

    def rename_entry(
        self, skill_path: str | Path, old_relative_path: str, new_relative_path: str
    ) -> PathRemap:
        return self.store(skill_path).rename(old_relative_path, new_relative_path)

    def delete_entry(self, skill_path: str | Path, relative_path: str) -> RecoverableHandle:
        return self.store(skill_path).delete(relative_path)

    def delete_empty_directory(
        self, skill_path: str | Path, relative_path: str
    ) -> RecoverableHandle:
        return self.store(skill_path).delete_empty_directory(relative_path)

    def import_skill(
        self,
        locator: str,
        target_root_id: str,
        conflict_policy: ConflictPolicy,
        sub_path: str | None = None,
        cancel: CancelToken | None = None,
        choose: SkillChooser | None = None,
    ) -> SkillRecord:
        request = ImportRequest(
            locator=locator,
            target_root=self.root(target_root_id),
            conflict_policy=conflict_policy,
            sub_path=sub_path,
        )
        return self.pipeline.import_skill(request, cancel=cancel, choose=choose)

    def install_from_registry(
        self,
        source: str,
        skill_id: str,
        target_root_id: str,
        conflict_policy: ConflictPolicy,
        cancel: CancelToken | None = None,
    ) -> SkillRecord:
        return self.pipeline.install_from_registry(
            source, skill_id, self.root(target_root_id), conflict_policy, cancel=cancel
        )

    def copy_skill(
        self,
        source_skill_path: str | Path,
        target_root_id: str,
        conflict_policy: ConflictPolicy,
        cancel: CancelToken | None = None,
    ) -> SkillRecord:
        return self.pipeline.copy_skill(
            self.owning_root(source_skill_path),
            source_skill_path,
            self.root(target_root_id),
            conflict_policy,
            cancel=cancel,
        )

    def read_manifest(self, skill_path: str | Path) -> str:
        return self.store(skill_path).read(SKILL_FILENAME)

    def show_skill(self, skill_path: str | Path) -> SkillRecord:
        store = self.store(skill_path)
        return parse_skill_dir(store.skill_dir, store.root.id)

    def create_skill(self, target_root_id: str, content: str) -> SkillRecord:
        """Create a new skill directory named after the manifest's name."""
        root = self.root(target_root_id)
        metadata = parse_manifest(content, fallback_name="skill")
        root_dir = self.guard.canonical_root(root.path)
        with self.locks.hold(root_dir):
            try:
                root_dir.mkdir(parents=True, exist_ok=True)
                skill_dir = self.guard.resolve(
                    root_dir, unique_child(root_dir, slugify(metadata.name)).name
                )
                skill_dir.mkdir()
            except FileExistsError as exc:
                raise ConflictError(f"Skill directory already exists: {exc.filename}") from exc
            except OSError as exc:
                raise SkillIOError(f"Failed to create skill in {root_dir}: {exc}") from exc
            store = FileTreeStore(
                root=root, skill_dir=skill_dir, trash=self.trash, guard=self.guard, locks=self.locks
            )
            store.write(SKILL_FILENAME, content)
        logger.info("Created skill %s in %s", skill_dir.name, root.id)
        return parse_skill_dir(skill_dir, root.id)

    def delete_skill(self, skill_path: str | Path) -> RecoverableHandle:
        """Move a whole skill directory to the trash."""
        store = self.store(skill_path)
        with self.locks.hold(store.skill_dir):
            return self.trash.move_to_recoverable(store.skill_dir)
