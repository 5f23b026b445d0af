"""Bring a skill from a remote repository (or another root) into a root.

The remote snapshot lives in a temporary directory for the duration of one
call. The copy into the target root is staged by FileTreeStore.copy_into, so
a failed or cancelled import never leaves a partial skill behind.
"""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path
from typing import Callable, Sequence

from skillshelf.cancel import CancelToken, check_cancelled
from skillshelf.constants import ALLOWED_REMOTE_HOSTS, ALLOWED_REMOTE_SCHEMES
from skillshelf.errors import ImportCancelledError, ValidationError
from skillshelf.files.locks import PathLockRegistry
from skillshelf.files.models import ConflictPolicy
from skillshelf.files.store import FileTreeStore
from skillshelf.files.trash import ITrash
from skillshelf.imports.locate import (
    find_skill_dirs,
    locate_skill_dir,
    locate_skill_dir_by_name,
)
from skillshelf.imports.models import ImportRequest, RemoteLocator
from skillshelf.imports.snapshot import GitSnapshotFetcher, ISnapshotFetcher
from skillshelf.paths import DEFAULT_GUARD, PathGuard
from skillshelf.skills.models import Root, SkillRecord
from skillshelf.skills.parser import parse_skill_dir
from skillshelf.utils import slugify

logger = logging.getLogger(__name__)

SkillChooser = Callable[[Sequence[Path], Path], "Path | None"]


class ImportPipeline:
    def __init__(
        self,
        trash: ITrash,
        fetcher: ISnapshotFetcher | None = None,
        guard: PathGuard | None = None,
        locks: PathLockRegistry | None = None,
        allowed_schemes: tuple[str, ...] = ALLOWED_REMOTE_SCHEMES,
        allowed_hosts: tuple[str, ...] = ALLOWED_REMOTE_HOSTS,
    ) -> None:
        self.trash = trash
        self.fetcher = fetcher or GitSnapshotFetcher()
        self.guard = guard or DEFAULT_GUARD
        self.locks = locks
        self.allowed_schemes = allowed_schemes
        self.allowed_hosts = allowed_hosts

    def validate_locator(self, locator: str) -> RemoteLocator:
        return RemoteLocator.parse(
            locator,
            allowed_schemes=self.allowed_schemes,
            allowed_hosts=self.allowed_hosts,
        )

    def import_skill(
        self,
        request: ImportRequest,
        cancel: CancelToken | None = None,
        choose: SkillChooser | None = None,
    ) -> SkillRecord:
        """Fetch ``request.locator`` and copy the located skill into the target root.

        ``choose`` is consulted only when no sub path is given and the snapshot
        holds more than one skill; returning None cancels the import.
        """
        _require_policy(request.conflict_policy)
        remote = self.validate_locator(request.locator)
        check_cancelled(cancel)

        with tempfile.TemporaryDirectory(prefix="skillshelf-import-") as tmp:
            snapshot = self._fetch(remote, Path(tmp))
            check_cancelled(cancel)
            if request.sub_path is None and choose is not None:
                located = self._choose(snapshot, choose)
            else:
                located = locate_skill_dir(snapshot, request.sub_path, guard=self.guard)
            return self._install(
                snapshot,
                located,
                remote,
                request.target_root,
                request.conflict_policy,
                cancel,
            )

    def install_from_registry(
        self,
        source: str,
        skill_id: str,
        target_root: Root,
        conflict_policy: ConflictPolicy,
        cancel: CancelToken | None = None,
    ) -> SkillRecord:
        """Install ``skill_id`` from an ``owner/repo`` registry source."""
        _require_policy(conflict_policy)
        remote = self.validate_locator(RemoteLocator.registry_url(source))
        check_cancelled(cancel)

        with tempfile.TemporaryDirectory(prefix="skillshelf-install-") as tmp:
            snapshot = self._fetch(remote, Path(tmp))
            check_cancelled(cancel)
            located = locate_skill_dir_by_name(snapshot, skill_id)
            if located is None:
                located = locate_skill_dir(snapshot, guard=self.guard)
            return self._install(
                snapshot, located, remote, target_root, conflict_policy, cancel
            )

    def copy_skill(
        self,
        source_root: Root,
        source_skill_path: str | Path,
        target_root: Root,
        conflict_policy: ConflictPolicy,
        cancel: CancelToken | None = None,
    ) -> SkillRecord:
        _require_policy(conflict_policy)
        store = FileTreeStore.open(
            source_root, source_skill_path, self.trash, guard=self.guard, locks=self.locks
        )
        destination = store.copy_into(target_root, None, conflict_policy, cancel)
        logger.info(
            "Copied skill %s from %s to %s", store.skill_dir.name, source_root.id, target_root.id
        )
        return parse_skill_dir(destination, target_root.id)

    def _fetch(self, remote: RemoteLocator, workdir: Path) -> Path:
        logger.info("Fetching %s", remote.url)
        snapshot = self.fetcher.fetch(remote.url, workdir / remote.repo)
        return self.guard.canonical_root(snapshot)

    def _choose(self, snapshot: Path, choose: SkillChooser) -> Path:
        candidates = find_skill_dirs(snapshot)
        if not candidates:
            return locate_skill_dir(snapshot, guard=self.guard)
        if len(candidates) == 1:
            return candidates[0]
        picked = choose(candidates, snapshot)
        if picked is None:
            raise ImportCancelledError()
        return self.guard.resolve(snapshot, picked, allow_root=True)

    def _install(
        self,
        snapshot: Path,
        located: Path,
        remote: RemoteLocator,
        target_root: Root,
        conflict_policy: ConflictPolicy,
        cancel: CancelToken | None,
    ) -> SkillRecord:
        name = slugify(remote.repo if located == snapshot else located.name)
        store = FileTreeStore(
            root=Root(id="snapshot", path=snapshot),
            skill_dir=located,
            trash=self.trash,
            guard=self.guard,
            locks=self.locks,
        )
        destination = store.copy_into(target_root, name, conflict_policy, cancel)
        logger.info("Imported %s into %s as %s", remote.url, target_root.id, destination.name)
        return parse_skill_dir(destination, target_root.id)


def _require_policy(conflict_policy: ConflictPolicy) -> None:
    if not isinstance(conflict_policy, ConflictPolicy):
        raise ValidationError(f"Unknown conflict policy: {conflict_policy!r}")
