"""Read and mutate the file tree of a single skill directory.

Every path goes through PathGuard before the filesystem is touched, and every
mutation holds the skill directory's lock so concurrent renames and deletes on
the same skill cannot interleave.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from pathlib import Path

from skillshelf.cancel import CancelToken, check_cancelled
from skillshelf.constants import GIT_DIRNAME, SKILL_FILENAME, STAGING_PREFIX
from skillshelf.errors import (
    ConflictError,
    NotEmptyError,
    NotFoundError,
    SkillIOError,
    ValidationError,
)
from skillshelf.files.locks import DEFAULT_LOCKS, PathLockRegistry
from skillshelf.files.models import ConflictPolicy, FileEntry, PathRemap, RecoverableHandle
from skillshelf.files.trash import ITrash
from skillshelf.paths import DEFAULT_GUARD, PathGuard, normalize_relative
from skillshelf.skills.models import Root
from skillshelf.utils import now_stamp, unique_child

logger = logging.getLogger(__name__)


class FileTreeStore:
    def __init__(
        self,
        root: Root,
        skill_dir: Path,
        trash: ITrash,
        guard: PathGuard | None = None,
        locks: PathLockRegistry | None = None,
    ) -> None:
        self._root = root
        self._guard = guard or DEFAULT_GUARD
        self._skill_dir = self._guard.canonical_root(skill_dir)
        self._trash = trash
        self._locks = locks or DEFAULT_LOCKS

    @classmethod
    def open(
        cls,
        root: Root,
        skill_path: str | Path,
        trash: ITrash,
        guard: PathGuard | None = None,
        locks: PathLockRegistry | None = None,
    ) -> "FileTreeStore":
        guard = guard or DEFAULT_GUARD
        skill_dir = guard.resolve(root.path, skill_path)
        if not skill_dir.is_dir():
            raise NotFoundError(f"Skill path does not exist: {skill_path}")
        return cls(root=root, skill_dir=skill_dir, trash=trash, guard=guard, locks=locks)

    @property
    def root(self) -> Root:
        return self._root

    @property
    def skill_dir(self) -> Path:
        return self._skill_dir

    @property
    def manifest_path(self) -> Path:
        return self._skill_dir / SKILL_FILENAME

    def list(self) -> list[FileEntry]:
        entries: list[FileEntry] = []
        with self._locks.hold(self._skill_dir):
            self._walk(self._skill_dir, "", entries)
        return entries

    def exists(self, relative_path: str) -> bool:
        target = self._resolve(relative_path)
        return target.exists() or target.is_symlink()

    def read(self, relative_path: str) -> str:
        data = self.read_bytes(relative_path)
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError:
            raise ValidationError(f"File is not UTF-8 text: {relative_path}")

    def read_bytes(self, relative_path: str) -> bytes:
        target = self._resolve(relative_path)
        if not target.exists():
            raise NotFoundError(f"File does not exist: {relative_path}")
        if not target.is_file():
            raise ValidationError(f"Path is not a file: {relative_path}")
        try:
            return target.read_bytes()
        except OSError as exc:
            raise SkillIOError(f"Failed to read {relative_path}: {exc}") from exc

    def write(self, relative_path: str, content: str | bytes) -> None:
        target = self._resolve(relative_path)
        data = content.encode("utf-8") if isinstance(content, str) else content
        with self._locks.hold(self._skill_dir):
            if target.is_dir():
                raise ConflictError(f"A directory exists at: {relative_path}")
            try:
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_bytes(data)
            except OSError as exc:
                raise SkillIOError(f"Failed to write {relative_path}: {exc}") from exc

    def create_directory(self, relative_path: str) -> None:
        target = self._resolve(relative_path)
        with self._locks.hold(self._skill_dir):
            if target.exists() and not target.is_dir():
                raise ConflictError(
                    f"Path exists and is not a directory: {relative_path}"
                )
            try:
                target.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                raise SkillIOError(
                    f"Failed to create directory {relative_path}: {exc}"
                ) from exc

    def rename(self, old_relative_path: str, new_relative_path: str) -> PathRemap:
        source = self._resolve(old_relative_path)
        destination = self._resolve(new_relative_path)
        old_key = self._relative(source)
        new_key = self._relative(destination)

        with self._locks.hold(self._skill_dir):
            if not source.exists() and not source.is_symlink():
                raise NotFoundError(f"Path does not exist: {old_relative_path}")
            if destination.exists() or destination.is_symlink():
                raise ConflictError(f"Target path already exists: {new_relative_path}")
            if source.is_dir() and new_key.startswith(f"{old_key}/"):
                raise ValidationError(
                    f"Cannot move a directory into itself: {old_relative_path}"
                )
            try:
                destination.parent.mkdir(parents=True, exist_ok=True)
                os.rename(source, destination)
            except OSError as exc:
                raise SkillIOError(
                    f"Failed to rename {old_relative_path} to {new_relative_path}: {exc}"
                ) from exc
        logger.info("Renamed %s -> %s in %s", old_key, new_key, self._skill_dir)
        return PathRemap(old=old_key, new=new_key)

    def move(self, relative_path: str, target_directory: str) -> PathRemap:
        name = normalize_relative(relative_path).rsplit("/", 1)[-1]
        directory = normalize_relative(target_directory)
        new_path = f"{directory}/{name}" if directory else name
        return self.rename(relative_path, new_path)

    def delete(self, relative_path: str) -> RecoverableHandle:
        target = self._resolve(relative_path)
        with self._locks.hold(self._skill_dir):
            if not target.exists() and not target.is_symlink():
                raise NotFoundError(f"Path does not exist: {relative_path}")
            if target.is_dir() and not target.is_symlink():
                raise ValidationError(
                    f"Path is a directory, delete its entries and use "
                    f"delete_empty_directory: {relative_path}"
                )
            return self._trash.move_to_recoverable(target)

    def delete_empty_directory(self, relative_path: str) -> RecoverableHandle:
        target = self._resolve(relative_path)
        with self._locks.hold(self._skill_dir):
            if not target.exists():
                raise NotFoundError(f"Path does not exist: {relative_path}")
            if target.is_symlink() or not target.is_dir():
                raise ValidationError(f"Path is not a directory: {relative_path}")
            try:
                with os.scandir(target) as it:
                    has_children = next(it, None) is not None
            except OSError as exc:
                raise SkillIOError(f"Failed to inspect {relative_path}: {exc}") from exc
            if has_children:
                raise NotEmptyError(relative_path)
            return self._trash.move_to_recoverable(target)

    def copy_into(
        self,
        destination_root: Root,
        destination_name: str | None,
        conflict_policy: ConflictPolicy,
        cancel: CancelToken | None = None,
    ) -> Path:
        """Copy this skill's whole tree into ``destination_root``.

        The tree is staged in a hidden sibling inside the destination root and
        renamed into place only after the copy completed. Cancellation is
        honoured until that final step.
        """
        if not isinstance(conflict_policy, ConflictPolicy):
            raise ValidationError(f"Unknown conflict policy: {conflict_policy!r}")

        name = normalize_relative(destination_name or self._skill_dir.name)
        if not name or "/" in name:
            raise ValidationError(f"Invalid skill directory name: {destination_name}")

        dest_root = self._guard.canonical_root(destination_root.path)
        try:
            dest_root.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise SkillIOError(f"Failed to create root {dest_root}: {exc}") from exc
        requested = self._guard.resolve(dest_root, name)

        with self._locks.hold(self._skill_dir, requested):
            destination = requested
            if conflict_policy == ConflictPolicy.TIMESTAMPED_COPY and (
                destination.exists() or destination.is_symlink()
            ):
                destination = unique_child(dest_root, f"{name}-{now_stamp()}")
            with self._locks.hold(destination):
                self._copy_locked(destination, dest_root, cancel)

        logger.info("Copied skill %s -> %s", self._skill_dir, destination)
        return destination

    def _copy_locked(
        self, destination: Path, dest_root: Path, cancel: CancelToken | None
    ) -> None:
        if _overlaps(destination, self._skill_dir):
            raise ValidationError(f"Cannot copy a skill onto itself: {destination}")
        try:
            staging = Path(tempfile.mkdtemp(prefix=STAGING_PREFIX, dir=dest_root))
        except OSError as exc:
            raise SkillIOError(f"Failed to stage copy in {dest_root}: {exc}") from exc
        try:
            payload = staging / "tree"
            self._copy_tree(payload, cancel)
            check_cancelled(cancel)
            self._commit(payload, destination)
        except OSError as exc:
            raise SkillIOError(f"Failed to copy skill to {destination}: {exc}") from exc
        finally:
            shutil.rmtree(staging, ignore_errors=True)

    def _commit(self, payload: Path, destination: Path) -> None:
        replaced: RecoverableHandle | None = None
        if destination.exists() or destination.is_symlink():
            replaced = self._trash.move_to_recoverable(destination)
        try:
            os.rename(payload, destination)
        except OSError:
            if replaced is not None:
                self._trash.restore(replaced)
            raise

    def _copy_tree(self, target: Path, cancel: CancelToken | None) -> None:
        def copier(src: str, dst: str) -> str:
            check_cancelled(cancel)
            return shutil.copy2(src, dst)

        shutil.copytree(
            self._skill_dir,
            target,
            ignore=_ignore_unsafe,
            copy_function=copier,
        )

    def _walk(self, directory: Path, prefix: str, out: list[FileEntry]) -> None:
        try:
            with os.scandir(directory) as it:
                children = [entry for entry in it if not entry.name.startswith(".")]
        except OSError as exc:
            raise SkillIOError(f"Failed to list {directory}: {exc}") from exc

        children.sort(key=lambda entry: (not entry.is_dir(follow_symlinks=False), entry.name))
        for child in children:
            relative = f"{prefix}/{child.name}" if prefix else child.name
            is_dir = child.is_dir(follow_symlinks=False)
            out.append(FileEntry(relative_path=relative, is_dir=is_dir))
            if is_dir:
                self._walk(Path(child.path), relative, out)

    def _resolve(self, relative_path: str) -> Path:
        return self._guard.resolve(self._skill_dir, relative_path)

    def _relative(self, path: Path) -> str:
        return path.relative_to(self._skill_dir).as_posix()


def _ignore_unsafe(directory: str, names: list[str]) -> set[str]:
    skipped: set[str] = set()
    for name in names:
        if name == GIT_DIRNAME or name.startswith(STAGING_PREFIX):
            skipped.add(name)
            continue
        if os.path.islink(os.path.join(directory, name)):
            logger.debug("Not copying symlink %s/%s", directory, name)
            skipped.add(name)
    return skipped


def _overlaps(left: Path, right: Path) -> bool:
    left_resolved = left.resolve(strict=False)
    right_resolved = right.resolve(strict=False)
    return (
        left_resolved == right_resolved
        or left_resolved in right_resolved.parents
        or right_resolved in left_resolved.parents
    )
