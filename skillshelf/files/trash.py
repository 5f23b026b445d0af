"""Recoverable deletion.

Nothing in the application deletes user files irreversibly; entries are moved
into a holding area from which they can be restored.
"""

from __future__ import annotations

import logging
import shutil
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path

from skillshelf.errors import ConflictError, NotFoundError, SkillIOError
from skillshelf.files.models import RecoverableHandle
from skillshelf.utils import now_stamp, unique_child

logger = logging.getLogger(__name__)


class ITrash(ABC):
    @abstractmethod
    def move_to_recoverable(self, path: Path) -> RecoverableHandle:
        """Move ``path`` out of the way without destroying it."""

    @abstractmethod
    def restore(self, handle: RecoverableHandle) -> Path:
        """Put a trashed entry back at its original location."""


class LocalTrash(ITrash):
    """Timestamped holding directory, kept outside every skills root."""

    def __init__(self, trash_dir: Path) -> None:
        self._trash_dir = trash_dir

    @property
    def trash_dir(self) -> Path:
        return self._trash_dir

    def move_to_recoverable(self, path: Path) -> RecoverableHandle:
        if not path.exists() and not path.is_symlink():
            raise NotFoundError(f"Path does not exist: {path}")
        try:
            self._trash_dir.mkdir(parents=True, exist_ok=True)
            target = unique_child(self._trash_dir, f"{now_stamp()}-{path.name}")
            shutil.move(str(path), str(target))
        except OSError as exc:
            raise SkillIOError(f"Failed to move to trash: {path} ({exc})") from exc
        logger.info("Moved %s to trash at %s", path, target)
        return RecoverableHandle(
            original_path=path, trashed_path=target, trashed_at=datetime.now()
        )

    def restore(self, handle: RecoverableHandle) -> Path:
        if not handle.trashed_path.exists():
            raise NotFoundError(f"Trashed entry is gone: {handle.trashed_path}")
        if handle.original_path.exists() or handle.original_path.is_symlink():
            raise ConflictError(
                f"Cannot restore, path already exists: {handle.original_path}"
            )
        try:
            handle.original_path.parent.mkdir(parents=True, exist_ok=True)
            shutil.move(str(handle.trashed_path), str(handle.original_path))
        except OSError as exc:
            raise SkillIOError(
                f"Failed to restore {handle.original_path} ({exc})"
            ) from exc
        logger.info("Restored %s from trash", handle.original_path)
        return handle.original_path

    def entries(self) -> list[Path]:
        if not self._trash_dir.exists():
            return []
        return sorted(self._trash_dir.iterdir(), key=lambda item: item.name)
