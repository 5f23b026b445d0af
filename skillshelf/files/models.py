from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path


class ConflictPolicy(str, Enum):
    OVERWRITE = "overwrite"
    TIMESTAMPED_COPY = "timestamped-copy"


@dataclass(frozen=True)
class FileEntry:
    relative_path: str
    is_dir: bool

    @property
    def name(self) -> str:
        return self.relative_path.rsplit("/", 1)[-1]

    @property
    def parent(self) -> str:
        head, sep, _ = self.relative_path.rpartition("/")
        return head if sep else ""

    def as_dict(self) -> dict[str, object]:
        return {"relative_path": self.relative_path, "is_dir": self.is_dir}


@dataclass(frozen=True)
class PathRemap:
    """Prefix substitution produced by a rename.

    ``apply`` is pure: the renamed path itself and anything below it get the
    new prefix, every other path is returned unchanged.
    """

    old: str
    new: str

    def apply(self, path: str) -> str:
        if path == self.old:
            return self.new
        prefix = f"{self.old}/"
        if path.startswith(prefix):
            return f"{self.new}/{path[len(prefix):]}"
        return path

    def __call__(self, path: str) -> str:
        return self.apply(path)


@dataclass(frozen=True)
class RecoverableHandle:
    original_path: Path
    trashed_path: Path
    trashed_at: datetime
