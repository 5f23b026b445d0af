from skillshelf.files.models import ConflictPolicy, FileEntry, PathRemap, RecoverableHandle
from skillshelf.files.store import FileTreeStore
from skillshelf.files.trash import ITrash, LocalTrash

__all__ = [
    "ConflictPolicy",
    "FileEntry",
    "FileTreeStore",
    "ITrash",
    "LocalTrash",
    "PathRemap",
    "RecoverableHandle",
]
