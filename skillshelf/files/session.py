"""Caller-side editing state kept alongside a FileTreeStore.

Buffers, saved snapshots, dirty markers, collapsed folders and the active file
are all keyed by relative path. A rename is applied to every one of them with
the same PathRemap, so no structure can drift out of sync with the tree.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable, Mapping, TypeVar

from skillshelf.errors import UnsavedChangesError
from skillshelf.files.models import FileEntry, PathRemap
from skillshelf.files.store import FileTreeStore

V = TypeVar("V")


class FileState(str, Enum):
    CLEAN = "clean"
    DIRTY = "dirty"


class SwitchResolution(str, Enum):
    SAVE = "save"
    DISCARD = "discard"
    CANCEL = "cancel"


def remap_path(path: str, remap: PathRemap) -> str:
    return remap.apply(path)


def remap_keys(mapping: Mapping[str, V], remap: PathRemap) -> dict[str, V]:
    return {remap.apply(key): value for key, value in mapping.items()}


def remap_items(items: Iterable[str], remap: PathRemap) -> set[str]:
    return {remap.apply(item) for item in items}


def is_within(path: str, prefix: str) -> bool:
    return path == prefix or path.startswith(f"{prefix}/")


def visible_entries(entries: Iterable[FileEntry], collapsed: Iterable[str]) -> list[FileEntry]:
    """Drop every entry that sits below a collapsed directory."""
    hidden = tuple(collapsed)
    return [
        entry
        for entry in entries
        if not any(entry.relative_path.startswith(f"{prefix}/") for prefix in hidden)
    ]


class EditSession:
    def __init__(self, store: FileTreeStore) -> None:
        self._store = store
        self._buffers: dict[str, str] = {}
        self._saved: dict[str, str] = {}
        self._dirty: set[str] = set()
        self._collapsed: set[str] = set()
        self._active: str | None = None

    @property
    def active(self) -> str | None:
        return self._active

    @property
    def dirty(self) -> list[str]:
        return sorted(self._dirty)

    @property
    def collapsed(self) -> set[str]:
        return set(self._collapsed)

    def has_unsaved_changes(self) -> bool:
        return bool(self._dirty)

    def state_of(self, relative_path: str) -> FileState:
        return FileState.DIRTY if relative_path in self._dirty else FileState.CLEAN

    def buffer(self, relative_path: str) -> str:
        if relative_path not in self._buffers:
            self._load(relative_path)
        return self._buffers[relative_path]

    def open(self, relative_path: str) -> str:
        """Make ``relative_path`` active; refuses while anything is dirty."""
        self.switch_to(relative_path)
        return self.buffer(relative_path)

    def edit(self, relative_path: str, content: str) -> FileState:
        if relative_path not in self._saved:
            self._load(relative_path)
        self._buffers[relative_path] = content
        if content == self._saved[relative_path]:
            self._dirty.discard(relative_path)
        else:
            self._dirty.add(relative_path)
        return self.state_of(relative_path)

    def save(self, relative_path: str) -> None:
        content = self.buffer(relative_path)
        self._store.write(relative_path, content)
        self._saved[relative_path] = content
        self._dirty.discard(relative_path)

    def save_all(self) -> None:
        for relative_path in sorted(self._dirty):
            self.save(relative_path)

    def discard(self, relative_path: str) -> None:
        if relative_path in self._saved:
            self._buffers[relative_path] = self._saved[relative_path]
        self._dirty.discard(relative_path)

    def switch_to(
        self, relative_path: str, resolution: SwitchResolution | None = None
    ) -> bool:
        """Change the active file.

        While any file is dirty the caller must pass an explicit resolution;
        without one ``UnsavedChangesError`` lists the dirty paths. Returns
        False when the switch was cancelled.
        """
        if relative_path == self._active:
            return True
        if self._dirty:
            if resolution is None:
                raise UnsavedChangesError(self.dirty)
            if resolution == SwitchResolution.CANCEL:
                return False
            if resolution == SwitchResolution.SAVE:
                self.save_all()
            else:
                for path in list(self._dirty):
                    self.discard(path)
        self._active = relative_path
        return True

    def toggle_collapsed(self, relative_path: str) -> bool:
        if relative_path in self._collapsed:
            self._collapsed.discard(relative_path)
            return False
        self._collapsed.add(relative_path)
        return True

    def visible_entries(self, entries: Iterable[FileEntry]) -> list[FileEntry]:
        return visible_entries(entries, self._collapsed)

    def rename(self, old_relative_path: str, new_relative_path: str) -> PathRemap:
        remap = self._store.rename(old_relative_path, new_relative_path)
        self.apply_rename(remap)
        return remap

    def apply_rename(self, remap: PathRemap) -> None:
        self._buffers = remap_keys(self._buffers, remap)
        self._saved = remap_keys(self._saved, remap)
        self._dirty = remap_items(self._dirty, remap)
        self._collapsed = remap_items(self._collapsed, remap)
        if self._active is not None:
            self._active = remap_path(self._active, remap)

    def forget(self, relative_path: str) -> None:
        """Drop all state for a deleted path and everything below it."""
        def keep(path: str) -> bool:
            return not is_within(path, relative_path)

        self._buffers = {k: v for k, v in self._buffers.items() if keep(k)}
        self._saved = {k: v for k, v in self._saved.items() if keep(k)}
        self._dirty = {path for path in self._dirty if keep(path)}
        self._collapsed = {path for path in self._collapsed if keep(path)}
        if self._active is not None and not keep(self._active):
            self._active = None

    def _load(self, relative_path: str) -> None:
        content = self._store.read(relative_path)
        self._buffers[relative_path] = content
        self._saved[relative_path] = content
