"""Containment checks for every path that reaches the filesystem.

A path is accepted only when, after separator normalization and symlink
resolution, it still lives under the declared root. Any ``..`` segment is
rejected outright instead of being collapsed, so no amount of normalization
can turn an escaping path into an accepted one.
"""

from __future__ import annotations

import re
from pathlib import Path, PurePosixPath

from skillshelf.errors import InvalidPathError

_DRIVE_RE = re.compile(r"^[A-Za-z]:/")


def normalize_relative(path: str) -> str:
    """Return ``path`` as clean posix segments, rejecting traversal.

    Empty input (or input made only of ``.`` and separators) yields ``""``.
    """
    if "\x00" in path:
        raise InvalidPathError(path, "contains NUL byte")
    text = path.strip().replace("\\", "/")
    segments: list[str] = []
    for segment in text.split("/"):
        if segment in ("", "."):
            continue
        if segment == "..":
            raise InvalidPathError(path, "path traversal")
        segments.append(segment)
    return "/".join(segments)


def is_absolute_text(path: str) -> bool:
    text = path.strip().replace("\\", "/")
    return text.startswith("/") or bool(_DRIVE_RE.match(text))


class PathGuard:
    def resolve(
        self, root: str | Path, path: str | Path, allow_root: bool = False
    ) -> Path:
        """Resolve ``path`` against ``root`` and ensure it stays inside.

        Relative paths are joined to the canonical root; absolute paths must
        canonicalize under it. The returned path is the canonical root joined
        with the normalized relative segments, so a trailing symlink is
        addressed as the link itself.
        """
        canonical_root = self.canonical_root(root)
        text = str(path)

        if is_absolute_text(text):
            normalize_relative(text)
            candidate = Path(text)
            try:
                relative = candidate.resolve(strict=False).relative_to(canonical_root)
            except (OSError, RuntimeError, ValueError):
                raise InvalidPathError(path, "outside root")
            relative_text = PurePosixPath(*relative.parts).as_posix() if relative.parts else ""
        else:
            relative_text = normalize_relative(text)

        if not relative_text:
            if allow_root:
                return canonical_root
            raise InvalidPathError(path, "refers to the root itself")

        target = canonical_root.joinpath(*relative_text.split("/"))
        try:
            target.resolve(strict=False).relative_to(canonical_root)
        except (OSError, RuntimeError, ValueError):
            raise InvalidPathError(path, "outside root")
        return target

    @staticmethod
    def canonical_root(root: str | Path) -> Path:
        try:
            return Path(root).expanduser().resolve(strict=False)
        except (OSError, RuntimeError) as exc:
            raise InvalidPathError(root, f"cannot canonicalize root ({exc})")

    def contains(self, root: str | Path, path: str | Path) -> bool:
        try:
            self.resolve(root, path)
        except InvalidPathError:
            return False
        return True

    def relative_to_root(self, root: str | Path, path: str | Path) -> str:
        resolved = self.resolve(root, path, allow_root=True)
        relative = resolved.relative_to(self.canonical_root(root))
        return PurePosixPath(*relative.parts).as_posix() if relative.parts else ""


DEFAULT_GUARD = PathGuard()
