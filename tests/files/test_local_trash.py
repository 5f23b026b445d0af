from pathlib import Path

import pytest

from skillshelf.errors import ConflictError, NotFoundError
from skillshelf.files.trash import LocalTrash


def test_move_and_restore_file(tmp_path: Path) -> None:
    trash = LocalTrash(tmp_path / "trash")
    target = tmp_path / "root" / "skill" / "notes.md"
    target.parent.mkdir(parents=True)
    target.write_text("keep me", encoding="utf-8")

    handle = trash.move_to_recoverable(target)

    assert not target.exists()
    assert handle.original_path == target
    assert handle.trashed_path.name.endswith("-notes.md")
    assert trash.entries() == [handle.trashed_path]

    restored = trash.restore(handle)

    assert restored == target
    assert target.read_text(encoding="utf-8") == "keep me"
    assert trash.entries() == []


def test_same_name_twice_gets_unique_slots(tmp_path: Path) -> None:
    trash = LocalTrash(tmp_path / "trash")
    handles = []
    for _ in range(2):
        target = tmp_path / "file.txt"
        target.write_text("x", encoding="utf-8")
        handles.append(trash.move_to_recoverable(target))

    assert handles[0].trashed_path != handles[1].trashed_path
    assert len(trash.entries()) == 2


def test_missing_path_raises(tmp_path: Path) -> None:
    with pytest.raises(NotFoundError):
        LocalTrash(tmp_path / "trash").move_to_recoverable(tmp_path / "nope")


def test_restore_refuses_to_overwrite(tmp_path: Path) -> None:
    trash = LocalTrash(tmp_path / "trash")
    target = tmp_path / "file.txt"
    target.write_text("old", encoding="utf-8")
    handle = trash.move_to_recoverable(target)
    target.write_text("new", encoding="utf-8")

    with pytest.raises(ConflictError):
        trash.restore(handle)
