import os
import threading
from pathlib import Path

import pytest

from skillshelf.cancel import CancelToken
from skillshelf.errors import (
    ConflictError,
    ImportCancelledError,
    InvalidPathError,
    NotEmptyError,
    NotFoundError,
    ValidationError,
)
from skillshelf.files.locks import DEFAULT_LOCKS
from skillshelf.files.models import ConflictPolicy, FileEntry
from skillshelf.files.store import FileTreeStore
from skillshelf.files.trash import LocalTrash
from skillshelf.skills.models import Root


@pytest.fixture
def skill(claude_root: Root, write_skill) -> Path:
    return write_skill(
        claude_root.path / "demo",
        name="Demo",
        files={
            "scripts/run.sh": "echo run\n",
            "scripts/lib/util.py": "X = 1\n",
            "docs/guide.md": "# Guide\n",
            "README.md": "readme\n",
            ".hidden": "secret\n",
        },
    )


@pytest.fixture
def store(claude_root: Root, skill: Path, trash: LocalTrash) -> FileTreeStore:
    return FileTreeStore.open(claude_root, skill, trash)


def _paths(store: FileTreeStore) -> list[str]:
    return [entry.relative_path for entry in store.list()]


def test_open_rejects_root_and_missing_dirs(claude_root: Root, trash: LocalTrash) -> None:
    with pytest.raises(InvalidPathError):
        FileTreeStore.open(claude_root, claude_root.path, trash)
    with pytest.raises(NotFoundError):
        FileTreeStore.open(claude_root, "missing", trash)


def test_list_orders_directories_first_depth_first(store: FileTreeStore) -> None:
    assert _paths(store) == [
        "docs",
        "docs/guide.md",
        "scripts",
        "scripts/lib",
        "scripts/lib/util.py",
        "scripts/run.sh",
        "README.md",
        "SKILL.md",
    ]
    assert store.list()[0] == FileEntry(relative_path="docs", is_dir=True)


def test_write_then_read_is_byte_identical(store: FileTreeStore) -> None:
    content = "line one\r\nünïcode ✓\n\n"

    store.write("notes/new/deep.md", content)

    assert store.read("notes/new/deep.md") == content
    assert store.read_bytes("notes/new/deep.md") == content.encode("utf-8")


def test_write_rejects_traversal(store: FileTreeStore, claude_root: Root) -> None:
    with pytest.raises(InvalidPathError):
        store.write("../other/SKILL.md", "x")

    assert not (claude_root.path / "other").exists()


def test_read_missing_and_directory(store: FileTreeStore) -> None:
    with pytest.raises(NotFoundError):
        store.read("nope.md")
    with pytest.raises(ValidationError):
        store.read("docs")


def test_write_onto_directory_conflicts(store: FileTreeStore) -> None:
    with pytest.raises(ConflictError):
        store.write("docs", "x")


def test_create_directory_is_idempotent(store: FileTreeStore, skill: Path) -> None:
    store.create_directory("assets/img")
    store.create_directory("assets/img")
    store.create_directory("docs")

    assert (skill / "assets" / "img").is_dir()
    with pytest.raises(ConflictError):
        store.create_directory("README.md")


def test_rename_directory_rewrites_descendants_only(store: FileTreeStore) -> None:
    before = _paths(store)

    remap = store.rename("scripts", "tools/bin")

    after = set(_paths(store))
    for path in before:
        if path == "scripts" or path.startswith("scripts/"):
            assert "tools/bin" + path[len("scripts"):] in after
            assert path not in after
        else:
            assert path in after
    assert remap.apply("scripts/lib/util.py") == "tools/bin/lib/util.py"
    assert remap.apply("scriptsX/a") == "scriptsX/a"


def test_rename_conflicts_and_missing(store: FileTreeStore) -> None:
    with pytest.raises(ConflictError):
        store.rename("README.md", "SKILL.md")
    with pytest.raises(NotFoundError):
        store.rename("ghost.md", "other.md")
    with pytest.raises(ValidationError):
        store.rename("scripts", "scripts/lib/inner")
    with pytest.raises(InvalidPathError):
        store.rename("", "renamed")


def test_move_into_directory(store: FileTreeStore) -> None:
    remap = store.move("README.md", "docs")

    assert remap.new == "docs/README.md"
    assert store.exists("docs/README.md")
    assert not store.exists("README.md")


def test_delete_moves_file_to_trash(store: FileTreeStore, trash: LocalTrash) -> None:
    handle = store.delete("README.md")

    assert not store.exists("README.md")
    assert handle.trashed_path.read_text(encoding="utf-8") == "readme\n"
    assert handle.trashed_path.parent == trash.trash_dir


def test_delete_refuses_directories(store: FileTreeStore) -> None:
    with pytest.raises(ValidationError):
        store.delete("docs")


def test_delete_empty_directory_requires_empty(store: FileTreeStore) -> None:
    with pytest.raises(NotEmptyError):
        store.delete_empty_directory("scripts")

    store.delete("scripts/lib/util.py")
    store.delete_empty_directory("scripts/lib")
    store.delete("scripts/run.sh")
    store.delete_empty_directory("scripts")

    assert not store.exists("scripts")


def test_delete_empty_directory_counts_hidden_files(store: FileTreeStore) -> None:
    store.create_directory("empty")
    store.write("empty/.keep", "")

    with pytest.raises(NotEmptyError):
        store.delete_empty_directory("empty")


def test_delete_root_itself_is_rejected(store: FileTreeStore) -> None:
    with pytest.raises(InvalidPathError):
        store.delete("")
    with pytest.raises(InvalidPathError):
        store.delete_empty_directory(".")


# --- copy_into ---


def test_copy_into_new_root(store: FileTreeStore, cursor_root: Root) -> None:
    destination = store.copy_into(cursor_root, None, ConflictPolicy.OVERWRITE)

    assert destination == cursor_root.path.resolve() / "demo"
    assert (destination / "scripts" / "lib" / "util.py").read_text(encoding="utf-8") == "X = 1\n"
    assert sorted(p.name for p in cursor_root.path.iterdir()) == ["demo"]


def test_copy_timestamped_leaves_existing_untouched(
    store: FileTreeStore, cursor_root: Root, write_skill
) -> None:
    existing = write_skill(cursor_root.path / "demo", name="Old", files={"keep.txt": "keep"})
    before = sorted(p.name for p in existing.iterdir())

    destination = store.copy_into(cursor_root, "demo", ConflictPolicy.TIMESTAMPED_COPY)

    assert destination != existing.resolve()
    assert destination.name.startswith("demo-")
    assert (destination / "SKILL.md").is_file()
    assert sorted(p.name for p in existing.iterdir()) == before
    assert (existing / "keep.txt").read_text(encoding="utf-8") == "keep"


def test_copy_overwrite_replaces_and_trashes_previous(
    store: FileTreeStore, cursor_root: Root, trash: LocalTrash, write_skill
) -> None:
    write_skill(cursor_root.path / "demo", name="Old", files={"stale.txt": "old"})

    destination = store.copy_into(cursor_root, "demo", ConflictPolicy.OVERWRITE)

    assert not (destination / "stale.txt").exists()
    assert (destination / "README.md").is_file()
    trashed = trash.entries()
    assert len(trashed) == 1
    assert (trashed[0] / "stale.txt").read_text(encoding="utf-8") == "old"


def test_copy_skips_symlinks_and_git(store: FileTreeStore, skill: Path, cursor_root: Root, tmp_path: Path) -> None:
    (skill / ".git").mkdir()
    (skill / ".git" / "HEAD").write_text("ref", encoding="utf-8")
    secret = tmp_path / "secret.txt"
    secret.write_text("secret", encoding="utf-8")
    (skill / "link.txt").symlink_to(secret)

    destination = store.copy_into(cursor_root, None, ConflictPolicy.OVERWRITE)

    assert not (destination / ".git").exists()
    assert not (destination / "link.txt").exists()
    assert (destination / ".hidden").is_file()


def test_copy_onto_itself_is_rejected(store: FileTreeStore, claude_root: Root) -> None:
    with pytest.raises(ValidationError):
        store.copy_into(claude_root, "demo", ConflictPolicy.OVERWRITE)


def test_timestamped_copy_into_own_root(store: FileTreeStore, claude_root: Root, skill: Path) -> None:
    destination = store.copy_into(claude_root, None, ConflictPolicy.TIMESTAMPED_COPY)

    assert destination.parent == claude_root.path.resolve()
    assert destination.name.startswith("demo-")
    assert (destination / "scripts" / "run.sh").read_text(encoding="utf-8") == "echo run\n"
    assert (skill / "SKILL.md").is_file()


def test_timestamped_copy_locks_the_final_path(
    store: FileTreeStore, cursor_root: Root, write_skill, monkeypatch
) -> None:
    write_skill(cursor_root.path / "demo", name="Old")
    held: list[set[str]] = []
    original_hold = DEFAULT_LOCKS.hold

    def recording_hold(*paths: Path):
        held.append({Path(path).name for path in paths})
        return original_hold(*paths)

    monkeypatch.setattr(DEFAULT_LOCKS, "hold", recording_hold)

    destination = store.copy_into(cursor_root, None, ConflictPolicy.TIMESTAMPED_COPY)

    assert any(destination.name in names for names in held)


def test_cancelled_copy_leaves_destination_clean(store: FileTreeStore, cursor_root: Root) -> None:
    token = CancelToken()
    token.cancel()

    with pytest.raises(ImportCancelledError):
        store.copy_into(cursor_root, None, ConflictPolicy.OVERWRITE, cancel=token)

    assert list(cursor_root.path.iterdir()) == []


def test_copy_rejects_unknown_policy(store: FileTreeStore, cursor_root: Root) -> None:
    with pytest.raises(ValidationError):
        store.copy_into(cursor_root, None, "overwrite")  # type: ignore[arg-type]


def test_concurrent_writes_to_one_skill_do_not_interleave(store: FileTreeStore) -> None:
    errors: list[Exception] = []

    def worker(index: int) -> None:
        try:
            for _ in range(20):
                store.write(f"out/{index}.txt", str(index) * 100)
        except Exception as exc:  # pragma: no cover
            errors.append(exc)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    assert sorted(os.listdir(store.skill_dir / "out")) == ["0.txt", "1.txt", "2.txt", "3.txt"]
