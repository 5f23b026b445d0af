import json
from pathlib import Path

from skillshelf.utils import (
    compact_home_path,
    compact_home_paths_in_text,
    expand_home,
    read_json_safe,
    slugify,
    unique_child,
    write_json,
)


# --- read_json_safe ---


def test_read_json_safe_file_missing(tmp_path: Path) -> None:
    result, error = read_json_safe(tmp_path / "missing.json")

    assert result is None
    assert error is None


def test_read_json_safe_file_empty(tmp_path: Path) -> None:
    path = tmp_path / "empty.json"
    path.write_text("", encoding="utf-8")

    result, error = read_json_safe(path)

    assert result is None
    assert error is None


def test_read_json_safe_valid_json(tmp_path: Path) -> None:
    path = tmp_path / "valid.json"
    path.write_text(json.dumps({"key": "value"}), encoding="utf-8")

    result, error = read_json_safe(path)

    assert result == {"key": "value"}
    assert error is None


def test_read_json_safe_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "invalid.json"
    path.write_text("{bad json", encoding="utf-8")

    result, error = read_json_safe(path)

    assert result is None
    assert isinstance(error, str)


def test_write_json_creates_parents_and_leaves_no_temp(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "prefs.json"

    write_json(path, {"a": 1})

    assert json.loads(path.read_text(encoding="utf-8")) == {"a": 1}
    assert [item.name for item in path.parent.iterdir()] == ["prefs.json"]


# --- slugify / unique_child ---


def test_slugify_collapses_punctuation() -> None:
    assert slugify("  PDF Tools (beta)! ") == "pdf-tools-beta"


def test_slugify_falls_back_for_empty_result() -> None:
    assert slugify("!!!") == "skill"


def test_unique_child_returns_preferred_when_free(tmp_path: Path) -> None:
    assert unique_child(tmp_path, "demo") == tmp_path / "demo"


def test_unique_child_appends_counter(tmp_path: Path) -> None:
    (tmp_path / "demo").mkdir()
    (tmp_path / "demo-1").mkdir()

    assert unique_child(tmp_path, "demo") == tmp_path / "demo-2"


# --- home paths ---


def test_expand_home(tmp_path: Path) -> None:
    assert expand_home("~") == tmp_path
    assert expand_home("~/.claude/skills") == tmp_path / ".claude" / "skills"
    assert expand_home("/opt/skills") == Path("/opt/skills")


def test_compact_home_path(tmp_path: Path) -> None:
    assert compact_home_path(tmp_path) == "~"
    assert compact_home_path(tmp_path / ".cursor" / "skills") == "~/.cursor/skills"
    assert compact_home_path("/opt/skills") == "/opt/skills"


def test_compact_home_paths_in_text(tmp_path: Path) -> None:
    text = f"Skipped root 'cursor' ({tmp_path}/.cursor/skills): denied"

    assert compact_home_paths_in_text(text) == "Skipped root 'cursor' (~/.cursor/skills): denied"
