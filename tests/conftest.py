import shutil
import sys
from pathlib import Path
from typing import Any

from click.testing import CliRunner
import pytest


def _ensure_repo_on_path() -> None:
    repo_root = Path(__file__).resolve().parent.parent
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))


_ensure_repo_on_path()

from skillshelf.config import AppPaths  # noqa: E402
from skillshelf.files.trash import LocalTrash  # noqa: E402
from skillshelf.imports.snapshot import ISnapshotFetcher  # noqa: E402
from skillshelf.skills.models import Root  # noqa: E402


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / ".config"))
    monkeypatch.delenv("SKILLSHELF_HOME", raising=False)
    monkeypatch.delenv("SKILLSHELF_LOG_FILE", raising=False)
    monkeypatch.setattr(Path, "home", lambda: tmp_path)


@pytest.fixture
def write_skill():
    def _write(
        directory: Path,
        name: str | None = None,
        description: str | None = None,
        body: str = "",
        files: dict[str, str] | None = None,
    ) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        header: list[str] = []
        if name is not None:
            header.append(f"name: {name}")
        if description is not None:
            header.append(f"description: {description}")
        text = ""
        if header:
            text = "---\n" + "\n".join(header) + "\n---\n"
        (directory / "SKILL.md").write_text(text + body, encoding="utf-8")
        for relative, content in (files or {}).items():
            target = directory / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        return directory

    return _write


@pytest.fixture
def app_paths(tmp_path: Path) -> AppPaths:
    return AppPaths(tmp_path / ".config" / "skillshelf")


@pytest.fixture
def trash(app_paths: AppPaths) -> LocalTrash:
    return LocalTrash(app_paths.trash_dir)


@pytest.fixture
def claude_root(tmp_path: Path) -> Root:
    path = tmp_path / ".claude" / "skills"
    path.mkdir(parents=True)
    return Root(id="claude-code", path=path, name="Claude Code")


@pytest.fixture
def cursor_root(tmp_path: Path) -> Root:
    path = tmp_path / ".cursor" / "skills"
    path.mkdir(parents=True)
    return Root(id="cursor", path=path, name="Cursor")


class FakeFetcher(ISnapshotFetcher):
    """Serves a local directory tree in place of a git clone."""

    def __init__(self, source: Path) -> None:
        self.source = source
        self.calls: list[tuple[str, Path]] = []

    def fetch(self, url: str, destination: Path) -> Path:
        self.calls.append((url, destination))
        shutil.copytree(self.source, destination)
        return destination


@pytest.fixture
def remote_repo(tmp_path: Path, write_skill) -> Path:
    repo = tmp_path / "remote" / "skills-repo"
    write_skill(
        repo / "skills" / "pdf-tools",
        name="PDF Tools",
        description="Work with PDFs",
        files={"scripts/extract.py": "print('extract')\n"},
    )
    write_skill(repo / "skills" / "web-research", name="Web Research", description="Search")
    (repo / "README.md").write_text("# repo\n", encoding="utf-8")
    return repo


@pytest.fixture
def fake_fetcher(remote_repo: Path) -> FakeFetcher:
    return FakeFetcher(remote_repo)


@pytest.fixture
def make_fetcher():
    return FakeFetcher


@pytest.fixture
def cli_runner(tmp_path: Path) -> CliRunner:
    class HomeCliRunner(CliRunner):
        def invoke(self, cli: Any, args: Any = None, **kwargs: Any):  # type: ignore[override]
            env = dict(kwargs.pop("env", {}) or {})
            env.setdefault("HOME", str(tmp_path))
            env.setdefault("XDG_CONFIG_HOME", str(tmp_path / ".config"))
            env.setdefault("COLUMNS", "200")
            kwargs["env"] = env
            return super().invoke(cli, args=args, **kwargs)

    return HomeCliRunner()
